"""Base sensor classes for engine monitoring.

This module defines the base EngineSensor class that provides lifecycle hooks
for monitoring engine events. All hooks are no-ops by default, allowing
subclasses to override only the events they care about.

The hook pattern:
- Hooks come in pairs: on_X_start() and on_X_complete()
- Start hooks return an optional state dict for tracking the operation
- Complete hooks receive the state dict from their corresponding start hook
- All hooks are optional - sensors only implement what they need
"""

from typing import Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)


class EngineSensor:
    """Base sensor class for shipyard engine monitoring.

    This class defines lifecycle hooks for three categories:
    1. Apply operations (create or patch of one workload object)
    2. Pod watch streams of the drift reconciler
    3. Compliance ledger writes

    Example:
        class LoggingSensor(EngineSensor):
            def on_apply_start(self, kind, cluster, namespace, name) -> Dict:
                return {'start_time': time.monotonic()}

            def on_apply_complete(self, kind, cluster, namespace, name, state, action, error=None):
                duration = time.monotonic() - state['start_time']
                logger.info(f"Applied {kind} {name} in {duration}s")
    """

    # =============================================================================
    # Apply Hooks
    # =============================================================================

    def on_apply_start(
        self,
        kind: str,
        cluster: str,
        namespace: str,
        name: str,
    ) -> Optional[Dict[str, Any]]:
        """Called before an object is created or patched.

        Args:
            kind: Workload kind, e.g. Deployment
            cluster: Cluster name
            namespace: Kubernetes namespace
            name: Object name

        Returns:
            Optional state dict passed to on_apply_complete
        """
        pass

    def on_apply_complete(
        self,
        kind: str,
        cluster: str,
        namespace: str,
        name: str,
        state: Optional[Dict[str, Any]],
        action: Optional[str],
        error: Optional[Exception] = None,
    ) -> None:
        """Called once an apply finished.

        Args:
            kind: Workload kind
            cluster: Cluster name
            namespace: Kubernetes namespace
            name: Object name
            state: State dict returned from on_apply_start
            action: `created` or `patched`, None on failure
            error: Exception if the apply failed
        """
        pass

    # =============================================================================
    # Watch Hooks
    # =============================================================================

    def on_watch_start(self, cluster: str) -> Optional[Dict[str, Any]]:
        """Called when a pod watch stream is opened."""
        pass

    def on_watch_complete(
        self,
        cluster: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Called when a pod watch stream ends.

        Args:
            cluster: Cluster name
            state: State dict returned from on_watch_start
            success: False when the stream ended with an error
            error: Exception ending the stream
        """
        pass

    def on_watch_event(self, cluster: str, event_type: str) -> None:
        """Called for every event received on a pod watch stream."""
        pass

    def on_watch_backoff(self, cluster: str, delay: float) -> None:
        """Called before the reconciler sleeps ahead of reconnecting."""
        pass

    # =============================================================================
    # Ledger Hooks
    # =============================================================================

    def on_ledger_upsert(self, cluster: str, namespace: str, image_count: int) -> None:
        pass

    def on_ledger_delete(self, cluster: str, namespace: str) -> None:
        pass

    def on_ledger_error(self, cluster: str, error: Exception) -> None:
        """Called when the persistence collaborator rejects a write."""
        pass
