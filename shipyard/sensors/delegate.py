"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to several monitoring backends at once.
Each backend receives the same events and keeps its own state.
"""

from typing import Set, Dict, Optional, Any
import logging

from shipyard.sensors.base import EngineSensor

logger = logging.getLogger(__name__)


class SensorDelegate(EngineSensor):
    """Delegate sensor that fans out events to multiple backends.

    State tracking is handled per sensor, so each backend receives its own
    state dict from start/complete hook pairs. A failing sensor is logged
    and never breaks the caller.

    Example:
        delegate = SensorDelegate()
        delegate.add(PrometheusMonitor())
        state = delegate.on_apply_start("Service", "c1", "default", "web")
        delegate.on_apply_complete("Service", "c1", "default", "web", state, "patched")
    """

    def __init__(self) -> None:
        self._sensors: Set[EngineSensor] = set()

    def add(self, sensor: EngineSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: EngineSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def clear(self) -> None:
        """Remove all sensors from the delegate."""
        logger.info(f"Clearing {len(self._sensors)} sensors")
        self._sensors.clear()

    def __len__(self) -> int:
        return len(self._sensors)

    def _each(self, hook: str, *args) -> None:
        for sensor in self._sensors:
            try:
                getattr(sensor, hook)(*args)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    def _start(self, hook: str, *args) -> Optional[Dict[EngineSensor, Any]]:
        if not self._sensors:
            return None
        states = {}
        for sensor in self._sensors:
            try:
                state = getattr(sensor, hook)(*args)
                if state is not None:
                    states[sensor] = state
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )
        return states if states else None

    def _complete(self, hook: str, state, *args, **kwargs) -> None:
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                getattr(sensor, hook)(*args, sensor_state, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.{hook}: {e}",
                    exc_info=True,
                )

    # =============================================================================
    # Apply Hooks
    # =============================================================================

    def on_apply_start(self, kind, cluster, namespace, name):
        return self._start("on_apply_start", kind, cluster, namespace, name)

    def on_apply_complete(self, kind, cluster, namespace, name, state, action, error=None):
        self._complete(
            "on_apply_complete",
            state,
            kind,
            cluster,
            namespace,
            name,
            action=action,
            error=error,
        )

    # =============================================================================
    # Watch Hooks
    # =============================================================================

    def on_watch_start(self, cluster):
        return self._start("on_watch_start", cluster)

    def on_watch_complete(self, cluster, state, success, error=None):
        self._complete("on_watch_complete", state, cluster, success=success, error=error)

    def on_watch_event(self, cluster, event_type):
        self._each("on_watch_event", cluster, event_type)

    def on_watch_backoff(self, cluster, delay):
        self._each("on_watch_backoff", cluster, delay)

    # =============================================================================
    # Ledger Hooks
    # =============================================================================

    def on_ledger_upsert(self, cluster, namespace, image_count):
        self._each("on_ledger_upsert", cluster, namespace, image_count)

    def on_ledger_delete(self, cluster, namespace):
        self._each("on_ledger_delete", cluster, namespace)

    def on_ledger_error(self, cluster, error):
        self._each("on_ledger_error", cluster, error)
