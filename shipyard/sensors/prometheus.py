"""Prometheus monitoring backend for the shipyard engine.

PrometheusMonitor turns engine lifecycle events into Prometheus metrics:

1. Apply health - duration, count and errors per kind and action
2. Pod watch health - stream restarts, errors, received events, backoff
3. Compliance ledger - upserts, deletes and persistence failures
"""

from typing import Dict, Optional, Any
import time
import logging

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, CollectorRegistry

from shipyard.sensors.base import EngineSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(EngineSensor):
    """Prometheus metrics monitor for the shipyard engine.

    Metrics are registered on `registry`, the process wide default unless
    given, and exposed by the metrics server.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        # =============================================================================
        # Apply Metrics
        # =============================================================================

        self.apply_duration = Histogram(
            'shipyard_apply_duration_seconds',
            'Time spent applying one workload object',
            labelnames=['kind', 'cluster', 'namespace', 'result'],
            buckets=[0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=registry,
        )

        self.apply_total = Counter(
            'shipyard_apply_total',
            'Total number of apply calls',
            labelnames=['kind', 'cluster', 'namespace', 'action'],
            registry=registry,
        )

        self.apply_errors = Counter(
            'shipyard_apply_errors_total',
            'Total number of failed apply calls',
            labelnames=['kind', 'cluster', 'namespace', 'error_type'],
            registry=registry,
        )

        # =============================================================================
        # Watch Metrics
        # =============================================================================

        self.watch_streams_total = Counter(
            'shipyard_watch_streams_total',
            'Total number of pod watch streams opened',
            labelnames=['cluster'],
            registry=registry,
        )

        self.watch_errors = Counter(
            'shipyard_watch_errors_total',
            'Total number of pod watch streams ended by an error',
            labelnames=['cluster', 'error_type'],
            registry=registry,
        )

        self.watch_stream_duration = Histogram(
            'shipyard_watch_stream_duration_seconds',
            'Lifetime of a pod watch stream',
            labelnames=['cluster', 'result'],
            buckets=[1.0, 10.0, 60.0, 300.0, 600.0, 1800.0, 3600.0],
            registry=registry,
        )

        self.watch_events = Counter(
            'shipyard_watch_events_total',
            'Total number of pod watch events received',
            labelnames=['cluster', 'event_type'],
            registry=registry,
        )

        self.watch_backoff_seconds = Gauge(
            'shipyard_watch_backoff_seconds',
            'Current reconnect delay of the pod watch',
            labelnames=['cluster'],
            registry=registry,
        )

        # =============================================================================
        # Ledger Metrics
        # =============================================================================

        self.ledger_upserts = Counter(
            'shipyard_ledger_upserts_total',
            'Total number of compliance records written',
            labelnames=['cluster', 'namespace'],
            registry=registry,
        )

        self.ledger_unexpected_images = Histogram(
            'shipyard_ledger_unexpected_images',
            'Unexpected images per written compliance record',
            labelnames=['cluster'],
            buckets=[1, 2, 3, 5, 10],
            registry=registry,
        )

        self.ledger_deletes = Counter(
            'shipyard_ledger_deletes_total',
            'Total number of compliance records removed',
            labelnames=['cluster', 'namespace'],
            registry=registry,
        )

        self.ledger_errors = Counter(
            'shipyard_ledger_errors_total',
            'Total number of failed ledger writes',
            labelnames=['cluster', 'error_type'],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    def on_apply_start(self, kind, cluster, namespace, name) -> Dict[str, Any]:
        return {'start_time': time.monotonic()}

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
        result = 'error' if error else 'success'
        if state and 'start_time' in state:
            duration = time.monotonic() - state['start_time']
            self.apply_duration.labels(kind, cluster, namespace, result).observe(duration)
        if error:
            self.apply_errors.labels(kind, cluster, namespace, type(error).__name__).inc()
        else:
            self.apply_total.labels(kind, cluster, namespace, action or 'unknown').inc()

    def on_watch_start(self, cluster: str) -> Dict[str, Any]:
        self.watch_streams_total.labels(cluster).inc()
        return {'start_time': time.monotonic()}

    def on_watch_complete(self, cluster, state, success, error=None) -> None:
        result = 'success' if success else 'error'
        if state and 'start_time' in state:
            duration = time.monotonic() - state['start_time']
            self.watch_stream_duration.labels(cluster, result).observe(duration)
        if error is not None:
            self.watch_errors.labels(cluster, type(error).__name__).inc()

    def on_watch_event(self, cluster, event_type) -> None:
        self.watch_events.labels(cluster, event_type or 'UNKNOWN').inc()

    def on_watch_backoff(self, cluster, delay) -> None:
        self.watch_backoff_seconds.labels(cluster).set(delay)

    def on_ledger_upsert(self, cluster, namespace, image_count) -> None:
        self.ledger_upserts.labels(cluster, namespace).inc()
        self.ledger_unexpected_images.labels(cluster).observe(image_count)

    def on_ledger_delete(self, cluster, namespace) -> None:
        self.ledger_deletes.labels(cluster, namespace).inc()

    def on_ledger_error(self, cluster, error) -> None:
        self.ledger_errors.labels(cluster, type(error).__name__).inc()
