"""Shipyard engine sensor framework.

Hook based instrumentation of engine lifecycle events.

Key components:
- EngineSensor: Base class defining lifecycle hooks
- SensorDelegate: Fan-out of events to several sensor backends
- PrometheusMonitor: Prometheus metrics exporter
"""

from shipyard.sensors.base import EngineSensor
from shipyard.sensors.delegate import SensorDelegate
from shipyard.sensors.prometheus import PrometheusMonitor
from shipyard.sensors.server import init_metrics_server

__all__ = [
    'EngineSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
