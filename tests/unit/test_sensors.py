"""Unit tests for sensor fan-out and Prometheus metrics."""

import pytest
from unittest.mock import Mock
from prometheus_client import CollectorRegistry
from shipyard.sensors import EngineSensor, PrometheusMonitor, SensorDelegate


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def monitor(registry):
    return PrometheusMonitor(registry=registry)


class TestSensorDelegate:
    """Tests for SensorDelegate."""

    def test_states_are_routed_back_per_sensor(self):
        first, second = Mock(spec=EngineSensor), Mock(spec=EngineSensor)
        first.on_apply_start.return_value = "first-state"
        second.on_apply_start.return_value = None
        delegate = SensorDelegate()
        delegate.add(first)
        delegate.add(second)

        state = delegate.on_apply_start("Service", "prod-a", "shop", "web")
        delegate.on_apply_complete("Service", "prod-a", "shop", "web", state, "created")

        first.on_apply_complete.assert_called_once_with(
            "Service", "prod-a", "shop", "web", "first-state", action="created", error=None
        )
        second.on_apply_complete.assert_called_once_with(
            "Service", "prod-a", "shop", "web", None, action="created", error=None
        )

    def test_failing_sensor_does_not_stop_others(self):
        broken, healthy = Mock(spec=EngineSensor), Mock(spec=EngineSensor)
        broken.on_watch_event.side_effect = RuntimeError("boom")
        delegate = SensorDelegate()
        delegate.add(broken)
        delegate.add(healthy)

        delegate.on_watch_event("prod-a", "ADDED")

        healthy.on_watch_event.assert_called_once_with("prod-a", "ADDED")

    def test_empty_delegate(self):
        delegate = SensorDelegate()
        assert delegate.on_watch_start("prod-a") is None
        delegate.on_watch_complete("prod-a", None, True)
        assert len(delegate) == 0

    def test_remove_and_clear(self):
        sensor = Mock(spec=EngineSensor)
        delegate = SensorDelegate()
        delegate.add(sensor)
        delegate.remove(sensor)
        assert len(delegate) == 0
        delegate.add(sensor)
        delegate.clear()
        assert len(delegate) == 0


class TestPrometheusMonitor:
    """Tests for PrometheusMonitor."""

    def test_apply_metrics(self, monitor, registry):
        state = monitor.on_apply_start("Service", "prod-a", "shop", "web")
        monitor.on_apply_complete("Service", "prod-a", "shop", "web", state, "created")
        monitor.on_apply_complete("Service", "prod-a", "shop", "web", None, None, ValueError("x"))

        assert registry.get_sample_value(
            "shipyard_apply_total",
            {"kind": "Service", "cluster": "prod-a", "namespace": "shop", "action": "created"},
        ) == 1
        assert registry.get_sample_value(
            "shipyard_apply_errors_total",
            {"kind": "Service", "cluster": "prod-a", "namespace": "shop", "error_type": "ValueError"},
        ) == 1
        assert registry.get_sample_value(
            "shipyard_apply_duration_seconds_count",
            {"kind": "Service", "cluster": "prod-a", "namespace": "shop", "result": "success"},
        ) == 1

    def test_watch_metrics(self, monitor, registry):
        state = monitor.on_watch_start("prod-a")
        monitor.on_watch_event("prod-a", "ADDED")
        monitor.on_watch_complete("prod-a", state, False, RuntimeError("reset"))
        monitor.on_watch_backoff("prod-a", 4)

        assert registry.get_sample_value("shipyard_watch_streams_total", {"cluster": "prod-a"}) == 1
        assert registry.get_sample_value(
            "shipyard_watch_events_total", {"cluster": "prod-a", "event_type": "ADDED"}
        ) == 1
        assert registry.get_sample_value(
            "shipyard_watch_errors_total", {"cluster": "prod-a", "error_type": "RuntimeError"}
        ) == 1
        assert registry.get_sample_value("shipyard_watch_backoff_seconds", {"cluster": "prod-a"}) == 4

    def test_ledger_metrics(self, monitor, registry):
        monitor.on_ledger_upsert("prod-a", "shop", 2)
        monitor.on_ledger_delete("prod-a", "shop")
        monitor.on_ledger_error("prod-a", OSError("db"))

        labels = {"cluster": "prod-a", "namespace": "shop"}
        assert registry.get_sample_value("shipyard_ledger_upserts_total", labels) == 1
        assert registry.get_sample_value("shipyard_ledger_deletes_total", labels) == 1
        assert registry.get_sample_value(
            "shipyard_ledger_unexpected_images_sum", {"cluster": "prod-a"}
        ) == 2
        assert registry.get_sample_value(
            "shipyard_ledger_errors_total", {"cluster": "prod-a", "error_type": "OSError"}
        ) == 1
