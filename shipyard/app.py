import asyncio
import logging
import signal
from typing import List, Optional
from shipyard.types.settings import Settings
from shipyard.clusters import (
    ClusterRegistry,
    GroupVersionResolver,
    bootstrap_registry,
    load_cluster_bindings,
)
from shipyard.drift import DriftReconciler, ImageRecordStore, MemoryImageRecordStore
from shipyard.resources import ApplyEngine
from shipyard.resources.base import BaseResource
from shipyard.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from shipyard.web.alert import AlertClient

logger = logging.getLogger(__name__)


class Operator:
    """Everything the running operator holds on to."""

    conf: Settings
    registry: ClusterRegistry
    resolver: GroupVersionResolver
    engine: ApplyEngine
    sensor: SensorDelegate
    alerter: AlertClient
    store: ImageRecordStore
    tasks: List[asyncio.Task]

    def __init__(self, conf, registry, sensor, alerter, store) -> None:
        self.conf = conf
        self.registry = registry
        self.resolver = GroupVersionResolver(registry)
        self.engine = ApplyEngine(registry, self.resolver, conf)
        self.sensor = sensor
        self.alerter = alerter
        self.store = store
        self.tasks = []


def setup(conf: Settings = None, store: ImageRecordStore = None) -> Operator:
    conf = conf or Settings()

    bindings = load_cluster_bindings(conf.clusters_file)
    registry = bootstrap_registry(bindings)
    logger.info(f"Cluster registry initialized with {len(registry)} bindings")

    # Initialize sensor infrastructure
    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    BaseResource.sensor = sensor_delegate
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    if conf.metrics_enabled:
        try:
            init_metrics_server()
        except Exception as e:
            logger.error(f"Failed to start metrics server: {e}")
            logger.warning("Continuing without metrics server")

    alerter = AlertClient(
        conf.alert_webhook_url or None, timeout=conf.alert_timeout_seconds
    )
    if not alerter.enabled:
        logger.warning("Alert webhook is not configured, alerts are only logged.")

    if store is None:
        logger.warning("No image record store configured, using in-memory store.")
        store = MemoryImageRecordStore()

    return Operator(conf, registry, sensor_delegate, alerter, store)


def start_drift_reconcilers(operator: Operator) -> List[asyncio.Task]:
    """One pod watch per cluster, whatever the number of envs it serves."""
    for name in operator.registry.cluster_names():
        handle = operator.registry.first(name)
        reconciler = DriftReconciler(
            name,
            handle.api_client,
            operator.store,
            sensor=operator.sensor,
            alerter=operator.alerter,
            conf=operator.conf,
        )
        operator.tasks.append(
            asyncio.create_task(reconciler.run(), name=f"drift-{name}")
        )
    return operator.tasks


async def cleanup(operator: Operator) -> None:
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    for task in operator.tasks:
        task.cancel()
    if operator.tasks:
        await asyncio.gather(*operator.tasks, return_exceptions=True)
        logger.info(f"Stopped {len(operator.tasks)} drift reconcilers")

    await operator.alerter.close()
    logger.info("Alert client closed")

    operator.registry.close()
    logger.info("Cluster API clients closed")

    logger.info("Operator shutdown complete")


async def main(conf: Settings = None, stop: Optional[asyncio.Event] = None) -> None:
    operator = await asyncio.to_thread(setup, conf)
    stop = stop or asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            logger.debug(f"Signal handler for {sig.name} not supported")

    start_drift_reconcilers(operator)
    try:
        await stop.wait()
    finally:
        await cleanup(operator)
