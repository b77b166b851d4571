"""Pod watch keeping the unexpected image ledger of one cluster current."""
import asyncio
import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from kubernetes import watch
from kubernetes.client import ApiClient, CoreV1Api, V1Pod
from shipyard.drift.backoff import next_delay
from shipyard.drift.images import build_record, unexpected_images
from shipyard.drift.store import ImageRecordStore
from shipyard.sensors.base import EngineSensor
from shipyard.types.models.image_record import ImageComplianceRecord
from shipyard.types.settings import Settings
from shipyard.web.alert import AlertClient

logger = logging.getLogger(__name__)

EVENT_ADDED = "ADDED"
EVENT_MODIFIED = "MODIFIED"
EVENT_DELETED = "DELETED"
EVENT_BOOKMARK = "BOOKMARK"
EVENT_ERROR = "ERROR"

ALERT_CATEGORY_EVENT = "WatchClusterPods-event"
ALERT_CATEGORY_WATCH = "WatchClusterPods"

_CLOSED = object()


class _StreamFailed:
    """Carries an exception from the reader thread to the event loop."""

    def __init__(self, error: Exception) -> None:
        self.error = error


class WatchState(str, Enum):
    CONNECTING = "connecting"
    WATCHING = "watching"
    DISCONNECTED = "disconnected"
    STOPPED = "stopped"


class DriftReconciler:
    """Watches all pods of a cluster and records the ones running images
    from outside the registry allow-list.

    `run` loops until cancelled. A stream that ends normally is reopened
    at once, a failed one after an exponential backoff.
    """

    cluster: str
    api_client: ApiClient
    store: ImageRecordStore
    allowed_prefixes: List[str]
    sensor: EngineSensor
    alerter: Optional[AlertClient]
    conf: Settings
    state: WatchState
    delay: float

    def __init__(
        self,
        cluster: str,
        api_client: ApiClient,
        store: ImageRecordStore,
        allowed_prefixes: List[str] = None,
        sensor: EngineSensor = None,
        alerter: AlertClient = None,
        conf: Settings = None,
        watch_factory: Callable[[], watch.Watch] = watch.Watch,
    ) -> None:
        self.cluster = cluster
        self.api_client = api_client
        self.store = store
        self.conf = conf or Settings()
        self.allowed_prefixes = list(
            allowed_prefixes if allowed_prefixes is not None else self.conf.image_allowed_prefixes
        )
        self.sensor = sensor or EngineSensor()
        self.alerter = alerter
        self.watch_factory = watch_factory
        self.state = WatchState.STOPPED
        self.delay = 0
        self._watch = None

    def __repr__(self) -> str:
        return f"DriftReconciler<{self.cluster}, {self.state.value}>"

    async def run(self) -> None:
        """Watch until cancelled."""
        logger.info(f"Starting pod image watch in cluster({self.cluster})")
        try:
            while True:
                failed = False
                try:
                    await self.watch_once()
                except asyncio.CancelledError:
                    raise
                except Exception as ex:
                    failed = True
                    logger.error(
                        f"Pod watch in cluster({self.cluster}) failed: {ex}", exc_info=True
                    )
                    await self._alert(
                        f"pod watch failed in cluster({self.cluster})",
                        ALERT_CATEGORY_WATCH,
                        {"cluster": self.cluster, "error": str(ex)},
                    )

                self.delay = next_delay(
                    self.delay, failed, self.conf.watch_backoff_cap_seconds
                )
                if self.delay > 0:
                    logger.info(
                        f"Retrying pod watch in cluster({self.cluster}) after {self.delay} seconds"
                    )
                    self.sensor.on_watch_backoff(self.cluster, self.delay)
                    await asyncio.sleep(self.delay)
                else:
                    logger.info(f"Reopening pod watch in cluster({self.cluster})")
        except asyncio.CancelledError:
            logger.info(f"Pod image watch in cluster({self.cluster}) cancelled")
            raise
        finally:
            self.state = WatchState.STOPPED

    def open_stream(self):
        """Start a pod watch over all namespaces."""
        self._watch = self.watch_factory()
        return self._watch.stream(
            CoreV1Api(self.api_client).list_pod_for_all_namespaces,
            timeout_seconds=self.conf.watch_timeout_seconds,
        )

    def close_stream(self) -> None:
        if self._watch is not None:
            self._watch.stop()
            self._watch = None

    def _read_stream(self, stream, loop: asyncio.AbstractEventLoop, events: asyncio.Queue) -> None:
        """Reader thread body: hand every event over to the event loop.

        Must run on a dedicated thread, never on the loop's shared executor.
        """

        def deliver(item) -> bool:
            try:
                loop.call_soon_threadsafe(events.put_nowait, item)
            except RuntimeError:
                # event loop already closed
                return False
            return True

        try:
            for event in stream:
                if not deliver(event):
                    return
        except Exception as ex:
            deliver(_StreamFailed(ex))
        else:
            deliver(_CLOSED)

    async def watch_once(self) -> None:
        """Consume one watch stream until the server closes it.

        Raises whatever ended the stream abnormally. Cancelling returns at
        once; the reader thread exits with the next event or server timeout.
        """
        self.state = WatchState.CONNECTING
        loop = asyncio.get_running_loop()
        events: asyncio.Queue = asyncio.Queue()
        stream = self.open_stream()
        reader = threading.Thread(
            target=self._read_stream,
            args=(stream, loop, events),
            name=f"pod-watch-{self.cluster}",
            daemon=True,
        )
        sensor_state = self.sensor.on_watch_start(self.cluster)
        self.state = WatchState.WATCHING
        reader.start()
        try:
            while True:
                event = await events.get()
                if event is _CLOSED:
                    logger.info(f"Pod watch stream closed in cluster({self.cluster})")
                    break
                if isinstance(event, _StreamFailed):
                    raise event.error
                await self.handle_event(event)
        except asyncio.CancelledError:
            self.sensor.on_watch_complete(self.cluster, sensor_state, True)
            raise
        except Exception as ex:
            self.sensor.on_watch_complete(self.cluster, sensor_state, False, ex)
            raise
        else:
            self.sensor.on_watch_complete(self.cluster, sensor_state, True)
        finally:
            self.close_stream()
            self.state = WatchState.DISCONNECTED

    def pod_as_dict(self, obj: Any) -> Optional[Dict]:
        if isinstance(obj, V1Pod):
            return self.api_client.sanitize_for_serialization(obj)
        if isinstance(obj, dict) and obj.get("kind") == "Pod":
            return obj
        return None

    async def handle_event(self, event: Dict) -> None:
        event_type = event.get("type")
        obj = event.get("object")
        self.sensor.on_watch_event(self.cluster, event_type)

        if event_type in (EVENT_ADDED, EVENT_MODIFIED, EVENT_DELETED):
            pod = self.pod_as_dict(obj)
            if pod is None:
                logger.error(
                    f"event({event_type}) object is not a Pod in cluster({self.cluster}): {obj!r}"
                )
                return

            if event_type == EVENT_DELETED:
                await self._delete(build_record(self.cluster, pod))
                return

            images = unexpected_images(pod, self.allowed_prefixes)
            record = build_record(self.cluster, pod, images)
            if images:
                await self._upsert(record)
            else:
                await self._delete(record)

        elif event_type == EVENT_BOOKMARK:
            logger.info(f"ignored pod {event_type} event in cluster({self.cluster})")

        elif event_type == EVENT_ERROR:
            logger.error(
                f"ignored pod {event_type} event: {obj!r} in cluster({self.cluster})"
            )

        else:
            logger.error(f"unexpected event_type({event_type}) in cluster({self.cluster})")
            await self._alert(
                f"unexpected event_type({event_type})",
                ALERT_CATEGORY_EVENT,
                {"cluster": self.cluster, "type": event_type},
            )

    async def _upsert(self, record: ImageComplianceRecord) -> None:
        try:
            await asyncio.to_thread(self.store.upsert, record)
        except Exception as ex:
            await self._ledger_failed("UpsertUnexpectedImageRecord", record, ex)
            return
        logger.info(
            f"Recorded {len(record.image_list)} unexpected images for "
            f"{record.identity} in {self.cluster}/{record.namespace}"
        )
        self.sensor.on_ledger_upsert(self.cluster, record.namespace, len(record.image_list))

    async def _delete(self, record: ImageComplianceRecord) -> None:
        try:
            await asyncio.to_thread(self.store.delete, record)
        except Exception as ex:
            await self._ledger_failed("DeleteUnexpectedImageRecord", record, ex)
            return
        logger.debug(f"Cleared unexpected images of {record.identity} in {self.cluster}/{record.namespace}")
        self.sensor.on_ledger_delete(self.cluster, record.namespace)

    async def _ledger_failed(self, category: str, record: ImageComplianceRecord, ex: Exception) -> None:
        logger.error(f"{category}(cluster={self.cluster}) failed: {ex}")
        self.sensor.on_ledger_error(self.cluster, ex)
        await self._alert(
            f"{category} failed",
            category,
            {
                "cluster": self.cluster,
                "namespace": record.namespace,
                "identity": list(record.identity),
                "error": str(ex),
            },
        )

    async def _alert(self, title: str, category: str, data: Dict) -> None:
        if self.alerter is not None:
            await self.alerter.alert(title, category, data)
