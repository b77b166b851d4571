import copy
import hashlib
import logging
import mmh3
from functools import cached_property
from typing import Any, Dict, List, Optional, Union
from kubernetes.client import ApiClient, ApiException, V1DeleteOptions
from shipyard.clusters.registry import ClusterRegistry
from shipyard.clusters.resolver import GroupVersionResolver
from shipyard.common.models.group_version import GroupVersion
from shipyard.common.models.labels import Annotations, Labels
from shipyard.resources.ops import ObjectOps, ops_for
from shipyard.sensors.base import EngineSensor
from shipyard.types.models.workload import (
    ACTION_CREATED,
    ACTION_PATCHED,
    ApplyResult,
    WorkloadDescriptor,
)
from shipyard.types.settings import Settings
from shipyard.utils.errors import (
    NotFoundError,
    PermanentConfigError,
    already_exists_error,
    convert_api_exception,
)
from shipyard.utils.helpers import canonicalize_dict, deep_get, parse_k8s_time

logger = logging.getLogger(__name__)


class BaseResource:
    """Create-or-patch and bulk operations for one workload kind on one cluster.

    Subclasses set `KIND` and override `merge` for kind specific rules.
    Every object returned by these methods is a plain dict.
    """

    KIND: str = None

    #: Shared by all resources, set during process setup
    sensor: EngineSensor = EngineSensor()

    registry: ClusterRegistry
    resolver: GroupVersionResolver
    _cluster: str
    _env: str
    conf: Settings
    request_timeout: Optional[float]

    def __init__(
        self,
        registry: ClusterRegistry,
        cluster: str,
        env: str,
        resolver: GroupVersionResolver = None,
        conf: Settings = None,
        request_timeout: float = None,
    ):
        self.registry = registry
        self.resolver = resolver or GroupVersionResolver(registry)
        self._cluster = cluster
        self._env = env
        self.conf = conf or Settings()
        self.request_timeout = request_timeout

    @property
    def cluster(self) -> str:
        return self._cluster

    @property
    def env(self) -> str:
        return self._env

    @cached_property
    def api_client(self) -> ApiClient:
        return self.registry.api_client(self._cluster, self._env)

    @cached_property
    def group_version(self) -> GroupVersion:
        return self.resolver.resolve(self._cluster, self._env, self.KIND)

    @cached_property
    def ops(self) -> ObjectOps:
        return ops_for(self.api_client, self.KIND, self.group_version)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def to_dict(self, obj: Any) -> Dict:
        """Normalize a client model or raw response to a plain dict."""
        if obj is None or isinstance(obj, dict):
            return obj
        return self.api_client.sanitize_for_serialization(obj)

    def _kwargs(self) -> Dict:
        if self.request_timeout is None:
            return {}
        return {"_request_timeout": self.request_timeout}

    def compute_hash(self, data: Any) -> str:
        """Compute a murmur3 hash."""
        if isinstance(data, dict):
            _data = canonicalize_dict(data)
        elif isinstance(data, str):
            _data = data.encode()
        else:
            raise ValueError(f"Hash of {type(data)} is not supported.")
        mumur_str = str(mmh3.hash128(_data))

        hash_obj = hashlib.sha256(mumur_str.encode("utf-8"))
        full_hash = hash_obj.hexdigest()

        # first 16 characters keep annotations readable
        return full_hash[:16]

    def prepare_hash_annotation(self, hash: Union[str, int]) -> Dict[str, str]:
        return {Annotations.RESOURCE_HASH: str(hash)}

    def delete_options(self) -> V1DeleteOptions:
        return V1DeleteOptions(propagation_policy=self.conf.delete_propagation_policy)

    @staticmethod
    def sort_newest_first(items: List[Dict]) -> List[Dict]:
        return sorted(
            items,
            key=lambda item: parse_k8s_time(deep_get(item, "metadata", "creationTimestamp")),
            reverse=True,
        )

    @staticmethod
    def name_of(obj: Dict) -> str:
        return deep_get(obj, "metadata", "name", default="")

    # ------------------------------------------------------------------
    # single object calls
    # ------------------------------------------------------------------

    def fetch(self, name: str, namespace: str) -> Dict:
        """Read one object, raising NotFoundError when absent."""
        try:
            return self.to_dict(self.ops.read(name, namespace, **self._kwargs()))
        except ApiException as ex:
            convert_api_exception(ex)

    def exists(self, name: str, namespace: str) -> bool:
        try:
            self.fetch(name, namespace)
        except NotFoundError:
            return False
        return True

    def create(self, namespace: str, body: Dict) -> Dict:
        try:
            return self.to_dict(self.ops.create(namespace, body, **self._kwargs()))
        except ApiException as ex:
            if not already_exists_error(ex):
                convert_api_exception(ex)
        # lost a create race, patch on top of the winner
        name = self.name_of(body)
        live = self.fetch(name, namespace)
        return self.patch(name, namespace, self.merge(live, body))

    def patch(self, name: str, namespace: str, body: Dict) -> Dict:
        """Merge-patch one object."""
        try:
            return self.to_dict(self.ops.patch(name, namespace, body, **self._kwargs()))
        except ApiException as ex:
            convert_api_exception(ex)

    def delete(self, name: str, namespace: str) -> None:
        """Request deletion; returns once accepted, not once gone."""
        try:
            self.ops.delete(name, namespace, body=self.delete_options(), **self._kwargs())
        except ApiException as ex:
            convert_api_exception(ex)
        logger.info(f"Deleted {self.KIND} {namespace}/{name} in cluster {self._cluster}")

    # ------------------------------------------------------------------
    # collections
    # ------------------------------------------------------------------

    def list(self, namespace: str, selector: Labels = None) -> List[Dict]:
        """Objects matching `selector`, newest first."""
        label_selector = selector.as_str() if selector else None
        try:
            result = self.to_dict(
                self.ops.list(namespace, label_selector=label_selector, **self._kwargs())
            )
        except ApiException as ex:
            convert_api_exception(ex)
        return self.sort_newest_first(result.get("items") or [])

    def delete_all(self, namespace: str, selector: Labels, inverse: str = None) -> List[str]:
        """Delete every matching object except the one named `inverse`.

        Returns the names whose deletion was accepted.
        """
        deleted = []
        for item in self.list(namespace, selector):
            name = self.name_of(item)
            if inverse and name == inverse:
                continue
            try:
                self.delete(name, namespace)
            except NotFoundError:
                continue
            deleted.append(name)
        return deleted

    def list_versions(
        self, namespace: str, project: str, app: str = None, version: str = None
    ) -> List[Dict]:
        return self.list(namespace, Labels.selector(project, app, version))

    def delete_versions(
        self, namespace: str, project: str, app: str = None, inverse: str = None
    ) -> List[str]:
        """Delete every version of an app except `inverse`."""
        return self.delete_all(namespace, Labels.selector(project, app), inverse)

    # ------------------------------------------------------------------
    # apply
    # ------------------------------------------------------------------

    def prepare(self, descriptor: WorkloadDescriptor) -> Dict:
        """Validate the descriptor payload and fill in defaults."""
        manifest = copy.deepcopy(descriptor.payload or {})
        kind = manifest.setdefault("kind", self.KIND)
        if kind != self.KIND or descriptor.kind != self.KIND:
            raise PermanentConfigError(
                f"manifest kind({kind}) does not match {self.KIND}"
            )
        api_version = manifest.setdefault("apiVersion", self.group_version.api_version)
        if api_version != self.group_version.api_version:
            raise PermanentConfigError(
                f"{self.KIND} apiVersion({api_version}) differs from "
                f"{self.group_version} served by cluster({self._cluster})"
            )
        # empty YAML keys load as None
        metadata = manifest["metadata"] = manifest.get("metadata") or {}
        metadata.setdefault("name", descriptor.name)
        metadata.setdefault("namespace", descriptor.namespace)
        if not metadata["name"]:
            raise PermanentConfigError(f"{self.KIND} manifest has no name")

        annotations = metadata["annotations"] = metadata.get("annotations") or {}
        annotations.pop(Annotations.RESOURCE_HASH, None)
        annotations.update(self.prepare_hash_annotation(self.compute_hash(manifest)))
        return manifest

    def merge(self, live: Dict, desired: Dict) -> Dict:
        """Kind specific merge of the live object into the desired one."""
        return desired

    def apply(self, descriptor: WorkloadDescriptor) -> ApplyResult:
        """Create the object if absent, otherwise merge-patch it."""
        namespace, name = descriptor.namespace, descriptor.name
        state = self.sensor.on_apply_start(self.KIND, self._cluster, namespace, name)
        try:
            desired = self.prepare(descriptor)
            namespace = desired["metadata"]["namespace"]
            name = desired["metadata"]["name"]
            try:
                live = self.fetch(name, namespace)
            except NotFoundError:
                live = None

            if live is None:
                obj = self.create(namespace, desired)
                action = ACTION_CREATED
            else:
                obj = self.patch(name, namespace, self.merge(live, desired))
                action = ACTION_PATCHED
        except Exception as ex:
            self.sensor.on_apply_complete(
                self.KIND, self._cluster, namespace, name, state, None, ex
            )
            raise

        logger.info(f"{self.KIND} {namespace}/{name} {action} in cluster {self._cluster}")
        self.sensor.on_apply_complete(self.KIND, self._cluster, namespace, name, state, action)
        return ApplyResult(
            action=action,
            resource_version=deep_get(obj, "metadata", "resourceVersion"),
            object=obj,
        )
