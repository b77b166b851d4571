import logging
from typing import Any, Dict, Type, Union
from marshmallow import ValidationError
from shipyard.clusters.registry import ClusterRegistry
from shipyard.clusters.resolver import GroupVersionResolver
from shipyard.resources.base import BaseResource
from shipyard.resources.configmap import ConfigMapResource
from shipyard.resources.cronjob import CronJobResource
from shipyard.resources.deployment import DeploymentResource
from shipyard.resources.hpa import HorizontalPodAutoscalerResource
from shipyard.resources.job import JobResource
from shipyard.resources.service import ServiceResource
from shipyard.types.models.workload import ApplyResult, WorkloadDescriptor
from shipyard.types.schemas.workload import WorkloadDescriptorSchema
from shipyard.types.settings import Settings
from shipyard.utils.errors import PermanentConfigError, UnsupportedKindError

logger = logging.getLogger(__name__)

RESOURCES: Dict[str, Type[BaseResource]] = {
    cls.KIND: cls
    for cls in (
        DeploymentResource,
        ServiceResource,
        ConfigMapResource,
        CronJobResource,
        JobResource,
        HorizontalPodAutoscalerResource,
    )
}


class ApplyEngine:
    """Entry point for making live cluster objects match rendered manifests."""

    registry: ClusterRegistry
    resolver: GroupVersionResolver
    conf: Settings

    def __init__(
        self,
        registry: ClusterRegistry,
        resolver: GroupVersionResolver = None,
        conf: Settings = None,
    ) -> None:
        self.registry = registry
        self.resolver = resolver or GroupVersionResolver(registry)
        self.conf = conf or Settings()

    def resource(
        self, cluster: str, env: str, kind: str, request_timeout: float = None
    ) -> BaseResource:
        try:
            cls = RESOURCES[kind]
        except KeyError:
            raise UnsupportedKindError(f"unsupported workload kind({kind})") from None
        return cls(
            self.registry,
            cluster,
            env,
            resolver=self.resolver,
            conf=self.conf,
            request_timeout=request_timeout,
        )

    def deployments(self, cluster: str, env: str, **kwargs) -> DeploymentResource:
        return self.resource(cluster, env, DeploymentResource.KIND, **kwargs)

    def services(self, cluster: str, env: str, **kwargs) -> ServiceResource:
        return self.resource(cluster, env, ServiceResource.KIND, **kwargs)

    def config_maps(self, cluster: str, env: str, **kwargs) -> ConfigMapResource:
        return self.resource(cluster, env, ConfigMapResource.KIND, **kwargs)

    def cronjobs(self, cluster: str, env: str, **kwargs) -> CronJobResource:
        return self.resource(cluster, env, CronJobResource.KIND, **kwargs)

    def jobs(self, cluster: str, env: str, **kwargs) -> JobResource:
        return self.resource(cluster, env, JobResource.KIND, **kwargs)

    def hpas(self, cluster: str, env: str, **kwargs) -> HorizontalPodAutoscalerResource:
        return self.resource(cluster, env, HorizontalPodAutoscalerResource.KIND, **kwargs)

    @staticmethod
    def load_descriptor(manifest: Union[str, Dict[str, Any]]) -> WorkloadDescriptor:
        """Decode a rendered manifest, YAML text or mapping."""
        try:
            return WorkloadDescriptorSchema().load(manifest)
        except ValidationError as ex:
            raise PermanentConfigError(f"invalid workload manifest: {ex.messages}") from ex

    def apply(
        self,
        cluster: str,
        env: str,
        descriptor: Union[WorkloadDescriptor, str, Dict[str, Any]],
        request_timeout: float = None,
    ) -> ApplyResult:
        """Create or merge-patch one object so it matches `descriptor`."""
        if not isinstance(descriptor, WorkloadDescriptor):
            descriptor = self.load_descriptor(descriptor)
        resource = self.resource(
            cluster, env, descriptor.kind, request_timeout=request_timeout
        )
        return resource.apply(descriptor)
