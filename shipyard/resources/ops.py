from enum import Enum
from typing import Any, Callable, Dict, Tuple
from kubernetes.client import (
    ApiClient,
    AppsV1Api,
    AutoscalingV1Api,
    AutoscalingV2Api,
    BatchV1Api,
    CoreV1Api,
    CustomObjectsApi,
)
from shipyard.common.models.group_version import GroupVersion
from shipyard.utils.errors import UnsupportedKindError

MERGE_PATCH = "application/merge-patch+json"

PLURALS = {
    "Deployment": "deployments",
    "ReplicaSet": "replicasets",
    "Service": "services",
    "ConfigMap": "configmaps",
    "CronJob": "cronjobs",
    "Job": "jobs",
    "HorizontalPodAutoscaler": "horizontalpodautoscalers",
    "Pod": "pods",
}


class ObjectOps:
    """Namespaced calls for one kind served at one GroupVersion.

    Every method returns whatever the client returns; callers normalize
    results to plain dicts.
    """

    group_version: GroupVersion

    def read(self, name: str, namespace: str, **kwargs):
        raise NotImplementedError()

    def create(self, namespace: str, body: Dict, **kwargs):
        raise NotImplementedError()

    def patch(self, name: str, namespace: str, body: Dict, **kwargs):
        raise NotImplementedError()

    def delete(self, name: str, namespace: str, body: Any = None, **kwargs):
        raise NotImplementedError()

    def list(self, namespace: str, label_selector: str = None, **kwargs):
        raise NotImplementedError()

    def patch_scale(self, name: str, namespace: str, body: Dict, **kwargs):
        raise UnsupportedKindError(
            f"scale subresource is not served by {self.group_version}"
        )


class TypedOps(ObjectOps):
    """Calls through a generated API class, e.g. `AppsV1Api`.

    `resource` is the suffix shared by the generated method names, such as
    `namespaced_deployment` in `read_namespaced_deployment`.
    """

    def __init__(self, api, resource: str, group_version: GroupVersion, scalable: bool = False):
        self.api = api
        self.resource = resource
        self.group_version = group_version
        self.scalable = scalable

    def _method(self, verb: str, subresource: str = "") -> Callable:
        return getattr(self.api, f"{verb}_{self.resource}{subresource}")

    def read(self, name, namespace, **kwargs):
        return self._method("read")(name, namespace, **kwargs)

    def create(self, namespace, body, **kwargs):
        return self._method("create")(namespace, body, **kwargs)

    def patch(self, name, namespace, body, **kwargs):
        kwargs.setdefault("_content_type", MERGE_PATCH)
        return self._method("patch")(name, namespace, body, **kwargs)

    def delete(self, name, namespace, body=None, **kwargs):
        return self._method("delete")(name, namespace, body=body, **kwargs)

    def list(self, namespace, label_selector=None, **kwargs):
        if label_selector:
            kwargs["label_selector"] = label_selector
        return self._method("list")(namespace, **kwargs)

    def patch_scale(self, name, namespace, body, **kwargs):
        if not self.scalable:
            return super().patch_scale(name, namespace, body, **kwargs)
        kwargs.setdefault("_content_type", MERGE_PATCH)
        return self._method("patch", "_scale")(name, namespace, body, **kwargs)


class CustomObjectOps(ObjectOps):
    """Calls through the generic objects endpoint, for API groups that the
    generated client no longer ships, such as `extensions/v1beta1`."""

    def __init__(self, api: CustomObjectsApi, group_version: GroupVersion, plural: str):
        if not group_version.group:
            raise UnsupportedKindError(
                f"core group {group_version} cannot be served as custom objects"
            )
        self.api = api
        self.group_version = group_version
        self.plural = plural

    @property
    def _path(self) -> Dict[str, str]:
        return {
            "group": self.group_version.group,
            "version": self.group_version.version,
            "plural": self.plural,
        }

    def read(self, name, namespace, **kwargs):
        return self.api.get_namespaced_custom_object(
            namespace=namespace, name=name, **self._path, **kwargs
        )

    def create(self, namespace, body, **kwargs):
        return self.api.create_namespaced_custom_object(
            namespace=namespace, body=body, **self._path, **kwargs
        )

    def patch(self, name, namespace, body, **kwargs):
        kwargs.setdefault("_content_type", MERGE_PATCH)
        return self.api.patch_namespaced_custom_object(
            namespace=namespace, name=name, body=body, **self._path, **kwargs
        )

    def delete(self, name, namespace, body=None, **kwargs):
        return self.api.delete_namespaced_custom_object(
            namespace=namespace, name=name, body=body, **self._path, **kwargs
        )

    def list(self, namespace, label_selector=None, **kwargs):
        if label_selector:
            kwargs["label_selector"] = label_selector
        return self.api.list_namespaced_custom_object(
            namespace=namespace, **self._path, **kwargs
        )

    def patch_scale(self, name, namespace, body, **kwargs):
        kwargs.setdefault("_content_type", MERGE_PATCH)
        return self.api.patch_namespaced_custom_object_scale(
            namespace=namespace, name=name, body=body, **self._path, **kwargs
        )


class DeploymentVariant(str, Enum):
    """The two API generations a Deployment may be served from."""

    APPS_V1 = "apps/v1"
    EXTENSIONS_V1BETA1 = "extensions/v1beta1"

    @classmethod
    def of(cls, group_version: GroupVersion) -> "DeploymentVariant":
        try:
            return cls(group_version.api_version)
        except ValueError:
            raise UnsupportedKindError(
                f"unsupported Deployment apiVersion({group_version})"
            ) from None


def _apps_v1_deployments(api_client: ApiClient) -> ObjectOps:
    return TypedOps(
        AppsV1Api(api_client),
        "namespaced_deployment",
        GroupVersion.parse(DeploymentVariant.APPS_V1.value),
        scalable=True,
    )


def _extensions_deployments(api_client: ApiClient) -> ObjectOps:
    return CustomObjectOps(
        CustomObjectsApi(api_client),
        GroupVersion.parse(DeploymentVariant.EXTENSIONS_V1BETA1.value),
        PLURALS["Deployment"],
    )


DEPLOYMENT_STRATEGIES: Dict[DeploymentVariant, Callable[[ApiClient], ObjectOps]] = {
    DeploymentVariant.APPS_V1: _apps_v1_deployments,
    DeploymentVariant.EXTENSIONS_V1BETA1: _extensions_deployments,
}

#: Generated API class and method suffix per (kind, apiVersion)
TYPED_APIS: Dict[Tuple[str, str], Tuple[type, str]] = {
    ("Service", "v1"): (CoreV1Api, "namespaced_service"),
    ("ConfigMap", "v1"): (CoreV1Api, "namespaced_config_map"),
    ("Pod", "v1"): (CoreV1Api, "namespaced_pod"),
    ("CronJob", "batch/v1"): (BatchV1Api, "namespaced_cron_job"),
    ("Job", "batch/v1"): (BatchV1Api, "namespaced_job"),
    ("HorizontalPodAutoscaler", "autoscaling/v1"): (
        AutoscalingV1Api,
        "namespaced_horizontal_pod_autoscaler",
    ),
    ("HorizontalPodAutoscaler", "autoscaling/v2"): (
        AutoscalingV2Api,
        "namespaced_horizontal_pod_autoscaler",
    ),
}


def ops_for(api_client: ApiClient, kind: str, group_version: GroupVersion) -> ObjectOps:
    """Operations object for a kind at the resolved GroupVersion."""
    if kind == "Deployment":
        return DEPLOYMENT_STRATEGIES[DeploymentVariant.of(group_version)](api_client)

    typed = TYPED_APIS.get((kind, group_version.api_version))
    if typed is not None:
        api_cls, resource = typed
        return TypedOps(api_cls(api_client), resource, group_version)

    if kind not in PLURALS:
        raise UnsupportedKindError(f"unsupported kind({kind})")
    return CustomObjectOps(CustomObjectsApi(api_client), group_version, PLURALS[kind])
