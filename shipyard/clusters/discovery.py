import logging
from typing import Dict, List
from kubernetes.client import ApiClient, ApisApi, VersionApi, ApiException
from shipyard.clusters.registry import ClusterHandle, ClusterRegistry, new_api_client
from shipyard.clusters.resolver import SUPPORTED_KINDS, force_versions, select_group_versions
from shipyard.common.models.version import ServerVersion
from shipyard.types.models.cluster import ClusterBinding
from shipyard.utils.errors import convert_api_exception

logger = logging.getLogger(__name__)

CORE_GROUP_VERSION = "v1"


def fetch_server_version(api_client: ApiClient) -> ServerVersion:
    try:
        info = VersionApi(api_client).get_code()
    except ApiException as ex:
        convert_api_exception(ex)
    return ServerVersion.from_version_info(info)


def fetch_resource_kinds(api_client: ApiClient, group_version: str) -> List[str]:
    """Kinds served under one group version."""
    if group_version == CORE_GROUP_VERSION:
        path = "/api/v1"
    else:
        path = f"/apis/{group_version}"
    try:
        resource_list = api_client.call_api(
            path,
            "GET",
            header_params={"Accept": "application/json"},
            response_type="V1APIResourceList",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )
    except ApiException as ex:
        convert_api_exception(ex)
    kinds = []
    for resource in resource_list.resources or []:
        # subresources such as deployments/scale report their own kinds
        if "/" in resource.name:
            continue
        if resource.kind not in kinds:
            kinds.append(resource.kind)
    return kinds


def discover_group_versions(api_client: ApiClient) -> Dict[str, List[str]]:
    """Every served group version mapped to its kinds."""
    discovered = {CORE_GROUP_VERSION: fetch_resource_kinds(api_client, CORE_GROUP_VERSION)}
    try:
        groups = ApisApi(api_client).get_api_versions()
    except ApiException as ex:
        convert_api_exception(ex)
    for group in groups.groups or []:
        for version in group.versions or []:
            discovered[version.group_version] = fetch_resource_kinds(
                api_client, version.group_version
            )
    return discovered


def bootstrap_binding(binding: ClusterBinding, api_client: ApiClient) -> ClusterHandle:
    """Discover versions for one cluster binding and apply forcing rules."""
    binding.server_version = fetch_server_version(api_client)
    binding.group_versions = select_group_versions(
        discover_group_versions(api_client), SUPPORTED_KINDS
    )
    force_versions(binding)
    logger.info(
        f"Bootstrapped cluster {binding.name} for env {binding.env}: "
        f"{binding.server_version}, {len(binding.group_versions)} kinds"
    )
    return ClusterHandle(binding, api_client)


def bootstrap_registry(bindings: List[ClusterBinding]) -> ClusterRegistry:
    registry = ClusterRegistry()
    for binding in bindings:
        registry.register(bootstrap_binding(binding, new_api_client(binding)))
    return registry
