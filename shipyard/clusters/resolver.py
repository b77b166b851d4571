import logging
from typing import Dict, Iterable, List, Mapping
from shipyard.clusters.registry import ClusterRegistry
from shipyard.common.models.group_version import (
    APPS_V1,
    EXTENSIONS_V1BETA1,
    GroupVersion,
)
from shipyard.common.models.version import ServerVersion
from shipyard.types.models.cluster import ClusterBinding
from shipyard.utils.errors import UnsupportedKindError

logger = logging.getLogger(__name__)

KIND_DEPLOYMENT = "Deployment"
KIND_REPLICA_SET = "ReplicaSet"
KIND_SERVICE = "Service"
KIND_CONFIG_MAP = "ConfigMap"
KIND_CRON_JOB = "CronJob"
KIND_JOB = "Job"
KIND_HPA = "HorizontalPodAutoscaler"
KIND_POD = "Pod"

SUPPORTED_KINDS = [
    KIND_DEPLOYMENT,
    KIND_REPLICA_SET,
    KIND_SERVICE,
    KIND_CONFIG_MAP,
    KIND_CRON_JOB,
    KIND_JOB,
    KIND_HPA,
    KIND_POD,
]

#: Kinds whose GroupVersion follows the server minor version
FORCED_KINDS_BY_SERVER_VERSION = [KIND_DEPLOYMENT, KIND_REPLICA_SET]

#: Kinds always served from the legacy extensions group
FORCE_LEGACY_KINDS: List[str] = []

#: First minor version serving Deployment from apps/v1 only
LEGACY_MINOR = 18


def select_group_versions(
    discovered: Mapping[str, Iterable[str]],
    supported_kinds: Iterable[str] = SUPPORTED_KINDS,
) -> Dict[str, GroupVersion]:
    """Pick the most preferred GroupVersion for every supported kind.

    Args:
        discovered: group version string to the kinds it serves
        supported_kinds: kinds the engine handles
    """
    supported = set(supported_kinds)
    selected: Dict[str, GroupVersion] = {}
    for group_version, kinds in discovered.items():
        gv = GroupVersion.parse(group_version)
        for kind in kinds:
            if kind not in supported:
                continue
            current = selected.get(kind)
            if gv.is_preferred_than(current):
                selected[kind] = gv

    for kind in supported_kinds:
        if kind not in selected:
            logger.warning(f"No GroupVersion found for kind {kind}")
    return selected


def _server_version(binding: ClusterBinding) -> ServerVersion:
    version = binding.server_version
    if isinstance(version, ServerVersion):
        return version
    return ServerVersion.from_version_info(version)


def force_versions(binding: ClusterBinding) -> Dict[str, GroupVersion]:
    """Apply version forcing rules to a binding's GroupVersion table.

    Returns the kinds whose GroupVersion changed, mapped to the new value.
    """
    changed: Dict[str, GroupVersion] = {}
    table = binding.group_versions

    def _force(kind: str, target: GroupVersion):
        current = table.get(kind)
        if current != target:
            logger.info(
                "Forced %s's apiVersion(cluster=%s, env=%s) from %s to: %s",
                kind,
                binding.name,
                binding.env,
                current,
                target,
            )
            table[kind] = target
            changed[kind] = target

    version = _server_version(binding)
    if version.major == "1":
        target = EXTENSIONS_V1BETA1 if version.minor < LEGACY_MINOR else APPS_V1
        for kind in FORCED_KINDS_BY_SERVER_VERSION:
            _force(kind, target)

    for kind in FORCE_LEGACY_KINDS:
        _force(kind, EXTENSIONS_V1BETA1)

    return changed


class GroupVersionResolver:
    """Maps (cluster, env, kind) to the GroupVersion to talk to."""

    registry: ClusterRegistry

    def __init__(self, registry: ClusterRegistry) -> None:
        self.registry = registry

    def resolve(self, cluster: str, env: str, kind: str) -> GroupVersion:
        binding = self.registry.binding(cluster, env)
        try:
            return binding.group_versions[kind]
        except KeyError:
            raise UnsupportedKindError(
                f"unsupported kind({kind}) in cluster({cluster}) for env({env})"
            ) from None

    def api_version(self, cluster: str, env: str, kind: str) -> str:
        return self.resolve(cluster, env, kind).api_version
