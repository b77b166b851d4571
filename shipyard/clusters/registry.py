import logging
import yaml
from typing import Dict, Iterator, List, Optional, Tuple
from kubernetes import client, config
from shipyard.types.models.cluster import ClusterBinding
from shipyard.types.schemas.cluster import ClusterConfigSchema
from shipyard.utils.errors import ClusterNotFoundError, PermanentConfigError

logger = logging.getLogger(__name__)


def load_cluster_bindings(path: str) -> List[ClusterBinding]:
    """Load cluster bindings from a YAML file."""
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as ex:
        raise PermanentConfigError(f"cannot read clusters file {path}: {ex}") from ex
    except yaml.YAMLError as ex:
        raise PermanentConfigError(f"invalid clusters file {path}: {ex}") from ex
    return ClusterConfigSchema().load(raw).clusters


def new_api_client(binding: ClusterBinding) -> client.ApiClient:
    """Build an API client for a binding.

    An explicit kubeconfig wins; otherwise try in-cluster config first
    (for production), then the default kubeconfig (for dev).
    """
    if binding.kubeconfig:
        return config.new_client_from_config(
            config_file=binding.kubeconfig, context=binding.context
        )
    configuration = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=configuration)
        logger.info(f"Loaded in-cluster configuration for cluster {binding.name}")
    except config.ConfigException:
        logger.info(
            f"In-cluster config not found for cluster {binding.name}, trying local kubeconfig"
        )
        config.load_kube_config(
            context=binding.context, client_configuration=configuration
        )
    return client.ApiClient(configuration)


class ClusterHandle:
    """A bootstrapped binding together with its API client."""

    binding: ClusterBinding
    api_client: client.ApiClient

    def __init__(self, binding: ClusterBinding, api_client: client.ApiClient = None):
        self.binding = binding
        self.api_client = api_client

    @property
    def name(self) -> str:
        return self.binding.name

    @property
    def env(self) -> str:
        return self.binding.env


class ClusterRegistry:
    """Cluster bindings keyed by (cluster name, env name)."""

    _handles: Dict[Tuple[str, str], ClusterHandle]

    def __init__(self, handles: List[ClusterHandle] = None) -> None:
        self._handles = {}
        for handle in handles or []:
            self.register(handle)

    def register(self, handle: ClusterHandle) -> "ClusterRegistry":
        key = handle.binding.key
        if key in self._handles:
            raise PermanentConfigError(
                f"duplicated cluster binding(cluster={key[0]}, env={key[1]})"
            )
        self._handles[key] = handle
        return self

    def get(self, cluster: str, env: str) -> ClusterHandle:
        try:
            return self._handles[(cluster, env)]
        except KeyError:
            raise ClusterNotFoundError(
                f"cluster({cluster}) not found for env({env})"
            ) from None

    def binding(self, cluster: str, env: str) -> ClusterBinding:
        return self.get(cluster, env).binding

    def api_client(self, cluster: str, env: str) -> client.ApiClient:
        return self.get(cluster, env).api_client

    def first(self, cluster: str) -> Optional[ClusterHandle]:
        """First handle registered under a cluster name, any env."""
        for (name, _), handle in self._handles.items():
            if name == cluster:
                return handle
        return None

    def cluster_names(self) -> List[str]:
        """Unique cluster names; a cluster may serve several envs."""
        names = []
        for name, _ in self._handles:
            if name not in names:
                names.append(name)
        return names

    def __iter__(self) -> Iterator[ClusterHandle]:
        return iter(list(self._handles.values()))

    def __len__(self) -> int:
        return len(self._handles)

    def close(self) -> None:
        closed = set()
        for handle in self._handles.values():
            api_client = handle.api_client
            if api_client is None or id(api_client) in closed:
                continue
            closed.add(id(api_client))
            api_client.close()
