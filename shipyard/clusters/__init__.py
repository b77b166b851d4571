from .registry import ClusterHandle, ClusterRegistry, load_cluster_bindings, new_api_client
from .resolver import GroupVersionResolver, force_versions, select_group_versions
from .discovery import bootstrap_binding, bootstrap_registry

__all__ = [
    "ClusterHandle",
    "ClusterRegistry",
    "load_cluster_bindings",
    "new_api_client",
    "GroupVersionResolver",
    "force_versions",
    "select_group_versions",
    "bootstrap_binding",
    "bootstrap_registry",
]
