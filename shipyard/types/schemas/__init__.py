from .cluster import ClusterBindingSchema, ClusterConfigSchema
from .task import DeploymentTaskSchema
from .workload import WorkloadDescriptorSchema

__all__ = [
    "ClusterBindingSchema",
    "ClusterConfigSchema",
    "DeploymentTaskSchema",
    "WorkloadDescriptorSchema",
]
