from .cluster import ClusterBinding
from .workload import WorkloadDescriptor, ApplyResult, ACTION_CREATED, ACTION_PATCHED
from .image_record import ContainerType, UnexpectedImage, ImageComplianceRecord
from .task import AppType, TaskAction, TaskStatus, LaunchType, DeploymentTask

__all__ = [
    "ClusterBinding",
    "WorkloadDescriptor",
    "ApplyResult",
    "ACTION_CREATED",
    "ACTION_PATCHED",
    "ContainerType",
    "UnexpectedImage",
    "ImageComplianceRecord",
    "AppType",
    "TaskAction",
    "TaskStatus",
    "LaunchType",
    "DeploymentTask",
]
