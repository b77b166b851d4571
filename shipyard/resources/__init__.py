from .base import BaseResource
from .ops import DeploymentVariant, ObjectOps, ops_for
from .deployment import DeploymentResource
from .service import ServiceResource
from .configmap import ConfigMapResource
from .cronjob import CronJobResource, job_from_cronjob
from .job import JobResource
from .hpa import HorizontalPodAutoscalerResource
from .engine import ApplyEngine

__all__ = [
    "BaseResource",
    "DeploymentVariant",
    "ObjectOps",
    "ops_for",
    "DeploymentResource",
    "ServiceResource",
    "ConfigMapResource",
    "CronJobResource",
    "job_from_cronjob",
    "JobResource",
    "HorizontalPodAutoscalerResource",
    "ApplyEngine",
]
