import copy
import logging
from typing import Dict
from shipyard.common.models.labels import Annotations, ResourceLabels
from shipyard.resources.base import BaseResource
from shipyard.types.models.task import LaunchType
from shipyard.utils.errors import PermanentConfigError
from shipyard.utils.helpers import deep_get

logger = logging.getLogger(__name__)

BATCH_V1 = "batch/v1"


def job_from_cronjob(cronjob: Dict, namespace: str, name: str) -> Dict:
    """Build a manually launched Job from a CronJob's job template.

    The Job is owned by the CronJob so it goes away with it.
    """
    if not name:
        raise PermanentConfigError("manual job name must not be empty")
    template = deep_get(cronjob, "spec", "jobTemplate", default={})
    template_metadata = template.get("metadata") or {}

    annotations = dict(template_metadata.get("annotations") or {})
    annotations[Annotations.CRONJOB_INSTANTIATE] = LaunchType.MANUAL.value

    labels = dict(template_metadata.get("labels") or {})
    labels[ResourceLabels.LAUNCH_TYPE_LABEL] = LaunchType.MANUAL.value

    metadata = cronjob.get("metadata") or {}
    owner = {
        "apiVersion": BATCH_V1,
        "kind": "CronJob",
        "name": metadata.get("name"),
        "uid": metadata.get("uid"),
        "controller": True,
        "blockOwnerDeletion": True,
    }

    return {
        "apiVersion": BATCH_V1,
        "kind": "Job",
        "metadata": {
            "namespace": namespace,
            "name": name,
            "annotations": annotations,
            "labels": labels,
            "ownerReferences": [owner],
        },
        "spec": copy.deepcopy(template.get("spec") or {}),
    }


class CronJobResource(BaseResource):
    """CronJob of one app version."""

    KIND = "CronJob"

    def set_suspend(self, name: str, namespace: str, suspend: bool) -> Dict:
        return self.patch(name, namespace, {"spec": {"suspend": suspend}})

    def suspend(self, name: str, namespace: str) -> Dict:
        logger.info(f"Suspending CronJob {namespace}/{name}")
        return self.set_suspend(name, namespace, True)

    def resume(self, name: str, namespace: str) -> Dict:
        logger.info(f"Resuming CronJob {namespace}/{name}")
        return self.set_suspend(name, namespace, False)
