import logging
from functools import cached_property
from typing import Dict
from kubernetes.client import ApiException
from shipyard.common.models.labels import Annotations, ResourceLabels
from shipyard.resources.base import BaseResource
from shipyard.resources.ops import DeploymentVariant
from shipyard.types.models.task import DeploymentTask
from shipyard.utils.errors import DeploymentInChangeError, convert_api_exception
from shipyard.utils.helpers import deep_get, local_now

logger = logging.getLogger(__name__)

CONDITION_AVAILABLE = "Available"
CONDITION_PROGRESSING = "Progressing"


def restart_timestamp() -> str:
    """Local time with numeric offset, e.g. `2021-02-02T18:21:36+08:00`."""
    return local_now().isoformat(timespec="seconds")


class DeploymentResource(BaseResource):
    """Deployment of one app version.

    The cluster serves Deployments either from `apps/v1` or from the
    legacy `extensions/v1beta1` group; `variant` tells which, and the
    operations object hides the difference.
    """

    KIND = "Deployment"

    @cached_property
    def variant(self) -> DeploymentVariant:
        return DeploymentVariant.of(self.group_version)

    def scale(self, name: str, namespace: str, replicas: int) -> Dict:
        """Set the replica count through the scale subresource."""
        body = {"spec": {"replicas": replicas}}
        try:
            result = self.to_dict(
                self.ops.patch_scale(name, namespace, body, **self._kwargs())
            )
        except ApiException as ex:
            convert_api_exception(ex)
        logger.info(
            f"Scaled {self.variant.value} Deployment {namespace}/{name} to {replicas} replicas"
        )
        return result

    def restart(self, name: str, namespace: str) -> Dict:
        """Roll all pods by stamping the pod template."""
        body = {
            "spec": {
                "template": {
                    "metadata": {
                        "annotations": {Annotations.RESTARTED_AT: restart_timestamp()}
                    }
                }
            }
        }
        return self.patch(name, namespace, body)

    def reload(self, name: str, namespace: str, cm_hash: str) -> Dict:
        """Roll pods onto a new ConfigMap revision."""
        body = {
            "metadata": {"labels": {ResourceLabels.CONFIG_HASH_LABEL: cm_hash}},
            "spec": {
                "template": {
                    "metadata": {
                        "annotations": {Annotations.CONFIG_MAP_HASH: cm_hash},
                        "labels": {ResourceLabels.CONFIG_HASH_LABEL: cm_hash},
                    }
                }
            },
        }
        return self.patch(name, namespace, body)

    def reload_for_task(self, task: DeploymentTask, cm_hash: str) -> Dict:
        return self.reload(task.version, task.namespace, cm_hash)

    def enable_hpa(self, name: str, namespace: str) -> Dict:
        """Let the autoscaler drive replicas again."""
        body = {"metadata": {"annotations": {Annotations.HPA_ROLLING_UPDATE_SKIPPED: None}}}
        return self.patch(name, namespace, body)

    def check_healthy(
        self, namespace: str, project: str, app: str, inverse: str = None
    ) -> bool:
        """Whether some version other than `inverse` serves traffic.

        Raises DeploymentInChangeError while a candidate is still rolling out.
        """
        for item in self.list_versions(namespace, project, app):
            if inverse and self.name_of(item) == inverse:
                continue
            ready = deep_get(item, "status", "readyReplicas", default=0)
            progressing = False
            for condition in deep_get(item, "status", "conditions", default=[]):
                if condition.get("type") == CONDITION_AVAILABLE and ready > 0:
                    # condition status may still be False while pods already serve
                    return True
                if (
                    condition.get("type") == CONDITION_PROGRESSING
                    and condition.get("status") == "True"
                ):
                    progressing = True
            if progressing:
                raise DeploymentInChangeError(
                    f"Deployment {namespace}/{self.name_of(item)} is still progressing",
                    delay=10,
                )
        return False
