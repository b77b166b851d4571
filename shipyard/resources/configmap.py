import hashlib
import logging
import yaml
from typing import Any, Dict, Mapping
from shipyard.common.models.labels import Labels, ResourceLabels
from shipyard.resources.base import BaseResource
from shipyard.types.models.task import DeploymentTask, TaskAction
from shipyard.utils.errors import NotFoundError, PermanentConfigError

logger = logging.getLogger(__name__)

#: Key holding the main config file; older apps read it as `<env>.yaml`
MAIN_CONFIG_KEY = "config.yaml"


def legacy_config_map_name(project: str, app: str) -> str:
    return f"{project}-{app}"


def config_map_name(task: DeploymentTask) -> str:
    return task.version


def build_config_map_data(env: str, raw: Mapping[str, Any]) -> Dict[str, str]:
    """Turn app config into ConfigMap data, one entry per config file.

    String values are kept as is, anything else is dumped as YAML.
    """
    if not isinstance(raw, Mapping):
        raise PermanentConfigError("config raw data is not a mapping")

    data = {}
    for key, value in raw.items():
        if isinstance(value, str):
            data[key] = value
        else:
            data[key] = yaml.safe_dump(value, allow_unicode=True)
        if key == MAIN_CONFIG_KEY:
            data[f"{env}.yaml"] = data[key]
    return data


def config_map_hash(data: Mapping[str, str]) -> str:
    """md5 of the YAML dump of ConfigMap data."""
    dumped = yaml.safe_dump(dict(data), allow_unicode=True)
    return hashlib.md5(dumped.encode("utf-8")).hexdigest()


def config_map_labels(commit: str, cm_hash: str) -> Dict[str, str]:
    return {
        ResourceLabels.CONFIG_MAP_COMMIT_LABEL: commit or "",
        ResourceLabels.CONFIG_MAP_HASH_LABEL: cm_hash,
    }


class ConfigMapResource(BaseResource):
    """ConfigMap holding the config files of one app version."""

    KIND = "ConfigMap"

    def fetch_compatible(self, task: DeploymentTask, project: str, app: str) -> Dict:
        """Read the version named ConfigMap, falling back to the legacy name."""
        try:
            return self.fetch(config_map_name(task), task.namespace)
        except NotFoundError:
            logger.info(
                f"ConfigMap {task.namespace}/{task.version} not found, "
                f"trying legacy name {legacy_config_map_name(project, app)}"
            )
        return self.fetch(legacy_config_map_name(project, app), task.namespace)

    def name_for_task(self, task: DeploymentTask, project: str, app: str) -> str:
        """Name a task writes its ConfigMap to.

        Only `reload_config` updates an existing ConfigMap in place, so it
        targets whichever name the app already uses.
        """
        if task.action == TaskAction.RELOAD_CONFIG.value:
            return self.name_of(self.fetch_compatible(task, project, app))
        return config_map_name(task)

    def build_manifest(
        self, task: DeploymentTask, project: str, app: str, raw: Mapping[str, Any]
    ) -> Dict:
        """Full ConfigMap manifest for a task, ready for `apply`."""
        data = build_config_map_data(task.env_name, raw)
        cm_hash = config_map_hash(data)
        labels = (
            Labels()
            .include_project(project)
            .include_app(app)
            .update(config_map_labels(task.config_commit_id, cm_hash))
        )
        return {
            "apiVersion": self.group_version.api_version,
            "kind": self.KIND,
            "metadata": {
                "name": self.name_for_task(task, project, app),
                "namespace": task.namespace,
                "labels": labels.as_dict(),
            },
            "data": data,
        }
