from typing import Dict


class ResourceLabels:
    PROJECT_LABEL = "project"

    APP_LABEL = "app"

    VERSION_LABEL = "version"

    CONFIG_HASH_LABEL = "configHash"

    LAUNCH_TYPE_LABEL = "launchType"

    CONFIG_MAP_COMMIT_LABEL = "commit"

    CONFIG_MAP_HASH_LABEL = "hash"


class Annotations:
    SHIPYARD_DOMAIN = "shipyard.io/"

    RESOURCE_HASH = SHIPYARD_DOMAIN + "resource-hash"

    CONFIG_MAP_HASH = SHIPYARD_DOMAIN + "config-map-hash"

    RESTARTED_AT = "kubectl.kubernetes.io/restartedAt"

    HPA_ROLLING_UPDATE_SKIPPED = "HPARollingUpdateSkipped"

    CRONJOB_INSTANTIATE = "cronjob.kubernetes.io/instantiate"


class Labels(ResourceLabels):
    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = labels if labels else dict()

    def update(self, labels: Dict[str, str]) -> "Labels":
        self._labels.update(labels.copy())
        return self

    def as_dict(self) -> Dict[str, str]:
        """Return labels are dictionary."""
        return self._labels.copy()

    def as_str(self):
        """Return labels as comma separated string."""
        return ",".join([f"{k}={v}" for k, v in self._labels.items()])

    def include(self, label: str, value: str) -> "Labels":
        """Add a label, skipping empty values so selectors stay permissive."""
        if value:
            self.update({label: value})
        return self

    def include_project(self, project: str) -> "Labels":
        return self.include(self.PROJECT_LABEL, project)

    def include_app(self, app: str) -> "Labels":
        return self.include(self.APP_LABEL, app)

    def include_version(self, version: str) -> "Labels":
        return self.include(self.VERSION_LABEL, version)

    def contains(self, other: "Labels"):
        """Returns True if all labels in `other` are contained."""
        return all(
            key in self._labels and self._labels[key] == value
            for key, value in other.as_dict().items()
        )

    def __str__(self):
        return f"Labels<{self._labels}>"

    @classmethod
    def empty(cls) -> "Labels":
        return Labels({})

    @classmethod
    def selector(cls, project: str = None, app: str = None, version: str = None) -> "Labels":
        """Selector for the objects of one app, optionally one version."""
        return (
            Labels()
            .include_project(project)
            .include_app(app)
            .include_version(version)
        )
