import os
from typing import Any, List

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


def _split(value: Any) -> List[str]:
    """Split a comma separated environment value, dropping blanks."""
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [v.strip() for v in str(value).split(",") if v.strip()]


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

DEFAULT_IMAGE_ALLOWED_PREFIXES = [
    "registry.cn-shanghai.aliyuncs.com",
    "crpi-592g7buyguepbrqd.cn-shanghai.personal.cr.aliyuncs.com",
    "crpi-592g7buyguepbrqd-vpc.cn-shanghai.personal.cr.aliyuncs.com",
    "swr.cn-east-3.myhuaweicloud.com",
]

#: Path of the YAML file holding cluster bindings
CLUSTERS_FILE = _getenv("SHIPYARD_CLUSTERS_FILE", "clusters.yaml")

#: Registry host prefixes a container image may start with
IMAGE_ALLOWED_PREFIXES = _split(
    _getenv("SHIPYARD_IMAGE_ALLOWED_PREFIXES", DEFAULT_IMAGE_ALLOWED_PREFIXES)
)

#: Upper bound in seconds for the pod watch retry delay
WATCH_BACKOFF_CAP_SECONDS = int(_getenv("SHIPYARD_WATCH_BACKOFF_CAP_SECONDS", 15))

#: Server side timeout of a single pod watch request
WATCH_TIMEOUT_SECONDS = int(_getenv("SHIPYARD_WATCH_TIMEOUT_SECONDS", 300))

#: Propagation policy used by delete calls
DELETE_PROPAGATION_POLICY = _getenv(
    "SHIPYARD_DELETE_PROPAGATION_POLICY", "Foreground"
)

#: Webhook receiving drift watcher alerts, disabled when empty
ALERT_WEBHOOK_URL = _getenv("SHIPYARD_ALERT_WEBHOOK_URL", "")

#: Timeout in seconds for alert webhook calls
ALERT_TIMEOUT_SECONDS = float(_getenv("SHIPYARD_ALERT_TIMEOUT_SECONDS", 10.0))

#: Expose prometheus metrics
METRICS_ENABLED = bool(_getenv("SHIPYARD_METRICS_ENABLED", True))


class Settings:
    """Operator settings"""

    clusters_file: str = CLUSTERS_FILE
    image_allowed_prefixes: List[str] = IMAGE_ALLOWED_PREFIXES
    watch_backoff_cap_seconds: int = WATCH_BACKOFF_CAP_SECONDS
    watch_timeout_seconds: int = WATCH_TIMEOUT_SECONDS
    delete_propagation_policy: str = DELETE_PROPAGATION_POLICY
    alert_webhook_url: str = ALERT_WEBHOOK_URL
    alert_timeout_seconds: float = ALERT_TIMEOUT_SECONDS
    metrics_enabled: bool = METRICS_ENABLED

    def __init__(
        self,
        *args,
        clusters_file: str = None,
        image_allowed_prefixes: List[str] = None,
        watch_backoff_cap_seconds: int = None,
        watch_timeout_seconds: int = None,
        delete_propagation_policy: str = None,
        alert_webhook_url: str = None,
        alert_timeout_seconds: float = None,
        metrics_enabled: bool = None,
        **kwargs,
    ):
        if clusters_file is not None:
            self.clusters_file = clusters_file

        if image_allowed_prefixes is not None:
            self.image_allowed_prefixes = _split(image_allowed_prefixes)

        if watch_backoff_cap_seconds is not None:
            self.watch_backoff_cap_seconds = watch_backoff_cap_seconds

        if watch_timeout_seconds is not None:
            self.watch_timeout_seconds = watch_timeout_seconds

        if delete_propagation_policy is not None:
            self.delete_propagation_policy = delete_propagation_policy

        if alert_webhook_url is not None:
            self.alert_webhook_url = alert_webhook_url

        if alert_timeout_seconds is not None:
            self.alert_timeout_seconds = alert_timeout_seconds

        if metrics_enabled is not None:
            self.metrics_enabled = metrics_enabled
