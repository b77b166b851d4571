import json
from kubernetes.client import ApiException

_ALREADY_EXISTS = "alreadyexists"
_NOT_FOUND = "notfound"

#: Delay suggested to callers retrying a transient failure
DEFAULT_RETRY_DELAY = 30


class ShipyardError(Exception):
    """Base class of all engine errors."""


class NotFoundError(ShipyardError):
    """Object is absent from the cluster."""


class VersionUnsupportedError(ShipyardError):
    """No known GroupVersion for a kind on a cluster."""


class ClusterNotFoundError(VersionUnsupportedError):
    """Cluster binding is not registered."""


class UnsupportedKindError(VersionUnsupportedError):
    """Kind has no GroupVersion on the cluster."""


class ConflictInFlightError(ShipyardError):
    """Another task is still unfinished."""


class TransientClusterError(ShipyardError):
    """Network or server failure, safe to retry.

    Args:
        message: Error description
        delay: Seconds the caller should wait before retrying
    """

    def __init__(self, message: str, delay: float = DEFAULT_RETRY_DELAY):
        super().__init__(message)
        self.delay = delay


class DeploymentInChangeError(TransientClusterError):
    """A deployment is still progressing."""


class PermanentConfigError(ShipyardError):
    """Malformed version strings or descriptors, retrying will not help."""


class ActionNotPermittedError(PermanentConfigError):
    """Task action is not permitted in the current task state."""


def _reason(ex: ApiException) -> str:
    try:
        err = json.loads(ex.body or "{}")
    except (json.JSONDecodeError, TypeError):
        return ""
    if not isinstance(err, dict):
        return ""
    return str(err.get("reason", "")).lower()


def already_exists_error(ex: ApiException) -> bool:
    if not isinstance(ex, ApiException):
        return False
    else:
        return ex.status == 409 and _reason(ex) == _ALREADY_EXISTS


def not_found_error(ex: ApiException) -> bool:
    if not isinstance(ex, ApiException):
        return False
    else:
        return ex.status == 404 or _reason(ex) == _NOT_FOUND


def convert_api_exception(ex: ApiException, permanent: bool = None):
    """
    Convert kubernetes ApiException to an engine error.

    Args:
        ex: The ApiException to convert
        permanent: If True, raises PermanentConfigError. If False, raises TransientClusterError.
                   If None, automatically determines based on status code.

    Raises:
        NotFoundError, TransientClusterError or PermanentConfigError
    """
    if not isinstance(ex, ApiException):
        raise ex

    error_msg = f"Kubernetes API error ({ex.status}): {ex.reason}"

    try:
        if ex.body:
            body = json.loads(ex.body)
            if isinstance(body, dict) and "message" in body:
                error_msg = f"{error_msg} - {body['message']}"
    except (json.JSONDecodeError, TypeError):
        pass

    if permanent is None:
        if not_found_error(ex):
            raise NotFoundError(error_msg) from ex
        # optimistic concurrency conflicts are retryable
        if ex.status == 409:
            raise TransientClusterError(error_msg, delay=1) from ex
        # 4xx errors (except 408, 429) are typically permanent
        is_permanent = ex.status is not None and 400 <= ex.status < 500 and ex.status not in [408, 429]
    else:
        is_permanent = permanent

    if is_permanent:
        raise PermanentConfigError(error_msg) from ex
    else:
        raise TransientClusterError(error_msg, delay=DEFAULT_RETRY_DELAY) from ex
