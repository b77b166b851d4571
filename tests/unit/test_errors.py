"""Unit tests for ApiException conversion."""

import json
import pytest
from kubernetes.client import ApiException
from shipyard.utils.errors import (
    DEFAULT_RETRY_DELAY,
    ActionNotPermittedError,
    DeploymentInChangeError,
    NotFoundError,
    PermanentConfigError,
    ShipyardError,
    TransientClusterError,
    already_exists_error,
    convert_api_exception,
    not_found_error,
)


def api_exception(status, reason="", message=None):
    ex = ApiException(status=status, reason="Error")
    body = {"kind": "Status", "reason": reason}
    if message:
        body["message"] = message
    ex.body = json.dumps(body)
    return ex


class TestStatusReason:
    """Tests for already_exists_error and not_found_error."""

    def test_already_exists(self):
        assert already_exists_error(api_exception(409, "AlreadyExists"))
        assert not already_exists_error(api_exception(409, "Conflict"))
        assert not already_exists_error(ValueError("nope"))

    def test_not_found(self):
        assert not_found_error(api_exception(404))
        assert not_found_error(api_exception(500, "NotFound"))
        assert not not_found_error(api_exception(500, "InternalError"))

    def test_unparseable_body(self):
        ex = ApiException(status=409, reason="Conflict")
        ex.body = "<html>"
        assert not already_exists_error(ex)


class TestConvertApiException:
    """Tests for convert_api_exception."""

    def test_not_found(self):
        with pytest.raises(NotFoundError):
            convert_api_exception(api_exception(404, "NotFound"))

    def test_conflict_is_transient(self):
        with pytest.raises(TransientClusterError) as info:
            convert_api_exception(api_exception(409, "Conflict"))
        assert info.value.delay == 1

    @pytest.mark.parametrize("status", [400, 403, 422])
    def test_client_errors_are_permanent(self, status):
        with pytest.raises(PermanentConfigError) as info:
            convert_api_exception(api_exception(status, "Invalid", "spec.replicas: Invalid value"))
        assert f"({status})" in str(info.value)
        assert "spec.replicas: Invalid value" in str(info.value)

    @pytest.mark.parametrize("status", [408, 429, 500, 503])
    def test_other_errors_are_transient(self, status):
        with pytest.raises(TransientClusterError) as info:
            convert_api_exception(api_exception(status, "ServerTimeout"))
        assert info.value.delay == DEFAULT_RETRY_DELAY

    def test_forced_permanence(self):
        with pytest.raises(PermanentConfigError):
            convert_api_exception(api_exception(500), permanent=True)
        with pytest.raises(TransientClusterError):
            convert_api_exception(api_exception(400), permanent=False)

    def test_other_exceptions_are_reraised(self):
        with pytest.raises(KeyError):
            convert_api_exception(KeyError("x"))


class TestHierarchy:
    """Tests for the error class hierarchy."""

    def test_hierarchy(self):
        assert issubclass(DeploymentInChangeError, TransientClusterError)
        assert issubclass(ActionNotPermittedError, PermanentConfigError)
        assert issubclass(TransientClusterError, ShipyardError)

    def test_deployment_in_change_carries_delay(self):
        assert DeploymentInChangeError("rolling", delay=10).delay == 10
