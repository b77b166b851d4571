"""Unit tests for ApplyEngine dispatch."""

import pytest
from unittest.mock import Mock, patch
from shipyard.resources import ApplyEngine, ServiceResource
from shipyard.types.models.workload import ApplyResult
from shipyard.utils.errors import NotFoundError, PermanentConfigError, UnsupportedKindError

SERVICE_YAML = """
apiVersion: v1
kind: Service
metadata:
  name: web
  namespace: shop
spec:
  ports:
    - port: 80
"""


@pytest.fixture
def engine(registry, resolver, conf):
    return ApplyEngine(registry, resolver, conf)


class TestResource:
    """Tests for ApplyEngine.resource."""

    def test_accessors(self, engine):
        resource = engine.services("prod-a", "prod", request_timeout=5)
        assert isinstance(resource, ServiceResource)
        assert resource.request_timeout == 5
        assert engine.deployments("prod-a", "prod").KIND == "Deployment"
        assert engine.hpas("prod-a", "prod").KIND == "HorizontalPodAutoscaler"

    def test_unknown_kind_raises(self, engine):
        with pytest.raises(UnsupportedKindError):
            engine.resource("prod-a", "prod", "StatefulSet")


class TestLoadDescriptor:
    """Tests for ApplyEngine.load_descriptor."""

    def test_yaml(self):
        descriptor = ApplyEngine.load_descriptor(SERVICE_YAML)
        assert descriptor.kind == "Service"
        assert descriptor.name == "web"
        assert descriptor.namespace == "shop"
        assert descriptor.payload["spec"]["ports"] == [{"port": 80}]

    def test_namespace_defaults(self):
        descriptor = ApplyEngine.load_descriptor(
            {"payload": {"kind": "ConfigMap", "metadata": {"name": "x"}}}
        )
        assert descriptor.namespace == "default"

    @pytest.mark.parametrize("manifest", ["- a\n- b\n", "kind: [", {"payload": {"metadata": {}}}])
    def test_invalid_manifests_raise(self, manifest):
        with pytest.raises(PermanentConfigError):
            ApplyEngine.load_descriptor(manifest)


class TestApply:
    """Tests for ApplyEngine.apply."""

    def test_dispatch_by_kind(self, engine):
        result = ApplyResult(action="created", resource_version="1", object={})
        with patch.object(ServiceResource, "apply", return_value=result) as apply:
            assert engine.apply("prod-a", "prod", SERVICE_YAML) is result
        descriptor = apply.call_args[0][0]
        assert descriptor.kind == "Service"

    def test_created_through_ops(self, engine):
        ops = Mock()
        ops.read.side_effect = NotFoundError("gone")
        with patch("shipyard.resources.base.ops_for", return_value=ops):
            ops.create.return_value = {"metadata": {"name": "web", "resourceVersion": "3"}}
            result = engine.apply("prod-a", "prod", SERVICE_YAML, request_timeout=2)
        assert result.created
        assert ops.create.call_args[1] == {"_request_timeout": 2}
