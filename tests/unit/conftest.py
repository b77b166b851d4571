"""Shared fixtures for unit tests."""

import pytest
from unittest.mock import Mock
from shipyard.clusters import ClusterHandle, ClusterRegistry, GroupVersionResolver
from shipyard.common.models.group_version import GroupVersion
from shipyard.common.models.version import ServerVersion
from shipyard.sensors.base import EngineSensor
from shipyard.types.models.cluster import ClusterBinding
from shipyard.types.settings import Settings


def build_binding(name="prod-a", env="prod", major="1", minor="20", group_versions=None):
    """Build a bootstrapped binding without talking to a cluster."""
    table = {
        "Deployment": GroupVersion.parse("apps/v1"),
        "ReplicaSet": GroupVersion.parse("apps/v1"),
        "Service": GroupVersion.parse("v1"),
        "ConfigMap": GroupVersion.parse("v1"),
        "Pod": GroupVersion.parse("v1"),
        "CronJob": GroupVersion.parse("batch/v1"),
        "Job": GroupVersion.parse("batch/v1"),
        "HorizontalPodAutoscaler": GroupVersion.parse("autoscaling/v1"),
    }
    table.update(group_versions or {})
    return ClusterBinding(
        name=name,
        vendor="aliyun",
        env=env,
        kubeconfig=None,
        context=None,
        local_dns=False,
        server_version=ServerVersion(major, minor),
        group_versions=table,
    )


@pytest.fixture
def api_client():
    """A mocked ApiClient whose serialization passes objects through."""
    api_client = Mock()
    api_client.sanitize_for_serialization.side_effect = lambda obj: obj
    return api_client


@pytest.fixture
def binding():
    return build_binding()


@pytest.fixture
def registry(binding, api_client):
    return ClusterRegistry([ClusterHandle(binding, api_client)])


@pytest.fixture
def resolver(registry):
    return GroupVersionResolver(registry)


@pytest.fixture
def conf():
    return Settings(
        image_allowed_prefixes=["registry.example.com"],
        watch_backoff_cap_seconds=15,
        watch_timeout_seconds=5,
        delete_propagation_policy="Foreground",
    )


@pytest.fixture
def sensor():
    return Mock(spec=EngineSensor)


@pytest.fixture
def make_binding():
    return build_binding
