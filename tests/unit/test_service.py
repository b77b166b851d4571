"""Unit tests for Service merging."""

import copy
import pytest
from unittest.mock import Mock
from shipyard.resources import ServiceResource
from shipyard.types.models.workload import WorkloadDescriptor


@pytest.fixture
def services(registry, resolver, conf):
    return ServiceResource(registry, "prod-a", "prod", resolver=resolver, conf=conf)


def service(type_=None, cluster_ip=None, ports=None):
    spec = {}
    if type_:
        spec["type"] = type_
    if cluster_ip:
        spec["clusterIP"] = cluster_ip
    if ports is not None:
        spec["ports"] = ports
    return {"kind": "Service", "metadata": {"name": "web"}, "spec": spec}


class TestClusterIPMerge:
    """Tests for ClusterIP services."""

    def test_live_cluster_ip_is_kept(self, services):
        merged = services.merge(service(cluster_ip="10.0.0.12"), service())
        assert merged["spec"]["clusterIP"] == "10.0.0.12"

    def test_headless_is_not_carried(self, services):
        merged = services.merge(service(cluster_ip="None"), service())
        assert "clusterIP" not in merged["spec"]

    def test_explicit_desired_cluster_ip_wins(self, services):
        merged = services.merge(
            service(cluster_ip="10.0.0.12"), service(cluster_ip="10.0.0.99")
        )
        assert merged["spec"]["clusterIP"] == "10.0.0.99"

    def test_node_ports_are_ignored_for_cluster_ip(self, services):
        live = service(cluster_ip="10.0.0.12", ports=[{"port": 80, "nodePort": 30080}])
        merged = services.merge(live, service(ports=[{"port": 80}]))
        assert merged["spec"]["ports"] == [{"port": 80}]


class TestNodePortMerge:
    """Tests for NodePort and LoadBalancer services."""

    def test_node_port_is_kept_per_port(self, services):
        live = service(
            "NodePort",
            "10.0.0.12",
            [{"port": 80, "nodePort": 30080}, {"port": 443, "nodePort": 30443}],
        )
        desired = service("NodePort", ports=[{"port": 443}, {"port": 80}])
        merged = services.merge(live, desired)
        assert merged["spec"]["ports"] == [
            {"port": 443, "nodePort": 30443},
            {"port": 80, "nodePort": 30080},
        ]

    def test_explicit_desired_node_port_wins(self, services):
        live = service("NodePort", ports=[{"port": 80, "nodePort": 30080}])
        desired = service("NodePort", ports=[{"port": 80, "nodePort": 31000}])
        assert services.merge(live, desired)["spec"]["ports"][0]["nodePort"] == 31000

    def test_ports_only_in_live_service_are_dropped(self, services):
        live = service(
            "LoadBalancer",
            ports=[{"port": 80, "nodePort": 30080}, {"port": 9090, "nodePort": 30909}],
        )
        desired = service("LoadBalancer", ports=[{"port": 80}])
        merged = services.merge(live, desired)
        assert merged["spec"]["ports"] == [{"port": 80, "nodePort": 30080}]

    def test_cluster_ip_is_not_carried_for_other_types(self, services):
        live = service("NodePort", "10.0.0.12", [{"port": 80, "nodePort": 30080}])
        merged = services.merge(live, service("NodePort", ports=[{"port": 80}]))
        assert "clusterIP" not in merged["spec"]


class TestRepeatedApply:
    """Applying the same Service twice sends the same patch."""

    def test_node_port_service(self, services):
        services.ops = Mock()
        live = {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {"name": "web", "namespace": "shop", "resourceVersion": "3"},
            "spec": {
                "type": "NodePort",
                "clusterIP": "10.0.0.12",
                "ports": [{"port": 80, "nodePort": 30080}],
            },
        }
        services.ops.read.return_value = live
        services.ops.patch.side_effect = lambda name, namespace, body, **kwargs: body
        d = WorkloadDescriptor(
            kind="Service",
            namespace="shop",
            name="web",
            payload={"kind": "Service", "spec": {"type": "NodePort", "ports": [{"port": 80}]}},
        )

        services.apply(d)
        first = copy.deepcopy(services.ops.patch.call_args[0][2])
        # the server now holds the patched object
        services.ops.read.return_value = {**live, **first, "spec": {**live["spec"], **first["spec"]}}
        services.apply(d)
        second = services.ops.patch.call_args[0][2]

        assert second == first
        assert first["spec"]["ports"] == [{"port": 80, "nodePort": 30080}]
        assert d.payload == {"kind": "Service", "spec": {"type": "NodePort", "ports": [{"port": 80}]}}
