import logging
from typing import Dict
from shipyard.resources.base import BaseResource

logger = logging.getLogger(__name__)

TYPE_CLUSTER_IP = "ClusterIP"
HEADLESS_CLUSTER_IP = "None"


class ServiceResource(BaseResource):
    """Kubernetes Service of an app."""

    KIND = "Service"

    def merge(self, live: Dict, desired: Dict) -> Dict:
        """Carry over addresses and ports the API server allocated.

        ClusterIP services keep their live clusterIP, other types keep the
        live nodePort of every port they still declare. Ports present only
        on the live object are not carried over.
        """
        spec = desired.setdefault("spec", {})
        live_spec = live.get("spec") or {}

        if spec.get("type", TYPE_CLUSTER_IP) == TYPE_CLUSTER_IP:
            cluster_ip = live_spec.get("clusterIP")
            if cluster_ip and cluster_ip != HEADLESS_CLUSTER_IP and not spec.get("clusterIP"):
                spec["clusterIP"] = cluster_ip
            return desired

        live_ports = {port.get("port"): port for port in live_spec.get("ports") or []}
        for port in spec.get("ports") or []:
            live_port = live_ports.get(port.get("port"))
            if live_port and live_port.get("nodePort") and not port.get("nodePort"):
                port["nodePort"] = live_port["nodePort"]
        return desired
