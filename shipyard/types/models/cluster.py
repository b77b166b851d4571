from typing import Dict, Optional
from shipyard.types.base import BaseModel


class ClusterBinding(BaseModel):
    """A cluster registered for one environment.

    `group_versions` is filled during bootstrap and maps a kind to the
    GroupVersion the engine talks to for that kind.
    """

    name: str
    vendor: str
    env: str
    kubeconfig: Optional[str]
    context: Optional[str]
    local_dns: bool
    server_version: Optional[object]
    group_versions: Dict[str, object]

    @property
    def key(self):
        return (self.name, self.env)
