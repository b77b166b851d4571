from typing import Any, Dict, Optional
from shipyard.types.base import BaseModel

ACTION_CREATED = "created"
ACTION_PATCHED = "patched"


class WorkloadDescriptor(BaseModel):
    """Desired state of one workload object."""

    kind: str
    namespace: str
    name: str
    payload: Dict[str, Any]


class ApplyResult(BaseModel):
    """Outcome of an apply call."""

    action: str
    resource_version: Optional[str]
    object: Dict[str, Any]

    @property
    def created(self) -> bool:
        return self.action == ACTION_CREATED
