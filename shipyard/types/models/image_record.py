from enum import Enum
from typing import List, Optional, Tuple
from shipyard.types.base import BaseModel


class ContainerType(str, Enum):
    INIT_CONTAINER = "init_container"
    NORMAL_CONTAINER = "normal_container"
    EPHEMERAL_CONTAINER = "ephemeral_container"


class UnexpectedImage(BaseModel):
    container_name: str
    container_type: str
    image: str


class ImageComplianceRecord(BaseModel):
    """Ledger entry for a pod running images outside the allow-list.

    Exactly one identity form is set: project/app, owner reference
    kind/name, or pod name.
    """

    cluster: str
    namespace: str
    project: Optional[str]
    app: Optional[str]
    owner_reference_kind: Optional[str]
    owner_reference_name: Optional[str]
    pod_name: Optional[str]
    image_list: List[UnexpectedImage]

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("project", None)
        kwargs.setdefault("app", None)
        kwargs.setdefault("owner_reference_kind", None)
        kwargs.setdefault("owner_reference_name", None)
        kwargs.setdefault("pod_name", None)
        kwargs.setdefault("image_list", [])
        super().__init__(**kwargs)

    @property
    def identity(self) -> Tuple[str, ...]:
        if self.project:
            return ("project", self.project, self.app or "")
        if self.owner_reference_kind or self.owner_reference_name:
            return ("owner", self.owner_reference_kind or "", self.owner_reference_name or "")
        return ("pod", self.pod_name or "")

    @property
    def key(self) -> Tuple:
        return (self.cluster, self.namespace, self.identity)
