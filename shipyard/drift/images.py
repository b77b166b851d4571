from typing import Dict, Iterable, List, Sequence
from shipyard.common.models.labels import ResourceLabels
from shipyard.types.models.image_record import (
    ContainerType,
    ImageComplianceRecord,
    UnexpectedImage,
)
from shipyard.utils.helpers import deep_get

#: Pod spec key for each container type, in scan order
CONTAINER_FIELDS = (
    ("initContainers", ContainerType.INIT_CONTAINER),
    ("containers", ContainerType.NORMAL_CONTAINER),
    ("ephemeralContainers", ContainerType.EPHEMERAL_CONTAINER),
)


def is_allowed(image: str, allowed_prefixes: Iterable[str]) -> bool:
    return any(image.startswith(prefix) for prefix in allowed_prefixes)


def unexpected_images(pod: Dict, allowed_prefixes: Sequence[str]) -> List[UnexpectedImage]:
    """Containers of a pod whose image comes from outside the allow-list."""
    images = []
    for field, container_type in CONTAINER_FIELDS:
        for container in deep_get(pod, "spec", field, default=[]):
            image = container.get("image") or ""
            if is_allowed(image, allowed_prefixes):
                continue
            images.append(
                UnexpectedImage(
                    container_name=container.get("name"),
                    container_type=container_type.value,
                    image=image,
                )
            )
    return images


def build_record(
    cluster: str, pod: Dict, images: List[UnexpectedImage] = None
) -> ImageComplianceRecord:
    """Ledger record for a pod.

    The record is identified by the pod's project/app labels when set,
    else by its first owner reference, else by the pod name.
    """
    metadata = pod.get("metadata") or {}
    labels = metadata.get("labels") or {}
    owners = metadata.get("ownerReferences") or []

    identity = {}
    if labels.get(ResourceLabels.PROJECT_LABEL):
        identity["project"] = labels[ResourceLabels.PROJECT_LABEL]
        identity["app"] = labels.get(ResourceLabels.APP_LABEL)
    elif owners:
        identity["owner_reference_kind"] = owners[0].get("kind")
        identity["owner_reference_name"] = owners[0].get("name")
    else:
        identity["pod_name"] = metadata.get("name")

    return ImageComplianceRecord(
        cluster=cluster,
        namespace=metadata.get("namespace"),
        image_list=list(images or []),
        **identity,
    )
