import logging
from typing import Dict, List, Tuple
from shipyard.types.models.image_record import ImageComplianceRecord

logger = logging.getLogger(__name__)


class ImageRecordStore:
    """Persistence of the compliance ledger.

    Records are keyed by cluster, namespace and identity. Implementations
    raise on failure; the reconciler logs and alerts.
    """

    def upsert(self, record: ImageComplianceRecord) -> None:
        raise NotImplementedError()

    def delete(self, record: ImageComplianceRecord) -> None:
        raise NotImplementedError()


class MemoryImageRecordStore(ImageRecordStore):
    """Ledger kept in process memory."""

    _records: Dict[Tuple, ImageComplianceRecord]

    def __init__(self) -> None:
        self._records = {}

    def upsert(self, record: ImageComplianceRecord) -> None:
        self._records[record.key] = record

    def delete(self, record: ImageComplianceRecord) -> None:
        self._records.pop(record.key, None)

    def get(self, record: ImageComplianceRecord) -> ImageComplianceRecord:
        return self._records.get(record.key)

    def records(self, cluster: str = None) -> List[ImageComplianceRecord]:
        return [
            record
            for record in self._records.values()
            if cluster is None or record.cluster == cluster
        ]

    def __len__(self) -> int:
        return len(self._records)
