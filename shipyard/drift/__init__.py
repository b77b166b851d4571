from .backoff import next_delay
from .images import build_record, unexpected_images
from .store import ImageRecordStore, MemoryImageRecordStore
from .reconciler import DriftReconciler, WatchState

__all__ = [
    "next_delay",
    "build_record",
    "unexpected_images",
    "ImageRecordStore",
    "MemoryImageRecordStore",
    "DriftReconciler",
    "WatchState",
]
