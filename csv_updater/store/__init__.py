"""Record stores: the storage the importer loads records from and saves them to."""

from .base import Record, RecordStore
from .memory import InMemoryRecordStore

__all__ = [
    "Record",
    "RecordStore",
    "InMemoryRecordStore",
]
