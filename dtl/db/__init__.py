"""DTL storage layer (RocksDB via rocksdict)."""

from dtl.db.store import IndexedRecordStore, RecordKind, Tier
from dtl.db.transport_db import TransportDB

__all__ = ["IndexedRecordStore", "RecordKind", "Tier", "TransportDB"]
