"""
Indexed record store over RocksDB.

One ``IndexedRecordStore`` holds one tier of one record kind inside a shared
RocksDB database (via rocksdict).  Key prefixes simulate column families:

    {prefix}:{index:020d}    -> JSON record (camelCase)
    meta:latest:{prefix}     -> latest stored index (>q)

Rules:
- Append-only: a record at an index that already exists is never
  overwritten.  Re-putting it is a logged no-op.
- All-or-nothing: one ``put_entries`` call commits as a single WriteBatch.
- Single writer per tier: ``put_entries`` runs under a per-tier
  ``asyncio.Lock``.  Reads take no lock; they may observe a slightly stale
  but monotonically advancing view.
- The latest-index pointer only ever moves forward.
"""

from __future__ import annotations

import asyncio
import logging
import struct
from enum import Enum
from typing import Generic, Optional, Sequence, TypeVar

from rocksdict import Rdict, WriteBatch  # type: ignore[import-untyped]

from dtl.records.base import Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class RecordKind(str, Enum):
    ENQUEUE = "enqueue"
    TRANSACTION = "transaction"
    TRANSACTION_BATCH = "batch:transaction"
    STATE_ROOT = "stateroot"
    STATE_ROOT_BATCH = "batch:stateroot"


class Tier(str, Enum):
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


_PFX_META_LATEST = b"meta:latest:"


class IndexedRecordStore(Generic[R]):
    """Append-only, index-addressable storage for one kind+tier."""

    def __init__(self, db: Rdict, kind: RecordKind, tier: Tier, model: type[R]):
        self._db = db
        self._kind = kind
        self._tier = tier
        self._model = model
        self._lock = asyncio.Lock()

        name = kind.value if tier is Tier.CONFIRMED else f"unconfirmed:{kind.value}"
        self._prefix = name.encode("utf-8") + b":"
        self._latest_key = _PFX_META_LATEST + name.encode("utf-8")

    @property
    def kind(self) -> RecordKind:
        return self._kind

    @property
    def tier(self) -> Tier:
        return self._tier

    # -- key helpers ---------------------------------------------------------

    def _key(self, index: int) -> bytes:
        return self._prefix + f"{index:020d}".encode()

    def _read_latest_index(self) -> Optional[int]:
        raw = self._db.get(self._latest_key)
        if raw is None:
            return None
        return struct.unpack(">q", raw)[0]

    def _read(self, index: int) -> Optional[R]:
        raw = self._db.get(self._key(index))
        if raw is None:
            return None
        return self._model.from_bytes(raw)

    def _read_range(self, start: int, end: int) -> list[R]:
        results: list[R] = []
        for index in range(start, end):
            entry = self._read(index)
            if entry is not None:
                results.append(entry)
        return results

    def _write(self, entries: Sequence[R]) -> int:
        # Records and the latest pointer land in one WriteBatch, so a batch
        # is either stored whole or not at all.
        batch = WriteBatch()
        staged: set[int] = set()
        latest = self._read_latest_index()
        for entry in entries:
            key = self._key(entry.index)
            if entry.index in staged or self._db.get(key) is not None:
                logger.debug(
                    "Skipping %s index=%d (already stored)", self._prefix.decode(), entry.index,
                )
                continue
            batch.put(key, entry.to_bytes())
            staged.add(entry.index)
            if latest is None or entry.index > latest:
                latest = entry.index
        if not staged:
            return 0
        batch.put(self._latest_key, struct.pack(">q", latest))
        self._db.write(batch)
        return len(staged)

    # -- public async API ----------------------------------------------------

    async def get_latest(self) -> Optional[R]:
        latest = await asyncio.to_thread(self._read_latest_index)
        if latest is None:
            return None
        return await self.get_by_index(latest)

    async def get_by_index(self, index: int) -> Optional[R]:
        return await asyncio.to_thread(self._read, index)

    async def get_range_by_index(self, start: int, end: int) -> list[R]:
        """Records with ``start <= index < end`` in index order."""
        if end <= start:
            return []
        return await asyncio.to_thread(self._read_range, start, end)

    async def put_entries(self, entries: Sequence[R]) -> int:
        """Store *entries*, skipping indices already present.

        Returns the number of records actually written.
        """
        if not entries:
            return 0
        for entry in entries:
            if not isinstance(entry, self._model):
                raise TypeError(
                    f"{self._prefix.decode()} expects {self._model.__name__}, "
                    f"got {type(entry).__name__}"
                )
        async with self._lock:
            written = await asyncio.to_thread(self._write, entries)
        logger.debug(
            "Stored %d/%d %s records", written, len(entries), self._prefix.decode(),
        )
        return written
