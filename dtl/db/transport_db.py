"""
TransportDB -- the DTL record store.

Composes one ``IndexedRecordStore`` per kind+tier over a single RocksDB
database, plus two pieces of chain bookkeeping:

    meta:highest_l2_block    -> highest L2 block index seen (>q), monotonic
    ctc:queue:{qi:020d}      -> canonical transaction index of enqueue qi

"Full" transaction reads resolve L1-originated transactions against the
enqueue they came from, so callers always see target/data/origin/gasLimit.
"""

from __future__ import annotations

import asyncio
import logging
import os
import struct
from typing import Optional, Sequence

from rocksdict import Options, Rdict  # type: ignore[import-untyped]

from dtl.db.store import IndexedRecordStore, RecordKind, Tier
from dtl.errors import DataIntegrityError
from dtl.records.schemas import (
    EnqueueEntry,
    StateRootBatchEntry,
    StateRootEntry,
    TransactionBatchEntry,
    TransactionEntry,
)

logger = logging.getLogger(__name__)

_KEY_HIGHEST_L2_BLOCK = b"meta:highest_l2_block"
_PFX_CTC_BY_QUEUE = b"ctc:queue:"


class TransportDB:
    """Async facade over the RocksDB record store.

    Usage::

        db = TransportDB("./data/dtl.rocksdb")
        db.open()
        await db.put_enqueue_entries([...])
        latest = await db.get_latest_enqueue()
        db.close()
    """

    def __init__(self, path: str):
        self._path = path
        self._db: Optional[Rdict] = None
        self._ctc_lock = asyncio.Lock()
        self._highest_lock = asyncio.Lock()

        self.enqueues: IndexedRecordStore[EnqueueEntry]
        self.transactions: IndexedRecordStore[TransactionEntry]
        self.unconfirmed_transactions: IndexedRecordStore[TransactionEntry]
        self.transaction_batches: IndexedRecordStore[TransactionBatchEntry]
        self.state_roots: IndexedRecordStore[StateRootEntry]
        self.unconfirmed_state_roots: IndexedRecordStore[StateRootEntry]
        self.state_root_batches: IndexedRecordStore[StateRootBatchEntry]

    # -- lifecycle -----------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._db is not None

    def open(self) -> None:
        if self._db is not None:
            return
        parent = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(parent, exist_ok=True)

        opts = Options()
        opts.create_if_missing(True)
        self._db = Rdict(self._path, options=opts)

        db = self._db
        self.enqueues = IndexedRecordStore(db, RecordKind.ENQUEUE, Tier.CONFIRMED, EnqueueEntry)
        self.transactions = IndexedRecordStore(
            db, RecordKind.TRANSACTION, Tier.CONFIRMED, TransactionEntry,
        )
        self.unconfirmed_transactions = IndexedRecordStore(
            db, RecordKind.TRANSACTION, Tier.UNCONFIRMED, TransactionEntry,
        )
        self.transaction_batches = IndexedRecordStore(
            db, RecordKind.TRANSACTION_BATCH, Tier.CONFIRMED, TransactionBatchEntry,
        )
        self.state_roots = IndexedRecordStore(
            db, RecordKind.STATE_ROOT, Tier.CONFIRMED, StateRootEntry,
        )
        self.unconfirmed_state_roots = IndexedRecordStore(
            db, RecordKind.STATE_ROOT, Tier.UNCONFIRMED, StateRootEntry,
        )
        self.state_root_batches = IndexedRecordStore(
            db, RecordKind.STATE_ROOT_BATCH, Tier.CONFIRMED, StateRootBatchEntry,
        )
        logger.info("TransportDB opened at %s", self._path)

    def close(self) -> None:
        if self._db is None:
            return
        self._db.close()
        self._db = None
        logger.info("TransportDB closed")

    def _require_open(self) -> Rdict:
        if self._db is None:
            raise RuntimeError("TransportDB is not open")
        return self._db

    def tier(self, kind: RecordKind, tier: Tier = Tier.CONFIRMED) -> IndexedRecordStore:
        """Look up the store for *kind* in *tier*."""
        self._require_open()
        stores = {
            (RecordKind.ENQUEUE, Tier.CONFIRMED): self.enqueues,
            (RecordKind.TRANSACTION, Tier.CONFIRMED): self.transactions,
            (RecordKind.TRANSACTION, Tier.UNCONFIRMED): self.unconfirmed_transactions,
            (RecordKind.TRANSACTION_BATCH, Tier.CONFIRMED): self.transaction_batches,
            (RecordKind.STATE_ROOT, Tier.CONFIRMED): self.state_roots,
            (RecordKind.STATE_ROOT, Tier.UNCONFIRMED): self.unconfirmed_state_roots,
            (RecordKind.STATE_ROOT_BATCH, Tier.CONFIRMED): self.state_root_batches,
        }
        try:
            return stores[(kind, tier)]
        except KeyError:
            raise ValueError(f"No {tier.value} tier for {kind.value}") from None

    # -- writes --------------------------------------------------------------

    async def put_enqueue_entries(self, entries: Sequence[EnqueueEntry]) -> int:
        return await self.enqueues.put_entries(entries)

    async def put_transaction_entries(self, entries: Sequence[TransactionEntry]) -> int:
        return await self.transactions.put_entries(entries)

    async def put_unconfirmed_transaction_entries(
        self, entries: Sequence[TransactionEntry],
    ) -> int:
        return await self.unconfirmed_transactions.put_entries(entries)

    async def put_transaction_batch_entries(
        self, entries: Sequence[TransactionBatchEntry],
    ) -> int:
        return await self.transaction_batches.put_entries(entries)

    async def put_state_root_entries(self, entries: Sequence[StateRootEntry]) -> int:
        return await self.state_roots.put_entries(entries)

    async def put_unconfirmed_state_root_entries(
        self, entries: Sequence[StateRootEntry],
    ) -> int:
        return await self.unconfirmed_state_roots.put_entries(entries)

    async def put_state_root_batch_entries(
        self, entries: Sequence[StateRootBatchEntry],
    ) -> int:
        return await self.state_root_batches.put_entries(entries)

    async def put_highest_l2_block_number(self, block_number: int) -> None:
        """Record the highest known L2 block.  Lower values are ignored."""
        db = self._require_open()
        async with self._highest_lock:
            current = await self.get_highest_l2_block_number()
            if current is not None and block_number <= current:
                return
            await asyncio.to_thread(
                db.__setitem__, _KEY_HIGHEST_L2_BLOCK, struct.pack(">q", block_number),
            )

    async def put_transaction_index_by_queue_index(
        self, queue_index: int, transaction_index: int,
    ) -> None:
        """Assign the canonical transaction index of an enqueue (write-once).

        Re-assigning the same value is a no-op; a different value raises
        ``DataIntegrityError``.
        """
        db = self._require_open()
        key = _PFX_CTC_BY_QUEUE + f"{queue_index:020d}".encode()
        async with self._ctc_lock:
            raw = await asyncio.to_thread(db.get, key)
            if raw is not None:
                existing = struct.unpack(">q", raw)[0]
                if existing == transaction_index:
                    return
                raise DataIntegrityError(
                    f"ctcIndex for queue index {queue_index} already set to "
                    f"{existing}, refusing to change it to {transaction_index}"
                )
            await asyncio.to_thread(
                db.__setitem__, key, struct.pack(">q", transaction_index),
            )

    # -- plain reads ---------------------------------------------------------

    async def get_highest_l2_block_number(self) -> Optional[int]:
        db = self._require_open()
        raw = await asyncio.to_thread(db.get, _KEY_HIGHEST_L2_BLOCK)
        if raw is None:
            return None
        return struct.unpack(">q", raw)[0]

    async def get_transaction_index_by_queue_index(self, queue_index: int) -> Optional[int]:
        db = self._require_open()
        raw = await asyncio.to_thread(db.get, _PFX_CTC_BY_QUEUE + f"{queue_index:020d}".encode())
        if raw is None:
            return None
        return struct.unpack(">q", raw)[0]

    async def get_enqueue_by_index(self, index: int) -> Optional[EnqueueEntry]:
        return await self.enqueues.get_by_index(index)

    async def get_latest_enqueue(self) -> Optional[EnqueueEntry]:
        return await self.enqueues.get_latest()

    async def get_latest_transaction(self) -> Optional[TransactionEntry]:
        return await self.transactions.get_latest()

    async def get_transaction_batch_by_index(self, index: int) -> Optional[TransactionBatchEntry]:
        return await self.transaction_batches.get_by_index(index)

    async def get_latest_transaction_batch(self) -> Optional[TransactionBatchEntry]:
        return await self.transaction_batches.get_latest()

    async def get_latest_state_root(self) -> Optional[StateRootEntry]:
        return await self.state_roots.get_latest()

    async def get_state_roots_by_index_range(self, start: int, end: int) -> list[StateRootEntry]:
        return await self.state_roots.get_range_by_index(start, end)

    async def get_state_root_batch_by_index(self, index: int) -> Optional[StateRootBatchEntry]:
        return await self.state_root_batches.get_by_index(index)

    async def get_latest_state_root_batch(self) -> Optional[StateRootBatchEntry]:
        return await self.state_root_batches.get_latest()

    # -- full transaction reads ----------------------------------------------

    async def get_full_transaction_by_index(self, index: int) -> Optional[TransactionEntry]:
        return await self._fill(await self.transactions.get_by_index(index))

    async def get_latest_full_transaction(self) -> Optional[TransactionEntry]:
        return await self._fill(await self.transactions.get_latest())

    async def get_full_unconfirmed_transaction_by_index(
        self, index: int,
    ) -> Optional[TransactionEntry]:
        return await self._fill(await self.unconfirmed_transactions.get_by_index(index))

    async def get_latest_full_unconfirmed_transaction(self) -> Optional[TransactionEntry]:
        return await self._fill(await self.unconfirmed_transactions.get_latest())

    async def get_full_transactions_by_index_range(
        self, start: int, end: int,
    ) -> list[TransactionEntry]:
        transactions = await self.transactions.get_range_by_index(start, end)
        return [await self._fill(tx) for tx in transactions]

    async def _fill(self, transaction: Optional[TransactionEntry]) -> Optional[TransactionEntry]:
        """Copy call fields from the originating enqueue for L1 transactions."""
        if transaction is None:
            return None
        if transaction.queue_origin != "l1" or transaction.queue_index is None:
            return transaction

        enqueue = await self.enqueues.get_by_index(transaction.queue_index)
        if enqueue is None:
            raise DataIntegrityError(
                f"Transaction {transaction.index} references missing enqueue "
                f"{transaction.queue_index}"
            )
        return transaction.model_copy(update={
            "target": enqueue.target,
            "data": enqueue.data,
            "origin": enqueue.origin,
            "gas_limit": enqueue.gas_limit,
            "block_number": enqueue.block_number,
            "timestamp": enqueue.timestamp,
        })
