"""
Route-level queries.

Each method answers one route family of the query API and returns a response
model (or ``None`` for a missing enqueue).  Nothing here knows about HTTP.
"""

from __future__ import annotations

from typing import Optional

from dtl.chain.client import BlockContext, L1ChainClient
from dtl.db.store import RecordKind
from dtl.db.transport_db import TransportDB
from dtl.errors import ValidationError
from dtl.records import (
    ContextResponse,
    EnqueueEntry,
    StateRootBatchResponse,
    StateRootResponse,
    SyncingResponse,
    TransactionBatchResponse,
    TransactionResponse,
)
from dtl.resolvers import (
    BatchRangeResolver,
    ConfirmationMergeResolver,
    ContextResolver,
    SyncStatusResolver,
)
from dtl.utils.numbers import parse_uint


def parse_index_param(value: Optional[str], name: str = "index") -> int:
    """Path parameter -> non-negative int, decimal or 0x-hex."""
    try:
        return parse_uint(value)
    except ValueError as exc:
        raise ValidationError(f"invalid {name} {value!r}: {exc}") from exc


def _context(block: Optional[BlockContext]) -> ContextResponse:
    if block is None:
        return ContextResponse()
    return ContextResponse(
        block_number=block.number, timestamp=block.timestamp, block_hash=block.hash,
    )


class TransportQueries:

    def __init__(
        self,
        db: TransportDB,
        client: L1ChainClient,
        confirmations: int = 0,
        show_unconfirmed: bool = False,
    ):
        self._db = db
        self._sync = SyncStatusResolver(db)
        self._merge = ConfirmationMergeResolver(db, show_unconfirmed)
        self._batches = BatchRangeResolver(db)
        self._context = ContextResolver(client, confirmations)

    # -- /eth ----------------------------------------------------------------

    async def syncing(self) -> SyncingResponse:
        status = await self._sync.resolve_sync_status()
        return SyncingResponse(
            syncing=status.syncing,
            current_transaction_index=status.current_index,
            highest_known_transaction_index=status.highest_known_index,
        )

    async def latest_context(self) -> ContextResponse:
        return _context(await self._context.resolve_latest_context())

    async def context_by_number(self, number: int) -> ContextResponse:
        return _context(await self._context.resolve_context_by_number(number))

    # -- /enqueue ------------------------------------------------------------

    async def enqueue(self, index: Optional[int] = None) -> Optional[EnqueueEntry]:
        if index is None:
            entry = await self._db.get_latest_enqueue()
        else:
            entry = await self._db.get_enqueue_by_index(index)
        if entry is None:
            return None
        ctc_index = await self._db.get_transaction_index_by_queue_index(entry.index)
        return entry.with_ctc_index(ctc_index)

    # -- /transaction, /stateroot --------------------------------------------

    async def transaction(self, index: Optional[int] = None) -> TransactionResponse:
        if index is None:
            tx = await self._merge.resolve_latest(RecordKind.TRANSACTION)
        else:
            tx = await self._merge.resolve_by_index(RecordKind.TRANSACTION, index)
        if tx is None:
            return TransactionResponse()
        batch = None
        if tx.batch_index is not None:
            batch = await self._db.get_transaction_batch_by_index(tx.batch_index)
        return TransactionResponse(transaction=tx, batch=batch)

    async def state_root(self, index: Optional[int] = None) -> StateRootResponse:
        if index is None:
            root = await self._merge.resolve_latest(RecordKind.STATE_ROOT)
        else:
            root = await self._merge.resolve_by_index(RecordKind.STATE_ROOT, index)
        if root is None:
            return StateRootResponse()
        batch = None
        if root.batch_index is not None:
            batch = await self._db.get_state_root_batch_by_index(root.batch_index)
        return StateRootResponse(state_root=root, batch=batch)

    # -- /batch --------------------------------------------------------------

    async def transaction_batch(self, index: Optional[int] = None) -> TransactionBatchResponse:
        result = await self._batches.resolve_batch_with_children(
            RecordKind.TRANSACTION_BATCH, index,
        )
        return TransactionBatchResponse(batch=result.batch, transactions=result.children)

    async def state_root_batch(self, index: Optional[int] = None) -> StateRootBatchResponse:
        result = await self._batches.resolve_batch_with_children(
            RecordKind.STATE_ROOT_BATCH, index,
        )
        return StateRootBatchResponse(batch=result.batch, state_roots=result.children)
