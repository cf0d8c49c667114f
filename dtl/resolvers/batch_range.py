"""Batch reconstruction: a batch plus the contiguous children it covers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from dtl.db.store import RecordKind
from dtl.db.transport_db import TransportDB
from dtl.errors import DataIntegrityError
from dtl.records.base import Record
from dtl.records.schemas import BatchEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchWithChildren:
    batch: Optional[BatchEntry] = None
    children: list[Record] = field(default_factory=list)


class BatchRangeResolver:
    """Resolves ``[prevTotalElements, prevTotalElements + size)`` for a batch.

    The store guarantees batches tile the child index space; this resolver
    relies on that and only checks that the declared size was actually
    delivered.  A short range is reported, never truncated silently.
    """

    def __init__(self, db: TransportDB):
        self._db = db

    async def resolve_batch_with_children(
        self, kind: RecordKind, index: Optional[int] = None,
    ) -> BatchWithChildren:
        """Fetch batch *index* (latest when None) of *kind* with its children."""
        if kind is RecordKind.TRANSACTION_BATCH:
            batches = self._db.transaction_batches
        elif kind is RecordKind.STATE_ROOT_BATCH:
            batches = self._db.state_root_batches
        else:
            raise ValueError(f"{kind.value} is not a batch kind")

        batch = await (batches.get_latest() if index is None else batches.get_by_index(index))
        if batch is None:
            return BatchWithChildren()

        start, end = batch.child_range()
        if kind is RecordKind.TRANSACTION_BATCH:
            children = await self._db.get_full_transactions_by_index_range(start, end)
        else:
            children = await self._db.get_state_roots_by_index_range(start, end)

        if len(children) != batch.size:
            logger.error(
                "%s %d declares %d children in [%d, %d) but store returned %d",
                kind.value, batch.index, batch.size, start, end, len(children),
            )
            raise DataIntegrityError(
                f"{kind.value} {batch.index} declares {batch.size} children, "
                f"found {len(children)} in [{start}, {end})"
            )
        return BatchWithChildren(batch=batch, children=children)
