"""
Confirmed / unconfirmed merge.

Transactions and state roots live in two tiers.  A query reads both and keeps
the candidate with the higher index:

- a confirmed record at index i always wins over an unconfirmed one at i;
- an unconfirmed record ahead of the confirmed frontier is visible, but only
  when unconfirmed visibility is switched on.

The rule lives in ``merge_by_index_precedence`` and nowhere else.
"""

from __future__ import annotations

from typing import Optional, TypeVar

from dtl.db.store import RecordKind, Tier
from dtl.db.transport_db import TransportDB
from dtl.records.base import Record
from dtl.records.schemas import StateRootEntry, TransactionEntry

R = TypeVar("R", bound=Record)

MERGEABLE_KINDS = (RecordKind.TRANSACTION, RecordKind.STATE_ROOT)


def merge_by_index_precedence(confirmed: Optional[R], unconfirmed: Optional[R]) -> Optional[R]:
    """Return *unconfirmed* only if it is strictly ahead of *confirmed*."""
    if unconfirmed is not None and (confirmed is None or unconfirmed.index > confirmed.index):
        return unconfirmed
    return confirmed


class ConfirmationMergeResolver:
    """Serves the merged view of transactions and state roots."""

    def __init__(self, db: TransportDB, show_unconfirmed: bool = False):
        self._db = db
        self._show_unconfirmed = show_unconfirmed

    @staticmethod
    def _check_kind(kind: RecordKind) -> None:
        if kind not in MERGEABLE_KINDS:
            raise ValueError(f"{kind.value} has no unconfirmed tier")

    async def resolve_latest(self, kind: RecordKind) -> Optional[TransactionEntry | StateRootEntry]:
        self._check_kind(kind)
        if kind is RecordKind.TRANSACTION:
            confirmed = await self._db.get_latest_full_transaction()
            if not self._show_unconfirmed:
                return confirmed
            unconfirmed = await self._db.get_latest_full_unconfirmed_transaction()
        else:
            confirmed = await self._db.tier(kind).get_latest()
            if not self._show_unconfirmed:
                return confirmed
            unconfirmed = await self._db.tier(kind, Tier.UNCONFIRMED).get_latest()
        return merge_by_index_precedence(confirmed, unconfirmed)

    async def resolve_by_index(
        self, kind: RecordKind, index: int,
    ) -> Optional[TransactionEntry | StateRootEntry]:
        self._check_kind(kind)
        if kind is RecordKind.TRANSACTION:
            confirmed = await self._db.get_full_transaction_by_index(index)
            if not self._show_unconfirmed:
                return confirmed
            unconfirmed = await self._db.get_full_unconfirmed_transaction_by_index(index)
        else:
            confirmed = await self._db.tier(kind).get_by_index(index)
            if not self._show_unconfirmed:
                return confirmed
            unconfirmed = await self._db.tier(kind, Tier.UNCONFIRMED).get_by_index(index)
        return merge_by_index_precedence(confirmed, unconfirmed)
