"""Sync status: how far ingestion lags behind the highest known L2 block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dtl.db.transport_db import TransportDB


@dataclass(frozen=True, slots=True)
class SyncStatus:
    syncing: bool
    current_index: int
    highest_known_index: Optional[int] = None


class SyncStatusResolver:
    """Pure read over the store; safe to run alongside ingestion writes."""

    def __init__(self, db: TransportDB):
        self._db = db

    async def resolve_sync_status(self) -> SyncStatus:
        highest = await self._db.get_highest_l2_block_number()
        latest = await self._db.get_latest_transaction()

        if latest is None:
            if highest is None:
                return SyncStatus(syncing=False, current_index=0)
            return SyncStatus(syncing=True, current_index=0, highest_known_index=highest)

        if highest is not None and highest > latest.index:
            return SyncStatus(
                syncing=True, current_index=latest.index, highest_known_index=highest,
            )
        return SyncStatus(syncing=False, current_index=latest.index)
