"""Ingestion pipeline: fix -> parse -> store, per event kind.

Stages run strictly in order for a batch.  Fix and parse touch nothing in
the store, so they run outside any lock; the store stage is a critical
section per event kind, which keeps each kind single-writer.

A failure in any stage aborts the batch before anything is stored by the
failing stage, and the exception propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from dtl.chain.client import L1ChainClient
from dtl.db.transport_db import TransportDB
from dtl.ingestion.handlers import HANDLERS, EventHandlerSet, EventKind
from dtl.ingestion.handlers.base import RawEvent
from dtl.observability.metrics import MetricsCollector, get_metrics

logger = logging.getLogger(__name__)


class IngestionPipeline:

    def __init__(
        self,
        db: TransportDB,
        client: Optional[L1ChainClient] = None,
        handlers: Optional[dict[EventKind, EventHandlerSet]] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self._db = db
        self._client = client
        self._handlers = handlers if handlers is not None else HANDLERS
        self._metrics = metrics or get_metrics()
        self._store_locks: dict[EventKind, asyncio.Lock] = {
            kind: asyncio.Lock() for kind in self._handlers
        }

    async def ingest(self, kind: EventKind, raw_events: Sequence[RawEvent]) -> int:
        """Run one batch of *raw_events* through the handler for *kind*.

        Returns the number of records the store stage actually wrote;
        indices that were already stored are not counted.
        """
        handler = self._handlers.get(kind)
        if handler is None:
            raise ValueError(f"No handler registered for {kind!r}")
        if handler.requires_client and self._client is None:
            raise ValueError(f"{handler.name} ingestion needs an L1 chain client")
        if not raw_events:
            return 0

        try:
            fixed = await handler.fix_events(raw_events, self._client)
            records = handler.parse_events(fixed)
            async with self._store_locks[kind]:
                stored = await handler.store_events(records, self._db)
        except Exception as exc:
            self._metrics.record_ingestion_failure(kind.value, type(exc).__name__)
            logger.error(
                "Ingestion of %d %s events failed: %s", len(raw_events), handler.name, exc,
            )
            raise

        self._metrics.record_ingested(kind.value, stored)
        logger.info(
            "Ingested %d %s events -> %d records (%d new)",
            len(raw_events), handler.name, len(records), stored,
        )
        return stored
