"""
L1 event ingestion.

Usage:
    from dtl.ingestion import EventKind, IngestionPipeline
    pipeline = IngestionPipeline(db, client)
    await pipeline.ingest(EventKind.TRANSACTION_ENQUEUED, logs)
"""

from dtl.ingestion.handlers import HANDLERS, EventHandlerSet, EventKind, FixedEvent
from dtl.ingestion.pipeline import IngestionPipeline

__all__ = [
    "EventHandlerSet",
    "EventKind",
    "FixedEvent",
    "HANDLERS",
    "IngestionPipeline",
]
