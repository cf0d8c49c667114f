"""Event handlers, one per ingested L1 event kind."""

from __future__ import annotations

from enum import Enum

from dtl.ingestion.handlers.base import EventHandlerSet, FixedEvent
from dtl.ingestion.handlers.state_batch_appended import handle_state_batch_appended
from dtl.ingestion.handlers.transaction_enqueued import handle_transaction_enqueued


class EventKind(str, Enum):
    TRANSACTION_ENQUEUED = "TransactionEnqueued"
    STATE_BATCH_APPENDED = "StateBatchAppended"


HANDLERS: dict[EventKind, EventHandlerSet] = {
    EventKind.TRANSACTION_ENQUEUED: handle_transaction_enqueued,
    EventKind.STATE_BATCH_APPENDED: handle_state_batch_appended,
}

__all__ = [
    "EventHandlerSet",
    "EventKind",
    "FixedEvent",
    "HANDLERS",
    "handle_state_batch_appended",
    "handle_transaction_enqueued",
]
