"""
DTL record models.

Usage:
    from dtl.records import EnqueueEntry, TransactionEntry
"""
from __future__ import annotations

from dtl.records.base import Record
from dtl.records.responses import (
    ContextResponse,
    StateRootBatchResponse,
    StateRootResponse,
    SyncingResponse,
    TransactionBatchResponse,
    TransactionResponse,
)
from dtl.records.schemas import (
    BatchEntry,
    EnqueueEntry,
    StateRootBatchEntry,
    StateRootEntry,
    TransactionBatchEntry,
    TransactionEntry,
)

__all__ = [
    "Record",
    "BatchEntry",
    "EnqueueEntry",
    "TransactionEntry",
    "TransactionBatchEntry",
    "StateRootEntry",
    "StateRootBatchEntry",
    "SyncingResponse",
    "ContextResponse",
    "TransactionResponse",
    "TransactionBatchResponse",
    "StateRootResponse",
    "StateRootBatchResponse",
]
