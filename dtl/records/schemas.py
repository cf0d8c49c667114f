"""
DTL Records - Concrete Record Types

Five record kinds, each addressed by a non-negative ``index``:

    EnqueueEntry          -- L1 -> L2 message queued on the canonical chain
    TransactionEntry      -- L2 transaction (confirmed or unconfirmed tier)
    TransactionBatchEntry -- contiguous group of transactions
    StateRootEntry        -- L2 state root (confirmed or unconfirmed tier)
    StateRootBatchEntry   -- contiguous group of state roots

A batch covers the half-open child range
``[prev_total_elements, prev_total_elements + size)``; consecutive batches
tile the child index space with no gap and no overlap.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field

from dtl.records.base import Record


# ---------------------------------------------------------------------------
# Enqueue
# ---------------------------------------------------------------------------
class EnqueueEntry(Record):
    """A queued L1 -> L2 message.

    ``ctc_index`` is the position the entry eventually takes in the canonical
    transaction chain.  It is ``None`` until known and, once assigned, is
    never reset (write-once enrichment).
    """

    target: str
    data: str
    gas_limit: int = Field(..., ge=0)
    origin: str
    block_number: int = Field(..., ge=0)
    timestamp: int = Field(..., ge=0)
    ctc_index: Optional[int] = None

    def with_ctc_index(self, ctc_index: Optional[int]) -> EnqueueEntry:
        return self.model_copy(update={"ctc_index": ctc_index})


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------
class TransactionEntry(Record):
    """An L2 transaction.

    Unconfirmed transactions have no batch yet (``batch_index`` is None).
    L1-originated transactions (``queue_origin == "l1"``) point at their
    enqueue entry via ``queue_index``; their call fields are filled from
    that entry when read as a "full" transaction.
    """

    batch_index: Optional[int] = None
    data: str = "0x"
    block_number: int = 0
    timestamp: int = 0
    gas_limit: int = 0
    target: str = ""
    origin: Optional[str] = None
    queue_origin: Literal["sequencer", "l1"] = "sequencer"
    queue_index: Optional[int] = None
    decoded: Optional[dict[str, Any]] = None
    confirmed: bool = True


class StateRootEntry(Record):
    """An L2 state root committed (or about to be committed) to L1."""

    batch_index: Optional[int] = None
    value: str
    confirmed: bool = True


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------
class BatchEntry(Record):
    """Shared shape of transaction and state-root batches."""

    block_number: int = Field(..., ge=0)
    timestamp: int = Field(..., ge=0)
    submitter: str
    size: int = Field(..., ge=0)
    root: str
    prev_total_elements: int = Field(..., ge=0)
    extra_data: str = "0x"
    l1_transaction_hash: str

    def child_range(self) -> tuple[int, int]:
        """Half-open index range of the children this batch covers."""
        return self.prev_total_elements, self.prev_total_elements + self.size


class TransactionBatchEntry(BatchEntry):
    """A batch of transactions appended to the canonical transaction chain."""


class StateRootBatchEntry(BatchEntry):
    """A batch of state roots appended to the state commitment chain."""
