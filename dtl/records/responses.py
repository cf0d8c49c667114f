"""
DTL Records - Query Response Shapes

One model per route family.  Not-found outcomes are represented by ``None``
fields (and empty child lists), never by an error.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dtl.records.schemas import (
    StateRootBatchEntry,
    StateRootEntry,
    TransactionBatchEntry,
    TransactionEntry,
)


class Response(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class SyncingResponse(Response):
    syncing: bool
    current_transaction_index: int
    highest_known_transaction_index: Optional[int] = None

    def to_json_dict(self) -> dict:
        # highestKnownTransactionIndex is only reported while syncing
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ContextResponse(Response):
    block_number: Optional[int] = None
    timestamp: Optional[int] = None
    block_hash: Optional[str] = None


class TransactionResponse(Response):
    transaction: Optional[TransactionEntry] = None
    batch: Optional[TransactionBatchEntry] = None


class TransactionBatchResponse(Response):
    batch: Optional[TransactionBatchEntry] = None
    transactions: list[TransactionEntry] = []


class StateRootResponse(Response):
    state_root: Optional[StateRootEntry] = None
    batch: Optional[StateRootBatchEntry] = None


class StateRootBatchResponse(Response):
    batch: Optional[StateRootBatchEntry] = None
    state_roots: list[StateRootEntry] = []
