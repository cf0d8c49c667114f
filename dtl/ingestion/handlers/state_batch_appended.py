"""StateBatchAppended -> StateRootBatchEntry + StateRootEntry children.

The event only carries the batch header; the roots themselves are in the
calldata of the ``appendStateBatch(bytes32[],uint256)`` call that emitted it.
The fix stage fetches that transaction and its block from L1 and decodes the
roots into ``extra_data``.  Parsing fans each event out into one batch record
followed by ``_batchSize`` state-root records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from eth_abi import decode as abi_decode
from web3 import Web3

from dtl.chain.client import L1ChainClient
from dtl.db.transport_db import TransportDB
from dtl.errors import EventParseError
from dtl.ingestion.handlers.base import (
    EventHandlerSet,
    FixedEvent,
    RawEvent,
    block_number_of,
    hex_arg,
    index_arg,
    to_hex,
    uint_arg,
)
from dtl.records.base import MAX_INDEX, Record
from dtl.records.schemas import StateRootBatchEntry, StateRootEntry

logger = logging.getLogger(__name__)

APPEND_STATE_BATCH_SELECTOR = Web3.keccak(text="appendStateBatch(bytes32[],uint256)")[:4]


@dataclass(frozen=True, slots=True)
class StateBatchExtraData:
    timestamp: int
    block_number: int
    submitter: str
    l1_transaction_hash: str
    state_roots: tuple[str, ...]


def decode_state_roots(calldata: str) -> tuple[str, ...]:
    try:
        raw = bytes.fromhex(calldata[2:] if calldata.startswith("0x") else calldata)
    except (AttributeError, TypeError, ValueError) as exc:
        raise EventParseError(f"calldata is not hex: {calldata!r}") from exc
    if raw[:4] != APPEND_STATE_BATCH_SELECTOR:
        raise EventParseError(
            f"calldata selector 0x{raw[:4].hex()} is not appendStateBatch"
        )
    try:
        roots, _should_start_at = abi_decode(["bytes32[]", "uint256"], raw[4:])
    except Exception as exc:
        raise EventParseError(f"cannot decode appendStateBatch calldata: {exc}") from exc
    return tuple("0x" + bytes(root).hex() for root in roots)


async def fix_events(
    events: Sequence[RawEvent], client: L1ChainClient,
) -> list[FixedEvent]:
    fixed = []
    for event in events:
        tx_hash = event.get("transactionHash")
        if tx_hash is None:
            raise EventParseError("StateBatchAppended event has no transactionHash")
        tx_hash = to_hex(tx_hash, "transactionHash")

        tx = await client.get_transaction(tx_hash)
        block = await client.get_block_by_number(block_number_of(event))
        fixed.append(FixedEvent(
            event=event,
            extra_data=StateBatchExtraData(
                timestamp=block.timestamp,
                block_number=block.number,
                submitter=tx["from"],
                l1_transaction_hash=tx_hash,
                state_roots=decode_state_roots(tx["input"]),
            ),
        ))
    return fixed


def parse_events(fixed_events: Sequence[FixedEvent]) -> list[Record]:
    records: list[Record] = []
    for fixed in fixed_events:
        event, extra = fixed.event, fixed.extra_data
        if not isinstance(extra, StateBatchExtraData):
            raise EventParseError("StateBatchAppended event was not fixed")

        batch = StateRootBatchEntry(
            index=index_arg(event, "_batchIndex"),
            block_number=extra.block_number,
            timestamp=extra.timestamp,
            submitter=extra.submitter,
            size=uint_arg(event, "_batchSize"),
            root=hex_arg(event, "_batchRoot"),
            prev_total_elements=index_arg(event, "_prevTotalElements"),
            extra_data=hex_arg(event, "_extraData"),
            l1_transaction_hash=extra.l1_transaction_hash,
        )
        if len(extra.state_roots) != batch.size:
            raise EventParseError(
                f"state batch {batch.index} declares {batch.size} roots, "
                f"calldata carries {len(extra.state_roots)}"
            )
        if batch.prev_total_elements + batch.size - 1 > MAX_INDEX:
            raise EventParseError(
                f"state batch {batch.index} runs past the index range"
            )

        records.append(batch)
        records.extend(
            StateRootEntry(
                index=batch.prev_total_elements + offset,
                batch_index=batch.index,
                value=root,
                confirmed=True,
            )
            for offset, root in enumerate(extra.state_roots)
        )
    return records


async def store_events(records: Sequence[Record], db: TransportDB) -> int:
    batches = [r for r in records if isinstance(r, StateRootBatchEntry)]
    state_roots = [r for r in records if isinstance(r, StateRootEntry)]
    # Roots before batches: a visible batch must always find its children.
    written = await db.put_state_root_entries(state_roots)
    written += await db.put_state_root_batch_entries(batches)
    return written


handle_state_batch_appended = EventHandlerSet(
    name="StateBatchAppended",
    fix_events=fix_events,
    parse_events=parse_events,
    store_events=store_events,
    requires_client=True,
)
