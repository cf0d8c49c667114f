"""TransactionEnqueued -> EnqueueEntry.

One event, one entry.  No extra context is needed, so the fix stage passes
events through with ``extra_data=None``.  ``ctc_index`` starts out null; it
is assigned later, once the entry lands in the canonical transaction chain.
"""

from __future__ import annotations

from typing import Any, Sequence

from dtl.db.transport_db import TransportDB
from dtl.ingestion.handlers.base import (
    EventHandlerSet,
    FixedEvent,
    RawEvent,
    address_arg,
    block_number_of,
    hex_arg,
    index_arg,
    uint_arg,
)
from dtl.records.schemas import EnqueueEntry


async def fix_events(events: Sequence[RawEvent], client: Any = None) -> list[FixedEvent]:
    return [FixedEvent(event=event, extra_data=None) for event in events]


def parse_events(fixed_events: Sequence[FixedEvent]) -> list[EnqueueEntry]:
    entries = []
    for fixed in fixed_events:
        event = fixed.event
        entries.append(EnqueueEntry(
            index=index_arg(event, "_queueIndex"),
            target=address_arg(event, "_target"),
            data=hex_arg(event, "_data"),
            gas_limit=uint_arg(event, "_gasLimit"),
            origin=address_arg(event, "_l1TxOrigin"),
            block_number=block_number_of(event),
            timestamp=uint_arg(event, "_timestamp"),
            ctc_index=None,
        ))
    return entries


async def store_events(entries: Sequence[EnqueueEntry], db: TransportDB) -> int:
    return await db.put_enqueue_entries(entries)


handle_transaction_enqueued = EventHandlerSet(
    name="TransactionEnqueued",
    fix_events=fix_events,
    parse_events=parse_events,
    store_events=store_events,
)
