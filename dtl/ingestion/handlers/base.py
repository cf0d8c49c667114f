"""
Event handler contract.

Every L1 event kind the DTL ingests is handled by one ``EventHandlerSet``:
a record of three stages that always run in this order.

    fix_events(raw_events, client) -> list[FixedEvent]
        Normalize raw logs and attach whatever extra context parsing needs.
        May call the L1 client; never touches the store.

    parse_events(fixed_events) -> list[Record]
        Pure and total: pull typed fields out of each event.  Any missing or
        malformed argument raises ``EventParseError`` and fails the whole
        batch -- a silently dropped event would leave a gap in the index.

    store_events(records, db) -> int
        Batched insert into the store.  Re-storing an index is a no-op.
        Returns the number of records actually written.

Handlers are plain records, not subclasses; the pipeline picks one by
``EventKind``.  A handler whose fix stage talks to L1 sets
``requires_client``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

from dtl.errors import EventParseError
from dtl.records.base import MAX_INDEX
from dtl.utils.numbers import parse_uint

RawEvent = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class FixedEvent:
    event: RawEvent
    extra_data: Any = None


@dataclass(frozen=True, slots=True)
class EventHandlerSet:
    name: str
    fix_events: Callable[[Sequence[RawEvent], Any], Awaitable[list[FixedEvent]]]
    parse_events: Callable[[Sequence[FixedEvent]], list]
    store_events: Callable[[Sequence, Any], Awaitable[int]]
    requires_client: bool = False


# ---------------------------------------------------------------------------
# Argument extraction helpers (used by parse stages)
# ---------------------------------------------------------------------------

def event_arg(event: RawEvent, name: str) -> Any:
    try:
        args = event["args"]
    except (KeyError, TypeError):
        raise EventParseError(f"event has no args: {event!r}") from None
    try:
        value = args[name]
    except (KeyError, TypeError):
        raise EventParseError(f"event is missing argument {name!r}") from None
    if value is None:
        raise EventParseError(f"event argument {name!r} is null")
    return value


def uint_arg(event: RawEvent, name: str) -> int:
    value = event_arg(event, name)
    try:
        return parse_uint(value)
    except ValueError as exc:
        raise EventParseError(f"event argument {name!r}: {exc}") from exc


def index_arg(event: RawEvent, name: str) -> int:
    """Like ``uint_arg``, bounded to what the store can index."""
    value = uint_arg(event, name)
    if value > MAX_INDEX:
        raise EventParseError(f"event argument {name!r} is out of index range: {value}")
    return value


def hex_arg(event: RawEvent, name: str) -> str:
    """Bytes-like or 0x-prefixed argument as 0x-prefixed hex text."""
    return to_hex(event_arg(event, name), name)


def address_arg(event: RawEvent, name: str) -> str:
    value = event_arg(event, name)
    if not isinstance(value, str) or not value.startswith("0x"):
        raise EventParseError(f"event argument {name!r} is not an address: {value!r}")
    return value


def block_number_of(event: RawEvent) -> int:
    value: Optional[Any] = event.get("blockNumber")
    try:
        return parse_uint(value)
    except ValueError as exc:
        raise EventParseError(f"event blockNumber: {exc}") from exc


def to_hex(value: Any, name: str = "value") -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, str) and value.startswith("0x"):
        return value
    raise EventParseError(f"{name} is not bytes or 0x-hex: {value!r}")
