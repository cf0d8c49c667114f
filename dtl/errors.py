"""
DTL error taxonomy.

Every failure that can cross the query boundary is one of these.  The HTTP
layer maps all of them (and anything unexpected) to a 400 response; the
ingestion pipeline treats ``DataIntegrityError`` as fatal for the batch.

Absence of a record is NOT an error -- resolvers return ``None``.
"""
from __future__ import annotations


class TransportError(Exception):
    """Base class for all DTL errors."""


class ValidationError(TransportError):
    """Malformed request input, e.g. a non-numeric path parameter."""


class UpstreamError(TransportError):
    """The L1 chain client failed (network, timeout, malformed block)."""


class DataIntegrityError(TransportError):
    """Stored or ingested data breaks an index invariant.

    Raised when a batch declares more children than the store holds, when a
    write-once field would be rewritten with a different value, or when an
    ingested event cannot be parsed.
    """


class EventParseError(DataIntegrityError):
    """A raw chain event is missing or has a malformed argument."""
