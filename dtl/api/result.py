"""Explicit query outcome.

Resolvers raise; route handlers never do.  ``capture`` runs a resolver call
and folds the outcome into a ``QueryResult`` so the transport boundary is the
only place that decides on a status code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Optional

from dtl.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueryResult:
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> str:
        if self.error is None:
            return ""
        return f"{type(self.error).__name__}: {self.error}"


async def capture(awaitable: Awaitable[Any]) -> QueryResult:
    try:
        return QueryResult(value=await awaitable)
    except TransportError as exc:
        logger.warning("Query failed: %s", exc)
        return QueryResult(error=exc)
    except Exception as exc:
        logger.exception("Unexpected query failure")
        return QueryResult(error=exc)
