"""DTL query API (aiohttp)."""

from dtl.api.queries import TransportQueries, parse_index_param
from dtl.api.result import QueryResult, capture
from dtl.api.server import L1TransportServer

__all__ = [
    "L1TransportServer",
    "QueryResult",
    "TransportQueries",
    "capture",
    "parse_index_param",
]
