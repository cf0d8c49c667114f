"""DTL -- Shared utility modules."""

from dtl.utils.numbers import parse_uint

__all__ = ["parse_uint"]
