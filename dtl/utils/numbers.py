"""Unsigned integer parsing shared by the HTTP layer and event parsers."""

from __future__ import annotations

import re

_DECIMAL = re.compile(r"^[0-9]+$")
_HEX = re.compile(r"^0[xX][0-9a-fA-F]+$")


def parse_uint(value: object) -> int:
    """Parse a non-negative integer from an int or decimal/``0x``-hex text.

    Raises ``ValueError`` for anything else (negative numbers, floats,
    booleans, empty strings, ``None``).
    """
    if isinstance(value, bool):
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"expected an unsigned integer, got {value}")
        return value
    if isinstance(value, str):
        text = value.strip()
        if _DECIMAL.match(text):
            return int(text, 10)
        if _HEX.match(text):
            return int(text, 16)
    raise ValueError(f"expected an unsigned integer, got {value!r}")
