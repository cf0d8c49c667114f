"""
DTL Records - Base Record

All records served or stored by the DTL share one pydantic configuration:

* immutable once built (``frozen``) -- the only enrichment, ``ctcIndex`` on
  enqueue entries, is applied with ``model_copy`` and never in place;
* camelCase on the wire and in the store (``gasLimit``, ``batchIndex``),
  snake_case in Python;
* unknown fields rejected, so a schema drift surfaces immediately.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Indices are stored as signed 64-bit integers.
MAX_INDEX = 2**63 - 1


class Record(BaseModel):
    """Base for every indexed record kind."""

    index: int = Field(
        ..., ge=0, le=MAX_INDEX, description="Monotonic index within kind and tier.",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Wire representation (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes):
        return cls.model_validate_json(raw)
