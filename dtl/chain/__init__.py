"""L1 chain access."""

from dtl.chain.client import BlockContext, L1ChainClient

__all__ = ["BlockContext", "L1ChainClient"]
