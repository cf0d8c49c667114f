"""L1 chain client.

Thin async wrapper over web3.py's synchronous HTTP provider.  Blocking RPC
calls run in a worker thread so the event loop keeps serving requests.

Every failure (network, timeout, malformed response) surfaces as
``UpstreamError``.  There is no retry here; the RPC timeout is the only
latency bound.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from web3 import Web3

from dtl.errors import UpstreamError

logger = logging.getLogger(__name__)


def _hex(value: Any) -> str:
    if isinstance(value, str):
        return value
    return Web3.to_hex(value)


@dataclass(frozen=True, slots=True)
class BlockContext:
    """The slice of an L1 block the DTL exposes."""
    number: int
    timestamp: int
    hash: str


class L1ChainClient:
    """Reads tip height, blocks and transactions from the L1 node."""

    def __init__(self, rpc_url: str, timeout_seconds: float = 10.0, w3: Web3 | None = None):
        self._rpc_url = rpc_url
        self._w3 = w3 or Web3(
            Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_seconds})
        )

    async def _call(self, what: str, fn, *args) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except Exception as exc:
            logger.warning("L1 RPC %s failed: %s", what, exc)
            raise UpstreamError(f"L1 RPC {what} failed: {exc}") from exc

    async def get_tip_height(self) -> int:
        height = await self._call("eth_blockNumber", lambda: self._w3.eth.block_number)
        return int(height)

    async def get_block_by_number(self, number: int) -> BlockContext:
        block = await self._call("eth_getBlockByNumber", self._w3.eth.get_block, number)
        if block is None:
            raise UpstreamError(f"L1 block {number} not found")
        try:
            return BlockContext(
                number=int(block["number"]),
                timestamp=int(block["timestamp"]),
                hash=_hex(block["hash"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError(f"Malformed L1 block {number}: {exc}") from exc

    async def get_transaction(self, tx_hash: str) -> dict[str, Any]:
        """Fetch an L1 transaction (sender, calldata, block number)."""
        tx = await self._call("eth_getTransactionByHash", self._w3.eth.get_transaction, tx_hash)
        try:
            return {
                "hash": _hex(tx["hash"]),
                "from": tx["from"],
                "input": _hex(tx["input"]),
                "blockNumber": int(tx["blockNumber"]),
            }
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError(f"Malformed L1 transaction {tx_hash}: {exc}") from exc
