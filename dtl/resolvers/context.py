"""L1 context: the block treated as settled (tip minus confirmations)."""

from __future__ import annotations

from typing import Optional

from dtl.chain.client import BlockContext, L1ChainClient


class ContextResolver:

    def __init__(self, client: L1ChainClient, confirmations: int = 0):
        if confirmations < 0:
            raise ValueError("confirmations must be non-negative")
        self._client = client
        self._confirmations = confirmations

    async def confirmed_height(self) -> int:
        tip = await self._client.get_tip_height()
        return max(0, tip - self._confirmations)

    async def resolve_latest_context(self) -> BlockContext:
        return await self._client.get_block_by_number(await self.confirmed_height())

    async def resolve_context_by_number(self, number: int) -> Optional[BlockContext]:
        """Block *number*, or None if it is above the confirmed height."""
        if number > await self.confirmed_height():
            return None
        return await self._client.get_block_by_number(number)
