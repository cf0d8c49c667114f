"""Tests for the L1 chain client wrapper."""

import pytest
from unittest.mock import MagicMock

from dtl.chain.client import BlockContext, L1ChainClient
from dtl.errors import UpstreamError


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.block_number = 1234
    w3.eth.get_block.return_value = {
        "number": 1200,
        "timestamp": 1700000000,
        "hash": b"\x01" * 32,
    }
    w3.eth.get_transaction.return_value = {
        "hash": b"\x02" * 32,
        "from": "0x" + "ef" * 20,
        "input": b"\xde\xad",
        "blockNumber": 1200,
    }
    return w3


@pytest.fixture
def client(w3):
    return L1ChainClient("http://localhost:8545", w3=w3)


class TestL1ChainClient:

    @pytest.mark.asyncio
    async def test_tip_height(self, client):
        assert await client.get_tip_height() == 1234

    @pytest.mark.asyncio
    async def test_block_by_number(self, client, w3):
        block = await client.get_block_by_number(1200)
        assert block == BlockContext(number=1200, timestamp=1700000000, hash="0x" + "01" * 32)
        w3.eth.get_block.assert_called_once_with(1200)

    @pytest.mark.asyncio
    async def test_transaction(self, client):
        tx = await client.get_transaction("0x" + "02" * 32)
        assert tx["input"] == "0xdead"
        assert tx["hash"] == "0x" + "02" * 32
        assert tx["blockNumber"] == 1200

    @pytest.mark.asyncio
    async def test_rpc_failure_is_upstream_error(self, client, w3):
        w3.eth.get_block.side_effect = ConnectionError("refused")
        with pytest.raises(UpstreamError):
            await client.get_block_by_number(1)

    @pytest.mark.asyncio
    async def test_missing_block(self, client, w3):
        w3.eth.get_block.return_value = None
        with pytest.raises(UpstreamError):
            await client.get_block_by_number(1)

    @pytest.mark.asyncio
    async def test_malformed_block(self, client, w3):
        w3.eth.get_block.return_value = {"number": 1}
        with pytest.raises(UpstreamError):
            await client.get_block_by_number(1)
