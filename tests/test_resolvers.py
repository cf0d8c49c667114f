"""Tests for sync status, confirmation merge, batch range and L1 context."""

import pytest
from unittest.mock import AsyncMock

from dtl.chain.client import BlockContext
from dtl.db.store import RecordKind
from dtl.errors import DataIntegrityError
from dtl.resolvers import (
    BatchRangeResolver,
    ConfirmationMergeResolver,
    ContextResolver,
    SyncStatus,
    SyncStatusResolver,
    merge_by_index_precedence,
)

from factories import make_root, make_root_batch, make_tx, make_tx_batch


class TestSyncStatusResolver:

    @pytest.mark.asyncio
    async def test_empty_store_not_syncing(self, db):
        status = await SyncStatusResolver(db).resolve_sync_status()
        assert status == SyncStatus(syncing=False, current_index=0)
        assert status.highest_known_index is None

    @pytest.mark.asyncio
    async def test_no_transactions_but_known_height(self, db):
        await db.put_highest_l2_block_number(8)
        status = await SyncStatusResolver(db).resolve_sync_status()
        assert status == SyncStatus(syncing=True, current_index=0, highest_known_index=8)

    @pytest.mark.asyncio
    async def test_behind_highest_known(self, db):
        await db.put_highest_l2_block_number(5)
        await db.put_transaction_entries([make_tx(i) for i in range(4)])
        status = await SyncStatusResolver(db).resolve_sync_status()
        assert status == SyncStatus(syncing=True, current_index=3, highest_known_index=5)

    @pytest.mark.asyncio
    async def test_caught_up(self, db):
        await db.put_highest_l2_block_number(3)
        await db.put_transaction_entries([make_tx(i) for i in range(4)])
        status = await SyncStatusResolver(db).resolve_sync_status()
        assert status == SyncStatus(syncing=False, current_index=3)

    @pytest.mark.asyncio
    async def test_transactions_without_known_height(self, db):
        await db.put_transaction_entries([make_tx(0), make_tx(1)])
        status = await SyncStatusResolver(db).resolve_sync_status()
        assert status == SyncStatus(syncing=False, current_index=1)


class TestMergeByIndexPrecedence:

    def test_both_missing(self):
        assert merge_by_index_precedence(None, None) is None

    def test_only_confirmed(self):
        assert merge_by_index_precedence(make_tx(3), None) == make_tx(3)

    def test_only_unconfirmed(self):
        unconfirmed = make_tx(3, confirmed=False)
        assert merge_by_index_precedence(None, unconfirmed) is unconfirmed

    def test_confirmed_wins_at_same_index(self):
        confirmed, unconfirmed = make_tx(3), make_tx(3, confirmed=False)
        assert merge_by_index_precedence(confirmed, unconfirmed) is confirmed

    def test_unconfirmed_ahead_wins(self):
        confirmed, unconfirmed = make_tx(3), make_tx(4, confirmed=False)
        assert merge_by_index_precedence(confirmed, unconfirmed) is unconfirmed

    def test_unconfirmed_behind_never_downgrades(self):
        confirmed, unconfirmed = make_tx(5), make_tx(4, confirmed=False)
        assert merge_by_index_precedence(confirmed, unconfirmed) is confirmed


class TestConfirmationMergeResolver:

    @pytest.mark.asyncio
    async def test_confirmed_by_index_without_unconfirmed(self, db):
        await db.put_transaction_entries([make_tx(0)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=True)
        tx = await resolver.resolve_by_index(RecordKind.TRANSACTION, 0)
        assert tx.confirmed is True

    @pytest.mark.asyncio
    async def test_latest_shows_unconfirmed_when_enabled(self, db):
        await db.put_transaction_entries([make_tx(0), make_tx(1)])
        await db.put_unconfirmed_transaction_entries([make_tx(3, confirmed=False)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=True)
        tx = await resolver.resolve_latest(RecordKind.TRANSACTION)
        assert tx.index == 3
        assert tx.confirmed is False

    @pytest.mark.asyncio
    async def test_latest_hides_unconfirmed_when_disabled(self, db):
        await db.put_transaction_entries([make_tx(0), make_tx(1)])
        await db.put_unconfirmed_transaction_entries([make_tx(3, confirmed=False)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=False)
        tx = await resolver.resolve_latest(RecordKind.TRANSACTION)
        assert tx.index == 1
        assert tx.confirmed is True

    @pytest.mark.asyncio
    async def test_latest_none_when_only_unconfirmed_and_disabled(self, db):
        await db.put_unconfirmed_transaction_entries([make_tx(0, confirmed=False)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=False)
        assert await resolver.resolve_latest(RecordKind.TRANSACTION) is None

    @pytest.mark.asyncio
    async def test_confirmed_supersedes_unconfirmed_at_index(self, db):
        await db.put_transaction_entries([make_tx(0), make_tx(1)])
        await db.put_unconfirmed_transaction_entries([make_tx(1, confirmed=False)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=True)
        tx = await resolver.resolve_by_index(RecordKind.TRANSACTION, 1)
        assert tx.confirmed is True

    @pytest.mark.asyncio
    async def test_unconfirmed_by_index_beyond_frontier(self, db):
        await db.put_transaction_entries([make_tx(0)])
        await db.put_unconfirmed_transaction_entries([make_tx(2, confirmed=False)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=True)
        tx = await resolver.resolve_by_index(RecordKind.TRANSACTION, 2)
        assert tx.confirmed is False
        hidden = ConfirmationMergeResolver(db, show_unconfirmed=False)
        assert await hidden.resolve_by_index(RecordKind.TRANSACTION, 2) is None

    @pytest.mark.asyncio
    async def test_state_roots_merge(self, db):
        await db.put_state_root_entries([make_root(0)])
        await db.put_unconfirmed_state_root_entries([make_root(1, confirmed=False)])
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=True)
        root = await resolver.resolve_latest(RecordKind.STATE_ROOT)
        assert root.index == 1
        assert (await resolver.resolve_by_index(RecordKind.STATE_ROOT, 0)).confirmed

    @pytest.mark.asyncio
    async def test_rejects_unmergeable_kind(self, db):
        resolver = ConfirmationMergeResolver(db, show_unconfirmed=True)
        with pytest.raises(ValueError):
            await resolver.resolve_latest(RecordKind.ENQUEUE)


class TestBatchRangeResolver:

    @pytest.mark.asyncio
    async def test_children_in_order(self, db):
        await db.put_transaction_entries([make_tx(i, batch_index=1) for i in range(10, 13)])
        await db.put_transaction_batch_entries([make_tx_batch(1, 10, 3)])
        result = await BatchRangeResolver(db).resolve_batch_with_children(
            RecordKind.TRANSACTION_BATCH, 1,
        )
        assert result.batch.index == 1
        assert [tx.index for tx in result.children] == [10, 11, 12]

    @pytest.mark.asyncio
    async def test_latest_batch(self, db):
        await db.put_state_root_entries([make_root(i, batch_index=i // 2) for i in range(4)])
        await db.put_state_root_batch_entries([make_root_batch(0, 0, 2), make_root_batch(1, 2, 2)])
        result = await BatchRangeResolver(db).resolve_batch_with_children(
            RecordKind.STATE_ROOT_BATCH,
        )
        assert result.batch.index == 1
        assert [root.index for root in result.children] == [2, 3]

    @pytest.mark.asyncio
    async def test_missing_batch(self, db):
        result = await BatchRangeResolver(db).resolve_batch_with_children(
            RecordKind.TRANSACTION_BATCH, 4,
        )
        assert result.batch is None
        assert result.children == []

    @pytest.mark.asyncio
    async def test_empty_batch(self, db):
        await db.put_transaction_batch_entries([make_tx_batch(0, 0, 0)])
        result = await BatchRangeResolver(db).resolve_batch_with_children(
            RecordKind.TRANSACTION_BATCH, 0,
        )
        assert result.children == []

    @pytest.mark.asyncio
    async def test_short_range_is_integrity_error(self, db):
        await db.put_transaction_entries([make_tx(10), make_tx(11)])
        await db.put_transaction_batch_entries([make_tx_batch(1, 10, 3)])
        with pytest.raises(DataIntegrityError):
            await BatchRangeResolver(db).resolve_batch_with_children(
                RecordKind.TRANSACTION_BATCH, 1,
            )

    @pytest.mark.asyncio
    async def test_rejects_non_batch_kind(self, db):
        with pytest.raises(ValueError):
            await BatchRangeResolver(db).resolve_batch_with_children(RecordKind.TRANSACTION)


class TestContextResolver:

    @pytest.fixture
    def client(self):
        client = AsyncMock()
        client.get_tip_height = AsyncMock(return_value=100)
        client.get_block_by_number = AsyncMock(
            side_effect=lambda n: BlockContext(number=n, timestamp=5000 + n, hash=f"0x{n:064x}")
        )
        return client

    @pytest.mark.asyncio
    async def test_latest_subtracts_confirmations(self, client):
        block = await ContextResolver(client, confirmations=12).resolve_latest_context()
        assert block.number == 88
        client.get_block_by_number.assert_awaited_once_with(88)

    @pytest.mark.asyncio
    async def test_latest_floors_at_zero(self, client):
        client.get_tip_height.return_value = 3
        block = await ContextResolver(client, confirmations=12).resolve_latest_context()
        assert block.number == 0

    @pytest.mark.asyncio
    async def test_by_number_at_confirmed_height(self, client):
        block = await ContextResolver(client, confirmations=12).resolve_context_by_number(88)
        assert block.number == 88

    @pytest.mark.asyncio
    async def test_by_number_above_confirmed_height(self, client):
        block = await ContextResolver(client, confirmations=12).resolve_context_by_number(89)
        assert block is None
        client.get_block_by_number.assert_not_awaited()

    def test_negative_confirmations_rejected(self, client):
        with pytest.raises(ValueError):
            ContextResolver(client, confirmations=-1)
