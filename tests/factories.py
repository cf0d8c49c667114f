"""Record builders shared by the test modules."""

from dtl.records.schemas import (
    EnqueueEntry,
    StateRootBatchEntry,
    StateRootEntry,
    TransactionBatchEntry,
    TransactionEntry,
)

TARGET = "0x" + "ab" * 20
ORIGIN = "0x" + "cd" * 20
SUBMITTER = "0x" + "ef" * 20


def make_enqueue(index, **overrides):
    fields = dict(
        index=index,
        target=TARGET,
        data="0x1234",
        gas_limit=21000,
        origin=ORIGIN,
        block_number=50 + index,
        timestamp=1000 + index,
    )
    fields.update(overrides)
    return EnqueueEntry(**fields)


def make_tx(index, batch_index=0, confirmed=True, **overrides):
    fields = dict(
        index=index,
        batch_index=batch_index if confirmed else None,
        data=f"0x{index:04x}",
        block_number=100 + index,
        timestamp=2000 + index,
        gas_limit=8_000_000,
        target=TARGET,
        origin=None,
        queue_origin="sequencer",
        confirmed=confirmed,
    )
    fields.update(overrides)
    return TransactionEntry(**fields)


def make_root(index, batch_index=0, confirmed=True):
    return StateRootEntry(
        index=index,
        batch_index=batch_index if confirmed else None,
        value="0x" + f"{index:064x}",
        confirmed=confirmed,
    )


def _batch_fields(index, prev_total_elements, size):
    return dict(
        index=index,
        block_number=10 + index,
        timestamp=3000 + index,
        submitter=SUBMITTER,
        size=size,
        root="0x" + "11" * 32,
        prev_total_elements=prev_total_elements,
        extra_data="0x",
        l1_transaction_hash="0x" + f"{index:064x}",
    )


def make_tx_batch(index, prev_total_elements, size):
    return TransactionBatchEntry(**_batch_fields(index, prev_total_elements, size))


def make_root_batch(index, prev_total_elements, size):
    return StateRootBatchEntry(**_batch_fields(index, prev_total_elements, size))
