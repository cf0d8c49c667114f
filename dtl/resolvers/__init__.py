"""Query-side resolvers: transport-agnostic, read-only over the store."""

from dtl.resolvers.batch_range import BatchRangeResolver, BatchWithChildren
from dtl.resolvers.confirmation import ConfirmationMergeResolver, merge_by_index_precedence
from dtl.resolvers.context import ContextResolver
from dtl.resolvers.sync_status import SyncStatus, SyncStatusResolver

__all__ = [
    "BatchRangeResolver",
    "BatchWithChildren",
    "ConfirmationMergeResolver",
    "merge_by_index_precedence",
    "ContextResolver",
    "SyncStatus",
    "SyncStatusResolver",
]
