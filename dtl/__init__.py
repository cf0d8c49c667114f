"""Rollup Data Transport Layer -- read/ingest boundary.

Serves a consistent, indexed view of chain-derived records (enqueues,
transactions, batches, state roots) and turns raw L1 events into those
records before they reach the store.
"""

__version__ = "0.3.0"
