"""Pytest configuration and shared fixtures."""
import os
import sys
import tempfile

import pytest
from prometheus_client import CollectorRegistry

# Ensure the project root is on sys.path so 'dtl' is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dtl.db.transport_db import TransportDB  # noqa: E402
from dtl.observability.metrics import MetricsCollector  # noqa: E402


@pytest.fixture
def db():
    """A fresh RocksDB-backed TransportDB in a temp directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        transport_db = TransportDB(os.path.join(tmpdir, "dtl.rocksdb"))
        transport_db.open()
        yield transport_db
        transport_db.close()


@pytest.fixture
def metrics():
    """Metrics on a private registry so tests never collide."""
    return MetricsCollector(registry=CollectorRegistry())
