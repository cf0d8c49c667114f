"""
DTL -- Centralised configuration via pydantic-settings.

Environment variables override defaults using the ``DTL_`` prefix
(e.g. ``DTL_CONFIRMATIONS=12``).

Usage:
    from dtl.config.settings import get_settings
    settings = get_settings()          # cached singleton
    print(settings.l1_rpc_provider)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DTLSettings(BaseSettings):
    """Top-level configuration for the data transport node."""

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    db_path: str = "./data/dtl.rocksdb"

    # ------------------------------------------------------------------
    # Query server
    # ------------------------------------------------------------------
    port: int = Field(default=7878, ge=0, le=65535)
    hostname: str = "localhost"
    show_unconfirmed_transactions: bool = False

    # ------------------------------------------------------------------
    # L1 chain
    # ------------------------------------------------------------------
    l1_rpc_provider: str = "http://localhost:8545"
    l1_rpc_timeout_seconds: float = Field(default=10.0, gt=0)
    confirmations: int = Field(default=0, ge=0)

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------
    metrics_enabled: bool = True
    prometheus_port: int = 8000
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    model_config = SettingsConfigDict(
        env_prefix="DTL_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache(maxsize=1)
def get_settings() -> DTLSettings:
    """Return a cached singleton of the application settings.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    return DTLSettings()
