"""DTL - Main Application Entry Point.

Startup order:
1. Configuration loading
2. Logging
3. Observability (metrics endpoint)
4. Record store
5. L1 chain client
6. Query server

Shutdown runs in reverse.
"""

import asyncio
import json
import logging
import logging.config
import signal
import sys


# ---------------------------------------------------------------------------
# Logging setup -- MUST happen before any other import that calls getLogger
# ---------------------------------------------------------------------------

def setup_logging(log_level: str = "INFO", log_format: str = "json"):
    """Setup structured logging.

    Two modes are supported:
    - ``json``  -- machine-parseable JSON-ish format (default)
    - ``text``  -- human-readable format for local development

    Args:
        log_level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: ``"json"`` or ``"text"``.
    """
    if log_format == "json":
        formatter = {
            "class": "logging.Formatter",
            "format": json.dumps({
                "time": "%(asctime)s",
                "level": "%(levelname)s",
                "module": "%(name)s",
                "message": "%(message)s",
            }),
        }
    else:
        formatter = {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        }
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
    })


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application orchestrator
# ---------------------------------------------------------------------------

class DTLApplication:
    """Owns the lifecycle of the store, chain client and query server.

    Usage::

        app = DTLApplication()
        await app.initialize()
        await app.run()        # blocks until shutdown signal
        await app.shutdown()
    """

    def __init__(self):
        self._settings = None
        self._db = None
        self._client = None
        self._server = None
        self._shutdown_event = asyncio.Event()

    async def initialize(self):
        from dtl.api.server import L1TransportServer
        from dtl.chain.client import L1ChainClient
        from dtl.config.settings import get_settings
        from dtl.db.transport_db import TransportDB
        from dtl.observability.metrics import get_metrics

        # ---- 1-2. Configuration and logging --------------------------------
        self._settings = get_settings()
        setup_logging(self._settings.log_level, self._settings.log_format)

        logger.info("=" * 60)
        logger.info("DTL - Starting up")
        logger.info("=" * 60)
        logger.info("Confirmations: %d", self._settings.confirmations)
        logger.info("Show unconfirmed: %s", self._settings.show_unconfirmed_transactions)

        # ---- 3. Metrics ----------------------------------------------------
        metrics = get_metrics(self._settings.prometheus_port)
        if self._settings.metrics_enabled:
            try:
                metrics.start_server()
            except OSError as exc:
                logger.warning("Metrics server failed to start: %s", exc)

        # ---- 4. Store ------------------------------------------------------
        self._db = TransportDB(self._settings.db_path)
        self._db.open()

        # ---- 5. L1 client --------------------------------------------------
        self._client = L1ChainClient(
            self._settings.l1_rpc_provider,
            timeout_seconds=self._settings.l1_rpc_timeout_seconds,
        )

        # ---- 6. Query server -----------------------------------------------
        self._server = L1TransportServer(self._settings, self._db, self._client, metrics)
        await self._server.start()

    async def run(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._shutdown_event.set)
            except NotImplementedError:
                # Windows
                pass
        await self._shutdown_event.wait()

    async def shutdown(self):
        logger.info("DTL - Shutting down")
        if self._server is not None:
            await self._server.stop()
        if self._db is not None:
            self._db.close()
        logger.info("DTL - Shutdown complete")


async def _main():
    app = DTLApplication()
    try:
        await app.initialize()
        await app.run()
    finally:
        await app.shutdown()


def main():
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.critical("DTL failed: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
