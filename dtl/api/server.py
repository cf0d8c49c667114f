"""L1 Transport Server -- the DTL's HTTP JSON API.

GET-only, unauthenticated, CORS open to any origin.

Every route answers 200 with a JSON body, including "not found" (null
fields, empty lists).  Any failure inside a route becomes a 400 with
``{"error": "<message>"}`` and never escapes the request.

Routes:
    /eth/syncing
    /eth/context/latest
    /eth/context/blocknumber/{number}
    /enqueue/latest                 /enqueue/index/{index}
    /transaction/latest             /transaction/index/{index}
    /batch/transaction/latest       /batch/transaction/index/{index}
    /stateroot/latest               /stateroot/index/{index}
    /batch/stateroot/latest         /batch/stateroot/index/{index}
"""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable, Optional

from aiohttp import web
from pydantic import BaseModel

from dtl.api.queries import TransportQueries, parse_index_param
from dtl.api.result import QueryResult, capture
from dtl.chain.client import L1ChainClient
from dtl.config.settings import DTLSettings
from dtl.db.transport_db import TransportDB
from dtl.observability.metrics import MetricsCollector, get_metrics

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[Any]]

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}


@web.middleware
async def cors_middleware(request: web.Request, handler):
    if request.method == "OPTIONS":
        return web.Response(status=204, headers=_CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(_CORS_HEADERS)
        raise
    response.headers.update(_CORS_HEADERS)
    return response


def _to_json(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, BaseModel):
        return value.to_json_dict()
    return value


class L1TransportServer:
    """Maps HTTP requests onto ``TransportQueries``.

    Usage::

        server = L1TransportServer(settings, db, client)
        await server.start()
        ...
        await server.stop()
    """

    name = "L1 Transport Server"

    def __init__(
        self,
        settings: DTLSettings,
        db: TransportDB,
        client: L1ChainClient,
        metrics: Optional[MetricsCollector] = None,
    ):
        self._settings = settings
        self._metrics = metrics or get_metrics()
        self._queries = TransportQueries(
            db,
            client,
            confirmations=settings.confirmations,
            show_unconfirmed=settings.show_unconfirmed_transactions,
        )
        self._runner: Optional[web.AppRunner] = None
        self._app = self._initialize_app()

    @property
    def app(self) -> web.Application:
        return self._app

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._settings.hostname, self._settings.port)
        await site.start()
        logger.info(
            "%s listening on %s:%d", self.name, self._settings.hostname, self._settings.port,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("%s stopped", self.name)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _initialize_app(self) -> web.Application:
        app = web.Application(middlewares=[cors_middleware])
        self._register_all_routes(app)
        return app

    def _register_route(self, app: web.Application, route: str, handler: Handler) -> None:
        """Register a GET route whose handler returns a JSON-able value."""

        async def _handle(request: web.Request) -> web.Response:
            started = time.monotonic()
            logger.info("%s: GET %s", request.remote, request.path)

            result: QueryResult = await capture(handler(request))
            if result.ok:
                status, body = 200, _to_json(result.value)
            else:
                status, body = 400, {"error": result.error_message}

            self._metrics.record_request(route, status, time.monotonic() - started)
            return web.json_response(body, status=status)

        app.router.add_get(route, _handle)

    def _register_all_routes(self, app: web.Application) -> None:
        q = self._queries

        async def syncing(request):
            return await q.syncing()

        async def context_latest(request):
            return await q.latest_context()

        async def context_by_number(request):
            return await q.context_by_number(
                parse_index_param(request.match_info["number"], "block number"),
            )

        async def enqueue_latest(request):
            return await q.enqueue()

        async def enqueue_by_index(request):
            return await q.enqueue(parse_index_param(request.match_info["index"]))

        async def transaction_latest(request):
            return await q.transaction()

        async def transaction_by_index(request):
            return await q.transaction(parse_index_param(request.match_info["index"]))

        async def transaction_batch_latest(request):
            return await q.transaction_batch()

        async def transaction_batch_by_index(request):
            return await q.transaction_batch(parse_index_param(request.match_info["index"]))

        async def state_root_latest(request):
            return await q.state_root()

        async def state_root_by_index(request):
            return await q.state_root(parse_index_param(request.match_info["index"]))

        async def state_root_batch_latest(request):
            return await q.state_root_batch()

        async def state_root_batch_by_index(request):
            return await q.state_root_batch(parse_index_param(request.match_info["index"]))

        self._register_route(app, "/eth/syncing", syncing)
        self._register_route(app, "/eth/context/latest", context_latest)
        self._register_route(app, "/eth/context/blocknumber/{number}", context_by_number)
        self._register_route(app, "/enqueue/latest", enqueue_latest)
        self._register_route(app, "/enqueue/index/{index}", enqueue_by_index)
        self._register_route(app, "/transaction/latest", transaction_latest)
        self._register_route(app, "/transaction/index/{index}", transaction_by_index)
        self._register_route(app, "/batch/transaction/latest", transaction_batch_latest)
        self._register_route(app, "/batch/transaction/index/{index}", transaction_batch_by_index)
        self._register_route(app, "/stateroot/latest", state_root_latest)
        self._register_route(app, "/stateroot/index/{index}", state_root_by_index)
        self._register_route(app, "/batch/stateroot/latest", state_root_batch_latest)
        self._register_route(app, "/batch/stateroot/index/{index}", state_root_batch_by_index)
