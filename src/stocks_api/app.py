"""
# app.py

FastAPI application factory. A single synchronous catch-all route hands
every request to the Dispatcher; FastAPI runs it in its worker thread pool,
so each request is served on its own thread and a delayed v3 request only
blocks the thread serving it.

ApiError raised anywhere below the route is converted to a status code and
{"Error": message} body by the exception handler registered here, and only
here.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import parse_qs

import anyio.to_thread
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .catalog import StockCatalog, load_catalog
from .config import DEFAULT_WORKER_THREADS, Settings, get_settings
from .dispatcher import ApiRequest, Dispatcher
from .errors import ApiError
from .faults import FaultInjector
from .pages import Frame
from .trading import TradingEngine

logger = logging.getLogger(__name__)

METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_dispatcher(settings: Settings, catalog: Optional[StockCatalog] = None) -> Dispatcher:
    """Load startup data and wire the dispatcher.

    Raises CatalogError or TemplateLoadError if the data files are missing
    or malformed.
    """
    if catalog is None:
        catalog = load_catalog(settings.catalog_file)
    frame = Frame.load(settings.template_file)
    return Dispatcher(
        site=settings.site,
        catalog=catalog,
        frame=frame,
        engine=TradingEngine(catalog, strict_quantities=settings.strict_quantities),
        faults=FaultInjector(
            latency_percent=settings.latency_percent,
            error_percent=settings.error_percent,
        ),
    )


def to_api_request(request: Request) -> ApiRequest:
    return ApiRequest(
        host=request.headers.get("host", ""),
        path=request.url.path,
        query=parse_qs(request.url.query, keep_blank_values=True),
    )


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[StockCatalog] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> FastAPI:
    if dispatcher is None:
        settings = settings if settings is not None else get_settings()
        dispatcher = build_dispatcher(settings, catalog)
    worker_threads = settings.worker_threads if settings is not None else DEFAULT_WORKER_THREADS

    # No docs routes: the dispatcher owns the whole path space
    app = FastAPI(title="Stocks API", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.dispatcher = dispatcher

    @app.on_event("startup")
    async def raise_thread_limit() -> None:
        # Each delayed v3 request holds a worker thread for its whole delay
        anyio.to_thread.current_default_thread_limiter().total_tokens = worker_threads
        logger.info("request thread pool: %d workers", worker_threads)

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(exc.to_dict(), status_code=exc.status)

    @app.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
    def serve(request: Request) -> Response:
        logger.debug("%s %s", request.method, request.url.path)
        return dispatcher.handle(to_api_request(request))

    logger.info("serving %d listings for host %s", len(dispatcher.catalog), dispatcher.site)
    return app
