"""FastAPI application

App creation + lifespan: database, provider configuration, shared HTTP
client and the dispatch coordinator are built once at startup.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from notifyhub.core.config import get_db_path, get_max_concurrency, is_ledger_enabled
from notifyhub.core.store import create_store_group
from notifyhub.provider import build_providers, load_notification_config
from starlette.responses import JSONResponse

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import dispatch, health, messages
from .services.dispatch_service import DispatchCoordinator
from .services.recipient_resolver import RecipientResolver

log = structlog.get_logger()


def _create_http_client() -> httpx.AsyncClient:
    """Shared client for provider HTTP calls"""
    return httpx.AsyncClient()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: open the database and build providers; shutdown: close them"""
    # Misconfigured SMS vendors fail here, before any request is served
    notification_config = load_notification_config()
    app.state.notification_config = notification_config

    store_group = await create_store_group(get_db_path())
    app.state.store_group = store_group

    http_client = _create_http_client()
    app.state.http_client = http_client

    try:
        providers = build_providers(notification_config, http_client=http_client)
    except Exception:
        await http_client.aclose()
        await store_group.conn.close()
        raise

    ledger = store_group.ledger if is_ledger_enabled() else None
    max_concurrency = get_max_concurrency()
    app.state.dispatch_coordinator = DispatchCoordinator(
        resolver=RecipientResolver(store_group.contact_directory),
        providers=providers,
        ledger=ledger,
        max_concurrency=max_concurrency,
    )
    log.info(
        "dispatch_coordinator_initialized",
        channels=sorted(c.value for c in providers),
        sms_vendor=notification_config.sms.provider,
        ledger_enabled=ledger is not None,
        max_concurrency=max_concurrency,
    )

    yield

    await http_client.aclose()
    if getattr(app.state, "store_group", None):
        await app.state.store_group.conn.close()


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are 400 {error}, like other caller errors"""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg")
    else:
        message = "invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    """Create the FastAPI application"""
    app = FastAPI(
        title="notifyhub",
        version="0.1.0",
        description="Multi-channel notification dispatch API",
        lifespan=lifespan,
    )

    # order: Trace first, then Logging (Logging runs outermost)
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    setup_logging()
    setup_logfire(app)

    app.include_router(dispatch.router, tags=["notifications"])
    app.include_router(messages.router, tags=["notifications"])
    app.include_router(health.router, tags=["health"])

    return app


# default app instance (uvicorn entry)
app = create_app()
