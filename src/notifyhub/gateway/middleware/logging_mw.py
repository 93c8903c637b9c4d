"""LoggingMiddleware -- request-scoped request_id + access log

Binds a ULID request_id to structlog contextvars, so every event logged while
a dispatch runs (resolver, providers, ledger) carries it. Health probes are
logged at debug level.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

_QUIET_PATHS = frozenset({"/health", "/ready"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )

        log = structlog.get_logger()
        emit = log.adebug if path in _QUIET_PATHS else log.ainfo
        start_time = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            await log.aexception(
                "request_failed",
                duration_ms=int((time.monotonic() - start_time) * 1000),
            )
            raise

        await emit(
            "request_completed",
            status_code=response.status_code,
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )

        response.headers["X-Request-ID"] = request_id
        return response
