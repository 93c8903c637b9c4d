"""TraceMiddleware -- bind trace_id for message lookups

Requests under /notifications/messages/{message_id} get
trace_id = "trace-{message_id}", matching the ids written by the ledger.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ULID length
_MESSAGE_ID_LENGTH = 26


def extract_message_id(path: str) -> str | None:
    """Message id from a /notifications/messages/{id} path, if present"""
    parts = [p for p in path.split("/") if p]
    for i, part in enumerate(parts):
        if part == "messages" and i + 1 < len(parts):
            candidate = parts[i + 1]
            if len(candidate) == _MESSAGE_ID_LENGTH:
                return candidate
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """Message-level trace middleware"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        message_id = extract_message_id(request.url.path)
        if message_id:
            structlog.contextvars.bind_contextvars(trace_id=f"trace-{message_id}")

        return await call_next(request)
