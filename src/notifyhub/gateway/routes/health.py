"""Health check routes

GET /health: liveness, always 200.
GET /ready: readiness -- SQLite connectivity plus provider configuration.
"""

import structlog
from fastapi import APIRouter, Request
from notifyhub.core.models import Channel
from notifyhub.core.store.sqlite_init import verify_wal_mode
from starlette.responses import JSONResponse

from ..deps import get_store_group

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness check -- always 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness check

    Checks:
    1. sqlite: database connectivity (a journal mode other than WAL is
       logged, not failed)
    2. email: "ok" when a Resend provider is configured, else "unconfigured"
    3. sms: vendor name, or "simulated" when SMS_PROVIDER=none

    An unconfigured email provider does not make the service not-ready;
    only dispatches that ask for email are refused.
    """
    checks = {}
    all_ok = True

    try:
        store_group = get_store_group(request)
        cursor = await store_group.conn.execute("SELECT 1")
        await cursor.fetchone()
        if not await verify_wal_mode(store_group.conn):
            log.warning("ready_wal_disabled")
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("ready_sqlite_failed", error=str(e))
        checks["sqlite"] = f"error: {str(e)}"
        all_ok = False

    coordinator = getattr(request.app.state, "dispatch_coordinator", None)
    providers = coordinator.providers if coordinator is not None else {}
    checks["email"] = "ok" if Channel.EMAIL in providers else "unconfigured"

    sms_provider = providers.get(Channel.SMS)
    if sms_provider is None:
        checks["sms"] = "unconfigured"
        all_ok = False
    elif getattr(sms_provider, "simulated", False):
        checks["sms"] = "simulated"
    else:
        checks["sms"] = sms_provider.name

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
