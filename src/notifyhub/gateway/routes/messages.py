"""Logged message routes

GET /notifications/messages: logged messages, newest first.
GET /notifications/messages/{message_id}: message record, per-recipient
attempt rows and a report rebuilt from those rows.
DELETE /notifications/messages/{message_id}: drop a message and its rows.

All of them answer 404 when the ledger is disabled.
"""

import structlog
from fastapi import APIRouter, Depends, Query
from notifyhub.core.exceptions import LedgerWriteError
from notifyhub.core.models import AttemptStatus, DispatchReport
from notifyhub.core.store import attempts_from_records
from starlette.responses import JSONResponse

from ..deps import get_dispatch_coordinator
from ..services.dispatch_service import DispatchCoordinator

router = APIRouter()
log = structlog.get_logger()

_LEDGER_DISABLED = {"error": "delivery ledger is disabled"}


def _not_found(message_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": f"Message with id {message_id} does not exist"},
    )


@router.get("/notifications/messages")
async def list_messages(
    limit: int = Query(default=50, ge=1, le=500),
    coordinator: DispatchCoordinator = Depends(get_dispatch_coordinator),
):
    ledger = coordinator.ledger
    if ledger is None:
        return JSONResponse(status_code=404, content=_LEDGER_DISABLED)

    records = await ledger.list_messages(limit=limit)
    return JSONResponse(
        status_code=200,
        content={"messages": [r.model_dump(mode="json") for r in records]},
    )


@router.get("/notifications/messages/{message_id}")
async def get_message(
    message_id: str,
    coordinator: DispatchCoordinator = Depends(get_dispatch_coordinator),
):
    """Message detail with its delivery attempts"""
    ledger = coordinator.ledger
    if ledger is None:
        return JSONResponse(status_code=404, content=_LEDGER_DISABLED)

    message = await ledger.get_message(message_id)
    if message is None:
        return _not_found(message_id)

    records = await ledger.get_attempts(message_id)
    report = DispatchReport.from_attempts(attempts_from_records(records), message_id=message_id)

    return JSONResponse(
        status_code=200,
        content={
            "message": message.model_dump(mode="json"),
            "recipients": [r.model_dump(mode="json") for r in records],
            "pending": sum(1 for r in records if r.status == AttemptStatus.PENDING),
            "report": report.to_response(),
        },
    )


@router.delete("/notifications/messages/{message_id}")
async def delete_message(
    message_id: str,
    coordinator: DispatchCoordinator = Depends(get_dispatch_coordinator),
):
    """Remove a logged message together with its attempt rows"""
    ledger = coordinator.ledger
    if ledger is None:
        return JSONResponse(status_code=404, content=_LEDGER_DISABLED)

    try:
        deleted = await ledger.delete_message(message_id)
    except LedgerWriteError as e:
        log.warning("message_delete_failed", message_id=message_id, error=str(e))
        return JSONResponse(status_code=500, content={"error": "Failed to delete message"})
    if not deleted:
        return _not_found(message_id)

    log.info("message_deleted", message_id=message_id)
    return JSONResponse(
        status_code=200,
        content={"success": True, "messageId": message_id},
    )
