"""Notification dispatch route

POST /notifications/dispatch: send one message to a list of personnel over
email and/or SMS.
- 200: dispatch ran, per-channel counts in the body (even if every send failed)
- 400: missing recipients / content, unknown channel, no valid recipients
- 500: provider misconfiguration or unexpected fault
"""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from notifyhub.core.exceptions import InvalidRequestError, NoValidRecipientsError
from notifyhub.provider.exceptions import ProviderMisconfiguredError
from pydantic import BaseModel, ConfigDict, Field
from starlette.responses import JSONResponse

from ..deps import get_dispatch_coordinator
from ..services.dispatch_service import DispatchCoordinator

log = structlog.get_logger()

router = APIRouter()


class DispatchRequest(BaseModel):
    """Dispatch request body

    Required fields default to empty values so that missing ones are
    reported as 400 by the coordinator, not 422 by FastAPI.
    """

    model_config = ConfigDict(populate_by_name=True)

    personnel_ids: list[str] = Field(default_factory=list, alias="personnelIds")
    subject: str = Field(default="", description="Subject line")
    message: str = Field(default="", description="Plain text body")
    channels: list[str] = Field(default_factory=lambda: ["email"])
    schedule_at: datetime | None = Field(
        default=None,
        alias="scheduleAt",
        description="SMS scheduling hint, ISO 8601",
    )


class ChannelCounts(BaseModel):
    sent: int
    failed: int


class SkippedEntry(BaseModel):
    id: str
    reason: str


class DispatchResponse(BaseModel):
    """Dispatch success response"""

    ok: bool
    messageId: str | None
    email: ChannelCounts
    sms: ChannelCounts
    total: ChannelCounts
    skipped: list[SkippedEntry]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/notifications/dispatch", response_model=DispatchResponse)
async def dispatch_notifications(
    body: DispatchRequest,
    coordinator: DispatchCoordinator = Depends(get_dispatch_coordinator),
):
    """Fan a message out to the requested personnel"""
    try:
        report = await coordinator.dispatch(
            body.personnel_ids,
            body.subject,
            body.message,
            channels=body.channels,
            schedule_at=body.schedule_at,
        )
    except InvalidRequestError as e:
        log.info("dispatch_rejected", field=e.field, error=str(e))
        return _error(400, str(e))
    except NoValidRecipientsError as e:
        log.info("dispatch_rejected", error=str(e))
        return _error(400, str(e))
    except ProviderMisconfiguredError as e:
        log.error("dispatch_provider_misconfigured", provider=e.provider, error=str(e))
        return _error(500, str(e))
    except Exception as e:
        log.exception("dispatch_error", error=str(e))
        return _error(500, str(e) or "Internal error")

    return JSONResponse(status_code=200, content=report.to_response())
