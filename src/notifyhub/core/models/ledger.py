"""Ledger Domain Models -- durable message + recipient-status records"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import AttemptStatus, Channel


class MessageRecord(BaseModel):
    """Logged message"""

    message_id: str = Field(description="ULID")
    subject: str
    body: str
    channels: list[Channel]
    schedule_at: datetime | None = None
    created_at: datetime


class AttemptRecord(BaseModel):
    """Logged (message, recipient, channel) attempt"""

    message_id: str
    recipient_id: str
    channel: Channel
    address: str = Field(default="", description="Email or phone used")
    status: AttemptStatus = AttemptStatus.PENDING
    error: str = ""
    provider: str = ""
    created_at: datetime
    updated_at: datetime
