"""Message Domain Model

One logical unit of outbound communication. Built once per dispatch call and
never mutated after dispatch begins.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Channel


class Message(BaseModel):
    """Outbound message -- immutable once constructed"""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(min_length=1, description="Subject line")
    body: str = Field(min_length=1, description="Plain text body")
    channels: frozenset[Channel] = Field(description="Requested channels")
    schedule_at: datetime | None = Field(
        default=None,
        description="SMS-only scheduling hint, best effort",
    )

    @field_validator("channels")
    @classmethod
    def _channels_not_empty(cls, value: frozenset[Channel]) -> frozenset[Channel]:
        if not value:
            raise ValueError("at least one channel is required")
        return value

    @property
    def sms_text(self) -> str:
        """Text sent over SMS: subject and body separated by a blank line"""
        return f"{self.subject}\n\n{self.body}"
