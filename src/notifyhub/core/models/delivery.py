"""Delivery Domain Models -- DeliveryAttempt + DispatchReport

A DispatchReport is never stored. It is always recomputed from the set of
attempts, so the same attempts give the same totals in any order.
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from .enums import AttemptStatus, Channel
from .recipient import SkippedRecipient


class DeliveryAttempt(BaseModel):
    """Outcome of one (recipient x channel) send"""

    recipient_id: str = Field(description="Recipient directory id")
    channel: Channel = Field(description="Channel used")
    status: AttemptStatus = Field(description="sent / failed")
    error: str | None = Field(default=None, description="Provider error text, verbatim")
    provider: str = Field(default="", description="Provider or vendor name")
    provider_message_id: str | None = Field(
        default=None,
        description="Identifier returned by the provider, if any",
    )
    simulated: bool = Field(
        default=False,
        description="True when no network call was made",
    )

    @property
    def key(self) -> tuple[str, Channel]:
        return self.recipient_id, self.channel


class DeliveryCounts(BaseModel):
    """sent / failed counter pair"""

    sent: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)


class DispatchReport(BaseModel):
    """Aggregated result of one dispatch call"""

    message_id: str | None = Field(
        default=None,
        description="Ledger message id, only when a ledger is active",
    )
    email: DeliveryCounts = Field(default_factory=DeliveryCounts)
    sms: DeliveryCounts = Field(default_factory=DeliveryCounts)
    total: DeliveryCounts = Field(default_factory=DeliveryCounts)
    skipped: list[SkippedRecipient] = Field(default_factory=list)

    @classmethod
    def from_attempts(
        cls,
        attempts: Iterable[DeliveryAttempt],
        message_id: str | None = None,
        skipped: list[SkippedRecipient] | None = None,
    ) -> "DispatchReport":
        """Sum attempts into per-channel and grand totals

        Pending attempts (only seen when rebuilding from a ledger after a
        crash) are not counted.
        """
        counts = {channel: DeliveryCounts() for channel in Channel}
        for attempt in attempts:
            bucket = counts[attempt.channel]
            if attempt.status == AttemptStatus.SENT:
                bucket.sent += 1
            elif attempt.status == AttemptStatus.FAILED:
                bucket.failed += 1

        email = counts[Channel.EMAIL]
        sms = counts[Channel.SMS]
        return cls(
            message_id=message_id,
            email=email,
            sms=sms,
            total=DeliveryCounts(
                sent=email.sent + sms.sent,
                failed=email.failed + sms.failed,
            ),
            skipped=list(skipped or []),
        )

    def to_response(self) -> dict:
        """Wire format of the dispatch endpoint"""
        return {
            "ok": True,
            "messageId": self.message_id,
            "email": self.email.model_dump(),
            "sms": self.sms.model_dump(),
            "total": self.total.model_dump(),
            "skipped": [s.model_dump() for s in self.skipped],
        }
