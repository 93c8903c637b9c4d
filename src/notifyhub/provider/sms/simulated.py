"""SimulatedSmsVendor -- used when no SMS vendor is configured

Logs what would have been sent and reports success. Never opens a
connection, which keeps deployments without SMS credentials usable.
"""

import asyncio
from datetime import datetime

import structlog

from ..phone import to_e164
from .base import SmsVendor

log = structlog.get_logger()


def _mask(phone: str) -> str:
    if len(phone) <= 4:
        return "****"
    return f"{phone[:4]}****{phone[-3:]}"


class SimulatedSmsVendor(SmsVendor):
    """SMS vendor that only logs"""

    name = "simulated"
    simulated = True

    def normalize_phone(self, phone: str) -> str:
        return to_e164(phone, self._default_country_code)

    async def send_text(
        self,
        phone: str,
        text: str,
        schedule_at: datetime | None = None,
    ) -> str | None:
        # yield once so simulated sends interleave like real ones
        await asyncio.sleep(0)
        log.info(
            "sms_simulated",
            simulated=True,
            phone=_mask(phone),
            text_length=len(text),
            message="SMS_PROVIDER=none, nothing was sent",
        )
        return None
