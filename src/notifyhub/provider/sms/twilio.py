"""TwilioSmsVendor -- Twilio Programmable Messaging REST API

Structured JSON responses; no heuristics needed. Scheduling needs a
Messaging Service on Twilio's side, so schedule_at is not forwarded.
"""

from datetime import datetime

import httpx

from ..exceptions import DeliveryFailedError, ProviderMisconfiguredError
from ..phone import to_e164
from .base import SmsVendor

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSmsVendor(SmsVendor):
    """Twilio gateway"""

    name = "twilio"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        default_country_code: str = "+233",
        timeout_s: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        api_base: str = TWILIO_API_BASE,
    ) -> None:
        missing = [
            env
            for env, value in (
                ("TWILIO_ACCOUNT_SID", account_sid),
                ("TWILIO_AUTH_TOKEN", auth_token),
                ("TWILIO_PHONE_NUMBER", from_number),
            )
            if not value
        ]
        if missing:
            raise ProviderMisconfiguredError("twilio", missing)

        super().__init__(default_country_code, timeout_s, http_client)
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._url = f"{api_base.rstrip('/')}/Accounts/{account_sid}/Messages.json"

    def normalize_phone(self, phone: str) -> str:
        return to_e164(phone, self._default_country_code)

    async def send_text(
        self,
        phone: str,
        text: str,
        schedule_at: datetime | None = None,
    ) -> str | None:
        response = await self._request(
            "POST",
            self._url,
            auth=(self._account_sid, self._auth_token),
            data={"To": phone, "From": self._from_number, "Body": text},
        )
        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            error = data.get("message") if isinstance(data, dict) else None
            raise DeliveryFailedError(
                self.name,
                str(error) if error else (response.text or f"HTTP {response.status_code}"),
                status_code=response.status_code,
            )

        if isinstance(data, dict) and data.get("status") in ("failed", "undelivered"):
            raise DeliveryFailedError(
                self.name,
                str(data.get("error_message") or data.get("status")),
                status_code=response.status_code,
            )
        return data.get("sid") if isinstance(data, dict) else None
