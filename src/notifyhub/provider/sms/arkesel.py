"""ArkeselSmsVendor -- Arkesel SMS API v2 (Ghana)

JSON in, JSON out. Supports scheduled sends through ``scheduled_date``.
Recipients are digits-only international numbers (233XXXXXXXXX).
"""

from datetime import datetime

import httpx

from ..exceptions import DeliveryFailedError, ProviderMisconfiguredError
from ..phone import to_digits_international
from .base import SmsVendor

ARKESEL_SEND_URL = "https://sms.arkesel.com/api/v2/sms/send"

# Arkesel expects e.g. "2024-03-17 07:00 AM"
SCHEDULE_FORMAT = "%Y-%m-%d %I:%M %p"


class ArkeselSmsVendor(SmsVendor):
    """Arkesel gateway"""

    name = "arkesel"
    supports_schedule = True

    def __init__(
        self,
        api_key: str,
        sender_id: str,
        default_country_code: str = "+233",
        timeout_s: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        send_url: str = ARKESEL_SEND_URL,
    ) -> None:
        missing = [
            env
            for env, value in (
                ("ARKESEL_API_KEY", api_key),
                ("ARKESEL_SENDER_ID", sender_id),
            )
            if not value
        ]
        if missing:
            raise ProviderMisconfiguredError("arkesel", missing)

        super().__init__(default_country_code, timeout_s, http_client)
        self._api_key = api_key
        self._sender_id = sender_id
        self._send_url = send_url

    def normalize_phone(self, phone: str) -> str:
        return to_digits_international(phone, self._default_country_code)

    async def send_text(
        self,
        phone: str,
        text: str,
        schedule_at: datetime | None = None,
    ) -> str | None:
        payload: dict = {
            "sender": self._sender_id,
            "message": text,
            "recipients": [phone],
        }
        if schedule_at is not None:
            payload["scheduled_date"] = schedule_at.strftime(SCHEDULE_FORMAT)

        response = await self._request(
            "POST",
            self._send_url,
            headers={"api-key": self._api_key},
            json=payload,
        )
        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict):
            raise DeliveryFailedError(
                self.name,
                response.text or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not response.is_success or str(data.get("status", "")).lower() != "success":
            raise DeliveryFailedError(
                self.name,
                str(data.get("message") or response.text),
                status_code=response.status_code,
            )

        entries = data.get("data")
        if isinstance(entries, list) and entries and isinstance(entries[0], dict):
            return entries[0].get("id")
        return None
