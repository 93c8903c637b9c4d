"""MnotifySmsVendor -- mNotify legacy quick-SMS API (Ghana)

The legacy endpoint answers in plain text: usually a bare status code
("1000" means accepted), sometimes a sentence. There is no structured
success flag, so the reply is scanned heuristically. The marker lists are a
best-effort match against observed replies and may need extending.
"""

import re
from datetime import datetime

import httpx
import structlog

from ..exceptions import DeliveryFailedError, ProviderMisconfiguredError
from ..phone import to_digits_international
from .base import SmsVendor

log = structlog.get_logger()

MNOTIFY_LEGACY_URL = "https://apps.mnotify.net/smsapi"

# "1000" as a whole token, so "10001" is not a match
SUCCESS_CODE = re.compile(r"1000\b")
AFFIRMATIVE_MARKERS = ("success", "sent")
NEGATIVE_MARKERS = ("not sent", "unsent", "fail", "error", "invalid")

# documented legacy status codes, for log readability only
STATUS_CODES = {
    "1000": "Message submited successful",
    "1002": "SMS sending failed",
    "1003": "insufficient balance",
    "1004": "invalid API key",
    "1005": "invalid Phone Number",
    "1006": "invalid Sender ID",
    "1007": "Message scheduled for later delivery",
    "1008": "Empty Message",
}


def is_affirmative_response(text: str) -> bool:
    """Heuristic success check for a legacy plaintext reply

    Accepted when the reply starts with the success code as a whole token, or mentions an
    affirmative marker without any negative marker. Case-insensitive.
    """
    reply = text.strip().lower()
    if not reply:
        return False
    if SUCCESS_CODE.match(reply):
        return True
    if any(marker in reply for marker in NEGATIVE_MARKERS):
        return False
    return any(marker in reply for marker in AFFIRMATIVE_MARKERS)


class MnotifySmsVendor(SmsVendor):
    """mNotify legacy gateway"""

    name = "mnotify"

    def __init__(
        self,
        api_key: str,
        sender_id: str,
        default_country_code: str = "+233",
        timeout_s: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        url: str = MNOTIFY_LEGACY_URL,
    ) -> None:
        missing = [
            env
            for env, value in (
                ("MNOTIFY_API_KEY", api_key),
                ("MNOTIFY_SENDER_ID", sender_id),
            )
            if not value
        ]
        if missing:
            raise ProviderMisconfiguredError("mnotify", missing)

        super().__init__(default_country_code, timeout_s, http_client)
        self._api_key = api_key
        self._sender_id = sender_id
        self._url = url

    def normalize_phone(self, phone: str) -> str:
        return to_digits_international(phone, self._default_country_code)

    async def send_text(
        self,
        phone: str,
        text: str,
        schedule_at: datetime | None = None,
    ) -> str | None:
        response = await self._request(
            "GET",
            self._url,
            params={
                "key": self._api_key,
                "to": phone,
                "msg": text,
                "sender_id": self._sender_id,
            },
        )
        reply = response.text.strip()

        if response.is_success and is_affirmative_response(reply):
            return None

        code = reply[:4]
        log.debug(
            "mnotify_reply_rejected",
            reply=reply,
            status_code=response.status_code,
            meaning=STATUS_CODES.get(code, "unknown"),
        )
        raise DeliveryFailedError(
            self.name,
            reply or f"HTTP {response.status_code}",
            status_code=response.status_code,
        )
