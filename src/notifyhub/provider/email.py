"""ResendEmailProvider -- transactional email over the Resend HTTP API

POST {base_url}/emails with a Bearer API key. One-shot: no retries. Any
error text returned by Resend is kept verbatim on the failed attempt.
"""

import contextlib
import time

import httpx
import structlog

from notifyhub.core.models import Channel, DeliveryAttempt, Message, Recipient

from .base import ChannelProvider
from .config import EmailConfig
from .exceptions import ProviderMisconfiguredError
from .templates import build_notification_html

log = structlog.get_logger()


class ResendEmailProvider(ChannelProvider):
    """EmailProvider backed by Resend"""

    channel = Channel.EMAIL
    name = "resend"

    def __init__(
        self,
        config: EmailConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            config: email settings; api key and from address are required
            http_client: shared client, a short-lived one is used per call if None

        Raises:
            ProviderMisconfiguredError: api key or from address missing
        """
        missing = []
        if not config.api_key.get_secret_value():
            missing.append("RESEND_API_KEY")
        if not config.from_address.strip():
            missing.append("EMAIL_FROM")
        if missing:
            raise ProviderMisconfiguredError("email", missing)

        self._config = config
        self._http_client = http_client
        self._url = f"{config.base_url.rstrip('/')}/emails"

    async def send(self, message: Message, recipient: Recipient) -> DeliveryAttempt:
        if not recipient.email:
            return self._failed(recipient, "recipient has no email address")

        payload = {
            "from": self._config.from_address,
            "to": recipient.email,
            "subject": message.subject,
            "text": message.body,
            "html": build_notification_html(
                message.subject,
                message.body,
                org_name=self._config.org_name,
            ),
        }
        headers = {
            "Authorization": f"Bearer {self._config.api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

        start_time = time.monotonic()
        try:
            response = await self._post(payload, headers)
        except httpx.HTTPError as e:
            log.warning(
                "email_send_failed",
                recipient_id=recipient.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._failed(recipient, str(e) or type(e).__name__)

        duration_ms = int((time.monotonic() - start_time) * 1000)

        if response.is_success:
            email_id = None
            with contextlib.suppress(ValueError, AttributeError):
                email_id = response.json().get("id")
            log.info(
                "email_sent",
                recipient_id=recipient.id,
                email_id=email_id,
                duration_ms=duration_ms,
            )
            return self._sent(recipient, provider_message_id=email_id)

        error_text = _error_text(response)
        log.warning(
            "email_send_failed",
            recipient_id=recipient.id,
            status_code=response.status_code,
            error=error_text,
            duration_ms=duration_ms,
        )
        return self._failed(recipient, error_text)

    async def _post(self, payload: dict, headers: dict) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                self._url, json=payload, headers=headers, timeout=self._config.timeout_s
            )
        async with httpx.AsyncClient() as http_client:
            return await http_client.post(
                self._url, json=payload, headers=headers, timeout=self._config.timeout_s
            )


def _error_text(response: httpx.Response) -> str:
    """Resend's own error message, or the raw body if it is not JSON"""
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text or f"HTTP {response.status_code}"
