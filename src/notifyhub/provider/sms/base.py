"""SmsVendor interface + SmsProvider adapter

Each vendor owns its phone format, transport and response interpretation.
SmsProvider turns vendor outcomes into DeliveryAttempts so the dispatch
coordinator never sees vendor details.
"""

from abc import ABC, abstractmethod
from datetime import datetime

import httpx
import structlog

from notifyhub.core.models import Channel, DeliveryAttempt, Message, Recipient

from ..base import ChannelProvider
from ..exceptions import DeliveryFailedError
from ..phone import validate_phone_number

log = structlog.get_logger()


class SmsVendor(ABC):
    """One SMS gateway"""

    #: vendor name recorded on attempts
    name: str = ""
    #: whether schedule_at is forwarded to the gateway
    supports_schedule: bool = False
    #: True only for the vendor that never touches the network
    simulated: bool = False

    def __init__(
        self,
        default_country_code: str = "+233",
        timeout_s: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._default_country_code = default_country_code
        self._timeout_s = timeout_s
        self._http_client = http_client

    @property
    def default_country_code(self) -> str:
        return self._default_country_code

    @abstractmethod
    def normalize_phone(self, phone: str) -> str:
        """Phone number in the format this gateway expects"""
        ...

    @abstractmethod
    async def send_text(
        self,
        phone: str,
        text: str,
        schedule_at: datetime | None = None,
    ) -> str | None:
        """Send one SMS

        Args:
            phone: number already passed through normalize_phone
            text: message text, not truncated
            schedule_at: only given to vendors with supports_schedule

        Returns:
            gateway message id, if the gateway returns one

        Raises:
            DeliveryFailedError: the gateway rejected the message
            httpx.HTTPError: transport failure
        """
        ...

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        kwargs.setdefault("timeout", self._timeout_s)
        if self._http_client is not None:
            return await self._http_client.request(method, url, **kwargs)
        async with httpx.AsyncClient() as http_client:
            return await http_client.request(method, url, **kwargs)


class SmsProvider(ChannelProvider):
    """ChannelProvider for SMS, delegating to one configured vendor"""

    channel = Channel.SMS

    def __init__(self, vendor: SmsVendor) -> None:
        self._vendor = vendor
        self.name = vendor.name

    @property
    def vendor(self) -> SmsVendor:
        return self._vendor

    @property
    def simulated(self) -> bool:
        return self._vendor.simulated

    async def send(self, message: Message, recipient: Recipient) -> DeliveryAttempt:
        if not recipient.phone:
            return self._failed(recipient, "recipient has no phone number")

        ok, error = validate_phone_number(recipient.phone, self._vendor.default_country_code)
        if not ok:
            return self._failed(recipient, f"unusable phone number {recipient.phone!r}: {error}")

        phone = self._vendor.normalize_phone(recipient.phone)
        if not phone:
            return self._failed(recipient, f"unusable phone number: {recipient.phone!r}")

        schedule_at = message.schedule_at
        if schedule_at is not None and not self._vendor.supports_schedule:
            log.debug("sms_schedule_ignored", vendor=self._vendor.name, recipient_id=recipient.id)
            schedule_at = None

        try:
            vendor_message_id = await self._vendor.send_text(
                phone,
                message.sms_text,
                schedule_at=schedule_at,
            )
        except DeliveryFailedError as e:
            log.warning(
                "sms_send_failed",
                vendor=self._vendor.name,
                recipient_id=recipient.id,
                status_code=e.status_code,
                error=e.provider_error,
            )
            return self._failed(recipient, e.provider_error)
        except httpx.HTTPError as e:
            log.warning(
                "sms_send_failed",
                vendor=self._vendor.name,
                recipient_id=recipient.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._failed(recipient, str(e) or type(e).__name__)

        if not self._vendor.simulated:
            log.info(
                "sms_sent",
                vendor=self._vendor.name,
                recipient_id=recipient.id,
                vendor_message_id=vendor_message_id,
                scheduled=schedule_at is not None,
            )
        return self._sent(
            recipient,
            provider_message_id=vendor_message_id,
            simulated=self._vendor.simulated,
        )
