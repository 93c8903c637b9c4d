"""SmsProvider tests -- vendor outcomes become DeliveryAttempts"""

from datetime import UTC, datetime

import httpx
import pytest
from notifyhub.core.models import AttemptStatus, Channel, Message, Recipient
from notifyhub.provider.exceptions import DeliveryFailedError
from notifyhub.provider.sms import MnotifySmsVendor, SimulatedSmsVendor, SmsProvider, SmsVendor

RECIPIENT = Recipient(id="p2", phone="024 123 4567", name="Kofi")


def _message(schedule_at: datetime | None = None) -> Message:
    return Message(
        subject="Alert",
        body="Report now",
        channels=frozenset({Channel.SMS}),
        schedule_at=schedule_at,
    )


class RecordingVendor(SmsVendor):
    """Vendor double that records send_text calls"""

    name = "recording"

    def __init__(self, supports_schedule: bool = False, outcome=None) -> None:
        super().__init__()
        self.supports_schedule = supports_schedule
        self.outcome = outcome
        self.calls: list[tuple[str, str, datetime | None]] = []

    def normalize_phone(self, phone: str) -> str:
        digits = "".join(ch for ch in phone if ch.isdigit())
        return digits if len(digits) >= 9 else ""

    async def send_text(self, phone, text, schedule_at=None):
        self.calls.append((phone, text, schedule_at))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class TestSmsProvider:
    async def test_sent_attempt(self):
        vendor = RecordingVendor(outcome="v-1")
        provider = SmsProvider(vendor)

        attempt = await provider.send(_message(), RECIPIENT)

        assert attempt.status == AttemptStatus.SENT
        assert attempt.channel == Channel.SMS
        assert attempt.provider == "recording"
        assert attempt.provider_message_id == "v-1"
        assert vendor.calls == [("0241234567", "Alert\n\nReport now", None)]

    async def test_missing_phone(self):
        vendor = RecordingVendor()
        attempt = await SmsProvider(vendor).send(_message(), Recipient(id="p1", email="a@x.org"))
        assert attempt.status == AttemptStatus.FAILED
        assert vendor.calls == []

    async def test_unusable_phone(self):
        vendor = RecordingVendor()
        attempt = await SmsProvider(vendor).send(_message(), Recipient(id="p9", phone="12"))
        assert attempt.status == AttemptStatus.FAILED
        assert "unusable phone number" in attempt.error
        assert vendor.calls == []

    async def test_delivery_failed_error_verbatim(self):
        vendor = RecordingVendor(outcome=DeliveryFailedError("recording", "1003 insufficient balance"))
        attempt = await SmsProvider(vendor).send(_message(), RECIPIENT)
        assert attempt.status == AttemptStatus.FAILED
        assert attempt.error == "1003 insufficient balance"

    async def test_transport_error(self):
        vendor = RecordingVendor(outcome=httpx.ReadTimeout("timed out"))
        attempt = await SmsProvider(vendor).send(_message(), RECIPIENT)
        assert attempt.status == AttemptStatus.FAILED
        assert attempt.error == "timed out"

    async def test_schedule_forwarded_when_supported(self):
        when = datetime(2026, 5, 1, 8, 0, tzinfo=UTC)
        vendor = RecordingVendor(supports_schedule=True)
        await SmsProvider(vendor).send(_message(schedule_at=when), RECIPIENT)
        assert vendor.calls[0][2] == when

    async def test_schedule_dropped_when_unsupported(self):
        when = datetime(2026, 5, 1, 8, 0, tzinfo=UTC)
        vendor = RecordingVendor(supports_schedule=False)
        attempt = await SmsProvider(vendor).send(_message(schedule_at=when), RECIPIENT)
        assert attempt.status == AttemptStatus.SENT
        assert vendor.calls[0][2] is None


class TestSimulatedProvider:
    async def test_simulated_send_never_hits_network(self):
        """A transport that fails every request proves nothing was sent"""
        requests: list[httpx.Request] = []

        def handler(request):
            requests.append(request)
            return httpx.Response(500)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = SmsProvider(SimulatedSmsVendor(http_client=client))

        attempt = await provider.send(_message(), RECIPIENT)

        assert provider.simulated
        assert attempt.status == AttemptStatus.SENT
        assert attempt.simulated is True
        assert attempt.provider == "simulated"
        assert requests == []


class TestJunkPhoneNumbers:
    """Values without subscriber digits fail before any vendor is called"""

    @pytest.fixture
    def requests(self) -> list[httpx.Request]:
        return []

    @pytest.fixture
    def http_client(self, requests) -> httpx.AsyncClient:
        def handler(request):
            requests.append(request)
            return httpx.Response(200, text="1000")

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    @pytest.mark.parametrize("phone", ["N/A", "-", "0"])
    async def test_simulated_vendor(self, phone, http_client, requests):
        provider = SmsProvider(SimulatedSmsVendor(http_client=http_client))
        attempt = await provider.send(_message(), Recipient(id="p9", phone=phone))

        assert attempt.status == AttemptStatus.FAILED
        assert attempt.simulated is False
        assert "Phone number has no digits" in attempt.error
        assert requests == []

    async def test_mnotify_vendor(self, http_client, requests):
        vendor = MnotifySmsVendor(
            api_key="mk",
            sender_id="MADPC",
            http_client=http_client,
            url="https://mnotify.test/smsapi",
        )
        attempt = await SmsProvider(vendor).send(_message(), Recipient(id="p9", phone="N/A"))

        assert attempt.status == AttemptStatus.FAILED
        assert attempt.provider == "mnotify"
        assert attempt.error == "unusable phone number 'N/A': Phone number has no digits"
        assert requests == []
