"""DispatchCoordinator -- multi-channel notification fan-out

Flow of one dispatch:
1. validate the request
2. check every requested channel has a provider
3. resolve recipients (NoValidRecipientsError stops here)
4. ledger: message record + one pending stub per eligible (recipient, channel)
5. send every eligible (recipient, channel) concurrently
6. ledger: move each stub to sent / failed
7. sum the attempts into a DispatchReport

Only steps 1-3 abort the call. After that, failures are counted per attempt
and ledger problems are logged and swallowed.
"""

import asyncio
import time
from collections.abc import Iterable, Sequence
from datetime import datetime

import structlog
from notifyhub.core.exceptions import InvalidRequestError, LedgerWriteError
from notifyhub.core.models import (
    Channel,
    DeliveryAttempt,
    DispatchReport,
    Message,
    Recipient,
    parse_channels,
)
from notifyhub.core.store.protocols import DeliveryLedger
from notifyhub.provider.base import ChannelProvider
from notifyhub.provider.exceptions import ProviderMisconfiguredError

from .recipient_resolver import RecipientResolver

log = structlog.get_logger()

# Fixed channel order keeps logs and ledger stubs stable
_CHANNEL_ORDER = (Channel.EMAIL, Channel.SMS)


class DispatchCoordinator:
    """Fans a message out to recipients over the requested channels"""

    def __init__(
        self,
        resolver: RecipientResolver,
        providers: dict[Channel, ChannelProvider],
        ledger: DeliveryLedger | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        """
        Args:
            resolver: recipient resolver
            providers: channel -> provider; a missing channel is unconfigured
            ledger: optional audit log; None disables persistence
            max_concurrency: optional cap on in-flight sends, None = unbounded
        """
        self._resolver = resolver
        self._providers = dict(providers)
        self._ledger = ledger
        self._max_concurrency = max_concurrency

    @property
    def ledger(self) -> DeliveryLedger | None:
        return self._ledger

    @property
    def providers(self) -> dict[Channel, ChannelProvider]:
        return dict(self._providers)

    async def dispatch(
        self,
        recipient_ids: Sequence[str],
        subject: str,
        body: str,
        channels: Iterable[str | Channel] = (Channel.EMAIL,),
        schedule_at: datetime | None = None,
    ) -> DispatchReport:
        """Send one message to every resolvable recipient

        Raises:
            InvalidRequestError: missing recipients, content or channels
            ProviderMisconfiguredError: a requested channel has no provider
            NoValidRecipientsError: nobody has an address for the channels
        """
        ids = [str(rid).strip() for rid in (recipient_ids or []) if str(rid).strip()]
        message = self._build_message(ids, subject, body, channels, schedule_at)

        for channel in _ordered(message.channels):
            if channel not in self._providers:
                raise ProviderMisconfiguredError(
                    channel.value,
                    detail=f"no {channel.value} provider is configured",
                )

        recipients, skipped = await self._resolver.resolve_detailed(ids, message.channels)

        pairs = [
            (recipient, channel)
            for channel in _ordered(message.channels)
            for recipient in recipients
            if recipient.has_address_for(channel)
        ]

        message_id = await self._open_ledger(message, pairs)

        log.info(
            "dispatch_started",
            message_id=message_id,
            channels=[c.value for c in _ordered(message.channels)],
            recipients=len(recipients),
            attempts=len(pairs),
        )
        start_time = time.monotonic()

        semaphore = asyncio.Semaphore(self._max_concurrency) if self._max_concurrency else None
        attempts = await asyncio.gather(
            *(
                self._attempt(message, recipient, channel, message_id, semaphore)
                for recipient, channel in pairs
            )
        )

        report = DispatchReport.from_attempts(attempts, message_id=message_id, skipped=skipped)
        log.info(
            "dispatch_completed",
            message_id=message_id,
            email_sent=report.email.sent,
            email_failed=report.email.failed,
            sms_sent=report.sms.sent,
            sms_failed=report.sms.failed,
            skipped=len(skipped),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        return report

    @staticmethod
    def _build_message(
        recipient_ids: Sequence[str],
        subject: str,
        body: str,
        channels: Iterable[str | Channel],
        schedule_at: datetime | None,
    ) -> Message:
        if not recipient_ids:
            raise InvalidRequestError("personnelIds is required", field="recipients")
        if not (subject or "").strip() or not (body or "").strip():
            raise InvalidRequestError("subject and message are required", field="content")
        try:
            requested = parse_channels(channels)
        except ValueError as e:
            raise InvalidRequestError(str(e), field="channels") from e
        if not requested:
            raise InvalidRequestError("at least one channel is required", field="channels")

        return Message(
            subject=subject,
            body=body,
            channels=frozenset(requested),
            schedule_at=schedule_at,
        )

    async def _open_ledger(
        self,
        message: Message,
        pairs: list[tuple[Recipient, Channel]],
    ) -> str | None:
        """Write the message record and pending stubs; None if unavailable"""
        if self._ledger is None:
            return None
        try:
            message_id = await self._ledger.create_message(message)
        except Exception as e:
            _log_ledger_failure("create_message", e)
            return None

        try:
            await self._ledger.create_attempt_stubs(message_id, pairs)
        except Exception as e:
            _log_ledger_failure("create_attempt_stubs", e, message_id=message_id)
        return message_id

    async def _attempt(
        self,
        message: Message,
        recipient: Recipient,
        channel: Channel,
        message_id: str | None,
        semaphore: asyncio.Semaphore | None,
    ) -> DeliveryAttempt:
        """One (recipient, channel) send; never raises"""
        provider = self._providers[channel]
        try:
            if semaphore is None:
                attempt = await provider.send(message, recipient)
            else:
                async with semaphore:
                    attempt = await provider.send(message, recipient)
        except Exception as e:
            log.error(
                "provider_send_raised",
                channel=channel.value,
                provider=provider.name,
                recipient_id=recipient.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            attempt = DeliveryAttempt(
                recipient_id=recipient.id,
                channel=channel,
                status="failed",
                error=str(e) or type(e).__name__,
                provider=provider.name,
            )

        if self._ledger is not None and message_id is not None:
            try:
                await self._ledger.record_attempt(message_id, attempt)
            except Exception as e:
                _log_ledger_failure(
                    "record_attempt",
                    e,
                    message_id=message_id,
                    recipient_id=recipient.id,
                    channel=channel.value,
                )
        return attempt


def _ordered(channels: Iterable[Channel]) -> list[Channel]:
    present = set(channels)
    return [c for c in _CHANNEL_ORDER if c in present]


def _log_ledger_failure(operation: str, error: Exception, **context) -> None:
    """Ledger problems never block delivery"""
    if isinstance(error, LedgerWriteError):
        operation = error.operation
        error = error.original_error
    log.error(
        "ledger_write_failed",
        operation=operation,
        error=str(error),
        error_type=type(error).__name__,
        **context,
    )
