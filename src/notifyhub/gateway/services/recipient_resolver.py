"""RecipientResolver -- personnel ids -> deliverable recipients

One batched directory lookup, whitespace trimming, then a filter that keeps
only records with an address for at least one requested channel.
"""

from collections.abc import Iterable, Sequence

import structlog
from notifyhub.core.exceptions import NoValidRecipientsError
from notifyhub.core.models import (
    Channel,
    ContactRecord,
    Recipient,
    SkippedRecipient,
    SkipReason,
)
from notifyhub.core.store.protocols import ContactDirectory

log = structlog.get_logger()


def _clean(value: str | None) -> str | None:
    """Trimmed value, None for empty"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def to_recipient(record: ContactRecord) -> Recipient:
    return Recipient(
        id=record.id,
        email=_clean(record.email),
        phone=_clean(record.phone),
        name=record.display_name,
    )


def is_deliverable(recipient: Recipient, channels: Iterable[Channel]) -> bool:
    """Whether the recipient has an address on any of the channels"""
    return any(recipient.has_address_for(channel) for channel in channels)


class RecipientResolver:
    """Turns recipient ids into Recipients via a ContactDirectory"""

    def __init__(self, directory: ContactDirectory) -> None:
        self._directory = directory

    async def resolve(
        self,
        recipient_ids: Sequence[str],
        channels: Iterable[Channel],
    ) -> list[Recipient]:
        """Resolve and filter recipients

        Raises:
            NoValidRecipientsError: nobody left after filtering
        """
        recipients, _ = await self.resolve_detailed(recipient_ids, channels)
        return recipients

    async def resolve_detailed(
        self,
        recipient_ids: Sequence[str],
        channels: Iterable[Channel],
    ) -> tuple[list[Recipient], list[SkippedRecipient]]:
        """Like resolve(), also returning which ids were dropped and why

        Recipients come back in request order. Duplicate ids collapse to
        one; addresses shared across different ids are not deduplicated.

        Raises:
            NoValidRecipientsError: nobody left after filtering
        """
        requested = set(channels)
        unique_ids = list(dict.fromkeys(recipient_ids))

        records = await self._directory.get_contacts(unique_ids)
        by_id = {record.id: record for record in records}

        recipients: list[Recipient] = []
        skipped: list[SkippedRecipient] = []
        for recipient_id in unique_ids:
            record = by_id.get(recipient_id)
            if record is None:
                skipped.append(SkippedRecipient(id=recipient_id, reason=SkipReason.NOT_FOUND))
                continue
            recipient = to_recipient(record)
            if is_deliverable(recipient, requested):
                recipients.append(recipient)
            else:
                skipped.append(
                    SkippedRecipient(id=recipient_id, reason=SkipReason.NO_USABLE_ADDRESS)
                )

        log.info(
            "recipients_resolved",
            requested=len(unique_ids),
            resolved=len(recipients),
            skipped=len(skipped),
        )

        if not recipients:
            raise NoValidRecipientsError()
        return recipients, skipped
