"""Store Protocol definitions

ContactDirectory and DeliveryLedger are the two collaborators of the
dispatch path. Python Protocols give structural subtyping, so any object
with these coroutines can be injected.
"""

from typing import Protocol

from ..models import AttemptRecord, ContactRecord, DeliveryAttempt, Message, MessageRecord, Recipient
from ..models.enums import Channel


class ContactDirectory(Protocol):
    """Read-only contact lookup"""

    async def get_contacts(self, ids: list[str]) -> list[ContactRecord]:
        """Batched lookup; unknown ids are simply absent from the result"""
        ...


class DeliveryLedger(Protocol):
    """Durable audit log of messages and per-recipient attempts

    Writes are keyed by (message_id, recipient_id, channel), so
    concurrent writes to different keys never conflict.
    """

    async def create_message(self, message: Message) -> str:
        """Write the message record and return its id"""
        ...

    async def create_attempt_stubs(
        self,
        message_id: str,
        pairs: list[tuple[Recipient, Channel]],
    ) -> None:
        """Write one pending row per (recipient, channel) pair"""
        ...

    async def record_attempt(self, message_id: str, attempt: DeliveryAttempt) -> None:
        """Move a pending row to its terminal status"""
        ...

    async def get_message(self, message_id: str) -> MessageRecord | None:
        """Look up a logged message"""
        ...

    async def list_messages(self, limit: int = 50) -> list[MessageRecord]:
        """Logged messages, newest first"""
        ...

    async def get_attempts(self, message_id: str) -> list[AttemptRecord]:
        """All attempt rows of a message"""
        ...

    async def delete_message(self, message_id: str) -> bool:
        """Remove a message and its attempt rows; False if unknown"""
        ...
