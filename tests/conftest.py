"""Global pytest config -- temporary SQLite fixtures + provider doubles"""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from notifyhub.core.models import Channel, ContactRecord, DeliveryAttempt, Message, Recipient
from notifyhub.core.store import StoreGroup, create_store_group
from notifyhub.provider.base import ChannelProvider


class FakeProvider(ChannelProvider):
    """Recording ChannelProvider double

    fail_ids get a failed attempt, raise_ids make send() raise.
    """

    def __init__(
        self,
        channel: Channel,
        name: str = "fake",
        fail_ids: set[str] | None = None,
        raise_ids: set[str] | None = None,
        delay_s: float = 0.0,
    ) -> None:
        self.channel = channel
        self.name = name
        self.fail_ids = set(fail_ids or ())
        self.raise_ids = set(raise_ids or ())
        self.delay_s = delay_s
        self.calls: list[tuple[Message, Recipient]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def send(self, message: Message, recipient: Recipient) -> DeliveryAttempt:
        self.calls.append((message, recipient))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay_s)
            if recipient.id in self.raise_ids:
                raise RuntimeError(f"boom for {recipient.id}")
            if recipient.id in self.fail_ids:
                return self._failed(recipient, f"rejected {recipient.id}")
            return self._sent(recipient, provider_message_id=f"{self.name}-{recipient.id}")
        finally:
            self.in_flight -= 1

    @property
    def recipient_ids(self) -> list[str]:
        return [recipient.id for _, recipient in self.calls]


SEED_CONTACTS = [
    ContactRecord(id="p1", first_name="Ama", last_name="Mensah", email="ama@example.com"),
    ContactRecord(id="p2", first_name="Kofi", last_name="Boateng", phone="024 123 4567"),
    ContactRecord(
        id="p3",
        first_name="Esi",
        last_name="Owusu",
        email="  esi@example.com ",
        phone=" 0201234567 ",
    ),
    ContactRecord(id="p4", first_name="Yaw", last_name="Asante"),
    ContactRecord(id="p5", first_name="Akua", last_name="Darko", email="   ", phone=""),
]


@pytest.fixture
def fake_provider_cls() -> type[FakeProvider]:
    """FakeProvider class, for tests that build their own doubles"""
    return FakeProvider


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """Temporary SQLite database path"""
    return tmp_path / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_db_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """Initialised temporary SQLite connection"""
    from notifyhub.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_db_path))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """StoreGroup over a temporary database"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.conn.close()


@pytest_asyncio.fixture
async def seeded_store_group(store_group: StoreGroup) -> StoreGroup:
    """StoreGroup with the SEED_CONTACTS personnel rows

    p1: email only, p2: phone only, p3: both (padded with whitespace),
    p4: neither, p5: whitespace-only email and empty phone.
    """
    for contact in SEED_CONTACTS:
        await store_group.contact_directory.upsert_contact(contact)
    return store_group
