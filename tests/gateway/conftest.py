"""gateway test config -- coordinator wiring + FastAPI app with manual state"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from notifyhub.core.models import Channel
from notifyhub.core.store import StoreGroup
from notifyhub.gateway.services.dispatch_service import DispatchCoordinator
from notifyhub.gateway.services.recipient_resolver import RecipientResolver


@pytest.fixture
def email_provider(fake_provider_cls):
    return fake_provider_cls(Channel.EMAIL, name="fake-email")


@pytest.fixture
def sms_provider(fake_provider_cls):
    return fake_provider_cls(Channel.SMS, name="fake-sms")


@pytest.fixture
def coordinator(seeded_store_group: StoreGroup, email_provider, sms_provider) -> DispatchCoordinator:
    """Coordinator over the seeded directory, both channels, ledger on"""
    return DispatchCoordinator(
        resolver=RecipientResolver(seeded_store_group.contact_directory),
        providers={Channel.EMAIL: email_provider, Channel.SMS: sms_provider},
        ledger=seeded_store_group.ledger,
    )


@pytest_asyncio.fixture
async def test_app(tmp_path, seeded_store_group: StoreGroup, coordinator: DispatchCoordinator):
    """Full app from create_app(), state set by hand (lifespan bypassed)"""
    os.environ["NOTIFYHUB_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from notifyhub.gateway.main import create_app

    app = create_app()
    app.state.store_group = seeded_store_group
    app.state.dispatch_coordinator = coordinator

    yield app

    os.environ.pop("NOTIFYHUB_DB_PATH", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
