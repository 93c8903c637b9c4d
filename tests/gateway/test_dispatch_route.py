"""POST /notifications/dispatch tests"""

from httpx import AsyncClient
from notifyhub.core.models import Channel
from notifyhub.gateway.services.dispatch_service import DispatchCoordinator
from notifyhub.gateway.services.recipient_resolver import RecipientResolver


class TestDispatchSuccess:
    async def test_both_channels(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={
                "personnelIds": ["p1", "p2", "p3"],
                "subject": "Roll call",
                "message": "Report at 0600",
                "channels": ["email", "sms"],
            },
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["ok"] is True
        assert len(data["messageId"]) == 26
        assert data["email"] == {"sent": 2, "failed": 0}
        assert data["sms"] == {"sent": 2, "failed": 0}
        assert data["total"] == {"sent": 4, "failed": 0}
        assert data["skipped"] == []

    async def test_channels_default_to_email(self, client: AsyncClient, sms_provider):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1"], "subject": "S", "message": "M"},
        )
        assert resp.status_code == 200
        assert resp.json()["email"]["sent"] == 1
        assert sms_provider.calls == []

    async def test_all_failed_is_still_200(self, test_app, client: AsyncClient, fake_provider_cls):
        store_group = test_app.state.store_group
        test_app.state.dispatch_coordinator = DispatchCoordinator(
            resolver=RecipientResolver(store_group.contact_directory),
            providers={Channel.EMAIL: fake_provider_cls(Channel.EMAIL, fail_ids={"p1"})},
        )

        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1"], "subject": "S", "message": "M"},
        )

        assert resp.status_code == 200
        assert resp.json()["email"] == {"sent": 0, "failed": 1}
        assert resp.json()["messageId"] is None

    async def test_schedule_at_accepted(self, client: AsyncClient, sms_provider):
        resp = await client.post(
            "/notifications/dispatch",
            json={
                "personnelIds": ["p2"],
                "subject": "S",
                "message": "M",
                "channels": ["sms"],
                "scheduleAt": "2026-06-01T08:00:00Z",
            },
        )
        assert resp.status_code == 200
        message, _ = sms_provider.calls[0]
        assert message.schedule_at.year == 2026

    async def test_skipped_in_response(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1", "ghost"], "subject": "S", "message": "M"},
        )
        assert resp.json()["skipped"] == [{"id": "ghost", "reason": "not_found"}]


class TestDispatchErrors:
    async def test_missing_personnel_ids(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={"subject": "S", "message": "M"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "personnelIds is required"}

    async def test_empty_personnel_ids(self, client: AsyncClient, email_provider):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": [], "subject": "S", "message": "M"},
        )
        assert resp.status_code == 400
        assert email_provider.calls == []

    async def test_missing_subject(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1"], "message": "M"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "subject and message are required"}

    async def test_unknown_channel(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1"], "subject": "S", "message": "M", "channels": ["fax"]},
        )
        assert resp.status_code == 400
        assert "fax" in resp.json()["error"]

    async def test_no_valid_recipients(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p4", "ghost"], "subject": "S", "message": "M"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "No valid recipients found"}

    async def test_malformed_body(self, client: AsyncClient):
        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": "p1", "subject": "S", "message": "M"},
        )
        assert resp.status_code == 400
        assert "personnelIds" in resp.json()["error"]

    async def test_email_provider_missing(self, test_app, client: AsyncClient, fake_provider_cls):
        store_group = test_app.state.store_group
        test_app.state.dispatch_coordinator = DispatchCoordinator(
            resolver=RecipientResolver(store_group.contact_directory),
            providers={Channel.SMS: fake_provider_cls(Channel.SMS)},
        )

        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1"], "subject": "S", "message": "M"},
        )

        assert resp.status_code == 500
        assert "email is not configured" in resp.json()["error"]

    async def test_unexpected_error_is_500(self, test_app, client: AsyncClient):
        class ExplodingCoordinator:
            async def dispatch(self, *args, **kwargs):
                raise RuntimeError("directory offline")

        test_app.state.dispatch_coordinator = ExplodingCoordinator()

        resp = await client.post(
            "/notifications/dispatch",
            json={"personnelIds": ["p1"], "subject": "S", "message": "M"},
        )

        assert resp.status_code == 500
        assert resp.json() == {"error": "directory offline"}
