"""/notifications/messages route tests -- list, lookup, delete"""

from httpx import AsyncClient
from notifyhub.core.models import Channel
from notifyhub.gateway.services.dispatch_service import DispatchCoordinator
from notifyhub.gateway.services.recipient_resolver import RecipientResolver


class TestMessageLookup:
    async def test_dispatched_message(self, client: AsyncClient):
        dispatch = await client.post(
            "/notifications/dispatch",
            json={
                "personnelIds": ["p1", "p2", "p3"],
                "subject": "Roll call",
                "message": "Report at 0600",
                "channels": ["email", "sms"],
            },
        )
        message_id = dispatch.json()["messageId"]

        resp = await client.get(f"/notifications/messages/{message_id}")

        assert resp.status_code == 200
        data = resp.json()
        assert data["message"]["subject"] == "Roll call"
        assert data["message"]["channels"] == ["email", "sms"]
        assert len(data["recipients"]) == 4
        assert data["pending"] == 0
        assert data["report"]["total"] == dispatch.json()["total"]

    async def test_unknown_message(self, client: AsyncClient):
        resp = await client.get("/notifications/messages/01HZZZZZZZZZZZZZZZZZZZZZZZ")
        assert resp.status_code == 404
        assert "does not exist" in resp.json()["error"]

    async def test_ledger_disabled(self, test_app, client: AsyncClient, email_provider):
        store_group = test_app.state.store_group
        test_app.state.dispatch_coordinator = DispatchCoordinator(
            resolver=RecipientResolver(store_group.contact_directory),
            providers={Channel.EMAIL: email_provider},
        )
        resp = await client.get("/notifications/messages/01HZZZZZZZZZZZZZZZZZZZZZZZ")
        assert resp.status_code == 404
        assert resp.json() == {"error": "delivery ledger is disabled"}


async def _dispatch(client: AsyncClient, subject: str) -> str:
    resp = await client.post(
        "/notifications/dispatch",
        json={
            "personnelIds": ["p1", "p2"],
            "subject": subject,
            "message": "Report at 0600",
            "channels": ["email", "sms"],
        },
    )
    return resp.json()["messageId"]


class TestMessageList:
    async def test_newest_first(self, client: AsyncClient):
        first = await _dispatch(client, "First")
        second = await _dispatch(client, "Second")

        resp = await client.get("/notifications/messages")

        assert resp.status_code == 200
        messages = resp.json()["messages"]
        assert [m["message_id"] for m in messages] == [second, first]
        assert messages[0]["subject"] == "Second"
        assert messages[0]["body"] == "Report at 0600"
        assert "created_at" in messages[0]

    async def test_empty_ledger(self, client: AsyncClient):
        resp = await client.get("/notifications/messages")
        assert resp.status_code == 200
        assert resp.json() == {"messages": []}

    async def test_limit(self, client: AsyncClient):
        await _dispatch(client, "First")
        await _dispatch(client, "Second")
        resp = await client.get("/notifications/messages", params={"limit": 1})
        assert len(resp.json()["messages"]) == 1

    async def test_ledger_disabled(self, test_app, client: AsyncClient, email_provider):
        store_group = test_app.state.store_group
        test_app.state.dispatch_coordinator = DispatchCoordinator(
            resolver=RecipientResolver(store_group.contact_directory),
            providers={Channel.EMAIL: email_provider},
        )
        resp = await client.get("/notifications/messages")
        assert resp.status_code == 404
        assert resp.json() == {"error": "delivery ledger is disabled"}


class TestMessageDelete:
    async def test_delete_dispatched_message(self, test_app, client: AsyncClient):
        message_id = await _dispatch(client, "Roll call")

        resp = await client.delete(f"/notifications/messages/{message_id}")

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "messageId": message_id}
        assert (await client.get(f"/notifications/messages/{message_id}")).status_code == 404
        assert await test_app.state.store_group.ledger.get_attempts(message_id) == []

    async def test_only_target_removed(self, client: AsyncClient):
        keep = await _dispatch(client, "Keep")
        drop = await _dispatch(client, "Drop")

        await client.delete(f"/notifications/messages/{drop}")

        messages = (await client.get("/notifications/messages")).json()["messages"]
        assert [m["message_id"] for m in messages] == [keep]

    async def test_unknown_message(self, client: AsyncClient):
        resp = await client.delete("/notifications/messages/01HZZZZZZZZZZZZZZZZZZZZZZZ")
        assert resp.status_code == 404
        assert "does not exist" in resp.json()["error"]
