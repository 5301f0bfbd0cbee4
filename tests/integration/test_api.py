"""Integration smoke tests for REST and WS (using the in-memory UoW via dependency override)."""
from __future__ import annotations

import uuid

import jwt
import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from campus_chat.api.deps import get_storage, get_uow
from campus_chat.api.v1.routers import health
from campus_chat.app import create_app
from campus_chat.config import settings
from campus_chat.domain.value_objects.shared_ref import SharedRef
from campus_chat.infrastructure.realtime.router import ChangeRouter
from tests.conftest import FakeStore, FakeUoW, make_group, make_message, make_profile, uow_factory


class MemoryStorage:
    def __init__(self) -> None:
        self.paths: list[str] = []

    async def upload(self, bucket, path, data, *, content_type=None):
        self.paths.append(path)
        return path

    def public_url(self, bucket, path):
        return f"https://cdn.test/{bucket}/{path}"


def _make_token(sub: uuid.UUID, email: str | None = None) -> str:
    return jwt.encode(
        {"sub": str(sub), "email": email, "role": "authenticated"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def _auth(user_id: uuid.UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {_make_token(user_id)}"}


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def client(store, storage):
    app = create_app()

    async def _override():
        yield FakeUoW(store)

    app.dependency_overrides[get_uow] = _override
    app.dependency_overrides[get_storage] = lambda: storage
    app.state.uow_factory = uow_factory(store)
    app.state.change_router = ChangeRouter()
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def alice_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def bob_id() -> uuid.UUID:
    return uuid.uuid4()


def test_healthz(client):
    resp = client.get("/healthz", headers={"X-Correlation-ID": "abc123"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["x-request-id"] == "abc123"


def test_readyz_reports_database_outage(client, monkeypatch):
    class Redis:
        async def ping(self):
            return True

    class Subscriber:
        running = True

    async def database_down():
        raise OSError("connection refused")

    monkeypatch.setattr(health, "ping_database", database_down)
    client.app.state.redis = Redis()
    client.app.state.pubsub_subscriber = Subscriber()

    resp = client.get("/readyz")

    assert resp.status_code == 503
    assert resp.json()["errors"] == ["postgres: connection refused"]


def test_conversations_require_token(client):
    resp = client.get("/api/v1/chat/conversations")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_bad_token_rejected(client):
    resp = client.get(
        "/api/v1/chat/conversations",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


def test_send_list_and_inbox(client, store, alice_id, bob_id):
    store.users[bob_id] = make_profile(bob_id, "Bob")

    resp = client.post(
        f"/api/v1/chat/direct/{bob_id}/messages",
        json={"body": "hi"},
        headers=_auth(alice_id),
    )
    assert resp.status_code == 201
    sent = resp.json()
    assert sent["receiver_id"] == str(bob_id)
    assert sent["scope"] == "direct"

    thread = client.get(f"/api/v1/chat/direct/{bob_id}/messages", headers=_auth(alice_id)).json()
    assert [m["id"] for m in thread] == [sent["id"]]

    [conv] = client.get("/api/v1/chat/conversations", headers=_auth(alice_id)).json()
    assert conv["partner"]["name"] == "Bob"
    assert conv["last_message_text"] == "hi"
    assert conv["unread"] is False


def test_empty_message_is_422(client, alice_id, bob_id):
    resp = client.post(
        f"/api/v1/chat/direct/{bob_id}/messages",
        json={"body": "   "},
        headers=_auth(alice_id),
    )
    assert resp.status_code == 422


def test_two_shared_references_rejected(client, alice_id, bob_id):
    resp = client.post(
        f"/api/v1/chat/direct/{bob_id}/messages",
        json={"shared_post_id": str(uuid.uuid4()), "shared_user_id": str(uuid.uuid4())},
        headers=_auth(alice_id),
    )
    assert resp.status_code == 422


def test_shared_post_preview_in_thread(client, store, alice_id, bob_id):
    missing_post = uuid.uuid4()
    store.messages.append(make_message(
        sender_id=bob_id, receiver_id=alice_id, body="look",
        shared=SharedRef.post(missing_post),
    ))

    [msg] = client.get(f"/api/v1/chat/direct/{bob_id}/messages", headers=_auth(alice_id)).json()

    assert msg["shared_kind"] == "post"
    assert msg["shared"]["available"] is False
    assert msg["shared"]["label"] == "Post unavailable"


def test_only_sender_can_delete(client, store, alice_id, bob_id):
    msg = make_message(sender_id=alice_id, receiver_id=bob_id)
    store.messages.append(msg)

    assert client.delete(f"/api/v1/chat/messages/{msg.id}", headers=_auth(bob_id)).status_code == 403
    assert client.delete(f"/api/v1/chat/messages/{msg.id}", headers=_auth(alice_id)).status_code == 204
    assert client.delete(f"/api/v1/chat/messages/{msg.id}", headers=_auth(alice_id)).status_code == 404


def test_group_lifecycle(client, store, alice_id, bob_id):
    store.users[alice_id] = make_profile(alice_id, "Alice", college="MIT")

    resp = client.post(
        "/api/v1/groups",
        json={"name": "Robotics", "visibility": "my-college", "members": [str(bob_id)]},
        headers=_auth(alice_id),
    )
    assert resp.status_code == 201
    group = resp.json()
    assert group["college"] == "MIT"

    members = client.get(f"/api/v1/groups/{group['id']}/members", headers=_auth(alice_id)).json()
    assert {m["user_id"]: m["role"] for m in members} == {str(alice_id): "admin", str(bob_id): "member"}

    resp = client.post(
        f"/api/v1/chat/groups/{group['id']}/messages",
        json={"body": "meeting at 5"},
        headers=_auth(bob_id),
    )
    assert resp.status_code == 201
    assert resp.json()["group_id"] == group["id"]

    assert client.delete(f"/api/v1/groups/{group['id']}", headers=_auth(bob_id)).status_code == 403
    assert client.delete(f"/api/v1/groups/{group['id']}", headers=_auth(alice_id)).status_code == 204
    assert client.get(f"/api/v1/groups/{group['id']}", headers=_auth(alice_id)).status_code == 404


def test_group_messages_forbidden_for_outsider(client, store, alice_id, bob_id):
    group = make_group(created_by=alice_id)
    store.groups[group.id] = group
    store.add_member(group.id, alice_id)

    resp = client.get(f"/api/v1/chat/groups/{group.id}/messages", headers=_auth(bob_id))
    assert resp.status_code == 403


def test_toggle_like(client, alice_id):
    post_id = uuid.uuid4()
    url = f"/api/v1/interactions/post/{post_id}/like"

    assert client.post(f"{url}/toggle", headers=_auth(alice_id)).json() == {
        "count": 1, "viewer_has_acted": True,
    }
    assert client.get(url).json() == {"count": 1, "viewer_has_acted": False}
    assert client.post(f"{url}/toggle", headers=_auth(alice_id)).json() == {
        "count": 0, "viewer_has_acted": False,
    }
    assert client.post(f"{url}/toggle").status_code == 401


def test_share_and_follow(client, store, alice_id, bob_id):
    store.users[bob_id] = make_profile(bob_id, "Bob")
    assert client.put(f"/api/v1/follows/{bob_id}", headers=_auth(alice_id)).status_code == 204
    assert client.put(f"/api/v1/follows/{alice_id}", headers=_auth(bob_id)).status_code == 204

    targets = client.get("/api/v1/share/targets", headers=_auth(alice_id)).json()
    assert [u["id"] for u in targets["users"]] == [str(bob_id)]

    resp = client.post(
        "/api/v1/share",
        json={"kind": "project", "entity_id": str(uuid.uuid4()), "receiver_id": str(bob_id)},
        headers=_auth(alice_id),
    )
    assert resp.status_code == 201
    assert resp.json()["shared_kind"] == "project"

    resp = client.post(
        "/api/v1/share",
        json={"kind": "project", "entity_id": str(uuid.uuid4())},
        headers=_auth(alice_id),
    )
    assert resp.status_code == 422


def test_upload_attachment(client, storage, alice_id):
    resp = client.post(
        "/api/v1/attachments",
        files={"file": ("cat.png", b"\x89PNG", "image/png")},
        headers=_auth(alice_id),
    )

    assert resp.status_code == 201
    assert resp.json()["kind"] == "image"
    [path] = storage.paths
    assert path.startswith(f"{alice_id}/") and path.endswith(".png")


def test_ws_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/chat?token=bad") as ws:
            ws.receive_text()


def test_ws_open_and_send(client, store, alice_id, bob_id):
    with client.websocket_connect(f"/ws/chat?token={_make_token(alice_id)}") as ws:
        ws.send_json({"type": "ping"})
        assert ws.receive_json()["type"] == "pong"

        ws.send_json({"type": "open", "data": {"partner_id": str(bob_id)}})
        opened = ws.receive_json()
        assert opened["type"] == "thread"
        assert opened["data"]["messages"] == []

        ws.send_json({"type": "send", "data": {"partner_id": str(bob_id), "body": "hey"}})
        pushed = ws.receive_json()
        assert pushed["type"] == "thread"
        assert [m["body"] for m in pushed["data"]["messages"]] == ["hey"]

        ws.send_json({"type": "nope"})
        assert ws.receive_json()["data"]["code"] == "unknown_type"

    assert len(store.messages) == 1
