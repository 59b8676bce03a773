"""Integration tests for the realtime notification websocket."""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import anyio
import pytest

pytest.importorskip("fastapi")
from jose import jwt
from starlette.websockets import WebSocketDisconnect

from friendbook.config import get_settings
from friendbook.infrastructure.database import SessionLocal
from friendbook.infrastructure.models import UserModel
from friendbook.infrastructure.notifications import Connection
from friendbook.infrastructure.security import create_access_token
from friendbook.interfaces.api.routes import notifications as notifications_routes


def _headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _publish_post(client, token: str, text: str = "Hello there") -> str:
    response = client.post("/posts/", json={"text": text}, headers=_headers(token))
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _expect_rejection(client, url: str) -> WebSocketDisconnect:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect(url):
            pass
    return exc_info.value


def _registry(client):
    return client.app.state.connection_registry


def test_handshake_without_token_is_rejected(client):
    rejection = _expect_rejection(client, "/notifications/ws")

    assert rejection.code == 1008
    assert rejection.reason == "missing_token"
    assert _registry(client).connection_count == 0


def test_handshake_with_tampered_token_is_rejected(client, make_user):
    _, token = make_user("Bob")

    rejection = _expect_rejection(client, f"/notifications/ws?token={token}tampered")

    assert rejection.code == 1008
    assert rejection.reason == "invalid_token"
    assert _registry(client).connection_count == 0


def test_handshake_with_expired_token_is_rejected(client, make_user):
    bob_id, _ = make_user("Bob")
    expired = create_access_token(bob_id, expires_delta=timedelta(minutes=-1))

    rejection = _expect_rejection(client, f"/notifications/ws?token={expired}")

    assert rejection.code == 1008
    assert rejection.reason == "expired_token"
    assert _registry(client).connection_count == 0


def test_handshake_with_token_lacking_subject_is_rejected(client):
    settings = get_settings()
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )

    rejection = _expect_rejection(client, f"/notifications/ws?token={token}")

    assert rejection.reason == "malformed_token"
    assert _registry(client).connection_count == 0


def test_handshake_for_unknown_user_is_rejected(client):
    token = create_access_token("00000000-0000-0000-0000-000000000000")

    rejection = _expect_rejection(client, f"/notifications/ws?token={token}")

    assert rejection.reason == "unknown_user"
    assert _registry(client).connection_count == 0


def test_handshake_for_inactive_user_is_rejected(client, make_user):
    bob_id, token = make_user("Bob")
    session = SessionLocal()
    try:
        session.get(UserModel, bob_id).is_active = False
        session.commit()
    finally:
        session.close()

    rejection = _expect_rejection(client, f"/notifications/ws?token={token}")

    assert rejection.reason == "inactive_user"
    assert _registry(client).connection_count == 0


def test_slow_credential_check_times_out(client, make_user, monkeypatch):
    _, token = make_user("Bob")

    async def stalled_threadpool(func, *args):
        await anyio.sleep(5)
        return func(*args)

    monkeypatch.setattr(notifications_routes, "run_in_threadpool", stalled_threadpool)
    monkeypatch.setattr(get_settings(), "websocket_handshake_timeout_seconds", 0.05)

    rejection = _expect_rejection(client, f"/notifications/ws?token={token}")

    assert rejection.code == 1008
    assert rejection.reason == "handshake_timeout"
    assert _registry(client).connection_count == 0


def test_ready_then_ping_pong_and_cleanup(client, make_user):
    bob_id, token = make_user("Bob")

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        assert websocket.receive_json() == {"type": "ready", "payload": {"userId": bob_id}}
        assert _registry(client).is_online(bob_id)

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_text("not json")
        websocket.send_json({"type": "presence"})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert not _registry(client).is_online(bob_id)
    assert _registry(client).connection_count == 0


def test_like_is_pushed_exactly_once_to_the_author(client, make_user):
    bob_id, bob_token = make_user("Bob")
    alice_id, alice_token = make_user("Alice")
    post_id = _publish_post(client, bob_token)

    with client.websocket_connect(f"/notifications/ws?token={bob_token}") as websocket:
        websocket.receive_json()

        response = client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))
        assert response.status_code == 200
        assert response.json()["total_likes"] == 1

        envelope = websocket.receive_json()
        assert envelope["type"] == "new_notification"
        payload = envelope["payload"]
        assert payload["type"] == "postLiked"
        assert payload["relatedId"] == post_id
        assert payload["recipientId"] == bob_id
        assert payload["sender"]["id"] == alice_id
        assert payload["sender"]["name"] == "Alice"
        assert payload["isRead"] is False

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    listing = client.get("/notifications/", headers=_headers(bob_token)).json()
    assert [item["id"] for item in listing["notifications"]] == [payload["id"]]


def test_every_tab_of_the_recipient_receives_the_push(client, make_user):
    _, bob_token = make_user("Bob")
    _, alice_token = make_user("Alice")
    post_id = _publish_post(client, bob_token)
    url = f"/notifications/ws?token={bob_token}"

    with client.websocket_connect(url) as first, client.websocket_connect(url) as second:
        first.receive_json()
        second.receive_json()

        client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))

        first_payload = first.receive_json()["payload"]
        second_payload = second.receive_json()["payload"]
        assert first_payload == second_payload
        assert first_payload["type"] == "postLiked"


def test_other_users_do_not_receive_the_push(client, make_user):
    _, bob_token = make_user("Bob")
    _, alice_token = make_user("Alice")
    _, carol_token = make_user("Carol")
    post_id = _publish_post(client, bob_token)

    with client.websocket_connect(f"/notifications/ws?token={carol_token}") as websocket:
        websocket.receive_json()

        client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}


def test_offline_recipient_finds_the_event_in_the_durable_list(client, make_user):
    _, bob_token = make_user("Bob")
    alice_id, alice_token = make_user("Alice")
    post_id = _publish_post(client, bob_token)

    client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))

    response = client.get("/notifications/", headers=_headers(bob_token))
    assert response.status_code == 200
    body = response.json()
    assert body["currentPage"] == 1
    assert body["totalPages"] == 1
    assert body["totalNotifications"] == 1
    [item] = body["notifications"]
    assert item["type"] == "postLiked"
    assert item["relatedId"] == post_id
    assert item["sender"]["id"] == alice_id


def test_liking_own_post_creates_no_notification(client, make_user):
    _, bob_token = make_user("Bob")
    post_id = _publish_post(client, bob_token)

    with client.websocket_connect(f"/notifications/ws?token={bob_token}") as websocket:
        websocket.receive_json()

        response = client.post(f"/posts/{post_id}/like", headers=_headers(bob_token))
        assert response.status_code == 200

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    body = client.get("/notifications/", headers=_headers(bob_token)).json()
    assert body["totalNotifications"] == 0


def test_unlike_does_not_notify_again(client, make_user):
    _, bob_token = make_user("Bob")
    _, alice_token = make_user("Alice")
    post_id = _publish_post(client, bob_token)

    client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))
    unliked = client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))

    assert unliked.json()["total_likes"] == 0
    body = client.get("/notifications/", headers=_headers(bob_token)).json()
    assert body["totalNotifications"] == 1


def test_ack_over_websocket_marks_notifications_read(client, make_user):
    _, bob_token = make_user("Bob")
    _, alice_token = make_user("Alice")
    post_id = _publish_post(client, bob_token)

    with client.websocket_connect(f"/notifications/ws?token={bob_token}") as websocket:
        websocket.receive_json()
        client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))
        notification_id = websocket.receive_json()["payload"]["id"]

        websocket.send_json({"type": "ack", "ids": [notification_id]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    unread = client.get(
        "/notifications/", params={"isRead": "false"}, headers=_headers(bob_token)
    ).json()
    assert unread["totalNotifications"] == 0


class _StalledWebSocket:
    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.sent: list[dict] = []

    async def send_json(self, message: dict) -> None:
        await anyio.sleep(self.delay)
        self.sent.append(message)

    async def close(self, code: int = 1000) -> None:
        return None


def test_stalled_recipient_socket_does_not_delay_the_action(client, make_user):
    bob_id, bob_token = make_user("Bob")
    _, alice_token = make_user("Alice")
    post_id = _publish_post(client, bob_token)
    stalled = _StalledWebSocket(delay=1.5)
    _registry(client).register(Connection(stalled, bob_id))

    started = time.monotonic()
    response = client.post(f"/posts/{post_id}/like", headers=_headers(alice_token))
    elapsed = time.monotonic() - started

    assert response.status_code == 200
    assert elapsed < 1.0
    assert client.app.state.event_dispatcher.pending_count == 1
