"""Tests for the client side notification inbox."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from friendbook.client import NotificationInbox
from friendbook.infrastructure.notifications import (
    NotificationPayload,
    PushEnvelope,
    SenderSummary,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _payload(notification_id: str, minutes: int = 0, **overrides) -> NotificationPayload:
    values = dict(
        id=notification_id,
        recipient_id="bob",
        sender=SenderSummary(id="alice", name="Alice"),
        type="postLiked",
        related_id="post-1",
        is_read=False,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    values.update(overrides)
    return NotificationPayload(**values)


def test_push_then_backfill_keeps_a_single_copy():
    inbox = NotificationInbox()

    assert inbox.apply_push(PushEnvelope(payload=_payload("n-1"))) is True
    added = inbox.merge_backfill([_payload("n-1", is_read=True), _payload("n-2", minutes=1)])

    assert added == 1
    assert len(inbox) == 2
    assert [item.id for item in inbox.items()] == ["n-2", "n-1"]
    assert "n-1" in inbox


def test_backfilled_copy_wins_over_a_late_push():
    inbox = NotificationInbox()
    inbox.merge_backfill([_payload("n-1", is_read=True)])

    assert inbox.apply_push(PushEnvelope(payload=_payload("n-1"))) is False
    assert inbox.items()[0].is_read is True
    assert inbox.unread_count == 0


def test_mark_read_updates_local_state():
    inbox = NotificationInbox()
    inbox.merge_backfill([_payload("n-1"), _payload("n-2", minutes=1)])

    inbox.mark_read("n-1")
    inbox.mark_read("unknown")
    assert inbox.unread_count == 1

    inbox.mark_all_read()
    assert inbox.unread_count == 0
