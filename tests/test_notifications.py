"""Tests for notifications module."""

from __future__ import annotations

from kanban_sync.notifications import Notification, NotificationCenter


class TestNotificationCenter:
    def test_error_is_recorded(self) -> None:
        center = NotificationCenter()
        note = center.error("Missing name")
        assert note.level == "error"
        assert center.latest == note
        assert center.items == [note]

    def test_listeners(self) -> None:
        center = NotificationCenter()
        received: list[Notification] = []
        unsubscribe = center.subscribe(received.append)
        center.info("saved")
        unsubscribe()
        center.error("ignored by listener")
        assert [n.message for n in received] == ["saved"]
        assert len(center.items) == 2

    def test_bounded(self) -> None:
        center = NotificationCenter(max_items=2)
        for i in range(5):
            center.error(str(i))
        assert [n.message for n in center.items] == ["3", "4"]

    def test_clear(self) -> None:
        center = NotificationCenter()
        center.error("x")
        center.clear()
        assert center.latest is None
