"""User-visible notifications (toasts) raised by the sync engine.

Messages pushed here are meant for direct display; the presentation layer
subscribes and renders them however it likes.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    created_at: str = field(default_factory=_now_iso)


Listener = Callable[[Notification], None]


class NotificationCenter:
    """Keep the most recent notifications and fan them out to listeners."""

    def __init__(self, max_items: int = 50):
        """Initialize the notification center.

        Args:
            max_items: How many notifications to retain.
        """
        self._items: deque[Notification] = deque(maxlen=max_items)
        self._listeners: list[Listener] = []

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    @property
    def latest(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def error(self, message: str) -> Notification:
        return self._push("error", message)

    def info(self, message: str) -> Notification:
        return self._push("info", message)

    def clear(self) -> None:
        self._items.clear()

    def _push(self, level: str, message: str) -> Notification:
        note = Notification(level=level, message=message)
        self._items.append(note)
        if level == "error":
            logger.warning("Notification: {}", message)
        else:
            logger.info("Notification: {}", message)
        for listener in list(self._listeners):
            listener(note)
        return note
