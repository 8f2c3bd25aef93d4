"""Bounded, newest-first feed of dashboard events."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from xsip_dashboard.view.dom import Element

DEFAULT_CAPACITY = 20


@dataclass(frozen=True)
class ActivityLogEntry:
    """One line of the activity feed."""

    timestamp: datetime
    message: str

    def format(self) -> str:
        return f"{self.timestamp:%H:%M:%S} — {self.message}"


class ActivityLog:
    """Ring buffer of the most recent activity entries, newest first.

    Lives only as long as the page session; ``clear`` starts a new one.
    When bound to an element, every change re-renders the whole list into it.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        *,
        clock: Callable[[], datetime] = datetime.now,
        element: Element | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._entries: deque[ActivityLogEntry] = deque(maxlen=capacity)
        self._clock = clock
        self._element = element

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or DEFAULT_CAPACITY

    @property
    def entries(self) -> list[ActivityLogEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def latest(self) -> ActivityLogEntry | None:
        return self._entries[0] if self._entries else None

    def append(self, message: str) -> ActivityLogEntry:
        """Record ``message`` at the current local time; the oldest entry drops off when full."""
        entry = ActivityLogEntry(timestamp=self._clock(), message=message)
        self._entries.appendleft(entry)
        self.render()
        return entry

    def clear(self) -> None:
        self._entries.clear()
        self.render()

    def render(self) -> None:
        if self._element is None:
            return
        self._element.replace_children(
            Element("li", text=entry.format()) for entry in self._entries
        )
