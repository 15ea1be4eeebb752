"""Narrative sink: thread-safe log of announcements exposed via the API."""

from __future__ import annotations

import itertools
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class Announcer(Protocol):
    """Fire-and-forget narrative channel used by every engine."""

    def announce(self, significant: bool, message: str) -> None: ...


@dataclass(frozen=True, slots=True)
class NewsEvent:
    """A single announcement for the news feed."""

    seq: int
    tick: int
    significant: bool
    message: str


class NewsFeed:
    """Bounded ring buffer of announcements.  Writers append; readers copy a slice.

    ``tick`` is set by the simulator before each step so events carry the
    tick they happened on.
    """

    __slots__ = ("_buffer", "_lock", "_seq", "tick")

    def __init__(self, maxlen: int = 2000) -> None:
        self._buffer: deque[NewsEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._seq = itertools.count(1)
        self.tick = 0

    def announce(self, significant: bool, message: str) -> None:
        with self._lock:
            self._buffer.append(NewsEvent(next(self._seq), self.tick, significant, message))
        logger.debug("NEWS%s %s", "!" if significant else "", message)

    def since_tick(self, tick: int) -> list[NewsEvent]:
        """Return all events with tick >= *tick*."""
        with self._lock:
            return [e for e in self._buffer if e.tick >= tick]

    def latest(self, count: int = 50) -> list[NewsEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)


class SafeAnnouncer:
    """Wraps a sink so that a failing sink never disturbs simulation state."""

    __slots__ = ("_sink",)

    def __init__(self, sink: Announcer) -> None:
        self._sink = sink

    def announce(self, significant: bool, message: str) -> None:
        try:
            self._sink.announce(significant, message)
        except Exception:
            logger.exception("Narrative sink failed for message %r", message)

    def death(self, victim: str, killer: str, place: str) -> None:
        self.announce(True, f"{victim} was slain by {killer} at {place}!")
