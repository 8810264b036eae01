"""
Narration log.

Human-readable event lines for the presentation and speech collaborators.
Delivery to listeners is best effort: a failing listener is logged and
skipped.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    t: float
    msg: str


class EventLog:
    """Newest-first bounded list of narration lines."""

    def __init__(self, capacity: int = 60):
        self.capacity = capacity
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._listeners: List[Callable[[str], None]] = []

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def push(self, msg: str) -> None:
        self._entries.appendleft(LogEntry(time.time(), msg))
        logger.debug("narrate: %s", msg)
        for listener in list(self._listeners):
            try:
                listener(msg)
            except Exception:
                logger.warning("Narration listener %r failed", listener, exc_info=True)

    @property
    def messages(self) -> List[str]:
        return [e.msg for e in self._entries]

    @property
    def latest(self) -> str:
        return self._entries[0].msg if self._entries else ""

    def copy(self) -> 'EventLog':
        new_log = EventLog(self.capacity)
        new_log._entries = deque(self._entries, maxlen=self.capacity)
        return new_log

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)
