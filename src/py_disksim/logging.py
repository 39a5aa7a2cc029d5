"""Simulator event log.

The simulator records a structured entry for everything the user does
to it: queueing and removing requests, loading presets, changing the
head, size or direction, and starting or pausing playback.  This is
the feed a console panel displays.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, step).
- **Logger** — an append-only log with optional capacity, filtering
  and clearing.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **Bounded buffer** — a console only shows the most recent events,
      so a capacity drops the oldest entries once full.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Severity levels for log entries.

    SUCCESS sits between INFO and WARNING: it is routine, but worth
    highlighting (a request was accepted, a preset loaded).
    """

    DEBUG = 0
    INFO = 1
    SUCCESS = 2
    WARNING = 3
    ERROR = 4


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "playback").
        step: The playback step when the event was logged.

    """

    level: LogLevel
    message: str
    source: str
    step: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {"level": self.level.name, "message": self.message, "source": self.source, "step": self.step}


class Logger:
    """Append-only log buffer with filtering.

    With a ``capacity`` the buffer keeps only the newest entries.
    """

    def __init__(self, *, capacity: int | None = None) -> None:
        """Create an empty logger.

        Args:
            capacity: Maximum entries kept, or None for unbounded.

        Raises:
            ValueError: If the capacity is not positive.

        """
        if capacity is not None and capacity <= 0:
            msg = f"Capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int | None:
        """Return the maximum number of retained entries."""
        return self._entries.maxlen

    @property
    def entries(self) -> list[LogEntry]:
        """Return retained entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        step: int = 0,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            step: Playback step at the time of the event.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, step=step))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result

    def messages(self) -> list[str]:
        """Return every retained entry formatted as a string."""
        return [str(e) for e in self._entries]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of retained entries."""
        return len(self._entries)
