"""Clock and id provider injected into repositories.

Ids follow the stored format of the browser build: the creation time in
milliseconds as a decimal string. Two ids issued within the same millisecond
are bumped so each one stays unique inside the process.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import threading


def format_timestamp(value: datetime) -> str:
    """Serialize an aware datetime as ISO-8601 in UTC (millisecond precision)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse stored ISO-8601 strings; naive values are read as UTC. Returns None if unparseable."""
    if not value or not isinstance(value, str):
        return None
    raw = value.strip()
    if raw.endswith("Z") or raw.endswith("z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Clock:
    """Wall clock plus monotonic millisecond ids."""

    def __init__(self) -> None:
        self._last_id = 0
        self._lock = threading.Lock()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> str:
        return format_timestamp(self.now())

    def new_id(self) -> str:
        candidate = int(self.now().timestamp() * 1000)
        with self._lock:
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
        return str(candidate)


class FixedClock(Clock):
    """Deterministic clock for tests and scripted imports."""

    def __init__(self, start: datetime) -> None:
        super().__init__()
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        self._now = value

    def advance(self, **delta: float) -> datetime:
        self._now = self._now + timedelta(**delta)
        return self._now
