"""
Activity tracking for the watched input stream.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional


class ClockError(RuntimeError):
    """Raised when the wall clock cannot be read."""


def timestamp_ms() -> int:
    """Return wall-clock milliseconds since the Unix epoch."""
    try:
        now_ns = time.time_ns()
    except OSError as exc:
        raise ClockError(f"Unable to read system clock: {exc}") from exc
    if now_ns < 0:
        raise ClockError("System clock reports a time before the Unix epoch.")
    return now_ns // 1_000_000


@dataclass
class ActivityTracker:
    """Track the last time a line was seen on the input stream."""

    clock: Callable[[], int] = timestamp_ms
    _last_seen: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._last_seen = self.clock()

    def record(self, timestamp: int) -> None:
        with self._lock:
            self._last_seen = timestamp

    def touch(self) -> int:
        now = self.clock()
        self.record(now)
        return now

    def snapshot(self) -> int:
        with self._lock:
            return self._last_seen

    def try_snapshot(self, timeout: float) -> Optional[int]:
        """Return the last activity time, or None if the lock stays busy."""
        if not self._lock.acquire(timeout=timeout):
            return None
        try:
            return self._last_seen
        finally:
            self._lock.release()
