"""
Periodic staleness checks and the alert latch.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from config import DEFAULT_MESSAGE
from staleness.output import LineSink
from staleness.template import render_alert
from utils import LOGGER_NAME, ActivityTracker, ClockError, timestamp_ms

EXIT_CLOCK_ERROR = 3

ARMED = "armed"
DISARMED = "disarmed"


def is_stale(now: int, seen: int, threshold: int) -> bool:
    """True once ``threshold`` ms have elapsed since ``seen``, boundary included."""
    return now - threshold >= seen


def terminate_process(code: int) -> None:
    """Exit immediately without unwinding the reader loop."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass
    os._exit(code)


@dataclass(frozen=True)
class AlertPolicy:
    """What to do when the stream goes stale."""

    message: str = DEFAULT_MESSAGE
    rearm: bool = True
    exit_code: Optional[int] = None
    time_format: Optional[str] = None


class AlertLatch:
    """Armed/disarmed flag; only the monitor thread touches it."""

    def __init__(self, rearm: bool = True) -> None:
        self.rearm = rearm
        self.state = ARMED

    @property
    def armed(self) -> bool:
        return self.state == ARMED

    def fired(self) -> None:
        if not self.rearm:
            self.state = DISARMED


class StalenessMonitor:
    """Check the activity tracker every threshold period and raise alerts."""

    def __init__(
        self,
        tracker: ActivityTracker,
        threshold_ms: int,
        sink: LineSink,
        policy: Optional[AlertPolicy] = None,
        clock: Callable[[], int] = timestamp_ms,
        terminate: Callable[[int], None] = terminate_process,
        logger: Optional[logging.Logger] = None,
        snapshot_timeout_seconds: float = 1.0,
    ) -> None:
        if threshold_ms <= 0:
            raise ValueError("threshold_ms must be positive")
        self.tracker = tracker
        self.threshold_ms = threshold_ms
        self.sink = sink
        self.policy = policy or AlertPolicy()
        self.clock = clock
        self.terminate = terminate
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.snapshot_timeout_seconds = snapshot_timeout_seconds
        self.latch = AlertLatch(rearm=self.policy.rearm)
        self.alerts_emitted = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "StalenessMonitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="staleness-monitor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=5)
        self._thread = None

    def tick(self) -> bool:
        """Run one staleness check. Returns True if an alert was emitted."""
        try:
            now = self.clock()
        except ClockError:
            self.logger.exception("Clock unavailable; cannot evaluate staleness.")
            self.terminate(EXIT_CLOCK_ERROR)
            return False
        seen = self.tracker.try_snapshot(self.snapshot_timeout_seconds)
        if seen is None:
            self.logger.debug("Activity tracker busy; skipping this check.")
            return False
        if not (self.latch.armed and is_stale(now, seen, self.threshold_ms)):
            return False

        message = render_alert(self.policy.message, now, seen, self.policy.time_format)
        try:
            self.sink.write_line(message)
        except (OSError, ValueError) as exc:
            self.logger.warning("Failed to write stale alert: %s", exc)
        self.alerts_emitted += 1
        self.latch.fired()
        self.logger.info("Stream stale for %d ms (alert #%d).", now - seen, self.alerts_emitted)
        if not self.latch.armed:
            self.logger.info("No-rearm set; further alerts are disabled.")
        if self.policy.exit_code is not None:
            self.logger.info("Exiting with code %d after stale alert.", self.policy.exit_code)
            self.terminate(self.policy.exit_code)
        return True

    def _run(self) -> None:
        period = self.threshold_ms / 1000
        started = time.monotonic()
        ticks = 1
        while not self._stop_event.wait(max(started + ticks * period - time.monotonic(), 0)):
            self.tick()
            elapsed = time.monotonic() - started
            ticks = max(ticks + 1, int(elapsed // period) + 1)
