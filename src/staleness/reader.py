"""
Input loop that proves stream liveness.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from staleness.output import LineSink
from utils import LOGGER_NAME, ActivityTracker


class InputReader:
    """Consume input lines, record activity and optionally forward them."""

    def __init__(
        self,
        tracker: ActivityTracker,
        sink: Optional[LineSink] = None,
        passthrough: bool = False,
        encoding: str = "utf-8",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if passthrough and sink is None:
            raise ValueError("passthrough requires an output sink")
        self.tracker = tracker
        self.sink = sink
        self.passthrough = passthrough
        self.encoding = encoding
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.lines_read = 0
        self.lines_dropped = 0

    def run(self, stream: BinaryIO) -> int:
        """Read until end of stream and return the number of lines accepted."""
        for raw in stream:
            try:
                line = raw.decode(self.encoding)
            except UnicodeDecodeError as exc:
                self.lines_dropped += 1
                self.logger.debug("Dropping undecodable input line: %s", exc)
                continue
            self.tracker.touch()
            self.lines_read += 1
            if self.passthrough:
                self._forward(_strip_line_ending(line))
        self.logger.debug(
            "End of input: %d lines read, %d dropped.", self.lines_read, self.lines_dropped
        )
        return self.lines_read

    def _forward(self, line: str) -> None:
        try:
            self.sink.write_line(line)
        except (OSError, ValueError) as exc:
            self.logger.debug("Passthrough write failed: %s", exc)


def _strip_line_ending(line: str) -> str:
    """Drop one trailing newline and at most one carriage return before it."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line
