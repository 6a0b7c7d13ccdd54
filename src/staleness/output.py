"""
Line-oriented output shared by the monitor and the reader.
"""

from __future__ import annotations

import threading
from typing import TextIO


class LineSink:
    """Write whole lines to a text stream, one writer at a time."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._lock = threading.Lock()

    def write_line(self, line: str) -> None:
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()
