"""Timestamped event log."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path


def format_log_line(when: datetime, message: str) -> str:
    """Prefix a message with a bracketed timestamp."""
    return f"[{when:%Y-%m-%d %H:%M:%S}] {message}"


class EventLogger:
    """Appends one line per event to a log file."""

    def __init__(self, path="traffic_sim.log", clock=datetime.now):
        self.path = Path(path)
        self._clock = clock
        self._lock = threading.Lock()

    def log(self, message: str, *args):
        """Append ``message % args``; return the line, or None if unwritable."""
        line = format_log_line(self._clock(), message % args if args else message)
        with self._lock:
            try:
                with open(self.path, "a", encoding="utf-8") as handle:
                    handle.write(line + "\n")
            except OSError:
                return None
        return line