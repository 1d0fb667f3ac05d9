"""Simulation configuration loading and reloading."""

from __future__ import annotations

import os
import re
import threading
from dataclasses import dataclass, fields
from pathlib import Path

from .model import (
    MAX_EMERGENCY_VEHICLES,
    MAX_VEHICLES,
    NUM_INTERSECTIONS,
    NUM_ROADS_PER_INTERSECTION,
    SIMULATION_DURATION,
)


@dataclass
class Config:
    """Simulation settings, in the order they appear in the file."""

    simulation_duration: int = SIMULATION_DURATION
    num_intersections: int = NUM_INTERSECTIONS
    num_roads: int = NUM_ROADS_PER_INTERSECTION
    max_vehicles: int = MAX_VEHICLES
    max_emergency: int = MAX_EMERGENCY_VEHICLES
    vehicle_gen_interval: int = 0
    emergency_gen_interval: int = 0
    scheduling_policy: int = 0


def load_config(path) -> Config:
    """Read ``key=value`` lines in field order, stopping at the first mismatch.

    Raises ``OSError`` if the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    values = {}
    pos = 0
    for f in fields(Config):
        match = re.compile(rf"{f.name}=\s*([+-]?\d+)\s*").match(text, pos)
        if match is None:
            break
        values[f.name] = int(match.group(1))
        pos = match.end()
    return Config(**values)


class ConfigWatcher:
    """Reloads the configuration whenever its file changes."""

    def __init__(self, path, logger=None, on_reload=None, interval=1.0):
        self.path = Path(path)
        self.interval = interval
        self._logger = logger
        self._on_reload = on_reload
        self._signature = self._stat()
        self.config = load_config(self.path)

    def _stat(self):
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return None
        return st.st_mtime_ns, st.st_size

    def check(self) -> bool:
        """Reload if the file changed; report whether it did."""
        signature = self._stat()
        if signature is None or signature == self._signature:
            return False
        self._signature = signature
        self.config = load_config(self.path)
        if self._logger is not None:
            self._logger.log("Configuration reloaded")
        if self._on_reload is not None:
            self._on_reload(self.config)
        return True

    def run(self, stop_event: threading.Event) -> None:
        """Poll the file until ``stop_event`` is set."""
        while not stop_event.wait(self.interval):
            self.check()