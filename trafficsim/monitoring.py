"""CPU and memory sampling from /proc."""

from __future__ import annotations

import math
import re
import threading
from dataclasses import dataclass
from pathlib import Path

_CPU_LINE = re.compile(r"cpu\s*(\d+)\s+(\d+)\s+(\d+)\s+(\d+)")
_VM_SIZE = re.compile(r"VmSize:\s*([+-]?\d+)")


@dataclass(frozen=True)
class SystemMetrics:
    """CPU usage in percent and virtual memory size in kB."""

    cpu_usage: float
    memory_kb: int


def parse_cpu_times(line: str) -> tuple[int, int, int, int]:
    """Return (user, nice, system, idle) from the aggregate ``cpu`` line."""
    match = _CPU_LINE.match(line)
    if match is None:
        raise ValueError(f"not a cpu line: {line!r}")
    user, nice, system, idle = map(int, match.groups())
    return user, nice, system, idle


def parse_vm_size(text: str) -> int:
    """Return VmSize in kB from a process status text, or 0."""
    for line in text.splitlines():
        if "VmSize:" in line:
            match = _VM_SIZE.match(line)
            return int(match.group(1)) if match else 0
    return 0


class PerformanceMonitor:
    """Samples CPU and memory usage once per interval."""

    def __init__(self, stat_path="/proc/stat", status_path="/proc/self/status", on_sample=None, interval=1.0):
        self.stat_path = Path(stat_path)
        self.status_path = Path(status_path)
        self.interval = interval
        self.latest = None
        self._on_sample = on_sample
        self._last_total = 0
        self._last_idle = 0

    def sample(self):
        """Take one sample relative to the last; None if CPU times are unavailable."""
        try:
            with open(self.stat_path, encoding="utf-8") as handle:
                user, nice, system, idle = parse_cpu_times(handle.readline())
        except (OSError, ValueError):
            return None
        total = user + nice + system
        diff_idle, diff_total = idle - self._last_idle, total - self._last_total
        if diff_total:
            ratio = diff_idle / diff_total
        else:
            ratio = math.copysign(math.inf, diff_idle) if diff_idle else math.nan
        try:
            status = self.status_path.read_text(encoding="utf-8")
        except OSError:
            status = ""
        self.latest = SystemMetrics(100.0 * (1.0 - ratio), parse_vm_size(status))
        self._last_total, self._last_idle = total, idle
        if self._on_sample is not None:
            self._on_sample(self.latest)
        return self.latest

    def run(self, stop_event: threading.Event) -> None:
        """Sample until ``stop_event`` is set."""
        while not stop_event.is_set():
            self.sample()
            if stop_event.wait(self.interval):
                break