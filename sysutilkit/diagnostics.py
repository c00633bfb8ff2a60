"""Processor usage measured from the kernel's cumulative CPU times."""

from __future__ import annotations

import threading
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import Optional, Union

DEFAULT_STAT_PATH = "/proc/stat"


@dataclass(frozen=True)
class CpuTimes:
    """Cumulative CPU time counters, in the order the kernel lists them."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0

    @property
    def total(self) -> int:
        """Sum of all counters."""
        return sum(astuple(self))


_FIELD_COUNT = 9


def parse_cpu_times(text: str) -> CpuTimes:
    """Parse the first line of a stat file: a label and up to nine counters.

    Counters that are missing are taken as zero.
    """
    tokens = text.split()
    if not tokens:
        raise ValueError("no CPU statistics found")
    values = []
    for token in tokens[1:1 + _FIELD_COUNT]:
        if not token.isdigit():
            break
        values.append(int(token))
    return CpuTimes(*values)


def usage_between(old: CpuTimes, new: CpuTimes) -> int:
    """Return the busy percentage (0-100) between two samples."""
    total = new.total - old.total
    if total == 0:
        return 0
    return (total - (new.idle - old.idle)) * 100 // total


class ProcessorUsageMonitor:
    """Tracks processor usage since the previous query."""

    def __init__(self, stat_path: Union[str, Path] = DEFAULT_STAT_PATH) -> None:
        self._path = Path(stat_path)
        self._lock = threading.Lock()
        self._last = self.sample()

    def sample(self) -> CpuTimes:
        """Read the current counters."""
        return parse_cpu_times(self._path.read_text())

    def usage(self) -> int:
        """Return the usage since the previous call (or since construction)."""
        with self._lock:
            old = self._last
            new = self.sample()
            self._last = new
        return usage_between(old, new)


_monitor: Optional[ProcessorUsageMonitor] = None
_monitor_lock = threading.Lock()


def get_processor_usage() -> int:
    """Return system processor usage (0-100) since the previous call."""
    global _monitor
    with _monitor_lock:
        if _monitor is None:
            _monitor = ProcessorUsageMonitor()
        monitor = _monitor
    return monitor.usage()