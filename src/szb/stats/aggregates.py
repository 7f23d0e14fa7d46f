"""
System Aggregates
=================

One long line summarising memory, CPU and uptime:

    mem.total:15.5GiB, mem.avail:9.8GiB, mem.cached:4.2GiB, mem.act:3.1GiB,
    mem.inact:2.0GiB, mem.free:1.2GiB, cpu.usr:3.5%, cpu.sys:1.0%,
    cpu.idle:95.5%, up:2d3h4m5s

CPU percentages are computed from the difference between two successive
``psutil.cpu_times()`` samples, one refresh interval apart. Fields that
the platform does not report (``cached`` outside Linux, for example)
show as 0.0B.
"""

import logging
import time
from typing import Final, Optional

import psutil

from szb.stats.humanreadable import bibytes, duration
from szb.stats.provider import StatsProvider

logger = logging.getLogger(__name__)

REFRESH_INTERVAL: Final[float] = 1.0


def cpu_usage(prev, curr) -> tuple[float, float, float]:
    """
    Compute user/system/idle percentages between two cpu_times samples.

    Returns:
        (user, system, idle) percentages, all 0.0 if no time elapsed.
    """
    total = sum(curr) - sum(prev)
    if total <= 0:
        return 0.0, 0.0, 0.0
    return (
        (curr.user - prev.user) / total * 100,
        (curr.system - prev.system) / total * 100,
        (curr.idle - prev.idle) / total * 100,
    )


class Aggregates(StatsProvider):
    """Memory, CPU and uptime summary, refreshed every second."""

    def __init__(self, interval: float = REFRESH_INTERVAL):
        super().__init__(interval)
        self._prev_cpu = psutil.cpu_times()
        self._curr_cpu = self._prev_cpu
        self._boot_time: Optional[float] = None

    def _sample(self) -> None:
        self._prev_cpu = self._curr_cpu
        self._curr_cpu = psutil.cpu_times()

    def uptime(self) -> float:
        """Seconds since boot."""
        if self._boot_time is None:
            self._boot_time = psutil.boot_time()
        return max(0.0, time.time() - self._boot_time)

    def render(self) -> str:
        self._sample()
        mem = psutil.virtual_memory()
        usr, sys_, idle = cpu_usage(self._prev_cpu, self._curr_cpu)

        return (
            f"mem.total:{bibytes(mem.total)}, "
            f"mem.avail:{bibytes(mem.available)}, "
            f"mem.cached:{bibytes(getattr(mem, 'cached', 0))}, "
            f"mem.act:{bibytes(getattr(mem, 'active', 0))}, "
            f"mem.inact:{bibytes(getattr(mem, 'inactive', 0))}, "
            f"mem.free:{bibytes(mem.free)}, "
            f"cpu.usr:{usr:.1f}%, cpu.sys:{sys_:.1f}%, cpu.idle:{idle:.1f}%, "
            f"up:{duration(self.uptime())}"
        )
