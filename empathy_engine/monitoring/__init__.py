"""
Monitoring Package.

Memory trend monitor with leak detection for long-running sessions.
"""

from .types import HostMemoryStats, LeakSeverity, MemorySnapshot, MemoryTrend
from .memory_monitor import (
    MemoryMonitor,
    read_host_memory,
    get_memory_monitor,
    reset_memory_monitor,
)

__all__ = [
    "HostMemoryStats",
    "LeakSeverity",
    "MemorySnapshot",
    "MemoryTrend",
    "MemoryMonitor",
    "read_host_memory",
    "get_memory_monitor",
    "reset_memory_monitor",
]
