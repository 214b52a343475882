"""
Memory Trend Monitor for long-running sessions.

Samples process memory and tracked collection sizes, fits a linear trend over
the retained snapshots and classifies leak severity.

Usage:
    monitor = MemoryMonitor()
    monitor.track_collection("engine.user_patterns", lambda: len(patterns))
    monitor.take_snapshot()
    ...
    trend = monitor.analyze_trend()
"""
import asyncio
import gc
import weakref
from collections import deque
from typing import Callable, Optional

import psutil

from ..clock import Clock, now_ms
from ..config import MemoryMonitorConfig
from ..logger import Component, log
from ..math_utils import linear_regression, mean
from .types import HostMemoryStats, LeakSeverity, MemorySnapshot, MemoryTrend

BYTES_PER_MB = 1024 * 1024
MS_PER_MINUTE = 60 * 1000

HostProbe = Callable[[], Optional[HostMemoryStats]]


def read_host_memory() -> Optional[HostMemoryStats]:
    """Read process memory through psutil. Returns None when unavailable."""
    try:
        info = psutil.Process().memory_info()
        available = psutil.virtual_memory().available
    except (psutil.Error, OSError) as e:
        log.debug(f"Host memory introspection unavailable: {e}", component=Component.MEMORY)
        return None
    return HostMemoryStats(
        rss_bytes=info.rss,
        vms_bytes=getattr(info, "vms", None),
        available_system_bytes=available,
    )


class MemoryMonitor:
    """
    Memory monitor with leak detection.

    Features:
    - Ring buffer of snapshots (max_snapshots)
    - Weakly referenced object tracking (1 while alive, 0 once collected)
    - Collection size tracking through count callbacks
    - OLS growth rate in MB/min with none/low/medium/high severity
    """

    def __init__(
        self,
        config: Optional[MemoryMonitorConfig] = None,
        clock: Clock = now_ms,
        host_probe: Optional[HostProbe] = read_host_memory,
        on_leak_detected: Optional[Callable[[MemoryTrend], None]] = None,
        count_gc_objects: bool = True
    ):
        self.config = config or MemoryMonitorConfig()
        self._clock = clock
        self._host_probe = host_probe
        self._on_leak_detected = on_leak_detected
        self._count_gc_objects = count_gc_objects

        self._snapshots: deque[MemorySnapshot] = deque(maxlen=self.config.max_snapshots)
        self._tracked_objects: dict[str, weakref.ref] = {}
        self._tracked_counts: dict[str, Callable[[], int]] = {}
        self._start_time = clock()

        # Auto-snapshot task
        self._task: Optional[asyncio.Task] = None
        self._running = False

    # ==================== Tracking ====================

    def track_object(self, name: str, obj: object) -> bool:
        """
        Track an object through a weak reference.

        Returns:
            False if the object type does not support weak references
        """
        try:
            self._tracked_objects[name] = weakref.ref(obj)
        except TypeError:
            log.warn(
                f"Cannot track '{name}': {type(obj).__name__} is not weak-referenceable",
                component=Component.MEMORY
            )
            return False
        return True

    def track_collection(self, name: str, count_fn: Callable[[], int]):
        """Register a callback returning the current size of a collection."""
        self._tracked_counts[name] = count_fn

    def untrack(self, name: str):
        self._tracked_objects.pop(name, None)
        self._tracked_counts.pop(name, None)

    def _get_tracked_object_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}

        for name, ref in self._tracked_objects.items():
            counts[name] = 1 if ref() is not None else 0

        for name, count_fn in self._tracked_counts.items():
            try:
                counts[name] = int(count_fn())
            except Exception as e:
                log.debug(f"Count for '{name}' failed: {e}", component=Component.MEMORY)
                counts[name] = -1

        return counts

    def _estimate_memory_mb(self, counts: dict[str, int]) -> float:
        """Fallback estimate: base overhead plus a per-item cost over collections."""
        estimate = self.config.base_overhead_mb
        for name in self._tracked_counts:
            count = counts.get(name, -1)
            if count > 0:
                estimate += count * self.config.per_item_kb / 1024
        return estimate

    # ==================== Snapshots ====================

    def take_snapshot(self) -> MemorySnapshot:
        """Record a snapshot, trim the ring buffer and check for leaks."""
        counts = self._get_tracked_object_counts()
        snapshot = MemorySnapshot(
            timestamp=self._clock(),
            estimated_memory_mb=self._estimate_memory_mb(counts),
            tracked_objects=counts,
        )

        host = None
        if self._host_probe is not None:
            try:
                host = self._host_probe()
            except Exception as e:
                log.debug(f"Host probe failed: {e}", component=Component.MEMORY)
        if host is not None:
            snapshot.rss_bytes = host.rss_bytes
            snapshot.vms_bytes = host.vms_bytes
            snapshot.available_system_bytes = host.available_system_bytes
            snapshot.estimated_memory_mb = host.rss_bytes / BYTES_PER_MB

        if self._count_gc_objects:
            snapshot.gc_object_count = len(gc.get_objects())

        self._snapshots.append(snapshot)

        trend = self.analyze_trend()
        if trend.potential_leak:
            log.warn(
                f"Potential memory leak ({trend.leak_severity.value})",
                component=Component.MEMORY,
                growth=f"{trend.growth_rate_mb_per_minute:.3f}MB/min"
            )
            if self._on_leak_detected:
                try:
                    self._on_leak_detected(trend)
                except Exception as e:
                    log.error(f"Leak callback failed: {e}", component=Component.MEMORY)

        return snapshot

    def get_snapshots(self) -> tuple[MemorySnapshot, ...]:
        return tuple(self._snapshots)

    # ==================== Trend ====================

    def _growth_rate_mb_per_minute(self) -> float:
        base_time = self._snapshots[0].timestamp
        xs = [s.timestamp - base_time for s in self._snapshots]
        ys = [s.estimated_memory_mb for s in self._snapshots]
        slope, _ = linear_regression(xs, ys)  # MB per ms
        return slope * MS_PER_MINUTE

    def analyze_trend(self) -> MemoryTrend:
        """Classify memory growth over the retained snapshots."""
        current = self._snapshots[-1] if self._snapshots else None

        if len(self._snapshots) < 2:
            current_mb = current.estimated_memory_mb if current else 0.0
            return MemoryTrend(
                current_mb=current_mb,
                average_mb=current_mb,
                growth_rate_mb_per_minute=0.0,
                potential_leak=False,
                leak_severity=LeakSeverity.NONE,
                recommendation="Insufficient data for trend analysis. Continue monitoring.",
            )

        average = mean([s.estimated_memory_mb for s in self._snapshots])
        growth = self._growth_rate_mb_per_minute()
        threshold = self.config.leak_threshold_mb_per_minute

        if growth > threshold * 3:
            severity = LeakSeverity.HIGH
            recommendation = (
                "Critical memory growth detected! Clear caches or restart the "
                "session immediately."
            )
        elif growth > threshold * 2:
            severity = LeakSeverity.MEDIUM
            recommendation = (
                "Significant memory growth detected. Monitor closely and consider "
                "clearing caches."
            )
        elif growth > threshold:
            severity = LeakSeverity.LOW
            recommendation = "Slight memory growth detected. Continue monitoring."
        else:
            severity = LeakSeverity.NONE
            recommendation = "Memory usage is stable."

        return MemoryTrend(
            current_mb=current.estimated_memory_mb,
            average_mb=average,
            growth_rate_mb_per_minute=growth,
            potential_leak=severity is not LeakSeverity.NONE,
            leak_severity=severity,
            recommendation=recommendation,
        )

    # ==================== Session duration ====================

    def get_session_duration(self) -> float:
        """Milliseconds since the monitor was created or reset."""
        return self._clock() - self._start_time

    def get_formatted_session_duration(self) -> str:
        total_seconds = int(self.get_session_duration() // 1000)
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}h {minutes}m {seconds}s"
        if minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    # ==================== Auto snapshots ====================

    @property
    def auto_snapshot_running(self) -> bool:
        return self._running

    def start_auto_snapshot(self) -> bool:
        """
        Take a snapshot now and then every snapshot_interval_ms.

        Needs a running event loop; without one this is a logged no-op.
        """
        if self._running:
            return True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running event loop, auto-snapshot not scheduled",
                      component=Component.MEMORY)
            return False

        self.take_snapshot()
        self._running = True
        self._task = loop.create_task(self._snapshot_loop())
        log.memory("Auto-snapshot started", interval_ms=self.config.snapshot_interval_ms)
        return True

    def stop_auto_snapshot(self):
        """Stop auto snapshots. Safe to call when already stopped."""
        if not self._running and self._task is None:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            self._task = None
        log.memory("Auto-snapshot stopped")

    async def _snapshot_loop(self):
        interval = self.config.snapshot_interval_ms / 1000
        while self._running:
            try:
                await asyncio.sleep(interval)
                self.take_snapshot()
            except asyncio.CancelledError:
                break
            except Exception as e:
                log.error(f"Snapshot loop error: {e}", component=Component.MEMORY)

    # ==================== Reporting ====================

    def reset(self):
        """Drop all snapshots and restart the session clock."""
        self._snapshots.clear()
        self._start_time = self._clock()

    def generate_report(self) -> str:
        trend = self.analyze_trend()
        latest = self._snapshots[-1] if self._snapshots else None
        status = "⚠️ POTENTIAL LEAK" if trend.potential_leak else "✅ OK"

        lines = [
            "=== Memory Monitor Report ===",
            f"Session Duration: {self.get_formatted_session_duration()}",
            f"Snapshots Collected: {len(self._snapshots)}",
            "",
            f"Current Memory: {trend.current_mb:.2f} MB",
            f"Average Memory: {trend.average_mb:.2f} MB",
            f"Growth Rate: {trend.growth_rate_mb_per_minute:.3f} MB/min",
            "",
            f"Leak Detection: {status}",
            f"Severity: {trend.leak_severity.value}",
            f"Recommendation: {trend.recommendation}",
        ]

        if latest is not None and latest.gc_object_count is not None:
            lines.append("")
            lines.append(f"GC Objects: {latest.gc_object_count}")

        if latest is not None and latest.tracked_objects:
            lines.append("")
            lines.append("Tracked Collections:")
            for name, count in latest.tracked_objects.items():
                lines.append(f"  {name}: {count}")

        return "\n".join(lines)

    def destroy(self):
        self.stop_auto_snapshot()
        self._snapshots.clear()
        self._tracked_objects.clear()
        self._tracked_counts.clear()


# App-wide monitor
_global_monitor: Optional[MemoryMonitor] = None


def get_memory_monitor(config: Optional[MemoryMonitorConfig] = None) -> MemoryMonitor:
    """Get the app-wide memory monitor, creating it on first use."""
    global _global_monitor

    if _global_monitor is None:
        _global_monitor = MemoryMonitor(config)

    return _global_monitor


def reset_memory_monitor():
    """Destroy and forget the app-wide memory monitor."""
    global _global_monitor

    if _global_monitor is not None:
        _global_monitor.destroy()
        _global_monitor = None
