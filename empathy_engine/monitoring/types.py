"""
Memory Monitor Types Module.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional


class LeakSeverity(Enum):
    """Sustained growth rate relative to the configured leak threshold."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class HostMemoryStats:
    """Memory figures reported by the host process."""
    rss_bytes: int
    vms_bytes: Optional[int] = None
    available_system_bytes: Optional[int] = None


@dataclass
class MemorySnapshot:
    """Point-in-time memory reading."""
    timestamp: float                  # ms
    estimated_memory_mb: float
    tracked_objects: dict[str, int] = field(default_factory=dict)
    rss_bytes: Optional[int] = None
    vms_bytes: Optional[int] = None
    available_system_bytes: Optional[int] = None
    gc_object_count: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MemoryTrend:
    """Trend derived from the retained snapshots."""
    current_mb: float
    average_mb: float
    growth_rate_mb_per_minute: float
    potential_leak: bool
    leak_severity: LeakSeverity
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "current_mb": round(self.current_mb, 2),
            "average_mb": round(self.average_mb, 2),
            "growth_rate_mb_per_minute": round(self.growth_rate_mb_per_minute, 3),
            "potential_leak": self.potential_leak,
            "leak_severity": self.leak_severity.value,
            "recommendation": self.recommendation,
        }
