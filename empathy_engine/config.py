"""
Configuration settings for the Empathy Engine.
"""
import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass
class CacheConfig:
    """Bounded cache configuration (per concern map)."""
    # Maximum entries per cache map
    max_entries: int = field(default_factory=lambda: _env_int("EMPATHY_CACHE_MAX_ENTRIES", 100))
    # Time-to-live since last access (1 hour)
    ttl_ms: int = field(default_factory=lambda: _env_int("EMPATHY_CACHE_TTL_MS", 60 * 60 * 1000))
    # Eviction check interval (5 minutes)
    eviction_interval_ms: int = field(
        default_factory=lambda: _env_int("EMPATHY_CACHE_EVICTION_INTERVAL_MS", 5 * 60 * 1000)
    )

    def __post_init__(self):
        if self.max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {self.max_entries}")
        if self.ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be > 0, got {self.ttl_ms}")
        if self.eviction_interval_ms <= 0:
            raise ValueError(
                f"eviction_interval_ms must be > 0, got {self.eviction_interval_ms}"
            )


@dataclass
class MemoryMonitorConfig:
    """Memory trend monitor configuration."""
    # Snapshots retained in the ring buffer
    max_snapshots: int = field(default_factory=lambda: _env_int("EMPATHY_MAX_SNAPSHOTS", 60))
    # Auto-snapshot interval (1 minute)
    snapshot_interval_ms: int = field(
        default_factory=lambda: _env_int("EMPATHY_SNAPSHOT_INTERVAL_MS", 60 * 1000)
    )
    # Growth above this rate is flagged as a potential leak
    leak_threshold_mb_per_minute: float = field(
        default_factory=lambda: _env_float("EMPATHY_LEAK_THRESHOLD_MB", 5.0)
    )
    # Fallback estimate: base overhead + per tracked item cost
    base_overhead_mb: float = 10.0
    per_item_kb: float = 1.0

    def __post_init__(self):
        if self.max_snapshots < 2:
            raise ValueError(f"max_snapshots must be >= 2, got {self.max_snapshots}")
        if self.snapshot_interval_ms <= 0:
            raise ValueError(
                f"snapshot_interval_ms must be > 0, got {self.snapshot_interval_ms}"
            )
        if self.leak_threshold_mb_per_minute <= 0:
            raise ValueError(
                "leak_threshold_mb_per_minute must be > 0, "
                f"got {self.leak_threshold_mb_per_minute}"
            )


@dataclass
class AppConfig:
    """Main application configuration."""
    cache: CacheConfig = field(default_factory=CacheConfig)
    memory: MemoryMonitorConfig = field(default_factory=MemoryMonitorConfig)

    # Insight / recommendation output caps
    max_insights: int = 12
    max_recommendations: int = 8
    max_wisdom_insights: int = 10


# Global config instance
config = AppConfig()
