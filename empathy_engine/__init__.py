"""Empathy metrics engine: bounded caches, memory trend monitoring and journal analytics."""

from .config import config, AppConfig, CacheConfig, MemoryMonitorConfig
from .logger import log, configure_logging
from .cache import EngineCacheStore, SessionContext, SessionScopedCache
from .monitoring import MemoryMonitor, get_memory_monitor, reset_memory_monitor
from .metrics import (
    EmpathyIntelligenceEngine,
    EmpathyIntelligenceConfig,
    PainEntry,
    MoodEntry,
    JournalHistory,
    QuantifiedEmpathyMetrics
)

__all__ = [
    "config",
    "AppConfig",
    "CacheConfig",
    "MemoryMonitorConfig",
    "log",
    "configure_logging",
    "EngineCacheStore",
    "SessionContext",
    "SessionScopedCache",
    "MemoryMonitor",
    "get_memory_monitor",
    "reset_memory_monitor",
    "EmpathyIntelligenceEngine",
    "EmpathyIntelligenceConfig",
    "PainEntry",
    "MoodEntry",
    "JournalHistory",
    "QuantifiedEmpathyMetrics",
]
