"""
Cache Package.

Bounded per-user caches with TTL/LRU eviction and session-scoped caches that
are reclaimed together with their session handle.
"""

from .types import CacheEntry, CacheStats
from .bounded import BoundedCache
from .session import SessionContext, SessionScopedCache
from .store import (
    EngineCacheStore,
    USER_PATTERNS,
    CULTURAL_CONTEXT,
    WISDOM_DATABASE,
    PREDICTION_MODELS,
)

__all__ = [
    # Types
    "CacheEntry",
    "CacheStats",
    "SessionContext",
    # Classes
    "BoundedCache",
    "SessionScopedCache",
    "EngineCacheStore",
    # Concern names
    "USER_PATTERNS",
    "CULTURAL_CONTEXT",
    "WISDOM_DATABASE",
    "PREDICTION_MODELS",
]
