"""
Cache Types Module.

Dataclasses shared by the bounded and session-scoped caches.
"""
from dataclasses import dataclass, asdict
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value plus the timestamps eviction decisions are based on."""
    value: T
    last_accessed: float  # ms
    created_at: float     # ms

    def touch(self, now: float):
        self.last_accessed = now

    def age(self, now: float) -> float:
        """Milliseconds since the entry was last accessed."""
        return now - self.last_accessed


@dataclass
class CacheStats:
    """Sizes of the engine cache maps. -1 marks a size that could not be read."""
    user_patterns: int
    cultural_context: int
    wisdom_database: int
    prediction_models: int
    has_active_session: bool = False

    @property
    def total_entries(self) -> int:
        sizes = [self.user_patterns, self.cultural_context,
                 self.wisdom_database, self.prediction_models]
        return sum(s for s in sizes if s >= 0)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["total_entries"] = self.total_entries
        return data
