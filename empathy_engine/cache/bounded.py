"""
Bounded Cache Module.

A single key -> value map bounded by entry count and idle time.
"""
from typing import Generic, Iterator, Optional, TypeVar

from cachetools import Cache, FIFOCache, LRUCache

from ..clock import Clock, now_ms
from ..config import CacheConfig
from ..logger import Component, log
from .types import CacheEntry

T = TypeVar("T")


class BoundedCache(Generic[T]):
    """
    Key -> value store with max-entry and TTL eviction.

    The entry count is bounded on every set() by the backing cachetools cache:
    - track_recency=True: LRUCache drops the least recently accessed entry, and
      evict() expires entries idle longer than ttl_ms.
    - track_recency=False: FIFOCache drops the oldest written entry and there is
      no TTL. Used for list-valued maps whose items carry no per-item timestamp.
    """

    def __init__(
        self,
        name: str,
        config: Optional[CacheConfig] = None,
        clock: Clock = now_ms,
        track_recency: bool = True
    ):
        self.name = name
        self.config = config or CacheConfig()
        self.track_recency = track_recency
        self._clock = clock
        backing = LRUCache if track_recency else FIFOCache
        self._entries: Cache = backing(maxsize=self.config.max_entries)

    def _peek_entry(self, key: str) -> Optional[CacheEntry[T]]:
        # Cache.__getitem__ skips the LRU bookkeeping
        try:
            return Cache.__getitem__(self._entries, key)
        except KeyError:
            return None

    def get(self, key: str) -> Optional[T]:
        """Return the cached value and refresh its recency."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        entry.touch(self._clock())
        return entry.value

    def peek(self, key: str) -> Optional[T]:
        """Return the cached value without refreshing recency."""
        entry = self._peek_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry[T]]:
        return self._peek_entry(key)

    def set(self, key: str, value: T):
        """Store value, stamping last_accessed to now."""
        now = self._clock()
        existing = self._peek_entry(key)
        created_at = existing.created_at if existing is not None else now
        self._entries[key] = CacheEntry(value=value, last_accessed=now, created_at=created_at)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self):
        self._entries.clear()

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def evict(self, now: Optional[float] = None) -> int:
        """
        Expire entries idle longer than ttl_ms.

        Returns:
            Number of entries removed
        """
        if not self.track_recency:
            return 0
        if now is None:
            now = self._clock()

        expired = [
            key for key in list(self._entries)
            if self._peek_entry(key).age(now) > self.config.ttl_ms
        ]
        for key in expired:
            del self._entries[key]

        if expired:
            log.debug(
                f"Expired {len(expired)} from '{self.name}'",
                component=Component.CACHE,
                remaining=len(self._entries)
            )
        return len(expired)
