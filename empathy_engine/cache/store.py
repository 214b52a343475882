"""
Engine Cache Store.

Per-user caches for the metrics engine, one bounded map per concern:
    user_patterns      derived per-user pattern records
    cultural_context   caller-supplied cultural context
    wisdom_database    accumulated wisdom insight lists (count-capped only)
    prediction_models  per-user prediction model records

Eviction runs on a background asyncio task every eviction_interval_ms.
"""
import asyncio
from typing import Any, Optional

from ..clock import Clock, now_ms
from ..config import CacheConfig
from ..logger import Component, log
from .bounded import BoundedCache
from .types import CacheStats

USER_PATTERNS = "user_patterns"
CULTURAL_CONTEXT = "cultural_context"
WISDOM_DATABASE = "wisdom_database"
PREDICTION_MODELS = "prediction_models"

CONCERNS = (USER_PATTERNS, CULTURAL_CONTEXT, WISDOM_DATABASE, PREDICTION_MODELS)


class EngineCacheStore:
    """
    Bounded per-user cache store.

    Contract:
        get(user_key, field) -> value or None
        set(user_key, field, value)
        evict() -> removed count, never raises
    """

    def __init__(self, config: Optional[CacheConfig] = None, clock: Clock = now_ms):
        self.config = config or CacheConfig()
        self._clock = clock
        self._maps: dict[str, BoundedCache] = {
            USER_PATTERNS: BoundedCache(USER_PATTERNS, self.config, clock),
            CULTURAL_CONTEXT: BoundedCache(CULTURAL_CONTEXT, self.config, clock),
            WISDOM_DATABASE: BoundedCache(
                WISDOM_DATABASE, self.config, clock, track_recency=False
            ),
            PREDICTION_MODELS: BoundedCache(PREDICTION_MODELS, self.config, clock),
        }

        # Background eviction
        self._task: Optional[asyncio.Task] = None
        self._running = False

    def cache_for(self, field: str) -> BoundedCache:
        """Return the map for a concern. Raises KeyError for unknown concerns."""
        return self._maps[field]

    def get(self, user_key: str, field: str) -> Optional[Any]:
        return self.cache_for(field).get(user_key)

    def peek(self, user_key: str, field: str) -> Optional[Any]:
        return self.cache_for(field).peek(user_key)

    def set(self, user_key: str, field: str, value: Any):
        self.cache_for(field).set(user_key, value)

    def delete(self, user_key: str, field: str) -> bool:
        return self.cache_for(field).delete(user_key)

    def size(self, field: str) -> int:
        return len(self.cache_for(field))

    def clear(self):
        for cache in self._maps.values():
            cache.clear()

    # ==================== Eviction ====================

    def evict(self) -> int:
        """Run an eviction pass over every map. Failures are logged per map."""
        now = self._clock()
        removed = 0
        for name, cache in self._maps.items():
            try:
                removed += cache.evict(now)
            except Exception as e:
                log.error(f"Eviction failed for '{name}': {e}", component=Component.CACHE)
        if removed:
            log.cache(f"🧹 Eviction pass removed {removed} entries")
        return removed

    @property
    def eviction_running(self) -> bool:
        return self._running

    def start_eviction(self) -> bool:
        """
        Start the background eviction task.

        Needs a running event loop; without one this is a logged no-op.

        Returns:
            True if the task is running after the call
        """
        if self._running:
            return True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running event loop, cache eviction not scheduled",
                      component=Component.CACHE)
            return False

        self._running = True
        self._task = loop.create_task(self._eviction_loop())
        log.cache("Cache eviction started", interval_ms=self.config.eviction_interval_ms)
        return True

    def stop_eviction(self):
        """Stop background eviction. Safe to call when already stopped."""
        if not self._running and self._task is None:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            self._task = None
        log.cache("Cache eviction stopped")

    async def _eviction_loop(self):
        """Background loop that expires idle entries."""
        interval = self.config.eviction_interval_ms / 1000
        while self._running:
            try:
                await asyncio.sleep(interval)
                self.evict()
            except asyncio.CancelledError:
                break
            except Exception as e:
                log.error(f"Eviction loop error: {e}", component=Component.CACHE)

    # ==================== Stats ====================

    def _safe_size(self, field: str) -> int:
        try:
            return len(self.cache_for(field))
        except Exception as e:
            log.warn(f"Could not read size of '{field}': {e}", component=Component.CACHE)
            return -1

    def stats(self, has_active_session: bool = False) -> CacheStats:
        return CacheStats(
            user_patterns=self._safe_size(USER_PATTERNS),
            cultural_context=self._safe_size(CULTURAL_CONTEXT),
            wisdom_database=self._safe_size(WISDOM_DATABASE),
            prediction_models=self._safe_size(PREDICTION_MODELS),
            has_active_session=has_active_session,
        )
