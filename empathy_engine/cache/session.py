"""
Session-Scoped Cache.

Entries are keyed by the SessionContext object itself through a
WeakKeyDictionary, so a session's cached data becomes unreachable (and is
reclaimed) as soon as nothing else holds the handle. clear_session() exists for
immediate cleanup, e.g. on logout.
"""
import time
import uuid
import weakref
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from ..logger import Component, log

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class SessionContext:
    """
    Opaque handle for one active usage session.

    eq=False keeps hashing by object identity: two handles with the same
    session_id are still different sessions.
    """
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str = ""
    start_time: float = field(default_factory=lambda: time.time() * 1000)


class SessionScopedCache(Generic[T]):
    """Per-session key -> value maps that die with their session handle."""

    def __init__(self, name: str = "session"):
        self.name = name
        self._cache: "weakref.WeakKeyDictionary[SessionContext, dict[str, T]]" = (
            weakref.WeakKeyDictionary()
        )

    def get(self, session: SessionContext, key: str) -> Optional[T]:
        session_map = self._cache.get(session)
        if session_map is None:
            return None
        return session_map.get(key)

    def set(self, session: SessionContext, key: str, value: T):
        session_map = self._cache.get(session)
        if session_map is None:
            session_map = {}
            self._cache[session] = session_map
        session_map[key] = value

    def has(self, session: SessionContext, key: str) -> bool:
        session_map = self._cache.get(session)
        return session_map is not None and key in session_map

    def delete(self, session: SessionContext, key: str) -> bool:
        session_map = self._cache.get(session)
        if session_map is None or key not in session_map:
            return False
        del session_map[key]
        return True

    def clear_session(self, session: SessionContext):
        """Drop everything cached for this session right away."""
        session_map = self._cache.pop(session, None)
        if session_map:
            log.debug(
                f"Cleared {len(session_map)} entries from '{self.name}'",
                component=Component.SESSION,
                session=session.session_id[:8]
            )

    def session_count(self) -> int:
        """Number of live sessions with cached data."""
        return len(self._cache)
