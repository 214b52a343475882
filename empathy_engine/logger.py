"""
Logging Module for the Empathy Engine.

Terminal logging tagged by engine component:
- one color per component (ENGINE, CACHE, SESSION, MEMORY, WISDOM, PREDICT)
- a short computation id shared by every line of one metrics run
- key=value extras and per-user computation timing

Usage:
    from empathy_engine.logger import log, Component
    log.engine("Metrics computed", user=user_id, entries=len(mood_entries))
    log.debug("Expired 3 entries", component=Component.CACHE)
"""
import sys
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, TextIO

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"


class Component(Enum):
    ENGINE = "ENGINE"
    CACHE = "CACHE"
    SESSION = "SESSION"
    MEMORY = "MEMORY"
    WISDOM = "WISDOM"
    PREDICT = "PREDICT"


class Level(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


COMPONENT_COLORS = {
    Component.ENGINE: "\033[38;5;39m",    # blue
    Component.CACHE: "\033[38;5;208m",    # orange
    Component.SESSION: "\033[38;5;82m",   # green
    Component.MEMORY: "\033[38;5;141m",   # purple
    Component.WISDOM: "\033[38;5;213m",   # pink
    Component.PREDICT: "\033[38;5;51m",   # cyan
}

LEVEL_COLORS = {
    Level.DEBUG: "\033[38;5;245m",
    Level.INFO: RESET,
    Level.WARN: "\033[38;5;226m",
    Level.ERROR: "\033[38;5;196m",
}

# Id of the metrics computation the current task is running
_computation_id: ContextVar[str] = ContextVar("computation_id", default="----")


@dataclass
class LogSettings:
    enabled: bool = True
    show_timestamps: bool = True
    show_computation_id: bool = True
    show_debug: bool = False
    # Component values to show; empty shows all
    components: set[str] = field(default_factory=set)
    stream: Optional[TextIO] = None  # None = sys.stderr at write time


settings = LogSettings()


class Logger:
    """Component-tagged terminal logger."""

    def __init__(self):
        self._timers: dict[str, float] = {}

    def _visible(self, component: Component, level: Level) -> bool:
        if not settings.enabled:
            return False
        if level is Level.DEBUG and not settings.show_debug:
            return False
        return not settings.components or component.value in settings.components

    def _prefix(self, component: Component, level: Level) -> list[str]:
        parts = []
        if settings.show_timestamps:
            parts.append(f"{DIM}{datetime.now().strftime('%H:%M:%S.%f')[:-3]}{RESET}")
        if settings.show_computation_id:
            parts.append(f"{DIM}[{_computation_id.get()}]{RESET}")
        parts.append(f"{COMPONENT_COLORS[component]}{BOLD}[{component.value:7}]{RESET}")
        if level is not Level.INFO:
            parts.append(f"{LEVEL_COLORS[level]}{level.value}{RESET}")
        return parts

    def format(self, component: Component, message: str, level: Level = Level.INFO, **kwargs) -> str:
        """Render one log line, or "" when filtered out."""
        if not self._visible(component, level):
            return ""
        parts = self._prefix(component, level)
        parts.append(message)
        parts.extend(f"{DIM}{key}={RESET}{value}" for key, value in kwargs.items())
        return " ".join(parts)

    def write(self, component: Component, message: str, level: Level = Level.INFO, **kwargs):
        line = self.format(component, message, level, **kwargs)
        if line:
            print(line, file=settings.stream or sys.stderr, flush=True)

    # === Per-component shortcuts ===

    def engine(self, message: str, **kwargs):
        self.write(Component.ENGINE, message, **kwargs)

    def cache(self, message: str, **kwargs):
        self.write(Component.CACHE, message, **kwargs)

    def session(self, message: str, **kwargs):
        self.write(Component.SESSION, message, **kwargs)

    def memory(self, message: str, **kwargs):
        self.write(Component.MEMORY, message, **kwargs)

    def wisdom(self, message: str, **kwargs):
        self.write(Component.WISDOM, message, **kwargs)

    def predict(self, message: str, **kwargs):
        self.write(Component.PREDICT, message, **kwargs)

    # === Levels ===

    def error(self, message: str, component: Component = Component.ENGINE, **kwargs):
        self.write(component, message, Level.ERROR, **kwargs)

    def warn(self, message: str, component: Component = Component.ENGINE, **kwargs):
        self.write(component, message, Level.WARN, **kwargs)

    def debug(self, message: str, component: Component = Component.ENGINE, **kwargs):
        """Only printed when show_debug is on."""
        self.write(component, message, Level.DEBUG, **kwargs)

    # === Metrics computations ===

    def computation_start(self, user_id: str, pain_count: int, mood_count: int):
        """Tag the following lines with a fresh computation id and start timing."""
        _computation_id.set(uuid.uuid4().hex[:4])
        self._timers[user_id] = time.perf_counter()
        self.engine("📊 METRICS START", user=user_id, pain=pain_count, mood=mood_count)

    def computation_end(self, user_id: str) -> float:
        """Log completion. Returns elapsed ms, 0 if no computation was started."""
        started = self._timers.pop(user_id, None)
        elapsed = round((time.perf_counter() - started) * 1000, 2) if started is not None else 0.0
        self.engine("✅ METRICS END", user=user_id, duration=f"{elapsed}ms")
        return elapsed


log = Logger()


def configure_logging(
    enabled: bool = True,
    show_debug: bool = False,
    show_timestamps: bool = True,
    components: Optional[set[str]] = None,
    stream: Optional[TextIO] = None
):
    """Change logging options at runtime."""
    settings.enabled = enabled
    settings.show_debug = show_debug
    settings.show_timestamps = show_timestamps
    settings.components = set(components or ())
    settings.stream = stream
