"""Millisecond wall clock shared by caches and the memory monitor."""
import time
from typing import Callable

Clock = Callable[[], float]


def now_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000
