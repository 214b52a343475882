"""
Pytest configuration and fixtures for empathy engine tests.
"""
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from empathy_engine.logger import configure_logging  # noqa: E402

configure_logging(enabled=False)


# ============= Clocks =============

class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def fake_clock():
    return FakeClock()


# ============= Memory monitor =============

@pytest.fixture(autouse=True)
def isolated_memory_monitor():
    """Give every test a fresh app-wide memory monitor."""
    from empathy_engine.monitoring import reset_memory_monitor

    reset_memory_monitor()
    yield
    reset_memory_monitor()


@pytest.fixture
def quiet_monitor(fake_clock):
    """Monitor relying on its own estimate only (no psutil, no gc walk)."""
    from empathy_engine.config import MemoryMonitorConfig
    from empathy_engine.monitoring import MemoryMonitor

    monitor = MemoryMonitor(
        MemoryMonitorConfig(max_snapshots=10, leak_threshold_mb_per_minute=5.0),
        clock=fake_clock,
        host_probe=lambda: None,
        count_gc_objects=False,
    )
    yield monitor
    monitor.destroy()


# ============= Journal entries =============

BASE_TIME = datetime(2024, 3, 4, 9, 0, 0)  # a Monday morning


@pytest.fixture
def base_time():
    return BASE_TIME


@pytest.fixture
def sample_pain_entries():
    """Ten days of slowly easing pain."""
    from empathy_engine.metrics import PainEntry

    levels = [7, 7, 6, 6, 6, 5, 5, 4, 4, 3]
    return [
        PainEntry(timestamp=BASE_TIME + timedelta(days=i), pain=level, locations=("back",))
        for i, level in enumerate(levels)
    ]


@pytest.fixture
def sample_mood_entries():
    """Ten days of mood entries with a mix of reflective notes."""
    from empathy_engine.metrics import MoodEntry, SocialSupport

    notes = [
        "Rough day, mostly stayed in bed.",
        "I realized that I can ask my family for help when the pain spikes.",
        "Talked with a friend and felt their worry; we connected deeply.",
        "Took a break and rested, said no to an extra shift.",
        "I learned that pacing myself will always beat pushing through the pain.",
        "Support group tonight, I listened and tried to see their side.",
        "Proud of a small walk today, I want to celebrate small wins.",
        "Feeling calmer, I notice that I am kinder to myself lately.",
        "I understand now that this journey gives my days meaning and purpose.",
        "Helped my neighbor and brought soup; good connection.",
    ]
    return [
        MoodEntry(
            timestamp=BASE_TIME + timedelta(days=i, hours=i % 3 * 5),
            mood=4 + i * 0.5,
            energy=4 + i % 4,
            anxiety=6 - i % 3,
            stress=6 - i % 4,
            hopefulness=5 + i * 0.4,
            emotional_clarity=6,
            emotional_regulation=5 + i % 3,
            context="support group" if i == 5 else "home",
            coping_strategies=("mindfulness", "pacing") if i % 2 else ("journaling",),
            social_support=SocialSupport.MODERATE if i % 2 else SocialSupport.NONE,
            notes=note,
        )
        for i, note in enumerate(notes)
    ]


@pytest.fixture
def strained_mood_entries():
    """A week of sustained high load with depleted energy."""
    from empathy_engine.metrics import MoodEntry

    return [
        MoodEntry(
            timestamp=BASE_TIME + timedelta(days=i),
            mood=3,
            energy=2,
            anxiety=9,
            stress=9,
            hopefulness=3,
            notes="Exhausted and drained, absorbed everyone's stress again.",
        )
        for i in range(7)
    ]


@pytest.fixture
def rising_pain_entries():
    from empathy_engine.metrics import PainEntry

    return [
        PainEntry(timestamp=BASE_TIME + timedelta(days=i), pain=3 + i)
        for i in range(7)
    ]
