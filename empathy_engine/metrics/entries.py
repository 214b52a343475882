"""
Journal Entry Models: Pydantic schemas for caller-owned journal data.

Entries are frozen: the engine reads them and never mutates them.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SocialSupport(Enum):
    """Social support level reported with a mood entry."""
    NONE = "none"
    MINIMAL = "minimal"
    MODERATE = "moderate"
    STRONG = "strong"


class JournalEntry(BaseModel):
    """
    Fields shared by every journal record.

    Timestamps are kept as naive local time: aware values are converted to the
    local zone and stripped, so entries from mixed sources stay comparable.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=datetime.now)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value
        return value.astimezone().replace(tzinfo=None)


class PainEntry(JournalEntry):
    """Single pain journal record."""
    pain: float = Field(ge=0.0, le=10.0)
    locations: tuple[str, ...] = ()
    symptoms: tuple[str, ...] = ()
    notes: str = ""


class MoodEntry(JournalEntry):
    """Single mood journal record. Numeric scales are 1-10."""
    mood: float = Field(default=5.0, ge=1.0, le=10.0)
    energy: float = Field(default=5.0, ge=1.0, le=10.0)
    anxiety: float = Field(default=5.0, ge=1.0, le=10.0)
    stress: float = Field(default=5.0, ge=1.0, le=10.0)
    hopefulness: float = Field(default=5.0, ge=1.0, le=10.0)
    self_efficacy: float = Field(default=5.0, ge=1.0, le=10.0)
    emotional_clarity: float = Field(default=5.0, ge=1.0, le=10.0)
    emotional_regulation: float = Field(default=5.0, ge=1.0, le=10.0)
    context: str = ""
    triggers: tuple[str, ...] = ()
    coping_strategies: tuple[str, ...] = ()
    social_support: SocialSupport = SocialSupport.NONE
    notes: str = ""


@dataclass(frozen=True)
class JournalHistory:
    """Historical entries handed to insight generation."""
    pain_entries: tuple[PainEntry, ...] = field(default_factory=tuple)
    mood_entries: tuple[MoodEntry, ...] = field(default_factory=tuple)


def chronological(entries: Sequence) -> tuple:
    """Copy entries into a tuple ordered by timestamp (stable for ties)."""
    return tuple(sorted(entries, key=lambda e: e.timestamp))
