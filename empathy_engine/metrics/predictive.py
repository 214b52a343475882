"""
Predictive Module.

Directional trend and variance over numeric series, and a short-horizon
risk/opportunity model built from the most recent journal entries.
"""
from typing import Sequence

from ..logger import log
from ..math_utils import clamp_score, mean, variance
from .entries import MoodEntry, PainEntry, SocialSupport
from .types import (
    BurnoutRisk,
    EmpathyForecast,
    GrowthPotential,
    PredictiveEmpathyModel,
)

RECENT_WINDOW = 7
BURNOUT_WINDOW = 6


def calculate_trend(series: Sequence[float]) -> float:
    """
    Directional trend in [-100, 100].

    Counts pairwise increases vs decreases between consecutive values;
    magnitude of change is ignored, so the result does not depend on the
    scale of the metric.
    """
    if len(series) < 2:
        return 0.0

    increases = decreases = 0
    for previous, current in zip(series, series[1:]):
        if current > previous:
            increases += 1
        elif current < previous:
            decreases += 1

    return (increases - decreases) / (len(series) - 1) * 100


def calculate_variance(series: Sequence[float]) -> float:
    """Population variance; 0 for empty input."""
    return variance(list(series))


def _emotional_load(entry: MoodEntry) -> float:
    """0-100 load from anxiety and stress."""
    return (entry.anxiety + entry.stress) / 2 * 10


def _assess_burnout(
    recent_mood: Sequence[MoodEntry],
    recent_pain_levels: Sequence[float]
) -> BurnoutRisk:
    supported = (SocialSupport.MODERATE, SocialSupport.STRONG)
    protective: list[str] = []
    if any(e.social_support in supported for e in recent_mood):
        protective.append("Social support available")
    if any(e.coping_strategies for e in recent_mood):
        protective.append("Active coping strategies")
    if len(recent_mood) >= 2 and calculate_variance([e.mood for e in recent_mood]) < 2:
        protective.append("Stable mood")

    if len(recent_mood) < BURNOUT_WINDOW:
        # Not enough data
        return BurnoutRisk(current_risk_level=20.0, protective_factors=tuple(protective))

    window = recent_mood[-BURNOUT_WINDOW:]
    loads = [_emotional_load(e) for e in window]
    sustained_high = sum(1 for load in loads if load > 80)
    recovery_periods = sum(1 for load in loads if load < 40)

    risk = 30.0
    factors: list[str] = []
    if sustained_high >= 4:
        risk += 30
        factors.append("Sustained high emotional load")
    if recovery_periods == 0:
        risk += 20
        factors.append("No recovery periods")
    if window[-1].energy * 10 < 30:
        risk += 25
        factors.append("Current energy depletion")
    if recent_pain_levels and calculate_trend(recent_pain_levels) > 30:
        risk += 10
        factors.append("Rising pain levels")

    return BurnoutRisk(
        current_risk_level=clamp_score(risk),
        risk_factors=tuple(factors),
        protective_factors=tuple(protective),
    )


def _assess_growth(
    recent_mood: Sequence[MoodEntry],
    mood_trend: float,
    pain_trend: float
) -> GrowthPotential:
    hope_avg = mean([e.hopefulness for e in recent_mood], fallback=5.0)
    trajectory = clamp_score(50 + mood_trend * 0.3 - pain_trend * 0.2 + (hope_avg - 5) * 4)

    strategies = {s.lower() for e in recent_mood for s in e.coping_strategies}
    ceiling = clamp_score(max(trajectory, 60.0) + 20 + len(strategies) * 2)

    accelerators: list[str] = []
    if hope_avg >= 7:
        accelerators.append("Hopeful outlook")
    if mood_trend > 0:
        accelerators.append("Improving mood")
    if pain_trend < 0:
        accelerators.append("Decreasing pain")
    if strategies:
        accelerators.append("Diverse coping strategies")

    return GrowthPotential(
        current_growth_trajectory=trajectory,
        growth_ceiling=ceiling,
        accelerators=tuple(accelerators),
    )


def build_predictive_model(
    pain_entries: Sequence[PainEntry],
    mood_entries: Sequence[MoodEntry],
    horizon_days: int = 30
) -> PredictiveEmpathyModel:
    """
    Build a forecast from the most recent (<= 7) pain and mood entries.

    Entries are expected in chronological order. Every numeric output is
    clamped to [0, 100].
    """
    recent_pain = [e.pain for e in pain_entries[-RECENT_WINDOW:]]
    recent_mood_entries = list(mood_entries[-RECENT_WINDOW:])
    recent_mood = [e.mood for e in recent_mood_entries]

    mood_trend = calculate_trend(recent_mood)
    pain_trend = calculate_trend(recent_pain)

    current_level = mean(recent_mood, fallback=5.0) * 10
    weekly_delta = (mood_trend - pain_trend * 0.5) * 0.1
    samples = min(len(recent_mood) + len(recent_pain), 2 * RECENT_WINDOW)

    forecast = EmpathyForecast(
        next_week=clamp_score(current_level + weekly_delta),
        next_month=clamp_score(current_level + weekly_delta * horizon_days / 7),
        confidence=clamp_score(40 + samples * 3 - calculate_variance(recent_mood) * 2),
    )

    model = PredictiveEmpathyModel(
        empathy_forecast=forecast,
        burnout_risk=_assess_burnout(recent_mood_entries, recent_pain),
        growth_potential=_assess_growth(recent_mood_entries, mood_trend, pain_trend),
    )

    log.predict(
        "Predictive model built",
        burnout=round(model.burnout_risk.current_risk_level, 1),
        growth=round(model.growth_potential.current_growth_trajectory, 1)
    )
    return model
