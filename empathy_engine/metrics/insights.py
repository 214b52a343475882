"""
Insight and recommendation generation.

Insights are derived from a metrics snapshot plus the journal history, ranked
by confidence. Recommendations come in families gated by the predictive
metrics and are ranked by priority.
"""
from collections import defaultdict
from datetime import date, datetime
from typing import Optional, Sequence

from ..config import config
from ..math_utils import clamp_score, mean, pearson_correlation
from .entries import JournalHistory
from .types import (
    Effort,
    EmpathyInsight,
    EmpathyIntelligenceConfig,
    EmpathyRecommendation,
    InsightType,
    PersonalizationDepth,
    QuantifiedEmpathyMetrics,
    RecommendationCategory,
    RecommendationPriority,
    UserEmpathyPattern,
)

BURNOUT_THRESHOLD = 70.0
URGENT_BURNOUT_THRESHOLD = 85.0
GROWTH_THRESHOLD = 60.0
MIN_CORRELATION_DAYS = 3
MIN_CORRELATION_STRENGTH = 0.3

# KPI field -> readable focus area
_KPI_FOCUS_AREAS = {
    "empathic_accuracy": "empathic accuracy",
    "empathic_concern": "empathic concern",
    "perspective_taking": "perspective-taking",
    "empathic_motivation": "empathic motivation",
    "boundary_maintenance": "boundary maintenance",
}


# ==================== Insights ====================

def _pattern_insight(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    history: JournalHistory,
    now: datetime
) -> EmpathyInsight:
    temporal = metrics.temporal_patterns
    evolution = temporal.evolution_score
    if evolution > 55:
        description = "Your empathy levels show consistent improvement over time."
    elif evolution < 45:
        description = "Your empathy levels have been dipping recently; be gentle with yourself."
    else:
        description = "Your empathy levels are holding steady."

    samples = len(history.mood_entries)
    return EmpathyInsight(
        id=f"pattern_{user_id}",
        type=InsightType.PATTERN,
        title="Empathy Pattern Detected",
        description=description,
        confidence=clamp_score(40 + samples * 3, 0, 95),
        actionable=True,
        personalized=samples > 0,
        timestamp=now,
        data_points=(
            f"evolution={evolution:.1f}",
            f"stability={temporal.pattern_stability:.1f}",
        ),
    )


def _daily_averages(history: JournalHistory) -> tuple[list[float], list[float]]:
    """Mean pain and mood per calendar day, for days that have both."""
    pain_by_day: dict[date, list[float]] = defaultdict(list)
    mood_by_day: dict[date, list[float]] = defaultdict(list)
    for e in history.pain_entries:
        pain_by_day[e.timestamp.date()].append(e.pain)
    for e in history.mood_entries:
        mood_by_day[e.timestamp.date()].append(e.mood)

    days = sorted(set(pain_by_day) & set(mood_by_day))
    return (
        [mean(pain_by_day[d]) for d in days],
        [mean(mood_by_day[d]) for d in days],
    )


def _correlation_insights(
    user_id: str,
    history: JournalHistory,
    now: datetime
) -> list[EmpathyInsight]:
    pain, mood = _daily_averages(history)
    if len(pain) < MIN_CORRELATION_DAYS:
        return []

    r = pearson_correlation(pain, mood)
    if abs(r) < MIN_CORRELATION_STRENGTH:
        return []

    if r < 0:
        description = "Higher pain days tend to come with lower mood and less room for others."
    else:
        description = "Higher pain levels correlate with steady or rising mood on the same days."

    return [EmpathyInsight(
        id=f"correlation_{user_id}",
        type=InsightType.CORRELATION,
        title="Pain-Empathy Correlation",
        description=description,
        confidence=clamp_score(abs(r) * 100),
        actionable=True,
        personalized=True,
        timestamp=now,
        data_points=(f"r={r:.2f}", f"days={len(pain)}"),
    )]


def weakest_kpi(metrics: QuantifiedEmpathyMetrics) -> tuple[str, float]:
    """(focus area, score) of the lowest scalar empathy KPI."""
    kpis = metrics.empathy_kpis
    name = min(_KPI_FOCUS_AREAS, key=lambda field: getattr(kpis, field))
    return _KPI_FOCUS_AREAS[name], getattr(kpis, name)


def _growth_insight(user_id: str, metrics: QuantifiedEmpathyMetrics, now: datetime) -> EmpathyInsight:
    area, score = weakest_kpi(metrics)
    return EmpathyInsight(
        id=f"growth_{user_id}",
        type=InsightType.IMPROVEMENT,
        title="Empathy Growth Opportunity",
        description=f"Focus on {area} exercises for enhanced empathy.",
        confidence=clamp_score(100 - score, 30, 95),
        actionable=True,
        personalized=True,
        timestamp=now,
        data_points=(f"{area}={score:.1f}",),
    )


def _wisdom_insights(metrics: QuantifiedEmpathyMetrics) -> list[EmpathyInsight]:
    return [
        EmpathyInsight(
            id=w.id,
            type=InsightType.CELEBRATION,
            title=f"Wisdom: {w.category.value}",
            description=w.insight,
            confidence=clamp_score(w.applicability),
            actionable=True,
            personalized=False,
            timestamp=w.date_gained,
        )
        for w in metrics.humanized_metrics.wisdom_gained.insights
    ]


def _predictive_insights(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    now: datetime
) -> list[EmpathyInsight]:
    predictive = metrics.predictive_metrics
    forecast = predictive.empathy_forecast
    delta = forecast.next_month - forecast.next_week
    if delta > 1:
        direction = "increase"
    elif delta < -1:
        direction = "decrease"
    else:
        direction = "stay about the same"

    insights = [EmpathyInsight(
        id=f"forecast_{user_id}",
        type=InsightType.IMPROVEMENT,
        title="Empathy Forecast",
        description=f"Your empathy levels are predicted to {direction} over the coming weeks.",
        confidence=forecast.confidence,
        actionable=True,
        personalized=False,
        timestamp=now,
        data_points=(
            f"next_week={forecast.next_week:.1f}",
            f"next_month={forecast.next_month:.1f}",
        ),
    )]

    burnout = predictive.burnout_risk
    if burnout.current_risk_level > BURNOUT_THRESHOLD:
        insights.append(EmpathyInsight(
            id=f"burnout_{user_id}",
            type=InsightType.CONCERN,
            title="Burnout Risk Rising",
            description="Recent entries show signs of empathy fatigue: "
                        + ", ".join(burnout.risk_factors).lower() + ".",
            confidence=burnout.current_risk_level,
            actionable=True,
            personalized=True,
            timestamp=now,
            data_points=burnout.risk_factors,
        ))
    return insights


def generate_insights(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    history: Optional[JournalHistory] = None,
    now: Optional[datetime] = None,
    limit: Optional[int] = None
) -> list[EmpathyInsight]:
    """Top insights sorted by confidence, highest first."""
    history = history or JournalHistory()
    now = now or datetime.now()
    limit = limit if limit is not None else config.max_insights

    insights: list[EmpathyInsight] = [_pattern_insight(user_id, metrics, history, now)]
    insights.extend(_correlation_insights(user_id, history, now))
    insights.append(_growth_insight(user_id, metrics, now))
    insights.extend(_wisdom_insights(metrics))
    insights.extend(_predictive_insights(user_id, metrics, now))

    insights.sort(key=lambda i: i.confidence, reverse=True)
    return insights[:limit]


# ==================== Recommendations ====================

def _responsiveness_label(responsiveness: float) -> str:
    if responsiveness >= 0.7:
        return "high"
    if responsiveness >= 0.4:
        return "moderate"
    return "low"


def personalization_tags(
    settings: EmpathyIntelligenceConfig,
    user_pattern: Optional[UserEmpathyPattern] = None
) -> tuple[str, ...]:
    tags = [f"style:{settings.intervention_style.value}"]
    depths = list(PersonalizationDepth)
    deep_enough = (
        depths.index(settings.personalization_depth) >= depths.index(PersonalizationDepth.MODERATE)
    )
    if user_pattern is not None and deep_enough:
        tags.append(f"responsiveness:{_responsiveness_label(user_pattern.responsiveness)}")
    return tuple(tags)


def _burnout_recommendation(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    tags: tuple[str, ...]
) -> EmpathyRecommendation:
    burnout = metrics.predictive_metrics.burnout_risk
    urgent = burnout.current_risk_level > URGENT_BURNOUT_THRESHOLD
    rationale = "Frequent short rests reduce emotional overload."
    if burnout.risk_factors:
        rationale += " Detected: " + ", ".join(burnout.risk_factors).lower() + "."
    return EmpathyRecommendation(
        id=f"burnout_{user_id}",
        category=RecommendationCategory.LIFESTYLE,
        priority=RecommendationPriority.URGENT if urgent else RecommendationPriority.HIGH,
        title="Burnout Prevention",
        description="Take regular breaks to prevent empathy fatigue.",
        rationale=rationale,
        steps=("Schedule 10-minute breaks", "Practice mindfulness", "Set boundaries"),
        expected_benefits=("Reduced burnout risk",),
        timeframe="1 week",
        effort=Effort.LOW,
        personalization=tags,
    )


def _growth_recommendation(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    tags: tuple[str, ...]
) -> EmpathyRecommendation:
    area, _ = weakest_kpi(metrics)
    growth = metrics.predictive_metrics.growth_potential
    return EmpathyRecommendation(
        id=f"growth_{user_id}",
        category=RecommendationCategory.COGNITIVE,
        priority=RecommendationPriority.MEDIUM,
        title="Accelerate Empathy Growth",
        description=f"Build on your momentum with {area} exercises.",
        rationale=(
            f"Growth trajectory is {growth.current_growth_trajectory:.0f}; "
            "focused practice compounds while momentum is high."
        ),
        steps=("Read diverse perspectives", "Practice active listening", "Volunteer"),
        expected_benefits=(f"Improved {area}",),
        timeframe="2 weeks",
        effort=Effort.MEDIUM,
        personalization=tags,
    )


def _micro_recommendation(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    tags: tuple[str, ...]
) -> EmpathyRecommendation:
    low_energy = metrics.micro_empathy_moments.daily_micro_average < 40
    return EmpathyRecommendation(
        id=f"micro_{user_id}",
        category=RecommendationCategory.EMOTIONAL,
        priority=RecommendationPriority.MEDIUM if low_energy else RecommendationPriority.LOW,
        title="Daily Empathy Moment",
        description="Take 2 minutes daily to reflect on others' perspectives.",
        rationale="Micro-reflections build consistent empathic habits.",
        steps=("Set daily reminder", "Practice empathy check-ins"),
        expected_benefits=("Improved empathy awareness",),
        timeframe="1 day",
        effort=Effort.LOW,
        personalization=tags,
    )


def _wisdom_recommendation(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    insights: Sequence[EmpathyInsight],
    tags: tuple[str, ...]
) -> EmpathyRecommendation:
    celebrations = sum(1 for i in insights if i.type is InsightType.CELEBRATION)
    if celebrations:
        tags = tags + (f"wisdom_insights:{celebrations}",)
    application = metrics.humanized_metrics.wisdom_gained.wisdom_application
    return EmpathyRecommendation(
        id=f"wisdom_{user_id}",
        category=RecommendationCategory.SOCIAL,
        priority=RecommendationPriority.MEDIUM,
        title="Apply Your Wisdom",
        description="Share your empathy insights with others to reinforce learning.",
        rationale=f"Teaching others consolidates learning (application score {application:.0f}).",
        steps=("Mentor someone", "Write about experiences", "Join support groups"),
        expected_benefits=("Enhanced wisdom integration",),
        timeframe="1 month",
        effort=Effort.MEDIUM,
        personalization=tags,
    )


def _cultural_recommendation(user_id: str, tags: tuple[str, ...]) -> EmpathyRecommendation:
    return EmpathyRecommendation(
        id=f"cultural_{user_id}",
        category=RecommendationCategory.SOCIAL,
        priority=RecommendationPriority.LOW,
        title="Cultural Empathy Development",
        description="Explore different cultural perspectives on pain and healing.",
        rationale="Exposure to diverse perspectives deepens empathy.",
        steps=("Read multicultural literature", "Attend cultural events", "Learn about traditions"),
        expected_benefits=("Broader empathy understanding",),
        timeframe="2 months",
        effort=Effort.MEDIUM,
        personalization=tags,
    )


def generate_recommendations(
    user_id: str,
    metrics: QuantifiedEmpathyMetrics,
    insights: Sequence[EmpathyInsight] = (),
    settings: Optional[EmpathyIntelligenceConfig] = None,
    user_pattern: Optional[UserEmpathyPattern] = None,
    limit: Optional[int] = None
) -> list[EmpathyRecommendation]:
    """
    Top recommendations ordered urgent > high > medium > low.

    The burnout family only appears above a risk of 70, and the growth
    family only above a growth trajectory of 60.
    """
    settings = settings or EmpathyIntelligenceConfig()
    limit = limit if limit is not None else config.max_recommendations
    tags = personalization_tags(settings, user_pattern)
    predictive = metrics.predictive_metrics

    recommendations: list[EmpathyRecommendation] = []
    if predictive.burnout_risk.current_risk_level > BURNOUT_THRESHOLD:
        recommendations.append(_burnout_recommendation(user_id, metrics, tags))
    if predictive.growth_potential.current_growth_trajectory > GROWTH_THRESHOLD:
        recommendations.append(_growth_recommendation(user_id, metrics, tags))
    recommendations.append(_micro_recommendation(user_id, metrics, tags))
    recommendations.append(_wisdom_recommendation(user_id, metrics, insights, tags))
    recommendations.append(_cultural_recommendation(user_id, tags))

    # sort() is stable, so equal priorities keep generation order
    recommendations.sort(key=lambda r: r.priority.rank, reverse=True)
    return recommendations[:limit]
