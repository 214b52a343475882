"""
Metrics Types Module.

Contains all dataclasses and enums used by the empathy metrics system.
Every snapshot type is frozen; to_dict() yields JSON-serializable data.
"""
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, enums and datetimes to plain data."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


class _Serializable:
    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return to_jsonable(self)


# ==================== Enums ====================

class PersonalizationDepth(Enum):
    SURFACE = "surface"
    MODERATE = "moderate"
    DEEP = "deep"
    PROFOUND = "profound"


class CulturalSensitivity(Enum):
    STANDARD = "standard"
    ENHANCED = "enhanced"
    EXPERT = "expert"

    @property
    def boost(self) -> float:
        """Cultural empathy bonus applied when a stored context exists."""
        return {"standard": 0.0, "enhanced": 5.0, "expert": 10.0}[self.value]


class InterventionStyle(Enum):
    GENTLE = "gentle"
    BALANCED = "balanced"
    INTENSIVE = "intensive"
    ADAPTIVE = "adaptive"


class PrivacyLevel(Enum):
    MINIMAL = "minimal"
    STANDARD = "standard"
    ENHANCED = "enhanced"
    MAXIMUM = "maximum"


class InsightType(Enum):
    PATTERN = "pattern"
    CORRELATION = "correlation"
    IMPROVEMENT = "improvement"
    CONCERN = "concern"
    CELEBRATION = "celebration"


class RecommendationCategory(Enum):
    EMOTIONAL = "emotional"
    PHYSICAL = "physical"
    SOCIAL = "social"
    COGNITIVE = "cognitive"
    LIFESTYLE = "lifestyle"


class RecommendationPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return {"urgent": 4, "high": 3, "medium": 2, "low": 1}[self.value]


class Effort(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WisdomCategory(Enum):
    PRACTICAL = "practical"
    EMOTIONAL = "emotional"
    SPIRITUAL = "spiritual"
    RELATIONAL = "relational"
    SELF_KNOWLEDGE = "self-knowledge"


class EmpathyQuality(Enum):
    """Qualitative label for an empathy level."""
    ENERGIZED = "energized"
    TENDER = "tender"
    FIERCE = "fierce"
    BOUNDARIED = "boundaried"
    TIRED = "tired"
    OVERWHELMED = "overwhelmed"


# ==================== Configuration ====================

@dataclass
class EmpathyIntelligenceConfig:
    """Engine tuning knobs. String values are coerced to their enums."""
    learning_rate: float = 0.1        # 0-1, smoothing for user responsiveness
    prediction_horizon: int = 30      # days ahead to forecast
    personalization_depth: PersonalizationDepth = PersonalizationDepth.DEEP
    cultural_sensitivity: CulturalSensitivity = CulturalSensitivity.ENHANCED
    intervention_style: InterventionStyle = InterventionStyle.ADAPTIVE
    privacy_level: PrivacyLevel = PrivacyLevel.ENHANCED

    def __post_init__(self):
        if not 0.0 <= self.learning_rate <= 1.0:
            raise ValueError(f"learning_rate must be within [0, 1], got {self.learning_rate}")
        if self.prediction_horizon < 1:
            raise ValueError(
                f"prediction_horizon must be >= 1 day, got {self.prediction_horizon}"
            )
        self.personalization_depth = PersonalizationDepth(self.personalization_depth)
        self.cultural_sensitivity = CulturalSensitivity(self.cultural_sensitivity)
        self.intervention_style = InterventionStyle(self.intervention_style)
        self.privacy_level = PrivacyLevel(self.privacy_level)


# ==================== Cached per-user records ====================

@dataclass
class UserEmpathyPattern(_Serializable):
    """Per-user pattern record kept in the user_patterns cache."""
    user_id: str
    recent_pain_avg: float
    responsiveness: float             # 0-1, learning-rate smoothed
    entry_count: int


@dataclass(frozen=True)
class CulturalContext(_Serializable):
    """Caller-supplied cultural background for a user."""
    cultural_background: tuple[str, ...] = ()
    values: tuple[str, ...] = ()
    communication_style: str = ""
    empathy_expressions: tuple[str, ...] = ()


@dataclass
class PredictionModel(_Serializable):
    """Per-user prediction record kept in the prediction_models cache."""
    model_id: str
    accuracy: float = 0.7
    training_data: list = field(default_factory=list)
    predictions: list = field(default_factory=list)


# ==================== Emotional intelligence ====================

@dataclass(frozen=True)
class NeuralEmpathyProfile(_Serializable):
    mirror_neuron_activity: float
    emotional_contagion_resistance: float
    empathic_distress_management: float
    cognitive_perspective_taking: float
    affective_perspective_taking: float
    empathy_flexibility: float
    empathy_calibration: float
    empathic_memory: float


@dataclass(frozen=True)
class EmotionalIntelligence(_Serializable):
    self_awareness: float
    self_regulation: float
    motivation: float
    empathy: float
    social_skills: float
    emotional_granularity: float
    meta_emotional_awareness: float
    neural_empathy_patterns: NeuralEmpathyProfile


# ==================== Compassionate progress ====================

@dataclass(frozen=True)
class RecoveryPatternAnalysis(_Serializable):
    avg_recovery_time_minutes: float
    recovery_consistency: float
    adaptive_recovery: float
    recovery_strategies: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompassionateProgress(_Serializable):
    self_compassion: float
    self_criticism: float             # reverse scored
    progress_celebration: float
    setback_resilience: float
    hopefulness: float
    post_traumatic_growth: float
    meaning_making: float
    adaptive_reframing: float
    compassion_fatigue: float
    recovery_patterns: RecoveryPatternAnalysis


# ==================== Empathy KPIs ====================

@dataclass(frozen=True)
class CulturalEmpathyMetrics(_Serializable):
    cultural_awareness: float
    cross_cultural_empathy: float
    cultural_humility: float
    universal_empathy: float
    cultural_adaptation: float
    inclusive_empathy: float
    intersectional_awareness: float


@dataclass(frozen=True)
class EmpathyKPIs(_Serializable):
    validation_received: float
    validation_given: float
    emotional_support: float
    understanding_felt: float
    connection_quality: float
    empathic_accuracy: float
    empathic_concern: float
    perspective_taking: float
    empathic_motivation: float
    boundary_maintenance: float
    cultural_empathy: CulturalEmpathyMetrics


# ==================== Wisdom ====================

@dataclass(frozen=True)
class WisdomInsight(_Serializable):
    id: str
    category: WisdomCategory
    insight: str
    date_gained: datetime
    contextual_source: str
    applicability: float
    transformative_level: float
    reinforcement_level: float
    shared_with: tuple[str, ...] = ()

    @property
    def total_value(self) -> float:
        return self.applicability + self.transformative_level + self.reinforcement_level


@dataclass(frozen=True)
class WisdomCategories(_Serializable):
    practical_wisdom: float
    emotional_wisdom: float
    spiritual_wisdom: float
    relational_wisdom: float
    self_knowledge_wisdom: float


@dataclass(frozen=True)
class WisdomProfile(_Serializable):
    insights: tuple[WisdomInsight, ...]
    wisdom_categories: WisdomCategories
    wisdom_growth_rate: float
    wisdom_application: float
    wisdom_sharing: float
    integrated_wisdom: float


# ==================== Humanized metrics ====================

@dataclass(frozen=True)
class HumanizedMetrics(_Serializable):
    courage_score: float
    vulnerability_acceptance: float
    authenticity_level: float
    growth_mindset: float
    wisdom_gained: WisdomProfile
    inner_strength: float
    dignity_maintenance: float
    purpose_clarity: float
    spiritual_wellbeing: float
    life_narrative_coherence: float


@dataclass(frozen=True)
class EmpathyIntelligenceProfile(_Serializable):
    empathy_iq: float                 # 0-200
    empathy_processing_speed: float
    empathy_accuracy: float
    empathy_diversity: float
    empathy_innovation: float
    empathy_leadership: float
    empathy_teaching: float
    empathy_healing: float
    meta_empathy: float
    empathy_wisdom: float


# ==================== Temporal patterns ====================

@dataclass(frozen=True)
class DailyEmpathyPattern(_Serializable):
    time_of_day: str                  # morning, afternoon, evening, night
    empathy_level: float
    empathy_quality: EmpathyQuality
    sample_count: int = 0


@dataclass(frozen=True)
class WeeklyEmpathyTrend(_Serializable):
    week_start: datetime
    avg_empathy_level: float
    min_empathy_level: float
    max_empathy_level: float
    dominant_pattern: str             # improving, declining, stable


@dataclass(frozen=True)
class FutureEmpathyProjection(_Serializable):
    projection_timeframe: str
    confidence_level: float
    predicted_growth_areas: tuple[str, ...] = ()


@dataclass(frozen=True)
class TemporalEmpathyPatterns(_Serializable):
    daily_patterns: tuple[DailyEmpathyPattern, ...]
    weekly_trends: tuple[WeeklyEmpathyTrend, ...]
    pattern_stability: float
    recovery_speed: float
    evolution_score: float
    future_projection: FutureEmpathyProjection


@dataclass(frozen=True)
class MicroEmpathyTracking(_Serializable):
    daily_micro_average: float
    micro_empathy_quality: float
    micro_empathy_consistency: float
    spontaneous_empathy: float
    mindful_empathy: float


# ==================== Predictive metrics ====================

@dataclass(frozen=True)
class EmpathyForecast(_Serializable):
    next_week: float
    next_month: float
    confidence: float


@dataclass(frozen=True)
class BurnoutRisk(_Serializable):
    current_risk_level: float
    risk_factors: tuple[str, ...] = ()
    protective_factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class GrowthPotential(_Serializable):
    current_growth_trajectory: float
    growth_ceiling: float
    accelerators: tuple[str, ...] = ()


@dataclass(frozen=True)
class PredictiveEmpathyModel(_Serializable):
    empathy_forecast: EmpathyForecast
    burnout_risk: BurnoutRisk
    growth_potential: GrowthPotential


# ==================== Aggregate snapshot ====================

@dataclass(frozen=True)
class QuantifiedEmpathyMetrics(_Serializable):
    """
    Aggregate metrics snapshot.

    Leaf scores are within [0, 100] except empathy_iq ([0, 200]);
    fields ending in _minutes are durations.
    """
    emotional_intelligence: EmotionalIntelligence
    compassionate_progress: CompassionateProgress
    empathy_kpis: EmpathyKPIs
    humanized_metrics: HumanizedMetrics
    empathy_intelligence: EmpathyIntelligenceProfile
    temporal_patterns: TemporalEmpathyPatterns
    micro_empathy_moments: MicroEmpathyTracking
    predictive_metrics: PredictiveEmpathyModel


# ==================== Insights / recommendations ====================

@dataclass(frozen=True)
class EmpathyInsight(_Serializable):
    id: str
    type: InsightType
    title: str
    description: str
    confidence: float                 # 0-100
    actionable: bool
    personalized: bool
    timestamp: datetime
    data_points: tuple[str, ...] = ()


@dataclass(frozen=True)
class EmpathyRecommendation(_Serializable):
    id: str
    category: RecommendationCategory
    priority: RecommendationPriority
    title: str
    description: str
    rationale: str
    steps: tuple[str, ...]
    expected_benefits: tuple[str, ...]
    timeframe: str
    effort: Effort
    personalization: tuple[str, ...] = ()


@dataclass(frozen=True)
class ForecastRecord(_Serializable):
    """Forecast appended to a user's PredictionModel history."""
    recorded_at: float                # ms
    next_week: float
    next_month: float
    burnout_risk: float
    growth_trajectory: float
