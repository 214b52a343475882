"""
Metrics Package.

Empathy metrics engine for pain and mood journals.

Turns caller-supplied journal entries into a quantified snapshot:
- Emotional intelligence and neural empathy profile
- Compassionate progress and recovery patterns
- Empathy KPIs, humanized metrics and wisdom profile
- Temporal patterns and a short-horizon predictive model

Insights and recommendations are derived from the snapshot and ranked.
"""

from .entries import (
    SocialSupport,
    JournalEntry,
    PainEntry,
    MoodEntry,
    JournalHistory,
    chronological
)
from .types import (
    PersonalizationDepth,
    CulturalSensitivity,
    InterventionStyle,
    PrivacyLevel,
    InsightType,
    RecommendationCategory,
    RecommendationPriority,
    Effort,
    WisdomCategory,
    EmpathyQuality,
    EmpathyIntelligenceConfig,
    UserEmpathyPattern,
    CulturalContext,
    PredictionModel,
    WisdomInsight,
    WisdomProfile,
    PredictiveEmpathyModel,
    QuantifiedEmpathyMetrics,
    EmpathyInsight,
    EmpathyRecommendation,
    ForecastRecord
)
from .keywords import KeywordFamily, KEYWORD_FAMILIES, TextScorer, KeywordTextScorer
from .predictive import calculate_trend, calculate_variance, build_predictive_model
from .wisdom import extract_wisdom_insights, build_wisdom_profile
from .scorer import HeuristicScorer
from .insights import generate_insights, generate_recommendations
from .engine import EmpathyIntelligenceEngine

__all__ = [
    # Entries
    "SocialSupport",
    "JournalEntry",
    "PainEntry",
    "MoodEntry",
    "JournalHistory",
    "chronological",
    # Types
    "PersonalizationDepth",
    "CulturalSensitivity",
    "InterventionStyle",
    "PrivacyLevel",
    "InsightType",
    "RecommendationCategory",
    "RecommendationPriority",
    "Effort",
    "WisdomCategory",
    "EmpathyQuality",
    "EmpathyIntelligenceConfig",
    "UserEmpathyPattern",
    "CulturalContext",
    "PredictionModel",
    "WisdomInsight",
    "WisdomProfile",
    "PredictiveEmpathyModel",
    "QuantifiedEmpathyMetrics",
    "EmpathyInsight",
    "EmpathyRecommendation",
    "ForecastRecord",
    # Text scoring
    "KeywordFamily",
    "KEYWORD_FAMILIES",
    "TextScorer",
    "KeywordTextScorer",
    # Functions
    "calculate_trend",
    "calculate_variance",
    "build_predictive_model",
    "extract_wisdom_insights",
    "build_wisdom_profile",
    "generate_insights",
    "generate_recommendations",
    # Classes
    "HeuristicScorer",
    "EmpathyIntelligenceEngine",
]
