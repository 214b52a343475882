"""
Empathy Intelligence Engine.

Facade that turns a user's pain and mood journal into a QuantifiedEmpathyMetrics
snapshot, then into ranked insights and recommendations. Per-user state lives
in bounded caches; per-session results live in session-scoped caches that die
with the session handle.
"""
import weakref
from typing import Optional, Sequence

from ..cache import (
    CULTURAL_CONTEXT,
    PREDICTION_MODELS,
    USER_PATTERNS,
    WISDOM_DATABASE,
    CacheStats,
    EngineCacheStore,
    SessionContext,
    SessionScopedCache,
)
from ..cache.store import CONCERNS
from ..clock import Clock, now_ms
from ..config import CacheConfig
from ..logger import Component, log
from ..math_utils import mean
from ..monitoring import MemoryMonitor, get_memory_monitor
from .entries import JournalHistory, MoodEntry, PainEntry, chronological
from .insights import generate_insights, generate_recommendations
from .keywords import TextScorer
from .predictive import build_predictive_model
from .scorer import HeuristicScorer
from .types import (
    CulturalContext,
    EmpathyInsight,
    EmpathyIntelligenceConfig,
    EmpathyRecommendation,
    ForecastRecord,
    PredictionModel,
    PredictiveEmpathyModel,
    PrivacyLevel,
    QuantifiedEmpathyMetrics,
    UserEmpathyPattern,
)
from .wisdom import build_wisdom_profile

MAX_FORECAST_HISTORY = 30
PATTERN_WINDOW = 7


class EmpathyIntelligenceEngine:
    """
    Metrics aggregator for the empathy engine.

    Public API:
    - calculate_advanced_empathy_metrics() -> QuantifiedEmpathyMetrics
    - generate_advanced_insights() -> ranked EmpathyInsight list (<= 12)
    - generate_personalized_recommendations() -> ranked EmpathyRecommendation list (<= 8)
    - session cache accessors and cache lifecycle (initialize/destroy)
    """

    def __init__(
        self,
        config: Optional[EmpathyIntelligenceConfig] = None,
        cache_config: Optional[CacheConfig] = None,
        memory_monitor: Optional[MemoryMonitor] = None,
        text_scorer: Optional[TextScorer] = None,
        clock: Clock = now_ms
    ):
        self.config = config or EmpathyIntelligenceConfig()
        self._clock = clock
        self._store = EngineCacheStore(cache_config, clock)
        self._scorer = HeuristicScorer(text_scorer)

        self._metrics_cache: SessionScopedCache[QuantifiedEmpathyMetrics] = (
            SessionScopedCache("session_metrics")
        )
        self._insights_cache: SessionScopedCache[list[EmpathyInsight]] = (
            SessionScopedCache("session_insights")
        )
        self._session_ref: Optional[weakref.ref] = None

        self._monitor = memory_monitor if memory_monitor is not None else get_memory_monitor()
        self._tracked_names: dict[str, str] = {}
        self._register_with_monitor()

    async def initialize(self):
        """Start background cache eviction. Needs a running event loop."""
        self.start_cache_eviction()
        log.engine("Empathy engine initialized",
                   depth=self.config.personalization_depth.value,
                   privacy=self.config.privacy_level.value)

    # ==================== Memory monitor ====================

    @property
    def monitor_names(self) -> dict[str, str]:
        """Concern -> name this engine's cache size is tracked under."""
        return dict(self._tracked_names)

    def _register_with_monitor(self):
        # Weak reference so the monitor does not keep the caches alive
        store_ref = weakref.ref(self._store)

        def counter(concern: str):
            def count() -> int:
                store = store_ref()
                return store.size(concern) if store is not None else 0
            return count

        # Per-instance prefix: several engines may share the app-wide monitor
        prefix = f"EmpathyEngine[{id(self):x}]"
        for concern in CONCERNS:
            name = f"{prefix}.{concern}"
            self._monitor.track_collection(name, counter(concern))
            self._tracked_names[concern] = name

    def _unregister_from_monitor(self):
        for name in self._tracked_names.values():
            self._monitor.untrack(name)
        self._tracked_names.clear()

    # ==================== Session caches ====================

    @property
    def active_session(self) -> Optional[SessionContext]:
        if self._session_ref is None:
            return None
        return self._session_ref()

    def set_session_context(self, session: Optional[SessionContext]):
        """Make session the target of session-scoped caching. None detaches."""
        self._session_ref = weakref.ref(session) if session is not None else None
        if session is not None:
            log.session("Session attached", session=session.session_id[:8], user=session.user_id)

    def get_cached_session_metrics(self, user_id: str) -> Optional[QuantifiedEmpathyMetrics]:
        session = self.active_session
        if session is None:
            return None
        return self._metrics_cache.get(session, f"metrics:{user_id}")

    def cache_session_metrics(self, user_id: str, metrics: QuantifiedEmpathyMetrics):
        session = self.active_session
        if session is not None:
            self._metrics_cache.set(session, f"metrics:{user_id}", metrics)

    def get_cached_session_insights(self, user_id: str) -> Optional[list[EmpathyInsight]]:
        session = self.active_session
        if session is None:
            return None
        return self._insights_cache.get(session, f"insights:{user_id}")

    def cache_session_insights(self, user_id: str, insights: Sequence[EmpathyInsight]):
        session = self.active_session
        if session is not None:
            self._insights_cache.set(session, f"insights:{user_id}", list(insights))

    def clear_session_caches(self):
        """Drop everything cached for the active session (e.g. on logout)."""
        session = self.active_session
        if session is not None:
            self._metrics_cache.clear_session(session)
            self._insights_cache.clear_session(session)

    # ==================== Cache lifecycle ====================

    def start_cache_eviction(self) -> bool:
        return self._store.start_eviction()

    def stop_cache_eviction(self):
        self._store.stop_eviction()

    def evict_expired_entries(self) -> int:
        """Run one eviction pass now. Returns the number of removed entries."""
        return self._store.evict()

    def clear_all_caches(self):
        self._store.clear()
        self.clear_session_caches()

    def get_cache_stats(self) -> CacheStats:
        return self._store.stats(has_active_session=self.active_session is not None)

    def destroy(self):
        """Stop timers, clear caches and drop the session. The engine can then be discarded."""
        self.stop_cache_eviction()
        self.clear_all_caches()
        self._session_ref = None
        self._unregister_from_monitor()
        log.engine("Empathy engine destroyed")

    # ==================== Per-user state ====================

    def _update_user_pattern(
        self,
        user_id: str,
        pain_entries: Sequence[PainEntry],
        mood_entries: Sequence[MoodEntry]
    ) -> UserEmpathyPattern:
        observed = mean([e.mood for e in mood_entries], fallback=5.0) / 10
        pattern = self._store.get(user_id, USER_PATTERNS)
        if pattern is None:
            responsiveness = observed
        else:
            # Exponential smoothing towards the latest observation
            lr = self.config.learning_rate
            responsiveness = pattern.responsiveness + lr * (observed - pattern.responsiveness)

        pattern = UserEmpathyPattern(
            user_id=user_id,
            recent_pain_avg=mean([e.pain for e in pain_entries[-PATTERN_WINDOW:]]),
            responsiveness=responsiveness,
            entry_count=len(pain_entries) + len(mood_entries),
        )
        self._store.set(user_id, USER_PATTERNS, pattern)
        return pattern

    def _get_or_create_prediction_model(self, user_id: str) -> PredictionModel:
        model = self._store.get(user_id, PREDICTION_MODELS)
        if model is None:
            model = PredictionModel(model_id=f"pred_{user_id}")
            self._store.set(user_id, PREDICTION_MODELS, model)
        return model

    def _record_forecast(
        self,
        model: PredictionModel,
        predictive: PredictiveEmpathyModel,
        pain_count: int,
        mood_count: int
    ):
        now = self._clock()
        model.training_data.append(
            {"recorded_at": now, "pain_entries": pain_count, "mood_entries": mood_count}
        )
        model.predictions.append(ForecastRecord(
            recorded_at=now,
            next_week=predictive.empathy_forecast.next_week,
            next_month=predictive.empathy_forecast.next_month,
            burnout_risk=predictive.burnout_risk.current_risk_level,
            growth_trajectory=predictive.growth_potential.current_growth_trajectory,
        ))
        del model.training_data[:-MAX_FORECAST_HISTORY]
        del model.predictions[:-MAX_FORECAST_HISTORY]

    def get_user_pattern(self, user_id: str) -> Optional[UserEmpathyPattern]:
        return self._store.peek(user_id, USER_PATTERNS)

    def get_prediction_model(self, user_id: str) -> Optional[PredictionModel]:
        return self._store.peek(user_id, PREDICTION_MODELS)

    def get_wisdom_insights(self, user_id: str) -> list:
        return list(self._store.peek(user_id, WISDOM_DATABASE) or [])

    # ==================== Metrics ====================

    async def calculate_advanced_empathy_metrics(
        self,
        user_id: str,
        pain_entries: Sequence[PainEntry],
        mood_entries: Sequence[MoodEntry] = (),
        cultural_context: Optional[CulturalContext] = None
    ) -> QuantifiedEmpathyMetrics:
        """
        Compute the full metrics snapshot for a user.

        Entries may arrive in any order; they are sorted by timestamp first.
        Empty input yields baseline scores rather than an error.
        """
        log.computation_start(user_id, len(pain_entries), len(mood_entries))
        pain = chronological(pain_entries)
        mood = chronological(mood_entries)
        scorer = self._scorer

        if cultural_context is not None:
            self._store.set(user_id, CULTURAL_CONTEXT, cultural_context)
        self._update_user_pattern(user_id, pain, mood)
        model = self._get_or_create_prediction_model(user_id)

        emotional_intelligence = scorer.emotional_intelligence(mood)
        wisdom = build_wisdom_profile(
            user_id, pain, mood,
            stability=emotional_intelligence.self_regulation,
            scorer=scorer.text_scorer,
        )
        if self.config.privacy_level is PrivacyLevel.MAXIMUM:
            log.debug("Privacy level maximum, wisdom insights not retained",
                      component=Component.WISDOM, user=user_id)
        else:
            self._store.set(user_id, WISDOM_DATABASE, list(wisdom.insights))

        has_context = self._store.get(user_id, CULTURAL_CONTEXT) is not None
        cultural = scorer.cultural_empathy(
            mood, has_context, self.config.cultural_sensitivity.boost
        )

        predictive = build_predictive_model(pain, mood, self.config.prediction_horizon)
        self._record_forecast(model, predictive, len(pain), len(mood))

        metrics = QuantifiedEmpathyMetrics(
            emotional_intelligence=emotional_intelligence,
            compassionate_progress=scorer.compassionate_progress(pain, mood),
            empathy_kpis=scorer.empathy_kpis(mood, cultural),
            humanized_metrics=scorer.humanized_metrics(pain, mood, wisdom),
            empathy_intelligence=scorer.empathy_intelligence_profile(mood),
            temporal_patterns=scorer.temporal_patterns(mood, self.config.prediction_horizon),
            micro_empathy_moments=scorer.micro_empathy_moments(mood),
            predictive_metrics=predictive,
        )

        self.cache_session_metrics(user_id, metrics)
        log.computation_end(user_id)
        return metrics

    async def generate_advanced_insights(
        self,
        user_id: str,
        metrics: QuantifiedEmpathyMetrics,
        history: Optional[JournalHistory] = None
    ) -> list[EmpathyInsight]:
        """Up to 12 insights, highest confidence first."""
        if history is not None:
            history = JournalHistory(
                pain_entries=chronological(history.pain_entries),
                mood_entries=chronological(history.mood_entries),
            )
        insights = generate_insights(user_id, metrics, history)
        self.cache_session_insights(user_id, insights)
        log.engine(f"Generated {len(insights)} insights", user=user_id)
        return insights

    async def generate_personalized_recommendations(
        self,
        user_id: str,
        metrics: QuantifiedEmpathyMetrics,
        insights: Sequence[EmpathyInsight] = ()
    ) -> list[EmpathyRecommendation]:
        """Up to 8 recommendations, urgent first."""
        recommendations = generate_recommendations(
            user_id,
            metrics,
            insights,
            settings=self.config,
            user_pattern=self._store.peek(user_id, USER_PATTERNS),
        )
        log.engine(f"Generated {len(recommendations)} recommendations", user=user_id)
        return recommendations
