"""
Tests for EmpathyIntelligenceEngine.
"""
import asyncio
import gc
import json
import random

import pytest


def _engine(monitor, **kwargs):
    from empathy_engine.metrics import EmpathyIntelligenceEngine

    return EmpathyIntelligenceEngine(memory_monitor=monitor, **kwargs)


def _walk_scores(node, path=""):
    """Yield (path, value) for every numeric leaf of a to_dict() tree."""
    if isinstance(node, dict):
        for key, value in node.items():
            yield from _walk_scores(value, f"{path}.{key}")
    elif isinstance(node, list):
        for i, value in enumerate(node):
            yield from _walk_scores(value, f"{path}[{i}]")
    elif isinstance(node, (int, float)) and not isinstance(node, bool):
        yield path, node


def _assert_bounded(metrics):
    for path, value in _walk_scores(metrics.to_dict()):
        if path.endswith("_minutes") or path.endswith("sample_count"):
            continue
        high = 200 if path.endswith("empathy_iq") else 100
        assert 0 <= value <= high, f"{path}={value}"


class TestJournalEntries:

    def test_aware_timestamp_stored_as_local_naive(self):
        from datetime import datetime, timedelta, timezone
        from empathy_engine.metrics import PainEntry

        aware = datetime(2024, 6, 1, 12, tzinfo=timezone(timedelta(hours=-5)))
        entry = PainEntry(timestamp=aware, pain=4)

        assert entry.timestamp.tzinfo is None
        assert entry.timestamp == aware.astimezone().replace(tzinfo=None)

    def test_naive_timestamp_unchanged(self, base_time):
        from empathy_engine.metrics import MoodEntry

        assert MoodEntry(timestamp=base_time).timestamp == base_time

    def test_chronological_over_mixed_timestamps(self):
        from datetime import datetime, timezone
        from empathy_engine.metrics import MoodEntry, chronological

        later = MoodEntry(timestamp=datetime(2024, 1, 3, 9, tzinfo=timezone.utc))
        earlier = MoodEntry(timestamp=datetime(2024, 1, 1, 9))

        assert chronological([later, earlier]) == (earlier, later)


class TestEngineConfig:

    def test_defaults(self):
        from empathy_engine.metrics import EmpathyIntelligenceConfig

        cfg = EmpathyIntelligenceConfig()
        assert cfg.learning_rate == 0.1
        assert cfg.prediction_horizon == 30
        assert cfg.personalization_depth.value == "deep"

    def test_string_values_are_coerced(self):
        from empathy_engine.metrics import EmpathyIntelligenceConfig, PrivacyLevel

        cfg = EmpathyIntelligenceConfig(privacy_level="maximum")
        assert cfg.privacy_level is PrivacyLevel.MAXIMUM

    @pytest.mark.parametrize("kwargs", [
        {"learning_rate": 1.5},
        {"learning_rate": -0.1},
        {"prediction_horizon": 0},
        {"intervention_style": "aggressive"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        from empathy_engine.metrics import EmpathyIntelligenceConfig

        with pytest.raises(ValueError):
            EmpathyIntelligenceConfig(**kwargs)


class TestCalculateMetrics:

    @pytest.mark.asyncio
    async def test_empty_input_gives_baselines(self, quiet_monitor):
        engine = _engine(quiet_monitor)

        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], [])

        assert metrics.emotional_intelligence.self_awareness == 50
        assert metrics.predictive_metrics.burnout_risk.current_risk_level == 20
        _assert_bounded(metrics)

    @pytest.mark.asyncio
    async def test_scores_are_bounded(
        self, quiet_monitor, sample_pain_entries, sample_mood_entries
    ):
        engine = _engine(quiet_monitor)

        metrics = await engine.calculate_advanced_empathy_metrics(
            "u1", sample_pain_entries, sample_mood_entries
        )

        _assert_bounded(metrics)
        json.dumps(metrics.to_dict())

    @pytest.mark.asyncio
    async def test_extreme_input_is_bounded(self, quiet_monitor, base_time):
        from datetime import timedelta
        from empathy_engine.metrics import MoodEntry, PainEntry

        notes = (
            "I realized empathy, compassion, dignity, purpose, meaning, faith, story, "
            "connection and respect completely transformed me; I will always help."
        )
        mood = [
            MoodEntry(timestamp=base_time + timedelta(hours=i), mood=10, energy=10,
                      anxiety=1, stress=1, hopefulness=10, emotional_clarity=10,
                      emotional_regulation=10, notes=notes)
            for i in range(60)
        ]
        pain = [PainEntry(timestamp=base_time + timedelta(hours=i), pain=i % 2 * 10)
                for i in range(60)]

        metrics = await _engine(quiet_monitor).calculate_advanced_empathy_metrics("u1", pain, mood)

        _assert_bounded(metrics)

    @pytest.mark.asyncio
    async def test_entry_order_does_not_matter(
        self, quiet_monitor, sample_pain_entries, sample_mood_entries
    ):
        shuffled_pain = list(sample_pain_entries)
        shuffled_mood = list(sample_mood_entries)
        random.Random(7).shuffle(shuffled_pain)
        random.Random(7).shuffle(shuffled_mood)

        ordered = await _engine(quiet_monitor).calculate_advanced_empathy_metrics(
            "u1", sample_pain_entries, sample_mood_entries
        )
        unordered = await _engine(quiet_monitor).calculate_advanced_empathy_metrics(
            "u1", shuffled_pain, shuffled_mood
        )

        assert ordered.to_dict() == unordered.to_dict()

    @pytest.mark.asyncio
    async def test_mixed_naive_and_aware_timestamps(self, quiet_monitor):
        from datetime import datetime, timezone
        from empathy_engine.metrics import JournalHistory, MoodEntry, PainEntry

        aware = datetime(2024, 1, 2, 9, tzinfo=timezone.utc)
        mood = [
            MoodEntry(timestamp=aware, mood=7),
            MoodEntry(timestamp=datetime(2024, 1, 1, 9), mood=4),
        ]
        pain = [
            PainEntry(timestamp=aware, pain=3),
            PainEntry(timestamp=datetime(2024, 1, 1, 9), pain=6),
        ]
        engine = _engine(quiet_monitor)

        metrics = await engine.calculate_advanced_empathy_metrics("u1", pain, mood)
        insights = await engine.generate_advanced_insights(
            "u1", metrics, JournalHistory(tuple(pain), tuple(mood))
        )

        _assert_bounded(metrics)
        assert insights
        assert mood[0].timestamp.tzinfo is None
        assert mood[0].timestamp == aware.astimezone().replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_user_pattern_smoothing(self, quiet_monitor, base_time):
        from empathy_engine.metrics import EmpathyIntelligenceConfig, MoodEntry

        engine = _engine(quiet_monitor, config=EmpathyIntelligenceConfig(learning_rate=0.5))

        await engine.calculate_advanced_empathy_metrics(
            "u1", [], [MoodEntry(timestamp=base_time, mood=8)]
        )
        assert engine.get_user_pattern("u1").responsiveness == pytest.approx(0.8)

        await engine.calculate_advanced_empathy_metrics(
            "u1", [], [MoodEntry(timestamp=base_time, mood=2)]
        )
        # halfway from 0.8 towards 0.2
        assert engine.get_user_pattern("u1").responsiveness == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_prediction_history_is_capped(self, quiet_monitor, sample_mood_entries):
        engine = _engine(quiet_monitor)

        for _ in range(35):
            await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)

        model = engine.get_prediction_model("u1")
        assert model.model_id == "pred_u1"
        assert len(model.predictions) == 30
        assert len(model.training_data) == 30

    @pytest.mark.asyncio
    async def test_wisdom_retained_per_user(self, quiet_monitor, sample_mood_entries):
        engine = _engine(quiet_monitor)

        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)

        stored = engine.get_wisdom_insights("u1")
        assert stored == list(metrics.humanized_metrics.wisdom_gained.insights)
        assert len(stored) >= 3

    @pytest.mark.asyncio
    async def test_maximum_privacy_keeps_wisdom_out_of_cache(
        self, quiet_monitor, sample_mood_entries
    ):
        from empathy_engine.metrics import EmpathyIntelligenceConfig

        engine = _engine(quiet_monitor,
                         config=EmpathyIntelligenceConfig(privacy_level="maximum"))

        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)

        assert engine.get_wisdom_insights("u1") == []
        assert engine.get_cache_stats().wisdom_database == 0
        assert metrics.humanized_metrics.wisdom_gained.insights

    @pytest.mark.asyncio
    async def test_cultural_context_boost(self, quiet_monitor, base_time):
        from datetime import timedelta
        from empathy_engine.metrics import CulturalContext, EmpathyIntelligenceConfig, MoodEntry

        mood = [
            MoodEntry(timestamp=base_time, notes="sharing our family tradition"),
            MoodEntry(timestamp=base_time + timedelta(days=1), notes="quiet evening"),
        ]
        engine = _engine(quiet_monitor,
                         config=EmpathyIntelligenceConfig(cultural_sensitivity="expert"))

        plain = await engine.calculate_advanced_empathy_metrics("u1", [], mood)
        boosted = await engine.calculate_advanced_empathy_metrics(
            "u2", [], mood, cultural_context=CulturalContext(cultural_background=("Irish",))
        )

        assert plain.empathy_kpis.cultural_empathy.cultural_awareness == 50
        assert boosted.empathy_kpis.cultural_empathy.cultural_humility == 65
        assert boosted.empathy_kpis.cultural_empathy.intersectional_awareness == (
            plain.empathy_kpis.cultural_empathy.intersectional_awareness + 10
        )
        assert engine.get_cache_stats().cultural_context == 1


class TestSessionCaching:

    @pytest.mark.asyncio
    async def test_metrics_cached_for_active_session(self, quiet_monitor, sample_mood_entries):
        from empathy_engine.cache import SessionContext

        engine = _engine(quiet_monitor)
        session = SessionContext(user_id="u1")
        engine.set_session_context(session)

        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)

        assert engine.get_cached_session_metrics("u1") is metrics
        assert engine.get_cached_session_metrics("u2") is None
        assert engine.get_cache_stats().has_active_session is True

    @pytest.mark.asyncio
    async def test_no_session_no_caching(self, quiet_monitor):
        engine = _engine(quiet_monitor)

        await engine.calculate_advanced_empathy_metrics("u1", [], [])

        assert engine.get_cached_session_metrics("u1") is None
        assert engine.get_cached_session_insights("u1") is None
        assert engine.get_cache_stats().has_active_session is False

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_results(self, quiet_monitor, sample_mood_entries):
        from empathy_engine.cache import SessionContext

        engine = _engine(quiet_monitor)
        first, second = SessionContext(user_id="u1"), SessionContext(user_id="u1")

        engine.set_session_context(first)
        await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)
        engine.set_session_context(second)

        assert engine.get_cached_session_metrics("u1") is None

    def test_engine_does_not_keep_session_alive(self, quiet_monitor):
        from empathy_engine.cache import SessionContext

        engine = _engine(quiet_monitor)
        session = SessionContext()
        engine.set_session_context(session)

        del session
        gc.collect()

        assert engine.active_session is None
        assert engine.get_cache_stats().has_active_session is False

    @pytest.mark.asyncio
    async def test_clear_session_caches(self, quiet_monitor, sample_mood_entries):
        from empathy_engine.cache import SessionContext
        from empathy_engine.metrics import JournalHistory

        engine = _engine(quiet_monitor)
        session = SessionContext()
        engine.set_session_context(session)
        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)
        await engine.generate_advanced_insights(
            "u1", metrics, JournalHistory(mood_entries=tuple(sample_mood_entries))
        )
        assert engine.get_cached_session_insights("u1")

        engine.clear_session_caches()

        assert engine.get_cached_session_metrics("u1") is None
        assert engine.get_cached_session_insights("u1") is None


class TestInsights:

    @pytest.mark.asyncio
    async def test_ranked_and_capped(
        self, quiet_monitor, sample_pain_entries, sample_mood_entries
    ):
        from empathy_engine.metrics import JournalHistory

        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics(
            "u1", sample_pain_entries, sample_mood_entries
        )
        history = JournalHistory(tuple(sample_pain_entries), tuple(sample_mood_entries))

        insights = await engine.generate_advanced_insights("u1", metrics, history)

        assert 0 < len(insights) <= 12
        confidences = [i.confidence for i in insights]
        assert confidences == sorted(confidences, reverse=True)
        titles = {i.title for i in insights}
        assert "Empathy Pattern Detected" in titles
        assert "Pain-Empathy Correlation" in titles

    @pytest.mark.asyncio
    async def test_many_wisdom_insights_capped_at_twelve(
        self, quiet_monitor, sample_pain_entries, base_time
    ):
        from datetime import timedelta
        from empathy_engine.metrics import JournalHistory, MoodEntry

        mood = [
            MoodEntry(timestamp=base_time + timedelta(days=i),
                      notes=f"I learned lesson {i}: I can always rest before I crash.")
            for i in range(30)
        ]
        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics("u1", sample_pain_entries, mood)

        insights = await engine.generate_advanced_insights(
            "u1", metrics, JournalHistory(tuple(sample_pain_entries), tuple(mood))
        )

        assert len(insights) == 12
        assert sum(1 for i in insights if i.type.value == "celebration") <= 10

    @pytest.mark.asyncio
    async def test_without_history(self, quiet_monitor):
        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], [])

        insights = await engine.generate_advanced_insights("u1", metrics)

        assert insights
        assert all(i.type.value != "correlation" for i in insights)

    @pytest.mark.asyncio
    async def test_correlation_needs_three_shared_days(self, quiet_monitor, base_time):
        from datetime import timedelta
        from empathy_engine.metrics import JournalHistory, MoodEntry, PainEntry
        from empathy_engine.metrics.insights import generate_insights

        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], [])

        def history(days):
            return JournalHistory(
                pain_entries=tuple(PainEntry(timestamp=base_time + timedelta(days=d),
                                             pain=8 - 2 * d) for d in range(days)),
                mood_entries=tuple(MoodEntry(timestamp=base_time + timedelta(days=d),
                                             mood=2 + 2 * d) for d in range(days)),
            )

        short = generate_insights("u1", metrics, history(2))
        full = generate_insights("u1", metrics, history(4))

        assert all(i.type.value != "correlation" for i in short)
        correlation = next(i for i in full if i.type.value == "correlation")
        assert correlation.confidence == pytest.approx(100)
        assert correlation.data_points == ("r=-1.00", "days=4")
        assert "lower mood" in correlation.description

    @pytest.mark.asyncio
    async def test_burnout_concern(
        self, quiet_monitor, strained_mood_entries, rising_pain_entries
    ):
        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics(
            "u1", rising_pain_entries, strained_mood_entries
        )

        insights = await engine.generate_advanced_insights("u1", metrics)

        assert insights[0].type.value == "concern"
        assert insights[0].title == "Burnout Risk Rising"


class TestRecommendations:

    @pytest.mark.asyncio
    async def test_burnout_family_is_urgent_and_first(
        self, quiet_monitor, strained_mood_entries, rising_pain_entries
    ):
        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics(
            "u1", rising_pain_entries, strained_mood_entries
        )

        recs = await engine.generate_personalized_recommendations("u1", metrics)

        assert recs[0].title == "Burnout Prevention"
        assert recs[0].priority.value == "urgent"
        assert "Accelerate Empathy Growth" not in {r.title for r in recs}

    @pytest.mark.asyncio
    async def test_families_gated_by_thresholds(self, quiet_monitor, sample_mood_entries):
        import dataclasses

        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)
        predictive = metrics.predictive_metrics

        def with_scores(burnout, growth):
            return dataclasses.replace(metrics, predictive_metrics=dataclasses.replace(
                predictive,
                burnout_risk=dataclasses.replace(predictive.burnout_risk,
                                                 current_risk_level=burnout),
                growth_potential=dataclasses.replace(predictive.growth_potential,
                                                     current_growth_trajectory=growth),
            ))

        quiet = await engine.generate_personalized_recommendations("u1", with_scores(70, 60))
        busy = await engine.generate_personalized_recommendations("u1", with_scores(80, 61))

        quiet_titles = [r.title for r in quiet]
        busy_titles = [r.title for r in busy]
        assert "Burnout Prevention" not in quiet_titles
        assert "Accelerate Empathy Growth" not in quiet_titles
        assert busy_titles[0] == "Burnout Prevention"
        assert busy[0].priority.value == "high"
        assert "Accelerate Empathy Growth" in busy_titles

    @pytest.mark.asyncio
    async def test_priority_order_and_cap(self, quiet_monitor, sample_mood_entries):
        engine = _engine(quiet_monitor)
        metrics = await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)

        recs = await engine.generate_personalized_recommendations("u1", metrics)

        assert len(recs) <= 8
        ranks = [r.priority.rank for r in recs]
        assert ranks == sorted(ranks, reverse=True)

    @pytest.mark.asyncio
    async def test_personalization_tags(self, quiet_monitor, sample_mood_entries):
        from empathy_engine.metrics import EmpathyIntelligenceConfig

        deep = _engine(quiet_monitor)
        surface = _engine(quiet_monitor, config=EmpathyIntelligenceConfig(
            personalization_depth="surface", intervention_style="gentle"))

        deep_metrics = await deep.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)
        surface_metrics = await surface.calculate_advanced_empathy_metrics(
            "u1", [], sample_mood_entries
        )
        deep_recs = await deep.generate_personalized_recommendations("u1", deep_metrics)
        surface_recs = await surface.generate_personalized_recommendations("u1", surface_metrics)

        assert "style:adaptive" in deep_recs[0].personalization
        assert any(t.startswith("responsiveness:") for t in deep_recs[0].personalization)
        assert surface_recs[0].personalization == ("style:gentle",)


class TestLifecycle:

    def test_registers_collections_with_monitor(self, quiet_monitor):
        from empathy_engine.cache import USER_PATTERNS, WISDOM_DATABASE

        engine = _engine(quiet_monitor)
        engine._store.set("u1", USER_PATTERNS, object())
        names = engine.monitor_names

        counts = quiet_monitor.take_snapshot().tracked_objects

        assert names[USER_PATTERNS].startswith("EmpathyEngine[")
        assert counts[names[USER_PATTERNS]] == 1
        assert counts[names[WISDOM_DATABASE]] == 0

    def test_engines_sharing_a_monitor_keep_separate_counts(self, quiet_monitor):
        from empathy_engine.cache import USER_PATTERNS

        first = _engine(quiet_monitor)
        second = _engine(quiet_monitor)
        first._store.set("u1", USER_PATTERNS, object())
        second._store.set("u1", USER_PATTERNS, object())
        second._store.set("u2", USER_PATTERNS, object())

        counts = quiet_monitor.take_snapshot().tracked_objects
        assert counts[first.monitor_names[USER_PATTERNS]] == 1
        assert counts[second.monitor_names[USER_PATTERNS]] == 2

        first.destroy()

        counts = quiet_monitor.take_snapshot().tracked_objects
        assert first.monitor_names == {}
        assert counts[second.monitor_names[USER_PATTERNS]] == 2
        assert len([name for name in counts if name.endswith(".user_patterns")]) == 1
        second.destroy()

    def test_default_monitor_is_app_wide(self):
        from empathy_engine.cache import PREDICTION_MODELS
        from empathy_engine.metrics import EmpathyIntelligenceEngine
        from empathy_engine.monitoring import get_memory_monitor

        engine = EmpathyIntelligenceEngine()
        counts = get_memory_monitor()._get_tracked_object_counts()

        assert engine.monitor_names[PREDICTION_MODELS] in counts
        engine.destroy()

    def test_start_eviction_without_loop(self, quiet_monitor):
        engine = _engine(quiet_monitor)
        assert engine.start_cache_eviction() is False
        engine.stop_cache_eviction()
        engine.stop_cache_eviction()

    @pytest.mark.asyncio
    async def test_initialize_starts_eviction(self, quiet_monitor):
        from empathy_engine.config import CacheConfig

        engine = _engine(quiet_monitor,
                         cache_config=CacheConfig(max_entries=1, eviction_interval_ms=10))
        await engine.initialize()
        await engine.calculate_advanced_empathy_metrics("u1", [], [])
        await engine.calculate_advanced_empathy_metrics("u2", [], [])

        await asyncio.sleep(0.05)

        assert engine.get_cache_stats().user_patterns == 1
        engine.destroy()
        assert engine._store.eviction_running is False

    @pytest.mark.asyncio
    async def test_manual_eviction(self, quiet_monitor, fake_clock):
        from empathy_engine.config import CacheConfig

        engine = _engine(quiet_monitor, clock=fake_clock,
                         cache_config=CacheConfig(max_entries=2, ttl_ms=1000))
        for user in ("a", "b", "c", "d", "e"):
            await engine.calculate_advanced_empathy_metrics(user, [], [])
            fake_clock.advance(1)

        # the count bound holds without an eviction pass
        assert engine.get_user_pattern("a") is None
        assert engine.get_user_pattern("d") is not None

        fake_clock.advance(2000)
        await engine.calculate_advanced_empathy_metrics("e", [], [])

        removed = engine.evict_expired_entries()

        # d's pattern and model idle past the ttl; wisdom is count-capped only
        assert removed == 2
        assert engine.get_user_pattern("d") is None
        assert engine.get_user_pattern("e") is not None
        assert engine.get_cache_stats().wisdom_database == 2

    @pytest.mark.asyncio
    async def test_destroy(self, quiet_monitor, sample_mood_entries):
        from empathy_engine.cache import SessionContext

        engine = _engine(quiet_monitor)
        session = SessionContext()
        engine.set_session_context(session)
        await engine.calculate_advanced_empathy_metrics("u1", [], sample_mood_entries)

        engine.destroy()
        engine.destroy()

        stats = engine.get_cache_stats()
        assert stats.total_entries == 0
        assert stats.has_active_session is False
        assert not any(
            name.startswith("EmpathyEngine[")
            for name in quiet_monitor.take_snapshot().tracked_objects
        )

    def test_clear_all_caches(self, quiet_monitor):
        from empathy_engine.cache import PREDICTION_MODELS

        engine = _engine(quiet_monitor)
        engine._store.set("u1", PREDICTION_MODELS, object())

        engine.clear_all_caches()

        assert engine.get_cache_stats().total_entries == 0
