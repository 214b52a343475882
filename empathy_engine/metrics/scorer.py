"""
Heuristic Scorer.

Pure functions of entry collections mapped to bounded sub-scores. Text
matching goes through a pluggable TextScorer; everything else is weighted
averages and clamping. Empty input yields a defined baseline (usually 50).
"""
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..math_utils import clamp_score, mean, safe_divide
from .entries import MoodEntry, PainEntry, SocialSupport
from .keywords import KeywordFamily, KeywordTextScorer, TextScorer
from .predictive import calculate_trend, calculate_variance
from .types import (
    CompassionateProgress,
    CulturalEmpathyMetrics,
    DailyEmpathyPattern,
    EmotionalIntelligence,
    EmpathyIntelligenceProfile,
    EmpathyKPIs,
    EmpathyQuality,
    FutureEmpathyProjection,
    HumanizedMetrics,
    MicroEmpathyTracking,
    NeuralEmpathyProfile,
    RecoveryPatternAnalysis,
    TemporalEmpathyPatterns,
    WeeklyEmpathyTrend,
    WisdomProfile,
)
from .wisdom import emotional_wisdom

RECENT_WINDOW = 7
TEMPORAL_WINDOW = 30

# (label, first hour, last hour exclusive)
TIME_OF_DAY_BUCKETS = (
    ("morning", 5, 12),
    ("afternoon", 12, 17),
    ("evening", 17, 22),
)


def entry_weight(entry: MoodEntry) -> float:
    """Weight of a mood entry: hopeful, energized and supported entries count more."""
    weight = 1.0
    weight += (entry.hopefulness - 5) / 10
    weight += (entry.mood - 5) / 20
    if entry.energy >= 7:
        weight += 0.2
    if entry.social_support is not SocialSupport.NONE:
        weight += 0.25
    return max(0.4, weight)


def empathy_quality(level: float, time_of_day: str = "morning") -> EmpathyQuality:
    if level > 85:
        return EmpathyQuality.ENERGIZED
    if level > 70:
        return EmpathyQuality.TENDER if time_of_day == "morning" else EmpathyQuality.FIERCE
    if level > 50:
        return EmpathyQuality.BOUNDARIED
    if level > 30:
        return EmpathyQuality.TIRED
    return EmpathyQuality.OVERWHELMED


def time_of_day(moment: datetime) -> str:
    for label, start, end in TIME_OF_DAY_BUCKETS:
        if start <= moment.hour < end:
            return label
    return "night"


def _strategy_mentions(entry: MoodEntry, fragment: str) -> bool:
    return any(fragment in s.lower() for s in entry.coping_strategies)


class HeuristicScorer:
    """
    Computes every sub-score of the metrics tree.

    Args:
        text_scorer: strategy for keyword-family matching
        hit_threshold: text score above which an entry counts as a match
    """

    def __init__(self, text_scorer: Optional[TextScorer] = None, hit_threshold: float = 0.0):
        self.text_scorer = text_scorer or KeywordTextScorer()
        self.hit_threshold = hit_threshold

    # ==================== Text helpers ====================

    def hit(self, text: str, family: KeywordFamily) -> bool:
        return self.text_scorer.score_text(text, family) > self.hit_threshold

    def share(self, entries: Sequence[MoodEntry], family: KeywordFamily) -> float:
        """Fraction of entries whose notes match the family."""
        hits = sum(1 for e in entries if self.hit(e.notes, family))
        return safe_divide(hits, len(entries))

    def _indicator_score(
        self,
        entries: Sequence[MoodEntry],
        family: KeywordFamily,
        baseline: float = 50.0,
        offset: float = 0.0
    ) -> float:
        if not entries:
            return baseline
        return clamp_score(self.share(entries, family) * 100 + offset)

    # ==================== Emotional intelligence ====================

    def self_awareness(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        return clamp_score(len(mood) * 2)

    def self_regulation(self, mood: Sequence[MoodEntry]) -> float:
        """Inverse of the average day-to-day mood swing."""
        if len(mood) < 2:
            return 50.0
        swings = [abs(b.mood - a.mood) for a, b in zip(mood, mood[1:])]
        return clamp_score(100 - mean(swings) * 10)

    def motivation(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        return clamp_score(mean([e.hopefulness for e in mood]) * 10)

    def compassion_for_others(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.COMPASSION_FOR_OTHERS)

    def empathy_quotient(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        return clamp_score(
            self.share(mood, KeywordFamily.EMPATHY) * 70 + self.compassion_for_others(mood) * 0.3
        )

    def social_awareness(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.SOCIAL_AWARENESS)

    def relationship_management(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.RELATIONSHIP)

    def social_cognition(self, mood: Sequence[MoodEntry]) -> float:
        return (self.social_awareness(mood) + self.relationship_management(mood)) / 2

    def emotional_granularity(self, mood: Sequence[MoodEntry]) -> float:
        """Emotional clarity plus descriptive, mixed-emotion notes."""
        if not mood:
            return 50.0
        clarity = mean([e.emotional_clarity for e in mood]) * 10
        complex_entries = 0
        for e in mood:
            words = e.notes.lower().split()
            if len(words) > 10 and {"and", "but", "also"}.intersection(words):
                complex_entries += 1
        return clamp_score(clarity * 0.7 + complex_entries / len(mood) * 30)

    def meta_emotional_awareness(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        regulation = mean([e.emotional_regulation for e in mood])
        return clamp_score(self.share(mood, KeywordFamily.META_AWARENESS) * 60 + regulation * 4)

    # ==================== Neural empathy profile ====================

    def mirror_neuron_activity(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0

        resonance_weight = total_weight = 0.0
        detachment_hits = 0
        for e in mood:
            weight = entry_weight(e)
            total_weight += weight
            context = e.context.lower()
            if (self.hit(e.notes, KeywordFamily.MIRRORING)
                    or "emotional connection" in context
                    or "support group" in context):
                resonance_weight += weight
            if self.hit(e.notes, KeywordFamily.DETACHMENT) or "detached" in context:
                detachment_hits += 1

        resonance = safe_divide(resonance_weight, total_weight) * 55
        energy = mean([e.emotional_regulation for e in mood]) / 10 * 20
        detachment = detachment_hits / len(mood) * 35
        return clamp_score(40 + resonance + energy - detachment)

    def emotional_contagion_resistance(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0

        protective_weight = overwhelm_weight = total_weight = 0.0
        for e in mood:
            weight = entry_weight(e)
            total_weight += weight
            if (self.hit(e.notes, KeywordFamily.BOUNDARY)
                    or _strategy_mentions(e, "boundary")
                    or self.hit(e.notes, KeywordFamily.RESTORATIVE)):
                protective_weight += weight
            if (self.hit(e.notes, KeywordFamily.OVERWHELM)
                    or (e.anxiety > 7 and "social" in e.context.lower())):
                overwhelm_weight += weight + 0.3

        protective = safe_divide(protective_weight, total_weight) * 60
        overwhelm = safe_divide(overwhelm_weight, total_weight) * 55
        regulation = mean([e.emotional_regulation for e in mood]) / 10 * 20
        return clamp_score(35 + protective + regulation - overwhelm, 10, 100)

    def empathic_distress_management(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        distress = sum(
            1 for e in mood
            if self.hit(e.notes, KeywordFamily.EMPATHIC_DISTRESS)
            or (e.anxiety > 7 and "others" in e.notes.lower())
        )
        managed = sum(
            1 for e in mood
            if _strategy_mentions(e, "self-care")
            or _strategy_mentions(e, "mindfulness")
            or self.hit(e.notes, KeywordFamily.DISTRESS_MANAGEMENT)
        )
        return clamp_score(50 + managed / len(mood) * 60 - distress / len(mood) * 40)

    def perspective_taking(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.PERSPECTIVE_TAKING)

    def affective_perspective_taking(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.AFFECTIVE_PERSPECTIVE)

    def empathy_flexibility(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.FLEXIBILITY, baseline=60, offset=40)

    def empathy_calibration(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.CALIBRATION, baseline=55, offset=35)

    def empathic_memory(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.EMPATHIC_MEMORY, baseline=65, offset=45)

    def neural_empathy_profile(self, mood: Sequence[MoodEntry]) -> NeuralEmpathyProfile:
        return NeuralEmpathyProfile(
            mirror_neuron_activity=self.mirror_neuron_activity(mood),
            emotional_contagion_resistance=self.emotional_contagion_resistance(mood),
            empathic_distress_management=self.empathic_distress_management(mood),
            cognitive_perspective_taking=self.perspective_taking(mood),
            affective_perspective_taking=self.affective_perspective_taking(mood),
            empathy_flexibility=self.empathy_flexibility(mood),
            empathy_calibration=self.empathy_calibration(mood),
            empathic_memory=self.empathic_memory(mood),
        )

    def emotional_intelligence(self, mood: Sequence[MoodEntry]) -> EmotionalIntelligence:
        return EmotionalIntelligence(
            self_awareness=self.self_awareness(mood),
            self_regulation=self.self_regulation(mood),
            motivation=self.motivation(mood),
            empathy=self.empathy_quotient(mood),
            social_skills=self.relationship_management(mood),
            emotional_granularity=self.emotional_granularity(mood),
            meta_emotional_awareness=self.meta_emotional_awareness(mood),
            neural_empathy_patterns=self.neural_empathy_profile(mood),
        )

    # ==================== Compassionate progress ====================

    def self_compassion(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.SELF_COMPASSION)

    def progress_celebration(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.CELEBRATION, baseline=0.0)

    def resilience_growth(self, pain: Sequence[PainEntry], mood: Sequence[MoodEntry]) -> float:
        """Week-over-week pain relief plus mood lift. Needs two weeks of data."""
        if len(pain) < RECENT_WINDOW or len(mood) < RECENT_WINDOW:
            return 50.0
        recent_pain = mean([e.pain for e in pain[-7:]])
        earlier_pain = mean([e.pain for e in pain[-14:-7]], fallback=recent_pain)
        recent_mood = mean([e.mood for e in mood[-7:]])
        earlier_mood = mean([e.mood for e in mood[-14:-7]], fallback=recent_mood)
        improvement = (earlier_pain - recent_pain) + (recent_mood - earlier_mood)
        return clamp_score(improvement * 10 + 50)

    def post_traumatic_growth(self, pain: Sequence[PainEntry], mood: Sequence[MoodEntry]) -> float:
        if not pain and not mood:
            return 50.0
        growth = sum(1 for e in mood if self.hit(e.notes, KeywordFamily.POST_TRAUMATIC_GROWTH))
        adversity = sum(1 for e in pain if e.pain >= 7)
        return clamp_score(safe_divide(growth, adversity) * 80 + 20)

    def meaning_making(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        purposeful = sum(1 for e in mood if e.hopefulness >= 7 and len(e.notes) > 30)
        return clamp_score(
            self.share(mood, KeywordFamily.MEANING_MAKING) * 60 + purposeful / len(mood) * 40
        )

    def adaptive_reframing(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.REFRAMING)

    def compassion_fatigue(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 20.0
        return clamp_score(self.share(mood, KeywordFamily.COMPASSION_FATIGUE) * 100, 0, 80)

    def recovery_patterns(
        self,
        pain: Sequence[PainEntry],
        mood: Sequence[MoodEntry]
    ) -> RecoveryPatternAnalysis:
        """Falling pain shortens recovery; steady pain makes it consistent."""
        levels = [e.pain for e in pain[-TEMPORAL_WINDOW:]]
        trend = calculate_trend(levels)
        strategies = Counter(s.lower() for e in mood for s in e.coping_strategies)
        return RecoveryPatternAnalysis(
            avg_recovery_time_minutes=max(30.0, 120 + trend),
            recovery_consistency=clamp_score(100 - calculate_variance(levels) * 10),
            adaptive_recovery=clamp_score(50 - trend / 2),
            recovery_strategies=tuple(name for name, _ in strategies.most_common(3)),
        )

    def compassionate_progress(
        self,
        pain: Sequence[PainEntry],
        mood: Sequence[MoodEntry]
    ) -> CompassionateProgress:
        self_compassion = self.self_compassion(mood)
        return CompassionateProgress(
            self_compassion=self_compassion,
            self_criticism=clamp_score(100 - self_compassion),
            progress_celebration=self.progress_celebration(mood),
            setback_resilience=self.resilience_growth(pain, mood),
            hopefulness=self.motivation(mood),
            post_traumatic_growth=self.post_traumatic_growth(pain, mood),
            meaning_making=self.meaning_making(mood),
            adaptive_reframing=self.adaptive_reframing(mood),
            compassion_fatigue=self.compassion_fatigue(mood),
            recovery_patterns=self.recovery_patterns(pain, mood),
        )

    # ==================== Empathy KPIs ====================

    def empathic_accuracy(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.EMPATHIC_ACCURACY)

    def empathic_concern(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.EMPATHIC_CONCERN)

    def human_connection(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.HUMAN_CONNECTION)

    def empathic_motivation(self, mood: Sequence[MoodEntry]) -> float:
        """Helping signals and concrete acts, minus fatigue."""
        if not mood:
            return 50.0

        total_weight = motivation_weight = 0.0
        action_hits = fatigue_hits = 0
        for e in mood:
            weight = entry_weight(e)
            total_weight += weight
            context = e.context.lower()
            if (self.hit(e.notes, KeywordFamily.MOTIVATION)
                    or "support group" in context
                    or "care team" in context
                    or _strategy_mentions(e, "support others")
                    or _strategy_mentions(e, "community")):
                motivation_weight += weight
            if self.hit(e.notes, KeywordFamily.MOTIVATION_ACTION):
                action_hits += 1
            if self.hit(e.notes, KeywordFamily.FATIGUE) or e.energy <= 3:
                fatigue_hits += 1

        base = safe_divide(motivation_weight, total_weight) * 55
        action = action_hits / len(mood) * 25
        fatigue = fatigue_hits / len(mood) * 45
        return clamp_score(45 + base + action - fatigue)

    def boundary_maintenance(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0

        total_weight = boundary_weight = restorative_weight = 0.0
        overload_hits = 0
        for e in mood:
            weight = entry_weight(e)
            total_weight += weight
            if (self.hit(e.notes, KeywordFamily.BOUNDARY)
                    or _strategy_mentions(e, "boundary")
                    or self.hit(e.notes, KeywordFamily.ADVOCACY)):
                boundary_weight += weight
            if self.hit(e.notes, KeywordFamily.RESTORATIVE) or e.energy >= 7 or e.stress <= 3:
                restorative_weight += weight * 0.6
            if self.hit(e.notes, KeywordFamily.OVERLOAD):
                overload_hits += 1

        boundary = safe_divide(boundary_weight, total_weight) * 60
        restorative = safe_divide(restorative_weight, total_weight) * 25
        overload = overload_hits / len(mood) * 55
        return clamp_score(40 + boundary + restorative - overload)

    def cultural_empathy(
        self,
        mood: Sequence[MoodEntry],
        has_stored_context: bool = False,
        boost: float = 5.0
    ) -> CulturalEmpathyMetrics:
        if not mood:
            return CulturalEmpathyMetrics(*([50.0] * 7))

        score = clamp_score(self.share(mood, KeywordFamily.CULTURAL) * 100)
        if has_stored_context:
            score = clamp_score(score + boost)
        return CulturalEmpathyMetrics(
            cultural_awareness=score,
            cross_cultural_empathy=clamp_score(score - 5),
            cultural_humility=clamp_score(score + 5),
            universal_empathy=clamp_score(60 + score / 5),
            cultural_adaptation=clamp_score(score - 10),
            inclusive_empathy=clamp_score(score + 10),
            intersectional_awareness=clamp_score(score - 15),
        )

    def empathy_kpis(
        self,
        mood: Sequence[MoodEntry],
        cultural: CulturalEmpathyMetrics
    ) -> EmpathyKPIs:
        connection = self.human_connection(mood)
        return EmpathyKPIs(
            validation_received=self.social_awareness(mood),
            validation_given=self.relationship_management(mood),
            emotional_support=connection,
            understanding_felt=self.empathic_accuracy(mood),
            connection_quality=connection,
            empathic_accuracy=self.empathic_accuracy(mood),
            empathic_concern=self.empathic_concern(mood),
            perspective_taking=self.perspective_taking(mood),
            empathic_motivation=self.empathic_motivation(mood),
            boundary_maintenance=self.boundary_maintenance(mood),
            cultural_empathy=cultural,
        )

    # ==================== Humanized metrics ====================

    def dignity_maintenance(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.DIGNITY, baseline=75, offset=50)

    def purpose_clarity(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.PURPOSE, baseline=60, offset=40)

    def spiritual_wellbeing(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.SPIRITUAL, baseline=60, offset=40)

    def life_narrative_coherence(self, mood: Sequence[MoodEntry]) -> float:
        return self._indicator_score(mood, KeywordFamily.NARRATIVE, baseline=65, offset=50)

    def meaningfulness(self, pain: Sequence[PainEntry], mood: Sequence[MoodEntry]) -> float:
        """Meaning language plus a bonus for accepting lower pain."""
        if not mood:
            return 50.0
        meaning = self.share(mood, KeywordFamily.MEANINGFULNESS) * 100
        recent_pain = mean([e.pain for e in pain[-RECENT_WINDOW:]])
        acceptance = max(0.0, (10 - recent_pain) * 2)
        return clamp_score(meaning + acceptance)

    def inner_strength(self, pain: Sequence[PainEntry], mood: Sequence[MoodEntry]) -> float:
        """Recent mood relative to recent pain."""
        if not pain and not mood:
            return 50.0
        recent_pain = mean([e.pain for e in pain[-RECENT_WINDOW:]])
        recent_mood = mean([e.mood for e in mood[-RECENT_WINDOW:]], fallback=5.0)
        if recent_pain < 0.1:
            return clamp_score(70 + recent_mood * 3)
        return clamp_score(recent_mood / max(0.1, recent_pain) * 50)

    def humanized_metrics(
        self,
        pain: Sequence[PainEntry],
        mood: Sequence[MoodEntry],
        wisdom: WisdomProfile
    ) -> HumanizedMetrics:
        connection = self.human_connection(mood)
        dignity = self.dignity_maintenance(mood)
        meaning = self.meaningfulness(pain, mood)
        return HumanizedMetrics(
            courage_score=clamp_score((meaning + connection) / 2),
            vulnerability_acceptance=clamp_score(connection * 0.6 + dignity * 0.4),
            authenticity_level=clamp_score(dignity),
            growth_mindset=clamp_score((meaning + 60) / 1.2),
            wisdom_gained=wisdom,
            inner_strength=self.inner_strength(pain, mood),
            dignity_maintenance=dignity,
            purpose_clarity=self.purpose_clarity(mood),
            spiritual_wellbeing=self.spiritual_wellbeing(mood),
            life_narrative_coherence=self.life_narrative_coherence(mood),
        )

    # ==================== Empathy intelligence profile ====================

    def empathy_intelligence_profile(self, mood: Sequence[MoodEntry]) -> EmpathyIntelligenceProfile:
        eq = self.empathy_quotient(mood)
        regulation = self.self_regulation(mood)
        cognition = self.social_cognition(mood)
        return EmpathyIntelligenceProfile(
            empathy_iq=clamp_score(eq * 2, 0, 200),
            empathy_processing_speed=clamp_score(60 + regulation / 2),
            empathy_accuracy=clamp_score(eq),
            empathy_diversity=clamp_score(cognition),
            empathy_innovation=clamp_score(50 + (eq - 50) / 2),
            empathy_leadership=clamp_score(40 + cognition / 2),
            empathy_teaching=clamp_score(40 + eq / 3),
            empathy_healing=clamp_score(50 + regulation / 3),
            meta_empathy=self.meta_emotional_awareness(mood),
            empathy_wisdom=emotional_wisdom(mood),
        )

    # ==================== Temporal patterns ====================

    def pattern_stability(self, values: Sequence[float]) -> float:
        if len(values) < 2:
            return 50.0
        return clamp_score(100 - calculate_variance(values) * 10)

    def recovery_speed(self, values: Sequence[float]) -> float:
        """Lift across the last three mood readings."""
        if len(values) < 3:
            return 50.0
        recent = values[-3:]
        return clamp_score((recent[-1] - recent[0]) * 10 + 50)

    def _daily_patterns(self, mood: Sequence[MoodEntry]) -> tuple[DailyEmpathyPattern, ...]:
        buckets: dict[str, list[float]] = {}
        for e in mood:
            buckets.setdefault(time_of_day(e.timestamp), []).append(e.mood * 10)

        patterns = []
        for label in [b[0] for b in TIME_OF_DAY_BUCKETS] + ["night"]:
            levels = buckets.get(label)
            if not levels:
                continue
            level = clamp_score(mean(levels))
            patterns.append(DailyEmpathyPattern(
                time_of_day=label,
                empathy_level=level,
                empathy_quality=empathy_quality(level, label),
                sample_count=len(levels),
            ))
        return tuple(patterns)

    def _weekly_trends(self, mood: Sequence[MoodEntry]) -> tuple[WeeklyEmpathyTrend, ...]:
        weeks: dict[datetime, list[float]] = {}
        for e in mood:
            day = e.timestamp.replace(hour=0, minute=0, second=0, microsecond=0)
            week_start = day - timedelta(days=day.weekday())
            weeks.setdefault(week_start, []).append(e.mood * 10)

        trends = []
        for week_start in sorted(weeks):
            levels = weeks[week_start]
            direction = calculate_trend(levels)
            if direction > 20:
                pattern = "improving"
            elif direction < -20:
                pattern = "declining"
            else:
                pattern = "stable"
            trends.append(WeeklyEmpathyTrend(
                week_start=week_start,
                avg_empathy_level=clamp_score(mean(levels)),
                min_empathy_level=clamp_score(min(levels)),
                max_empathy_level=clamp_score(max(levels)),
                dominant_pattern=pattern,
            ))
        return tuple(trends)

    def temporal_patterns(
        self,
        mood: Sequence[MoodEntry],
        horizon_days: int = 90
    ) -> TemporalEmpathyPatterns:
        window = list(mood[-TEMPORAL_WINDOW:])
        values = [e.mood for e in window]
        stability = self.pattern_stability(values)
        evolution = clamp_score(50 + calculate_trend(values) / 2)

        growth_areas = []
        if stability < 50:
            growth_areas.append("emotional steadiness")
        if evolution < 50:
            growth_areas.append("mood recovery")
        if window and self.share(window, KeywordFamily.PERSPECTIVE_TAKING) < 0.2:
            growth_areas.append("perspective taking")

        return TemporalEmpathyPatterns(
            daily_patterns=self._daily_patterns(window),
            weekly_trends=self._weekly_trends(window),
            pattern_stability=stability,
            recovery_speed=self.recovery_speed(values),
            evolution_score=evolution,
            future_projection=FutureEmpathyProjection(
                projection_timeframe=f"{horizon_days} days",
                confidence_level=clamp_score(30 + len(values) * 1.5),
                predicted_growth_areas=tuple(growth_areas),
            ),
        )

    # ==================== Micro moments ====================

    def micro_moment_quality(self, mood: Sequence[MoodEntry]) -> float:
        if not mood:
            return 50.0
        avg_mood = mean([e.mood for e in mood])
        return clamp_score(avg_mood * 8 + self.share(mood, KeywordFamily.MICRO_QUALITY) * 20)

    def micro_empathy_moments(self, mood: Sequence[MoodEntry]) -> MicroEmpathyTracking:
        return MicroEmpathyTracking(
            daily_micro_average=clamp_score(mean([e.mood for e in mood], fallback=5.0) * 10),
            micro_empathy_quality=self.micro_moment_quality(mood),
            micro_empathy_consistency=60.0,
            spontaneous_empathy=55.0,
            mindful_empathy=65.0,
        )
