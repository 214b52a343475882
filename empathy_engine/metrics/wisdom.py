"""
Wisdom Extraction Module.

Filters mood entries for insight language, classifies each insight by keyword
dominance and scores applicability, transformative level and reinforcement.
Also derives the aggregate wisdom profile.
"""
from typing import Optional, Sequence

from ..config import config
from ..logger import log
from ..math_utils import clamp_score, mean, safe_divide
from .entries import MoodEntry, PainEntry, SocialSupport
from .keywords import KEYWORD_FAMILIES, KeywordFamily, KeywordTextScorer, TextScorer
from .types import WisdomCategories, WisdomCategory, WisdomInsight, WisdomProfile

MIN_INSIGHT_LENGTH = 30
REINFORCEMENT_MIN_WORD = 4

_default_scorer = KeywordTextScorer()

# Checked in this order; earlier categories win ties
_CATEGORY_FAMILIES = (
    (WisdomCategory.RELATIONAL, KeywordFamily.CATEGORY_RELATIONAL),
    (WisdomCategory.EMOTIONAL, KeywordFamily.CATEGORY_EMOTIONAL),
    (WisdomCategory.SPIRITUAL, KeywordFamily.CATEGORY_SPIRITUAL),
    (WisdomCategory.SELF_KNOWLEDGE, KeywordFamily.CATEGORY_SELF_KNOWLEDGE),
)


def categorize_wisdom(insight: str, scorer: Optional[TextScorer] = None) -> WisdomCategory:
    """Category whose keyword family scores highest; practical when none match."""
    scorer = scorer or _default_scorer
    best_category = WisdomCategory.PRACTICAL
    best_score = 0.0
    for category, family in _CATEGORY_FAMILIES:
        score = scorer.score_text(insight, family)
        if score > best_score:
            best_category, best_score = category, score
    return best_category


def assess_applicability(insight: str, scorer: Optional[TextScorer] = None) -> float:
    """40 baseline plus 20 per action word."""
    scorer = scorer or _default_scorer
    strength = scorer.score_text(insight, KeywordFamily.WISDOM_ACTION)
    return clamp_score(40 + strength * _family_len(KeywordFamily.WISDOM_ACTION) * 20)


def assess_transformative_level(insight: str, scorer: Optional[TextScorer] = None) -> float:
    """30 baseline plus 30 per intensity word."""
    scorer = scorer or _default_scorer
    strength = scorer.score_text(insight, KeywordFamily.WISDOM_INTENSITY)
    return clamp_score(30 + strength * _family_len(KeywordFamily.WISDOM_INTENSITY) * 30)


def _family_len(family: KeywordFamily) -> int:
    return len(KEYWORD_FAMILIES[family])


def assess_reinforcement(insight: str, mood_entries: Sequence[MoodEntry]) -> float:
    """Share of entries that repeat any significant word of the insight."""
    if not mood_entries:
        return 0.0
    key_words = {w for w in insight.lower().split() if len(w) > REINFORCEMENT_MIN_WORD}
    if not key_words:
        return 0.0
    reinforced = sum(
        1 for e in mood_entries if key_words.intersection(e.notes.lower().split())
    )
    return clamp_score(reinforced / len(mood_entries) * 100)


def extract_wisdom_insights(
    user_id: str,
    pain_entries: Sequence[PainEntry],
    mood_entries: Sequence[MoodEntry],
    scorer: Optional[TextScorer] = None,
    limit: Optional[int] = None
) -> list[WisdomInsight]:
    """
    Extract the highest-value wisdom insights.

    The cap is applied after scoring, so the best insights survive
    regardless of where they appear in the journal.
    """
    scorer = scorer or _default_scorer
    limit = limit if limit is not None else config.max_wisdom_insights

    insights: list[WisdomInsight] = []
    for idx, entry in enumerate(mood_entries):
        notes = entry.notes
        if len(notes) <= MIN_INSIGHT_LENGTH:
            continue
        if scorer.score_text(notes, KeywordFamily.WISDOM_MARKER) <= 0:
            continue
        insights.append(WisdomInsight(
            id=f"wisdom_{user_id}_{idx}",
            category=categorize_wisdom(notes, scorer),
            insight=notes,
            date_gained=entry.timestamp,
            contextual_source=entry.context,
            applicability=assess_applicability(notes, scorer),
            transformative_level=assess_transformative_level(notes, scorer),
            reinforcement_level=assess_reinforcement(notes, mood_entries),
        ))

    insights.sort(key=lambda i: i.total_value, reverse=True)
    kept = insights[:limit]

    if insights:
        log.wisdom(f"Extracted {len(kept)}/{len(insights)} insights", user=user_id)
    return kept


# ==================== Wisdom profile ====================

def _hit_share(
    entries: Sequence[MoodEntry],
    family: KeywordFamily,
    scorer: TextScorer
) -> float:
    hits = sum(1 for e in entries if scorer.score_text(e.notes, family) > 0)
    return safe_divide(hits, len(entries))


def practical_wisdom(entries: Sequence[MoodEntry]) -> float:
    clarity = mean([e.emotional_clarity for e in entries], fallback=5.0)
    return clamp_score(clarity * 10)


def emotional_wisdom(entries: Sequence[MoodEntry]) -> float:
    if not entries:
        return 50.0
    regulation = mean([e.emotional_regulation for e in entries])
    hope = mean([e.hopefulness for e in entries])
    return clamp_score((regulation + hope) * 5)


def spiritual_wisdom(entries: Sequence[MoodEntry], scorer: Optional[TextScorer] = None) -> float:
    if not entries:
        return 50.0
    share = _hit_share(entries, KeywordFamily.SPIRITUAL_WISDOM, scorer or _default_scorer)
    clarity = mean([e.emotional_clarity for e in entries])
    regulation = mean([e.emotional_regulation for e in entries])
    return clamp_score(share * 60 + (clarity + regulation) * 2)


def relational_wisdom(entries: Sequence[MoodEntry], scorer: Optional[TextScorer] = None) -> float:
    if not entries:
        return 50.0
    share = _hit_share(entries, KeywordFamily.RELATIONAL_WISDOM, scorer or _default_scorer)
    supported = sum(1 for e in entries if e.social_support is not SocialSupport.NONE)
    return clamp_score(share * 50 + supported / len(entries) * 50)


def self_knowledge_wisdom(entries: Sequence[MoodEntry], scorer: Optional[TextScorer] = None) -> float:
    if not entries:
        return 50.0
    share = _hit_share(entries, KeywordFamily.INTROSPECTION, scorer or _default_scorer)
    clarity = mean([e.emotional_clarity for e in entries])
    return clamp_score(share * 60 + clarity * 4)


def wisdom_growth_rate(entries: Sequence[MoodEntry], scorer: Optional[TextScorer] = None) -> float:
    """Insight density of the second half vs the first half."""
    if len(entries) < 2:
        return 10.0
    scorer = scorer or _default_scorer
    mid = len(entries) // 2
    first = _hit_share(entries[:mid], KeywordFamily.INSIGHT_GROWTH, scorer)
    second = _hit_share(entries[mid:], KeywordFamily.INSIGHT_GROWTH, scorer)
    return clamp_score(40 + (second - first) * 100)


def wisdom_application(entries: Sequence[MoodEntry], scorer: Optional[TextScorer] = None) -> float:
    if not entries:
        return 40.0
    share = _hit_share(entries, KeywordFamily.WISDOM_APPLICATION, scorer or _default_scorer)
    regulation = mean([e.emotional_regulation for e in entries])
    return clamp_score(share * 70 + regulation * 3)


def wisdom_sharing(entries: Sequence[MoodEntry], scorer: Optional[TextScorer] = None) -> float:
    if not entries:
        return 30.0
    return clamp_score(
        _hit_share(entries, KeywordFamily.WISDOM_SHARING, scorer or _default_scorer) * 100
    )


def integrated_wisdom(
    entries: Sequence[MoodEntry],
    stability: float,
    scorer: Optional[TextScorer] = None
) -> float:
    """Entries that both name an insight and act on it, plus regulation stability."""
    if not entries:
        return 40.0
    scorer = scorer or _default_scorer
    integrated = sum(
        1 for e in entries
        if scorer.score_text(e.notes, KeywordFamily.INTEGRATION_INSIGHT) > 0
        and scorer.score_text(e.notes, KeywordFamily.INTEGRATION_APPLY) > 0
    )
    return clamp_score(integrated / len(entries) * 60 + stability * 0.4)


def build_wisdom_profile(
    user_id: str,
    pain_entries: Sequence[PainEntry],
    mood_entries: Sequence[MoodEntry],
    stability: float = 50.0,
    scorer: Optional[TextScorer] = None
) -> WisdomProfile:
    """
    Aggregate wisdom profile for a user.

    Args:
        stability: emotional regulation score (0-100) used by integrated wisdom
    """
    return WisdomProfile(
        insights=tuple(extract_wisdom_insights(user_id, pain_entries, mood_entries, scorer)),
        wisdom_categories=WisdomCategories(
            practical_wisdom=practical_wisdom(mood_entries),
            emotional_wisdom=emotional_wisdom(mood_entries),
            spiritual_wisdom=spiritual_wisdom(mood_entries, scorer),
            relational_wisdom=relational_wisdom(mood_entries, scorer),
            self_knowledge_wisdom=self_knowledge_wisdom(mood_entries, scorer),
        ),
        wisdom_growth_rate=wisdom_growth_rate(mood_entries, scorer),
        wisdom_application=wisdom_application(mood_entries, scorer),
        wisdom_sharing=wisdom_sharing(mood_entries, scorer),
        integrated_wisdom=integrated_wisdom(mood_entries, stability, scorer),
    )
