"""
Keyword families used by the heuristic text scorer.

Each family is a named set of lowercase phrases matched as substrings of an
entry's notes/context. A pluggable TextScorer receives the family name, so a
model-backed scorer can replace substring matching family by family.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class KeywordFamily(Enum):
    # Empathic motivation
    MOTIVATION = "motivation"
    MOTIVATION_ACTION = "motivation_action"
    FATIGUE = "fatigue"
    # Boundaries and restoration
    BOUNDARY = "boundary"
    RESTORATIVE = "restorative"
    OVERWHELM = "overwhelm"
    OVERLOAD = "overload"
    ADVOCACY = "advocacy"
    # Resonance
    MIRRORING = "mirroring"
    DETACHMENT = "detachment"
    EMPATHIC_DISTRESS = "empathic_distress"
    DISTRESS_MANAGEMENT = "distress_management"
    # Awareness and meaning
    META_AWARENESS = "meta_awareness"
    POST_TRAUMATIC_GROWTH = "post_traumatic_growth"
    MEANING_MAKING = "meaning_making"
    REFRAMING = "reframing"
    COMPASSION_FATIGUE = "compassion_fatigue"
    CELEBRATION = "celebration"
    # Empathy KPIs
    EMPATHIC_ACCURACY = "empathic_accuracy"
    EMPATHIC_CONCERN = "empathic_concern"
    PERSPECTIVE_TAKING = "perspective_taking"
    AFFECTIVE_PERSPECTIVE = "affective_perspective"
    FLEXIBILITY = "flexibility"
    CALIBRATION = "calibration"
    EMPATHIC_MEMORY = "empathic_memory"
    CULTURAL = "cultural"
    SOCIAL_AWARENESS = "social_awareness"
    RELATIONSHIP = "relationship"
    SELF_COMPASSION = "self_compassion"
    COMPASSION_FOR_OTHERS = "compassion_for_others"
    EMPATHY = "empathy"
    HUMAN_CONNECTION = "human_connection"
    # Humanized metrics
    DIGNITY = "dignity"
    PURPOSE = "purpose"
    SPIRITUAL = "spiritual"
    NARRATIVE = "narrative"
    MEANINGFULNESS = "meaningfulness"
    MICRO_QUALITY = "micro_quality"
    # Wisdom
    WISDOM_MARKER = "wisdom_marker"
    WISDOM_ACTION = "wisdom_action"
    WISDOM_INTENSITY = "wisdom_intensity"
    CATEGORY_RELATIONAL = "category_relational"
    CATEGORY_EMOTIONAL = "category_emotional"
    CATEGORY_SPIRITUAL = "category_spiritual"
    CATEGORY_SELF_KNOWLEDGE = "category_self_knowledge"
    SPIRITUAL_WISDOM = "spiritual_wisdom"
    RELATIONAL_WISDOM = "relational_wisdom"
    INTROSPECTION = "introspection"
    INSIGHT_GROWTH = "insight_growth"
    WISDOM_APPLICATION = "wisdom_application"
    WISDOM_SHARING = "wisdom_sharing"
    INTEGRATION_INSIGHT = "integration_insight"
    INTEGRATION_APPLY = "integration_apply"


KEYWORD_FAMILIES: dict[KeywordFamily, tuple[str, ...]] = {
    KeywordFamily.MOTIVATION: (
        "help", "support", "encourage", "check in", "showed up", "listened",
    ),
    KeywordFamily.MOTIVATION_ACTION: (
        "volunteered", "brought", "organized", "advocated", "dropped off",
    ),
    KeywordFamily.FATIGUE: (
        "burned out", "exhausted", "drained", "too tired", "could not help",
    ),
    KeywordFamily.BOUNDARY: (
        "boundary", "limit", "said no", "protected my space", "took a pause",
    ),
    KeywordFamily.RESTORATIVE: (
        "rested", "recharged", "took a break", "scheduled downtime", "stepped back",
    ),
    KeywordFamily.OVERWHELM: (
        "absorbed", "overwhelmed by others", "took on too much", "emotionally flooded",
    ),
    KeywordFamily.OVERLOAD: (
        "absorbed", "overwhelmed by others", "took on too much", "emotionally flooded",
        "people pleasing",
    ),
    KeywordFamily.ADVOCACY: ("asked for what i need", "set expectations"),
    KeywordFamily.MIRRORING: (
        "connected deeply", "shared emotions", "mirrored", "felt their", "resonated",
        "could feel",
    ),
    KeywordFamily.DETACHMENT: (
        "numb", "disconnected", "shut down", "detached", "couldn't feel",
    ),
    KeywordFamily.EMPATHIC_DISTRESS: ("too much pain", "can't handle their suffering"),
    KeywordFamily.DISTRESS_MANAGEMENT: ("stepped back", "took care of myself"),
    KeywordFamily.META_AWARENESS: (
        "notice that i", "realize i'm", "aware of my", "observing my",
    ),
    KeywordFamily.POST_TRAUMATIC_GROWTH: (
        "stronger because", "learned from", "grateful for the lesson", "helped me grow",
    ),
    KeywordFamily.MEANING_MAKING: (
        "meaning", "purpose", "why this happened", "makes sense",
    ),
    KeywordFamily.REFRAMING: ("perspective", "reframe", "silver lining"),
    KeywordFamily.COMPASSION_FATIGUE: ("tired", "exhausted", "burned out"),
    KeywordFamily.CELEBRATION: ("proud", "celebrate", "celebration"),
    KeywordFamily.EMPATHIC_ACCURACY: ("understood", "accurate", "right"),
    KeywordFamily.EMPATHIC_CONCERN: ("worried", "concerned", "care"),
    KeywordFamily.PERSPECTIVE_TAKING: (
        "their perspective", "see their side", "understand them",
    ),
    KeywordFamily.AFFECTIVE_PERSPECTIVE: ("felt with", "emotional connection"),
    KeywordFamily.FLEXIBILITY: ("adapt", "adjust"),
    KeywordFamily.CALIBRATION: ("balance", "appropriate"),
    KeywordFamily.EMPATHIC_MEMORY: ("remember", "recall"),
    KeywordFamily.CULTURAL: ("culture", "tradition", "background"),
    KeywordFamily.SOCIAL_AWARENESS: ("others", "people", "social"),
    KeywordFamily.RELATIONSHIP: ("relationship", "friend", "family"),
    KeywordFamily.SELF_COMPASSION: ("kind to myself", "self-compassion", "forgive myself"),
    KeywordFamily.COMPASSION_FOR_OTHERS: ("compassion", "empathy", "understanding"),
    KeywordFamily.EMPATHY: ("empathy", "understand", "feel for"),
    KeywordFamily.HUMAN_CONNECTION: ("connection", "bond", "close"),
    KeywordFamily.DIGNITY: ("dignity", "respect", "worthy"),
    KeywordFamily.PURPOSE: ("purpose", "meaning", "direction"),
    KeywordFamily.SPIRITUAL: ("spiritual", "faith", "transcendent"),
    KeywordFamily.NARRATIVE: ("story", "journey", "path"),
    KeywordFamily.MEANINGFULNESS: ("meaning", "purpose", "significant"),
    KeywordFamily.MICRO_QUALITY: ("quality", "meaningful", "deep"),
    KeywordFamily.WISDOM_MARKER: (
        "learned", "realized", "understand now", "wisdom", "insight",
    ),
    KeywordFamily.WISDOM_ACTION: (
        "can", "will", "should", "need to", "must", "always", "never",
    ),
    KeywordFamily.WISDOM_INTENSITY: (
        "life-changing", "transformed", "completely", "totally", "fundamental",
    ),
    KeywordFamily.CATEGORY_RELATIONAL: ("relationship", "people", "connect"),
    KeywordFamily.CATEGORY_EMOTIONAL: ("feel", "emotion", "heart"),
    KeywordFamily.CATEGORY_SPIRITUAL: ("meaning", "purpose", "spiritual"),
    KeywordFamily.CATEGORY_SELF_KNOWLEDGE: ("myself", "i am", "identity"),
    KeywordFamily.SPIRITUAL_WISDOM: (
        "meaning", "purpose", "transcend", "transcendent", "faith", "spiritual",
        "bigger than", "grateful",
    ),
    KeywordFamily.RELATIONAL_WISDOM: (
        "relationship", "friend", "family", "support", "listened", "helped", "connection",
    ),
    KeywordFamily.INTROSPECTION: (
        "i feel", "i notice", "i realized", "i understand", "i learned", "aware",
        "noticing",
    ),
    KeywordFamily.INSIGHT_GROWTH: (
        "learned", "realized", "understand", "insight", "growth",
    ),
    KeywordFamily.WISDOM_APPLICATION: (
        "applied", "use", "used", "practice", "practiced", "implemented", "shared",
    ),
    KeywordFamily.WISDOM_SHARING: (
        "told", "shared", "explained", "helped someone", "wrote about",
    ),
    KeywordFamily.INTEGRATION_INSIGHT: ("learned", "realized", "understand", "insight"),
    KeywordFamily.INTEGRATION_APPLY: ("applied", "use", "practice", "implemented"),
}


class TextScorer(ABC):
    """
    Capability for scoring free text against a keyword family.

    score_text() returns a match strength in [0, 1]. Subclasses may back this
    with anything from substring matching to a classifier.
    """

    @abstractmethod
    def score_text(self, text: str, family: KeywordFamily) -> float:
        """Match strength of text for family, in [0, 1]."""


class KeywordTextScorer(TextScorer):
    """Default strategy: share of the family's phrases found in the text."""

    def __init__(self, families: Optional[dict[KeywordFamily, tuple[str, ...]]] = None):
        self.families = families or KEYWORD_FAMILIES

    def score_text(self, text: str, family: KeywordFamily) -> float:
        if not text:
            return 0.0
        keywords = self.families.get(family, ())
        if not keywords:
            return 0.0
        normalized = text.lower()
        hits = sum(1 for keyword in keywords if keyword in normalized)
        return hits / len(keywords)
