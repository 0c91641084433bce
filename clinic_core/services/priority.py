"""
Priority tiers and operator worklists built on attached scores.

Tiers partition [0, 100] into five bands, lower bound inclusive:
cold [0, 20), cool [20, 40), neutral [40, 60), warm [60, 80), hot [80, 100].
"""

from collections.abc import Sequence
from datetime import datetime, timedelta
from enum import Enum
from typing import Literal

import structlog
from pydantic import BaseModel

from clinic_core.domain.models import Patient, PatientStatus
from clinic_core.services.clock import elapsed

logger = structlog.get_logger(__name__)

Language = Literal["es", "en"]

HIGH_PRIORITY_THRESHOLD = 60
ATTENTION_THRESHOLD = 40
ATTENTION_MAX_AGE = timedelta(days=7)
CLOSED_STATUSES = frozenset({PatientStatus.CLOSED, PatientStatus.LOST})


class PriorityTier(str, Enum):
    COLD = "cold"
    COOL = "cool"
    NEUTRAL = "neutral"
    WARM = "warm"
    HOT = "hot"


# Lower bounds, highest first
TIER_FLOORS: tuple[tuple[int, PriorityTier], ...] = (
    (80, PriorityTier.HOT),
    (60, PriorityTier.WARM),
    (40, PriorityTier.NEUTRAL),
    (20, PriorityTier.COOL),
)

TIER_LABELS: dict[Language, dict[PriorityTier, str]] = {
    "en": {
        PriorityTier.HOT: "Hot",
        PriorityTier.WARM: "Warm",
        PriorityTier.NEUTRAL: "Neutral",
        PriorityTier.COOL: "Cool",
        PriorityTier.COLD: "Cold",
    },
    "es": {
        PriorityTier.HOT: "Caliente",
        PriorityTier.WARM: "Tibio",
        PriorityTier.NEUTRAL: "Neutral",
        PriorityTier.COOL: "Frío",
        PriorityTier.COLD: "Muy Frío",
    },
}


class ScoreDescription(BaseModel):
    """Display-ready classification of a total."""

    total: int
    tier: PriorityTier
    label: str


def classify(total: float) -> PriorityTier:
    for floor, tier in TIER_FLOORS:
        if total >= floor:
            return tier
    return PriorityTier.COLD


def tier_label(tier: PriorityTier, language: Language = "en") -> str:
    return TIER_LABELS[language][tier]


def describe_score(total: int, language: Language = "en") -> ScoreDescription:
    tier = classify(total)
    return ScoreDescription(total=total, tier=tier, label=tier_label(tier, language))


class PriorityClassifier:
    """
    Ranks and filters scored patients for operator attention.

    Unscored patients count as total 0. Every method returns a new list
    and leaves the input untouched.
    """

    def __init__(self) -> None:
        self.logger = logger.bind(component="priority_classifier")

    @staticmethod
    def classify(total: float) -> PriorityTier:
        return classify(total)

    def sort_by_score_descending(self, patients: Sequence[Patient]) -> list[Patient]:
        """Highest total first. The sort is stable: equal totals keep their input order."""
        ranked = sorted(patients, key=lambda p: p.score_total, reverse=True)
        self.logger.debug("patients_ranked", count=len(ranked))
        return ranked

    def high_priority(self, patients: Sequence[Patient]) -> list[Patient]:
        selected = [p for p in patients if p.score_total >= HIGH_PRIORITY_THRESHOLD]
        self.logger.info("high_priority_selected", selected=len(selected), total=len(patients))
        return selected

    def needs_attention(self, patients: Sequence[Patient], now: datetime) -> list[Patient]:
        """
        Low scorers that are still fresh and still open in the funnel.

        A low score alone is not urgent: the lead must be at most seven days
        old and not closed or lost.
        """
        selected = [
            p
            for p in patients
            if p.score_total < ATTENTION_THRESHOLD
            and elapsed(p.created_at, now) <= ATTENTION_MAX_AGE
            and p.status not in CLOSED_STATUSES
        ]
        self.logger.info("needs_attention_selected", selected=len(selected), total=len(patients))
        return selected
