"""
Patient engagement scoring.

The score is a pure function of (patient, treatment catalog, now). Each of the
four dimensions sums its individually capped contributions and is then clamped
to its own range; the total is clamped again to [0, 100].

Dimension caps:
- engagement: 30 (follow-ups completed, attendance, notes)
- value: 25 (price of the treatments of interest, payments)
- timing: 25 (lead age, idle time, upcoming follow-ups)
- fit: 20 (profile completeness, acquisition channel)
"""

from collections.abc import Sequence
from datetime import datetime

import structlog

from clinic_core.domain.models import (
    AttendanceStatus,
    FollowUpType,
    LeadSource,
    Patient,
    Score,
    Treatment,
)
from clinic_core.services.clock import as_utc, whole_days_between

logger = structlog.get_logger(__name__)

ENGAGEMENT_MAX = 30
VALUE_MAX = 25
TIMING_MAX = 25
FIT_MAX = 20
TOTAL_MAX = 100

# Highest threshold first
PRICE_TIERS: tuple[tuple[float, int], ...] = (
    (5000, 25),
    (2000, 20),
    (1000, 15),
    (500, 10),
)
MIN_PRICE_POINTS = 5
PAYMENT_BONUS = 10

AGE_POINTS: tuple[tuple[int, int], ...] = ((1, 15), (3, 12), (7, 8), (14, 5))
IDLE_POINTS: tuple[tuple[int, int], ...] = ((1, 10), (3, 8), (7, 5))
STALE_IDLE_DAYS = 30
STALE_PENALTY = -10
UPCOMING_BONUS = 5

SOURCE_POINTS: dict[LeadSource, int] = {
    LeadSource.REFERRAL: 5,
    LeadSource.INSTAGRAM: 3,
    LeadSource.WHATSAPP: 3,
    LeadSource.WEBSITE: 2,
}


def _clamp(value: float, upper: float, lower: float = 0) -> float:
    return max(lower, min(upper, value))


def _banded(days: int, bands: tuple[tuple[int, int], ...]) -> int | None:
    for limit, points in bands:
        if days <= limit:
            return points
    return None


class ScoringEngine:
    """
    Stateless scorer for patients.

    Design principles:
    - Total: any well-formed patient gets a score, missing data scores lowest
    - Deterministic: `now` is always supplied by the caller
    - Read-only: patients are never mutated, scored copies are returned
    """

    def __init__(self) -> None:
        self.logger = logger.bind(component="scoring_engine")

    def score(self, patient: Patient, treatments: Sequence[Treatment], now: datetime) -> Score:
        now = as_utc(now)

        engagement = _clamp(self.engagement_points(patient), ENGAGEMENT_MAX)
        value = _clamp(self.value_points(patient, treatments), VALUE_MAX)
        timing = _clamp(self.timing_points(patient, now), TIMING_MAX)
        fit = _clamp(self.fit_points(patient), FIT_MAX)

        total = _clamp(round(engagement + value + timing + fit), TOTAL_MAX)

        score = Score(
            engagement=round(engagement),
            value=round(value),
            timing=round(timing),
            fit=round(fit),
            total=int(total),
            calculated_at=now,
        )
        self.logger.debug(
            "patient_scored",
            patient_id=patient.id,
            total=score.total,
            engagement=score.engagement,
            value=score.value,
            timing=score.timing,
            fit=score.fit,
        )
        return score

    def score_patients(
        self, patients: Sequence[Patient], treatments: Sequence[Treatment], now: datetime
    ) -> list[Patient]:
        """Score every patient and return copies with the score attached, in input order."""
        scored = [patient.with_score(self.score(patient, treatments, now)) for patient in patients]
        self.logger.info("patients_scored", count=len(scored), treatments=len(treatments))
        return scored

    @staticmethod
    def engagement_points(patient: Patient) -> int:
        """Unclamped engagement: completions, attendance, no-show penalty and notes."""
        follow_ups = patient.follow_ups

        completed = sum(1 for f in follow_ups if f.completed)
        attended = sum(
            1
            for f in follow_ups
            if f.type is FollowUpType.APPOINTMENT
            and f.attendance_status is AttendanceStatus.ATTENDED
        )
        no_shows = sum(
            1
            for f in follow_ups
            if f.type is FollowUpType.APPOINTMENT
            and f.attendance_status is AttendanceStatus.NO_SHOW
        )

        points = min(completed * 5, 15)
        points += min(attended * 10, 20)
        points -= min(no_shows * 10, 20)
        points += min(len(patient.notes) * 2, 10)
        return points

    @staticmethod
    def value_points(patient: Patient, treatments: Sequence[Treatment]) -> int:
        """Unclamped value: best matching treatment price tier plus payment bonus."""
        interests = set(patient.treatments_of_interest)
        prices = [t.price for t in treatments if t.name in interests or t.id in interests]

        points = 0
        if prices:
            top_price = max(prices)
            points += next(
                (tier for threshold, tier in PRICE_TIERS if top_price >= threshold),
                MIN_PRICE_POINTS,
            )

        # Strictly positive: a recorded zero is not a payment
        if patient.total_paid is not None and patient.total_paid > 0:
            points += PAYMENT_BONUS
        return points

    @staticmethod
    def timing_points(patient: Patient, now: datetime) -> int:
        """Unclamped timing: freshness, recent activity and upcoming follow-ups."""
        age_days = whole_days_between(patient.created_at, now)
        idle_days = whole_days_between(patient.last_activity_at, now)

        points = _banded(age_days, AGE_POINTS) or 0

        idle = _banded(idle_days, IDLE_POINTS)
        if idle is not None:
            points += idle
        elif idle_days > STALE_IDLE_DAYS:
            points += STALE_PENALTY
        # 8 to 30 idle days score nothing either way

        if any(not f.completed and as_utc(f.scheduled_at) > now for f in patient.follow_ups):
            points += UPCOMING_BONUS
        return points

    @staticmethod
    def fit_points(patient: Patient) -> int:
        """Unclamped fit: profile completeness and acquisition channel."""
        points = 0
        if patient.has_email:
            points += 3
        if patient.has_phone:
            points += 3
        if patient.has_identification:
            points += 4
        if patient.has_instagram:
            points += 2
        if patient.treatments_of_interest:
            points += 3
        points += SOURCE_POINTS.get(patient.source, 0)
        return points

