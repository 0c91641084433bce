"""
Tests for tier classification and operator worklists.
"""

from datetime import timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from clinic_core.domain.models import PatientStatus
from clinic_core.services.priority import (
    PriorityClassifier,
    PriorityTier,
    classify,
    describe_score,
    tier_label,
)

TIER_BANDS = {
    PriorityTier.COLD: range(0, 20),
    PriorityTier.COOL: range(20, 40),
    PriorityTier.NEUTRAL: range(40, 60),
    PriorityTier.WARM: range(60, 80),
    PriorityTier.HOT: range(80, 101),
}


@pytest.fixture
def classifier() -> PriorityClassifier:
    return PriorityClassifier()


class TestClassify:
    @pytest.mark.parametrize(
        "total,tier",
        [
            (0, PriorityTier.COLD),
            (19, PriorityTier.COLD),
            (20, PriorityTier.COOL),
            (39, PriorityTier.COOL),
            (40, PriorityTier.NEUTRAL),
            (59, PriorityTier.NEUTRAL),
            (60, PriorityTier.WARM),
            (79, PriorityTier.WARM),
            (80, PriorityTier.HOT),
            (100, PriorityTier.HOT),
        ],
    )
    def test_band_boundaries(self, total: int, tier: PriorityTier) -> None:
        assert classify(total) is tier
        assert PriorityClassifier.classify(total) is tier

    @given(total=st.integers(min_value=0, max_value=100))
    def test_every_total_falls_in_exactly_one_band(self, total: int) -> None:
        containing = [tier for tier, band in TIER_BANDS.items() if total in band]

        assert containing == [classify(total)]

    def test_labels_in_both_languages(self) -> None:
        assert tier_label(PriorityTier.HOT) == "Hot"
        assert tier_label(PriorityTier.COLD, "es") == "Muy Frío"
        assert tier_label(PriorityTier.COOL, "es") == "Frío"
        assert tier_label(PriorityTier.WARM, "es") == "Tibio"

    def test_describe_score(self) -> None:
        description = describe_score(85, "es")

        assert description.tier is PriorityTier.HOT
        assert description.label == "Caliente"
        assert description.total == 85


class TestSortByScore:
    def test_highest_total_first(self, classifier: PriorityClassifier, with_total) -> None:
        patients = [with_total(30, id="a"), with_total(90, id="b"), with_total(55, id="c")]

        ranked = classifier.sort_by_score_descending(patients)

        assert [p.id for p in ranked] == ["b", "c", "a"]

    def test_equal_totals_keep_input_order(self, classifier: PriorityClassifier, with_total) -> None:
        patients = [
            with_total(50, id="first"),
            with_total(70, id="top"),
            with_total(50, id="second"),
            with_total(50, id="third"),
        ]

        ranked = classifier.sort_by_score_descending(patients)

        assert [p.id for p in ranked] == ["top", "first", "second", "third"]

    def test_unscored_patients_rank_as_zero(
        self, classifier: PriorityClassifier, with_total, make_patient
    ) -> None:
        patients = [make_patient(id="unscored"), with_total(0, id="zero"), with_total(10, id="ten")]

        ranked = classifier.sort_by_score_descending(patients)

        assert [p.id for p in ranked] == ["ten", "unscored", "zero"]

    def test_input_is_not_reordered(self, classifier: PriorityClassifier, with_total) -> None:
        patients = [with_total(10, id="a"), with_total(20, id="b")]
        classifier.sort_by_score_descending(patients)
        assert [p.id for p in patients] == ["a", "b"]

    def test_empty_list(self, classifier: PriorityClassifier) -> None:
        assert classifier.sort_by_score_descending([]) == []


class TestHighPriority:
    def test_threshold_is_inclusive_at_60(self, classifier: PriorityClassifier, with_total) -> None:
        patients = [with_total(59, id="a"), with_total(60, id="b"), with_total(100, id="c")]

        assert [p.id for p in classifier.high_priority(patients)] == ["b", "c"]

    def test_unscored_is_not_high_priority(self, classifier: PriorityClassifier, make_patient) -> None:
        assert classifier.high_priority([make_patient()]) == []


class TestNeedsAttention:
    def test_fresh_open_low_scorer_is_included(
        self, classifier: PriorityClassifier, with_total, now
    ) -> None:
        patient = with_total(10, status=PatientStatus.NEW, created_at=now - timedelta(days=2))

        assert classifier.needs_attention([patient], now) == [patient]

    @pytest.mark.parametrize("status", [PatientStatus.LOST, PatientStatus.CLOSED])
    def test_resolved_leads_are_excluded(
        self, classifier: PriorityClassifier, with_total, now, status: PatientStatus
    ) -> None:
        patient = with_total(10, status=status, created_at=now - timedelta(days=2))

        assert classifier.needs_attention([patient], now) == []

    def test_age_limit_is_seven_days_inclusive(
        self, classifier: PriorityClassifier, with_total, now
    ) -> None:
        at_limit = with_total(10, id="at-limit", created_at=now - timedelta(days=7))
        past_limit = with_total(10, id="past", created_at=now - timedelta(days=7, seconds=1))

        selected = classifier.needs_attention([at_limit, past_limit], now)

        assert [p.id for p in selected] == ["at-limit"]

    def test_score_must_be_below_40(self, classifier: PriorityClassifier, with_total, now) -> None:
        patients = [
            with_total(39, id="low", created_at=now - timedelta(days=1)),
            with_total(40, id="neutral", created_at=now - timedelta(days=1)),
        ]

        assert [p.id for p in classifier.needs_attention(patients, now)] == ["low"]

    @pytest.mark.parametrize(
        "status", [PatientStatus.NEW, PatientStatus.CONTACTED, PatientStatus.SCHEDULED]
    )
    def test_open_statuses_are_included(
        self, classifier: PriorityClassifier, make_patient, now, status: PatientStatus
    ) -> None:
        patient = make_patient(status=status, created_at=now - timedelta(hours=5))

        assert classifier.needs_attention([patient], now) == [patient]
