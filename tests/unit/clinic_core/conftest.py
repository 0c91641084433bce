"""Shared builders for the clinic core tests."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from clinic_core.domain.models import FollowUp, FollowUpType, Patient, Score

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

PatientFactory = Callable[..., Patient]
FollowUpFactory = Callable[..., FollowUp]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_follow_up() -> FollowUpFactory:
    counter = iter(range(1, 10_000))

    def _make(**overrides: Any) -> FollowUp:
        fields: dict[str, Any] = {
            "id": f"f-{next(counter)}",
            "patient_id": "p-1",
            "type": FollowUpType.CALL,
            "scheduled_at": NOW - timedelta(days=30),
            "completed": False,
        }
        fields.update(overrides)
        return FollowUp(**fields)

    return _make


@pytest.fixture
def make_patient() -> PatientFactory:
    """Patient with nothing that scores: 20 days old, no profile data, unknown source."""

    def _make(**overrides: Any) -> Patient:
        fields: dict[str, Any] = {
            "id": "p-1",
            "name": "Test Patient",
            "created_at": NOW - timedelta(days=20),
        }
        fields.update(overrides)
        return Patient(**fields)

    return _make


@pytest.fixture
def with_total(make_patient: PatientFactory) -> Callable[..., Patient]:
    """Patient carrying an already computed score with the given total."""

    def _make(total: int, **overrides: Any) -> Patient:
        score = Score(engagement=0, value=0, timing=0, fit=0, total=total, calculated_at=NOW)
        return make_patient(**overrides).with_score(score)

    return _make
