"""
Domain models for patient engagement scoring.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation and accept both snake_case names and the
camelCase keys produced by the records layer.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _assume_utc(value: datetime) -> datetime:
    """Naive timestamps from the records layer are stored in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_assume_utc)]

_RECORD_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class LeadSource(str, Enum):
    """Acquisition channel a patient came through."""

    INSTAGRAM = "instagram"
    WHATSAPP = "whatsapp"
    PHONE = "phone"
    WEBSITE = "website"
    REFERRAL = "referral"
    OTHER = "other"


class PatientStatus(str, Enum):
    """Funnel stage. Opaque to the scoring rules except for the terminal stages."""

    NEW = "new"
    CONTACTED = "contacted"
    SCHEDULED = "scheduled"
    CLOSED = "closed"
    LOST = "lost"


class FollowUpType(str, Enum):
    CALL = "call"
    MESSAGE = "message"
    EMAIL = "email"
    MEETING = "meeting"
    APPOINTMENT = "appointment"
    WHATSAPP = "whatsapp"


class AttendanceStatus(str, Enum):
    """Attendance of an appointment. Only attended and no-show affect the score."""

    PENDING = "pending"
    ATTENDED = "attended"
    NO_SHOW = "noshow"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


def _normalize_attendance(value: object) -> object:
    """The records layer writes no-show both as `noshow` and `no-show`."""
    if value == "no-show":
        return AttendanceStatus.NO_SHOW
    return value


Attendance = Annotated[AttendanceStatus, BeforeValidator(_normalize_attendance)]


class ContactChannel(str, Enum):
    """How the external notifier can reach a patient."""

    EMAIL = "email"
    PHONE = "phone"


class Treatment(BaseModel):
    """Catalog entry. Only used for price lookups."""

    model_config = _RECORD_CONFIG

    id: str
    name: str
    price: float = Field(ge=0.0)
    category: str | None = None


class Note(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    content: str = ""
    created_at: UtcDatetime | None = None


class FollowUp(BaseModel):
    """Scheduled contact with a patient."""

    model_config = _RECORD_CONFIG

    id: str
    patient_id: str = Field(validation_alias=AliasChoices("patient_id", "patientId", "leadId"))
    type: FollowUpType
    scheduled_at: UtcDatetime
    completed: bool = False
    completed_at: UtcDatetime | None = None
    attendance_status: Attendance | None = None

    # Set by the external notifier after a confirmed send, never by this package
    reminder_sent: bool | None = None

    treatment_name: str | None = None
    meet_link: str | None = None


class Score(BaseModel):
    """Four bounded sub-scores and their clamped total."""

    model_config = ConfigDict(frozen=True)

    engagement: int = Field(ge=0, le=30)
    value: int = Field(ge=0, le=25)
    timing: int = Field(ge=0, le=25)
    fit: int = Field(ge=0, le=20)
    total: int = Field(ge=0, le=100)
    calculated_at: datetime


class Patient(BaseModel):
    """
    A patient (lead) record as read from the records layer.

    `score` is derived state: it is attached by the scoring engine and can
    always be recomputed from the rest of the record and the treatment catalog.
    """

    model_config = _RECORD_CONFIG

    id: str
    name: str = ""
    email: str | None = None
    phone: str | None = None
    identification_number: str | None = None
    instagram: str | None = None
    source: LeadSource = LeadSource.OTHER
    status: PatientStatus = PatientStatus.NEW
    treatments_of_interest: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "treatments_of_interest", "treatmentsOfInterest", "treatments"
        ),
    )
    notes: list[Note] = Field(default_factory=list)
    follow_ups: list[FollowUp] = Field(default_factory=list)
    total_paid: float | None = Field(default=None, ge=0.0)
    created_at: UtcDatetime
    updated_at: UtcDatetime | None = None
    last_contact_at: UtcDatetime | None = None
    score: Score | None = None

    @property
    def has_email(self) -> bool:
        return bool(self.email)

    @property
    def has_phone(self) -> bool:
        return bool(self.phone)

    @property
    def has_identification(self) -> bool:
        return bool(self.identification_number)

    @property
    def has_instagram(self) -> bool:
        return bool(self.instagram)

    @property
    def last_activity_at(self) -> datetime:
        """Most relevant activity timestamp: last contact, then update, then creation."""
        return self.last_contact_at or self.updated_at or self.created_at

    @property
    def score_total(self) -> int:
        """Attached total, or 0 when the patient has not been scored."""
        return self.score.total if self.score is not None else 0

    def has_channel(self, channel: ContactChannel) -> bool:
        if channel is ContactChannel.EMAIL:
            return self.has_email
        return self.has_phone

    def with_score(self, score: Score) -> "Patient":
        """Return a copy of this record with the given score attached."""
        return self.model_copy(update={"score": score})


class ClinicSnapshot(BaseModel):
    """Read-only view of the clinic state handed over by the records layer."""

    model_config = _RECORD_CONFIG

    patients: list[Patient] = Field(default_factory=list)
    treatments: list[Treatment] = Field(default_factory=list)
