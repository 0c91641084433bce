"""
Reminder window evaluation for scheduled follow-ups.

A reminder is due inside the half-open window
[scheduled_at - 10min, scheduled_at - 5min). The caller polls this every
minute or two; the 5 minute width keeps a single poll inside the window
without any dedup state here. `reminder_sent` is only read: the external
notifier sets it after a confirmed send.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

import structlog
from pydantic import BaseModel, ConfigDict

from clinic_core.config import DEFAULT_REMINDER_TYPES, ClinicConfig
from clinic_core.domain.models import ContactChannel, FollowUp, FollowUpType, Patient
from clinic_core.services.clock import as_utc

logger = structlog.get_logger(__name__)

WINDOW_OPENS_BEFORE = timedelta(minutes=10)
WINDOW_CLOSES_BEFORE = timedelta(minutes=5)

CHANNEL_FOR_TYPE: dict[FollowUpType, ContactChannel] = {
    FollowUpType.MEETING: ContactChannel.EMAIL,
    FollowUpType.APPOINTMENT: ContactChannel.EMAIL,
    FollowUpType.EMAIL: ContactChannel.EMAIL,
    FollowUpType.CALL: ContactChannel.PHONE,
    FollowUpType.MESSAGE: ContactChannel.PHONE,
    FollowUpType.WHATSAPP: ContactChannel.PHONE,
}


class DueReminder(BaseModel):
    """A follow-up whose reminder should be handed to the notifier now."""

    model_config = ConfigDict(frozen=True)

    patient: Patient
    follow_up: FollowUp

    @property
    def channel(self) -> ContactChannel:
        return CHANNEL_FOR_TYPE[self.follow_up.type]


class ReminderPayload(BaseModel):
    """Everything the notifier needs to send one reminder."""

    model_config = ConfigDict(frozen=True)

    patient_id: str
    patient_name: str
    channel: ContactChannel
    address: str
    follow_up_id: str
    follow_up_type: FollowUpType
    scheduled_at: datetime
    treatment_name: str | None = None
    meet_link: str | None = None
    clinic_name: str
    clinic_address: str | None = None
    clinic_phone: str | None = None
    language: str


def is_due(scheduled_at: datetime, now: datetime) -> bool:
    scheduled_at = as_utc(scheduled_at)
    now = as_utc(now)
    return scheduled_at - WINDOW_OPENS_BEFORE <= now < scheduled_at - WINDOW_CLOSES_BEFORE


class ReminderWindowEvaluator:
    """Selects follow-ups whose one-time reminder is due at a given instant."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="reminder_window_evaluator")

    @staticmethod
    def is_due(scheduled_at: datetime, now: datetime) -> bool:
        return is_due(scheduled_at, now)

    @staticmethod
    def is_eligible(
        patient: Patient, follow_up: FollowUp, allowed_types: Iterable[FollowUpType], now: datetime
    ) -> bool:
        if follow_up.completed or follow_up.reminder_sent is True:
            return False
        if follow_up.type not in allowed_types:
            return False
        if not patient.has_channel(CHANNEL_FOR_TYPE[follow_up.type]):
            return False
        return is_due(follow_up.scheduled_at, now)

    def collect_due_follow_ups(
        self,
        patients: Sequence[Patient],
        now: datetime,
        *,
        allowed_types: Iterable[FollowUpType | str] | None = None,
    ) -> list[DueReminder]:
        """
        Collect (patient, follow-up) pairs due for a reminder at `now`.

        Args:
            patients: Snapshot of patients with their follow-ups
            now: Evaluation instant
            allowed_types: Follow-up types that get a reminder, as members or their
                values. Defaults to meetings and appointments

        Returns:
            list[DueReminder]: Due pairs in snapshot order.
        """
        if allowed_types is None:
            allowed_types = DEFAULT_REMINDER_TYPES
        allowed = frozenset(FollowUpType(t) for t in allowed_types)

        due = [
            DueReminder(patient=patient, follow_up=follow_up)
            for patient in patients
            for follow_up in patient.follow_ups
            if self.is_eligible(patient, follow_up, allowed, now)
        ]
        self.logger.info(
            "due_reminders_collected",
            due=len(due),
            patients=len(patients),
            allowed_types=sorted(t.value for t in allowed),
        )
        return due


def build_reminder_payload(due: DueReminder, clinic: ClinicConfig) -> ReminderPayload:
    """Assemble the notifier hand-off for a due reminder."""
    patient, follow_up = due.patient, due.follow_up
    channel = due.channel
    address = patient.email if channel is ContactChannel.EMAIL else patient.phone

    return ReminderPayload(
        patient_id=patient.id,
        patient_name=patient.name,
        channel=channel,
        address=address or "",
        follow_up_id=follow_up.id,
        follow_up_type=follow_up.type,
        scheduled_at=follow_up.scheduled_at,
        treatment_name=follow_up.treatment_name,
        meet_link=follow_up.meet_link if follow_up.type is FollowUpType.MEETING else None,
        clinic_name=clinic.name,
        clinic_address=clinic.address if follow_up.type is FollowUpType.APPOINTMENT else None,
        clinic_phone=clinic.phone,
        language=clinic.language,
    )
