"""
Core services for the application.

This package contains the scoring, prioritization and reminder rules,
plus the snapshot boundary they read from.
"""

from .priority import PriorityClassifier, PriorityTier, classify, describe_score, tier_label
from .reminders import (
    DueReminder,
    ReminderPayload,
    ReminderWindowEvaluator,
    build_reminder_payload,
    is_due,
)
from .scoring import ScoringEngine
from .snapshot import Result, load_snapshot

__all__ = [
    "ScoringEngine",
    "PriorityClassifier",
    "PriorityTier",
    "classify",
    "describe_score",
    "tier_label",
    "ReminderWindowEvaluator",
    "DueReminder",
    "ReminderPayload",
    "build_reminder_payload",
    "is_due",
    "Result",
    "load_snapshot",
]
