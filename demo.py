"""
End-to-end walkthrough of the engagement pipeline.

This script:
1. Loads and validates configuration
2. Validates a sample snapshot as the records layer would hand it over
3. Scores and ranks every patient
4. Lists the patients needing attention
5. Collects the reminders due right now and builds notifier payloads

Run with: uv run python demo.py
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from clinic_core.config import get_config, print_config_summary, validate_config
from clinic_core.log import configure_logging
from clinic_core.services import (
    PriorityClassifier,
    ReminderWindowEvaluator,
    ScoringEngine,
    build_reminder_payload,
    describe_score,
    load_snapshot,
)

console = Console()


def sample_payload(now: datetime) -> dict[str, Any]:
    """Snapshot in the camelCase shape the records layer emits."""

    def ago(**kwargs: float) -> str:
        return (now - timedelta(**kwargs)).isoformat()

    def ahead(**kwargs: float) -> str:
        return (now + timedelta(**kwargs)).isoformat()

    return {
        "treatments": [
            {"id": "t-implant", "name": "Dental implant", "price": 5200},
            {"id": "t-ortho", "name": "Invisible aligners", "price": 2000},
            {"id": "t-clean", "name": "Cleaning", "price": 90},
        ],
        "patients": [
            {
                "id": "p-1",
                "name": "Lucía Gómez",
                "email": "lucia@example.com",
                "phone": "+34 600 000 001",
                "identificationNumber": "X1234567",
                "source": "referral",
                "status": "scheduled",
                "treatments": ["Dental implant"],
                "notes": [{"id": "n-1", "content": "Asked about financing"}],
                "followUps": [
                    {
                        "id": "f-1",
                        "leadId": "p-1",
                        "type": "appointment",
                        "scheduledAt": ago(days=2),
                        "completed": True,
                        "attendanceStatus": "attended",
                    },
                    {
                        "id": "f-2",
                        "leadId": "p-1",
                        "type": "meeting",
                        "scheduledAt": ahead(minutes=8),
                        "completed": False,
                        "meetLink": "https://meet.example.com/abc",
                    },
                ],
                "totalPaid": 300,
                "createdAt": ago(days=3),
                "lastContactAt": ago(hours=5),
            },
            {
                "id": "p-2",
                "name": "Marco Rossi",
                "phone": "+34 600 000 002",
                "source": "instagram",
                "status": "new",
                "treatments": [],
                "createdAt": ago(days=2),
            },
            {
                "id": "p-3",
                "name": "Ana Torres",
                "email": "ana@example.com",
                "source": "website",
                "status": "lost",
                "treatments": ["t-clean"],
                "followUps": [
                    {
                        "id": "f-3",
                        "leadId": "p-3",
                        "type": "appointment",
                        "scheduledAt": ago(days=40),
                        "completed": False,
                        "attendanceStatus": "noshow",
                    }
                ],
                "createdAt": ago(days=60),
                "updatedAt": ago(days=45),
            },
        ],
    }


def run_pipeline() -> bool:
    config = get_config()
    now = datetime.now(UTC)

    console.print(Panel("📥 Loading snapshot", style="blue"))
    result = load_snapshot(sample_payload(now))
    if result.is_err():
        console.print(f"❌ Snapshot rejected: {result.unwrap_err()}", style="red")
        return False
    snapshot = result.unwrap()
    console.print(
        f"✅ {len(snapshot.patients)} patients, {len(snapshot.treatments)} treatments",
        style="green",
    )

    console.print(Panel("📊 Scoring and ranking", style="blue"))
    engine = ScoringEngine()
    classifier = PriorityClassifier()
    scored = engine.score_patients(snapshot.patients, snapshot.treatments, now)
    ranked = classifier.sort_by_score_descending(scored)

    table = Table(title="Patient Worklist")
    for column in ("Patient", "Total", "Tier", "Engagement", "Value", "Timing", "Fit"):
        table.add_column(column, style="cyan" if column == "Patient" else "white")
    for patient in ranked:
        score = patient.score
        if score is None:
            continue
        description = describe_score(score.total, config.clinic.language)
        table.add_row(
            patient.name,
            str(score.total),
            description.label,
            str(score.engagement),
            str(score.value),
            str(score.timing),
            str(score.fit),
        )
    console.print(table)

    attention = classifier.needs_attention(scored, now)
    console.print(
        f"🔎 Needs attention: {', '.join(p.name for p in attention) or 'nobody'}",
        style="yellow",
    )

    console.print(Panel("⏰ Reminders due now", style="blue"))
    evaluator = ReminderWindowEvaluator()
    due = evaluator.collect_due_follow_ups(
        snapshot.patients, now, allowed_types=config.reminders.allowed_types
    )
    if not due:
        console.print("No reminders due", style="green")
    for item in due:
        payload = build_reminder_payload(item, config.clinic)
        console.print(
            f"📨 {payload.patient_name} via {payload.channel.value} ({payload.address}) "
            f"for {payload.follow_up_type.value} at {payload.scheduled_at:%H:%M}"
        )
    return True


if __name__ == "__main__":
    validate_config()
    print_config_summary()
    configure_logging(get_config().logging)
    try:
        ok = run_pipeline()
    except KeyboardInterrupt:
        console.print("\n👋 Stopped by user", style="yellow")
    else:
        console.print("🎉 Pipeline completed" if ok else "⚠️  Pipeline failed", style="green" if ok else "red")
