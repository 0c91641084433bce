"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Scoring thresholds are fixed rules, not settings
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from clinic_core.domain.models import FollowUpType

# Load environment variables from .env file
load_dotenv()

# Width of the reminder window; polling must be tighter than this to not skip it
REMINDER_WINDOW_SECONDS = 5 * 60

DEFAULT_REMINDER_TYPES = (FollowUpType.MEETING, FollowUpType.APPOINTMENT)


class ClinicConfig(BaseModel):
    """Clinic details handed to the reminder notifier."""

    name: str = Field(default="Clinic", min_length=1, description="Clinic display name")
    address: str | None = Field(default=None, description="Address for in-person visits")
    phone: str | None = Field(default=None, description="Contact phone shown to patients")
    language: Literal["es", "en"] = Field(default="es", description="Patient-facing language")


class ReminderConfig(BaseModel):
    """Reminder collection settings."""

    allowed_types: list[FollowUpType] = Field(
        default_factory=lambda: list(DEFAULT_REMINDER_TYPES),
        min_length=1,
        description="Follow-up types that get a reminder",
    )
    poll_interval_seconds: float = Field(
        default=60.0, gt=0.0, description="How often the caller evaluates the reminder window"
    )

    @field_validator("poll_interval_seconds")
    def poll_fits_window(cls, v):
        if v >= REMINDER_WINDOW_SECONDS:
            raise ValueError(
                f"poll interval must be shorter than the {REMINDER_WINDOW_SECONDS}s reminder window"
            )
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    clinic: ClinicConfig = Field(default_factory=ClinicConfig)
    reminders: ReminderConfig = Field(default_factory=ReminderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _language_to_literal(val: str) -> Literal["es", "en"]:
        return "en" if val.strip().lower().startswith("en") else "es"

    def _parse_types(val: str | None) -> list[FollowUpType]:
        if not val:
            return list(DEFAULT_REMINDER_TYPES)
        return [FollowUpType(item.strip().lower()) for item in val.split(",") if item.strip()]

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    clinic_config = ClinicConfig(
        name=os.getenv("CLINIC_NAME", "Clinic"),
        address=os.getenv("CLINIC_ADDRESS") or None,
        phone=os.getenv("CLINIC_PHONE") or None,
        language=_language_to_literal(os.getenv("CLINIC_LANGUAGE", "es")),
    )

    reminder_config = ReminderConfig(
        allowed_types=_parse_types(os.getenv("REMINDER_TYPES")),
        poll_interval_seconds=float(os.getenv("REMINDER_POLL_INTERVAL_SECONDS", "60.0")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        clinic=clinic_config,
        reminders=reminder_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"✅ Configuration loaded for {config.environment} environment")
        print(f"✅ Reminders enabled for: {', '.join(t.value for t in config.reminders.allowed_types)}")
    except Exception as e:
        print(f"❌ Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\n🔧 CONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\n🏥 CLINIC")
    print(f"Name: {config.clinic.name}")
    print(f"Language: {config.clinic.language}")

    print("\n⏰ REMINDERS")
    print(f"Types: {', '.join(t.value for t in config.reminders.allowed_types)}")
    print(f"Poll Interval: {config.reminders.poll_interval_seconds}s")


if __name__ == "__main__":
    validate_config()
    print_config_summary()
