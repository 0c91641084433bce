"""
Boundary between the records layer and the scoring rules.

Raw payloads are validated once here. Rejected input is an expected outcome,
so it travels back through `Result` instead of an exception.
"""

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

import structlog
from pydantic import ValidationError

from clinic_core.domain.models import ClinicSnapshot

logger = structlog.get_logger(__name__)

ValueT = TypeVar("ValueT")
ErrorT = TypeVar("ErrorT", bound=BaseException)


class Result(Generic[ValueT, ErrorT]):
    """
    Explicit error handling without exceptions for expected failures.

    Why: Makes error paths visible in type system, forces handling decisions.
    When to use: When failure is expected business logic, not exceptional.
    """

    def __init__(self, value: ValueT | None = None, error: ErrorT | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is None and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = value
        self._error: ErrorT | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT, ErrorT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: ErrorT) -> "Result[ValueT, ErrorT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._error is None else default  # type: ignore

    def unwrap_err(self) -> ErrorT:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error


def load_snapshot(payload: Mapping[str, Any]) -> Result[ClinicSnapshot, ValidationError]:
    """
    Validate a raw snapshot payload from the records layer.

    Args:
        payload: Mapping with `patients` and `treatments` lists, camelCase or snake_case keys

    Returns:
        Result[ClinicSnapshot, ValidationError]: The snapshot, or the validation error.
    """
    try:
        snapshot = ClinicSnapshot.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            "snapshot_rejected",
            error_count=e.error_count(),
            fields=[".".join(map(str, err["loc"])) for err in e.errors()[:5]],
        )
        return Result.err(e)

    logger.info(
        "snapshot_loaded",
        patients=len(snapshot.patients),
        treatments=len(snapshot.treatments),
    )
    return Result.ok(snapshot)
