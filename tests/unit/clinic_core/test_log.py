"""Tests for structured logging setup."""

import logging
from collections.abc import Iterator

import pytest
import structlog

from clinic_core.config import LoggingConfig
from clinic_core.log import configure_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.mark.parametrize(
    "fmt,renderer",
    [("json", structlog.processors.JSONRenderer), ("console", structlog.dev.ConsoleRenderer)],
)
def test_renderer_follows_format(fmt: str, renderer: type) -> None:
    configure_logging(LoggingConfig(format=fmt))

    processors = structlog.get_config()["processors"]

    assert isinstance(processors[-1], renderer)
    assert structlog.stdlib.filter_by_level in processors


def test_level_is_applied_to_root_logger() -> None:
    configure_logging(LoggingConfig(level="WARNING"))

    assert logging.getLogger().level == logging.WARNING


def test_defaults_to_json_info() -> None:
    configure_logging()

    assert logging.getLogger().level == logging.INFO
    assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
