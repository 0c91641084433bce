"""
Structured logging setup.

Library modules only call `structlog.get_logger(__name__)`; the entry point
calls `configure_logging` once so output format follows the loaded config.
"""

import logging
import sys

import structlog

from clinic_core.config import LoggingConfig


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Install the structlog processor chain and the stdlib handler behind it."""
    config = config or LoggingConfig()

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=config.level, force=True)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
