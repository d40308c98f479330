# athlete_intake/core/logging_config.py
import logging
import sys

import structlog

from athlete_intake.core.settings import settings


def setup_logging() -> None:
    """
    Configure structlog + standard logging.
    Logs go to stdout as JSON (console renderer when LOG_JSON=false).
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.LOG_JSON
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Global logger, importable everywhere
logger = structlog.get_logger("athlete_intake")
