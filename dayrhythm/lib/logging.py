"""
Structured logging configuration for DayRhythm.

Configures structlog to work alongside stdlib logging so that both
`logging.getLogger()` and `structlog.get_logger()` produce consistent,
structured JSON output in production and human-readable output in dev.

DayRhythm modules log through plain `logging.getLogger(__name__)`; the
root handler installed here renders them. The ones that matter in
operation:
    dayrhythm.services.state_store   load fallbacks, listener failures, resets
    dayrhythm.services.persistence   failed writes (from the writer thread)
    dayrhythm.api                    unhandled request exceptions, shutdown flush

uvicorn.access and the httpx/httpcore client loggers are capped at
WARNING so request noise does not drown these out.

Usage:
    from dayrhythm.lib.logging import setup_logging

    setup_logging()  # Call once at application startup
"""

import logging
import sys

import structlog

from dayrhythm.config.settings import Settings


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and stdlib logging for the application.

    In development (DAYRHYTHM_DEV_MODE=1): human-readable colored console output.
    In production: JSON-formatted structured logs.

    Args:
        settings: Runtime settings (read from the environment if None)
    """
    settings = settings or Settings.from_env()

    # Shared processors for both structlog and stdlib
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.dev_mode:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to use structlog formatting
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Quiet noisy third-party loggers
    for noisy_logger in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)
