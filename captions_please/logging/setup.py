"""Structlog configuration for captions_please."""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import structlog

from captions_please.config import ActivityConfig, LogFormat


def configure_logging(config: ActivityConfig | None = None) -> None:
    """
    Configure structlog for the bot's workers and webhook.

    JSON output renders exceptions into the event so worker tracebacks
    survive log shipping. Console output only colors a real terminal.

    Args:
        config: ActivityConfig instance, uses defaults if None
    """
    if config is None:
        config = ActivityConfig()

    # Set up standard library logging
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # Common processors, job context bound by job_context() comes first
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    # Add format-specific processors
    if config.log_format == LogFormat.JSON:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def job_context(post_id: str, worker: int | None = None) -> Iterator[None]:
    """
    Tag every log line emitted while handling one job.

    Example:
        with job_context(job.post.id, worker=2):
            await processor.process(job)
    """
    with structlog.contextvars.bound_contextvars(job_post_id=post_id, worker=worker):
        yield


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, tagged with ``name`` as the component."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
