"""Logging helpers."""

from captions_please.logging.setup import configure_logging, get_logger, job_context

__all__ = ["configure_logging", "get_logger", "job_context"]
