"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


DEFAULT_WORKERS = 1
DEFAULT_MAX_OUTSTANDING_JOBS = 32
DEFAULT_ENQUEUE_TIMEOUT_SECONDS = 30.0


class ActivityConfig(BaseSettings):
    """Configuration for the account activity subsystem."""

    # Worker pool
    workers: int = DEFAULT_WORKERS
    max_outstanding_jobs: int = DEFAULT_MAX_OUTSTANDING_JOBS
    enqueue_timeout_seconds: float = DEFAULT_ENQUEUE_TIMEOUT_SECONDS

    # Replies
    dry_run: bool = False
    missing_post_retry_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "CAPTIONS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("workers", "max_outstanding_jobs")
    @classmethod
    def at_least_one(cls, value: int) -> int:
        """Unset or zero sizes fall back to a single slot."""
        return value if value > 0 else 1

    @field_validator("enqueue_timeout_seconds")
    @classmethod
    def default_timeout(cls, value: float) -> float:
        """Unset or zero timeouts fall back to the default."""
        return value if value > 0 else DEFAULT_ENQUEUE_TIMEOUT_SECONDS
