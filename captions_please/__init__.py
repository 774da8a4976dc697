"""captions_please - describes the images in posts that mention the bot."""

__version__ = "0.1.0"

from captions_please.config import ActivityConfig
from captions_please.core.orchestrator import ActivityProcessor
from captions_please.core.scheduler import ActivityScheduler
from captions_please.exceptions import CaptionsError, ErrorKind
from captions_please.models.activity import ActivityNotification, ActivityResult

__all__ = [
    # Main interface
    "ActivityProcessor",
    "ActivityScheduler",
    "ActivityConfig",
    # Models
    "ActivityNotification",
    "ActivityResult",
    # Errors
    "CaptionsError",
    "ErrorKind",
    "__version__",
]
