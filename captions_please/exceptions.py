"""Classified error hierarchy for captions_please."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds used for user messages and telemetry."""
    NO_PHOTOS_FOUND = "no_photos_found"
    WRONG_MEDIA_TYPE = "wrong_media_type"
    OCR_ERROR = "ocr_error"
    DESCRIBE_ERROR = "describe_error"
    NO_HIGH_CONFIDENCE_RESULTS = "no_high_confidence_results"
    TRANSLATE_ERROR = "translate_error"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    CANNOT_SPLIT_MESSAGE = "cannot_split_message"
    USER_BLOCKED_BOT = "user_blocked_bot"

    # Platform / transport
    RATE_LIMITED = "rate_limited"
    PLATFORM_ERROR = "platform_error"
    DUPLICATE_POST = "duplicate_post"
    POST_TOO_LONG = "post_too_long"
    MISSING_POST = "missing_post"

    # Scheduling
    TIMEOUT = "timeout"
    SCHEDULER_CLOSED = "scheduler_closed"

    UNKNOWN = "unknown"


class CaptionsError(Exception):
    """Base exception for all captions_please errors, tagged with an ErrorKind."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str = "", kind: ErrorKind | None = None):
        super().__init__(message or self.__class__.__doc__ or "")
        if kind is not None:
            self.kind = kind

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r}, kind={self.kind.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CaptionsError):
            return NotImplemented
        return self.kind == other.kind and str(self) == str(other)

    def __hash__(self) -> int:
        return hash((self.kind, str(self)))


class NoPhotosFoundError(CaptionsError):
    """No photos were found on the post or its ancestors."""
    kind = ErrorKind.NO_PHOTOS_FOUND


class WrongMediaTypeError(CaptionsError):
    """The post contains media, but none of it is a photo."""
    kind = ErrorKind.WRONG_MEDIA_TYPE


class OCRError(CaptionsError):
    """The OCR provider failed to read the image."""
    kind = ErrorKind.OCR_ERROR


class DescribeError(CaptionsError):
    """The description provider failed to caption the image."""
    kind = ErrorKind.DESCRIBE_ERROR


class UnsupportedLanguageError(CaptionsError):
    """The provider can't answer in the requested language."""
    kind = ErrorKind.UNSUPPORTED_LANGUAGE


class NoHighConfidenceResultsError(CaptionsError):
    """The description provider returned no high-confidence captions."""
    kind = ErrorKind.NO_HIGH_CONFIDENCE_RESULTS


class CannotSplitMessageError(CaptionsError):
    """The reply cannot be split into valid posts."""
    kind = ErrorKind.CANNOT_SPLIT_MESSAGE


class PostValidationError(CaptionsError):
    """Text is not a valid post."""
    kind = ErrorKind.CANNOT_SPLIT_MESSAGE


class PostTooLongError(PostValidationError):
    """Text is longer than a single post allows."""
    kind = ErrorKind.POST_TOO_LONG


class InvalidTextError(PostValidationError):
    """Text contains characters that can never be posted."""
    kind = ErrorKind.CANNOT_SPLIT_MESSAGE


class PlatformError(CaptionsError):
    """The social platform rejected a request."""
    kind = ErrorKind.PLATFORM_ERROR


class JobTimeoutError(CaptionsError):
    """The job could not be queued before the timeout."""
    kind = ErrorKind.TIMEOUT


class SchedulerClosedError(CaptionsError):
    """The scheduler is shutting down and no longer accepts jobs."""
    kind = ErrorKind.SCHEDULER_CLOSED


def classify(exc: BaseException | None, default: ErrorKind = ErrorKind.UNKNOWN) -> CaptionsError | None:
    """
    Wrap an exception into a CaptionsError.

    Already-classified errors keep their kind; anything else is tagged
    with ``default`` and chained to the original exception.

    Args:
        exc: Exception to classify, or None
        default: Kind for unclassified exceptions

    Returns:
        CaptionsError, or None when exc is None
    """
    if exc is None:
        return None
    if isinstance(exc, CaptionsError):
        return exc
    wrapped = CaptionsError(str(exc) or exc.__class__.__name__, kind=default)
    wrapped.__cause__ = exc
    return wrapped
