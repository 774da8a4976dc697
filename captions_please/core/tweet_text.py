"""Post length validation using the platform's weighted character count."""

from twitter_text import parse_tweet

from captions_please.exceptions import InvalidTextError, PostTooLongError

MAX_WEIGHTED_LENGTH = 280


def check_text(text: str) -> None:
    """Raise InvalidTextError for lone surrogates, which can't be encoded at all."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidTextError(f"text is not valid unicode: {e.reason}") from e


def weighted_length(text: str) -> int:
    """
    Count ``text`` the way the platform does.

    Examples:
        "hello" -> 5
        "日本" -> 4
        "see example.com" -> 27
    """
    check_text(text)
    return parse_tweet(text).weightedLength


def validate_post(text: str) -> None:
    """
    Check that ``text`` fits in a single post.

    Raises:
        InvalidTextError: the text can't be posted at any length
        PostTooLongError: the text is over MAX_WEIGHTED_LENGTH
    """
    check_text(text)
    result = parse_tweet(text)
    if result.weightedLength > MAX_WEIGHTED_LENGTH:
        raise PostTooLongError(f"weighted length {result.weightedLength} exceeds {MAX_WEIGHTED_LENGTH}")
    # Empty text is never sent, the splitter drops it
    if text and not result.valid:
        raise InvalidTextError("text contains characters the platform rejects")
