"""Message splitter - breaks long replies into a chain of valid posts."""

from typing import Callable

from captions_please.core.tweet_text import validate_post
from captions_please.exceptions import (
    CannotSplitMessageError,
    PostTooLongError,
    PostValidationError,
)
from captions_please.logging import get_logger

log = get_logger("splitter")

Validator = Callable[[str], None]


def split_message(message: str, validate: Validator = validate_post) -> list[str]:
    """
    Split ``message`` into chunks that each pass ``validate``.

    Cuts at the last whitespace that still closes a valid chunk. A run
    with no whitespace that is too long on its own is cut at its longest
    valid prefix instead.

    Args:
        message: Reply text
        validate: Raises PostTooLongError for text that is too long and
            PostValidationError for text that can never be posted

    Returns:
        Trimmed, non-empty chunks in order

    Raises:
        CannotSplitMessageError: the text can't be posted at all
    """
    try:
        validate(message)
        return [message]
    except PostTooLongError:
        pass
    except PostValidationError as e:
        raise CannotSplitMessageError(f"message cannot be posted: {e}") from e

    # A trailing space makes the final chunk go through the same check as the others
    text = message + " "
    chunks: list[str] = []
    start = 0
    last_break = -1
    i = 0
    while i < len(text):
        if i == start or not text[i].isspace():
            i += 1
            continue

        try:
            validate(text[start:i])
        except PostTooLongError:
            if last_break >= 0:
                _append(chunks, text[start:last_break])
                start = last_break + 1
            else:
                cut = _longest_valid_prefix(text, start, i, validate)
                _append(chunks, text[start:cut])
                start = cut
            last_break = -1
            # Re-check the same position against the new start
            continue
        except PostValidationError as e:
            log.debug("split_failed", start=start, end=i, error=str(e))
            raise CannotSplitMessageError(f"message cannot be posted: {e}") from e

        last_break = i
        i += 1

    if start < len(text):
        _append(chunks, text[start:])

    log.debug("message_split", chunks=len(chunks), length=len(message))
    return chunks


def _longest_valid_prefix(text: str, start: int, end: int, validate: Validator) -> int:
    """
    Binary search the largest cut in (start, end) so text[start:cut] is valid.

    Always advances by at least one character.
    """
    best = start + 1
    low, high = start + 1, end - 1
    while low <= high:
        middle = (low + high) // 2
        try:
            validate(text[start:middle])
        except PostTooLongError:
            high = middle - 1
            continue
        except PostValidationError as e:
            raise CannotSplitMessageError(f"message cannot be posted: {e}") from e
        best = middle
        low = middle + 1
    return best


def _append(chunks: list[str], chunk: str) -> None:
    chunk = chunk.strip()
    if chunk:
        chunks.append(chunk)


def split_in_two(message: str) -> tuple[str, str]:
    """Halve a message by characters, used when the platform disagrees with the validator."""
    middle = len(message) // 2
    return message[:middle], message[middle:]
