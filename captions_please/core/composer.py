"""Reply composer - turns merged per-image responses into one reply body."""

from captions_please.core import messages
from captions_please.exceptions import CaptionsError
from captions_please.models.response import MediaResponse, ResponseKind


def compose_reply(responses: list[MediaResponse], language: str) -> str:
    """
    Build the reply text for a post.

    Do-nothing items are dropped. With several images left, each line is
    labelled with the image's original 1-based position.

    Args:
        responses: Merged responses, one per media item
        language: Reply language

    Returns:
        Localized reply text
    """
    responses = [r for r in responses if r.kind != ResponseKind.DO_NOTHING]
    if not responses:
        return messages.localize("no_photos", language)

    lines = []
    for response in responses:
        if response.error is not None:
            line = messages.error_message(response.error, language)
        else:
            line = response.reply or ""
        if len(responses) > 1:
            line = messages.label_image(line, response.index, language)
        lines.append(line)
    return "\n".join(lines)


def first_error(responses: list[MediaResponse]) -> CaptionsError | None:
    """The first per-image error, reported for telemetry."""
    return next((r.error for r in responses if r.error is not None), None)
