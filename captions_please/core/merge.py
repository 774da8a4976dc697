"""Response merge engine - combines alt text, OCR and descriptions per image."""

from captions_please.core import messages
from captions_please.models.directive import Directive
from captions_please.models.response import MediaResponse, ResponseKind

# Auto mode shows short OCR text next to the description
LONG_OCR_THRESHOLD = 50


def select_responses(
    directive: Directive,
    alt_text: MediaResponse,
    ocr: MediaResponse,
    description: MediaResponse,
) -> list[MediaResponse]:
    """
    Pick which of the three responses for one image make it into the reply.

    The returned list is always ordered alt text, description, OCR.
    """
    if all(r.kind == ResponseKind.DO_NOTHING for r in (alt_text, ocr, description)):
        return [MediaResponse(index=alt_text.index)]

    has_alt_text = alt_text.has(ResponseKind.FOUND_ALT_TEXT)
    has_ocr = ocr.has(ResponseKind.FOUND_OCR)
    has_description = description.has(ResponseKind.FOUND_DESCRIPTION)

    if directive.auto:
        if has_alt_text:
            return [alt_text]
        if has_ocr and has_description and len(ocr.reply) < LONG_OCR_THRESHOLD:
            return [description, ocr]
        if has_ocr:
            return [ocr]
        if has_description:
            return [description]
        if ocr.error is not None:
            return [ocr]
        return [description]

    if has_alt_text or has_ocr or has_description:
        # Something succeeded, so only keep what didn't error
        selected = [alt_text]
        if has_description:
            selected.append(description)
        if has_ocr:
            selected.append(ocr)
        return selected

    if ocr.kind != ResponseKind.DO_NOTHING:
        return [alt_text, ocr]
    return [alt_text, description]


def combine(selected: list[MediaResponse], index: int, author: str, language: str) -> MediaResponse:
    """
    Render the selected responses for one image as a single response.

    Args:
        selected: Output of select_responses
        index: Media index of the image
        author: Display name of the author of the media post
        language: Reply language

    Returns:
        A single MediaResponse, DO_NOTHING when nothing was selected
    """
    selected = [r for r in selected if r.kind != ResponseKind.DO_NOTHING]
    if not selected:
        return MediaResponse(index=index)
    if len(selected) == 1:
        return selected[0]

    alt_reply = None
    head = selected[0]
    if head.kind == ResponseKind.FOUND_ALT_TEXT:
        alt_reply = messages.localize("has_alt_text", language, author=author, alt_text=head.reply)
        selected = selected[1:]
    elif head.kind == ResponseKind.MISSING_ALT_TEXT:
        alt_reply = head.reply
        selected = selected[1:]

    if len(selected) == 1 and selected[0].error is not None:
        return MediaResponse(index=index, kind=ResponseKind.MERGED, error=selected[0].error)

    description_reply = next((r.reply for r in selected if r.kind == ResponseKind.FOUND_DESCRIPTION), None)
    ocr_reply = next((r.reply for r in selected if r.kind == ResponseKind.FOUND_OCR), None)

    if alt_reply and description_reply and ocr_reply:
        reply = messages.add_ocr(messages.add_description(alt_reply, description_reply, language), ocr_reply, language)
    elif not alt_reply:
        reply = messages.add_ocr(description_reply, ocr_reply, language)
    elif not description_reply:
        reply = messages.add_ocr(alt_reply, ocr_reply, language)
    else:
        reply = messages.add_description(alt_reply, description_reply, language)
    return MediaResponse(index=index, kind=ResponseKind.MERGED, reply=reply)


def merge_responses(
    directive: Directive,
    alt_text: list[MediaResponse],
    ocr: list[MediaResponse],
    description: list[MediaResponse],
    author: str,
) -> list[MediaResponse]:
    """
    Merge the three adapters' outputs image by image.

    All three lists must be in media index order and of equal length.
    """
    merged = []
    for alt_response, ocr_response, description_response in zip(alt_text, ocr, description, strict=True):
        selected = select_responses(directive, alt_response, ocr_response, description_response)
        merged.append(combine(selected, alt_response.index, author, directive.language))
    return merged
