"""Per media item response model."""

from enum import Enum

from pydantic import BaseModel

from captions_please.exceptions import CaptionsError


class ResponseKind(str, Enum):
    """What a capability adapter (or the merge engine) produced for one item."""
    DO_NOTHING = "do_nothing"
    FOUND_ALT_TEXT = "found_alt_text"
    MISSING_ALT_TEXT = "missing_alt_text"
    FOUND_OCR = "found_ocr"
    FOUND_DESCRIPTION = "found_description"
    MERGED = "merged"


class MediaResponse(BaseModel):
    """
    Result for a single media item.

    ``index`` is always the position in the resolved post's media list,
    even after do-nothing items have been filtered out.
    """

    index: int
    kind: ResponseKind = ResponseKind.DO_NOTHING
    reply: str | None = None
    error: CaptionsError | None = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.kind != ResponseKind.DO_NOTHING

    def has(self, kind: ResponseKind) -> bool:
        """True when this response is of ``kind`` and carries no error."""
        return self.error is None and self.kind == kind
