"""Unit tests for the error taxonomy and localized error messages."""

from captions_please.core import messages
from captions_please.exceptions import (
    CaptionsError,
    ErrorKind,
    NoPhotosFoundError,
    OCRError,
    PostTooLongError,
    PostValidationError,
    classify,
)


class TestClassify:
    """Test wrapping raw exceptions."""

    def test_none(self):
        assert classify(None) is None

    def test_raw_exception_gets_default_kind(self):
        cause = TimeoutError("slow")
        error = classify(cause, ErrorKind.OCR_ERROR)
        assert error.kind == ErrorKind.OCR_ERROR
        assert error.__cause__ is cause

    def test_classified_error_keeps_kind(self):
        error = NoPhotosFoundError("nothing here")
        assert classify(error, ErrorKind.OCR_ERROR) is error

    def test_unknown_by_default(self):
        assert classify(ValueError("x")).kind == ErrorKind.UNKNOWN


class TestCaptionsError:
    """Test error identity."""

    def test_subclass_kind(self):
        assert OCRError().kind == ErrorKind.OCR_ERROR
        assert isinstance(PostTooLongError(), PostValidationError)

    def test_kind_override(self):
        assert CaptionsError("x", kind=ErrorKind.RATE_LIMITED).kind == ErrorKind.RATE_LIMITED

    def test_equality(self):
        assert OCRError("a") == OCRError("a")
        assert OCRError("a") != OCRError("b")


class TestMessages:
    """Test localized message lookup."""

    def test_error_message(self):
        assert messages.error_message(OCRError()) == "I'm at a loss for words, sorry!"

    def test_unmapped_kind_is_unknown(self):
        error = CaptionsError("x", kind=ErrorKind.RATE_LIMITED)
        assert messages.error_message(error) == messages.localize("unknown_error")

    def test_german_falls_back_per_key(self):
        assert messages.localize("no_descriptions", "de") == "I'm at a loss for words, sorry!"
        assert messages.localize("ocr_command", "de") == "Text scannen"

    def test_region_tag_uses_primary_language(self):
        assert messages.supported_language("de-AT") == "de"
        assert messages.supported_language("fr") == "en"

    def test_label_is_one_based(self):
        assert messages.label_image("a cat", 0) == "Image 1: a cat"
