"""Unit tests for command parsing."""

import pytest

from captions_please.core.command import parse_command, parse_language_tag, tokenize
from captions_please.models.directive import Action


class TestTokenize:
    """Test command tokenization."""

    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("  Alt Text, please! ") == ["alt", "text", "please"]

    def test_keeps_hyphens(self):
        assert tokenize("in pt-BR") == ["in", "pt-br"]


class TestParseLanguageTag:
    """Test language tag resolution."""

    @pytest.mark.parametrize("token,expected", [
        ("de", "de"),
        ("pt-br", "pt-BR"),
        ("zh-hant", "zh-Hant"),
        ("es-419", "es-419"),
        ("german", "de"),
        ("deutsch", "de"),
        ("fil", "fil"),
        ("yue", "yue"),
        ("sr-latn-rs", "sr-Latn-RS"),
        ("klingon", None),
        ("notalanguage", None),
    ])
    def test_tags(self, token, expected):
        assert parse_language_tag(token) == expected


class TestParseCommand:
    """Test full command parsing."""

    def test_empty_is_auto(self):
        directive = parse_command("")
        assert directive.actions == frozenset({Action.AUTO})
        assert directive.language == "en"

    def test_help(self):
        assert parse_command("help").help

    def test_alt_text(self):
        directive = parse_command("alt text")
        assert directive.actions == frozenset({Action.ALT_TEXT})

    def test_get_text_is_ocr(self):
        assert parse_command("get text").actions == frozenset({Action.OCR})

    def test_several_actions(self):
        directive = parse_command("OCR and describe")
        assert directive.actions == frozenset({Action.OCR, Action.DESCRIBE})
        assert directive.label == "describe+ocr"

    def test_language_clause_after_actions(self):
        directive = parse_command("describe in french")
        assert directive.describe
        assert directive.language == "fr"

    def test_language_clause_before_actions(self):
        directive = parse_command("in de alt text")
        assert directive.alt_text
        assert directive.language == "de"

    def test_bare_language_clause_is_auto(self):
        directive = parse_command("in german")
        assert directive.auto
        assert directive.language == "de"

    def test_german_help(self):
        directive = parse_command("Hilfe")
        assert directive.help
        assert directive.language == "de"

    def test_german_scan_text(self):
        directive = parse_command("Text scannen")
        assert directive.actions == frozenset({Action.OCR})
        assert directive.language == "de"

    def test_german_alt_text_and_describe(self):
        directive = parse_command("Alternativtext und beschreiben")
        assert directive.actions == frozenset({Action.ALT_TEXT, Action.DESCRIBE})

    def test_unrecognized_falls_back_to_help(self):
        directive = parse_command("what is the weather")
        assert directive.actions == frozenset({Action.HELP})
        assert directive.language == "en"

    def test_three_letter_language(self):
        directive = parse_command("in fil")
        assert directive.auto
        assert directive.language == "fil"

    def test_ocr_in_three_letter_language(self):
        directive = parse_command("ocr in yue")
        assert directive.actions == frozenset({Action.OCR})
        assert directive.language == "yue"

    def test_multi_subtag_language(self):
        directive = parse_command("describe in sr-Latn-RS")
        assert directive.describe
        assert directive.language == "sr-Latn-RS"
