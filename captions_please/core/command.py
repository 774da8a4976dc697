"""Command parser - turns the text after a mention into a Directive."""

import re

import langcodes

from captions_please.logging import get_logger
from captions_please.models.directive import Action, Directive

log = get_logger("command")

DEFAULT_LANGUAGE = "en"

# Keyword tables, centralized so new phrasings are a one-line change
ENGLISH_FILLERS = {"and", "the", "get"}
ENGLISH_KEYWORDS = {
    "help": Action.HELP,
    "auto": Action.AUTO,
    "ocr": Action.OCR,
    "text": Action.OCR,
    "describe": Action.DESCRIBE,
    "caption": Action.DESCRIBE,
    "alt_text": Action.ALT_TEXT,
    "alttext": Action.ALT_TEXT,
}

GERMAN_FILLERS = {"und", "das"}
GERMAN_KEYWORDS = {
    "hilfe": Action.HELP,
    "alternativtext": Action.ALT_TEXT,
    "scannen": Action.OCR,
    "beschreiben": Action.DESCRIBE,
}
GERMAN_NOOPS = {"text"}

LANGUAGE_ALIASES = {
    "english": "en",
    "german": "de",
    "deutsch": "de",
    "french": "fr",
    "spanish": "es",
    "italian": "it",
    "portuguese": "pt",
    "dutch": "nl",
    "japanese": "ja",
}

PUNCTUATION_PATTERN = re.compile(r"[^\w\s-]")


def tokenize(message: str) -> list[str]:
    """Lower-case, strip punctuation and split on whitespace."""
    message = PUNCTUATION_PATTERN.sub("", message.strip().lower())
    return message.split()


def parse_language_tag(token: str) -> str | None:
    """
    Resolve a token into a language tag.

    Registered BCP 47 tags are tried first, then the name alias table.

    Examples:
        "de" -> "de"
        "pt-br" -> "pt-BR"
        "sr-latn-rs" -> "sr-Latn-RS"
        "german" -> "de"
        "klingon" -> None
    """
    try:
        language = langcodes.Language.get(token)
    except ValueError:
        language = None
    if language is not None and language.is_valid():
        return language.to_tag()
    return LANGUAGE_ALIASES.get(token)


def _parse_language_clause(tokens: list[str]) -> tuple[str | None, list[str]]:
    """Consume a leading ``in <language>`` clause if there is one."""
    if len(tokens) >= 2 and tokens[0] == "in":
        language = parse_language_tag(tokens[1])
        if language:
            return language, tokens[2:]
    return None, tokens


def _parse_english_actions(tokens: list[str]) -> tuple[set[Action], list[str]]:
    actions: set[Action] = set()
    while tokens:
        token = tokens[0]
        if token in ENGLISH_KEYWORDS:
            actions.add(ENGLISH_KEYWORDS[token])
            tokens = tokens[1:]
        elif token == "alt" and len(tokens) >= 2 and tokens[1] == "text":
            actions.add(Action.ALT_TEXT)
            tokens = tokens[2:]
        else:
            break
    return actions, tokens


def parse_english(tokens: list[str]) -> Directive | None:
    """English grammar. Returns None when nothing was recognized."""
    if not tokens:
        return Directive(actions=frozenset({Action.AUTO}), language=DEFAULT_LANGUAGE)

    remainder = [t for t in tokens if t not in ENGLISH_FILLERS]
    language, remainder = _parse_language_clause(remainder)
    actions, remainder = _parse_english_actions(remainder)
    if language is None:
        language, _ = _parse_language_clause(remainder)
    language = language or DEFAULT_LANGUAGE

    if not actions and not remainder:
        # A bare language clause means auto in that language
        actions = {Action.AUTO}

    if not actions:
        return None
    return Directive(actions=frozenset(actions), language=language)


def parse_german(tokens: list[str]) -> Directive | None:
    """German grammar. Returns None when nothing was recognized."""
    actions: set[Action] = set()
    for token in (t for t in tokens if t not in GERMAN_FILLERS):
        if token in GERMAN_KEYWORDS:
            actions.add(GERMAN_KEYWORDS[token])
        elif token not in GERMAN_NOOPS:
            break
    if not actions:
        return None
    return Directive(actions=frozenset(actions), language="de")


GRAMMARS = [parse_german, parse_english]


def parse_command(message: str) -> Directive:
    """
    Parse the free-form text that followed the bot mention.

    Never fails: unrecognized text falls back to help.

    Args:
        message: Text after the mention

    Returns:
        Directive with the requested actions and reply language
    """
    tokens = tokenize(message)
    log.debug("parse_command", tokens=tokens)
    for grammar in GRAMMARS:
        directive = grammar(tokens)
        if directive is not None:
            return directive
    return Directive(actions=frozenset({Action.HELP}), language=DEFAULT_LANGUAGE)
