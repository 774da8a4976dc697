"""Localized message catalog for replies."""

from captions_please.exceptions import CaptionsError, ErrorKind
from captions_please.logging import get_logger

log = get_logger("messages")

DEFAULT_LANGUAGE = "en"

# Catalog entries are str.format templates keyed by message id.
# Languages fall back to English per key.
MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "unknown_error": "My joints are freezing up! Something broke on my end, sorry!",
        "cannot_split": "The message can't be written out as a tweet. Maybe it's by Prince?",
        "no_photos": (
            "I didn't find any photos to interpret, but I appreciate the shoutout!. "
            "Try \"@captions_please help\" to learn more"
        ),
        "wrong_media": "I only know how to interpret photos right now, sorry!",
        "no_descriptions": "I'm at a loss for words, sorry!",
        "unsupported_language": "I'm unable to support that language right now, sorry!",
        "user_blocked_bot": "I'm blocked from viewing the parent tweet, sorry!",
        "image_label": "Image {index}: {reply}",
        "no_alt_text": "{author} didn't provide any alt text when posting the image",
        "has_alt_text": "{author} says it's {alt_text}",
        "description_joiner": "It might also be {description}",
        "add_description": "I think it's {description}",
        "add_ocr": "It contains the text: {ocr}",
        "help_usage": (
            "Tag @captions_please in a tweet to interpret the images.\n"
            "You can customize the response by adding one of the following commands after tagging me:"
        ),
        "alt_text_command": "alt text",
        "ocr_command": "get text",
        "describe_command": "describe",
        "alt_text_usage": "See what description the user gave when creating the tweet",
        "ocr_usage": "Scan the image for text",
        "describe_usage": "Use AI to create a description of the image",
    },
    "de": {
        "alt_text_command": "Alternativtext",
        "ocr_command": "Text scannen",
        "describe_command": "beschreiben",
        "help_usage": (
            "Markiere @captions_please in einem Tweet, um eine Bildbeschreibung zu bekommen. "
            "Füge eines der Kommandos hinzu, wie"
        ),
        "alt_text_usage": "Lese, was schon als Bildbeschreibung hinzugefügt ist",
        "ocr_usage": "Scanne, was an Text im Bild vorhanden ist (Text in Bildform)",
        "describe_usage": "Nutze KI (Künstliche Intelligenz), um eine Bildbeschreibung zu erzeugen",
    },
}

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CANNOT_SPLIT_MESSAGE: "cannot_split",
    ErrorKind.NO_PHOTOS_FOUND: "no_photos",
    ErrorKind.WRONG_MEDIA_TYPE: "wrong_media",
    ErrorKind.DESCRIBE_ERROR: "no_descriptions",
    ErrorKind.NO_HIGH_CONFIDENCE_RESULTS: "no_descriptions",
    ErrorKind.OCR_ERROR: "no_descriptions",
    ErrorKind.TRANSLATE_ERROR: "no_descriptions",
    ErrorKind.UNSUPPORTED_LANGUAGE: "unsupported_language",
    ErrorKind.USER_BLOCKED_BOT: "user_blocked_bot",
}

HELP_LINES = [
    ("alt_text_command", "alt_text_usage"),
    ("ocr_command", "ocr_usage"),
    ("describe_command", "describe_usage"),
]


def supported_language(language: str | None) -> str:
    """
    Map a language tag onto a language the catalog can speak.

    Examples:
        "de" -> "de"
        "de-at" -> "de"
        "fr" -> "en"
    """
    if not language:
        return DEFAULT_LANGUAGE
    primary = language.lower().replace("_", "-").split("-")[0]
    if primary in MESSAGES:
        return primary
    log.debug("unsupported_language", language=language, fallback=DEFAULT_LANGUAGE)
    return DEFAULT_LANGUAGE


def localize(key: str, language: str | None = None, **kwargs) -> str:
    """
    Render catalog entry ``key`` in ``language``.

    Args:
        key: Message id from MESSAGES
        language: Language tag, unsupported tags fall back to English
        **kwargs: Template arguments

    Returns:
        Localized text
    """
    table = MESSAGES[supported_language(language)]
    template = table.get(key) or MESSAGES[DEFAULT_LANGUAGE][key]
    return template.format(**kwargs) if kwargs else template


def error_message(error: CaptionsError | None, language: str | None = None) -> str:
    """Apologetic, user-facing text for a classified error."""
    kind = error.kind if error is not None else ErrorKind.UNKNOWN
    return localize(ERROR_MESSAGES.get(kind, "unknown_error"), language)


def help_message(language: str | None = None) -> str:
    """Usage text listing every command."""
    lines = [localize("help_usage", language)]
    for command_key, usage_key in HELP_LINES:
        lines.append(f"{localize(command_key, language)}: {localize(usage_key, language)}")
    return "\n".join(lines)


def label_image(reply: str, index: int, language: str | None = None) -> str:
    """Prefix a reply with its 1-based image number. ``index`` is 0-based."""
    return localize("image_label", language, index=index + 1, reply=reply)


def combine_descriptions(descriptions: list[str], language: str | None = None) -> str:
    """Join ranked captions: first one verbatim, the rest as alternatives."""
    parts = [descriptions[0]] if descriptions else []
    parts.extend(localize("description_joiner", language, description=d) for d in descriptions[1:])
    return ". ".join(parts)


def add_description(prefix: str, description: str, language: str | None = None) -> str:
    return ". ".join([prefix, localize("add_description", language, description=description)])


def add_ocr(prefix: str, ocr: str, language: str | None = None) -> str:
    return ". ".join([prefix, localize("add_ocr", language, ocr=ocr)])
