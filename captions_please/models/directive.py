"""Parsed user command model."""

from enum import Enum

from pydantic import BaseModel


class Action(str, Enum):
    """Something the user can ask the bot to do."""
    AUTO = "auto"
    HELP = "help"
    ALT_TEXT = "alt_text"
    OCR = "ocr"
    DESCRIBE = "describe"


class Directive(BaseModel):
    """The requested actions and the language to reply in."""

    actions: frozenset[Action]
    language: str = "en"

    model_config = {"frozen": True}

    @property
    def auto(self) -> bool:
        return Action.AUTO in self.actions

    @property
    def help(self) -> bool:
        return Action.HELP in self.actions

    @property
    def alt_text(self) -> bool:
        return Action.ALT_TEXT in self.actions

    @property
    def ocr(self) -> bool:
        return Action.OCR in self.actions

    @property
    def describe(self) -> bool:
        return Action.DESCRIBE in self.actions

    @property
    def label(self) -> str:
        """Stable, human readable summary used in logs and result actions."""
        order = [Action.HELP, Action.AUTO, Action.ALT_TEXT, Action.DESCRIBE, Action.OCR]
        return "+".join(a.value for a in order if a in self.actions)
