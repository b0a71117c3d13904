"""
Canvas Commands - Outbound display updates paired with spoken text.

A handler turn produces one CanvasResponse: spoken prompts first, then at
most one canvas update. The web app dispatches on `command`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CanvasCommand(str, Enum):
    """Commands understood by the canvas web app."""
    LANG_START_ONE_PIC = "LANG_START_ONE_PIC"
    LANG_ONE_PIC_SHOW_ENGLISH = "LANG_ONE_PIC_SHOW_ENGLISH"
    LANG_ONE_PIC_SHOW_SPANISH = "LANG_ONE_PIC_SHOW_SPANISH"
    LANG_ONE_PIC_UPDATE_ATTEMPTS = "LANG_ONE_PIC_UPDATE_ATTEMPTS"
    LANG_ONE_PIC_SHOW_HINT = "LANG_ONE_PIC_SHOW_HINT"
    LANG_ONE_PIC_SHOW_ANSWER = "LANG_ONE_PIC_SHOW_ANSWER"
    LANG_START_MULTIPLE_WORDS = "LANG_START_MULTIPLE_WORDS"
    LANG_MULTIPLE_WORDS_SHOW_ENGLISH = "LANG_MULTIPLE_WORDS_SHOW_ENGLISH"
    LANG_MULTIPLE_WORDS_SHOW_SPANISH = "LANG_MULTIPLE_WORDS_SHOW_SPANISH"
    LANG_MULTIPLE_WORDS_UPDATE_ATTEMPTS = "LANG_MULTIPLE_WORDS_UPDATE_ATTEMPTS"
    LANG_MULTIPLE_WORDS_SHOW_ANSWER = "LANG_MULTIPLE_WORDS_SHOW_ANSWER"
    LANG_MENU = "LANG_MENU"
    LANG_START_CONVERSATION = "LANG_START_CONVERSATION"
    LANG_ADD_CONVERSATION_MESSAGE = "LANG_ADD_CONVERSATION_MESSAGE"
    LANG_ADD_CONVERSATION_SEARCH_MESSAGE = "LANG_ADD_CONVERSATION_SEARCH_MESSAGE"
    LANG_VOCAB = "LANG_VOCAB"
    TINT = "TINT"
    QUESTIONS = "QUESTIONS"
    LEVEL = "LEVEL"


@dataclass
class Canvas:
    """
    A canvas update.

    An empty Canvas (no command, no url) keeps the web app alive
    without changing what it shows.
    """
    command: CanvasCommand | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    url: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.command is None and self.url is None

    def data(self) -> list[dict[str, Any]]:
        if self.command is None:
            return []
        return [{"command": self.command.value, **self.fields}]


@dataclass
class CanvasResponse:
    """
    Everything one handler turn sends back.

    Usage:
        response = CanvasResponse()
        response.say("That is correct!")
        response.set_canvas(CanvasCommand.LANG_ONE_PIC_SHOW_SPANISH, value="gato")
    """
    prompts: list[str] = field(default_factory=list)
    canvas: Canvas | None = None
    end_conversation: bool = False

    def say(self, text: str | None):
        """Append a spoken segment. Empty text is ignored."""
        if text:
            self.prompts.append(str(text))

    def set_canvas(self, command: CanvasCommand, **fields: Any):
        self.canvas = Canvas(command=command, fields=fields)

    def keep_canvas(self):
        """Send an empty canvas update."""
        self.canvas = Canvas()

    def load_web_app(self, url: str):
        self.canvas = Canvas(url=url)

    @property
    def command(self) -> CanvasCommand | None:
        return self.canvas.command if self.canvas else None

    @property
    def value(self) -> Any:
        """Shortcut for the `value` field of the canvas update."""
        if not self.canvas:
            return None
        return self.canvas.fields.get("value")

    @property
    def speech(self) -> str:
        return " ".join(self.prompts)


def emit(
    response: CanvasResponse,
    spoken_text: str | None,
    command: CanvasCommand,
    value: Any = None,
) -> CanvasResponse:
    """
    Add spoken text (if any) and a canvas command carrying `value`.

    Spoken text always goes ahead of the structured payload.
    Does not touch the session.
    """
    response.say(spoken_text)
    response.set_canvas(command, value=value)
    return response
