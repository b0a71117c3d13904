"""
Scenes - The closed set of session modes and the transition policy.

Every scene change goes through next_scene(). The table is the whole
state machine: a (scene, event) pair missing from it is an invalid
transition, not a silent no-op.
"""

from __future__ import annotations
from enum import Enum


class Scene(Enum):
    """A named mode of the session state machine."""
    MENU = "menu"
    ONE_PIC = "one_pic"
    ONE_PIC_TRANSLATION = "one_pic_translation"
    MULTIPLE_WORDS = "multiple_words"
    MULTIPLE_WORDS_TRANSLATION = "multiple_words_translation"
    CONVERSATION = "conversation"
    VOCAB = "vocab"

    @property
    def is_one_pic(self) -> bool:
        return self in {Scene.ONE_PIC, Scene.ONE_PIC_TRANSLATION}

    @property
    def is_multiple_words(self) -> bool:
        return self in {Scene.MULTIPLE_WORDS, Scene.MULTIPLE_WORDS_TRANSLATION}

    @property
    def is_translation(self) -> bool:
        return self in {Scene.ONE_PIC_TRANSLATION, Scene.MULTIPLE_WORDS_TRANSLATION}

    @property
    def family(self) -> Scene:
        """The game a scene belongs to (translation scenes fold into their game)."""
        if self.is_one_pic:
            return Scene.ONE_PIC
        if self.is_multiple_words:
            return Scene.MULTIPLE_WORDS
        return self


class SceneEvent(Enum):
    """Outcomes that can move a session between scenes."""
    START_ONE_PIC = "start_one_pic"
    START_MULTIPLE_WORDS = "start_multiple_words"
    START_CONVERSATION = "start_conversation"
    START_VOCAB = "start_vocab"
    ALL_REVEALED = "all_revealed"  # every word guessed or fully hinted
    OUT_OF_ATTEMPTS = "out_of_attempts"
    NEXT_QUESTION = "next_question"
    CHANGE_GAME = "change_game"


class InvalidTransition(ValueError):
    """Raised when an event has no transition from the current scene."""

    def __init__(self, scene: Scene, event: SceneEvent):
        super().__init__(f"No transition from {scene.value} on {event.value}")
        self.scene = scene
        self.event = event


# Game start intents are global: the assistant matches them in any scene,
# so they are valid from everywhere, like change_game.
_START_TARGETS: dict[SceneEvent, Scene] = {
    SceneEvent.START_ONE_PIC: Scene.ONE_PIC,
    SceneEvent.START_MULTIPLE_WORDS: Scene.MULTIPLE_WORDS,
    SceneEvent.START_CONVERSATION: Scene.CONVERSATION,
    SceneEvent.START_VOCAB: Scene.VOCAB,
}

_TRANSITIONS: dict[tuple[Scene, SceneEvent], Scene] = {
    (Scene.ONE_PIC, SceneEvent.ALL_REVEALED): Scene.ONE_PIC_TRANSLATION,
    (Scene.ONE_PIC, SceneEvent.OUT_OF_ATTEMPTS): Scene.ONE_PIC_TRANSLATION,
    (Scene.ONE_PIC, SceneEvent.NEXT_QUESTION): Scene.ONE_PIC,
    (Scene.ONE_PIC_TRANSLATION, SceneEvent.NEXT_QUESTION): Scene.ONE_PIC,
    (Scene.MULTIPLE_WORDS, SceneEvent.ALL_REVEALED): Scene.MULTIPLE_WORDS_TRANSLATION,
    (Scene.MULTIPLE_WORDS, SceneEvent.OUT_OF_ATTEMPTS): Scene.MULTIPLE_WORDS_TRANSLATION,
    (Scene.MULTIPLE_WORDS, SceneEvent.NEXT_QUESTION): Scene.MULTIPLE_WORDS,
    (Scene.MULTIPLE_WORDS_TRANSLATION, SceneEvent.NEXT_QUESTION): Scene.MULTIPLE_WORDS,
}
for _scene in Scene:
    _TRANSITIONS[(_scene, SceneEvent.CHANGE_GAME)] = Scene.MENU
    for _event, _target in _START_TARGETS.items():
        _TRANSITIONS[(_scene, _event)] = _target


def next_scene(scene: Scene, event: SceneEvent) -> Scene:
    """
    Resolve the scene that follows `event` in `scene`.

    Raises:
        InvalidTransition: if the pair is not in the policy table
    """
    target = _TRANSITIONS.get((scene, event))
    if target is None:
        raise InvalidTransition(scene, event)
    return target


def can_transition(scene: Scene, event: SceneEvent) -> bool:
    """Check whether `event` is valid in `scene`."""
    return (scene, event) in _TRANSITIONS
