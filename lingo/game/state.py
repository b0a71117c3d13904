"""
Game State - Per-session aggregate for every mini-game.

Design principles:
- One GameState per conversation session, never shared
- Rounds own their counters: attempts, hints, guessed slots
- Hints never count as guesses; progress is guessed | hinted
- Serializable snapshot via to_dict() for the session endpoint
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING
import random

from .attempts import AttemptTracker, DEFAULT_ATTEMPTS
from .hints import HintGenerator, letter_positions, mask_answer
from .scene import Scene

if TYPE_CHECKING:
    from ..providers.search import SearchResult

MULTIPLE_WORDS_COUNT = 3


@dataclass
class GameConfig:
    """Tunable knobs for a session's games."""
    attempts: int = DEFAULT_ATTEMPTS
    seed: int | None = None

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


@dataclass
class OnePicState:
    """One Pic One Word: a single English answer with letter hints."""
    answer: str = ""
    answer_translated: str = ""
    image_url: str | None = None
    attempts: AttemptTracker = field(default_factory=AttemptTracker)
    hints: HintGenerator = field(default_factory=lambda: HintGenerator(total=0))
    translated: bool = False
    started: bool = False

    @property
    def attempts_left(self) -> int:
        return self.attempts.attempts_left

    @property
    def hinted_indices(self) -> frozenset[int]:
        return self.hints.hinted_set

    def new_round(
        self,
        answer: str,
        answer_translated: str,
        image_url: str | None,
        attempts: int,
        rng: random.Random | None = None,
    ):
        """Load a new picture and reset the counters."""
        self.answer = answer
        self.answer_translated = answer_translated
        self.image_url = image_url
        self.attempts = AttemptTracker(attempts_left=attempts)
        self.hints = HintGenerator.for_word(answer, rng)
        self.translated = False

    def give_hint(self) -> int | None:
        return self.hints.next_hint()

    def masked(self) -> str:
        return mask_answer(self.answer, self.hints.hinted_set)

    def fully_hinted(self) -> bool:
        """Every non-space character has been revealed by hints."""
        return len(self.hints.hinted) >= len(letter_positions(self.answer))

    def reset(self, attempts: int = DEFAULT_ATTEMPTS):
        self.answer = ""
        self.answer_translated = ""
        self.image_url = None
        self.attempts = AttemptTracker(attempts_left=attempts)
        self.hints = HintGenerator(total=0)
        self.translated = False
        self.started = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "answer": self.answer,
            "answer_translated": self.answer_translated,
            "attempts_left": self.attempts_left,
            "hinted_indices": sorted(self.hinted_indices),
            "started": self.started,
        }


@dataclass
class MultipleWordsState:
    """One Pic Multiple Words: three English answers with word hints."""
    answers: list[str] = field(default_factory=list)
    answers_translated: list[str] = field(default_factory=list)
    image_url: str | None = None
    attempts: AttemptTracker = field(default_factory=AttemptTracker)
    hints: HintGenerator = field(default_factory=lambda: HintGenerator(total=0))
    english_guessed: set[int] = field(default_factory=set)
    spanish_guessed: set[int] = field(default_factory=set)
    started: bool = False

    @property
    def attempts_left(self) -> int:
        return self.attempts.attempts_left

    @property
    def hinted_indices(self) -> frozenset[int]:
        return self.hints.hinted_set

    @property
    def english_guessed_count(self) -> int:
        return len(self.english_guessed)

    @property
    def spanish_guessed_count(self) -> int:
        return len(self.spanish_guessed)

    @property
    def revealed(self) -> set[int]:
        """Slots shown on the canvas, whether guessed or hinted."""
        return self.english_guessed | self.hints.hinted_set

    def new_round(
        self,
        answers: list[str],
        answers_translated: list[str],
        image_url: str | None,
        attempts: int,
        rng: random.Random | None = None,
    ):
        if len(answers) != MULTIPLE_WORDS_COUNT or len(answers_translated) != MULTIPLE_WORDS_COUNT:
            raise ValueError(f"Expected {MULTIPLE_WORDS_COUNT} answers and translations")
        self.answers = list(answers)
        self.answers_translated = list(answers_translated)
        self.image_url = image_url
        self.attempts = AttemptTracker(attempts_left=attempts)
        self.hints = HintGenerator.for_slots(len(answers), rng)
        self.english_guessed = set()
        self.spanish_guessed = set()

    def give_hint(self) -> int | None:
        """Reveal a slot that is neither guessed nor hinted yet."""
        return self.hints.next_hint(skip=self.english_guessed)

    def all_revealed(self) -> bool:
        return len(self.revealed) >= len(self.answers)

    def all_translated(self) -> bool:
        return len(self.spanish_guessed) >= len(self.answers_translated)

    def reset(self, attempts: int = DEFAULT_ATTEMPTS):
        self.answers = []
        self.answers_translated = []
        self.image_url = None
        self.attempts = AttemptTracker(attempts_left=attempts)
        self.hints = HintGenerator(total=0)
        self.english_guessed = set()
        self.spanish_guessed = set()
        self.started = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "answers": list(self.answers),
            "answers_translated": list(self.answers_translated),
            "attempts_left": self.attempts_left,
            "english_guessed_count": self.english_guessed_count,
            "spanish_guessed_count": self.spanish_guessed_count,
            "hinted_indices": sorted(self.hinted_indices),
            "started": self.started,
        }


class ConversationPrompt(Enum):
    """Where the practice conversation currently is."""
    GREETING = 0
    ASK_TOPIC = 1
    PICK_ARTICLE = 2


@dataclass
class ConversationState:
    """Conversation practice: greeting, topic search, article reading."""
    current_prompt: ConversationPrompt = ConversationPrompt.GREETING
    search_results: list[SearchResult] = field(default_factory=list)
    search_results_description: str | None = None

    def reset(self):
        self.current_prompt = ConversationPrompt.GREETING
        self.search_results = []
        self.search_results_description = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_prompt": self.current_prompt.name.lower(),
            "search_results": [r.to_dict() for r in self.search_results],
            "search_results_description": self.search_results_description,
        }


@dataclass
class GameState:
    """
    Everything the webhook remembers about one conversation.

    The scene is only changed through the transition policy
    (see scene.next_scene); handlers assign its result here.
    """
    scene: Scene = Scene.MENU
    one_pic: OnePicState = field(default_factory=OnePicState)
    multiple_words: MultipleWordsState = field(default_factory=MultipleWordsState)
    conversation: ConversationState = field(default_factory=ConversationState)

    def reset_active_game(self, attempts: int = DEFAULT_ATTEMPTS):
        """Clear the started flag (and round) of the game the scene belongs to."""
        if self.scene.is_one_pic:
            self.one_pic.reset(attempts)
        elif self.scene.is_multiple_words:
            self.multiple_words.reset(attempts)
        elif self.scene == Scene.CONVERSATION:
            self.conversation.reset()

    def to_dict(self) -> dict[str, Any]:
        return {
            "scene": self.scene.value,
            "one_pic": self.one_pic.to_dict(),
            "multiple_words": self.multiple_words.to_dict(),
            "conversation": self.conversation.to_dict(),
        }
