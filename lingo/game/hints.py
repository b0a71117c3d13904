"""
Hint Generator - Reveals letters (one word) or words (multiple words).

Selection is shuffle-once-and-consume: the candidate positions are
shuffled when the round starts and hints pop from that order. Every hint
is a fresh position and the generator always terminates.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

HIDDEN_MARKER = "_ "
SPACE_MARKER = "   "


def letter_positions(answer: str) -> list[int]:
    """Character positions that can be hinted (everything but whitespace)."""
    return [i for i, ch in enumerate(answer) if not ch.isspace()]


def mask_answer(answer: str, revealed: set[int] | frozenset[int]) -> str:
    """
    Build the masked display string for a partially hinted answer.

    Revealed positions show the character, hidden ones show "_ ",
    whitespace is rendered as a fixed-width blank.
    """
    parts = []
    for i, ch in enumerate(answer):
        if ch.isspace():
            parts.append(SPACE_MARKER)
        elif i in revealed:
            parts.append(f"{ch} ")
        else:
            parts.append(HIDDEN_MARKER)
    return "".join(parts).rstrip()


@dataclass
class HintGenerator:
    """
    Hands out hint positions for one round.

    Usage:
        hints = HintGenerator.for_word("ice cream", rng)
        index = hints.next_hint()
        display = mask_answer("ice cream", hints.hinted_set)
    """
    total: int
    order: list[int] = field(default_factory=list)
    hinted: list[int] = field(default_factory=list)

    @classmethod
    def for_word(cls, answer: str, rng: random.Random | None = None) -> HintGenerator:
        positions = letter_positions(answer)
        (rng or random).shuffle(positions)
        return cls(total=len(positions), order=positions)

    @classmethod
    def for_slots(cls, count: int, rng: random.Random | None = None) -> HintGenerator:
        slots = list(range(count))
        (rng or random).shuffle(slots)
        return cls(total=count, order=slots)

    @property
    def hinted_set(self) -> frozenset[int]:
        return frozenset(self.hinted)

    @property
    def remaining(self) -> int:
        return len(self.order)

    def next_hint(self, skip: set[int] | frozenset[int] = frozenset()) -> int | None:
        """
        Consume the next position.

        Positions in `skip` (e.g. words already guessed) are dropped
        without being counted as hints. Returns None when nothing is left.
        """
        while self.order:
            index = self.order.pop()
            if index in skip:
                continue
            self.hinted.append(index)
            return index
        return None

    def is_exhausted(self) -> bool:
        """True once every position has been hinted."""
        return len(self.hinted) >= self.total
