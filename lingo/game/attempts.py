"""
Attempt Tracker - Counts wrong answers and decides what happens next.

Policy on every wrong answer, after decrementing:
1. no attempts left      -> REVEAL the answer and leave the guessing scene
2. even attempts left    -> HINT (reveal one letter or one word)
3. odd attempts left     -> RETRY ("incorrect, try again")

A hint therefore comes every other wrong answer, with a full reveal at
zero.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

DEFAULT_ATTEMPTS = 5


class AttemptOutcome(Enum):
    """What a wrong answer leads to."""
    REVEAL = "reveal"
    HINT = "hint"
    RETRY = "retry"


@dataclass
class AttemptTracker:
    """Remaining wrong guesses for a round. Never goes below zero."""
    attempts_left: int = DEFAULT_ATTEMPTS

    def __post_init__(self):
        if self.attempts_left < 0:
            raise ValueError("attempts_left must be >= 0")

    @property
    def exhausted(self) -> bool:
        return self.attempts_left == 0

    def record_wrong(self) -> AttemptOutcome:
        """Spend an attempt and classify the result."""
        if self.attempts_left > 0:
            self.attempts_left -= 1

        if self.attempts_left == 0:
            return AttemptOutcome.REVEAL
        if self.attempts_left % 2 == 0:
            return AttemptOutcome.HINT
        return AttemptOutcome.RETRY
