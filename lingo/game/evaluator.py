"""
Answer Evaluator - Judges a spoken answer against the stored answer(s).

Matching is exact after lowercasing both sides. No fuzzy matching and no
other normalization: the assistant's slot filling already resolved the
utterance to a word.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Match:
    """Result of evaluating an answer. index is -1 when nothing matched."""
    found: bool
    index: int = -1

    def __bool__(self) -> bool:
        return self.found


NO_MATCH = Match(found=False, index=-1)


def _normalize(value: object) -> str | None:
    if value is None:
        return None
    return str(value).lower()


def evaluate(user_answer: str | None, correct: str | Sequence[str]) -> Match:
    """
    Evaluate a user answer.

    Args:
        user_answer: Resolved utterance, or None if the slot was unresolved
        correct: A single answer, or an ordered list of answers

    Returns:
        Match. For a list, index is the first matching position.
        A missing answer never matches.
    """
    answer = _normalize(user_answer)
    if answer is None:
        return NO_MATCH

    if isinstance(correct, str):
        if answer == correct.lower():
            return Match(found=True, index=0)
        return NO_MATCH

    for index, candidate in enumerate(correct):
        if answer == _normalize(candidate):
            return Match(found=True, index=index)
    return NO_MATCH
