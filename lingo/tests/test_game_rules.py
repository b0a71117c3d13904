"""
Tests for the pure game rules.

Tests:
- Answer evaluation
- Attempt accounting
- Hint selection and masking
- Scene transition policy
"""

import pytest
import random

from ..game.evaluator import Match, evaluate
from ..game.attempts import AttemptTracker, AttemptOutcome, DEFAULT_ATTEMPTS
from ..game.hints import HintGenerator, letter_positions, mask_answer
from ..game.scene import Scene, SceneEvent, InvalidTransition, next_scene, can_transition
from ..game.state import MultipleWordsState, OnePicState, GameState


class TestEvaluator:
    """Tests for answer matching."""

    def test_list_match_returns_index(self):
        """A guess in the answer list reports its position."""
        result = evaluate("blue", ["sky", "blue", "house"])
        assert result == Match(found=True, index=1)

    def test_list_match_is_case_insensitive(self):
        assert evaluate("HOUSE", ["sky", "blue", "house"]).index == 2

    def test_list_no_match(self):
        result = evaluate("cloud", ["sky", "blue", "house"])
        assert not result.found
        assert result.index == -1

    def test_scalar_match(self):
        assert evaluate("Sky", "sky").found
        assert not evaluate("skies", "sky").found

    def test_no_partial_matching(self):
        assert not evaluate("sk", "sky")
        assert not evaluate(" sky", "sky")

    def test_missing_answer_never_matches(self):
        """An unresolved slot is a guaranteed mismatch."""
        assert not evaluate(None, "none")
        assert not evaluate(None, ["none", "null"])

    def test_first_match_wins(self):
        assert evaluate("sky", ["sky", "SKY"]).index == 0


class TestAttemptTracker:
    """Tests for the wrong-answer policy."""

    def test_five_attempt_sequence(self):
        """5 -> 4 hints, 3 retries, 2 hints, 1 retries, 0 reveals."""
        tracker = AttemptTracker(attempts_left=5)
        outcomes = [tracker.record_wrong() for _ in range(5)]
        assert outcomes == [
            AttemptOutcome.HINT,
            AttemptOutcome.RETRY,
            AttemptOutcome.HINT,
            AttemptOutcome.RETRY,
            AttemptOutcome.REVEAL,
        ]
        assert tracker.attempts_left == 0

    @pytest.mark.parametrize("budget", [5, 10])
    def test_strictly_decreasing_never_negative(self, budget):
        tracker = AttemptTracker(attempts_left=budget)
        seen = [tracker.attempts_left]
        for _ in range(budget + 3):
            tracker.record_wrong()
            seen.append(tracker.attempts_left)

        decreasing = seen[:budget + 1]
        assert decreasing == list(range(budget, -1, -1))
        assert min(seen) == 0

    def test_exhausted_tracker_keeps_revealing(self):
        tracker = AttemptTracker(attempts_left=0)
        assert tracker.exhausted
        assert tracker.record_wrong() is AttemptOutcome.REVEAL
        assert tracker.attempts_left == 0

    def test_negative_budget_rejected(self):
        with pytest.raises(ValueError):
            AttemptTracker(attempts_left=-1)


class TestHints:
    """Tests for hint selection and the masked display."""

    def test_letter_positions_skip_whitespace(self):
        assert letter_positions("ice cream") == [0, 1, 2, 4, 5, 6, 7, 8]

    def test_letter_hints_never_repeat_or_hit_spaces(self):
        hints = HintGenerator.for_word("ice cream", random.Random(3))
        given = []
        while (index := hints.next_hint()) is not None:
            assert index not in given
            assert index != 3
            given.append(index)
            assert hints.hinted == given

        assert sorted(given) == letter_positions("ice cream")
        assert hints.is_exhausted()

    def test_slot_hints_skip_guessed_slots(self):
        hints = HintGenerator.for_slots(3, random.Random(0))
        first = hints.next_hint(skip={1})
        second = hints.next_hint(skip={1})
        assert {first, second} == {0, 2}
        assert hints.next_hint(skip={1}) is None
        assert 1 not in hints.hinted

    def test_mask_hidden_word(self):
        assert mask_answer("sky", set()) == "_ _ _"

    def test_mask_with_space_and_reveals(self):
        assert mask_answer("ice cream", {0, 4}) == "i _ _    c _ _ _ _"

    def test_mask_fully_revealed(self):
        assert mask_answer("sky", {0, 1, 2}) == "s k y"


class TestRoundState:
    """Tests for round bookkeeping."""

    def test_one_pic_fully_hinted(self):
        one_pic = OnePicState()
        one_pic.new_round("sky", "cielo", None, attempts=10, rng=random.Random(1))
        for _ in range(3):
            assert not one_pic.fully_hinted()
            one_pic.give_hint()
        assert one_pic.fully_hinted()
        assert one_pic.hinted_indices == {0, 1, 2}

    def test_hints_do_not_count_as_guesses(self):
        words = MultipleWordsState()
        words.new_round(["sky", "blue", "house"], ["cielo", "azul", "casa"], None, 5, random.Random(2))
        words.english_guessed.add(1)
        hinted = words.give_hint()

        assert hinted != 1
        assert words.english_guessed_count == 1
        assert words.revealed == {1, hinted}
        assert not words.all_revealed()

    def test_multiple_words_requires_three(self):
        with pytest.raises(ValueError):
            MultipleWordsState().new_round(["sky"], ["cielo"], None, 5)

    def test_reset_active_game_clears_started(self):
        game = GameState(scene=Scene.ONE_PIC_TRANSLATION)
        game.one_pic.started = True
        game.multiple_words.started = True
        game.reset_active_game()
        assert not game.one_pic.started
        assert game.multiple_words.started

    def test_reset_restores_attempt_budget(self):
        """A finished round does not leave a spent tracker behind."""
        one_pic = OnePicState()
        one_pic.new_round("sky", "cielo", None, attempts=1)
        one_pic.attempts.record_wrong()
        one_pic.reset(attempts=7)
        assert one_pic.to_dict()["attempts_left"] == 7

        words = MultipleWordsState()
        words.new_round(["sky", "blue", "house"], ["cielo", "azul", "casa"], None, 1)
        words.attempts.record_wrong()
        words.reset()
        assert words.attempts_left == DEFAULT_ATTEMPTS


class TestScenePolicy:
    """Tests for the transition table."""

    def test_menu_starts_games(self):
        assert next_scene(Scene.MENU, SceneEvent.START_ONE_PIC) == Scene.ONE_PIC
        assert next_scene(Scene.MENU, SceneEvent.START_MULTIPLE_WORDS) == Scene.MULTIPLE_WORDS
        assert next_scene(Scene.MENU, SceneEvent.START_CONVERSATION) == Scene.CONVERSATION
        assert next_scene(Scene.MENU, SceneEvent.START_VOCAB) == Scene.VOCAB

    def test_guessing_moves_to_translation(self):
        assert next_scene(Scene.ONE_PIC, SceneEvent.ALL_REVEALED) == Scene.ONE_PIC_TRANSLATION
        assert next_scene(Scene.ONE_PIC, SceneEvent.OUT_OF_ATTEMPTS) == Scene.ONE_PIC_TRANSLATION
        assert next_scene(
            Scene.MULTIPLE_WORDS, SceneEvent.ALL_REVEALED
        ) == Scene.MULTIPLE_WORDS_TRANSLATION

    def test_next_question_returns_to_game(self):
        assert next_scene(Scene.ONE_PIC_TRANSLATION, SceneEvent.NEXT_QUESTION) == Scene.ONE_PIC
        assert next_scene(
            Scene.MULTIPLE_WORDS_TRANSLATION, SceneEvent.NEXT_QUESTION
        ) == Scene.MULTIPLE_WORDS

    @pytest.mark.parametrize("scene", list(Scene))
    def test_change_game_always_returns_to_menu(self, scene):
        assert next_scene(scene, SceneEvent.CHANGE_GAME) == Scene.MENU

    def test_invalid_transition_raises(self):
        with pytest.raises(InvalidTransition) as exc_info:
            next_scene(Scene.MENU, SceneEvent.ALL_REVEALED)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.scene == Scene.MENU

    def test_no_next_question_outside_games(self):
        assert not can_transition(Scene.VOCAB, SceneEvent.NEXT_QUESTION)
        assert not can_transition(Scene.CONVERSATION, SceneEvent.OUT_OF_ATTEMPTS)

    def test_translation_scenes_fold_into_their_game(self):
        assert Scene.ONE_PIC_TRANSLATION.family == Scene.ONE_PIC
        assert Scene.MULTIPLE_WORDS_TRANSLATION.family == Scene.MULTIPLE_WORDS
        assert Scene.VOCAB.family == Scene.VOCAB
