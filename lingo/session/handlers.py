"""
Intent Handlers - The fulfillment logic behind every webhook call.

Each handler reads the session's GameState, judges the utterance,
moves the scene through the transition policy and fills the
CanvasResponse.

Flow for a guess:
    utterance -> evaluate() -> (wrong) AttemptTracker -> maybe hint
              -> next_scene() -> canvas command + spoken text

Handlers never raise for bad user input. External failures (image
lookup, search, vocabulary read) are logged and the turn ends without
a canvas update. Vocabulary writes are fire-and-forget.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging

from ..game import (
    AttemptOutcome,
    CanvasCommand,
    CanvasResponse,
    ConversationPrompt,
    Scene,
    SceneEvent,
    emit,
    evaluate,
    next_scene,
)
from ..providers import (
    ImageLookup,
    ImageProvider,
    ProviderError,
    SearchProvider,
    VocabularyStore,
)
from .manager import Session

logger = logging.getLogger(__name__)

INTERACTIVE_CANVAS = "INTERACTIVE_CANVAS"
DEFAULT_CANVAS_URL = "http://localhost:5000"
SEARCH_LIMIT = 3

INSTRUCTIONS = "Hello user, you can open a new level or change questions."
CONVERSATION_GREETING = "¡Hola! ¿Cómo estás hoy?"
CONVERSATION_ASK_TOPIC = "¡Qué bien! ¿De qué tema quieres hablar?"
CONVERSATION_PICK_ARTICLE = "Dime el número del artículo que quieres leer."
CONVERSATION_NEXT_TOPIC = "¿Sobre qué más quieres hablar?"

TINTS = {
    "black": 0x000000,
    "blue": 0x0000FF,
    "green": 0x00FF00,
    "cyan": 0x00FFFF,
    "indigo": 0x4B0082,
    "magenta": 0x6A0DAD,
    "maroon": 0x800000,
    "grey": 0x808080,
    "brown": 0xA52A2A,
    "violet": 0xEE82EE,
    "red": 0xFF0000,
    "purple": 0xFF00FF,
    "orange": 0xFFA500,
    "pink": 0xFFC0CB,
    "yellow": 0xFFFF00,
    "white": 0xFFFFFF,
}


def _spoken(word: Any) -> str:
    return "that" if word is None else str(word)


class HandlerName(str, Enum):
    """Webhook handler names configured in the Actions project."""
    LANG_WELCOME = "lang_welcome"
    LANG_FALLBACK = "lang_fallback"
    LANG_INSTRUCTIONS = "lang_instructions"
    LANG_START_ONE_PIC = "lang_start_one_pic"
    LANG_START_MULTIPLE_WORDS = "lang_start_multiple_words"
    LANG_WORD = "lang_word"
    LANG_WORD_TRANSLATION = "lang_word_translation"
    LANG_NEXT_QUESTION = "lang_next_question"
    LANG_CHANGE_GAME = "lang_change_game"
    LANG_START_CONVERSATION = "lang_start_conversation"
    LANG_CONVERSATION_MESSAGE = "lang_conversation_message"
    LANG_ARTICLE = "lang_article"
    LANG_START_VOCAB = "lang_start_vocab"
    CHANGE_COLOR = "change_color"
    CHANGE_LEVEL = "change_level"
    CHANGE_QUESTION = "change_question"


class UnknownHandler(LookupError):
    """Raised when a webhook names a handler that does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Unknown handler: {name}")
        self.name = name


@dataclass
class TurnContext:
    """
    One webhook turn.

    params holds the resolved intent parameters (word, level_number,
    color, article_number); a missing parameter reads as None.
    """
    session: Session
    params: dict[str, Any] = field(default_factory=dict)
    capabilities: list[str] = field(default_factory=list)
    response: CanvasResponse = field(default_factory=CanvasResponse)

    @property
    def game(self):
        return self.session.game

    @property
    def scene(self) -> Scene:
        return self.session.game.scene

    def param(self, name: str) -> Any:
        return self.params.get(name)


@dataclass
class IntentHandlers:
    """
    Dispatches webhook handler names to their implementation.

    Usage:
        handlers = IntentHandlers(image_provider, search_provider, store)
        response = handlers.handle("lang_word", ctx)
    """
    image_provider: ImageProvider
    search_provider: SearchProvider
    vocabulary_store: VocabularyStore
    canvas_url: str = DEFAULT_CANVAS_URL

    def handle(self, name: str, ctx: TurnContext) -> CanvasResponse:
        """
        Run a handler for one turn.

        Raises:
            UnknownHandler: if `name` is not a configured handler
        """
        handler = self._get_handler(name)
        if handler is None:
            raise UnknownHandler(name)

        logger.debug(
            "Session %s: %s in scene %s",
            ctx.session.session_id, name, ctx.scene.value,
        )
        handler(ctx)
        return ctx.response

    def _get_handler(self, name: str) -> Callable[[TurnContext], None] | None:
        """Get the handler function for a handler name."""
        try:
            handler_name = HandlerName(name)
        except ValueError:
            return None
        handlers = {
            HandlerName.LANG_WELCOME: self._handle_welcome,
            HandlerName.LANG_FALLBACK: self._handle_fallback,
            HandlerName.LANG_INSTRUCTIONS: self._handle_instructions,
            HandlerName.LANG_START_ONE_PIC: self._handle_start_one_pic,
            HandlerName.LANG_START_MULTIPLE_WORDS: self._handle_start_multiple_words,
            HandlerName.LANG_WORD: self._handle_word,
            HandlerName.LANG_WORD_TRANSLATION: self._handle_word_translation,
            HandlerName.LANG_NEXT_QUESTION: self._handle_next_question,
            HandlerName.LANG_CHANGE_GAME: self._handle_change_game,
            HandlerName.LANG_START_CONVERSATION: self._handle_start_conversation,
            HandlerName.LANG_CONVERSATION_MESSAGE: self._handle_conversation_message,
            HandlerName.LANG_ARTICLE: self._handle_article,
            HandlerName.LANG_START_VOCAB: self._handle_start_vocab,
            HandlerName.CHANGE_COLOR: self._handle_change_color,
            HandlerName.CHANGE_LEVEL: self._handle_change_level,
            HandlerName.CHANGE_QUESTION: self._handle_change_question,
        }
        return handlers.get(handler_name)

    # =========================================================================
    # Scene helpers
    # =========================================================================

    def _transition(self, ctx: TurnContext, event: SceneEvent) -> Scene:
        """Move the session through the transition policy."""
        current = ctx.scene
        target = next_scene(current, event)
        if target.family != current.family:
            # Leaving a game: it starts over with its intro next time
            ctx.game.reset_active_game(ctx.session.config.attempts)
        ctx.game.scene = target
        return target

    def _store_pair(self, ctx: TurnContext, english: str, spanish: str):
        """Save a learned pair. Failures are logged, never surfaced."""
        user_id = ctx.session.user_id
        if not user_id:
            logger.debug("Session %s has no linked user, not storing %s", ctx.session.session_id, english)
            return
        try:
            self.vocabulary_store.append_pair(user_id, english, spanish)
        except Exception:
            logger.exception("Failed to store %s/%s for user %s", english, spanish, user_id)

    # =========================================================================
    # General handlers
    # =========================================================================

    def _handle_welcome(self, ctx: TurnContext):
        response = ctx.response
        if INTERACTIVE_CANVAS not in ctx.capabilities:
            response.say("Sorry, this device does not support Interactive Canvas!")
            response.end_conversation = True
            return
        name = ctx.session.user_name or "there"
        response.say(
            f"Hi, {name} Welcome to the AOG Education language section. "
            "Please choose a game from the menu below."
        )
        response.load_web_app(self.canvas_url)

    def _handle_fallback(self, ctx: TurnContext):
        ctx.response.say("I don't understand. You can open a new level or change questions.")
        ctx.response.keep_canvas()

    def _handle_instructions(self, ctx: TurnContext):
        ctx.response.say(INSTRUCTIONS)
        ctx.response.keep_canvas()

    def _handle_change_color(self, ctx: TurnContext):
        color = ctx.param("color")
        color = str(color).lower() if color is not None else None
        if color not in TINTS:
            ctx.response.say("Sorry, I don't know that color. Try red, blue, or green!")
            ctx.response.keep_canvas()
            return
        ctx.response.say(f"Ok, I changed my color to {color}. Anything else?")
        ctx.response.set_canvas(CanvasCommand.TINT, tint=TINTS[color])

    def _handle_change_level(self, ctx: TurnContext):
        level = ctx.param("level_number")
        ctx.response.say(f"Ok, opening level {level}. What else?")
        ctx.response.set_canvas(CanvasCommand.LEVEL, level=level)

    def _handle_change_question(self, ctx: TurnContext):
        ctx.response.say("Ok, opening questions.")
        ctx.response.set_canvas(CanvasCommand.QUESTIONS)

    def _handle_change_game(self, ctx: TurnContext):
        previous = ctx.scene
        self._transition(ctx, SceneEvent.CHANGE_GAME)
        emit(ctx.response, "Ok, returning to the main menu.", CanvasCommand.LANG_MENU, previous.value)

    # =========================================================================
    # One Pic One Word
    # =========================================================================

    def _handle_start_one_pic(self, ctx: TurnContext):
        try:
            lookup = self.image_provider.lookup_single()
        except ProviderError:
            logger.exception("Image lookup failed for session %s", ctx.session.session_id)
            return

        self._transition(ctx, SceneEvent.START_ONE_PIC)
        one_pic = ctx.game.one_pic
        if not one_pic.started:
            ctx.response.say("Ok, starting one pic one word")
            ctx.response.say("To play this game, please guess the english word shown by the picture.")
            one_pic.started = True

        self._new_one_pic_round(ctx, lookup)

    def _new_one_pic_round(self, ctx: TurnContext, lookup: ImageLookup):
        one_pic = ctx.game.one_pic
        one_pic.new_round(
            answer=lookup.word,
            answer_translated=lookup.word_translated,
            image_url=lookup.url,
            attempts=ctx.session.config.attempts,
            rng=ctx.session.rng,
        )
        ctx.response.set_canvas(
            CanvasCommand.LANG_START_ONE_PIC,
            value={
                "url": lookup.url,
                "word": lookup.word,
                "wordTranslated": lookup.word_translated,
                "attempts": one_pic.attempts_left,
            },
        )

    def _guess_one_pic(self, ctx: TurnContext, word: str | None):
        one_pic = ctx.game.one_pic
        response = ctx.response

        if evaluate(word, one_pic.answer):
            self._show_one_pic_english(ctx, "That is correct! Try translating it to spanish")
            return

        outcome = one_pic.attempts.record_wrong()
        if outcome is AttemptOutcome.REVEAL:
            self._transition(ctx, SceneEvent.OUT_OF_ATTEMPTS)
            emit(
                response,
                "You have run out of attempts. The correct answers are shown below.",
                CanvasCommand.LANG_ONE_PIC_SHOW_ANSWER,
                {"english": one_pic.answer, "spanish": one_pic.answer_translated},
            )
            return

        if outcome is AttemptOutcome.HINT:
            index = one_pic.give_hint()
            if one_pic.fully_hinted():
                self._show_one_pic_english(
                    ctx, "That is incorrect! Every letter is revealed now. Try translating it to spanish",
                )
                return
            emit(
                response,
                "That is incorrect! Here is a hint.",
                CanvasCommand.LANG_ONE_PIC_SHOW_HINT,
                {"hint": one_pic.masked(), "index": index, "attempts": one_pic.attempts_left},
            )
            return

        emit(
            response,
            "That is incorrect! Try again.",
            CanvasCommand.LANG_ONE_PIC_UPDATE_ATTEMPTS,
            one_pic.attempts_left,
        )

    def _show_one_pic_english(self, ctx: TurnContext, text: str):
        one_pic = ctx.game.one_pic
        self._transition(ctx, SceneEvent.ALL_REVEALED)
        emit(
            ctx.response,
            text,
            CanvasCommand.LANG_ONE_PIC_SHOW_ENGLISH,
            {"word": one_pic.answer, "spanish": one_pic.answer_translated},
        )

    def _translate_one_pic(self, ctx: TurnContext, word: str | None):
        one_pic = ctx.game.one_pic
        if not evaluate(word, one_pic.answer_translated):
            ctx.response.say("That is incorrect! Try again.")
            ctx.response.keep_canvas()
            return

        one_pic.translated = True
        emit(
            ctx.response,
            'That is correct! You can say "Next Question" to see something else '
            'or "Questions" to go back to the main menu.',
            CanvasCommand.LANG_ONE_PIC_SHOW_SPANISH,
            one_pic.answer_translated,
        )
        self._store_pair(ctx, one_pic.answer, one_pic.answer_translated)

    # =========================================================================
    # One Pic Multiple Words
    # =========================================================================

    def _handle_start_multiple_words(self, ctx: TurnContext):
        try:
            lookup = self.image_provider.lookup_multiple()
        except ProviderError:
            logger.exception("Image lookup failed for session %s", ctx.session.session_id)
            return

        self._transition(ctx, SceneEvent.START_MULTIPLE_WORDS)
        multiple_words = ctx.game.multiple_words
        if not multiple_words.started:
            ctx.response.say("Ok, starting one pic multiple word")
            ctx.response.say("To play this game, please guess several english words shown by the picture.")
            multiple_words.started = True

        self._new_multiple_words_round(ctx, lookup)

    def _new_multiple_words_round(self, ctx: TurnContext, lookup: ImageLookup):
        multiple_words = ctx.game.multiple_words
        multiple_words.new_round(
            answers=list(lookup.words),
            answers_translated=list(lookup.translations),
            image_url=lookup.url,
            attempts=ctx.session.config.attempts,
            rng=ctx.session.rng,
        )
        ctx.response.set_canvas(
            CanvasCommand.LANG_START_MULTIPLE_WORDS,
            value={
                "url": lookup.url,
                "words": list(lookup.words),
                "wordsTranslated": list(lookup.translations),
                "attempts": multiple_words.attempts_left,
            },
        )

    def _guess_multiple_words(self, ctx: TurnContext, word: str | None):
        multiple_words = ctx.game.multiple_words
        response = ctx.response

        match = evaluate(word, multiple_words.answers)
        if match:
            if match.index in multiple_words.revealed:
                response.say("You already have that word. Try another one.")
                response.keep_canvas()
                return
            multiple_words.english_guessed.add(match.index)
            self._show_multiple_words_english(ctx, match.index, "That is a correct word")
            return

        outcome = multiple_words.attempts.record_wrong()
        if outcome is AttemptOutcome.REVEAL:
            self._transition(ctx, SceneEvent.OUT_OF_ATTEMPTS)
            emit(
                response,
                "You have run out of attempts. The correct answers are shown below.",
                CanvasCommand.LANG_MULTIPLE_WORDS_SHOW_ANSWER,
                {
                    "english": list(multiple_words.answers),
                    "spanish": list(multiple_words.answers_translated),
                },
            )
            return

        if outcome is AttemptOutcome.HINT:
            index = multiple_words.give_hint()
            if index is not None:
                self._show_multiple_words_english(
                    ctx, index, "That is incorrect! Here is one of the words.", hinted=True,
                )
                return

        emit(
            response,
            "That is incorrect! Try again.",
            CanvasCommand.LANG_MULTIPLE_WORDS_UPDATE_ATTEMPTS,
            multiple_words.attempts_left,
        )

    def _show_multiple_words_english(
        self,
        ctx: TurnContext,
        index: int,
        text: str,
        hinted: bool = False,
    ):
        multiple_words = ctx.game.multiple_words
        done = multiple_words.all_revealed()
        if done:
            self._transition(ctx, SceneEvent.ALL_REVEALED)
            text = "Sweet! Try translating these words to spanish"
        emit(
            ctx.response,
            text,
            CanvasCommand.LANG_MULTIPLE_WORDS_SHOW_ENGLISH,
            {
                "word": multiple_words.answers[index],
                "index": index,
                "hinted": hinted,
                "attempts": multiple_words.attempts_left,
                "showSpanish": done,
                "spanishWords": list(multiple_words.answers_translated),
            },
        )

    def _translate_multiple_words(self, ctx: TurnContext, word: str | None):
        multiple_words = ctx.game.multiple_words
        response = ctx.response

        match = evaluate(word, multiple_words.answers_translated)
        if not match:
            response.say("That is incorrect! Try again.")
            response.keep_canvas()
            return
        if match.index in multiple_words.spanish_guessed:
            response.say("You already translated that word. Try another one.")
            response.keep_canvas()
            return

        multiple_words.spanish_guessed.add(match.index)
        if multiple_words.all_translated():
            text = (
                'You\'ve got them all! You can say "Next Question" to see something else '
                'or "Questions" to go back to the main menu.'
            )
        else:
            text = "That is a correct word"
        emit(
            response,
            text,
            CanvasCommand.LANG_MULTIPLE_WORDS_SHOW_SPANISH,
            {"word": multiple_words.answers_translated[match.index], "index": match.index},
        )
        self._store_pair(
            ctx,
            multiple_words.answers[match.index],
            multiple_words.answers_translated[match.index],
        )

    # =========================================================================
    # Guessing dispatch
    # =========================================================================

    def _handle_word(self, ctx: TurnContext):
        word = ctx.param("word")
        scene = ctx.scene

        if scene == Scene.CONVERSATION:
            self._converse(ctx, word)
            return
        if scene.is_translation:
            self._handle_word_translation(ctx)
            return
        if scene not in {Scene.ONE_PIC, Scene.MULTIPLE_WORDS}:
            self._handle_fallback(ctx)
            return

        ctx.response.say(f"Ok, let's see if {_spoken(word)} is correct")
        if scene == Scene.ONE_PIC:
            self._guess_one_pic(ctx, word)
        else:
            self._guess_multiple_words(ctx, word)

    def _handle_word_translation(self, ctx: TurnContext):
        word = ctx.param("word")
        scene = ctx.scene
        if not scene.is_translation:
            self._handle_fallback(ctx)
            return

        ctx.response.say(f"Ok, let's see if {_spoken(word)} is correct")
        if scene == Scene.ONE_PIC_TRANSLATION:
            self._translate_one_pic(ctx, word)
        else:
            self._translate_multiple_words(ctx, word)

    def _handle_next_question(self, ctx: TurnContext):
        scene = ctx.scene
        if scene.is_one_pic:
            lookup_image, new_round = self.image_provider.lookup_single, self._new_one_pic_round
        elif scene.is_multiple_words:
            lookup_image, new_round = self.image_provider.lookup_multiple, self._new_multiple_words_round
        else:
            ctx.response.say("There is no question to skip. Please choose a game from the menu.")
            ctx.response.keep_canvas()
            return

        ctx.response.say("Ok, starting next question")
        try:
            lookup = lookup_image()
        except ProviderError:
            logger.exception("Image lookup failed for session %s", ctx.session.session_id)
            return
        self._transition(ctx, SceneEvent.NEXT_QUESTION)
        new_round(ctx, lookup)

    # =========================================================================
    # Conversation practice
    # =========================================================================

    def _handle_start_conversation(self, ctx: TurnContext):
        self._transition(ctx, SceneEvent.START_CONVERSATION)
        ctx.game.conversation.reset()
        ctx.response.say("Ok, starting conversation practice. Answer me in spanish.")
        ctx.response.say(CONVERSATION_GREETING)
        ctx.response.set_canvas(
            CanvasCommand.LANG_START_CONVERSATION,
            value={"message": CONVERSATION_GREETING},
        )

    def _handle_conversation_message(self, ctx: TurnContext):
        if ctx.scene != Scene.CONVERSATION:
            self._handle_fallback(ctx)
            return
        self._converse(ctx, ctx.param("word"))

    def _converse(self, ctx: TurnContext, message: str | None):
        conversation = ctx.game.conversation
        response = ctx.response

        if message is None:
            response.say("Perdón, no te entendí.")
            response.keep_canvas()
            return

        if conversation.current_prompt is ConversationPrompt.GREETING:
            conversation.current_prompt = ConversationPrompt.ASK_TOPIC
            response.say(CONVERSATION_ASK_TOPIC)
            response.set_canvas(
                CanvasCommand.LANG_ADD_CONVERSATION_MESSAGE,
                value={"messages": [
                    {"sender": "user", "text": message},
                    {"sender": "assistant", "text": CONVERSATION_ASK_TOPIC},
                ]},
            )
            return

        if conversation.current_prompt is ConversationPrompt.PICK_ARTICLE:
            response.say(CONVERSATION_PICK_ARTICLE)
            response.keep_canvas()
            return

        try:
            results = self.search_provider.search(message, limit=SEARCH_LIMIT)
        except ProviderError:
            logger.exception("Search failed for session %s", ctx.session.session_id)
            return

        if not results:
            response.say(f"No encontré nada sobre {message}. Prueba otro tema.")
            response.keep_canvas()
            return

        conversation.search_results = results
        conversation.search_results_description = None
        conversation.current_prompt = ConversationPrompt.PICK_ARTICLE
        response.say(f"Encontré {len(results)} artículos. {CONVERSATION_PICK_ARTICLE}")
        response.set_canvas(
            CanvasCommand.LANG_ADD_CONVERSATION_SEARCH_MESSAGE,
            value={"query": message, "results": [r.to_dict() for r in results]},
        )

    def _handle_article(self, ctx: TurnContext):
        conversation = ctx.game.conversation
        if ctx.scene != Scene.CONVERSATION or conversation.current_prompt is not ConversationPrompt.PICK_ARTICLE:
            ctx.response.say("Tell me a topic first, then pick an article by its number.")
            return

        results = conversation.search_results
        try:
            number = int(ctx.param("article_number"))
        except (TypeError, ValueError):
            number = 0
        if not 1 <= number <= len(results):
            ctx.response.say(f"Please pick an article between 1 and {len(results)}.")
            return

        article = results[number - 1]
        conversation.search_results_description = article.description
        conversation.current_prompt = ConversationPrompt.ASK_TOPIC
        ctx.response.say(f"Aquí está el artículo {article.title}. {CONVERSATION_NEXT_TOPIC}")
        ctx.response.set_canvas(
            CanvasCommand.LANG_ADD_CONVERSATION_MESSAGE,
            value={"messages": [
                {"sender": "assistant", "title": article.title, "text": article.description},
                {"sender": "assistant", "text": CONVERSATION_NEXT_TOPIC},
            ]},
        )

    # =========================================================================
    # Vocabulary review
    # =========================================================================

    def _handle_start_vocab(self, ctx: TurnContext):
        user_id = ctx.session.user_id
        pairs = []
        if user_id:
            try:
                pairs = self.vocabulary_store.fetch_pairs(user_id)
            except ProviderError:
                logger.exception("Vocabulary fetch failed for user %s", user_id)
                return

        self._transition(ctx, SceneEvent.START_VOCAB)
        if pairs:
            text = f"Here are the {len(pairs)} words you have learned."
        else:
            text = "You haven't learned any words yet. Play a game to start your vocabulary."
        emit(ctx.response, text, CanvasCommand.LANG_VOCAB, [p.to_dict() for p in pairs])
