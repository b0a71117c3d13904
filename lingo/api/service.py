"""
API Service - Business logic layer between the webhook and the game.

The service:
1. Maps webhook requests to sessions
2. Runs the named intent handler
3. Formats responses for the assistant and the canvas
4. Serves session snapshots and vocabulary lists

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    CanvasInfo,
    ConversationInfo,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    MultipleWordsInfo,
    OnePicInfo,
    SessionStateResponse,
    VocabularyResponse,
    WebhookRequest,
    WebhookResponse,
    WordPairInfo,
)
from ..game import CanvasResponse
from ..providers import (
    ImageProvider,
    InMemoryVocabularyStore,
    ProviderError,
    SearchProvider,
    VocabularyStore,
    WikipediaSearchProvider,
    WordBankImageProvider,
)
from ..session import (
    HandlerName,
    IntentHandlers,
    Session,
    SessionManager,
    TurnContext,
)
from ..session.handlers import DEFAULT_CANVAS_URL

logger = logging.getLogger(__name__)


@dataclass
class FulfillmentService:
    """
    Main service behind the webhook.

    Usage:
        service = FulfillmentService()
        response = service.handle_webhook(WebhookRequest(
            handler="lang_start_one_pic", session_id="abc",
        ))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    image_provider: ImageProvider = field(default_factory=WordBankImageProvider)
    search_provider: SearchProvider = field(default_factory=WikipediaSearchProvider)
    vocabulary_store: VocabularyStore = field(default_factory=InMemoryVocabularyStore)
    canvas_url: str = DEFAULT_CANVAS_URL

    handlers: IntentHandlers = field(init=False)

    def __post_init__(self):
        self.handlers = IntentHandlers(
            image_provider=self.image_provider,
            search_provider=self.search_provider,
            vocabulary_store=self.vocabulary_store,
            canvas_url=self.canvas_url,
        )

    def handle_webhook(self, request: WebhookRequest) -> WebhookResponse | ErrorResponse:
        """
        Run one fulfillment turn.

        Unknown handler names are reported as UNKNOWN_HANDLER and do not
        create a session.
        """
        if request.handler not in {h.value for h in HandlerName}:
            return self._unknown_handler(request.handler)

        session = self.session_manager.get_or_create(request.session_id)
        if request.user.uid:
            session.user_id = request.user.uid
        if request.user.name:
            session.user_name = request.user.name

        ctx = TurnContext(
            session=session,
            params=request.resolved_params(),
            capabilities=list(request.device.capabilities),
        )
        result = self.handlers.handle(request.handler, ctx)

        session.touch()
        return self._to_webhook_response(session, result)

    def get_session(self, session_id: str) -> SessionStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return ErrorResponse(
                error=f"Session {session_id} not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> EndSessionResponse:
        success = self.session_manager.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def cleanup_stale_sessions(self, max_age_seconds: int) -> list[str]:
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        if removed:
            logger.info("Removed %d stale sessions", len(removed))
        return removed

    def get_vocabulary(self, user_id: str) -> VocabularyResponse | ErrorResponse:
        try:
            pairs = self.vocabulary_store.fetch_pairs(user_id)
        except ProviderError as e:
            logger.exception("Vocabulary fetch failed for user %s", user_id)
            return ErrorResponse(error=str(e), error_code=ErrorCode.INTERNAL_ERROR)
        return VocabularyResponse(
            user_id=user_id,
            words=[WordPairInfo(english=p.english, spanish=p.spanish) for p in pairs],
            count=len(pairs),
        )

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _unknown_handler(self, name: str) -> ErrorResponse:
        logger.warning("Webhook called with unknown handler %r", name)
        return ErrorResponse(
            error=f"Unknown handler: {name}",
            error_code=ErrorCode.UNKNOWN_HANDLER,
            details={"valid_handlers": sorted(h.value for h in HandlerName)},
        )

    def _to_webhook_response(self, session: Session, result: CanvasResponse) -> WebhookResponse:
        canvas = None
        if result.canvas is not None:
            canvas = CanvasInfo(url=result.canvas.url, data=result.canvas.data())
        return WebhookResponse(
            session_id=session.session_id,
            prompts=list(result.prompts),
            canvas=canvas,
            scene=session.game.scene.value,
            end_conversation=result.end_conversation,
        )

    def _session_to_response(self, session: Session) -> SessionStateResponse:
        game = session.game.to_dict()
        return SessionStateResponse(
            session_id=session.session_id,
            scene=game["scene"],
            user_id=session.user_id,
            turn_count=session.turn_count,
            created_at=session.created_at,
            last_activity=session.last_activity,
            one_pic=OnePicInfo(**game["one_pic"]),
            multiple_words=MultipleWordsInfo(**game["multiple_words"]),
            conversation=ConversationInfo(**game["conversation"]),
        )
