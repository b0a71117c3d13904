"""
FastAPI Application - Webhook for the assistant and read APIs.

Endpoints:
    POST   /api/v1/webhook                    Run an intent handler
    GET    /api/v1/sessions                   List active sessions
    GET    /api/v1/sessions/{id}              Get session game state
    DELETE /api/v1/sessions/{id}              End session
    GET    /api/v1/users/{uid}/vocabulary     Get learned word pairs

Webhook Flow:
    1. The assistant matches an intent and calls POST /webhook with the
       handler name, session id and resolved intent parameters
    2. The session's game state machine handles the turn
    3. The response carries spoken prompts, then at most one canvas
       update for the web app, and the scene after the turn

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import logging
import os

from ..game import GameConfig, DEFAULT_ATTEMPTS

# Environment configuration
LINGO_ENV = os.getenv("LINGO_ENV", "development")
LINGO_CANVAS_URL = os.getenv("LINGO_CANVAS_URL", "http://localhost:5000")
LINGO_ATTEMPTS = int(os.getenv("LINGO_ATTEMPTS", str(DEFAULT_ATTEMPTS)))
LINGO_VOCAB_DIR = os.getenv("LINGO_VOCAB_DIR", None)
LINGO_SEARCH_URL = os.getenv("LINGO_SEARCH_URL", "https://es.wikipedia.org/w/api.php")
LINGO_SEARCH_TIMEOUT = float(os.getenv("LINGO_SEARCH_TIMEOUT", "5"))
LINGO_SESSION_MAX_AGE = int(os.getenv("LINGO_SESSION_MAX_AGE", "3600"))
LINGO_LOG_LEVEL = os.getenv("LINGO_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def configure_logging(level: str = LINGO_LOG_LEVEL):
    """Root logging setup for entry points. No-op if already configured."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_vocabulary_store(store_dir: Optional[str] = None):
    """
    The vocabulary store shared by the server, `lingo play` and `lingo vocab`.

    `store_dir` overrides LINGO_VOCAB_DIR; with neither set the JSON store
    uses its default directory under the home directory.
    """
    from ..providers import JsonFileVocabularyStore

    store_dir = store_dir or LINGO_VOCAB_DIR
    if store_dir:
        return JsonFileVocabularyStore(store_dir=store_dir)
    return JsonFileVocabularyStore()


def build_service(config: Optional[GameConfig] = None, image_provider=None):
    """
    Create the FulfillmentService from environment configuration.

    `config` and `image_provider` override the environment defaults.
    """
    from .service import FulfillmentService
    from ..providers import WikipediaSearchProvider, WordBankImageProvider
    from ..session import SessionManager

    return FulfillmentService(
        session_manager=SessionManager(config=config or GameConfig(attempts=LINGO_ATTEMPTS)),
        image_provider=image_provider or WordBankImageProvider(),
        search_provider=WikipediaSearchProvider(
            base_url=LINGO_SEARCH_URL, timeout=LINGO_SEARCH_TIMEOUT,
        ),
        vocabulary_store=build_vocabulary_store(),
        canvas_url=LINGO_CANVAS_URL,
    )


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional FulfillmentService instance (built from the
            environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .schemas import (
        # Request models
        WebhookRequest,
        # Response models
        WebhookResponse,
        SessionStateResponse,
        SessionListResponse,
        EndSessionResponse,
        VocabularyResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )
    from .. import __version__

    configure_logging()

    app = FastAPI(
        title="Lingo Language Game API",
        description="""
Voice-assistant language game - webhook fulfillment and canvas commands.

## Webhook Flow

`POST /api/v1/webhook` runs one intent handler for a session:

1. The game state machine judges the utterance
2. Attempts, hints and scene transitions are applied
3. The response lists spoken `prompts` first, then the `canvas` update

## Error Codes

| Code | Description |
|------|-------------|
| `UNKNOWN_HANDLER` | Handler name is not configured |
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Request body is malformed |
| `INTERNAL_ERROR` | Vocabulary store failed |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # CORS for the canvas web app
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or build_service()
    app.state.service = api_service
    logger.info("Lingo API ready (env=%s, attempts=%d)", LINGO_ENV, LINGO_ATTEMPTS)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Union[dict, None] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def jsonable_errors(exc: RequestValidationError) -> list[dict]:
        return [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request body",
            status_code=422,
            details={"errors": jsonable_errors(exc)},
        )

    # =========================================================================
    # Webhook Endpoint
    # =========================================================================

    @app.post(
        "/api/v1/webhook",
        response_model=WebhookResponse,
        responses={400: {"model": ErrorResponse, "description": "Unknown handler"}},
        tags=["Fulfillment"],
        summary="Run an intent handler for a conversation turn",
    )
    async def webhook(body: WebhookRequest) -> Union[WebhookResponse, JSONResponse]:
        """
        Handle one conversation turn.

        **Request Body:**
        ```json
        {
            "handler": "lang_word",
            "session_id": "abc123",
            "intent_params": {"word": {"original": "Sky", "resolved": "sky"}},
            "user": {"uid": "user-1", "name": "Ana"},
            "device": {"capabilities": ["SPEECH", "INTERACTIVE_CANVAS"]}
        }
        ```
        """
        api_service.cleanup_stale_sessions(LINGO_SESSION_MAX_AGE)

        result = api_service.handle_webhook(body)
        if isinstance(result, ErrorResponse):
            return make_error_response(
                result.error_code,
                result.error,
                details=result.details,
            )
        return result

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session game state",
    )
    async def get_session(session_id: str) -> Union[SessionStateResponse, JSONResponse]:
        """Get the scene and game counters of a session."""
        result = api_service.get_session(session_id)
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, status_code=404)
        return result

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a session and discard its game state."""
        return api_service.end_session(session_id)

    # =========================================================================
    # Vocabulary Endpoint
    # =========================================================================

    @app.get(
        "/api/v1/users/{user_id}/vocabulary",
        response_model=VocabularyResponse,
        responses={500: {"model": ErrorResponse}},
        tags=["Vocabulary"],
        summary="Get a user's learned word pairs",
    )
    async def get_vocabulary(user_id: str) -> Union[VocabularyResponse, JSONResponse]:
        """Word pairs stored when the user translated them correctly."""
        result = api_service.get_vocabulary(user_id)
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, status_code=500)
        return result

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="lingo",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Lingo Language Game API",
            "version": __version__,
            "environment": LINGO_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn lingo.api.app:app
app = create_app()
