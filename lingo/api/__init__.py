"""
API Module - Webhook interface for the assistant platform.

The assistant:
1. Matches an intent in the user's utterance
2. Calls the webhook with the handler name and resolved parameters
3. Speaks the returned prompts
4. Forwards the canvas update to the web app

All game state is session-scoped. Only learned vocabulary persists.
"""

from .schemas import (
    # Requests
    WebhookRequest,
    IntentParam,
    UserInfo,
    DeviceInfo,
    # Responses
    WebhookResponse,
    CanvasInfo,
    SessionStateResponse,
    VocabularyResponse,
    ErrorResponse,
    ErrorCode,
)
from .service import FulfillmentService
from .app import create_app, build_service

__all__ = [
    # Requests
    "WebhookRequest",
    "IntentParam",
    "UserInfo",
    "DeviceInfo",
    # Responses
    "WebhookResponse",
    "CanvasInfo",
    "SessionStateResponse",
    "VocabularyResponse",
    "ErrorResponse",
    "ErrorCode",
    # Service
    "FulfillmentService",
    "create_app",
    "build_service",
]
