"""
Pydantic Schemas for API - Request/response models for the webhook.

These models define the contract between the assistant platform, the
canvas web app and the game backend.

Error Codes:
- UNKNOWN_HANDLER: Webhook named a handler that does not exist
- SESSION_NOT_FOUND: Session does not exist or has expired
- VALIDATION_ERROR: Request body did not match the schema
- INTERNAL_ERROR: A backing store failed
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    UNKNOWN_HANDLER = "UNKNOWN_HANDLER"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class IntentParam(BaseModel):
    """A slot value resolved by the assistant's natural language understanding."""
    original: Optional[str] = Field(None, description="What the user actually said")
    resolved: Any = Field(None, description="Normalized value, trusted as-is")


class UserInfo(BaseModel):
    """Linked account details, if the user linked one."""
    uid: Optional[str] = Field(None, description="Stable user id keying the vocabulary")
    name: Optional[str] = Field(None, description="Given name used in greetings")


class DeviceInfo(BaseModel):
    """Surface capabilities reported by the assistant."""
    capabilities: list[str] = Field(
        default_factory=list, description="e.g. SPEECH, RICH_RESPONSE, INTERACTIVE_CANVAS"
    )


class WebhookRequest(BaseModel):
    """One fulfillment call from the assistant."""
    handler: str = Field(..., description="Webhook handler name, e.g. lang_word")
    session_id: str = Field(..., min_length=1, description="Conversation session id")
    intent_params: dict[str, IntentParam] = Field(
        default_factory=dict, description="word, level_number, color, article_number"
    )
    user: UserInfo = Field(default_factory=UserInfo)
    device: DeviceInfo = Field(default_factory=DeviceInfo)

    def resolved_params(self) -> dict[str, Any]:
        return {name: param.resolved for name, param in self.intent_params.items()}


# =============================================================================
# Response Models
# =============================================================================

class CanvasInfo(BaseModel):
    """
    Canvas update for the web app.

    `data` is empty for a keep-alive update; `url` is only set when the
    web app is first loaded.
    """
    url: Optional[str] = None
    data: list[dict[str, Any]] = Field(default_factory=list)


class WebhookResponse(BaseModel):
    """Spoken prompts (in order) followed by at most one canvas update."""
    session_id: str
    prompts: list[str] = Field(default_factory=list)
    canvas: Optional[CanvasInfo] = None
    scene: str = Field(..., description="Scene after this turn")
    end_conversation: bool = False
    api_version: str = "v1"


class OnePicInfo(BaseModel):
    """One Pic One Word round state."""
    answer: str = ""
    answer_translated: str = ""
    attempts_left: int = 0
    hinted_indices: list[int] = Field(default_factory=list)
    started: bool = False


class MultipleWordsInfo(BaseModel):
    """One Pic Multiple Words round state."""
    answers: list[str] = Field(default_factory=list)
    answers_translated: list[str] = Field(default_factory=list)
    attempts_left: int = 0
    english_guessed_count: int = Field(0, ge=0, le=3)
    spanish_guessed_count: int = Field(0, ge=0, le=3)
    hinted_indices: list[int] = Field(default_factory=list)
    started: bool = False


class SearchResultInfo(BaseModel):
    title: str
    description: str


class ConversationInfo(BaseModel):
    """Conversation practice state."""
    current_prompt: str
    search_results: list[SearchResultInfo] = Field(default_factory=list)
    search_results_description: Optional[str] = None


class SessionStateResponse(BaseModel):
    """Snapshot of one session's game state."""
    session_id: str
    scene: str
    user_id: Optional[str] = None
    turn_count: int = 0
    created_at: float
    last_activity: float
    one_pic: OnePicInfo
    multiple_words: MultipleWordsInfo
    conversation: ConversationInfo
    api_version: str = "v1"


class WordPairInfo(BaseModel):
    english: str
    spanish: str


class VocabularyResponse(BaseModel):
    """All word pairs a user has learned."""
    user_id: str
    words: list[WordPairInfo] = Field(default_factory=list)
    count: int = 0


class ErrorResponse(BaseModel):
    """Standardized error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
