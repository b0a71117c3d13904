"""
Session Manager - Creates and tracks conversation sessions.

LIFECYCLE:
1. First webhook call for a session id -> session created, scene = menu
2. Each intent handler mutates that session's GameState
3. Returning to the menu resets the active game's started flag
4. Conversation ends (or goes stale) -> session removed, ALL state deleted

PERSISTENCE RULES:
- Game state is in-memory and session-scoped only
- State is keyed by session id; nothing is shared between sessions
- The only persistence is the user's vocabulary (see providers.vocabulary)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging
import random
import time

from ..game import GameConfig, GameState

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    One conversation with the assistant.

    Contains:
    - The game state machine for this conversation
    - Who is talking (set from the account-linking payload)
    - Activity timestamps for stale-session cleanup
    """
    session_id: str
    created_at: float
    config: GameConfig = field(default_factory=GameConfig)
    game: GameState = field(default_factory=GameState)

    user_id: str | None = None
    user_name: str | None = None

    last_activity: float = 0.0
    turn_count: int = 0
    ended: bool = False

    # Session metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    rng: random.Random = field(init=False, repr=False)

    def __post_init__(self):
        if not self.last_activity:
            self.last_activity = self.created_at
        self.rng = self.config.make_rng()

    def is_active(self) -> bool:
        return not self.ended

    def touch(self):
        """Record a handled turn."""
        self.last_activity = time.time()
        self.turn_count += 1


class SessionManager:
    """
    Manages conversation sessions.

    Responsibilities:
    - Create sessions on first contact
    - Look sessions up by id
    - Clean up ended and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self._sessions: dict[str, Session] = {}

    def create_session(self, session_id: str, config: GameConfig | None = None) -> Session:
        session = Session(
            session_id=session_id,
            created_at=time.time(),
            config=config or self.config,
        )
        self._sessions[session_id] = session
        logger.info("Created session %s", session_id)
        return session

    def get_or_create(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            session = self.create_session(session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """
        End a session and drop its state.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.ended = True
        session.game = GameState()
        logger.info("Ended session %s after %d turns", session_id, session.turn_count)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End sessions idle for longer than max_age_seconds.

        Called periodically to free memory. Returns the removed ids.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return to_remove
