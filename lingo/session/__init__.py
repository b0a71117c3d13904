"""
Session Module - Conversation sessions and their intent handlers.

A session represents one conversation with the assistant:
- Created on the first webhook call for a session id
- Holds the game state machine for that conversation only
- Mutated by one intent handler per turn
- Destroyed when the conversation ends

Sessions are EPHEMERAL. The only persistence is the user's vocabulary.
"""

from .manager import SessionManager, Session
from .handlers import IntentHandlers, TurnContext, HandlerName, UnknownHandler

__all__ = [
    "SessionManager",
    "Session",
    "IntentHandlers",
    "TurnContext",
    "HandlerName",
    "UnknownHandler",
]
