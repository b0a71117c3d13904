"""
Game Core - The session-driven game state machine.

Pure logic with no I/O:
1. Scenes and the transition policy
2. Per-session game state
3. Answer evaluation
4. Attempt accounting and hints
5. Canvas command construction
"""

from .scene import Scene, SceneEvent, InvalidTransition, next_scene, can_transition
from .state import (
    GameConfig,
    GameState,
    OnePicState,
    MultipleWordsState,
    ConversationState,
    ConversationPrompt,
)
from .evaluator import Match, evaluate
from .attempts import AttemptTracker, AttemptOutcome, DEFAULT_ATTEMPTS
from .hints import HintGenerator, mask_answer
from .canvas import Canvas, CanvasCommand, CanvasResponse, emit

__all__ = [
    "Scene",
    "SceneEvent",
    "InvalidTransition",
    "next_scene",
    "can_transition",
    "GameConfig",
    "GameState",
    "OnePicState",
    "MultipleWordsState",
    "ConversationState",
    "ConversationPrompt",
    "Match",
    "evaluate",
    "AttemptTracker",
    "AttemptOutcome",
    "DEFAULT_ATTEMPTS",
    "HintGenerator",
    "mask_answer",
    "Canvas",
    "CanvasCommand",
    "CanvasResponse",
    "emit",
]
