"""
Lingo - Voice-assistant language game backend.

A conversational webhook backend that drives a canvas-rendered web app.
The backend owns the per-session game state machine and provides:
- One Pic One Word and One Pic Multiple Words guessing games
- Letter/word hints and attempt accounting
- Spanish translation practice
- Conversation practice backed by article search
- A per-user vocabulary of learned word pairs
"""

__version__ = "0.1.0"
