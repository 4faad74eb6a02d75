"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of the maze:
- Created when the player starts a game (encounters distributed once)
- Holds the current game state
- Routes room entries, choices and item uses through the reducer
- Removed when the game ends or goes idle

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session, SessionState, SelectionPolicy
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "SelectionPolicy",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
