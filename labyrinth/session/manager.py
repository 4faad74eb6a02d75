"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Session created -> encounters distributed over a fresh maze
   (seeded, so a seed reproduces the same maze contents)
2. During the game, every room entry, choice and item use goes
   through the session's GameLoop, one call at a time
3. Death or insanity -> session marked GAME_OVER (state stays readable)
4. Client ends it, or it sits idle past the TTL -> removed from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- GameState.to_dict() gives a lossless snapshot for callers that want
  to store one
"""

from __future__ import annotations
import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..config import DEFAULT_RULES, RulesConfig
from ..content_schema.catalog import Catalog
from ..engine_core.distribution import EventDistributor
from ..engine_core.maze import MazeGrid
from ..engine_core.reducer import Reducer, WeightedSelector, first_available
from ..engine_core.state import GamePhase, GameState, PlayerState

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Player died or went insane
    ENDED = "ended"  # Closed by the client
    ABANDONED = "abandoned"  # Cleaned up after inactivity


class SelectionPolicy(Enum):
    """How a room with several encounters picks the one to present."""
    FIRST = "first"
    WEIGHTED = "weighted"


@dataclass
class Session:
    """
    One play-through.

    Contains:
    - The maze and the engine configured for this run
    - Current canonical game state
    - Session metadata

    Callers must hold `lock` while reading and replacing game_state.
    """
    session_id: str
    grid: MazeGrid
    reducer: Reducer
    created_at: float
    seed: int

    state: SessionState = SessionState.ACTIVE
    game_state: GameState | None = None
    last_activity: float = 0.0

    metadata: dict[str, Any] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def catalog(self) -> Catalog:
        return self.reducer.catalog

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    def touch(self) -> None:
        self.last_activity = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions (maze, distribution, initial player)
    - Track active sessions
    - Clean up finished and idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        catalog: Catalog,
        rules: RulesConfig = DEFAULT_RULES,
        session_ttl: int = 3600,
    ):
        self.catalog = catalog
        self.rules = rules
        self.session_ttl = session_ttl
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        seed: int | None = None,
        grid: MazeGrid | None = None,
        selection: SelectionPolicy = SelectionPolicy.FIRST,
    ) -> Session:
        """
        Create a new game session.

        Args:
            seed: Random seed for distribution and in-game rolls
                  (a fresh one is drawn if omitted)
            grid: Maze topology (default: open 8x8 grid)
            selection: Encounter selection policy for populated rooms

        Returns:
            New Session with the player standing in the start room

        Raises:
            CapacityError if the catalog cannot fill the maze
        """
        if seed is None:
            seed = random.randrange(2**32)
        grid = grid or MazeGrid.open_grid()
        rng = random.Random(seed)

        allocation = EventDistributor(rng=rng, rules=self.rules).distribute(grid, self.catalog)
        selector = WeightedSelector(rng, self.rules) if selection == SelectionPolicy.WEIGHTED else first_available
        reducer = Reducer(catalog=self.catalog, rng=rng, selector=selector, rules=self.rules)

        session_id = str(uuid.uuid4())
        now = time.time()
        game_state = GameState(
            game_id=session_id,
            player=PlayerState.initial(self.rules),
            allocation=allocation,
            phase=GamePhase.PLAYING,
            current_room_id=grid.start_room.room_id,
            random_seed=seed,
        )
        session = Session(
            session_id=session_id,
            grid=grid,
            reducer=reducer,
            created_at=now,
            seed=seed,
            game_state=game_state,
            last_activity=now,
            metadata={"selection": selection.value},
        )

        with self._lock:
            self._sessions[session_id] = session
        logger.info("Created session %s (seed=%d, %d encounters placed)",
                    session_id, seed, allocation.total_assigned())
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "ended") -> Session | None:
        """
        End a session and remove it from memory.

        Returns the removed session, or None if it did not exist.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session:
            if reason == "game_over":
                session.state = SessionState.GAME_OVER
            elif reason == "stale":
                session.state = SessionState.ABANDONED
            else:
                session.state = SessionState.ENDED
            logger.info("Session %s ended (%s)", session_id, reason)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> int:
        """
        Remove sessions idle for longer than max_age_seconds
        (default: the manager's TTL). Returns how many were removed.
        """
        max_age = self.session_ttl if max_age_seconds is None else max_age_seconds
        current_time = time.time()
        stale = [
            session_id for session_id, session in list(self._sessions.items())
            if current_time - session.last_activity > max_age
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
