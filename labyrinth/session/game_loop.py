"""
Game Loop - The room-by-room gameplay loop.

The loop:
1. Player enters a room (statuses tick, then the encounter is shown)
2. Player picks a choice (or uses items first)
3. Effects are applied and reported
4. Repeat until the player dies or goes insane

Calls for one session are serialized on the session lock.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

from ..engine_core.action import Action, ActionResult
from ..engine_core.effects import EffectResult
from ..engine_core.reducer import ChoiceOutcome, EncounterView, RoomEntry
from ..engine_core.state import GamePhase
from ..engine_core.status import TurnTick
from .manager import SessionState

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    EXPLORING = "exploring"  # Free to enter a room
    AWAITING_CHOICE = "awaiting_choice"  # An encounter is being presented
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of one loop call.

    Exactly one of encounter / outcome / item_result is set on success,
    depending on the call. tick is set when the call advanced a turn.
    """
    success: bool
    loop_state: LoopState

    encounter: EncounterView | None = None
    outcome: ChoiceOutcome | None = None
    item_result: EffectResult | None = None
    tick: TurnTick | None = None

    messages: list[str] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    game_over_reason: str | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)

        result = loop.enter_room("3,4")
        show(result.encounter)

        result = loop.choose(0)
        if not result.success and result.error_code == "REQUIREMENT_NOT_MET":
            show(result.details["failureReasons"])
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    def state(self) -> LoopState:
        game_state = self.session.game_state
        if game_state is None or game_state.phase == GamePhase.GAME_OVER:
            return LoopState.GAME_OVER
        if game_state.current_encounter is not None:
            return LoopState.AWAITING_CHOICE
        return LoopState.EXPLORING

    def enter_room(self, room_id: str) -> TurnResult:
        """Move into a room. Costs a turn."""
        if self.session.grid.get_room(room_id) is None:
            return TurnResult(
                success=False,
                loop_state=self.state,
                error=f"Unknown room: {room_id}",
                error_code="INVALID_ACTION",
            )
        return self._run(Action.enter_room(room_id))

    def choose(self, choice_index: int) -> TurnResult:
        """Resolve a choice of the presented encounter."""
        return self._run(Action.select_choice(choice_index))

    def use_item(self, item_id: str, quantity: int = 1) -> TurnResult:
        """Use an inventory item. Does not cost a turn."""
        return self._run(Action.use_item(item_id, quantity))

    def end_turn(self) -> TurnResult:
        """Wait in place for one turn."""
        return self._run(Action.end_turn())

    def current_encounter(self) -> EncounterView | None:
        with self.session.lock:
            if self.session.game_state is None:
                return None
            return self.session.reducer.current_view(self.session.game_state)

    def _run(self, action: Action) -> TurnResult:
        with self.session.lock:
            if self.session.game_state is None:
                return TurnResult(
                    success=False,
                    loop_state=LoopState.GAME_OVER,
                    error="Session has no game state",
                    error_code="INVALID_ACTION",
                )
            result = self.session.reducer.apply(self.session.game_state, action)
            self.session.touch()
            if not result.success:
                logger.debug("Action %s rejected: %s", action.action_type.value, result.error)
                return TurnResult(
                    success=False,
                    loop_state=self.state,
                    error=result.error,
                    error_code=result.error_code,
                    details=result.details,
                )
            self.session.game_state = result.new_state
            if result.new_state.phase == GamePhase.GAME_OVER and self.session.is_active():
                self.session.state = SessionState.GAME_OVER
                logger.info("Session %s game over (%s)", self.session.session_id,
                            result.new_state.player.game_over_reason)
            return self._to_turn_result(result)

    def _to_turn_result(self, result: ActionResult) -> TurnResult:
        turn = TurnResult(success=True, loop_state=self.state, messages=list(result.state_changes))
        outcome = result.outcome
        if isinstance(outcome, RoomEntry):
            turn.encounter = outcome.view
            turn.tick = outcome.tick
        elif isinstance(outcome, ChoiceOutcome):
            turn.outcome = outcome
        elif isinstance(outcome, EffectResult):
            turn.item_result = outcome
        elif isinstance(outcome, TurnTick):
            turn.tick = outcome
        if turn.loop_state == LoopState.GAME_OVER:
            turn.game_over_reason = self.session.game_state.player.game_over_reason
        return turn
