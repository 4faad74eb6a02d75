"""
Reducer - Room/turn orchestration over game state.

The reducer is the single point of state mutation.
All state changes go through its operations or through apply().

Design principles:
- Pure over snapshots: (state, input) -> (new_state, outcome)
- Validates before applying
- Direct operations raise LabyrinthError subclasses; apply() turns
  them into ActionResult failures
- Delegates stat/item/status work to EffectApplicator and StatusLifecycle
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from ..config import DEFAULT_REST, DEFAULT_RULES, RestConfig, RulesConfig
from ..errors import InvalidActionError, LabyrinthError, RequirementError
from ..content_schema.catalog import Catalog
from ..content_schema.definitions import EncounterDefinition
from ..content_schema.effect_dsl import EffectSpecification
from .action import Action, ActionResult, ActionType
from .distribution import pool_weights, weighted_sample
from .effects import EffectApplicator, EffectResult
from .requirements import RequirementCheck, RequirementEvaluator
from .rest import build_rest_encounter, describe_rest_benefits, is_rest_encounter
from .rooms import AllocationSession
from .state import GamePhase, GameState
from .status import StatusLifecycle, TurnTick

logger = logging.getLogger(__name__)


# Picks the encounter to present from the available ones (never empty)
EncounterSelector = Callable[[Sequence[EncounterDefinition]], EncounterDefinition]


def first_available(candidates: Sequence[EncounterDefinition]) -> EncounterDefinition:
    """Present the first available encounter, in room order."""
    return candidates[0]


@dataclass
class WeightedSelector:
    """Pick one available encounter weighted by its weight."""
    rng: random.Random = field(default_factory=random.Random)
    rules: RulesConfig = DEFAULT_RULES

    def __call__(self, candidates: Sequence[EncounterDefinition]) -> EncounterDefinition:
        chosen = weighted_sample(pool_weights(candidates, self.rules), 1, self.rng)[0]
        return next(c for c in candidates if c.id == chosen)


@dataclass
class ChoiceView:
    """A choice with its availability already evaluated."""
    index: int
    text: str
    check: RequirementCheck

    @property
    def is_available(self) -> bool:
        return self.check.is_available

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "text": self.text, **self.check.to_dict()}


@dataclass
class EncounterView:
    """What the player sees on entering a room."""
    room_id: str
    encounter: EncounterDefinition
    choices: list[ChoiceView]
    is_rest: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "roomId": self.room_id,
            "event": {
                "id": self.encounter.id,
                "name": self.encounter.name,
                "description": self.encounter.description,
                "image": self.encounter.image,
                "category": self.encounter.category.value,
            },
            "choices": [c.to_dict() for c in self.choices],
            "isEmptyRoom": self.is_rest,
        }


@dataclass
class RoomEntry:
    """Outcome of entering a room: the turn's status tick, then the encounter (None if the tick ended the game)."""
    tick: TurnTick
    view: EncounterView | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick.to_dict(),
            "encounter": self.view.to_dict() if self.view else None,
        }


@dataclass
class ChoiceOutcome:
    """Result of selecting a choice."""
    encounter_id: str
    choice_index: int
    succeeded: bool
    result: EffectResult
    consumed: bool = False
    rest_benefits: str | None = None

    @property
    def description(self) -> str:
        return self.result.description

    def to_dict(self) -> dict[str, Any]:
        data = {
            "eventId": self.encounter_id,
            "choiceIndex": self.choice_index,
            "succeeded": self.succeeded,
            "description": self.description,
            "effects": self.result.report.to_dict(),
            "consumed": self.consumed,
        }
        if self.rest_benefits is not None:
            data["restBenefits"] = self.rest_benefits
        return data


@dataclass
class Reducer:
    """
    Orchestrates room entry, choice selection, item use and turn ticks.

    Stateless apart from its collaborators - all game state is in
    GameState. Randomness (success probabilities, weighted selection)
    comes from rng.
    """
    catalog: Catalog
    rng: random.Random = field(default_factory=random.Random)
    selector: EncounterSelector = first_available
    rules: RulesConfig = DEFAULT_RULES
    rest: RestConfig = DEFAULT_REST

    def __post_init__(self):
        self.evaluator = RequirementEvaluator(self.catalog)
        self.applicator = EffectApplicator(self.catalog, self.rules)
        self.lifecycle = StatusLifecycle(self.applicator)

    # ------------------------------------------------------------------
    # Direct operations

    def enter_room(self, state: GameState, room_id: str) -> tuple[GameState, EncounterView]:
        """
        Enter a room and present its encounter.

        Rooms with no available encounter offer the rest encounter.
        Every choice comes back annotated with its requirement check.
        """
        self._ensure_playing(state)
        allocation = state.allocation or AllocationSession()
        assignment = allocation.get(room_id).record_visit()

        candidates = []
        for event_id in assignment.available_ids:
            definition = self.catalog.get_encounter(event_id)
            if definition is None:
                logger.warning("Room %s references unknown encounter %r, skipped", room_id, event_id)
                continue
            candidates.append(definition)

        if candidates:
            encounter = self.selector(candidates)
        else:
            encounter = build_rest_encounter(room_id, state.player, self.catalog, self.rest, self.rules)

        view = self.present(room_id, encounter, state)
        new_state = state._copy_with(
            allocation=allocation.with_room(assignment),
            current_room_id=room_id,
            current_encounter=encounter,
            phase=GamePhase.PLAYING,
        )
        return new_state, view

    def present(self, room_id: str, encounter: EncounterDefinition, state: GameState) -> EncounterView:
        choices = [
            ChoiceView(
                index=i,
                text=choice.text,
                check=self.evaluator.evaluate(choice.requirements, state.player),
            )
            for i, choice in enumerate(encounter.choices)
        ]
        return EncounterView(
            room_id=room_id,
            encounter=encounter,
            choices=choices,
            is_rest=is_rest_encounter(encounter),
        )

    def current_view(self, state: GameState) -> EncounterView | None:
        """Re-present the pending encounter, e.g. after a failed selection."""
        if state.current_encounter is None or state.current_room_id is None:
            return None
        return self.present(state.current_room_id, state.current_encounter, state)

    def select_choice(self, state: GameState, choice_index: int) -> tuple[GameState, ChoiceOutcome]:
        """
        Resolve a choice of the presented encounter.

        Raises RequirementError when the choice's requirements are not
        met; the state is left untouched and the encounter stays
        presented.
        """
        self._ensure_playing(state)
        encounter = state.current_encounter
        if encounter is None:
            raise InvalidActionError("No encounter is being presented")
        if not 0 <= choice_index < len(encounter.choices):
            raise InvalidActionError(
                f"Choice index {choice_index} out of range (0..{len(encounter.choices) - 1})"
            )

        choice = encounter.choices[choice_index]
        check = self.evaluator.evaluate(choice.requirements, state.player)
        if not check.is_available:
            raise RequirementError(check)

        succeeded = self.evaluator.evaluate_success(choice.success_conditions, state.player, self.rng)
        if succeeded:
            effect = choice.success_effects
        else:
            effect = choice.failure_effects or EffectSpecification()
        result = self.applicator.apply(state.player, effect)

        allocation = state.allocation
        consumed = False
        is_rest = is_rest_encounter(encounter)
        if encounter.is_one_time and not is_rest and allocation and state.current_room_id:
            room = allocation.get(state.current_room_id)
            if encounter.id in room.available_ids:
                allocation = allocation.with_room(room.consume(encounter.id))
                consumed = True

        new_state = state.with_player(result.player)._copy_with(
            allocation=allocation,
            current_encounter=None,
        )
        if new_state.phase == GamePhase.GAME_OVER:
            logger.info("Game %s over: %s", state.game_id, result.player.game_over_reason)

        outcome = ChoiceOutcome(
            encounter_id=encounter.id,
            choice_index=choice_index,
            succeeded=succeeded,
            result=result,
            consumed=consumed,
            rest_benefits=describe_rest_benefits(effect) if is_rest else None,
        )
        return new_state, outcome

    def use_item(self, state: GameState, item_id: str, quantity: int = 1) -> tuple[GameState, EffectResult]:
        """Use an item outside of any encounter. Raises ItemUseError when gated out."""
        self._ensure_playing(state)
        result = self.applicator.use_item(state.player, item_id, quantity)
        return state.with_player(result.player), result

    def advance_turn(self, state: GameState) -> tuple[GameState, TurnTick]:
        """Run the status tick for one turn."""
        self._ensure_playing(state)
        tick = self.lifecycle.tick(state.player)
        return state.with_player(tick.player), tick

    def _ensure_playing(self, state: GameState) -> None:
        if state.phase == GamePhase.GAME_OVER or state.player.is_game_over:
            reason = state.player.game_over_reason or "game over"
            raise InvalidActionError(f"Game is over ({reason}) - no actions allowed")

    # ------------------------------------------------------------------
    # Action dispatch

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            result = handler(state, action)
        except RequirementError as e:
            return ActionResult.failure(str(e), error_code=e.error_code, details=e.check.to_dict())
        except LabyrinthError as e:
            return ActionResult.failure(str(e), error_code=e.error_code)

        # Log action to history if successful
        if result.success and result.new_state:
            result.new_state.action_history = state.action_history + [action]
        return result

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.ENTER_ROOM: self._handle_enter_room,
            ActionType.SELECT_CHOICE: self._handle_select_choice,
            ActionType.USE_ITEM: self._handle_use_item,
            ActionType.END_TURN: self._handle_end_turn,
        }
        return handlers.get(action_type)

    def _handle_enter_room(self, state: GameState, action: Action) -> ActionResult:
        """Entering a room costs a turn: statuses tick before the encounter is shown."""
        room_id = action.payload.room_id
        if not room_id:
            raise InvalidActionError("enter_room requires a room_id")

        state, tick = self.advance_turn(state)
        if state.phase == GamePhase.GAME_OVER:
            return ActionResult.success_with_state(
                state,
                changes=[f"Game over: {state.player.game_over_reason}"],
                outcome=RoomEntry(tick=tick),
            )

        state, view = self.enter_room(state, room_id)
        return ActionResult.success_with_state(
            state,
            changes=[f"Entered room {room_id}: {view.encounter.name or view.encounter.id}"],
            outcome=RoomEntry(tick=tick, view=view),
        )

    def _handle_select_choice(self, state: GameState, action: Action) -> ActionResult:
        if action.payload.choice_index is None:
            raise InvalidActionError("select_choice requires a choice_index")
        new_state, outcome = self.select_choice(state, action.payload.choice_index)
        return ActionResult.success_with_state(new_state, changes=[outcome.description], outcome=outcome)

    def _handle_use_item(self, state: GameState, action: Action) -> ActionResult:
        if not action.payload.item_id:
            raise InvalidActionError("use_item requires an item_id")
        new_state, result = self.use_item(state, action.payload.item_id, action.payload.quantity)
        return ActionResult.success_with_state(new_state, changes=[result.description], outcome=result)

    def _handle_end_turn(self, state: GameState, action: Action) -> ActionResult:
        new_state, tick = self.advance_turn(state)
        return ActionResult.success_with_state(new_state, changes=[f"Turn {new_state.turn_number}"], outcome=tick)
