"""
Engine Core - Deterministic simulation of the maze survival rules.

The engine is the runtime that:
1. Distributes encounters across the rooms of a maze
2. Manages the player snapshot (stats, inventory, statuses)
3. Evaluates choice requirements
4. Applies effects with clamping and a full audit
5. Ticks status effects once per turn
"""

from .state import (
    GamePhase,
    GameState,
    Inventory,
    InventoryItem,
    PlayerState,
    PlayerStats,
    StatName,
    StatusEffectInstance,
    canonical_stat,
)
from .maze import MazeGrid, MazeRoom
from .rooms import AllocationSession, RoomAssignment, RoomStatus
from .distribution import EventDistributor, weighted_sample
from .requirements import RequirementCheck, RequirementEvaluator, StatShortfall
from .effects import EffectApplicator, EffectReport, EffectResult, EffectWarning, StatChange, WarningKind
from .status import StatusLifecycle, TurnTick
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import (
    ChoiceOutcome,
    ChoiceView,
    RoomEntry,
    EncounterView,
    Reducer,
    WeightedSelector,
    first_available,
)

__all__ = [
    "GamePhase",
    "GameState",
    "Inventory",
    "InventoryItem",
    "PlayerState",
    "PlayerStats",
    "StatName",
    "StatusEffectInstance",
    "canonical_stat",
    "MazeGrid",
    "MazeRoom",
    "AllocationSession",
    "RoomAssignment",
    "RoomStatus",
    "EventDistributor",
    "weighted_sample",
    "RequirementCheck",
    "RequirementEvaluator",
    "StatShortfall",
    "EffectApplicator",
    "EffectReport",
    "EffectResult",
    "EffectWarning",
    "StatChange",
    "WarningKind",
    "StatusLifecycle",
    "TurnTick",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ChoiceOutcome",
    "ChoiceView",
    "RoomEntry",
    "EncounterView",
    "Reducer",
    "WeightedSelector",
    "first_available",
]
