"""
Action System - Actions, payloads, and results.

Actions represent the three things a player can do to the engine:
1. Enter a room (and be offered its encounter)
2. Select a choice of the offered encounter
3. Use an item from the inventory

plus END_TURN, which runs the status tick without moving.

All state changes flow through actions when the reducer's apply()
entry point is used.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    ENTER_ROOM = "enter_room"
    SELECT_CHOICE = "select_choice"
    USE_ITEM = "use_item"
    END_TURN = "end_turn"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; the reducer validates.
    """
    room_id: str | None = None
    choice_index: int | None = None
    item_id: str | None = None
    quantity: int = 1

    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "roomId": self.room_id,
            "choiceIndex": self.choice_index,
            "itemId": self.item_id,
            "quantity": self.quantity,
            "params": dict(self.params),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionPayload:
        return cls(
            room_id=data.get("roomId"),
            choice_index=data.get("choiceIndex"),
            item_id=data.get("itemId"),
            quantity=int(data.get("quantity", 1)),
            params=dict(data.get("params") or {}),
        )


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Logged in GameState.action_history when applied successfully.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)
    timestamp: float | None = None
    action_id: str | None = None

    @classmethod
    def enter_room(cls, room_id: str) -> Action:
        return cls(action_type=ActionType.ENTER_ROOM, payload=ActionPayload(room_id=room_id))

    @classmethod
    def select_choice(cls, choice_index: int) -> Action:
        return cls(action_type=ActionType.SELECT_CHOICE, payload=ActionPayload(choice_index=choice_index))

    @classmethod
    def use_item(cls, item_id: str, quantity: int = 1) -> Action:
        return cls(
            action_type=ActionType.USE_ITEM,
            payload=ActionPayload(item_id=item_id, quantity=quantity),
        )

    @classmethod
    def end_turn(cls) -> Action:
        return cls(action_type=ActionType.END_TURN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.action_type.value,
            "payload": self.payload.to_dict(),
            "timestamp": self.timestamp,
            "actionId": self.action_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        return cls(
            action_type=ActionType(data["type"]),
            payload=ActionPayload.from_dict(data.get("payload") or {}),
            timestamp=data.get("timestamp"),
            action_id=data.get("actionId"),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error message and code (if failed)
    - The operation's own outcome (room entry, choice, item result or tick)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    # Human-readable changes for the presentation layer
    state_changes: list[str] = field(default_factory=list)
    outcome: Any | None = None

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, details=details or {})

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        outcome: Any | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [], outcome=outcome)
