"""
Error taxonomy for the engine.

Configuration errors abort the operation that raised them and leave
state untouched. Requirement errors abort a single choice selection.
Bounds and unknown-reference conditions are never raised: they are
collected as warnings in the effect audit (see effects.EffectWarning).
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .engine_core.requirements import RequirementCheck


class LabyrinthError(Exception):
    """Base class for all engine errors."""
    error_code = "LABYRINTH_ERROR"


class ConfigurationError(LabyrinthError):
    """Malformed data or an impossible request. Fatal for the operation."""
    error_code = "CONFIGURATION_ERROR"


class CapacityError(ConfigurationError):
    """A pool, room set or sample count cannot satisfy the request."""
    error_code = "CAPACITY_ERROR"


class UnknownOperatorError(ConfigurationError):
    """A stat comparison uses an operator outside the supported set."""
    error_code = "UNKNOWN_OPERATOR"

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"Unknown comparison operator: {operator!r}")


class RoomLockedError(ConfigurationError):
    """Write attempted on a trap-exclusive room."""
    error_code = "ROOM_LOCKED"

    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Room {room_id} is trap-exclusive and cannot receive more events")


class RequirementError(LabyrinthError):
    """
    A choice was selected while its requirements are not met.

    Carries the full RequirementCheck so the caller can re-present
    the failure reasons to the player.
    """
    error_code = "REQUIREMENT_NOT_MET"

    def __init__(self, check: RequirementCheck):
        self.check = check
        reasons = ", ".join(check.failure_reasons) or "requirements not met"
        super().__init__(f"Choice requirements not met: {reasons}")

    @property
    def failure_reasons(self) -> list[str]:
        return self.check.failure_reasons


class ItemUseError(LabyrinthError):
    """Direct item use rejected (not held, not enough, unknown item)."""
    error_code = "ITEM_USE_REJECTED"


class InvalidActionError(LabyrinthError):
    """The action does not make sense in the current state."""
    error_code = "INVALID_ACTION"
