"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a game client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- REQUIREMENT_NOT_MET: Choice requirements not met (details carry the check)
- ITEM_USE_REJECTED: Item not held, not enough of it, or unknown
- INVALID_ACTION: Action makes no sense now (bad index, no encounter, game over)
- CONFIGURATION_ERROR: Content cannot support the request
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    EXPLORING = "exploring"
    AWAITING_CHOICE = "awaiting_choice"
    GAME_OVER = "game_over"


class SelectionMode(str, Enum):
    """Encounter selection policy for rooms holding several encounters."""
    FIRST = "first"
    WEIGHTED = "weighted"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    REQUIREMENT_NOT_MET = "REQUIREMENT_NOT_MET"
    ITEM_USE_REJECTED = "ITEM_USE_REJECTED"
    INVALID_ACTION = "INVALID_ACTION"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class StatsInfo(BaseModel):
    """Current stat values, each in [0, 100]."""
    hp: int
    san: int
    fit: int
    hunger: int


class InventorySlotInfo(BaseModel):
    """One inventory slot."""
    item_id: str
    name: str
    quantity: int
    description: str = ""
    consume_on_use: bool = True
    effects: list[str] = Field(default_factory=list, description="e.g. ['HP +10', 'Removes: bleeding']")


class StatusInfo(BaseModel):
    """An active status effect."""
    status_id: str
    name: str
    remaining_duration: Optional[int] = Field(
        None, description="Turns left; null while bound to a stat condition"
    )
    stacks: int = 1
    is_debuff: bool = False


class PlayerInfo(BaseModel):
    """Player snapshot for display."""
    stats: StatsInfo
    inventory: list[InventorySlotInfo] = Field(default_factory=list)
    inventory_capacity: int
    statuses: list[StatusInfo] = Field(default_factory=list)
    turn_count: int = 0
    is_alive: bool = True
    is_sane: bool = True


class ChoiceInfo(BaseModel):
    """A choice with its availability already evaluated."""
    index: int
    text: str
    is_available: bool
    failure_reasons: list[str] = Field(default_factory=list)
    missing_items: list[str] = Field(default_factory=list)


class EncounterInfo(BaseModel):
    """The encounter presented on entering a room."""
    room_id: str
    encounter_id: str
    name: str = ""
    description: str = ""
    image: str = ""
    category: str
    is_rest: bool = Field(False, description="True for the rest encounter of an empty room")
    choices: list[ChoiceInfo] = Field(default_factory=list)


class ItemQuantityInfo(BaseModel):
    item_id: str
    quantity: int


class StatChangeInfo(BaseModel):
    """Audit of one stat: requested delta vs. delta actually applied."""
    stat: str
    requested: int
    actual: int
    old_value: int
    new_value: int


class WarningInfo(BaseModel):
    """A non-fatal condition met while applying an effect."""
    kind: str = Field(description="bounds or unknown_reference")
    message: str
    subject: Optional[str] = None


class EffectReportInfo(BaseModel):
    """Everything that happened during one effect application."""
    stat_changes: list[StatChangeInfo] = Field(default_factory=list)
    items_gained: list[ItemQuantityInfo] = Field(default_factory=list)
    items_lost: list[ItemQuantityInfo] = Field(default_factory=list)
    statuses_applied: list[str] = Field(default_factory=list)
    statuses_removed: list[str] = Field(default_factory=list)
    warnings: list[WarningInfo] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class TickInfo(BaseModel):
    """Status tick run when a turn passes."""
    expired: list[str] = Field(default_factory=list)
    cleared: list[str] = Field(default_factory=list)
    triggered: list[str] = Field(default_factory=list)
    effects: EffectReportInfo = Field(default_factory=EffectReportInfo)


class RoomInfo(BaseModel):
    """Map cell with its allocation summary."""
    room_id: str
    x: int
    y: int
    is_start: bool = False
    is_exit: bool = False
    status: str = Field(description="unassigned, open or trap_exclusive")
    available_events: int = 0
    visit_count: int = 0


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    seed: Optional[int] = Field(None, description="Seed for a reproducible maze; random if omitted")
    selection: SelectionMode = SelectionMode.FIRST


class SelectChoiceRequest(BaseModel):
    """Select a choice of the presented encounter."""
    choice_index: int = Field(..., description="Index into the presented choices")


class UseItemRequest(BaseModel):
    """Use an inventory item directly."""
    quantity: int = Field(1, description="Units to use at once")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response with session info."""
    session_id: str
    status: SessionStatus
    seed: int
    created_at: float
    current_room_id: Optional[str] = None
    turn_count: int = 0
    player: PlayerInfo
    encounter: Optional[EncounterInfo] = None
    game_over_reason: Optional[str] = None
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    phase: str
    current_room_id: Optional[str] = None
    turn_count: int = 0
    player: PlayerInfo
    encounter: Optional[EncounterInfo] = None
    rooms: list[RoomInfo] = Field(default_factory=list)
    game_over_reason: Optional[str] = None
    snapshot: Optional[dict[str, Any]] = Field(
        None, description="Lossless GameState.to_dict() snapshot (when requested)"
    )
    api_version: str = "v1"


class EnterRoomResponse(BaseModel):
    """Response after entering a room."""
    session_id: str
    room_id: str
    status: SessionStatus
    turn_count: int
    encounter: Optional[EncounterInfo] = Field(
        None, description="Missing when the status tick ended the game"
    )
    tick: Optional[TickInfo] = None
    player: PlayerInfo
    messages: list[str] = Field(default_factory=list)
    game_over_reason: Optional[str] = None
    api_version: str = "v1"


class ChoiceResponse(BaseModel):
    """Response after resolving a choice."""
    session_id: str
    status: SessionStatus
    encounter_id: str
    choice_index: int
    succeeded: bool
    description: str = ""
    effects: EffectReportInfo
    consumed: bool = False
    rest_benefits: Optional[str] = None
    player: PlayerInfo
    game_over_reason: Optional[str] = None
    api_version: str = "v1"


class UseItemResponse(BaseModel):
    """Response after using an item."""
    session_id: str
    status: SessionStatus
    item_id: str
    quantity: int
    description: str = ""
    effects: EffectReportInfo
    player: PlayerInfo
    game_over_reason: Optional[str] = None
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class CatalogSummaryResponse(BaseModel):
    """Counts of the loaded content."""
    traps: int
    item_encounters: int
    characters: int
    monsters: int
    items: list[str]
    statuses: list[str]
    valid: bool
    warnings: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
