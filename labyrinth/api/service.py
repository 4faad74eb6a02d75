"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to game loop calls
2. Manages sessions and their game loops
3. Maps engine outcomes and error codes to response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from ..config import DEFAULT_RULES
from ..content.labyrinth_base import create_base_catalog
from ..content_schema.catalog import Catalog
from ..content_schema.validation import validate_catalog
from ..engine_core.effects import EffectReport
from ..engine_core.reducer import EncounterView
from ..engine_core.state import PlayerState
from ..engine_core.status import TurnTick
from ..errors import ConfigurationError
from ..session import GameLoop, LoopState, SelectionPolicy, Session, SessionManager, TurnResult
from .schemas import (
    # Requests
    CreateSessionRequest,
    SelectChoiceRequest,
    UseItemRequest,
    # Responses
    CatalogSummaryResponse,
    ChoiceResponse,
    EnterRoomResponse,
    ErrorResponse,
    GameStateResponse,
    SessionResponse,
    UseItemResponse,
    # Shared
    ChoiceInfo,
    EffectReportInfo,
    EncounterInfo,
    InventorySlotInfo,
    ItemQuantityInfo,
    PlayerInfo,
    RoomInfo,
    StatChangeInfo,
    StatsInfo,
    StatusInfo,
    TickInfo,
    WarningInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)

logger = logging.getLogger(__name__)


def _default_session_manager() -> SessionManager:
    return SessionManager(catalog=create_base_catalog(), rules=DEFAULT_RULES)


@dataclass
class APIService:
    """
    Main API service for game clients.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(seed=7))
        entered = service.enter_room(session.session_id, "1,0")
        outcome = service.select_choice(session.session_id, SelectChoiceRequest(choice_index=0))
    """
    session_manager: SessionManager = field(default_factory=_default_session_manager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    @property
    def catalog(self) -> Catalog:
        return self.session_manager.catalog

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Create a new game session with a freshly distributed maze."""
        self.cleanup_stale_sessions()
        try:
            session = self.session_manager.create_session(
                seed=request.seed,
                selection=SelectionPolicy(request.selection.value),
            )
        except ConfigurationError as e:
            logger.error("Session creation failed: %s", e)
            return ErrorResponse(error=str(e), error_code=ErrorCode.CONFIGURATION_ERROR)

        self._game_loops[session.session_id] = GameLoop(session)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "ended") -> bool:
        """End a session. Returns False if it did not exist."""
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason) is not None

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        self.cleanup_stale_sessions()
        return self.session_manager.list_active_sessions()

    def cleanup_stale_sessions(self) -> int:
        """Expire sessions idle past the manager's TTL and drop their game loops."""
        removed = self.session_manager.cleanup_stale_sessions()
        for session_id in list(self._game_loops):
            if self.session_manager.get_session(session_id) is None:
                del self._game_loops[session_id]
        if removed:
            logger.info("Expired %d stale session(s)", removed)
        return removed

    def get_game_state(self, session_id: str, include_snapshot: bool = False) -> GameStateResponse | ErrorResponse:
        """Get current game state, optionally with the lossless snapshot."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        with session.lock:
            game_state = session.game_state
            loop = self._loop_for(session)
            allocation = game_state.allocation
            rooms = []
            for room in session.grid:
                assignment = allocation.get(room.room_id) if allocation else None
                rooms.append(RoomInfo(
                    room_id=room.room_id,
                    x=room.x,
                    y=room.y,
                    is_start=room.is_start,
                    is_exit=room.is_exit,
                    status=assignment.status.value if assignment else "unassigned",
                    available_events=assignment.event_count if assignment else 0,
                    visit_count=assignment.visit_count if assignment else 0,
                ))

            view = loop.current_encounter()
            return GameStateResponse(
                session_id=session_id,
                status=self._loop_state_to_status(loop.state),
                phase=game_state.phase.value,
                current_room_id=game_state.current_room_id,
                turn_count=game_state.turn_number,
                player=self._build_player(game_state.player),
                encounter=self._build_encounter(view) if view else None,
                rooms=rooms,
                game_over_reason=game_state.player.game_over_reason,
                snapshot=game_state.to_dict() if include_snapshot else None,
            )

    # =========================================================================
    # Game loop
    # =========================================================================

    def enter_room(self, session_id: str, room_id: str) -> EnterRoomResponse | ErrorResponse:
        """Move into a room: statuses tick, then the room's encounter is presented."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        loop = self._loop_for(session)
        result = loop.enter_room(room_id)
        if not result.success:
            return self._turn_error(result)

        player = session.game_state.player
        return EnterRoomResponse(
            session_id=session_id,
            room_id=room_id,
            status=self._loop_state_to_status(result.loop_state),
            turn_count=player.turn_count,
            encounter=self._build_encounter(result.encounter) if result.encounter else None,
            tick=self._build_tick(result.tick) if result.tick else None,
            player=self._build_player(player),
            messages=result.messages,
            game_over_reason=result.game_over_reason,
        )

    def select_choice(self, session_id: str, request: SelectChoiceRequest) -> ChoiceResponse | ErrorResponse:
        """Resolve a choice of the presented encounter."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result = self._loop_for(session).choose(request.choice_index)
        if not result.success:
            return self._turn_error(result)

        outcome = result.outcome
        return ChoiceResponse(
            session_id=session_id,
            status=self._loop_state_to_status(result.loop_state),
            encounter_id=outcome.encounter_id,
            choice_index=outcome.choice_index,
            succeeded=outcome.succeeded,
            description=outcome.description,
            effects=self._build_report(outcome.result.report),
            consumed=outcome.consumed,
            rest_benefits=outcome.rest_benefits,
            player=self._build_player(session.game_state.player),
            game_over_reason=result.game_over_reason,
        )

    def use_item(self, session_id: str, item_id: str, request: UseItemRequest) -> UseItemResponse | ErrorResponse:
        """Use an inventory item outside of any choice."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result = self._loop_for(session).use_item(item_id, request.quantity)
        if not result.success:
            return self._turn_error(result)

        return UseItemResponse(
            session_id=session_id,
            status=self._loop_state_to_status(result.loop_state),
            item_id=item_id,
            quantity=request.quantity,
            description=result.item_result.description,
            effects=self._build_report(result.item_result.report),
            player=self._build_player(session.game_state.player),
            game_over_reason=result.game_over_reason,
        )

    # =========================================================================
    # Content
    # =========================================================================

    def catalog_summary(self) -> CatalogSummaryResponse:
        catalog = self.catalog
        validation = validate_catalog(catalog, self.session_manager.rules)
        return CatalogSummaryResponse(
            traps=len(catalog.traps),
            item_encounters=len(catalog.item_encounters),
            characters=len(catalog.characters),
            monsters=len(catalog.monsters),
            items=sorted(catalog.items),
            statuses=sorted(catalog.statuses),
            valid=validation.valid,
            warnings=validation.warnings,
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _loop_for(self, session: Session) -> GameLoop:
        loop = self._game_loops.get(session.session_id)
        if loop is None:
            loop = GameLoop(session)
            self._game_loops[session.session_id] = loop
        return loop

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _turn_error(self, result: TurnResult) -> ErrorResponse:
        try:
            code = ErrorCode(result.error_code)
        except ValueError:
            code = ErrorCode.INVALID_ACTION
        return ErrorResponse(
            error=result.error or "Action rejected",
            error_code=code,
            details=result.details or None,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        with session.lock:
            loop = self._loop_for(session)
            game_state = session.game_state
            view = loop.current_encounter()
            return SessionResponse(
                session_id=session.session_id,
                status=self._loop_state_to_status(loop.state),
                seed=session.seed,
                created_at=session.created_at,
                current_room_id=game_state.current_room_id,
                turn_count=game_state.turn_number,
                player=self._build_player(game_state.player),
                encounter=self._build_encounter(view) if view else None,
                game_over_reason=game_state.player.game_over_reason,
            )

    def _build_player(self, player: PlayerState) -> PlayerInfo:
        statuses = []
        for instance in player.statuses:
            definition = self.catalog.get_status(instance.status_id)
            statuses.append(StatusInfo(
                status_id=instance.status_id,
                name=definition.name if definition and definition.name else instance.status_id,
                remaining_duration=instance.remaining_duration,
                stacks=instance.stacks,
                is_debuff=definition.is_debuff if definition else False,
            ))

        return PlayerInfo(
            stats=StatsInfo(**player.stats.to_dict()),
            inventory=[
                InventorySlotInfo(
                    item_id=row["id"],
                    name=row["name"],
                    quantity=row["quantity"],
                    description=row["description"],
                    consume_on_use=row["consume_on_use"],
                    effects=row["effects"],
                )
                for row in player.inventory.describe(self.catalog)
            ],
            inventory_capacity=player.inventory.capacity,
            statuses=statuses,
            turn_count=player.turn_count,
            is_alive=player.stats.is_alive,
            is_sane=player.stats.is_sane,
        )

    def _build_encounter(self, view: EncounterView) -> EncounterInfo:
        encounter = view.encounter
        return EncounterInfo(
            room_id=view.room_id,
            encounter_id=encounter.id,
            name=encounter.name,
            description=encounter.description,
            image=encounter.image,
            category=encounter.category.value,
            is_rest=view.is_rest,
            choices=[
                ChoiceInfo(
                    index=c.index,
                    text=c.text,
                    is_available=c.is_available,
                    failure_reasons=list(c.check.failure_reasons),
                    missing_items=list(c.check.missing_items),
                )
                for c in view.choices
            ],
        )

    def _build_report(self, report: EffectReport) -> EffectReportInfo:
        return EffectReportInfo(
            stat_changes=[
                StatChangeInfo(
                    stat=key,
                    requested=c.requested,
                    actual=c.actual,
                    old_value=c.old_value,
                    new_value=c.new_value,
                )
                for key, c in report.stat_changes.items()
            ],
            items_gained=[ItemQuantityInfo(item_id=i.item_id, quantity=i.quantity) for i in report.items_gained],
            items_lost=[ItemQuantityInfo(item_id=i.item_id, quantity=i.quantity) for i in report.items_lost],
            statuses_applied=list(report.statuses_applied),
            statuses_removed=list(report.statuses_removed),
            warnings=[WarningInfo(kind=w.kind.value, message=w.message, subject=w.subject) for w in report.warnings],
            errors=list(report.errors),
        )

    def _build_tick(self, tick: TurnTick) -> TickInfo:
        return TickInfo(
            expired=list(tick.expired),
            cleared=list(tick.cleared),
            triggered=list(tick.triggered),
            effects=self._build_report(tick.report),
        )

    def _loop_state_to_status(self, state: LoopState) -> SessionStatus:
        """Convert loop state to API status."""
        mapping = {
            LoopState.EXPLORING: SessionStatus.EXPLORING,
            LoopState.AWAITING_CHOICE: SessionStatus.AWAITING_CHOICE,
            LoopState.GAME_OVER: SessionStatus.GAME_OVER,
        }
        return mapping.get(state, SessionStatus.EXPLORING)
