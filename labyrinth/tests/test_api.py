"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- HTTP endpoints and status codes
- Error handling
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    SelectChoiceRequest,
    SessionStatus,
    UseItemRequest,
)
from ..api.service import APIService
from ..engine_core.state import Inventory, InventoryItem, PlayerStats, StatusEffectInstance
from ..session import SessionManager
from .conftest import build_catalog, make_encounter


LOCKED_DOOR = make_encounter("locked_door", "character", persistence="persistent", choices=[
    {"text": "Unlock", "requirements": {"items": ["key"]}, "successEffects": {"statChanges": {"SAN": 5}}},
    {"text": "Walk away", "successEffects": {"description": "You leave the door alone."}},
])


@pytest.fixture
def service():
    """Fresh API service over the test catalog."""
    return APIService(session_manager=SessionManager(build_catalog(extra_encounters=[LOCKED_DOOR])))


@pytest.fixture
def client(service):
    return TestClient(create_app(service=service))


def present_locked_door(service, session_id):
    """Put the player in front of the locked door."""
    session = service.session_manager.get_session(session_id)
    session.game_state = session.game_state._copy_with(
        current_room_id="3,3",
        current_encounter=session.catalog.get_encounter("locked_door"),
    )


def give_items(service, session_id, hp=50, **items):
    session = service.session_manager.get_session(session_id)
    inventory = Inventory(items=[InventoryItem(item_id, qty) for item_id, qty in items.items()])
    player = session.game_state.player.with_inventory(inventory).with_stats(PlayerStats(hp=hp))
    session.game_state = session.game_state.with_player(player)


def start_bleeding(service, session_id):
    session = service.session_manager.get_session(session_id)
    player = session.game_state.player.with_statuses([StatusEffectInstance("bleeding", 3)])
    session.game_state = session.game_state.with_player(player)


class TestAPIService:
    """Tests for APIService."""

    def test_create_session(self, service):
        response = service.create_session(CreateSessionRequest(seed=3))

        assert response.session_id
        assert response.status == SessionStatus.EXPLORING
        assert response.seed == 3
        assert response.current_room_id == "0,0"
        assert response.player.stats.hp == 100
        assert response.player.inventory_capacity == 5
        assert response.encounter is None

    def test_default_service_uses_base_content(self):
        summary = APIService().catalog_summary()
        assert summary.valid
        assert summary.traps >= 10
        assert "bandage" in summary.items

    def test_stale_sessions_expire(self):
        service = APIService(session_manager=SessionManager(build_catalog(), session_ttl=60))
        stale_id = service.create_session(CreateSessionRequest(seed=1)).session_id
        fresh_id = service.create_session(CreateSessionRequest(seed=2)).session_id
        service.session_manager.get_session(stale_id).last_activity -= 120

        assert service.list_sessions() == [fresh_id]
        assert list(service._game_loops) == [fresh_id]
        assert service.get_session(stale_id).error_code == ErrorCode.SESSION_NOT_FOUND

    def test_create_session_expires_stale(self):
        service = APIService(session_manager=SessionManager(build_catalog(), session_ttl=60))
        stale_id = service.create_session(CreateSessionRequest(seed=1)).session_id
        service.session_manager.get_session(stale_id).last_activity -= 120

        fresh_id = service.create_session(CreateSessionRequest(seed=2)).session_id

        assert stale_id not in service._game_loops
        assert service.session_manager.list_active_sessions() == [fresh_id]

    def test_get_session_not_found(self, service):
        response = service.get_session("nonexistent")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_enter_rest_room(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id

        response = service.enter_room(session_id, "0,0")

        assert response.status == SessionStatus.AWAITING_CHOICE
        assert response.turn_count == 1
        assert response.encounter.is_rest
        assert response.encounter.choices[0].is_available

    def test_enter_room_reports_tick(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id
        start_bleeding(service, session_id)

        response = service.enter_room(session_id, "0,0")

        assert response.encounter.is_rest
        assert response.tick is not None
        hp = next(c for c in response.tick.effects.stat_changes if c.stat == "HP")
        assert (hp.actual, hp.new_value) == (-2, 98)
        assert response.player.stats.hp == 98

    def test_select_rest_choice(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id
        service.enter_room(session_id, "0,0")

        response = service.select_choice(session_id, SelectChoiceRequest(choice_index=0))

        assert response.status == SessionStatus.EXPLORING
        assert response.encounter_id == "empty_room_rest"
        assert response.rest_benefits
        assert any(c.stat == "HP" for c in response.effects.stat_changes)

    def test_select_without_encounter(self, service):
        session_id = service.create_session(CreateSessionRequest()).session_id

        response = service.select_choice(session_id, SelectChoiceRequest(choice_index=0))

        assert response.error_code == ErrorCode.INVALID_ACTION

    def test_requirement_not_met(self, service):
        """Locked choice is refused and the encounter stays presented."""
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id
        present_locked_door(service, session_id)

        response = service.select_choice(session_id, SelectChoiceRequest(choice_index=0))

        assert response.error_code == ErrorCode.REQUIREMENT_NOT_MET
        assert response.details["missingItems"] == ["key"]
        assert response.details["failureReasons"] == ["Requires Key"]
        assert service.get_session(session_id).encounter.encounter_id == "locked_door"

    def test_requirement_met(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id
        give_items(service, session_id, key=1)
        present_locked_door(service, session_id)

        response = service.select_choice(session_id, SelectChoiceRequest(choice_index=0))

        assert response.succeeded
        assert not response.consumed
        assert response.player.stats.san == 100

    def test_use_item(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id
        give_items(service, session_id, hp=50, bandage=2)

        response = service.use_item(session_id, "bandage", UseItemRequest())

        assert response.player.stats.hp == 60
        assert response.player.inventory[0].quantity == 1
        assert response.description.startswith("Used Bandage.")

    def test_use_item_rejected(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id

        response = service.use_item(session_id, "bandage", UseItemRequest())

        assert response.error_code == ErrorCode.ITEM_USE_REJECTED

    def test_get_game_state(self, service):
        session_id = service.create_session(CreateSessionRequest(seed=3)).session_id

        response = service.get_game_state(session_id, include_snapshot=True)

        assert len(response.rooms) == 64
        assert response.phase == "playing"
        assert response.snapshot["gameId"] == session_id
        start = next(r for r in response.rooms if r.room_id == "0,0")
        assert start.is_start
        assert start.status == "unassigned"

    def test_end_session(self, service):
        session_id = service.create_session(CreateSessionRequest()).session_id

        assert service.end_session(session_id)
        assert not service.end_session(session_id)
        assert session_id not in service.list_sessions()


class TestHTTPEndpoints:
    """Tests for the FastAPI routes."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/api/docs"

    def test_create_session(self, client):
        response = client.post("/api/v1/sessions", json={"seed": 9})

        assert response.status_code == 200
        data = response.json()
        assert data["seed"] == 9
        assert data["status"] == "exploring"

    def test_create_session_without_body(self, client):
        response = client.post("/api/v1/sessions")
        assert response.status_code == 200

    def test_list_sessions(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]

        data = client.get("/api/v1/sessions").json()

        assert data["sessions"] == [session_id]
        assert data["count"] == 1

    def test_session_not_found(self, client):
        response = client.get("/api/v1/sessions/nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_enter_room_and_choose(self, client):
        session_id = client.post("/api/v1/sessions", json={"seed": 9}).json()["session_id"]

        entered = client.post(f"/api/v1/sessions/{session_id}/rooms/0,0/enter")
        assert entered.status_code == 200
        assert entered.json()["encounter"]["is_rest"] is True

        chosen = client.post(f"/api/v1/sessions/{session_id}/choices", json={"choice_index": 0})
        assert chosen.status_code == 200
        assert chosen.json()["status"] == "exploring"

    def test_enter_room_tick_payload(self, client, service):
        session_id = client.post("/api/v1/sessions", json={"seed": 9}).json()["session_id"]
        start_bleeding(service, session_id)

        data = client.post(f"/api/v1/sessions/{session_id}/rooms/0,0/enter").json()

        assert data["encounter"]["is_rest"] is True
        assert data["tick"]["effects"]["stat_changes"][0]["stat"] == "HP"
        assert data["tick"]["effects"]["stat_changes"][0]["actual"] == -2

    def test_unknown_room(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]

        response = client.post(f"/api/v1/sessions/{session_id}/rooms/42,42/enter")

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_ACTION"

    def test_choice_out_of_range(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]
        client.post(f"/api/v1/sessions/{session_id}/rooms/0,0/enter")

        response = client.post(f"/api/v1/sessions/{session_id}/choices", json={"choice_index": 5})

        assert response.status_code == 400

    def test_choice_body_required(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]

        response = client.post(f"/api/v1/sessions/{session_id}/choices", json={})

        assert response.status_code == 422

    def test_requirement_not_met(self, client, service):
        session_id = client.post("/api/v1/sessions").json()["session_id"]
        present_locked_door(service, session_id)

        response = client.post(f"/api/v1/sessions/{session_id}/choices", json={"choice_index": 0})

        assert response.status_code == 409
        data = response.json()
        assert data["error_code"] == "REQUIREMENT_NOT_MET"
        assert data["details"]["missingItems"] == ["key"]

    def test_use_item_rejected(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]

        response = client.post(f"/api/v1/sessions/{session_id}/items/bandage/use")

        assert response.status_code == 409
        assert response.json()["error_code"] == "ITEM_USE_REJECTED"

    def test_use_item_quantity(self, client, service):
        session_id = client.post("/api/v1/sessions").json()["session_id"]
        give_items(service, session_id, hp=50, bandage=2)

        response = client.post(f"/api/v1/sessions/{session_id}/items/bandage/use", json={"quantity": 2})

        assert response.status_code == 200
        assert response.json()["player"]["stats"]["hp"] == 70
        assert response.json()["player"]["inventory"] == []

    def test_game_state(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]

        data = client.get(f"/api/v1/sessions/{session_id}/state").json()

        assert data["snapshot"] is None
        assert len(data["rooms"]) == 64

    def test_end_session(self, client):
        session_id = client.post("/api/v1/sessions").json()["session_id"]

        response = client.delete(f"/api/v1/sessions/{session_id}")

        assert response.json() == {"success": True, "session_id": session_id}
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404

    def test_catalog_summary(self, client):
        data = client.get("/api/v1/catalog").json()

        assert data["traps"] == 12
        assert data["valid"] is True
        assert "key" in data["items"]
