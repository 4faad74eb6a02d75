"""
Pytest fixtures for Labyrinth tests.

The test catalog is synthetic and small: enough traps and item
encounters for a full distribution, plus a handful of items and status
effects covering every lifecycle rule.
"""

import random

import pytest

from ..config import DEFAULT_RULES
from ..content_schema.catalog import Catalog
from ..content_schema.definitions import EncounterDefinition, ItemDefinition, StatusEffectDefinition
from ..engine_core.distribution import EventDistributor
from ..engine_core.effects import EffectApplicator
from ..engine_core.maze import MazeGrid
from ..engine_core.reducer import Reducer
from ..engine_core.requirements import RequirementEvaluator
from ..engine_core.state import GamePhase, GameState, Inventory, InventoryItem, PlayerState, PlayerStats
from ..engine_core.status import StatusLifecycle


ITEMS = [
    {"id": "bandage", "name": "Bandage", "effects": {"statChanges": {"HP": 10}, "removeStatus": ["bleeding"]}},
    {"id": "ration", "name": "Ration", "effects": {"statChanges": {"HUNGER": 20}}},
    {"id": "lantern", "name": "Lantern", "consumeOnUse": False, "effects": {"statChanges": {"SAN": 2}}},
    {"id": "rope", "name": "Rope", "effects": {}},
    {"id": "key", "name": "Key", "effects": {}},
    {"id": "salve", "name": "Salve", "effects": {"statChanges": {"HP": 2}}},
]

STATUSES = [
    {
        "id": "bleeding", "name": "Bleeding", "type": "DEBUFF", "priority": 3,
        "ongoing": {"HP": -2}, "duration": 3, "removalTriggers": ["salve"],
    },
    {
        "id": "poison", "name": "Poison", "type": "DEBUFF", "priority": 2,
        "ongoing": {"HP": -1}, "duration": 2, "stackable": True, "maxStacks": 3,
    },
    {
        "id": "tired", "name": "Tired", "type": "DEBUFF", "priority": 0,
        "ongoing": {"FIT": -1}, "duration": 5, "removalTriggers": ["rest"],
    },
    {
        "id": "hungry", "name": "Hungry", "type": "DEBUFF", "priority": 4,
        "ongoing": {"HP": -1}, "duration": "untilCleared",
        "trigger": {"stat": "HUNGER", "operator": "<=", "value": 10},
    },
    {
        "id": "fear", "name": "Fear", "type": "DEBUFF", "priority": 2,
        "ongoing": {"SAN": -1}, "duration": 3, "slot": "mind",
    },
    {
        "id": "calm", "name": "Calm", "type": "BUFF", "priority": 1,
        "ongoing": {"SAN": 1}, "duration": 3, "slot": "mind",
    },
    {
        "id": "chill", "name": "Chill", "type": "DEBUFF", "priority": 1,
        "ongoing": {"SAN": -1}, "duration": 3, "stackable": True, "maxStacks": 3,
        "trigger": {"stat": "FIT", "operator": "<=", "value": 5},
    },
]


def make_encounter(event_id, category, weight=10, persistence="oneTime", choices=None):
    return EncounterDefinition.from_dict({
        "id": event_id,
        "name": event_id.replace("_", " ").title(),
        "category": category,
        "weight": weight,
        "persistence": persistence,
        "choices": choices or [{"text": "Continue", "successEffects": {"description": "Nothing happens."}}],
    })


def build_catalog(trap_count=12, item_count=16, characters=2, monsters=2, extra_encounters=()):
    encounters = [make_encounter(f"trap_{i}", "trap") for i in range(trap_count)]
    encounters += [
        make_encounter(
            f"item_{i}", "item",
            choices=[{"text": "Take it", "successEffects": {"itemsGained": ["ration"]}}],
        )
        for i in range(item_count)
    ]
    encounters += [make_encounter(f"character_{i}", "character", persistence="persistent") for i in range(characters)]
    encounters += [make_encounter(f"monster_{i}", "monster") for i in range(monsters)]
    encounters += list(extra_encounters)
    return Catalog.build(
        encounters=encounters,
        items=[ItemDefinition.from_dict(d) for d in ITEMS],
        statuses=[StatusEffectDefinition.from_dict(d) for d in STATUSES],
    )


@pytest.fixture
def catalog() -> Catalog:
    """Synthetic catalog large enough for a full distribution."""
    return build_catalog()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def grid() -> MazeGrid:
    """Default 8x8 open grid, start (0,0), exit (7,7)."""
    return MazeGrid.open_grid()


@pytest.fixture
def player() -> PlayerState:
    """Fresh player: HP 100, SAN 100, FIT 70, HUNGER 80, empty inventory."""
    return PlayerState.initial()


@pytest.fixture
def wounded_player() -> PlayerState:
    """Player with low stats and a few items."""
    return PlayerState(
        stats=PlayerStats(hp=20, san=50, fit=40, hunger=50),
        inventory=Inventory(items=[InventoryItem("bandage", 2), InventoryItem("lantern", 1)]),
    )


@pytest.fixture
def applicator(catalog) -> EffectApplicator:
    return EffectApplicator(catalog, DEFAULT_RULES)


@pytest.fixture
def evaluator(catalog) -> RequirementEvaluator:
    return RequirementEvaluator(catalog)


@pytest.fixture
def lifecycle(applicator) -> StatusLifecycle:
    return StatusLifecycle(applicator)


@pytest.fixture
def reducer(catalog) -> Reducer:
    return Reducer(catalog=catalog, rng=random.Random(99))


@pytest.fixture
def game_state(catalog, grid, player) -> GameState:
    """A distributed game, player standing in the start room."""
    allocation = EventDistributor(rng=random.Random(7)).distribute(grid, catalog)
    return GameState(
        game_id="test_game",
        player=player,
        allocation=allocation,
        phase=GamePhase.PLAYING,
        current_room_id=grid.start_room.room_id,
        random_seed=7,
    )
