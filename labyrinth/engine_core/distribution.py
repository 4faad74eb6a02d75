"""
Event Distribution - places encounters into maze rooms.

Three steps, always in this order:
1. Traps: a fixed number of distinct traps, one per room, each room
   locked against further encounters
2. Item encounters: a fixed number of distinct encounters spread over
   the open rooms, several per room allowed
3. Characters and monsters: every open room receives a random number
   of distinct encounters from the combined pool

Start and exit rooms never receive encounters. Every step builds a new
AllocationSession; a step that raises leaves its input untouched.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Union

from ..config import DEFAULT_RULES, RulesConfig
from ..errors import CapacityError
from ..content_schema.catalog import Catalog
from ..content_schema.definitions import EncounterDefinition
from .maze import MazeGrid
from .rooms import AllocationSession, RoomAssignment

logger = logging.getLogger(__name__)


WeightedPool = Union[Mapping[str, int], Iterable[EncounterDefinition]]


def normalize_weight(weight: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Non-positive weights are replaced by the default weight."""
    return weight if weight > 0 else rules.default_weight


def pool_weights(pool: WeightedPool, rules: RulesConfig = DEFAULT_RULES) -> dict[str, int]:
    """id -> usable weight, preserving pool order. Later duplicates are ignored."""
    if isinstance(pool, Mapping):
        pairs = list(pool.items())
    else:
        pairs = [(e.id, e.weight) for e in pool]
    weights: dict[str, int] = {}
    for event_id, weight in pairs:
        if event_id not in weights:
            weights[event_id] = normalize_weight(int(weight), rules)
    return weights


def weighted_sample(
    weights: Mapping[str, int],
    count: int,
    rng: random.Random,
) -> list[str]:
    """
    Weighted sampling without replacement.

    Each candidate owns a span of its weight on a cumulative line. A
    uniform draw in [0, total) picks the span it falls in; the winner is
    removed and the line shrinks by its weight. Weights must be positive.
    """
    if count < 0:
        raise CapacityError(f"Count cannot be negative: {count}")
    if count > len(weights):
        raise CapacityError(
            f"Cannot select {count} distinct events from a pool of {len(weights)}"
        )

    remaining = dict(weights)
    total = sum(remaining.values())
    selected: list[str] = []
    for _ in range(count):
        draw = rng.randrange(total)
        cumulative = 0
        for event_id, weight in remaining.items():
            cumulative += weight
            if draw < cumulative:
                selected.append(event_id)
                total -= weight
                del remaining[event_id]
                break
    return selected


@dataclass
class EventDistributor:
    """
    Assigns encounters to rooms.

    All randomness comes from rng, so a seeded Random reproduces the
    same allocation for the same grid and pools.
    """
    rng: random.Random = field(default_factory=random.Random)
    rules: RulesConfig = DEFAULT_RULES

    def select_events_by_weight(self, pool: WeightedPool, count: int) -> list[str]:
        """Pick count distinct ids from pool, weighted."""
        return weighted_sample(pool_weights(pool, self.rules), count, self.rng)

    def assign_trap_events(self, grid: MazeGrid, trap_pool: WeightedPool) -> AllocationSession:
        """
        Start a new allocation with trap_count locked trap rooms.

        Always returns a fresh session; any previous allocation is
        discarded, not merged.
        """
        weights = pool_weights(trap_pool, self.rules)
        needed = self.rules.trap_count
        if not weights:
            raise CapacityError("No trap events available for assignment")
        if len(weights) < needed:
            raise CapacityError(f"Need at least {needed} trap events, got {len(weights)}")
        eligible = grid.eligible_room_ids()
        if len(eligible) < needed:
            raise CapacityError(f"Need at least {needed} rooms for traps, grid has {len(eligible)}")

        trap_ids = weighted_sample(weights, needed, self.rng)
        rooms = self.rng.sample(eligible, needed)

        session = AllocationSession()
        for room_id, trap_id in zip(rooms, trap_ids):
            session = session.with_room(RoomAssignment(room_id=room_id).with_trap(trap_id))

        logger.info("Assigned %d traps to %d rooms", len(trap_ids), len(rooms))
        return session

    def assign_item_events(
        self,
        grid: MazeGrid,
        item_pool: WeightedPool,
        session: AllocationSession | None = None,
    ) -> AllocationSession:
        """Spread item_count distinct item encounters over open rooms."""
        session = session or AllocationSession()
        weights = pool_weights(item_pool, self.rules)
        needed = self.rules.item_count
        if not weights:
            raise CapacityError("No item events available for assignment")
        if len(weights) < needed:
            raise CapacityError(f"Need at least {needed} item events, got {len(weights)}")
        open_rooms = self._open_rooms(grid, session)
        if not open_rooms:
            raise CapacityError("No rooms available for item assignment")

        item_ids = weighted_sample(weights, needed, self.rng)
        touched = set()
        for item_id in item_ids:
            room_id = self.rng.choice(open_rooms)
            session = session.with_room(session.get(room_id).with_event(item_id))
            touched.add(room_id)

        logger.info("Assigned %d item events to %d rooms", len(item_ids), len(touched))
        return session

    def assign_character_monster_events(
        self,
        grid: MazeGrid,
        character_pool: WeightedPool,
        monster_pool: WeightedPool,
        session: AllocationSession | None = None,
    ) -> AllocationSession:
        """
        Give every open room between min and max events per room.

        Draws are without replacement inside one room, so the count for
        a room is capped by the size of the combined pool.
        """
        session = session or AllocationSession()
        weights = pool_weights(character_pool, self.rules)
        for event_id, weight in pool_weights(monster_pool, self.rules).items():
            weights.setdefault(event_id, weight)
        if not weights:
            raise CapacityError("No character or monster events available for assignment")
        open_rooms = self._open_rooms(grid, session)
        if not open_rooms:
            raise CapacityError("No rooms available for character/monster assignment")

        placed = 0
        for room_id in open_rooms:
            count = self.rng.randint(self.rules.min_events_per_room, self.rules.max_events_per_room)
            count = min(count, len(weights))
            assignment = session.get(room_id)
            for event_id in weighted_sample(weights, count, self.rng):
                assignment = assignment.with_event(event_id)
                placed += 1
            session = session.with_room(assignment)

        logger.info("Assigned %d character/monster events to %d rooms", placed, len(open_rooms))
        return session

    def distribute(self, grid: MazeGrid, catalog: Catalog) -> AllocationSession:
        """Run all three steps against the catalog's encounter pools."""
        session = self.assign_trap_events(grid, catalog.traps)
        session = self.assign_item_events(grid, catalog.item_encounters, session)
        return self.assign_character_monster_events(
            grid, catalog.characters, catalog.monsters, session
        )

    def _open_rooms(self, grid: MazeGrid, session: AllocationSession) -> list[str]:
        return [rid for rid in grid.eligible_room_ids() if not session.get(rid).exclusive]
