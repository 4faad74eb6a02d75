"""
Game State - Player snapshot and game aggregate.

Design principles:
- Immutable-friendly: all mutators return new objects
- Serializable: to_dict()/from_dict() round-trip without loss
- Bounded: stats are clamped to [stat_min, stat_max] on every write
- Single owner: the GameState aggregate is replaced, never shared
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING
from copy import deepcopy
from enum import Enum

from ..config import DEFAULT_RULES, DEFAULT_STARTING_STATS, RulesConfig

if TYPE_CHECKING:
    from ..content_schema.catalog import Catalog
    from ..content_schema.definitions import EncounterDefinition
    from .rooms import AllocationSession
    from .action import Action


class StatName(Enum):
    """Canonical player stats."""
    HP = "HP"
    SANITY = "SAN"
    FITNESS = "FIT"
    HUNGER = "HUNGER"


# Every accepted spelling -> canonical stat
STAT_ALIASES: dict[str, StatName] = {
    "HP": StatName.HP,
    "HEALTH": StatName.HP,
    "SAN": StatName.SANITY,
    "SANITY": StatName.SANITY,
    "FIT": StatName.FITNESS,
    "FITNESS": StatName.FITNESS,
    "HUNGER": StatName.HUNGER,
}


def canonical_stat(name: str | StatName) -> StatName | None:
    """Resolve a stat name or alias (any case). Unknown names give None."""
    if isinstance(name, StatName):
        return name
    if not isinstance(name, str):
        return None
    return STAT_ALIASES.get(name.strip().upper())


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass
class PlayerStats:
    """The four bounded player attributes."""
    hp: int = DEFAULT_STARTING_STATS.hp
    san: int = DEFAULT_STARTING_STATS.san
    fit: int = DEFAULT_STARTING_STATS.fit
    hunger: int = DEFAULT_STARTING_STATS.hunger

    _FIELDS = {
        StatName.HP: "hp",
        StatName.SANITY: "san",
        StatName.FITNESS: "fit",
        StatName.HUNGER: "hunger",
    }

    def get(self, stat: StatName) -> int:
        return getattr(self, self._FIELDS[stat])

    def with_value(self, stat: StatName, value: int, rules: RulesConfig = DEFAULT_RULES) -> PlayerStats:
        """Return new stats with one value replaced (clamped)."""
        values = self.as_dict()
        values[stat] = clamp(value, rules.stat_min, rules.stat_max)
        return PlayerStats(
            hp=values[StatName.HP],
            san=values[StatName.SANITY],
            fit=values[StatName.FITNESS],
            hunger=values[StatName.HUNGER],
        )

    def as_dict(self) -> dict[StatName, int]:
        return {stat: self.get(stat) for stat in StatName}

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_sane(self) -> bool:
        return self.san > 0

    @property
    def is_starving(self) -> bool:
        return self.hunger <= 0

    def to_dict(self) -> dict[str, int]:
        return {"hp": self.hp, "san": self.san, "fit": self.fit, "hunger": self.hunger}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerStats:
        return cls(
            hp=int(data.get("hp", DEFAULT_STARTING_STATS.hp)),
            san=int(data.get("san", DEFAULT_STARTING_STATS.san)),
            fit=int(data.get("fit", DEFAULT_STARTING_STATS.fit)),
            hunger=int(data.get("hunger", DEFAULT_STARTING_STATS.hunger)),
        )


@dataclass
class InventoryItem:
    """One inventory slot."""
    item_id: str
    quantity: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.item_id, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InventoryItem:
        return cls(item_id=data["id"], quantity=int(data.get("quantity", 1)))


@dataclass
class Inventory:
    """
    Ordered, capacity-bounded list of item slots.

    Capacity bounds distinct slots; adding to an existing slot stacks
    and is allowed even when every slot is taken.
    """
    items: list[InventoryItem] = field(default_factory=list)
    capacity: int = DEFAULT_RULES.inventory_capacity

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.capacity

    @property
    def available_slots(self) -> int:
        return max(0, self.capacity - len(self.items))

    def get_item(self, item_id: str) -> InventoryItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def quantity_of(self, item_id: str) -> int:
        item = self.get_item(item_id)
        return item.quantity if item else 0

    def has_item(self, item_id: str, quantity: int = 1) -> bool:
        return self.quantity_of(item_id) >= quantity

    def can_add(self, item_id: str) -> bool:
        return self.get_item(item_id) is not None or not self.is_full

    def add(self, item_id: str, quantity: int = 1) -> tuple[bool, Inventory]:
        """Return (added, new inventory). Unchanged inventory when rejected."""
        if quantity <= 0 or not self.can_add(item_id):
            return False, self
        new_items = []
        stacked = False
        for item in self.items:
            if item.item_id == item_id:
                new_items.append(InventoryItem(item_id, item.quantity + quantity))
                stacked = True
            else:
                new_items.append(InventoryItem(item.item_id, item.quantity))
        if not stacked:
            new_items.append(InventoryItem(item_id, quantity))
        return True, Inventory(items=new_items, capacity=self.capacity)

    def remove(self, item_id: str, quantity: int = 1) -> tuple[bool, Inventory]:
        """
        Return (removed, new inventory).

        Removing more than is held is rejected as a whole; removing the
        last unit drops the slot.
        """
        held = self.quantity_of(item_id)
        if quantity <= 0 or held < quantity:
            return False, self
        new_items = []
        for item in self.items:
            if item.item_id != item_id:
                new_items.append(InventoryItem(item.item_id, item.quantity))
            elif item.quantity > quantity:
                new_items.append(InventoryItem(item_id, item.quantity - quantity))
        return True, Inventory(items=new_items, capacity=self.capacity)

    def describe(self, catalog: Catalog | None = None) -> list[dict[str, Any]]:
        """Per-slot display data for the boundary layer."""
        rows = []
        for item in self.items:
            definition = catalog.get_item(item.item_id) if catalog else None
            rows.append({
                "id": item.item_id,
                "name": definition.name if definition else item.item_id,
                "quantity": item.quantity,
                "description": definition.description if definition else "",
                "consume_on_use": definition.consume_on_use if definition else True,
                "effects": definition.effects.summary() if definition else [],
            })
        return rows

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "capacity": self.capacity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | list) -> Inventory:
        if isinstance(data, list):
            return cls(items=[InventoryItem.from_dict(d) for d in data])
        return cls(
            items=[InventoryItem.from_dict(d) for d in data.get("items", [])],
            capacity=int(data.get("capacity", DEFAULT_RULES.inventory_capacity)),
        )


@dataclass
class StatusEffectInstance:
    """
    A status effect currently on the player.

    remaining_duration is None for condition-bound effects, which never
    tick down and are removed when their trigger condition clears.
    """
    status_id: str
    remaining_duration: int | None = 1
    stacks: int = 1

    @property
    def is_condition_bound(self) -> bool:
        return self.remaining_duration is None

    @property
    def is_expired(self) -> bool:
        return self.remaining_duration is not None and self.remaining_duration <= 0

    def ticked(self) -> StatusEffectInstance:
        """Return the instance one turn later."""
        if self.remaining_duration is None:
            return StatusEffectInstance(self.status_id, None, self.stacks)
        return StatusEffectInstance(
            self.status_id,
            max(0, self.remaining_duration - 1),
            self.stacks,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.status_id,
            "remainingDuration": self.remaining_duration,
            "stacks": self.stacks,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusEffectInstance:
        duration = data.get("remainingDuration", 1)
        return cls(
            status_id=data["id"],
            remaining_duration=None if duration is None else int(duration),
            stacks=int(data.get("stacks", 1)),
        )


@dataclass
class PlayerState:
    """
    The Stat Model: stats, inventory and active statuses.

    Passed by value into the engine and replaced by the returned copy.
    """
    stats: PlayerStats = field(default_factory=PlayerStats)
    inventory: Inventory = field(default_factory=Inventory)
    statuses: list[StatusEffectInstance] = field(default_factory=list)
    turn_count: int = 0

    @classmethod
    def initial(cls, rules: RulesConfig = DEFAULT_RULES) -> PlayerState:
        return cls(inventory=Inventory(capacity=rules.inventory_capacity))

    def get_status(self, status_id: str) -> StatusEffectInstance | None:
        for status in self.statuses:
            if status.status_id == status_id:
                return status
        return None

    def has_status(self, status_id: str) -> bool:
        return self.get_status(status_id) is not None

    @property
    def is_game_over(self) -> bool:
        return not self.stats.is_alive or not self.stats.is_sane

    @property
    def game_over_reason(self) -> str | None:
        if not self.stats.is_alive:
            return "death"
        if not self.stats.is_sane:
            return "insanity"
        return None

    def with_stats(self, stats: PlayerStats) -> PlayerState:
        return self._copy_with(stats=stats)

    def with_inventory(self, inventory: Inventory) -> PlayerState:
        return self._copy_with(inventory=inventory)

    def with_statuses(self, statuses: list[StatusEffectInstance]) -> PlayerState:
        return self._copy_with(statuses=list(statuses))

    def next_turn(self) -> PlayerState:
        return self._copy_with(turn_count=self.turn_count + 1)

    def _copy_with(self, **kwargs) -> PlayerState:
        return PlayerState(
            stats=kwargs.get("stats", self.stats),
            inventory=kwargs.get("inventory", self.inventory),
            statuses=kwargs.get("statuses", self.statuses),
            turn_count=kwargs.get("turn_count", self.turn_count),
        )

    def clone(self) -> PlayerState:
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "inventory": self.inventory.to_dict(),
            "statusEffects": [s.to_dict() for s in self.statuses],
            "turnCount": self.turn_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerState:
        return cls(
            stats=PlayerStats.from_dict(data.get("stats", {})),
            inventory=Inventory.from_dict(data.get("inventory", {})),
            statuses=[StatusEffectInstance.from_dict(s) for s in data.get("statusEffects", [])],
            turn_count=int(data.get("turnCount", 0)),
        )


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    Owns the player snapshot and the room allocation for one run.
    All state changes go through the reducer.
    """
    game_id: str
    player: PlayerState = field(default_factory=PlayerState)
    allocation: AllocationSession | None = None

    phase: GamePhase = GamePhase.SETUP
    current_room_id: str | None = None
    current_encounter: EncounterDefinition | None = None

    # Applied actions, oldest first
    action_history: list[Action] = field(default_factory=list)

    random_seed: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def turn_number(self) -> int:
        return self.player.turn_count

    def with_player(self, player: PlayerState) -> GameState:
        phase = GamePhase.GAME_OVER if player.is_game_over else self.phase
        return self._copy_with(player=player, phase=phase)

    def with_allocation(self, allocation: AllocationSession) -> GameState:
        return self._copy_with(allocation=allocation)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            game_id=kwargs.get("game_id", self.game_id),
            player=kwargs.get("player", self.player),
            allocation=kwargs.get("allocation", self.allocation),
            phase=kwargs.get("phase", self.phase),
            current_room_id=kwargs.get("current_room_id", self.current_room_id),
            current_encounter=kwargs.get("current_encounter", self.current_encounter),
            action_history=kwargs.get("action_history", self.action_history),
            random_seed=kwargs.get("random_seed", self.random_seed),
            metadata=kwargs.get("metadata", self.metadata),
        )

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gameId": self.game_id,
            "player": self.player.to_dict(),
            "allocation": self.allocation.to_dict() if self.allocation else None,
            "phase": self.phase.value,
            "currentRoomId": self.current_room_id,
            "currentEvent": self.current_encounter.to_dict() if self.current_encounter else None,
            "actionHistory": [a.to_dict() for a in self.action_history],
            "randomSeed": self.random_seed,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        from ..content_schema.definitions import EncounterDefinition
        from .rooms import AllocationSession
        from .action import Action

        allocation = data.get("allocation")
        encounter = data.get("currentEvent")
        return cls(
            game_id=data["gameId"],
            player=PlayerState.from_dict(data.get("player", {})),
            allocation=AllocationSession.from_dict(allocation) if allocation else None,
            phase=GamePhase(data.get("phase", GamePhase.SETUP.value)),
            current_room_id=data.get("currentRoomId"),
            current_encounter=EncounterDefinition.from_dict(encounter) if encounter else None,
            action_history=[Action.from_dict(a) for a in data.get("actionHistory", [])],
            random_seed=data.get("randomSeed"),
            metadata=dict(data.get("metadata", {})),
        )
