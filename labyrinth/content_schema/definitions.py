"""
Content definitions - encounters, items and status effects.

These are the already-parsed shapes the engine consumes. Loading them
from files is the caller's business; from_dict() accepts the camelCase
dict form used by the content files.
"""

from __future__ import annotations
import operator as op
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from ..errors import ConfigurationError
from .effect_dsl import EffectSpecification, StatDelta


# Sentinel used in content files for condition-bound durations
UNTIL_CLEARED = "untilCleared"

# Supported stat comparison operators
COMPARISON_OPERATORS: dict[str, Callable[[int, int], bool]] = {
    ">": op.gt,
    ">=": op.ge,
    "<": op.lt,
    "<=": op.le,
    "==": op.eq,
}


class EncounterCategory(Enum):
    EMPTY = "empty"
    ITEM = "item"
    MONSTER = "monster"
    TRAP = "trap"
    CHARACTER = "character"


class Persistence(Enum):
    ONE_TIME = "oneTime"
    PERSISTENT = "persistent"


class StatusKind(Enum):
    BUFF = "BUFF"
    DEBUFF = "DEBUFF"


@dataclass(frozen=True)
class StatComparison:
    """
    A single stat test, e.g. FIT >= 50.

    The operator is kept as written; the requirement evaluator rejects
    unknown operators when it runs.
    """
    operator: str
    value: int

    def to_dict(self) -> dict[str, Any]:
        return {"operator": self.operator, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatComparison:
        if not isinstance(data, dict) or "operator" not in data or "value" not in data:
            raise ConfigurationError(f"Stat comparison needs operator and value: {data!r}")
        return cls(operator=str(data["operator"]), value=int(data["value"]))


def _comparisons(data: dict[str, Any] | None) -> dict[str, StatComparison]:
    return {str(stat): StatComparison.from_dict(c) for stat, c in (data or {}).items()}


@dataclass(frozen=True)
class Requirement:
    """Items that must be held and stat comparisons that must hold."""
    items: tuple[str, ...] = ()
    stats: dict[str, StatComparison] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.items and not self.stats

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.items:
            data["items"] = list(self.items)
        if self.stats:
            data["stats"] = {s: c.to_dict() for s, c in self.stats.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Requirement | None:
        if not data:
            return None
        return cls(
            items=tuple(str(i) for i in data.get("items") or []),
            stats=_comparisons(data.get("stats")),
        )


@dataclass(frozen=True)
class SuccessConditions:
    """
    Secondary gate on a choice's success path.

    Either a probability in [0, 1] drawn from the injected random
    source, or stat comparisons that must all hold.
    """
    probability: float | None = None
    stats: dict[str, StatComparison] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.probability is not None:
            data["probability"] = self.probability
        if self.stats:
            data["stats"] = {s: c.to_dict() for s, c in self.stats.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SuccessConditions | None:
        if not data:
            return None
        probability = data.get("probability")
        if probability is not None:
            probability = float(probability)
            if not 0.0 <= probability <= 1.0:
                raise ConfigurationError(f"Success probability must be in [0, 1], got {probability}")
        return cls(probability=probability, stats=_comparisons(data.get("stats")))


@dataclass(frozen=True)
class Choice:
    """One option of an encounter."""
    text: str
    requirements: Requirement | None = None
    success_conditions: SuccessConditions | None = None
    success_effects: EffectSpecification = field(default_factory=EffectSpecification)
    failure_effects: EffectSpecification | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "text": self.text,
            "successEffects": self.success_effects.to_dict(),
        }
        if self.requirements:
            data["requirements"] = self.requirements.to_dict()
        if self.success_conditions:
            data["successConditions"] = self.success_conditions.to_dict()
        if self.failure_effects:
            data["failureEffects"] = self.failure_effects.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Choice:
        failure = data.get("failureEffects")
        return cls(
            text=data.get("text", ""),
            requirements=Requirement.from_dict(data.get("requirements")),
            success_conditions=SuccessConditions.from_dict(data.get("successConditions")),
            success_effects=EffectSpecification.from_dict(data.get("successEffects")),
            failure_effects=EffectSpecification.from_dict(failure) if failure else None,
        )


@dataclass(frozen=True)
class EncounterDefinition:
    """
    A room event.

    weight is kept as written; the distributor substitutes the default
    weight for non-positive values when sampling.
    """
    id: str
    category: EncounterCategory
    choices: tuple[Choice, ...] = ()
    name: str = ""
    description: str = ""
    image: str = ""
    weight: int = 10
    persistence: Persistence = Persistence.ONE_TIME

    @property
    def is_one_time(self) -> bool:
        return self.persistence == Persistence.ONE_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "category": self.category.value,
            "weight": self.weight,
            "persistence": self.persistence.value,
            "choices": [c.to_dict() for c in self.choices],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EncounterDefinition:
        if not data.get("id"):
            raise ConfigurationError("Encounter is missing an id")
        try:
            category = EncounterCategory(data.get("category", "empty"))
            persistence = Persistence(data.get("persistence", Persistence.ONE_TIME.value))
        except ValueError as e:
            raise ConfigurationError(f"Encounter {data['id']}: {e}") from e
        return cls(
            id=data["id"],
            category=category,
            choices=tuple(Choice.from_dict(c) for c in data.get("choices") or []),
            name=data.get("name", ""),
            description=data.get("description", ""),
            image=data.get("image", ""),
            weight=int(data.get("weight", 10)),
            persistence=persistence,
        )


@dataclass(frozen=True)
class ItemDefinition:
    """A usable item."""
    id: str
    name: str = ""
    description: str = ""
    image: str = ""
    consume_on_use: bool = True
    effects: EffectSpecification = field(default_factory=EffectSpecification)

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "consumeOnUse": self.consume_on_use,
            "effects": self.effects.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ItemDefinition:
        if not data.get("id"):
            raise ConfigurationError("Item is missing an id")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            image=data.get("image", ""),
            consume_on_use=bool(data.get("consumeOnUse", True)),
            effects=EffectSpecification.from_dict(data.get("effects")),
        )


@dataclass(frozen=True)
class StatTrigger:
    """Automatic application condition, e.g. HUNGER <= 10."""
    stat: str
    comparison: StatComparison

    def to_dict(self) -> dict[str, Any]:
        return {"stat": self.stat, **self.comparison.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> StatTrigger | None:
        if not data:
            return None
        return cls(stat=str(data["stat"]), comparison=StatComparison.from_dict(data))


@dataclass(frozen=True)
class StatusEffectDefinition:
    """
    A status effect.

    duration is a number of turns, or None for effects that last until
    their trigger condition stops holding. Statuses sharing a slot are
    mutually exclusive; priority decides which one wins.
    """
    id: str
    name: str = ""
    kind: StatusKind = StatusKind.DEBUFF
    priority: int = 0
    ongoing: tuple[StatDelta, ...] = ()
    duration: int | None = 1
    stackable: bool = False
    max_stacks: int = 1
    removal_triggers: tuple[str, ...] = ()
    slot: str | None = None
    trigger: StatTrigger | None = None
    description: str = ""

    @property
    def stack_limit(self) -> int:
        return max(1, self.max_stacks) if self.stackable else 1

    @property
    def is_condition_bound(self) -> bool:
        return self.duration is None

    @property
    def is_debuff(self) -> bool:
        return self.kind == StatusKind.DEBUFF

    @property
    def order_key(self) -> tuple[int, str]:
        """Total order: higher priority first, then id."""
        return (-self.priority, self.id)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.kind.value,
            "priority": self.priority,
            "ongoing": {op.stat: op.delta for op in self.ongoing},
            "duration": UNTIL_CLEARED if self.duration is None else self.duration,
            "stackable": self.stackable,
            "maxStacks": self.max_stacks,
            "removalTriggers": list(self.removal_triggers),
            "description": self.description,
        }
        if self.slot:
            data["slot"] = self.slot
        if self.trigger:
            data["trigger"] = self.trigger.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusEffectDefinition:
        if not data.get("id"):
            raise ConfigurationError("Status effect is missing an id")
        raw_duration = data.get("duration", 1)
        if raw_duration == UNTIL_CLEARED or raw_duration is None:
            duration = None
        elif isinstance(raw_duration, str):
            raise ConfigurationError(
                f"Status {data['id']}: duration must be a number or {UNTIL_CLEARED!r}"
            )
        else:
            duration = int(raw_duration)
        trigger = StatTrigger.from_dict(data.get("trigger"))
        if duration is None and trigger is None:
            raise ConfigurationError(
                f"Status {data['id']}: {UNTIL_CLEARED!r} duration needs a trigger condition"
            )
        try:
            kind = StatusKind(str(data.get("type", StatusKind.DEBUFF.value)).upper())
        except ValueError as e:
            raise ConfigurationError(f"Status {data['id']}: {e}") from e
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            kind=kind,
            priority=int(data.get("priority", 0)),
            ongoing=tuple(StatDelta(str(s), int(d)) for s, d in (data.get("ongoing") or {}).items()),
            duration=duration,
            stackable=bool(data.get("stackable", False)),
            max_stacks=int(data.get("maxStacks", 1)),
            removal_triggers=tuple(str(t) for t in data.get("removalTriggers") or []),
            slot=data.get("slot"),
            trigger=trigger,
            description=data.get("description", ""),
        )
