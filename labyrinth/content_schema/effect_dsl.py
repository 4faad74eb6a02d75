"""
Effect DSL - Typed effect operations.

An effect is an ordered list of operations, each one a variant of a
small tagged union:
- StatDelta: signed change to one stat
- ItemGain / ItemLoss: inventory changes
- StatusApply / StatusRemove: status effect changes

Each variant carries only the fields it needs. The applicator groups
operations by category, so the order inside the list only matters
within a category.

Dict form (as loaded from content files):
    {
        "description": "You patch yourself up.",
        "statChanges": {"HP": 10, "SAN": -5},
        "itemsGained": ["bandage", {"id": "ration", "quantity": 2}],
        "itemsLost": ["torch"],
        "applyStatus": ["bleeding"],
        "removeStatus": ["fatigue"],
        "tags": ["rest"]
    }
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ..errors import ConfigurationError


class OperationKind(Enum):
    """Discriminator for effect operations."""
    STAT_DELTA = "stat_delta"
    ITEM_GAIN = "item_gain"
    ITEM_LOSS = "item_loss"
    STATUS_APPLY = "status_apply"
    STATUS_REMOVE = "status_remove"


@dataclass(frozen=True)
class StatDelta:
    """Add delta to a stat. The stat name is resolved by the applicator."""
    stat: str
    delta: int
    kind: OperationKind = field(default=OperationKind.STAT_DELTA, init=False)


@dataclass(frozen=True)
class ItemGain:
    item_id: str
    quantity: int = 1
    kind: OperationKind = field(default=OperationKind.ITEM_GAIN, init=False)


@dataclass(frozen=True)
class ItemLoss:
    item_id: str
    quantity: int = 1
    kind: OperationKind = field(default=OperationKind.ITEM_LOSS, init=False)


@dataclass(frozen=True)
class StatusApply:
    status_id: str
    kind: OperationKind = field(default=OperationKind.STATUS_APPLY, init=False)


@dataclass(frozen=True)
class StatusRemove:
    status_id: str
    kind: OperationKind = field(default=OperationKind.STATUS_REMOVE, init=False)


EffectOperation = Union[StatDelta, ItemGain, ItemLoss, StatusApply, StatusRemove]


@dataclass(frozen=True)
class EffectSpecification:
    """
    A complete effect: description, operations and trigger tags.

    Pure value object. The helper methods return new specifications.
    """
    description: str = ""
    operations: tuple[EffectOperation, ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def stat_deltas(self) -> list[StatDelta]:
        return [op for op in self.operations if op.kind == OperationKind.STAT_DELTA]

    @property
    def item_gains(self) -> list[ItemGain]:
        return [op for op in self.operations if op.kind == OperationKind.ITEM_GAIN]

    @property
    def item_losses(self) -> list[ItemLoss]:
        return [op for op in self.operations if op.kind == OperationKind.ITEM_LOSS]

    @property
    def status_applies(self) -> list[StatusApply]:
        return [op for op in self.operations if op.kind == OperationKind.STATUS_APPLY]

    @property
    def status_removes(self) -> list[StatusRemove]:
        return [op for op in self.operations if op.kind == OperationKind.STATUS_REMOVE]

    @property
    def is_empty(self) -> bool:
        return not self.operations

    def scaled(self, factor: int) -> EffectSpecification:
        """Multiply every stat delta by factor (used for multi-unit item use)."""
        ops = []
        for op in self.operations:
            if op.kind == OperationKind.STAT_DELTA:
                ops.append(StatDelta(op.stat, op.delta * factor))
            else:
                ops.append(op)
        return EffectSpecification(self.description, tuple(ops), self.tags)

    def with_operations(self, *operations: EffectOperation) -> EffectSpecification:
        return EffectSpecification(self.description, self.operations + tuple(operations), self.tags)

    def with_tags(self, *tags: str) -> EffectSpecification:
        return EffectSpecification(self.description, self.operations, self.tags + tuple(tags))

    def summary(self) -> list[str]:
        """Short human-readable lines, e.g. ["HP +10", "Removes: bleeding"]."""
        lines = []
        for op in self.stat_deltas:
            sign = "+" if op.delta >= 0 else ""
            lines.append(f"{op.stat} {sign}{op.delta}")
        if self.item_gains:
            lines.append("Gains: " + ", ".join(op.item_id for op in self.item_gains))
        if self.item_losses:
            lines.append("Loses: " + ", ".join(op.item_id for op in self.item_losses))
        if self.status_applies:
            lines.append("Applies: " + ", ".join(op.status_id for op in self.status_applies))
        if self.status_removes:
            lines.append("Removes: " + ", ".join(op.status_id for op in self.status_removes))
        return lines

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"description": self.description}
        if self.stat_deltas:
            data["statChanges"] = {op.stat: op.delta for op in self.stat_deltas}
        if self.item_gains:
            data["itemsGained"] = [{"id": op.item_id, "quantity": op.quantity} for op in self.item_gains]
        if self.item_losses:
            data["itemsLost"] = [{"id": op.item_id, "quantity": op.quantity} for op in self.item_losses]
        if self.status_applies:
            data["applyStatus"] = [op.status_id for op in self.status_applies]
        if self.status_removes:
            data["removeStatus"] = [op.status_id for op in self.status_removes]
        if self.tags:
            data["tags"] = list(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> EffectSpecification:
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Effect must be an object, got {type(data).__name__}")

        ops: list[EffectOperation] = []
        for stat, delta in (data.get("statChanges") or {}).items():
            ops.append(StatDelta(stat=str(stat), delta=_as_int(delta, f"statChanges.{stat}")))
        for entry in data.get("itemsGained") or []:
            item_id, quantity = _item_line(entry)
            ops.append(ItemGain(item_id, quantity))
        for entry in data.get("itemsLost") or []:
            item_id, quantity = _item_line(entry)
            ops.append(ItemLoss(item_id, quantity))
        for status_id in data.get("applyStatus") or []:
            ops.append(StatusApply(str(status_id)))
        for status_id in data.get("removeStatus") or []:
            ops.append(StatusRemove(str(status_id)))

        return cls(
            description=data.get("description", ""),
            operations=tuple(ops),
            tags=tuple(str(t) for t in data.get("tags") or []),
        )


def _as_int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{where} must be a number, got {value!r}")
    return int(value)


def _item_line(entry: Any) -> tuple[str, int]:
    """Accept "item_id" or {"id": ..., "quantity": ...}."""
    if isinstance(entry, str):
        return entry, 1
    if isinstance(entry, dict) and "id" in entry:
        return str(entry["id"]), _as_int(entry.get("quantity", 1), f"item {entry['id']} quantity")
    raise ConfigurationError(f"Invalid item entry: {entry!r}")


# Convenience builders

def stat_effect(description: str = "", **deltas: int) -> EffectSpecification:
    """stat_effect("Ouch", HP=-10, SAN=-5)"""
    return EffectSpecification(
        description=description,
        operations=tuple(StatDelta(stat, delta) for stat, delta in deltas.items()),
    )
