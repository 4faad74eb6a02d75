"""
Catalog - read-only lookup tables for content definitions.

Passed explicitly to every engine component that needs definitions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ..errors import ConfigurationError
from .definitions import (
    EncounterCategory,
    EncounterDefinition,
    ItemDefinition,
    StatusEffectDefinition,
)


@dataclass(frozen=True)
class Catalog:
    """Encounters, items and statuses by id."""
    encounters: Mapping[str, EncounterDefinition] = field(default_factory=dict)
    items: Mapping[str, ItemDefinition] = field(default_factory=dict)
    statuses: Mapping[str, StatusEffectDefinition] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        encounters: Iterable[EncounterDefinition] = (),
        items: Iterable[ItemDefinition] = (),
        statuses: Iterable[StatusEffectDefinition] = (),
    ) -> Catalog:
        """Index definitions by id. Duplicate ids are a configuration error."""
        return cls(
            encounters=MappingProxyType(_index(encounters, "encounter")),
            items=MappingProxyType(_index(items, "item")),
            statuses=MappingProxyType(_index(statuses, "status")),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Catalog:
        return cls.build(
            encounters=[EncounterDefinition.from_dict(e) for e in data.get("events", [])],
            items=[ItemDefinition.from_dict(i) for i in data.get("items", [])],
            statuses=[StatusEffectDefinition.from_dict(s) for s in data.get("statusEffects", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "events": [e.to_dict() for e in self.encounters.values()],
            "items": [i.to_dict() for i in self.items.values()],
            "statusEffects": [s.to_dict() for s in self.statuses.values()],
        }

    def get_encounter(self, encounter_id: str) -> EncounterDefinition | None:
        return self.encounters.get(encounter_id)

    def get_item(self, item_id: str) -> ItemDefinition | None:
        return self.items.get(item_id)

    def get_status(self, status_id: str) -> StatusEffectDefinition | None:
        return self.statuses.get(status_id)

    def encounters_in(self, category: EncounterCategory) -> list[EncounterDefinition]:
        return [e for e in self.encounters.values() if e.category == category]

    @property
    def traps(self) -> list[EncounterDefinition]:
        return self.encounters_in(EncounterCategory.TRAP)

    @property
    def item_encounters(self) -> list[EncounterDefinition]:
        return self.encounters_in(EncounterCategory.ITEM)

    @property
    def characters(self) -> list[EncounterDefinition]:
        return self.encounters_in(EncounterCategory.CHARACTER)

    @property
    def monsters(self) -> list[EncounterDefinition]:
        return self.encounters_in(EncounterCategory.MONSTER)

    @property
    def triggered_statuses(self) -> list[StatusEffectDefinition]:
        """Statuses with an automatic stat trigger, in priority order."""
        found = [s for s in self.statuses.values() if s.trigger is not None]
        return sorted(found, key=lambda s: s.order_key)


def _index(definitions: Iterable[Any], kind: str) -> dict[str, Any]:
    table: dict[str, Any] = {}
    for definition in definitions:
        if definition.id in table:
            raise ConfigurationError(f"Duplicate {kind} id: {definition.id}")
        table[definition.id] = definition
    return table
