"""
Tests for content loading and catalog validation.

Tests:
- Dict parsing of encounters, items and statuses
- Catalog construction
- Validation errors and warnings
- Built-in content
"""

import pytest

from ..content.labyrinth_base import create_base_catalog
from ..content_schema import (
    Catalog,
    CatalogValidationError,
    EffectSpecification,
    EncounterCategory,
    EncounterDefinition,
    ItemGain,
    Persistence,
    StatusEffectDefinition,
    validate_catalog,
)
from ..errors import ConfigurationError
from .conftest import build_catalog, make_encounter


class TestEffectParsing:
    """Tests for the effect dict form."""

    def test_full_effect(self):
        effect = EffectSpecification.from_dict({
            "description": "Mixed bag",
            "statChanges": {"HP": 10, "SAN": -5},
            "itemsGained": ["rope", {"id": "ration", "quantity": 2}],
            "itemsLost": ["key"],
            "applyStatus": ["bleeding"],
            "removeStatus": ["poison"],
            "tags": ["rest"],
        })
        assert [(op.stat, op.delta) for op in effect.stat_deltas] == [("HP", 10), ("SAN", -5)]
        assert effect.item_gains[1] == ItemGain("ration", 2)
        assert effect.item_losses[0].item_id == "key"
        assert effect.status_applies[0].status_id == "bleeding"
        assert effect.status_removes[0].status_id == "poison"
        assert effect.tags == ("rest",)

    def test_empty_effect(self):
        assert EffectSpecification.from_dict(None).is_empty
        assert EffectSpecification.from_dict({}).is_empty

    def test_bad_stat_value(self):
        with pytest.raises(ConfigurationError):
            EffectSpecification.from_dict({"statChanges": {"HP": "lots"}})

    def test_bad_item_entry(self):
        with pytest.raises(ConfigurationError):
            EffectSpecification.from_dict({"itemsGained": [42]})

    def test_summary(self):
        effect = EffectSpecification.from_dict({"statChanges": {"HP": 10}, "removeStatus": ["bleeding"]})
        assert effect.summary() == ["HP +10", "Removes: bleeding"]


class TestDefinitionParsing:
    """Tests for encounter and status definitions."""

    def test_encounter(self):
        encounter = make_encounter("hermit", "character", persistence="persistent")
        assert encounter.category == EncounterCategory.CHARACTER
        assert encounter.persistence == Persistence.PERSISTENT
        assert not encounter.is_one_time

    def test_encounter_unknown_category(self):
        with pytest.raises(ConfigurationError):
            EncounterDefinition.from_dict({"id": "x", "category": "dragon"})

    def test_encounter_round_trip(self):
        encounter = make_encounter("door", "trap", choices=[{
            "text": "Open",
            "requirements": {"items": ["key"], "stats": {"FIT": {"operator": ">", "value": 10}}},
            "successConditions": {"probability": 0.5},
            "successEffects": {"statChanges": {"SAN": 1}},
            "failureEffects": {"statChanges": {"HP": -1}},
        }])
        assert EncounterDefinition.from_dict(encounter.to_dict()) == encounter

    def test_probability_out_of_range(self):
        with pytest.raises(ConfigurationError):
            make_encounter("x", "trap", choices=[{"text": "Go", "successConditions": {"probability": 1.5}}])

    def test_until_cleared_needs_trigger(self):
        with pytest.raises(ConfigurationError):
            StatusEffectDefinition.from_dict({"id": "doom", "duration": "untilCleared"})

    def test_until_cleared_status(self):
        status = StatusEffectDefinition.from_dict({
            "id": "hungry",
            "duration": "untilCleared",
            "trigger": {"stat": "HUNGER", "operator": "<=", "value": 10},
        })
        assert status.is_condition_bound
        assert status.to_dict()["duration"] == "untilCleared"

    def test_stack_limit(self):
        assert StatusEffectDefinition(id="a", stackable=False, max_stacks=5).stack_limit == 1
        assert StatusEffectDefinition(id="b", stackable=True, max_stacks=4).stack_limit == 4


class TestCatalog:
    """Tests for catalog construction."""

    def test_pools(self, catalog):
        assert len(catalog.traps) == 12
        assert len(catalog.item_encounters) == 16
        assert len(catalog.characters) == 2
        assert len(catalog.monsters) == 2

    def test_duplicate_ids(self):
        with pytest.raises(ConfigurationError):
            Catalog.build(encounters=[make_encounter("a", "trap"), make_encounter("a", "trap")])

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.items["new"] = None

    def test_round_trip(self, catalog):
        assert Catalog.from_dict(catalog.to_dict()).to_dict() == catalog.to_dict()

    def test_triggered_statuses(self, catalog):
        assert [s.id for s in catalog.triggered_statuses] == ["hungry", "chill"]


class TestValidation:
    """Tests for validate_catalog."""

    def test_valid_catalog(self, catalog):
        result = validate_catalog(catalog)
        assert result.valid, result.errors

    def test_unknown_item_reference(self):
        bad = make_encounter("bad", "monster", choices=[
            {"text": "Take", "successEffects": {"itemsGained": ["ghost_item"]}},
        ])
        result = validate_catalog(build_catalog(extra_encounters=[bad]))
        assert not result.valid
        assert any("ghost_item" in e for e in result.errors)

    def test_unknown_operator(self):
        bad = make_encounter("bad", "monster", choices=[
            {"text": "Try", "requirements": {"stats": {"HP": {"operator": "=>", "value": 5}}}},
        ])
        result = validate_catalog(build_catalog(extra_encounters=[bad]))
        assert any("unknown operator '=>'" in e for e in result.errors)

    def test_no_choices(self):
        bad = EncounterDefinition(id="bad", category=EncounterCategory.MONSTER, name="Bad")
        result = validate_catalog(build_catalog(extra_encounters=[bad]))
        assert "Event 'bad' has no choices" in result.errors

    def test_non_positive_weight_is_warning(self):
        light = make_encounter("light", "monster", weight=0)
        result = validate_catalog(build_catalog(extra_encounters=[light]))
        assert result.valid
        assert any("non-positive weight" in w for w in result.warnings)

    def test_unknown_status_stats_are_warnings(self):
        base = build_catalog()
        odd = StatusEffectDefinition.from_dict({
            "id": "cursed",
            "ongoing": {"LUCK": -1, "hp": -1},
            "duration": "untilCleared",
            "trigger": {"stat": "MANA", "operator": "<", "value": 3},
        })
        catalog = Catalog.build(
            encounters=list(base.encounters.values()),
            items=list(base.items.values()),
            statuses=list(base.statuses.values()) + [odd],
        )
        result = validate_catalog(catalog)
        assert result.valid
        assert "Status 'cursed' trigger uses unknown stat 'MANA'" in result.warnings
        assert "Status 'cursed' ongoing effect uses unknown stat 'LUCK'" in result.warnings
        assert not any("'hp'" in w for w in result.warnings)

    def test_pool_minimums(self):
        result = validate_catalog(build_catalog(trap_count=3, item_count=4, characters=0, monsters=0))
        assert len(result.errors) == 3

    def test_raise_on_error(self):
        with pytest.raises(CatalogValidationError) as exc:
            validate_catalog(build_catalog(trap_count=0), raise_on_error=True)
        assert exc.value.errors


class TestBaseContent:
    """Tests for the built-in catalog."""

    def test_base_catalog_is_valid(self):
        result = validate_catalog(create_base_catalog())
        assert result.valid, result.errors

    def test_base_catalog_supports_distribution(self):
        catalog = create_base_catalog()
        assert len(catalog.traps) >= 10
        assert len(catalog.item_encounters) >= 15
        assert catalog.characters and catalog.monsters

    def test_characters_are_persistent(self):
        for encounter in create_base_catalog().characters:
            assert encounter.persistence == Persistence.PERSISTENT
