"""
Tests for effect application.

Tests:
- Stat clamping and the audit trail
- Item gains and losses
- Status apply / remove / stacking / slots
- Direct item use
"""

import pytest

from ..content_schema.effect_dsl import (
    EffectSpecification,
    ItemGain,
    ItemLoss,
    StatDelta,
    StatusApply,
    StatusRemove,
    stat_effect,
)
from ..engine_core.effects import WarningKind
from ..engine_core.state import Inventory, InventoryItem, PlayerState, PlayerStats, StatusEffectInstance
from ..errors import ItemUseError


def effect(*operations, tags=()):
    return EffectSpecification(description="", operations=tuple(operations), tags=tuple(tags))


class TestStatPhase:
    """Tests for clamped stat changes."""

    def test_empty_effect_changes_nothing(self, applicator, player):
        result = applicator.apply(player, EffectSpecification())
        assert result.player == player
        assert result.report.is_empty

    def test_overheal_is_clamped_and_audited(self, applicator):
        """HP 50 + 200 lands on 100 and records both deltas."""
        player = PlayerState(stats=PlayerStats(hp=50))
        result = applicator.apply(player, stat_effect(HP=200))

        assert result.player.stats.hp == 100
        change = result.report.stat_changes["HP"]
        assert change.to_dict() == {"requested": 200, "actual": 50, "oldValue": 50, "newValue": 100}
        assert change.was_clamped
        assert [w.kind for w in result.report.warnings] == [WarningKind.BOUNDS]
        assert result.report.warnings[0].message == "HP clamped to maximum (100)"

    def test_floor_clamp(self, applicator):
        player = PlayerState(stats=PlayerStats(san=5))
        result = applicator.apply(player, stat_effect(SAN=-20))
        assert result.player.stats.san == 0
        assert result.report.warnings[0].message == "SAN clamped to minimum (0)"

    def test_aliases_merge_into_one_entry(self, applicator, player):
        result = applicator.apply(player, effect(StatDelta("HP", -10), StatDelta("health", -5)))
        assert result.player.stats.hp == 85
        change = result.report.stat_changes["HP"]
        assert change.requested == -15
        assert change.old_value == 100
        assert change.new_value == 85

    def test_unknown_stat_skipped(self, applicator, player):
        result = applicator.apply(player, effect(StatDelta("LUCK", 5), StatDelta("FIT", 5)))
        assert result.player.stats.fit == 75
        assert result.report.warnings[0].kind == WarningKind.UNKNOWN_REFERENCE

    def test_input_snapshot_untouched(self, applicator, player):
        applicator.apply(player, stat_effect(HP=-30))
        assert player.stats.hp == 100


class TestItemPhase:
    """Tests for inventory changes."""

    def test_gain(self, applicator, player):
        result = applicator.apply(player, effect(ItemGain("ration", 2)))
        assert result.player.inventory.quantity_of("ration") == 2
        assert result.report.items_gained == [InventoryItem("ration", 2)]

    def test_gain_into_full_inventory(self, applicator):
        player = PlayerState(inventory=Inventory(items=[InventoryItem(f"x{i}", 1) for i in range(5)]))
        result = applicator.apply(player, effect(ItemGain("rope")))
        assert not result.player.inventory.has_item("rope")
        assert result.report.warnings[0].message == "Inventory full - could not add Rope"

    def test_unknown_item_gain(self, applicator, player):
        result = applicator.apply(player, effect(ItemGain("dragon_egg")))
        assert result.player.inventory.items == []
        assert result.report.warnings[0].kind == WarningKind.UNKNOWN_REFERENCE

    def test_loss_of_missing_item(self, applicator, player):
        result = applicator.apply(player, effect(ItemLoss("rope")))
        assert result.report.warnings[0].message == "Item Rope not found in inventory"

    def test_underflow_rejected(self, applicator, wounded_player):
        """Removing more than held leaves the line untouched."""
        result = applicator.apply(wounded_player, effect(ItemLoss("bandage", 5), StatDelta("HP", 1)))
        assert result.player.inventory.quantity_of("bandage") == 2
        assert result.player.stats.hp == 21
        assert result.report.warnings[0].message == "Cannot remove 5 Bandage (only 2 held)"

    def test_non_positive_quantity_is_error(self, applicator, player):
        result = applicator.apply(player, effect(ItemGain("rope", 0)))
        assert result.report.errors
        assert result.player.inventory.items == []


class TestStatusPhase:
    """Tests for status application and removal."""

    def test_apply(self, applicator, player):
        result = applicator.apply(player, effect(StatusApply("bleeding")))
        instance = result.player.get_status("bleeding")
        assert instance.remaining_duration == 3
        assert result.report.statuses_applied == ["bleeding"]

    def test_reapply_refreshes(self, applicator, player):
        player = player.with_statuses([StatusEffectInstance("bleeding", 1)])
        result = applicator.apply(player, effect(StatusApply("bleeding")))
        assert result.player.get_status("bleeding").remaining_duration == 3
        assert result.player.get_status("bleeding").stacks == 1

    def test_stackable_caps_at_max(self, applicator, player):
        for _ in range(4):
            result = applicator.apply(player, effect(StatusApply("poison")))
            player = result.player
        assert player.get_status("poison").stacks == 3
        assert result.report.warnings[0].kind == WarningKind.BOUNDS

    def test_remove(self, applicator, player):
        player = player.with_statuses([StatusEffectInstance("bleeding", 2)])
        result = applicator.apply(player, effect(StatusRemove("bleeding")))
        assert not result.player.has_status("bleeding")
        assert result.report.statuses_removed == ["bleeding"]

    def test_removal_trigger_from_item_loss(self, applicator):
        """Losing a trigger item clears the status."""
        player = PlayerState(
            inventory=Inventory(items=[InventoryItem("salve", 1)]),
            statuses=[StatusEffectInstance("bleeding", 3)],
        )
        result = applicator.apply(player, effect(ItemLoss("salve")))
        assert not result.player.has_status("bleeding")

    def test_removal_trigger_from_tag(self, applicator, player):
        player = player.with_statuses([StatusEffectInstance("tired", 5)])
        result = applicator.apply(player, effect(tags=["rest"]))
        assert not result.player.has_status("tired")

    def test_higher_priority_replaces_slot_holder(self, applicator, player):
        player = player.with_statuses([StatusEffectInstance("calm", 3)])
        result = applicator.apply(player, effect(StatusApply("fear")))
        assert result.player.has_status("fear")
        assert not result.player.has_status("calm")
        assert result.report.statuses_removed == ["calm"]

    def test_lower_priority_blocked_by_slot_holder(self, applicator, player):
        player = player.with_statuses([StatusEffectInstance("fear", 3)])
        result = applicator.apply(player, effect(StatusApply("calm")))
        assert not result.player.has_status("calm")
        assert result.report.warnings[0].kind == WarningKind.BOUNDS

    def test_statuses_kept_in_priority_order(self, applicator, player):
        result = applicator.apply(
            player, effect(StatusApply("tired"), StatusApply("bleeding"), StatusApply("poison"))
        )
        assert [s.status_id for s in result.player.statuses] == ["bleeding", "poison", "tired"]

    def test_unknown_status(self, applicator, player):
        result = applicator.apply(player, effect(StatusApply("cursed")))
        assert result.player.statuses == []
        assert result.report.warnings[0].kind == WarningKind.UNKNOWN_REFERENCE


class TestUseItem:
    """Tests for direct item use."""

    def test_bandage(self, applicator, wounded_player):
        player = wounded_player.with_statuses([StatusEffectInstance("bleeding", 2)])
        result = applicator.use_item(player, "bandage")
        assert result.player.stats.hp == 30
        assert result.player.inventory.quantity_of("bandage") == 1
        assert not result.player.has_status("bleeding")
        assert result.description == "Used Bandage. Effects: HP +10. Removed: bleeding."

    def test_quantity_scales_deltas(self, applicator, wounded_player):
        result = applicator.use_item(wounded_player, "bandage", 2)
        assert result.player.stats.hp == 40
        assert not result.player.inventory.has_item("bandage")
        assert result.description.startswith("Used 2 Bandage.")

    def test_non_consumable_kept(self, applicator, wounded_player):
        result = applicator.use_item(wounded_player, "lantern")
        assert result.player.inventory.quantity_of("lantern") == 1
        assert result.player.stats.san == 52

    def test_used_item_fires_trigger(self, applicator):
        player = PlayerState(
            inventory=Inventory(items=[InventoryItem("salve", 1)]),
            statuses=[StatusEffectInstance("bleeding", 3)],
        )
        result = applicator.use_item(player, "salve")
        assert not result.player.has_status("bleeding")

    @pytest.mark.parametrize("item_id,quantity", [
        ("rope", 1),        # not held
        ("bandage", 3),     # not enough
        ("dragon_egg", 1),  # unknown
        ("bandage", 0),     # bad quantity
    ])
    def test_rejected(self, applicator, wounded_player, item_id, quantity):
        with pytest.raises(ItemUseError):
            applicator.use_item(wounded_player, item_id, quantity)
