"""
Effect Applicator - applies effect specifications to a player snapshot.

Application order is fixed:
1. Stat deltas (clamped, every clamp reported)
2. Item gains and losses
3. Status removals (explicit and trigger-based), then applications

Nothing here raises for bad data: unknown references and out-of-range
values are skipped or clamped and recorded in the report, and the
remaining operations still apply.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from ..config import DEFAULT_RULES, RulesConfig
from ..errors import ItemUseError
from ..content_schema.catalog import Catalog
from ..content_schema.definitions import StatusEffectDefinition
from ..content_schema.effect_dsl import EffectSpecification, ItemLoss
from .state import (
    InventoryItem,
    PlayerState,
    StatName,
    StatusEffectInstance,
    canonical_stat,
    clamp,
)

logger = logging.getLogger(__name__)


class WarningKind(Enum):
    BOUNDS = "bounds"
    UNKNOWN_REFERENCE = "unknown_reference"


@dataclass(frozen=True)
class EffectWarning:
    """A non-fatal condition met while applying an effect."""
    kind: WarningKind
    message: str
    subject: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "subject": self.subject}


@dataclass(frozen=True)
class StatChange:
    """
    Audit of one stat.

    requested is the raw delta, actual the delta after clamping.
    """
    stat: StatName
    requested: int
    actual: int
    old_value: int
    new_value: int

    @property
    def was_clamped(self) -> bool:
        return self.requested != self.actual

    def merged(self, other: StatChange) -> StatChange:
        """Combine two consecutive changes to the same stat."""
        return StatChange(
            stat=self.stat,
            requested=self.requested + other.requested,
            actual=self.actual + other.actual,
            old_value=self.old_value,
            new_value=other.new_value,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "requested": self.requested,
            "actual": self.actual,
            "oldValue": self.old_value,
            "newValue": self.new_value,
        }


@dataclass
class EffectReport:
    """Everything that happened during one effect application."""
    stat_changes: dict[str, StatChange] = field(default_factory=dict)
    items_gained: list[InventoryItem] = field(default_factory=list)
    items_lost: list[InventoryItem] = field(default_factory=list)
    statuses_applied: list[str] = field(default_factory=list)
    statuses_removed: list[str] = field(default_factory=list)
    warnings: list[EffectWarning] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.stat_changes or self.items_gained or self.items_lost
            or self.statuses_applied or self.statuses_removed
            or self.warnings or self.errors
        )

    def warn(self, kind: WarningKind, message: str, subject: str | None = None) -> None:
        self.warnings.append(EffectWarning(kind, message, subject))

    def record_stat(self, change: StatChange) -> None:
        key = change.stat.value
        if key in self.stat_changes:
            self.stat_changes[key] = self.stat_changes[key].merged(change)
        else:
            self.stat_changes[key] = change

    def merge(self, other: EffectReport) -> EffectReport:
        """Return a report holding this report's entries followed by other's."""
        merged = EffectReport(
            stat_changes=dict(self.stat_changes),
            items_gained=self.items_gained + other.items_gained,
            items_lost=self.items_lost + other.items_lost,
            statuses_applied=self.statuses_applied + other.statuses_applied,
            statuses_removed=self.statuses_removed + other.statuses_removed,
            warnings=self.warnings + other.warnings,
            errors=self.errors + other.errors,
        )
        for change in other.stat_changes.values():
            merged.record_stat(change)
        return merged

    def stat_summary(self) -> str:
        """e.g. "HP +10, SAN -5"."""
        parts = []
        for key, change in self.stat_changes.items():
            sign = "+" if change.actual >= 0 else ""
            parts.append(f"{key} {sign}{change.actual}")
        return ", ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "statChanges": {k: c.to_dict() for k, c in self.stat_changes.items()},
            "itemsGained": [i.to_dict() for i in self.items_gained],
            "itemsLost": [i.to_dict() for i in self.items_lost],
            "statusesApplied": list(self.statuses_applied),
            "statusesRemoved": list(self.statuses_removed),
            "warnings": [w.to_dict() for w in self.warnings],
            "errors": list(self.errors),
        }


@dataclass
class EffectResult:
    """Updated snapshot, audit and human-readable description."""
    player: PlayerState
    report: EffectReport
    description: str = ""


def status_order_key(catalog: Catalog, status_id: str) -> tuple[int, str]:
    definition = catalog.get_status(status_id)
    return definition.order_key if definition else (0, status_id)


def sort_statuses(catalog: Catalog, statuses: list[StatusEffectInstance]) -> list[StatusEffectInstance]:
    """Active statuses in priority order, ties broken by id."""
    return sorted(statuses, key=lambda s: status_order_key(catalog, s.status_id))


@dataclass
class EffectApplicator:
    """
    Applies EffectSpecifications to PlayerState snapshots.

    Usage:
        applicator = EffectApplicator(catalog)
        result = applicator.apply(player, effect)
        player = result.player
    """
    catalog: Catalog
    rules: RulesConfig = DEFAULT_RULES

    def apply(
        self,
        player: PlayerState,
        effect: EffectSpecification,
        fired_triggers: Iterable[str] = (),
    ) -> EffectResult:
        """
        Apply an effect and return the new snapshot with its audit.

        fired_triggers are removal-trigger tokens fired by the caller
        (e.g. the id of an item used directly). Ids of items removed in
        the item phase and the effect's own tags are added to them.
        """
        report = EffectReport()
        tokens = set(fired_triggers) | set(effect.tags)

        player = self.apply_stat_deltas(player, effect, report)
        player, removed_items = self._apply_items(player, effect, report)
        tokens |= removed_items
        player = self._apply_statuses(player, effect, tokens, report)

        description = effect.description or report.stat_summary()
        return EffectResult(player=player, report=report, description=description)

    def apply_stat_deltas(
        self,
        player: PlayerState,
        effect: EffectSpecification,
        report: EffectReport,
    ) -> PlayerState:
        """Clamped stat phase. Also used for passive per-turn deltas."""
        stats = player.stats
        for op in effect.stat_deltas:
            stat = canonical_stat(op.stat)
            if stat is None:
                logger.warning("Unknown stat %r in effect, skipped", op.stat)
                report.warn(WarningKind.UNKNOWN_REFERENCE, f"Unknown stat: {op.stat}", op.stat)
                continue
            old = stats.get(stat)
            raw = old + op.delta
            new = clamp(raw, self.rules.stat_min, self.rules.stat_max)
            if raw > self.rules.stat_max:
                report.warn(
                    WarningKind.BOUNDS,
                    f"{stat.value} clamped to maximum ({self.rules.stat_max})",
                    stat.value,
                )
            elif raw < self.rules.stat_min:
                report.warn(
                    WarningKind.BOUNDS,
                    f"{stat.value} clamped to minimum ({self.rules.stat_min})",
                    stat.value,
                )
            report.record_stat(StatChange(stat, op.delta, new - old, old, new))
            stats = stats.with_value(stat, new, self.rules)
        return player.with_stats(stats)

    def _apply_items(
        self,
        player: PlayerState,
        effect: EffectSpecification,
        report: EffectReport,
    ) -> tuple[PlayerState, set[str]]:
        inventory = player.inventory
        removed: set[str] = set()

        for gain in effect.item_gains:
            if gain.quantity <= 0:
                report.errors.append(f"Invalid quantity {gain.quantity} for gained item {gain.item_id}")
                continue
            item = self.catalog.get_item(gain.item_id)
            if item is None:
                logger.warning("Unknown item %r in effect, skipped", gain.item_id)
                report.warn(WarningKind.UNKNOWN_REFERENCE, f"Unknown item: {gain.item_id}", gain.item_id)
                continue
            added, inventory = inventory.add(gain.item_id, gain.quantity)
            if added:
                report.items_gained.append(InventoryItem(gain.item_id, gain.quantity))
            else:
                report.warn(
                    WarningKind.BOUNDS,
                    f"Inventory full - could not add {item.display_name}",
                    gain.item_id,
                )

        for loss in effect.item_losses:
            if loss.quantity <= 0:
                report.errors.append(f"Invalid quantity {loss.quantity} for lost item {loss.item_id}")
                continue
            held = inventory.quantity_of(loss.item_id)
            name = self._item_name(loss.item_id)
            if held == 0:
                report.warn(WarningKind.BOUNDS, f"Item {name} not found in inventory", loss.item_id)
                continue
            ok, inventory = inventory.remove(loss.item_id, loss.quantity)
            if not ok:
                report.warn(
                    WarningKind.BOUNDS,
                    f"Cannot remove {loss.quantity} {name} (only {held} held)",
                    loss.item_id,
                )
                continue
            report.items_lost.append(InventoryItem(loss.item_id, loss.quantity))
            removed.add(loss.item_id)

        return player.with_inventory(inventory), removed

    def _apply_statuses(
        self,
        player: PlayerState,
        effect: EffectSpecification,
        tokens: set[str],
        report: EffectReport,
    ) -> PlayerState:
        statuses = list(player.statuses)

        for op in effect.status_removes:
            if self.catalog.get_status(op.status_id) is None:
                logger.warning("Unknown status %r in effect removal", op.status_id)
                report.warn(WarningKind.UNKNOWN_REFERENCE, f"Unknown status: {op.status_id}", op.status_id)
            statuses = self._remove(statuses, op.status_id, report)

        if tokens:
            for instance in list(statuses):
                definition = self.catalog.get_status(instance.status_id)
                if definition and tokens.intersection(definition.removal_triggers):
                    statuses = self._remove(statuses, instance.status_id, report)

        for op in effect.status_applies:
            definition = self.catalog.get_status(op.status_id)
            if definition is None:
                logger.warning("Unknown status %r in effect, skipped", op.status_id)
                report.warn(WarningKind.UNKNOWN_REFERENCE, f"Unknown status: {op.status_id}", op.status_id)
                continue
            statuses = self.apply_status(statuses, definition, report)

        return player.with_statuses(sort_statuses(self.catalog, statuses))

    def apply_status(
        self,
        statuses: list[StatusEffectInstance],
        definition: StatusEffectDefinition,
        report: EffectReport,
    ) -> list[StatusEffectInstance]:
        """
        Add or refresh one status.

        Re-application refreshes duration; stackable statuses also gain a
        stack up to their limit. A status whose slot is held by a
        higher-ranked status is rejected; a lower-ranked holder is replaced.
        """
        existing = next((s for s in statuses if s.status_id == definition.id), None)
        if existing is not None:
            stacks = existing.stacks
            if definition.stackable and stacks < definition.stack_limit:
                stacks += 1
            elif definition.stackable:
                report.warn(
                    WarningKind.BOUNDS,
                    f"{definition.id} already at maximum stacks ({definition.stack_limit})",
                    definition.id,
                )
            refreshed = StatusEffectInstance(definition.id, definition.duration, stacks)
            report.statuses_applied.append(definition.id)
            return [refreshed if s.status_id == definition.id else s for s in statuses]

        if definition.slot:
            for incumbent in statuses:
                holder = self.catalog.get_status(incumbent.status_id)
                if holder is None or holder.slot != definition.slot:
                    continue
                if holder.order_key < definition.order_key:
                    report.warn(
                        WarningKind.BOUNDS,
                        f"{definition.id} blocked by higher-priority {holder.id}",
                        definition.id,
                    )
                    return statuses
                statuses = self._remove(statuses, holder.id, report)

        report.statuses_applied.append(definition.id)
        return statuses + [StatusEffectInstance(definition.id, definition.duration, 1)]

    def _remove(
        self,
        statuses: list[StatusEffectInstance],
        status_id: str,
        report: EffectReport,
    ) -> list[StatusEffectInstance]:
        """Drop every stack of status_id."""
        if not any(s.status_id == status_id for s in statuses):
            return statuses
        report.statuses_removed.append(status_id)
        return [s for s in statuses if s.status_id != status_id]

    # ------------------------------------------------------------------
    # Direct item use

    def use_item(self, player: PlayerState, item_id: str, quantity: int = 1) -> EffectResult:
        """
        Use an item straight from the inventory.

        Stat deltas scale with quantity; consumable items lose the used
        units. Raises ItemUseError when the item is unknown or not held
        in the requested quantity.
        """
        item = self.catalog.get_item(item_id)
        if item is None:
            raise ItemUseError(f"Unknown item: {item_id}")
        if quantity <= 0:
            raise ItemUseError(f"Quantity must be positive, got {quantity}")
        held = player.inventory.quantity_of(item_id)
        if held < quantity:
            raise ItemUseError(f"Not enough {item.display_name} (have {held}, need {quantity})")

        effect = item.effects.scaled(quantity)
        if item.consume_on_use:
            effect = effect.with_operations(ItemLoss(item_id, quantity))

        result = self.apply(player, effect, fired_triggers=[item_id])
        result.description = self._describe_use(item.display_name, quantity, result.report)
        logger.debug("Used %d x %s", quantity, item_id)
        return result

    def _describe_use(self, name: str, quantity: int, report: EffectReport) -> str:
        parts = [f"Used {name}." if quantity == 1 else f"Used {quantity} {name}."]
        stats = report.stat_summary()
        if stats:
            parts.append(f"Effects: {stats}.")
        if report.statuses_removed:
            parts.append(f"Removed: {', '.join(report.statuses_removed)}.")
        if report.statuses_applied:
            parts.append(f"Applied: {', '.join(report.statuses_applied)}.")
        if report.warnings:
            parts.append(f"Note: {'; '.join(w.message for w in report.warnings)}.")
        return " ".join(parts)

    def _item_name(self, item_id: str) -> str:
        item = self.catalog.get_item(item_id)
        return item.display_name if item else item_id
