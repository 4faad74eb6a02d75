"""
Status Effect Lifecycle - per-turn processing of active statuses.

One tick, in order:
1. Ongoing deltas of all active statuses (times stacks) are summed per
   stat and applied once through the clamped stat phase
2. Timed statuses lose one turn; those reaching zero expire
3. Condition-bound statuses whose trigger no longer holds are cleared
4. Automatic triggers are evaluated against the post-tick stats

Steps 2-4 see the stats produced by step 1.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any

from ..content_schema.effect_dsl import EffectSpecification, StatDelta
from .effects import EffectApplicator, EffectReport, sort_statuses
from .requirements import compare, read_stat
from .state import PlayerState, StatusEffectInstance, canonical_stat

logger = logging.getLogger(__name__)


@dataclass
class TurnTick:
    """Outcome of one status tick."""
    player: PlayerState
    report: EffectReport
    expired: list[str] = field(default_factory=list)
    cleared: list[str] = field(default_factory=list)
    triggered: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": self.report.to_dict(),
            "expired": list(self.expired),
            "cleared": list(self.cleared),
            "triggered": list(self.triggered),
            "turnCount": self.player.turn_count,
        }


@dataclass
class StatusLifecycle:
    """
    Runs status ticks.

    Applications and removals go through the EffectApplicator so that
    stacking, slot conflicts and audit entries behave exactly as they
    do for choice effects.
    """
    applicator: EffectApplicator

    @property
    def catalog(self):
        return self.applicator.catalog

    def tick(self, player: PlayerState) -> TurnTick:
        """Advance every active status by one turn."""
        report = EffectReport()

        ongoing = self.ongoing_effect(player)
        if not ongoing.is_empty:
            player = self.applicator.apply_stat_deltas(player, ongoing, report)

        player, expired = self._count_down(player, report)
        player, cleared = self._clear_conditions(player, report)
        player, triggered = self._fire_triggers(player, report)

        player = player.next_turn()
        if expired or cleared or triggered:
            logger.debug(
                "Status tick %d: expired=%s cleared=%s triggered=%s",
                player.turn_count, expired, cleared, triggered,
            )
        return TurnTick(player=player, report=report, expired=expired, cleared=cleared, triggered=triggered)

    def ongoing_effect(self, player: PlayerState) -> EffectSpecification:
        """Sum of per-turn deltas of every active status, one entry per stat."""
        totals: dict[str, int] = {}
        for instance in player.statuses:
            definition = self.catalog.get_status(instance.status_id)
            if definition is None:
                continue
            for op in definition.ongoing:
                stat = canonical_stat(op.stat)
                key = stat.value if stat else op.stat
                totals[key] = totals.get(key, 0) + op.delta * instance.stacks
        ops = tuple(StatDelta(stat, delta) for stat, delta in totals.items() if delta != 0)
        return EffectSpecification(description="Ongoing status effects", operations=ops)

    def trigger_holds(self, player: PlayerState, status_id: str) -> bool:
        definition = self.catalog.get_status(status_id)
        if definition is None or definition.trigger is None:
            return False
        current = read_stat(player, definition.trigger.stat)
        return compare(current, definition.trigger.comparison)

    def _count_down(self, player: PlayerState, report: EffectReport) -> tuple[PlayerState, list[str]]:
        remaining: list[StatusEffectInstance] = []
        expired: list[str] = []
        for instance in player.statuses:
            ticked = instance.ticked()
            if ticked.is_expired:
                expired.append(instance.status_id)
                report.statuses_removed.append(instance.status_id)
            else:
                remaining.append(ticked)
        return player.with_statuses(remaining), expired

    def _clear_conditions(self, player: PlayerState, report: EffectReport) -> tuple[PlayerState, list[str]]:
        remaining: list[StatusEffectInstance] = []
        cleared: list[str] = []
        for instance in player.statuses:
            if instance.is_condition_bound and not self.trigger_holds(player, instance.status_id):
                cleared.append(instance.status_id)
                report.statuses_removed.append(instance.status_id)
            else:
                remaining.append(instance)
        return player.with_statuses(remaining), cleared

    def _fire_triggers(self, player: PlayerState, report: EffectReport) -> tuple[PlayerState, list[str]]:
        statuses = list(player.statuses)
        triggered: list[str] = []
        for definition in self.catalog.triggered_statuses:
            if not self.trigger_holds(player, definition.id):
                continue
            active = next((s for s in statuses if s.status_id == definition.id), None)
            if active is not None and active.stacks >= definition.stack_limit:
                continue
            before = len(report.statuses_applied)
            statuses = self.applicator.apply_status(statuses, definition, report)
            if len(report.statuses_applied) > before:
                triggered.append(definition.id)
        return player.with_statuses(sort_statuses(self.catalog, statuses)), triggered
