"""
Requirement Evaluator - checks choice requirements against player state.

Evaluation never stops at the first failure: every missing item and
every failing stat comparison is reported so the boundary layer can
explain exactly why a choice is disabled.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Any

from ..errors import UnknownOperatorError
from ..content_schema.catalog import Catalog
from ..content_schema.definitions import (
    COMPARISON_OPERATORS,
    Requirement,
    StatComparison,
    SuccessConditions,
)
from .state import PlayerState, canonical_stat

logger = logging.getLogger(__name__)


def compare(current: int, comparison: StatComparison) -> bool:
    """Apply a comparison. Unknown operators raise UnknownOperatorError."""
    fn = COMPARISON_OPERATORS.get(comparison.operator)
    if fn is None:
        raise UnknownOperatorError(comparison.operator)
    return fn(current, comparison.value)


def read_stat(player: PlayerState, stat_name: str) -> int:
    """Current value of a stat by any alias. Unknown names read as 0."""
    stat = canonical_stat(stat_name)
    if stat is None:
        logger.warning("Unknown stat name %r in requirement, treating as 0", stat_name)
        return 0
    return player.stats.get(stat)


@dataclass(frozen=True)
class StatShortfall:
    """One failed stat comparison."""
    stat_name: str
    current_value: int
    operator: str
    required_value: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "statName": self.stat_name,
            "currentValue": self.current_value,
            "operator": self.operator,
            "requiredValue": self.required_value,
        }


@dataclass
class RequirementCheck:
    """Result of evaluating a requirement."""
    is_available: bool
    failure_reasons: list[str] = field(default_factory=list)
    missing_items: list[str] = field(default_factory=list)
    insufficient_stats: list[StatShortfall] = field(default_factory=list)

    @classmethod
    def satisfied(cls) -> RequirementCheck:
        return cls(is_available=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isAvailable": self.is_available,
            "failureReasons": list(self.failure_reasons),
            "missingItems": list(self.missing_items),
            "insufficientStats": [s.to_dict() for s in self.insufficient_stats],
        }


@dataclass
class RequirementEvaluator:
    """
    Evaluates Requirement objects.

    The catalog is only used to turn item ids into display names in
    failure reasons.
    """
    catalog: Catalog

    def evaluate(self, requirement: Requirement | None, player: PlayerState) -> RequirementCheck:
        """
        Check a requirement against the player.

        A missing requirement is always satisfied. Raises
        UnknownOperatorError for an unsupported comparison operator.
        """
        if requirement is None or requirement.is_empty:
            return RequirementCheck.satisfied()

        reasons: list[str] = []
        missing: list[str] = []
        shortfalls: list[StatShortfall] = []

        for item_id in requirement.items:
            if not player.inventory.has_item(item_id):
                missing.append(item_id)
                reasons.append(f"Requires {self._item_name(item_id)}")

        for stat_name, comparison in requirement.stats.items():
            current = read_stat(player, stat_name)
            if not compare(current, comparison):
                shortfalls.append(StatShortfall(
                    stat_name=stat_name,
                    current_value=current,
                    operator=comparison.operator,
                    required_value=comparison.value,
                ))
                reasons.append(
                    f"{stat_name} must be {comparison.operator} {comparison.value} (current: {current})"
                )

        return RequirementCheck(
            is_available=not reasons,
            failure_reasons=reasons,
            missing_items=missing,
            insufficient_stats=shortfalls,
        )

    def evaluate_success(
        self,
        conditions: SuccessConditions | None,
        player: PlayerState,
        rng: random.Random,
    ) -> bool:
        """
        Decide whether a choice takes its success path.

        No conditions means success. A probability draws one value from
        rng; stat conditions must all hold.
        """
        if conditions is None:
            return True
        if conditions.probability is not None and not rng.random() < conditions.probability:
            return False
        for stat_name, comparison in conditions.stats.items():
            if not compare(read_stat(player, stat_name), comparison):
                return False
        return True

    def _item_name(self, item_id: str) -> str:
        item = self.catalog.get_item(item_id)
        return item.display_name if item else item_id
