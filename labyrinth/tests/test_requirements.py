"""
Tests for requirement evaluation.
"""

import random

import pytest

from ..content_schema.definitions import Requirement, StatComparison, SuccessConditions
from ..engine_core.requirements import compare
from ..engine_core.state import Inventory, InventoryItem, PlayerState, PlayerStats
from ..errors import UnknownOperatorError


def requirement(items=(), **stats):
    return Requirement(
        items=tuple(items),
        stats={name: StatComparison(op, value) for name, (op, value) in stats.items()},
    )


class TestCompare:
    """Tests for comparison operators."""

    @pytest.mark.parametrize("operator,value,expected", [
        (">", 49, True),
        (">", 50, False),
        (">=", 50, True),
        ("<", 51, True),
        ("<=", 49, False),
        ("==", 50, True),
    ])
    def test_operators(self, operator, value, expected):
        assert compare(50, StatComparison(operator, value)) is expected

    def test_unknown_operator(self):
        with pytest.raises(UnknownOperatorError):
            compare(50, StatComparison("!=", 1))


class TestEvaluate:
    """Tests for RequirementEvaluator.evaluate."""

    def test_no_requirement_is_available(self, evaluator, player):
        """A missing requirement always passes."""
        check = evaluator.evaluate(None, player)
        assert check.is_available
        assert check.failure_reasons == []

    def test_empty_requirement_is_available(self, evaluator, player):
        assert evaluator.evaluate(Requirement(), player).is_available

    def test_all_missing_items_reported(self, evaluator):
        """Two of three required items missing: both are reported."""
        player = PlayerState(inventory=Inventory(items=[InventoryItem("rope", 1)]))
        check = evaluator.evaluate(requirement(items=["rope", "bandage", "key"]), player)
        assert not check.is_available
        assert check.missing_items == ["bandage", "key"]
        assert check.failure_reasons == ["Requires Bandage", "Requires Key"]

    def test_stat_failure_reason(self, evaluator, player):
        check = evaluator.evaluate(requirement(FIT=(">=", 80)), player)
        assert not check.is_available
        assert check.failure_reasons == ["FIT must be >= 80 (current: 70)"]
        shortfall = check.insufficient_stats[0]
        assert shortfall.to_dict() == {
            "statName": "FIT", "currentValue": 70, "operator": ">=", "requiredValue": 80,
        }

    def test_items_and_stats_both_reported(self, evaluator):
        player = PlayerState(stats=PlayerStats(hp=10))
        check = evaluator.evaluate(requirement(items=["key"], HP=(">", 20)), player)
        assert len(check.failure_reasons) == 2

    def test_alias_stat_names(self, evaluator, player):
        assert evaluator.evaluate(requirement(sanity=(">=", 100)), player).is_available

    def test_unknown_stat_reads_zero(self, evaluator, player):
        """Unknown stat names evaluate as 0."""
        assert evaluator.evaluate(requirement(LUCK=("==", 0)), player).is_available
        check = evaluator.evaluate(requirement(LUCK=(">", 0)), player)
        assert check.failure_reasons == ["LUCK must be > 0 (current: 0)"]

    def test_unknown_operator_raises(self, evaluator, player):
        with pytest.raises(UnknownOperatorError):
            evaluator.evaluate(requirement(HP=("~", 1)), player)

    def test_check_payload(self, evaluator, player):
        data = evaluator.evaluate(requirement(items=["key"]), player).to_dict()
        assert data["isAvailable"] is False
        assert data["missingItems"] == ["key"]


class TestEvaluateSuccess:
    """Tests for success conditions."""

    def test_no_conditions_succeed(self, evaluator, player):
        assert evaluator.evaluate_success(None, player, random.Random(0))

    def test_certain_and_impossible(self, evaluator, player):
        rng = random.Random(0)
        assert evaluator.evaluate_success(SuccessConditions(probability=1.0), player, rng)
        assert not evaluator.evaluate_success(SuccessConditions(probability=0.0), player, rng)

    def test_probability_roughly_respected(self, evaluator, player):
        rng = random.Random(3)
        conditions = SuccessConditions(probability=0.3)
        wins = sum(evaluator.evaluate_success(conditions, player, rng) for _ in range(2000))
        assert 500 <= wins <= 700

    def test_stat_conditions(self, evaluator, player):
        conditions = SuccessConditions(stats={"FIT": StatComparison(">", 60)})
        assert evaluator.evaluate_success(conditions, player, random.Random(0))
        weak = player.with_stats(PlayerStats(fit=10))
        assert not evaluator.evaluate_success(conditions, weak, random.Random(0))
