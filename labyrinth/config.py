"""
Game rule constants.

Everything the engine treats as a tunable number lives here so tests and
alternative rule sets can inject their own values.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class RulesConfig:
    """Numeric rules shared by the state model, distributor and reducer."""
    stat_min: int = 0
    stat_max: int = 100
    inventory_capacity: int = 5

    # Distribution
    trap_count: int = 10
    item_count: int = 15
    min_events_per_room: int = 1
    max_events_per_room: int = 20
    default_weight: int = 10  # Substituted for weights <= 0

    # Thresholds for "critically low"
    critical_stat_threshold: int = 30
    critical_hunger_threshold: int = 20


@dataclass(frozen=True)
class RestConfig:
    """Recovery granted by the synthesized rest encounter."""
    hp_recovery: int = 3
    san_recovery: int = 4
    fit_recovery: int = 1
    hunger_cost: int = 2

    critical_hp_bonus: int = 2
    critical_san_bonus: int = 3
    critical_fit_bonus: int = 2
    critical_hunger_cost: int = 1
    debuff_san_bonus: int = 1


@dataclass(frozen=True)
class StartingStats:
    hp: int = 100
    san: int = 100
    fit: int = 70
    hunger: int = 80


DEFAULT_RULES = RulesConfig()
DEFAULT_REST = RestConfig()
DEFAULT_STARTING_STATS = StartingStats()
