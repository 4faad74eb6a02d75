"""
Rest encounter - offered when a room has nothing left to give.

The encounter is rebuilt on every entry from the room id and the
player's stats only, so the same inputs always give the same texts and
the same numbers.
"""

from __future__ import annotations
import zlib

from ..config import DEFAULT_REST, DEFAULT_RULES, RestConfig, RulesConfig
from ..content_schema.catalog import Catalog
from ..content_schema.definitions import (
    Choice,
    EncounterCategory,
    EncounterDefinition,
    Persistence,
)
from ..content_schema.effect_dsl import EffectSpecification, StatDelta
from .state import PlayerState, StatName

REST_ENCOUNTER_ID = "empty_room_rest"
REST_CHOICE_TEXT = "Take a break"
REST_TAG = "rest"

ROOM_DESCRIPTIONS = (
    "This room appears to be empty. You can take a moment to rest and gather your thoughts.",
    "The room is quiet and peaceful. It seems like a good place to catch your breath.",
    "Nothing of interest catches your eye in this room. Perhaps a short rest would be beneficial.",
    "This chamber is vacant and still. The silence offers a welcome respite from your journey.",
    "The room stands empty, its walls bearing witness to your solitary passage. Time for a brief rest.",
    "An unremarkable room with little to offer except the opportunity to pause and recover.",
)

RESULT_DESCRIPTIONS = (
    "You take a moment to rest and feel slightly refreshed.",
    "A brief respite helps clear your mind and ease your fatigue.",
    "You sit down and take several deep breaths, feeling more centered.",
    "The short break allows you to gather your strength and composure.",
    "You pause to stretch and relax, feeling modestly rejuvenated.",
    "A moment of quiet reflection helps restore some of your energy.",
    "You take time to rest your weary body and calm your racing mind.",
    "The peaceful silence allows you to recover a bit of your vitality.",
)


def _pick(texts: tuple[str, ...], key: str) -> str:
    return texts[zlib.crc32(key.encode("utf-8")) % len(texts)]


def has_active_debuff(player: PlayerState, catalog: Catalog) -> bool:
    for instance in player.statuses:
        definition = catalog.get_status(instance.status_id)
        if definition is not None and definition.is_debuff:
            return True
    return False


def rest_stat_changes(
    player: PlayerState,
    catalog: Catalog,
    rest: RestConfig = DEFAULT_REST,
    rules: RulesConfig = DEFAULT_RULES,
) -> dict[StatName, int]:
    """Recovery for one rest; larger when a stat is critically low."""
    stats = player.stats
    critical = rules.critical_stat_threshold

    hp = rest.hp_recovery
    san = rest.san_recovery
    fit = rest.fit_recovery
    hunger_cost = rest.hunger_cost

    if stats.hp < critical:
        hp += rest.critical_hp_bonus
    if stats.san < critical:
        san += rest.critical_san_bonus
    if stats.fit < critical:
        fit += rest.critical_fit_bonus
    if stats.hunger < rules.critical_hunger_threshold:
        hunger_cost = rest.critical_hunger_cost
    if has_active_debuff(player, catalog):
        san += rest.debuff_san_bonus

    return {
        StatName.HP: hp,
        StatName.SANITY: san,
        StatName.FITNESS: fit,
        StatName.HUNGER: -hunger_cost,
    }


def build_rest_encounter(
    room_id: str,
    player: PlayerState,
    catalog: Catalog,
    rest: RestConfig = DEFAULT_REST,
    rules: RulesConfig = DEFAULT_RULES,
) -> EncounterDefinition:
    changes = rest_stat_changes(player, catalog, rest, rules)
    effect = EffectSpecification(
        description=_pick(RESULT_DESCRIPTIONS, f"{room_id}:result"),
        operations=tuple(StatDelta(stat.value, delta) for stat, delta in changes.items()),
        tags=(REST_TAG,),
    )
    return EncounterDefinition(
        id=REST_ENCOUNTER_ID,
        category=EncounterCategory.EMPTY,
        choices=(Choice(text=REST_CHOICE_TEXT, success_effects=effect),),
        name="Empty Room",
        description=_pick(ROOM_DESCRIPTIONS, room_id),
        image="empty_room.png",
        weight=1,
        persistence=Persistence.PERSISTENT,
    )


def is_rest_encounter(encounter: EncounterDefinition | None) -> bool:
    return encounter is not None and encounter.id == REST_ENCOUNTER_ID


def describe_rest_benefits(effect: EffectSpecification) -> str:
    """e.g. "After resting, your wounds feel better, your mind feels clearer."."""
    deltas = {op.stat: op.delta for op in effect.stat_deltas}
    benefits = []
    if deltas.get(StatName.HP.value, 0) > 0:
        benefits.append("your wounds feel better")
    if deltas.get(StatName.SANITY.value, 0) > 0:
        benefits.append("your mind feels clearer")
    if deltas.get(StatName.FITNESS.value, 0) > 0:
        benefits.append("your body feels more energized")
    if deltas.get(StatName.HUNGER.value, 0) < 0:
        benefits.append("you feel slightly hungrier from the time spent resting")
    if not benefits:
        return "You feel refreshed from the brief rest."
    return f"After resting, {', '.join(benefits)}."
