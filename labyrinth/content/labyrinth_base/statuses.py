"""
Base status effects.

Timed statuses count down each turn. Statuses with "untilCleared"
duration last while their trigger condition holds. "panic" and "calm"
share the "mind" slot, so only one of them can be active.
"""

from ...content_schema.definitions import StatusEffectDefinition

STATUS_DATA: list[dict] = [
    {
        "id": "bleeding",
        "name": "Bleeding",
        "type": "DEBUFF",
        "priority": 3,
        "ongoing": {"HP": -2},
        "duration": 3,
        "removalTriggers": ["bandage", "medkit"],
        "description": "Lose 2 HP each turn.",
    },
    {
        "id": "poisoned",
        "name": "Poisoned",
        "type": "DEBUFF",
        "priority": 3,
        "ongoing": {"HP": -3},
        "duration": 3,
        "stackable": True,
        "maxStacks": 2,
        "removalTriggers": ["antidote"],
        "description": "Lose 3 HP per stack each turn.",
    },
    {
        "id": "sprain",
        "name": "Sprain",
        "type": "DEBUFF",
        "priority": 1,
        "ongoing": {"FIT": -1},
        "duration": 4,
        "removalTriggers": ["medkit", "rest"],
        "description": "A twisted ankle slows you down.",
    },
    {
        "id": "fatigue",
        "name": "Fatigue",
        "type": "DEBUFF",
        "priority": 0,
        "ongoing": {"FIT": -1},
        "duration": 3,
        "stackable": True,
        "maxStacks": 3,
        "removalTriggers": ["rest"],
        "description": "Each stack drains 1 FIT per turn. Resting clears it.",
    },
    {
        "id": "starving",
        "name": "Starving",
        "type": "DEBUFF",
        "priority": 4,
        "ongoing": {"HP": -1},
        "duration": "untilCleared",
        "trigger": {"stat": "HUNGER", "operator": "<=", "value": 10},
        "description": "Lose 1 HP each turn until you eat.",
    },
    {
        "id": "panic",
        "name": "Panic",
        "type": "DEBUFF",
        "priority": 2,
        "ongoing": {"SAN": -2},
        "duration": "untilCleared",
        "slot": "mind",
        "trigger": {"stat": "SAN", "operator": "<", "value": 20},
        "description": "Your thoughts spiral while sanity is low.",
    },
    {
        "id": "calm",
        "name": "Calm",
        "type": "BUFF",
        "priority": 1,
        "ongoing": {"SAN": 1},
        "duration": 3,
        "slot": "mind",
        "description": "Regain 1 SAN each turn.",
    },
    {
        "id": "adrenaline",
        "name": "Adrenaline",
        "type": "BUFF",
        "priority": 0,
        "ongoing": {"FIT": 2},
        "duration": 2,
        "description": "Gain 2 FIT each turn for a short while.",
    },
]


def get_status_definitions() -> list[StatusEffectDefinition]:
    return [StatusEffectDefinition.from_dict(data) for data in STATUS_DATA]
