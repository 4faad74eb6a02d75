"""
Base items.

Item structure:
- consumeOnUse: whether using the item removes it
- effects: stat changes and status add/remove on use
"""

from ...content_schema.definitions import ItemDefinition

ITEM_DATA: list[dict] = [
    {
        "id": "bandage",
        "name": "Bandage",
        "description": "A clean strip of cloth. Stops bleeding.",
        "effects": {"statChanges": {"HP": 10}, "removeStatus": ["bleeding"]},
    },
    {
        "id": "medkit",
        "name": "Medkit",
        "description": "A small first-aid kit.",
        "effects": {"statChanges": {"HP": 40, "SAN": 5}, "removeStatus": ["bleeding", "sprain"]},
    },
    {
        "id": "ration",
        "name": "Ration",
        "description": "Dry, tasteless, filling.",
        "effects": {"statChanges": {"HUNGER": 25}},
    },
    {
        "id": "energy_bar",
        "name": "Energy Bar",
        "description": "Sugar and oats pressed into a brick.",
        "effects": {"statChanges": {"HUNGER": 10, "FIT": 5}},
    },
    {
        "id": "water_flask",
        "name": "Water Flask",
        "description": "Still half full.",
        "effects": {"statChanges": {"FIT": 5, "SAN": 2}},
    },
    {
        "id": "sedative",
        "name": "Sedative",
        "description": "Quiets the mind. Dulls the body.",
        "effects": {"statChanges": {"SAN": 10, "FIT": -5}, "applyStatus": ["calm"]},
    },
    {
        "id": "antidote",
        "name": "Antidote",
        "description": "Bitter liquid in a stoppered vial.",
        "effects": {"statChanges": {"HP": 5}},
    },
    {
        "id": "torch",
        "name": "Torch",
        "description": "Keeps the dark, and what lives in it, at bay.",
        "consumeOnUse": False,
        "effects": {"statChanges": {"SAN": 3}},
    },
    {
        "id": "rope",
        "name": "Rope",
        "description": "Ten metres of sturdy hemp.",
        "consumeOnUse": False,
        "effects": {},
    },
    {
        "id": "lucky_charm",
        "name": "Lucky Charm",
        "description": "A worn coin on a string.",
        "consumeOnUse": False,
        "effects": {"statChanges": {"SAN": 1}},
    },
    {
        "id": "old_key",
        "name": "Old Key",
        "description": "Heavy iron, teeth worn smooth.",
        "consumeOnUse": False,
        "effects": {},
    },
]


def get_item_definitions() -> list[ItemDefinition]:
    return [ItemDefinition.from_dict(data) for data in ITEM_DATA]
