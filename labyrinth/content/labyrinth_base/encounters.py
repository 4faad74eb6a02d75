"""
Base encounters.

Per category:
- Traps: one-time, two ways through (careful and reckless)
- Item encounters: one-time, take or leave an item
- Monsters: one-time, fight / flee / scare off with a torch
- Characters: persistent, talk or trade

Helper builders keep each definition to one line of data.
"""

from ...content_schema.definitions import EncounterDefinition


def _trap(event_id: str, name: str, description: str, damage: int,
          status: str | None = None, fit_needed: int = 50, weight: int = 10) -> dict:
    hurt = {"description": f"The {name.lower()} catches you.", "statChanges": {"HP": -damage, "SAN": -3}}
    if status:
        hurt["applyStatus"] = [status]
    return {
        "id": event_id,
        "name": name,
        "description": description,
        "image": f"{event_id}.png",
        "category": "trap",
        "weight": weight,
        "persistence": "oneTime",
        "choices": [
            {
                "text": "Move carefully",
                "requirements": {"stats": {"FIT": {"operator": ">=", "value": fit_needed}}},
                "successEffects": {"description": "You slip past unharmed.", "statChanges": {"FIT": -3}},
            },
            {
                "text": "Push through",
                "successConditions": {"probability": 0.3},
                "successEffects": {"description": "Somehow you make it through.", "statChanges": {"SAN": -2}},
                "failureEffects": hurt,
            },
        ],
    }


def _item_event(event_id: str, name: str, description: str, item_id: str,
                quantity: int = 1, weight: int = 10) -> dict:
    return {
        "id": event_id,
        "name": name,
        "description": description,
        "image": f"{event_id}.png",
        "category": "item",
        "weight": weight,
        "persistence": "oneTime",
        "choices": [
            {
                "text": "Take it",
                "successEffects": {
                    "description": "You pick it up.",
                    "itemsGained": [{"id": item_id, "quantity": quantity}],
                },
            },
            {
                "text": "Leave it",
                "successEffects": {"description": "You leave it where it lies."},
            },
        ],
    }


def _monster(event_id: str, name: str, description: str, damage: int, fit_needed: int,
             win_chance: float, status: str | None = None, weight: int = 10) -> dict:
    lose = {"description": f"The {name.lower()} overpowers you.", "statChanges": {"HP": -damage, "SAN": -5}}
    if status:
        lose["applyStatus"] = [status]
    return {
        "id": event_id,
        "name": name,
        "description": description,
        "image": f"{event_id}.png",
        "category": "monster",
        "weight": weight,
        "persistence": "oneTime",
        "choices": [
            {
                "text": "Fight",
                "requirements": {"stats": {"FIT": {"operator": ">=", "value": fit_needed}}},
                "successConditions": {"probability": win_chance},
                "successEffects": {
                    "description": f"You drive the {name.lower()} off.",
                    "statChanges": {"FIT": -5, "HUNGER": -5},
                    "applyStatus": ["adrenaline"],
                },
                "failureEffects": lose,
            },
            {
                "text": "Wave the torch",
                "requirements": {"items": ["torch"]},
                "successEffects": {"description": "It shrinks from the flame.", "statChanges": {"SAN": -2}},
            },
            {
                "text": "Flee",
                "successEffects": {
                    "description": "You run until your lungs burn.",
                    "statChanges": {"SAN": -8, "FIT": -4},
                    "applyStatus": ["fatigue"],
                },
            },
        ],
    }


def _character(event_id: str, name: str, description: str, trade_item: str,
               give_item: str, weight: int = 10) -> dict:
    return {
        "id": event_id,
        "name": name,
        "description": description,
        "image": f"{event_id}.png",
        "category": "character",
        "weight": weight,
        "persistence": "persistent",
        "choices": [
            {
                "text": "Talk",
                "successEffects": {"description": f"{name} shares a few kind words.", "statChanges": {"SAN": 5}},
            },
            {
                "text": "Trade",
                "requirements": {"items": [trade_item]},
                "successEffects": {
                    "description": f"{name} accepts the trade.",
                    "itemsLost": [trade_item],
                    "itemsGained": [give_item],
                },
            },
            {
                "text": "Ignore",
                "successEffects": {"description": "You walk on."},
            },
        ],
    }


TRAP_DATA: list[dict] = [
    _trap("trap_spikes", "Spike Pit", "The floor gives way to rusted spikes.", 15, "bleeding"),
    _trap("trap_darts", "Dart Wall", "Tiny holes line the walls.", 8, "poisoned", fit_needed=40),
    _trap("trap_boulder", "Rolling Boulder", "A rumble from above.", 20, "sprain", fit_needed=60),
    _trap("trap_net", "Falling Net", "A net drops from the ceiling.", 5, "fatigue", fit_needed=30),
    _trap("trap_blade", "Swinging Blade", "A blade sweeps across the corridor.", 18, "bleeding", fit_needed=55),
    _trap("trap_gas", "Gas Vent", "A sweet smell fills the room.", 6, "poisoned", weight=8),
    _trap("trap_floor", "Collapsing Floor", "The stones groan under your feet.", 12, "sprain"),
    _trap("trap_mirror", "Hall of Mirrors", "Your reflections move on their own.", 2, weight=6),
    _trap("trap_snare", "Snare", "A loop of wire around your ankle.", 7, "sprain", fit_needed=35),
    _trap("trap_flood", "Flooding Chamber", "Water pours in as the door slams.", 10, "fatigue", fit_needed=45),
    _trap("trap_fire", "Fire Jet", "A nozzle hisses in the wall.", 14, weight=9),
    _trap("trap_whispers", "Whispering Dark", "Voices call your name.", 3, weight=5),
]

ITEM_EVENT_DATA: list[dict] = [
    _item_event("item_bandage_1", "Dusty Crate", "A crate with a red cross.", "bandage"),
    _item_event("item_bandage_2", "Abandoned Pack", "Someone left in a hurry.", "bandage", 2),
    _item_event("item_medkit", "Wall Cabinet", "A cabinet hangs open.", "medkit", weight=5),
    _item_event("item_ration_1", "Food Tin", "A sealed tin on the floor.", "ration"),
    _item_event("item_ration_2", "Pantry Shelf", "Old shelves, some still stocked.", "ration", 2),
    _item_event("item_ration_3", "Lunchbox", "A child's lunchbox.", "ration"),
    _item_event("item_energy_bar", "Vending Machine", "The glass is cracked.", "energy_bar", 2),
    _item_event("item_water_1", "Fountain", "A dripping fountain.", "water_flask"),
    _item_event("item_water_2", "Canteen", "A dented canteen on a hook.", "water_flask"),
    _item_event("item_sedative", "Medicine Tray", "Pills sorted into little cups.", "sedative", weight=6),
    _item_event("item_antidote", "Apothecary Box", "Labels in a faded hand.", "antidote", weight=7),
    _item_event("item_torch_1", "Wall Sconce", "A torch still in its bracket.", "torch"),
    _item_event("item_torch_2", "Campfire Remains", "One branch is still usable.", "torch", weight=6),
    _item_event("item_rope", "Climbing Gear", "Pitons and a coil of rope.", "rope"),
    _item_event("item_charm", "Shrine", "Offerings on a stone shelf.", "lucky_charm", weight=4),
    _item_event("item_key", "Skeleton", "Something glints in its hand.", "old_key", weight=5),
    _item_event("item_ration_4", "Supply Drop", "A parachute tangled on a pipe.", "ration", 3, weight=4),
    _item_event("item_bandage_3", "Nurse's Desk", "Drawers half open.", "bandage"),
]

MONSTER_DATA: list[dict] = [
    _monster("monster_rat_swarm", "Rat Swarm", "Hundreds of eyes in the dark.", 8, 20, 0.7, "poisoned"),
    _monster("monster_ghoul", "Ghoul", "It smells you before it sees you.", 18, 45, 0.5, "bleeding"),
    _monster("monster_shade", "Shade", "A shadow that should not move.", 5, 30, 0.4, weight=7),
    _monster("monster_hound", "Hound", "Lean, grey and hungry.", 14, 40, 0.55, "bleeding"),
    _monster("monster_crawler", "Crawler", "Too many legs.", 12, 35, 0.6, "poisoned", weight=8),
    _monster("monster_warden", "Warden", "An armoured shape blocks the way.", 25, 60, 0.35, "sprain", weight=4),
]

CHARACTER_DATA: list[dict] = [
    _character("character_hermit", "Hermit", "An old man tends a tiny fire.", "torch", "ration"),
    _character("character_medic", "Medic", "A woman in a stained coat.", "ration", "medkit"),
    _character("character_child", "Lost Child", "A child hums to herself.", "lucky_charm", "bandage", weight=6),
    _character("character_merchant", "Merchant", "Wares spread on a blanket.", "old_key", "antidote"),
    _character("character_prisoner", "Prisoner", "Chained to the wall, but smiling.", "rope", "energy_bar", weight=7),
    _character("character_scholar", "Scholar", "Surrounded by maps of the maze.", "water_flask", "sedative", weight=8),
]


def get_encounter_definitions() -> list[EncounterDefinition]:
    data = TRAP_DATA + ITEM_EVENT_DATA + MONSTER_DATA + CHARACTER_DATA
    return [EncounterDefinition.from_dict(d) for d in data]
