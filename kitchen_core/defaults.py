"""
Minimal built-in content used when the JSON data files cannot be loaded.

The structure mirrors the files under `kitchen_core/data/` so both go through
the same parsing path in `GameDataLoader`.
"""
from typing import Any, Dict, List

DEFAULT_ROLES: Dict[str, str] = {
    "vessel": "Pot",
    "fire_source": "Fire",
    "fuel": "Fuel",
    "volatile_auxiliary": "Oil",
    "bait": "Bait",
    "repair": "Repair Kit",
    "mascot": "Lucky Fox",
}

DEFAULT_CARDS: Dict[str, Any] = {
    "roles": DEFAULT_ROLES,
    "tools": [
        {
            "key": "knife",
            "name": "Knife",
            "max_durability": 3,
            "trait": {"name": "Sharp", "probability": 0.1, "effect": "double_yield",
                      "description": "10% chance to process twice the ingredients"},
        },
        {
            "key": "pot",
            "name": "Pot",
            "max_durability": 5,
            "trait": {"name": "Conduction", "effect": "passive", "description": "Needs a fire source"},
        },
    ],
    "foods": [
        {
            "key": "tomato",
            "name": "Tomato",
            "spoil_turns": 3,
            "trait": {"name": "Ripe", "probability": 1.0, "effect": "bonus_score:2", "min_age": 2,
                      "description": "+2 quality after being kept for 2 turns"},
        },
        {
            "key": "egg",
            "name": "Egg",
            "spoil_turns": 2,
            "trait": {"name": "Double Yolk", "probability": 0.2, "effect": "quality_upgrade",
                      "description": "20% chance to raise the product quality"},
        },
    ],
    "auxiliaries": [
        {"key": "salt", "name": "Salt", "use_count": 3, "effect": "Flavor +1"},
        {"key": "oil", "name": "Oil", "use_count": 1, "effect": "Grants the pan-fried bonus"},
        {"key": "sugar", "name": "Sugar", "use_count": 2, "effect": "Sweetness +1"},
    ],
    "specials": [
        {
            "key": "fire",
            "name": "Fire",
            "use_count": 3,
            "effect": "Burns 1 fuel per turn, required for hot dishes",
            "trait": {"name": "Burning", "effect": "passive"},
        },
        {
            "key": "fox",
            "name": "Lucky Fox",
            "trait": {"name": "Fox Luck", "probability": 0.15, "effect": "free_elite_quality",
                      "description": "15% chance of a free quality upgrade"},
        },
        {"key": "fuel", "name": "Fuel", "use_count": 1, "effect": "Feeds the fire source"},
        {"key": "bait", "name": "Bait", "use_count": 1, "effect": "Distracts wild beasts"},
        {"key": "repair", "name": "Repair Kit", "use_count": 1, "effect": "Restores a tool's durability"},
    ],
    "products": [
        {"key": "tomato-egg", "name": "Tomato Scramble", "heal_value": 4, "trade_value": 2},
    ],
}

DEFAULT_RECIPES: List[Dict[str, Any]] = [
    {
        "id": "tomato-egg",
        "name": "Tomato Scramble",
        "required_ingredients": ["Tomato", "Egg"],
        "base_quality": "normal",
        "base_heal_value": 4,
        "base_trade_value": 2,
        "quality_rules": {
            "fine": {"min_score": 3},
            "excellent": {"min_score": 6, "required_traits": ["Double Yolk", "Fox Luck"]},
        },
        "auxiliary_effects": {
            "Salt": {"heal_bonus": 1},
            "Oil": {"buff_effect": "Pan-fried", "quality_bonus": 1},
            "Sugar": {"heal_bonus": 1},
        },
    },
    {
        "id": "tomato-only",
        "name": "Stewed Tomato",
        "required_ingredients": ["Tomato"],
        "base_heal_value": 2,
        "base_trade_value": 1,
    },
    {
        "id": "egg-only",
        "name": "Boiled Egg",
        "required_ingredients": ["Egg"],
        "base_heal_value": 2,
        "base_trade_value": 1,
    },
    {
        "id": "mixed",
        "name": "Hodgepodge",
        "required_ingredients": [],
        "base_heal_value": 2,
        "base_trade_value": 1,
    },
]

DEFAULT_EXPLORE_DROPS: Dict[str, List[str]] = {
    "plain": ["tomato", "egg", "salt"],
    "mine": ["fuel", "repair"],
    "forest": ["fuel", "oil"],
    "market": ["sugar", "oil"],
}

DEFAULT_SHOP: List[Dict[str, Any]] = [
    {"card_key": "knife", "name": "Knife", "price": 5, "description": "Basic tool, durability 3"},
    {"card_key": "pot", "name": "Pot", "price": 8, "description": "Cooking vessel, durability 5"},
    {"card_key": "fire", "name": "Fire", "price": 10, "description": "Required for hot dishes"},
    {"card_key": "repair", "name": "Repair Kit", "price": 3, "description": "Restores a tool"},
]
