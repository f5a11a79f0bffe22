from kitchen_core import Quality, TraitEffect
from kitchen_core.effects import TraitTrigger
from kitchen_core.models import QUALITY_ORDER
from kitchen_core.recipes import (
    EXCELLENT_BUFF,
    FINE_BUFF,
    Recipe,
    calculate_product_stats,
    calculate_quality_score,
    downgrade,
    find_matching_recipe,
    product_name,
    resolve_quality,
)


def _trigger(name, effect, amount=0):
    return TraitTrigger(card_id="c", card_name="card", trait_name=name, effect=effect, amount=amount)


def test_most_specific_recipe_wins(catalog):
    assert find_matching_recipe(catalog.recipes, ["Egg", "Tomato"]).id == "tomato-egg"
    assert find_matching_recipe(catalog.recipes, ["Tomato"]).id == "tomato-only"
    assert find_matching_recipe(catalog.recipes, ["Tomato", "Tomato"]).id == "tomato-only"
    assert find_matching_recipe(catalog.recipes, ["Potato Strips", "Salt"]).id == "fries"


def test_wildcard_catches_unmatched_ingredients(catalog):
    assert find_matching_recipe(catalog.recipes, ["Potato"]).id == "mixed"
    assert find_matching_recipe(catalog.recipes, []).id == "mixed"


def test_multiplicity_counts_and_missing_wildcard():
    recipes = [Recipe(id="omelette", name="Omelette", required_ingredients=["Egg", "Egg"])]
    assert find_matching_recipe(recipes, ["Egg"]) is None
    assert find_matching_recipe(recipes, ["Egg", "Egg"]).id == "omelette"


def test_ties_keep_catalog_order():
    recipes = [
        Recipe(id="first", name="First", required_ingredients=["Egg"]),
        Recipe(id="second", name="Second", required_ingredients=["Tomato"]),
    ]
    assert find_matching_recipe(recipes, ["Tomato", "Egg"]).id == "first"


def test_quality_score_components(kitchen):
    recipe = kitchen.catalog.recipe("tomato-egg")
    tomato, egg = kitchen.add("tomato"), kitchen.add("egg")
    oil = kitchen.add("oil")
    assert calculate_quality_score(recipe, [tomato, egg], True, []) == 5
    assert calculate_quality_score(recipe, [tomato, egg], False, []) == 4
    egg.remaining_spoil = 0
    assert calculate_quality_score(recipe, [tomato, egg], True, []) == 3
    # Oil counts 2 as an auxiliary plus its recipe quality bonus of 1
    assert calculate_quality_score(recipe, [tomato], True, [oil]) == 6
    bonus = [_trigger("Ripe", TraitEffect.BONUS_SCORE, 2)]
    assert calculate_quality_score(recipe, [tomato], True, [], bonus) == 5


def test_tier_resolution(catalog):
    recipe = catalog.recipe("tomato-egg")
    yolk = [_trigger("Double Yolk", TraitEffect.QUALITY_UPGRADE)]
    assert resolve_quality(recipe, 2) == Quality.NORMAL
    assert resolve_quality(recipe, 5) == Quality.FINE
    assert resolve_quality(recipe, 9) == Quality.FINE
    assert resolve_quality(recipe, 6, yolk) == Quality.EXCELLENT
    assert resolve_quality(recipe, 2, yolk) == Quality.FINE
    fox = [_trigger("Fox Luck", TraitEffect.FREE_ELITE_QUALITY)]
    assert resolve_quality(recipe, 7, fox) == Quality.EXCELLENT


def test_recipe_without_rules_keeps_base_tier(catalog):
    mixed = catalog.recipe("mixed")
    assert resolve_quality(mixed, 50) == Quality.NORMAL


def test_tier_is_monotonic_in_score(catalog):
    for recipe in catalog.recipes:
        for triggers in ([], [_trigger("Double Yolk", TraitEffect.QUALITY_UPGRADE)]):
            tiers = [QUALITY_ORDER.index(resolve_quality(recipe, s, triggers)) for s in range(0, 16)]
            assert tiers == sorted(tiers), recipe.id


def test_downgrade_never_drops_below_normal():
    assert downgrade(Quality.EXCELLENT) == Quality.FINE
    assert downgrade(Quality.FINE) == Quality.NORMAL
    assert downgrade(Quality.NORMAL) == Quality.NORMAL


def test_product_stats_per_tier(kitchen):
    recipe = kitchen.catalog.recipe("tomato-egg")
    normal = calculate_product_stats(recipe, Quality.NORMAL, [])
    fine = calculate_product_stats(recipe, Quality.FINE, [])
    excellent = calculate_product_stats(recipe, Quality.EXCELLENT, [])
    assert (normal.heal_value, normal.trade_value, normal.buff_effect) == (4, 2, "")
    assert (fine.heal_value, fine.trade_value, fine.buff_effect) == (6, 4, FINE_BUFF)
    assert (excellent.heal_value, excellent.trade_value, excellent.buff_effect) == (8, 6, EXCELLENT_BUFF)


def test_auxiliary_table_applies_after_tier(kitchen):
    recipe = kitchen.catalog.recipe("tomato-egg")
    salt, oil = kitchen.add("salt"), kitchen.add("oil")
    stats = calculate_product_stats(recipe, Quality.FINE, [salt, oil])
    assert stats.heal_value == 7
    assert stats.buff_effect == f"{FINE_BUFF} Pan-fried"
    assert stats.trade_value == 4


def test_product_name_prefix(catalog):
    recipe = catalog.recipe("tomato-egg")
    assert product_name(recipe, Quality.NORMAL) == "Tomato Scramble"
    assert product_name(recipe, Quality.EXCELLENT) == "Excellent Tomato Scramble"
