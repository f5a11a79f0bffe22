from kitchen_core import Quality, SynthesisStep
from kitchen_core.recipes import calculate_product_stats


def _dish(kitchen, recipe_id="tomato-egg", quality=Quality.NORMAL):
    recipe = kitchen.catalog.recipe(recipe_id)
    product = kitchen.factory.product(recipe, quality, calculate_product_stats(recipe, quality, []))
    kitchen.inventory.add_card(product)
    return product


def _season(kitchen, *cards):
    return kitchen.engine.step_synthesize(kitchen.ids(*cards), SynthesisStep.SEASON)


def test_season_replaces_product_with_enhanced_copy(kitchen):
    dish = _dish(kitchen)
    salt, oil = kitchen.add("salt"), kitchen.add("oil")
    result = _season(kitchen, dish, salt, oil)
    assert result.success
    seasoned = result.produced_card
    assert seasoned.id != dish.id
    assert (seasoned.heal_value, seasoned.buff_effect, seasoned.trade_value) == (5, "Pan-fried", 4)
    assert seasoned.quality == Quality.NORMAL
    assert kitchen.inventory.find_card(dish.id) is None
    assert kitchen.inventory.find_card(seasoned.id) is seasoned
    assert result.consumed_cards == [dish, oil]
    assert salt.use_count == 2
    assert kitchen.inventory.find_card(salt.id) is salt


def test_last_use_destroys_auxiliary(kitchen):
    dish = _dish(kitchen)
    sugar = kitchen.add("sugar", use_count=1)
    result = _season(kitchen, dish, sugar)
    assert result.success
    assert sugar in result.consumed_cards
    assert kitchen.inventory.find_card(sugar.id) is None


def test_requires_exactly_one_product_and_an_auxiliary(kitchen):
    first, second = _dish(kitchen), _dish(kitchen)
    salt = kitchen.add("salt")
    assert not _season(kitchen, first, second, salt).success
    assert not _season(kitchen, first).success
    assert salt.use_count == 3
    assert kitchen.state.synthesizer.energy == 1


def test_unknown_recipe_is_a_data_integrity_failure(kitchen):
    dish = _dish(kitchen)
    dish.recipe_id = "ghost"
    salt = kitchen.add("salt")
    result = _season(kitchen, dish, salt)
    assert not result.success
    assert salt.use_count == 3
    assert kitchen.inventory.find_card(dish.id) is dish
    assert any(line.startswith("ERROR") and "ghost" in line for line in kitchen.state.log)
