from kitchen_core import SynthesisStep


def test_unmatched_food_is_prepared_in_place(kitchen):
    knife = kitchen.add("knife")
    tomato = kitchen.add("tomato")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, tomato), SynthesisStep.PREPROCESS)
    assert result.success
    assert kitchen.inventory.find_card(tomato.id) is tomato
    assert tomato.preprocessed
    assert tomato.trade_value == 2
    assert knife.current_durability == 2
    assert result.consumed_cards == []
    assert kitchen.state.synthesizer.energy == 2


def test_processing_rule_replaces_food(kitchen):
    knife = kitchen.add("knife")
    potato = kitchen.add("potato")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, potato), "preprocess")
    assert result.success
    assert result.consumed_cards == [potato]
    assert kitchen.inventory.find_card(potato.id) is None
    strips = kitchen.inventory.card_by_name("Potato Strips")
    assert strips is not None and strips.preprocessed
    # max(potato price 1, strips base price 2) + 1
    assert strips.trade_value == 3
    assert result.gained_cards == [strips]
    assert knife.current_durability == 2


def test_double_yield_doubles_replacements(make_kitchen):
    kitchen = make_kitchen(floats=[0.05])
    knife = kitchen.add("knife")
    potato = kitchen.add("potato")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, potato), SynthesisStep.PREPROCESS)
    assert [c.name for c in result.gained_cards] == ["Potato Strips", "Potato Strips"]
    assert [t.trait_name for t in result.trait_triggers] == ["Sharp"]
    assert knife.current_durability == 2


def test_mixed_selection_wears_tool_per_match(kitchen):
    knife = kitchen.add("knife")
    potato, other_potato = kitchen.add("potato"), kitchen.add("potato")
    egg = kitchen.add("egg")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, potato, other_potato, egg), "preprocess")
    assert result.success
    assert len(result.gained_cards) == 2
    assert egg.preprocessed
    assert knife.current_durability == 1


def test_tool_breaking_is_reported_as_consumed(kitchen):
    knife = kitchen.add("knife", current_durability=1)
    tomato = kitchen.add("tomato")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, tomato), "preprocess")
    assert result.success
    assert knife in result.consumed_cards
    assert kitchen.inventory.find_card(knife.id) is None


def test_needs_a_usable_tool(kitchen):
    tomato = kitchen.add("tomato")
    broken = kitchen.add("knife", current_durability=0)
    result = kitchen.engine.step_synthesize(kitchen.ids(tomato, broken), "preprocess")
    assert not result.success
    assert not tomato.preprocessed
    assert kitchen.state.synthesizer.energy == 2


def test_needs_food(kitchen):
    knife = kitchen.add("knife")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife), "preprocess")
    assert not result.success
    assert knife.current_durability == 3


def test_no_energy_rejects_before_validation(make_kitchen):
    kitchen = make_kitchen(energy=0)
    knife = kitchen.add("knife")
    tomato = kitchen.add("tomato")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, tomato), "preprocess")
    assert not result.success
    assert "energy" in result.message.lower()
    assert kitchen.state.synthesizer.energy == 0
    assert knife.current_durability == 3 and not tomato.preprocessed


def test_unknown_step_is_not_charged(kitchen):
    result = kitchen.engine.step_synthesize([], "fry")
    assert not result.success
    assert result.message == "Unknown synthesis step: fry"
    assert kitchen.state.synthesizer.energy == 3


def test_no_energy_is_reported_before_unknown_step(make_kitchen):
    kitchen = make_kitchen(energy=0)
    result = kitchen.engine.step_synthesize([], "fry")
    assert not result.success
    assert result.message == "Not enough energy."
    assert kitchen.state.synthesizer.energy == 0


def test_already_prepared_food_is_accepted(kitchen):
    knife = kitchen.add("knife")
    tomato = kitchen.add("tomato", preprocessed=True, trade_value=2)
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, tomato), "preprocess")
    assert result.success
    assert tomato.preprocessed
    assert tomato.trade_value == 2
    assert result.used_cards == [knife, tomato]
    assert knife.current_durability == 2
    assert kitchen.state.synthesizer.energy == 2


def test_unknown_replacement_aborts_without_mutation(make_kitchen, custom_catalog):
    def edit(cards, recipes):
        cards["tools"][0]["processing"] = {"Potato": ["Ghost Strips"]}
        cards["foods"].append({"key": "potato", "name": "Potato", "spoil_turns": 5})

    kitchen = make_kitchen(catalog_override=custom_catalog(edit))
    knife = kitchen.add("knife")
    potato = kitchen.add("potato")
    tomato = kitchen.add("tomato")
    result = kitchen.engine.step_synthesize(kitchen.ids(knife, potato, tomato), "preprocess")
    assert not result.success
    assert "Ghost Strips" in result.message
    assert knife.current_durability == 3
    assert kitchen.inventory.find_card(potato.id) is potato
    assert not tomato.preprocessed
    assert kitchen.state.synthesizer.energy == 2
    assert any(line.startswith("ERROR") for line in kitchen.state.log)
