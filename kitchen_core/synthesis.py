"""
Crafting engine: stepwise synthesis (preprocess, cook, season) and the
single-shot full throw.

Every attempt that gets past the energy check costs exactly one energy, even
when validation fails afterwards. Validation always completes before any card
is touched, so a failed attempt leaves the inventory as it was.
"""
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .catalog import CardFactory, CatalogContext
from .effects import TraitTrigger, fire_traits
from .inventory import Inventory
from .models import (
    ActionResult,
    Card,
    CardType,
    GameRules,
    GameState,
    ROLE_FIRE_SOURCE,
    ROLE_FUEL,
    ROLE_VESSEL,
    ROLE_VOLATILE_AUXILIARY,
    SynthesisStep,
    TraitEffect,
    failure,
)
from .recipes import (
    calculate_product_stats,
    calculate_quality_score,
    apply_auxiliary_effects,
    downgrade,
    find_matching_recipe,
    resolve_quality,
)

FULL_THROW_TYPES = (CardType.TOOL, CardType.FOOD, CardType.AUXILIARY, CardType.SPECIAL)
FULL_THROW_TOOL_WEAR = 2


@dataclass
class _PreprocessMatch:
    food: Card
    tool: Card
    replacements: List[str] = field(default_factory=list)


class SynthesisEngine:
    def __init__(
        self,
        state: GameState,
        inventory: Inventory,
        catalog: CatalogContext,
        factory: CardFactory,
        rng: Optional[random.Random] = None,
        rules: Optional[GameRules] = None,
    ):
        self.state = state
        self.inventory = inventory
        self.catalog = catalog
        self.factory = factory
        self.rng = rng or random.Random()
        self.rules = rules or GameRules()

    # --- Entry points ---

    def step_synthesize(self, card_ids: Sequence[str], step: Union[SynthesisStep, str]) -> ActionResult:
        if not self.state.synthesizer.has_energy(1):
            return failure("Not enough energy.")
        try:
            step = SynthesisStep(step.value if isinstance(step, SynthesisStep) else str(step).lower())
        except ValueError:
            return failure(f"Unknown synthesis step: {step}")
        if not self._charge_energy():
            return failure("Not enough energy.")

        cards = self.inventory.find_cards(card_ids)
        handlers = {
            SynthesisStep.PREPROCESS: self._preprocess,
            SynthesisStep.COOK: self._cook,
            SynthesisStep.SEASON: self._season,
        }
        result = handlers[step](cards)
        self._record(result)
        return result

    def full_throw(self, card_ids: Sequence[str]) -> ActionResult:
        if not self._charge_energy():
            return failure("Not enough energy.")
        cards = [c for c in self.inventory.find_cards(card_ids) if c.card_type in FULL_THROW_TYPES]
        result = self._full_throw(cards)
        self._record(result)
        return result

    # --- Helpers ---

    def _charge_energy(self) -> bool:
        return self.state.synthesizer.consume_energy(1)

    def _record(self, result: ActionResult):
        if result.success:
            self.state.last_result = result
        self.state.add_log(result.message)

    def _integrity_failure(self, message: str) -> ActionResult:
        self.state.add_log(f"ERROR: {message}")
        return failure(message)

    def _first_with_role(self, cards: Sequence[Card], role: str, usable: bool = True) -> Optional[Card]:
        for card in cards:
            if self.catalog.has_role(card, role) and (not usable or card.is_usable()):
                return card
        return None

    def _remove(self, card: Card, consumed: List[Card]):
        if self.inventory.remove_card(card.id) is not None:
            consumed.append(card)

    def _wear_tool(self, tool: Card, amount: int, consumed: List[Card]):
        tool.consume_durability(amount)
        if tool.current_durability <= 0:
            self._remove(tool, consumed)

    # --- Preprocess ---

    def _plan_preprocess(self, tools: List[Card], foods: List[Card]):
        """Match foods to tools without touching any card; durability is simulated."""
        remaining = {t.id: t.current_durability for t in tools}
        matches: List[_PreprocessMatch] = []
        unmatched: List[Card] = []
        for food in foods:
            match = None
            for tool in tools:
                if remaining[tool.id] <= 0:
                    continue
                rule = self.catalog.processing_rule(tool.name, food.name)
                if rule:
                    match = _PreprocessMatch(food=food, tool=tool, replacements=rule)
                    remaining[tool.id] -= 1
                    break
            if match:
                matches.append(match)
            else:
                unmatched.append(food)
        return matches, unmatched

    def _preprocess(self, cards: List[Card]) -> ActionResult:
        tools = [c for c in cards if c.card_type == CardType.TOOL and c.is_usable()]
        foods = [c for c in cards if c.card_type == CardType.FOOD]
        if not tools:
            return failure("Preprocessing needs a usable tool.")
        if not foods:
            return failure("Preprocessing needs at least one food.")

        matches, unmatched = self._plan_preprocess(tools, foods)
        for match in matches:
            for name in match.replacements:
                if self.catalog.key_for_name(name) is None:
                    return self._integrity_failure(
                        f"Processing rule {match.tool.name} -> {match.food.name} names unknown card '{name}'."
                    )

        triggers: List[TraitTrigger] = []
        tool_triggers: Dict[str, List[TraitTrigger]] = {}
        for tool in tools:
            tool_triggers[tool.id] = fire_traits([tool], self.rng, triggers)

        consumed: List[Card] = []
        gained: List[Card] = []
        matched_tools = set()
        for match in matches:
            doubled = any(t.effect == TraitEffect.DOUBLE_YIELD for t in tool_triggers[match.tool.id])
            names = match.replacements * 2 if doubled else match.replacements
            price = self.inventory.sell_price(match.food)
            for name in names:
                replacement = self.factory.create_by_name(name)
                replacement.mark_preprocessed()
                replacement.trade_value = max(price, self.catalog.base_price(name)) + 1
                self.inventory.add_card(replacement)
                gained.append(replacement)
            self._remove(match.food, consumed)
            match.tool.consume_durability(1)
            matched_tools.add(match.tool.id)

        for food in unmatched:
            if food.preprocessed:
                continue
            food.mark_preprocessed()
            food.trade_value = (food.trade_value or self.inventory.sell_price(food)) + 1
        fire_traits(unmatched, self.rng, triggers)

        for tool in tools:
            if tool.id not in matched_tools:
                tool.consume_durability(1)
            if tool.current_durability <= 0:
                self._remove(tool, consumed)

        parts = [f"{m.food.name} -> {', '.join(m.replacements)}" for m in matches]
        parts += [f"{f.name} prepared" for f in unmatched]
        return ActionResult(
            success=True,
            message=f"Preprocessed: {'; '.join(parts)}.",
            consumed_cards=consumed,
            used_cards=tools + foods,
            trait_triggers=triggers,
            gained_cards=gained,
        )

    # --- Cook ---

    def _cook(self, cards: List[Card]) -> ActionResult:
        vessel = self._first_with_role(cards, ROLE_VESSEL)
        fire = self._first_with_role(cards, ROLE_FIRE_SOURCE, usable=False)
        foods = [c for c in cards if c.card_type == CardType.FOOD and c.preprocessed]
        auxiliaries = [c for c in cards if c.card_type == CardType.AUXILIARY and c.is_usable()]
        fuel = self._first_with_role(cards, ROLE_FUEL)

        if vessel is None:
            return failure("Cooking needs a usable vessel.")
        if fire is None:
            return failure("Cooking needs a fire source.")
        if not fire.is_usable():
            return failure(f"{fire.name} has no fuel left.")
        if not foods:
            return failure("Cooking needs at least one preprocessed food.")
        recipe = find_matching_recipe(self.catalog.recipes, [f.name for f in foods])
        if recipe is None:
            return failure("No recipe matches these ingredients.")

        vessel_full = vessel.current_durability == vessel.max_durability
        consumed: List[Card] = []
        self._wear_tool(vessel, 1, consumed)
        if fuel is not None and not fuel.consume_use():
            self._remove(fuel, consumed)

        triggers: List[TraitTrigger] = []
        fire_traits(foods, self.rng, triggers)
        score = calculate_quality_score(recipe, foods, vessel_full, auxiliaries, triggers)
        quality = resolve_quality(recipe, score, triggers)
        stats = calculate_product_stats(recipe, quality, auxiliaries)
        product = self.factory.product(recipe, quality, stats)

        for food in foods:
            self._remove(food, consumed)
        self.inventory.add_card(product)

        used = [vessel, fire] + ([fuel] if fuel else []) + foods + auxiliaries
        return ActionResult(
            success=True,
            message=f"Cooked {product.name} ({quality.value}, score {score}).",
            consumed_cards=consumed,
            used_cards=used,
            produced_card=product,
            quality=quality,
            trait_triggers=triggers,
        )

    # --- Season ---

    def _season(self, cards: List[Card]) -> ActionResult:
        products = [c for c in cards if c.card_type == CardType.PRODUCT]
        auxiliaries = [c for c in cards if c.card_type == CardType.AUXILIARY and c.is_usable()]
        if len(products) != 1:
            return failure("Seasoning needs exactly one product.")
        if not auxiliaries:
            return failure("Seasoning needs at least one usable auxiliary.")
        product = products[0]
        recipe = self.catalog.recipe(product.recipe_id)
        if product.recipe_id and recipe is None:
            return self._integrity_failure(f"{product.name} references unknown recipe '{product.recipe_id}'.")

        consumed: List[Card] = []
        for aux in auxiliaries:
            if self.catalog.has_role(aux, ROLE_VOLATILE_AUXILIARY) or not aux.consume_use():
                self._remove(aux, consumed)

        heal, buff = product.heal_value, product.buff_effect
        if recipe is not None:
            heal, buff = apply_auxiliary_effects(recipe, heal, buff, auxiliaries)
        seasoned = self.factory.copy(
            product,
            heal_value=heal,
            buff_effect=buff,
            trade_value=(product.trade_value or 0) + len(auxiliaries),
        )
        self.inventory.replace_card(product.id, seasoned)
        consumed.insert(0, product)

        return ActionResult(
            success=True,
            message=f"Seasoned {product.name} with {', '.join(a.name for a in auxiliaries)}.",
            consumed_cards=consumed,
            used_cards=[product] + auxiliaries,
            produced_card=seasoned,
            quality=product.quality,
        )

    # --- Full throw ---

    def _full_throw(self, cards: List[Card]) -> ActionResult:
        vessel = self._first_with_role(cards, ROLE_VESSEL)
        fire = self._first_with_role(cards, ROLE_FIRE_SOURCE)
        foods = [c for c in cards if c.card_type == CardType.FOOD]
        if vessel is None or fire is None or not foods:
            return failure("Full throw needs a usable vessel, a lit fire source and at least one food.")

        chaos = self.rng.random() < self.rules.chaos_chance
        lost: List[Card] = []
        if chaos:
            count = min(len(foods), self.rng.randint(1, 2))
            lost = self.rng.sample(foods, count)
        kept = [f for f in foods if f not in lost]

        recipe = find_matching_recipe(self.catalog.recipes, [f.name for f in kept])
        if recipe is None:
            return failure("No recipe matches these ingredients.")

        tools = [c for c in cards if c.card_type == CardType.TOOL]
        auxiliaries = [c for c in cards if c.card_type == CardType.AUXILIARY]
        specials = [c for c in cards if c.card_type == CardType.SPECIAL]
        vessel_full = vessel.current_durability == vessel.max_durability

        triggers: List[TraitTrigger] = []
        fire_traits(kept, self.rng, triggers)
        fire_traits([s for s in specials if s is not fire], self.rng, triggers)
        score = calculate_quality_score(recipe, kept, vessel_full, auxiliaries, triggers)
        quality = resolve_quality(recipe, score, triggers)
        if chaos:
            quality = downgrade(quality)
        stats = calculate_product_stats(recipe, quality, auxiliaries)
        product = self.factory.product(recipe, quality, stats)

        consumed: List[Card] = []
        for tool in tools:
            self._wear_tool(tool, FULL_THROW_TOOL_WEAR, consumed)
        for card in foods + auxiliaries:
            self._remove(card, consumed)
        for special in specials:
            if special is not fire:
                self._remove(special, consumed)
        self.inventory.add_card(product)

        message = f"Full throw produced {product.name} ({quality.value}, score {score})."
        if chaos:
            message = f"Chaos in the kitchen! Lost {', '.join(f.name for f in lost)}. " + message
        return ActionResult(
            success=True,
            message=message,
            consumed_cards=consumed,
            used_cards=list(cards),
            produced_card=product,
            quality=quality,
            trait_triggers=triggers,
        )
