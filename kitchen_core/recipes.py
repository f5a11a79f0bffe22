"""
Recipe matching and quality scoring.

Recipes are matched against the names of the food cards going into a craft;
the most specific recipe (largest ingredient list) wins and an empty
ingredient list acts as the catch-all. The quality score then decides the
tier, and the tier decides the product stats.
"""
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .effects import TraitTrigger, bonus_score, fired_trait_names, has_quality_upgrade
from .models import Card, CardType, Quality, QUALITY_ORDER

FINE_HEAL_FLOOR = 6
EXCELLENT_HEAL_FLOOR = 8
FINE_BUFF = "Satiety: no hunger loss for 2 turns"
EXCELLENT_BUFF = "Satiety: no hunger loss for 3 turns, health +2"
TRADE_MULTIPLIER = {Quality.NORMAL: 1, Quality.FINE: 2, Quality.EXCELLENT: 3}
QUALITY_PREFIX = {Quality.NORMAL: "", Quality.FINE: "Fine ", Quality.EXCELLENT: "Excellent "}


@dataclass
class QualityRule:
    min_score: Optional[int] = None
    required_traits: List[str] = field(default_factory=list)


@dataclass
class AuxiliaryEffect:
    heal_bonus: int = 0
    buff_effect: str = ""
    quality_bonus: int = 0


@dataclass
class Recipe:
    id: str
    name: str
    required_ingredients: List[str] = field(default_factory=list)
    base_quality: Quality = Quality.NORMAL
    base_heal_value: int = 0
    base_buff_effect: str = ""
    base_trade_value: int = 1
    fine: Optional[QualityRule] = None
    excellent: Optional[QualityRule] = None
    auxiliary_effects: Dict[str, AuxiliaryEffect] = field(default_factory=dict)

    @property
    def is_wildcard(self) -> bool:
        return not self.required_ingredients

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "required_ingredients": list(self.required_ingredients),
            "base_quality": self.base_quality.value,
            "base_heal_value": self.base_heal_value,
            "base_trade_value": self.base_trade_value,
        }


@dataclass
class ProductStats:
    heal_value: int
    buff_effect: str
    trade_value: int


def find_matching_recipe(recipes: List[Recipe], ingredient_names: Iterable[str]) -> Optional[Recipe]:
    available = Counter(ingredient_names)
    best: Optional[Recipe] = None
    for recipe in recipes:
        if recipe.is_wildcard:
            continue
        needed = Counter(recipe.required_ingredients)
        if any(available[name] < count for name, count in needed.items()):
            continue
        # Strictly greater keeps the earlier recipe on ties.
        if best is None or len(recipe.required_ingredients) > len(best.required_ingredients):
            best = recipe
    if best:
        return best
    return next((r for r in recipes if r.is_wildcard), None)


def calculate_quality_score(
    recipe: Recipe,
    food_cards: List[Card],
    vessel_full: bool,
    auxiliary_cards: List[Card],
    triggers: Iterable[TraitTrigger] = (),
) -> int:
    freshness = 2 * sum(1 for f in food_cards if not f.is_spoiled())
    vessel = 1 if vessel_full else 0
    auxiliary = 2 * len(auxiliary_cards)
    aux_bonus = 0
    for aux in auxiliary_cards:
        effect = recipe.auxiliary_effects.get(aux.name)
        if effect:
            aux_bonus += effect.quality_bonus
    return freshness + vessel + auxiliary + aux_bonus + bonus_score(triggers)


def resolve_quality(recipe: Recipe, score: int, triggers: Iterable[TraitTrigger] = ()) -> Quality:
    triggers = list(triggers)
    upgraded = has_quality_upgrade(triggers)

    excellent = recipe.excellent
    if excellent:
        meets_score = excellent.min_score is None or score >= excellent.min_score
        names = set(fired_trait_names(triggers))
        meets_traits = not excellent.required_traits or any(t in names for t in excellent.required_traits)
        if meets_score and (meets_traits or upgraded):
            return Quality.EXCELLENT

    fine = recipe.fine
    if fine:
        meets_score = fine.min_score is None or score >= fine.min_score
        if meets_score or upgraded:
            return Quality.FINE

    return recipe.base_quality


def downgrade(quality: Quality) -> Quality:
    index = QUALITY_ORDER.index(quality)
    return QUALITY_ORDER[max(0, index - 1)]


def append_buff(current: str, extra: str) -> str:
    if not extra:
        return current
    return f"{current} {extra}" if current else extra


def calculate_product_stats(recipe: Recipe, quality: Quality, auxiliary_cards: List[Card]) -> ProductStats:
    heal = recipe.base_heal_value
    buff = recipe.base_buff_effect or ""
    trade = recipe.base_trade_value * TRADE_MULTIPLIER[quality]
    if quality == Quality.FINE:
        heal = max(heal, FINE_HEAL_FLOOR)
        buff = FINE_BUFF
    elif quality == Quality.EXCELLENT:
        heal = max(heal, EXCELLENT_HEAL_FLOOR)
        buff = EXCELLENT_BUFF
    heal, buff = apply_auxiliary_effects(recipe, heal, buff, auxiliary_cards)
    return ProductStats(heal_value=heal, buff_effect=buff, trade_value=trade)


def apply_auxiliary_effects(recipe: Recipe, heal: int, buff: str, auxiliary_cards: List[Card]):
    for aux in auxiliary_cards:
        if aux.card_type != CardType.AUXILIARY:
            continue
        effect = recipe.auxiliary_effects.get(aux.name)
        if not effect:
            continue
        heal += effect.heal_bonus
        buff = append_buff(buff, effect.buff_effect)
    return heal, buff


def product_name(recipe: Recipe, quality: Quality) -> str:
    return f"{QUALITY_PREFIX[quality]}{recipe.name}"
