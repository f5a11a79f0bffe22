"""
Trait resolution for cards.

Catalog entries declare traits as plain data: a name, an optional trigger
probability and an effect tag. The tag is parsed into a closed `TraitEffect`
enumeration here, and the crafting engine interprets the resulting triggers.

Supported effect tags:
  - "double_yield"        -> a tool's processing rule produces twice the output
  - "quality_upgrade"     -> lifts the product tier (Fine, or Excellent with score)
  - "free_elite_quality"  -> same as quality_upgrade, from lucky special cards
  - "bonus_score:2"       -> adds 2 to the quality score of the current craft
  - "passive"             -> descriptive only, the engine ignores it
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import Card, Trait, TraitEffect

UPGRADE_EFFECTS = {TraitEffect.QUALITY_UPGRADE, TraitEffect.FREE_ELITE_QUALITY}


@dataclass
class TraitTrigger:
    card_id: str
    card_name: str
    trait_name: str
    effect: TraitEffect
    amount: int = 0

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "card_id": self.card_id,
            "card_name": self.card_name,
            "trait_name": self.trait_name,
            "effect": self.effect.value,
            "amount": self.amount,
        }


def parse_trait_effect(raw: Optional[str]) -> Tuple[TraitEffect, int]:
    if not raw:
        return TraitEffect.PASSIVE, 0
    tag = str(raw).strip().lower()
    if tag.startswith("bonus_score"):
        parts = tag.split(":")
        amount = 1
        if len(parts) >= 2:
            try:
                amount = int(parts[1])
            except ValueError:
                amount = 1
        return TraitEffect.BONUS_SCORE, amount
    try:
        return TraitEffect(tag), 0
    except ValueError:
        return TraitEffect.PASSIVE, 0


def parse_trait(raw: Optional[Dict[str, Any]]) -> Optional[Trait]:
    if not raw or not isinstance(raw, dict) or not raw.get("name"):
        return None
    effect, amount = parse_trait_effect(raw.get("effect"))
    probability = raw.get("probability")
    return Trait(
        name=str(raw["name"]),
        effect=effect,
        amount=int(raw.get("amount", amount) or amount),
        probability=float(probability) if probability is not None else None,
        min_age=int(raw.get("min_age", 0) or 0),
        description=str(raw.get("description", "")),
    )


def resolve_trait(card: Card, rng, context: Optional[Dict[str, Any]] = None) -> Optional[TraitTrigger]:
    """Single Bernoulli draw for the card's trait; None when nothing fires."""
    trait = card.trait
    if trait is None:
        return None
    draw = rng.random()
    if trait.probability is not None and draw >= trait.probability:
        return None
    if trait.min_age and card.age < trait.min_age:
        return None
    return TraitTrigger(
        card_id=card.id,
        card_name=card.name,
        trait_name=trait.name,
        effect=trait.effect,
        amount=trait.amount,
    )


def fire_traits(cards: Iterable[Card], rng, triggers: List[TraitTrigger]) -> List[TraitTrigger]:
    """Evaluate traits for each card, appending fired triggers in order."""
    fired: List[TraitTrigger] = []
    for card in cards:
        # Passive traits are descriptive only and never draw.
        if card.trait is None or card.trait.effect == TraitEffect.PASSIVE:
            continue
        trigger = resolve_trait(card, rng)
        if trigger:
            fired.append(trigger)
    triggers.extend(fired)
    return fired


def has_quality_upgrade(triggers: Iterable[TraitTrigger]) -> bool:
    return any(t.effect in UPGRADE_EFFECTS for t in triggers)


def bonus_score(triggers: Iterable[TraitTrigger]) -> int:
    return sum(t.amount for t in triggers if t.effect == TraitEffect.BONUS_SCORE)


def fired_trait_names(triggers: Iterable[TraitTrigger]) -> List[str]:
    return [t.trait_name for t in triggers]
