import itertools
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from .models import Card, CardType, Quality, Trait
from .recipes import ProductStats, Recipe, product_name


@dataclass
class CardTemplate:
    key: str
    card_type: CardType
    name: str
    trait: Optional[Trait] = None
    max_durability: int = 0
    spoil_turns: int = 0
    use_count: Optional[int] = None
    effect: str = ""
    heal_value: int = 0
    buff_effect: str = ""
    trade_value: Optional[int] = None
    processing: Dict[str, List[str]] = field(default_factory=dict)

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "type": self.card_type.value,
            "name": self.name,
            "trait": self.trait.to_public_dict() if self.trait else None,
            "max_durability": self.max_durability,
            "spoil_turns": self.spoil_turns,
            "use_count": self.use_count,
            "effect": self.effect,
            "trade_value": self.trade_value,
        }


@dataclass
class ShopItem:
    card_key: str
    name: str
    price: int
    description: str = ""

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "card_key": self.card_key,
            "name": self.name,
            "price": self.price,
            "description": self.description,
        }


@dataclass
class CatalogContext:
    """Read-only view over the static game content."""

    templates: Dict[str, CardTemplate] = field(default_factory=dict)
    recipes: List[Recipe] = field(default_factory=list)
    explore_drops: Dict[str, List[str]] = field(default_factory=dict)
    shop: List[ShopItem] = field(default_factory=list)
    roles: Dict[str, str] = field(default_factory=dict)
    source: str = "defaults"

    def template(self, key: str) -> Optional[CardTemplate]:
        return self.templates.get(key)

    def key_for_name(self, name: str) -> Optional[str]:
        return next((t.key for t in self.templates.values() if t.name == name), None)

    def processing_rule(self, tool_name: str, food_name: str) -> Optional[List[str]]:
        for template in self.templates.values():
            if template.card_type != CardType.TOOL or template.name != tool_name:
                continue
            rule = template.processing.get(food_name)
            if rule:
                return list(rule)
        return None

    def recipe(self, recipe_id: Optional[str]) -> Optional[Recipe]:
        if not recipe_id:
            return None
        return next((r for r in self.recipes if r.id == recipe_id), None)

    def shop_item(self, card_key: str) -> Optional[ShopItem]:
        return next((item for item in self.shop if item.card_key == card_key), None)

    def role_name(self, role: str) -> Optional[str]:
        return self.roles.get(role)

    def has_role(self, card: Optional[Card], role: str) -> bool:
        if card is None:
            return False
        name = self.roles.get(role)
        return name is not None and card.name == name

    def drop_table(self, location: str) -> Optional[List[str]]:
        drops = self.explore_drops.get(location)
        return list(drops) if drops is not None else None

    def grant_pool(self) -> List[str]:
        """Every key that can drop while exploring, first-seen order."""
        pool: List[str] = []
        for drops in self.explore_drops.values():
            for key in drops:
                if key not in pool:
                    pool.append(key)
        return pool

    def base_price(self, name: str) -> int:
        key = self.key_for_name(name)
        template = self.templates.get(key) if key else None
        if template and template.trade_value:
            return template.trade_value
        return 1


def counter_ids(prefix: str = "card") -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


class CardFactory:
    """Creates card instances from catalog templates with injected identities."""

    def __init__(self, catalog: CatalogContext, id_source: Optional[Callable[[], str]] = None):
        self.catalog = catalog
        self.id_source = id_source or counter_ids()

    def new_id(self) -> str:
        return self.id_source()

    def create(self, key: str) -> Optional[Card]:
        template = self.catalog.template(key)
        if not template:
            return None
        return Card(
            id=self.new_id(),
            key=template.key,
            card_type=template.card_type,
            name=template.name,
            trait=template.trait,
            max_durability=template.max_durability,
            current_durability=template.max_durability,
            spoil_turns=template.spoil_turns,
            remaining_spoil=template.spoil_turns,
            use_count=template.use_count,
            effect=template.effect,
            heal_value=template.heal_value,
            buff_effect=template.buff_effect,
            trade_value=template.trade_value,
        )

    def create_by_name(self, name: str) -> Optional[Card]:
        key = self.catalog.key_for_name(name)
        if not key:
            return None
        return self.create(key)

    def create_many(self, keys: List[str]) -> List[Card]:
        cards = [self.create(key) for key in keys]
        return [c for c in cards if c is not None]

    def product(self, recipe: Recipe, quality: Quality, stats: ProductStats) -> Card:
        name = product_name(recipe, quality)
        return Card(
            id=self.new_id(),
            key=self.catalog.key_for_name(name) or recipe.id,
            card_type=CardType.PRODUCT,
            name=name,
            heal_value=stats.heal_value,
            buff_effect=stats.buff_effect,
            trade_value=stats.trade_value,
            quality=quality,
            recipe_id=recipe.id,
        )

    def copy(self, card: Card, **changes) -> Card:
        return replace(card, id=self.new_id(), **changes)
