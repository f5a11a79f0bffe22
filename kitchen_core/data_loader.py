import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .catalog import CardTemplate, CatalogContext, ShopItem
from .defaults import DEFAULT_CARDS, DEFAULT_EXPLORE_DROPS, DEFAULT_RECIPES, DEFAULT_SHOP
from .effects import parse_trait
from .models import CardType, Quality
from .recipes import AuxiliaryEffect, QualityRule, Recipe

CARD_SECTIONS = {
    "tools": CardType.TOOL,
    "foods": CardType.FOOD,
    "auxiliaries": CardType.AUXILIARY,
    "specials": CardType.SPECIAL,
    "products": CardType.PRODUCT,
}


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return _as_int(value)


def parse_quality(raw: Any) -> Quality:
    try:
        return Quality(str(raw or "normal").lower())
    except ValueError:
        return Quality.NORMAL


def parse_card_templates(data: Dict[str, Any]) -> Dict[str, CardTemplate]:
    templates: Dict[str, CardTemplate] = {}
    for section, card_type in CARD_SECTIONS.items():
        for raw in data.get(section, []) or []:
            if not isinstance(raw, dict) or not raw.get("key"):
                continue
            processing_raw = raw.get("processing") or {}
            processing = {
                str(food): [str(n) for n in (names if isinstance(names, list) else [names])]
                for food, names in processing_raw.items()
            }
            templates[str(raw["key"])] = CardTemplate(
                key=str(raw["key"]),
                card_type=card_type,
                name=str(raw.get("name") or raw["key"]),
                trait=parse_trait(raw.get("trait")),
                max_durability=_as_int(raw.get("max_durability", 0)),
                spoil_turns=_as_int(raw.get("spoil_turns", 0)),
                use_count=_optional_int(raw.get("use_count")),
                effect=str(raw.get("effect", "")),
                heal_value=_as_int(raw.get("heal_value", 0)),
                buff_effect=str(raw.get("buff_effect", "")),
                trade_value=_optional_int(raw.get("trade_value")),
                processing=processing,
            )
    return templates


def _parse_quality_rule(raw: Any) -> Optional[QualityRule]:
    if not isinstance(raw, dict):
        return None
    return QualityRule(
        min_score=_optional_int(raw.get("min_score")),
        required_traits=[str(t) for t in raw.get("required_traits", []) or []],
    )


def parse_recipes(raw_items: List[Dict[str, Any]]) -> List[Recipe]:
    recipes: List[Recipe] = []
    for raw in raw_items or []:
        if not isinstance(raw, dict) or not raw.get("id"):
            continue
        rules = raw.get("quality_rules") or {}
        aux_effects: Dict[str, AuxiliaryEffect] = {}
        for aux_name, entry in (raw.get("auxiliary_effects") or {}).items():
            if not isinstance(entry, dict):
                continue
            aux_effects[str(aux_name)] = AuxiliaryEffect(
                heal_bonus=_as_int(entry.get("heal_bonus", 0)),
                buff_effect=str(entry.get("buff_effect", "")),
                quality_bonus=_as_int(entry.get("quality_bonus", 0)),
            )
        recipes.append(
            Recipe(
                id=str(raw["id"]),
                name=str(raw.get("name") or raw["id"]),
                required_ingredients=[str(n) for n in raw.get("required_ingredients", []) or []],
                base_quality=parse_quality(raw.get("base_quality")),
                base_heal_value=_as_int(raw.get("base_heal_value", 0)),
                base_buff_effect=str(raw.get("base_buff_effect", "")),
                base_trade_value=_as_int(raw.get("base_trade_value", 1), 1),
                fine=_parse_quality_rule(rules.get("fine")),
                excellent=_parse_quality_rule(rules.get("excellent")),
                auxiliary_effects=aux_effects,
            )
        )
    return recipes


def parse_explore_drops(data: Dict[str, Any]) -> Dict[str, List[str]]:
    drops: Dict[str, List[str]] = {}
    for location, entry in (data or {}).items():
        # Accept both {"plain": ["tomato"]} and {"plain": {"drops": ["tomato"]}}
        if isinstance(entry, dict):
            entry = entry.get("drops", [])
        if isinstance(entry, list):
            drops[str(location)] = [str(k) for k in entry]
    return drops


def parse_shop(raw_items: Any) -> List[ShopItem]:
    if isinstance(raw_items, dict):
        raw_items = raw_items.get("items", [])
    items: List[ShopItem] = []
    for raw in raw_items or []:
        if not isinstance(raw, dict) or not raw.get("card_key"):
            continue
        items.append(
            ShopItem(
                card_key=str(raw["card_key"]),
                name=str(raw.get("name") or raw["card_key"]),
                price=_as_int(raw.get("price", 0)),
                description=str(raw.get("description", "")),
            )
        )
    return items


def build_catalog(
    cards: Dict[str, Any],
    recipes: List[Dict[str, Any]],
    explore_drops: Dict[str, Any],
    shop: Any,
    source: str = "custom",
) -> CatalogContext:
    return CatalogContext(
        templates=parse_card_templates(cards),
        recipes=parse_recipes(recipes),
        explore_drops=parse_explore_drops(explore_drops),
        shop=parse_shop(shop),
        roles={str(k): str(v) for k, v in (cards.get("roles") or {}).items()},
        source=source,
    )


def default_catalog() -> CatalogContext:
    return build_catalog(DEFAULT_CARDS, DEFAULT_RECIPES, DEFAULT_EXPLORE_DROPS, DEFAULT_SHOP, source="defaults")


class GameDataLoader:
    """Loads static game content from JSON files into a CatalogContext."""

    def __init__(
        self,
        data_root: Optional[Path] = None,
        cards_file: Optional[str] = None,
        recipes_file: Optional[str] = None,
        explore_file: Optional[str] = None,
        shop_file: Optional[str] = None,
    ):
        self.data_root = Path(data_root) if data_root else Path(__file__).resolve().parent / "data"
        self.cards_file = cards_file  # Optional full path or filename
        self.recipes_file = recipes_file
        self.explore_file = explore_file
        self.shop_file = shop_file
        self._catalog: Optional[CatalogContext] = None

    def _load_json(self, filename: str, file_override: Optional[str] = None):
        path = Path(file_override) if file_override else self.data_root / filename
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def _load_or_default(self, filename: str, file_override: Optional[str], default: Any):
        try:
            return self._load_json(filename, file_override), True
        except (OSError, ValueError) as exc:
            print(f"Warning: could not load {file_override or filename}, using built-in defaults: {exc}")
            return default, False

    def load_catalog(self) -> CatalogContext:
        cards, cards_ok = self._load_or_default("cards.json", self.cards_file, DEFAULT_CARDS)
        recipes, recipes_ok = self._load_or_default("recipes.json", self.recipes_file, DEFAULT_RECIPES)
        drops, _ = self._load_or_default("explore_drops.json", self.explore_file, DEFAULT_EXPLORE_DROPS)
        shop, _ = self._load_or_default("shop.json", self.shop_file, DEFAULT_SHOP)

        if not isinstance(cards, dict) or not parse_card_templates(cards):
            cards, cards_ok = DEFAULT_CARDS, False
        if not isinstance(recipes, list) or not parse_recipes(recipes):
            recipes, recipes_ok = DEFAULT_RECIPES, False

        explore_drops = parse_explore_drops(drops if isinstance(drops, dict) else {})
        # Locations missing from the file keep their default drop tables.
        for location, keys in DEFAULT_EXPLORE_DROPS.items():
            explore_drops.setdefault(location, list(keys))

        catalog = build_catalog(
            cards,
            recipes,
            explore_drops,
            shop,
            source=str(self.data_root) if cards_ok and recipes_ok else "defaults",
        )
        if not catalog.shop:
            catalog.shop = parse_shop(DEFAULT_SHOP)
        self._catalog = catalog
        return catalog

    @property
    def catalog(self) -> CatalogContext:
        if self._catalog is None:
            return self.load_catalog()
        return self._catalog

    def reload(self) -> CatalogContext:
        self._catalog = None
        return self.load_catalog()
