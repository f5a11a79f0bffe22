import copy
from dataclasses import dataclass
from typing import Callable, List, Optional

import pytest

from kitchen_core import (
    CardFactory,
    CatalogContext,
    ExploreSystem,
    GameDataLoader,
    GameState,
    Inventory,
    SurvivalManager,
    SynthesisEngine,
    build_catalog,
)
from kitchen_core.catalog import counter_ids
from kitchen_core.defaults import DEFAULT_CARDS, DEFAULT_EXPLORE_DROPS, DEFAULT_RECIPES, DEFAULT_SHOP


class ScriptedRandom:
    """Replays queued draws; falls back to values that never fire a trait."""

    def __init__(self, floats=(), ints=(), default=0.99):
        self.floats = list(floats)
        self.ints = list(ints)
        self.default = default

    def random(self):
        return self.floats.pop(0) if self.floats else self.default

    def randint(self, a, b):
        return self.ints.pop(0) if self.ints else a

    def choice(self, seq):
        return list(seq)[0]

    def sample(self, population, k):
        return list(population)[:k]

    def shuffle(self, seq):
        pass


@dataclass
class Kitchen:
    state: GameState
    catalog: CatalogContext
    factory: CardFactory
    inventory: Inventory
    engine: SynthesisEngine
    survival: SurvivalManager
    explorer: ExploreSystem
    rng: object

    def add(self, key: str, **changes):
        card = self.factory.create(key)
        assert card is not None, key
        for attr, value in changes.items():
            setattr(card, attr, value)
        self.inventory.add_card(card)
        return card

    def ids(self, *cards) -> List[str]:
        return [c.id for c in cards]


@pytest.fixture(scope="session")
def catalog():
    return GameDataLoader().load_catalog()


@pytest.fixture
def custom_catalog():
    """Build a catalog from the built-in content after applying edits to a copy of it."""

    def _build(edit: Optional[Callable] = None, shop=None):
        cards = copy.deepcopy(DEFAULT_CARDS)
        recipes = copy.deepcopy(DEFAULT_RECIPES)
        if edit:
            edit(cards, recipes)
        return build_catalog(cards, recipes, DEFAULT_EXPLORE_DROPS, shop or DEFAULT_SHOP, source="test")

    return _build


@pytest.fixture
def make_kitchen(catalog):
    def _make(floats=(), ints=(), rng=None, catalog_override=None, energy=3):
        cat = catalog_override or catalog
        rng = rng or ScriptedRandom(floats=floats, ints=ints)
        state = GameState(game_id="test", verbose=False)
        state.player.coins = 10
        state.synthesizer.energy = energy
        factory = CardFactory(cat, counter_ids("t"))
        inventory = Inventory(state, cat, factory)
        return Kitchen(
            state=state,
            catalog=cat,
            factory=factory,
            inventory=inventory,
            engine=SynthesisEngine(state, inventory, cat, factory, rng),
            survival=SurvivalManager(state, inventory, cat, rng),
            explorer=ExploreSystem(state, inventory, cat, rng),
            rng=rng,
        )

    return _make


@pytest.fixture
def kitchen(make_kitchen):
    return make_kitchen()
