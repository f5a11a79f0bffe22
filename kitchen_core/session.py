import random
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .catalog import CardFactory, CatalogContext
from .data_loader import GameDataLoader
from .inventory import Inventory
from .models import ActionResult, GamePhase, GameRules, GameState, PlayerBoard, Synthesizer, SynthesisStep, failure
from .survival import ExploreSystem, SurvivalManager
from .synthesis import SynthesisEngine
from .utils import parse_card_ids, parse_step, require_field

GAME_OVER_MESSAGE = "Game over. Start a new game."


class InvalidActionError(ValueError):
    """Raised when a caller requests an action that does not exist or is malformed."""


class GameSession:
    """
    Domain-level game session independent from any transport layer.

    Wires the inventory, crafting engine and survival loop around a single
    GameState. Random source and id generator are injectable for tests.
    """

    def __init__(
        self,
        game_id: str,
        data_loader: Optional[GameDataLoader] = None,
        rng: Optional[random.Random] = None,
        rules: Optional[GameRules] = None,
        id_source: Optional[Callable[[], str]] = None,
        catalog: Optional[CatalogContext] = None,
        verbose: bool = True,
    ):
        self.data_loader = data_loader or GameDataLoader()
        self.catalog = catalog or self.data_loader.catalog
        self.rng = rng or random.Random()
        self.rules = rules or GameRules()
        self.factory = CardFactory(self.catalog, id_source)
        self.verbose = verbose
        self.state = GameState(game_id=game_id, verbose=verbose)
        self._wire()

    def _wire(self):
        self.inventory = Inventory(self.state, self.catalog, self.factory)
        self.engine = SynthesisEngine(self.state, self.inventory, self.catalog, self.factory, self.rng, self.rules)
        self.survival = SurvivalManager(self.state, self.inventory, self.catalog, self.rng, self.rules)
        self.explorer = ExploreSystem(self.state, self.inventory, self.catalog, self.rng)

    # --- Lifecycle ---

    def new_game(self) -> GameState:
        self.state = GameState(
            game_id=self.state.game_id,
            verbose=self.verbose,
            player=PlayerBoard(
                health=self.rules.max_health,
                max_health=self.rules.max_health,
                hunger=self.rules.max_hunger,
                max_hunger=self.rules.max_hunger,
                coins=self.rules.starting_coins,
            ),
            synthesizer=Synthesizer(max_energy=self.rules.max_energy, energy=self.rules.max_energy),
        )
        self._wire()
        self.inventory.grant(self.rules.starting_cards)
        self.state.add_log(f"New game started with content from {self.catalog.source}.")
        self.survival.start_turn()
        return self.state

    def advance_turn(self) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        rewards = self.survival.end_turn()
        if self.state.phase == GamePhase.GAME_OVER:
            return ActionResult(success=True, message="You collapsed. Game over.", gained_cards=rewards)
        self.state.turn += 1
        granted = self.survival.start_turn()
        return ActionResult(
            success=True,
            message=f"Turn {self.state.turn} begins.",
            gained_cards=rewards + granted,
        )

    # --- Actions ---

    def step_synthesize(self, card_ids: Sequence[str], step: Union[SynthesisStep, str]) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.engine.step_synthesize(card_ids, step)

    def full_throw_synthesize(self, card_ids: Sequence[str]) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.engine.full_throw(card_ids)

    def explore(self, location: str) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.explorer.explore(location)

    def use_card(self, card_id: str) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.survival.use_card(card_id)

    def discard_card(self, card_id: str) -> bool:
        if self.state.game_over:
            return False
        return self.inventory.discard_card(card_id)

    def sell_card(self, card_id: str) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.inventory.sell_card(card_id)

    def buy_card(self, card_key: str) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.inventory.buy_card(card_key)

    def transform_cards(self, card_ids: Sequence[str]) -> ActionResult:
        if self.state.game_over:
            return failure(GAME_OVER_MESSAGE)
        return self.survival.transform(card_ids)

    def player_action(self, action: str, payload: Optional[Dict[str, Any]] = None) -> ActionResult:
        """
        Main entry point used by the backend. Unknown actions and malformed
        payloads raise InvalidActionError; gameplay outcomes come back as results.
        """
        handlers = {
            "synthesize": self._handle_synthesize,
            "full_throw": self._handle_full_throw,
            "explore": self._handle_explore,
            "use_card": self._handle_use_card,
            "discard_card": self._handle_discard_card,
            "sell_card": self._handle_sell_card,
            "buy_card": self._handle_buy_card,
            "transform": self._handle_transform,
            "advance_turn": self._handle_advance_turn,
            "new_game": self._handle_new_game,
        }
        if action not in handlers:
            raise InvalidActionError(f"Unknown action: {action}")
        return handlers[action](payload or {})

    def _handle_synthesize(self, payload: Dict[str, Any]) -> ActionResult:
        step = parse_step(require_field(payload, "step", InvalidActionError), InvalidActionError)
        return self.step_synthesize(parse_card_ids(payload, InvalidActionError), step)

    def _handle_full_throw(self, payload: Dict[str, Any]) -> ActionResult:
        return self.full_throw_synthesize(parse_card_ids(payload, InvalidActionError))

    def _handle_explore(self, payload: Dict[str, Any]) -> ActionResult:
        return self.explore(str(require_field(payload, "location", InvalidActionError)))

    def _handle_use_card(self, payload: Dict[str, Any]) -> ActionResult:
        return self.use_card(str(require_field(payload, "card_id", InvalidActionError)))

    def _handle_discard_card(self, payload: Dict[str, Any]) -> ActionResult:
        card_id = str(require_field(payload, "card_id", InvalidActionError))
        if self.discard_card(card_id):
            return ActionResult(success=True, message="Card discarded.")
        return failure(GAME_OVER_MESSAGE if self.state.game_over else "Card not found.")

    def _handle_sell_card(self, payload: Dict[str, Any]) -> ActionResult:
        return self.sell_card(str(require_field(payload, "card_id", InvalidActionError)))

    def _handle_buy_card(self, payload: Dict[str, Any]) -> ActionResult:
        return self.buy_card(str(require_field(payload, "card_key", InvalidActionError)))

    def _handle_transform(self, payload: Dict[str, Any]) -> ActionResult:
        return self.transform_cards(parse_card_ids(payload, InvalidActionError))

    def _handle_advance_turn(self, payload: Dict[str, Any]) -> ActionResult:
        return self.advance_turn()

    def _handle_new_game(self, payload: Dict[str, Any]) -> ActionResult:
        self.new_game()
        return ActionResult(success=True, message="New game started.")

    # --- Views ---

    def locations(self) -> List[str]:
        return self.explorer.locations()

    def to_public_dict(self) -> Dict[str, Any]:
        data = self.state.to_public_dict()
        data["locations"] = self.locations()
        data["shop"] = [item.to_public_dict() for item in self.catalog.shop]
        data["last_result"] = self.state.last_result.to_public_dict() if self.state.last_result else None
        return data
