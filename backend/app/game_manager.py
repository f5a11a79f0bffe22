"""
The GameManager singleton.
"""

import asyncio
import random
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from kitchen_core import ActionResult, GameDataLoader, GamePhase, GameRules, GameSession

from .config import Settings, settings as default_settings


class GameManager:
    """Manages the lifecycle of all active game sessions."""

    def __init__(self, settings: Optional[Settings] = None, data_loader: Optional[GameDataLoader] = None):
        self.settings = settings or default_settings
        data_root = Path(self.settings.DATA_ROOT) if self.settings.DATA_ROOT else None
        self.data_loader = data_loader or GameDataLoader(data_root=data_root)
        self.active_games: Dict[str, GameSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        print("GameManager initialized.")

    def _rules(self) -> GameRules:
        return GameRules(max_energy=self.settings.MAX_ENERGY, starting_coins=self.settings.STARTING_COINS)

    def create_game(self, game_id: Optional[str] = None, seed: Optional[int] = None) -> GameSession:
        """
        Creates a new GameSession, deals the opening hand and stores it.
        """
        game_id = game_id or f"game_{str(uuid.uuid4())[:8]}"
        if game_id in self.active_games:
            print(f"Warning: Game {game_id} already exists. Overwriting.")
        if seed is None:
            seed = self.settings.RNG_SEED
        game = GameSession(
            game_id,
            data_loader=self.data_loader,
            rng=random.Random(seed),
            rules=self._rules(),
            verbose=self.settings.VERBOSE,
        )
        game.new_game()
        self.active_games[game_id] = game
        print(f"GameSession {game_id} created.")
        return game

    def get_game(self, game_id: str) -> Optional[GameSession]:
        return self.active_games.get(game_id)

    def remove_game(self, game_id: str) -> bool:
        """Removes a game from the active list."""
        if game_id in self.active_games:
            del self.active_games[game_id]
            self._locks.pop(game_id, None)
            print(f"GameSession {game_id} removed.")
            return True
        return False

    def _lock_for(self, game: GameSession) -> asyncio.Lock:
        return self._locks.setdefault(game.state.game_id, asyncio.Lock())

    async def player_action(self, game: GameSession, action: str, payload: Dict[str, Any]) -> ActionResult:
        """
        Routes an action to the session. Actions on one game run one at a time.
        InvalidActionError propagates to the router.
        """
        async with self._lock_for(game):
            result = game.player_action(action, payload)
        if game.state.phase == GamePhase.GAME_OVER:
            print(f"Game {game.state.game_id} is over on turn {game.state.turn}.")
        return result

    async def discard_card(self, game: GameSession, card_id: str) -> bool:
        async with self._lock_for(game):
            return game.discard_card(card_id)
