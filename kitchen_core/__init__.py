"""
Core engine package for Survival Kitchen.

This package is intentionally decoupled from FastAPI/backend concerns so it can
be imported by any host (server, CLI, tests). The backend only manages
transport and session bookkeeping and calls into this package for game logic.
"""

from .models import (
    ActionResult,
    Buff,
    Card,
    CardType,
    GamePhase,
    GameRules,
    GameState,
    PlayerBoard,
    Quality,
    Synthesizer,
    SynthesisStep,
    Task,
    Threat,
    Trait,
    TraitEffect,
)
from .catalog import CardFactory, CardTemplate, CatalogContext, ShopItem
from .data_loader import GameDataLoader, build_catalog, default_catalog
from .effects import TraitTrigger
from .inventory import Inventory
from .recipes import Recipe
from .session import GameSession, InvalidActionError
from .survival import ExploreSystem, SurvivalManager
from .synthesis import SynthesisEngine

__all__ = [
    "ActionResult",
    "Buff",
    "Card",
    "CardType",
    "GamePhase",
    "GameRules",
    "GameState",
    "PlayerBoard",
    "Quality",
    "Synthesizer",
    "SynthesisStep",
    "Task",
    "Threat",
    "Trait",
    "TraitEffect",
    "TraitTrigger",
    "CardFactory",
    "CardTemplate",
    "CatalogContext",
    "ShopItem",
    "GameDataLoader",
    "build_catalog",
    "default_catalog",
    "Inventory",
    "Recipe",
    "GameSession",
    "InvalidActionError",
    "ExploreSystem",
    "SurvivalManager",
    "SynthesisEngine",
]
