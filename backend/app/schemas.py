from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from kitchen_core import SynthesisStep


class NewGameRequest(BaseModel):
    """Optional overrides when creating a game."""
    game_id: Optional[str] = None
    seed: Optional[int] = None


class SynthesizeRequest(BaseModel):
    card_ids: List[str] = Field(min_length=1)
    step: SynthesisStep


class CardSelection(BaseModel):
    card_ids: List[str] = Field(min_length=1)


class ExploreRequest(BaseModel):
    location: str


class BuyRequest(BaseModel):
    card_key: str


class ActionResponse(BaseModel):
    """Outcome of a single action plus the state the player sees afterwards."""
    result: Dict[str, Any]
    state: Dict[str, Any]


class DiscardResponse(BaseModel):
    discarded: bool
    state: Dict[str, Any]
