from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from kitchen_core import ActionResult, GameSession, InvalidActionError

from .game_manager import GameManager
from .schemas import (
    ActionResponse,
    BuyRequest,
    CardSelection,
    DiscardResponse,
    ExploreRequest,
    NewGameRequest,
    SynthesizeRequest,
)

router = APIRouter()

game_manager = GameManager()


def get_game_manager() -> GameManager:
    return game_manager


def get_game(game_id: str, manager: GameManager = Depends(get_game_manager)) -> GameSession:
    game = manager.get_game(game_id)
    if not game:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
    return game


async def _act(manager: GameManager, game: GameSession, action: str, payload: dict) -> ActionResponse:
    try:
        result: ActionResult = await manager.player_action(game, action, payload)
    except InvalidActionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return ActionResponse(result=result.to_public_dict(), state=game.to_public_dict())


@router.post("/games", status_code=status.HTTP_201_CREATED)
async def create_game(request: Optional[NewGameRequest] = None, manager: GameManager = Depends(get_game_manager)):
    """
    Start a new game and return its initial state.
    """
    request = request or NewGameRequest()
    game = manager.create_game(game_id=request.game_id, seed=request.seed)
    return game.to_public_dict()


@router.get("/games/{game_id}")
async def get_game_state(game: GameSession = Depends(get_game)):
    return game.to_public_dict()


@router.post("/games/{game_id}/synthesize", response_model=ActionResponse)
async def synthesize(
    request: SynthesizeRequest,
    game: GameSession = Depends(get_game),
    manager: GameManager = Depends(get_game_manager),
):
    return await _act(manager, game, "synthesize", {"card_ids": request.card_ids, "step": request.step.value})


@router.post("/games/{game_id}/full_throw", response_model=ActionResponse)
async def full_throw(
    request: CardSelection,
    game: GameSession = Depends(get_game),
    manager: GameManager = Depends(get_game_manager),
):
    return await _act(manager, game, "full_throw", {"card_ids": request.card_ids})


@router.post("/games/{game_id}/explore", response_model=ActionResponse)
async def explore(
    request: ExploreRequest,
    game: GameSession = Depends(get_game),
    manager: GameManager = Depends(get_game_manager),
):
    return await _act(manager, game, "explore", {"location": request.location})


@router.post("/games/{game_id}/cards/{card_id}/use", response_model=ActionResponse)
async def use_card(card_id: str, game: GameSession = Depends(get_game), manager: GameManager = Depends(get_game_manager)):
    return await _act(manager, game, "use_card", {"card_id": card_id})


@router.post("/games/{game_id}/cards/{card_id}/sell", response_model=ActionResponse)
async def sell_card(card_id: str, game: GameSession = Depends(get_game), manager: GameManager = Depends(get_game_manager)):
    return await _act(manager, game, "sell_card", {"card_id": card_id})


@router.delete("/games/{game_id}/cards/{card_id}", response_model=DiscardResponse)
async def discard_card(
    card_id: str,
    game: GameSession = Depends(get_game),
    manager: GameManager = Depends(get_game_manager),
):
    discarded = await manager.discard_card(game, card_id)
    return DiscardResponse(discarded=discarded, state=game.to_public_dict())


@router.post("/games/{game_id}/buy", response_model=ActionResponse)
async def buy_card(
    request: BuyRequest,
    game: GameSession = Depends(get_game),
    manager: GameManager = Depends(get_game_manager),
):
    return await _act(manager, game, "buy_card", {"card_key": request.card_key})


@router.post("/games/{game_id}/transform", response_model=ActionResponse)
async def transform(
    request: CardSelection,
    game: GameSession = Depends(get_game),
    manager: GameManager = Depends(get_game_manager),
):
    return await _act(manager, game, "transform", {"card_ids": request.card_ids})


@router.post("/games/{game_id}/advance_turn", response_model=ActionResponse)
async def advance_turn(game: GameSession = Depends(get_game), manager: GameManager = Depends(get_game_manager)):
    return await _act(manager, game, "advance_turn", {})


@router.post("/games/{game_id}/new_game", response_model=ActionResponse)
async def new_game(game: GameSession = Depends(get_game), manager: GameManager = Depends(get_game_manager)):
    return await _act(manager, game, "new_game", {})
