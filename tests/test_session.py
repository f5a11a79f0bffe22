import pytest

from kitchen_core import GameDataLoader, GamePhase, GameSession, InvalidActionError, SynthesisStep

from conftest import ScriptedRandom


@pytest.fixture
def session(catalog):
    game = GameSession("s1", rng=ScriptedRandom(), catalog=catalog, verbose=False)
    game.new_game()
    return game


def _card(session, name):
    return session.inventory.card_by_name(name)


def test_new_game_deals_starting_hand(session):
    state = session.state
    assert state.turn == 1
    assert state.phase == GamePhase.ACTIVE
    assert state.player.coins == 10
    assert state.synthesizer.energy == 3
    names = [c.name for c in state.player.cards]
    assert names == ["Knife", "Pot", "Fire", "Tomato", "Egg", "Salt", "Tomato", "Tomato"]
    assert state.player.current_task.target == "hot_dish"
    assert state.player.current_threat is None


def test_session_builds_catalog_from_loader(tmp_path):
    game = GameSession("s2", data_loader=GameDataLoader(data_root=tmp_path), rng=ScriptedRandom(), verbose=False)
    assert game.catalog.source == "defaults"
    game.new_game()
    assert _card(game, "Pot") is not None


def test_cooking_completes_the_hot_dish_task(session):
    knife, pot, fire = _card(session, "Knife"), _card(session, "Pot"), _card(session, "Fire")
    tomato, egg = _card(session, "Tomato"), _card(session, "Egg")
    prep = session.step_synthesize([knife.id, tomato.id, egg.id], SynthesisStep.PREPROCESS)
    assert prep.success
    cook = session.step_synthesize([pot.id, fire.id, tomato.id, egg.id], "cook")
    assert cook.success and cook.produced_card.name == "Fine Tomato Scramble"
    assert session.state.synthesizer.energy == 1

    result = session.advance_turn()
    assert result.success
    assert [c.name for c in result.gained_cards] == ["Salt", "Oil", "Tomato", "Tomato"]
    assert session.state.turn == 2
    assert session.state.synthesizer.energy == 3
    # A fresh task is generated at the start of the new turn
    assert session.state.player.current_task.completed is False


def test_game_over_blocks_everything_but_new_game(session):
    player = session.state.player
    player.health, player.hunger = 1, 0
    result = session.advance_turn()
    assert result.success
    assert session.state.game_over

    knife = _card(session, "Knife")
    assert not session.advance_turn().success
    assert not session.explore("plain").success
    assert not session.step_synthesize([knife.id], "preprocess").success
    assert not session.sell_card(knife.id).success
    assert session.discard_card(knife.id) is False
    assert session.state.turn == 1

    session.new_game()
    assert session.state.phase == GamePhase.ACTIVE
    assert session.state.player.health == 10
    assert session.state.turn == 1


def test_player_action_dispatches(session):
    knife, tomato = _card(session, "Knife"), _card(session, "Tomato")
    result = session.player_action("synthesize", {"card_ids": [knife.id, tomato.id], "step": "preprocess"})
    assert result.success and tomato.preprocessed
    assert session.player_action("explore", {"location": "plain"}).success
    assert session.player_action("buy_card", {"card_key": "repair"}).success
    assert session.player_action("discard_card", {"card_id": knife.id}).success
    assert not session.player_action("discard_card", {"card_id": knife.id}).success
    assert session.player_action("advance_turn").success
    assert session.state.turn == 2


def test_player_action_rejects_malformed_requests(session):
    with pytest.raises(InvalidActionError):
        session.player_action("fly", {})
    with pytest.raises(InvalidActionError):
        session.player_action("explore", {})
    with pytest.raises(InvalidActionError):
        session.player_action("synthesize", {"card_ids": ["x"], "step": "fry"})
    with pytest.raises(InvalidActionError):
        session.player_action("full_throw", {"card_ids": 5})


def test_public_state_includes_shop_and_locations(session):
    data = session.to_public_dict()
    assert data["game_id"] == "s1"
    assert "plain" in data["locations"]
    assert {item["card_key"] for item in data["shop"]} >= {"knife", "pot"}
    assert len(data["player"]["cards"]) == 8
    assert data["last_result"] is None
