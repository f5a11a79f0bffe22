from typing import Iterable, List, Optional

from .catalog import CardFactory, CatalogContext
from .models import ActionResult, Card, CardType, GameState, ROLE_MASCOT, failure


class Inventory:
    """
    Owns the player's card list and coin balance.

    Every add/remove of a card goes through here so crafting, survival and the
    shop agree on what the player holds.
    """

    def __init__(self, state: GameState, catalog: CatalogContext, factory: CardFactory):
        self.state = state
        self.catalog = catalog
        self.factory = factory

    @property
    def cards(self) -> List[Card]:
        return self.state.player.cards

    def add_card(self, card: Card):
        self.state.player.cards.append(card)

    def add_cards(self, cards: Iterable[Card]):
        for card in cards:
            self.add_card(card)

    def remove_card(self, card_id: str) -> Optional[Card]:
        for idx, card in enumerate(self.state.player.cards):
            if card.id == card_id:
                return self.state.player.cards.pop(idx)
        return None

    def replace_card(self, card_id: str, new_card: Card) -> bool:
        for idx, card in enumerate(self.state.player.cards):
            if card.id == card_id:
                self.state.player.cards[idx] = new_card
                return True
        return False

    def find_card(self, card_id: str) -> Optional[Card]:
        return next((c for c in self.state.player.cards if c.id == card_id), None)

    def find_cards(self, card_ids: Iterable[str]) -> List[Card]:
        found: List[Card] = []
        seen = set()
        for card_id in card_ids or []:
            if card_id in seen:
                continue
            seen.add(card_id)
            card = self.find_card(card_id)
            if card:
                found.append(card)
        return found

    def cards_of_type(self, card_type: CardType) -> List[Card]:
        return [c for c in self.state.player.cards if c.card_type == card_type]

    def card_by_name(self, name: str) -> Optional[Card]:
        return next((c for c in self.state.player.cards if c.name == name), None)

    def card_with_role(self, role: str) -> Optional[Card]:
        name = self.catalog.role_name(role)
        return self.card_by_name(name) if name else None

    def grant(self, keys: Iterable[str]) -> List[Card]:
        """Create cards from catalog keys and add them; unknown keys are skipped."""
        granted: List[Card] = []
        for key in keys:
            card = self.factory.create(key)
            if card is None:
                self.state.add_log(f"ERROR: unknown card key '{key}' in grant.")
                continue
            self.add_card(card)
            granted.append(card)
        return granted

    def sell_price(self, card: Card) -> int:
        if card.trade_value:
            return card.trade_value
        if card.card_type == CardType.TOOL:
            return card.current_durability * 2
        if card.card_type == CardType.FOOD:
            return 0 if card.is_spoiled() else 1
        if card.card_type == CardType.AUXILIARY:
            return card.use_count or 0
        if card.card_type == CardType.SPECIAL:
            return 5 if self.catalog.has_role(card, ROLE_MASCOT) else 1
        return 1

    def sell_card(self, card_id: str) -> ActionResult:
        card = self.find_card(card_id)
        if not card:
            return failure("Card not found.")
        price = self.sell_price(card)
        self.remove_card(card_id)
        self.state.player.coins += price
        self.state.add_log(f"Sold {card.name} for {price} coins.")
        return ActionResult(
            success=True,
            message=f"Sold {card.name} for {price} coins.",
            consumed_cards=[card],
            used_cards=[card],
            coins=price,
        )

    def buy_card(self, card_key: str) -> ActionResult:
        item = self.catalog.shop_item(card_key)
        if not item:
            return failure(f"'{card_key}' is not sold here.")
        player = self.state.player
        if player.coins < item.price:
            return failure(f"Not enough coins: {item.name} costs {item.price}, you have {player.coins}.")
        player.coins -= item.price
        card = self.factory.create(card_key)
        if card is None:
            player.coins += item.price
            self.state.add_log(f"ERROR: shop item '{card_key}' has no catalog entry, purchase refunded.")
            return failure(f"Could not create {item.name}, coins refunded.")
        self.add_card(card)
        self.state.add_log(f"Bought {card.name} for {item.price} coins.")
        return ActionResult(
            success=True,
            message=f"Bought {card.name} for {item.price} coins.",
            gained_cards=[card],
            coins=-item.price,
        )

    def discard_card(self, card_id: str) -> bool:
        card = self.remove_card(card_id)
        if card is None:
            return False
        self.state.add_log(f"Discarded {card.name}.")
        return True
