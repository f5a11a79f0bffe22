import random
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .catalog import CatalogContext
from .inventory import Inventory
from .models import (
    ActionResult,
    Card,
    CardType,
    GamePhase,
    GameRules,
    GameState,
    Quality,
    ROLE_BAIT,
    ROLE_FIRE_SOURCE,
    ROLE_FUEL,
    ROLE_REPAIR,
    ROLE_VOLATILE_AUXILIARY,
    SATIETY_BUFF,
    Task,
    Threat,
    failure,
)

SATIETY_PATTERN = re.compile(r"Satiety\b.*?(\d+)\s+turns?", re.IGNORECASE)
HEALTH_PATTERN = re.compile(r"health\s*\+(\d+)", re.IGNORECASE)


@dataclass
class TaskTemplate:
    target: str
    description: str
    reward_keys: List[str] = field(default_factory=list)
    penalty: int = 0
    turns: int = 1

    def build(self) -> Task:
        return Task(
            description=self.description,
            target=self.target,
            penalty=self.penalty,
            remaining_turns=self.turns,
            reward_keys=list(self.reward_keys),
        )


@dataclass
class ThreatTemplate:
    requirement: str
    name: str
    description: str
    reward_keys: List[str] = field(default_factory=list)
    penalty: int = 0
    turns: int = 1

    def build(self) -> Threat:
        return Threat(
            name=self.name,
            description=self.description,
            requirement=self.requirement,
            penalty=self.penalty,
            remaining_turns=self.turns,
            reward_keys=list(self.reward_keys),
        )


TASK_TEMPLATES: List[TaskTemplate] = [
    TaskTemplate("hot_dish", "Cook a hot dish over the fire", ["salt", "oil"], penalty=2, turns=1),
    TaskTemplate("no_oil", "Make a dish without using oil", ["sugar"], penalty=1, turns=3),
    TaskTemplate("fine_dish", "Make a dish of Fine quality or better", ["fox"], penalty=2, turns=2),
    TaskTemplate("fresh_ingredients", "Make a dish with no spoiled ingredients", ["tomato", "egg"], penalty=1, turns=2),
]

THREAT_TEMPLATES: List[ThreatTemplate] = [
    ThreatTemplate("bait_card", "Beast Attack", "A wild beast prowls nearby. Hold a bait card to drive it off.",
                   ["fuel", "repair"], penalty=3, turns=2),
    ThreatTemplate("fine_product", "Merchant Order", "A merchant wants a dish of Fine quality or better.",
                   ["sugar", "oil"], penalty=2, turns=3),
    ThreatTemplate("repair_card", "Tool Breakdown", "Your tools are wearing out. Keep a repair kit at hand.",
                   ["fuel"], penalty=1, turns=2),
]


def _crafted_product(result: Optional[ActionResult]) -> bool:
    return bool(result and result.success and result.produced_card is not None)


def _used_role(result: ActionResult, catalog: CatalogContext, role: str) -> bool:
    return any(catalog.has_role(card, role) for card in result.used_cards)


TaskPredicate = Callable[[Optional[ActionResult], CatalogContext], bool]

TASK_PREDICATES: Dict[str, TaskPredicate] = {
    "hot_dish": lambda r, c: _crafted_product(r) and _used_role(r, c, ROLE_FIRE_SOURCE),
    "no_oil": lambda r, c: _crafted_product(r) and not _used_role(r, c, ROLE_VOLATILE_AUXILIARY),
    "fine_dish": lambda r, c: _crafted_product(r) and r.quality in (Quality.FINE, Quality.EXCELLENT),
    "fresh_ingredients": lambda r, c: _crafted_product(r)
    and not any(card.is_spoiled() for card in r.used_cards if card.card_type == CardType.FOOD),
}


def _fine_product(inventory: Inventory, catalog: CatalogContext) -> Optional[Card]:
    return next(
        (
            c
            for c in inventory.cards_of_type(CardType.PRODUCT)
            if c.quality in (Quality.FINE, Quality.EXCELLENT)
        ),
        None,
    )


ThreatRequirement = Callable[[Inventory, CatalogContext], Optional[Card]]

THREAT_REQUIREMENTS: Dict[str, ThreatRequirement] = {
    "bait_card": lambda inv, cat: inv.card_with_role(ROLE_BAIT),
    "fine_product": _fine_product,
    "repair_card": lambda inv, cat: inv.card_with_role(ROLE_REPAIR),
}


class TaskGenerator:
    def __init__(self, rng: random.Random, templates: Optional[List[TaskTemplate]] = None):
        self.rng = rng
        self.templates = templates or TASK_TEMPLATES

    def generate(self) -> Task:
        return self.rng.choice(self.templates).build()


class ThreatGenerator:
    def __init__(self, rng: random.Random, chance: float = 0.3, templates: Optional[List[ThreatTemplate]] = None):
        self.rng = rng
        self.chance = chance
        self.templates = templates or THREAT_TEMPLATES

    def maybe_generate(self) -> Optional[Threat]:
        if self.rng.random() >= self.chance:
            return None
        return self.rng.choice(self.templates).build()


class ExploreSystem:
    """Spends energy to pull random cards from a location's drop table."""

    def __init__(self, state: GameState, inventory: Inventory, catalog: CatalogContext, rng: random.Random):
        self.state = state
        self.inventory = inventory
        self.catalog = catalog
        self.rng = rng

    def locations(self) -> List[str]:
        return list(self.catalog.explore_drops.keys())

    def explore(self, location: str) -> ActionResult:
        if not self.state.synthesizer.has_energy(1):
            return failure("Not enough energy to explore.")
        drops = self.catalog.drop_table(location)
        if not drops:
            return failure(f"Unknown location: {location}")
        self.state.synthesizer.consume_energy(1)
        count = self.rng.randint(1, 2)
        found = self.inventory.grant(self.rng.choice(drops) for _ in range(count))
        names = ", ".join(c.name for c in found) or "nothing"
        self.state.add_log(f"Explored {location}: found {names}.")
        return ActionResult(success=True, message=f"Found {names} at {location}.", gained_cards=found)


class SurvivalManager:
    """
    Turn lifecycle: start-of-turn refill and generation, end-of-turn decay and
    task/threat evaluation, plus using and transforming cards.
    """

    def __init__(
        self,
        state: GameState,
        inventory: Inventory,
        catalog: CatalogContext,
        rng: random.Random,
        rules: Optional[GameRules] = None,
    ):
        self.state = state
        self.inventory = inventory
        self.catalog = catalog
        self.rng = rng
        self.rules = rules or GameRules()
        self.tasks = TaskGenerator(rng)
        self.threats = ThreatGenerator(rng, chance=self.rules.threat_chance)

    # --- Turn boundaries ---

    def start_turn(self) -> List[Card]:
        player = self.state.player
        self.state.synthesizer.refill()
        if player.current_task is None:
            player.current_task = self.tasks.generate()
            self.state.add_log(f"New task: {player.current_task.description}.")
        if player.current_threat is None:
            player.current_threat = self.threats.maybe_generate()
            if player.current_threat:
                self.state.add_log(f"Threat appears: {player.current_threat.name}. {player.current_threat.description}")
        pool = self.catalog.grant_pool()
        if not pool:
            return []
        granted = self.inventory.grant(self.rng.choice(pool) for _ in range(self.rules.turn_grant_count))
        if granted:
            self.state.add_log(f"Turn {self.state.turn}: received {', '.join(c.name for c in granted)}.")
        return granted

    def end_turn(self) -> List[Card]:
        player = self.state.player
        rewards: List[Card] = []

        if player.has_buff(SATIETY_BUFF):
            self.state.add_log("Satiety keeps hunger at bay.")
        else:
            player.consume_hunger(self.rules.hunger_decay)
        if player.hunger <= 0:
            player.take_damage(self.rules.hunger_zero_penalty)
            self.state.add_log(f"Starving! Health -{self.rules.hunger_zero_penalty}.")

        for food in self.inventory.cards_of_type(CardType.FOOD):
            food.remaining_spoil = max(0, food.remaining_spoil - 1)

        fire = self.inventory.card_with_role(ROLE_FIRE_SOURCE)
        if fire is not None and fire.use_count:
            fire.use_count -= 1

        player.tick_buffs()
        rewards.extend(self._evaluate_task())
        rewards.extend(self._evaluate_threat())
        self.state.last_result = None

        if player.health <= 0:
            self.state.phase = GamePhase.GAME_OVER
            self.state.add_log("Health reached 0. Game over.")
        return rewards

    def _evaluate_task(self) -> List[Card]:
        player = self.state.player
        task = player.current_task
        if task is None:
            return []
        predicate = TASK_PREDICATES.get(task.target)
        if predicate is not None and predicate(self.state.last_result, self.catalog):
            task.completed = True
            granted = self.inventory.grant(task.reward_keys)
            self.state.add_log(f"Task complete: {task.description}.")
            player.current_task = None
            return granted
        task.remaining_turns -= 1
        if task.remaining_turns <= 0:
            player.take_damage(task.penalty)
            self.state.add_log(f"Task failed: {task.description}. Health -{task.penalty}.")
            player.current_task = None
        return []

    def _evaluate_threat(self) -> List[Card]:
        player = self.state.player
        threat = player.current_threat
        if threat is None:
            return []
        requirement = THREAT_REQUIREMENTS.get(threat.requirement)
        satisfying = requirement(self.inventory, self.catalog) if requirement else None
        if satisfying is not None:
            self.inventory.remove_card(satisfying.id)
            granted = self.inventory.grant(threat.reward_keys)
            self.state.add_log(f"Threat resolved: {threat.name} (spent {satisfying.name}).")
            player.current_threat = None
            return granted
        threat.remaining_turns -= 1
        if threat.remaining_turns <= 0:
            player.take_damage(threat.penalty)
            self.state.add_log(f"Threat struck: {threat.name}. Health -{threat.penalty}.")
            player.current_threat = None
        return []

    # --- Card actions ---

    def use_card(self, card_id: str) -> ActionResult:
        card = self.inventory.find_card(card_id)
        if card is None:
            return failure("Card not found.")
        if card.card_type == CardType.PRODUCT:
            return self._eat(card)
        if self.catalog.has_role(card, ROLE_REPAIR):
            return self._repair(card)
        if self.catalog.has_role(card, ROLE_FUEL):
            return self._refuel(card)
        return failure(f"{card.name} cannot be used directly.")

    def _eat(self, card: Card) -> ActionResult:
        player = self.state.player
        player.restore_hunger(card.heal_value)
        parts = [f"hunger +{card.heal_value}"]
        satiety = SATIETY_PATTERN.search(card.buff_effect or "")
        if satiety:
            turns = int(satiety.group(1))
            player.add_buff(SATIETY_BUFF, turns)
            parts.append(f"{SATIETY_BUFF} for {turns} turns")
        health = HEALTH_PATTERN.search(card.buff_effect or "")
        if health:
            player.heal(int(health.group(1)))
            parts.append(f"health +{health.group(1)}")
        self.inventory.remove_card(card.id)
        message = f"Ate {card.name}: {', '.join(parts)}."
        self.state.add_log(message)
        return ActionResult(success=True, message=message, consumed_cards=[card], used_cards=[card])

    def _repair(self, card: Card) -> ActionResult:
        tool = next(
            (t for t in self.inventory.cards_of_type(CardType.TOOL) if t.current_durability < t.max_durability),
            None,
        )
        if tool is None:
            return failure("No damaged tool to repair.")
        tool.repair()
        self.inventory.remove_card(card.id)
        message = f"Repaired {tool.name} to {tool.current_durability} durability."
        self.state.add_log(message)
        return ActionResult(success=True, message=message, consumed_cards=[card], used_cards=[card, tool])

    def _refuel(self, card: Card) -> ActionResult:
        fire = self.inventory.card_with_role(ROLE_FIRE_SOURCE)
        if fire is None:
            return failure("No fire source to feed.")
        template = self.catalog.template(fire.key)
        full = template.use_count if template and template.use_count else 0
        fire.restock(max(1, full - (fire.use_count or 0)))
        self.inventory.remove_card(card.id)
        message = f"Fed {fire.name}: {fire.use_count} fuel."
        self.state.add_log(message)
        return ActionResult(success=True, message=message, consumed_cards=[card], used_cards=[card, fire])

    def transform(self, card_ids: Sequence[str]) -> ActionResult:
        cards = self.inventory.find_cards(card_ids)
        spoiled = next((c for c in cards if c.card_type == CardType.FOOD and c.is_spoiled()), None)
        tool = next((c for c in cards if c.card_type == CardType.TOOL and c.is_usable()), None)
        if spoiled is None or tool is None:
            return failure("Transforming needs a spoiled food and a usable tool.")
        bait_name = self.catalog.role_name(ROLE_BAIT)
        bait = self.inventory.factory.create_by_name(bait_name) if bait_name else None
        if bait is None:
            self.state.add_log("ERROR: no bait card in the catalog.")
            return failure("No bait card in the catalog.")

        consumed = [spoiled]
        self.inventory.remove_card(spoiled.id)
        tool.consume_durability(1)
        if tool.current_durability <= 0:
            self.inventory.remove_card(tool.id)
            consumed.append(tool)
        self.inventory.add_card(bait)
        message = f"Turned spoiled {spoiled.name} into {bait.name}."
        self.state.add_log(message)
        return ActionResult(
            success=True,
            message=message,
            consumed_cards=consumed,
            used_cards=[spoiled, tool],
            produced_card=bait,
        )
