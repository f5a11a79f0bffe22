from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class CardType(str, Enum):
    TOOL = "tool"
    FOOD = "food"
    AUXILIARY = "auxiliary"
    SPECIAL = "special"
    PRODUCT = "product"


class Quality(str, Enum):
    NORMAL = "normal"
    FINE = "fine"
    EXCELLENT = "excellent"


QUALITY_ORDER: List[Quality] = [Quality.NORMAL, Quality.FINE, Quality.EXCELLENT]


class SynthesisStep(str, Enum):
    PREPROCESS = "preprocess"
    COOK = "cook"
    SEASON = "season"


class GamePhase(str, Enum):
    ACTIVE = "ACTIVE"
    GAME_OVER = "GAME_OVER"


class TraitEffect(str, Enum):
    DOUBLE_YIELD = "double_yield"
    QUALITY_UPGRADE = "quality_upgrade"
    FREE_ELITE_QUALITY = "free_elite_quality"
    BONUS_SCORE = "bonus_score"
    PASSIVE = "passive"


# Roles the engine looks up by name through the catalog.
ROLE_VESSEL = "vessel"
ROLE_FIRE_SOURCE = "fire_source"
ROLE_FUEL = "fuel"
ROLE_VOLATILE_AUXILIARY = "volatile_auxiliary"
ROLE_BAIT = "bait"
ROLE_REPAIR = "repair"
ROLE_MASCOT = "mascot"

SATIETY_BUFF = "Satiety"


@dataclass
class GameRules:
    max_energy: int = 3
    max_health: int = 10
    max_hunger: int = 10
    starting_coins: int = 10
    hunger_decay: int = 2
    hunger_zero_penalty: int = 1
    threat_chance: float = 0.3
    chaos_chance: float = 0.3
    turn_grant_count: int = 2
    starting_cards: List[str] = field(
        default_factory=lambda: ["knife", "pot", "fire", "tomato", "egg", "salt"]
    )


@dataclass
class Trait:
    name: str
    effect: TraitEffect = TraitEffect.PASSIVE
    amount: int = 0
    probability: Optional[float] = None
    min_age: int = 0  # turns a food card must be held before the trait can fire
    description: str = ""

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "effect": self.effect.value,
            "amount": self.amount,
            "probability": self.probability,
            "description": self.description,
        }


@dataclass
class Card:
    id: str
    key: str
    card_type: CardType
    name: str
    trait: Optional[Trait] = None
    max_durability: int = 0
    current_durability: int = 0
    spoil_turns: int = 0
    remaining_spoil: int = 0
    preprocessed: bool = False
    use_count: Optional[int] = None
    effect: str = ""
    heal_value: int = 0
    buff_effect: str = ""
    trade_value: Optional[int] = None
    quality: Optional[Quality] = None
    recipe_id: Optional[str] = None

    @property
    def age(self) -> int:
        return max(0, self.spoil_turns - self.remaining_spoil)

    def is_spoiled(self) -> bool:
        return self.card_type == CardType.FOOD and self.remaining_spoil <= 0

    def consume_durability(self, amount: int = 1):
        if self.card_type != CardType.TOOL:
            return
        self.current_durability = max(0, self.current_durability - max(0, amount))

    def consume_use(self) -> bool:
        """Spend one use; returns whether the card is still usable afterwards."""
        if self.card_type not in (CardType.AUXILIARY, CardType.SPECIAL):
            return False
        if self.use_count is None:
            return True
        self.use_count = max(0, self.use_count - 1)
        return self.use_count > 0

    def is_usable(self) -> bool:
        if self.card_type == CardType.TOOL:
            return self.current_durability > 0
        if self.card_type in (CardType.AUXILIARY, CardType.SPECIAL):
            return self.use_count is None or self.use_count > 0
        return True

    def mark_preprocessed(self):
        if self.card_type == CardType.FOOD:
            self.preprocessed = True

    def repair(self):
        if self.card_type == CardType.TOOL:
            self.current_durability = self.max_durability

    def restock(self, amount: int):
        if self.card_type in (CardType.AUXILIARY, CardType.SPECIAL) and amount > 0:
            self.use_count = (self.use_count or 0) + amount

    def to_public_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "key": self.key,
            "type": self.card_type.value,
            "name": self.name,
            "trait": self.trait.to_public_dict() if self.trait else None,
            "trade_value": self.trade_value,
        }
        if self.card_type == CardType.TOOL:
            data["durability"] = self.current_durability
            data["max_durability"] = self.max_durability
        elif self.card_type == CardType.FOOD:
            data["remaining_spoil"] = self.remaining_spoil
            data["spoiled"] = self.is_spoiled()
            data["preprocessed"] = self.preprocessed
        elif self.card_type in (CardType.AUXILIARY, CardType.SPECIAL):
            data["use_count"] = self.use_count
            data["effect"] = self.effect
        else:
            data["heal_value"] = self.heal_value
            data["buff_effect"] = self.buff_effect
            data["quality"] = self.quality.value if self.quality else None
        return data


@dataclass
class Buff:
    name: str
    remaining_turns: int

    def to_public_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "remaining_turns": self.remaining_turns}


@dataclass
class Task:
    description: str
    target: str
    penalty: int = 0
    remaining_turns: int = 1
    reward_keys: List[str] = field(default_factory=list)
    completed: bool = False

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "target": self.target,
            "penalty": self.penalty,
            "remaining_turns": self.remaining_turns,
            "reward": list(self.reward_keys),
            "completed": self.completed,
        }


@dataclass
class Threat:
    name: str
    description: str
    requirement: str
    penalty: int = 0
    remaining_turns: int = 1
    reward_keys: List[str] = field(default_factory=list)

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "requirement": self.requirement,
            "penalty": self.penalty,
            "remaining_turns": self.remaining_turns,
            "reward": list(self.reward_keys),
        }


@dataclass
class Synthesizer:
    max_energy: int = 3
    energy: int = 3

    def has_energy(self, amount: int = 1) -> bool:
        return self.energy >= amount

    def consume_energy(self, amount: int = 1) -> bool:
        if self.energy < amount:
            return False
        self.energy -= amount
        return True

    def refill(self):
        self.energy = self.max_energy

    def to_public_dict(self) -> Dict[str, Any]:
        return {"energy": self.energy, "max_energy": self.max_energy}


@dataclass
class PlayerBoard:
    health: int = 10
    max_health: int = 10
    hunger: int = 10
    max_hunger: int = 10
    coins: int = 0
    cards: List[Card] = field(default_factory=list)
    current_task: Optional[Task] = None
    current_threat: Optional[Threat] = None
    buffs: List[Buff] = field(default_factory=list)

    def heal(self, amount: int):
        self.health = min(self.max_health, self.health + max(0, amount))

    def take_damage(self, amount: int):
        self.health = max(0, self.health - max(0, amount))

    def restore_hunger(self, amount: int):
        self.hunger = min(self.max_hunger, self.hunger + max(0, amount))

    def consume_hunger(self, amount: int):
        self.hunger = max(0, self.hunger - max(0, amount))

    def add_buff(self, name: str, turns: int):
        if turns > 0:
            self.buffs.append(Buff(name=name, remaining_turns=turns))

    def has_buff(self, name: str) -> bool:
        return any(b.name == name for b in self.buffs)

    def tick_buffs(self):
        for buff in self.buffs:
            buff.remaining_turns -= 1
        self.buffs = [b for b in self.buffs if b.remaining_turns > 0]

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "health": self.health,
            "max_health": self.max_health,
            "hunger": self.hunger,
            "max_hunger": self.max_hunger,
            "coins": self.coins,
            "cards": [c.to_public_dict() for c in self.cards],
            "task": self.current_task.to_public_dict() if self.current_task else None,
            "threat": self.current_threat.to_public_dict() if self.current_threat else None,
            "buffs": [b.to_public_dict() for b in self.buffs],
        }


@dataclass
class ActionResult:
    success: bool
    message: str
    consumed_cards: List[Card] = field(default_factory=list)
    used_cards: List[Card] = field(default_factory=list)
    produced_card: Optional[Card] = None
    quality: Optional[Quality] = None
    trait_triggers: List[Any] = field(default_factory=list)
    gained_cards: List[Card] = field(default_factory=list)
    coins: int = 0

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "consumed_cards": [c.to_public_dict() for c in self.consumed_cards],
            "used_cards": [c.id for c in self.used_cards],
            "produced_card": self.produced_card.to_public_dict() if self.produced_card else None,
            "quality": self.quality.value if self.quality else None,
            "trait_triggers": [t.to_public_dict() for t in self.trait_triggers],
            "gained_cards": [c.to_public_dict() for c in self.gained_cards],
            "coins": self.coins,
        }


def failure(message: str) -> ActionResult:
    return ActionResult(success=False, message=message)


@dataclass
class GameState:
    game_id: str
    verbose: bool = True
    player: PlayerBoard = field(default_factory=PlayerBoard)
    synthesizer: Synthesizer = field(default_factory=Synthesizer)
    phase: GamePhase = GamePhase.ACTIVE
    turn: int = 1
    last_result: Optional[ActionResult] = None
    log: List[str] = field(default_factory=list)

    @property
    def game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def add_log(self, message: str):
        self.log.append(message)
        if not self.verbose:
            return
        print(f"[{self.game_id}] {message}")

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "turn": self.turn,
            "game_over": self.game_over,
            "player": self.player.to_public_dict(),
            "synthesizer": self.synthesizer.to_public_dict(),
            "log": self.log[-50:],
        }
