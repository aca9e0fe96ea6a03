"""
Constants and enumerations for the engine.

Defines the ability scores, die sizes, roll modes, entity types and the
other core vocabulary shared by every resolver.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class StatKey(NiceEnum):
    """The four ability scores of a mecha."""

    POWER = "power"
    MOBILITY = "mobility"
    SYSTEM = "system"
    PRESENCE = "presence"


# Stats a mecha may test when rolling for initiative.
INITIATIVE_STATS = (StatKey.MOBILITY, StatKey.SYSTEM)


class DieSize(NiceEnum):
    """Standard die sizes, ordered from smallest to largest."""

    D4 = "d4"
    D6 = "d6"
    D8 = "d8"
    D10 = "d10"
    D12 = "d12"
    D20 = "d20"

    @property
    def sides(self) -> int:
        """Returns the number of faces of the die."""
        return int(self.value[1:])

    @property
    def rank(self) -> int:
        """Returns the position of the die in the size ordering."""
        return _DIE_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return self.value.upper()

    def is_smallest(self) -> bool:
        return self.rank == 0

    def step_down(self) -> "DieSize":
        """
        Returns the next smaller die size.

        Returns:
            DieSize: The next size down, or d4 when already at d4.

        """
        if self.is_smallest():
            return self
        return _DIE_ORDER[self.rank - 1]

    def as_expression(self, count: int = 1) -> str:
        """Returns a dice expression rolling `count` dice of this size."""
        return f"{count}{self.value}"

    @staticmethod
    def from_sides(sides: int) -> "DieSize | None":
        for size in _DIE_ORDER:
            if size.sides == sides:
                return size
        return None

    @staticmethod
    def from_string(value: str) -> "DieSize":
        """
        Parses a die size such as 'd8' or 'D8'.

        Args:
            value (str): The die size string.

        Returns:
            DieSize: The matching die size.

        Raises:
            ValueError: If the string is not a standard die size.

        """
        try:
            return DieSize(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown die size: {value!r}")

    def __lt__(self, other: "DieSize") -> bool:
        if not isinstance(other, DieSize):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "DieSize") -> bool:
        if not isinstance(other, DieSize):
            return NotImplemented
        return self.rank <= other.rank


_DIE_ORDER = [DieSize.D4, DieSize.D6, DieSize.D8, DieSize.D10, DieSize.D12, DieSize.D20]


class DieKey(NiceEnum):
    """The die slots carried by a mecha."""

    HIT = "hit"
    DAMAGE = "damage"
    REACTOR = "reactor"

    @property
    def display_name(self) -> str:
        return f"{self.name.lower().capitalize()} Die"


class RollMode(NiceEnum):
    """Defines how many d20 are drawn for a check and which one is kept."""

    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"

    @property
    def formula(self) -> str:
        """
        Returns the dice expression for the mode.

        Lower is better on a roll-under check, so advantage keeps the lowest
        of two d20 and disadvantage keeps the highest.
        """
        return {
            RollMode.NORMAL: "1d20",
            RollMode.ADVANTAGE: "2d20kl",
            RollMode.DISADVANTAGE: "2d20kh",
        }[self]


class DamageMode(NiceEnum):
    """Situational selector for a damage roll."""

    NORMAL = "normal"
    HEAVY = "heavy"
    UNARMED = "unarmed"


class HitDieMode(NiceEnum):
    """How a hit die roll is used."""

    NORMAL = "normal"
    HEAL = "heal"


class Critical(NiceEnum):
    """Critical flag carried by a check outcome."""

    NONE = "none"
    SUCCESS = "success"
    FAILURE = "failure"


class ActorType(NiceEnum):
    """Defines the type of actor in the game."""

    MECHA = "mecha"
    ENEMY = "enemy"

    @property
    def is_player_controlled(self) -> bool:
        return self is ActorType.MECHA


class ItemType(NiceEnum):
    """Item types handled by the engine."""

    ENEMY_ATTACK = "enemyAttack"
    ENEMY_RECHARGE_ATTACK = "enemyRechargeAttack"
    BOSS_ATTACK = "bossAttack"
    BOSS_RECHARGE_ATTACK = "bossRechargeAttack"
    CONSUMABLE = "consumable"

    @property
    def is_attack(self) -> bool:
        return self is not ItemType.CONSUMABLE

    @property
    def is_recharge(self) -> bool:
        return self in (ItemType.ENEMY_RECHARGE_ATTACK, ItemType.BOSS_RECHARGE_ATTACK)

    @property
    def requires_boss_mode(self) -> bool:
        """True when the owning actor must be in boss mode to use the item."""
        return self in (ItemType.BOSS_ATTACK, ItemType.BOSS_RECHARGE_ATTACK)


class AttackRange(NiceEnum):
    """Range band of an enemy attack."""

    CLOSE = "close"
    NEAR = "near"
    FAR = "far"
    DISTANT = "distant"


class ReactorStatus(NiceEnum):
    """Result of a reactor die roll."""

    STEADY = "steady"
    DEGRADED = "degraded"
    OVERHEATED = "overheated"


class RechargeStatus(NiceEnum):
    """Result of a recharge die roll."""

    BECAME_READY = "becameReady"
    STILL_CHARGING = "stillCharging"


# Dotted document paths used when committing state back to the host.
PATH_REACTOR_DIE = "system.dice.reactor"
PATH_READY = "system.ready"
PATH_USES = "system.uses"
PATH_INITIATIVE = "initiative"
PATH_HIT_POINTS = "system.hitPoints"
PATH_ARMOR_POINTS = "system.armorPoints"
