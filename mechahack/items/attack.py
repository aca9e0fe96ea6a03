"""
Attack item module for the engine.

Defines the enemy and boss attack items and rolls their damage.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mechahack.combat.damage import DamageCalculator, DamageResult
from mechahack.core.constants import AttackRange, DamageMode, ItemType, StatKey


class AttackItem(BaseModel):
    """
    An attack owned by an enemy actor.

    Recharge variants carry a `ready` flag; the engine never flips it itself
    but returns the update for the host to commit.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Host identifier of the item")
    name: str = Field(description="Display name of the attack")
    item_type: ItemType = Field(
        default=ItemType.ENEMY_ATTACK,
        description="Which kind of attack this is",
    )
    damage: str | None = Field(
        default=None,
        description="Damage formula, e.g. '2d6'",
    )
    defend_stat: StatKey = Field(
        default=StatKey.POWER,
        description="Stat the target defends with",
    )
    attack_range: AttackRange = Field(
        default=AttackRange.CLOSE,
        description="Range band of the attack",
    )
    targets: int = Field(
        default=1,
        description="Number of targets the attack hits",
    )
    ready: bool = Field(
        default=False,
        description="Whether a recharge attack may be used",
    )
    description: str = Field(
        default="",
        description="Rules text of the attack",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string")
        if not self.item_type.is_attack:
            raise ValueError(f"{self.item_type} is not an attack item type")
        if self.targets < 1:
            raise ValueError(f"targets must be at least 1, got {self.targets}")

    @property
    def is_recharge(self) -> bool:
        return self.item_type.is_recharge


class AttackReport(BaseModel):
    """Outcome of using an attack."""

    model_config = ConfigDict(frozen=True)

    item_name: str = Field(description="Name of the attack")
    damage: DamageResult = Field(description="The damage rolled")
    defend_stat: StatKey = Field(description="Stat the target defends with")
    attack_range: AttackRange = Field(description="Range band of the attack")
    targets: int = Field(description="Number of targets")

    def __str__(self) -> str:
        plural = "s" if self.targets > 1 else ""
        return (
            f"{self.item_name}: {self.damage.total} damage | "
            f"Defend: {self.defend_stat.display_name} | "
            f"{self.attack_range.display_name} | {self.targets} Target{plural}"
        )


def roll_attack(item: AttackItem, calculator: DamageCalculator) -> AttackReport:
    """
    Rolls the damage of an attack.

    Args:
        item (AttackItem): The attack being used.
        calculator (DamageCalculator): The calculator to roll with.

    Returns:
        AttackReport: The damage and the attack details.

    Raises:
        InvalidFormula: If the damage formula is malformed.

    """
    formula = item.damage or calculator.ruleset.default_attack_damage
    damage = calculator.compute(formula, DamageMode.NORMAL, False)
    return AttackReport(
        item_name=item.name,
        damage=damage,
        defend_stat=item.defend_stat,
        attack_range=item.attack_range,
        targets=item.targets,
    )
