"""
Hit dice module for the engine.

Covers the two uses of hit dice: a mecha's hit die (a plain roll or a heal
roll) and the hit dice formula that sets an enemy's hit points when it is
deployed.
"""

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from mechahack.character.main import Actor
from mechahack.character.resources import BoundedResource, HealResult, ResourceClamp
from mechahack.combat.commands import FieldUpdate, Transition
from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import PATH_HIT_POINTS, DieKey, DieSize, HitDieMode
from mechahack.core.dice_parser import DiceSource, roll_expression


class HitDieReport(BaseModel):
    """Outcome of a hit die roll."""

    model_config = ConfigDict(frozen=True)

    die: DieSize = Field(description="The hit die rolled")
    roll: int = Field(description="The rolled value")
    heal: HealResult | None = Field(
        default=None,
        description="Healing applied, None for a plain roll",
    )

    def __str__(self) -> str:
        if self.heal is None:
            return f"Hit Die ({self.die.display_name}): {self.roll}"
        return (
            f"Healed {self.heal.applied} HP "
            f"({self.heal.before} → {self.heal.after})"
        )


def roll_hit_die(
    dice: DiceSource,
    actor: Actor,
    mode: HitDieMode = HitDieMode.NORMAL,
    ruleset: RulesetConfig = DEFAULT_RULESET,
) -> Transition[HitDieReport]:
    """
    Rolls the hit die of an actor.

    In heal mode the roll is added to hit points, capped at the maximum.

    Args:
        dice (DiceSource): The source to roll through.
        actor (Actor): The actor rolling.
        mode (HitDieMode): Plain roll or heal roll.
        ruleset (RulesetConfig): The ruleset in use.

    Returns:
        Transition[HitDieReport]: The report and, when healing, the new hit
        points value.

    """
    die = actor.die(DieKey.HIT)
    roll = dice.roll(die.as_expression()).total
    if mode is not HitDieMode.HEAL:
        return Transition(outcome=HitDieReport(die=die, roll=roll))

    healed, heal = ResourceClamp(ruleset).heal(actor.hit_points, roll)
    log_debug(
        f"{actor.name} heals {heal.applied} HP",
        {"actor": actor.id, "roll": roll, "before": heal.before, "after": heal.after},
    )
    return Transition(
        outcome=HitDieReport(die=die, roll=roll, heal=heal),
        updates=[
            FieldUpdate(
                entity_id=actor.id,
                path=f"{PATH_HIT_POINTS}.value",
                value=healed.value,
            )
        ],
    )


def roll_enemy_hit_points(
    dice: DiceSource,
    actor: Actor,
    ruleset: RulesetConfig = DEFAULT_RULESET,
) -> Transition[BoundedResource]:
    """
    Rolls an enemy's hit dice and sets both its hit points and maximum.

    Args:
        dice (DiceSource): The source to roll through.
        actor (Actor): The enemy being deployed.
        ruleset (RulesetConfig): The ruleset supplying the default formula.

    Returns:
        Transition[BoundedResource]: The new hit points and the single update
        writing value and maximum together.

    Raises:
        InvalidFormula: If the hit dice formula is malformed.

    """
    formula = actor.hit_dice or ruleset.default_hit_dice
    total = max(0, roll_expression(dice, formula).total)
    hit_points = BoundedResource(value=total, max=total)
    log_debug(
        f"{actor.name} has {total} Hit Points",
        {"actor": actor.id, "formula": formula},
    )
    return Transition(
        outcome=hit_points,
        updates=[
            FieldUpdate(
                entity_id=actor.id,
                path=PATH_HIT_POINTS,
                value=hit_points.model_dump(),
            )
        ],
    )
