"""
Damage module for the engine.

Evaluates damage formulas with the situational bonuses of the ruleset: a flat
heavy weapon bonus, an unarmed die step-down and a double damage multiplier.
"""

from typing import Any

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import DamageMode
from mechahack.core.dice_parser import DiceSource, roll_expression, step_down_expression
from mechahack.core.errors import InvalidFormula


class DamageRequest(BaseModel):
    """Input collected from the user before rolling damage."""

    model_config = ConfigDict(frozen=True)

    mode: DamageMode = Field(
        default=DamageMode.NORMAL,
        description="Normal, heavy weapon or unarmed",
    )
    doubled: bool = Field(
        default=False,
        description="Whether the damage is doubled",
    )


class DamageResult(BaseModel):
    """Immutable result of a damage roll."""

    model_config = ConfigDict(frozen=True)

    formula: str = Field(description="The formula actually rolled")
    mode: DamageMode = Field(default=DamageMode.NORMAL, description="Damage mode used")
    base_roll: int = Field(description="Total of the formula")
    bonus: int = Field(default=0, description="Flat bonus added to the roll")
    doubled: bool = Field(default=False, description="Whether the total was doubled")
    multiplier: int = Field(default=2, description="Factor applied when doubled")
    total: int = Field(description="Final damage")

    @property
    def breakdown(self) -> str:
        """Returns how the total was reached, e.g. '(3 + 2) × 2'."""
        text = f"{self.base_roll}"
        if self.bonus:
            text = f"{self.base_roll} + {self.bonus}"
        if self.doubled:
            text = f"({text})" if self.bonus else text
            text = f"{text} × {self.multiplier}"
        return text

    def __str__(self) -> str:
        return f"{self.total} damage ({self.breakdown})"


def normalize_formula(formula: Any) -> str:
    """
    Removes the spaces around '+' and '-' in a formula.

    Raises:
        InvalidFormula: If the formula is not a non-empty string.

    """
    if not isinstance(formula, str) or not formula.strip():
        raise InvalidFormula(formula, "empty expression")
    formula = formula.strip()
    formula = formula.replace(" +", "+").replace("+ ", "+")
    formula = formula.replace(" -", "-").replace("- ", "-")
    return formula


class DamageCalculator:
    """Rolls damage formulas and applies situational bonuses."""

    def __init__(self, dice: DiceSource, ruleset: RulesetConfig = DEFAULT_RULESET) -> None:
        self.dice = dice
        self.ruleset = ruleset

    def compute(
        self,
        formula: str,
        mode: DamageMode = DamageMode.NORMAL,
        doubled: bool = False,
    ) -> DamageResult:
        """
        Rolls a damage formula.

        The bonus is added before doubling:
        `total = (base_roll + bonus) * (2 if doubled else 1)`.

        Args:
            formula (str): The damage formula, e.g. '1d6'.
            mode (DamageMode): Heavy adds a flat bonus; unarmed steps every
                die down one size, never below d4.
            doubled (bool): Whether to double the post-bonus total.

        Returns:
            DamageResult: The damage breakdown.

        Raises:
            InvalidFormula: If the formula is malformed. Nothing is rolled.

        """
        formula = normalize_formula(formula)
        if mode is DamageMode.UNARMED:
            formula = step_down_expression(formula)

        roll = roll_expression(self.dice, formula)
        bonus = self.ruleset.heavy_bonus if mode is DamageMode.HEAVY else 0
        total = roll.total + bonus
        if doubled:
            total *= self.ruleset.double_multiplier

        result = DamageResult(
            formula=formula,
            mode=mode,
            base_roll=roll.total,
            bonus=bonus,
            doubled=doubled,
            multiplier=self.ruleset.double_multiplier,
            total=total,
        )
        log_debug(
            f"Damage {formula} ({mode.value}): {result}",
            {"formula": formula, "mode": mode.value, "doubled": doubled},
        )
        return result

    def compute_request(self, formula: str, request: DamageRequest) -> DamageResult:
        """Rolls damage from a request built by the presentation layer."""
        return self.compute(formula, request.mode, request.doubled)
