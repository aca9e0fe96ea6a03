"""
Check resolution module for the engine.

Resolves roll-under ability checks: a d20 (or the kept die of two) plus a
flat modifier must land strictly below the target value.
"""

from typing import Any

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import Critical, RollMode
from mechahack.core.dice_parser import DiceSource, RollResult


class CheckRequest(BaseModel):
    """Input collected from the user before rolling a check."""

    model_config = ConfigDict(frozen=True)

    mode: RollMode = Field(
        default=RollMode.NORMAL,
        description="Normal, advantage or disadvantage",
    )
    modifier: int = Field(
        default=0,
        description="Flat modifier added to the roll, may be negative",
    )


class CheckOutcome(BaseModel):
    """Immutable result of a check."""

    model_config = ConfigDict(frozen=True)

    raw_roll: int = Field(description="The kept d20, before the modifier")
    modified_roll: int = Field(description="The kept d20 plus the modifier")
    target: int = Field(description="The value to roll under")
    mode: RollMode = Field(default=RollMode.NORMAL, description="Roll mode used")
    modifier: int = Field(default=0, description="Modifier applied")
    success: bool = Field(description="Whether the check succeeded")
    critical: Critical = Field(
        default=Critical.NONE,
        description="Critical flag derived from the raw roll",
    )
    dice: list[int] = Field(
        default_factory=list,
        description="Every d20 drawn, kept or not",
    )

    @property
    def is_critical(self) -> bool:
        return self.critical is not Critical.NONE

    def __str__(self) -> str:
        text = "SUCCESS" if self.success else "FAILURE"
        if self.critical is Critical.SUCCESS:
            text += " (critical success)"
        elif self.critical is Critical.FAILURE:
            text += " (critical failure)"
        roll = f"{self.raw_roll}"
        if self.modifier:
            roll = f"{self.modified_roll} ({self.raw_roll} {self.modifier:+d})"
        return f"Target: {self.target} | Roll: {roll} | {text}"


def kept_die(roll: RollResult) -> int:
    """
    Returns the die a check is judged on.

    Falls back to the reported `kept` value when the source does not break
    the roll down per die.
    """
    kept = roll.kept_dice
    if kept:
        return kept[0].result
    return roll.kept


class CheckResolver:
    """Resolves roll-under checks against a target value."""

    def __init__(self, dice: DiceSource, ruleset: RulesetConfig = DEFAULT_RULESET) -> None:
        """
        Args:
            dice (DiceSource): The source every d20 is drawn from.
            ruleset (RulesetConfig): The ruleset supplying critical values.

        """
        self.dice = dice
        self.ruleset = ruleset

    def critical_of(self, raw_roll: int) -> Critical:
        """Maps a raw kept d20 to its critical flag."""
        if raw_roll == self.ruleset.critical_success_roll:
            return Critical.SUCCESS
        if raw_roll == self.ruleset.critical_failure_roll:
            return Critical.FAILURE
        return Critical.NONE

    def judge(self, raw_roll: int, target: int, modifier: int = 0, **kwargs: Any) -> CheckOutcome:
        """
        Judges an already drawn d20 against a target.

        Args:
            raw_roll (int): The kept d20.
            target (int): The value to roll under.
            modifier (int): Flat modifier added to the roll.
            **kwargs: Extra fields for the outcome (mode, dice).

        Returns:
            CheckOutcome: The judged outcome.

        """
        modified_roll = raw_roll + modifier
        success = modified_roll < target
        critical = self.critical_of(raw_roll)
        # Success is forced first and failure second; a single raw value can
        # never trigger both.
        if critical is Critical.SUCCESS:
            success = True
        if critical is Critical.FAILURE:
            success = False
        return CheckOutcome(
            raw_roll=raw_roll,
            modified_roll=modified_roll,
            target=target,
            modifier=modifier,
            success=success,
            critical=critical,
            **kwargs,
        )

    def resolve(
        self,
        target: int,
        mode: RollMode = RollMode.NORMAL,
        modifier: int = 0,
    ) -> CheckOutcome:
        """
        Rolls and resolves a check.

        The target is used as given; callers clamp it beforehand.

        Args:
            target (int): The value to roll under.
            mode (RollMode): Normal, advantage or disadvantage.
            modifier (int): Flat modifier added to the kept die.

        Returns:
            CheckOutcome: The outcome of the check.

        """
        roll = self.dice.roll(mode.formula)
        outcome = self.judge(
            kept_die(roll),
            target,
            modifier,
            mode=mode,
            dice=[die.result for die in roll.dice],
        )
        log_debug(
            f"Check {mode.value}: {outcome}",
            {"target": target, "modifier": modifier, "dice": outcome.dice},
        )
        return outcome

    def resolve_request(self, target: int, request: CheckRequest) -> CheckOutcome:
        """Resolves a check from a request built by the presentation layer."""
        return self.resolve(target, request.mode, request.modifier)
