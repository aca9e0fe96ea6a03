"""
Reactor module for the engine.

The reactor die is a resource die that steps down on low rolls. Once it has
burned down to a d4, a low roll overheats the reactor instead.
"""

from catchery import log_debug, log_warning
from pydantic import BaseModel, ConfigDict, Field

from mechahack.combat.commands import FieldUpdate, Transition
from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import PATH_REACTOR_DIE, DieSize, ReactorStatus
from mechahack.core.dice_parser import DiceSource


class ReactorReport(BaseModel):
    """Outcome of a reactor die roll."""

    model_config = ConfigDict(frozen=True)

    roll: int = Field(description="The unmodified reactor roll")
    status: ReactorStatus = Field(description="Steady, degraded or overheated")
    from_die: DieSize = Field(description="Reactor die before the roll")
    to_die: DieSize = Field(description="Reactor die after the roll")

    @property
    def degraded(self) -> bool:
        return self.status is ReactorStatus.DEGRADED

    @property
    def overheated(self) -> bool:
        return self.status is ReactorStatus.OVERHEATED

    def __str__(self) -> str:
        if self.degraded:
            return (
                f"REACTOR DEGRADED: {self.from_die.display_name} → "
                f"{self.to_die.display_name} (rolled {self.roll})"
            )
        if self.overheated:
            return f"REACTOR OVERHEATED! (rolled {self.roll})"
        return f"Reactor Steady (rolled {self.roll})"


class ReactorStateMachine:
    """
    Tracks the reactor die of a single actor.

    Attributes:
        die (DieSize):
            The current reactor die. Only `roll()` moves it, and only downward.

    """

    def __init__(
        self,
        dice: DiceSource,
        die: DieSize = DieSize.D20,
        ruleset: RulesetConfig = DEFAULT_RULESET,
    ) -> None:
        self.dice = dice
        self.die = die
        self.ruleset = ruleset

    def next_state(self, roll: int) -> ReactorReport:
        """
        Computes the report for a given roll without mutating anything.

        Args:
            roll (int): The unmodified reactor roll.

        Returns:
            ReactorReport: The status and the die after the roll.

        """
        if roll > self.ruleset.reactor_degrade_threshold:
            status, to_die = ReactorStatus.STEADY, self.die
        elif self.die.is_smallest():
            status, to_die = ReactorStatus.OVERHEATED, self.die
        else:
            status, to_die = ReactorStatus.DEGRADED, self.die.step_down()
        return ReactorReport(roll=roll, status=status, from_die=self.die, to_die=to_die)

    def roll(self) -> ReactorReport:
        """
        Rolls one die of the current size and applies the result.

        Returns:
            ReactorReport: Steady, degraded (with the new die) or overheated.

        """
        roll = self.dice.roll(self.die.as_expression()).total
        report = self.next_state(roll)
        self.die = report.to_die
        if report.overheated:
            log_warning("Reactor overheated", {"roll": roll, "die": self.die.value})
        else:
            log_debug(str(report), {"roll": roll, "die": self.die.value})
        return report

    def transition(self, entity_id: str) -> Transition[ReactorReport]:
        """
        Rolls the reactor and describes the update the host must commit.

        Args:
            entity_id (str): The actor owning the reactor.

        Returns:
            Transition[ReactorReport]: The report, plus the new reactor die
            when it degraded.

        """
        report = self.roll()
        updates = []
        if report.degraded:
            updates.append(
                FieldUpdate(entity_id=entity_id, path=PATH_REACTOR_DIE, value=report.to_die.value)
            )
        return Transition(outcome=report, updates=updates)
