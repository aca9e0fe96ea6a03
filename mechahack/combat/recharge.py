"""
Recharge module for the engine.

A recharge attack is gated by a readiness flag: a high recharge roll opens
the gate and using the attack closes it again.
"""

from catchery import log_debug, log_warning
from pydantic import BaseModel, ConfigDict, Field

from mechahack.combat.commands import FieldUpdate, Transition
from mechahack.combat.damage import DamageCalculator
from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import PATH_READY, RechargeStatus
from mechahack.core.dice_parser import DiceSource
from mechahack.core.errors import NotReady
from mechahack.items.attack import AttackItem, AttackReport, roll_attack


class RechargeReport(BaseModel):
    """Outcome of a recharge die roll."""

    model_config = ConfigDict(frozen=True)

    roll: int = Field(description="The recharge roll")
    status: RechargeStatus = Field(description="Became ready or still charging")
    ready: bool = Field(description="Readiness after the roll")

    @property
    def became_ready(self) -> bool:
        return self.status is RechargeStatus.BECAME_READY

    def __str__(self) -> str:
        if self.became_ready:
            return f"READY TO USE! (Rolled {self.roll})"
        return f"Still recharging... (Rolled {self.roll})"


class RechargeStateMachine:
    """
    Tracks the readiness of a single recharge attack.

    Attributes:
        item (AttackItem):
            The attack gated by this machine.
        ready (bool):
            Whether the attack may be used, seeded from the item.

    """

    def __init__(
        self,
        dice: DiceSource,
        item: AttackItem,
        ruleset: RulesetConfig = DEFAULT_RULESET,
    ) -> None:
        if not item.is_recharge:
            raise ValueError(f"{item.name} is not a recharge attack")
        self.dice = dice
        self.item = item
        self.ready = item.ready
        self.ruleset = ruleset

    def _update(self) -> FieldUpdate:
        return FieldUpdate(entity_id=self.item.id, path=PATH_READY, value=self.ready)

    def roll_recharge(self) -> Transition[RechargeReport]:
        """
        Rolls the recharge die.

        A high roll readies the attack, even if it was already ready. A low
        roll leaves the flag as it was.

        Returns:
            Transition[RechargeReport]: The report, plus the readiness update
            when the attack became ready.

        """
        roll = self.dice.roll(self.ruleset.recharge_die).total
        if roll >= self.ruleset.recharge_threshold:
            self.ready = True
            report = RechargeReport(roll=roll, status=RechargeStatus.BECAME_READY, ready=True)
            updates = [self._update()]
        else:
            report = RechargeReport(
                roll=roll,
                status=RechargeStatus.STILL_CHARGING,
                ready=self.ready,
            )
            updates = []
        log_debug(f"{self.item.name}: {report}", {"item": self.item.id, "roll": roll})
        return Transition(outcome=report, updates=updates)

    def use(self, calculator: DamageCalculator) -> Transition[AttackReport]:
        """
        Uses the attack and closes the gate.

        Args:
            calculator (DamageCalculator): The calculator rolling the damage.

        Returns:
            Transition[AttackReport]: The attack report and the update
            resetting readiness.

        Raises:
            NotReady: If the gate is closed. Nothing is rolled.
            InvalidFormula: If the damage formula is malformed. The gate is
                left open.

        """
        if not self.ready:
            log_warning(
                f"{self.item.name} used while not ready",
                {"item": self.item.id},
            )
            raise NotReady(self.item.name)
        report = roll_attack(self.item, calculator)
        self.ready = False
        return Transition(outcome=report, updates=[self._update()])

    def set_ready(self, ready: bool) -> Transition[bool]:
        """
        Overrides readiness without rolling.

        The host decides who may call this; no authorization happens here.

        Args:
            ready (bool): The new readiness.

        Returns:
            Transition[bool]: The new readiness and its update.

        """
        self.ready = bool(ready)
        return Transition(outcome=self.ready, updates=[self._update()])
