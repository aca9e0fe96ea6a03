"""
Initiative module for the engine.

A mecha tests mobility or system once when it enters combat; success acts
first and failure acts last. Enemies always sit at a fixed initiative.
"""

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from mechahack.character.main import Actor, stat_target
from mechahack.combat.checks import CheckOutcome, CheckResolver
from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import INITIATIVE_STATS, RollMode, StatKey
from mechahack.core.dice_parser import DiceSource


class InitiativeResult(BaseModel):
    """Initiative assigned to a combatant."""

    model_config = ConfigDict(frozen=True)

    initiative: int = Field(description="Initiative value")
    stat: StatKey | None = Field(
        default=None,
        description="Stat tested, None when the combatant did not roll",
    )
    outcome: CheckOutcome | None = Field(
        default=None,
        description="The check behind the value, None when it is fixed",
    )

    @property
    def rolled(self) -> bool:
        return self.outcome is not None


class InitiativeResolver:
    """Maps an initiative check onto a ternary initiative value."""

    def __init__(self, dice: DiceSource, ruleset: RulesetConfig = DEFAULT_RULESET) -> None:
        self.ruleset = ruleset
        self.checks = CheckResolver(dice, ruleset)

    def resolve(self, target: int) -> InitiativeResult:
        """
        Rolls a normal check with no modifier against a target.

        Critical results carry no extra bonus: they map to the same values as
        a plain success or failure.

        Args:
            target (int): The clamped stat value.

        Returns:
            InitiativeResult: The initiative and the check behind it.

        """
        outcome = self.checks.resolve(target, RollMode.NORMAL, 0)
        initiative = (
            self.ruleset.initiative_success
            if outcome.success
            else self.ruleset.initiative_failure
        )
        return InitiativeResult(initiative=initiative, outcome=outcome)

    def resolve_actor(self, actor: Actor, stat: StatKey = StatKey.MOBILITY) -> InitiativeResult:
        """
        Resolves initiative for a combatant entering combat.

        Args:
            actor (Actor): The combatant.
            stat (StatKey): Mobility or system, ignored for enemies.

        Returns:
            InitiativeResult: The initiative of the combatant.

        Raises:
            ValueError: If a mecha tests a stat other than mobility or system.

        """
        if not actor.is_player_controlled:
            return InitiativeResult(initiative=self.ruleset.enemy_initiative)
        if stat not in INITIATIVE_STATS:
            log_warning(
                f"Initiative must test mobility or system, got: {stat}",
                {"actor": actor.name, "stat": str(stat)},
            )
            raise ValueError(f"Invalid initiative stat: {stat}")
        result = self.resolve(stat_target(actor, stat, self.ruleset))
        return result.model_copy(update={"stat": stat})
