"""
Engine facade for the host.

`MechaEngine` wires the resolvers to a dice source and a persistence gateway.
Every operation rolls, then commits the resulting updates for the one entity
it touched, in order, before returning the outcome.
"""

from typing import Any, TypeVar

from mechahack.character.main import Actor, DerivedState, prepare_derived_data, stat_target
from mechahack.character.resources import BoundedResource, ResourceClamp, RestoreResult
from mechahack.combat.attacks import resolve_attack
from mechahack.combat.checks import CheckOutcome, CheckRequest, CheckResolver
from mechahack.combat.commands import FieldUpdate, PersistenceGateway, Transition
from mechahack.combat.damage import DamageCalculator, DamageRequest, DamageResult
from mechahack.combat.hit_dice import HitDieReport, roll_enemy_hit_points, roll_hit_die
from mechahack.combat.initiative import InitiativeResolver, InitiativeResult
from mechahack.combat.reactor import ReactorReport, ReactorStateMachine
from mechahack.combat.recharge import RechargeReport, RechargeStateMachine
from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import (
    PATH_ARMOR_POINTS,
    PATH_HIT_POINTS,
    PATH_INITIATIVE,
    DieKey,
    HitDieMode,
    StatKey,
)
from mechahack.core.dice_parser import DiceSource
from mechahack.core.errors import PersistenceFailed
from mechahack.core.logging import get_logger
from mechahack.items.attack import AttackItem, AttackReport
from mechahack.items.consumable import Consumable, ConsumableReport, use_consumable

OutcomeT = TypeVar("OutcomeT")

logger = get_logger(__name__)


class MechaEngine:
    """
    Host-facing entry point of the resolution engine.

    Attributes:
        dice (DiceSource):
            The source every roll is drawn from.
        gateway (PersistenceGateway):
            The host's document update layer.
        ruleset (RulesetConfig):
            The ruleset in use.

    """

    def __init__(
        self,
        dice: DiceSource,
        gateway: PersistenceGateway,
        ruleset: RulesetConfig = DEFAULT_RULESET,
    ) -> None:
        self.dice = dice
        self.gateway = gateway
        self.ruleset = ruleset
        self.checks = CheckResolver(dice, ruleset)
        self.initiative = InitiativeResolver(dice, ruleset)
        self.damage = DamageCalculator(dice, ruleset)
        self.clamp = ResourceClamp(ruleset)

    # ============================================================================
    # PERSISTENCE
    # ============================================================================

    def commit(self, transition: Transition[OutcomeT]) -> OutcomeT:
        """
        Commits the updates of a transition and returns its outcome.

        Each entity is written in a single update, so a rejection never
        leaves one of them half written.

        Args:
            transition (Transition): The transition to commit.

        Returns:
            The outcome of the transition.

        Raises:
            PersistenceFailed: If the host rejects an update. The outcome is
                carried on the exception.

        """
        for update in transition.updates:
            if not self.gateway.update_entity_field(update.entity_id, update.path, update.value):
                logger.error("Host rejected update %s", update)
                raise PersistenceFailed(transition.outcome, update)
            logger.debug("Committed update %s", update)
        return transition.outcome

    # ============================================================================
    # ACTOR ROLLS
    # ============================================================================

    def derived(self, actor: Actor) -> DerivedState:
        return prepare_derived_data(actor, self.ruleset)

    def roll_stat(
        self,
        actor: Actor,
        stat: StatKey,
        request: CheckRequest | None = None,
    ) -> CheckOutcome:
        """
        Rolls an ability check against the clamped value of a stat.

        Args:
            actor (Actor): The actor rolling.
            stat (StatKey): The stat tested.
            request (CheckRequest | None): Mode and modifier, normal and 0 by
                default.

        Returns:
            CheckOutcome: The outcome of the check.

        """
        request = request or CheckRequest()
        return self.checks.resolve_request(stat_target(actor, stat, self.ruleset), request)

    def roll_initiative(
        self,
        actor: Actor,
        stat: StatKey = StatKey.MOBILITY,
        combatant_id: str | None = None,
    ) -> InitiativeResult:
        """
        Rolls initiative for a combatant and records it.

        Args:
            actor (Actor): The actor behind the combatant.
            stat (StatKey): Mobility or system.
            combatant_id (str | None): The combatant document, the actor by
                default.

        Returns:
            InitiativeResult: The initiative assigned.

        """
        result = self.initiative.resolve_actor(actor, stat)
        update = FieldUpdate(
            entity_id=combatant_id or actor.id,
            path=PATH_INITIATIVE,
            value=result.initiative,
        )
        return self.commit(Transition(outcome=result, updates=[update]))

    def roll_damage(self, actor: Actor, request: DamageRequest | None = None) -> DamageResult:
        """Rolls the damage die of an actor."""
        request = request or DamageRequest()
        return self.damage.compute_request(actor.die(DieKey.DAMAGE).as_expression(), request)

    def roll_reactor(self, actor: Actor) -> ReactorReport:
        """Rolls the reactor die of an actor, committing any degrade."""
        machine = ReactorStateMachine(self.dice, actor.die(DieKey.REACTOR), self.ruleset)
        return self.commit(machine.transition(actor.id))

    def roll_hit_die(self, actor: Actor, mode: HitDieMode = HitDieMode.NORMAL) -> HitDieReport:
        """Rolls the hit die of an actor, committing healing in heal mode."""
        return self.commit(roll_hit_die(self.dice, actor, mode, self.ruleset))

    def roll_die(self, actor: Actor, key: DieKey, **options: Any) -> Any:
        """
        Rolls one of the actor's die slots.

        Args:
            actor (Actor): The actor rolling.
            key (DieKey): The die slot.
            **options: `request` for the damage die, `mode` for the hit die.

        Returns:
            The report of the matching roll.

        """
        handlers = {
            DieKey.HIT: lambda: self.roll_hit_die(actor, options.get("mode", HitDieMode.NORMAL)),
            DieKey.DAMAGE: lambda: self.roll_damage(actor, options.get("request")),
            DieKey.REACTOR: lambda: self.roll_reactor(actor),
        }
        return handlers[key]()

    def deploy_enemy(self, actor: Actor) -> BoundedResource:
        """Rolls the hit points of an enemy entering the scene."""
        return self.commit(roll_enemy_hit_points(self.dice, actor, self.ruleset))

    def restore_hit_points(self, actor: Actor) -> RestoreResult:
        return self._restore(actor, actor.hit_points, PATH_HIT_POINTS)

    def restore_armor_points(self, actor: Actor) -> RestoreResult:
        return self._restore(actor, actor.armor_points, PATH_ARMOR_POINTS)

    def _restore(self, actor: Actor, resource: BoundedResource, path: str) -> RestoreResult:
        restored, result = self.clamp.restore_to_max(resource)
        updates = []
        if not result.already_at_max:
            updates.append(
                FieldUpdate(entity_id=actor.id, path=f"{path}.value", value=restored.value)
            )
        return self.commit(Transition(outcome=result, updates=updates))

    # ============================================================================
    # ITEMS
    # ============================================================================

    def use_attack(self, item: AttackItem) -> AttackReport:
        """
        Uses an attack item, closing its recharge gate when it has one.

        Raises:
            NotReady: If a recharge attack is used while not ready.
            InvalidFormula: If the damage formula is malformed.

        """
        return self.commit(resolve_attack(item, self.damage))

    def roll_recharge(self, item: AttackItem) -> RechargeReport:
        """Rolls the recharge die of a recharge attack."""
        return self.commit(RechargeStateMachine(self.dice, item, self.ruleset).roll_recharge())

    def set_ready(self, item: AttackItem, ready: bool) -> bool:
        """Overrides the readiness of a recharge attack."""
        return self.commit(RechargeStateMachine(self.dice, item, self.ruleset).set_ready(ready))

    def use_consumable(self, item: Consumable) -> ConsumableReport:
        """Spends one use of a consumable."""
        return self.commit(use_consumable(item))
