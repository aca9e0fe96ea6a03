"""
Attack dispatch module for the engine.

Each attack item type maps onto one resolver; `resolve_attack` picks the
resolver from the item type instead of branching on it.
"""

from typing import Protocol

from mechahack.combat.commands import Transition
from mechahack.combat.damage import DamageCalculator
from mechahack.combat.recharge import RechargeStateMachine
from mechahack.core.constants import ItemType
from mechahack.items.attack import AttackItem, AttackReport, roll_attack


class AttackResolver(Protocol):
    def resolve(self, item: AttackItem, calculator: DamageCalculator) -> Transition[AttackReport]:
        ...


class StandardAttackResolver:
    """Attacks usable at will: roll the damage, change nothing."""

    def resolve(self, item: AttackItem, calculator: DamageCalculator) -> Transition[AttackReport]:
        return Transition(outcome=roll_attack(item, calculator))


class RechargeAttackResolver:
    """Attacks behind a recharge gate: usable once per recharge."""

    def resolve(self, item: AttackItem, calculator: DamageCalculator) -> Transition[AttackReport]:
        machine = RechargeStateMachine(calculator.dice, item, calculator.ruleset)
        return machine.use(calculator)


ATTACK_RESOLVERS: dict[ItemType, AttackResolver] = {
    ItemType.ENEMY_ATTACK: StandardAttackResolver(),
    ItemType.BOSS_ATTACK: StandardAttackResolver(),
    ItemType.ENEMY_RECHARGE_ATTACK: RechargeAttackResolver(),
    ItemType.BOSS_RECHARGE_ATTACK: RechargeAttackResolver(),
}


def resolve_attack(item: AttackItem, calculator: DamageCalculator) -> Transition[AttackReport]:
    """
    Uses an attack item through the resolver registered for its type.

    Args:
        item (AttackItem): The attack being used.
        calculator (DamageCalculator): The calculator rolling the damage.

    Returns:
        Transition[AttackReport]: The attack report and any update.

    Raises:
        NotReady: If a recharge attack is used while not ready.
        InvalidFormula: If the damage formula is malformed.

    """
    return ATTACK_RESOLVERS[item.item_type].resolve(item, calculator)
