"""
Tests for the recharge gate of recharge attacks.
"""

import pytest

from mechahack.combat.damage import DamageCalculator
from mechahack.combat.recharge import RechargeStateMachine
from mechahack.core.constants import PATH_READY, ItemType, RechargeStatus
from mechahack.core.errors import InvalidFormula, NotReady
from mechahack.items.attack import AttackItem


@pytest.fixture
def breath():
    return AttackItem(
        id="item-breath",
        name="Plasma Breath",
        item_type=ItemType.ENEMY_RECHARGE_ATTACK,
        damage="2d6",
    )


@pytest.mark.parametrize("face", [5, 6])
def test_high_roll_readies_the_attack(scripted, breath, face):
    dice = scripted(face)
    machine = RechargeStateMachine(dice, breath)
    transition = machine.roll_recharge()
    assert dice.expressions == ["1d6"]
    assert transition.outcome.status is RechargeStatus.BECAME_READY
    assert machine.ready
    assert [(u.entity_id, u.path, u.value) for u in transition.updates] == [
        ("item-breath", PATH_READY, True)
    ]


@pytest.mark.parametrize("face", [1, 2, 3, 4])
def test_low_roll_keeps_charging(scripted, breath, face):
    machine = RechargeStateMachine(scripted(face), breath)
    transition = machine.roll_recharge()
    assert transition.outcome.status is RechargeStatus.STILL_CHARGING
    assert not machine.ready
    assert transition.updates == []


def test_recharging_when_ready_reconfirms(scripted, breath):
    machine = RechargeStateMachine(scripted(6), breath.model_copy(update={"ready": True}))
    transition = machine.roll_recharge()
    assert transition.outcome.became_ready
    assert machine.ready


def test_use_when_ready_closes_the_gate(scripted, breath):
    dice = scripted(3, 4)
    machine = RechargeStateMachine(dice, breath.model_copy(update={"ready": True}))
    transition = machine.use(DamageCalculator(dice))
    assert transition.outcome.damage.total == 7
    assert not machine.ready
    assert [(u.path, u.value) for u in transition.updates] == [(PATH_READY, False)]


def test_use_when_not_ready_fails_without_rolling(scripted, breath):
    dice = scripted()
    machine = RechargeStateMachine(dice, breath)
    with pytest.raises(NotReady):
        machine.use(DamageCalculator(dice))
    assert not machine.ready
    assert dice.expressions == []


def test_invalid_damage_leaves_the_gate_open(scripted, breath):
    item = breath.model_copy(update={"ready": True, "damage": "2d"})
    dice = scripted()
    machine = RechargeStateMachine(dice, item)
    with pytest.raises(InvalidFormula):
        machine.use(DamageCalculator(dice))
    assert machine.ready


def test_manual_override(scripted, breath):
    machine = RechargeStateMachine(scripted(), breath)
    transition = machine.set_ready(True)
    assert transition.outcome is True
    assert machine.ready
    assert transition.updates[0].value is True


def test_non_recharge_attack_is_rejected(scripted):
    item = AttackItem(id="item-claw", name="Claw", item_type=ItemType.ENEMY_ATTACK)
    with pytest.raises(ValueError):
        RechargeStateMachine(scripted(), item)
