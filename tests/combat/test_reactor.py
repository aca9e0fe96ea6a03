"""
Tests for the reactor die state machine.
"""

from mechahack.combat.reactor import ReactorStateMachine
from mechahack.core.constants import PATH_REACTOR_DIE, DieSize, ReactorStatus


def test_high_roll_is_steady(scripted):
    machine = ReactorStateMachine(scripted(3), DieSize.D10)
    report = machine.roll()
    assert report.status is ReactorStatus.STEADY
    assert machine.die is DieSize.D10


def test_low_roll_degrades_one_step(scripted):
    dice = scripted(2)
    machine = ReactorStateMachine(dice, DieSize.D12)
    report = machine.roll()
    assert dice.expressions == ["1d12"]
    assert report.degraded
    assert (report.from_die, report.to_die) == (DieSize.D12, DieSize.D10)
    assert machine.die is DieSize.D10


def test_d20_burns_down_to_d4_then_overheats(scripted):
    machine = ReactorStateMachine(scripted(1, 2, 1, 2, 1, 2, 1), DieSize.D20)
    visited = [machine.die]
    for _ in range(5):
        report = machine.roll()
        assert report.degraded
        visited.append(machine.die)
    assert visited == [
        DieSize.D20,
        DieSize.D12,
        DieSize.D10,
        DieSize.D8,
        DieSize.D6,
        DieSize.D4,
    ]
    for _ in range(2):
        report = machine.roll()
        assert report.overheated
        assert machine.die is DieSize.D4


def test_steady_at_d4(scripted):
    machine = ReactorStateMachine(scripted(4), DieSize.D4)
    assert machine.roll().status is ReactorStatus.STEADY


def test_transition_only_updates_on_degrade(scripted):
    machine = ReactorStateMachine(scripted(1, 3, 2), DieSize.D6)
    degraded = machine.transition("mecha-1")
    assert [(u.path, u.value) for u in degraded.updates] == [(PATH_REACTOR_DIE, "d4")]
    steady = machine.transition("mecha-1")
    assert steady.updates == []
    overheated = machine.transition("mecha-1")
    assert overheated.outcome.overheated
    assert overheated.updates == []
