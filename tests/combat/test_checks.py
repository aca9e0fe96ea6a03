"""
Tests for roll-under check resolution.
"""

import pytest

from mechahack.combat.checks import CheckRequest, CheckResolver
from mechahack.core.constants import Critical, RollMode


def test_roll_strictly_under_target_succeeds(scripted):
    outcome = CheckResolver(scripted(9)).resolve(10)
    assert outcome.success
    assert outcome.critical is Critical.NONE
    assert outcome.raw_roll == outcome.modified_roll == 9


def test_roll_equal_to_target_fails(scripted):
    outcome = CheckResolver(scripted(10)).resolve(10)
    assert not outcome.success


def test_modifier_applies_to_the_roll(scripted):
    outcome = CheckResolver(scripted(8)).resolve(10, RollMode.NORMAL, 2)
    assert outcome.raw_roll == 8
    assert outcome.modified_roll == 10
    assert not outcome.success


def test_negative_modifier_has_no_floor(scripted):
    outcome = CheckResolver(scripted(3)).resolve(1, RollMode.NORMAL, -10)
    assert outcome.modified_roll == -7
    assert outcome.success


def test_natural_one_always_succeeds(scripted):
    outcome = CheckResolver(scripted(1)).resolve(1, RollMode.NORMAL, 10)
    assert outcome.success
    assert outcome.critical is Critical.SUCCESS


def test_natural_twenty_always_fails(scripted):
    outcome = CheckResolver(scripted(20)).resolve(20, RollMode.NORMAL, -10)
    assert not outcome.success
    assert outcome.critical is Critical.FAILURE


def test_advantage_keeps_the_lower_die(scripted):
    dice = scripted(15, 6)
    outcome = CheckResolver(dice).resolve(10, RollMode.ADVANTAGE)
    assert dice.expressions == ["2d20kl"]
    assert outcome.raw_roll == 6
    assert outcome.dice == [15, 6]
    assert outcome.success


def test_disadvantage_keeps_the_higher_die(scripted):
    dice = scripted(15, 6)
    outcome = CheckResolver(dice).resolve(10, RollMode.DISADVANTAGE)
    assert dice.expressions == ["2d20kh"]
    assert outcome.raw_roll == 15
    assert not outcome.success


def test_critical_comes_from_the_kept_die_only(scripted):
    # The discarded 20 under advantage is not a critical failure.
    outcome = CheckResolver(scripted(20, 4)).resolve(10, RollMode.ADVANTAGE)
    assert outcome.critical is Critical.NONE
    assert outcome.success

    outcome = CheckResolver(scripted(1, 12)).resolve(10, RollMode.DISADVANTAGE)
    assert outcome.critical is Critical.NONE
    assert not outcome.success


def test_critical_ignores_the_modified_value(scripted):
    outcome = CheckResolver(scripted(19)).resolve(10, RollMode.NORMAL, 1)
    assert outcome.modified_roll == 20
    assert outcome.critical is Critical.NONE


def test_target_out_of_bounds_is_used_as_given(scripted):
    outcome = CheckResolver(scripted(19)).resolve(25)
    assert outcome.target == 25
    assert outcome.success


@pytest.mark.parametrize("target", range(1, 21))
@pytest.mark.parametrize("modifier", [-10, -3, 0, 4, 10])
def test_success_matches_roll_under_rule(target, modifier):
    resolver = CheckResolver(dice=None)
    for raw in range(1, 21):
        outcome = resolver.judge(raw, target, modifier)
        if raw == 1:
            assert outcome.success
        elif raw == 20:
            assert not outcome.success
        else:
            assert outcome.success == (raw + modifier < target)


def test_resolve_request(scripted):
    request = CheckRequest(mode=RollMode.ADVANTAGE, modifier=-1)
    outcome = CheckResolver(scripted(7, 11)).resolve_request(8, request)
    assert outcome.mode is RollMode.ADVANTAGE
    assert outcome.modified_roll == 6
    assert outcome.success


def test_outcome_is_immutable(scripted):
    outcome = CheckResolver(scripted(5)).resolve(10)
    with pytest.raises(Exception):
        outcome.success = False
