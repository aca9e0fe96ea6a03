"""
Tests for ability score clamping and bounded resources.
"""

import pytest

from mechahack.character.main import prepare_derived_data
from mechahack.character.resources import BoundedResource, ResourceClamp, resource_percentage
from mechahack.core.constants import StatKey


@pytest.fixture
def clamp():
    return ResourceClamp()


@pytest.mark.parametrize(
    "raw, expected",
    [(-3, 1), (0, 1), (1, 1), (12, 12), (20, 20), (27, 20)],
)
def test_clamp_ability(clamp, raw, expected):
    assert clamp.clamp_ability(raw) == expected


def test_clamping_a_valid_score_is_idempotent(clamp):
    assert clamp.clamp_ability(clamp.clamp_ability(12)) == 12


def test_percentage_of_empty_maximum_is_zero():
    assert resource_percentage(0, 0) == 0
    assert resource_percentage(5, 0) == 0


def test_percentage_rounds_half_up():
    assert resource_percentage(5, 10) == 50
    assert resource_percentage(1, 8) == 13
    assert resource_percentage(1, 3) == 33


def test_percentage_is_not_capped_above_max():
    assert BoundedResource(value=15, max=10).percentage == 150


def test_heal_is_capped_at_max(clamp):
    healed, result = clamp.heal(BoundedResource(value=15, max=20), 8)
    assert healed.value == 20
    assert result.applied == 5
    assert result.requested == 8
    assert (result.before, result.after) == (15, 20)


def test_heal_above_max_applies_nothing(clamp):
    healed, result = clamp.heal(BoundedResource(value=25, max=20), 4)
    assert healed.value == 25
    assert result.applied == 0


@pytest.mark.parametrize("amount", [0, -2, True, 1.5])
def test_heal_rejects_non_positive_amounts(clamp, amount):
    with pytest.raises(ValueError):
        clamp.heal(BoundedResource(value=5, max=20), amount)


def test_restore_to_max(clamp):
    restored, result = clamp.restore_to_max(BoundedResource(value=3, max=8))
    assert restored.value == 8
    assert not result.already_at_max


def test_restore_at_max_is_reported_as_no_op(clamp):
    resource = BoundedResource(value=8, max=8)
    restored, result = clamp.restore_to_max(resource)
    assert restored == resource
    assert result.already_at_max


def test_negative_value_is_rejected():
    with pytest.raises(ValueError):
        BoundedResource(value=-1, max=10)


def test_prepare_derived_data_clamps_without_rewriting(mecha):
    derived = prepare_derived_data(mecha)
    assert derived.stats[StatKey.PRESENCE] == 20
    assert derived.stats[StatKey.POWER] == 12
    assert mecha.stats[StatKey.PRESENCE] == 25
    assert derived.hit_points_pct == 75
    assert derived.armor_points_pct == 50
    assert prepare_derived_data(mecha) == derived
