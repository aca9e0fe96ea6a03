"""
Tests for the dice expression parser and the random dice source.
"""

import random

import pytest

from mechahack.core.dice_parser import (
    RandomDiceSource,
    parse_expression,
    roll_expression,
    step_down_expression,
)
from mechahack.core.errors import InvalidFormula


def test_parse_single_die_defaults_count_to_one():
    terms = parse_expression("d6")
    assert len(terms) == 1
    assert terms[0].count == 1
    assert terms[0].sides == 6
    assert terms[0].keep is None


def test_parse_keep_lowest_keeps_one_die():
    (term,) = parse_expression("2d20kl")
    assert term.count == 2
    assert term.keep == "KL"
    assert term.keep_count == 1


def test_parse_mixed_expression_with_signs_and_spaces():
    terms = parse_expression(" 2d6 + 1D4 - 1 ")
    assert [term.sign for term in terms] == [1, 1, -1]
    assert terms[2].constant == 1
    assert not terms[2].is_dice


@pytest.mark.parametrize(
    "expression",
    [
        "", "   ", None, 42, "1d", "d", "abc", "1d6+", "1d6++2",
        "0d6", "1d0", "101d6", "1d1001", "3d6kl4", "1d6k",
        # Only ASCII digits count as numbers.
        "1d6+²", "²d6", "1d٦",
    ],
)
def test_parse_rejects_malformed_expressions(expression):
    with pytest.raises(InvalidFormula):
        parse_expression(expression)


def test_step_down_lowers_each_standard_die():
    assert step_down_expression("1d8") == "1d6"
    assert step_down_expression("2d20+1d6-1") == "2d12+1d4-1"


def test_step_down_floors_at_d4():
    assert step_down_expression("1d4") == "1d4"


def test_step_down_rejects_non_standard_die():
    with pytest.raises(InvalidFormula):
        step_down_expression("1d7")


def test_keep_lowest_flags_the_higher_die_as_discarded(scripted):
    result = scripted(14, 3).roll("2d20kl")
    assert result.total == 3
    assert result.kept == 3
    assert [die.discarded for die in result.dice] == [True, False]


def test_keep_highest_flags_the_lower_die_as_discarded(scripted):
    result = scripted(14, 3).roll("2d20kh")
    assert result.total == 14
    assert [die.discarded for die in result.dice] == [False, True]


def test_constants_add_to_total_but_not_to_kept(scripted):
    result = scripted(4, 2).roll("2d6-1")
    assert result.total == 5
    assert result.kept == 6


def test_random_source_stays_within_die_faces():
    dice = RandomDiceSource(random.Random(7))
    for _ in range(200):
        result = dice.roll("1d6")
        assert 1 <= result.total <= 6


def test_roll_expression_validates_before_rolling(mocker):
    dice = mocker.Mock()
    with pytest.raises(InvalidFormula):
        roll_expression(dice, "2d")
    dice.roll.assert_not_called()
