"""
Dice parser module for the engine.

Provides a safe dice expression parser, the DiceSource contract the
resolvers roll through, and a random-number backed implementation of it.
"""

import random
import re
from typing import Any, Protocol

from catchery import log_debug, log_warning
from pydantic import BaseModel, ConfigDict, Field

from mechahack.core.constants import DieSize
from mechahack.core.errors import InvalidFormula

MAX_DICE = 100
MAX_SIDES = 1000

TERM_PATTERN = re.compile(r"^([0-9]*)D([0-9]+)(K[LH])?([0-9]*)$")
CONSTANT_PATTERN = re.compile(r"^[0-9]+$")
SPLIT_PATTERN = re.compile(r"([+-])")


class DieResult(BaseModel):
    """A single die drawn as part of a roll."""

    model_config = ConfigDict(frozen=True)

    sides: int = Field(description="Number of faces of the die")
    result: int = Field(description="Face rolled")
    discarded: bool = Field(
        default=False,
        description="Whether a keep modifier dropped this die",
    )


class RollResult(BaseModel):
    """Outcome of evaluating a dice expression."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(description="The expression that was rolled")
    total: int = Field(description="Total of kept dice plus constants")
    kept: int = Field(description="Sum of the non-discarded dice")
    dice: list[DieResult] = Field(
        default_factory=list,
        description="Every die drawn, in order",
    )

    @property
    def kept_dice(self) -> list[DieResult]:
        return [die for die in self.dice if not die.discarded]


class DiceTerm(BaseModel):
    """A single signed term of a dice expression."""

    model_config = ConfigDict(frozen=True)

    sign: int = Field(description="+1 or -1")
    count: int = Field(default=0, description="Number of dice, 0 for a constant")
    sides: int = Field(default=0, description="Faces per die")
    keep: str | None = Field(
        default=None,
        description="'KL' to keep lowest, 'KH' to keep highest",
    )
    keep_count: int = Field(default=0, description="How many dice a keep retains")
    constant: int = Field(default=0, description="Value of a constant term")

    @property
    def is_dice(self) -> bool:
        return self.count > 0

    def __str__(self) -> str:
        if not self.is_dice:
            return str(self.constant)
        text = f"{self.count}d{self.sides}"
        if self.keep:
            text += self.keep.lower()
            if self.keep_count != 1:
                text += str(self.keep_count)
        return text


class DiceSource(Protocol):
    """Anything able to roll a dice expression."""

    def roll(self, expression: str) -> RollResult:
        ...


def _parse_term(token: str, sign: int, expression: Any) -> DiceTerm:
    """
    Parses a single unsigned token such as '2D20KL', 'D6' or '3'.

    Raises:
        InvalidFormula: If the token is not a dice term or a constant.

    """
    if CONSTANT_PATTERN.match(token):
        return DiceTerm(sign=sign, constant=int(token))

    match = TERM_PATTERN.match(token)
    if not match:
        raise InvalidFormula(expression, f"unrecognized term '{token}'")

    count_str, sides_str, keep, keep_count_str = match.groups()
    count = int(count_str) if count_str else 1
    sides = int(sides_str)

    if count <= 0:
        raise InvalidFormula(expression, f"number of dice must be positive, got {count}")
    if count > MAX_DICE:
        raise InvalidFormula(expression, f"too many dice: {count} (limit: {MAX_DICE})")
    if sides <= 0:
        raise InvalidFormula(expression, f"number of sides must be positive, got {sides}")
    if sides > MAX_SIDES:
        raise InvalidFormula(expression, f"too many sides: {sides} (limit: {MAX_SIDES})")
    if keep_count_str and not keep:
        raise InvalidFormula(expression, f"unrecognized term '{token}'")

    keep_count = int(keep_count_str) if keep_count_str else (1 if keep else 0)
    if keep and not 0 < keep_count <= count:
        raise InvalidFormula(expression, f"cannot keep {keep_count} of {count} dice")

    return DiceTerm(
        sign=sign,
        count=count,
        sides=sides,
        keep=keep,
        keep_count=keep_count,
    )


def parse_expression(expression: Any) -> list[DiceTerm]:
    """
    Parses a dice expression into signed terms without rolling it.

    Args:
        expression (Any): Expression like '1d20', '2d20kl' or '2d6 + 1d4 - 1'.

    Returns:
        list[DiceTerm]: The terms of the expression, in order.

    Raises:
        InvalidFormula: If the expression is empty or malformed.

    """
    if not isinstance(expression, str) or not expression.strip():
        log_warning(
            "Empty or non-string dice expression provided",
            {"expression": expression},
        )
        raise InvalidFormula(expression, "empty expression")

    expr = re.sub(r"\s+", "", expression).upper()
    tokens = SPLIT_PATTERN.split(expr)

    # A leading sign yields an empty first token.
    if tokens[0] == "":
        tokens = tokens[1:]
    else:
        tokens = ["+"] + tokens

    terms: list[DiceTerm] = []
    try:
        for sign_token, token in zip(tokens[0::2], tokens[1::2]):
            if not token:
                raise InvalidFormula(expression, "dangling operator")
            terms.append(_parse_term(token, 1 if sign_token == "+" else -1, expression))
    except InvalidFormula as e:
        log_warning(
            f"Invalid dice expression: {e.reason}",
            {"expression": expression},
        )
        raise

    return terms


def format_terms(terms: list[DiceTerm]) -> str:
    """Renders parsed terms back into a dice expression."""
    text = ""
    for index, term in enumerate(terms):
        if term.sign < 0:
            text += "-"
        elif index > 0:
            text += "+"
        text += str(term)
    return text


def step_down_expression(expression: str) -> str:
    """
    Steps every standard die of an expression down one size, with d4 as the
    floor.

    Args:
        expression (str): The dice expression.

    Returns:
        str: The rewritten expression.

    Raises:
        InvalidFormula: If the expression is malformed or rolls a die that is
            not one of the standard sizes.

    """
    stepped: list[DiceTerm] = []
    for term in parse_expression(expression):
        if term.is_dice:
            size = DieSize.from_sides(term.sides)
            if size is None:
                raise InvalidFormula(expression, f"d{term.sides} is not a standard die size")
            term = term.model_copy(update={"sides": size.step_down().sides})
        stepped.append(term)
    return format_terms(stepped)


def _roll_term(term: DiceTerm, rng: random.Random) -> list[DieResult]:
    """Rolls the dice of a term and flags the ones a keep modifier drops."""
    results = [rng.randint(1, term.sides) for _ in range(term.count)]
    discarded = [False] * term.count
    if term.keep:
        order = sorted(range(term.count), key=lambda i: results[i])
        if term.keep == "KH":
            order.reverse()
        for index in order[term.keep_count:]:
            discarded[index] = True
    return [
        DieResult(sides=term.sides, result=result, discarded=drop)
        for result, drop in zip(results, discarded)
    ]


class RandomDiceSource:
    """DiceSource drawing from a `random.Random` generator."""

    def __init__(self, rng: random.Random | None = None) -> None:
        """
        Args:
            rng (random.Random | None):
                The generator to draw from, a fresh one when omitted.

        """
        self.rng = rng or random.Random()

    def roll(self, expression: str) -> RollResult:
        """
        Evaluates a dice expression.

        Args:
            expression (str): The expression to roll.

        Returns:
            RollResult: Total, sum of kept dice and every die drawn.

        Raises:
            InvalidFormula: If the expression is malformed.

        """
        total = 0
        kept = 0
        dice: list[DieResult] = []
        for term in parse_expression(expression):
            if not term.is_dice:
                total += term.sign * term.constant
                continue
            rolled = _roll_term(term, self.rng)
            subtotal = sum(die.result for die in rolled if not die.discarded)
            total += term.sign * subtotal
            kept += subtotal
            dice.extend(rolled)

        result = RollResult(expression=expression, total=total, kept=kept, dice=dice)
        log_debug(
            f"Rolled {expression} → {total}",
            {"expression": expression, "dice": [die.result for die in dice]},
        )
        return result


def roll_expression(dice: DiceSource, expression: str) -> RollResult:
    """
    Validates an expression and rolls it through a dice source.

    Validation happens first so a malformed formula never consumes a roll.

    Args:
        dice (DiceSource): The source to roll through.
        expression (str): The expression to roll.

    Returns:
        RollResult: The outcome reported by the source.

    Raises:
        InvalidFormula: If the expression is malformed.

    """
    parse_expression(expression)
    return dice.roll(expression)
