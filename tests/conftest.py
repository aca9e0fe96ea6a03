"""
Shared fixtures for the engine tests.
"""

import pytest

from mechahack.character.main import Actor
from mechahack.character.resources import BoundedResource
from mechahack.combat.commands import InMemoryGateway
from mechahack.core.constants import ActorType, DieKey, DieSize, StatKey
from mechahack.core.dice_parser import RandomDiceSource, RollResult


class ScriptedRandom:
    """Stands in for `random.Random`, returning queued faces in order."""

    def __init__(self, faces: list[int]) -> None:
        self.faces = list(faces)

    def randint(self, low: int, high: int) -> int:
        if not self.faces:
            raise AssertionError("no scripted faces left")
        face = self.faces.pop(0)
        assert low <= face <= high, f"scripted face {face} outside [{low}, {high}]"
        return face


class ScriptedDice(RandomDiceSource):
    """Dice source rolling scripted faces and recording every expression."""

    def __init__(self, *faces: int) -> None:
        super().__init__(ScriptedRandom(list(faces)))
        self.expressions: list[str] = []

    def roll(self, expression: str) -> RollResult:
        self.expressions.append(expression)
        return super().roll(expression)

    @property
    def remaining(self) -> list[int]:
        return self.rng.faces


@pytest.fixture
def scripted():
    """Factory building a dice source that rolls the given faces."""
    return ScriptedDice


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def mecha():
    return Actor(
        id="mecha-1",
        name="Vanguard",
        actor_type=ActorType.MECHA,
        stats={
            StatKey.POWER: 12,
            StatKey.MOBILITY: 14,
            StatKey.SYSTEM: 9,
            StatKey.PRESENCE: 25,
        },
        hit_points=BoundedResource(value=15, max=20),
        armor_points=BoundedResource(value=4, max=8),
        dice={
            DieKey.HIT: DieSize.D8,
            DieKey.DAMAGE: DieSize.D6,
            DieKey.REACTOR: DieSize.D20,
        },
    )


@pytest.fixture
def enemy():
    return Actor(
        id="enemy-1",
        name="Scrap Drone",
        actor_type=ActorType.ENEMY,
        stats={},
        hit_points=BoundedResource(value=0, max=0),
        hit_dice="2d8",
    )
