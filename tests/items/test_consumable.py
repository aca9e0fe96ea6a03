"""
Tests for consumable items.
"""

import pytest

from mechahack.core.constants import PATH_USES
from mechahack.core.errors import NoUsesRemaining
from mechahack.items.consumable import Consumable, use_consumable


def test_use_spends_one_use():
    transition = use_consumable(Consumable(id="item-kit", name="Repair Kit", uses=2))
    assert transition.outcome.remaining == 1
    assert not transition.outcome.is_empty
    assert [(u.path, u.value) for u in transition.updates] == [(PATH_USES, 1)]


def test_last_use_empties_the_item():
    transition = use_consumable(Consumable(id="item-kit", name="Repair Kit", uses=1))
    assert transition.outcome.is_empty


def test_empty_consumable_cannot_be_used():
    with pytest.raises(NoUsesRemaining):
        use_consumable(Consumable(id="item-kit", name="Repair Kit", uses=0))
