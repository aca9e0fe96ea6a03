"""
Consumable item module for the engine.
"""

from typing import Any

from catchery import log_debug, log_warning
from pydantic import BaseModel, ConfigDict, Field

from mechahack.combat.commands import FieldUpdate, Transition
from mechahack.core.constants import PATH_USES
from mechahack.core.errors import NoUsesRemaining


class Consumable(BaseModel):
    """An item with a limited number of uses."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Host identifier of the item")
    name: str = Field(description="Display name of the item")
    uses: int = Field(default=0, description="Uses remaining")
    description: str = Field(default="", description="Rules text of the item")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string")


class ConsumableReport(BaseModel):
    """Outcome of using a consumable."""

    model_config = ConfigDict(frozen=True)

    item_name: str = Field(description="Name of the consumable")
    remaining: int = Field(description="Uses left after this one")

    @property
    def is_empty(self) -> bool:
        return self.remaining <= 0

    def __str__(self) -> str:
        return f"Used {self.item_name}: {self.remaining} uses remaining"


def use_consumable(item: Consumable) -> Transition[ConsumableReport]:
    """
    Spends one use of a consumable.

    Args:
        item (Consumable): The consumable to use.

    Returns:
        Transition[ConsumableReport]: The remaining uses and their update.

    Raises:
        NoUsesRemaining: If the consumable is already empty.

    """
    if item.uses <= 0:
        log_warning(f"{item.name} has no uses remaining", {"item": item.id})
        raise NoUsesRemaining(item.name)
    remaining = item.uses - 1
    log_debug(f"{item.name} used", {"item": item.id, "remaining": remaining})
    return Transition(
        outcome=ConsumableReport(item_name=item.name, remaining=remaining),
        updates=[FieldUpdate(entity_id=item.id, path=PATH_USES, value=remaining)],
    )
