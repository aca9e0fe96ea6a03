"""
Resource clamping module for the engine.

Normalizes ability scores and bounded resources (hit points, armor points),
derives display percentages and computes heal and restore transitions.
"""

import math
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from mechahack.core.config import DEFAULT_RULESET, RulesetConfig


class BoundedResource(BaseModel):
    """A value with a maximum, such as hit points or armor points."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(default=0, description="Current value")
    max: int = Field(default=0, description="Maximum value")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.value < 0:
            raise ValueError(f"value must not be negative, got {self.value}")
        if self.max < 0:
            raise ValueError(f"max must not be negative, got {self.max}")

    @property
    def percentage(self) -> int:
        return resource_percentage(self.value, self.max)

    @property
    def is_full(self) -> bool:
        return self.value >= self.max

    def __str__(self) -> str:
        return f"{self.value}/{self.max}"


class HealResult(BaseModel):
    """Outcome of a heal."""

    model_config = ConfigDict(frozen=True)

    requested: int = Field(description="Amount of healing requested")
    applied: int = Field(description="Amount actually applied")
    before: int = Field(description="Value before healing")
    after: int = Field(description="Value after healing")


class RestoreResult(BaseModel):
    """Outcome of a restore-to-maximum."""

    model_config = ConfigDict(frozen=True)

    before: int = Field(description="Value before restoring")
    after: int = Field(description="Value after restoring")
    already_at_max: bool = Field(description="True when nothing was restored")


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def resource_percentage(value: int, maximum: int) -> int:
    """
    Computes the display percentage of a bounded resource.

    Args:
        value (int): The current value.
        maximum (int): The maximum value.

    Returns:
        int: `round(value / maximum * 100)`, or 0 when the maximum is 0.

    """
    if not maximum:
        return 0
    return round_half_up(value / maximum * 100)


class ResourceClamp:
    """
    Normalizes ability scores and bounded resources.

    Every method is pure: it returns the next value and never rewrites the
    stored data, so repeated derivation is idempotent.
    """

    def __init__(self, ruleset: RulesetConfig = DEFAULT_RULESET) -> None:
        self.ruleset = ruleset

    def clamp_ability(self, raw_value: int) -> int:
        """
        Clamps an ability score into the ruleset bounds.

        Args:
            raw_value (int): The stored ability score.

        Returns:
            int: The score clamped into [stat_min, stat_max].

        """
        return max(self.ruleset.stat_min, min(self.ruleset.stat_max, raw_value))

    def percentage(self, value: int, maximum: int) -> int:
        return resource_percentage(value, maximum)

    def heal(self, resource: BoundedResource, amount: int) -> tuple[BoundedResource, HealResult]:
        """
        Adds healing to a resource, never exceeding its maximum.

        A resource already at or above its maximum is left unchanged.

        Args:
            resource (BoundedResource): The resource to heal.
            amount (int): The amount of healing, must be positive.

        Returns:
            tuple[BoundedResource, HealResult]: The healed resource and a
            report of how much was actually applied.

        Raises:
            ValueError: If the amount is not a positive integer.

        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            log_warning(
                f"Heal amount must be a positive integer, got: {amount}",
                {"amount": amount, "resource": str(resource)},
            )
            raise ValueError(f"Invalid heal amount: {amount}")
        applied = max(0, min(amount, resource.max - resource.value))
        healed = resource.model_copy(update={"value": resource.value + applied})
        return healed, HealResult(
            requested=amount,
            applied=applied,
            before=resource.value,
            after=healed.value,
        )

    def restore_to_max(self, resource: BoundedResource) -> tuple[BoundedResource, RestoreResult]:
        """
        Sets a resource to its maximum.

        Args:
            resource (BoundedResource): The resource to restore.

        Returns:
            tuple[BoundedResource, RestoreResult]: The restored resource and a
            report flagging a no-op when it was already at maximum.

        """
        if resource.is_full:
            return resource, RestoreResult(
                before=resource.value,
                after=resource.value,
                already_at_max=True,
            )
        restored = resource.model_copy(update={"value": resource.max})
        return restored, RestoreResult(
            before=resource.value,
            after=restored.value,
            already_at_max=False,
        )
