"""
Actor module for the engine.

Defines the snapshot of a mecha or enemy actor that the host hands to the
engine, and the derived state computed from it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mechahack.character.resources import BoundedResource, ResourceClamp
from mechahack.core.config import DEFAULT_RULESET, RulesetConfig
from mechahack.core.constants import ActorType, DieKey, DieSize, StatKey


def _default_stats() -> dict[StatKey, int]:
    return {key: 10 for key in StatKey}


def _default_dice() -> dict[DieKey, DieSize]:
    return {
        DieKey.HIT: DieSize.D6,
        DieKey.DAMAGE: DieSize.D6,
        DieKey.REACTOR: DieSize.D20,
    }


class Actor(BaseModel):
    """
    Snapshot of an actor document owned by the host.

    The engine never mutates an actor; it computes field updates that the host
    commits and then hands back a fresh snapshot.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Host identifier of the actor")
    name: str = Field(description="Display name of the actor")
    actor_type: ActorType = Field(
        default=ActorType.MECHA,
        description="Whether the actor is a player mecha or an enemy",
    )
    stats: dict[StatKey, int] = Field(
        default_factory=_default_stats,
        description="Stored ability scores, possibly out of bounds",
    )
    hit_points: BoundedResource = Field(
        default_factory=BoundedResource,
        description="Hit points",
    )
    armor_points: BoundedResource = Field(
        default_factory=BoundedResource,
        description="Armor points",
    )
    dice: dict[DieKey, DieSize] = Field(
        default_factory=_default_dice,
        description="Die size of each die slot",
    )
    hit_dice: str | None = Field(
        default=None,
        description="Hit dice formula rolled when an enemy is deployed",
    )
    boss: bool = Field(
        default=False,
        description="Whether an enemy has engaged boss mode",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not isinstance(self.id, str):
            raise ValueError("id must be a non-empty string")
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string")
        missing = [key for key in DieKey if key not in self.dice]
        if missing:
            raise ValueError(f"dice is missing slots: {', '.join(map(str, missing))}")

    @property
    def is_player_controlled(self) -> bool:
        return self.actor_type.is_player_controlled

    def die(self, key: DieKey) -> DieSize:
        return self.dice[key]


class DerivedState(BaseModel):
    """Read-only values derived from an actor for display and resolution."""

    model_config = ConfigDict(frozen=True)

    stats: dict[StatKey, int] = Field(description="Ability scores clamped into bounds")
    hit_points_pct: int = Field(description="Hit points as a percentage of max")
    armor_points_pct: int = Field(description="Armor points as a percentage of max")


def prepare_derived_data(
    actor: Actor,
    ruleset: RulesetConfig = DEFAULT_RULESET,
) -> DerivedState:
    """
    Derives clamped ability scores and resource percentages for an actor.

    The stored values are left untouched, so deriving twice yields the same
    result.

    Args:
        actor (Actor): The actor snapshot.
        ruleset (RulesetConfig): The ruleset supplying the stat bounds.

    Returns:
        DerivedState: The derived values.

    """
    clamp = ResourceClamp(ruleset)
    return DerivedState(
        stats={key: clamp.clamp_ability(value) for key, value in actor.stats.items()},
        hit_points_pct=actor.hit_points.percentage,
        armor_points_pct=actor.armor_points.percentage,
    )


def stat_target(
    actor: Actor,
    key: StatKey,
    ruleset: RulesetConfig = DEFAULT_RULESET,
) -> int:
    """
    Returns the clamped value of an ability score, the target of a check.

    Raises:
        ValueError: If the actor has no such ability score.

    """
    if key not in actor.stats:
        raise ValueError(f"{actor.name} has no '{key.value}' ability score")
    return ResourceClamp(ruleset).clamp_ability(actor.stats[key])
