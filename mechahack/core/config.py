"""
Ruleset configuration for the engine.

Collects the numeric constants of the ruleset in a single validated model so
that a table can load house-rule overrides from a JSON file.
"""

import json
from pathlib import Path
from typing import Any

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mechahack.core.dice_parser import parse_expression
from mechahack.core.errors import InvalidFormula


class RulesetConfig(BaseModel):
    """Numeric constants driving every resolver."""

    model_config = ConfigDict(frozen=True)

    stat_min: int = Field(
        default=1,
        description="Lowest value an ability score is clamped to.",
    )
    stat_max: int = Field(
        default=20,
        description="Highest value an ability score is clamped to.",
    )
    critical_success_roll: int = Field(
        default=1,
        description="Raw kept d20 that is always a success.",
    )
    critical_failure_roll: int = Field(
        default=20,
        description="Raw kept d20 that is always a failure.",
    )
    reactor_degrade_threshold: int = Field(
        default=2,
        description="Reactor rolls at or below this value degrade the die.",
    )
    recharge_threshold: int = Field(
        default=5,
        description="Recharge rolls at or above this value ready the attack.",
    )
    recharge_die: str = Field(
        default="1d6",
        description="Dice expression rolled to recharge an attack.",
    )
    heavy_bonus: int = Field(
        default=2,
        description="Flat bonus added to heavy weapon damage.",
    )
    double_multiplier: int = Field(
        default=2,
        description="Multiplier applied to doubled damage.",
    )
    default_attack_damage: str = Field(
        default="1d6",
        description="Damage formula used by attacks that do not define one.",
    )
    default_hit_dice: str = Field(
        default="1d8",
        description="Hit dice formula used by enemies that do not define one.",
    )
    initiative_success: int = Field(
        default=1,
        description="Initiative assigned on a successful initiative test.",
    )
    initiative_failure: int = Field(
        default=-1,
        description="Initiative assigned on a failed initiative test.",
    )
    enemy_initiative: int = Field(
        default=0,
        description="Fixed initiative of combatants not controlled by a player.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.stat_min > self.stat_max:
            raise ValueError("stat_min must not exceed stat_max")
        if self.critical_success_roll == self.critical_failure_roll:
            raise ValueError("critical success and failure rolls must differ")
        if self.double_multiplier < 1:
            raise ValueError("double_multiplier must be at least 1")
        for name in ("recharge_die", "default_attack_damage", "default_hit_dice"):
            try:
                parse_expression(getattr(self, name))
            except InvalidFormula as e:
                raise ValueError(f"{name}: {e}") from e


DEFAULT_RULESET = RulesetConfig()


def load_ruleset(filepath: Path) -> RulesetConfig:
    """
    Loads a ruleset from a JSON object, falling back to the defaults for
    every key the file does not define.

    Args:
        filepath (Path): The JSON file to load.

    Returns:
        RulesetConfig: The validated ruleset.

    Raises:
        ValueError: If the file is missing, malformed or fails validation.

    """
    try:
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not filepath.is_file():
            raise ValueError(f"Not a file: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected object in {filepath}, got {type(data).__name__}")
        return RulesetConfig(**data)
    except (json.JSONDecodeError, FileNotFoundError, ValidationError, ValueError) as e:
        log_warning(
            f"Failed to load ruleset: {e}",
            {"filepath": str(filepath)},
        )
        raise ValueError(f"File {filepath} raised an error: {e}")
