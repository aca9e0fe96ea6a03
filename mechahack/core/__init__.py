"""
Core system module for the Mecha Hack resolution engine.

This module contains the fundamental components shared by every resolver,
including game constants, dice parsing, errors, logging and configuration.
"""

from .config import DEFAULT_RULESET, RulesetConfig, load_ruleset
from .constants import (
    INITIATIVE_STATS,
    ActorType,
    AttackRange,
    Critical,
    DamageMode,
    DieKey,
    DieSize,
    HitDieMode,
    ItemType,
    ReactorStatus,
    RechargeStatus,
    RollMode,
    StatKey,
)
from .dice_parser import (
    DiceSource,
    DiceTerm,
    DieResult,
    RandomDiceSource,
    RollResult,
    parse_expression,
    roll_expression,
    step_down_expression,
)
from .errors import (
    InvalidFormula,
    MechaHackError,
    NoUsesRemaining,
    NotReady,
    PersistenceFailed,
)
from .logging import get_logger, setup_logging

__all__ = [
    # Import from config.py
    "DEFAULT_RULESET",
    "RulesetConfig",
    "load_ruleset",
    # Import from constants.py
    "INITIATIVE_STATS",
    "ActorType",
    "AttackRange",
    "Critical",
    "DamageMode",
    "DieKey",
    "DieSize",
    "HitDieMode",
    "ItemType",
    "ReactorStatus",
    "RechargeStatus",
    "RollMode",
    "StatKey",
    # Import from dice_parser.py
    "DiceSource",
    "DiceTerm",
    "DieResult",
    "RandomDiceSource",
    "RollResult",
    "parse_expression",
    "roll_expression",
    "step_down_expression",
    # Import from errors.py
    "InvalidFormula",
    "MechaHackError",
    "NoUsesRemaining",
    "NotReady",
    "PersistenceFailed",
    # Import from logging.py
    "get_logger",
    "setup_logging",
]
