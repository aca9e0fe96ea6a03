"""
Character module for the Mecha Hack resolution engine.

Holds the actor snapshot model and the resource clamping rules applied to
ability scores, hit points and armor points.
"""

from .main import Actor, DerivedState, prepare_derived_data, stat_target
from .resources import (
    BoundedResource,
    HealResult,
    ResourceClamp,
    RestoreResult,
    resource_percentage,
)

__all__ = [
    "Actor",
    "DerivedState",
    "prepare_derived_data",
    "stat_target",
    "BoundedResource",
    "HealResult",
    "ResourceClamp",
    "RestoreResult",
    "resource_percentage",
]
