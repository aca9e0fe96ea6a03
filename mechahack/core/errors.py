"""
Exceptions raised by the resolution engine.

All of them are recoverable at the call site: the host either re-prompts the
user or retries the commit.
"""

from typing import Any


class MechaHackError(Exception):
    """Base class for every error raised by the engine."""


class InvalidFormula(MechaHackError):
    """Raised when a dice expression cannot be parsed or evaluated."""

    def __init__(self, formula: Any, reason: str = "malformed dice expression") -> None:
        self.formula = formula
        self.reason = reason
        super().__init__(f"Invalid dice formula {formula!r}: {reason}")


class NotReady(MechaHackError):
    """Raised when a recharge attack is used while its gate is closed."""

    def __init__(self, item_name: str) -> None:
        self.item_name = item_name
        super().__init__(f"{item_name} is not ready! Roll recharge die first.")


class NoUsesRemaining(MechaHackError):
    """Raised when a consumable with no uses left is used."""

    def __init__(self, item_name: str) -> None:
        self.item_name = item_name
        super().__init__(f"{item_name} has no uses remaining.")


class PersistenceFailed(MechaHackError):
    """
    Raised when the host rejects a state update.

    The roll already happened and cannot be undone, so the outcome is carried
    on the exception for display; the caller decides whether to retry.

    Attributes:
        outcome (Any):
            The outcome record produced by the roll.
        update (Any):
            The field update that the host rejected.

    """

    def __init__(self, outcome: Any, update: Any) -> None:
        self.outcome = outcome
        self.update = update
        super().__init__(
            f"Host rejected update of '{update.path}' on entity '{update.entity_id}'"
        )
