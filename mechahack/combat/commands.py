"""
Command/result types for state-mutating operations.

Resolvers never write to storage. They return a `Transition`: the outcome to
display plus the ordered field updates the host must commit for the entity.
"""

from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field

OutcomeT = TypeVar("OutcomeT")


class FieldUpdate(BaseModel):
    """A single field write on a host document."""

    model_config = ConfigDict(frozen=True)

    entity_id: str = Field(description="Identifier of the actor or item")
    path: str = Field(description="Dotted document path, e.g. 'system.ready'")
    value: Any = Field(description="New value of the field")

    def __str__(self) -> str:
        return f"{self.entity_id}:{self.path}={self.value!r}"


class Transition(BaseModel, Generic[OutcomeT]):
    """The outcome of an operation and the updates it implies."""

    model_config = ConfigDict(frozen=True)

    outcome: OutcomeT = Field(description="Outcome record to display")
    updates: list[FieldUpdate] = Field(
        default_factory=list,
        description="Updates to commit, at most one per entity",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        entities = [update.entity_id for update in self.updates]
        if len(entities) != len(set(entities)):
            raise ValueError(
                "a transition must write each entity in a single update, got "
                + ", ".join(str(update) for update in self.updates)
            )

    @property
    def mutates(self) -> bool:
        return bool(self.updates)


class PersistenceGateway(Protocol):
    """The host's document update layer."""

    def update_entity_field(self, entity_id: str, path: str, value: Any) -> bool:
        ...


class InMemoryGateway:
    """
    PersistenceGateway keeping documents as nested dictionaries.

    Attributes:
        documents (dict[str, dict[str, Any]]):
            Documents by entity identifier.
        rejected (set[str]):
            Paths whose updates are refused.
        history (list[FieldUpdate]):
            Every accepted update, in commit order.

    """

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self.documents: dict[str, dict[str, Any]] = documents or {}
        self.rejected: set[str] = set()
        self.history: list[FieldUpdate] = []

    def update_entity_field(self, entity_id: str, path: str, value: Any) -> bool:
        if path in self.rejected:
            return False
        node = self.documents.setdefault(entity_id, {})
        *parents, leaf = path.split(".")
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
        self.history.append(FieldUpdate(entity_id=entity_id, path=path, value=value))
        return True

    def get(self, entity_id: str, path: str) -> Any:
        """Returns the value stored at a dotted path, or None."""
        node: Any = self.documents.get(entity_id, {})
        for key in path.split("."):
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        return node
