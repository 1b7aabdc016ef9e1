"""Data models and type definitions."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fixture_seeds.exceptions import InvalidSeedError, InvalidTransitionError


class SeedState(str, Enum):
    """Lifecycle state of a single seed."""

    UNCREATED = "uncreated"
    CREATING = "creating"
    CREATED = "created"
    FAILED = "failed"
    REMOVED = "removed"


# Allowed predecessors of each state
TRANSITIONS: dict[SeedState, frozenset[SeedState]] = {
    SeedState.CREATING: frozenset(
        {SeedState.UNCREATED, SeedState.FAILED, SeedState.CREATED, SeedState.REMOVED}
    ),
    SeedState.CREATED: frozenset({SeedState.CREATING}),
    SeedState.FAILED: frozenset({SeedState.CREATING}),
    SeedState.REMOVED: frozenset({SeedState.CREATED}),
    SeedState.UNCREATED: frozenset(SeedState),
}


@dataclass
class Seed:
    """
    A single seed of a seed set.

    Attributes:
        index: Position of the seed in its set
        definition: Definition tree ({"type": ..., "data": ..., "config": ...}),
            replaced by its resolved form on creation
        value: Value returned by the seeds API when the seed was created
        materialized: Whether value holds a create result
        state: Lifecycle state
    """

    index: int
    definition: Any
    value: Any = None
    materialized: bool = False
    state: SeedState = SeedState.UNCREATED

    @property
    def type(self) -> str:
        """
        Get the remote resource type of the seed.

        Raises:
            InvalidSeedError: If the definition has no "type"
        """
        if not isinstance(self.definition, Mapping):
            raise InvalidSeedError(
                self.index, f"definition must be a mapping, got {type(self.definition).__name__}"
            )
        seed_type = self.definition.get("type")
        if not seed_type:
            raise InvalidSeedError(self.index, 'definition has no "type"')
        return str(seed_type)

    def url(self, action: str) -> str:
        """Get the seeds API path for an action (e.g. "user/create")."""
        return f"{self.type}/{action}"

    def payload(self) -> dict[str, Any]:
        """
        Build the request payload for this seed.

        Returns:
            {"data": ..., "value": ..., "config": ...} with data defaulting to
            None and value/config defaulting to empty mappings
        """
        definition = self.definition if isinstance(self.definition, Mapping) else {}
        config = definition.get("config")
        return {
            "data": definition.get("data"),
            "value": {} if self.value is None else self.value,
            "config": {} if config is None else config,
        }

    def transition(self, state: SeedState) -> None:
        """
        Move the seed to a new lifecycle state.

        Raises:
            InvalidTransitionError: If state cannot follow the current state
        """
        if self.state not in TRANSITIONS[state]:
            raise InvalidTransitionError(self.index, self.state.value, state.value)
        self.state = state

    def materialize(self, value: Any) -> Any:
        """Store a create result and mark the seed created."""
        self.value = value
        self.materialized = True
        self.transition(SeedState.CREATED)
        return value

    def reset(self) -> None:
        """Forget the created value and return to the initial state."""
        self.value = None
        self.materialized = False
        self.state = SeedState.UNCREATED
