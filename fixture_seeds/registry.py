"""Registry of live seed sets, looked up by name."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fixture_seeds.seeds import Seeds

logger = logging.getLogger(__name__)


def generate_name() -> str:
    """Generate a unique name for an anonymous seed set."""
    return uuid.uuid4().hex[:12]


class SeedsRegistry:
    """Registry mapping seed set names to seed sets."""

    def __init__(self):
        self._seeds: dict[str, Seeds] = {}

    def register(self, name: str, seeds: Seeds) -> None:
        """
        Register a seed set under a name.

        A set already registered under the same name is replaced.

        Args:
            name: Seed set name
            seeds: Seed set instance
        """
        if name in self._seeds and self._seeds[name] is not seeds:
            logger.debug(f"Replacing seed set registered as '{name}'")
        self._seeds[name] = seeds

    def get(self, name: str) -> Seeds | None:
        """
        Get a seed set by name.

        Args:
            name: Seed set name

        Returns:
            Seed set or None if not registered
        """
        return self._seeds.get(name)

    def names(self) -> list[str]:
        """List registered seed set names."""
        return list(self._seeds.keys())

    def clear(self) -> None:
        """Clear all registered seed sets (for testing)."""
        self._seeds.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._seeds

    def __len__(self) -> int:
        return len(self._seeds)


# Global registry instance
_registry = SeedsRegistry()


def default_registry() -> SeedsRegistry:
    """Get the process-wide registry."""
    return _registry


def register_seeds(name: str, seeds: Seeds) -> None:
    """
    Register a seed set in the process-wide registry.

    Example:
        >>> register_seeds("blog", Seeds(definitions, transport=endpoint))
        >>> get_seeds("blog").values
    """
    _registry.register(name, seeds)


def get_seeds(name: str) -> Seeds | None:
    """Get a seed set from the process-wide registry (None if absent)."""
    return _registry.get(name)


def clear_seeds() -> None:
    """Clear the process-wide registry (for testing)."""
    _registry.clear()
