"""Lazy resolution of producer nodes embedded in seed definitions."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

ProducerFn = Callable[[int, list[Any], list[Any]], Any]


@dataclass(frozen=True)
class Producer:
    """
    Deferred value inside a seed definition tree.

    The wrapped function is called as fn(index, values, definitions) right
    before the owning seed is created, where index is the seed being created,
    values the materialized values of the set so far (None for seeds not yet
    created) and definitions the set's seed definitions.

    Example:
        >>> seeds = [
        ...     {"type": "user", "data": {"name": "ada"}},
        ...     {"type": "post", "data": {"author": Producer(lambda i, values, defs: values[0]["id"])}},
        ... ]
    """

    fn: ProducerFn

    def __call__(self, index: int, values: list[Any], definitions: list[Any]) -> Any:
        return self.fn(index, values, definitions)


def producer(fn: ProducerFn) -> Producer:
    """Wrap a function as a Producer (usable as a decorator)."""
    return Producer(fn)


def resolve(tree: Any, index: int, values: list[Any], definitions: list[Any]) -> Any:
    """
    Replace every Producer in a definition tree with the value it produces.

    Traversal is depth-first. A produced value is resolved again, so a
    producer returning a tree that holds more producers ends with no Producer
    left anywhere.

    Args:
        tree: Seed definition (dicts, lists, tuples and scalars)
        index: Index of the seed being resolved
        values: Materialized values of the set
        definitions: Seed definitions of the set

    Returns:
        New tree of the same shape; leaves that are not producers are kept as-is
    """
    while isinstance(tree, Producer):
        tree = tree(index, values, definitions)

    if isinstance(tree, Mapping):
        return {key: resolve(item, index, values, definitions) for key, item in tree.items()}
    if isinstance(tree, list):
        return [resolve(item, index, values, definitions) for item in tree]
    if isinstance(tree, tuple):
        return tuple(resolve(item, index, values, definitions) for item in tree)

    return tree


def contains_producers(tree: Any) -> bool:
    """Check whether any Producer remains in a tree."""
    if isinstance(tree, Producer):
        return True
    if isinstance(tree, Mapping):
        return any(contains_producers(item) for item in tree.values())
    if isinstance(tree, (list, tuple)):
        return any(contains_producers(item) for item in tree)
    return False
