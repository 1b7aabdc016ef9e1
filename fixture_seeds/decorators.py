"""Pytest helpers for seed sets.

Requires the ``pytest`` extra (pytest and pytest-asyncio).
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any

import pytest_asyncio

from fixture_seeds.seeds import Seeds


def seeds_fixture(seeds: Seeds, name: str | None = None, scope: str = "function"):
    """
    Build a pytest fixture creating a seed set before its tests and removing it after.

    Usage:
        blog = seeds_fixture(endpoint.create_seeds(BLOG_SEEDS), name="blog", scope="module")

        @pytest.mark.asyncio(loop_scope="module")
        async def test_post_has_author(blog):
            assert blog[1]["author"] == blog[0]["id"]

    Args:
        seeds: Seed set to create and remove
        name: Fixture name (the module attribute name when omitted)
        scope: Pytest fixture scope, also used as the event loop scope

    The fixture value is the list of created values.
    """

    @pytest_asyncio.fixture(name=name, scope=scope, loop_scope=scope)
    async def seeded():
        values = await seeds.create_all()
        yield values
        await seeds.remove_all()

    return seeded


def with_seeds(seeds: Seeds) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator running an async test inside Seeds.use().

    Usage:
        @pytest.mark.asyncio
        @with_seeds(endpoint.create_seeds(BLOG_SEEDS))
        async def test_api(seed_values, client):
            assert seed_values[0]["id"]

    The created values are passed as the ``seed_values`` keyword argument;
    seeds are removed once the test finishes, whether it passed or not.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await seeds.use(lambda values: func(*args, seed_values=values, **kwargs))

        # Hide seed_values from pytest's fixture lookup
        signature = inspect.signature(func)
        wrapper.__signature__ = signature.replace(
            parameters=[p for name, p in signature.parameters.items() if name != "seed_values"]
        )
        return wrapper

    return decorator
