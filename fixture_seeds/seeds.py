"""Seed set lifecycle: ordered creation and removal of seeds."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import aclosing, asynccontextmanager
from typing import Any, Protocol

from fixture_seeds.exceptions import SeedNotFoundError, ValueNotMaterializedError
from fixture_seeds.models import Seed, SeedState
from fixture_seeds.path import PathLike, extract
from fixture_seeds.registry import SeedsRegistry, default_registry, generate_name
from fixture_seeds.resolver import Producer, resolve

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Any], Any]


class Transport(Protocol):
    """Anything able to send a seed request (see SeedsEndpoint)."""

    async def request(self, url: str, payload: dict[str, Any]) -> Any: ...


class SeedValues(list):
    """
    Seed values in index order, as handed to producers.

    Attributes:
        materialized: Per seed, whether its value came back from a create
            request (a created seed may legitimately hold None)
    """

    def __init__(self, seeds: Sequence[Seed]):
        super().__init__(seed.value for seed in seeds)
        self.materialized = [seed.materialized for seed in seeds]


class Seeds:
    """
    Ordered set of seeds created and removed as a unit.

    Seeds are always processed one at a time in index order: a seed may embed
    Producer nodes (see Seeds.parser) reading values of seeds created before it.

    Example:
        >>> seeds = Seeds(
        ...     [
        ...         {"type": "user", "data": {"name": "ada"}},
        ...         {"type": "post", "data": {"author": Seeds.parser(0, "id")}},
        ...     ],
        ...     name="blog",
        ...     transport=endpoint,
        ... )
        >>> values = await seeds.create_all()
        >>> seeds.parse(0, "id")
    """

    def __init__(
        self,
        definitions: Sequence[Any],
        name: str | None = None,
        *,
        transport: Transport,
        registry: SeedsRegistry | None = None,
    ):
        """
        Initialize seed set.

        Args:
            definitions: Seed definitions, in creation order
            name: Name to register the set under (generated if omitted)
            transport: Object performing the seeds API requests
            registry: Registry to register the set in (process-wide registry
                by default)
        """
        self._seeds = [Seed(index=i, definition=d) for i, d in enumerate(definitions)]
        self.transport = transport
        self.name = name or generate_name()

        if registry is None:
            registry = default_registry()
        registry.register(self.name, self)

    # ------------------------------------------------------------------
    # Class methods
    # ------------------------------------------------------------------

    @classmethod
    def parser(cls, source: int, path: PathLike = None) -> Producer:
        """
        Build a Producer reading a value of an earlier seed.

        Args:
            source: Index of the seed to read from; must be created before
                the seed embedding the producer
            path: Path of the property inside that seed's value

        Returns:
            Producer resolving to the property value at creation time
        """

        def parse_source(index: int, values: list[Any], definitions: list[Any]) -> Any:
            if not 0 <= source < len(values):
                raise ValueNotMaterializedError(source)
            materialized = getattr(values, "materialized", None)
            if materialized is None:
                # plain lists carry no flags: None means not created
                created = values[source] is not None
            else:
                created = materialized[source]
            if not created:
                raise ValueNotMaterializedError(source)
            return extract(values[source], path)

        return Producer(parse_source)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def definitions(self) -> list[Any]:
        return [seed.definition for seed in self._seeds]

    @property
    def values(self) -> list[Any]:
        return [seed.value for seed in self._seeds]

    @property
    def states(self) -> list[SeedState]:
        return [seed.state for seed in self._seeds]

    def __len__(self) -> int:
        return len(self._seeds)

    def __repr__(self) -> str:
        return f"Seeds(name={self.name!r}, size={len(self._seeds)})"

    def _seed(self, index: int) -> Seed:
        if isinstance(index, bool) or not isinstance(index, int):
            raise SeedNotFoundError(index, len(self._seeds))
        if not 0 <= index < len(self._seeds):
            raise SeedNotFoundError(index, len(self._seeds))
        return self._seeds[index]

    def reset(self) -> None:
        """Forget every created value (definitions stay resolved)."""
        for seed in self._seeds:
            seed.reset()

    # ------------------------------------------------------------------
    # Single seed operations
    # ------------------------------------------------------------------

    def create(self, index: int) -> Awaitable[Any]:
        """
        Create a given seed.

        The index is validated and the seed's producers are resolved right
        away; the returned awaitable performs the request.

        Args:
            index: Seed index

        Returns:
            Awaitable resolving to the value returned by the seeds API

        Raises:
            SeedNotFoundError: If index is not in the set
        """
        seed = self._seed(index)
        seed.definition = resolve(seed.definition, index, SeedValues(self._seeds), self.definitions)
        return self._create(seed)

    async def _create(self, seed: Seed) -> Any:
        seed.transition(SeedState.CREATING)
        try:
            url = seed.url("create")
            logger.debug(f"Seed set '{self.name}': creating seed {seed.index} ({url})")
            value = await self.transport.request(url, seed.payload())
        except BaseException:
            seed.transition(SeedState.FAILED)
            raise
        return seed.materialize(value)

    def remove(self, index: int) -> Awaitable[Any]:
        """
        Remove a given seed.

        The seed's value stays available after removal.

        Args:
            index: Seed index

        Returns:
            Awaitable resolving to the seeds API response

        Raises:
            SeedNotFoundError: If index is not in the set
        """
        return self._remove(self._seed(index))

    async def _remove(self, seed: Seed) -> Any:
        url = seed.url("remove")
        logger.debug(f"Seed set '{self.name}': removing seed {seed.index} ({url})")
        result = await self.transport.request(url, seed.payload())
        if seed.state is SeedState.CREATED:
            seed.transition(SeedState.REMOVED)
        return result

    def parse(self, index: int, path: PathLike = None) -> Any:
        """
        Parse a deep value from a given seed's value.

        Args:
            index: Seed index
            path: Dot-delimited path or list of segments; empty returns the
                whole value

        Returns:
            Value found at path

        Raises:
            SeedNotFoundError: If index is not in the set
            ValueNotMaterializedError: If the seed has not been created
            PropertyNotFoundError: If path does not exist in the value
        """
        seed = self._seed(index)
        if not seed.materialized:
            raise ValueNotMaterializedError(index)
        return extract(seed.value, path)

    # ------------------------------------------------------------------
    # Whole set operations
    # ------------------------------------------------------------------

    async def _iterate(
        self, action: str, operation: Callable[[int], Awaitable[Any]]
    ) -> AsyncIterator[Any]:
        total = len(self._seeds)
        for index in range(total):
            try:
                result = await operation(index)
            except Exception as e:
                logger.warning(
                    f"Seed set '{self.name}': {action} seed {index} failed ({e}), "
                    f"{total - index - 1} remaining seed(s) skipped"
                )
                raise
            yield result

    def iter_create(self) -> AsyncIterator[Any]:
        """
        Create all seeds one at a time, yielding each value once created.

        Iteration stops with the error of the first seed that fails; later
        seeds are never attempted.
        """
        return self._iterate("creating", self.create)

    def iter_remove(self) -> AsyncIterator[Any]:
        """Remove all seeds one at a time (same order as creation)."""
        return self._iterate("removing", self.remove)

    async def create_all(self, on_progress: ProgressCallback | None = None) -> list[Any]:
        """
        Create all seeds.

        Args:
            on_progress: Called (or awaited) with each value as soon as its
                seed is created

        Returns:
            Created values, in seed order

        Raises:
            Exception: Error of the first seed that failed; seeds created
                before it are left in place
        """
        logger.info(f"Seed set '{self.name}': creating {len(self._seeds)} seed(s)")
        return await _drain(self.iter_create(), on_progress)

    async def remove_all(self, on_progress: ProgressCallback | None = None) -> list[Any]:
        """
        Remove all seeds, in the same order they were created.

        Args:
            on_progress: Called (or awaited) with each removal response

        Returns:
            Removal responses, in seed order
        """
        logger.info(f"Seed set '{self.name}': removing {len(self._seeds)} seed(s)")
        return await _drain(self.iter_remove(), on_progress)

    # ------------------------------------------------------------------
    # Flow helpers
    # ------------------------------------------------------------------

    def attach(
        self,
        before_all: Callable[[Callable[[], Awaitable[Any]]], Any] | None = None,
        after_all: Callable[[Callable[[], Awaitable[Any]]], Any] | None = None,
    ) -> Seeds:
        """
        Bind seed creation and removal to a test flow's hooks.

        Args:
            before_all: Hook registration function receiving create_all
            after_all: Hook registration function receiving remove_all

        Returns:
            Self for chaining
        """
        if before_all is not None:
            before_all(self.create_all)
        if after_all is not None:
            after_all(self.remove_all)
        return self

    async def use(self, body: Callable[..., Any]) -> Any:
        """
        Create all seeds, run body with them, then remove them.

        body is called with (values, definitions, remove_all), trimmed to the
        positional parameters it declares. A body declaring all three takes
        over teardown and must call remove_all itself; otherwise seeds are
        removed once body (and the awaitable it returns) has finished.

        Args:
            body: Function or coroutine function

        Returns:
            body's result
        """
        await self.create_all()

        declared, accepts_any = _positional_parameters(body)
        count = 3 if accepts_any else min(declared, 3)
        manual_teardown = declared >= 3
        args = (self.values, self.definitions, self.remove_all)[:count]

        try:
            result = body(*args)
            if inspect.isawaitable(result):
                result = await result
        except BaseException:
            if not manual_teardown:
                await self._remove_after_failure()
            raise

        if not manual_teardown:
            await self.remove_all()
        return result

    @asynccontextmanager
    async def session(self) -> AsyncIterator[list[Any]]:
        """
        Async context manager creating all seeds on enter and removing them on exit.

        Example:
            >>> async with seeds.session() as values:
            ...     assert values[0]["id"]
        """
        values = await self.create_all()
        try:
            yield values
        except BaseException:
            await self._remove_after_failure()
            raise
        await self.remove_all()

    async def _remove_after_failure(self) -> None:
        # The caller's error wins over a failing teardown
        try:
            await self.remove_all()
        except Exception as e:
            logger.error(f"Seed set '{self.name}': removal after a failed body also failed ({e})")


async def _drain(iterator: AsyncIterator[Any], on_progress: ProgressCallback | None) -> list[Any]:
    results = []
    async with aclosing(iterator) as results_iter:
        async for result in results_iter:
            results.append(result)
            if on_progress is not None:
                notified = on_progress(result)
                if inspect.isawaitable(notified):
                    await notified
    return results


def _positional_parameters(fn: Callable[..., Any]) -> tuple[int, bool]:
    parameters = inspect.signature(fn).parameters.values()
    declared = sum(
        1
        for p in parameters
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    )
    accepts_any = any(p.kind is p.VAR_POSITIONAL for p in parameters)
    return declared, accepts_any
