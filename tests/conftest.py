"""Pytest configuration and shared fixtures."""

import asyncio
import copy
from typing import Any

import pytest

from fixture_seeds.exceptions import TransportError
from fixture_seeds.registry import SeedsRegistry, clear_seeds


class FakeTransport:
    """
    In-memory seeds API recording every request.

    Create requests answer {"id": <n>, "type": <type>, "data": <data>} with n
    counting from 1; remove requests answer {"removed": <type>}. Urls listed in
    fail_on raise the given error instead.
    """

    def __init__(self, fail_on: dict[str, Exception] | None = None):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_on = fail_on or {}
        self.responses: list[Any] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._next_id = 1

    async def request(self, url: str, payload: dict[str, Any]) -> Any:
        self.calls.append((url, copy.deepcopy(payload)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if url in self.fail_on:
                raise self.fail_on[url]
            response = self._respond(url, payload)
        finally:
            self.in_flight -= 1
        self.responses.append(response)
        return response

    def _respond(self, url: str, payload: dict[str, Any]) -> Any:
        seed_type, _, action = url.partition("/")
        if action == "remove":
            return {"removed": seed_type}
        response = {"id": self._next_id, "type": seed_type, "data": payload["data"]}
        self._next_id += 1
        return response

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


@pytest.fixture(autouse=True)
def _clean_default_registry():
    """Keep the process-wide registry empty between tests."""
    clear_seeds()
    yield
    clear_seeds()


@pytest.fixture
def transport() -> FakeTransport:
    """Provide a recording fake transport."""
    return FakeTransport()


@pytest.fixture
def failing_transport() -> FakeTransport:
    """Provide a fake transport failing to create "comment" seeds."""
    return FakeTransport(fail_on={"comment/create": TransportError("boom", status_code=500)})


@pytest.fixture
def registry() -> SeedsRegistry:
    """Provide an empty registry."""
    return SeedsRegistry()


@pytest.fixture
def blog_definitions() -> list[dict[str, Any]]:
    """Three seeds, each later seed referencing the previous one."""
    from fixture_seeds import Seeds

    return [
        {"type": "user", "data": {"name": "ada"}},
        {"type": "post", "data": {"title": "Hello", "author": Seeds.parser(0, "id")}},
        {"type": "comment", "data": {"post": Seeds.parser(1, "id"), "body": "First!"}},
    ]


@pytest.fixture
def make_transport():
    """Provide the fake transport class, for tests needing custom failures or responses."""
    return FakeTransport
