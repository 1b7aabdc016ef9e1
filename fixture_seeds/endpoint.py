"""Seeds API endpoint: connectivity check and seed requests over HTTP."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from typing import Any

import httpx

from fixture_seeds.config import Config, EndpointConfig
from fixture_seeds.exceptions import (
    ConnectivityError,
    EndpointNotFoundError,
    MissingBaseUrlError,
    NotConnectedError,
    TransportError,
)
from fixture_seeds.registry import SeedsRegistry
from fixture_seeds.seeds import Seeds

logger = logging.getLogger(__name__)


class SeedsEndpoint:
    """
    Connection to a seeds API.

    The API exposes GET <base_url>/touch answering "seeds@x.y.z", and
    POST <base_url>/<type>/create|remove taking {"data", "value", "config"}.

    Example:
        >>> endpoint = SeedsEndpoint()
        >>> await endpoint.init(EndpointConfig(base_url="http://localhost:3000/seeds"))
        >>> seeds = endpoint.create_seeds([{"type": "user", "data": {"name": "ada"}}], "users")
        >>> await seeds.create_all()
    """

    def __init__(
        self,
        config: EndpointConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize endpoint.

        Args:
            config: Endpoint settings (base_url may be given later via init())
            client: HTTP client to use (created from config when omitted)
        """
        self.config = config or EndpointConfig()
        self.connected = False
        self.registry = SeedsRegistry()
        self._client = client
        self._owns_client = client is None
        self._connecting: asyncio.Task[bool] | None = None

    @classmethod
    def from_settings(cls, config: Config | None = None) -> SeedsEndpoint:
        """Build an endpoint from fixture-seeds.toml / environment settings."""
        config = config or Config.find_and_load()
        return cls(config.endpoint)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.config.timeout,
                headers=self.config.headers,
            )
        return self._client

    async def init(self, config: EndpointConfig | None = None) -> bool:
        """
        Set up the endpoint and check connectivity.

        Args:
            config: Endpoint settings replacing the current ones

        Returns:
            True once the seeds API answered the connectivity check

        Raises:
            MissingBaseUrlError: If no base URL is configured
        """
        if config is not None:
            if self._owns_client and self._client is not None:
                await self._client.aclose()
                self._client = None
            self.config = config
            self.connected = False

        if not self.base_url:
            raise MissingBaseUrlError()

        return await self.has_connectivity()

    async def has_connectivity(self) -> bool:
        """
        Validate connectivity with the seeds API.

        Concurrent callers share the same in-flight check.

        Raises:
            MissingBaseUrlError: If no base URL is configured
            EndpointNotFoundError: If the check path answers 404
            ConnectivityError: If the API answered anything but a seeds version
        """
        if not self.base_url:
            raise MissingBaseUrlError()

        if self.connected:
            return True

        if self._connecting is None:
            self._connecting = asyncio.ensure_future(self._touch())

        connecting = self._connecting
        try:
            self.connected = await asyncio.shield(connecting)
        except Exception:
            self.connected = False
            raise
        finally:
            if self._connecting is connecting and connecting.done():
                self._connecting = None

        return self.connected

    async def _touch(self) -> bool:
        path = self.config.touch_path
        try:
            response = await self.client.get(path)
        except httpx.RequestError as e:
            raise ConnectivityError(f"Could not connect to Seeds API at {self.base_url}: {e}") from e

        if response.status_code == 404:
            raise EndpointNotFoundError(response.request.url.path)

        if response.status_code != 200 or not re.search(self.config.version_pattern, response.text):
            raise ConnectivityError(
                f"Seeds API at {self.base_url} answered {response.status_code} "
                f"without a seeds version",
                status_code=response.status_code,
            )

        logger.info(f"Connected to Seeds API at {self.base_url} ({response.text.strip()})")
        return True

    async def request(self, url: str, payload: dict[str, Any]) -> Any:
        """
        Request the endpoint's seed API.

        Args:
            url: Path relative to the base URL (e.g. "user/create")
            payload: JSON payload

        Returns:
            Decoded JSON response body (None for an empty body)

        Raises:
            MissingBaseUrlError: If no base URL is configured
            NotConnectedError: If connectivity has not been established
            EndpointNotFoundError: If the API answers 404
            TransportError: If the request fails or answers an error status
        """
        if not self.base_url:
            raise MissingBaseUrlError()
        if not self.connected:
            raise NotConnectedError()

        logger.debug(f"POST {url}")
        try:
            response = await self.client.post(url, json=payload)
        except httpx.RequestError as e:
            raise TransportError(f"Seeds API request to '{url}' failed: {e}") from e

        if response.status_code == 404:
            raise EndpointNotFoundError(response.request.url.path)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Seeds API request to '{url}' failed with status "
                f"{response.status_code}: {response.text}",
                status_code=response.status_code,
            ) from e

        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Seed sets
    # ------------------------------------------------------------------

    def register_seeds(self, name: str, seeds: Seeds) -> None:
        """Register a seed set from this endpoint connection."""
        self.registry.register(name, seeds)

    def get_seeds(self, name: str) -> Seeds | None:
        """Grab a previously registered seed set (None if absent)."""
        return self.registry.get(name)

    def create_seeds(self, definitions: Sequence[Any], name: str | None = None) -> Seeds:
        """
        Build a seed set bound to this endpoint and register it.

        Args:
            definitions: Seed definitions, in creation order
            name: Seed set name (generated if omitted)

        Returns:
            Seeds instance
        """
        return Seeds(definitions, name, transport=self, registry=self.registry)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the HTTP client if this endpoint created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        self.connected = False

    async def __aenter__(self) -> SeedsEndpoint:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
