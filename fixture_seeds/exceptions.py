"""Custom exceptions with helpful error messages."""

from __future__ import annotations

from pathlib import Path


class FixtureSeedsError(Exception):
    """Base exception for fixture-seeds errors."""

    pass


# ============================================================================
# Not found
# ============================================================================


class NotFoundError(FixtureSeedsError):
    """Something requested from a seed set does not exist."""

    pass


class SeedNotFoundError(NotFoundError):
    """Seed index is outside the seed set."""

    def __init__(self, index: int, size: int):
        self.index = index
        super().__init__(
            f'Not found: seed of index "{index}" '
            f"(seed set has {size} seed{'s' if size != 1 else ''}, valid: 0-{size - 1})"
            if size
            else f'Not found: seed of index "{index}" (seed set is empty)'
        )


class ValueNotMaterializedError(NotFoundError):
    """Seed has not been created yet, so it has no value to read."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(
            f'Not found: value of seed "{index}".\n\n'
            f"Suggestions:\n"
            f"1. Create the seed first: await seeds.create({index})\n"
            f"2. Only reference seeds that come earlier in the set"
        )


class PropertyNotFoundError(NotFoundError):
    """Deep path does not exist inside a value."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Not found: property value "{path}"')


# ============================================================================
# Invalid operation
# ============================================================================


class InvalidOperationError(FixtureSeedsError):
    """Operation attempted on something that is not ready for it."""

    pass


class MissingBaseUrlError(InvalidOperationError):
    """Endpoint has no base URL configured."""

    def __init__(self):
        super().__init__(
            '"base_url" must be defined for the Seeds API to be used.\n\n'
            "Suggestions:\n"
            '1. Pass it explicitly: await endpoint.init(EndpointConfig(base_url="http://localhost/seeds"))\n'
            "2. Set FIXTURE_SEEDS_ENDPOINT__BASE_URL in the environment\n"
            "3. Add [endpoint] base_url to fixture-seeds.toml"
        )


class NotConnectedError(InvalidOperationError):
    """Endpoint connectivity has not been established."""

    def __init__(self):
        super().__init__(
            "Seeds API must be initialized before usage.\n\n"
            "Suggestions:\n"
            "1. Call await endpoint.init() before creating seeds\n"
            "2. Check await endpoint.has_connectivity() returns True"
        )


class InvalidSeedError(InvalidOperationError):
    """Seed definition cannot be turned into a request."""

    def __init__(self, index: int, reason: str):
        self.index = index
        super().__init__(f"Seed {index} cannot be requested: {reason}")


class InvalidTransitionError(InvalidOperationError):
    """Seed lifecycle transition that skips a predecessor state."""

    def __init__(self, index: int, current: str, target: str):
        self.index = index
        super().__init__(f"Seed {index} cannot move from '{current}' to '{target}'")


# ============================================================================
# Transport
# ============================================================================


class TransportError(FixtureSeedsError):
    """Remote seeds API call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class EndpointNotFoundError(TransportError):
    """Seeds API answered 404 for a path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Seeds API path "{path}" could not be found', status_code=404)


class ConnectivityError(TransportError):
    """Seeds API did not answer the connectivity check as expected."""

    pass


# ============================================================================
# Seed files
# ============================================================================


class SeedFileError(FixtureSeedsError):
    """Seed file could not be loaded."""

    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        super().__init__(f"Could not load seed file '{self.path}': {reason}")
