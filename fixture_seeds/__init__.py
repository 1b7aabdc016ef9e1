"""
fixture-seeds - Ordered test seed fixtures over a seeds API.

Provides tools for:
- Creating and removing ordered seed sets before and after end-to-end tests
- Referencing values of earlier seeds lazily (Seeds.parser, Producer)
- Reading deep values out of created seeds
- Looking up live seed sets by name
"""

__version__ = "0.1.0"

from fixture_seeds.config import Config, EndpointConfig
from fixture_seeds.endpoint import SeedsEndpoint
from fixture_seeds.exceptions import (
    EndpointNotFoundError,
    FixtureSeedsError,
    InvalidOperationError,
    NotFoundError,
    PropertyNotFoundError,
    SeedNotFoundError,
    TransportError,
    ValueNotMaterializedError,
)
from fixture_seeds.loader import load_seed_file
from fixture_seeds.models import Seed, SeedState
from fixture_seeds.path import extract
from fixture_seeds.registry import SeedsRegistry, get_seeds, register_seeds
from fixture_seeds.resolver import Producer, producer
from fixture_seeds.seeds import Seeds

__all__ = [
    "Config",
    "EndpointConfig",
    "EndpointNotFoundError",
    "FixtureSeedsError",
    "InvalidOperationError",
    "NotFoundError",
    "Producer",
    "PropertyNotFoundError",
    "Seed",
    "SeedNotFoundError",
    "SeedState",
    "Seeds",
    "SeedsEndpoint",
    "SeedsRegistry",
    "TransportError",
    "ValueNotMaterializedError",
    "__version__",
    "extract",
    "get_seeds",
    "load_seed_file",
    "producer",
    "register_seeds",
]
