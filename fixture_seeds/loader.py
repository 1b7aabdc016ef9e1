"""Seed file loading.

Seed sets can be written as YAML (or JSON) files:

    name: blog
    seeds:
      - type: user
        data: {name: ada}
      - type: post
        data:
          title: Hello
          author: !parse "0:id"
          company: !parse {seed: 0, path: [company, id]}

A file may also be a plain list of seeds. The ``!parse`` tag reads a value of
an earlier seed of the same set when the seed holding it is created.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fixture_seeds.exceptions import SeedFileError
from fixture_seeds.resolver import Producer
from fixture_seeds.seeds import Seeds

PARSE_TAG = "!parse"


class ParseReferenceError(ValueError):
    """Malformed !parse reference."""

    pass


def parse_reference(reference: str) -> Producer:
    """
    Build a producer from a "<seed>:<path>" reference.

    Args:
        reference: Seed index and dot-delimited path, e.g. "0:user.id"
            ("0" or "0:" reads the whole value)

    Returns:
        Producer created with Seeds.parser
    """
    source, _, path = str(reference).partition(":")
    if not source.strip().isdigit():
        raise ParseReferenceError(
            f"Invalid {PARSE_TAG} reference '{reference}': expected '<seed index>:<path>'"
        )
    return Seeds.parser(int(source), path.strip() or None)


def _construct_parse(loader: yaml.SafeLoader, node: yaml.Node) -> Producer:
    if isinstance(node, yaml.MappingNode):
        reference = loader.construct_mapping(node, deep=True)
        if "seed" not in reference:
            raise ParseReferenceError(f"{PARSE_TAG} mapping requires a 'seed' key, got {reference}")
        return Seeds.parser(int(reference["seed"]), reference.get("path"))
    return parse_reference(loader.construct_scalar(node))


class SeedLoader(yaml.SafeLoader):
    """Safe YAML loader understanding the !parse tag."""

    pass


SeedLoader.add_constructor(PARSE_TAG, _construct_parse)


@dataclass
class SeedFile:
    """
    Seed set definition loaded from a file.

    Attributes:
        definitions: Seed definitions, in creation order
        name: Seed set name (None when the file does not give one)
        path: File the definitions were read from
    """

    definitions: list[Any] = field(default_factory=list)
    name: str | None = None
    path: Path | None = None


def load_seed_file(path: str | Path) -> SeedFile:
    """
    Load seed definitions from a YAML or JSON file.

    Args:
        path: Path to the seed file

    Returns:
        SeedFile instance

    Raises:
        SeedFileError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise SeedFileError(path, "file not found")

    try:
        with open(path) as f:
            document = yaml.load(f, Loader=SeedLoader)  # noqa: S506 - SafeLoader subclass
    except (yaml.YAMLError, ParseReferenceError, ValueError) as e:
        raise SeedFileError(path, str(e)) from e

    name = None
    if isinstance(document, dict):
        name = document.get("name")
        document = document.get("seeds")

    if not isinstance(document, list):
        raise SeedFileError(path, "expected a list of seeds or a mapping with a 'seeds' list")

    for index, seed in enumerate(document):
        if not isinstance(seed, dict) or "type" not in seed:
            raise SeedFileError(path, f"seed {index} must be a mapping with a 'type'")

    return SeedFile(definitions=document, name=name, path=path)
