"""Deep path extraction from materialized seed values."""

from collections.abc import Mapping, Sequence
from typing import Any

from fixture_seeds.exceptions import PropertyNotFoundError

PathLike = str | Sequence[str | int] | None


def split_path(path: PathLike) -> list[str]:
    """
    Normalize a path into its segments.

    Args:
        path: Dot-delimited string ("user.address.city"), a sequence of
            segments (["user", "address", "city"]), or None/"" for the empty path

    Returns:
        List of string segments (empty for the empty path)
    """
    if path is None or path == "":
        return []
    if isinstance(path, str):
        return path.split(".")
    return [str(segment) for segment in path]


def _child(node: Any, segment: str) -> tuple[bool, Any]:
    if isinstance(node, Mapping):
        if segment in node:
            return True, node[segment]
        return False, None

    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        if segment.isascii() and segment.isdigit() and int(segment) < len(node):
            return True, node[int(segment)]

    return False, None


def extract(value: Any, path: PathLike) -> Any:
    """
    Read a nested value by walking a path segment by segment.

    Each node along the way must directly own the next segment: a mapping key,
    or a list index. The leaf may itself be a sub-tree.

    Args:
        value: Materialized value to read from
        path: Path to walk (see split_path)

    Returns:
        The value found at the end of the path, or value itself for the empty path

    Raises:
        PropertyNotFoundError: If a segment is missing; the error carries the
            full path walked so far

    Example:
        >>> extract({"a": {"b": {"c": 42}}}, "a.b.c")
        42
    """
    walked: list[str] = []

    for segment in split_path(path):
        walked.append(segment)
        found, value = _child(value, segment)
        if not found:
            raise PropertyNotFoundError(".".join(walked))

    return value
