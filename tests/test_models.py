"""Tests for the Seed entity."""

import pytest

from fixture_seeds.exceptions import InvalidSeedError, InvalidTransitionError
from fixture_seeds.models import Seed, SeedState


def test_payload_defaults():
    """Should default data to None and value/config to empty mappings."""
    seed = Seed(index=0, definition={"type": "user"})

    assert seed.payload() == {"data": None, "value": {}, "config": {}}


def test_payload_uses_definition_and_value():
    """Should send data, config and the current value."""
    seed = Seed(
        index=0,
        definition={"type": "user", "data": {"name": "ada"}, "config": {"role": "admin"}},
        value={"id": 1},
    )

    assert seed.payload() == {
        "data": {"name": "ada"},
        "value": {"id": 1},
        "config": {"role": "admin"},
    }


def test_payload_keeps_empty_data():
    """Should send explicitly empty data as given."""
    seed = Seed(index=0, definition={"type": "user", "data": {}})

    assert seed.payload()["data"] == {}


def test_url():
    """Should build <type>/<action> paths."""
    seed = Seed(index=0, definition={"type": "user"})

    assert seed.url("create") == "user/create"
    assert seed.url("remove") == "user/remove"


@pytest.mark.parametrize("definition", [{"data": {}}, {"type": ""}, ["user"], None])
def test_type_required(definition):
    """Should reject definitions without a type."""
    seed = Seed(index=2, definition=definition)

    with pytest.raises(InvalidSeedError, match="Seed 2"):
        seed.url("create")


def test_lifecycle_happy_path():
    """Should move uncreated → creating → created → removed."""
    seed = Seed(index=0, definition={"type": "user"})

    seed.transition(SeedState.CREATING)
    seed.materialize({"id": 1})
    seed.transition(SeedState.REMOVED)

    assert seed.state is SeedState.REMOVED
    assert seed.value == {"id": 1}
    assert seed.materialized


def test_failed_seed_can_be_retried():
    """Should allow creating again after a failure."""
    seed = Seed(index=0, definition={"type": "user"})
    seed.transition(SeedState.CREATING)
    seed.transition(SeedState.FAILED)

    seed.transition(SeedState.CREATING)

    assert seed.state is SeedState.CREATING


@pytest.mark.parametrize(
    "current, target",
    [
        (SeedState.UNCREATED, SeedState.CREATED),
        (SeedState.UNCREATED, SeedState.REMOVED),
        (SeedState.UNCREATED, SeedState.FAILED),
        (SeedState.CREATING, SeedState.CREATING),
        (SeedState.FAILED, SeedState.REMOVED),
    ],
)
def test_transitions_cannot_skip_states(current, target):
    """Should refuse transitions skipping a predecessor state."""
    seed = Seed(index=0, definition={"type": "user"}, state=current)

    with pytest.raises(InvalidTransitionError):
        seed.transition(target)


def test_reset():
    """Should clear value and return to uncreated."""
    seed = Seed(index=0, definition={"type": "user"})
    seed.transition(SeedState.CREATING)
    seed.materialize({"id": 1})

    seed.reset()

    assert seed.value is None
    assert not seed.materialized
    assert seed.state is SeedState.UNCREATED
