"""Tests for the fixture-seeds CLI."""

import json

import httpx
import pytest
from click.testing import CliRunner

from fixture_seeds import cli as cli_module
from fixture_seeds.cli import cli
from fixture_seeds.endpoint import SeedsEndpoint

BASE_URL = "http://seeds.test/seeds"


@pytest.fixture
def requests(monkeypatch):
    """Route CLI endpoints to an in-memory seeds API, returning the request log."""
    log = []

    def handler(request: httpx.Request) -> httpx.Response:
        log.append(request)
        path = request.url.path
        if path == "/seeds/touch":
            return httpx.Response(200, text="seeds@2.0.0")
        if path.endswith("/create"):
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": len(log), "data": body["data"]})
        if path.endswith("/remove"):
            return httpx.Response(200, json={"removed": True})
        return httpx.Response(404)

    def build_endpoint(config):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=config.base_url)
        return SeedsEndpoint(config, client=client)

    monkeypatch.setattr(cli_module, "build_endpoint", build_endpoint)
    return log


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "fixture-seeds.toml"
    path.write_text(f'[endpoint]\nbase_url = "{BASE_URL}"\n')
    return path


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "blog.yaml"
    path.write_text(
        """
name: blog
seeds:
  - type: user
    data: {name: ada}
  - type: post
    data: {author: !parse "0:id"}
"""
    )
    return path


def test_help():
    """Should list the commands."""
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "touch" in result.output
    assert "create" in result.output


def test_touch(requests, config_file):
    """Should report a reachable seeds API."""
    result = CliRunner().invoke(cli, ["--config", str(config_file), "touch"])

    assert result.exit_code == 0, result.output
    assert f"✓ Seeds API reachable at {BASE_URL}" in result.output
    assert [r.url.path for r in requests] == ["/seeds/touch"]


def test_touch_base_url_option(requests, config_file):
    """Should let --base-url override the configured URL."""
    other = "http://other.test/seeds"

    result = CliRunner().invoke(cli, ["--config", str(config_file), "touch", "--base-url", other])

    assert result.exit_code == 0, result.output
    assert other in result.output
    assert str(requests[0].url) == f"{other}/touch"


def test_touch_without_base_url(tmp_path, monkeypatch):
    """Should fail when no base URL is configured."""
    monkeypatch.delenv("FIXTURE_SEEDS_ENDPOINT__BASE_URL", raising=False)
    config = tmp_path / "fixture-seeds.toml"
    config.write_text("[endpoint]\n")

    result = CliRunner().invoke(cli, ["--config", str(config), "touch"])

    assert result.exit_code == 1
    assert "base_url" in result.output


def test_create_and_remove(requests, config_file, seed_file):
    """Should create seeds in order, then remove them."""
    result = CliRunner().invoke(cli, ["--config", str(config_file), "create", str(seed_file)])

    assert result.exit_code == 0, result.output
    assert "✓ [0] user" in result.output
    assert "✓ [1] post" in result.output
    assert "Removed 2 seed(s)" in result.output
    assert [r.url.path for r in requests] == [
        "/seeds/touch",
        "/seeds/user/create",
        "/seeds/post/create",
        "/seeds/user/remove",
        "/seeds/post/remove",
    ]
    assert json.loads(requests[2].content)["data"] == {"author": 2}


def test_create_keep_json(requests, config_file, seed_file):
    """Should print values as JSON and keep seeds with --keep."""
    result = CliRunner().invoke(
        cli, ["--config", str(config_file), "create", str(seed_file), "--keep", "--json"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {"id": 2, "data": {"name": "ada"}},
        {"id": 3, "data": {"author": 2}},
    ]
    assert not any(r.url.path.endswith("/remove") for r in requests)


def test_create_missing_file(requests, config_file, tmp_path):
    """Should fail on missing seed files."""
    result = CliRunner().invoke(
        cli, ["--config", str(config_file), "create", str(tmp_path / "missing.yaml")]
    )

    assert result.exit_code == 1
    assert "file not found" in result.output
