"""CLI commands for fixture-seeds."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from fixture_seeds.config import Config, EndpointConfig
from fixture_seeds.endpoint import SeedsEndpoint
from fixture_seeds.exceptions import FixtureSeedsError
from fixture_seeds.loader import SeedFile, load_seed_file


def build_endpoint(config: EndpointConfig) -> SeedsEndpoint:
    """Build the endpoint used by CLI commands."""
    return SeedsEndpoint(config)


def _endpoint_config(config: Config, base_url: str | None) -> EndpointConfig:
    if base_url:
        return config.endpoint.model_copy(update={"base_url": base_url})
    return config.endpoint


base_url_option = click.option(
    "--base-url", help="Seeds API base URL (overrides fixture-seeds.toml / environment)"
)


@click.group()
@click.version_option(package_name="fixture-seeds")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to fixture-seeds.toml (searched upwards from cwd by default)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """fixture-seeds - Ordered test seed fixtures over a seeds API."""
    config = Config.from_toml(config_path) if config_path else Config.find_and_load()
    logging.basicConfig(
        level="DEBUG" if verbose else config.logging.level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


@cli.command()
@base_url_option
@click.pass_obj
def touch(config: Config, base_url: str | None) -> None:
    """Check connectivity with the seeds API."""
    endpoint = build_endpoint(_endpoint_config(config, base_url))

    async def run() -> None:
        async with endpoint:
            await endpoint.init()

    try:
        asyncio.run(run())
    except FixtureSeedsError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Seeds API reachable at {endpoint.base_url}")


@cli.command()
@click.argument("seed_file", type=click.Path(dir_okay=False, path_type=Path))
@base_url_option
@click.option("--keep", is_flag=True, help="Leave the seeds in place instead of removing them")
@click.option("--json", "output_json", is_flag=True, help="Output created values as JSON")
@click.pass_obj
def create(
    config: Config,
    seed_file: Path,
    base_url: str | None,
    keep: bool,
    output_json: bool,
) -> None:
    """Create the seeds of SEED_FILE in order, then remove them."""
    endpoint = build_endpoint(_endpoint_config(config, base_url))

    try:
        loaded = load_seed_file(seed_file)
        values = asyncio.run(_create(endpoint, loaded, keep, quiet=output_json))
    except FixtureSeedsError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(json.dumps(values, indent=2, default=str))


async def _create(endpoint: SeedsEndpoint, loaded: SeedFile, keep: bool, quiet: bool) -> list[Any]:
    async with endpoint:
        await endpoint.init()
        seeds = endpoint.create_seeds(loaded.definitions, loaded.name)
        created = 0

        def progress(value: Any) -> None:
            nonlocal created
            if not quiet:
                click.echo(f"✓ [{created}] {seeds.definitions[created]['type']}: {value}")
            created += 1

        values = await seeds.create_all(on_progress=progress)

        if not keep:
            await seeds.remove_all()
            if not quiet:
                click.echo(f"Removed {len(seeds)} seed(s)")

        return values
