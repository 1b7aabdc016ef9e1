"""
Configuration management for fixture-seeds.

Loads and validates configuration from fixture-seeds.toml files and
FIXTURE_SEEDS_* environment variables using Pydantic. Environment variables
take precedence over the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

CONFIG_FILENAME = "fixture-seeds.toml"


class EndpointConfig(BaseModel):
    """Seeds API endpoint configuration."""

    base_url: str = Field(default="", description="Base URL of the seeds API")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    touch_path: str = Field(default="touch", description="Connectivity check path")
    version_pattern: str = Field(
        default=r"seeds@[0-9]\.[0-9x]\.[0-9x]",
        description="Pattern the connectivity check response body must match",
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent with every request"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Log level for fixture_seeds loggers")


class Config(BaseSettings):
    """Main configuration for fixture-seeds."""

    model_config = SettingsConfigDict(env_prefix="FIXTURE_SEEDS_", env_nested_delimiter="__")

    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # toml_file is only set by from_toml; without it the source is empty
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        FIXTURE_SEEDS_* environment variables override values from the file.

        Args:
            path: Path to fixture-seeds.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        settings_cls = type(
            cls.__name__,
            (cls,),
            {"model_config": SettingsConfigDict(toml_file=config_path)},
        )
        return settings_cls()

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from fixture-seeds.toml.

        Searches for fixture-seeds.toml starting from start_dir and walking up
        parent directories. Falls back to defaults and environment variables
        when no file exists.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        return cls()
