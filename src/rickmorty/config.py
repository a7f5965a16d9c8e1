"""Runtime settings for the rickmorty client.

Every knob here tunes how the client talks to the Rick and Morty API or how
the CLI behaves; nothing affects cache semantics. Sources, highest first:
  1. Keyword arguments (the CLI's ``--log-level`` arrives this way)
  2. Environment variables  (RICKMORTY__HTTP__TIMEOUT_SECONDS=10)
  3. rickmorty.yaml         (cwd first, then the platformdirs config dir)
  4. Field defaults below

A minimal rickmorty.yaml pointing at a local mirror::

    api:
      base_url: http://localhost:8080/api
    workers:
      max_workers: 8
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("rickmorty")


def _find_config_file() -> str | None:
    """Return the path of the first rickmorty.yaml found, or None."""
    candidates = [
        Path("rickmorty.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "rickmorty.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ApiSettings(BaseModel):
    # Trailing slash optional; ApiClient strips it
    base_url: str = "https://rickandmortyapi.com/api"


class HttpSettings(BaseModel):
    # Applies per request; a paginated load may take several
    timeout_seconds: float = Field(default=30.0, gt=0)
    user_agent: str = "RickAndMortyViewer/1.0"
    follow_redirects: bool = True


class WorkerSettings(BaseModel):
    """Thread pool used by ``rickmorty random`` for concurrent episode loads."""

    max_workers: int = Field(default=4, ge=1)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: RICKMORTY__API__BASE_URL=...
        env_prefix="RICKMORTY__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    api: ApiSettings = ApiSettings()
    http: HttpSettings = HttpSettings()
    workers: WorkerSettings = WorkerSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
