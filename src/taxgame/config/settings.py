"""Build settings loaded from ``taxgame.yaml`` with environment overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import Field, ValidationError, field_validator

from taxgame.errors import ConfigurationError

from .schema import ImmutableModel

_LOGGER = logging.getLogger(__name__)

SETTINGS_FILENAME = "taxgame.yaml"
SETTINGS_ENV = "TAXGAME_SETTINGS"
BASE_URL_ENV = "TAXGAME_BASE_URL"
OUTPUT_DIR_ENV = "TAXGAME_OUTPUT_DIR"

_PATH_FIELDS = ("data_directory", "client_directory", "output_directory", "template")


class BuildSettings(ImmutableModel):
    """Locations and site-wide values used by the page compositor."""

    base_url: str = "https://tax.mgks.dev"
    data_directory: Path = Path("data")
    client_directory: Path = Path("src/client")
    output_directory: Path = Path("dist")
    template: Path = Path("src/client/templates/index.html")
    asset_directories: tuple[str, ...] = ("styles",)
    sitemap_changefreq: str = Field(default="weekly")

    @field_validator("base_url")
    @classmethod
    def _normalise_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ConfigurationError("base_url must be an absolute http(s) URL")
        return value.rstrip("/")

    def resolve(self, root: Path) -> BuildSettings:
        """Return a copy with relative paths anchored at ``root``."""

        updates = {
            name: (root / getattr(self, name)).resolve()
            for name in _PATH_FIELDS
            if not getattr(self, name).is_absolute()
        }
        return self.model_copy(update=updates)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must define a mapping at the top level")
    return data


def _environment_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}

    base_url = os.getenv(BASE_URL_ENV, "").strip()
    if base_url:
        if base_url.startswith(("http://", "https://")):
            overrides["base_url"] = base_url
        else:
            _LOGGER.warning("Ignoring invalid value for %s: %s", BASE_URL_ENV, base_url)

    output_dir = os.getenv(OUTPUT_DIR_ENV, "").strip()
    if output_dir:
        overrides["output_directory"] = Path(output_dir).expanduser()

    return overrides


def default_settings_path() -> Path:
    """Settings path from ``TAXGAME_SETTINGS`` or ``taxgame.yaml`` in the cwd."""

    configured = os.getenv(SETTINGS_ENV, "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path.cwd() / SETTINGS_FILENAME


def load_settings(
    path: Path | str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> BuildSettings:
    """Load build settings.

    Precedence, lowest first: model defaults, the YAML file, environment
    variables, then explicit ``overrides`` (typically CLI flags). Relative
    paths resolve against the directory holding the settings file.
    """

    settings_path = Path(path) if path is not None else default_settings_path()
    if settings_path.exists():
        raw = _load_yaml(settings_path)
        root = settings_path.resolve().parent
    elif path is not None:
        raise FileNotFoundError(f"Settings file not found: {settings_path}")
    else:
        _LOGGER.debug("No settings file at %s; using defaults", settings_path)
        raw = {}
        root = Path.cwd()

    raw.update(_environment_overrides())
    raw.update({key: value for key, value in (overrides or {}).items() if value is not None})

    try:
        settings = BuildSettings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Settings validation failed: {error}") from error

    return settings.resolve(root)


__all__ = [
    "BASE_URL_ENV",
    "BuildSettings",
    "OUTPUT_DIR_ENV",
    "SETTINGS_ENV",
    "SETTINGS_FILENAME",
    "default_settings_path",
    "load_settings",
]
