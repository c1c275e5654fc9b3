"""Loaders for the JSON data tree wrapping the shared schema models."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from taxgame.errors import ConfigurationError, FatalConfigError, SkippableDataError

from .schema import (
    Achievement,
    BudgetDocument,
    CountryMeta,
    CountrySummary,
    LanguagePack,
    SiteConfig,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
COUNTRIES_DIRECTORY = "countries"
LANGUAGES_DIRECTORY = "languages"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def parse_document(model: type[ModelT], payload: Any, source: str) -> ModelT:
    """Validate ``payload`` against ``model`` raising :class:`ConfigurationError`."""

    try:
        return model.model_validate(payload)
    except ValidationError as error:
        raise ConfigurationError(f"{source} failed validation: {error}") from error


class DataRepository:
    """Read-only view over one data tree for the duration of a single build.

    Parsed documents are memoised per instance only; every build creates a new
    repository so that edits on disk are always picked up.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self._documents: dict[Path, Any] = {}

    # Paths -----------------------------------------------------------------

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE

    def country_directory(self, country_id: str) -> Path:
        return self.root / COUNTRIES_DIRECTORY / country_id

    def budget_path(self, country_id: str, year: str) -> Path:
        return self.country_directory(country_id) / "budgets" / f"{year}.json"

    def language_path(self, language: str) -> Path:
        return self.root / LANGUAGES_DIRECTORY / f"{language}.json"

    # Raw access ------------------------------------------------------------

    def _read(self, path: Path) -> Any:
        if path not in self._documents:
            try:
                self._documents[path] = _load_json(path)
            except json.JSONDecodeError as error:
                raise ConfigurationError(f"{path} is not valid JSON: {error}") from error
            except UnicodeDecodeError as error:
                raise ConfigurationError(f"{path} is not valid UTF-8: {error}") from error
            except OSError as error:
                raise ConfigurationError(f"{path} could not be read: {error}") from error
        return self._documents[path]

    def _load(self, model: type[ModelT], path: Path, description: str) -> ModelT:
        if not path.is_file():
            raise SkippableDataError(f"{description} missing: {path}")
        try:
            return parse_document(model, self._read(path), str(path))
        except ConfigurationError as error:
            raise SkippableDataError(f"{description} invalid: {error}") from error

    # Documents ---------------------------------------------------------------

    def load_site_config(self) -> SiteConfig:
        """Load ``config.json``; any failure aborts the whole build."""

        if not self.config_path.is_file():
            raise FatalConfigError(f"{CONFIG_FILE} missing from {self.root}")
        try:
            return parse_document(SiteConfig, self._read(self.config_path), CONFIG_FILE)
        except ConfigurationError as error:
            raise FatalConfigError(str(error)) from error

    def load_country_meta(self, country_id: str) -> CountryMeta:
        path = self.country_directory(country_id) / "meta.json"
        meta = self._load(CountryMeta, path, f"Metadata for '{country_id}'")
        if meta.id != country_id:
            raise SkippableDataError(
                f"Metadata id '{meta.id}' does not match directory '{country_id}'"
            )
        return meta

    def load_budget(self, country_id: str, year: str) -> BudgetDocument:
        path = self.budget_path(country_id, year)
        return self._load(BudgetDocument, path, f"Budget {year} for '{country_id}'")

    def find_budget(self, country_id: str, year: str) -> BudgetDocument | None:
        """Return the budget for ``year`` or ``None`` when no such file exists."""

        if not self.budget_path(country_id, year).is_file():
            return None
        return self.load_budget(country_id, year)

    def load_achievements(self, country_id: str) -> tuple[Achievement, ...]:
        path = self.country_directory(country_id) / "achievements.json"
        if not path.is_file():
            raise SkippableDataError(f"Achievements for '{country_id}' missing: {path}")

        try:
            raw = self._read(path)
            if not isinstance(raw, list):
                raise ConfigurationError(f"{path} must contain a list of achievements")
            return tuple(
                parse_document(Achievement, entry, f"{path}[{index}]")
                for index, entry in enumerate(raw)
            )
        except ConfigurationError as error:
            raise SkippableDataError(f"Achievements for '{country_id}' invalid: {error}") from error

    def load_language(self, language: str) -> LanguagePack:
        return self._load(LanguagePack, self.language_path(language), f"Language pack '{language}'")

    def global_countries(self, config: SiteConfig) -> tuple[CountrySummary, ...]:
        """Summaries of every enabled country whose metadata loads."""

        summaries: list[CountrySummary] = []
        for country in config.enabled_countries:
            try:
                meta = self.load_country_meta(country.id)
            except SkippableDataError as error:
                _LOGGER.warning("Leaving '%s' out of the country list: %s", country.id, error)
                continue
            summaries.append(CountrySummary(id=meta.id, name=meta.name, flag=meta.flag))
        return tuple(summaries)


__all__ = [
    "CONFIG_FILE",
    "COUNTRIES_DIRECTORY",
    "DataRepository",
    "LANGUAGES_DIRECTORY",
    "parse_document",
]
