"""Utilities for validating the data tree and surfacing issues to contributors."""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path
from typing import Sequence

from taxgame.errors import ConfigurationError, SkippableDataError

from .data_loader import DataRepository
from .schema import BudgetDocument, CountryMeta, LanguagePack

# Category shares are fractions; authored budgets conventionally sum to 1.
PERCENT_TOLERANCE = 0.02


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_budget(scope: str, budget: BudgetDocument, expected_year: str) -> list[str]:
    errors: list[str] = []

    if budget.year != expected_year:
        errors.append(
            _format_scope(scope, f"year '{budget.year}' does not match file name '{expected_year}'")
        )

    ids = [category.id for category in budget.categories]
    duplicates = sorted(value for value, count in Counter(ids).items() if count > 1)
    if duplicates:
        errors.append(_format_scope(scope, f"duplicate category ids: {duplicates}"))

    if budget.categories:
        total = sum(category.percent for category in budget.categories)
        if abs(total - 1) > PERCENT_TOLERANCE:
            errors.append(_format_scope(scope, f"category percents sum to {total:.3f}, expected 1"))

    if budget.source_url and not budget.source_url.startswith(("http://", "https://")):
        errors.append(_format_scope(scope, "sourceUrl must be absolute"))

    return errors


def _validate_labels(
    scope: str, budget: BudgetDocument, packs: dict[str, LanguagePack]
) -> list[str]:
    errors: list[str] = []
    for language, pack in packs.items():
        missing = [category.id for category in budget.categories if not pack.categories.get(category.id)]
        if missing:
            errors.append(
                _format_scope(scope, f"language '{language}' has no label for {missing}")
            )
    return errors


def _validate_country(
    repository: DataRepository, meta: CountryMeta, packs: dict[str, LanguagePack]
) -> list[str]:
    scope = f"countries.{meta.id}"
    errors: list[str] = []

    years = list(meta.budget_years)
    if meta.available_budgets and meta.default_budget not in meta.available_budgets:
        errors.append(
            _format_scope(scope, f"defaultBudget '{meta.default_budget}' not in availableBudgets")
        )
        years.append(meta.default_budget)

    country_packs = {lang: packs[lang] for lang in meta.available_languages if lang in packs}
    for language in meta.available_languages:
        if language not in packs:
            errors.append(_format_scope(scope, f"language pack '{language}' missing"))

    for year in years:
        budget_scope = f"{scope}.budgets.{year}"
        try:
            budget = repository.load_budget(meta.id, year)
        except SkippableDataError as error:
            errors.append(_format_scope(budget_scope, str(error)))
            continue
        errors.extend(_validate_budget(budget_scope, budget, year))
        errors.extend(_validate_labels(budget_scope, budget, country_packs))

    try:
        repository.load_achievements(meta.id)
    except SkippableDataError as error:
        errors.append(_format_scope(f"{scope}.achievements", str(error)))

    return errors


def validate_data_tree(root: Path | str) -> dict[str, list[str]]:
    """Validate every enabled country and return issues keyed by scope."""

    repository = DataRepository(root)
    try:
        config = repository.load_site_config()
    except ConfigurationError as error:
        return {"config": [_format_scope("config", str(error))]}

    results: dict[str, list[str]] = {"config": []}
    if config.default_country is None:
        results["config"].append(_format_scope("config", "no enabled default country"))

    packs: dict[str, LanguagePack] = {}
    metas: list[CountryMeta] = []
    for country in config.enabled_countries:
        try:
            meta = repository.load_country_meta(country.id)
        except SkippableDataError as error:
            results[country.id] = [_format_scope(f"countries.{country.id}", str(error))]
            continue
        metas.append(meta)
        for language in meta.available_languages:
            if language in packs:
                continue
            try:
                packs[language] = repository.load_language(language)
            except SkippableDataError:
                continue

    for meta in metas:
        results[meta.id] = _validate_country(repository, meta, packs)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the country, budget and language data used by the site build."
    )
    parser.add_argument(
        "data_directory",
        nargs="?",
        type=Path,
        default=Path("data"),
        help="Root of the data tree (defaults to ./data)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    exit_code = 0
    for scope, issues in validate_data_tree(args.data_directory).items():
        if issues:
            exit_code = 1
            print(f"[{scope}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{scope}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
