"""Tests for merging language packs into budgets."""

from __future__ import annotations

from taxgame.config.schema import BudgetDocument, LanguagePack
from taxgame.localization import category_label, get_translator, localize

from conftest import budget_document

PACK = LanguagePack.model_validate(
    {"headline": "H", "categories": {"a": "Alpha", "empty": ""}, "citizen_rank": "Rang"}
)


def test_localize_attaches_labels_from_pack() -> None:
    budget = BudgetDocument.model_validate(budget_document("2026-27", {"a": 0.5, "z": 0.5}))

    localized = localize(budget, PACK)

    assert [category.label for category in localized.categories] == ["Alpha", "z"]


def test_missing_or_empty_label_falls_back_to_id() -> None:
    assert category_label(PACK, "z") == "z"
    assert category_label(PACK, "empty") == "empty"


def test_localize_leaves_source_budget_untouched() -> None:
    budget = BudgetDocument.model_validate(budget_document("2026-27", {"a": 1.0}))
    before = budget.to_document()

    first = localize(budget, PACK)
    second = localize(budget, LanguagePack(categories={"a": "Autre"}))

    assert budget.to_document() == before
    assert first.categories[0].label == "Alpha"
    assert second.categories[0].label == "Autre"


def test_localize_replaces_stale_authored_labels() -> None:
    raw = budget_document("2026-27", {"a": 1.0})
    raw["expenditure"]["categories"][0]["label"] = "stale"
    budget = BudgetDocument.model_validate(raw)

    assert localize(budget, PACK).categories[0].label == "Alpha"


def test_translator_prefers_pack_strings_then_defaults() -> None:
    translator = get_translator("fr", PACK)

    assert translator("citizen_rank") == "Rang"
    assert translator("total_contribution") == "Total Contribution"
    assert translator("unknown.key") == "unknown.key"
