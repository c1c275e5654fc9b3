"""Language pack helpers for labels and UI strings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from taxgame.config.schema import BudgetDocument, LanguagePack

# Used when a language pack omits one of the optional results-screen strings.
_FALLBACK_STRINGS: Mapping[str, str] = {
    "citizen_rank": "Citizen Rank",
    "total_contribution": "Total Contribution",
    "achievements": "Impact & Achievements",
    "year": "Year",
}


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving UI strings from a language pack."""

    language: str
    pack: LanguagePack

    def __call__(self, key: str) -> str:
        return self.pack.extra_string(key) or _FALLBACK_STRINGS.get(key, key)


def get_translator(language: str, pack: LanguagePack) -> Translator:
    return Translator(language=language, pack=pack)


def category_label(pack: LanguagePack, category_id: str) -> str:
    """Label for ``category_id``, degrading to the raw id when untranslated."""

    return pack.categories.get(category_id) or category_id


def localize(budget: BudgetDocument, pack: LanguagePack) -> BudgetDocument:
    """Return a copy of ``budget`` whose categories carry labels from ``pack``.

    The input document is left untouched so that one budget can be localized
    for several languages within a build.
    """

    categories = [
        category.model_copy(update={"label": category_label(pack, category.id)})
        for category in budget.categories
    ]
    return budget.with_categories(categories)


__all__ = ["Translator", "category_label", "get_translator", "localize"]
