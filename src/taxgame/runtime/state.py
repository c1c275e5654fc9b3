"""Explicit application state owned by the runtime controller."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from taxgame.config.data_loader import parse_document
from taxgame.config.schema import (
    Achievement,
    BudgetDocument,
    CategoryBreakdownEntry,
    ClientPayload,
    CountryMeta,
    CountrySummary,
    LanguagePack,
)
from taxgame.localization import Translator, get_translator

from .formatting import format_compact, trend_label


class Screen(str, Enum):
    HERO = "hero"
    RESULTS = "results"


@dataclass(frozen=True)
class ResultsView:
    """Everything the results screen shows for one salary and budget."""

    salary: float
    total_tax: int
    level: int
    budget_year: str
    breakdown: tuple[CategoryBreakdownEntry, ...]
    achievements: tuple[Achievement, ...] = ()
    source_url: str | None = None

    @property
    def largest_share(self) -> float:
        return self.breakdown[0].percent if self.breakdown else 0.0

    def bar_width(self, entry: CategoryBreakdownEntry) -> float:
        """Bar length of ``entry`` as a percentage of the largest category."""

        largest = self.largest_share or 1.0
        return entry.percent / largest * 100

    @staticmethod
    def trend(entry: CategoryBreakdownEntry) -> str | None:
        return trend_label(entry.change)


@dataclass
class AppState:
    """Mutable state of one loaded page.

    ``budget`` is the only document that changes after load; it is always
    replaced as a whole, never edited in place.
    """

    meta: CountryMeta
    budget: BudgetDocument
    strings: LanguagePack
    current_language: str
    achievements: tuple[Achievement, ...] = ()
    global_countries: tuple[CountrySummary, ...] = ()
    path: str = "/"
    query: dict[str, str] = field(default_factory=dict)
    screen: Screen = Screen.HERO
    salary_input: str = ""
    input_error: bool = False
    results: ResultsView | None = None

    @classmethod
    def from_payload(cls, payload: ClientPayload | Mapping[str, Any]) -> AppState:
        """Hydrate state from the JSON snapshot embedded in a generated page."""

        if not isinstance(payload, ClientPayload):
            payload = parse_document(ClientPayload, payload, "client payload")
        return cls(
            meta=payload.meta,
            budget=payload.budget,
            strings=payload.strings,
            current_language=payload.current_language,
            achievements=payload.achievements,
            global_countries=payload.global_countries,
        )

    @property
    def budget_years(self) -> tuple[str, ...]:
        return self.meta.available_budgets or (self.budget.year,)

    @property
    def translate(self) -> Translator:
        """Lookup for results-screen strings such as ``citizen_rank``."""

        return get_translator(self.current_language, self.strings)

    def format_amount(self, amount: float) -> str:
        """Currency symbol plus the compact amount in the country's number system."""

        return f"{self.meta.currency_symbol}{format_compact(amount, self.meta.number_format)}"

    @property
    def source_link(self) -> tuple[str, str] | None:
        """Attribution text and URL for the active budget, when it has a source."""

        if not self.budget.source_url:
            return None
        return f"{self.strings.subtext} • {self.budget.year}", self.budget.source_url


__all__ = ["AppState", "ResultsView", "Screen"]
