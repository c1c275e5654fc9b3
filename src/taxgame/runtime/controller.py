"""Runtime recalculation controller.

Mirrors what a visitor can do on a generated page: submit a salary, go back,
switch the budget year, or navigate to another language or country. The
controller owns an explicit :class:`AppState` and recomputes results with the
same localization and tax helpers the page compositor uses at build time.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode, urlsplit, parse_qsl

from taxgame.config.data_loader import parse_document
from taxgame.config.fiscal_year import previous_budget_key
from taxgame.config.schema import BudgetDocument, ClientPayload
from taxgame.errors import (
    ConfigurationError,
    InvalidSalaryError,
    RuntimeFetchError,
    TrendUnavailable,
)
from taxgame.localization import localize
from taxgame.services import calculate_tax, citizen_level, split_tax, unlocked_achievements
from taxgame.services.trends import with_trends

from .fetcher import BudgetFetcher
from .state import AppState, ResultsView, Screen

_LOGGER = logging.getLogger(__name__)

SALARY_PARAM = "salary"
_NON_NUMERIC = re.compile(r"[^0-9.]")


def parse_salary(raw: str) -> float:
    """Parse a formatted salary such as ``"15,00,000"``.

    Raises :class:`InvalidSalaryError` unless the result is a finite number
    greater than zero.
    """

    cleaned = _NON_NUMERIC.sub("", raw or "")
    try:
        salary = float(cleaned)
    except ValueError as error:
        raise InvalidSalaryError(f"Salary {raw!r} is not a number") from error
    if not math.isfinite(salary) or salary <= 0:
        raise InvalidSalaryError(f"Salary {raw!r} must be greater than zero")
    return salary


def _format_query_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


def compute_results(state: AppState, salary: float) -> ResultsView:
    """Run the tax engine against the active budget of ``state``."""

    total_tax = calculate_tax(salary, state.budget.tax_rules)
    breakdown = split_tax(total_tax, state.budget.categories)
    return ResultsView(
        salary=salary,
        total_tax=total_tax,
        level=citizen_level(total_tax),
        budget_year=state.budget.year,
        breakdown=tuple(breakdown),
        achievements=tuple(unlocked_achievements(total_tax, state.achievements)),
        source_url=state.budget.source_url,
    )


class RecalculationController:
    """Drive the hero/results screens and budget-year switches of one page."""

    def __init__(
        self,
        state: AppState,
        fetcher: BudgetFetcher,
        *,
        recompute_trends: bool = False,
    ) -> None:
        self.state = state
        self._fetcher = fetcher
        self._recompute_trends = recompute_trends
        self._year_request = 0

    @classmethod
    def from_payload(
        cls,
        payload: ClientPayload | Mapping[str, Any],
        fetcher: BudgetFetcher,
        *,
        url: str = "/",
        recompute_trends: bool = False,
    ) -> RecalculationController:
        """Load a page: hydrate state and honour a ``?salary=`` query."""

        state = AppState.from_payload(payload)
        parts = urlsplit(url)
        state.path = parts.path or "/"
        state.query = dict(parse_qsl(parts.query))

        controller = cls(state, fetcher, recompute_trends=recompute_trends)
        saved_salary = state.query.get(SALARY_PARAM)
        if saved_salary:
            try:
                salary = parse_salary(saved_salary)
            except InvalidSalaryError as error:
                _LOGGER.debug("Ignoring saved salary: %s", error)
                state.query.pop(SALARY_PARAM, None)
            else:
                state.salary_input = saved_salary
                controller._show_results(salary)
        return controller

    # Navigation state ------------------------------------------------------

    @property
    def url(self) -> str:
        """Current page URL including the persisted query."""

        query = urlencode(self.state.query)
        return f"{self.state.path}?{query}" if query else self.state.path

    def submit(self, raw_input: str) -> bool:
        """Move from hero to results when ``raw_input`` is a valid salary."""

        self.state.salary_input = raw_input
        try:
            salary = parse_salary(raw_input)
        except InvalidSalaryError as error:
            _LOGGER.debug("Rejected salary input: %s", error)
            self.state.input_error = True
            return False

        self.state.input_error = False
        self.state.query[SALARY_PARAM] = _format_query_number(salary)
        self._show_results(salary)
        return True

    def back(self) -> None:
        """Return to the hero screen and forget the persisted salary."""

        self.state.query.pop(SALARY_PARAM, None)
        self.state.screen = Screen.HERO

    def recalculate(self) -> ResultsView | None:
        """Recompute results for the entered salary, if any."""

        try:
            salary = parse_salary(self.state.salary_input)
        except InvalidSalaryError:
            return None
        self.state.results = compute_results(self.state, salary)
        return self.state.results

    def _show_results(self, salary: float) -> None:
        self.state.screen = Screen.RESULTS
        self.state.results = compute_results(self.state, salary)

    # Budget year -----------------------------------------------------------

    async def switch_year(self, year: str) -> bool:
        """Replace the active budget with ``year``.

        Every call supersedes earlier pending calls: a response that arrives
        after a newer selection is discarded. Failures leave the current budget
        in place. Returns ``True`` when the budget was replaced.
        """

        self._year_request += 1
        request_id = self._year_request

        if year == self.state.budget.year:
            return False

        try:
            budget = await self._load_budget(year)
        except RuntimeFetchError as error:
            _LOGGER.error("Budget fetch failed for %s: %s", year, error)
            return False

        if request_id != self._year_request:
            _LOGGER.debug("Discarding stale budget response for %s", year)
            return False

        self.state.budget = budget
        if self.state.salary_input:
            self.recalculate()
        return True

    async def _load_budget(self, year: str) -> BudgetDocument:
        raw = await self._fetcher.fetch_budget(self.state.meta.id, year)
        try:
            budget = parse_document(BudgetDocument, raw, f"budget {year}")
        except ConfigurationError as error:
            raise RuntimeFetchError(str(error)) from error

        if self._recompute_trends:
            budget = with_trends(budget, await self._load_previous(year))
        return localize(budget, self.state.strings)

    async def _load_previous(self, year: str) -> BudgetDocument | None:
        try:
            previous_year = previous_budget_key(year)
            raw = await self._fetcher.fetch_budget(self.state.meta.id, previous_year)
            return parse_document(BudgetDocument, raw, f"budget {previous_year}")
        except (TrendUnavailable, RuntimeFetchError, ConfigurationError) as error:
            _LOGGER.info("Trends unavailable for %s: %s", year, error)
            return None

    # Page navigation -------------------------------------------------------

    def switch_language(self, language: str) -> str | None:
        """URL of the page in ``language``, carrying the entered salary along."""

        if language == self.state.current_language:
            return None
        if language not in self.state.meta.available_languages:
            raise ValueError(f"Language '{language}' is not available for {self.state.meta.id}")

        url = f"/{self.state.meta.id}/"
        if language != self.state.meta.default_language:
            url += f"{language}/"

        try:
            salary = parse_salary(self.state.salary_input)
        except InvalidSalaryError:
            return url
        return f"{url}?{urlencode({SALARY_PARAM: _format_query_number(salary)})}"

    def switch_country(self, country_id: str) -> str | None:
        """URL of another country's default page; language and salary reset."""

        if country_id == self.state.meta.id:
            return None
        known = {country.id for country in self.state.global_countries}
        if known and country_id not in known:
            raise ValueError(f"Unknown country '{country_id}'")
        return f"/{country_id}/"


__all__ = [
    "RecalculationController",
    "SALARY_PARAM",
    "compute_results",
    "parse_salary",
]
