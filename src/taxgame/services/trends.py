"""Year-over-year changes in each category's share of spending."""

from __future__ import annotations

import logging

from taxgame.config.data_loader import DataRepository
from taxgame.config.fiscal_year import previous_budget_key
from taxgame.config.schema import BudgetDocument
from taxgame.errors import SkippableDataError, TrendUnavailable

from .calculators import round_change

_LOGGER = logging.getLogger(__name__)


def with_trends(current: BudgetDocument, previous: BudgetDocument | None) -> BudgetDocument:
    """Return ``current`` with a ``change`` percentage on comparable categories.

    A category gets no ``change`` when it is new this year or when its previous
    share was zero.
    """

    if previous is None or not previous.categories:
        return current

    previous_shares = {category.id: category.percent for category in previous.categories}

    categories = []
    for category in current.categories:
        previous_share = previous_shares.get(category.id)
        change = None
        if previous_share is not None and previous_share != 0:
            change = round_change((category.percent - previous_share) / previous_share * 100)
        categories.append(category.model_copy(update={"change": change}))

    return current.with_categories(categories)


def resolve_trends(
    repository: DataRepository, country_id: str, budget: BudgetDocument, budget_key: str
) -> BudgetDocument:
    """Apply trends against the budget preceding ``budget_key`` when available."""

    try:
        previous_key = previous_budget_key(budget_key)
        previous = repository.find_budget(country_id, previous_key)
    except TrendUnavailable as error:
        _LOGGER.warning("Trends disabled for %s %s: %s", country_id, budget_key, error)
        return budget
    except SkippableDataError as error:
        _LOGGER.warning("Trends disabled for %s %s: %s", country_id, budget_key, error)
        return budget

    if previous is None:
        _LOGGER.info("No %s budget for %s; trends disabled", previous_key, country_id)
        return budget

    _LOGGER.info("Trends: comparing %s vs %s for %s", budget_key, previous_key, country_id)
    return with_trends(budget, previous)


__all__ = ["resolve_trends", "with_trends"]
