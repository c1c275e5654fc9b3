"""Runtime recalculation: the client-side half of the payload contract."""

from .controller import RecalculationController, compute_results, parse_salary
from .fetcher import BudgetFetcher, ClientFetcher, StaticSiteFetcher
from .state import AppState, ResultsView, Screen

__all__ = [
    "AppState",
    "BudgetFetcher",
    "ClientFetcher",
    "RecalculationController",
    "ResultsView",
    "Screen",
    "StaticSiteFetcher",
    "compute_results",
    "parse_salary",
]
