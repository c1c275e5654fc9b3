"""Sources of budget documents for runtime year switches."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Protocol

from taxgame.errors import RuntimeFetchError


def budget_path(country_id: str, year: str) -> str:
    """Site-relative URL of a budget document."""

    for segment in (country_id, year):
        if not segment or "/" in segment or "\\" in segment or segment in {".", ".."}:
            raise RuntimeFetchError(f"Invalid path segment {segment!r}")
    return f"/data/countries/{country_id}/budgets/{year}.json"


class BudgetFetcher(Protocol):
    async def fetch_budget(self, country_id: str, year: str) -> Mapping[str, Any]:
        """Return the raw budget document or raise :class:`RuntimeFetchError`."""


class StaticSiteFetcher:
    """Read budgets from a built site on disk."""

    def __init__(self, site_root: Path | str) -> None:
        self.site_root = Path(site_root)

    async def fetch_budget(self, country_id: str, year: str) -> Mapping[str, Any]:
        relative = PurePosixPath(budget_path(country_id, year)).relative_to("/")
        target = self.site_root / Path(relative)
        if not target.is_file():
            raise RuntimeFetchError(f"404 for {relative}")
        try:
            text = await asyncio.to_thread(target.read_text, encoding="utf-8")
            document = json.loads(text)
        except (OSError, json.JSONDecodeError) as error:
            raise RuntimeFetchError(f"Unable to read {relative}: {error}") from error
        if not isinstance(document, dict):
            raise RuntimeFetchError(f"{relative} is not a JSON object")
        return document


class ClientFetcher:
    """Fetch budgets through an HTTP-style client such as Flask's test client.

    The client's ``get`` must return an object exposing ``status_code`` and
    ``get_json()``.
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    async def fetch_budget(self, country_id: str, year: str) -> Mapping[str, Any]:
        url = budget_path(country_id, year)
        response = await asyncio.to_thread(self.client.get, url)
        if not 200 <= response.status_code < 300:
            raise RuntimeFetchError(f"{response.status_code} for {url}")
        document = response.get_json(silent=True)
        if not isinstance(document, dict):
            raise RuntimeFetchError(f"{url} did not return a JSON object")
        return document


__all__ = ["BudgetFetcher", "ClientFetcher", "StaticSiteFetcher", "budget_path"]
