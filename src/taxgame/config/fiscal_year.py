"""Typed budget-year keys following the ``YYYY-YY`` naming convention."""

from __future__ import annotations

import re
from dataclasses import dataclass

from taxgame.errors import FiscalYearParseError

_KEY_PATTERN = re.compile(r"^(?P<start>\d{4})-(?P<suffix>\d{2})$")


@dataclass(frozen=True, order=True)
class FiscalYearKey:
    """A budget file key such as ``2026-27``."""

    start: int
    suffix: str

    @classmethod
    def parse(cls, value: str) -> FiscalYearKey:
        """Parse ``value`` or raise :class:`FiscalYearParseError`."""

        match = _KEY_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise FiscalYearParseError(
                f"Budget key {value!r} does not follow the YYYY-YY convention"
            )
        return cls(start=int(match.group("start")), suffix=match.group("suffix"))

    def predecessor(self) -> FiscalYearKey:
        """Return the key of the previous budget year (``2026-27`` -> ``2025-26``)."""

        if self.start <= 1000:
            raise FiscalYearParseError(f"Budget key {self} has no four-digit predecessor")
        return FiscalYearKey(start=self.start - 1, suffix=f"{self.start % 100:02d}")

    def __str__(self) -> str:
        return f"{self.start}-{self.suffix}"


def previous_budget_key(year: str) -> str:
    """Return the predecessor of the ``year`` key as a string."""

    return str(FiscalYearKey.parse(year).predecessor())


__all__ = ["FiscalYearKey", "previous_budget_key"]
