"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
from collections.abc import Sequence

from taxgame.config.schema import TaxBracket


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``.

    Each bracket taxes the slice between the previous bracket's limit and its
    own; walking stops once ``amount`` no longer reaches the next slice.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    previous_limit = 0.0

    for bracket in brackets:
        if amount <= previous_limit:
            break

        upper = math.inf if bracket.upper_bound is None else bracket.upper_bound
        taxable_at_rate = min(amount, upper) - previous_limit
        if taxable_at_rate > 0:
            total += taxable_at_rate * bracket.rate

        previous_limit = upper

    return total


def round_currency(value: float) -> int:
    """Round monetary amounts half-up to whole currency units."""

    return int(math.floor(value + 0.5))


def round_change(value: float) -> float:
    """Round percentage changes to one decimal."""

    return round(value, 1)
