"""Threshold achievements and the citizen level shown with a tax result."""

from __future__ import annotations

import math
from collections.abc import Sequence

from taxgame.config.schema import Achievement

MIN_LEVEL = 1
MAX_LEVEL = 99


def unlocked_achievements(
    total_tax: float, achievements: Sequence[Achievement]
) -> list[Achievement]:
    """Achievements whose ``min_amount`` is covered by ``total_tax``, lowest first."""

    unlocked = [entry for entry in achievements if total_tax >= entry.min_amount]
    return sorted(unlocked, key=lambda entry: entry.min_amount)


def next_achievement(
    total_tax: float, achievements: Sequence[Achievement]
) -> Achievement | None:
    """The cheapest achievement not yet unlocked, if any."""

    locked = [entry for entry in achievements if total_tax < entry.min_amount]
    return min(locked, key=lambda entry: entry.min_amount, default=None)


def citizen_level(total_tax: float) -> int:
    """Logarithmic level between 1 and 99 derived from the tax paid."""

    if total_tax <= 0:
        return MIN_LEVEL
    level = math.floor(math.log10(total_tax) * 10) - 30
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


__all__ = ["citizen_level", "next_achievement", "unlocked_achievements"]
