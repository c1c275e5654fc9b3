"""Number helpers for the results view."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

INDIAN_SYSTEM = "indian"

_INDIAN_UNITS = ((10_000_000, "Cr", 1), (100_000, "L", 1), (1_000, "k", 0))
_INTERNATIONAL_UNITS = ((1_000_000_000, "B", 1), (1_000_000, "M", 1), (1_000, "k", 0))


def _round_half_up(value: Decimal, digits: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def format_compact(amount: float, number_format: Mapping[str, Any] | None = None) -> str:
    """Short amount label such as ``1.5L`` or ``2.3M``; ties round up."""

    system = (number_format or {}).get("system", "international")
    units = _INDIAN_UNITS if system == INDIAN_SYSTEM else _INTERNATIONAL_UNITS
    for threshold, suffix, digits in units:
        if amount >= threshold:
            return f"{_round_half_up(Decimal(str(amount)) / threshold, digits)}{suffix}"
    return f"{amount:g}"


def trend_label(change: float | None) -> str | None:
    """Arrow label for a category trend; ``None`` when flat or unknown."""

    if change is None or change == 0:
        return None
    arrow = "↑" if change > 0 else "↓"
    return f"{arrow}{abs(change):g}%"


__all__ = ["format_compact", "trend_label"]
