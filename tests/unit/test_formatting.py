"""Unit coverage for results-view number helpers."""

from __future__ import annotations

import pytest

from taxgame.runtime.formatting import format_compact, trend_label


@pytest.mark.parametrize(
    ("amount", "system", "expected"),
    [
        (25000000, "indian", "2.5Cr"),
        (150000, "indian", "1.5L"),
        (25000, "indian", "25k"),
        (2500000000, "international", "2.5B"),
        (1500000, "international", "1.5M"),
        (999, "international", "999"),
    ],
)
def test_format_compact(amount: float, system: str, expected: str) -> None:
    assert format_compact(amount, {"system": system}) == expected


def test_format_compact_defaults_to_international() -> None:
    assert format_compact(1500000) == "1.5M"


def test_trend_label() -> None:
    assert trend_label(25.0) == "↑25%"
    assert trend_label(-3.5) == "↓3.5%"
    assert trend_label(0) is None
    assert trend_label(None) is None


@pytest.mark.parametrize(
    ("amount", "system", "expected"),
    [
        (2500, "international", "3k"),
        (4500, "international", "5k"),
        (3500, "international", "4k"),
        (12500000, "indian", "1.3Cr"),
        (1250000, "international", "1.3M"),
        (93600.0, "international", "94k"),
    ],
)
def test_format_compact_rounds_ties_up(amount: float, system: str, expected: str) -> None:
    assert format_compact(amount, {"system": system}) == expected
