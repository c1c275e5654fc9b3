"""Progressive income tax and per-category split."""

from __future__ import annotations

import math
from collections.abc import Sequence

from taxgame.config.schema import BudgetCategory, CategoryBreakdownEntry, TaxRules

from .utils import calculate_progressive_tax, round_currency


def calculate_tax(salary: float, tax_rules: TaxRules) -> int:
    """Return the total tax owed on ``salary`` under ``tax_rules``.

    The standard deduction is removed first, slabs are accumulated, and cess is
    then levied on the slab tax itself rather than on income.
    """

    if not math.isfinite(salary):
        raise ValueError("Salary must be a finite number")
    if salary < 0:
        raise ValueError("Salary cannot be negative")

    taxable_income = salary - tax_rules.standard_deduction
    if taxable_income <= 0:
        return 0

    tax = calculate_progressive_tax(taxable_income, tax_rules.brackets)
    if tax_rules.cess:
        tax += tax * tax_rules.cess

    return round_currency(tax)


def split_tax(
    total_tax: float, categories: Sequence[BudgetCategory]
) -> list[CategoryBreakdownEntry]:
    """Attribute ``total_tax`` to ``categories`` by their share of spending.

    Amounts are rounded independently, so they need not add up to
    ``total_tax``. Entries are ordered by amount, largest first; equal amounts
    keep their budget order.
    """

    entries = [
        CategoryBreakdownEntry(
            id=category.id,
            percent=category.percent,
            icon=category.icon,
            label=category.label or category.id,
            change=category.change,
            amount=round_currency(total_tax * category.percent),
        )
        for category in categories
    ]
    return sorted(entries, key=lambda entry: entry.amount, reverse=True)


__all__ = ["calculate_tax", "split_tax"]
