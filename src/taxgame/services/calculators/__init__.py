"""Tax calculators shared by the page compositor and the runtime controller."""

from .tax import calculate_tax, split_tax
from .utils import calculate_progressive_tax, round_change, round_currency

__all__ = [
    "calculate_progressive_tax",
    "calculate_tax",
    "round_change",
    "round_currency",
    "split_tax",
]
