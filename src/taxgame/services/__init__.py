"""Service-layer helpers: tax engine, trends and achievements."""

from .achievements import citizen_level, unlocked_achievements
from .calculators import calculate_tax, split_tax
from .trends import resolve_trends, with_trends

__all__ = [
    "calculate_tax",
    "citizen_level",
    "resolve_trends",
    "split_tax",
    "unlocked_achievements",
    "with_trends",
]
