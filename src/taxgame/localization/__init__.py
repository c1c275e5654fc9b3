"""Merge language packs into budget documents and UI strings."""

from .catalog import Translator, category_label, get_translator, localize

__all__ = ["Translator", "category_label", "get_translator", "localize"]
