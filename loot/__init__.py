# loot/__init__.py

"""Loot tables and the registry that resolves them by id."""

from .registry import LootRegistry
from .table import LootDrop, LootEntry, LootTable

__all__ = [
    "LootRegistry",
    "LootTable",
    "LootEntry",
    "LootDrop",
]
