# loot/registry.py

"""Registry of loot tables keyed by table id."""

import random
from typing import Optional

from core.exceptions import InvalidLootEntryError
from core.logging import get_logger

from .table import LootDrop, LootTable

logger = get_logger(__name__)


class LootRegistry:
    """Loot tables by id, owned by a world or zone context.

    Registering an id twice replaces the earlier table. Holders keep the id
    and look the table up on every use, so a reload is picked up on the next
    roll.
    """

    def __init__(self):
        self._tables: dict[str, LootTable] = {}
        self.logger = get_logger(f"{__name__}.LootRegistry")

    def register(self, table: LootTable) -> None:
        """Insert or replace a table.

        Raises:
            InvalidLootEntryError: If the table is malformed
        """
        if not isinstance(table, LootTable):
            raise InvalidLootEntryError(f"Expected a LootTable, got {type(table)}")
        table.validate()

        replaced = table.table_id in self._tables
        self._tables[table.table_id] = table

        self.logger.debug(
            "loot_table.registered",
            table_id=table.table_id,
            entry_count=len(table.entries),
            replaced=replaced,
        )

    def get(self, table_id: str) -> Optional[LootTable]:
        """Table for ``table_id`` or None."""
        return self._tables.get(table_id)

    def has(self, table_id: str) -> bool:
        return table_id in self._tables

    def get_all(self) -> list[LootTable]:
        return list(self._tables.values())

    def remove(self, table_id: str) -> bool:
        """Remove a table.

        Returns:
            True if a table was removed, False if the id was unknown
        """
        if table_id not in self._tables:
            return False
        del self._tables[table_id]
        self.logger.debug("loot_table.removed", table_id=table_id)
        return True

    def clear(self) -> None:
        self._tables.clear()
        self.logger.info("loot_registry.cleared")

    @property
    def size(self) -> int:
        return len(self._tables)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, table_id: str) -> bool:
        return self.has(table_id)

    def roll(self, table_id: str, rng: random.Random) -> list[LootDrop]:
        """Roll a table by id; an unknown id yields no drops."""
        table = self._tables.get(table_id)
        if table is None:
            self.logger.debug("loot_table.missing", table_id=table_id)
            return []
        return table.roll(rng)
