# loot/table.py

"""Weighted loot tables."""

import bisect
import random
from dataclasses import dataclass, field
from itertools import accumulate

from core.exceptions import InvalidLootEntryError


@dataclass(frozen=True)
class LootEntry:
    """One droppable item with its relative weight and quantity range."""

    item_id: str
    weight: float = 1.0
    quantity_min: int = 1
    quantity_max: int = 1

    def __post_init__(self):
        if not self.weight > 0:
            raise InvalidLootEntryError(
                f"Loot entry {self.item_id!r} must have a positive weight, got {self.weight}"
            )
        if self.quantity_min < 0:
            raise InvalidLootEntryError(
                f"Loot entry {self.item_id!r} has negative quantity_min {self.quantity_min}"
            )
        if self.quantity_max < self.quantity_min:
            raise InvalidLootEntryError(
                f"Loot entry {self.item_id!r} has quantity_max {self.quantity_max} "
                f"below quantity_min {self.quantity_min}"
            )

    def roll_quantity(self, rng: random.Random) -> int:
        """Uniform integer in [quantity_min, quantity_max]."""
        return rng.randint(self.quantity_min, self.quantity_max)


@dataclass(frozen=True)
class LootDrop:
    """Result of a roll."""

    item_id: str
    quantity: int


@dataclass(frozen=True)
class LootTable:
    """Named, ordered, weighted list of drops.

    ``guaranteed`` entries drop on every roll (their weight is ignored).
    Then ``roll_count`` entries are picked by weight, with replacement.
    A table without entries is valid and only yields its guaranteed drops.
    """

    table_id: str
    name: str = ""
    entries: tuple[LootEntry, ...] = ()
    roll_count: int = 1
    guaranteed: tuple[LootEntry, ...] = ()
    _cumulative: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Accept lists from callers, store tuples
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "guaranteed", tuple(self.guaranteed))
        if not self.name:
            object.__setattr__(self, "name", self.table_id)
        self.validate()
        object.__setattr__(
            self, "_cumulative", tuple(accumulate(entry.weight for entry in self.entries))
        )

    def validate(self) -> None:
        """Check the table is well formed.

        Raises:
            InvalidLootEntryError: If an entry is not a positive-weight LootEntry
                or roll_count is negative
        """
        if self.roll_count < 0:
            raise InvalidLootEntryError(
                f"Loot table {self.table_id!r} has negative roll_count {self.roll_count}"
            )
        for entry in self.entries + self.guaranteed:
            if not isinstance(entry, LootEntry):
                raise InvalidLootEntryError(
                    f"Loot table {self.table_id!r} contains a non-entry: {entry!r}"
                )
            if not entry.weight > 0:
                raise InvalidLootEntryError(
                    f"Loot table {self.table_id!r} entry {entry.item_id!r} has weight {entry.weight}"
                )

    @property
    def total_weight(self) -> float:
        return self._cumulative[-1] if self._cumulative else 0.0

    def choose(self, rng: random.Random) -> LootEntry | None:
        """Pick one entry by weight, or None if the table has no entries."""
        if not self.entries:
            return None
        target = rng.random() * self.total_weight
        index = bisect.bisect_right(self._cumulative, target)
        # rng.random() < 1.0, the clamp only guards float rounding on the last bucket
        return self.entries[min(index, len(self.entries) - 1)]

    def roll(self, rng: random.Random) -> list[LootDrop]:
        """Resolve the table into concrete drops.

        Args:
            rng: Random source; pass a seeded ``random.Random`` for reproducible drops

        Returns:
            Guaranteed drops first, then one drop per weighted pick
        """
        drops = [LootDrop(entry.item_id, entry.roll_quantity(rng)) for entry in self.guaranteed]

        if not self.entries:
            return drops

        for _ in range(self.roll_count):
            entry = self.choose(rng)
            drops.append(LootDrop(entry.item_id, entry.roll_quantity(rng)))

        return drops
