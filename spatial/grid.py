# spatial/grid.py

"""Uniform grid hash for radius queries over tracked world items."""

import math
from typing import Any, Iterator

from core.exceptions import InvalidCellSizeError
from core.logging import get_logger

from .entities import Position, calculate_distance_squared

logger = get_logger(__name__)

CellKey = tuple[int, int]


class SpatialGridIndex:
    """Planar grid mapping (x, z) cells to sets of items.

    Items are bucketed by ``(floor(x / cell_size), floor(z / cell_size))``;
    height is ignored for bucketing but counts in distance checks. Each item
    lives in exactly one cell, the one matching the position it had when it
    was added. The index does not follow items around: callers must
    ``remove`` an item before changing its position and ``add`` it again
    afterwards (or use ``relocate``).

    ``cell_size`` should be close to the typical query range so that a query
    only touches a handful of cells. Cells are created and dropped lazily, so
    a sparse world keeps a small footprint.
    """

    def __init__(self, cell_size: float = 50.0):
        """Initialize an empty grid.

        Args:
            cell_size: Edge length of one cell, must be positive

        Raises:
            InvalidCellSizeError: If cell_size is not positive
        """
        if not cell_size > 0:
            raise InvalidCellSizeError(f"Cell size must be positive, got {cell_size}")

        self._cell_size = float(cell_size)
        self._cells: dict[CellKey, set[Any]] = {}

        self.logger = get_logger(f"{__name__}.SpatialGridIndex")

    @property
    def cell_size(self) -> float:
        """Edge length of one grid cell."""
        return self._cell_size

    def cell_key(self, position: Position) -> CellKey:
        """Cell coordinates for a position."""
        return (
            math.floor(position[0] / self._cell_size),
            math.floor(position[2] / self._cell_size),
        )

    def add(self, item: Any) -> None:
        """Insert item into the cell of its current position."""
        key = self.cell_key(item.position)
        bucket = self._cells.get(key)
        if bucket is None:
            bucket = self._cells[key] = set()
        bucket.add(item)

    def remove(self, item: Any) -> None:
        """Remove item from the cell of its current position.

        The position must be the one the item had when it was added.
        Removing an item that is not indexed there is a no-op.
        """
        key = self.cell_key(item.position)
        bucket = self._cells.get(key)
        if bucket is None:
            return

        bucket.discard(item)
        if not bucket:
            del self._cells[key]

    def relocate(self, item: Any, new_position: Position) -> None:
        """Move an indexed item, keeping the index consistent.

        Assigns ``item.position`` between the remove and the add.
        """
        self.remove(item)
        item.position = new_position
        self.add(item)

    def get_in_range(self, position: Position, radius: float) -> list[Any]:
        """Find all items within ``radius`` (3D distance) of ``position``.

        Args:
            position: Query point (x, y, z)
            radius: Search radius; negative radii match nothing

        Returns:
            Matching items in no particular order, without duplicates
        """
        if radius < 0:
            return []

        cx, cz = self.cell_key(position)
        cell_range = math.ceil(radius / self._cell_size)
        radius_squared = radius * radius

        if (2 * cell_range + 1) ** 2 > len(self._cells):
            # Fewer occupied cells than neighborhood keys: scan what exists
            buckets = self._cells.values()
        else:
            buckets = (
                self._cells.get((cx + dx, cz + dz))
                for dx in range(-cell_range, cell_range + 1)
                for dz in range(-cell_range, cell_range + 1)
            )

        results = []
        for bucket in buckets:
            if not bucket:
                continue
            for item in bucket:
                if calculate_distance_squared(position, item.position) <= radius_squared:
                    results.append(item)

        return results

    def entities_near(self, position: Position, radius: float) -> list[Any]:
        """Alias of ``get_in_range`` so the grid can serve as a world RangeQuery."""
        return self.get_in_range(position, radius)

    def clear(self) -> None:
        """Drop every cell."""
        self._cells.clear()
        self.logger.debug("spatial_grid.cleared")

    @property
    def size(self) -> int:
        """Total number of indexed items, summed over cells."""
        return sum(len(bucket) for bucket in self._cells.values())

    @property
    def cell_count(self) -> int:
        """Number of non-empty cells."""
        return len(self._cells)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, item: Any) -> bool:
        bucket = self._cells.get(self.cell_key(item.position))
        return bucket is not None and item in bucket

    def __iter__(self) -> Iterator[Any]:
        for bucket in self._cells.values():
            yield from bucket
