# spatial/rtree_index.py

"""R-tree backed range queries with the same contract as SpatialGridIndex."""

from typing import Any, Iterator

import rtree.index

from core.logging import get_logger

from .entities import Position, calculate_distance_squared

logger = get_logger(__name__)


def _point_bbox(position: Position) -> tuple[float, float, float, float, float, float]:
    return (position[0], position[1], position[2], position[0], position[1], position[2])


class RTreeIndex:
    """R-tree alternative to the uniform grid.

    Worth using when entity density is very uneven (a crowded town next to
    empty wilderness), where no single grid cell size fits. Same caller
    obligations as the grid: ``remove`` before mutating an item's position.
    """

    def __init__(self):
        """Initialize an empty 3D R-tree."""
        self._rtree = self._new_tree()

        # rtree keys are ints; objects stay here so they are never pickled
        self._items: dict[int, Any] = {}

        self.logger = get_logger(f"{__name__}.RTreeIndex")

    @staticmethod
    def _new_tree() -> rtree.index.Index:
        properties = rtree.index.Property()
        properties.dimension = 3
        return rtree.index.Index(properties=properties)

    def add(self, item: Any) -> None:
        """Insert item at its current position."""
        key = id(item)
        if key in self._items:
            return
        self._rtree.insert(key, _point_bbox(item.position))
        self._items[key] = item

    def remove(self, item: Any) -> None:
        """Remove item; its position must be the one it was added with."""
        key = id(item)
        if key not in self._items:
            return
        self._rtree.delete(key, _point_bbox(item.position))
        del self._items[key]

    def relocate(self, item: Any, new_position: Position) -> None:
        """Move an indexed item, keeping the tree consistent."""
        self.remove(item)
        item.position = new_position
        self.add(item)

    def get_in_range(self, position: Position, radius: float) -> list[Any]:
        """Find all items within ``radius`` (3D distance) of ``position``."""
        if radius < 0:
            return []

        bbox = (
            position[0] - radius,
            position[1] - radius,
            position[2] - radius,
            position[0] + radius,
            position[1] + radius,
            position[2] + radius,
        )
        radius_squared = radius * radius

        results = []
        for key in self._rtree.intersection(bbox):
            item = self._items.get(key)
            if item is None:
                continue
            if calculate_distance_squared(position, item.position) <= radius_squared:
                results.append(item)
        return results

    def entities_near(self, position: Position, radius: float) -> list[Any]:
        """Alias of ``get_in_range`` for the world RangeQuery interface."""
        return self.get_in_range(position, radius)

    def nearest(self, position: Position, k: int = 1) -> list[tuple[Any, float]]:
        """Find the k nearest items to a point.

        Returns:
            List of (item, distance) tuples sorted by distance
        """
        results = []
        for key in self._rtree.nearest(_point_bbox(position), k):
            item = self._items.get(key)
            if item is not None:
                results.append((item, calculate_distance_squared(position, item.position) ** 0.5))

        results.sort(key=lambda x: x[1])
        return results[:k]

    def clear(self) -> None:
        """Drop every item by rebuilding the tree."""
        self._rtree = self._new_tree()
        self._items.clear()
        self.logger.debug("rtree_index.cleared")

    @property
    def size(self) -> int:
        """Number of indexed items."""
        return len(self._items)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, item: Any) -> bool:
        return id(item) in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items.values()))
