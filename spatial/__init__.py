# spatial/__init__.py

"""Spatial layer for SPAWNFIELD - positions, range indexes and spawn areas."""

from .areas import CircularSpawnArea, PointSpawnArea, RectangularSpawnArea, SpawnArea
from .entities import (
    Position,
    SpatiallyIndexable,
    calculate_distance_3d,
    calculate_distance_squared,
    calculate_planar_distance,
    validate_position,
)
from .grid import SpatialGridIndex
from .rtree_index import RTreeIndex

__all__ = [
    "SpatialGridIndex",
    "RTreeIndex",
    "SpawnArea",
    "CircularSpawnArea",
    "PointSpawnArea",
    "RectangularSpawnArea",
    "Position",
    "SpatiallyIndexable",
    "validate_position",
    "calculate_distance_3d",
    "calculate_distance_squared",
    "calculate_planar_distance",
]
