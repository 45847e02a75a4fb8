# spatial/areas.py

"""Spawn area shapes.

Every shape offers the same two operations, ``get_random_position`` and
``is_valid_position``, so a spawner never needs to know which shape backs it.
A sampled position is always valid for the area that produced it.
"""

import math
import random
from abc import ABC, abstractmethod

from core.exceptions import InvalidSpawnAreaError

from .entities import Position, calculate_distance_squared, validate_position

# Float slack for membership tests on points sampled right at the boundary
_EPSILON = 1e-9


class SpawnArea(ABC):
    """Base class for spawn regions.

    Args:
        min_spacing: Minimum distance a new spawn keeps from indexed items
            when ``avoid_overlap`` is set. Enforced by the spawner.
        avoid_overlap: Reject candidates that crowd existing items
        max_height: Half-range of the vertical jitter; 0 disables it
    """

    shape = "abstract"

    def __init__(self, min_spacing: float = 0.0, avoid_overlap: bool = False, max_height: float = 0.0):
        if min_spacing < 0:
            raise InvalidSpawnAreaError(f"min_spacing must be >= 0, got {min_spacing}")
        if max_height < 0:
            raise InvalidSpawnAreaError(f"max_height must be >= 0, got {max_height}")
        self.min_spacing = float(min_spacing)
        self.avoid_overlap = avoid_overlap
        self.max_height = float(max_height)

    @staticmethod
    def _normalize_center(center) -> Position:
        try:
            return validate_position(center)
        except (TypeError, ValueError) as e:
            raise InvalidSpawnAreaError(f"Invalid area center {center!r}: {e}") from e

    @abstractmethod
    def get_random_position(self, rng: random.Random) -> Position:
        """Sample a position inside the area."""

    @abstractmethod
    def is_valid_position(self, position: Position) -> bool:
        """Check whether a position lies inside the area."""


class CircularSpawnArea(SpawnArea):
    """Disc of ``radius`` around ``center``, optionally jittered in height."""

    shape = "circle"

    def __init__(
        self,
        center: Position,
        radius: float,
        min_spacing: float = 0.0,
        avoid_overlap: bool = False,
        max_height: float = 0.0,
    ):
        super().__init__(min_spacing, avoid_overlap, max_height)
        if not radius > 0:
            raise InvalidSpawnAreaError(f"Circle radius must be positive, got {radius}")
        self.center = self._normalize_center(center)
        self.radius = float(radius)

    def get_random_position(self, rng: random.Random) -> Position:
        """Sample uniformly over the disc area.

        The radial distance is ``sqrt(U) * radius``; plain ``U * radius``
        would crowd points around the center. Height jitter is capped so the
        3D point never leaves the sphere tested by ``is_valid_position``.
        """
        angle = rng.random() * 2.0 * math.pi
        distance = math.sqrt(rng.random()) * self.radius

        x = self.center[0] + math.cos(angle) * distance
        z = self.center[2] + math.sin(angle) * distance
        y = self.center[1]

        if self.max_height > 0:
            headroom = math.sqrt(max(self.radius * self.radius - distance * distance, 0.0))
            y += rng.uniform(-1.0, 1.0) * min(self.max_height, headroom)

        return (x, y, z)

    def is_valid_position(self, position: Position) -> bool:
        limit = self.radius + _EPSILON
        return calculate_distance_squared(position, self.center) <= limit * limit


class PointSpawnArea(SpawnArea):
    """Degenerate area: every spawn lands exactly on ``center``."""

    shape = "point"

    def __init__(self, center: Position, min_spacing: float = 0.0, avoid_overlap: bool = False):
        super().__init__(min_spacing, avoid_overlap, 0.0)
        self.center = self._normalize_center(center)

    def get_random_position(self, rng: random.Random) -> Position:
        return self.center

    def is_valid_position(self, position: Position) -> bool:
        return calculate_distance_squared(position, self.center) <= _EPSILON * _EPSILON


class RectangularSpawnArea(SpawnArea):
    """Axis-aligned ``width`` (x) by ``depth`` (z) rectangle centered on ``center``."""

    shape = "rectangle"

    def __init__(
        self,
        center: Position,
        width: float,
        depth: float,
        min_spacing: float = 0.0,
        avoid_overlap: bool = False,
        max_height: float = 0.0,
    ):
        super().__init__(min_spacing, avoid_overlap, max_height)
        if not width > 0 or not depth > 0:
            raise InvalidSpawnAreaError(
                f"Rectangle width and depth must be positive, got {width} x {depth}"
            )
        self.center = self._normalize_center(center)
        self.width = float(width)
        self.depth = float(depth)

    def get_random_position(self, rng: random.Random) -> Position:
        x = self.center[0] + (rng.random() - 0.5) * self.width
        z = self.center[2] + (rng.random() - 0.5) * self.depth
        y = self.center[1]
        if self.max_height > 0:
            y += rng.uniform(-self.max_height, self.max_height)
        return (x, y, z)

    def is_valid_position(self, position: Position) -> bool:
        return (
            abs(position[0] - self.center[0]) <= self.width / 2 + _EPSILON
            and abs(position[2] - self.center[2]) <= self.depth / 2 + _EPSILON
            and abs(position[1] - self.center[1]) <= self.max_height + _EPSILON
        )
