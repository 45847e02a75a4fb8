# spatial/entities.py

"""Position utilities for the spatial layer."""

from typing import Any, Protocol


# Type alias for position; y is height, the grid buckets x and z
Position = tuple[float, float, float]


class SpatiallyIndexable(Protocol):
    """Any hashable object exposing its current position."""

    position: Position


def validate_position(position: Any) -> Position:
    """Validate and normalize position to (x, y, z) tuple.

    Args:
        position: Position data (list, tuple, or dict with x/y/z keys).
            Two-element sequences are read as (x, z) on the ground plane.

    Returns:
        Normalized (x, y, z) tuple

    Raises:
        ValueError: If position format is invalid
    """
    if isinstance(position, (list, tuple)):
        if len(position) == 2:
            return (float(position[0]), 0.0, float(position[1]))
        elif len(position) == 3:
            return (float(position[0]), float(position[1]), float(position[2]))
        else:
            raise ValueError(f"Position must have 2 or 3 coordinates, got {len(position)}")
    elif isinstance(position, dict):
        x = position.get("x", position.get("X"))
        y = position.get("y", position.get("Y", 0.0))
        z = position.get("z", position.get("Z"))
        if x is None or z is None:
            raise ValueError("Position dict must have 'x' and 'z' keys")
        return (float(x), float(y), float(z))
    else:
        raise ValueError(f"Invalid position type: {type(position)}")


def calculate_distance_squared(pos1: Position, pos2: Position) -> float:
    """Squared 3D distance; cheaper when only comparing against a radius."""
    dx = pos2[0] - pos1[0]
    dy = pos2[1] - pos1[1]
    dz = pos2[2] - pos1[2]
    return dx * dx + dy * dy + dz * dz


def calculate_distance_3d(pos1: Position, pos2: Position) -> float:
    """Calculate 3D Euclidean distance between two positions.

    Args:
        pos1: First position (x, y, z)
        pos2: Second position (x, y, z)

    Returns:
        3D distance in same units as positions
    """
    return calculate_distance_squared(pos1, pos2) ** 0.5


def calculate_planar_distance(pos1: Position, pos2: Position) -> float:
    """Distance on the ground plane (ignoring height)."""
    dx = pos2[0] - pos1[0]
    dz = pos2[2] - pos1[2]
    return (dx * dx + dz * dz) ** 0.5
