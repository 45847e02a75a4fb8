"""Pytest configuration and shared fixtures."""

import random

import pytest

from core.clock import FixedClock
from core.event_handlers import EventHandlerRegistry
from core.state import WorldState
from loot import LootEntry, LootRegistry, LootTable
from spatial import SpatialGridIndex


class Marker:
    """Bare indexable item for index tests."""

    def __init__(self, position, name=""):
        self.position = position
        self.name = name

    def __repr__(self):
        return f"Marker({self.name!r}, {self.position})"


@pytest.fixture
def make_marker():
    """Factory for bare indexable items."""
    return Marker


@pytest.fixture
def rng():
    """Seeded random source so probabilistic tests are reproducible."""
    return random.Random(1234)


@pytest.fixture
def grid():
    """Create an empty spatial grid with 10-unit cells."""
    return SpatialGridIndex(cell_size=10.0)


@pytest.fixture
def world(grid):
    """Create an in-memory host world backed by the grid."""
    return WorldState(index=grid)


@pytest.fixture
def loot_registry():
    """Registry with a goblin source table and a goblin drop table."""
    registry = LootRegistry()
    registry.register(LootTable("goblin_camp", entries=(LootEntry("goblin"),)))
    registry.register(
        LootTable(
            "goblin_drops",
            name="Goblin drops",
            entries=(
                LootEntry("bronze_sword", weight=1),
                LootEntry("bones", weight=9),
            ),
            guaranteed=(LootEntry("coins", quantity_min=5, quantity_max=15),),
        )
    )
    return registry


@pytest.fixture
def noon():
    return FixedClock(12.0)


@pytest.fixture
def events():
    """Create a fresh EventHandlerRegistry for each test."""
    return EventHandlerRegistry()


@pytest.fixture
def snapshot(world, loot_registry, rng, noon):
    """Factory for world snapshots at a given time."""

    def make(now=0.0, clock=noon):
        return world.snapshot(now, loot_registry, rng, clock=clock)

    return make
