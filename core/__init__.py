"""Core engine components: world interfaces, clocks, events, errors, settings."""

from .clock import ClockSource, DayNightCycleClock, FallbackClock, FixedClock, WallClock
from .config import SpawnfieldConfig
from .event_handlers import EventHandler, EventHandlerRegistry
from .events import Event, EventType
from .exceptions import (
    ConfigurationError,
    DuplicateSpawnerError,
    EventHandlerException,
    HandlerExecutionError,
    InvalidCellSizeError,
    InvalidConditionError,
    InvalidLootEntryError,
    InvalidSpawnAreaError,
    InvalidSpawnerError,
    SpawnerException,
    SpawnerNotFoundError,
    SpawnfieldException,
)
from .state import WorldEntity, WorldState
from .world import (
    AttributeStatsLookup,
    EntityFactory,
    PlayerStatsLookup,
    RangeQuery,
    WorldSnapshot,
)

__all__ = [
    # World interfaces
    "RangeQuery",
    "EntityFactory",
    "PlayerStatsLookup",
    "AttributeStatsLookup",
    "WorldSnapshot",
    "WorldState",
    "WorldEntity",
    # Clocks
    "ClockSource",
    "FixedClock",
    "DayNightCycleClock",
    "WallClock",
    "FallbackClock",
    # Events
    "Event",
    "EventType",
    "EventHandler",
    "EventHandlerRegistry",
    "SpawnfieldConfig",
    # Exceptions
    "SpawnfieldException",
    "ConfigurationError",
    "InvalidCellSizeError",
    "InvalidSpawnAreaError",
    "InvalidConditionError",
    "InvalidLootEntryError",
    "InvalidSpawnerError",
    "DuplicateSpawnerError",
    "SpawnerException",
    "SpawnerNotFoundError",
    "EventHandlerException",
    "HandlerExecutionError",
]
