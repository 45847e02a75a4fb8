# core/exceptions.py

"""Exception hierarchy for SPAWNFIELD."""


class SpawnfieldException(Exception):
    """Base exception for all SPAWNFIELD errors."""

    pass


# Configuration Exceptions
class ConfigurationError(SpawnfieldException):
    """Raised when a spawner, area, condition or loot definition is invalid."""

    pass


class InvalidCellSizeError(ConfigurationError):
    """Raised when a spatial grid is created with a non-positive cell size."""

    pass


class InvalidSpawnAreaError(ConfigurationError):
    """Raised when a spawn area has invalid dimensions."""

    pass


class InvalidConditionError(ConfigurationError):
    """Raised when spawn conditions are malformed."""

    pass


class InvalidLootEntryError(ConfigurationError):
    """Raised when a loot entry has a non-positive weight or bad quantity range."""

    pass


class InvalidSpawnerError(ConfigurationError):
    """Raised when spawner settings are out of range."""

    pass


class DuplicateSpawnerError(ConfigurationError):
    """Raised when a spawner id is registered twice."""

    pass


# Spawner Exceptions
class SpawnerException(SpawnfieldException):
    """Base exception for spawner scheduling operations."""

    pass


class SpawnerNotFoundError(SpawnerException):
    """Raised when a requested spawner is not registered."""

    pass


# Event Handler Exceptions
class EventHandlerException(SpawnfieldException):
    """Base exception for event handler operations."""

    pass


class HandlerExecutionError(EventHandlerException):
    """Raised when an event handler fails during execution."""

    pass
