# spawning/__init__.py

"""Spawners, their gating conditions and the tick scheduler."""

from .conditions import (
    CustomCondition,
    Gate,
    LevelRange,
    SpawnConditionEvaluator,
    SpawnConditions,
    TimeWindow,
)
from .definitions import (
    LootTableDefinition,
    SpawnerDefinition,
    load_loot_table,
    load_loot_tables,
    load_spawner,
)
from .scheduler import SpawnerScheduler
from .simulation import SpawnSimulation
from .spawner import (
    DeferReason,
    SpawnAttemptResult,
    Spawner,
    SpawnerState,
    SpawnOutcome,
)

__all__ = [
    "Spawner",
    "SpawnerState",
    "SpawnOutcome",
    "SpawnAttemptResult",
    "DeferReason",
    "SpawnerScheduler",
    "SpawnSimulation",
    "SpawnConditions",
    "SpawnConditionEvaluator",
    "TimeWindow",
    "LevelRange",
    "Gate",
    "CustomCondition",
    "SpawnerDefinition",
    "LootTableDefinition",
    "load_spawner",
    "load_loot_table",
    "load_loot_tables",
]
