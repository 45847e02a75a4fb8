# core/world.py

"""Narrow interfaces the spawning engine consumes from the host world."""

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Protocol

from .clock import ClockSource

if TYPE_CHECKING:
    from loot import LootRegistry
    from spatial import SpatialGridIndex
    from spatial.entities import Position


class RangeQuery(Protocol):
    """Answers "which entities are within radius of a point"."""

    def entities_near(self, position: "Position", radius: float) -> list[Any]: ...


class EntityFactory(Protocol):
    """Creates entities in the host world.

    Returns a handle with a ``position`` attribute, or None if the host
    refused to create the entity. ``entity_exists`` tells whether a handle
    it created is still alive in the world.
    """

    def create_entity(
        self,
        kind: str,
        position: "Position",
        configuration: dict[str, Any],
    ) -> Optional[Any]: ...

    def entity_exists(self, entity: Any) -> bool: ...


class PlayerStatsLookup(Protocol):
    """Reads player-related facts off host entities."""

    def is_player(self, entity: Any) -> bool: ...

    def combat_level(self, entity: Any) -> Optional[float]: ...


class AttributeStatsLookup:
    """PlayerStatsLookup reading ``kind`` and ``combat_level`` attributes or keys."""

    def __init__(self, player_kind: str = "player"):
        self.player_kind = player_kind

    @staticmethod
    def _read(entity: Any, name: str) -> Any:
        if isinstance(entity, dict):
            return entity.get(name)
        return getattr(entity, name, None)

    def is_player(self, entity: Any) -> bool:
        return self._read(entity, "kind") == self.player_kind

    def combat_level(self, entity: Any) -> Optional[float]:
        return self._read(entity, "combat_level")


@dataclass
class WorldSnapshot:
    """Everything a spawner may look at or touch during one evaluation.

    ``index`` is where freshly spawned entities are registered and where
    spacing checks look; it is usually the same object as ``range_query``.
    """

    now: float
    range_query: RangeQuery
    entity_factory: EntityFactory
    index: "SpatialGridIndex"
    loot_registry: "LootRegistry"
    clock: Optional[ClockSource] = None
    player_stats: PlayerStatsLookup = field(default_factory=AttributeStatsLookup)
    rng: random.Random = field(default_factory=random.Random)
