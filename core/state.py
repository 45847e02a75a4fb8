# core/state.py

"""Minimal in-memory host world.

Real hosts bring their own entity store; this one exists so the engine can
be driven end to end (tests, tooling, small servers) without one.
"""

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID, uuid4

from .clock import ClockSource
from .logging import get_logger
from .world import WorldSnapshot

if TYPE_CHECKING:
    from loot import LootRegistry
    from spatial import SpatialGridIndex
    from spatial.entities import Position


@dataclass(eq=False)
class WorldEntity:
    """A world entity handle. Hashes by identity so it can sit in index cells."""

    kind: str
    position: "Position"
    combat_level: Optional[float] = None
    entity_id: UUID = field(default_factory=uuid4)
    metadata: dict[str, Any] = field(default_factory=dict)


class WorldState:
    """Entities by id and type, backed by a spatial index.

    Implements the RangeQuery, EntityFactory and PlayerStatsLookup
    interfaces. Entities created through ``create_entity`` are NOT indexed
    here; the spawner registers them itself. Entities placed with
    ``add_entity`` are indexed immediately.
    """

    def __init__(self, index: "SpatialGridIndex", player_kind: str = "player"):
        self.index = index
        self.player_kind = player_kind
        self.entities: dict[UUID, WorldEntity] = {}
        self.entity_types: dict[str, set[UUID]] = {}
        self.logger = get_logger(f"{__name__}.WorldState")

    def _track(self, entity: WorldEntity) -> None:
        self.entities[entity.entity_id] = entity
        self.entity_types.setdefault(entity.kind, set()).add(entity.entity_id)

    def add_entity(
        self,
        kind: str,
        position: "Position",
        combat_level: Optional[float] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> WorldEntity:
        """Place an entity in the world and index it."""
        entity = WorldEntity(kind, position, combat_level, metadata=metadata or {})
        self._track(entity)
        self.index.add(entity)
        return entity

    def add_player(self, position: "Position", combat_level: Optional[float] = None) -> WorldEntity:
        return self.add_entity(self.player_kind, position, combat_level)

    def create_entity(
        self,
        kind: str,
        position: "Position",
        configuration: dict[str, Any],
    ) -> Optional[WorldEntity]:
        """EntityFactory hook used by spawners."""
        entity = WorldEntity(kind, position, metadata=dict(configuration))
        self._track(entity)
        self.logger.debug("entity.created", entity_id=str(entity.entity_id), kind=kind)
        return entity

    def entity_exists(self, entity: Any) -> bool:
        return getattr(entity, "entity_id", None) in self.entities

    def move_entity(self, entity: WorldEntity, position: "Position") -> None:
        """Move an entity, keeping the index in step."""
        self.index.relocate(entity, position)

    def destroy_entity(self, entity: WorldEntity) -> None:
        """Remove an entity from the world and the index."""
        self.index.remove(entity)
        self.entities.pop(entity.entity_id, None)
        ids = self.entity_types.get(entity.kind)
        if ids is not None:
            ids.discard(entity.entity_id)
        self.logger.debug("entity.destroyed", entity_id=str(entity.entity_id))

    def get_entity(self, entity_id: UUID) -> Optional[WorldEntity]:
        return self.entities.get(entity_id)

    def get_entities_by_type(self, kind: str) -> set[UUID]:
        return self.entity_types.get(kind, set()).copy()

    def entity_count(self) -> int:
        return len(self.entities)

    # RangeQuery

    def entities_near(self, position: "Position", radius: float) -> list[WorldEntity]:
        return self.index.get_in_range(position, radius)

    # PlayerStatsLookup

    def is_player(self, entity: Any) -> bool:
        return getattr(entity, "kind", None) == self.player_kind

    def combat_level(self, entity: Any) -> Optional[float]:
        return getattr(entity, "combat_level", None)

    def snapshot(
        self,
        now: float,
        loot_registry: "LootRegistry",
        rng: random.Random,
        clock: Optional[ClockSource] = None,
    ) -> WorldSnapshot:
        """Bundle this world into the view a spawner evaluates against."""
        return WorldSnapshot(
            now=now,
            range_query=self,
            entity_factory=self,
            index=self.index,
            loot_registry=loot_registry,
            clock=clock,
            player_stats=self,
            rng=rng,
        )
