# spawning/simulation.py

import random
from typing import Any, Iterable, Optional
from uuid import UUID, uuid4

from core.clock import ClockSource, DayNightCycleClock, FallbackClock, WallClock
from core.config import SpawnfieldConfig
from core.event_handlers import EventHandler, EventHandlerRegistry
from core.events import Event, EventType
from core.logging import get_logger
from core.state import WorldEntity, WorldState
from core.world import WorldSnapshot
from loot import LootRegistry, LootTable
from spatial import SpatialGridIndex
from spatial.entities import Position, validate_position

from .definitions import load_loot_tables, load_spawner
from .scheduler import SpawnerScheduler
from .spawner import SpawnAttemptResult, Spawner


class SpawnSimulation:
    """Self-contained world driving spawners on a simulation clock.

    Wires the in-memory ``WorldState``, a grid sized from config, a loot
    registry, the event registry and a scheduler together. Time only moves
    when ``advance`` is called.
    """

    def __init__(
        self,
        config: Optional[SpawnfieldConfig] = None,
        seed: Optional[int] = None,
        clock: Optional[ClockSource] = None,
        simulation_id: Optional[UUID] = None,
    ):
        self.simulation_id = simulation_id or uuid4()
        self.config = config or SpawnfieldConfig()
        self.rng = random.Random(seed)
        self.time = 0.0

        self.index = SpatialGridIndex(self.config.grid_cell_size)
        self.state = WorldState(self.index)
        self.loot_registry = LootRegistry()
        self.events = EventHandlerRegistry()
        self.scheduler = SpawnerScheduler(self.index, self.config, self.events)
        self.clock = clock or FallbackClock(
            DayNightCycleClock(lambda: self.time, day_length=self.config.day_length),
            WallClock(),
        )

        self.logger = get_logger(f"{__name__}.SpawnSimulation")

    def load_content(
        self,
        loot_tables: Iterable[dict[str, Any]] = (),
        spawners: Iterable[dict[str, Any]] = (),
    ) -> None:
        """Register loot tables and spawners from plain-data definitions.

        Raises:
            ConfigurationError: If any definition is invalid
        """
        for table in load_loot_tables(loot_tables, self.config):
            self.add_loot_table(table)
        for data in spawners:
            self.add_spawner(load_spawner(data, self.config))

    def add_loot_table(self, table: LootTable) -> None:
        self.loot_registry.register(table)

    def add_spawner(self, spawner: Spawner) -> None:
        self.scheduler.register(spawner, self.time)

    def add_player(self, position: Any, combat_level: Optional[float] = None) -> WorldEntity:
        return self.state.add_player(validate_position(position), combat_level)

    def move_entity(self, entity: WorldEntity, position: Position) -> None:
        self.state.move_entity(entity, validate_position(position))

    def snapshot(self) -> WorldSnapshot:
        return self.state.snapshot(self.time, self.loot_registry, self.rng, clock=self.clock)

    def advance(self, dt: float) -> list[tuple[str, SpawnAttemptResult]]:
        """Move time forward by ``dt`` seconds and run a scheduler pass.

        Returns:
            Per-spawner results, empty if the pass was throttled
        """
        if dt < 0:
            raise ValueError("Cannot advance time backwards")
        self.time += dt
        return self.scheduler.tick(self.snapshot())

    def kill(self, entity: WorldEntity, event_type: EventType = EventType.ENTITY_DIED) -> Event:
        """Report an entity's death (or despawn) and remove it from the world.

        The owning spawner hears about it through the event registry, which
        starts its respawn timer.
        """
        event = Event.create(self.time, event_type, {"entity": entity, "kind": entity.kind})
        self.events.dispatch(event)
        self.state.destroy_entity(entity)

        self.logger.info(
            "entity.removed",
            entity_id=str(entity.entity_id),
            kind=entity.kind,
            event_type=event.type_name,
        )
        return event

    def roll_drops(self, entity: WorldEntity) -> list:
        """Roll the drop table the entity was spawned with, if any."""
        table_id = entity.metadata.get("drop_table_id")
        if table_id is None:
            return []
        return self.loot_registry.roll(table_id, self.rng)

    def on_event(self, event_type: EventType | str, handler: EventHandler) -> None:
        self.events.on(event_type, handler)

    def add_event_listener(self, listener: EventHandler) -> None:
        """Subscribe to ALL events."""
        self.events.on_all(listener)

    def get_status(self) -> dict:
        """Get current simulation status."""
        return {
            "simulation_id": str(self.simulation_id),
            "current_time": self.time,
            "hour": self.clock.current_hour(),
            "spawner_count": len(self.scheduler),
            "loot_table_count": len(self.loot_registry),
            "entity_count": self.state.entity_count(),
            "indexed_count": self.index.size,
        }
