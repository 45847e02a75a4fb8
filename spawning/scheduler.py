# spawning/scheduler.py

"""Tick driver that walks registered spawners in a stable order."""

from typing import Any, Optional

from core.config import SpawnfieldConfig
from core.event_handlers import EventHandlerRegistry
from core.events import Event, EventType
from core.exceptions import DuplicateSpawnerError, SpawnerNotFoundError
from core.logging import get_logger
from core.world import WorldSnapshot
from spatial.grid import SpatialGridIndex

from .spawner import SpawnAttemptResult, Spawner

logger = get_logger(__name__)


class SpawnerScheduler:
    """Owns the spawners of a world or zone and drives them every tick.

    Spawners are evaluated in registration order so that, given the same
    RNG seed and the same prior insertions, spacing tie-breaks come out the
    same on every run.

    When an ``EventHandlerRegistry`` is supplied, the scheduler listens for
    ``entity.died`` / ``entity.despawned`` (``data["entity"]`` is the handle)
    and publishes ``entity.spawned``, ``spawner.registered``,
    ``spawner.unregistered``, ``spawner.activated``, ``spawner.deactivated``
    and ``zone.unloaded``.

    Entities the host destroys without publishing an event are noticed on
    the next tick, when the world no longer reports them as existing.
    """

    def __init__(
        self,
        index: SpatialGridIndex,
        config: Optional[SpawnfieldConfig] = None,
        events: Optional[EventHandlerRegistry] = None,
    ):
        self.index = index
        self.config = config or SpawnfieldConfig()
        self.events = events
        self._spawners: dict[str, Spawner] = {}
        self._owners: dict[Any, str] = {}  # entity handle -> spawner id
        self._last_tick: Optional[float] = None
        self.logger = get_logger(f"{__name__}.SpawnerScheduler")

        if self.events is not None:
            self.events.on(EventType.ENTITY_DIED, self._handle_entity_removed_event)
            self.events.on(EventType.ENTITY_DESPAWNED, self._handle_entity_removed_event)

    def register(self, spawner: Spawner, now: float = 0.0) -> None:
        """Add a spawner at the end of the evaluation order.

        Raises:
            DuplicateSpawnerError: If the id is already registered
        """
        if spawner.spawner_id in self._spawners:
            raise DuplicateSpawnerError(f"Spawner {spawner.spawner_id!r} is already registered")

        self._spawners[spawner.spawner_id] = spawner
        self.logger.info(
            "spawner.registered",
            spawner_id=spawner.spawner_id,
            zone_id=spawner.zone_id,
            position=spawner.position,
        )
        self._emit(EventType.SPAWNER_REGISTERED, now, {"spawner_id": spawner.spawner_id})

    def unregister(self, spawner_id: str, now: float = 0.0) -> list[Any]:
        """Remove a spawner and detach its entities.

        Spawned entities stay in the world; they are only forgotten here.

        Returns:
            The entities the spawner was tracking

        Raises:
            SpawnerNotFoundError: If no spawner has this id
        """
        spawner = self._spawners.pop(spawner_id, None)
        if spawner is None:
            raise SpawnerNotFoundError(f"Spawner {spawner_id!r} is not registered")

        detached = spawner.detach_all()
        for entity in detached:
            self._owners.pop(entity, None)

        self.logger.info(
            "spawner.unregistered",
            spawner_id=spawner_id,
            detached_count=len(detached),
        )
        self._emit(
            EventType.SPAWNER_UNREGISTERED,
            now,
            {"spawner_id": spawner_id, "detached": detached},
        )
        return detached

    def unload_zone(self, zone_id: str, now: float = 0.0) -> list[Any]:
        """Unregister every spawner of a zone.

        Returns:
            All entities detached from the zone's spawners
        """
        zone_spawners = [s.spawner_id for s in self._spawners.values() if s.zone_id == zone_id]
        detached = []
        for spawner_id in zone_spawners:
            detached.extend(self.unregister(spawner_id, now))

        self.logger.info(
            "zone.unloaded",
            zone_id=zone_id,
            spawner_count=len(zone_spawners),
            detached_count=len(detached),
        )
        self._emit(EventType.ZONE_UNLOADED, now, {"zone_id": zone_id, "detached": detached})
        return detached

    def get(self, spawner_id: str) -> Optional[Spawner]:
        return self._spawners.get(spawner_id)

    @property
    def spawners(self) -> list[Spawner]:
        """Registered spawners in evaluation order."""
        return list(self._spawners.values())

    def __len__(self) -> int:
        return len(self._spawners)

    def entity_spawner(self, entity: Any) -> Optional[Spawner]:
        """Spawner that created ``entity``, if it is still tracked."""
        spawner_id = self._owners.get(entity)
        return self._spawners.get(spawner_id) if spawner_id is not None else None

    def tick(self, world: WorldSnapshot, force: bool = False) -> list[tuple[str, SpawnAttemptResult]]:
        """Evaluate every spawner once.

        Tracked entities that vanished from the world are released first, then
        each spawner refreshes its activation and makes one attempt.
        Calls closer together than ``config.update_interval`` are skipped
        unless ``force`` is set.

        Returns:
            (spawner_id, result) pairs in registration order; empty when throttled
        """
        if (
            not force
            and self._last_tick is not None
            and world.now - self._last_tick < self.config.update_interval
        ):
            return []
        self._last_tick = world.now
        self._release_vanished(world)

        results = []
        for spawner in list(self._spawners.values()):
            if spawner.update_activation(world):
                self._announce_activation(spawner, world.now)
            result = spawner.evaluate(world)
            results.append((spawner.spawner_id, result))

            if result.is_spawned:
                self._owners[result.entity] = spawner.spawner_id
                self._emit(
                    EventType.ENTITY_SPAWNED,
                    world.now,
                    {
                        "entity": result.entity,
                        "spawner_id": spawner.spawner_id,
                        "position": result.entity.position,
                    },
                )

        spawned = sum(1 for _, result in results if result.is_spawned)
        if spawned:
            self.logger.debug("scheduler.tick", spawner_count=len(results), spawned=spawned)
        return results

    def handle_entity_removed(self, entity: Any, now: float) -> bool:
        """Drop a dead or despawned entity from the index and its spawner.

        The entity must still be at the position it was last indexed with.

        Returns:
            True if the entity belonged to a registered spawner
        """
        self.index.remove(entity)

        spawner_id = self._owners.pop(entity, None)
        if spawner_id is None:
            return False

        spawner = self._spawners.get(spawner_id)
        if spawner is None:
            return False

        return spawner.notify_entity_removed(entity, now)

    def _release_vanished(self, world: WorldSnapshot) -> None:
        for spawner in list(self._spawners.values()):
            vanished = [
                entity
                for entity in spawner.active_entities
                if not world.entity_factory.entity_exists(entity)
            ]
            for entity in vanished:
                self.logger.debug("entity.vanished", spawner_id=spawner.spawner_id)
                if not self.handle_entity_removed(entity, world.now):
                    spawner.notify_entity_removed(entity, world.now)

    def _announce_activation(self, spawner: Spawner, now: float) -> None:
        event_type = EventType.SPAWNER_ACTIVATED if spawner.is_active else EventType.SPAWNER_DEACTIVATED
        self.logger.info(event_type.value, spawner_id=spawner.spawner_id)
        self._emit(event_type, now, {"spawner_id": spawner.spawner_id})

    def _handle_entity_removed_event(self, event: Event) -> None:
        entity = event.data.get("entity")
        if entity is None:
            return
        self.handle_entity_removed(entity, event.simulation_time)

    def _emit(self, event_type: EventType, now: float, data: dict[str, Any]) -> None:
        if self.events is None:
            return
        self.events.dispatch(Event.create(now, event_type, data))
