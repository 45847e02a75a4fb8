# spawning/spawner.py

"""Spawners: areas plus conditions plus bookkeeping that create entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from core.exceptions import InvalidSpawnerError
from core.logging import get_logger
from core.world import WorldSnapshot
from spatial.areas import CircularSpawnArea, SpawnArea
from spatial.entities import Position, validate_position

from .conditions import Gate, SpawnConditionEvaluator, SpawnConditions

logger = get_logger(__name__)


class SpawnerState(str, Enum):
    """Lifecycle of a spawner within and across ticks."""

    IDLE = "idle"
    EVALUATING = "evaluating"
    SPAWNING = "spawning"
    ACTIVE = "active"


class SpawnOutcome(str, Enum):
    NO_ACTION = "no_action"
    SPAWNED = "spawned"
    DEFERRED = "deferred"


class DeferReason(str, Enum):
    """Why a spawner that wanted to act did not this tick."""

    RESPAWN_TIMER = "respawn_timer"
    CONDITIONS = "conditions"
    SOURCE_UNAVAILABLE = "source_unavailable"
    INVALID_POSITION = "invalid_position"
    SPACING = "spacing"
    CREATION_FAILED = "creation_failed"


@dataclass(frozen=True)
class SpawnAttemptResult:
    """Outcome of one ``Spawner.evaluate`` call."""

    outcome: SpawnOutcome
    entity: Any = None
    reason: Optional[DeferReason] = None
    gate: Optional[Gate] = None

    @classmethod
    def no_action(cls) -> "SpawnAttemptResult":
        return cls(SpawnOutcome.NO_ACTION)

    @classmethod
    def spawned(cls, entity: Any) -> "SpawnAttemptResult":
        return cls(SpawnOutcome.SPAWNED, entity=entity)

    @classmethod
    def deferred(cls, reason: DeferReason, gate: Optional[Gate] = None) -> "SpawnAttemptResult":
        return cls(SpawnOutcome.DEFERRED, reason=reason, gate=gate)

    @property
    def is_spawned(self) -> bool:
        return self.outcome is SpawnOutcome.SPAWNED

    @property
    def is_deferred(self) -> bool:
        return self.outcome is SpawnOutcome.DEFERRED


class Spawner:
    """A configured source of entities bound to an area and conditions.

    The spawner does not own what it creates. It only tracks handles so it
    knows how many of its entities are alive; the host world keeps them.

    The kind of entity to create comes from rolling ``source_table_id`` in
    the world's loot registry, re-resolved on every spawn so table reloads
    apply immediately. ``drop_table_id`` is passed along to the created
    entity's configuration for the host to roll on death.
    """

    def __init__(
        self,
        position: Position,
        source_table_id: str,
        area: Optional[SpawnArea] = None,
        conditions: Optional[SpawnConditions] = None,
        activation_range: float = 50.0,
        deactivation_range: Optional[float] = None,
        requires_nearby_players: bool = False,
        max_entities: int = 1,
        respawn_interval: float = 30.0,
        drop_table_id: Optional[str] = None,
        zone_id: Optional[str] = None,
        spawner_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
        evaluator: Optional[SpawnConditionEvaluator] = None,
    ):
        """Initialize a spawner.

        Args:
            position: Anchor point, also the center for player-range checks
            source_table_id: Loot table naming the entity kinds to create
            area: Where entities appear; defaults to a radius-5 circle at ``position``
            conditions: Gates; None means always permitted
            activation_range: Radius used to find nearby players
            deactivation_range: Radius an active spawner keeps players in sight;
                defaults to ``activation_range``
            requires_nearby_players: Only spawn while activated by a nearby player
            max_entities: Live entities this spawner keeps at most
            respawn_interval: Seconds between spawns
            drop_table_id: Loot table for what spawned entities drop
            zone_id: Owning zone, used for bulk unload
            spawner_id: Stable id; generated when omitted
            metadata: Extra configuration merged into created entities
            evaluator: Condition evaluator; a default one is created if omitted

        Raises:
            InvalidSpawnerError: If numeric settings are out of range or the
                position is malformed
        """
        if max_entities < 1:
            raise InvalidSpawnerError(f"max_entities must be >= 1, got {max_entities}")
        if respawn_interval < 0:
            raise InvalidSpawnerError(f"respawn_interval must be >= 0, got {respawn_interval}")
        if activation_range < 0:
            raise InvalidSpawnerError(f"activation_range must be >= 0, got {activation_range}")
        if deactivation_range is None:
            deactivation_range = activation_range
        elif deactivation_range < activation_range:
            raise InvalidSpawnerError(
                f"deactivation_range {deactivation_range} is smaller than "
                f"activation_range {activation_range}"
            )
        try:
            position = validate_position(position)
        except (TypeError, ValueError) as e:
            raise InvalidSpawnerError(f"Invalid spawner position {position!r}: {e}") from e

        self.spawner_id = spawner_id or f"spawner_{uuid4().hex[:12]}"
        self.position = position
        self.source_table_id = source_table_id
        self.area = area or CircularSpawnArea(position, 5.0)
        self.conditions = conditions
        self.activation_range = float(activation_range)
        self.deactivation_range = float(deactivation_range)
        self.requires_nearby_players = requires_nearby_players
        self.max_entities = max_entities
        self.respawn_interval = float(respawn_interval)
        self.drop_table_id = drop_table_id
        self.zone_id = zone_id
        self.metadata = metadata or {}
        self.evaluator = evaluator or SpawnConditionEvaluator()

        self.state = SpawnerState.IDLE
        self.active_entities: set[Any] = set()
        self.last_spawn_time: Optional[float] = None
        self.is_active = not requires_nearby_players

        self.logger = get_logger(f"{__name__}.Spawner")

    def __repr__(self) -> str:
        return (
            f"Spawner({self.spawner_id!r}, source={self.source_table_id!r}, "
            f"active={self.active_count}/{self.max_entities}, state={self.state.value})"
        )

    @property
    def active_count(self) -> int:
        return len(self.active_entities)

    @property
    def is_full(self) -> bool:
        return self.active_count >= self.max_entities

    def respawn_ready(self, now: float) -> bool:
        """True once ``respawn_interval`` has passed since the last spawn or death."""
        if self.last_spawn_time is None:
            return True
        return now - self.last_spawn_time >= self.respawn_interval

    def update_activation(self, world: WorldSnapshot) -> bool:
        """Refresh ``is_active`` from nearby players.

        An inactive spawner wakes up once a player comes within
        ``activation_range``. An active one stays awake while any player is
        within ``deactivation_range``. Spawners that do not require nearby
        players are always active.

        Returns:
            True if the activation state changed
        """
        if not self.requires_nearby_players:
            return False

        radius = self.deactivation_range if self.is_active else self.activation_range
        now_active = bool(self.evaluator.nearby_players(self, world, radius))
        if now_active == self.is_active:
            return False

        self.is_active = now_active
        self.logger.debug(
            "spawner.activation_changed",
            spawner_id=self.spawner_id,
            active=now_active,
        )
        return True

    def evaluate(self, world: WorldSnapshot) -> SpawnAttemptResult:
        """Run one spawn attempt.

        At most one entity is created per call. A rejected candidate is not
        retried until the next call.
        A spawner that requires nearby players does nothing while inactive;
        call ``update_activation`` first, as the scheduler does.
        """
        if not self.is_active:
            return SpawnAttemptResult.no_action()

        if self.is_full:
            return SpawnAttemptResult.no_action()

        if not self.respawn_ready(world.now):
            return SpawnAttemptResult.deferred(DeferReason.RESPAWN_TIMER)

        self.state = SpawnerState.EVALUATING
        gate = self.evaluator.first_failure(self, world)
        if gate is not None:
            return self._defer(DeferReason.CONDITIONS, gate)

        kind = self._resolve_kind(world)
        if kind is None:
            return self._defer(DeferReason.SOURCE_UNAVAILABLE)

        self.state = SpawnerState.SPAWNING
        position = self.area.get_random_position(world.rng)
        if not self.area.is_valid_position(position):
            return self._defer(DeferReason.INVALID_POSITION)

        if self.area.avoid_overlap and world.index.get_in_range(position, self.area.min_spacing):
            return self._defer(DeferReason.SPACING)

        entity = world.entity_factory.create_entity(kind, position, self._entity_configuration(kind))
        if entity is None:
            return self._defer(DeferReason.CREATION_FAILED)

        world.index.add(entity)
        self.active_entities.add(entity)
        self.last_spawn_time = world.now
        self.state = SpawnerState.ACTIVE

        self.logger.debug(
            "spawner.spawned",
            spawner_id=self.spawner_id,
            kind=kind,
            position=position,
            active_count=self.active_count,
        )
        return SpawnAttemptResult.spawned(entity)

    def notify_entity_removed(self, entity: Any, now: float) -> bool:
        """Forget a tracked entity after it died or despawned.

        Resets the respawn timer to ``now``.

        Returns:
            True if the entity belonged to this spawner
        """
        if entity not in self.active_entities:
            return False

        self.active_entities.discard(entity)
        self.last_spawn_time = now
        self.state = SpawnerState.IDLE
        return True

    def detach_all(self) -> list[Any]:
        """Stop tracking every spawned entity without destroying any of them."""
        detached = list(self.active_entities)
        self.active_entities.clear()
        self.state = SpawnerState.IDLE
        return detached

    def _resolve_kind(self, world: WorldSnapshot) -> Optional[str]:
        drops = world.loot_registry.roll(self.source_table_id, world.rng)
        if not drops:
            return None
        return drops[0].item_id

    def _entity_configuration(self, kind: str) -> dict[str, Any]:
        configuration = dict(self.metadata)
        configuration.update(
            {
                "spawner_id": self.spawner_id,
                "kind": kind,
                "drop_table_id": self.drop_table_id,
            }
        )
        return configuration

    def _defer(self, reason: DeferReason, gate: Optional[Gate] = None) -> SpawnAttemptResult:
        self.state = SpawnerState.ACTIVE if self.active_entities else SpawnerState.IDLE
        self.logger.debug(
            "spawn.deferred",
            spawner_id=self.spawner_id,
            reason=reason.value,
            gate=gate.value if gate else None,
        )
        return SpawnAttemptResult.deferred(reason, gate)
