# core/events.py

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class EventType(str, Enum):
    """Event type enumeration."""

    ENTITY_SPAWNED = "entity.spawned"
    ENTITY_DIED = "entity.died"
    ENTITY_DESPAWNED = "entity.despawned"
    SPAWNER_REGISTERED = "spawner.registered"
    SPAWNER_UNREGISTERED = "spawner.unregistered"
    SPAWNER_ACTIVATED = "spawner.activated"
    SPAWNER_DEACTIVATED = "spawner.deactivated"
    ZONE_UNLOADED = "zone.unloaded"


@dataclass(frozen=True)
class Event:
    """Immutable notification about something that happened in the world.

    ``data`` carries live references (entity handles, spawner ids); events
    are not meant to be serialized.
    """

    event_type: EventType | str
    simulation_time: float = 0.0  # Simulation time in seconds
    data: dict[str, Any] = field(default_factory=dict)
    event_id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None  # Real-world timestamp

    def __post_init__(self):
        # Convert string to EventType if needed
        if isinstance(self.event_type, str) and not isinstance(self.event_type, EventType):
            try:
                object.__setattr__(self, "event_type", EventType(self.event_type))
            except ValueError:
                # Keep as string if not a known EventType
                pass

        if self.created_at is None:
            object.__setattr__(self, "created_at", datetime.now(timezone.utc))

    def __hash__(self) -> int:
        return hash(self.event_id)

    @property
    def type_name(self) -> str:
        """Event type as a plain string."""
        return self.event_type.value if isinstance(self.event_type, EventType) else self.event_type

    @classmethod
    def create(
        cls,
        simulation_time: float,
        event_type: EventType | str,
        data: dict[str, Any],
    ) -> "Event":
        """Factory method for creating events."""
        return cls(
            simulation_time=simulation_time,
            event_type=event_type,
            data=data,
        )
