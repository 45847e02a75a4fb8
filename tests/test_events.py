"""Tests for the event model."""

from datetime import datetime
from uuid import UUID

from core.events import Event, EventType


class TestEvent:
    """Test Event construction."""

    def test_create_event(self):
        """Event.create fills in id and timestamp."""
        event = Event.create(12.5, EventType.ENTITY_SPAWNED, {"spawner_id": "camp"})

        assert event.event_type is EventType.ENTITY_SPAWNED
        assert event.simulation_time == 12.5
        assert event.data == {"spawner_id": "camp"}
        assert isinstance(event.event_id, UUID)
        assert isinstance(event.created_at, datetime)

    def test_string_type_converted(self):
        """Known type strings become EventType members."""
        event = Event(event_type="entity.died")

        assert event.event_type is EventType.ENTITY_DIED
        assert event.type_name == "entity.died"

    def test_unknown_type_kept_as_string(self):
        """Host-defined types stay plain strings."""
        event = Event(event_type="quest.completed")

        assert event.event_type == "quest.completed"
        assert event.type_name == "quest.completed"

    def test_events_are_hashable_by_id(self):
        first = Event.create(1.0, EventType.ZONE_UNLOADED, {"zone_id": "a"})
        second = Event.create(1.0, EventType.ZONE_UNLOADED, {"zone_id": "a"})

        assert len({first, second}) == 2
        assert hash(first) == hash(first.event_id)
