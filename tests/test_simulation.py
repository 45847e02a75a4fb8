"""Tests for the self-contained spawn simulation."""

import pytest

from core.clock import FixedClock
from core.config import SpawnfieldConfig
from core.events import EventType
from spawning import SpawnSimulation

LOOT_TABLES = [
    {"id": "goblin_camp", "entries": [{"item_id": "goblin"}]},
    {
        "id": "goblin_drops",
        "entries": [{"item_id": "bones"}],
        "guaranteed": [{"item_id": "coins", "quantity_min": 2, "quantity_max": 4}],
    },
]

SPAWNERS = [
    {
        "id": "camp",
        "zone_id": "forest",
        "position": [0, 0],
        "source_table": "goblin_camp",
        "drop_table": "goblin_drops",
        "activation_range": 20,
        "max_entities": 2,
        "respawn_interval": 5,
        "conditions": {"min_players": 1},
    }
]


@pytest.fixture
def sim():
    """Simulation with goblin content and a fixed midday clock."""
    config = SpawnfieldConfig(_env_file=None, grid_cell_size=20.0, update_interval=1.0)
    simulation = SpawnSimulation(config=config, seed=99, clock=FixedClock(12))
    simulation.load_content(LOOT_TABLES, SPAWNERS)
    return simulation


class TestSpawnSimulation:
    """Test SpawnSimulation functionality."""

    def test_initial_status(self, sim):
        status = sim.get_status()

        assert status["current_time"] == 0.0
        assert status["hour"] == 12.0
        assert status["spawner_count"] == 1
        assert status["loot_table_count"] == 2
        assert status["entity_count"] == 0

    def test_grid_uses_configured_cell_size(self, sim):
        assert sim.index.cell_size == 20.0

    def test_no_spawn_without_players(self, sim):
        results = sim.advance(1.0)

        assert results[0][1].is_deferred
        assert sim.state.entity_count() == 0

    def test_player_triggers_spawns(self, sim):
        """Spawns follow the respawn interval up to max_entities."""
        sim.add_player([3, 0, 0], combat_level=10)

        spawned = []
        for _ in range(20):
            for _, result in sim.advance(1.0):
                if result.is_spawned:
                    spawned.append(sim.time)

        assert spawned == [1.0, 6.0]
        assert len(sim.state.get_entities_by_type("goblin")) == 2

    def test_kill_restarts_respawn_timer(self, sim):
        """Killing a spawned entity frees the slot after respawn_interval."""
        sim.add_player((3.0, 0.0, 0.0))
        sim.advance(1.0)
        goblin = sim.scheduler.get("camp").active_entities.copy().pop()

        died = []
        sim.on_event(EventType.ENTITY_DIED, died.append)
        sim.advance(1.0)
        event = sim.kill(goblin)

        assert died == [event]
        assert sim.state.get_entity(goblin.entity_id) is None
        assert goblin not in sim.index
        assert sim.scheduler.get("camp").last_spawn_time == 2.0

    def test_roll_drops(self, sim):
        sim.add_player((3.0, 0.0, 0.0))
        goblin = sim.advance(1.0)[0][1].entity

        drops = sim.roll_drops(goblin)

        assert [drop.item_id for drop in drops] == ["coins", "bones"]
        assert 2 <= drops[0].quantity <= 4

    def test_roll_drops_without_table(self, sim):
        player = sim.add_player((3.0, 0.0, 0.0))

        assert sim.roll_drops(player) == []

    def test_events_stream(self, sim):
        seen = []
        sim.add_event_listener(seen.append)
        sim.add_player((3.0, 0.0, 0.0))

        sim.advance(1.0)

        assert [event.event_type for event in seen] == [EventType.ENTITY_SPAWNED]

    def test_moving_player_away_stops_spawns(self, sim):
        player = sim.add_player((3.0, 0.0, 0.0))
        sim.advance(1.0)

        sim.move_entity(player, (500, 0, 500))
        results = sim.advance(10.0)

        assert results[0][1].is_deferred
        assert sim.scheduler.get("camp").active_count == 1

    def test_cannot_go_backwards(self, sim):
        with pytest.raises(ValueError):
            sim.advance(-1.0)

    def test_same_seed_same_world(self):
        """Two runs with one seed place entities identically."""

        def run():
            sim = SpawnSimulation(config=SpawnfieldConfig(_env_file=None), seed=5, clock=FixedClock(8))
            sim.load_content(LOOT_TABLES, SPAWNERS)
            sim.add_player((0.0, 0.0, 0.0))
            positions = []
            for _ in range(15):
                for _, result in sim.advance(1.0):
                    if result.is_spawned:
                        positions.append(result.entity.position)
            return positions

        first = run()
        assert len(first) == 2
        assert first == run()
