#!/usr/bin/env python3
"""Simple CLI runner for trying out the SPAWNFIELD spawning engine."""

import argparse

from core.config import SpawnfieldConfig
from core.events import EventType
from core.logging import configure_logging, get_logger
from spawning import SpawnSimulation

logger = get_logger(__name__)

LOOT_TABLES = [
    {
        "id": "goblin_camp",
        "entries": [
            {"item_id": "goblin", "weight": 8},
            {"item_id": "goblin_shaman", "weight": 2},
        ],
    },
    {
        "id": "goblin_drops",
        "entries": [
            {"item_id": "bones", "weight": 9},
            {"item_id": "bronze_sword", "weight": 1},
        ],
        "guaranteed": [{"item_id": "coins", "quantity_min": 5, "quantity_max": 15}],
    },
]

SPAWNERS = [
    {
        "id": "camp_north",
        "zone_id": "lumbridge",
        "position": [0, 0],
        "source_table": "goblin_camp",
        "drop_table": "goblin_drops",
        "activation_range": 30,
        "max_entities": 3,
        "respawn_interval": 5,
        "area": {"radius": 10, "min_spacing": 2, "avoid_overlap": True},
        "conditions": {"min_players": 1, "max_players": 4},
    },
    {
        "id": "night_crawler",
        "zone_id": "lumbridge",
        "position": [60, 0, 10],
        "source_table": "goblin_camp",
        "respawn_interval": 10,
        "area": {"shape": "point"},
        "conditions": {"time_of_day": {"start": 20, "end": 4}},
    },
]


def print_event(event):
    """Print events as they occur."""
    data = {key: value for key, value in event.data.items() if key != "entity"}
    entity = event.data.get("entity")
    if entity is not None:
        data["kind"] = entity.kind
    print(f"[{event.simulation_time:7.1f}s] {event.type_name}: {data}")


def run_demo(duration: float, step: float, seed: int, json_logs: bool = False):
    """Run a short scripted session: a player arrives, fights, and leaves."""
    config = SpawnfieldConfig()
    configure_logging(config.log_level, json_logs=json_logs)

    sim = SpawnSimulation(config=config, seed=seed)
    sim.add_event_listener(print_event)
    sim.load_content(LOOT_TABLES, SPAWNERS)

    logger.info("demo.started", simulation_id=str(sim.simulation_id), duration=duration)

    player = sim.add_player((5.0, 0.0, 0.0), combat_level=12)

    elapsed = 0.0
    kills = 0
    while elapsed < duration:
        sim.advance(step)
        elapsed += step

        # The player kills one of the camp's monsters every 15 seconds
        if int(elapsed) % 15 == 0:
            spawner = sim.scheduler.get("camp_north")
            if spawner and spawner.active_entities:
                victim = next(iter(spawner.active_entities))
                drops = sim.roll_drops(victim)
                sim.kill(victim)
                kills += 1
                print(f"           loot: {[(d.item_id, d.quantity) for d in drops]}")

        if elapsed >= duration / 2 and player.entity_id in sim.state.entities:
            sim.kill(player, EventType.ENTITY_DESPAWNED)

    print("\nFinal Status:")
    for key, value in sim.get_status().items():
        print(f"  {key}: {value}")

    sim.scheduler.unload_zone("lumbridge", sim.time)
    logger.info("demo.complete", kills=kills)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="SPAWNFIELD demo")
    parser.add_argument("--duration", type=float, default=120.0, help="Simulated seconds")
    parser.add_argument("--step", type=float, default=1.0, help="Seconds per tick")
    parser.add_argument("--seed", type=int, default=7, help="RNG seed")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    args = parser.parse_args()

    run_demo(args.duration, args.step, args.seed, args.json_logs)


if __name__ == "__main__":
    main()
