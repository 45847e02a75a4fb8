# core/config.py

from pydantic_settings import BaseSettings


class SpawnfieldConfig(BaseSettings):
    """Configuration for the SPAWNFIELD spawning engine."""

    # Spatial grid
    grid_cell_size: float = 50.0  # Close to the typical query range

    # Spawner defaults
    default_activation_range: float = 50.0
    default_respawn_interval: float = 30.0  # Seconds
    default_max_entities: int = 1
    default_spawn_radius: float = 5.0

    # Loot
    default_roll_count: int = 1

    # Scheduling
    update_interval: float = 1.0  # Seconds between spawner passes

    # Time of day
    day_length: float = 86400.0  # Simulation seconds per in-game day

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "SPAWNFIELD_"
