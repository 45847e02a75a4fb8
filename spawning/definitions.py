# spawning/definitions.py

"""Plain-data spawner and loot definitions.

Hosts read spawner and loot configuration from wherever they keep it and
hand the parsed dicts in here. These models check the shape of that data;
the runtime classes they build check the semantics.
"""

from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from core.config import SpawnfieldConfig
from core.exceptions import ConfigurationError
from loot.table import LootEntry, LootTable
from spatial.areas import CircularSpawnArea, PointSpawnArea, RectangularSpawnArea, SpawnArea
from spatial.entities import Position, validate_position

from .conditions import CustomCondition, LevelRange, SpawnConditions, TimeWindow
from .spawner import Spawner


class LootEntryDefinition(BaseModel):
    """One weighted drop."""

    item_id: str
    weight: float = 1.0
    quantity_min: int = 1
    quantity_max: Optional[int] = None

    def build(self) -> LootEntry:
        return LootEntry(
            item_id=self.item_id,
            weight=self.weight,
            quantity_min=self.quantity_min,
            quantity_max=self.quantity_max if self.quantity_max is not None else self.quantity_min,
        )


class LootTableDefinition(BaseModel):
    """A loot table as stored in content files."""

    id: str
    name: str = ""
    entries: list[LootEntryDefinition] = Field(default_factory=list)
    guaranteed: list[LootEntryDefinition] = Field(default_factory=list)
    roll_count: Optional[int] = None

    def build(self, config: Optional[SpawnfieldConfig] = None) -> LootTable:
        roll_count = self.roll_count
        if roll_count is None:
            roll_count = (config or SpawnfieldConfig()).default_roll_count
        return LootTable(
            table_id=self.id,
            name=self.name,
            entries=tuple(entry.build() for entry in self.entries),
            roll_count=roll_count,
            guaranteed=tuple(entry.build() for entry in self.guaranteed),
        )


class SpawnAreaDefinition(BaseModel):
    """Shape and spacing rules of a spawn area.

    ``center`` defaults to the spawner position.
    """

    shape: Literal["circle", "point", "rectangle"] = "circle"
    center: Optional[Any] = None
    radius: Optional[float] = None
    width: Optional[float] = None
    depth: Optional[float] = None
    min_spacing: float = 0.0
    avoid_overlap: bool = False
    max_height: float = 0.0

    def build(self, default_center: Position, config: SpawnfieldConfig) -> SpawnArea:
        center = default_center
        if self.center is not None:
            try:
                center = validate_position(self.center)
            except ValueError as e:
                raise ConfigurationError(f"Spawn area has an invalid center: {e}") from e

        if self.shape == "point":
            return PointSpawnArea(center, min_spacing=self.min_spacing, avoid_overlap=self.avoid_overlap)

        if self.shape == "rectangle":
            if self.width is None or self.depth is None:
                raise ConfigurationError("Rectangular spawn area needs width and depth")
            return RectangularSpawnArea(
                center,
                self.width,
                self.depth,
                min_spacing=self.min_spacing,
                avoid_overlap=self.avoid_overlap,
                max_height=self.max_height,
            )

        return CircularSpawnArea(
            center,
            self.radius if self.radius is not None else config.default_spawn_radius,
            min_spacing=self.min_spacing,
            avoid_overlap=self.avoid_overlap,
            max_height=self.max_height,
        )


class TimeWindowDefinition(BaseModel):
    start: float
    end: float


class LevelRangeDefinition(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class SpawnConditionsDefinition(BaseModel):
    time_of_day: Optional[TimeWindowDefinition] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    player_level: Optional[LevelRangeDefinition] = None

    def build(self, custom_condition: Optional[CustomCondition] = None) -> SpawnConditions:
        return SpawnConditions(
            time_of_day=(
                TimeWindow(self.time_of_day.start, self.time_of_day.end)
                if self.time_of_day is not None
                else None
            ),
            min_players=self.min_players,
            max_players=self.max_players,
            player_level=(
                LevelRange(self.player_level.min, self.player_level.max)
                if self.player_level is not None
                else None
            ),
            custom_condition=custom_condition,
        )


class SpawnerDefinition(BaseModel):
    """A spawner as stored in zone files."""

    id: Optional[str] = None
    zone_id: Optional[str] = None
    position: Any
    source_table: str
    drop_table: Optional[str] = None
    activation_range: Optional[float] = None
    deactivation_range: Optional[float] = None
    requires_nearby_players: bool = False
    max_entities: Optional[int] = None
    respawn_interval: Optional[float] = None
    area: SpawnAreaDefinition = Field(default_factory=SpawnAreaDefinition)
    conditions: Optional[SpawnConditionsDefinition] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    def build(
        self,
        config: Optional[SpawnfieldConfig] = None,
        custom_condition: Optional[CustomCondition] = None,
    ) -> Spawner:
        config = config or SpawnfieldConfig()
        try:
            position = validate_position(self.position)
        except ValueError as e:
            raise ConfigurationError(f"Spawner {self.id!r} has an invalid position: {e}") from e

        conditions = None
        if self.conditions is not None:
            conditions = self.conditions.build(custom_condition)
        elif custom_condition is not None:
            conditions = SpawnConditions(custom_condition=custom_condition)

        return Spawner(
            position=position,
            source_table_id=self.source_table,
            area=self.area.build(position, config),
            conditions=conditions,
            activation_range=(
                self.activation_range
                if self.activation_range is not None
                else config.default_activation_range
            ),
            deactivation_range=self.deactivation_range,
            requires_nearby_players=self.requires_nearby_players,
            max_entities=(
                self.max_entities if self.max_entities is not None else config.default_max_entities
            ),
            respawn_interval=(
                self.respawn_interval
                if self.respawn_interval is not None
                else config.default_respawn_interval
            ),
            drop_table_id=self.drop_table,
            zone_id=self.zone_id,
            spawner_id=self.id,
            metadata=self.metadata,
        )


def load_loot_table(data: dict[str, Any], config: Optional[SpawnfieldConfig] = None) -> LootTable:
    """Parse one loot table.

    Raises:
        ConfigurationError: If the data is malformed or semantically invalid
    """
    try:
        definition = LootTableDefinition.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid loot table definition: {e}") from e
    return definition.build(config)


def load_loot_tables(
    items: Iterable[dict[str, Any]], config: Optional[SpawnfieldConfig] = None
) -> list[LootTable]:
    """Parse several loot tables, stopping at the first invalid one."""
    return [load_loot_table(data, config) for data in items]


def load_spawner(
    data: dict[str, Any],
    config: Optional[SpawnfieldConfig] = None,
    custom_condition: Optional[CustomCondition] = None,
) -> Spawner:
    """Parse one spawner.

    Custom predicates cannot live in data files, so one may be passed here.

    Raises:
        ConfigurationError: If the data is malformed or semantically invalid
    """
    try:
        definition = SpawnerDefinition.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid spawner definition: {e}") from e
    return definition.build(config, custom_condition)
