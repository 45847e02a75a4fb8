# spawning/conditions.py

"""World-state gates that decide whether a spawner may act this tick."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from core.clock import WallClock
from core.exceptions import InvalidConditionError
from core.logging import get_logger
from core.world import WorldSnapshot

if TYPE_CHECKING:
    from .spawner import Spawner

logger = get_logger(__name__)

CustomCondition = Callable[["Spawner", WorldSnapshot], bool]


class Gate(str, Enum):
    """Condition gates, in evaluation order."""

    TIME_OF_DAY = "time_of_day"
    PLAYER_COUNT = "player_count"
    PLAYER_LEVEL = "player_level"
    CUSTOM = "custom"


@dataclass(frozen=True)
class TimeWindow:
    """Hours of the day, inclusive. ``start > end`` wraps past midnight.

    ``start == end`` means the window is always open.
    """

    start: float
    end: float

    def __post_init__(self):
        for name, value in (("start", self.start), ("end", self.end)):
            if not 0 <= value <= 24:
                raise InvalidConditionError(f"Time window {name} must be within [0, 24], got {value}")

    def contains(self, hour: float) -> bool:
        if self.start == self.end:
            return True
        if self.start < self.end:
            return self.start <= hour <= self.end
        # Overnight window, e.g. 22 -> 4
        return hour >= self.start or hour <= self.end


@dataclass(frozen=True)
class LevelRange:
    """Inclusive bounds on the average combat level of nearby players."""

    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise InvalidConditionError(
                f"Level range min {self.min} is greater than max {self.max}"
            )

    def contains(self, level: float) -> bool:
        if self.min is not None and level < self.min:
            return False
        if self.max is not None and level > self.max:
            return False
        return True


@dataclass(frozen=True)
class SpawnConditions:
    """Optional gates attached to a spawner. Unset fields are skipped."""

    time_of_day: Optional[TimeWindow] = None
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    player_level: Optional[LevelRange] = None
    custom_condition: Optional[CustomCondition] = None

    def __post_init__(self):
        for name, value in (("min_players", self.min_players), ("max_players", self.max_players)):
            if value is not None and value < 0:
                raise InvalidConditionError(f"{name} must be >= 0, got {value}")
        if (
            self.min_players is not None
            and self.max_players is not None
            and self.min_players > self.max_players
        ):
            raise InvalidConditionError(
                f"min_players {self.min_players} is greater than max_players {self.max_players}"
            )

    @property
    def needs_players(self) -> bool:
        return (
            self.min_players is not None
            or self.max_players is not None
            or self.player_level is not None
        )


class SpawnConditionEvaluator:
    """Stateless evaluator for ``SpawnConditions``.

    Gates run in a fixed order and stop at the first failure: time of day,
    player count, player level, custom predicate. Nearby players are
    gathered once and shared by the count and level gates.
    """

    def __init__(self, fallback_clock=None):
        self._fallback_clock = fallback_clock or WallClock()
        self.logger = get_logger(f"{__name__}.SpawnConditionEvaluator")

    def check_conditions(self, spawner: "Spawner", world: WorldSnapshot) -> bool:
        """True if every configured gate passes."""
        return self.first_failure(spawner, world) is None

    def first_failure(self, spawner: "Spawner", world: WorldSnapshot) -> Optional[Gate]:
        """Name of the first failing gate, or None if the spawner may act."""
        conditions = spawner.conditions
        if conditions is None:
            return None

        if conditions.time_of_day is not None:
            if not self.check_time_of_day(conditions.time_of_day, world):
                return Gate.TIME_OF_DAY

        if conditions.needs_players:
            players = self.nearby_players(spawner, world)

            if not self.check_player_count(conditions, len(players)):
                return Gate.PLAYER_COUNT

            if conditions.player_level is not None:
                if not self.check_player_level(conditions.player_level, players, world):
                    return Gate.PLAYER_LEVEL

        if conditions.custom_condition is not None:
            if not self.check_custom(conditions.custom_condition, spawner, world):
                return Gate.CUSTOM

        return None

    def current_hour(self, world: WorldSnapshot) -> float:
        """Hour from the world's clock chain, falling back to wall-clock time."""
        hour = world.clock.current_hour() if world.clock is not None else None
        if hour is None:
            hour = self._fallback_clock.current_hour()
        return hour

    def check_time_of_day(self, window: TimeWindow, world: WorldSnapshot) -> bool:
        return window.contains(self.current_hour(world))

    def nearby_players(
        self,
        spawner: "Spawner",
        world: WorldSnapshot,
        radius: Optional[float] = None,
    ) -> list[Any]:
        """Player entities within ``radius``, by default the spawner's activation range."""
        if radius is None:
            radius = spawner.activation_range
        entities = world.range_query.entities_near(spawner.position, radius)
        return [entity for entity in entities if world.player_stats.is_player(entity)]

    @staticmethod
    def check_player_count(conditions: SpawnConditions, count: int) -> bool:
        if conditions.min_players is not None and count < conditions.min_players:
            return False
        if conditions.max_players is not None and count > conditions.max_players:
            return False
        return True

    @staticmethod
    def check_player_level(level_range: LevelRange, players: list[Any], world: WorldSnapshot) -> bool:
        """Compare the mean combat level of ``players`` to the range.

        With nobody around there is nothing to measure, so the gate fails.
        """
        if not players:
            return False
        total = 0.0
        for player in players:
            total += world.player_stats.combat_level(player) or 0
        return level_range.contains(total / len(players))

    def check_custom(self, predicate: CustomCondition, spawner: "Spawner", world: WorldSnapshot) -> bool:
        """Run a custom predicate; an exception counts as False."""
        try:
            return bool(predicate(spawner, world))
        except Exception as e:
            self.logger.error(
                "condition.custom_failed",
                spawner_id=spawner.spawner_id,
                predicate=getattr(predicate, "__name__", repr(predicate)),
                error=str(e),
                exc_info=True,
            )
            return False
