from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from crossing.internal.animation import AnimationSpec
from crossing.internal.math import Direction

# Grid
CELL_WIDTH = 80
CELL_HEIGHT = 80
NUM_ROWS = 16
NUM_COLUMNS = 11

# Timing (milliseconds)
REFRESH_RATE_MS = 1000 / 30
TIME_TOTAL_MS = 60000
RESET_DELAY_MS = 2000

# Run rules
MAX_LIVES = 5
GOALS_TO_WIN = 5
MOVE_POINTS = 20
GOAL_POINTS = 1000
INITIAL_HIGH_SCORE = 1000

# Actor start cell
ACTOR_START_ROW = 14
ACTOR_START_COLUMN = 6

SPRITE_SHEET_PATH = "./images/spritemap.png"


class ObstacleKind(Enum):
    VEHICLE = "vehicle"
    LOG = "log"
    TURTLE = "turtle"
    GOAL = "goal"
    GOAL_MARKER = "goal-marker"


class SafetyPolicy(Enum):
    HAZARD = "hazard"
    FLOAT = "float"
    SUBMERGIBLE_FLOAT = "submergible-float"
    GOAL = "goal"


@dataclass(frozen=True)
class ObstacleModel:
    """Everything needed to build one kind of obstacle on a lane."""
    name: str
    kind: ObstacleKind
    width: float
    sprite_left: float
    sprite_top: float
    height: float = CELL_HEIGHT
    # Plays on creation and on every reset
    animation: Optional[AnimationSpec] = None


RACE_CAR = ObstacleModel("race-car", ObstacleKind.VEHICLE, 80, 0, 80)
BULLDOZER = ObstacleModel("bulldozer", ObstacleKind.VEHICLE, 80, 80, 80)
TURBO_RACE_CAR = ObstacleModel("turbo-race-car", ObstacleKind.VEHICLE, 80, 160, 80)
ROAD_CAR = ObstacleModel("road-car", ObstacleKind.VEHICLE, 80, 240, 80)
TRUCK = ObstacleModel("truck", ObstacleKind.VEHICLE, 122, 320, 80)

SHORT_LOG = ObstacleModel("short-log", ObstacleKind.LOG, 190, 0, 160)
MEDIUM_LOG = ObstacleModel("medium-log", ObstacleKind.LOG, 254, 0, 240)
LONG_LOG = ObstacleModel("long-log", ObstacleKind.LOG, 392, 240, 160)

TWO_TURTLES = ObstacleModel(
    "two-turtles", ObstacleKind.TURTLE, 130, 320, 240,
    animation=AnimationSpec((0, 1, 2, 3, 3, 2, 1, 0) + (0,) * 12, rate=200, loop=True),
)
THREE_TURTLES = ObstacleModel(
    "three-turtles", ObstacleKind.TURTLE, 200, 0, 320,
    animation=AnimationSpec((0, 1, 2, 3, 3, 3, 2, 1, 0) + (0,) * 12, rate=300, loop=True),
)

GOAL = ObstacleModel("goal", ObstacleKind.GOAL, 80, 800, 320)
GOAL_MARKER = ObstacleModel("goal-marker", ObstacleKind.GOAL_MARKER, 80, 640, 80)

# Remaining-life icon shown by the HUD
LIFE_SPRITE_LEFT = 720
LIFE_SPRITE_TOP = 80
LIFE_SPRITE_SIZE = 40

ACTOR_SPRITE_TOP = 0
ACTOR_WIDTH = 80
LOSE_LIFE_ANIMATION = "lose-life"
ACTOR_ANIMATIONS: Dict[str, AnimationSpec] = {
    Direction.UP.value: AnimationSpec((1, 0), sprite_left=0),
    Direction.RIGHT.value: AnimationSpec((1, 0), sprite_left=160),
    Direction.DOWN.value: AnimationSpec((1, 0), sprite_left=320),
    Direction.LEFT.value: AnimationSpec((1, 0), sprite_left=480),
    LOSE_LIFE_ANIMATION: AnimationSpec((0, 1, 2), rate=350, sprite_left=640),
}


@dataclass(frozen=True)
class LaneSpec:
    """
    One horizontal lane of the obstacle field.

    Obstacles are placed either at fixed pixel offsets (`lefts`) or on
    board columns (`columns`); `lefts` wins when both are given.
    """
    row: int
    policy: SafetyPolicy
    model: ObstacleModel
    direction: Direction = Direction.LEFT
    speed: float = 0.0
    columns: Tuple[int, ...] = ()
    lefts: Tuple[float, ...] = ()


GOAL_LEFTS = (33, 237, 441, 645, 849)

DEFAULT_LANES: Tuple[LaneSpec, ...] = (
    LaneSpec(2, SafetyPolicy.GOAL, GOAL, lefts=GOAL_LEFTS),
    LaneSpec(3, SafetyPolicy.FLOAT, MEDIUM_LOG, Direction.RIGHT, 5, columns=(1, 6, 10)),
    LaneSpec(4, SafetyPolicy.SUBMERGIBLE_FLOAT, TWO_TURTLES, Direction.LEFT, 6, columns=(0, 3, 6, 9)),
    LaneSpec(5, SafetyPolicy.FLOAT, LONG_LOG, Direction.RIGHT, 7, columns=(1, 10)),
    LaneSpec(6, SafetyPolicy.FLOAT, SHORT_LOG, Direction.RIGHT, 3, columns=(1, 6, 10)),
    LaneSpec(7, SafetyPolicy.SUBMERGIBLE_FLOAT, THREE_TURTLES, Direction.LEFT, 5, columns=(0, 3, 7, 10)),
    LaneSpec(9, SafetyPolicy.HAZARD, TRUCK, Direction.LEFT, 3, columns=(1, 7)),
    LaneSpec(10, SafetyPolicy.HAZARD, TURBO_RACE_CAR, Direction.RIGHT, 12, columns=(1, 7)),
    LaneSpec(11, SafetyPolicy.HAZARD, ROAD_CAR, Direction.LEFT, 4, columns=(1, 7)),
    LaneSpec(12, SafetyPolicy.HAZARD, BULLDOZER, Direction.RIGHT, 3, columns=(1, 7)),
    LaneSpec(13, SafetyPolicy.HAZARD, RACE_CAR, Direction.LEFT, 4, columns=(2, 6)),
)


@dataclass(frozen=True)
class GameConfig:
    num_rows: int = NUM_ROWS
    num_columns: int = NUM_COLUMNS
    cell_width: float = CELL_WIDTH
    cell_height: float = CELL_HEIGHT

    refresh_rate_ms: float = REFRESH_RATE_MS
    time_total_ms: float = TIME_TOTAL_MS
    reset_delay_ms: float = RESET_DELAY_MS

    max_lives: int = MAX_LIVES
    goals_to_win: int = GOALS_TO_WIN
    move_points: int = MOVE_POINTS
    goal_points: int = GOAL_POINTS
    initial_high_score: int = INITIAL_HIGH_SCORE

    actor_start_row: int = ACTOR_START_ROW
    actor_start_column: int = ACTOR_START_COLUMN
    actor_width: float = ACTOR_WIDTH

    lanes: Tuple[LaneSpec, ...] = DEFAULT_LANES
    actor_animations: Dict[str, AnimationSpec] = field(default_factory=lambda: dict(ACTOR_ANIMATIONS))
    sprite_sheet_path: Optional[str] = None

    def validate(self) -> None:
        """Raise ValueError when the layout does not fit the board."""
        num_rows = self.num_rows
        if self.refresh_rate_ms <= 0:
            raise ValueError(f"Refresh rate must be positive, got {self.refresh_rate_ms}.")
        if self.max_lives < 1 or self.goals_to_win < 1:
            raise ValueError("A run needs at least one life and one goal.")
        if not 0 <= self.actor_start_row < num_rows:
            raise ValueError(f"Actor start row {self.actor_start_row} is outside the board.")
        if not 0 <= self.actor_start_column < self.num_columns:
            raise ValueError(f"Actor start column {self.actor_start_column} is outside the board.")

        seen = set()
        for lane in self.lanes:
            if not 0 <= lane.row < num_rows:
                raise ValueError(f"Lane row {lane.row} is outside the board (0..{num_rows - 1}).")
            if lane.row in seen:
                raise ValueError(f"Two lanes share row {lane.row}.")
            seen.add(lane.row)
            if lane.speed < 0:
                raise ValueError(f"Lane {lane.row} has a negative speed.")
            for column in lane.columns:
                if not 0 <= column < self.num_columns:
                    raise ValueError(f"Lane {lane.row} places an obstacle on column {column}.")
