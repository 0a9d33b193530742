from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from crossing.config import ACTOR_SPRITE_TOP, LOSE_LIFE_ANIMATION
from crossing.entities.core import BaseEntity
from crossing.internal.events import Topic
from crossing.internal.log import get_logger
from crossing.internal.math import Direction, Extent, Vector2D
from crossing.internal.sprite import Sprite

if TYPE_CHECKING:
    from crossing.board import Board
    from crossing.context import GameContext

log = get_logger("actor")


class Actor(BaseEntity):
    """
    The player-controlled character.

    Its pixel position is clamped to the board bounds on every change and its
    logical row only follows moves that actually changed `top`. The actor is
    placed on its start cell when the board publishes its geometry.
    """

    def __init__(self, context: GameContext):
        config = context.config
        sprite = Sprite(
            size=Vector2D(config.actor_width, config.cell_height),
            sheet_offset=Vector2D(0.0, ACTOR_SPRITE_TOP),
            color="#16c542",
            image_path=config.sprite_sheet_path,
        )
        super().__init__(context, Vector2D(0.0, 0.0), sprite)

        self.start_row: int = config.actor_start_row
        self.start_column: int = config.actor_start_column
        self.row: int = self.start_row
        self._frozen = False
        self._board: Optional[Board] = None

        for name, spec in config.actor_animations.items():
            self.register_animation(name, spec)

        bus = context.bus
        bus.subscribe(Topic.BOARD_INITIALIZE, self._on_board_initialize)
        bus.subscribe(Topic.PLAYER_FREEZE, self.freeze)
        bus.subscribe(Topic.PLAYER_UNFREEZE, self.unfreeze)
        bus.subscribe(Topic.PLAYER_LOST_LIFE, self._on_lost_life)
        bus.subscribe(Topic.PLAYER_AT_GOAL, self.hide)
        bus.subscribe(Topic.LANE_DRIFT, self._on_lane_drift)
        bus.subscribe(Topic.RESET, self.reset)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def board(self) -> Board:
        if self._board is None:
            raise RuntimeError("Actor used before the board was initialized.")
        return self._board

    def freeze(self) -> None:
        self._frozen = True

    def unfreeze(self) -> None:
        self._frozen = False

    def extent(self) -> Extent:
        return self.get_position()

    def move(self, direction: Direction) -> None:
        if self._frozen:
            return

        board = self.board
        bounds = board.bounds
        left, top = self.left, self.top

        if direction is Direction.UP:
            top = max(top - board.cell_height, bounds.top)
        elif direction is Direction.DOWN:
            top = min(top + board.cell_height, bounds.bottom)
        elif direction is Direction.LEFT:
            left = max(left - board.cell_width, bounds.left)
        elif direction is Direction.RIGHT:
            left = min(left + board.cell_width, bounds.right)

        if top != self.top:
            self.row += 1 if top > self.top else -1
        self.move_to(left, top)
        self.play_animation(direction.value)

        # A clamped attempt still counts as a move
        self.context.bus.publish(Topic.PLAYER_MOVED)

    def set_position(self, left: float) -> None:
        bounds = self.board.bounds
        self.move_to(min(max(left, bounds.left), bounds.right))

    def reset(self) -> None:
        super().reset()
        self.row = self.start_row

    def _on_board_initialize(self, board: Board) -> None:
        self._board = board
        self.set_start_position(Vector2D(
            board.column_left(self.start_column),
            board.row_top(self.start_row),
        ))
        self.reset()

    def _on_lost_life(self) -> None:
        log.debug("Lost a life on row %d at left=%g", self.row, self.left)
        self.play_animation(LOSE_LIFE_ANIMATION)

    def _on_lane_drift(self, top: float, dx: float) -> None:
        if top == self.top:
            self.set_position(self.left + dx)
