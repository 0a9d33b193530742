from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from crossing.internal.events import Topic
from crossing.internal.log import get_logger

if TYPE_CHECKING:
    from crossing.context import GameContext

log = get_logger("board")


@dataclass(frozen=True)
class Bounds:
    """Pixel box the actor's top-left corner must stay within."""
    left: float
    right: float
    top: float
    bottom: float


class Board:
    """
    Grid geometry of the playing field.

    Nothing is computed until the `load` event: then the row and column pixel
    tables are filled and `board-initialize` is published with the board,
    exactly once.
    """

    def __init__(self, context: GameContext):
        self.context = context
        config = context.config

        self.num_rows: int = config.num_rows
        self.num_columns: int = config.num_columns
        self.cell_width: float = config.cell_width
        self.cell_height: float = config.cell_height

        self.rows: np.ndarray = np.empty(0)
        self.columns: np.ndarray = np.empty(0)
        self.bounds: Bounds = Bounds(0.0, 0.0, 0.0, 0.0)
        self._initialized = False

        context.bus.subscribe(Topic.LOAD, self.initialize)

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def width(self) -> float:
        return self.num_columns * self.cell_width

    @property
    def height(self) -> float:
        return self.num_rows * self.cell_height

    def initialize(self) -> None:
        if self._initialized:
            log.debug("Board already initialized, ignoring")
            return

        self.rows = np.arange(self.num_rows, dtype=float) * self.cell_height
        self.columns = np.arange(self.num_columns, dtype=float) * self.cell_width
        self.rows.setflags(write=False)
        self.columns.setflags(write=False)

        self.bounds = Bounds(
            left=0.0,
            right=self.width,
            top=2 * self.cell_height,
            bottom=(self.num_rows - 2) * self.cell_height,
        )
        self._initialized = True
        self.context.board = self
        log.debug(
            "Board %dx%d cells of %gx%g px",
            self.num_columns, self.num_rows, self.cell_width, self.cell_height,
        )
        self.context.bus.publish(Topic.BOARD_INITIALIZE, self)

    def row_top(self, row: int) -> float:
        return float(self.rows[row])

    def column_left(self, column: int) -> float:
        return float(self.columns[column])

    def row_at(self, top: float) -> int:
        """Row index whose offset equals `top`, or -1."""
        matches = np.flatnonzero(self.rows == top)
        return int(matches[0]) if matches.size else -1
