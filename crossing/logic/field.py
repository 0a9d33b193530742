from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from crossing.config import ObstacleKind
from crossing.internal.events import Topic
from crossing.internal.log import get_logger
from crossing.internal.math import Extent
from crossing.logic.lane import Lane

if TYPE_CHECKING:
    from crossing.board import Board
    from crossing.context import GameContext

log = get_logger("field")


class ObstacleField:
    """Owns every lane; built from the configured layout once the board exists."""

    def __init__(self, context: GameContext):
        self.context = context
        self.lanes: List[Lane] = []
        self._lanes_by_top: Dict[float, Lane] = {}

        context.bus.subscribe(Topic.BOARD_INITIALIZE, self._on_board_initialize)
        context.bus.subscribe(Topic.RESET, self.reset)

    def _on_board_initialize(self, board: Board) -> None:
        self.lanes = [Lane(self.context, spec, board) for spec in self.context.config.lanes]
        self._lanes_by_top = {lane.top: lane for lane in self.lanes}
        log.debug("Built %d lanes", len(self.lanes))

    def lane_at(self, top: float) -> Optional[Lane]:
        return self._lanes_by_top.get(top)

    @property
    def claimed_goals(self) -> int:
        return sum(
            1
            for lane in self.lanes
            for obstacle in lane.obstacles
            if obstacle.kind is ObstacleKind.GOAL and obstacle.claimed
        )

    def render(self) -> None:
        for lane in self.lanes:
            lane.render()

    def check_collisions(self, actor_top: float, actor_extent: Extent) -> bool:
        lane = self.lane_at(actor_top)
        if lane is None:
            return False

        collided = lane.is_collision(actor_extent)
        if collided:
            log.debug("Collision on row %d (%s)", lane.row, lane.policy.value)
            self.context.bus.publish(Topic.COLLISION)
        return collided

    def reset(self) -> None:
        for lane in self.lanes:
            lane.reset()
