from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from crossing.config import GOAL_MARKER, LaneSpec, ObstacleKind, SafetyPolicy
from crossing.entities.obstacle import Obstacle
from crossing.internal.events import Topic
from crossing.internal.log import get_logger
from crossing.internal.math import Extent

if TYPE_CHECKING:
    from crossing.board import Board
    from crossing.context import GameContext

log = get_logger("lane")

FLOATING_POLICIES = (SafetyPolicy.FLOAT, SafetyPolicy.SUBMERGIBLE_FLOAT)


class Lane:
    """
    A row of obstacles moving at a constant speed, wrapping around the field.

    The safety policy decides what touching the lane's obstacles means:

    - HAZARD: touching any obstacle is a collision.
    - FLOAT: the obstacles carry the actor, missing them all is a collision.
    - SUBMERGIBLE_FLOAT: as FLOAT, but a submerged obstacle does not carry.
    - GOAL: the first goal touched is claimed unless it already was; a claimed
      goal or a gap is a collision.
    """

    def __init__(self, context: GameContext, spec: LaneSpec, board: Board):
        self.context = context
        self.spec = spec
        self.row: int = spec.row
        self.top: float = board.row_top(spec.row)
        self.policy: SafetyPolicy = spec.policy
        self.direction = spec.direction
        self.speed: float = 0.0 if spec.policy is SafetyPolicy.GOAL else float(spec.speed)
        self.field_width: float = board.width

        lefts = spec.lefts or tuple(board.column_left(column) for column in spec.columns)
        self.obstacles: List[Obstacle] = [
            Obstacle.from_model(context, spec.model, left, self.top)
            for left in lefts
        ]

    @property
    def displacement(self) -> float:
        """Signed pixels every obstacle travels per frame."""
        return self.direction.sign * self.speed

    @property
    def goals(self) -> List[Obstacle]:
        return [o for o in self.obstacles if o.kind is ObstacleKind.GOAL]

    def wrap(self, left: float, width: float) -> float:
        if left < -width:
            return self.field_width
        if left >= self.field_width:
            return -width
        return left

    def advance(self) -> None:
        dx = self.displacement
        if dx == 0:
            return
        for obstacle in self.obstacles:
            obstacle.move_to(self.wrap(obstacle.left + dx, obstacle.width))

    def render(self) -> None:
        # Carry whoever stands on this row before the obstacles move
        if self.policy in FLOATING_POLICIES and self.displacement != 0:
            self.context.bus.publish(Topic.LANE_DRIFT, self.top, self.displacement)

        self.advance()
        for obstacle in self.obstacles:
            obstacle.render()

    def overlapping(self, extent: Extent) -> List[Obstacle]:
        return [o for o in self.obstacles if o.get_position().overlaps(extent)]

    def is_collision(self, extent: Extent) -> bool:
        if self.policy is SafetyPolicy.HAZARD:
            return bool(self.overlapping(extent))

        if self.policy is SafetyPolicy.FLOAT:
            return not self.overlapping(extent)

        if self.policy is SafetyPolicy.SUBMERGIBLE_FLOAT:
            carriers = self.overlapping(extent)
            return not carriers or any(o.is_submerged for o in carriers)

        return self._check_goal(extent)

    def _check_goal(self, extent: Extent) -> bool:
        goal = self._first_overlapping_goal(extent)
        if goal is None or goal.claimed:
            return True

        goal.claim()
        self.obstacles.append(
            Obstacle.from_model(self.context, GOAL_MARKER, goal.left, self.top)
        )
        log.info("Goal at left=%g claimed", goal.left)
        self.context.bus.publish(Topic.PLAYER_AT_GOAL)
        return False

    def _first_overlapping_goal(self, extent: Extent) -> Optional[Obstacle]:
        for goal in self.goals:
            if goal.get_position().overlaps(extent):
                return goal
        return None

    def reset(self) -> None:
        for obstacle in self.obstacles:
            obstacle.reset()
