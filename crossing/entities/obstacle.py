from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from crossing.config import ObstacleKind, ObstacleModel
from crossing.entities.core import BaseEntity
from crossing.internal.math import Vector2D
from crossing.internal.sprite import Sprite

if TYPE_CHECKING:
    from crossing.context import GameContext

# Flat colors used when no sprite sheet is configured
KIND_COLORS: Dict[ObstacleKind, str] = {
    ObstacleKind.VEHICLE: "#ff6b6b",
    ObstacleKind.LOG: "#8b5a2b",
    ObstacleKind.TURTLE: "#16c542",
    ObstacleKind.GOAL: "#2d3436",
    ObstacleKind.GOAL_MARKER: "#78b7ff",
}

DIVE_ANIMATION = "dive"


class Obstacle(BaseEntity):
    """
    Anything a lane carries: vehicles, logs, turtles, goals and the markers
    left on claimed goals. Goals and markers never move once placed.
    """

    IMMOVABLE_KINDS = (ObstacleKind.GOAL, ObstacleKind.GOAL_MARKER)

    def __init__(
        self,
        context: GameContext,
        model: ObstacleModel,
        position: Vector2D,
    ):
        sprite = Sprite(
            size=Vector2D(model.width, model.height),
            sheet_offset=Vector2D(model.sprite_left, model.sprite_top),
            color=KIND_COLORS[model.kind],
            image_path=context.config.sprite_sheet_path,
        )
        super().__init__(context, position, sprite)
        self.model = model
        self.claimed = False

        if model.animation is not None:
            self.register_animation(DIVE_ANIMATION, model.animation)
            self.play_animation(DIVE_ANIMATION)

    @classmethod
    def from_model(
        cls,
        context: GameContext,
        model: ObstacleModel,
        left: float,
        top: float,
    ) -> "Obstacle":
        return cls(context, model, Vector2D(left, top))

    @property
    def kind(self) -> ObstacleKind:
        return self.model.kind

    @property
    def name(self) -> str:
        return self.model.name

    @property
    def is_immovable(self) -> bool:
        return self.kind in self.IMMOVABLE_KINDS

    @property
    def is_submerged(self) -> bool:
        """A turtle is under water while its dive shows the deepest frame."""
        if self.kind is not ObstacleKind.TURTLE:
            return False
        animation = self.current_animation
        if animation is None or not animation.sequence:
            return False
        return animation.sequence_value == animation.max_sequence_value

    def move_to(self, left: float, top: Optional[float] = None) -> None:
        if self.is_immovable:
            return
        super().move_to(left, top)

    def claim(self) -> bool:
        """Mark a goal as reached; False if it was already claimed."""
        if self.kind is not ObstacleKind.GOAL or self.claimed:
            return False
        self.claimed = True
        return True

    def reset(self) -> None:
        super().reset()
        if DIVE_ANIMATION in self.animations:
            self.play_animation(DIVE_ANIMATION)

    def __repr__(self) -> str:
        return f"Obstacle({self.name}, left={self.left}, top={self.top})"
