from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional
from uuid import uuid4

from crossing.internal.animation import Animation, AnimationSpec
from crossing.internal.math import Extent, Vector2D
from crossing.internal.sprite import Frame, Sprite

if TYPE_CHECKING:
    from crossing.context import GameContext


class BaseEntity:
    def __init__(self, context: GameContext, position: Vector2D, sprite: Sprite):
        self.id = uuid4()
        self.context = context
        self.sprite = sprite

        self._position = position.copy()
        self._start_position = position.copy()
        self._hidden = False

        self.animations: Dict[str, Animation] = {}
        self._current_animation: Optional[Animation] = None

    @property
    def left(self) -> float:
        return self._position.x

    @property
    def top(self) -> float:
        return self._position.y

    @property
    def position(self) -> Vector2D:
        return self._position.copy()

    @property
    def start_position(self) -> Vector2D:
        return self._start_position.copy()

    @property
    def width(self) -> float:
        return self.sprite.width

    @property
    def hidden(self) -> bool:
        return self._hidden

    @property
    def current_animation(self) -> Optional[Animation]:
        return self._current_animation

    def get_position(self) -> Extent:
        return Extent.from_left(self._position.x, self.width)

    def set_start_position(self, position: Vector2D) -> None:
        self._start_position = position.copy()

    def move_to(self, left: float, top: Optional[float] = None) -> None:
        self._position.x = left
        if top is not None:
            self._position.y = top

    def hide(self) -> None:
        self._hidden = True

    def show(self) -> None:
        self._hidden = False

    def register_animation(self, name: str, spec: AnimationSpec) -> Animation:
        animation = Animation(spec, self.context.scheduler)
        self.animations[name] = animation
        return animation

    def play_animation(self, name: str) -> None:
        animation = self.animations[name]
        if self._current_animation is not None and self._current_animation is not animation:
            self._current_animation.stop()
        self._current_animation = animation
        animation.play()

    def reset_animation(self) -> None:
        if self._current_animation is not None:
            self._current_animation.stop()
            self._current_animation.reset()
        self._current_animation = None

    def frame(self, left: float, top: float) -> Frame:
        animation = self._current_animation
        if animation is None:
            sheet_offset = self.sprite.frame_offset()
        else:
            sheet_offset = self.sprite.frame_offset(animation.sprite_left, animation.sequence_value)
        return Frame(
            sprite=self.sprite,
            position=Vector2D(left, top),
            sheet_offset=sheet_offset,
            visible=not self._hidden,
        )

    def render_at(self, left: float, top: float) -> None:
        self.context.drawable.render_at(self.frame(left, top))

    def render(self) -> None:
        self.render_at(self._position.x, self._position.y)

    def reset(self) -> None:
        self._position = self._start_position.copy()
        self.reset_animation()
        self.show()
