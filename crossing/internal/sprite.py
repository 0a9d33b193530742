from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Tuple

import numpy as np
from PIL import Image as PILImage
from PIL.Image import Image

from crossing.internal.math import Vector2D


@lru_cache(maxsize=None)
def load_sprite_sheet(image_path: str) -> Image:
    """Open a sprite sheet once per path; every sprite cuts frames from it."""
    return PILImage.open(image_path).convert("RGBA")


class Sprite:
    """
    Visual description of an entity: its size on the board and the location
    of its base image inside a shared sprite sheet.
    """

    def __init__(
        self,
        size: Vector2D,
        sheet_offset: Vector2D = Vector2D(0.0, 0.0),
        color: str = "#ffffff",
        image_path: Optional[str] = None,  # falls back to a flat rect of `color` if None
    ):
        self.size: Vector2D = size.copy()
        self.sheet_offset: Vector2D = sheet_offset.copy()
        self.color: str = color
        self.image_path: Optional[str] = image_path
        self._frame_arrays: Dict[Tuple[float, float], np.ndarray] = {}

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    def frame_offset(self, animation_left: float = 0.0, sequence_value: int = 0) -> Vector2D:
        """Sheet position of the frame to show for an animation step."""
        return Vector2D(
            self.sheet_offset.x + animation_left + self.size.x * sequence_value,
            self.sheet_offset.y,
        )

    def frame_array(self, offset: Vector2D) -> Optional[np.ndarray]:
        if self.image_path is None:
            return None

        key = (offset.x, offset.y)
        if key not in self._frame_arrays:
            sheet = load_sprite_sheet(self.image_path)
            box = (
                int(offset.x),
                int(offset.y),
                int(offset.x + self.size.x),
                int(offset.y + self.size.y),
            )
            self._frame_arrays[key] = np.array(sheet.crop(box), dtype=np.uint8)
        return self._frame_arrays[key]


@dataclass(frozen=True)
class Frame:
    """What the drawable service needs to paint one entity for one tick."""
    sprite: Sprite
    position: Vector2D
    sheet_offset: Vector2D
    visible: bool = True

    @property
    def size(self) -> Vector2D:
        return self.sprite.size


class Drawable(ABC):
    @abstractmethod
    def render_at(self, frame: Frame) -> None:
        """Paint the frame; must not fail and returns nothing."""


class NullDrawable(Drawable):
    def render_at(self, frame: Frame) -> None:
        pass
