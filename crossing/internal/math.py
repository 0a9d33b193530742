from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> int:
        """Horizontal sign of the direction, 0 for vertical ones."""
        if self is Direction.RIGHT:
            return 1
        if self is Direction.LEFT:
            return -1
        return 0


@dataclass
class Vector2D:
    x: float
    y: float

    def __add__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - other.x, self.y - other.y)

    @staticmethod
    def zero() -> "Vector2D":
        return Vector2D(0.0, 0.0)

    def copy(self) -> "Vector2D":
        return Vector2D(self.x, self.y)


@dataclass(frozen=True)
class Extent:
    """Horizontal interval in pixels, used for overlap tests."""
    left: float
    right: float

    @property
    def width(self) -> float:
        return self.right - self.left

    def overlaps(self, other: "Extent") -> bool:
        # Edges that only touch do not overlap
        return self.left < other.right and other.left < self.right

    def shifted(self, dx: float) -> "Extent":
        return Extent(self.left + dx, self.right + dx)

    @staticmethod
    def from_left(left: float, width: float) -> "Extent":
        return Extent(left, left + width)
