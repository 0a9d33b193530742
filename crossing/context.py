from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from crossing.config import GameConfig
from crossing.internal.events import EventBus
from crossing.internal.scheduler import Scheduler
from crossing.internal.sprite import Drawable, NullDrawable

if TYPE_CHECKING:
    from crossing.board import Board


class GameContext:
    """Per-game collaborators shared by every component of one run."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
        drawable: Optional[Drawable] = None,
    ):
        self.config = config or GameConfig()
        self.config.validate()
        self.bus = bus or EventBus()
        self.scheduler = scheduler or Scheduler()
        self.drawable = drawable or NullDrawable()

        # Set once the board publishes its geometry
        self.board: Optional[Board] = None

    def set_drawable(self, drawable: Drawable) -> None:
        self.drawable = drawable
