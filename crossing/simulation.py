from __future__ import annotations

import asyncio
import time
from typing import Optional

from crossing.board import Board
from crossing.config import GameConfig
from crossing.context import GameContext
from crossing.entities.actor import Actor
from crossing.hud import Hud
from crossing.internal.events import EventBus, Topic
from crossing.internal.log import get_logger
from crossing.internal.math import Direction
from crossing.internal.scheduler import Scheduler
from crossing.internal.sprite import Drawable
from crossing.logic.field import ObstacleField
from crossing.logic.run_state import RunStateMachine

log = get_logger("simulation")

# Float noise allowed when comparing elapsed time to the frame budget
_FRAME_EPSILON_MS = 1e-6


class Game:
    """
    One run of the game.

    Every component subscribes to the bus while the game is built; `load()`
    then lets the board publish its geometry, which builds the lanes and
    places the actor. Time only moves through `frame(now_ms)` or `step()`,
    so a headless game is fully deterministic.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        drawable: Optional[Drawable] = None,
        context: Optional[GameContext] = None,
    ):
        self.context = context or GameContext(config=config, drawable=drawable)

        self.board = Board(self.context)
        self.field = ObstacleField(self.context)
        self.actor = Actor(self.context)
        self.run_state = RunStateMachine(self.context)
        self.hud = Hud(self.context)

        self.updates: int = 0
        self._loaded = False
        self._last_update: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def bus(self) -> EventBus:
        return self.context.bus

    @property
    def scheduler(self) -> Scheduler:
        return self.context.scheduler

    @property
    def config(self) -> GameConfig:
        return self.context.config

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        log.debug("Loading game")
        self.bus.publish(Topic.LOAD)

    def move(self, direction: Direction) -> None:
        self.actor.move(direction)

    def frame(self, now_ms: float) -> bool:
        """
        Advance virtual time to `now_ms` and update if a whole frame budget
        elapsed since the last update. Returns whether an update ran.
        """
        self.load()
        self.scheduler.advance_to(now_ms)

        if self._last_update is not None:
            elapsed = now_ms - self._last_update
            if elapsed + _FRAME_EPSILON_MS < self.config.refresh_rate_ms:
                return False
        self._last_update = now_ms
        self.update()
        return True

    def step(self, frames: int = 1) -> None:
        """Run `frames` updates, one frame budget of virtual time apart."""
        self.load()
        for _ in range(frames):
            now_ms = self.scheduler.now + self.config.refresh_rate_ms
            self.scheduler.advance_to(now_ms)
            self._last_update = now_ms
            self.update()

    def advance(self, ms: float) -> None:
        """Let virtual time pass without updating the field."""
        self.scheduler.advance(ms)

    def update(self) -> None:
        bus = self.bus
        run_state = self.run_state

        bus.publish(Topic.RENDER_START)
        if not run_state.frozen:
            run_state.count_down()

        self.field.render()

        if not run_state.frozen:
            self.field.check_collisions(self.actor.top, self.actor.extent())

        self.actor.render()
        bus.publish(Topic.RENDER_HUD)
        self.updates += 1

    def start(self) -> None:
        self.load()
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop())

    def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _loop(self) -> None:
        origin = time.monotonic()
        offset = self.scheduler.now
        interval = self.config.refresh_rate_ms / 1000.0
        try:
            while True:
                now_ms = offset + (time.monotonic() - origin) * 1000.0
                self.frame(now_ms)
                # Poll faster than the frame budget; frame() throttles
                await asyncio.sleep(interval / 2)
        except asyncio.CancelledError:
            pass
