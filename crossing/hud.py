from __future__ import annotations

from typing import TYPE_CHECKING

from crossing.internal.events import Topic

if TYPE_CHECKING:
    from crossing.context import GameContext


class Hud:
    """HUD state kept in sync with the run through the bus."""

    def __init__(self, context: GameContext):
        self.context = context
        self.score: int = 0
        self.high_score: int = 0
        self.lives: int = context.config.max_lives
        self.time_fraction: float = 1.0
        self.game_over: bool = False
        self.won: bool = False

        bus = context.bus
        bus.subscribe(Topic.SCORE_CHANGE, self._on_score)
        bus.subscribe(Topic.HIGH_SCORE_CHANGE, self._on_high_score)
        bus.subscribe(Topic.TIME_REMAINING_CHANGE, self._on_time_remaining)
        bus.subscribe(Topic.PLAYER_LOST_LIFE, self._on_lost_life)
        bus.subscribe(Topic.GAME_OVER, self._on_game_over)
        bus.subscribe(Topic.GAME_WON, self._on_game_won)
        bus.subscribe(Topic.RESET, self._on_reset)

    def _on_score(self, score: int) -> None:
        self.score = score

    def _on_high_score(self, high_score: int) -> None:
        self.high_score = high_score

    def _on_time_remaining(self, fraction: float) -> None:
        self.time_fraction = fraction

    def _on_lost_life(self) -> None:
        self.lives = max(0, self.lives - 1)

    def _on_game_over(self) -> None:
        self.game_over = True

    def _on_game_won(self) -> None:
        self.won = True

    def _on_reset(self) -> None:
        self.game_over = False
        self.won = False
        self.time_fraction = 1.0
