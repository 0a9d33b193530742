from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from crossing.fsm.core import EventData, Machine
from crossing.internal.events import Topic
from crossing.internal.log import get_logger
from crossing.internal.scheduler import TaskHandle

if TYPE_CHECKING:
    from crossing.context import GameContext

log = get_logger("run_state")


class RunStateMachine:
    """
    Owns the run: score, lives, countdown timer and claimed goals.

    Collisions, goals and moves arrive as events; the outcome is published
    back on the bus. Losing a life or reaching a goal freezes the actor and
    schedules a recovery, which is dropped if the run moved on meanwhile.
    """

    class Phase(Enum):
        PLAYING = "playing"
        LOSING_LIFE = "losing-life"
        AT_GOAL = "at-goal"
        GAME_OVER = "game-over"
        WON = "won"

    def __init__(self, context: GameContext):
        self.context = context
        config = context.config

        self.score: int = 0
        self.high_score: int = config.initial_high_score
        self.lives: int = config.max_lives
        self.goals: int = 0
        self.time_total: float = config.time_total_ms
        self.time_remaining: float = config.time_total_ms
        self._ticks: int = 0
        self._frozen: bool = False

        self._generation: int = 0
        self._recovery: Optional[TaskHandle] = None

        Phase = RunStateMachine.Phase
        self.machine = Machine(
            states=list(Phase),
            initial_state=Phase.PLAYING,
            final_states=[Phase.GAME_OVER, Phase.WON],
            name="run",
        )
        self.machine.add_transition(
            Phase.PLAYING, Phase.LOSING_LIFE, "lose_life",
            conditions=lambda _: self.lives > 0,
        )
        self.machine.add_transition(Phase.PLAYING, Phase.GAME_OVER, "lose_life")
        self.machine.add_transition(
            Phase.PLAYING, Phase.AT_GOAL, "reach_goal",
            conditions=lambda _: self.goals < config.goals_to_win,
        )
        self.machine.add_transition(Phase.PLAYING, Phase.WON, "reach_goal")
        self.machine.add_transition([Phase.LOSING_LIFE, Phase.AT_GOAL], Phase.PLAYING, "recover")

        self.machine.on_enter(Phase.LOSING_LIFE, self._schedule_recovery)
        self.machine.on_enter(Phase.AT_GOAL, self._schedule_recovery)
        self.machine.on_enter(Phase.GAME_OVER, self._on_game_over)
        self.machine.on_enter(Phase.WON, self._on_won)

        bus = context.bus
        bus.subscribe(Topic.LOAD, self._on_load)
        bus.subscribe(Topic.COLLISION, self.lose_life)
        bus.subscribe(Topic.PLAYER_AT_GOAL, self.reach_goal)
        bus.subscribe(Topic.PLAYER_MOVED, self._on_player_moved)

    @property
    def phase(self) -> "RunStateMachine.Phase":
        return self.machine.current_state.key

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def is_over(self) -> bool:
        return self.machine.is_final

    @property
    def time_fraction(self) -> float:
        return self.time_remaining / self.time_total if self.time_total else 0.0

    def count_down(self) -> None:
        if self.phase is not RunStateMachine.Phase.PLAYING:
            return

        self._ticks += 1
        budget = self.context.config.refresh_rate_ms
        # Rounded so that a whole number of frames empties the timer exactly
        self.time_remaining = max(0.0, round(self.time_total - self._ticks * budget, 6))
        self.context.bus.publish(Topic.TIME_REMAINING_CHANGE, self.time_fraction)

        if self.time_remaining == 0:
            log.debug("Time ran out")
            self.lose_life()

    def lose_life(self) -> None:
        if self.phase is not RunStateMachine.Phase.PLAYING:
            return

        self.lives -= 1
        self._freeze()
        log.info("Life lost, %d left", self.lives)
        self.context.bus.publish(Topic.PLAYER_LOST_LIFE)
        self.machine.trigger("lose_life", strict=True)

    def reach_goal(self) -> None:
        if self.phase is not RunStateMachine.Phase.PLAYING:
            return

        self.increase_score(self.context.config.goal_points)
        self.goals += 1
        self._freeze()
        log.info("Goal %d of %d reached", self.goals, self.context.config.goals_to_win)
        self.machine.trigger("reach_goal", strict=True)

    def increase_score(self, points: int) -> None:
        self.score += points
        self.context.bus.publish(Topic.SCORE_CHANGE, self.score)
        if self.score > self.high_score:
            self.high_score = self.score
            self.context.bus.publish(Topic.HIGH_SCORE_CHANGE, self.high_score)

    def recover(self, generation: Optional[int] = None) -> bool:
        """
        Restart play after a lost life or a claimed goal. A recovery scheduled
        for an earlier generation, or arriving outside a waiting phase, is
        ignored.
        """
        if generation is not None and generation != self._generation:
            log.debug("Discarding stale recovery (generation %d)", generation)
            return False
        if not self.machine.trigger("recover"):
            log.debug("Discarding recovery in phase %s", self.phase.name)
            return False

        self._recovery = None
        self._generation += 1
        self._ticks = 0
        self.time_remaining = self.time_total
        self._unfreeze()
        self.context.bus.publish(Topic.RESET)
        return True

    def _schedule_recovery(self, data: EventData) -> None:
        generation = self._generation
        self._recovery = self.context.scheduler.call_later(
            self.context.config.reset_delay_ms,
            lambda: self.recover(generation),
        )

    def _cancel_recovery(self) -> None:
        self._generation += 1
        if self._recovery is not None:
            self._recovery.cancel()
            self._recovery = None

    def _on_game_over(self, data: EventData) -> None:
        self._cancel_recovery()
        self._freeze()
        log.info("Game over with score %d", self.score)
        self.context.bus.publish(Topic.GAME_OVER)

    def _on_won(self, data: EventData) -> None:
        self._cancel_recovery()
        log.info("All %d goals reached, score %d", self.goals, self.score)
        self.context.bus.publish(Topic.GAME_WON)

    def _on_load(self) -> None:
        self.context.bus.publish(Topic.HIGH_SCORE_CHANGE, self.high_score)

    def _on_player_moved(self) -> None:
        if self.phase is RunStateMachine.Phase.PLAYING:
            self.increase_score(self.context.config.move_points)

    def _freeze(self) -> None:
        self._frozen = True
        self.context.bus.publish(Topic.PLAYER_FREEZE)

    def _unfreeze(self) -> None:
        self._frozen = False
        self.context.bus.publish(Topic.PLAYER_UNFREEZE)
