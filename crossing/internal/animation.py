from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from crossing.internal.scheduler import Scheduler, TaskHandle

DEFAULT_FRAME_RATE_MS = 150.0


@dataclass(frozen=True)
class AnimationSpec:
    """
    Static description of an animation.

    `sequence` holds, per frame, the multiple of the sprite width to offset
    into the sprite sheet, starting from `sprite_left`.
    """
    sequence: Tuple[int, ...]
    rate: float = DEFAULT_FRAME_RATE_MS
    loop: bool = False
    sprite_left: float = 0.0


class Animation:
    """Frame index state machine advanced by its own scheduler clock."""

    def __init__(self, spec: AnimationSpec, scheduler: Scheduler):
        self.spec = spec
        self.scheduler = scheduler

        self.frame: int = 0
        self.playing: bool = False
        self._clock: Optional[TaskHandle] = None

    @property
    def sequence(self) -> Sequence[int]:
        return self.spec.sequence

    @property
    def loop(self) -> bool:
        return self.spec.loop

    @property
    def sprite_left(self) -> float:
        return self.spec.sprite_left

    @property
    def sequence_value(self) -> int:
        if not self.spec.sequence:
            return 0
        return self.spec.sequence[self.frame]

    @property
    def max_sequence_value(self) -> int:
        return max(self.spec.sequence, default=0)

    def play(self) -> None:
        if not self.playing:
            self.reset()
            self.playing = True

        if self._clock is not None:
            self._clock.cancel()
        self._clock = self.scheduler.call_every(self.spec.rate, self.increment)

    def increment(self) -> None:
        if not self.playing:
            return

        last_frame = len(self.spec.sequence) - 1
        self.frame = min(self.frame + 1, max(last_frame, 0))
        if self.frame >= last_frame:
            if self.spec.loop:
                self.reset()
            else:
                self.stop()

    def reset(self) -> None:
        self.frame = 0

    def stop(self) -> None:
        if self._clock is not None:
            self._clock.cancel()
            self._clock = None
        self.playing = False
