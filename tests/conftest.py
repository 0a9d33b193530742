from __future__ import annotations

import dataclasses
from typing import Any, List, Tuple

import pytest

from crossing.board import Board
from crossing.config import GOAL, GOAL_LEFTS, GameConfig, LaneSpec, SafetyPolicy
from crossing.context import GameContext
from crossing.internal.events import EventBus, Topic
from crossing.internal.sprite import Drawable, Frame
from crossing.simulation import Game


class RecordingDrawable(Drawable):
    def __init__(self) -> None:
        self.frames: List[Frame] = []

    def render_at(self, frame: Frame) -> None:
        self.frames.append(frame)


class EventLog:
    """Records every publish on a bus, in order."""

    def __init__(self, bus: EventBus) -> None:
        self.records: List[Tuple[Topic, Tuple[Any, ...]]] = []
        for topic in Topic:
            bus.subscribe(topic, self._recorder(topic))

    def _recorder(self, topic: Topic):
        def record(*args: Any) -> None:
            self.records.append((topic, args))
        return record

    def topics(self) -> List[Topic]:
        return [topic for topic, _ in self.records]

    def count(self, topic: Topic) -> int:
        return sum(1 for t, _ in self.records if t is topic)

    def args(self, topic: Topic) -> List[Tuple[Any, ...]]:
        return [args for t, args in self.records if t is topic]

    def clear(self) -> None:
        self.records.clear()


GOAL_ONLY_LANES = (LaneSpec(2, SafetyPolicy.GOAL, GOAL, lefts=GOAL_LEFTS),)


@pytest.fixture
def recorder() -> RecordingDrawable:
    return RecordingDrawable()


@pytest.fixture
def context(recorder) -> GameContext:
    return GameContext(drawable=recorder)


@pytest.fixture
def board(context) -> Board:
    board = Board(context)
    board.initialize()
    return board


@pytest.fixture
def make_game(recorder):
    def build(**overrides: Any) -> Tuple[Game, EventLog]:
        config = dataclasses.replace(GameConfig(), **overrides)
        game = Game(config=config, drawable=recorder)
        events = EventLog(game.bus)
        game.load()
        return game, events
    return build


@pytest.fixture
def game(make_game) -> Game:
    game, _ = make_game()
    return game


@pytest.fixture
def goal_game(make_game) -> Tuple[Game, EventLog]:
    """A board whose only lane is the goal row."""
    return make_game(lanes=GOAL_ONLY_LANES)
