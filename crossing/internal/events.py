from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, List, Union

Handler = Callable[..., Any]


class Topic(Enum):
    LOAD = "load"
    BOARD_INITIALIZE = "board-initialize"

    PLAYER_MOVED = "player-moved"
    PLAYER_AT_GOAL = "player-at-goal"
    PLAYER_FREEZE = "player-freeze"
    PLAYER_UNFREEZE = "player-unfreeze"
    PLAYER_LOST_LIFE = "player-lost-life"
    COLLISION = "collision"
    LANE_DRIFT = "lane-drift"
    RESET = "reset"

    SCORE_CHANGE = "score-change"
    HIGH_SCORE_CHANGE = "high-score-change"
    TIME_REMAINING_CHANGE = "time-remaining-change"
    GAME_OVER = "game-over"
    GAME_WON = "game-won"

    RENDER_START = "render-start"
    RENDER_HUD = "render-hud"


TopicKey = Union[Topic, str]


class EventBus:
    """
    Synchronous publish/subscribe channel.

    Handlers run in registration order on the publisher's call stack, so a
    handler may publish again (re-entrant, never concurrent). The handler list
    of a topic is snapshotted when a publish starts: subscriptions made during
    that dispatch only receive later publishes.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    @staticmethod
    def _key(topic: TopicKey) -> str:
        return topic.value if isinstance(topic, Topic) else str(topic)

    def subscribe(self, topic: TopicKey, handler: Handler) -> None:
        self._handlers[self._key(topic)].append(handler)

    def unsubscribe(self, topic: TopicKey, handler: Handler) -> None:
        handlers = self._handlers.get(self._key(topic))
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, topic: TopicKey, *args: Any) -> None:
        handlers = self._handlers.get(self._key(topic))
        if not handlers:
            return
        for handler in tuple(handlers):
            handler(*args)

    def subscriber_count(self, topic: TopicKey) -> int:
        return len(self._handlers.get(self._key(topic), ()))
