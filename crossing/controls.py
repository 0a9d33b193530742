from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ipyevents import Event

from crossing.config import GameConfig
from crossing.internal.log import get_logger
from crossing.internal.math import Direction
from crossing.render import CanvasRenderer
from crossing.simulation import Game

log = get_logger("controls")

ARROW_KEYS: Dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}


def direction_for_key(key: Optional[str]) -> Optional[Direction]:
    return ARROW_KEYS.get(key) if key is not None else None


def direction_for_point(x: float, y: float, width: float, height: float) -> Optional[Direction]:
    """
    Map a tap on the board to a direction: the left eighth moves left,
    anything right of three eighths moves right, and the middle band is
    split between up (top eighth) and down (below three eighths).
    """
    if x < width / 8:
        return Direction.LEFT
    if x > 3 * width / 8:
        return Direction.RIGHT
    if y < height / 8:
        return Direction.UP
    if y > 3 * height / 8:
        return Direction.DOWN
    return None


def focus(widget: Any) -> bool:
    """Give keyboard focus to a widget; older ipywidgets have no `focus()`."""
    if not hasattr(widget, "focus"):
        return False
    widget.focus()
    return True


class InputControls:
    """Forwards arrow keys and clicks on a widget to the game as move intents."""

    def __init__(self, game: Game, source: Any, width: float, height: float):
        self.game = game
        self.width = width
        self.height = height

        self._event = Event(
            source=source,
            watched_events=["keydown", "click"],
            prevent_default_action=True,
            stop_propagation=True,
        )
        self._event.on_dom_event(self.handle_dom_event)

    def handle_dom_event(self, event: Dict[str, Any]) -> Optional[Direction]:
        etype = event.get("type")
        if etype == "keydown":
            direction = direction_for_key(event.get("key"))
        elif etype == "click":
            direction = direction_for_point(
                float(event.get("relativeX", 0.0)),
                float(event.get("relativeY", 0.0)),
                float(event.get("boundingRectWidth", self.width)),
                float(event.get("boundingRectHeight", self.height)),
            )
        else:
            direction = None

        if direction is not None:
            log.debug("%s -> %s", etype, direction.name)
            self.game.move(direction)
        return direction


def play_in_notebook(
    config: Optional[GameConfig] = None,
    scale: float = 0.5,
) -> Tuple[Game, CanvasRenderer, InputControls]:
    """
    Build a game drawn on an ipycanvas widget with keyboard and click input,
    and start its loop. Display `renderer.widget` in the notebook cell.
    """
    game = Game(config=config)
    renderer = CanvasRenderer(game.context, game.hud, scale=scale)
    controls = InputControls(game, renderer.canvas, renderer.width, renderer.height)
    game.start()
    focus(renderer.canvas)
    return game, renderer, controls
