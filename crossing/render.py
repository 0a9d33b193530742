from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from ipycanvas import Canvas, hold_canvas

from crossing.config import (
    LIFE_SPRITE_LEFT,
    LIFE_SPRITE_SIZE,
    LIFE_SPRITE_TOP,
    SafetyPolicy,
)
from crossing.hud import Hud
from crossing.internal.events import Topic
from crossing.internal.math import Vector2D
from crossing.internal.sprite import Drawable, Frame, Sprite

if TYPE_CHECKING:
    from crossing.context import GameContext


@dataclass(frozen=True)
class Colors:
    background: str = "#000000"
    water: str = "#000047"
    road: str = "#000000"
    verge: str = "#5b2a86"
    goal_bank: str = "#0d7a0d"
    label: str = "#ffffff"
    score: str = "#ff0000"
    banner: str = "#ffff00"
    time_bar: str = "#00ff00"


class CanvasRenderer(Drawable):
    """
    Draws the game on an ipycanvas `Canvas`.

    Frames handed over during a tick are queued and painted in one
    `hold_canvas` batch when the HUD is rendered, so the widget never shows
    a half-drawn field.
    """

    def __init__(
        self,
        context: GameContext,
        hud: Hud,
        scale: float = 0.5,
        colors: Colors = Colors(),
    ):
        self.context = context
        self.hud = hud
        self.scale = scale
        self.colors = colors

        config = context.config
        self.world_width = config.num_columns * config.cell_width
        self.world_height = config.num_rows * config.cell_height
        self.width = int(self.world_width * scale)
        self.height = int(self.world_height * scale)

        self.canvas: Canvas = Canvas(width=self.width, height=self.height)
        self.canvas.layout.border = "2px solid #444444"
        self.canvas.layout.width = f"{self.width}px"
        self.canvas.layout.height = f"{self.height}px"
        self.canvas.image_smoothing_enabled = False

        self._pending: List[Frame] = []
        self._images: Dict[Tuple[int, float, float], Canvas] = {}
        self._life_sprite = Sprite(
            size=Vector2D(LIFE_SPRITE_SIZE, LIFE_SPRITE_SIZE),
            sheet_offset=Vector2D(LIFE_SPRITE_LEFT, LIFE_SPRITE_TOP),
            color=colors.time_bar,
            image_path=config.sprite_sheet_path,
        )

        context.set_drawable(self)
        context.bus.subscribe(Topic.RENDER_START, self._on_render_start)
        context.bus.subscribe(Topic.RENDER_HUD, self.flush)

    @property
    def widget(self) -> Canvas:
        return self.canvas

    def render_at(self, frame: Frame) -> None:
        if frame.visible:
            self._pending.append(frame)

    def _on_render_start(self) -> None:
        self._pending.clear()

    def flush(self) -> None:
        with hold_canvas(self.canvas):
            self.canvas.clear()
            self._render_background()
            for frame in self._pending:
                self._draw_frame(frame)
            self._render_hud()
        self._pending.clear()

    def _image_for(self, frame: Frame) -> Optional[Canvas]:
        key = (id(frame.sprite), frame.sheet_offset.x, frame.sheet_offset.y)
        if key in self._images:
            return self._images[key]

        image_array = frame.sprite.frame_array(frame.sheet_offset)
        if image_array is None:
            return None
        image = Canvas(width=image_array.shape[1], height=image_array.shape[0])
        image.put_image_data(image_array, 0, 0)
        self._images[key] = image
        return image

    def _draw_frame(self, frame: Frame) -> None:
        s = self.scale
        x, y = frame.position.x * s, frame.position.y * s
        w, h = frame.size.x * s, frame.size.y * s

        image = self._image_for(frame)
        if image is not None:
            self.canvas.draw_image(image, x, y, w, h)
            return

        self.canvas.fill_style = frame.sprite.color
        self.canvas.fill_rect(x, y, w, h)

    def _render_background(self) -> None:
        s = self.scale
        config = self.context.config
        row_height = config.cell_height * s

        self.canvas.fill_style = self.colors.background
        self.canvas.fill_rect(0, 0, self.width, self.height)

        for lane in config.lanes:
            if lane.policy is SafetyPolicy.HAZARD:
                color = self.colors.road
            elif lane.policy is SafetyPolicy.GOAL:
                color = self.colors.goal_bank
            else:
                color = self.colors.water
            self.canvas.fill_style = color
            self.canvas.fill_rect(0, lane.row * row_height, self.width, row_height)

        # Safe strips: the bank between road and river, and the start row
        self.canvas.fill_style = self.colors.verge
        for row in (8, config.actor_start_row):
            self.canvas.fill_rect(0, row * row_height, self.width, row_height)

    def _render_hud(self) -> None:
        s = self.scale
        config = self.context.config
        hud = self.hud
        cell_h = config.cell_height * s
        font_size = int(67 * s)

        self.canvas.font = f"{font_size}px monospace"
        self.canvas.text_align = "center"
        self.canvas.fill_style = self.colors.label
        self.canvas.fill_text("1-UP", 3 * config.cell_width * s, cell_h / 2)
        self.canvas.fill_text("HI-SCORE", 8 * config.cell_width * s, cell_h / 2)
        self.canvas.fill_style = self.colors.score
        self.canvas.fill_text(str(hud.score), 3 * config.cell_width * s, cell_h)
        self.canvas.fill_text(str(hud.high_score), 8 * config.cell_width * s, cell_h)

        # Remaining lives along the bottom-left corner
        life_top = (config.num_rows - 1) * config.cell_height
        for i in range(hud.lives):
            self._draw_frame(Frame(
                sprite=self._life_sprite,
                position=Vector2D(i * LIFE_SPRITE_SIZE, life_top),
                sheet_offset=self._life_sprite.frame_offset(),
            ))

        # Time bar shrinks towards the right
        bar_full = 10 * config.cell_width * s
        bar_height = cell_h / 2
        self.canvas.fill_style = self.colors.time_bar
        self.canvas.fill_rect(
            (1 - hud.time_fraction) * bar_full,
            self.height - bar_height,
            hud.time_fraction * bar_full,
            bar_height,
        )
        self.canvas.text_align = "end"
        self.canvas.fill_style = self.colors.banner
        self.canvas.fill_text("TIME", self.width, self.height)

        banner = "GAME OVER" if hud.game_over else "YOU WIN!" if hud.won else None
        if banner is not None:
            self.canvas.text_align = "center"
            self.canvas.fill_style = self.colors.label if hud.game_over else self.colors.banner
            self.canvas.fill_text(banner, self.width / 2, 9 * cell_h)
        self.canvas.text_align = "left"
