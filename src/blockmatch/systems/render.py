from typing import Dict, List, Tuple

from esper import World

from blockmatch.config import GameConfig
from blockmatch.components.game_state import GameMode
from blockmatch.components.grid import EMPTY, Snapshot
from blockmatch.constants import CELL_COLOR_EVEN, CELL_COLOR_ODD
from blockmatch.events.bus import (EventBus, EVENT_TILE_SELECTED, EVENT_TILE_DESELECTED, EVENT_MATCH_CLEARED,
                                   EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED, EVENT_BOARD_RESET,
                                   EVENT_MOVE_COMPLETE)
from blockmatch.rendering.texture_cache import TextureCache
from blockmatch.ui.layout import cell_origin, compute_board_geometry
from blockmatch.utils.board_state import current_mode, get_countdown, get_grid, get_score

PADDING = 4

DEFAULT_TEXT = {
    'title': 'Block Match',
    'clickToStart': 'Click to start',
    'instructionsTitle': 'How to play',
    'instructions': ['Swap two neighbouring blocks', 'Line up three or more to clear them'],
    'gameOverTitle': 'Game Over',
    'timeUp': "Time's up!",
    'scoreLabel': 'Score:',
    'timeLabel': 'Time:',
    'restartGame': 'Click to return to the title screen',
}


class RenderSystem:
    """Draws whatever grid snapshot the last cascade phase published.

    While a cascade runs, phases replace ``displayed`` one at a time so the
    player sees cleared, dropped and refilled boards in order.
    """

    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.config: GameConfig = getattr(world, "config", None) or GameConfig()
        self.block_colors = self.config.block_colors()
        self.text = {**DEFAULT_TEXT, **self.config.text}
        self.selected = None
        self.displayed: Snapshot | None = None
        self.textures = TextureCache(self.config)
        self._last_draw_coords: Dict[Tuple[int, int], Tuple[float, float]] = {}
        self._last_draw_textures: Dict[Tuple[int, int], object] = {}
        self.event_bus.subscribe(EVENT_TILE_SELECTED, self.on_tile_selected)
        self.event_bus.subscribe(EVENT_TILE_DESELECTED, self.on_tile_deselected)
        for name in (EVENT_MATCH_CLEARED, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED, EVENT_BOARD_RESET):
            self.event_bus.subscribe(name, self.on_snapshot)
        self.event_bus.subscribe(EVENT_MOVE_COMPLETE, self.on_move_complete)

    def on_tile_selected(self, sender, **kwargs):
        self.selected = (kwargs.get('row'), kwargs.get('col'))

    def on_tile_deselected(self, sender, **kwargs):
        self.selected = None

    def on_snapshot(self, sender, **kwargs):
        snapshot = kwargs.get('snapshot')
        if snapshot is not None:
            self.displayed = snapshot

    def on_move_complete(self, sender, **kwargs):
        # Settled grid is the source of truth again.
        self.displayed = None

    def current_snapshot(self) -> Snapshot:
        if self.displayed is not None:
            return self.displayed
        return get_grid(self.world).snapshot()

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        if not headless:
            self._render_background(arcade)
        mode = current_mode(self.world)
        if mode == GameMode.PLAYING:
            self._render_board(arcade, headless)
            if not headless:
                self._render_status(arcade)
        elif not headless:
            self._render_screen(arcade, mode)

    def _render_board(self, arcade, headless: bool) -> None:
        snapshot = self.current_snapshot()
        rows = len(snapshot)
        cols = len(snapshot[0]) if rows else 0
        tile_size, left, bottom = compute_board_geometry(
            self.window.width, self.window.height, rows, cols, self.config.grid.block_size
        )
        self._last_draw_coords = {}
        self._last_draw_textures = {}
        for r, row_values in enumerate(snapshot):
            for c, block in enumerate(row_values):
                x, y = cell_origin(r, c, rows, tile_size, left, bottom)
                self._last_draw_coords[(r, c)] = (x, y)
                texture = self.textures.texture_for(arcade, block) if block is not EMPTY else None
                self._last_draw_textures[(r, c)] = texture
                if headless:
                    continue
                cell_color = CELL_COLOR_EVEN if (r + c) % 2 == 0 else CELL_COLOR_ODD
                arcade.draw_lrbt_rectangle_filled(x, x + tile_size, y, y + tile_size, cell_color)
                if texture is not None:
                    inner = tile_size - 2 * PADDING
                    arcade.draw_texture_rect(texture, arcade.LBWH(x + PADDING, y + PADDING, inner, inner))
                elif block is not EMPTY:
                    color = self.block_colors.get(block, (90, 90, 90))
                    arcade.draw_lrbt_rectangle_filled(
                        x + PADDING, x + tile_size - PADDING, y + PADDING, y + tile_size - PADDING, color
                    )
                if self.selected == (r, c):
                    arcade.draw_lrbt_rectangle_outline(
                        x + 2, x + tile_size - 2, y + 2, y + tile_size - 2, arcade.color.WHITE, 4
                    )

    def _render_background(self, arcade) -> None:
        asset, texture = self.textures.background(arcade)
        if texture is None:
            return
        # Unsized backgrounds stretch over the whole window.
        width = asset.width or self.window.width
        height = asset.height or self.window.height
        left = (self.window.width - width) / 2
        bottom = (self.window.height - height) / 2
        arcade.draw_texture_rect(texture, arcade.LBWH(left, bottom, width, height))

    def _render_status(self, arcade) -> None:
        score = get_score(self.world).value
        countdown = get_countdown(self.world)
        remaining = max(0, int(countdown.remaining)) if countdown else 0
        arcade.draw_text(f"{self.text['scoreLabel']} {score}", 10, 14, arcade.color.WHITE, 20, bold=True)
        arcade.draw_text(
            f"{self.text['timeLabel']} {remaining}",
            self.window.width - 10, 14, arcade.color.WHITE, 20, anchor_x='right', bold=True,
        )

    def _render_screen(self, arcade, mode) -> None:
        cx = self.window.width / 2
        cy = self.window.height / 2
        lines: List[Tuple[str, float, int]]
        if mode == GameMode.INSTRUCTIONS:
            lines = [(self.text['instructionsTitle'], cy + 100, 36)]
            for index, line in enumerate(self.text['instructions']):
                lines.append((line, cy + 50 - index * 30, 20))
            lines.append((self.text['clickToStart'], cy - 100, 24))
        elif mode == GameMode.GAME_OVER:
            lines = [
                (self.text['gameOverTitle'], cy + 80, 48),
                (self.text['timeUp'], cy + 20, 36),
                (f"{self.text['scoreLabel']} {get_score(self.world).value}", cy - 30, 36),
                (self.text['restartGame'], cy - 100, 24),
            ]
        else:
            lines = [(self.text['title'], cy + 50, 48), (self.text['clickToStart'], cy - 30, 24)]
        for text, y, size in lines:
            arcade.draw_text(text, cx, y, arcade.color.WHITE, size, anchor_x='center')
