from blockmatch.config import GameConfig
from blockmatch.components.game_state import GameMode
from blockmatch.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_SCREEN_ADVANCE, EVENT_TILE_CLICK
from blockmatch.ui.layout import compute_board_geometry, pixel_to_cell
from blockmatch.utils.board_state import current_mode, get_grid, move_in_progress

# arcade.MOUSE_BUTTON_LEFT
LEFT_BUTTON = 1


class InputSystem:
    def __init__(self, event_bus: EventBus, window, world):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.config: GameConfig = getattr(world, "config", None) or GameConfig()
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        if kwargs.get('button', LEFT_BUTTON) != LEFT_BUTTON:
            return
        if current_mode(self.world) != GameMode.PLAYING:
            self.event_bus.emit(EVENT_SCREEN_ADVANCE)
            return
        # Board input is locked until the current move settles.
        if move_in_progress(self.world):
            return
        grid = get_grid(self.world)
        tile_size, left, bottom = compute_board_geometry(
            self.window.width, self.window.height, grid.rows, grid.cols, self.config.grid.block_size
        )
        cell = pixel_to_cell(x, y, grid.rows, grid.cols, tile_size, left, bottom)
        if cell is None:
            return
        self.event_bus.emit(EVENT_TILE_CLICK, row=cell[0], col=cell[1])
