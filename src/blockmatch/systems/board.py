import logging
from typing import Optional, Tuple

from esper import World

from blockmatch.components.grid import Grid
from blockmatch.constants import MAX_BOARD_ATTEMPTS
from blockmatch.events.bus import (EventBus, EVENT_TILE_CLICK, EVENT_TILE_SELECTED, EVENT_TILE_DESELECTED,
                                   EVENT_TILE_SWAP_REQUEST, EVENT_MOVE_COMPLETE, EVENT_NO_MOVES_LEFT,
                                   EVENT_BOARD_RESET, EVENT_NEW_GAME)
from blockmatch.systems.grid_ops import find_valid_swaps, generate_grid, is_adjacent
from blockmatch.utils.board_state import board_entity, get_grid, get_palette, get_rules, move_in_progress

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns board (re)generation and turns two clicks into a swap request.

    A board that settles with no valid swap left is replaced by a fresh one.
    """

    def __init__(self, world: World, event_bus: EventBus, *, populate: bool = True):
        self.world = world
        self.event_bus = event_bus
        self.selected: Optional[Tuple[int, int]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_MOVE_COMPLETE, self.on_move_complete)
        self.event_bus.subscribe(EVENT_NEW_GAME, self.on_new_game)
        if populate:
            self.reset_board()

    def reset_board(self, reason: str = "new_game") -> Grid:
        """Replace the board grid with a fresh one that holds no matches and at least one valid swap."""
        entity = board_entity(self.world)
        if entity is None:
            raise RuntimeError("Board entity not found")
        current = get_grid(self.world)
        rules = get_rules(self.world)
        palette = get_palette(self.world)
        rng = getattr(self.world, "random", None)
        for _ in range(MAX_BOARD_ATTEMPTS):
            grid = generate_grid(current.rows, current.cols, palette, rules.min_match, rng=rng)
            if find_valid_swaps(grid, rules.min_match):
                break
        else:
            raise RuntimeError(
                f"Unable to build a {current.rows}x{current.cols} board with a valid swap "
                f"after {MAX_BOARD_ATTEMPTS} attempts"
            )
        self.world.add_component(entity, grid)
        self._clear_selection(reason="board_reset")
        logger.info("Board reset to a new %dx%d grid (%s)", grid.rows, grid.cols, reason)
        self.event_bus.emit(EVENT_BOARD_RESET, rows=grid.rows, cols=grid.cols, snapshot=grid.snapshot(),
                            reason=reason)
        return grid

    def on_new_game(self, sender, **kwargs):
        self.reset_board()

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        if move_in_progress(self.world):
            return
        if not get_grid(self.world).in_bounds(row, col):
            return
        if self.selected is None:
            self.selected = (row, col)
            self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col)
            return
        src = self.selected
        dst = (row, col)
        # Any second click ends the selection; only an adjacent one becomes a swap.
        self._clear_selection(reason='second_click')
        if is_adjacent(src, dst):
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)

    def on_move_complete(self, sender, **kwargs):
        if not kwargs.get('committed'):
            return
        rules = get_rules(self.world)
        if find_valid_swaps(get_grid(self.world), rules.min_match):
            return
        logger.warning("Board settled with no valid swaps left; reshuffling")
        self.event_bus.emit(EVENT_NO_MOVES_LEFT)
        self.reset_board(reason="no_moves_left")

    def _clear_selection(self, reason: str) -> None:
        prev = self.selected
        if prev is None:
            return
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])
