import math
from typing import Optional, Tuple

from blockmatch.constants import BLOCK_SIZE, BOTTOM_MARGIN


def compute_board_geometry(window_width: int, window_height: int, rows: int, cols: int,
                           block_size: int = BLOCK_SIZE):
    """Return (tile_size, left, bottom) for a board centred above the status line.

    Tiles use ``block_size`` unless the board would not fit, in which case they shrink.
    Shared by rendering and input mapping so both agree on where each cell is.
    """
    available_h = window_height - BOTTOM_MARGIN
    tile_size = int(min(block_size, window_width / cols, available_h / rows))
    if tile_size < 8:
        tile_size = 8
    left = (window_width - cols * tile_size) / 2
    bottom = BOTTOM_MARGIN + (available_h - rows * tile_size) / 2
    return tile_size, left, bottom


def cell_origin(row: int, col: int, rows: int, tile_size: float, left: float, bottom: float) -> Tuple[float, float]:
    """Bottom-left pixel of a cell; row 0 is drawn at the top."""
    return left + col * tile_size, bottom + (rows - 1 - row) * tile_size


def pixel_to_cell(x: float, y: float, rows: int, cols: int, tile_size: float, left: float,
                  bottom: float) -> Optional[Tuple[int, int]]:
    col = math.floor((x - left) / tile_size)
    row = rows - 1 - math.floor((y - bottom) / tile_size)
    if 0 <= row < rows and 0 <= col < cols:
        return row, col
    return None
