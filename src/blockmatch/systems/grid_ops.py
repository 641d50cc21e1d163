from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from blockmatch.components.grid import EMPTY, BlockType, Grid, Position
from blockmatch.components.palette import Palette

logger = logging.getLogger(__name__)

TypeEntry = Tuple[int, int, str]


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    block: str


def is_adjacent(a: Position, b: Position) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def swap_cells(grid: Grid, a: Position, b: Position) -> None:
    first = grid.get(*a)
    grid.set(a[0], a[1], grid.get(*b))
    grid.set(b[0], b[1], first)


def _run_value(grid: Grid, row: int, col: int, d_row: int, d_col: int, length: int) -> BlockType:
    """Return the block shared by the ``length`` cells stepping from (row, col), or EMPTY."""
    value = grid.get(row + d_row, col + d_col)
    if value is EMPTY:
        return EMPTY
    for step in range(2, length + 1):
        if grid.get(row + d_row * step, col + d_col * step) != value:
            return EMPTY
    return value


def generate_grid(
    rows: int,
    cols: int,
    palette: Palette,
    min_match: int,
    rng: random.Random | None = None,
) -> Grid:
    """Fill a new grid row by row without creating any run of ``min_match``.

    A candidate is rejected when the ``min_match - 1`` cells to its left, or
    above it, already hold that same block. The placed block is drawn
    uniformly from the candidates that survive.
    """
    rng = rng or random.Random()
    grid = Grid(rows=rows, cols=cols)
    span = min_match - 1
    for row in range(rows):
        for col in range(cols):
            forbidden: Set[str] = set()
            if span > 0 and col >= span:
                left = _run_value(grid, row, col, 0, -1, span)
                if left is not EMPTY:
                    forbidden.add(left)
            if span > 0 and row >= span:
                up = _run_value(grid, row, col, -1, 0, span)
                if up is not EMPTY:
                    forbidden.add(up)
            available = [name for name in palette if name not in forbidden]
            if not available:
                raise RuntimeError(
                    f"Unable to place a block at {(row, col)}: palette of {len(palette)} "
                    f"cannot avoid runs of {min_match}"
                )
            grid.set(row, col, rng.choice(available))
    logger.debug("Generated %dx%d grid from %d block types", rows, cols, len(palette))
    return grid


def find_all_matches(grid: Grid, min_match: int) -> Set[Position]:
    """Return every cell inside a horizontal or vertical run of at least ``min_match``."""
    matched: Set[Position] = set()
    # Horizontal runs
    for r in range(grid.rows):
        run: List[Position] = []
        last_type: BlockType = EMPTY
        for c in range(grid.cols):
            tval = grid.get(r, c)
            if tval is not EMPTY and tval == last_type:
                run.append((r, c))
            else:
                if len(run) >= min_match:
                    matched.update(run)
                run = [(r, c)] if tval is not EMPTY else []
                last_type = tval
        if len(run) >= min_match:
            matched.update(run)
    # Vertical runs
    for c in range(grid.cols):
        run = []
        last_type = EMPTY
        for r in range(grid.rows):
            tval = grid.get(r, c)
            if tval is not EMPTY and tval == last_type:
                run.append((r, c))
            else:
                if len(run) >= min_match:
                    matched.update(run)
                run = [(r, c)] if tval is not EMPTY else []
                last_type = tval
        if len(run) >= min_match:
            matched.update(run)
    return matched


def clear_positions(grid: Grid, positions: Iterable[Position]) -> List[TypeEntry]:
    """Empty the given cells and return (row, col, block) for those that held a block."""
    cleared: List[TypeEntry] = []
    for row, col in positions:
        value = grid.get(row, col)
        if value is EMPTY:
            continue
        cleared.append((row, col, value))
        grid.set(row, col, EMPTY)
    return cleared


def drop_blocks(grid: Grid) -> List[GravityMove]:
    """Compact every column downward, keeping block order and leaving gaps on top."""
    moves: List[GravityMove] = []
    for col in range(grid.cols):
        empty_below = 0
        for row in range(grid.rows - 1, -1, -1):
            value = grid.get(row, col)
            if value is EMPTY:
                empty_below += 1
            elif empty_below > 0:
                target = row + empty_below
                grid.set(target, col, value)
                grid.set(row, col, EMPTY)
                moves.append(GravityMove(source=(row, col), target=(target, col), block=value))
    return moves


def refill_empty(grid: Grid, palette: Palette, rng: random.Random | None = None) -> List[Position]:
    rng = rng or random.Random()
    spawned: List[Position] = []
    for row, col in grid.positions():
        if grid.get(row, col) is EMPTY:
            grid.set(row, col, palette.choice(rng))
            spawned.append((row, col))
    return spawned


def _has_line_match(grid: Grid, pos: Position, min_match: int) -> bool:
    """Return True if a horizontal or vertical run through pos reaches min_match."""
    row, col = pos
    tval = grid.get(row, col)
    if tval is EMPTY:
        return False
    # Horizontal sweep
    h_run = 1
    c_left = col - 1
    while grid.get(row, c_left) == tval:
        h_run += 1
        c_left -= 1
    c_right = col + 1
    while grid.get(row, c_right) == tval:
        h_run += 1
        c_right += 1
    if h_run >= min_match:
        return True
    # Vertical sweep
    v_run = 1
    r_up = row - 1
    while grid.get(r_up, col) == tval:
        v_run += 1
        r_up -= 1
    r_down = row + 1
    while grid.get(r_down, col) == tval:
        v_run += 1
        r_down += 1
    return v_run >= min_match


def predict_swap_creates_match(grid: Grid, src: Position, dst: Position, min_match: int) -> bool:
    """Return True if swapping src/dst would create a new match; the grid is left untouched."""
    if not (grid.in_bounds(*src) and grid.in_bounds(*dst)):
        return False
    trial = grid.copy()
    swap_cells(trial, src, dst)
    return _has_line_match(trial, src, min_match) or _has_line_match(trial, dst, min_match)


def find_valid_swaps(grid: Grid, min_match: int) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for row, col in grid.positions():
        pos = (row, col)
        right = (row, col + 1)
        if col + 1 < grid.cols and predict_swap_creates_match(grid, pos, right, min_match):
            swaps.append((pos, right))
        down = (row + 1, col)
        if row + 1 < grid.rows and predict_swap_creates_match(grid, pos, down, min_match):
            swaps.append((pos, down))
    return swaps
