from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Tuple, Union

from blockmatch.components.grid import Grid
from blockmatch.components.palette import Palette
from blockmatch.systems.cascade import PhaseKind, resolve_cascade
from blockmatch.systems.grid_ops import find_all_matches, swap_cells

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class SwapOutcome:
    committed: bool
    score_delta: Number = 0
    pass_counts: Tuple[int, ...] = ()


def try_swap(
    grid: Grid,
    r1: int,
    c1: int,
    r2: int,
    c2: int,
    min_match: int,
    score_per_match: Number,
    palette: Palette,
    rng: random.Random | None = None,
) -> SwapOutcome:
    """Swap two adjacent cells and resolve the result synchronously.

    Coordinates must already be in bounds and adjacent. Without a match the
    cells are swapped back and the grid is left exactly as it was.
    """
    src, dst = (r1, c1), (r2, c2)
    swap_cells(grid, src, dst)
    matches = find_all_matches(grid, min_match)
    if not matches:
        swap_cells(grid, src, dst)
        logger.debug("Swap %s<->%s made no match; reverted", src, dst)
        return SwapOutcome(committed=False)
    total: Number = 0
    counts: list[int] = []
    for phase in resolve_cascade(grid, matches, palette, min_match, score_per_match, rng):
        if phase.kind is PhaseKind.CLEARED:
            total += phase.score_delta
            counts.append(len(phase.positions))
    logger.debug("Swap %s<->%s committed: %d pass(es), +%s", src, dst, len(counts), total)
    return SwapOutcome(committed=True, score_delta=total, pass_counts=tuple(counts))
