"""Cascade resolution as a generator of immutable phase snapshots.

Each pass clears the current matches, lets blocks fall, refills the gaps
and detects again, until detection comes back empty. Consumers pull one
phase at a time; the grid is not touched again until the next phase is
requested, so a renderer can pace the animation however it likes.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Tuple, Union

from blockmatch.components.grid import Grid, Position, Snapshot
from blockmatch.components.palette import Palette
from blockmatch.systems.grid_ops import (
    GravityMove,
    TypeEntry,
    clear_positions,
    drop_blocks,
    find_all_matches,
    refill_empty,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]


class PhaseKind(Enum):
    CLEARED = "cleared"
    DROPPED = "dropped"
    REFILLED = "refilled"


@dataclass(frozen=True, slots=True)
class CascadePhase:
    kind: PhaseKind
    depth: int
    snapshot: Snapshot
    positions: Tuple[Position, ...] = ()
    types: Tuple[TypeEntry, ...] = ()
    moves: Tuple[GravityMove, ...] = ()
    score_delta: Number = 0


def resolve_cascade(
    grid: Grid,
    initial_matches: Iterable[Position],
    palette: Palette,
    min_match: int,
    score_per_match: Number,
    rng: random.Random | None = None,
) -> Iterator[CascadePhase]:
    rng = rng or random.Random()
    matches = set(initial_matches)
    depth = 0
    while matches:
        depth += 1
        ordered = tuple(sorted(matches))
        cleared = clear_positions(grid, ordered)
        score_delta = len(ordered) * score_per_match
        logger.debug("Cascade pass %d cleared %d cells (+%s)", depth, len(ordered), score_delta)
        yield CascadePhase(
            kind=PhaseKind.CLEARED,
            depth=depth,
            snapshot=grid.snapshot(),
            positions=ordered,
            types=tuple(cleared),
            score_delta=score_delta,
        )

        moves = drop_blocks(grid)
        yield CascadePhase(
            kind=PhaseKind.DROPPED,
            depth=depth,
            snapshot=grid.snapshot(),
            positions=tuple(move.target for move in moves),
            moves=tuple(moves),
        )

        spawned = refill_empty(grid, palette, rng)
        yield CascadePhase(
            kind=PhaseKind.REFILLED,
            depth=depth,
            snapshot=grid.snapshot(),
            positions=tuple(spawned),
        )

        matches = find_all_matches(grid, min_match)
    logger.debug("Cascade settled after %d pass(es)", depth)


def process_cascade(
    grid: Grid,
    initial_matches: Iterable[Position],
    palette: Palette,
    min_match: int,
    score_per_match: Number,
    rng: random.Random | None = None,
) -> Number:
    """Run the cascade to its fixed point and return the score of every pass combined."""
    total: Number = 0
    for phase in resolve_cascade(grid, initial_matches, palette, min_match, score_per_match, rng):
        total += phase.score_delta
    return total
