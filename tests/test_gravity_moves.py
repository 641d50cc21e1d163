from collections import Counter

from blockmatch.components.grid import EMPTY, Grid
from blockmatch.components.palette import Palette
from blockmatch.systems.grid_ops import GravityMove, clear_positions, drop_blocks, refill_empty

from helpers import ScriptedRandom

_ = EMPTY


def _column(grid, col):
    return [grid.get(r, col) for r in range(grid.rows)]


def test_blocks_fall_to_the_bottom_keeping_order():
    grid = Grid.from_rows([
        ["A", "B"],
        [_, "C"],
        ["B", _],
        [_, _],
    ])
    moves = drop_blocks(grid)
    assert _column(grid, 0) == [_, _, "A", "B"]
    assert _column(grid, 1) == [_, _, "B", "C"]
    assert moves == [
        GravityMove(source=(2, 0), target=(3, 0), block="B"),
        GravityMove(source=(0, 0), target=(2, 0), block="A"),
        GravityMove(source=(1, 1), target=(3, 1), block="C"),
        GravityMove(source=(0, 1), target=(2, 1), block="B"),
    ]


def test_gravity_preserves_block_multiset():
    grid = Grid.from_rows([
        ["A", _, "C", "D"],
        [_, "B", _, "A"],
        ["C", _, "A", _],
        [_, "D", _, "B"],
    ])
    before = Counter(grid.get(r, c) for r, c in grid.positions() if grid.get(r, c) is not _)
    drop_blocks(grid)
    after = Counter(grid.get(r, c) for r, c in grid.positions() if grid.get(r, c) is not _)
    assert before == after
    for col in range(grid.cols):
        column = _column(grid, col)
        filled = [value for value in column if value is not _]
        assert column == [_] * (len(column) - len(filled)) + filled


def test_settled_column_has_no_moves():
    grid = Grid.from_rows([[_], ["A"], ["B"]])
    assert drop_blocks(grid) == []


def test_clear_positions_reports_only_filled_cells():
    grid = Grid.from_rows([["A", _, "B"]])
    cleared = clear_positions(grid, [(0, 0), (0, 1), (0, 2)])
    assert cleared == [(0, 0, "A"), (0, 2, "B")]
    assert grid.snapshot() == ((_, _, _),)


def test_refill_fills_every_gap_from_the_palette():
    grid = Grid.from_rows([
        [_, _, "A"],
        [_, "B", "A"],
    ])
    rng = ScriptedRandom(0).queue("C", "D", "C")
    spawned = refill_empty(grid, Palette.of("ABCD"), rng)
    assert spawned == [(0, 0), (0, 1), (1, 0)]
    assert grid.snapshot() == (("C", "D", "A"), ("C", "B", "A"))
