from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

BlockType = Optional[str]
EMPTY: BlockType = None

Position = Tuple[int, int]
Snapshot = Tuple[Tuple[BlockType, ...], ...]


@dataclass(slots=True)
class Grid:
    """Rectangular board of block identifiers.

    Cells hold a palette name or EMPTY. Dimensions never change once built.
    Reads outside the board return EMPTY and writes outside it are ignored;
    callers are expected to pass coordinates they already validated.
    """
    rows: int
    cols: int
    cells: List[List[BlockType]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.rows}x{self.cols}")
        if not self.cells:
            self.cells = [[EMPTY] * self.cols for _ in range(self.rows)]
            return
        if len(self.cells) != self.rows or any(len(row) != self.cols for row in self.cells):
            raise ValueError("Grid cells do not match the declared dimensions")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[BlockType]]) -> "Grid":
        data = [list(row) for row in rows]
        if not data:
            raise ValueError("Grid needs at least one row")
        return cls(rows=len(data), cols=len(data[0]), cells=data)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> BlockType:
        if not self.in_bounds(row, col):
            return EMPTY
        return self.cells[row][col]

    def set(self, row: int, col: int, value: BlockType) -> None:
        if self.in_bounds(row, col):
            self.cells[row][col] = value

    def positions(self) -> Iterator[Position]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def snapshot(self) -> Snapshot:
        return tuple(tuple(row) for row in self.cells)

    def copy(self) -> "Grid":
        return Grid(rows=self.rows, cols=self.cols, cells=[list(row) for row in self.cells])
