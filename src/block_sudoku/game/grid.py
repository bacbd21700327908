from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .geometry import Position, Shape, extract_occupied_cells
from .pieces import Piece


GRID_WIDTH = 9
GRID_HEIGHT = 9
BLOCK_SIZE = 3


@dataclass(frozen=True)
class Cell:
    filled: bool = False
    color: Optional[str] = None
    piece_id: Optional[str] = None


EMPTY_CELL = Cell()


@dataclass(frozen=True)
class SudokuBlock:
    start_row: int
    start_col: int
    cells: Tuple[Position, ...]


def _build_sudoku_blocks() -> Tuple[SudokuBlock, ...]:
    blocks: List[SudokuBlock] = []
    for block_row in range(GRID_HEIGHT // BLOCK_SIZE):
        for block_col in range(GRID_WIDTH // BLOCK_SIZE):
            start_row, start_col = block_row * BLOCK_SIZE, block_col * BLOCK_SIZE
            cells = tuple(
                Position(start_col + dx, start_row + dy)
                for dy in range(BLOCK_SIZE)
                for dx in range(BLOCK_SIZE)
            )
            blocks.append(SudokuBlock(start_row, start_col, cells))
    return tuple(blocks)


SUDOKU_BLOCKS: Tuple[SudokuBlock, ...] = _build_sudoku_blocks()


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class GameGrid:
    """Immutable 9x9 board.

    `filled` is a boolean mask indexed `[y, x]`; `colors` and `piece_ids` are
    object arrays holding the owning piece's color and catalog id, or None for
    empty cells. Every operation that changes cells returns a new grid.
    """

    def __init__(self, filled: np.ndarray, colors: np.ndarray, piece_ids: np.ndarray) -> None:
        self.filled = _freeze(np.array(filled, dtype=np.bool_))
        self.colors = _freeze(np.array(colors, dtype=object))
        self.piece_ids = _freeze(np.array(piece_ids, dtype=object))
        self.height, self.width = self.filled.shape

    @classmethod
    def empty(cls, width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> "GameGrid":
        return cls(
            np.zeros((height, width), dtype=np.bool_),
            np.full((height, width), None, dtype=object),
            np.full((height, width), None, dtype=object),
        )

    @classmethod
    def from_cells(cls, rows: Sequence[Sequence[Cell]]) -> "GameGrid":
        filled = [[cell.filled for cell in row] for row in rows]
        colors = [[cell.color for cell in row] for row in rows]
        piece_ids = [[cell.piece_id for cell in row] for row in rows]
        return cls(np.array(filled, dtype=np.bool_), np.array(colors, dtype=object),
                   np.array(piece_ids, dtype=object))

    @classmethod
    def from_lines(cls, lines: Sequence[str], color: str = "#888888") -> "GameGrid":
        """Build a grid from rows of '0'/'1' characters."""
        if len(lines) != GRID_HEIGHT:
            raise ValueError(f"Expected {GRID_HEIGHT} rows, got {len(lines)}")
        for y, line in enumerate(lines):
            if len(line) != GRID_WIDTH:
                raise ValueError(f"Row {y} expected length {GRID_WIDTH}, got {len(line)}")
        filled = np.array([[c == "1" for c in line] for line in lines], dtype=np.bool_)
        colors = np.where(filled, color, None).astype(object)
        return cls(filled, colors, np.full(filled.shape, None, dtype=object))

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_filled(self, x: int, y: int) -> bool:
        return bool(self.filled[y, x])

    def cell(self, x: int, y: int) -> Cell:
        if not self.filled[y, x]:
            return EMPTY_CELL
        return Cell(True, self.colors[y, x], self.piece_ids[y, x])

    def rows(self) -> List[List[Cell]]:
        return [[self.cell(x, y) for x in range(self.width)] for y in range(self.height)]

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.filled))

    def with_cells(self, cells: Iterable[Position], color: str, piece_id: str) -> "GameGrid":
        filled = self.filled.copy()
        colors = self.colors.copy()
        piece_ids = self.piece_ids.copy()
        for x, y in cells:
            if self.is_inside(x, y):
                filled[y, x] = True
                colors[y, x] = color
                piece_ids[y, x] = piece_id
        return GameGrid(filled, colors, piece_ids)

    def without(self, mask: np.ndarray) -> "GameGrid":
        """Copy with every cell selected by the boolean `mask` emptied."""
        filled = self.filled.copy()
        colors = self.colors.copy()
        piece_ids = self.piece_ids.copy()
        filled[mask] = False
        colors[mask] = None
        piece_ids[mask] = None
        return GameGrid(filled, colors, piece_ids)

    def to_lines(self) -> List[str]:
        return ["".join("1" if cell else "0" for cell in row) for row in self.filled]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return (
            np.array_equal(self.filled, other.filled)
            and np.array_equal(self.colors, other.colors)
            and np.array_equal(self.piece_ids, other.piece_ids)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "GameGrid(\n  " + "\n  ".join(self.to_lines()) + "\n)"


def create_empty_grid() -> GameGrid:
    return GameGrid.empty()


def shape_fits(shape: Shape, position: Position | tuple[int, int], grid: GameGrid) -> bool:
    for x, y in extract_occupied_cells(shape, position):
        if not grid.is_inside(x, y):
            return False
        if grid.filled[y, x]:
            return False
    return True


def is_valid_placement(piece: Piece, position: Position | tuple[int, int], grid: GameGrid) -> bool:
    return shape_fits(piece.shape, position, grid)


def place_piece_on_grid(piece: Piece, position: Position | tuple[int, int], grid: GameGrid) -> GameGrid:
    """Stamp `piece` onto a copy of `grid`. Assumes the placement was validated."""
    return grid.with_cells(extract_occupied_cells(piece.shape, position), piece.color, piece.id)
