from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .grid import SUDOKU_BLOCKS, GameGrid, SudokuBlock
from .rules import DEFAULT_SCORING, ScoringRules, calculate_score


@dataclass(frozen=True)
class ClearedCell:
    x: int
    y: int
    color: Optional[str] = None


@dataclass(frozen=True)
class ClearResult:
    grid: GameGrid
    rows: Tuple[int, ...]
    cols: Tuple[int, ...]
    blocks: Tuple[SudokuBlock, ...]
    cleared_cells: Tuple[ClearedCell, ...]
    score: int

    @property
    def clears(self) -> int:
        return len(self.rows) + len(self.cols) + len(self.blocks)


def check_full_rows(grid: GameGrid) -> List[int]:
    return [int(i) for i in np.flatnonzero(np.all(grid.filled, axis=1))]


def check_full_cols(grid: GameGrid) -> List[int]:
    return [int(i) for i in np.flatnonzero(np.all(grid.filled, axis=0))]


def check_full_sudoku_blocks(grid: GameGrid) -> List[SudokuBlock]:
    return [block for block in SUDOKU_BLOCKS if all(grid.filled[y, x] for x, y in block.cells)]


def _block_mask(grid: GameGrid, blocks: Iterable[SudokuBlock]) -> np.ndarray:
    mask = np.zeros(grid.filled.shape, dtype=np.bool_)
    for block in blocks:
        for x, y in block.cells:
            mask[y, x] = True
    return mask


def _check_indices(indices: Sequence[int], size: int, kind: str) -> None:
    for index in indices:
        if not 0 <= index < size:
            raise ValueError(f"{kind} index {index} outside 0..{size - 1}")


def clear_rows(grid: GameGrid, rows: Sequence[int]) -> GameGrid:
    _check_indices(rows, grid.height, "row")
    mask = np.zeros(grid.filled.shape, dtype=np.bool_)
    mask[np.asarray(rows, dtype=np.intp), :] = True
    return grid.without(mask)


def clear_cols(grid: GameGrid, cols: Sequence[int]) -> GameGrid:
    _check_indices(cols, grid.width, "column")
    mask = np.zeros(grid.filled.shape, dtype=np.bool_)
    mask[:, np.asarray(cols, dtype=np.intp)] = True
    return grid.without(mask)


def clear_sudoku_blocks(grid: GameGrid, blocks: Iterable[SudokuBlock]) -> GameGrid:
    return grid.without(_block_mask(grid, blocks))


def collect_clearing_cells(grid: GameGrid, rows: Sequence[int], cols: Sequence[int],
                           blocks: Sequence[SudokuBlock]) -> List[ClearedCell]:
    """Union of all cells about to be cleared, with their current colors."""
    coords: Dict[Tuple[int, int], None] = {}
    for y in rows:
        for x in range(grid.width):
            coords[(x, y)] = None
    for x in cols:
        for y in range(grid.height):
            coords[(x, y)] = None
    for block in blocks:
        for x, y in block.cells:
            coords[(x, y)] = None
    return [ClearedCell(x, y, grid.colors[y, x]) for x, y in coords]


def resolve_clears(grid: GameGrid, rules: ScoringRules = DEFAULT_SCORING) -> ClearResult:
    """Detect every full row, column and block on `grid` and clear them at once."""
    rows = check_full_rows(grid)
    cols = check_full_cols(grid)
    blocks = check_full_sudoku_blocks(grid)
    cleared_cells = collect_clearing_cells(grid, rows, cols, blocks)

    final = grid
    if rows:
        final = clear_rows(final, rows)
    if cols:
        final = clear_cols(final, cols)
    if blocks:
        final = clear_sudoku_blocks(final, blocks)

    return ClearResult(
        grid=final,
        rows=tuple(rows),
        cols=tuple(cols),
        blocks=tuple(blocks),
        cleared_cells=tuple(cleared_cells),
        score=calculate_score(len(rows), len(cols), len(blocks), rules),
    )
