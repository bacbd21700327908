"""Game module for Block Sudoku.

Exports the placement, orientation and clearing engine:
- geometry: matrix rotation/mirroring and cell extraction
- pieces: piece catalog, difficulty pools and spawning
- grid: the 9x9 board and placement validation
- clearing: row/column/3x3 block detection and clearing
- rules: difficulty flags and scoring
- reachability: the game-over search
"""

from .geometry import (
    Position,
    extract_occupied_cells,
    mirror_horizontal,
    rotate_clockwise,
    rotate_counter_clockwise,
)
from .rules import Difficulty, DifficultyRules, ScoringRules, calculate_score
from .pieces import (
    CATALOG,
    MIRRORED_PENTOMINOES,
    PENTOMINOES,
    TETROMINOES,
    Piece,
    PieceFactory,
    PieceTemplate,
    enumerate_orientations,
    flip_piece,
    generate_random_pieces,
    is_reachable_shape,
    piece_by_id,
    piece_pool,
    rotate_piece,
    rotation_states,
)
from .grid import (
    GRID_HEIGHT,
    GRID_WIDTH,
    SUDOKU_BLOCKS,
    Cell,
    GameGrid,
    SudokuBlock,
    create_empty_grid,
    is_valid_placement,
    place_piece_on_grid,
)
from .clearing import (
    ClearedCell,
    ClearResult,
    check_full_cols,
    check_full_rows,
    check_full_sudoku_blocks,
    clear_cols,
    clear_rows,
    clear_sudoku_blocks,
    resolve_clears,
)
from .reachability import can_place_any_piece, iter_placements

__all__ = [
    "Position",
    "extract_occupied_cells",
    "mirror_horizontal",
    "rotate_clockwise",
    "rotate_counter_clockwise",
    "Difficulty",
    "DifficultyRules",
    "ScoringRules",
    "calculate_score",
    "CATALOG",
    "MIRRORED_PENTOMINOES",
    "PENTOMINOES",
    "TETROMINOES",
    "Piece",
    "PieceFactory",
    "PieceTemplate",
    "enumerate_orientations",
    "flip_piece",
    "generate_random_pieces",
    "is_reachable_shape",
    "piece_by_id",
    "piece_pool",
    "rotate_piece",
    "rotation_states",
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "SUDOKU_BLOCKS",
    "Cell",
    "GameGrid",
    "SudokuBlock",
    "create_empty_grid",
    "is_valid_placement",
    "place_piece_on_grid",
    "ClearedCell",
    "ClearResult",
    "check_full_cols",
    "check_full_rows",
    "check_full_sudoku_blocks",
    "clear_cols",
    "clear_rows",
    "clear_sudoku_blocks",
    "resolve_clears",
    "can_place_any_piece",
    "iter_placements",
]
