from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from block_sudoku.game import ClearedCell, Difficulty, GameGrid, Piece, PieceFactory, create_empty_grid
from block_sudoku.game.pieces import PIECES_PER_SET


class SessionStatus(str, Enum):
    """Tagged view over the `paused` and `game_over` flags.

    Both flags may be set at once (pausing after the final move); that
    combination reports GAME_OVER.
    """
    ACTIVE = "active"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True, eq=False)
class GameState:
    grid: GameGrid
    available_pieces: Tuple[Piece, ...]
    selected_piece: Optional[Piece]
    score: int
    clears_count: int
    game_over: bool
    paused: bool
    start_time: float
    total_elapsed: int
    last_start_time: Optional[float]
    clearing_cells: Tuple[ClearedCell, ...]
    difficulty: Difficulty

    @property
    def status(self) -> SessionStatus:
        if self.game_over:
            return SessionStatus.GAME_OVER
        if self.paused:
            return SessionStatus.PAUSED
        return SessionStatus.ACTIVE

    def find_piece(self, instance_id: Optional[str]) -> Optional[Piece]:
        if instance_id is None:
            return None
        for piece in self.available_pieces:
            if piece.instance_id == instance_id:
                return piece
        return None

    @property
    def pieces_remaining(self) -> int:
        return sum(1 for piece in self.available_pieces if not piece.is_placed)


def new_game(difficulty: Difficulty | str, factory: PieceFactory, now: float,
             pieces_per_set: int = PIECES_PER_SET) -> GameState:
    difficulty = Difficulty.from_value(difficulty)
    return GameState(
        grid=create_empty_grid(),
        available_pieces=factory.batch(difficulty, pieces_per_set),
        selected_piece=None,
        score=0,
        clears_count=0,
        game_over=False,
        paused=False,
        start_time=now,
        total_elapsed=0,
        last_start_time=now,
        clearing_cells=(),
        difficulty=difficulty,
    )


def elapsed_seconds(state: GameState, now: float) -> int:
    """Whole seconds of play time, for display only."""
    if state.game_over or state.paused or state.last_start_time is None:
        return state.total_elapsed
    return state.total_elapsed + int(math.floor(now - state.last_start_time))
