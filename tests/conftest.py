from __future__ import annotations

import random
from dataclasses import replace
from typing import Optional, Sequence

import pytest

from block_sudoku.game import Difficulty, GameGrid, PieceFactory, piece_by_id
from block_sudoku.session import GameState, new_game


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def factory() -> PieceFactory:
    return PieceFactory(random.Random(1234))


@pytest.fixture
def make_state(factory: PieceFactory):
    """Build a game state holding catalog pieces with predictable instance ids."""

    def build(piece_ids: Sequence[str], grid: Optional[GameGrid] = None,
              difficulty: Difficulty = Difficulty.CASUAL, now: float = 1000.0) -> GameState:
        state = new_game(difficulty, factory, now)
        pieces = tuple(piece_by_id(pid, instance_id=f"{pid}-{i}") for i, pid in enumerate(piece_ids))
        return replace(state, available_pieces=pieces, grid=grid if grid is not None else state.grid)

    return build
