"""Gymnasium environments for Block Sudoku."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .block_sudoku_env import BlockSudokuEnv
from .wrappers import FlattenDiscreteActionWrapper

register(
    id="BlockSudoku-9x9-v0",
    entry_point="block_sudoku.env.block_sudoku_env:BlockSudokuEnv",
)

__all__ = ["BlockSudokuEnv", "FlattenDiscreteActionWrapper"]
