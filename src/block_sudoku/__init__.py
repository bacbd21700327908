"""Block Sudoku: polyomino placement with sudoku-style row, column and block clears."""

from .game import Difficulty, GameGrid, Piece
from .session import GameConfig, GameSession, GameState

__all__ = ["Difficulty", "GameGrid", "Piece", "GameConfig", "GameSession", "GameState"]
