from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from block_sudoku.game import Difficulty, Piece, Position


@dataclass(frozen=True)
class SelectPiece:
    piece: Piece


@dataclass(frozen=True)
class DeselectPiece:
    pass


@dataclass(frozen=True)
class PlacePiece:
    position: Position
    piece_id: Optional[str] = None  # instance id, used by the drag-and-drop path


@dataclass(frozen=True)
class RotatePiece:
    piece_id: str


@dataclass(frozen=True)
class FlipPiece:
    piece_id: str


@dataclass(frozen=True)
class StartDrag:
    piece: Piece


@dataclass(frozen=True)
class EndDrag:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Resume:
    pass


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class ContinueGame:
    pass


@dataclass(frozen=True)
class SetDifficulty:
    difficulty: Difficulty


@dataclass(frozen=True)
class ClearingDone:
    pass


GameAction = Union[
    SelectPiece,
    DeselectPiece,
    PlacePiece,
    RotatePiece,
    FlipPiece,
    StartDrag,
    EndDrag,
    Pause,
    Resume,
    Restart,
    ContinueGame,
    SetDifficulty,
    ClearingDone,
]
