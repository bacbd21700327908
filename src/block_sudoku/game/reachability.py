from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from .geometry import Position, Shape
from .grid import GameGrid, shape_fits
from .pieces import Orientation, Piece, enumerate_orientations


def candidate_positions(shape: Shape, grid: GameGrid) -> Iterator[Position]:
    """Every origin whose bounding box overlaps the board.

    Shapes carry empty padding rows and columns, so an origin can sit left of
    or above the board while all occupied bits are still inside it.
    """
    h, w = shape.shape
    for y in range(-(h - 1), grid.height):
        for x in range(-(w - 1), grid.width):
            yield Position(x, y)


def iter_placements(piece: Piece, grid: GameGrid, allow_rotate: bool = False,
                    allow_mirror: bool = False) -> Iterator[Tuple[int, Orientation, Position]]:
    """Yield `(orientation_index, orientation, position)` for every legal placement."""
    for index, orientation in enumerate(enumerate_orientations(piece, allow_rotate, allow_mirror)):
        shape = orientation.piece.shape
        for position in candidate_positions(shape, grid):
            if shape_fits(shape, position, grid):
                yield index, orientation, position


def can_place_any_piece(pieces: Iterable[Piece], grid: GameGrid, allow_rotate: bool = False,
                        allow_mirror: bool = False) -> bool:
    """True if at least one unplaced piece fits somewhere in some legal orientation.

    With no unplaced pieces there is nothing to place, so the answer is False.
    """
    for piece in pieces:
        if piece.is_placed:
            continue
        for _ in iter_placements(piece, grid, allow_rotate, allow_mirror):
            return True
    return False
