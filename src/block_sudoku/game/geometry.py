from __future__ import annotations

from typing import Iterable, List, NamedTuple

import numpy as np


Shape = np.ndarray


class Position(NamedTuple):
    x: int
    y: int


def as_shape(rows: Iterable[Iterable[int]] | np.ndarray) -> Shape:
    """Return a read-only int8 copy of `rows`."""
    shape = np.array(rows, dtype=np.int8)
    shape.setflags(write=False)
    return shape


def rotate_clockwise(shape: Shape) -> Shape:
    return as_shape(np.rot90(shape, 1, axes=(1, 0)))


def rotate_counter_clockwise(shape: Shape) -> Shape:
    # Three clockwise turns
    return rotate_clockwise(rotate_clockwise(rotate_clockwise(shape)))


def mirror_horizontal(shape: Shape) -> Shape:
    return as_shape(shape[:, ::-1])


def shape_key(shape: Shape) -> tuple:
    return shape.shape, shape.tobytes()


def extract_occupied_cells(shape: Shape, origin: Position | tuple[int, int]) -> List[Position]:
    """Absolute coordinates of every occupied bit, in row-major order."""
    ox, oy = origin
    ys, xs = np.nonzero(shape)
    return [Position(ox + int(dx), oy + int(dy)) for dy, dx in zip(ys, xs)]


def cell_count(shape: Shape) -> int:
    return int(np.count_nonzero(shape))
