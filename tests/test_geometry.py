import numpy as np
import pytest

from block_sudoku.game import (
    CATALOG,
    Position,
    extract_occupied_cells,
    mirror_horizontal,
    rotate_clockwise,
    rotate_counter_clockwise,
)
from block_sudoku.game.geometry import as_shape
from block_sudoku.game.pieces import CHIRAL_IDS


T_SHAPE = as_shape([[0, 1, 0], [1, 1, 1], [0, 0, 0]])


def test_rotate_clockwise_square():
    expected = np.array([[0, 1, 0], [0, 1, 1], [0, 1, 0]])
    assert np.array_equal(rotate_clockwise(T_SHAPE), expected)


def test_rotate_clockwise_non_square():
    bar = as_shape([[1, 1, 1, 1]])
    rotated = rotate_clockwise(bar)
    assert rotated.shape == (4, 1)
    assert rotated.sum() == 4


def test_counter_clockwise_is_inverse_of_clockwise():
    for template in CATALOG.values():
        assert np.array_equal(rotate_counter_clockwise(rotate_clockwise(template.shape)), template.shape)
        assert np.array_equal(rotate_clockwise(rotate_counter_clockwise(template.shape)), template.shape)


def test_four_clockwise_turns_are_identity():
    shape = T_SHAPE
    for _ in range(4):
        shape = rotate_clockwise(shape)
    assert np.array_equal(shape, T_SHAPE)


@pytest.mark.parametrize("piece_id", sorted(CHIRAL_IDS))
def test_mirror_is_an_involution(piece_id):
    shape = CATALOG[piece_id].shape
    assert not np.array_equal(mirror_horizontal(shape), shape)
    assert np.array_equal(mirror_horizontal(mirror_horizontal(shape)), shape)


def test_mirror_reverses_rows():
    shape = as_shape([[1, 0, 0], [1, 1, 0], [0, 0, 0]])
    assert mirror_horizontal(shape).tolist() == [[0, 0, 1], [0, 1, 1], [0, 0, 0]]


def test_transforms_return_read_only_copies():
    rotated = rotate_clockwise(T_SHAPE)
    with pytest.raises(ValueError):
        rotated[0, 0] = 1
    assert T_SHAPE.tolist() == [[0, 1, 0], [1, 1, 1], [0, 0, 0]]


def test_extract_occupied_cells_offsets_by_origin():
    o_shape = CATALOG["O"].shape
    cells = extract_occupied_cells(o_shape, Position(2, 3))
    assert cells == [Position(2, 3), Position(3, 3), Position(2, 4), Position(3, 4)]


def test_extract_occupied_cells_allows_negative_origin():
    i_shape = CATALOG["I"].shape
    cells = extract_occupied_cells(i_shape, (0, -1))
    assert cells == [Position(0, 0), Position(1, 0), Position(2, 0), Position(3, 0)]


def test_extract_occupied_cells_empty_shape():
    assert extract_occupied_cells(np.zeros((3, 3), dtype=np.int8), (4, 4)) == []
