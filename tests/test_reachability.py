from dataclasses import replace

import pytest

from block_sudoku.game import (
    CATALOG,
    TETROMINOES,
    GameGrid,
    Piece,
    can_place_any_piece,
    create_empty_grid,
    is_valid_placement,
    iter_placements,
    piece_by_id,
)
from block_sudoku.game.geometry import as_shape, cell_count


@pytest.mark.parametrize("template", TETROMINOES, ids=lambda t: t.id)
def test_empty_grid_fits_any_tetromino(template):
    assert can_place_any_piece([piece_by_id(template.id)], create_empty_grid())


def test_single_hole_fits_nothing():
    assert min(cell_count(t.shape) for t in CATALOG.values()) == 4
    lines = ["1" * 9] * 9
    lines[4] = "111101111"
    grid = GameGrid.from_lines(lines)
    pieces = [piece_by_id(pid) for pid in CATALOG]
    assert not can_place_any_piece(pieces, grid, allow_rotate=True, allow_mirror=True)


def test_placed_pieces_are_ignored():
    placed = replace(piece_by_id("O"), is_placed=True)
    assert not can_place_any_piece([placed], create_empty_grid())
    assert not can_place_any_piece([], create_empty_grid())


def test_vertical_slot_needs_rotation():
    lines = ["011111111"] * 4 + ["1" * 9] * 5
    grid = GameGrid.from_lines(lines)
    bar = piece_by_id("I")
    assert not can_place_any_piece([bar], grid)
    assert can_place_any_piece([bar], grid, allow_rotate=True)


def test_mirrored_slot_needs_flip():
    # Free cells form exactly the mirrored F5 footprint
    lines = [
        "111111111",
        "100111111",
        "110011111",
        "110111111",
    ] + ["1" * 9] * 5
    grid = GameGrid.from_lines(lines)
    f5 = piece_by_id("F5")
    assert not can_place_any_piece([f5], grid)
    assert not can_place_any_piece([f5], grid, allow_rotate=True)
    assert can_place_any_piece([f5], grid, allow_mirror=True)
    assert can_place_any_piece([piece_by_id("F5M")], grid)


def test_f5_edge_placement_with_rotation():
    board = GameGrid.from_lines([
        "100111111",
        "100000110",
        "111111110",
        "000111100",
        "000110101",
        "000000000",
        "111101111",
        "111001110",
        "010011111",
    ])
    assert can_place_any_piece([piece_by_id("F5")], board, allow_rotate=True)


def test_w5_fits_with_padding_off_the_board():
    board = GameGrid.from_lines([
        "001111000",
        "001111110",
        "000001110",
        "011100111",
        "001101111",
        "011101011",
        "000000011",
        "011101011",
        "011000111",
    ])
    w5 = piece_by_id("W5")
    assert is_valid_placement(w5, (-1, -1), board)
    assert can_place_any_piece([w5], board, allow_rotate=True)


def test_z5_insane_game_over():
    board = GameGrid.from_lines([
        "101101010",
        "001101110",
        "101111100",
        "000111110",
        "001010010",
        "101011110",
        "001101110",
        "101111010",
        "000100011",
    ])
    # Z5 as dealt in insane mode, already turned once clockwise
    z5 = Piece(
        id="Z5",
        instance_id="z5-test-1",
        shape=as_shape([
            [0, 0, 0, 0, 0],
            [0, 0, 0, 1, 0],
            [0, 1, 1, 1, 0],
            [0, 1, 0, 0, 0],
            [0, 0, 0, 0, 0],
        ]),
        color="#f00000",
        rotation=1,
    )
    assert not can_place_any_piece([z5], board, allow_rotate=False, allow_mirror=True)


def test_iter_placements_reports_every_legal_origin():
    grid = create_empty_grid()
    placements = list(iter_placements(piece_by_id("O"), grid))
    # The O occupies the top-left 2x2 of its 3x3 box
    assert len(placements) == 8 * 8
    assert all(is_valid_placement(o.piece, pos, grid) for _, o, pos in placements)
