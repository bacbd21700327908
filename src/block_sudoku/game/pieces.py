from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, replace
from typing import Dict, List, NamedTuple, Optional, Tuple

from .geometry import (
    Position,
    Shape,
    as_shape,
    mirror_horizontal,
    rotate_clockwise,
    rotate_counter_clockwise,
    shape_key,
)
from .rules import Difficulty


PIECES_PER_SET = 3
MIRROR_SUFFIX = "M"


@dataclass(frozen=True, eq=False)
class PieceTemplate:
    id: str
    shape: Shape
    color: str

    def spawn(self, instance_id: str) -> "Piece":
        return Piece(id=self.id, instance_id=instance_id, shape=self.shape, color=self.color)


@dataclass(frozen=True, eq=False)
class Piece:
    """A piece instance offered to the player.

    Instances are immutable; rotating, flipping, dragging or placing a piece
    produces a new copy with the same `instance_id`.
    """

    id: str
    instance_id: str
    shape: Shape
    color: str
    position: Position = Position(0, 0)
    rotation: int = 0
    is_placed: bool = False
    is_dragging: bool = False
    is_mirrored: bool = False


def _template(piece_id: str, color: str, rows: List[str]) -> PieceTemplate:
    return PieceTemplate(piece_id, as_shape([[int(c) for c in row] for row in rows]), color)


TETROMINOES: Tuple[PieceTemplate, ...] = (
    _template("I", "#00f0f0", ["0000", "1111", "0000", "0000"]),
    _template("O", "#f0f000", ["110", "110", "000"]),
    _template("T", "#a000f0", ["010", "111", "000"]),
    _template("S", "#00f000", ["011", "110", "000"]),
    _template("Z", "#f00000", ["110", "011", "000"]),
    _template("J", "#0000f0", ["100", "111", "000"]),
    _template("L", "#f0a000", ["001", "111", "000"]),
)

PENTOMINOES: Tuple[PieceTemplate, ...] = (
    _template("I5", "#00c8c8", ["00000", "00000", "11111", "00000", "00000"]),
    _template("L5", "#e08000", ["00100", "00100", "00100", "00110", "00000"]),
    _template("N5", "#8060c0", ["00010", "00010", "00110", "00100", "00000"]),
    _template("P5", "#e060a0", ["00000", "00110", "00110", "00100", "00000"]),
    _template("T5", "#9000c0", ["00000", "01110", "00100", "00100", "00000"]),
    _template("U5", "#c0c000", ["00000", "01010", "01110", "00000", "00000"]),
    _template("V5", "#3060e0", ["00000", "01000", "01000", "01110", "00000"]),
    _template("W5", "#40b040", ["00000", "01000", "01100", "00110", "00000"]),
    _template("X5", "#808080", ["00000", "00100", "01110", "00100", "00000"]),
    _template("Y5", "#c08040", ["00000", "00100", "01100", "00100", "00100"]),
    _template("Z5", "#d02020", ["00000", "01100", "00100", "00110", "00000"]),
    _template("F5", "#20a0a0", ["00000", "00110", "01100", "00100", "00000"]),
)

CHIRAL_IDS = frozenset({"F5", "L5", "N5", "P5", "Y5", "Z5"})

MIRRORED_PENTOMINOES: Tuple[PieceTemplate, ...] = tuple(
    PieceTemplate(t.id + MIRROR_SUFFIX, mirror_horizontal(t.shape), t.color)
    for t in PENTOMINOES
    if t.id in CHIRAL_IDS
)

CATALOG: Dict[str, PieceTemplate] = {
    t.id: t for t in TETROMINOES + PENTOMINOES + MIRRORED_PENTOMINOES
}

ONE_STATE_IDS = frozenset({"O", "X5"})
TWO_STATE_IDS = frozenset({"I", "S", "Z", "I5", "Z5"})


def base_id(piece_id: str) -> str:
    """Catalog id with the mirrored-variant suffix removed."""
    if piece_id.endswith(MIRROR_SUFFIX) and piece_id[: -len(MIRROR_SUFFIX)] in CHIRAL_IDS:
        return piece_id[: -len(MIRROR_SUFFIX)]
    return piece_id


def is_chiral(piece_id: str) -> bool:
    return base_id(piece_id) in CHIRAL_IDS


def rotation_states(piece_id: str) -> int:
    """Number of distinct orientations the rotate control cycles through."""
    bid = base_id(piece_id)
    if bid in ONE_STATE_IDS:
        return 1
    if bid in TWO_STATE_IDS:
        return 2
    return 4


def piece_pool(difficulty: Difficulty | str) -> Tuple[PieceTemplate, ...]:
    rules = Difficulty.from_value(difficulty).rules
    pool = TETROMINOES
    if rules.pentominoes:
        pool = pool + PENTOMINOES
    if rules.mirrored_variants:
        pool = pool + MIRRORED_PENTOMINOES
    return pool


def rotate_piece(piece: Piece) -> Piece:
    allowed = rotation_states(piece.id)
    if allowed == 1:
        return replace(piece, rotation=0)
    if allowed == 2:
        # Alternate CW and CCW so the piece toggles between exactly two shapes
        shape = rotate_clockwise(piece.shape) if piece.rotation == 0 else rotate_counter_clockwise(piece.shape)
    else:
        shape = rotate_clockwise(piece.shape)
    return replace(piece, shape=shape, rotation=(piece.rotation + 1) % allowed)


def flip_piece(piece: Piece) -> Piece:
    if not is_chiral(piece.id):
        return piece
    return replace(piece, shape=mirror_horizontal(piece.shape), is_mirrored=not piece.is_mirrored)


def _reachable_shape_keys(template: PieceTemplate) -> frozenset:
    starts = [template.shape]
    if is_chiral(template.id):
        starts.append(mirror_horizontal(template.shape))
    keys = set()
    for shape in starts:
        for _ in range(4):
            keys.add(shape_key(shape))
            shape = rotate_clockwise(shape)
    return frozenset(keys)


# Spawn turns, rotate and flip only ever produce these shapes for a given id
REACHABLE_SHAPES: Dict[str, frozenset] = {
    piece_id: _reachable_shape_keys(template) for piece_id, template in CATALOG.items()
}


def is_reachable_shape(piece_id: str, shape: Shape) -> bool:
    """True if `shape` is an orientation a `piece_id` instance can be in."""
    keys = REACHABLE_SHAPES.get(piece_id)
    return keys is not None and shape_key(as_shape(shape)) in keys


class Orientation(NamedTuple):
    """A reachable orientation: flip first (if `flipped`), then `turns` rotations."""
    turns: int
    flipped: bool
    piece: Piece


def enumerate_orientations(piece: Piece, allow_rotate: bool = False,
                           allow_mirror: bool = False) -> List[Orientation]:
    """All distinct orientations the player could give `piece` under the flags.

    Rotations are produced with `rotate_piece`, the same function the rotate
    control uses, so the search never sees a shape the player cannot reach.
    """
    starts = [(False, piece)]
    if allow_mirror and is_chiral(piece.id):
        starts.append((True, flip_piece(piece)))

    turns = rotation_states(piece.id) if allow_rotate else 1
    seen = set()
    result: List[Orientation] = []
    for flipped, current in starts:
        for turn in range(turns):
            key = shape_key(current.shape)
            if key not in seen:
                seen.add(key)
                result.append(Orientation(turn, flipped, current))
            current = rotate_piece(current)
    return result


class PieceFactory:
    """Spawns piece instances from a difficulty's pool using an injected RNG."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def new_instance_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def create(self, difficulty: Difficulty | str) -> Piece:
        difficulty = Difficulty.from_value(difficulty)
        template = self.rng.choice(piece_pool(difficulty))
        piece = template.spawn(self.new_instance_id())
        if difficulty.rules.randomize_orientation:
            turns = self.rng.randint(0, 3)
            shape = piece.shape
            for _ in range(turns):
                shape = rotate_clockwise(shape)
            piece = replace(piece, shape=shape, rotation=turns % rotation_states(piece.id))
        return piece

    def batch(self, difficulty: Difficulty | str, count: int = PIECES_PER_SET) -> Tuple[Piece, ...]:
        return tuple(self.create(difficulty) for _ in range(count))


def generate_random_pieces(difficulty: Difficulty | str,
                           rng: Optional[random.Random] = None) -> Tuple[Piece, ...]:
    return PieceFactory(rng).batch(difficulty)


def piece_by_id(piece_id: str, instance_id: Optional[str] = None) -> Piece:
    """Fresh, unrotated instance of a catalog piece."""
    template = CATALOG[piece_id]
    return template.spawn(instance_id or f"{piece_id}-{uuid.uuid4().hex[:8]}")
