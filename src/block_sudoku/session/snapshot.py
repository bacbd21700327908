"""JSON-ready snapshots of a `GameState`.

A snapshot looks like ``{"version": 1, "savedAt": ..., "state": {...}}`` with
camelCase keys. Transient fields are never written: ``clearingCells`` is saved
empty and ``lastStartTime`` as null. Loading validates the whole payload and
either returns a consistent state or None; a corrupt snapshot is never
partially restored.
"""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictInt,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from block_sudoku.game import (
    CATALOG,
    GRID_HEIGHT,
    GRID_WIDTH,
    Cell,
    Difficulty,
    GameGrid,
    Piece,
    Position,
    is_reachable_shape,
    piece_pool,
)
from block_sudoku.game.geometry import as_shape
from block_sudoku.game.pieces import PIECES_PER_SET

from .state import GameState


logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1
SHAPE_SIZES = (3, 4, 5)


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CellModel(_Model):
    filled: StrictBool
    color: Optional[str] = None
    piece_id: Optional[str] = None

    @model_validator(mode="after")
    def _color_matches_fill(self) -> "CellModel":
        if self.filled and not self.color:
            raise ValueError("filled cell without a color")
        if not self.filled and self.color is not None:
            raise ValueError("empty cell with a color")
        return self


class PositionModel(_Model):
    x: StrictInt
    y: StrictInt


class PieceModel(_Model):
    id: str
    instance_id: str
    shape: List[List[StrictInt]]
    color: str
    position: PositionModel
    rotation: StrictInt
    is_placed: StrictBool
    is_dragging: StrictBool = False
    is_mirrored: StrictBool = False

    @field_validator("id")
    @classmethod
    def _known_piece(cls, value: str) -> str:
        if value not in CATALOG:
            raise ValueError(f"unknown piece id {value!r}")
        return value

    @field_validator("shape")
    @classmethod
    def _square_bit_matrix(cls, value: List[List[int]]) -> List[List[int]]:
        size = len(value)
        if size not in SHAPE_SIZES:
            raise ValueError(f"shape must be one of {SHAPE_SIZES} rows, got {size}")
        for row in value:
            if len(row) != size:
                raise ValueError("shape must be square")
            if any(bit not in (0, 1) for bit in row):
                raise ValueError("shape must contain only 0 and 1")
        return value

    @model_validator(mode="after")
    def _shape_matches_piece(self) -> "PieceModel":
        if not is_reachable_shape(self.id, self.shape):
            raise ValueError(f"shape is not an orientation of piece {self.id!r}")
        return self


class StateModel(_Model):
    grid: List[List[CellModel]]
    available_pieces: List[PieceModel]
    selected_piece: Optional[PieceModel] = None
    score: StrictInt
    clears_count: StrictInt
    game_over: StrictBool = False
    paused: StrictBool = False
    start_time: Optional[float] = None
    total_elapsed: Optional[StrictInt] = None
    difficulty: Difficulty

    @field_validator("grid")
    @classmethod
    def _board_dimensions(cls, value: List[List[CellModel]]) -> List[List[CellModel]]:
        if len(value) != GRID_HEIGHT or any(len(row) != GRID_WIDTH for row in value):
            raise ValueError(f"grid must be {GRID_HEIGHT}x{GRID_WIDTH}")
        return value

    @field_validator("available_pieces")
    @classmethod
    def _full_batch(cls, value: List[PieceModel], info: ValidationInfo) -> List[PieceModel]:
        expected = (info.context or {}).get("pieces_per_set", PIECES_PER_SET)
        if len(value) != expected:
            raise ValueError(f"expected {expected} pieces, got {len(value)}")
        return value

    @model_validator(mode="after")
    def _batch_matches_difficulty(self) -> "StateModel":
        pool = {template.id for template in piece_pool(self.difficulty)}
        stray = sorted({p.id for p in self.available_pieces} - pool)
        if stray:
            raise ValueError(f"pieces {stray} are not dealt at {self.difficulty.value}")
        # A fully placed batch is always replaced before the state is saved
        if self.available_pieces and all(p.is_placed for p in self.available_pieces):
            raise ValueError("every piece in the batch is already placed")
        return self

    @model_validator(mode="after")
    def _selection_in_batch(self) -> "StateModel":
        if self.selected_piece is not None:
            ids = {p.instance_id for p in self.available_pieces}
            if self.selected_piece.instance_id not in ids:
                raise ValueError("selected piece is not part of the batch")
        return self


class SnapshotModel(_Model):
    version: Literal[1]
    saved_at: Optional[float] = None
    state: StateModel


def _piece_model(piece: Piece) -> PieceModel:
    return PieceModel(
        id=piece.id,
        instance_id=piece.instance_id,
        shape=piece.shape.tolist(),
        color=piece.color,
        position=PositionModel(x=piece.position.x, y=piece.position.y),
        rotation=piece.rotation,
        is_placed=piece.is_placed,
        is_dragging=piece.is_dragging,
        is_mirrored=piece.is_mirrored,
    )


def _piece_from_model(model: PieceModel) -> Piece:
    return Piece(
        id=model.id,
        instance_id=model.instance_id,
        shape=as_shape(model.shape),
        color=model.color,
        position=Position(model.position.x, model.position.y),
        rotation=model.rotation,
        is_placed=model.is_placed,
        is_dragging=model.is_dragging,
        is_mirrored=model.is_mirrored,
    )


def dump_snapshot(state: GameState, saved_at: float) -> dict:
    """Serialize `state` into a JSON-compatible dict."""
    state_model = StateModel.model_validate(
        dict(
            grid=[
                [CellModel(filled=c.filled, color=c.color, piece_id=c.piece_id) for c in row]
                for row in state.grid.rows()
            ],
            available_pieces=[_piece_model(p) for p in state.available_pieces],
            selected_piece=_piece_model(state.selected_piece) if state.selected_piece else None,
            score=state.score,
            clears_count=state.clears_count,
            game_over=state.game_over,
            paused=state.paused,
            start_time=state.start_time,
            total_elapsed=state.total_elapsed,
            difficulty=state.difficulty,
        ),
        context={"pieces_per_set": len(state.available_pieces)},
    )
    model = SnapshotModel(version=SNAPSHOT_VERSION, saved_at=saved_at, state=state_model)
    payload = model.model_dump(mode="json", by_alias=True)
    payload["state"]["lastStartTime"] = None
    payload["state"]["clearingCells"] = []
    return payload


def restore_snapshot(payload: Any, now: float, pieces_per_set: int = PIECES_PER_SET) -> Optional[GameState]:
    """Rebuild a paused `GameState` from `payload`, or None if it is malformed.

    `pieces_per_set` is the batch size the restoring session deals.
    """
    if payload is None:
        return None
    try:
        snapshot = SnapshotModel.model_validate(payload, context={"pieces_per_set": pieces_per_set})
    except ValidationError as exc:
        logger.warning("Discarding invalid snapshot (%d errors): %s", exc.error_count(), exc.errors()[0]["msg"])
        return None

    s = snapshot.state
    grid = GameGrid.from_cells(
        [[Cell(c.filled, c.color, c.piece_id) for c in row] for row in s.grid]
    )
    pieces = tuple(_piece_from_model(p) for p in s.available_pieces)
    selected = None
    if s.selected_piece is not None:
        selected = next(p for p in pieces if p.instance_id == s.selected_piece.instance_id)

    return GameState(
        grid=grid,
        available_pieces=pieces,
        selected_piece=selected,
        score=s.score,
        clears_count=s.clears_count,
        game_over=s.game_over,
        # A restored game waits for the player to resume
        paused=True,
        start_time=s.start_time if s.start_time is not None else now,
        total_elapsed=s.total_elapsed or 0,
        last_start_time=None,
        clearing_cells=(),
        difficulty=s.difficulty,
    )
