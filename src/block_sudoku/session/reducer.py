from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Callable, Optional, Tuple

from block_sudoku.game import (
    Difficulty,
    Piece,
    PieceFactory,
    Position,
    ScoringRules,
    can_place_any_piece,
    flip_piece,
    is_valid_placement,
    place_piece_on_grid,
    resolve_clears,
    rotate_piece,
)
from block_sudoku.game.pieces import PIECES_PER_SET
from block_sudoku.game.rules import DEFAULT_SCORING

from .actions import (
    ClearingDone,
    ContinueGame,
    DeselectPiece,
    EndDrag,
    FlipPiece,
    GameAction,
    Pause,
    PlacePiece,
    Restart,
    Resume,
    RotatePiece,
    SelectPiece,
    SetDifficulty,
    StartDrag,
)
from .state import GameState, new_game


logger = logging.getLogger(__name__)


def _replace_piece(state: GameState, instance_id: str,
                   update: Callable[[Piece], Piece]) -> GameState:
    """Apply `update` to one available piece, keeping the selection on the live copy."""
    target = state.find_piece(instance_id)
    if target is None:
        return state
    updated = update(target)
    if updated is target:
        return state
    pieces = tuple(updated if p.instance_id == instance_id else p for p in state.available_pieces)
    selected = state.selected_piece
    if selected is not None and selected.instance_id == instance_id:
        selected = updated
    return replace(state, available_pieces=pieces, selected_piece=selected)


def _place(state: GameState, action: PlacePiece, factory: PieceFactory,
           scoring: ScoringRules, pieces_per_set: int) -> GameState:
    target_id: Optional[str] = None
    if state.selected_piece is not None:
        target_id = state.selected_piece.instance_id
    elif action.piece_id is not None:
        target_id = action.piece_id
    piece = state.find_piece(target_id)
    if piece is None or piece.is_placed:
        return state

    position = Position(*action.position)
    if not is_valid_placement(piece, position, state.grid):
        return state

    placed_grid = place_piece_on_grid(piece, position, state.grid)
    pieces: Tuple[Piece, ...] = tuple(
        replace(p, is_placed=True, is_dragging=False, position=position)
        if p.instance_id == piece.instance_id else p
        for p in state.available_pieces
    )

    result = resolve_clears(placed_grid, scoring)

    if all(p.is_placed for p in pieces):
        pieces = factory.batch(state.difficulty, pieces_per_set)
        logger.debug("Batch exhausted, dealt %s", [p.id for p in pieces])

    rules = state.difficulty.rules
    can_continue = can_place_any_piece(pieces, result.grid, rules.allow_rotate, rules.allow_mirror)
    if not can_continue:
        logger.debug("No placement left for %s, game over at score %d",
                     [p.id for p in pieces if not p.is_placed], state.score + result.score)

    return replace(
        state,
        grid=result.grid,
        available_pieces=pieces,
        selected_piece=None,
        score=state.score + result.score,
        clears_count=state.clears_count + result.clears,
        clearing_cells=result.cleared_cells,
        game_over=not can_continue,
    )


def reduce(state: GameState, action: GameAction, *, factory: PieceFactory, now: float,
           scoring: ScoringRules = DEFAULT_SCORING, pieces_per_set: int = PIECES_PER_SET) -> GameState:
    """Return the state after `action`.

    Actions that do not apply (placing a placed piece, an invalid position,
    rotating or flipping where the difficulty forbids it, unknown action
    types) return `state` itself unchanged.
    """
    if isinstance(action, SelectPiece):
        live = state.find_piece(action.piece.instance_id)
        return replace(state, selected_piece=live or action.piece)

    if isinstance(action, DeselectPiece):
        return replace(state, selected_piece=None)

    if isinstance(action, PlacePiece):
        return _place(state, action, factory, scoring, pieces_per_set)

    if isinstance(action, RotatePiece):
        if not state.difficulty.rules.allow_rotate:
            return state
        return _replace_piece(state, action.piece_id, rotate_piece)

    if isinstance(action, FlipPiece):
        if not state.difficulty.rules.allow_mirror:
            return state
        return _replace_piece(state, action.piece_id, flip_piece)

    if isinstance(action, StartDrag):
        target = state.find_piece(action.piece.instance_id)
        if target is None:
            return state
        dragging = replace(target, is_dragging=True)
        pieces = tuple(dragging if p is target else p for p in state.available_pieces)
        return replace(state, available_pieces=pieces, selected_piece=dragging)

    if isinstance(action, EndDrag):
        pieces = tuple(replace(p, is_dragging=False) if p.is_dragging else p
                       for p in state.available_pieces)
        return replace(state, available_pieces=pieces, selected_piece=None)

    if isinstance(action, Pause):
        elapsed = state.total_elapsed
        if state.last_start_time is not None:
            elapsed += int(math.floor(now - state.last_start_time))
        return replace(state, paused=True, total_elapsed=elapsed, last_start_time=None)

    if isinstance(action, Resume):
        return replace(state, paused=False, last_start_time=now)

    if isinstance(action, Restart):
        return new_game(state.difficulty, factory, now, pieces_per_set)

    if isinstance(action, SetDifficulty):
        return new_game(Difficulty.from_value(action.difficulty), factory, now, pieces_per_set)

    if isinstance(action, ContinueGame):
        return replace(state, game_over=False, last_start_time=now)

    if isinstance(action, ClearingDone):
        return replace(state, clearing_cells=())

    logger.warning("Ignoring unsupported action %r", action)
    return state
