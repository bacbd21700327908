from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from block_sudoku.game import Difficulty, Piece, PieceFactory, Position, ScoringRules
from block_sudoku.game.pieces import PIECES_PER_SET

from . import actions
from .reducer import reduce
from .snapshot import dump_snapshot, restore_snapshot
from .state import GameState, elapsed_seconds, new_game
from .store import SnapshotStore


logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class GameConfig:
    """Configuration for a block sudoku session"""
    difficulty: Difficulty = Difficulty.CASUAL
    pieces_per_set: int = PIECES_PER_SET
    random_seed: Optional[int] = None
    clear_animation_ms: int = 250
    max_episode_steps: int = 10000
    scoring: ScoringRules = field(default_factory=ScoringRules)


class GameSession:
    """Owns the current `GameState` and serializes every transition.

    The clock, random source and snapshot store are injected. When a store
    holds a valid snapshot the session resumes it (paused); otherwise it deals
    a fresh game for `config.difficulty`.
    """

    def __init__(self, config: Optional[GameConfig] = None, store: Optional[SnapshotStore] = None,
                 clock: Clock = time.time, rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        self.store = store
        self.clock = clock
        self.rng = rng or random.Random(self.config.random_seed)
        self.factory = PieceFactory(self.rng)
        self._skip_next_save = False

        restored = restore_snapshot(store.load(), clock(), self.config.pieces_per_set) if store is not None else None
        self.loaded_from_storage = restored is not None
        self.has_saved = self.loaded_from_storage
        self._state = restored or new_game(self.config.difficulty, self.factory, clock(),
                                           self.config.pieces_per_set)

    @property
    def state(self) -> GameState:
        return self._state

    def dispatch(self, action: actions.GameAction) -> GameState:
        new_state = reduce(
            self._state,
            action,
            factory=self.factory,
            now=self.clock(),
            scoring=self.config.scoring,
            pieces_per_set=self.config.pieces_per_set,
        )
        if new_state is not self._state:
            self._state = new_state
            self._persist()
        return self._state

    def _persist(self) -> None:
        if self.store is None:
            return
        if self._skip_next_save:
            self._skip_next_save = False
            return
        self.store.save(dump_snapshot(self._state, self.clock()))
        self.has_saved = True

    def elapsed_seconds(self) -> int:
        return elapsed_seconds(self._state, self.clock())

    def select_piece(self, piece: Piece) -> GameState:
        return self.dispatch(actions.SelectPiece(piece))

    def deselect_piece(self) -> GameState:
        return self.dispatch(actions.DeselectPiece())

    def place_piece(self, position: Position | tuple[int, int], piece_id: Optional[str] = None) -> GameState:
        return self.dispatch(actions.PlacePiece(Position(*position), piece_id))

    def rotate_piece(self, piece_id: str) -> GameState:
        return self.dispatch(actions.RotatePiece(piece_id))

    def flip_piece(self, piece_id: str) -> GameState:
        return self.dispatch(actions.FlipPiece(piece_id))

    def start_drag(self, piece: Piece) -> GameState:
        return self.dispatch(actions.StartDrag(piece))

    def end_drag(self) -> GameState:
        return self.dispatch(actions.EndDrag())

    def pause(self) -> GameState:
        return self.dispatch(actions.Pause())

    def resume(self) -> GameState:
        return self.dispatch(actions.Resume())

    def restart(self) -> GameState:
        return self.dispatch(actions.Restart())

    def continue_game(self) -> GameState:
        return self.dispatch(actions.ContinueGame())

    def set_difficulty(self, difficulty: Difficulty | str) -> GameState:
        return self.dispatch(actions.SetDifficulty(Difficulty.from_value(difficulty)))

    def clearing_done(self) -> GameState:
        return self.dispatch(actions.ClearingDone())

    def discard_saved_and_restart(self) -> GameState:
        """Drop the stored snapshot and start over without re-saving the new game."""
        if self.store is not None:
            self.store.clear()
            self._skip_next_save = True
        self.has_saved = False
        logger.debug("Discarded saved game, restarting at %s", self._state.difficulty.value)
        return self.restart()
