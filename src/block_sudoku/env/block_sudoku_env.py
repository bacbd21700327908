from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_sudoku.game import Piece, Position, enumerate_orientations, is_valid_placement, iter_placements
from block_sudoku.game.pieces import Orientation
from block_sudoku.session import GameConfig, GameSession


MAX_SHAPE = 5
# Origins may hang off the top/left edge by up to MAX_SHAPE - 1 cells
PAD = MAX_SHAPE - 1
MAX_ORIENTATIONS = 8


def _orientations(session: GameSession, piece: Piece) -> List[Orientation]:
    rules = session.state.difficulty.rules
    return enumerate_orientations(piece, rules.allow_rotate, rules.allow_mirror)


def _compute_action_mask(session: GameSession) -> np.ndarray:
    state = session.state
    size = state.grid.width + PAD
    k = session.config.pieces_per_set
    rules = state.difficulty.rules
    mask = np.zeros((k, size, size, MAX_ORIENTATIONS), dtype=np.bool_)
    for piece_idx, piece in enumerate(state.available_pieces[:k]):
        if piece.is_placed:
            continue
        for o, _, pos in iter_placements(piece, state.grid, rules.allow_rotate, rules.allow_mirror):
            mask[piece_idx, pos.y + PAD, pos.x + PAD, o] = True
    return mask


def _padded_shape(piece: Piece) -> np.ndarray:
    out = np.zeros((MAX_SHAPE, MAX_SHAPE), dtype=np.int8)
    h, w = piece.shape.shape
    out[:h, :w] = piece.shape
    return out


class BlockSudokuEnv(gym.Env):
    """Gymnasium view of a block sudoku session.

    Action is ``(piece_idx, y, x, orientation)`` where ``y``/``x`` are the
    piece origin shifted by ``PAD`` and ``orientation`` indexes
    `enumerate_orientations` for the piece under the current difficulty.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0,
                 score_scale: float = 0.01) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.score_scale = float(score_scale)

        self.session = GameSession(self.config)
        grid_size = self.session.state.grid.width
        k = self.config.pieces_per_set

        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(grid_size, grid_size), dtype=np.int8),
                "pieces": spaces.Box(low=0, high=1, shape=(k, MAX_SHAPE, MAX_SHAPE), dtype=np.int8),
                "placed": spaces.MultiBinary(k),
            }
        )
        self.action_space = spaces.MultiDiscrete((k, grid_size + PAD, grid_size + PAD, MAX_ORIENTATIONS))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        state = self.session.state
        k = self.config.pieces_per_set
        pieces = np.zeros((k, MAX_SHAPE, MAX_SHAPE), dtype=np.int8)
        placed = np.zeros((k,), dtype=np.int8)
        for i, piece in enumerate(state.available_pieces[:k]):
            placed[i] = int(piece.is_placed)
            if not piece.is_placed:
                pieces[i] = _padded_shape(piece)
        return {
            "grid": state.grid.filled.astype(np.int8),
            "pieces": pieces,
            "placed": placed,
        }

    def _get_info(self) -> Dict[str, Any]:
        mask = _compute_action_mask(self.session)
        return {
            "action_mask": mask,
            "valid_actions": [tuple(int(v) for v in idx) for idx in np.argwhere(mask)],
            "score": self.session.state.score,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None,
              options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        rng = random.Random(int(self.np_random.integers(0, 2**31 - 1)))
        self.session = GameSession(self.config, rng=rng)
        if options and "difficulty" in options:
            self.session.set_difficulty(options["difficulty"])
        self._steps = 0
        return self._get_obs(), self._get_info()

    def _apply(self, piece_idx: int, y: int, x: int, o: int) -> bool:
        state = self.session.state
        if not 0 <= piece_idx < len(state.available_pieces):
            return False
        piece = state.available_pieces[piece_idx]
        if piece.is_placed:
            return False
        orientations = _orientations(self.session, piece)
        if not 0 <= o < len(orientations):
            return False
        orientation = orientations[o]
        origin = Position(x - PAD, y - PAD)
        if not is_valid_placement(orientation.piece, origin, state.grid):
            return False

        if orientation.flipped:
            self.session.flip_piece(piece.instance_id)
        for _ in range(orientation.turns):
            self.session.rotate_piece(piece.instance_id)
        before = self.session.state
        after = self.session.place_piece(origin, piece_id=piece.instance_id)
        return after is not before

    def step(self, action: np.ndarray | Tuple[int, int, int, int]):
        piece_idx, y, x, o = map(int, action)
        score_before = self.session.state.score

        success = self._apply(piece_idx, y, x, o)
        reward_components: Dict[str, float] = {"step": self.step_penalty}
        if success:
            reward_components["score"] = self.score_scale * float(self.session.state.score - score_before)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        self._steps += 1
        terminated = bool(self.session.state.game_over)
        truncated = self._steps >= self.config.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = self.session.state.score - score_before
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[str]:
        if self.render_mode != "ansi":
            return None
        state = self.session.state
        lines = ["".join("█" if cell else "·" for cell in row) for row in state.grid.filled]
        lines.append(f"score={state.score} clears={state.clears_count} difficulty={state.difficulty.value}")
        return "\n".join(lines)

    def close(self) -> None:
        pass
