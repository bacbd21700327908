from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .block_sudoku_env import _compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (piece, y, x, orientation) -> Discrete(N).

    `get_action_mask()` returns the matching 1D boolean mask of shape (N,),
    in C-order over (piece, y, x, orientation).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        self.nvec = tuple(int(n) for n in env.action_space.nvec)
        self.n = int(np.prod(self.nvec))
        self.action_space = spaces.Discrete(self.n)

    def action(self, action: int):  # type: ignore[override]
        return np.array(np.unravel_index(int(action), self.nvec), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.env.unwrapped.session).reshape(-1)
