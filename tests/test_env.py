import gymnasium as gym
import numpy as np

from block_sudoku.env import BlockSudokuEnv, FlattenDiscreteActionWrapper
from block_sudoku.game import Difficulty
from block_sudoku.session import GameConfig


def test_reset_observation_matches_space():
    env = BlockSudokuEnv()
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs["grid"].sum() == 0
    assert obs["placed"].tolist() == [0, 0, 0]
    assert info["action_mask"].shape == (3, 13, 13, 8)
    assert info["valid_actions"]
    assert info["score"] == 0


def test_seeded_resets_are_reproducible():
    env = BlockSudokuEnv()
    a, _ = env.reset(seed=3)
    b, _ = env.reset(seed=3)
    assert np.array_equal(a["pieces"], b["pieces"])


def test_valid_action_places_piece():
    env = BlockSudokuEnv()
    _, info = env.reset(seed=1)
    action = info["valid_actions"][0]
    obs, reward, terminated, truncated, info = env.step(action)

    assert obs["placed"][action[0]] == 1
    assert obs["grid"].sum() > 0
    assert reward >= 0.0
    assert "invalid" not in info["reward_components"]
    assert not truncated
    assert not info["action_mask"][action[0]].any()


def test_invalid_action_is_penalized():
    env = BlockSudokuEnv()
    _, info = env.reset(seed=2)
    # Origin (-4, -4) leaves every tetromino cell off the board
    assert not info["action_mask"][0, 0, 0, 0]

    obs, reward, terminated, truncated, info = env.step((0, 0, 0, 0))
    assert reward == -0.1
    assert info["reward_components"]["invalid"] == -0.1
    assert obs["grid"].sum() == 0
    assert not terminated


def test_reset_accepts_difficulty_option():
    env = BlockSudokuEnv()
    env.reset(seed=0, options={"difficulty": "master"})
    assert env.session.state.difficulty is Difficulty.MASTER
    _, info = env.reset(seed=0, options={"difficulty": Difficulty.EXPERT})
    assert env.session.state.difficulty is Difficulty.EXPERT
    assert info["action_mask"].any()


def test_truncation_at_step_limit():
    env = BlockSudokuEnv(GameConfig(max_episode_steps=2))
    env.reset(seed=0)
    *_, truncated, _ = env.step((0, 0, 0, 0))
    assert not truncated
    *_, truncated, _ = env.step((0, 0, 0, 0))
    assert truncated


def test_flatten_wrapper_mask():
    env = FlattenDiscreteActionWrapper(BlockSudokuEnv())
    env.reset(seed=4)
    mask = env.get_action_mask()
    assert mask.shape == (3 * 13 * 13 * 8,)
    assert env.action_space.n == mask.size

    flat = int(np.flatnonzero(mask)[0])
    obs, reward, *_ = env.step(flat)
    assert obs["grid"].sum() > 0
    assert reward >= 0.0


def test_ansi_render():
    env = BlockSudokuEnv(render_mode="ansi")
    env.reset(seed=0)
    text = env.render()
    assert len(text.splitlines()) == 10
    assert "difficulty=casual" in text


def test_registered_with_gymnasium():
    env = gym.make("BlockSudoku-9x9-v0")
    obs, info = env.reset(seed=0)
    assert "action_mask" in info
    env.close()
