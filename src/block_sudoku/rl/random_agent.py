from __future__ import annotations

import argparse
import random

import gymnasium as gym

import block_sudoku.env  # noqa: F401
from block_sudoku.game import Difficulty
from block_sudoku.session import GameConfig


def run_random(steps: int = 200, difficulty: str = "casual", seed: int | None = None,
               render: bool = False) -> float:
    config = GameConfig(difficulty=Difficulty.from_value(difficulty), random_seed=seed)
    env = gym.make("BlockSudoku-9x9-v0", config=config, render_mode="ansi" if render else None)
    picker = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    games = 1
    for _ in range(steps):
        valid = info.get("valid_actions", [])
        action = picker.choice(valid) if valid else env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            if render:
                print(env.render())
            print(f"Game {games} over, score {info['score']}")
            games += 1
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward over {games} game(s): {total_reward:.2f}")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play block sudoku with uniformly random valid moves")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--difficulty", choices=[d.value for d in Difficulty], default="casual")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--render", action="store_true")
    return p


def main() -> None:  # pragma: no cover
    args = build_parser().parse_args()
    run_random(args.steps, args.difficulty, args.seed, args.render)


if __name__ == "__main__":  # pragma: no cover
    main()
