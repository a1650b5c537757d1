from __future__ import annotations

import argparse
from typing import List, Optional

import gymnasium as gym

import tetris_ga.env  # noqa: F401
from tetris_ga.game import Action


def run_random(steps: int = 200, seed: int = 0, avoid_hold: bool = False) -> float:
    """Uniformly random commands on `TetrisCommand-v0`; returns the summed reward."""
    env = gym.make("TetrisCommand-v0")
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 1
    for _ in range(steps):
        action = env.action_space.sample()
        if avoid_hold and action == Action.HOLD:
            action = int(Action.HARD_DROP)
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
            episodes += 1
    env.close()
    print(f"Random agent total reward: {total_reward:.2f} over {episodes} episode(s)")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Random-command baseline.")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--no-hold", action="store_true", help="replace hold commands with hard drops")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    run_random(args.steps, args.seed, avoid_hold=args.no_hold)


if __name__ == "__main__":  # pragma: no cover
    main()
