from __future__ import annotations

import argparse
import random
import sys
from typing import List, Optional, Tuple

import numpy as np

from tetris_ga.ai import FEATURE_NAMES, DecisionEngine, LinearValueEvaluator, Move, apply_move, extract_features
from tetris_ga.game import GameConfig, GameState, TetrisEngine


def afterstate_values(decision: DecisionEngine, evaluator: LinearValueEvaluator,
                      state: GameState) -> List[Tuple[Move, np.ndarray, float]]:
    """(move, design vector, value) for every surviving placement."""
    out = []
    for move, landed in decision.candidates(state):
        phi = evaluator.design(extract_features(landed))
        out.append((move, phi, float(np.dot(evaluator.weights, phi))))
    return out


def _print_progress(ep_idx: int, total: int, last_return: float, last_steps: int) -> None:
    width = 30
    filled = int(width * (ep_idx + 1) / max(1, total))
    bar = "=" * filled + "." * (width - filled)
    msg = f"\r[{bar}] {ep_idx + 1}/{total}  return={last_return:.1f}  pieces={last_steps}"
    print(msg, end="", file=sys.stdout, flush=True)


def train_linear_q(episodes: int = 200, epsilon: float = 0.1, alpha: float = 1e-4, gamma: float = 0.95,
                   seed: int = 0, max_pieces: int = 500, progress: bool = True) -> np.ndarray:
    """TD(0) learning of a linear afterstate value over the board features."""
    rng = random.Random(seed)
    config = GameConfig()
    evaluator = LinearValueEvaluator()
    decision = DecisionEngine(evaluator, config)
    w = evaluator.weights

    for ep in range(episodes):
        engine = TetrisEngine(config, rng=random.Random(seed + ep))
        state = engine.initialize()
        ep_return = 0.0

        while not state.is_game_over and state.pieces_placed < max_pieces:
            options = afterstate_values(decision, evaluator, state)
            if not options:
                break
            # epsilon-greedy over surviving placements
            if rng.random() < epsilon:
                move, phi_sa, q_sa = rng.choice(options)
            else:
                move, phi_sa, q_sa = max(options, key=lambda o: o[2])

            before = state.score
            state = apply_move(engine, state, move)
            reward = float(state.score - before)
            ep_return += reward

            # TD target using next state's greedy evaluation
            if state.is_game_over:
                target = reward
            else:
                next_options = afterstate_values(decision, evaluator, state)
                target = reward + gamma * max((o[2] for o in next_options), default=0.0)

            w += alpha * (target - q_sa) * phi_sa

        if progress:
            _print_progress(ep, episodes, ep_return, state.pieces_placed)

    if progress:
        print()
    return w


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Learn a linear afterstate value with TD(0).")
    p.add_argument("--episodes", type=int, default=200)
    p.add_argument("--epsilon", type=float, default=0.1)
    p.add_argument("--alpha", type=float, default=1e-4)
    p.add_argument("--gamma", type=float, default=0.95)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--max-pieces", type=int, default=500)
    p.add_argument("--no-progress", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    w = train_linear_q(args.episodes, args.epsilon, args.alpha, args.gamma, args.seed, args.max_pieces,
                       progress=not args.no_progress)
    for name, value in zip(("bias",) + FEATURE_NAMES, w):
        print(f"{name:16s}: {value:10.4f}")


if __name__ == "__main__":  # pragma: no cover
    main()
