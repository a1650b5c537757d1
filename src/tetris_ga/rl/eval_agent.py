from __future__ import annotations

import argparse
import random
import statistics
from typing import Dict, List, Optional

from tetris_ga.ai import DecisionEngine, LinearPenaltyEvaluator, PenaltyWeights, play_game
from tetris_ga.game import GameConfig, TetrisEngine


def evaluate(penalties: PenaltyWeights, games: int = 5, seed: int = 0, max_pieces: Optional[int] = 500,
             consider_hold: bool = False) -> Dict[str, float]:
    """Play `games` seeded games with the linear penalty agent and summarize them."""
    config = GameConfig()
    decision = DecisionEngine(LinearPenaltyEvaluator(penalties), config, consider_hold=consider_hold)
    scores: List[int] = []
    lines: List[int] = []
    pieces: List[int] = []
    for i in range(games):
        engine = TetrisEngine(config, rng=random.Random(seed + i))
        final = play_game(engine, decision, max_pieces=max_pieces)
        scores.append(final.score)
        lines.append(final.lines_cleared)
        pieces.append(final.pieces_placed)
    return {
        "mean_score": statistics.mean(scores),
        "max_score": max(scores),
        "mean_lines": statistics.mean(lines),
        "mean_pieces": statistics.mean(pieces),
    }


def build_parser() -> argparse.ArgumentParser:
    defaults = PenaltyWeights()
    p = argparse.ArgumentParser(description="Evaluate the linear penalty agent.")
    p.add_argument("--games", type=int, default=5)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--max-pieces", type=int, default=500)
    p.add_argument("--hold", action="store_true")
    p.add_argument("--hole-penalty", type=float, default=defaults.hole_penalty)
    p.add_argument("--closed-hole-penalty", type=float, default=defaults.closed_hole_penalty)
    p.add_argument("--height-difference-penalty", type=float, default=defaults.height_difference_penalty)
    p.add_argument("--height-penalty", type=float, default=defaults.height_penalty)
    p.add_argument("--height-threshold", type=float, default=defaults.height_threshold)
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    penalties = PenaltyWeights(
        hole_penalty=args.hole_penalty,
        closed_hole_penalty=args.closed_hole_penalty,
        height_difference_penalty=args.height_difference_penalty,
        height_penalty=args.height_penalty,
        height_threshold=args.height_threshold,
    )
    stats = evaluate(penalties, games=args.games, seed=args.seed, max_pieces=args.max_pieces,
                     consider_hold=args.hold)
    for key, value in stats.items():
        print(f"{key:12s}: {value:10.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
