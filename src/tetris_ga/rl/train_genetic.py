from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import List, Optional

from tetris_ga.evolution import EvolutionConfig, Population, TrainingProgress
from tetris_ga.game import GameConfig


def _print_progress(progress: TrainingProgress, total: int) -> None:
    width = 30
    filled = int(width * (progress.generation + 1) / max(1, total))
    bar = "=" * filled + "." * (width - filled)
    msg = (f"\r[{bar}] gen {progress.generation + 1}/{total}  best={progress.best_fitness:.1f}"
           f"  avg={progress.average_fitness:.1f}")
    print(msg, end="", file=sys.stdout, flush=True)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Evolve network-driven agents with a genetic algorithm.")
    p.add_argument("--population", type=int, default=100)
    p.add_argument("--generations", type=int, default=1000)
    p.add_argument("--games", type=int, default=5, help="games per agent per generation")
    p.add_argument("--mutation-rate", type=float, default=0.1)
    p.add_argument("--elite-fraction", type=float, default=0.1)
    p.add_argument("--hidden-nodes", type=int, default=4)
    p.add_argument("--hidden-layers", type=int, default=1)
    p.add_argument("--max-pieces", type=int, default=None, help="cap on pieces per game")
    p.add_argument("--hold", action="store_true", help="let agents consider holding")
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("--time-budget", type=float, default=None, help="seconds; checked between generations")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="WARNING")
    p.add_argument("--no-progress", action="store_true")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = EvolutionConfig(
        population_size=args.population,
        generations=args.generations,
        games_per_agent=args.games,
        mutation_rate=args.mutation_rate,
        elite_fraction=args.elite_fraction,
        hidden_nodes=args.hidden_nodes,
        hidden_layers=args.hidden_layers,
        max_pieces=args.max_pieces,
        consider_hold=args.hold,
        workers=args.workers,
        seed=args.seed,
    )
    population = Population(config, GameConfig())

    # Ctrl-C finishes the generation in flight, then stops
    previous = signal.signal(signal.SIGINT, lambda *_: population.stop())
    try:
        report = None if args.no_progress else (lambda pr: _print_progress(pr, config.generations))
        progress = population.run(on_generation=report, time_budget=args.time_budget)
    finally:
        signal.signal(signal.SIGINT, previous)

    if not args.no_progress:
        print()
    print(f"Generations run: {progress.generation + 1}")
    print(f"Best fitness: {progress.best_fitness:.1f}")
    print(f"Last average fitness: {progress.average_fitness:.1f}")


if __name__ == "__main__":  # pragma: no cover
    main()
