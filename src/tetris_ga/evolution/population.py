from __future__ import annotations

import logging
import random
import statistics
import threading
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from tetris_ga.ai import play_game
from tetris_ga.game import GameConfig, TetrisEngine

from .genome import AgentGenome


logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    population_size: int = 100
    generations: int = 1000
    games_per_agent: int = 5
    mutation_rate: float = 0.1
    elite_fraction: float = 0.1
    hidden_nodes: int = 4
    hidden_layers: int = 1
    max_pieces: Optional[int] = None  # per-game cap; None plays to game over
    consider_hold: bool = False
    workers: int = 1
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.population_size < 2:
            raise ValueError("population_size must be >= 2")
        if self.generations < 1:
            raise ValueError("generations must be >= 1")
        if self.games_per_agent < 1:
            raise ValueError("games_per_agent must be >= 1")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError("mutation_rate must be in [0, 1]")
        if not 0.0 <= self.elite_fraction <= 1.0:
            raise ValueError("elite_fraction must be in [0, 1]")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")

    @property
    def elite_count(self) -> int:
        return int(self.elite_fraction * self.population_size)


@dataclass(frozen=True)
class TrainingProgress:
    generation: int
    best_fitness: float
    average_fitness: float
    generation_best: float


def evaluate_genome(genome: AgentGenome, game_config: GameConfig, seeds: Sequence[int],
                    max_pieces: Optional[int] = None, consider_hold: bool = False) -> Tuple[float, float]:
    """Play one game per seed; return (mean score, mean lines cleared).

    Module level so it can run in a worker process on a pickled copy of the genome.
    """
    decision = genome.decision_engine(game_config, consider_hold=consider_hold)
    scores: List[int] = []
    lines: List[int] = []
    for seed in seeds:
        engine = TetrisEngine(game_config, rng=random.Random(int(seed)))
        final = play_game(engine, decision, max_pieces=max_pieces)
        scores.append(final.score)
        lines.append(final.lines_cleared)
    return statistics.mean(scores), statistics.mean(lines)


def _evaluate_worker(args) -> Tuple[float, float]:
    return evaluate_genome(*args)


class Population:
    """Generational genetic loop over network-driven agents.

    Each generation every genome plays `games_per_agent` games; fitness is the
    mean score plus 100 per mean cleared line. The top `elite_count` genomes are
    carried over unchanged and the rest are children of two roulette-selected
    parents (crossover, then mutation). Stop requests and time budgets are only
    honored between generations.
    """

    def __init__(self, config: Optional[EvolutionConfig] = None, game_config: Optional[GameConfig] = None,
                 rng: Optional[np.random.Generator] = None) -> None:
        self.config = config or EvolutionConfig()
        self.game_config = game_config or GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.genomes: List[AgentGenome] = []
        self.generation = 0
        self.best_fitness = 0.0
        self.best_genome: Optional[AgentGenome] = None
        self.history: List[TrainingProgress] = []
        self.finished = False
        self._stop = threading.Event()

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def initialize(self) -> None:
        self.genomes = [
            AgentGenome.random(self.config.hidden_nodes, self.config.hidden_layers, self.rng)
            for _ in range(self.config.population_size)
        ]
        self.generation = 0
        self.best_fitness = 0.0
        self.best_genome = None
        self.history = []
        self.finished = False
        logger.info("initialized population of %d genomes", len(self.genomes))

    def stop(self) -> None:
        """Request a stop at the next generation boundary."""
        self._stop.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    @property
    def progress(self) -> TrainingProgress:
        if self.history:
            return self.history[-1]
        return TrainingProgress(self.generation, self.best_fitness, 0.0, 0.0)

    # ----------------------------
    # Generation steps
    # ----------------------------
    def evaluate(self) -> None:
        cfg = self.config
        jobs = [
            (genome.copy(), self.game_config, self.rng.integers(0, 2**32, size=cfg.games_per_agent).tolist(),
             cfg.max_pieces, cfg.consider_hold)
            for genome in self.genomes
        ]
        if cfg.workers > 1:
            with ProcessPoolExecutor(max_workers=cfg.workers) as executor:
                results = list(executor.map(_evaluate_worker, jobs))
        else:
            results = [_evaluate_worker(job) for job in jobs]
        for genome, (score, lines) in zip(self.genomes, results):
            genome.update_fitness(score, lines)

    def rank(self) -> None:
        self.genomes.sort(key=lambda g: g.fitness, reverse=True)

    def select_parent(self) -> AgentGenome:
        """Fitness-proportionate pick over the whole population; uniform when all fitness is zero."""
        fitness = np.array([g.fitness for g in self.genomes], dtype=np.float64)
        total = float(fitness.sum())
        if total <= 0.0:
            return self.genomes[int(self.rng.integers(len(self.genomes)))]
        threshold = self.rng.random() * total
        idx = int(np.searchsorted(np.cumsum(fitness), threshold, side="right"))
        return self.genomes[min(idx, len(self.genomes) - 1)]

    def reproduce(self) -> None:
        cfg = self.config
        next_gen = [g.copy() for g in self.genomes[: cfg.elite_count]]
        while len(next_gen) < cfg.population_size:
            mother = self.select_parent()
            father = self.select_parent()
            child = mother.crossover(father, self.rng)
            child.mutate(cfg.mutation_rate, self.rng)
            next_gen.append(child)
        self.genomes = next_gen

    def _record(self) -> TrainingProgress:
        leader = self.genomes[0]
        if self.best_genome is None or leader.fitness > self.best_fitness:
            self.best_fitness = leader.fitness
            self.best_genome = leader.copy()
        progress = TrainingProgress(
            generation=self.generation,
            best_fitness=self.best_fitness,
            average_fitness=statistics.mean(g.fitness for g in self.genomes),
            generation_best=leader.fitness,
        )
        self.history.append(progress)
        logger.info(
            "generation %d: best %.1f, average %.1f, best ever %.1f",
            progress.generation, progress.generation_best, progress.average_fitness, progress.best_fitness,
        )
        return progress

    def step(self) -> TrainingProgress:
        """Evaluate, rank and record the current generation, then breed the next one."""
        if not self.genomes:
            self.initialize()
        self.evaluate()
        self.rank()
        progress = self._record()
        if self.generation + 1 < self.config.generations:
            self.reproduce()
            self.generation += 1
        else:
            self.finished = True
        return progress

    def run(self, on_generation: Optional[Callable[[TrainingProgress], None]] = None,
            time_budget: Optional[float] = None) -> TrainingProgress:
        """Train until the generation limit, a stop request or `time_budget` seconds elapse."""
        if not self.genomes:
            self.initialize()
        self._stop.clear()
        started = time.monotonic()
        while not self.finished:
            progress = self.step()
            if on_generation is not None:
                on_generation(progress)
            if self._stop.is_set():
                logger.info("stop requested after generation %d", progress.generation)
                break
            if time_budget is not None and time.monotonic() - started >= time_budget:
                logger.info("time budget of %.1fs exhausted after generation %d", time_budget, progress.generation)
                break
        return self.progress
