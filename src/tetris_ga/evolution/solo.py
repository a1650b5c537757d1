from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from tetris_ga.ai import play_game
from tetris_ga.game import GameState, TetrisEngine

from .genome import AgentGenome


logger = logging.getLogger(__name__)


class SoloTrainer:
    """One agent playing back-to-back games, mutating itself after each one.

    No selection takes place: a mutation is kept whether or not it helped.
    """

    def __init__(self, genome: AgentGenome, engine: TetrisEngine, rng: np.random.Generator,
                 mutation_rate: float = 0.1, max_pieces: Optional[int] = None,
                 consider_hold: bool = False) -> None:
        self.genome = genome
        self.engine = engine
        self.rng = rng
        self.mutation_rate = mutation_rate
        self.max_pieces = max_pieces
        self.consider_hold = consider_hold
        self.generation = 1
        self.best_score = 0

    def play_once(self) -> GameState:
        decision = self.genome.decision_engine(self.engine.config, consider_hold=self.consider_hold)
        final = play_game(self.engine, decision, max_pieces=self.max_pieces)
        self.genome.update_fitness(final.score, final.lines_cleared)
        self.genome.mutate(self.mutation_rate, self.rng)
        if final.score > self.best_score:
            self.best_score = final.score
        logger.info("solo game %d: score %d, lines %d", self.generation, final.score, final.lines_cleared)
        self.generation += 1
        self.genome.reset()
        return final

    def run(self, games: int) -> int:
        for _ in range(games):
            self.play_once()
        return self.best_score
