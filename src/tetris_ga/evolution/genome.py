from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from tetris_ga.ai import (
    FEATURE_COUNT,
    DecisionEngine,
    LinearPenaltyEvaluator,
    NetworkEvaluator,
    NeuralNetwork,
    PenaltyWeights,
)
from tetris_ga.game import GameConfig


LINE_FITNESS_BONUS = 100


@dataclass
class AgentGenome:
    """One evolvable agent: its network plus fitness bookkeeping."""

    network: NeuralNetwork
    penalties: PenaltyWeights = field(default_factory=PenaltyWeights)
    fitness: float = 0.0
    score: float = 0.0
    lines_cleared: float = 0.0

    @classmethod
    def random(cls, hidden_nodes: int, hidden_layers: int, rng: np.random.Generator,
               activations: Optional[Sequence[str]] = None) -> "AgentGenome":
        network = NeuralNetwork(FEATURE_COUNT, hidden_nodes, 1, hidden_layers, activations=activations, rng=rng)
        return cls(network=network)

    def decision_engine(self, config: Optional[GameConfig] = None, consider_hold: bool = False,
                        use_penalties: bool = False) -> DecisionEngine:
        """Search driven by the network, or by the linear penalty sum when `use_penalties`."""
        evaluator = LinearPenaltyEvaluator(self.penalties) if use_penalties else NetworkEvaluator(self.network)
        return DecisionEngine(evaluator, config=config, consider_hold=consider_hold)

    def update_fitness(self, score: float, lines_cleared: float) -> None:
        self.score = score
        self.lines_cleared = lines_cleared
        self.fitness = score + lines_cleared * LINE_FITNESS_BONUS

    def reset(self) -> None:
        self.score = 0.0
        self.lines_cleared = 0.0
        self.fitness = 0.0

    def mutate(self, rate: float, rng: np.random.Generator) -> None:
        self.network.mutate(rate, rng)

    def crossover(self, partner: "AgentGenome", rng: np.random.Generator) -> "AgentGenome":
        return AgentGenome(network=self.network.crossover(partner.network, rng),
                           penalties=copy.copy(self.penalties))

    def copy(self) -> "AgentGenome":
        return AgentGenome(
            network=self.network.copy(),
            penalties=copy.copy(self.penalties),
            fitness=self.fitness,
            score=self.score,
            lines_cleared=self.lines_cleared,
        )
