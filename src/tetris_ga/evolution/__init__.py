"""Genetic training of network-driven agents."""

from .genome import LINE_FITNESS_BONUS, AgentGenome
from .population import EvolutionConfig, Population, TrainingProgress, evaluate_genome
from .solo import SoloTrainer

__all__ = [
    "LINE_FITNESS_BONUS",
    "AgentGenome",
    "EvolutionConfig",
    "Population",
    "TrainingProgress",
    "evaluate_genome",
    "SoloTrainer",
]
