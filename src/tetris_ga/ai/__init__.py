"""Move search, board features, evaluators and the evolvable network."""

from .features import FEATURE_COUNT, FEATURE_NAMES, column_heights, extract_features
from .network import NeuralNetwork, ShapeMismatch
from .evaluators import (
    Evaluator,
    LinearPenaltyEvaluator,
    LinearValueEvaluator,
    NetworkEvaluator,
    PenaltyWeights,
)
from .agent import DecisionEngine, Move, apply_move, play_game

__all__ = [
    "FEATURE_COUNT",
    "FEATURE_NAMES",
    "column_heights",
    "extract_features",
    "NeuralNetwork",
    "ShapeMismatch",
    "Evaluator",
    "LinearPenaltyEvaluator",
    "LinearValueEvaluator",
    "NetworkEvaluator",
    "PenaltyWeights",
    "DecisionEngine",
    "Move",
    "apply_move",
    "play_game",
]
