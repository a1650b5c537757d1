from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Sequence

import numpy as np

from .features import FEATURE_COUNT
from .network import NeuralNetwork


@dataclass
class PenaltyWeights:
    """Named penalty coefficients. Penalties are conventionally negative."""

    hole_penalty: float = -10.0
    closed_hole_penalty: float = -20.0
    height_difference_penalty: float = -5.0
    height_penalty: float = -100.0
    height_threshold: float = 15.0
    line_reward: float = 100.0

    def as_dict(self) -> dict:
        return asdict(self)


class Evaluator:
    """Scores a feature vector; higher is better."""

    def score(self, features: np.ndarray) -> float:
        raise NotImplementedError


class LinearPenaltyEvaluator(Evaluator):
    def __init__(self, penalties: PenaltyWeights | None = None) -> None:
        self.penalties = penalties or PenaltyWeights()

    def update_penalties(self, **changes: float) -> None:
        """Adjust coefficients at runtime, e.g. from UI sliders."""
        known = {f.name for f in fields(PenaltyWeights)}
        unknown = set(changes) - known
        if unknown:
            raise KeyError(f"unknown penalty name(s): {sorted(unknown)}")
        for name, value in changes.items():
            setattr(self.penalties, name, float(value))

    def score(self, features: np.ndarray) -> float:
        bumpiness, holes, closed_holes, max_height, _, cleared = features
        p = self.penalties
        total = cleared * p.line_reward
        if max_height > p.height_threshold:
            total += p.height_penalty
        total += holes * p.hole_penalty
        total += closed_holes * p.closed_hole_penalty
        total += bumpiness * p.height_difference_penalty
        return float(total)


class NetworkEvaluator(Evaluator):
    def __init__(self, network: NeuralNetwork) -> None:
        self.network = network

    def score(self, features: np.ndarray) -> float:
        return self.network.predict(features)


class LinearValueEvaluator(Evaluator):
    """State value w · [1, features], learned by temporal-difference updates."""

    def __init__(self, weights: Sequence[float] | None = None) -> None:
        if weights is None:
            weights = np.zeros(FEATURE_COUNT + 1)
        self.weights = np.asarray(weights, dtype=np.float64)
        if self.weights.shape != (FEATURE_COUNT + 1,):
            raise ValueError(f"expected {FEATURE_COUNT + 1} weights, got shape {self.weights.shape}")

    @staticmethod
    def design(features: np.ndarray) -> np.ndarray:
        return np.concatenate(([1.0], features))

    def score(self, features: np.ndarray) -> float:
        return float(np.dot(self.weights, self.design(features)))
