from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np


ACTIVATIONS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "relu": lambda x: np.maximum(0.0, x),
    "linear": lambda x: x,
    "tanh": np.tanh,
    "sigmoid": lambda x: 1.0 / (1.0 + np.exp(-x)),
}


class ShapeMismatch(ValueError):
    """Raised when two networks with different topologies are combined."""


class NeuralNetwork:
    """Small fully-connected network used to score board features.

    Layers: input -> `hidden_layers` x `hidden_nodes` -> output. Weights are stored
    as (out, in) matrices, biases as (out,) vectors, both drawn uniformly from
    [-1, 1]. The default activation is ReLU on every layer, output included, so
    predictions are never negative; pass `activations` to change it per layer.
    """

    def __init__(self, input_nodes: int, hidden_nodes: int, output_nodes: int = 1, hidden_layers: int = 1,
                 activations: Optional[Sequence[str]] = None,
                 rng: Optional[np.random.Generator] = None) -> None:
        if min(input_nodes, hidden_nodes, output_nodes, hidden_layers) < 1:
            raise ValueError("network dimensions must all be >= 1")
        self.input_nodes = int(input_nodes)
        self.hidden_nodes = int(hidden_nodes)
        self.output_nodes = int(output_nodes)
        self.hidden_layers = int(hidden_layers)

        n_layers = self.hidden_layers + 1
        if activations is None:
            activations = ("relu",) * n_layers
        activations = tuple(activations)
        if len(activations) != n_layers:
            raise ValueError(f"expected {n_layers} activations, got {len(activations)}")
        unknown = [a for a in activations if a not in ACTIVATIONS]
        if unknown:
            raise ValueError(f"unknown activation(s): {unknown}")
        self.activations: Tuple[str, ...] = activations

        rng = rng if rng is not None else np.random.default_rng()
        sizes = [self.input_nodes] + [self.hidden_nodes] * self.hidden_layers + [self.output_nodes]
        self.weights: List[np.ndarray] = [
            rng.uniform(-1.0, 1.0, size=(n_out, n_in)) for n_in, n_out in zip(sizes[:-1], sizes[1:])
        ]
        self.biases: List[np.ndarray] = [rng.uniform(-1.0, 1.0, size=(n_out,)) for n_out in sizes[1:]]

    @property
    def topology(self) -> Tuple[int, int, int, int]:
        return (self.input_nodes, self.hidden_nodes, self.output_nodes, self.hidden_layers)

    def forward(self, inputs: Sequence[float]) -> np.ndarray:
        output = np.asarray(inputs, dtype=np.float64)
        if output.shape != (self.input_nodes,):
            raise ValueError(f"expected {self.input_nodes} inputs, got shape {output.shape}")
        for w, b, name in zip(self.weights, self.biases, self.activations):
            output = ACTIVATIONS[name](w @ output + b)
        return output

    def predict(self, inputs: Sequence[float]) -> float:
        return float(self.forward(inputs)[0])

    def mutate(self, rate: float, rng: np.random.Generator) -> None:
        """Perturb each entry with probability `rate` by 0.5 * N(0, 1). In place."""
        for params in (self.weights, self.biases):
            for i, p in enumerate(params):
                mask = rng.random(p.shape) < rate
                params[i] = p + mask * rng.standard_normal(p.shape) * 0.5

    def crossover(self, partner: "NeuralNetwork", rng: np.random.Generator) -> "NeuralNetwork":
        """Child taking every weight and bias from either parent with equal probability."""
        if partner.topology != self.topology or partner.activations != self.activations:
            raise ShapeMismatch(
                f"cannot cross {self.topology}/{self.activations} with {partner.topology}/{partner.activations}"
            )
        child = self.copy()
        child.weights = [np.where(rng.random(a.shape) < 0.5, a, b) for a, b in zip(self.weights, partner.weights)]
        child.biases = [np.where(rng.random(a.shape) < 0.5, a, b) for a, b in zip(self.biases, partner.biases)]
        return child

    def copy(self) -> "NeuralNetwork":
        clone = NeuralNetwork.__new__(NeuralNetwork)
        clone.input_nodes = self.input_nodes
        clone.hidden_nodes = self.hidden_nodes
        clone.output_nodes = self.output_nodes
        clone.hidden_layers = self.hidden_layers
        clone.activations = self.activations
        clone.weights = [w.copy() for w in self.weights]
        clone.biases = [b.copy() for b in self.biases]
        return clone
