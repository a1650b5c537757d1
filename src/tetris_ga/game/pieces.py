from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _frozen(rows) -> Shape:
    shape = np.array(rows, dtype=np.int8)
    shape.setflags(write=False)
    return shape


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _frozen([[1, 1, 1, 1]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.J: _frozen([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.L: _frozen([[0, 0, 1], [1, 1, 1]]),
}

COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "cyan",
    TetrominoType.O: "yellow",
    TetrominoType.T: "purple",
    TetrominoType.S: "green",
    TetrominoType.Z: "red",
    TetrominoType.J: "blue",
    TetrominoType.L: "orange",
}


def rotate_clockwise(shape: Shape) -> Shape:
    """Transpose + row reversal. Always returns a fresh read-only array."""
    rotated = np.ascontiguousarray(shape[::-1].T)
    rotated.setflags(write=False)
    return rotated


@dataclass(frozen=True, eq=False)
class Tetromino:
    kind: TetrominoType
    shape: Shape
    color: str

    @classmethod
    def of(cls, kind: TetrominoType) -> "Tetromino":
        kind = TetrominoType(kind)
        return cls(kind=kind, shape=BASE_SHAPES[kind], color=COLORS[kind])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def rotated(self, times: int = 1) -> "Tetromino":
        shape = self.shape
        for _ in range(times % 4):
            shape = rotate_clockwise(shape)
        return Tetromino(kind=self.kind, shape=shape, color=self.color)

    def cells(self):
        """(dx, dy) offsets of the occupied cells."""
        ys, xs = np.nonzero(self.shape)
        return list(zip(xs.tolist(), ys.tolist()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tetromino):
            return NotImplemented
        return self.kind == other.kind and np.array_equal(self.shape, other.shape)

    def __hash__(self) -> int:
        return hash((int(self.kind), self.shape.tobytes(), self.shape.shape))


def random_tetromino(rng) -> Tetromino:
    return Tetromino.of(rng.choice(list(TetrominoType)))
