"""Game module for tetris_ga.

Exports the falling-block engine and supporting types:
- TetrominoType / Tetromino: piece types, shapes and clockwise rotation
- ScoringRules: line-clear score table
- GameState: immutable game snapshot
- TetrisEngine: pure state transitions (move, rotate, hold, drop, lock)
- Action: discrete commands accepted by TetrisEngine.step
"""

from .pieces import Tetromino, TetrominoType, rotate_clockwise
from .rules import ScoringRules
from .core import GHOST, Action, GameConfig, GameState, Position, TetrisEngine

__all__ = [
    "Tetromino",
    "TetrominoType",
    "rotate_clockwise",
    "ScoringRules",
    "GHOST",
    "Action",
    "GameConfig",
    "GameState",
    "Position",
    "TetrisEngine",
]
