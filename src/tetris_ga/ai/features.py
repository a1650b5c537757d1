from __future__ import annotations

from typing import Tuple

import numpy as np

from tetris_ga.game import GameState
from tetris_ga.game.grid import full_rows


FEATURE_NAMES: Tuple[str, ...] = (
    "bumpiness",
    "holes",
    "closed_holes",
    "max_height",
    "min_height",
    "completed_lines",
)
FEATURE_COUNT = len(FEATURE_NAMES)


def column_heights(board: np.ndarray) -> np.ndarray:
    rows = board.shape[0]
    occ = board != 0
    first_occ = np.where(occ.any(axis=0), np.argmax(occ, axis=0), rows)  # rows if column empty
    return rows - first_occ


def hole_mask(board: np.ndarray) -> np.ndarray:
    """Empty cells with at least one occupied cell above them in the same column."""
    occ = board != 0
    covered = np.logical_or.accumulate(occ, axis=0)
    return covered & ~occ


def closed_hole_mask(board: np.ndarray) -> np.ndarray:
    """Holes whose left and right neighbours are both occupied or a wall.

    A covered cell that is also walled in sideways cannot be filled by sliding a
    piece under an overhang.
    """
    occ = board != 0
    walled = np.pad(occ, ((0, 0), (1, 1)), constant_values=True)
    return hole_mask(board) & walled[:, :-2] & walled[:, 2:]


def extract_features(state: GameState) -> np.ndarray:
    board = state.board
    heights = column_heights(board)
    completed = int(full_rows(board).size) + state.last_clear
    return np.array(
        [
            np.sum(np.abs(np.diff(heights))),
            np.sum(hole_mask(board)),
            np.sum(closed_hole_mask(board)),
            np.max(heights),
            np.min(heights),
            completed,
        ],
        dtype=np.float64,
    )
