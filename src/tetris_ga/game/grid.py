from __future__ import annotations

from dataclasses import dataclass

import numpy as np


EMPTY = 0


@dataclass(frozen=True)
class ClearResult:
    board: np.ndarray
    lines_cleared: int


def empty_board(width: int, height: int) -> np.ndarray:
    board = np.zeros((height, width), dtype=np.int8)
    board.setflags(write=False)
    return board


def collides(board: np.ndarray, shape: np.ndarray, x: int, y: int) -> bool:
    """True if `shape` placed with its origin at (x, y) overlaps walls, floor or blocks.

    Cells above the top row never collide so pieces can spawn partly hidden.
    """
    height, width = board.shape
    ys, xs = np.nonzero(shape)
    cols = xs + x
    rows = ys + y
    if np.any(cols < 0) or np.any(cols >= width) or np.any(rows >= height):
        return True
    visible = rows >= 0
    return bool(np.any(board[rows[visible], cols[visible]] != EMPTY))


def drop_y(board: np.ndarray, shape: np.ndarray, x: int, y: int) -> int:
    """Lowest y reachable by moving straight down from (x, y) without colliding."""
    height = board.shape[0]
    while y < height and not collides(board, shape, x, y + 1):
        y += 1
    return y


def stamp(board: np.ndarray, shape: np.ndarray, x: int, y: int, value: int) -> np.ndarray:
    """Copy of `board` with the occupied cells of `shape` set to `value`.

    Cells that fall outside the board are dropped.
    """
    height, width = board.shape
    new_board = board.copy()
    ys, xs = np.nonzero(shape)
    rows = ys + y
    cols = xs + x
    inside = (rows >= 0) & (rows < height) & (cols >= 0) & (cols < width)
    new_board[rows[inside], cols[inside]] = value
    new_board.setflags(write=False)
    return new_board


def full_rows(board: np.ndarray) -> np.ndarray:
    return np.where(np.all(board != EMPTY, axis=1))[0]


def clear_full_rows(board: np.ndarray) -> ClearResult:
    rows = full_rows(board)
    if rows.size == 0:
        return ClearResult(board=board, lines_cleared=0)
    num = int(rows.size)
    # Remove full rows and add empty rows at the top
    remaining = np.delete(board, rows, axis=0)
    new_rows = np.zeros((num, board.shape[1]), dtype=board.dtype)
    cleared = np.vstack((new_rows, remaining))
    cleared.setflags(write=False)
    return ClearResult(board=cleared, lines_cleared=num)
