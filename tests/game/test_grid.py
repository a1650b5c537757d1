"""Tests for tetris_ga.game.grid and scoring rules."""

from __future__ import annotations

import numpy as np
import pytest

from tetris_ga.game import ScoringRules, Tetromino, TetrominoType
from tetris_ga.game.grid import clear_full_rows, collides, drop_y, empty_board, stamp

O_SHAPE = Tetromino.of(TetrominoType.O).shape
I_VERTICAL = Tetromino.of(TetrominoType.I).rotated().shape


class TestCollision:
    def test_cells_above_board_never_collide(self) -> None:
        assert not collides(empty_board(10, 20), I_VERTICAL, 0, -3)

    def test_walls_and_floor(self) -> None:
        board = empty_board(10, 20)
        assert collides(board, O_SHAPE, -1, 5)
        assert collides(board, O_SHAPE, 9, 5)
        assert collides(board, O_SHAPE, 4, 19)
        assert not collides(board, O_SHAPE, 4, 18)

    def test_occupied_cell(self) -> None:
        board = stamp(empty_board(10, 20), O_SHAPE, 4, 18, 2)
        assert collides(board, O_SHAPE, 5, 17)
        assert not collides(board, O_SHAPE, 6, 17)

    def test_drop_y_stops_on_stack(self) -> None:
        board = stamp(empty_board(10, 20), O_SHAPE, 4, 18, 2)
        assert drop_y(board, O_SHAPE, 4, 0) == 16
        assert drop_y(board, O_SHAPE, 0, 0) == 18


class TestStampAndClear:
    def test_stamp_copies(self) -> None:
        board = empty_board(10, 20)
        stamped = stamp(board, O_SHAPE, 0, 0, 2)
        assert board.sum() == 0
        assert stamped[0:2, 0:2].tolist() == [[2, 2], [2, 2]]
        assert not stamped.flags.writeable

    def test_stamp_drops_cells_above_board(self) -> None:
        stamped = stamp(empty_board(10, 20), I_VERTICAL, 3, -2, 1)
        assert int((stamped != 0).sum()) == 2
        assert stamped[0, 3] == 1 and stamped[1, 3] == 1

    def test_clear_removes_full_rows_and_keeps_order(self) -> None:
        board = np.zeros((20, 10), dtype=np.int8)
        board[19, :] = 1
        board[17, :] = 3
        board[18, 2] = 5
        board[16, 7] = 6
        result = clear_full_rows(board)
        assert result.lines_cleared == 2
        assert result.board.shape == (20, 10)
        assert result.board[19, 2] == 5
        assert result.board[18, 7] == 6
        assert result.board[:18].sum() == 0

    def test_clear_without_full_rows_is_identity(self) -> None:
        board = empty_board(10, 20)
        result = clear_full_rows(board)
        assert result.lines_cleared == 0
        assert result.board is board


class TestScoringRules:
    @pytest.mark.parametrize("lines, expected", [(0, 0), (1, 40), (2, 100), (3, 300), (4, 1200)])
    def test_table(self, lines: int, expected: int) -> None:
        assert ScoringRules().score_for_lines(lines) == expected

    def test_more_than_four_clamps(self) -> None:
        assert ScoringRules().score_for_lines(6) == 1200
