"""Tests for tetris_ga.ai.agent (move search and self-play)."""

from __future__ import annotations

import random
from typing import Optional, Sequence

import numpy as np

from tetris_ga.ai import DecisionEngine, LinearPenaltyEvaluator, Move, apply_move, play_game
from tetris_ga.game import GameConfig, GameState, TetrisEngine, Tetromino, TetrominoType

T = TetrominoType


def build_state(engine: TetrisEngine, kind: TetrominoType, board: Optional[np.ndarray] = None,
                queue: Sequence[TetrominoType] = (T.T,) * 5) -> GameState:
    if board is None:
        board = np.zeros((20, 10), dtype=np.int8)
    board = np.array(board, dtype=np.int8)
    board.setflags(write=False)
    piece = Tetromino.of(kind)
    return GameState(
        board=board,
        current=piece,
        position=engine.spawn_position(piece),
        queue=tuple(Tetromino.of(k) for k in queue),
    )


def gap_board() -> np.ndarray:
    board = np.zeros((20, 10), dtype=np.int8)
    board[19, :6] = int(T.T)
    return board


class TestCandidates:
    def test_o_piece_placements(self) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        decision = DecisionEngine(LinearPenaltyEvaluator())
        moves = [move for move, _ in decision.candidates(build_state(engine, T.O))]
        assert len(moves) == 36
        assert {m.x for m in moves} == set(range(9))
        assert not any(m.hold for m in moves)

    def test_candidates_are_locked_states(self) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        decision = DecisionEngine(LinearPenaltyEvaluator())
        for _, landed in decision.candidates(build_state(engine, T.S)):
            assert landed.pieces_placed == 1
            assert int((landed.board != 0).sum()) == 4


class TestBestMove:
    def test_prefers_line_clear_and_keeps_first_tie(self) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        decision = DecisionEngine(LinearPenaltyEvaluator())
        state = build_state(engine, T.I, board=gap_board())
        move = decision.best_move(state)
        assert move == Move(rotation=0, x=6, hold=False)
        result = apply_move(engine, state, move)
        assert result.score == 40
        assert result.board.sum() == 0

    def test_search_does_not_touch_live_engine(self) -> None:
        engine = TetrisEngine(rng=random.Random(3))
        state = engine.initialize()
        rng_state = engine.rng.getstate()
        board = state.board.copy()
        DecisionEngine(LinearPenaltyEvaluator(), consider_hold=True).best_move(state)
        assert engine.rng.getstate() == rng_state
        assert np.array_equal(state.board, board)
        assert state.held is None

    def test_hold_used_when_it_wins(self) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        decision = DecisionEngine(LinearPenaltyEvaluator(), consider_hold=True)
        state = build_state(engine, T.S, board=gap_board(), queue=(T.I, T.O, T.O, T.O, T.O))
        move = decision.best_move(state)
        assert move == Move(rotation=0, x=6, hold=True)
        result = apply_move(engine, state, move)
        assert result.score == 40
        assert result.held.kind == T.S

    def test_no_surviving_placement(self) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        board = np.full((20, 10), int(T.Z), dtype=np.int8)
        board[0, :] = 0
        board[:, 0] = 0
        state = build_state(engine, T.I, board=board, queue=(T.O,) * 5)
        assert DecisionEngine(LinearPenaltyEvaluator()).best_move(state) is None
        assert DecisionEngine(LinearPenaltyEvaluator(), consider_hold=True).best_move(state) is None

    def test_play_game_soft_drops_without_a_move(self) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        board = np.full((20, 10), int(T.Z), dtype=np.int8)
        board[0, :] = 0
        board[:, 0] = 0
        state = build_state(engine, T.I, board=board, queue=(T.O,) * 5)
        final = play_game(engine, DecisionEngine(LinearPenaltyEvaluator()), state=state)
        assert final.is_game_over
        assert final.pieces_placed == 1


class TestPlayGame:
    def test_piece_cap(self) -> None:
        engine = TetrisEngine(rng=random.Random(1))
        final = play_game(engine, DecisionEngine(LinearPenaltyEvaluator()), max_pieces=10)
        assert final.pieces_placed == 10
        assert not final.is_game_over

    def test_same_seed_same_game(self) -> None:
        def play(seed: int) -> GameState:
            engine = TetrisEngine(rng=random.Random(seed))
            return play_game(engine, DecisionEngine(LinearPenaltyEvaluator()), max_pieces=25)

        a, b = play(8), play(8)
        assert a.score == b.score
        assert np.array_equal(a.board, b.board)

    def test_small_board(self) -> None:
        config = GameConfig(width=6, height=12)
        engine = TetrisEngine(config, rng=random.Random(2))
        final = play_game(engine, DecisionEngine(LinearPenaltyEvaluator(), config), max_pieces=15)
        assert final.board.shape == (12, 6)
        assert final.pieces_placed <= 15
