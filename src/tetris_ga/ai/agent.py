from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from tetris_ga.game import GameConfig, GameState, TetrisEngine

from .evaluators import Evaluator
from .features import extract_features


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    rotation: int
    x: int
    hold: bool = False


class DecisionEngine:
    """Greedy one-piece search over rotations x columns (optionally after a hold).

    Candidates are simulated on a private scratch engine, so the live engine's
    piece stream is never consumed by the search. Ties keep the first candidate in
    enumeration order: hold=False before hold=True, then rotation, then column.
    """

    def __init__(self, evaluator: Evaluator, config: Optional[GameConfig] = None,
                 consider_hold: bool = False) -> None:
        self.evaluator = evaluator
        self.consider_hold = consider_hold
        self._scratch = TetrisEngine(config, rng=random.Random(0))

    @property
    def width(self) -> int:
        return self._scratch.config.width

    def candidates(self, state: GameState) -> Iterator[Tuple[Move, GameState]]:
        """Yield (move, locked state) for every placement that keeps the game alive."""
        sim = self._scratch
        bases = [(False, state)]
        if self.consider_hold and state.can_hold:
            held = sim.hold(state)
            if held is not state and not held.is_game_over:
                bases.append((True, held))

        for hold, base in bases:
            rotated = base
            for rotation in range(4):
                if rotation:
                    nxt = sim.rotate(rotated)
                    if nxt is rotated:
                        break
                    rotated = nxt
                for x in range(self.width):
                    dx = x - rotated.position.x
                    moved = sim.move_by(rotated, dx, 0) if dx else rotated
                    if dx and moved is rotated:
                        continue
                    landed = sim.hard_drop(moved)
                    if landed.is_game_over:
                        continue
                    yield Move(rotation, x, hold), landed

    def best_move(self, state: GameState) -> Optional[Move]:
        best_score = -math.inf
        best: Optional[Move] = None
        for move, landed in self.candidates(state):
            score = self.evaluator.score(extract_features(landed))
            if score > best_score:
                best_score = score
                best = move
        if best is None:
            logger.debug("no surviving placement for %s", state.current.kind.name)
        return best


def apply_move(engine: TetrisEngine, state: GameState, move: Move) -> GameState:
    if move.hold:
        state = engine.hold(state)
    for _ in range(move.rotation):
        state = engine.rotate(state)
    state = engine.move_by(state, move.x - state.position.x, 0)
    return engine.hard_drop(state)


def play_game(engine: TetrisEngine, decision: DecisionEngine, max_pieces: Optional[int] = None,
              state: Optional[GameState] = None) -> GameState:
    """Let the decision engine play until game over or `max_pieces` locks."""
    state = state if state is not None else engine.initialize()
    while not state.is_game_over:
        if max_pieces is not None and state.pieces_placed >= max_pieces:
            break
        move = decision.best_move(state)
        if move is None:
            state = engine.move_by(state, 0, 1)
        else:
            state = apply_move(engine, state, move)
    return state
