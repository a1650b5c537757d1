from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .grid import clear_full_rows, collides, drop_y, empty_board, stamp
from .pieces import Tetromino, random_tetromino
from .rules import ScoringRules


logger = logging.getLogger(__name__)

# Overlay value for ghost (shadow) cells; falling piece cells are the negated type tag
GHOST = 8


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4
    HOLD = 5
    NONE = 6


class Position(NamedTuple):
    x: int
    y: int


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    queue_length: int = 5
    random_seed: Optional[int] = None
    spawn_y: int = 0

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        if self.queue_length < 1:
            raise ValueError(f"queue_length must be >= 1, got {self.queue_length}")


@dataclass(frozen=True, eq=False)
class GameState:
    """Immutable snapshot of a game. Engine operations return new snapshots."""

    board: np.ndarray
    current: Tetromino
    position: Position
    queue: Tuple[Tetromino, ...]
    held: Optional[Tetromino] = None
    can_hold: bool = True
    score: int = 0
    lines_cleared: int = 0
    is_game_over: bool = False
    last_clear: int = 0
    pieces_placed: int = 0

    def next_pieces(self, count: int = 1) -> Tuple[Tetromino, ...]:
        return self.queue[:count]


class TetrisEngine:
    """Pure state transitions for a falling-block game.

    The engine owns the configuration, scoring table and the random source used to
    draw new pieces. Every operation takes a `GameState` and returns a new one.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)

    # ----------------------------
    # Construction
    # ----------------------------
    def _draw(self) -> Tetromino:
        return random_tetromino(self.rng)

    def spawn_position(self, piece: Tetromino) -> Position:
        return Position(self.config.width // 2 - piece.width // 2, self.config.spawn_y)

    def initialize(self) -> GameState:
        current = self._draw()
        queue = tuple(self._draw() for _ in range(self.config.queue_length))
        return GameState(
            board=empty_board(self.config.width, self.config.height),
            current=current,
            position=self.spawn_position(current),
            queue=queue,
        )

    def is_valid(self, board: np.ndarray, piece: Tetromino, position: Position) -> bool:
        return not collides(board, piece.shape, position.x, position.y)

    def _with_spawned(self, state: GameState, **changes) -> GameState:
        """Apply `changes`, placing the new current piece at spawn. Tops out if it does not fit."""
        new_state = replace(state, **changes)
        if not self.is_valid(new_state.board, new_state.current, new_state.position):
            logger.debug("spawn blocked for %s at %s", new_state.current.kind.name, new_state.position)
            return replace(new_state, is_game_over=True)
        return new_state

    # ----------------------------
    # Operations
    # ----------------------------
    def move_by(self, state: GameState, dx: int, dy: int) -> GameState:
        if state.is_game_over:
            logger.debug("ignoring move on finished game")
            return state
        candidate = Position(state.position.x + dx, state.position.y + dy)
        if self.is_valid(state.board, state.current, candidate):
            return replace(state, position=candidate)
        if dy > 0:
            return self._lock(state)
        return state

    def rotate(self, state: GameState) -> GameState:
        if state.is_game_over:
            logger.debug("ignoring rotate on finished game")
            return state
        rotated = state.current.rotated()
        if self.is_valid(state.board, rotated, state.position):
            return replace(state, current=rotated)
        return state

    def shadow_position(self, state: GameState) -> int:
        return drop_y(state.board, state.current.shape, state.position.x, state.position.y)

    def hard_drop(self, state: GameState) -> GameState:
        if state.is_game_over:
            logger.debug("ignoring hard drop on finished game")
            return state
        landing = Position(state.position.x, self.shadow_position(state))
        return self._lock(replace(state, position=landing))

    def hold(self, state: GameState) -> GameState:
        if state.is_game_over or not state.can_hold:
            return state
        if state.held is not None:
            current, queue = state.held, state.queue
        else:
            current, queue = state.queue[0], state.queue[1:] + (self._draw(),)
        # Held pieces go back to their canonical orientation
        held = Tetromino.of(state.current.kind)
        return self._with_spawned(
            state,
            current=current,
            held=held,
            queue=queue,
            can_hold=False,
            position=self.spawn_position(current),
        )

    def _lock(self, state: GameState) -> GameState:
        piece, pos = state.current, state.position
        board = stamp(state.board, piece.shape, pos.x, pos.y, int(piece.kind))
        if not self.is_valid(state.board, piece, pos) and pos.y <= 0:
            logger.debug("lock at invalid spawn position %s, game over", pos)
            return replace(state, board=board, is_game_over=True, last_clear=0)

        result = clear_full_rows(board)
        current = state.queue[0]
        return self._with_spawned(
            state,
            board=result.board,
            current=current,
            queue=state.queue[1:] + (self._draw(),),
            position=self.spawn_position(current),
            score=state.score + self.rules.score_for_lines(result.lines_cleared),
            lines_cleared=state.lines_cleared + result.lines_cleared,
            last_clear=result.lines_cleared,
            pieces_placed=state.pieces_placed + 1,
            can_hold=True,
        )

    def step(self, state: GameState, action: Action) -> GameState:
        """Apply one discrete command."""
        if action == Action.LEFT:
            return self.move_by(state, -1, 0)
        if action == Action.RIGHT:
            return self.move_by(state, 1, 0)
        if action == Action.SOFT_DROP:
            return self.move_by(state, 0, 1)
        if action == Action.ROTATE:
            return self.rotate(state)
        if action == Action.HARD_DROP:
            return self.hard_drop(state)
        if action == Action.HOLD:
            return self.hold(state)
        return state

    def overlay(self, state: GameState, ghost: bool = True) -> np.ndarray:
        """Board copy with the ghost piece (GHOST) and the falling piece (negative tag) drawn in."""
        grid = np.array(state.board, copy=True)
        if state.is_game_over:
            return grid
        height, width = grid.shape
        cells = state.current.cells()
        if ghost:
            ghost_y = self.shadow_position(state)
            for dx, dy in cells:
                x, y = state.position.x + dx, ghost_y + dy
                if 0 <= y < height and 0 <= x < width and grid[y, x] == 0:
                    grid[y, x] = GHOST
        for dx, dy in cells:
            x, y = state.position.x + dx, state.position.y + dy
            if 0 <= y < height and 0 <= x < width:
                grid[y, x] = -int(state.current.kind)
        return grid
