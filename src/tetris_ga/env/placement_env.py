from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_ga.ai import DecisionEngine, LinearPenaltyEvaluator, Move, apply_move
from tetris_ga.game import GameConfig, GameState, TetrisEngine

from .command_env import encode_state, observation_space


def compute_action_mask(decision: DecisionEngine, state: GameState) -> np.ndarray:
    """Boolean (hold, rotation, x) mask of placements that keep the game alive."""
    mask = np.zeros((2, 4, decision.width), dtype=np.bool_)
    for move, _ in decision.candidates(state):
        mask[int(move.hold), move.rotation, move.x] = True
    return mask


class TetrisPlacementEnv(gym.Env):
    """One step = one full placement (hold?, rotation, column), hard-dropped.

    Invalid placements are penalized and leave the state unchanged; the valid ones
    are exposed as `info["action_mask"]`.
    """

    metadata = {"render_modes": [], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, invalid_action_penalty: float = -1.0,
                 max_episode_steps: int = 5_000) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.engine = TetrisEngine(self.config)
        # Evaluator unused here; the decision engine only enumerates candidates
        self._search = DecisionEngine(LinearPenaltyEvaluator(), self.config, consider_hold=True)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.max_episode_steps = int(max_episode_steps)

        self.observation_space = observation_space(self.config)
        self.action_space = spaces.MultiDiscrete((2, 4, self.config.width))

        self.state: Optional[GameState] = None
        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        assert self.state is not None
        return {
            "action_mask": compute_action_mask(self._search, self.state),
            "score": self.state.score,
            "lines_cleared": self.state.lines_cleared,
        }

    def reset(self, *, seed: Optional[int] = None,
              options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng = random.Random(seed)
        self.state = self.engine.initialize()
        self._steps = 0
        return encode_state(self.state), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        assert self.state is not None, "call reset() first"
        hold, rotation, x = map(int, action)
        self._steps += 1
        mask = compute_action_mask(self._search, self.state)
        if mask[hold, rotation, x]:
            before = self.state.score
            self.state = apply_move(self.engine, self.state, Move(rotation, x, bool(hold)))
            reward = float(self.state.score - before)
        else:
            reward = self.invalid_action_penalty
            # Nothing playable left: let gravity finish the game
            if not mask.any():
                self.state = self.engine.hard_drop(self.state)

        terminated = bool(self.state.is_game_over)
        truncated = self._steps >= self.max_episode_steps
        return encode_state(self.state), reward, terminated, truncated, self._get_info()
