from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_ga.game import Action, GameConfig, GameState, TetrisEngine


def encode_state(state: GameState) -> Dict[str, Any]:
    """Observation shared by both environments."""
    return {
        "board": np.array(state.board, dtype=np.int8),
        "current": int(state.current.kind),
        "queue": np.array([int(p.kind) for p in state.queue], dtype=np.int8),
        "held": int(state.held.kind) if state.held is not None else 0,
        "can_hold": int(state.can_hold),
    }


def observation_space(config: GameConfig) -> spaces.Dict:
    return spaces.Dict(
        {
            "board": spaces.Box(low=0, high=7, shape=(config.height, config.width), dtype=np.int8),
            "current": spaces.Discrete(8),
            "queue": spaces.Box(low=1, high=7, shape=(config.queue_length,), dtype=np.int8),
            # 0 means nothing held
            "held": spaces.Discrete(8),
            "can_hold": spaces.Discrete(2),
        }
    )


class TetrisCommandEnv(gym.Env):
    """
    Keyboard-level environment: one engine command per step.

    Actions (7 total), see `tetris_ga.game.Action`:
      0: Move Left
      1: Move Right
      2: Soft Drop (locks when blocked)
      3: Rotate clockwise
      4: Hard Drop
      5: Hold
      6: No-op

    Reward is the engine score gained by the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10_000) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.engine = TetrisEngine(self.config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)

        self.observation_space = observation_space(self.config)
        self.action_space = spaces.Discrete(len(Action))

        self.state: Optional[GameState] = None
        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        assert self.state is not None
        return {
            "score": self.state.score,
            "lines_cleared": self.state.lines_cleared,
            "pieces_placed": self.state.pieces_placed,
            "shadow_y": self.engine.shadow_position(self.state),
            "position": tuple(self.state.position),
        }

    def reset(self, *, seed: Optional[int] = None,
              options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng = random.Random(seed)
        self.state = self.engine.initialize()
        self._steps = 0
        return encode_state(self.state), self._get_info()

    def step(self, action):
        assert self.state is not None, "call reset() first"
        before = self.state.score
        self.state = self.engine.step(self.state, Action(int(action)))
        self._steps += 1
        reward = float(self.state.score - before)
        terminated = bool(self.state.is_game_over)
        truncated = self._steps >= self.max_episode_steps
        return encode_state(self.state), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array" or self.state is None:
            return None
        grid = self.engine.overlay(self.state)
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(grid[y, x])
                if v == 0:
                    color = (30, 30, 36)
                elif v < 0:
                    color = (240, 240, 240)
                else:
                    color = (70, 200, 120)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img
