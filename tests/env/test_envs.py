"""Tests for the gymnasium environments in tetris_ga.env."""

from __future__ import annotations

import gymnasium as gym
import numpy as np
import pytest

from tetris_ga.env import ENV_IDS
from tetris_ga.env.command_env import TetrisCommandEnv, encode_state
from tetris_ga.env.placement_env import TetrisPlacementEnv
from tetris_ga.game import Action


class TestRegistration:
    @pytest.mark.parametrize("env_id", ENV_IDS)
    def test_make_and_reset(self, env_id: str) -> None:
        env = gym.make(env_id)
        obs, info = env.reset(seed=0)
        assert env.observation_space.contains(obs)
        assert info["score"] == 0
        env.close()


class TestCommandEnv:
    def test_reset_is_seeded(self) -> None:
        a, b = TetrisCommandEnv(), TetrisCommandEnv()
        obs_a, _ = a.reset(seed=3)
        obs_b, _ = b.reset(seed=3)
        assert obs_a["current"] == obs_b["current"]
        assert np.array_equal(obs_a["queue"], obs_b["queue"])

    def test_observation_layout(self) -> None:
        env = TetrisCommandEnv()
        obs, info = env.reset(seed=1)
        assert obs["board"].shape == (20, 10)
        assert obs["queue"].shape == (5,)
        assert obs["held"] == 0
        assert obs["can_hold"] == 1
        assert info["shadow_y"] >= info["position"][1]

    def test_hard_drop_places_piece(self) -> None:
        env = TetrisCommandEnv()
        env.reset(seed=1)
        obs, reward, terminated, truncated, info = env.step(int(Action.HARD_DROP))
        assert reward == 0.0
        assert not terminated and not truncated
        assert info["pieces_placed"] == 1
        assert int((obs["board"] != 0).sum()) == 4

    def test_hold_is_observed(self) -> None:
        env = TetrisCommandEnv()
        env.reset(seed=2)
        current = env.state.current.kind
        obs, *_ = env.step(int(Action.HOLD))
        assert obs["held"] == int(current)
        assert obs["can_hold"] == 0

    def test_truncation(self) -> None:
        env = TetrisCommandEnv(max_episode_steps=3)
        env.reset(seed=0)
        flags = [env.step(int(Action.NONE))[3] for _ in range(3)]
        assert flags == [False, False, True]

    def test_rgb_render(self) -> None:
        env = TetrisCommandEnv(render_mode="rgb_array")
        assert env.render() is None
        env.reset(seed=0)
        frame = env.render()
        assert frame.shape == (240, 120, 3)
        assert frame.dtype == np.uint8

    def test_encode_state_copies_board(self) -> None:
        env = TetrisCommandEnv()
        env.reset(seed=0)
        obs = encode_state(env.state)
        obs["board"][0, 0] = 5
        assert env.state.board[0, 0] == 0


class TestPlacementEnv:
    def test_mask_in_info(self) -> None:
        env = TetrisPlacementEnv()
        _, info = env.reset(seed=0)
        mask = info["action_mask"]
        assert mask.shape == (2, 4, 10)
        assert mask[0].any() and mask[1].any()

    def test_invalid_placement_is_penalized(self) -> None:
        env = TetrisPlacementEnv(invalid_action_penalty=-2.5)
        env.reset(seed=0)
        before = env.state
        _, reward, terminated, _, _ = env.step((0, 0, 9))
        assert reward == -2.5
        assert not terminated
        assert env.state is before

    def test_valid_placement_locks_a_piece(self) -> None:
        env = TetrisPlacementEnv()
        _, info = env.reset(seed=0)
        hold, rotation, x = np.argwhere(info["action_mask"])[0]
        _, reward, terminated, _, _ = env.step((hold, rotation, x))
        assert reward >= 0.0
        assert not terminated
        assert env.state.pieces_placed == 1
