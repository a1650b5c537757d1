"""Gymnasium environments for tetris_ga."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Keyboard-level commands (7 discrete actions)
register(
    id="TetrisCommand-v0",
    entry_point="tetris_ga.env.command_env:TetrisCommandEnv",
)

# Whole placements (hold, rotation, column)
register(
    id="TetrisPlacement-v0",
    entry_point="tetris_ga.env.placement_env:TetrisPlacementEnv",
)

ENV_IDS = ("TetrisCommand-v0", "TetrisPlacement-v0")

__all__ = ["ENV_IDS"]
