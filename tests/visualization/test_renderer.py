"""Tests for tetris_ga.visualization.renderer (headless)."""

from __future__ import annotations

import os
import random

import pytest

pygame = pytest.importorskip("pygame")

from tetris_ga.game import GHOST, TetrisEngine  # noqa: E402
from tetris_ga.visualization.renderer import Renderer, _color_for_value  # noqa: E402


@pytest.fixture
def screen():
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    pygame.init()
    size = Renderer().window_size(TetrisEngine())
    pygame.display.set_mode(size)
    yield pygame.Surface(size, 0, 32)
    pygame.quit()


class TestPalette:
    def test_falling_piece_shares_board_color(self) -> None:
        assert _color_for_value(-3) == _color_for_value(3)

    def test_ghost_and_empty_differ(self) -> None:
        assert _color_for_value(GHOST) != _color_for_value(0)


class TestRenderer:
    def test_window_size(self) -> None:
        assert Renderer(cell_size=10, margin=5).window_size(TetrisEngine()) == (175, 210)

    def test_draw_paints_falling_piece(self, screen) -> None:
        engine = TetrisEngine(rng=random.Random(0))
        state = engine.hold(engine.initialize())
        renderer = Renderer()
        renderer.draw(screen, engine, state)
        dx, dy = state.current.cells()[0]
        px = renderer.margin + (state.position.x + dx) * renderer.cell_size + 1
        py = renderer.margin + (state.position.y + dy) * renderer.cell_size + 1
        assert tuple(screen.get_at((px, py)))[:3] == _color_for_value(int(state.current.kind))
