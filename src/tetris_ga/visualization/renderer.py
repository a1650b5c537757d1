from __future__ import annotations

from typing import Tuple

import numpy as np
import pygame

from tetris_ga.game import GHOST, GameState, TetrisEngine, Tetromino


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (0, 240, 240),  # I
        2: (240, 240, 0),  # O
        3: (160, 0, 240),  # T
        4: (0, 240, 0),    # S
        5: (240, 0, 0),    # Z
        6: (0, 0, 240),    # J
        7: (240, 160, 0),  # L
        GHOST: (70, 70, 80),
    }
    return palette.get(abs(v), (200, 200, 200))


class Renderer:
    """Draws engine snapshots: board, ghost, falling piece, hold and next previews."""

    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin

    def window_size(self, engine: TetrisEngine) -> Tuple[int, int]:
        cfg = engine.config
        side = 6 * self.cell_size
        return (cfg.width * self.cell_size + side + self.margin * 3,
                cfg.height * self.cell_size + self.margin * 2)

    def _grid_surface(self, grid: np.ndarray) -> pygame.Surface:
        h, w = grid.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                pygame.draw.rect(surf, _color_for_value(int(grid[y, x])), rect)
        return surf

    def _draw_piece(self, screen: pygame.Surface, piece: Tetromino, x0: int, y0: int) -> None:
        size = self.cell_size // 2
        for dx, dy in piece.cells():
            rect = pygame.Rect(x0 + dx * size, y0 + dy * size, size - 1, size - 1)
            pygame.draw.rect(screen, _color_for_value(int(piece.kind)), rect)

    def draw(self, screen: pygame.Surface, engine: TetrisEngine, state: GameState, font=None) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(engine.overlay(state)), (self.margin, self.margin))

        x0 = self.margin * 2 + engine.config.width * self.cell_size
        y0 = self.margin
        if state.held is not None:
            self._draw_piece(screen, state.held, x0, y0)
        for i, piece in enumerate(state.next_pieces(len(state.queue))):
            self._draw_piece(screen, piece, x0, y0 + (i + 2) * self.cell_size * 2)
        if font is not None:
            text = font.render(f"score {state.score}  lines {state.lines_cleared}", True, (230, 230, 230))
            screen.blit(text, (self.margin, 2))
        pygame.display.flip()
