from __future__ import annotations

import argparse
from typing import Dict, List, Optional

import pygame

from tetris_ga.ai import DecisionEngine, LinearPenaltyEvaluator, apply_move
from tetris_ga.game import Action, TetrisEngine
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_a: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_d: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_w: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_s: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play, or watch the penalty agent play (toggle with P).")
    p.add_argument("--gravity-ms", type=int, default=1000)
    p.add_argument("--ai-ms", type=int, default=100)
    p.add_argument("--ai", action="store_true", help="start with the agent playing")
    return p


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    pygame.init()
    try:
        clock = pygame.time.Clock()
        engine = TetrisEngine()
        agent = DecisionEngine(LinearPenaltyEvaluator(), engine.config, consider_hold=True)
        renderer = Renderer(cell_size=28)
        screen = pygame.display.set_mode(renderer.window_size(engine))
        pygame.display.set_caption("tetris_ga")
        font = pygame.font.SysFont(None, 24)

        state = engine.initialize()
        ai_playing = args.ai
        last_fall = last_ai = pygame.time.get_ticks()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        ai_playing = not ai_playing
                    elif event.key == pygame.K_r and state.is_game_over:
                        state = engine.initialize()
                    elif not ai_playing:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            state = engine.step(state, action)

            now = pygame.time.get_ticks()
            if ai_playing and not state.is_game_over and now - last_ai >= args.ai_ms:
                move = agent.best_move(state)
                state = apply_move(engine, state, move) if move else engine.step(state, Action.SOFT_DROP)
                last_ai = now
            elif ai_playing and state.is_game_over:
                state = engine.initialize()
            # Gravity
            if now - last_fall >= args.gravity_ms:
                state = engine.step(state, Action.SOFT_DROP)
                last_fall = now

            renderer.draw(screen, engine, state, font)
            if state.is_game_over and not ai_playing:
                text = font.render("Game Over - R to restart, ESC to quit", True, (255, 255, 255))
                screen.blit(text, text.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2)))
                pygame.display.flip()

            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
