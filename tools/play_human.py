"""
Human Play Mode
================

Play Catch the Gifts in a pygame window.

Controls:
    - Left/A, Right/D: Move
    - Mouse drag / touch drag: Move toward the pointer
    - Enter/Space/Click/Tap: Start
    - Enter/Click/Tap: Restart after game over
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from catch_gifts.gifts_core.assets import AssetProvider
from catch_gifts.gifts_core.config_loader import GameConfig, load_config
from catch_gifts.gifts_core.game import CoreGame
from catch_gifts.gifts_core.persistence import BestScoreStore
from catch_gifts.gifts_core.render_pygame import PygameRenderer
from catch_gifts.gifts_core.rules import SessionPhase

LEFT_KEYS = ("K_LEFT", "K_a")
RIGHT_KEYS = ("K_RIGHT", "K_d")


class HumanPlayer:
    """
    Window host for the game: feeds input intents and real frame times to
    CoreGame and presents the render pass every frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: Optional[int] = None,
        window_height: Optional[int] = None,
        target_fps: int = 60,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._window_width = window_width or config.viewport.width
        self._window_height = window_height or config.viewport.height
        self._target_fps = target_fps

        # Initialize pygame
        pygame.init()
        self._screen = pygame.display.set_mode(
            (self._window_width, self._window_height),
            pygame.RESIZABLE
        )
        pygame.display.set_caption("Catch the Gifts")
        self._clock = pygame.time.Clock()

        # Initialize game
        self._assets = AssetProvider(config)
        self._game = CoreGame(
            config=config,
            seed=seed,
            assets=self._assets,
            store=BestScoreStore.from_config(config),
            debug=debug
        )
        self._game.set_viewport(self._window_width, self._window_height)

        self._renderer = PygameRenderer(config, assets=self._assets, seed=seed)

        self._running = True
        self._pointer_down = False
        self._left_keys = [getattr(pygame, name) for name in LEFT_KEYS]
        self._right_keys = [getattr(pygame, name) for name in RIGHT_KEYS]

    def run(self) -> int:
        """Run the game loop. Returns the best score."""
        print("=== Catch the Gifts ===")
        print("Arrows/A/D or drag to move, Enter/Space/Click to start")
        print("Enter or Click to restart, ESC to quit")
        print()

        self._clock.tick()
        while self._running:
            self._handle_events()
            self._update_keys()

            frame_dt = self._clock.tick(self._target_fps)
            was_over = self._game.is_over
            self._game.tick(frame_dt)
            if self._game.is_over and not was_over:
                print(f"GAME OVER - Score: {self._game.score}  Best: {self._game.best_score}")

            self._render()

        self._assets.shutdown()
        pygame.quit()
        return self._game.best_score

    def _update_keys(self) -> None:
        pressed = pygame.key.get_pressed()
        left = any(pressed[k] for k in self._left_keys)
        right = any(pressed[k] for k in self._right_keys)
        self._game.set_keys(left, right)

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._on_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1 and not getattr(event, "touch", False):
                    self._on_press(event.pos[0])

            elif event.type == pygame.MOUSEMOTION:
                if self._pointer_down and not getattr(event, "touch", False):
                    self._game.press_pointer(event.pos[0])

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1 and not getattr(event, "touch", False):
                    self._on_release()

            elif event.type == pygame.FINGERDOWN:
                self._on_press(event.x * self._window_width)

            elif event.type == pygame.FINGERMOTION:
                if self._pointer_down:
                    self._game.press_pointer(event.x * self._window_width)

            elif event.type == pygame.FINGERUP:
                self._on_release()

            elif event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)

    def _on_key(self, key: int) -> None:
        phase = self._game.phase
        if key == pygame.K_ESCAPE:
            self._running = False
        elif key in (pygame.K_RETURN, pygame.K_SPACE) and phase is SessionPhase.NOT_STARTED:
            self._game.start()
        elif key == pygame.K_RETURN and phase is SessionPhase.GAME_OVER:
            self._restart()

    def _on_press(self, x: float) -> None:
        if self._game.phase is SessionPhase.PLAYING:
            self._pointer_down = True
            self._game.press_pointer(x)
        elif self._game.phase is SessionPhase.GAME_OVER:
            self._restart()
        else:
            self._game.handle_confirm()

    def _on_release(self) -> None:
        self._pointer_down = False
        self._game.release_pointer()

    def _restart(self) -> None:
        if self._game.restart():
            self._pointer_down = False
            print("\n=== Game Restarted ===\n")

    def _resize(self, width: int, height: int) -> None:
        self._window_width = max(1, width)
        self._window_height = max(1, height)
        self._screen = pygame.display.set_mode(
            (self._window_width, self._window_height),
            pygame.RESIZABLE
        )
        self._game.set_viewport(self._window_width, self._window_height)

    def _render(self) -> None:
        """Render the game."""
        render_data = self._game.get_render_data()
        self._renderer.render_to_screen(render_data, self._window_width, self._window_height)
        pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Catch the Gifts interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=None, help="Window width (default: from config)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: from config)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--debug", action="store_true", help="Print state transitions")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps,
            debug=args.debug
        )
        best = player.run()
        print(f"\nBest Score: {best}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
