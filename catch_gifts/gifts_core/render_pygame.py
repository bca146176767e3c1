"""
Pygame Renderer
===============

Draws the game with pygame: sprites when the asset provider has them,
flat-colour placeholders otherwise. Supports both display mode (human play)
and headless RGB output.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from catch_gifts.gifts_core.config_loader import Color, GameConfig, get_config

IMAGE_FOR_KIND = {"gift": "gift", "charcoal": "charcoal"}


class PygameRenderer:
    """
    Renderer using pygame.

    Draw order: background and ground band, falling objects, player,
    particles, then the UI overlay. The whole pass is offset while the
    screen shake is active.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        assets: Optional[Any] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            assets: Object with get_image(name, size); placeholders only if None.
            seed: Seed for the shake offset RNG.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._assets = assets
        self._rng = random.Random(seed)

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Fonts
        pygame.font.init()
        self._font = pygame.font.Font(None, 26)
        self._font_medium = pygame.font.Font(None, 30)
        self._font_large = pygame.font.Font(None, 38)
        self._font_huge = pygame.font.Font(None, 44)

        self._banner_cache: Dict[int, pygame.Surface] = {}

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        window_width: Optional[int] = None,
        window_height: Optional[int] = None
    ) -> None:
        """
        Render to the pygame window. The caller flips the display.

        Args:
            render_data: Data from CoreGame.get_render_data().
            window_width: Window width. Defaults to the logical viewport width.
            window_height: Window height. Defaults to the logical viewport height.
        """
        size = (
            int(window_width or render_data["viewport_width"]),
            int(window_height or render_data["viewport_height"])
        )
        current = pygame.display.get_surface()
        if current is not None and current.get_size() == size:
            self._screen = current
        elif self._screen is None or self._screen_size != size:
            self._screen = pygame.display.set_mode(size, pygame.RESIZABLE)
            pygame.display.set_caption("Catch the Gifts")
        self._screen_size = size

        self._render_to_surface(self._screen, render_data)

    def shake_offset(self, amount: float) -> Tuple[float, float]:
        """Random offset within +/- amount / 2 on each axis."""
        if amount <= 0:
            return (0.0, 0.0)
        return (
            (self._rng.random() - 0.5) * amount,
            (self._rng.random() - 0.5) * amount
        )

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any]
    ) -> None:
        """Render game state to a pygame surface."""
        width, height = surface.get_size()
        view_w = render_data["viewport_width"] or width
        view_h = render_data["viewport_height"] or height
        sx = width / view_w
        sy = height / view_h

        scene = pygame.Surface((width, height))
        self._draw_background(scene, render_data, sx, sy)
        self._draw_objects(scene, render_data, sx, sy)
        self._draw_player(scene, render_data, sx, sy)
        self._draw_particles(scene, render_data, sx, sy)
        self._draw_ui(scene, render_data)

        dx, dy = self.shake_offset(render_data.get("shake_amount", 0.0))
        surface.fill(self._config.colors.background)
        surface.blit(scene, (int(round(dx * sx)), int(round(dy * sy))))

    def _draw_background(self, surface, render_data, sx: float, sy: float) -> None:
        colors = self._config.colors
        width, height = surface.get_size()
        surface.fill(colors.background)

        ground_h = int(render_data["ground_height"] * sy)
        pygame.draw.rect(surface, colors.ground, pygame.Rect(0, height - ground_h, width, ground_h))

    def _image(self, name: str, size: Tuple[int, int]) -> Optional[pygame.Surface]:
        if self._assets is None:
            return None
        return self._assets.get_image(name, size)

    def _draw_objects(self, surface, render_data, sx: float, sy: float) -> None:
        colors = self._config.colors
        for obj in render_data["objects"]:
            rect = pygame.Rect(
                int(obj["x"] * sx),
                int(obj["y"] * sy),
                max(1, int(obj["width"] * sx)),
                max(1, int(obj["height"] * sy))
            )
            image = self._image(IMAGE_FOR_KIND[obj["kind"]], rect.size)
            if image is not None:
                surface.blit(image, rect)
            else:
                color = colors.gift if obj["kind"] == "gift" else colors.charcoal
                pygame.draw.rect(surface, color, rect)

    def _draw_player(self, surface, render_data, sx: float, sy: float) -> None:
        player = render_data["player"]
        rect = pygame.Rect(
            int(player["x"] * sx),
            int(player["y"] * sy),
            max(1, int(player["width"] * sx)),
            max(1, int(player["height"] * sy))
        )

        if player["invulnerable"]:
            glow = rect.inflate(8, 8)
            pygame.draw.rect(surface, self._config.colors.invulnerable_glow, glow, width=3, border_radius=6)

        image = self._image("player", rect.size)
        if image is not None:
            surface.blit(image, rect)
        else:
            pygame.draw.rect(surface, self._config.colors.player, rect)

    def _draw_particles(self, surface, render_data, sx: float, sy: float) -> None:
        particles = render_data["particles"]
        if not particles:
            return

        layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        scale = (sx + sy) / 2
        for p in particles:
            r, g, b = p["color"]
            alpha = int(max(0.0, min(1.0, p["alpha"])) * 255)
            pygame.draw.circle(
                layer,
                (r, g, b, alpha),
                (int(p["x"] * sx), int(p["y"] * sy)),
                max(1, int(p["size"] * scale))
            )
        surface.blit(layer, (0, 0))

    def _text(self, surface, font, text: str, color: Color, center: Tuple[int, int]) -> None:
        rendered = font.render(text, True, color)
        surface.blit(rendered, rendered.get_rect(center=center))

    def _shade(self, surface, alpha: int) -> None:
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, alpha))
        surface.blit(overlay, (0, 0))

    def _banner(self, width: int) -> pygame.Surface:
        """'Good job!' text with a horizontal colour gradient."""
        if width in self._banner_cache:
            return self._banner_cache[width]

        colors = self._config.colors
        text = self._font_large.render("Good job!", True, (255, 255, 255))
        tw, th = text.get_size()
        gradient = pygame.Surface((tw, th), pygame.SRCALPHA)
        left = (width - tw) / 2
        for x in range(tw):
            t = (left + x) / max(1, width)
            color = tuple(
                int(a + (b - a) * t) for a, b in zip(colors.banner_start, colors.banner_end)
            )
            pygame.draw.line(gradient, (*color, 255), (x, 0), (x, th))
        text.blit(gradient, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)

        self._banner_cache[width] = text
        return text

    def _draw_ui(self, surface, render_data) -> None:
        """Draw score panel and the phase overlays."""
        text_color = self._config.colors.text
        width, height = surface.get_size()

        lines = (
            f"Score: {render_data['score']}",
            f"Best: {render_data['best_score']}",
            f"Lives: {render_data['lives']}",
        )
        for i, line in enumerate(lines):
            surface.blit(self._font.render(line, True, text_color), (10, 10 + i * 24))

        if render_data["milestone_reached"]:
            banner = self._banner(width)
            surface.blit(banner, banner.get_rect(center=(width // 2, int(height * 0.2))))

        phase = render_data["phase"]
        cx, cy = width // 2, height // 2

        if phase == "not_started":
            self._shade(surface, 153)
            self._text(surface, self._font_large, "Catch the Gifts", text_color, (cx, cy - 20))
            self._text(surface, self._font, "Tap to Start", text_color, (cx, cy + 10))

        elif phase == "game_over":
            self._shade(surface, 178)
            self._text(surface, self._font_huge, "Game Over!", text_color, (cx, cy - 30))
            self._text(surface, self._font_medium, f"Score: {render_data['score']}", text_color, (cx, cy + 5))
            self._text(surface, self._font_medium, f"Best: {render_data['best_score']}", text_color, (cx, cy + 30))
            self._text(surface, self._font_medium, "Tap or Enter to Restart", text_color, (cx, cy + 60))

        if render_data["loading"]:
            self._text(surface, self._font, "Loading...", text_color, (cx, cy))

    def present(self) -> None:
        """Flip the display after render_to_screen()."""
        if self._screen is not None:
            pygame.event.pump()
            pygame.display.flip()

    def close(self) -> None:
        """Clean up pygame resources."""
        self._banner_cache.clear()
        if self._screen is not None:
            self._screen = None
