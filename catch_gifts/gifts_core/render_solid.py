"""
Solid Renderer
==============

Fast numpy-based renderer that draws hitboxes as solid rectangles.
Used for agent image observations; needs no display or pygame.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np

from catch_gifts.gifts_core.collision import Box, hitbox
from catch_gifts.gifts_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the game as solid-colour rectangles.

    Features:
    - Draws collision hitboxes (not sprite bounds)
    - Ground band and a lives bar along the top edge
    - Dimmed frame outside the Playing phase

    Uses numpy for fast CPU-based rendering.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        colors = config.colors

        self._bg_color = np.array(colors.background, dtype=np.uint8)
        self._ground_color = np.array(colors.ground, dtype=np.uint8)
        self._player_color = np.array(colors.player, dtype=np.uint8)
        self._glow_color = np.array(colors.invulnerable_glow, dtype=np.uint8)
        self._kind_colors = {
            "gift": np.array(colors.gift, dtype=np.uint8),
            "charcoal": np.array(colors.charcoal, dtype=np.uint8),
        }
        self._lives_color = np.array(colors.text, dtype=np.uint8)

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.zeros((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        view_w = render_data["viewport_width"] or width
        view_h = render_data["viewport_height"] or height
        scale = (width / view_w, height / view_h)

        # Ground band
        ground_h = int(round(render_data["ground_height"] * scale[1]))
        if ground_h > 0:
            img[height - ground_h:, :] = self._ground_color

        object_shrink = render_data["object_hitbox_shrink"]
        for obj in render_data["objects"]:
            box = hitbox(Box(obj["x"], obj["y"], obj["width"], obj["height"]), object_shrink)
            self._fill_box(img, box, scale, self._kind_colors[obj["kind"]])

        player = render_data["player"]
        player_box = hitbox(
            Box(player["x"], player["y"], player["width"], player["height"]),
            render_data["player_hitbox_shrink"]
        )
        if player["invulnerable"]:
            self._outline_box(img, player_box, scale, self._glow_color, 2)
        self._fill_box(img, player_box, scale, self._player_color)

        self._draw_lives(img, render_data["lives"], width)

        if render_data["phase"] != "playing":
            img //= 2

        return img

    @staticmethod
    def _pixel_bounds(
        img: np.ndarray,
        box: Box,
        scale: Tuple[float, float]
    ) -> Optional[Tuple[int, int, int, int]]:
        """Clip a world box to image pixel bounds (x0, y0, x1, y1)."""
        height, width = img.shape[:2]
        x0 = max(0, int(box.x * scale[0]))
        y0 = max(0, int(box.y * scale[1]))
        x1 = min(width, int(round(box.right * scale[0])))
        y1 = min(height, int(round(box.bottom * scale[1])))
        if x0 >= x1 or y0 >= y1:
            return None
        return x0, y0, x1, y1

    def _fill_box(self, img: np.ndarray, box: Box, scale, color: np.ndarray) -> None:
        bounds = self._pixel_bounds(img, box, scale)
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds
        img[y0:y1, x0:x1] = color

    def _outline_box(
        self,
        img: np.ndarray,
        box: Box,
        scale,
        color: np.ndarray,
        thickness: int = 1
    ) -> None:
        """Draw a rectangle outline just outside the box."""
        grown = Box(
            box.x - thickness / scale[0],
            box.y - thickness / scale[1],
            box.width + 2 * thickness / scale[0],
            box.height + 2 * thickness / scale[1]
        )
        bounds = self._pixel_bounds(img, grown, scale)
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds
        img[y0:y0 + thickness, x0:x1] = color
        img[y1 - thickness:y1, x0:x1] = color
        img[y0:y1, x0:x0 + thickness] = color
        img[y0:y1, x1 - thickness:x1] = color

    def _draw_lives(self, img: np.ndarray, lives: int, width: int) -> None:
        """One small square per remaining life, top left."""
        size = max(2, width // 40)
        for i in range(max(0, lives)):
            x0 = size + i * size * 2
            if x0 + size > width:
                break
            img[size:size * 2, x0:x0 + size] = self._lives_color

    def render_to_screen(self, render_data: Dict[str, Any]) -> None:
        """
        Render to screen (no-op for solid renderer).

        Use PygameRenderer for screen display.
        """
        pass

    def present(self) -> None:
        pass

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
