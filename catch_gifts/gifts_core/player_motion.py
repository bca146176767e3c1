"""
Player Motion
=============

Merges keyboard and pointer intents into one horizontal position.
"""

from __future__ import annotations

from typing import Optional

from catch_gifts.gifts_core.config_loader import GameConfig, get_config
from catch_gifts.gifts_core.entities import Player


class PlayerController:
    """
    Holds the current input intents and applies them to the player.

    - Keyboard: a held direction (-1, 0, +1) moves at max speed.
    - Pointer: a target x that the player eases toward, covering a fixed
      fraction of the remaining distance per reference frame (capped at max
      speed) and snapping once within snap_distance.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._direction: int = 0
        self._target_x: Optional[float] = None

    @property
    def direction(self) -> int:
        return self._direction

    @property
    def target_x(self) -> Optional[float]:
        return self._target_x

    def set_keys(self, left_held: bool, right_held: bool) -> None:
        """Resolve held keys; both held cancel out."""
        self._direction = (-1 if left_held else 0) + (1 if right_held else 0)

    def press_pointer(self, pointer_x: float, player: Player) -> None:
        """Aim the player's centre at the pointer."""
        self._target_x = pointer_x - player.width / 2

    def release_pointer(self) -> None:
        self._target_x = None

    def clear(self) -> None:
        self._direction = 0
        self._target_x = None

    def apply(self, player: Player, ratio: float, viewport_width: float) -> None:
        """
        Move the player for one step.

        Args:
            player: Player to move.
            ratio: Step duration divided by the reference frame duration.
            viewport_width: Current logical width used for clamping.
        """
        cfg = self._config.player

        if self._target_x is not None:
            dx = self._target_x - player.x
            distance = abs(dx)
            if distance < cfg.snap_distance:
                player.x = self._target_x
                self._target_x = None
            else:
                direction = 1 if dx > 0 else -1
                speed = min(player.max_speed, distance * cfg.ease_factor)
                player.x += direction * speed * ratio

        if self._direction:
            player.x += self._direction * player.max_speed * ratio

        player.clamp_to(viewport_width)
