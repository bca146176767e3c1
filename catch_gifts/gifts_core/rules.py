"""
Game Rules
==========

Handles spawn positioning, session phases and termination conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from catch_gifts.gifts_core.config_loader import GameConfig, get_config


class SessionPhase(Enum):
    """Session state machine. Loading is a gate on top of these phases."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class SpawnRules:
    """
    Handles spawn position calculation.

    Objects spawn fully inside the viewport horizontally and just above the
    visible top edge.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize spawn rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._size = config.objects.size

    def get_spawn_x_range(
        self,
        viewport_width: float,
        viewport_height: float
    ) -> Optional[Tuple[float, float]]:
        """
        Get valid spawn X range for the object's left edge.

        Args:
            viewport_width: Current logical width.
            viewport_height: Current logical height.

        Returns:
            (min_x, max_x) tuple, or None if the viewport cannot hold an object.
        """
        if viewport_width <= 0 or viewport_height <= 0:
            return None
        usable = viewport_width - self._size
        if usable < 0:
            return None
        return (0.0, usable)

    @property
    def spawn_y(self) -> float:
        """Y coordinate for spawning (one object height above the top edge)."""
        return -self._size


class TerminationRules:
    """
    Handles game termination.

    - Out of lives: the session ends as soon as lives reach zero.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config

    def check_termination(self, lives: int) -> TerminationResult:
        """
        Check all termination conditions.

        Args:
            lives: Remaining lives.

        Returns:
            TerminationResult indicating game state.
        """
        if lives <= 0:
            return TerminationResult.game_over("out_of_lives")
        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules plus the current session phase.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.spawn = SpawnRules(config)
        self.termination = TerminationRules(config)
        self._phase = SessionPhase.NOT_STARTED

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def is_playing(self) -> bool:
        return self._phase is SessionPhase.PLAYING

    def begin(self) -> bool:
        """NotStarted -> Playing. Returns False if the transition is not allowed."""
        if self._phase is not SessionPhase.NOT_STARTED:
            return False
        self._phase = SessionPhase.PLAYING
        return True

    def end(self) -> bool:
        """Playing -> GameOver. Returns False if not playing."""
        if self._phase is not SessionPhase.PLAYING:
            return False
        self._phase = SessionPhase.GAME_OVER
        return True

    def reset(self) -> None:
        """Back to NotStarted."""
        self._phase = SessionPhase.NOT_STARTED
