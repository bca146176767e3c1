"""
Scoring System
==============

Tracks score, lives, the invulnerability window and the milestone flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from catch_gifts.gifts_core.config_loader import GameConfig, get_config
from catch_gifts.gifts_core.entities import ObjectKind


@dataclass
class ScoreEvent:
    """Record of a resolved collision."""
    kind: ObjectKind
    points: int = 0
    lives_lost: int = 0
    invulnerable: bool = False       # True when a hazard hit was absorbed
    milestone_reached: bool = False  # True only on the tick the milestone triggers

    def __repr__(self) -> str:
        if self.kind is ObjectKind.GIFT:
            return f"ScoreEvent(catch=+{self.points})"
        if self.invulnerable:
            return "ScoreEvent(hit=absorbed)"
        return f"ScoreEvent(hit=-{self.lives_lost})"


class ScoreTracker:
    """
    Tracks session score and lives.

    Hazard hits only cost a life when the previous costly hit is at least
    `rules.invulnerability` milliseconds old. Lives never drop below zero.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._score: int = 0
        self._lives: int = config.rules.starting_lives
        self._catches: int = 0
        self._last_hit: Optional[float] = None
        self._milestone_reached: bool = False

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def lives(self) -> int:
        return self._lives

    @property
    def catches(self) -> int:
        """Total number of gifts caught."""
        return self._catches

    @property
    def last_hit(self) -> Optional[float]:
        """Timestamp (ms) of the last hit that cost a life, or None."""
        return self._last_hit

    @property
    def milestone_reached(self) -> bool:
        return self._milestone_reached

    def is_invulnerable(self, now: float) -> bool:
        """True while inside the grace window after a costly hit."""
        if self._last_hit is None:
            return False
        return now - self._last_hit < self._config.rules.invulnerability

    def apply_catch(self) -> ScoreEvent:
        """Award points for a caught gift."""
        points = self._config.rules.catch_points
        self._score += points
        self._catches += 1

        milestone = False
        if not self._milestone_reached and self._score >= self._config.rules.milestone_score:
            self._milestone_reached = True
            milestone = True

        return ScoreEvent(kind=ObjectKind.GIFT, points=points, milestone_reached=milestone)

    def apply_hit(self, now: float) -> ScoreEvent:
        """
        Apply a hazard hit.

        Args:
            now: Current simulation time in milliseconds.

        Returns:
            ScoreEvent; lives_lost is 0 while invulnerable or out of lives.
        """
        if self.is_invulnerable(now):
            return ScoreEvent(kind=ObjectKind.CHARCOAL, invulnerable=True)
        if self._lives <= 0:
            return ScoreEvent(kind=ObjectKind.CHARCOAL)

        self._lives -= 1
        self._last_hit = now
        return ScoreEvent(kind=ObjectKind.CHARCOAL, lives_lost=1)

    def reset(self) -> None:
        """Reset score, lives and flags for a new session."""
        self._score = 0
        self._lives = self._config.rules.starting_lives
        self._catches = 0
        self._last_hit = None
        self._milestone_reached = False
