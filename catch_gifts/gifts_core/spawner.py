"""
Spawner - Difficulty Curve and Spawn Scheduling
===============================================

Decides when a new falling object appears and rolls its kind, position and
speed from a seeded RNG so sessions are reproducible.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple

from catch_gifts.gifts_core.config_loader import GameConfig, SpawnConfig, get_config
from catch_gifts.gifts_core.entities import FallingObject, ObjectKind


def spawn_interval(elapsed: float, spawn: SpawnConfig) -> float:
    """
    Current spawn interval for a given difficulty clock.

    Decreases linearly from base_interval to min_interval over ramp_duration,
    then stays at min_interval.

    Args:
        elapsed: Milliseconds since the session started playing.
        spawn: Spawn configuration.

    Returns:
        Interval in milliseconds, within [min_interval, base_interval].
    """
    t = min(1.0, max(0.0, elapsed) / spawn.ramp_duration)
    if t >= 1.0:
        return spawn.min_interval
    return spawn.base_interval - t * (spawn.base_interval - spawn.min_interval)


class SpawnScheduler:
    """
    Spawn clock plus difficulty clock.

    update() is called once per fixed step while playing; it reports True when
    the time since the last spawn exceeds the current interval, at most once
    per call. With spawn.spawn_on_start the first call after a clock restart
    also reports True.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize scheduler.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._elapsed: float = 0.0
        self._since_spawn: float = 0.0
        self._spawn_pending: bool = config.spawn.spawn_on_start
        self._next_uid: int = 0

    @property
    def elapsed(self) -> float:
        """Difficulty clock in milliseconds."""
        return self._elapsed

    @property
    def since_last_spawn(self) -> float:
        return self._since_spawn

    @property
    def current_interval(self) -> float:
        return spawn_interval(self._elapsed, self._config.spawn)

    def update(self, dt: float) -> bool:
        """
        Advance both clocks.

        Args:
            dt: Step duration in milliseconds.

        Returns:
            True if exactly one object should spawn now.
        """
        self._elapsed += dt
        self._since_spawn += dt
        if self._spawn_pending or self._since_spawn > self.current_interval:
            self._spawn_pending = False
            self._since_spawn = 0.0
            return True
        return False

    def choose_kind(self) -> ObjectKind:
        """Gift with the configured probability, charcoal otherwise."""
        if self._rng.random() < self._config.objects.gift_probability:
            return ObjectKind.GIFT
        return ObjectKind.CHARCOAL

    def roll_object(self, x_range: Tuple[float, float], spawn_y: float) -> FallingObject:
        """
        Create a new object with random kind, x and speed.

        Args:
            x_range: (min_x, max_x) for the object's left edge.
            spawn_y: Y coordinate of the object's top edge.
        """
        objects = self._config.objects
        min_x, max_x = x_range
        return self.make_object(
            kind=self.choose_kind(),
            x=min_x + self._rng.random() * (max_x - min_x),
            y=spawn_y,
            speed=self._rng.uniform(objects.speed_min, objects.speed_max),
        )

    def make_object(self, kind: ObjectKind, x: float, y: float, speed: float) -> FallingObject:
        """Create an object with an explicit placement."""
        size = self._config.objects.size
        uid = self._next_uid
        self._next_uid += 1
        return FallingObject(uid=uid, kind=kind, x=x, y=y, width=size, height=size, speed=speed)

    def restart_clocks(self) -> None:
        """Zero the difficulty and spawn clocks (session start)."""
        self._elapsed = 0.0
        self._since_spawn = 0.0
        # The opening spawn fires on the first update, later ones once per interval
        self._spawn_pending = self._config.spawn.spawn_on_start

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset clocks and optionally reseed.

        Args:
            seed: New random seed. Keeps current RNG state if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self.restart_clocks()
        self._next_uid = 0
