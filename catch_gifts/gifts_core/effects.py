"""
Effects
=======

Cosmetic particle bursts and screen shake. Neither affects gameplay.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from catch_gifts.gifts_core.config_loader import Color, GameConfig, get_config


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    size: float
    color: Color
    age: float = 0.0

    @property
    def alpha(self) -> float:
        """Opacity in [0, 1], fading linearly with age."""
        return max(0.0, 1.0 - self.age / self.life)


class ParticleSystem:
    """Short-lived radial bursts."""

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._particles: List[Particle] = []

    @property
    def particles(self) -> List[Particle]:
        return self._particles

    def __len__(self) -> int:
        return len(self._particles)

    def burst(self, x: float, y: float, color: Color) -> None:
        """Emit a ring of particles from (x, y), respecting max_particles."""
        fx = self._config.effects
        room = fx.max_particles - len(self._particles)
        for _ in range(max(0, min(fx.burst_count, room))):
            angle = self._rng.random() * math.pi * 2
            speed = self._rng.uniform(fx.particle_speed_min, fx.particle_speed_max)
            self._particles.append(Particle(
                x=x,
                y=y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed,
                life=fx.particle_life,
                size=self._rng.uniform(fx.particle_size_min, fx.particle_size_max),
                color=color,
            ))

    def update(self, dt: float, ratio: float) -> None:
        """Age, move and expire particles."""
        gravity = self._config.effects.particle_gravity
        alive = []
        for p in self._particles:
            p.age += dt
            if p.age >= p.life:
                continue
            p.x += p.vx * ratio
            p.y += p.vy * ratio
            p.vy += gravity * ratio
            alive.append(p)
        self._particles = alive

    def clear(self) -> None:
        self._particles = []


class ScreenShake:
    """Decaying shake triggered by a costly hit."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._duration = config.effects.shake_duration
        self._intensity = config.effects.shake_intensity
        self._remaining: float = 0.0

    @property
    def active(self) -> bool:
        return self._remaining > 0

    @property
    def remaining(self) -> float:
        return self._remaining

    @property
    def amount(self) -> float:
        """Current shake magnitude; decays linearly to zero."""
        if self._duration <= 0 or self._remaining <= 0:
            return 0.0
        return (self._remaining / self._duration) * self._intensity

    def trigger(self) -> None:
        self._remaining = self._duration

    def update(self, dt: float) -> None:
        self._remaining = max(0.0, self._remaining - dt)

    def offset(self, rng: random.Random) -> Tuple[float, float]:
        """Random draw offset within +/- amount / 2 on each axis."""
        amount = self.amount
        if amount <= 0:
            return (0.0, 0.0)
        return ((rng.random() - 0.5) * amount, (rng.random() - 0.5) * amount)

    def clear(self) -> None:
        self._remaining = 0.0
