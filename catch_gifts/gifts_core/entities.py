"""
Entities
========

Player and falling object models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from catch_gifts.gifts_core.collision import Box


class ObjectKind(Enum):
    """Type tag of a falling object."""
    GIFT = "gift"
    CHARCOAL = "charcoal"


@dataclass
class Player:
    """The catcher sprite. Position is the top-left corner."""
    x: float
    y: float
    width: float
    height: float
    max_speed: float

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def clamp_to(self, viewport_width: float) -> None:
        """Keep the player fully inside [0, viewport_width]."""
        self.x = max(0.0, min(self.x, viewport_width - self.width))

    def layout(self, viewport_width: float, viewport_height: float, ground_fraction: float) -> None:
        """Centre the player horizontally, standing on the ground band."""
        ground_height = viewport_height * ground_fraction
        self.x = viewport_width / 2 - self.width / 2
        self.y = viewport_height - ground_height - self.height


@dataclass
class FallingObject:
    """A gift or a piece of charcoal falling at a constant speed."""
    uid: int
    kind: ObjectKind
    x: float
    y: float
    width: float
    height: float
    speed: float

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def advance(self, ratio: float) -> None:
        """Fall by one step scaled by the step/reference-frame ratio."""
        self.y += self.speed * ratio

    def is_below(self, viewport_height: float) -> bool:
        return self.y > viewport_height

    def __repr__(self) -> str:
        return f"FallingObject({self.uid}: {self.kind.value} @ {self.x:.1f},{self.y:.1f})"
