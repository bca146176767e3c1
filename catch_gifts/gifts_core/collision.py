"""
Collision
=========

Axis-aligned box helpers with forgiving (shrunk) hitboxes.
"""

from __future__ import annotations

from typing import NamedTuple


class Box(NamedTuple):
    """Axis-aligned box: top-left corner plus size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def hitbox(box: Box, shrink: float) -> Box:
    """
    Shrink a box symmetrically by a fraction of its own size.

    Args:
        box: Visual bounds.
        shrink: Total fraction removed from each axis; half is inset per side.

    Returns:
        The inset hitbox.
    """
    return Box(
        box.x + box.width * shrink / 2,
        box.y + box.height * shrink / 2,
        box.width * (1 - shrink),
        box.height * (1 - shrink),
    )


def overlaps(a: Box, b: Box) -> bool:
    """Strict overlap test; boxes that only touch do not overlap."""
    return (
        a.x < b.right and
        a.right > b.x and
        a.y < b.bottom and
        a.bottom > b.y
    )


def overlap_area(a: Box, b: Box) -> float:
    """Area of the intersection of two boxes (0 if disjoint)."""
    w = min(a.right, b.right) - max(a.x, b.x)
    h = min(a.bottom, b.bottom) - max(a.y, b.y)
    if w <= 0 or h <= 0:
        return 0.0
    return w * h


def hitboxes_overlap(a: Box, b: Box, shrink_a: float, shrink_b: float) -> bool:
    """Overlap test after shrinking each box by its own fraction."""
    return overlaps(hitbox(a, shrink_a), hitbox(b, shrink_b))
