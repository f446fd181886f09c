"""
Rectangle helpers over the integer grid-unit coordinate space
"""

from typing import NamedTuple


class Rect(NamedTuple):
    """Axis-aligned rectangle covering [x, x+width) x [y, y+height)"""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


def overlaps(a: Rect, b: Rect) -> bool:
    """Check if two rectangles share any area; touching edges do not count"""
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


def contains(outer: Rect, inner: Rect) -> bool:
    """Check if inner lies fully inside outer"""
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.right <= outer.right
        and inner.bottom <= outer.bottom
    )


def inset(rect: Rect, distance: int) -> Rect:
    """Shrink a rectangle by distance on every side (never below zero size)"""
    return Rect(
        rect.x + distance,
        rect.y + distance,
        max(0, rect.width - 2 * distance),
        max(0, rect.height - 2 * distance),
    )
