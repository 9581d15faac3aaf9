"""
Axis-aligned rectangle geometry.

Node bounding boxes and the overall layout extent are expressed as
rectangles with edges x (left), X (right), y (top) and Y (bottom).
"""

from __future__ import annotations

from .geom import Point


class Rectangle:
    """Axis-aligned rectangle."""

    def __init__(self, x: float, X: float, y: float, Y: float):
        """
        Initialize rectangle.

        Args:
            x: Left edge
            X: Right edge
            y: Top edge
            Y: Bottom edge
        """
        self.x = x
        self.X = X
        self.y = y
        self.Y = Y

    @staticmethod
    def empty() -> Rectangle:
        """Create an empty rectangle."""
        inf = float('inf')
        return Rectangle(inf, -inf, inf, -inf)

    @staticmethod
    def from_center(cx: float, cy: float, width: float, height: float) -> Rectangle:
        """Create a rectangle of the given size centred on (cx, cy)."""
        return Rectangle(cx - width / 2, cx + width / 2, cy - height / 2, cy + height / 2)

    def is_empty(self) -> bool:
        return self.X < self.x or self.Y < self.y

    def cx(self) -> float:
        """Get x center."""
        return (self.x + self.X) / 2.0

    def cy(self) -> float:
        """Get y center."""
        return (self.y + self.Y) / 2.0

    def center(self) -> Point:
        return Point(self.cx(), self.cy())

    def width(self) -> float:
        """Get width."""
        return self.X - self.x

    def height(self) -> float:
        """Get height."""
        return self.Y - self.y

    def area(self) -> float:
        if self.is_empty():
            return 0.0
        return self.width() * self.height()

    def union(self, r: Rectangle) -> Rectangle:
        """Get union with another rectangle."""
        return Rectangle(
            min(self.x, r.x),
            max(self.X, r.X),
            min(self.y, r.y),
            max(self.Y, r.Y)
        )

    def overlap_x(self, r: Rectangle) -> float:
        """Get length of the x-axis overlap with another rectangle."""
        return max(0.0, min(self.X, r.X) - max(self.x, r.x))

    def overlap_y(self, r: Rectangle) -> float:
        """Get length of the y-axis overlap with another rectangle."""
        return max(0.0, min(self.Y, r.Y) - max(self.y, r.y))

    def overlap_area(self, r: Rectangle) -> float:
        """
        Get area of the intersection with another rectangle.

        Rectangles that only touch along an edge do not overlap.
        """
        return self.overlap_x(r) * self.overlap_y(r)

    def intersects(self, r: Rectangle) -> bool:
        return self.overlap_area(r) > 0

    def __repr__(self) -> str:
        return f"Rectangle(x={self.x!r}, X={self.X!r}, y={self.y!r}, Y={self.Y!r})"
