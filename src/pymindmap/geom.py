"""
Geometric primitives for diagram layout.

This module provides the point and size value types used by nodes, and the
segment crossing tests used by the layout cost model.
"""

from __future__ import annotations

import math
import numpy as np


class Point:
    """2D point."""

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __repr__(self) -> str:
        return f"Point({self.x!r}, {self.y!r})"


class Size:
    """Width and height of a bounding box."""

    def __init__(self, width: float = 0.0, height: float = 0.0):
        self.width = float(width)
        self.height = float(height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Size):
            return NotImplemented
        return self.width == other.width and self.height == other.height

    def __repr__(self) -> str:
        return f"Size({self.width!r}, {self.height!r})"


def is_left(P0: Point, P1: Point, P2: Point) -> float:
    """
    Test if a point is Left|On|Right of an infinite line.

    Args:
        P0, P1: Define the line
        P2: Point to test

    Returns:
        >0 for P2 left of the line through P0 and P1
        =0 for P2 on the line
        <0 for P2 right of the line
    """
    return (P1.x - P0.x) * (P2.y - P0.y) - (P2.x - P0.x) * (P1.y - P0.y)


def segments_cross(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """
    Test if segment p1-p2 properly crosses segment q1-q2.

    Touching at an endpoint and collinear overlap do not count as crossings.
    """
    d1 = is_left(q1, q2, p1)
    d2 = is_left(q1, q2, p2)
    d3 = is_left(p1, p2, q1)
    d4 = is_left(p1, p2, q2)
    return d1 * d2 < 0 and d3 * d4 < 0


def _orientation(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    """Vectorized is_left over (..., 2) coordinate arrays."""
    return ((b[..., 0] - a[..., 0]) * (c[..., 1] - a[..., 1])
            - (c[..., 0] - a[..., 0]) * (b[..., 1] - a[..., 1]))


def crossing_matrix(
    p1: np.ndarray,
    p2: np.ndarray,
    q1: np.ndarray,
    q2: np.ndarray
) -> np.ndarray:
    """
    Compute proper crossings between two sets of segments.

    Vectorized implementation using NumPy broadcasting.

    Args:
        p1, p2: Endpoints of the first set of segments (a x 2 arrays)
        q1, q2: Endpoints of the second set of segments (b x 2 arrays)

    Returns:
        a x b boolean array, True where segment i of the first set
        properly crosses segment j of the second set
    """
    P1 = p1[:, np.newaxis, :]
    P2 = p2[:, np.newaxis, :]
    Q1 = q1[np.newaxis, :, :]
    Q2 = q2[np.newaxis, :, :]

    d1 = _orientation(Q1, Q2, P1)
    d2 = _orientation(Q1, Q2, P2)
    d3 = _orientation(P1, P2, Q1)
    d4 = _orientation(P1, P2, Q2)

    return (d1 * d2 < 0) & (d3 * d4 < 0)
