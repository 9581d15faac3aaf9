"""
Coordinate quantization.
"""

from __future__ import annotations

import math
import numpy as np

from .errors import InvalidArgument
from .geom import Point


class Grid:
    """
    Square lattice with a fixed cell size.

    Grid is immutable; snapping never fails.
    """

    __slots__ = ('_cell_size',)

    def __init__(self, cell_size: float):
        if not math.isfinite(cell_size) or cell_size <= 0:
            raise InvalidArgument(f"Grid cell size must be positive, got {cell_size}")
        object.__setattr__(self, '_cell_size', float(cell_size))

    def __setattr__(self, name, value):
        raise AttributeError("Grid is immutable")

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def snap_value(self, v: float) -> float:
        """Snap a single coordinate to the nearest lattice line."""
        return round(v / self._cell_size) * self._cell_size

    def snap(self, point: Point) -> Point:
        """Snap a point component-wise."""
        return Point(self.snap_value(point.x), self.snap_value(point.y))

    def snap_array(self, coords: np.ndarray) -> np.ndarray:
        """Snap every element of a coordinate array."""
        return np.round(coords / self._cell_size) * self._cell_size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cell_size == other._cell_size

    def __hash__(self) -> int:
        return hash(self._cell_size)

    def __repr__(self) -> str:
        return f"Grid({self._cell_size!r})"
