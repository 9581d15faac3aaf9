"""
Automatic layout optimization.

This module implements the LayoutOptimizer which re-arranges the nodes of a
mind map to reduce a scalar layout cost made of:
- Overlap between node bounding boxes
- Edges shorter than the minimum edge length
- Deviation of the layout extent from the target aspect ratio
- Edge crossings
- Edges stretched beyond the minimum edge length (small weight, keeps the
  layout compact)

The search is a simulated annealing over grid-aligned positions followed by
a greedy pass at single-cell resolution. The optimizer works on a private
copy of the node positions; the graph is only written by extract().
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Callable, Optional
import logging
import math
import warnings

import numpy as np

from .constants import (
    LAYOUT_OVERLAP_WEIGHT,
    LAYOUT_EDGE_LENGTH_WEIGHT,
    LAYOUT_ASPECT_RATIO_WEIGHT,
    LAYOUT_CROSSING_WEIGHT,
    LAYOUT_EDGE_STRETCH_WEIGHT,
    LAYOUT_MAX_SWEEPS,
    LAYOUT_COOLING,
    LAYOUT_TEMPERATURE_SCALE,
    LAYOUT_MIN_TEMPERATURE_RATIO,
    LAYOUT_LARGE_GRAPH_THRESHOLD,
)
from .errors import InvalidArgument, InvalidState, PerformanceWarning
from .geom import Point, crossing_matrix
from .grid import Grid
from .mind_map_data import MindMapData
from .node import Node

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

COST_TERMS = ('overlap', 'edge_length', 'aspect_ratio', 'crossings', 'stretch')

# Cost changes smaller than this are treated as no change
_EPSILON = 1e-9

# Unit moves to the 8 neighboring grid cells
_DIRECTIONS = np.array([
    [-1, -1], [0, -1], [1, -1],
    [-1, 0], [1, 0],
    [-1, 1], [0, 1], [1, 1],
], dtype=float)


@dataclass
class OptimizerConfig:
    """
    Weights and search parameters of the layout optimizer.

    Attributes:
        overlap_weight: Cost per unit area of bounding box intersection
        edge_length_weight: Cost per unit an edge is shorter than the minimum
        aspect_ratio_weight: Cost per unit of |width - ratio * height| / sqrt(ratio)
        crossing_weight: Cost per pair of crossing edges
        edge_stretch_weight: Cost per unit an edge is longer than the minimum
        max_sweeps: Maximum number of annealing sweeps over all nodes
        cooling: Per-sweep decay factor of temperature and step size
        temperature_scale: Initial temperature as a fraction of the mean
            per-node cost, 0 for pure hill climbing
        min_temperature_ratio: Temperature (relative to the initial one)
            below which the search may stop
        seed: Random seed, results are deterministic for a given seed
        large_graph_threshold: Node count above which initialize() warns
    """
    overlap_weight: float = LAYOUT_OVERLAP_WEIGHT
    edge_length_weight: float = LAYOUT_EDGE_LENGTH_WEIGHT
    aspect_ratio_weight: float = LAYOUT_ASPECT_RATIO_WEIGHT
    crossing_weight: float = LAYOUT_CROSSING_WEIGHT
    edge_stretch_weight: float = LAYOUT_EDGE_STRETCH_WEIGHT
    max_sweeps: int = LAYOUT_MAX_SWEEPS
    cooling: float = LAYOUT_COOLING
    temperature_scale: float = LAYOUT_TEMPERATURE_SCALE
    min_temperature_ratio: float = LAYOUT_MIN_TEMPERATURE_RATIO
    seed: int = 0
    large_graph_threshold: int = LAYOUT_LARGE_GRAPH_THRESHOLD

    def validate(self) -> None:
        """
        Check that all values are usable.

        Raises:
            InvalidArgument: On the first bad value
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value) or value < 0:
                raise InvalidArgument(f"'{f.name}' must be a non-negative number, got {value}")
        if not 0 < self.cooling < 1:
            raise InvalidArgument(f"'cooling' must be between 0 and 1, got {self.cooling}")
        if self.max_sweeps < 1:
            raise InvalidArgument(f"'max_sweeps' must be at least 1, got {self.max_sweeps}")


@dataclass
class OptimizationInfo:
    """
    Result of an optimization run.

    Attributes:
        initial_cost: Cost before any move
        final_cost: Cost of the best layout found
        changes: Number of accepted moves
    """
    initial_cost: float = 0.0
    final_cost: float = 0.0
    changes: int = 0


class LayoutOptimizer:
    """
    Optimizes node placement of a mind map.

    Usage:
        optimizer = LayoutOptimizer(mind_map_data, Grid(10))
        optimizer.initialize(aspect_ratio=1.5, min_edge_length=100)
        info = optimizer.optimize()
        optimizer.extract()
    """

    def __init__(
        self,
        mind_map_data: MindMapData,
        grid: Grid,
        config: Optional[OptimizerConfig] = None
    ):
        self._mind_map_data = mind_map_data
        self._grid = grid
        self._config = config if config is not None else OptimizerConfig()
        self._config.validate()

        self._progress_callback: Optional[ProgressCallback] = None
        self._cancelled = False
        self._progress = 0.0
        self._initialized = False
        self._optimized = False

        self._aspect_ratio = 1.0
        self._min_edge_length = 1.0

        self._nodes: list[Node] = []
        self._half = np.zeros((0, 2))
        self._pos = np.zeros((0, 2))
        self._edges = np.zeros((0, 2), dtype=int)
        self._shares = np.zeros((0, 0), dtype=bool)
        self._incident: list[np.ndarray] = []
        self._neighbors: list[np.ndarray] = []

    def set_progress_callback(self, progress_callback: Optional[ProgressCallback]) -> None:
        """
        Register a function called with the progress in [0, 1] during optimize().

        The callback runs on the thread that called optimize() and may call
        cancel().
        """
        self._progress_callback = progress_callback

    def cancel(self) -> None:
        """Request the running optimize() to stop at its next checkpoint."""
        self._cancelled = True

    def initialize(self, aspect_ratio: float, min_edge_length: float) -> None:
        """
        Set the layout targets and snapshot the current node positions.

        The snapshot is aligned to the grid.

        Args:
            aspect_ratio: Target width / height of the layout
            min_edge_length: Minimum center-to-center length of edges

        Raises:
            InvalidArgument: If either target is not a positive number
        """
        if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
            raise InvalidArgument(f"Aspect ratio must be positive, got {aspect_ratio}")
        if not math.isfinite(min_edge_length) or min_edge_length <= 0:
            raise InvalidArgument(f"Minimum edge length must be positive, got {min_edge_length}")

        self._aspect_ratio = float(aspect_ratio)
        self._min_edge_length = float(min_edge_length)

        graph = self._mind_map_data.graph
        self._nodes = graph.get_nodes()
        n = len(self._nodes)
        if n > self._config.large_graph_threshold:
            warnings.warn(
                f"Optimizing a layout of {n} nodes may take a long time.",
                PerformanceWarning,
                stacklevel=2
            )

        rows = {node.index: row for row, node in enumerate(self._nodes)}
        self._half = np.array(
            [[node.size.width / 2, node.size.height / 2] for node in self._nodes],
            dtype=float
        ).reshape(n, 2)
        self._pos = self._grid.snap_array(np.array(
            [[node.location.x, node.location.y] for node in self._nodes],
            dtype=float
        ).reshape(n, 2))

        self._edges = np.array(
            [[rows[e.source.index], rows[e.target.index]] for e in graph.get_edges()],
            dtype=int
        ).reshape(-1, 2)
        E = self._edges
        self._shares = (
            (E[:, np.newaxis, 0] == E[np.newaxis, :, 0])
            | (E[:, np.newaxis, 0] == E[np.newaxis, :, 1])
            | (E[:, np.newaxis, 1] == E[np.newaxis, :, 0])
            | (E[:, np.newaxis, 1] == E[np.newaxis, :, 1])
        )

        self._incident = []
        self._neighbors = []
        for row in range(n):
            incident = np.flatnonzero((E[:, 0] == row) | (E[:, 1] == row))
            self._incident.append(incident)
            self._neighbors.append(np.where(E[incident, 0] == row, E[incident, 1], E[incident, 0]))

        self._initialized = True
        self._optimized = False
        logger.debug(
            "Initialized layout optimizer: %d nodes, %d edges, aspect ratio %g, min edge length %g",
            n, len(E), self._aspect_ratio, self._min_edge_length
        )

    def cost(self) -> float:
        """Total cost of the current working layout."""
        return sum(self.cost_terms().values())

    def cost_terms(self) -> dict[str, float]:
        """Weighted cost of the current working layout, per term."""
        self._require_initialized()
        return self._cost_terms(self._pos)

    def optimize(self) -> OptimizationInfo:
        """
        Run the optimization.

        Starts from the initialize() snapshot, or from the best layout of the
        previous optimize() call.

        Returns:
            OptimizationInfo with the costs before and after and the number
            of accepted moves

        Raises:
            InvalidState: If initialize() has not been called
        """
        self._require_initialized()
        self._cancelled = False
        self._progress = 0.0

        start = self._pos.copy()
        initial_cost = self._total_cost(start)
        info = OptimizationInfo(initial_cost=initial_cost, final_cost=initial_cost)
        n = len(self._nodes)

        logger.info("Layout optimization started: %d nodes, initial cost %.3f", n, initial_cost)

        if n >= 2 and initial_cost > 0:
            rng = np.random.default_rng(self._config.seed)
            best, changes = self._anneal(initial_cost, rng)
            if not self._cancelled:
                best, polish_changes = self._polish(best)
                changes += polish_changes

            final_cost = self._total_cost(best)
            if final_cost > initial_cost:
                best = start
                final_cost = initial_cost

            self._pos = best
            info.final_cost = final_cost
            info.changes = changes

        self._optimized = True
        logger.info(
            "Layout optimization %s: cost %.3f -> %.3f, %d changes",
            "cancelled" if self._cancelled else "finished",
            info.initial_cost, info.final_cost, info.changes
        )

        self._report_progress(1.0)
        return info

    def extract(self) -> None:
        """
        Write the optimized positions back to the graph's nodes.

        Nodes removed from the graph since initialize() are skipped.

        Raises:
            InvalidState: If optimize() has not been run
        """
        if not self._optimized:
            raise InvalidState("Layout must be optimized before extracting")

        graph = self._mind_map_data.graph
        locations = [self._grid.snap(Point(x, y)) for x, y in self._pos]
        for node, location in zip(self._nodes, locations):
            if graph.get_node(node.index) is node:
                node.location = location
        logger.debug("Extracted %d node positions", len(locations))

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise InvalidState("Layout optimizer must be initialized first")

    def _report_progress(self, progress: float) -> None:
        if progress <= self._progress:
            return
        self._progress = progress
        if self._progress_callback is not None:
            self._progress_callback(progress)

    def _anneal(self, initial_cost: float, rng: np.random.Generator) -> tuple[np.ndarray, int]:
        """
        Simulated annealing over grid-aligned moves.

        Each sweep visits every node once in random order and tries its 8
        neighboring positions at the current step size. The step size and
        the temperature decay geometrically per sweep.

        Returns:
            Tuple of (best positions found, accepted moves)
        """
        cfg = self._config
        n = len(self._nodes)
        cell = self._grid.cell_size

        reach = max(self._min_edge_length, 2 * float(self._half.max()))
        initial_step = max(1, math.ceil(reach / cell))
        initial_temperature = cfg.temperature_scale * initial_cost / n
        min_temperature = initial_temperature * cfg.min_temperature_ratio

        cost = initial_cost
        best = self._pos.copy()
        best_cost = cost
        changes = 0
        decay = 1.0

        for sweep in range(1, cfg.max_sweeps + 1):
            temperature = initial_temperature * decay
            step = max(1, round(initial_step * decay))
            improved = False

            for i in rng.permutation(n):
                if self._cancelled:
                    break
                delta, target = self._best_move(i, step * cell)
                if delta < -_EPSILON:
                    improved = True
                elif temperature <= 0 or delta <= _EPSILON or rng.random() >= math.exp(-delta / temperature):
                    continue
                self._pos[i] = target
                cost += delta
                changes += 1
                if cost < best_cost:
                    best_cost = cost
                    best[:] = self._pos

            # Drop accumulated rounding error
            cost = self._total_cost(self._pos)
            logger.debug(
                "Sweep %d: step %d, temperature %.4g, cost %.3f, best %.3f",
                sweep, step, temperature, cost, best_cost
            )

            if self._cancelled or best_cost <= 0:
                break
            if not improved and step == 1 and temperature <= min_temperature:
                break

            if sweep < cfg.max_sweeps:
                self._report_progress(sweep / cfg.max_sweeps)
            decay *= cfg.cooling

        return best, changes

    def _polish(self, start: np.ndarray) -> tuple[np.ndarray, int]:
        """
        Greedy single-cell moves from start until no move improves.

        Returns:
            Tuple of (resulting positions, accepted moves)
        """
        self._pos = start.copy()
        cell = self._grid.cell_size
        changes = 0

        for _ in range(self._config.max_sweeps):
            improved = False
            for i in range(len(self._nodes)):
                if self._cancelled:
                    return self._pos.copy(), changes
                delta, target = self._best_move(i, cell)
                if delta < -_EPSILON:
                    self._pos[i] = target
                    changes += 1
                    improved = True
            if not improved:
                break

        return self._pos.copy(), changes

    def _best_move(self, i: int, distance: float) -> tuple[float, np.ndarray]:
        """
        Find the cheapest of the 8 moves of node i by the given distance.

        Returns:
            Tuple of (cost change, target position)
        """
        n = len(self._nodes)
        lo = self._pos - self._half
        hi = self._pos + self._half
        others = np.ones(n, dtype=bool)
        others[i] = False
        extent_lo = lo[others].min(axis=0)
        extent_hi = hi[others].max(axis=0)

        current = self._local_cost(i, self._pos[i], lo, hi, extent_lo, extent_hi)
        best_delta = math.inf
        best_target = self._pos[i]
        for direction in _DIRECTIONS:
            target = self._pos[i] + direction * distance
            delta = self._local_cost(i, target, lo, hi, extent_lo, extent_hi) - current
            if delta < best_delta:
                best_delta = delta
                best_target = target
        return best_delta, best_target

    def _local_cost(
        self,
        i: int,
        p: np.ndarray,
        lo: np.ndarray,
        hi: np.ndarray,
        extent_lo: np.ndarray,
        extent_hi: np.ndarray
    ) -> float:
        """
        Cost of all terms involving node i when placed at p.

        Args:
            i: Node row
            p: Candidate position of node i
            lo, hi: Bounding box corners of all nodes at their current positions
            extent_lo, extent_hi: Extent of all nodes other than i
        """
        cfg = self._config
        lo_i = p - self._half[i]
        hi_i = p + self._half[i]

        ox = np.clip(np.minimum(hi_i[0], hi[:, 0]) - np.maximum(lo_i[0], lo[:, 0]), 0, None)
        oy = np.clip(np.minimum(hi_i[1], hi[:, 1]) - np.maximum(lo_i[1], lo[:, 1]), 0, None)
        area = ox * oy
        area[i] = 0.0
        cost = cfg.overlap_weight * float(area.sum())

        incident = self._incident[i]
        if len(incident) > 0:
            ends = self._pos[self._neighbors[i]]
            lengths = np.linalg.norm(ends - p, axis=1)
            cost += self._length_cost(lengths)

            if cfg.crossing_weight > 0 and len(self._edges) > 1:
                starts = np.broadcast_to(p, ends.shape)
                crosses = crossing_matrix(
                    starts, ends,
                    self._pos[self._edges[:, 0]], self._pos[self._edges[:, 1]]
                ) & ~self._shares[incident]
                cost += cfg.crossing_weight * int(crosses.sum())

        extent = np.maximum(extent_hi, hi_i) - np.minimum(extent_lo, lo_i)
        cost += self._aspect_cost(extent[0], extent[1])
        return cost

    def _length_cost(self, lengths: np.ndarray) -> float:
        cfg = self._config
        deficit = np.clip(self._min_edge_length - lengths, 0, None)
        excess = np.clip(lengths - self._min_edge_length, 0, None)
        return float(cfg.edge_length_weight * deficit.sum() + cfg.edge_stretch_weight * excess.sum())

    def _aspect_cost(self, width: float, height: float) -> float:
        # |width / height - ratio| scaled by height / sqrt(ratio); symmetric
        # under swapping width and height together with ratio and 1 / ratio.
        a = self._aspect_ratio
        return self._config.aspect_ratio_weight * abs(width - a * height) / math.sqrt(a)

    def _total_cost(self, pos: np.ndarray) -> float:
        return sum(self._cost_terms(pos).values())

    def _cost_terms(self, pos: np.ndarray) -> dict[str, float]:
        """
        Weighted cost terms of a layout.

        Vectorized implementation using NumPy broadcasting.
        """
        cfg = self._config
        terms = dict.fromkeys(COST_TERMS, 0.0)
        if len(pos) < 2:
            return terms

        lo = pos - self._half
        hi = pos + self._half

        ox = np.clip(
            np.minimum(hi[:, np.newaxis, 0], hi[np.newaxis, :, 0])
            - np.maximum(lo[:, np.newaxis, 0], lo[np.newaxis, :, 0]),
            0, None
        )
        oy = np.clip(
            np.minimum(hi[:, np.newaxis, 1], hi[np.newaxis, :, 1])
            - np.maximum(lo[:, np.newaxis, 1], lo[np.newaxis, :, 1]),
            0, None
        )
        terms['overlap'] = cfg.overlap_weight * float(np.triu(ox * oy, k=1).sum())

        if len(self._edges) > 0:
            a = pos[self._edges[:, 0]]
            b = pos[self._edges[:, 1]]
            lengths = np.linalg.norm(b - a, axis=1)
            deficit = np.clip(self._min_edge_length - lengths, 0, None)
            excess = np.clip(lengths - self._min_edge_length, 0, None)
            terms['edge_length'] = cfg.edge_length_weight * float(deficit.sum())
            terms['stretch'] = cfg.edge_stretch_weight * float(excess.sum())

            if cfg.crossing_weight > 0 and len(self._edges) > 1:
                crosses = crossing_matrix(a, b, a, b) & ~self._shares
                terms['crossings'] = cfg.crossing_weight * int(np.triu(crosses, k=1).sum())

        extent = hi.max(axis=0) - lo.min(axis=0)
        terms['aspect_ratio'] = self._aspect_cost(extent[0], extent[1])
        return terms
