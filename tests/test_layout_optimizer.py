"""Tests for the layout optimizer."""

import math
import warnings
import pytest
from pymindmap.errors import InvalidArgument, InvalidState, PerformanceWarning
from pymindmap.geom import Point, Size
from pymindmap.grid import Grid
from pymindmap.layout_optimizer import (
    COST_TERMS, LayoutOptimizer, OptimizationInfo, OptimizerConfig
)
from pymindmap.mind_map_data import MindMapData
from pymindmap.node import Node


def make_data(positions, size=(40, 40), edges=()) -> MindMapData:
    """Create a document with square nodes at positions and the given edges."""
    data = MindMapData()
    for x, y in positions:
        data.graph.add_node(Node(Point(x, y), Size(*size)))
    for a, b in edges:
        data.graph.add_edge_between(a, b)
    return data


def make_tree(num_nodes: int) -> MindMapData:
    """Create a tree of nodes stacked on top of each other."""
    positions = [(0, 0)] * num_nodes
    edges = [((i - 1) // 2, i) for i in range(1, num_nodes)]
    return make_data(positions, size=(60, 30), edges=edges)


def overlaps(a: Node, b: Node) -> bool:
    return a.bounds().overlap_area(b.bounds()) > 0


class TestOptimizerConfig:
    """Test optimizer configuration."""

    def test_defaults_are_valid(self):
        """Test default configuration validates."""
        OptimizerConfig().validate()

    @pytest.mark.parametrize("changes", [
        {'overlap_weight': -1.0},
        {'cooling': 1.0},
        {'cooling': 0.0},
        {'max_sweeps': 0},
        {'temperature_scale': float('nan')},
    ])
    def test_invalid_config(self, changes):
        """Test bad values are rejected at construction."""
        with pytest.raises(InvalidArgument):
            LayoutOptimizer(MindMapData(), Grid(10), OptimizerConfig(**changes))


class TestInitialize:
    """Test initialize()."""

    @pytest.mark.parametrize("aspect_ratio, min_edge_length", [
        (0, 100), (-1, 100), (1, 0), (1, -5), (float('nan'), 100), (1, float('inf')),
    ])
    def test_invalid_targets(self, aspect_ratio, min_edge_length):
        """Test non-positive targets are rejected."""
        optimizer = LayoutOptimizer(make_data([(0, 0)]), Grid(10))
        with pytest.raises(InvalidArgument):
            optimizer.initialize(aspect_ratio, min_edge_length)

    def test_optimize_before_initialize(self):
        """Test optimize() requires initialize()."""
        optimizer = LayoutOptimizer(make_data([(0, 0)]), Grid(10))
        with pytest.raises(InvalidState):
            optimizer.optimize()

    def test_cost_before_initialize(self):
        """Test cost() requires initialize()."""
        optimizer = LayoutOptimizer(make_data([(0, 0)]), Grid(10))
        with pytest.raises(InvalidState):
            optimizer.cost()

    def test_extract_before_optimize(self):
        """Test extract() requires a finished optimize()."""
        data = make_data([(0, 0), (10, 0)])
        optimizer = LayoutOptimizer(data, Grid(10))
        with pytest.raises(InvalidState):
            optimizer.extract()
        optimizer.initialize(1.0, 100)
        with pytest.raises(InvalidState):
            optimizer.extract()
        assert data.graph.get_node(1).location == Point(10, 0)

    def test_does_not_touch_graph(self):
        """Test construction and initialize() leave positions alone."""
        data = make_data([(3, 4), (17, 0)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        assert data.graph.get_node(0).location == Point(3, 4)
        assert data.graph.get_node(1).location == Point(17, 0)

    def test_large_graph_warning(self):
        """Test a performance warning for big graphs."""
        data = make_data([(i * 100, 0) for i in range(5)])
        optimizer = LayoutOptimizer(data, Grid(10), OptimizerConfig(large_graph_threshold=3))
        with pytest.warns(PerformanceWarning):
            optimizer.initialize(1.0, 50)

    def test_no_warning_for_small_graph(self):
        """Test small graphs initialize silently."""
        optimizer = LayoutOptimizer(make_data([(0, 0), (100, 0)]), Grid(10))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            optimizer.initialize(1.0, 50)


class TestCost:
    """Test the cost model."""

    def test_terms(self):
        """Test all terms are reported."""
        optimizer = LayoutOptimizer(make_data([(0, 0), (10, 0)], edges=[(0, 1)]), Grid(10))
        optimizer.initialize(1.0, 100)
        terms = optimizer.cost_terms()

        assert set(terms) == set(COST_TERMS)
        assert terms['overlap'] == pytest.approx(30 * 40)
        assert terms['edge_length'] == pytest.approx(10.0 * 90)
        assert terms['crossings'] == 0
        assert terms['stretch'] == 0
        assert optimizer.cost() == pytest.approx(sum(terms.values()))

    def test_no_violations(self):
        """Test a square layout with long edges only pays for stretch."""
        data = make_data([(0, 0), (200, 0), (0, 200), (200, 200)], edges=[(0, 1), (2, 3)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        terms = optimizer.cost_terms()

        assert terms['overlap'] == 0
        assert terms['edge_length'] == 0
        assert terms['aspect_ratio'] == pytest.approx(0)
        assert terms['crossings'] == 0
        assert terms['stretch'] == pytest.approx(0.01 * 200)

    def test_crossing(self):
        """Test crossing edges are penalized once per pair."""
        data = make_data(
            [(0, 0), (300, 300), (0, 300), (300, 0)],
            edges=[(0, 1), (2, 3)]
        )
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        assert optimizer.cost_terms()['crossings'] == pytest.approx(100.0)

    def test_edges_sharing_a_node_do_not_cross(self):
        """Test a star never counts crossings."""
        data = make_data(
            [(0, 0), (200, 0), (0, 200), (-200, 0)],
            edges=[(0, 1), (0, 2), (0, 3)]
        )
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        assert optimizer.cost_terms()['crossings'] == 0

    def test_aspect_ratio(self):
        """Test aspect ratio deviation grows with the violation."""
        costs = []
        for width in (200, 400, 800):
            data = make_data([(0, 0), (width - 40, 0)])
            optimizer = LayoutOptimizer(data, Grid(10))
            optimizer.initialize(1.0, 10)
            costs.append(optimizer.cost_terms()['aspect_ratio'])

        assert costs[0] > 0
        assert costs[0] < costs[1] < costs[2]

    def test_overlap_monotonic(self):
        """Test more overlap never costs less."""
        costs = []
        for dx in (30, 20, 10, 0):
            optimizer = LayoutOptimizer(make_data([(0, 0), (dx, 0)]), Grid(10))
            optimizer.initialize(1.0, 10)
            costs.append(optimizer.cost())

        assert costs == sorted(costs)

    def test_snapshot_is_grid_aligned(self):
        """Test initial cost is measured on snapped positions."""
        data = make_data([(0, 0), (44, 0)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 10)
        # (44, 0) snaps to (40, 0): boxes touch but do not overlap
        assert optimizer.cost_terms()['overlap'] == 0


class TestTrivialGraphs:
    """Test graphs with fewer than two nodes."""

    @pytest.mark.parametrize("positions", [[], [(13, 27)]])
    def test_zero_cost(self, positions):
        """Test empty and single node graphs."""
        data = make_data(positions)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        info = optimizer.optimize()

        assert info == OptimizationInfo(0.0, 0.0, 0)
        optimizer.extract()

    def test_single_node_is_snapped(self):
        """Test extract() snaps even when nothing moved."""
        data = make_data([(13, 27)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        optimizer.optimize()
        optimizer.extract()
        assert data.graph.get_node(0).location == Point(10, 30)


class TestOptimize:
    """Test optimize() and extract()."""

    def test_two_overlapping_nodes(self):
        """Test overlapping connected nodes are pulled apart to the minimum edge length."""
        data = make_data([(0, 0), (10, 0)], edges=[(0, 1)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)

        info = optimizer.optimize()
        optimizer.extract()

        a = data.graph.get_node(0)
        b = data.graph.get_node(1)
        assert info.initial_cost > 0
        assert info.final_cost <= info.initial_cost
        assert info.changes > 0
        assert a.location.distance_to(b.location) >= 100 - 1e-6
        assert not overlaps(a, b)

    def test_final_cost_matches_extracted_layout(self):
        """Test reported final cost is the cost of the committed layout."""
        data = make_tree(7)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.5, 80)
        info = optimizer.optimize()
        optimizer.extract()

        check = LayoutOptimizer(data, Grid(10))
        check.initialize(1.5, 80)
        assert check.cost() == pytest.approx(info.final_cost)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_cost_never_increases(self, seed):
        """Test final cost is at most the initial cost."""
        data = make_tree(10)
        optimizer = LayoutOptimizer(data, Grid(10), OptimizerConfig(seed=seed, max_sweeps=50))
        optimizer.initialize(2.0, 60)
        info = optimizer.optimize()

        assert info.initial_cost >= 0
        assert info.final_cost >= 0
        assert info.final_cost <= info.initial_cost

    def test_hill_climbing(self):
        """Test a zero temperature search still improves the layout."""
        data = make_tree(5)
        optimizer = LayoutOptimizer(data, Grid(10), OptimizerConfig(temperature_scale=0.0))
        optimizer.initialize(1.0, 80)
        info = optimizer.optimize()
        assert info.final_cost < info.initial_cost

    def test_resolves_overlaps(self):
        """Test stacked nodes are spread out."""
        data = make_tree(6)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 80)
        before = optimizer.cost_terms()['overlap']
        optimizer.optimize()
        after = optimizer.cost_terms()['overlap']

        # 15 pairs of fully overlapping 60x30 boxes
        assert before == pytest.approx(15 * 60 * 30)
        assert after < before / 10

    def test_graph_untouched_until_extract(self):
        """Test optimize() works on a private copy."""
        data = make_data([(0, 0), (10, 0)], edges=[(0, 1)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        optimizer.optimize()

        assert data.graph.get_node(0).location == Point(0, 0)
        assert data.graph.get_node(1).location == Point(10, 0)

    def test_topology_and_sizes_unchanged(self):
        """Test only locations are written."""
        data = make_tree(5)
        sizes = [(n.size.width, n.size.height) for n in data.graph.get_nodes()]
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 80)
        optimizer.optimize()
        optimizer.extract()

        assert [(n.size.width, n.size.height) for n in data.graph.get_nodes()] == sizes
        assert data.graph.num_edges() == 4
        assert data.graph.are_directly_connected(0, 1)

    @pytest.mark.parametrize("cell_size", [10, 7.5, 25])
    def test_extracted_positions_on_grid(self, cell_size):
        """Test every extracted coordinate is a multiple of the cell size."""
        data = make_data([(3, 7), (11, -4), (-13, 2)], edges=[(0, 1), (1, 2)])
        optimizer = LayoutOptimizer(data, Grid(cell_size), OptimizerConfig(max_sweeps=30))
        optimizer.initialize(1.0, 60)
        optimizer.optimize()
        optimizer.extract()

        for node in data.graph.get_nodes():
            for v in (node.location.x, node.location.y):
                ratio = v / cell_size
                assert math.isclose(ratio, round(ratio), abs_tol=1e-6)

    def test_deterministic(self):
        """Test the same seed gives the same layout."""
        results = []
        for _ in range(2):
            data = make_tree(6)
            optimizer = LayoutOptimizer(data, Grid(10), OptimizerConfig(seed=7))
            optimizer.initialize(1.0, 80)
            info = optimizer.optimize()
            optimizer.extract()
            results.append((info, [(n.location.x, n.location.y) for n in data.graph.get_nodes()]))

        assert results[0] == results[1]

    def test_reoptimize_after_extract(self):
        """Test optimizing an optimized layout does not regress."""
        data = make_tree(6)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 80)
        first = optimizer.optimize()
        optimizer.extract()

        optimizer.initialize(1.0, 80)
        second = optimizer.optimize()

        assert second.initial_cost == pytest.approx(first.final_cost)
        assert second.final_cost <= first.final_cost + 1e-6

    def test_optimize_twice_continues(self):
        """Test a second optimize() starts from the best layout of the first."""
        data = make_tree(5)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 80)
        first = optimizer.optimize()
        second = optimizer.optimize()

        assert second.initial_cost == pytest.approx(first.final_cost)
        assert second.final_cost <= second.initial_cost

    def test_deleted_node_skipped_on_extract(self):
        """Test nodes removed after initialize() are not written."""
        data = make_data([(0, 0), (10, 0), (20, 0)], edges=[(0, 1)])
        removed = data.graph.get_node(2)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        optimizer.optimize()
        data.graph.delete_node(2)
        optimizer.extract()

        assert removed.location == Point(20, 0)


class TestProgress:
    """Test progress reporting and cancellation."""

    def test_progress_monotonic(self):
        """Test progress values increase and end at 1.0."""
        values = []
        data = make_tree(6)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.set_progress_callback(values.append)
        optimizer.initialize(1.0, 80)
        optimizer.optimize()

        assert len(values) > 0
        assert all(0.0 <= v <= 1.0 for v in values)
        assert all(a < b for a, b in zip(values, values[1:]))
        assert values[-1] == 1.0
        assert values.count(1.0) == 1

    def test_progress_trivial_graph(self):
        """Test trivial graphs still report completion."""
        values = []
        optimizer = LayoutOptimizer(make_data([]), Grid(10))
        optimizer.set_progress_callback(values.append)
        optimizer.initialize(1.0, 80)
        optimizer.optimize()
        assert values == [1.0]

    def test_no_callback_after_return(self):
        """Test the callback is silent once optimize() returned."""
        values = []
        data = make_tree(4)
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.set_progress_callback(values.append)
        optimizer.initialize(1.0, 80)
        optimizer.optimize()
        count = len(values)
        optimizer.extract()
        optimizer.cost()
        assert len(values) == count

    def test_cancel(self):
        """Test cancelling from the callback stops early with a valid result."""
        values = []
        data = make_tree(8)
        optimizer = LayoutOptimizer(data, Grid(10), OptimizerConfig(max_sweeps=1000))

        def on_progress(progress):
            values.append(progress)
            optimizer.cancel()

        optimizer.set_progress_callback(on_progress)
        optimizer.initialize(1.0, 80)
        info = optimizer.optimize()

        assert values[-1] == 1.0
        assert len(values) <= 2
        assert 0 <= info.final_cost <= info.initial_cost
        optimizer.extract()

    def test_cancel_flag_cleared(self):
        """Test a stale cancel() does not stop the next run."""
        data = make_data([(0, 0), (10, 0)], edges=[(0, 1)])
        optimizer = LayoutOptimizer(data, Grid(10))
        optimizer.initialize(1.0, 100)
        optimizer.cancel()
        info = optimizer.optimize()
        assert info.changes > 0
