"""
Profiling script for PyMindMap layout optimization.

Profiles the optimizer on random mind maps of increasing size and prints
the costs reached and the hottest functions.
"""

import cProfile
import pstats
import io
from pstats import SortKey
import time

import numpy as np

from pymindmap import Grid, LayoutOptimizer, MindMapData, Node, OptimizerConfig, Point, Size


def create_mind_map(n_nodes, seed=42):
    """Create a random tree of n_nodes nodes scattered around the origin."""
    rng = np.random.default_rng(seed)
    data = MindMapData()
    for _ in range(n_nodes):
        x, y = rng.uniform(-200, 200, size=2)
        data.graph.add_node(Node(Point(x, y), Size(120, 40)))
    for i in range(1, n_nodes):
        data.graph.add_edge_between(int(rng.integers(0, i)), i)
    return data


def optimize(n_nodes, max_sweeps):
    data = create_mind_map(n_nodes)
    optimizer = LayoutOptimizer(data, Grid(10), OptimizerConfig(max_sweeps=max_sweeps))
    optimizer.initialize(aspect_ratio=1.5, min_edge_length=150)
    info = optimizer.optimize()
    optimizer.extract()
    print(f"Cost {info.initial_cost:.1f} -> {info.final_cost:.1f}, {info.changes} changes")


def benchmark_scenario(name, func):
    """Benchmark a scenario and print timing."""
    print(f"\n{'='*60}")
    print(f"Profiling: {name}")
    print('='*60)

    profiler = cProfile.Profile()

    start_time = time.time()
    profiler.enable()
    func()
    profiler.disable()
    elapsed = time.time() - start_time

    print(f"\nTotal time: {elapsed:.3f}s")

    s = io.StringIO()
    ps = pstats.Stats(profiler, stream=s).sort_stats(SortKey.CUMULATIVE)
    ps.print_stats(20)

    print("\nTop 20 functions by cumulative time:")
    print(s.getvalue())

    return profiler


def main():
    """Run all profiling scenarios."""
    print("PyMindMap Layout Optimizer Profiling")
    print("=" * 60)

    scenarios = [
        ("Small Map (20 nodes)", lambda: optimize(20, 200)),
        ("Medium Map (100 nodes)", lambda: optimize(100, 50)),
        ("Large Map (300 nodes)", lambda: optimize(300, 10)),
    ]

    for name, func in scenarios:
        profiler = benchmark_scenario(name, func)
        filename = f"profile_{name.lower().split(' (')[0].replace(' ', '_')}.prof"
        profiler.dump_stats(filename)
        print(f"Saved: {filename}")


if __name__ == "__main__":
    main()
