"""
PyMindMap: mind map graph model and automatic layout optimization.

The core of a mind map editor: nodes, edges and the graph that owns them,
plus a layout optimizer that re-arranges node positions on a grid.
"""

__version__ = "0.1.0"

from .errors import MindMapError, InvalidArgument, NotFound, InvalidState, PerformanceWarning
from .geom import Point, Size
from .rectangle import Rectangle
from .node import Node
from .edge import Edge, ArrowMode
from .graph import Graph
from .grid import Grid
from .mind_map_data import MindMapData
from .layout_optimizer import LayoutOptimizer, OptimizationInfo, OptimizerConfig

__all__ = [
    "MindMapError",
    "InvalidArgument",
    "NotFound",
    "InvalidState",
    "PerformanceWarning",
    "Point",
    "Size",
    "Rectangle",
    "Node",
    "Edge",
    "ArrowMode",
    "Graph",
    "Grid",
    "MindMapData",
    "LayoutOptimizer",
    "OptimizationInfo",
    "OptimizerConfig",
]
