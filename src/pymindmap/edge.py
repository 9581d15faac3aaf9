"""
Connection between two nodes.
"""

from __future__ import annotations

from enum import IntEnum

from .errors import InvalidArgument
from .node import Node


class ArrowMode(IntEnum):
    """How arrow heads are drawn on an edge."""
    Single = 0
    Double = 1
    Hidden = 2


class Edge:
    """
    Edge between two distinct nodes.

    The stored direction (source -> target) only matters for display;
    connectivity queries on the graph treat edges as undirected.

    Attributes:
        source: Source node
        target: Target node
        text: Label drawn on the edge
        arrow_mode: Arrow head style
        dashed_line: Draw a dashed line
        reversed: Draw the arrow from target to source
    """

    def __init__(
        self,
        source: Node,
        target: Node,
        text: str = "",
        arrow_mode: ArrowMode = ArrowMode.Single,
        dashed_line: bool = False,
        reversed: bool = False
    ):
        if source is target:
            raise InvalidArgument("Cannot create an edge from a node to itself")
        self.source = source
        self.target = target
        self.text = text
        self.arrow_mode = arrow_mode
        self.dashed_line = dashed_line
        self.reversed = reversed

    def connects(self, index0: int, index1: int) -> bool:
        """Check if this edge joins the two node indices, in either direction."""
        s = self.source.index
        t = self.target.index
        return (s == index0 and t == index1) or (s == index1 and t == index0)

    def other(self, node: Node) -> Node:
        """Get the endpoint opposite to node."""
        if node is self.source:
            return self.target
        if node is self.target:
            return self.source
        raise InvalidArgument(f"Node {node.index} is not an endpoint of this edge")

    def length(self) -> float:
        """Center-to-center distance between the endpoints."""
        return self.source.location.distance_to(self.target.location)

    def __repr__(self) -> str:
        return f"Edge({self.source.index} -> {self.target.index})"
