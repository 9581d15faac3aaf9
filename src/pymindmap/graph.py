"""
Mind map graph.

The Graph owns the nodes and edges of a diagram and answers connectivity
queries. Node indices are assigned on insertion and never renumbered;
edges are kept unique per unordered node pair.
"""

from __future__ import annotations

import logging
from typing import Union

from .edge import Edge
from .errors import InvalidArgument, InvalidState, NotFound
from .node import Node
from .rectangle import Rectangle

logger = logging.getLogger(__name__)

NodeRef = Union[Node, int]


class Graph:
    """
    Container of nodes and edges.

    Edges incident to each node are indexed so that connectivity queries
    cost O(degree).
    """

    def __init__(self):
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []
        self._node_map: dict[int, Node] = {}
        self._incident: dict[int, list[Edge]] = {}
        self._count = 0

    def clear(self) -> None:
        """Remove all nodes and edges."""
        self._nodes = []
        self._edges = []
        self._node_map = {}
        self._incident = {}
        self._count = 0

    def add_node(self, node: Node) -> None:
        """
        Add a node.

        A node without an index (index < 0) gets the next unused index.
        A node that already carries an index, e.g. one loaded from a file,
        keeps it and later indices are allocated above it.

        Raises:
            InvalidState: If the node, or another node with its index, is
                already in the graph
        """
        if node.index >= 0 and node.index in self._node_map:
            raise InvalidState(f"Node {node.index} is already in the graph")

        if node.index < 0:
            node.index = self._count
        self._count = max(self._count, node.index + 1)

        self._nodes.append(node)
        self._node_map[node.index] = node
        self._incident[node.index] = []
        logger.debug("Added node %d", node.index)

    def delete_node(self, index: int) -> None:
        """
        Delete a node and all edges connected to it.

        Raises:
            NotFound: If no node has the given index
        """
        node = self._node_map.get(index)
        if node is None:
            raise NotFound(f"No node with index {index}")

        incident = self._incident.pop(index)
        for edge in incident:
            other = edge.other(node)
            self._incident[other.index].remove(edge)
        doomed = set(map(id, incident))
        self._edges = [e for e in self._edges if id(e) not in doomed]

        self._nodes.remove(node)
        del self._node_map[index]
        logger.debug("Deleted node %d and %d edge(s)", index, len(incident))

    def add_edge(self, edge: Edge) -> None:
        """
        Add an edge.

        Raises:
            InvalidArgument: If an endpoint is not in the graph, the endpoints
                are the same node, or the two nodes are already connected
        """
        source = edge.source
        target = edge.target
        if source is target or source.index == target.index:
            raise InvalidArgument("Cannot connect a node to itself")
        for endpoint in (source, target):
            if self._node_map.get(endpoint.index) is not endpoint:
                raise InvalidArgument(f"Node {endpoint.index} is not in the graph")
        if self.are_directly_connected(source, target):
            raise InvalidArgument(
                f"Nodes {source.index} and {target.index} are already connected"
            )

        self._edges.append(edge)
        self._incident[source.index].append(edge)
        self._incident[target.index].append(edge)
        logger.debug("Added edge %d -> %d", source.index, target.index)

    def add_edge_between(self, index0: int, index1: int, **attributes) -> Edge:
        """
        Create and add an edge between two nodes given by index.

        Args:
            index0: Source node index
            index1: Target node index
            **attributes: Display attributes passed to Edge

        Returns:
            The new edge
        """
        source = self._node_map.get(index0)
        target = self._node_map.get(index1)
        if source is None or target is None:
            missing = index0 if source is None else index1
            raise InvalidArgument(f"Node {missing} is not in the graph")
        if source is target:
            raise InvalidArgument("Cannot connect a node to itself")
        edge = Edge(source, target, **attributes)
        self.add_edge(edge)
        return edge

    def delete_edge(self, index0: int, index1: int) -> None:
        """
        Delete the edge joining two nodes, in either direction.

        Raises:
            NotFound: If the nodes are not connected
        """
        for edge in self._incident.get(index0, []):
            if edge.connects(index0, index1):
                self._incident[edge.source.index].remove(edge)
                self._incident[edge.target.index].remove(edge)
                self._edges.remove(edge)
                logger.debug("Deleted edge %d - %d", index0, index1)
                return
        raise NotFound(f"No edge between nodes {index0} and {index1}")

    def are_directly_connected(self, node0: NodeRef, node1: NodeRef) -> bool:
        """Check if an edge joins the two nodes, regardless of direction."""
        index0 = self._index_of(node0)
        index1 = self._index_of(node1)
        return any(e.connects(index0, index1) for e in self._incident.get(index0, []))

    def num_nodes(self) -> int:
        return len(self._nodes)

    def num_edges(self) -> int:
        return len(self._edges)

    def get_edges_from_node(self, node: NodeRef) -> list[Edge]:
        """Edges whose stored source is node."""
        index = self._index_of(node)
        return [e for e in self._incident.get(index, []) if e.source.index == index]

    def get_edges_to_node(self, node: NodeRef) -> list[Edge]:
        """Edges whose stored target is node."""
        index = self._index_of(node)
        return [e for e in self._incident.get(index, []) if e.target.index == index]

    def get_edges(self) -> list[Edge]:
        return list(self._edges)

    def get_node(self, index: int) -> Node | None:
        """Get node by index, or None if there is no such node."""
        return self._node_map.get(index)

    def get_nodes(self) -> list[Node]:
        return list(self._nodes)

    def get_nodes_connected_to_node(self, node: NodeRef) -> list[Node]:
        """
        Distinct neighbors of node across all incident edges.

        Returns:
            Neighbor nodes in the order their edges were added
        """
        index = self._index_of(node)
        neighbors: list[Node] = []
        seen: set[int] = set()
        for edge in self._incident.get(index, []):
            other = edge.target if edge.source.index == index else edge.source
            if other.index not in seen:
                seen.add(other.index)
                neighbors.append(other)
        return neighbors

    def bounds(self) -> Rectangle:
        """Union of all node bounding boxes, empty for an empty graph."""
        rect = Rectangle.empty()
        for node in self._nodes:
            rect = rect.union(node.bounds())
        return rect

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        if isinstance(node, Node):
            return self._node_map.get(node.index) is node
        if isinstance(node, int):
            return node in self._node_map
        return False

    @staticmethod
    def _index_of(node: NodeRef) -> int:
        return node if isinstance(node, int) else node.index
