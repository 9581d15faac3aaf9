"""
Mind map document data.

MindMapData is the handle shared by the editor and the layout optimizer:
it owns the Graph plus document-wide display settings.
"""

from __future__ import annotations

from .constants import (
    MIND_MAP_DEFAULT_BACKGROUND_COLOR,
    MIND_MAP_DEFAULT_EDGE_COLOR,
    MIND_MAP_DEFAULT_GRID_COLOR,
    MIND_MAP_DEFAULT_EDGE_WIDTH,
    MIND_MAP_DEFAULT_TEXT_SIZE,
    NODE_DEFAULT_CORNER_RADIUS,
)
from .edge import Edge
from .graph import Graph


class MindMapData:
    """
    Mind map document.

    Attributes:
        file_name: File the document was loaded from or saved to
        version: Application version that wrote the document
        background_color: Canvas color
        edge_color: Default edge color
        grid_color: Grid line color
        edge_width: Edge line width
        text_size: Default text size
        corner_radius: Node corner radius
    """

    def __init__(self, file_name: str = ""):
        self.file_name = file_name
        self.version = ""
        self.background_color = MIND_MAP_DEFAULT_BACKGROUND_COLOR
        self.edge_color = MIND_MAP_DEFAULT_EDGE_COLOR
        self.grid_color = MIND_MAP_DEFAULT_GRID_COLOR
        self.edge_width = MIND_MAP_DEFAULT_EDGE_WIDTH
        self.text_size = MIND_MAP_DEFAULT_TEXT_SIZE
        self.corner_radius = NODE_DEFAULT_CORNER_RADIUS
        self._graph = Graph()

    @property
    def graph(self) -> Graph:
        return self._graph

    def copy(self) -> MindMapData:
        """
        Deep copy of the document.

        Copied nodes keep their indices and copied edges are bound to the
        copied nodes, so the copy shares no mutable state with the original.
        """
        other = MindMapData(self.file_name)
        other.version = self.version
        other.background_color = self.background_color
        other.edge_color = self.edge_color
        other.grid_color = self.grid_color
        other.edge_width = self.edge_width
        other.text_size = self.text_size
        other.corner_radius = self.corner_radius
        self._copy_graph_into(other._graph)
        return other

    def _copy_graph_into(self, graph: Graph) -> None:
        for node in self._graph.get_nodes():
            graph.add_node(node.copy())

        for edge in self._graph.get_edges():
            graph.add_edge(Edge(
                graph.get_node(edge.source.index),
                graph.get_node(edge.target.index),
                text=edge.text,
                arrow_mode=edge.arrow_mode,
                dashed_line=edge.dashed_line,
                reversed=edge.reversed
            ))
