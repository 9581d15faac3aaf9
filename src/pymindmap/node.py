"""
Diagram node.

A node is a sized rectangle centred on its location. Display attributes
(text, colors, image) travel with the node but are never read by layout.
"""

from __future__ import annotations

from typing import Optional

from .constants import (
    NODE_MIN_WIDTH,
    NODE_MIN_HEIGHT,
    NODE_DEFAULT_COLOR,
    NODE_DEFAULT_TEXT_COLOR,
)
from .geom import Point, Size
from .rectangle import Rectangle


class Node:
    """
    Mind map node.

    Attributes:
        index: Identity within a Graph, -1 until the node is attached
        location: Center of the node in diagram coordinates
        size: Bounding box dimensions
        text: Node text
        color: Background color
        text_color: Text color
        image_ref: Reference to an attached image, 0 for none
    """

    def __init__(
        self,
        location: Optional[Point] = None,
        size: Optional[Size] = None,
        index: int = -1,
        text: str = "",
        color: str = NODE_DEFAULT_COLOR,
        text_color: str = NODE_DEFAULT_TEXT_COLOR,
        image_ref: int = 0
    ):
        self.index = index
        self.location = location if location is not None else Point()
        self.size = size if size is not None else Size(NODE_MIN_WIDTH, NODE_MIN_HEIGHT)
        self.text = text
        self.color = color
        self.text_color = text_color
        self.image_ref = image_ref

    def bounds(self) -> Rectangle:
        """Bounding box, location +/- size / 2."""
        return Rectangle.from_center(
            self.location.x, self.location.y, self.size.width, self.size.height
        )

    def copy(self) -> Node:
        """Copy of this node, including its index."""
        return Node(
            location=Point(self.location.x, self.location.y),
            size=Size(self.size.width, self.size.height),
            index=self.index,
            text=self.text,
            color=self.color,
            text_color=self.text_color,
            image_ref=self.image_ref
        )

    def __repr__(self) -> str:
        return f"Node(index={self.index}, location={self.location!r}, size={self.size!r})"
