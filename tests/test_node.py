"""Tests for nodes and edges."""

import pytest
from pymindmap.constants import NODE_MIN_WIDTH, NODE_MIN_HEIGHT
from pymindmap.edge import Edge, ArrowMode
from pymindmap.errors import InvalidArgument
from pymindmap.geom import Point, Size
from pymindmap.node import Node


class TestNode:
    """Test Node class."""

    def test_create_empty_node(self):
        """Test creating node with defaults."""
        node = Node()
        assert node.index == -1
        assert node.location == Point(0, 0)
        assert node.size == Size(NODE_MIN_WIDTH, NODE_MIN_HEIGHT)
        assert node.text == ""
        assert node.image_ref == 0

    def test_bounds(self):
        """Test bounding box is location +/- size / 2."""
        node = Node(Point(100, 50), Size(40, 20))
        b = node.bounds()
        assert (b.x, b.X, b.y, b.Y) == (80, 120, 40, 60)

    def test_copy(self):
        """Test copy keeps index and attributes but shares no state."""
        node = Node(Point(1, 2), Size(3, 4), index=7, text="root", color="#123456")
        other = node.copy()

        assert other is not node
        assert other.index == 7
        assert other.location == node.location
        assert other.size == node.size
        assert other.text == "root"
        assert other.color == "#123456"

        other.location.x = 99
        assert node.location.x == 1


class TestEdge:
    """Test Edge class."""

    def test_create_edge(self):
        """Test creating edge with defaults."""
        a = Node(index=0)
        b = Node(index=1)
        edge = Edge(a, b)

        assert edge.source is a
        assert edge.target is b
        assert edge.arrow_mode == ArrowMode.Single
        assert not edge.dashed_line
        assert not edge.reversed

    def test_self_loop_rejected(self):
        """Test edge from a node to itself."""
        a = Node(index=0)
        with pytest.raises(InvalidArgument):
            Edge(a, a)

    def test_connects_either_direction(self):
        """Test connects() ignores direction."""
        edge = Edge(Node(index=3), Node(index=5))
        assert edge.connects(3, 5)
        assert edge.connects(5, 3)
        assert not edge.connects(3, 4)

    def test_other(self):
        """Test opposite endpoint lookup."""
        a = Node(index=0)
        b = Node(index=1)
        edge = Edge(a, b)

        assert edge.other(a) is b
        assert edge.other(b) is a
        with pytest.raises(InvalidArgument):
            edge.other(Node(index=2))

    def test_length(self):
        """Test center-to-center length."""
        edge = Edge(Node(Point(0, 0)), Node(Point(30, 40)))
        assert edge.length() == pytest.approx(50.0)

    def test_arrow_mode_names(self):
        """Test arrow mode values."""
        assert ArrowMode.Single == 0
        assert ArrowMode.Double == 1
        assert ArrowMode.Hidden == 2
        assert ArrowMode['Hidden'] == ArrowMode.Hidden
