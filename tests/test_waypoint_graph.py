"""
Unit tests for the way-point graph.

Tests cover:
- Node and edge construction
- Record import/export ({id, x, y, connectedNodes})
- Neighbor lookup with dangling ids
- Nearest-node snapping and its tie-break
"""

import pytest

from nav_core.proto import Point2D
from nav_core.navigation import GraphNode, WaypointGraph


class TestGraphConstruction:
    """Tests for building graphs."""

    def test_add_node(self):
        graph = WaypointGraph()
        node = graph.add_node("lobby", 1, 2)

        assert len(graph) == 1
        assert "lobby" in graph
        assert node.position == Point2D(1.0, 2.0)
        assert node.neighbor_ids == frozenset()

    def test_duplicate_node_rejected(self):
        graph = WaypointGraph()
        graph.add_node("a", 0, 0)

        with pytest.raises(ValueError):
            graph.add_node("a", 1, 1)

    def test_add_edge_symmetric(self):
        graph = WaypointGraph()
        graph.add_node("a", 0, 0)
        graph.add_node("b", 3, 4)

        graph.add_edge("a", "b")

        assert graph["a"].neighbor_ids == {"b"}
        assert graph["b"].neighbor_ids == {"a"}
        assert graph.is_symmetric()
        assert graph.edge_length("a", "b") == pytest.approx(5.0)

    def test_add_edge_one_way(self):
        graph = WaypointGraph()
        graph.add_node("a", 0, 0)
        graph.add_node("b", 1, 0)

        graph.add_edge("a", "b", bidirectional=False)

        assert [n.node_id for n in graph.neighbors("a")] == ["b"]
        assert graph.neighbors("b") == []
        assert not graph.is_symmetric()

    def test_add_edge_unknown_node(self):
        graph = WaypointGraph()
        graph.add_node("a", 0, 0)

        with pytest.raises(KeyError):
            graph.add_edge("a", "missing")

    def test_construct_from_nodes(self):
        nodes = [
            GraphNode("a", Point2D(0.0, 0.0), frozenset({"b"})),
            GraphNode("b", Point2D(1.0, 0.0), frozenset({"a"})),
        ]
        graph = WaypointGraph(nodes)

        assert graph.node_ids == ["a", "b"]
        assert graph.index_of("b") == 1


class TestGraphRecords:
    """Tests for record import/export."""

    def test_from_records(self, room_graph):
        assert len(room_graph) == 5
        assert room_graph["node4"].neighbor_ids == {"node2", "node3", "node5"}
        assert room_graph["node5"].position == Point2D(10.0, 5.0)
        assert room_graph.is_symmetric()

    def test_to_records_round_trip(self, room_graph, room_graph_records):
        records = room_graph.to_records()

        assert records == room_graph_records

    def test_neighbor_ids_key_accepted(self):
        graph = WaypointGraph.from_records([
            {"id": 1, "x": 0, "y": 0, "neighbor_ids": [2]},
            {"id": 2, "x": 1, "y": 0, "neighbor_ids": [1]},
        ])

        assert graph[1].neighbor_ids == {2}

    def test_record_without_neighbors(self):
        graph = WaypointGraph.from_records([{"id": "solo", "x": 0, "y": 0}])

        assert graph.neighbors("solo") == []


class TestNeighbors:
    """Tests for neighbor lookup."""

    def test_neighbors_in_insertion_order(self, room_graph):
        neighbors = room_graph.neighbors("node4")

        assert [n.node_id for n in neighbors] == ["node2", "node3", "node5"]

    def test_dangling_neighbor_skipped(self):
        """Ids that are not in the graph are ignored."""
        graph = WaypointGraph.from_records([
            {"id": "a", "x": 0, "y": 0, "connectedNodes": ["b", "ghost"]},
            {"id": "b", "x": 1, "y": 0, "connectedNodes": ["a"]},
        ])

        assert [n.node_id for n in graph.neighbors("a")] == ["b"]
        assert graph.is_symmetric()


class TestNearestNode:
    """Tests for snapping points to nodes."""

    def test_exact_node_position(self, room_graph):
        assert room_graph.nearest_node(Point2D(5.0, 5.0)).node_id == "node4"

    def test_nearby_point(self, room_graph):
        assert room_graph.nearest_node(Point2D(9.0, 6.2)).node_id == "node5"

    def test_tie_goes_to_first_inserted(self):
        """Equidistant nodes: the earlier one wins."""
        graph = WaypointGraph()
        graph.add_node("first", 0, 0)
        graph.add_node("second", 2, 0)

        assert graph.nearest_node(Point2D(1.0, 0.0)).node_id == "first"

    def test_empty_graph(self):
        assert WaypointGraph().nearest_node(Point2D(0.0, 0.0)) is None
