"""
Unit tests for the route planner.

Tests cover:
- Graph mode: snapping, optimality, tie-break, unreachable goals
- Grid mode: open grid, walls, blocked and out-of-bounds endpoints
- Route length and walking-time estimate
- Planner metrics
"""

import math

import pytest

from nav_core.proto import Point2D
from nav_core.navigation import (
    OccupancyGrid,
    RoutePlanner,
    RoutePlannerConfig,
    WaypointGraph,
    manhattan_distance,
    create_default_planner,
)
from nav_core.proto.route import path_length
from nav_core.metrics import get_metrics


# =============================================================================
# Graph Mode
# =============================================================================


class TestGraphRouting:
    """Tests for way-point graph routing."""

    def test_room_graph_shortest_length(self, room_graph):
        """Both corridors around the room are 15 m; the route is one of them."""
        planner = create_default_planner()

        path = planner.find_path(room_graph, Point2D(0.0, 0.0), Point2D(10.0, 5.0))

        assert path[0] == Point2D(0.0, 0.0)
        assert path[-1] == Point2D(10.0, 5.0)
        assert path_length(path) == pytest.approx(15.0)

    def test_equal_cost_tie_uses_insertion_order(self, room_graph):
        """node2 was inserted before node3, so its corridor wins the tie."""
        planner = create_default_planner()

        node_ids = planner.find_node_path(room_graph, Point2D(0.0, 0.0), Point2D(10.0, 5.0))

        assert node_ids == ["node1", "node2", "node4", "node5"]

    def test_deterministic(self, room_graph):
        planner = create_default_planner()
        start, goal = Point2D(0.0, 0.0), Point2D(10.0, 5.0)

        assert planner.find_node_path(room_graph, start, goal) == \
            planner.find_node_path(room_graph, start, goal)

    def test_endpoints_snapped(self, room_graph):
        """Route starts at the nearest node, not at the caller's point."""
        planner = create_default_planner()

        path = planner.find_path(room_graph, Point2D(0.4, -0.3), Point2D(9.5, 5.2))

        assert path[0] == Point2D(0.0, 0.0)
        assert path[-1] == Point2D(10.0, 5.0)

    def test_same_snapped_node(self, room_graph):
        planner = create_default_planner()

        route = planner.find_route(room_graph, Point2D(0.0, 0.0), Point2D(0.2, 0.1))

        assert route.node_ids == ["node1"]
        assert route.distance == 0.0
        assert route.found

    def test_direct_edge_preferred(self):
        """Straight edge beats a slightly longer detour."""
        graph = WaypointGraph()
        graph.add_node("a", 0, 0)
        graph.add_node("b", 10, 0)
        graph.add_node("c", 5, 1)
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        graph.add_edge("c", "b")

        planner = create_default_planner()

        assert planner.find_node_path(graph, Point2D(0, 0), Point2D(10, 0)) == ["a", "b"]

    def test_detour_when_direct_edge_missing(self):
        graph = WaypointGraph()
        graph.add_node("a", 0, 0)
        graph.add_node("b", 10, 0)
        graph.add_node("c", 5, 1)
        graph.add_edge("a", "c")
        graph.add_edge("c", "b")

        planner = create_default_planner()
        route = planner.find_route(graph, Point2D(0, 0), Point2D(10, 0))

        assert route.node_ids == ["a", "c", "b"]
        assert route.distance == pytest.approx(2 * math.sqrt(26))

    def test_empty_graph(self):
        planner = create_default_planner()

        route = planner.find_route(WaypointGraph(), Point2D(0, 0), Point2D(1, 1))

        assert not route.found
        assert route.to_dict()['route'] == []
        assert get_metrics().get_drop_count('snap_failed') == 1

    def test_disconnected_goal(self, room_graph_records):
        records = room_graph_records + [{"id": "island", "x": 50.0, "y": 50.0, "connectedNodes": []}]
        graph = WaypointGraph.from_records(records)
        planner = create_default_planner()

        path = planner.find_path(graph, Point2D(0, 0), Point2D(50, 50))

        assert path == []
        assert get_metrics().get_drop_count('no_path') == 1

    def test_one_way_edge(self):
        """Adjacency is followed as declared."""
        graph = WaypointGraph.from_records([
            {"id": "a", "x": 0, "y": 0, "connectedNodes": ["b"]},
            {"id": "b", "x": 5, "y": 0, "connectedNodes": []},
        ])
        planner = create_default_planner()

        assert planner.find_node_path(graph, Point2D(0, 0), Point2D(5, 0)) == ["a", "b"]
        assert planner.find_node_path(graph, Point2D(5, 0), Point2D(0, 0)) == []

    def test_dangling_neighbor_ignored(self):
        graph = WaypointGraph.from_records([
            {"id": "a", "x": 0, "y": 0, "connectedNodes": ["ghost", "b"]},
            {"id": "b", "x": 5, "y": 0, "connectedNodes": ["a"]},
        ])
        planner = create_default_planner()

        assert planner.find_node_path(graph, Point2D(0, 0), Point2D(5, 0)) == ["a", "b"]


class TestRouteOutput:
    """Tests for the route result."""

    def test_route_distance_and_time(self, room_graph):
        planner = create_default_planner()

        route = planner.find_route(room_graph, Point2D(0.0, 0.0), Point2D(10.0, 5.0))

        assert route.distance == pytest.approx(15.0)
        assert route.estimated_time_s == pytest.approx(10.7)

    def test_route_to_dict(self, room_graph):
        planner = create_default_planner()

        result = planner.find_route(room_graph, Point2D(0.0, 0.0), Point2D(10.0, 5.0)).to_dict()

        assert result['route'][0] == {'x': 0.0, 'y': 0.0}
        assert result['distance'] == pytest.approx(15.0)
        assert result['estimated_time'] == pytest.approx(10.7)
        assert len(result['node_ids']) == 4

    def test_custom_walking_speed(self, room_graph):
        planner = RoutePlanner(RoutePlannerConfig(walking_speed_m_s=1.0))

        route = planner.find_route(room_graph, Point2D(0.0, 0.0), Point2D(10.0, 5.0))

        assert route.estimated_time_s == pytest.approx(15.0)

    def test_invalid_walking_speed(self):
        with pytest.raises(ValueError):
            RoutePlannerConfig(walking_speed_m_s=0.0)

    def test_metrics_recorded(self, room_graph):
        planner = create_default_planner()
        planner.find_route(room_graph, Point2D(0.0, 0.0), Point2D(10.0, 5.0))

        metrics = get_metrics()
        assert metrics.get_counter('route_search_attempts') == 1
        assert metrics.get_counter('route_search_success') == 1
        assert metrics.get_histogram_stats('route_distance_m')['max'] == pytest.approx(15.0)


# =============================================================================
# Grid Mode
# =============================================================================


class TestGridRouting:
    """Tests for occupancy grid routing."""

    def test_open_grid_corner_to_corner(self, open_grid_5x5):
        """Manhattan-optimal path: 8 moves, 9 cells."""
        planner = create_default_planner()

        path = planner.find_grid_path(open_grid_5x5, (0, 0), (4, 4))

        assert len(path) == 9
        assert path[0] == (0, 0)
        assert path[-1] == (4, 4)
        for a, b in zip(path, path[1:]):
            assert manhattan_distance(a, b) == 1

    def test_corridor_zig_zag(self, corridor_grid):
        """Walls force the only route through both gaps."""
        planner = create_default_planner()

        path = planner.find_grid_path(corridor_grid, (0, 0), (4, 0))

        assert len(path) == 13
        assert (1, 4) in path
        assert (3, 0) in path
        assert all(corridor_grid.is_walkable(cell) for cell in path)

    def test_enclosed_goal(self, open_grid_5x5):
        """Goal surrounded by walls is unreachable."""
        grid = open_grid_5x5.with_walls([(1, 2), (3, 2), (2, 1), (2, 3)])
        planner = create_default_planner()

        assert planner.find_grid_path(grid, (0, 0), (2, 2)) == []
        assert get_metrics().get_drop_count('no_path') == 1

    def test_goal_on_wall(self, corridor_grid):
        planner = create_default_planner()

        assert planner.find_grid_path(corridor_grid, (0, 0), (1, 0)) == []
        assert get_metrics().get_drop_count('goal_blocked') == 1

    def test_out_of_bounds(self, open_grid_5x5):
        planner = create_default_planner()

        assert planner.find_grid_path(open_grid_5x5, (0, 0), (5, 5)) == []
        assert planner.find_grid_path(open_grid_5x5, (-1, 0), (2, 2)) == []
        assert get_metrics().get_drop_count('out_of_bounds') == 2

    def test_start_equals_goal(self, open_grid_5x5):
        planner = create_default_planner()

        assert planner.find_grid_path(open_grid_5x5, (2, 2), (2, 2)) == [(2, 2)]

    def test_start_on_wall_not_checked(self):
        """Search still leaves a walled start cell."""
        grid = OccupancyGrid.from_rows([[1, 0]])
        planner = create_default_planner()

        assert planner.find_grid_path(grid, (0, 0), (0, 1)) == [(0, 0), (0, 1)]

    def test_grid_route(self, open_grid_5x5):
        planner = create_default_planner()

        route = planner.find_grid_route(open_grid_5x5, (0, 0), (4, 4))

        assert route.waypoints[-1] == Point2D(4.0, 4.0)
        assert route.node_ids[0] == (0, 0)
        assert route.distance == pytest.approx(8.0)
        assert route.estimated_time_s == pytest.approx(5.7)

    def test_grid_route_cell_size(self):
        grid = OccupancyGrid.open_grid(3, 3, cell_size_m=0.5)
        planner = create_default_planner()

        route = planner.find_grid_route(grid, (0, 0), (2, 2))

        assert route.distance == pytest.approx(2.0)

    def test_manhattan_distance(self):
        assert manhattan_distance((0, 0), (3, 4)) == 7
        assert manhattan_distance((2, 5), (2, 5)) == 0
