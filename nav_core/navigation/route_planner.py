"""
Route Planner (A* over graphs and grids).

Graph mode:
    Start and goal points are snapped to their nearest way-points, then A*
    runs with Euclidean edge costs and a straight-line heuristic. Equal
    f-scores are broken by node insertion order.

Grid mode:
    4-connected moves with unit step cost and a Manhattan heuristic. Equal
    f-scores are broken by (row, col).

Both modes run synchronously to completion and return an empty path when
the goal is unreachable.
"""

from typing import Hashable, List, Optional
from dataclasses import dataclass
import logging

from nav_core.proto.geometry import Point2D
from nav_core.proto.route import Route, create_route, DEFAULT_WALKING_SPEED_M_S
from nav_core.navigation.astar import astar_search, SearchResult
from nav_core.navigation.waypoint_graph import WaypointGraph
from nav_core.navigation.occupancy_grid import OccupancyGrid, Cell
from nav_core.metrics import get_metrics

logger = logging.getLogger(__name__)


def manhattan_distance(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass
class RoutePlannerConfig:
    """
    Configuration for the route planner.

    Attributes:
        walking_speed_m_s: Speed used for route travel-time estimates (m/s)
    """

    walking_speed_m_s: float = DEFAULT_WALKING_SPEED_M_S

    def __post_init__(self):
        """Validate configuration."""
        if self.walking_speed_m_s <= 0:
            raise ValueError(f"Walking speed must be positive: {self.walking_speed_m_s}")


class RoutePlanner:
    """
    Plan routes through a way-point graph or an occupancy grid.

    Usage:
        planner = RoutePlanner()

        # Graph: snap arbitrary points to way-points
        route = planner.find_route(graph, user_position, destination)
        if route.found:
            print(f"{route.distance:.1f} m, ~{route.estimated_time_s} s")

        # Grid: cell to cell
        cells = planner.find_grid_path(grid, (0, 0), (4, 4))
    """

    def __init__(self, config: Optional[RoutePlannerConfig] = None):
        """
        Initialize route planner.

        Args:
            config: Planner configuration (uses defaults if None)
        """
        self.config = config or RoutePlannerConfig()
        self.metrics = get_metrics()

    # ------------------------------------------------------------------
    # Graph mode
    # ------------------------------------------------------------------

    def find_node_path(self, graph: WaypointGraph, start: Point2D, goal: Point2D) -> List[Hashable]:
        """
        Find the node ids of the shortest route between two points.

        Args:
            graph: Way-point graph
            start: Start point (snapped to nearest node)
            goal: Goal point (snapped to nearest node)

        Returns:
            Node ids from snapped start to snapped goal, or [] if the graph
            is empty or the goal is unreachable
        """
        self.metrics.increment('route_search_attempts')

        start_node = graph.nearest_node(start)
        goal_node = graph.nearest_node(goal)
        if start_node is None or goal_node is None:
            self.metrics.increment_drop('snap_failed')
            logger.debug("Cannot snap endpoints on an empty graph")
            return []

        goal_position = goal_node.position

        def neighbors(node_id):
            position = graph[node_id].position
            return [(n.node_id, position.distance_to(n.position)) for n in graph.neighbors(node_id)]

        result = astar_search(
            start_node.node_id,
            goal_node.node_id,
            neighbors=neighbors,
            heuristic=lambda node_id: graph[node_id].position.distance_to(goal_position),
            tie_key=graph.index_of,
        )

        self._record(result)
        return result.path

    def find_path(self, graph: WaypointGraph, start: Point2D, goal: Point2D) -> List[Point2D]:
        """
        Find the shortest route between two points as way-point positions.

        The first point is the snapped start node, not the caller's start.

        Returns:
            Positions from snapped start to snapped goal, or [] if no path
        """
        return [graph[node_id].position for node_id in self.find_node_path(graph, start, goal)]

    def find_route(self, graph: WaypointGraph, start: Point2D, goal: Point2D) -> Route:
        """
        Find a route with its length and walking time.

        Returns:
            Route (empty if no path)
        """
        node_ids = self.find_node_path(graph, start, goal)
        waypoints = [graph[node_id].position for node_id in node_ids]

        route = create_route(waypoints, node_ids, self.config.walking_speed_m_s)
        if route.found:
            self.metrics.record_histogram('route_distance_m', route.distance)
        return route

    # ------------------------------------------------------------------
    # Grid mode
    # ------------------------------------------------------------------

    def find_grid_path(self, grid: OccupancyGrid, start: Cell, goal: Cell) -> List[Cell]:
        """
        Find the shortest 4-connected path between two cells.

        Args:
            grid: Occupancy grid
            start: Start cell (row, col); its own walkability is not checked
            goal: Goal cell (row, col)

        Returns:
            Cells from start to goal inclusive, or [] if no path exists
        """
        self.metrics.increment('route_search_attempts')

        start = (int(start[0]), int(start[1]))
        goal = (int(goal[0]), int(goal[1]))

        if not (grid.in_bounds(start) and grid.in_bounds(goal)):
            self.metrics.increment_drop('out_of_bounds')
            logger.debug("Grid endpoint out of bounds: %s -> %s", start, goal)
            return []

        if grid.is_wall(goal):
            self.metrics.increment_drop('goal_blocked')
            return []

        result = astar_search(
            start,
            goal,
            neighbors=lambda cell: [(n, 1) for n in grid.neighbors(cell)],
            heuristic=lambda cell: manhattan_distance(cell, goal),
        )

        self._record(result)
        return result.path

    def find_grid_route(self, grid: OccupancyGrid, start: Cell, goal: Cell) -> Route:
        """
        Grid path converted to floor-plan points.

        Returns:
            Route whose node_ids are the cells (empty if no path)
        """
        cells = self.find_grid_path(grid, start, goal)
        waypoints = [grid.cell_to_point(cell) for cell in cells]
        return create_route(waypoints, cells, self.config.walking_speed_m_s)

    def _record(self, result: SearchResult):
        """Update search metrics."""
        self.metrics.record_histogram('route_search_expansions', result.expansions)
        if result.found:
            self.metrics.increment('route_search_success')
        else:
            self.metrics.increment_drop('no_path')


def create_default_planner() -> RoutePlanner:
    """
    Create route planner with default configuration.

    Returns:
        Configured RoutePlanner instance
    """
    config = RoutePlannerConfig(
        walking_speed_m_s=DEFAULT_WALKING_SPEED_M_S,
    )

    return RoutePlanner(config)
