"""
Navigation Module: Spatial models and A* route planning.

Key classes:
- WaypointGraph: Sparse way-point graph (id -> node arena)
- OccupancyGrid: Dense 0/1 walkability grid
- RoutePlanner: A* over either model
"""

from .astar import (
    SearchNode,
    SearchResult,
    astar_search,
    reconstruct_path,
)
from .waypoint_graph import (
    GraphNode,
    WaypointGraph,
)
from .occupancy_grid import (
    OccupancyGrid,
    Cell,
    GRID_MOVES,
)
from .route_planner import (
    RoutePlanner,
    RoutePlannerConfig,
    manhattan_distance,
    create_default_planner,
)

__all__ = [
    # A* core
    'SearchNode',
    'SearchResult',
    'astar_search',
    'reconstruct_path',
    # Spatial models
    'GraphNode',
    'WaypointGraph',
    'OccupancyGrid',
    'Cell',
    'GRID_MOVES',
    # Planner
    'RoutePlanner',
    'RoutePlannerConfig',
    'manhattan_distance',
    'create_default_planner',
]
