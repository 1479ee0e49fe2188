"""
Route Output Schema.

Wraps a way-point path with its length and estimated walking time.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .geometry import Point2D


# Average indoor walking speed (m/s)
DEFAULT_WALKING_SPEED_M_S = 1.4


def path_length(waypoints: Sequence[Point2D]) -> float:
    """
    Total polyline length of a path.

    Args:
        waypoints: Ordered path points

    Returns:
        Sum of segment lengths (0 for fewer than 2 points)
    """
    if len(waypoints) < 2:
        return 0.0

    return sum(a.distance_to(b) for a, b in zip(waypoints, waypoints[1:]))


def estimate_travel_time(distance: float, walking_speed_m_s: float = DEFAULT_WALKING_SPEED_M_S) -> float:
    """Walking time in seconds, rounded to 0.1 s."""
    if walking_speed_m_s <= 0:
        raise ValueError(f"Walking speed must be positive: {walking_speed_m_s}")
    return round(distance / walking_speed_m_s, 1)


@dataclass
class Route:
    """
    Planned route through a way-point graph.

    Attributes:
        waypoints: Node positions from snapped start to snapped goal
        node_ids: Graph node ids in the same order
        distance: Total route length
        estimated_time_s: Walking time at the configured speed

    Notes:
        - An empty route (no waypoints) means no path was found
    """

    waypoints: List[Point2D] = field(default_factory=list)
    node_ids: list = field(default_factory=list)
    distance: float = 0.0
    estimated_time_s: float = 0.0

    @property
    def found(self) -> bool:
        """Check if a path was found."""
        return len(self.waypoints) > 0

    def to_dict(self) -> dict:
        """Convert to the route response shape."""
        return {
            'route': [p.to_dict() for p in self.waypoints],
            'node_ids': list(self.node_ids),
            'distance': self.distance,
            'estimated_time': self.estimated_time_s,
        }


def create_route(
    waypoints: List[Point2D],
    node_ids: list,
    walking_speed_m_s: float = DEFAULT_WALKING_SPEED_M_S,
) -> Route:
    """
    Create a Route with derived length and travel time.

    Args:
        waypoints: Ordered path points
        node_ids: Matching node ids
        walking_speed_m_s: Walking speed used for the time estimate

    Returns:
        Route instance
    """
    distance = path_length(waypoints)
    return Route(
        waypoints=list(waypoints),
        node_ids=list(node_ids),
        distance=distance,
        estimated_time_s=estimate_travel_time(distance, walking_speed_m_s),
    )
