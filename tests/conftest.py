"""
Pytest configuration and shared fixtures for indoor navigation tests.

This module provides reusable fixtures for testing the signal model,
filters, position solver, localization pipeline and route planner.
"""

import sys
import math
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from nav_core.proto import Anchor, Point2D, RangedAnchor
from nav_core.navigation import OccupancyGrid, WaypointGraph
from nav_core.metrics import get_metrics


# =============================================================================
# Metrics Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_metrics():
    """
    Reset the global metrics collector around every test.

    Components hold a reference to the singleton, so it is reset in place
    rather than replaced.
    """
    get_metrics().reset()
    yield get_metrics()
    get_metrics().reset()


# =============================================================================
# Anchor Configuration Fixtures
# =============================================================================


@pytest.fixture
def anchor_positions_2d() -> List[Tuple[float, float]]:
    """
    Equilateral-ish triangle of anchors.

    - A0 at origin
    - A1 at (10, 0)
    - A2 at (5, 8.66)

    Returns:
        List of (x, y) tuples in meters.
    """
    return [
        (0.0, 0.0),
        (10.0, 0.0),
        (5.0, 8.66),
    ]


@pytest.fixture
def square_anchor_positions() -> List[Tuple[float, float]]:
    """
    Four anchors at the corners of a 10 m square.

    Returns:
        List of (x, y) tuples in meters.
    """
    return [
        (0.0, 0.0),
        (10.0, 0.0),
        (0.0, 10.0),
        (10.0, 10.0),
    ]


@pytest.fixture
def square_beacons(square_anchor_positions) -> Dict[str, Anchor]:
    """
    Beacon anchors at the square corners, all calibrated to -59 dBm.

    Returns:
        Mapping of anchor id -> Anchor.
    """
    return {
        f"B{i}": Anchor(f"B{i}", Point2D(x, y), reference_power=-59)
        for i, (x, y) in enumerate(square_anchor_positions)
    }


# =============================================================================
# Spatial Model Fixtures
# =============================================================================


@pytest.fixture
def room_graph_records() -> List[Dict]:
    """
    Five-node room graph in {id, x, y, connectedNodes} record form.

    node1(0,0) - node2(5,0) - node4(5,5) - node5(10,5)
    node1(0,0) - node3(0,5) - node4(5,5)
    """
    return [
        {"id": "node1", "x": 0.0, "y": 0.0, "connectedNodes": ["node2", "node3"]},
        {"id": "node2", "x": 5.0, "y": 0.0, "connectedNodes": ["node1", "node4"]},
        {"id": "node3", "x": 0.0, "y": 5.0, "connectedNodes": ["node1", "node4"]},
        {"id": "node4", "x": 5.0, "y": 5.0, "connectedNodes": ["node2", "node3", "node5"]},
        {"id": "node5", "x": 10.0, "y": 5.0, "connectedNodes": ["node4"]},
    ]


@pytest.fixture
def room_graph(room_graph_records) -> WaypointGraph:
    """Five-node room graph."""
    return WaypointGraph.from_records(room_graph_records)


@pytest.fixture
def open_grid_5x5() -> OccupancyGrid:
    """5x5 grid with no walls."""
    return OccupancyGrid.open_grid(5, 5)


@pytest.fixture
def corridor_grid() -> OccupancyGrid:
    """
    5x5 grid with two staggered walls forcing a zig-zag.

    Only route from (0, 0) to (4, 0) runs right along row 0, down column 4,
    left along row 2, then down column 0.
    """
    return OccupancyGrid.from_rows([
        [0, 0, 0, 0, 0],
        [1, 1, 1, 1, 0],
        [0, 0, 0, 0, 0],
        [0, 1, 1, 1, 1],
        [0, 0, 0, 0, 0],
    ])


# =============================================================================
# Helper Functions
# =============================================================================


def calculate_distance_2d(
    p1: Tuple[float, float], p2: Tuple[float, float]
) -> float:
    """
    Calculate Euclidean distance between two 2D points.

    Args:
        p1: First point (x, y).
        p2: Second point (x, y).

    Returns:
        Distance in the same units as input.
    """
    return math.sqrt((p1[0] - p2[0]) ** 2 + (p1[1] - p2[1]) ** 2)


def make_ranged(
    anchor_positions: Sequence[Tuple[float, float]],
    true_position: Tuple[float, float],
) -> List[RangedAnchor]:
    """
    Exact ranged anchors for a known position.

    Args:
        anchor_positions: Anchor (x, y) positions.
        true_position: Position the distances are measured from.

    Returns:
        One RangedAnchor per anchor with the analytic distance.
    """
    return [
        RangedAnchor(Point2D(x, y), calculate_distance_2d((x, y), true_position))
        for x, y in anchor_positions
    ]
