"""
Protocol Module: Value types and result schemas.

Everything that crosses the boundary to the acquisition and presentation
layers is defined here:
- Point2D geometry
- Anchor and Sample inputs
- RangedAnchor / EstimatedPosition for the position solver
- Route output for the path engine
"""

from .geometry import Point2D
from .signal_sample import (
    Anchor,
    Sample,
    DEFAULT_REFERENCE_POWER_DBM,
)
from .position_estimate import (
    RangedAnchor,
    EstimatedPosition,
    SolveMethod,
)
from .route import (
    Route,
    create_route,
    path_length,
    estimate_travel_time,
    DEFAULT_WALKING_SPEED_M_S,
)

__all__ = [
    'Point2D',
    # Inputs
    'Anchor',
    'Sample',
    'DEFAULT_REFERENCE_POWER_DBM',
    # Positioning
    'RangedAnchor',
    'EstimatedPosition',
    'SolveMethod',
    # Routing
    'Route',
    'create_route',
    'path_length',
    'estimate_travel_time',
    'DEFAULT_WALKING_SPEED_M_S',
]
