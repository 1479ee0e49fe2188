"""
Position Estimate Schemas.

Defines the solver input unit (RangedAnchor) and the output format for
user position estimates.
"""

from dataclasses import dataclass
from typing import Optional
from enum import IntEnum

from .geometry import Point2D


class SolveMethod(IntEnum):
    """How a position estimate was produced."""

    TRILATERATION = 1       # Closed-form, exactly 3 anchors
    MULTILATERATION = 2     # Weighted iterative refinement, 4+ anchors


@dataclass(frozen=True)
class RangedAnchor:
    """
    Anchor position paired with its smoothed distance estimate.

    Attributes:
        position: Anchor position
        distance: Estimated distance from user to anchor

    Notes:
        - Distance is expected to be positive (the signal model guarantees it)
    """

    position: Point2D
    distance: float

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y


@dataclass
class EstimatedPosition:
    """
    User position estimate.

    Attributes:
        x: X coordinate in the floor-plan frame
        y: Y coordinate in the floor-plan frame
        accuracy: Rough accuracy radius (m), if available
        method: Solver path that produced the estimate
        num_anchors_used: Number of anchors used in the solution
        residual_m: RMS range residual at the estimate (m)
    """

    x: float
    y: float
    accuracy: Optional[float] = None
    method: SolveMethod = SolveMethod.TRILATERATION
    num_anchors_used: int = 3
    residual_m: Optional[float] = None

    def __post_init__(self):
        """Validate position estimate."""
        if self.accuracy is not None and self.accuracy < 0:
            raise ValueError(f"Accuracy cannot be negative: {self.accuracy}")

        if self.num_anchors_used < 0:
            raise ValueError(f"Num anchors cannot be negative: {self.num_anchors_used}")

    @property
    def position(self) -> Point2D:
        """Position as a Point2D."""
        return Point2D(self.x, self.y)

    def to_dict(self) -> dict:
        """Convert to the location response shape."""
        return {
            'location': {'x': self.x, 'y': self.y},
            'accuracy': self.accuracy,
            'method': self.method.name,
            'num_anchors_used': self.num_anchors_used,
            'residual_m': self.residual_m,
        }
