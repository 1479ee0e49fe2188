"""
2D Point Value Type.

Shared by anchors, position estimates, way-point graph nodes and routes.
"""

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Point2D:
    """
    Point in the floor-plan plane.

    Attributes:
        x: X coordinate (floor-plan units, usually meters)
        y: Y coordinate (floor-plan units, usually meters)
    """

    x: float
    y: float

    def __post_init__(self):
        """Validate coordinates."""
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Point coordinates must be finite: ({self.x}, {self.y})")

    def distance_to(self, other: "Point2D") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> tuple:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Point2D":
        return cls(float(data['x']), float(data['y']))
