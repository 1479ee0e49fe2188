"""
Closed-Form 2D Trilateration (exactly 3 anchors).

Two formulations are provided:

- Linear: subtract circle equations pairwise (1-2, 2-3) to get a 2x2
  linear system, solved with Cramer's rule. Fails on a zero determinant
  (collinear or coincident anchors).
- Axis projection: express anchor 3 in a local frame whose x-axis runs
  from anchor 1 to anchor 2, intersect the circles there and rotate back.
  Fails when anchors 1 and 2 coincide or anchor 3 lies (nearly) on their
  axis.

On well-conditioned input both return the same point to within floating
point tolerance; near-collinear input is where they fail differently.
"""

from typing import Optional, Sequence
from enum import Enum
import logging

import numpy as np

from nav_core.proto.geometry import Point2D
from nav_core.proto.position_estimate import RangedAnchor

logger = logging.getLogger(__name__)


# |det| below this is treated as a singular system
SINGULAR_DET_TOL = 1e-10

# Perpendicular offset below this is treated as collinear
MIN_PERPENDICULAR_OFFSET = 1e-6


class TrilaterationMethod(Enum):
    """Closed-form trilateration formulation."""

    LINEAR = "linear"
    PROJECTION = "projection"


def trilaterate_linear(
    a1: RangedAnchor,
    a2: RangedAnchor,
    a3: RangedAnchor,
) -> Optional[Point2D]:
    """
    Trilaterate by linearizing the circle equations.

    Subtracting (x-xi)^2 + (y-yi)^2 = ri^2 for pairs (1,2) and (2,3):

        A x + B y = C,   A = 2(x2-x1), B = 2(y2-y1),
                         C = r1^2 - r2^2 - x1^2 + x2^2 - y1^2 + y2^2
        D x + E y = F,   D = 2(x3-x2), E = 2(y3-y2),
                         F = r2^2 - r3^2 - x2^2 + x3^2 - y2^2 + y3^2

    Args:
        a1, a2, a3: Ranged anchors

    Returns:
        Position, or None if the system is singular
    """
    x1, y1, r1 = a1.x, a1.y, a1.distance
    x2, y2, r2 = a2.x, a2.y, a2.distance
    x3, y3, r3 = a3.x, a3.y, a3.distance

    A = 2 * (x2 - x1)
    B = 2 * (y2 - y1)
    C = r1**2 - r2**2 - x1**2 + x2**2 - y1**2 + y2**2

    D = 2 * (x3 - x2)
    E = 2 * (y3 - y2)
    F = r2**2 - r3**2 - x2**2 + x3**2 - y2**2 + y3**2

    det = E * A - B * D
    if abs(det) < SINGULAR_DET_TOL:
        logger.debug("Singular trilateration system (det=%.3e)", det)
        return None

    x = (C * E - F * B) / det
    y = (A * F - C * D) / det

    return Point2D(x, y)


def trilaterate_projection(
    a1: RangedAnchor,
    a2: RangedAnchor,
    a3: RangedAnchor,
) -> Optional[Point2D]:
    """
    Trilaterate in a local frame anchored on the a1 -> a2 axis.

    Args:
        a1, a2, a3: Ranged anchors

    Returns:
        Position, or None if anchors 1/2 coincide or anchor 3 is
        (nearly) collinear with them
    """
    p1 = np.array([a1.x, a1.y], dtype=float)
    p2 = np.array([a2.x, a2.y], dtype=float)
    p3 = np.array([a3.x, a3.y], dtype=float)
    r1, r2, r3 = a1.distance, a2.distance, a3.distance

    d = float(np.linalg.norm(p2 - p1))
    if d == 0.0:
        logger.debug("Anchors 1 and 2 coincide")
        return None

    # Unit vector along the a1 -> a2 axis
    ex = (p2 - p1) / d

    # Projection of a3 onto that axis
    offset = p3 - p1
    i = float(ex @ offset)
    if np.isnan(i):
        return None

    # Perpendicular offset of a3 from the axis
    radicand = float(offset @ offset) - i * i
    if radicand < 0:
        return None
    j = float(np.sqrt(radicand))

    if abs(j) < MIN_PERPENDICULAR_OFFSET:
        logger.debug("Anchor 3 collinear with anchors 1-2 (j=%.3e)", j)
        return None

    # Perpendicular axis points toward a3
    ey = (offset - i * ex) / j

    # Intersection in the local frame
    x = (r1**2 - r2**2 + d**2) / (2 * d)
    y = (r1**2 - r3**2 + i**2 + j**2) / (2 * j) - (i / j) * x

    result = p1 + x * ex + y * ey
    return Point2D(float(result[0]), float(result[1]))


def trilaterate(
    ranged: Sequence[RangedAnchor],
    method: TrilaterationMethod = TrilaterationMethod.LINEAR,
) -> Optional[Point2D]:
    """
    Trilaterate from the first three ranged anchors.

    Args:
        ranged: At least 3 ranged anchors (extra anchors are ignored)
        method: Formulation to use

    Returns:
        Position, or None if fewer than 3 anchors or the geometry is degenerate
    """
    if len(ranged) < 3:
        logger.debug("Trilateration needs 3 anchors, got %d", len(ranged))
        return None

    a1, a2, a3 = ranged[0], ranged[1], ranged[2]

    if method == TrilaterationMethod.PROJECTION:
        return trilaterate_projection(a1, a2, a3)
    return trilaterate_linear(a1, a2, a3)
