"""
User Position Solver.

- Exactly 3 anchors: closed-form trilateration
- More than 3 anchors: trilateration seed from the first 3 anchors, then a
  fixed number of weighted-centroid refinement passes over all anchors

The refinement weights each anchor by 1 / (1 + |computed - reported|), so
anchors whose reported distance agrees with the current estimate dominate.
The iteration count is fixed (no convergence check) to bound latency; the
weighted centroid stays inside the anchors' convex hull, so this is an
approximation rather than a least-squares fit.
"""

from typing import Optional, Sequence
from dataclasses import dataclass
import logging

import numpy as np

from nav_core.proto.geometry import Point2D
from nav_core.proto.position_estimate import RangedAnchor, EstimatedPosition, SolveMethod
from nav_core.localization.trilateration import trilaterate, TrilaterationMethod
from nav_core.metrics import get_metrics

logger = logging.getLogger(__name__)


@dataclass
class PositionSolverConfig:
    """
    Configuration for the position solver.

    Attributes:
        min_anchors: Minimum ranged anchors for a solve
        max_iterations: Refinement passes for 4+ anchors (fixed, no early exit)
        three_anchor_method: Formulation for the exactly-3-anchor solve
        seed_method: Formulation for the multilateration seed
        max_accuracy_m: Cap on the reported accuracy radius (m)
    """

    min_anchors: int = 3
    max_iterations: int = 10
    three_anchor_method: TrilaterationMethod = TrilaterationMethod.LINEAR
    seed_method: TrilaterationMethod = TrilaterationMethod.LINEAR
    max_accuracy_m: float = 10.0

    def __post_init__(self):
        """Validate configuration."""
        if self.min_anchors < 3:
            raise ValueError(f"At least 3 anchors are needed for a 2D fix: {self.min_anchors}")
        if self.max_iterations < 0:
            raise ValueError(f"Iteration count cannot be negative: {self.max_iterations}")
        if self.max_accuracy_m <= 0:
            raise ValueError(f"Accuracy cap must be positive: {self.max_accuracy_m}")


def estimate_accuracy(ranged: Sequence[RangedAnchor], max_accuracy_m: float = 10.0) -> float:
    """
    Rough accuracy radius from anchor count and mean range.

    More anchors and shorter ranges give a smaller radius:
    accuracy = mean_distance / n * 10, clamped to [0, max_accuracy_m].

    Args:
        ranged: Ranged anchors used in the solve
        max_accuracy_m: Upper bound on the result

    Returns:
        Accuracy radius (m)
    """
    if not ranged:
        return max_accuracy_m

    mean_distance = sum(r.distance for r in ranged) / len(ranged)
    return max(0.0, min(mean_distance / len(ranged) * 10, max_accuracy_m))


def range_residual_rms(position: Point2D, ranged: Sequence[RangedAnchor]) -> float:
    """RMS of (computed range - reported range) at a position."""
    anchors = np.array([[r.x, r.y] for r in ranged], dtype=float)
    reported = np.array([r.distance for r in ranged], dtype=float)
    computed = np.linalg.norm(anchors - np.array([position.x, position.y]), axis=1)
    return float(np.sqrt(np.mean((computed - reported) ** 2)))


class PositionSolver:
    """
    Solve user position from ranged anchors.

    Usage:
        solver = PositionSolver(config)

        ranged = [
            RangedAnchor(Point2D(0, 0), 5.0),
            RangedAnchor(Point2D(10, 0), 6.7),
            RangedAnchor(Point2D(0, 10), 6.7),
        ]
        estimate = solver.solve(ranged)

        if estimate is not None:
            print(f"User position: ({estimate.x:.2f}, {estimate.y:.2f})")
    """

    def __init__(self, config: Optional[PositionSolverConfig] = None):
        """
        Initialize position solver.

        Args:
            config: Solver configuration (uses defaults if None)
        """
        self.config = config or PositionSolverConfig()
        self.metrics = get_metrics()

    def solve(self, ranged: Sequence[RangedAnchor]) -> Optional[EstimatedPosition]:
        """
        Solve user position.

        Args:
            ranged: Ranged anchors; for 4+ the first 3 seed the refinement

        Returns:
            EstimatedPosition, or None if underdetermined or degenerate

        Notes:
            - Fewer than min_anchors -> None
            - Collinear/coincident seed anchors -> None
            - Distance positivity is assumed, not checked
        """
        self.metrics.increment('position_solve_attempts')

        if len(ranged) < self.config.min_anchors:
            self.metrics.increment_drop('insufficient_anchors')
            logger.debug("Need %d anchors, got %d", self.config.min_anchors, len(ranged))
            return None

        if len(ranged) == 3:
            position = trilaterate(ranged, self.config.three_anchor_method)
            method = SolveMethod.TRILATERATION
        else:
            position = self.multilaterate(ranged)
            method = SolveMethod.MULTILATERATION

        if position is None:
            self.metrics.increment_drop('degenerate_geometry')
            return None

        residual = range_residual_rms(position, ranged)

        estimate = EstimatedPosition(
            x=position.x,
            y=position.y,
            accuracy=estimate_accuracy(ranged, self.config.max_accuracy_m),
            method=method,
            num_anchors_used=len(ranged),
            residual_m=residual,
        )

        self.metrics.increment('position_solve_success')
        self.metrics.record_histogram('solver_residual_m', residual)

        return estimate

    def multilaterate(self, ranged: Sequence[RangedAnchor]) -> Optional[Point2D]:
        """
        Weighted iterative refinement over all anchors.

        Args:
            ranged: At least 3 ranged anchors

        Returns:
            Refined position, or None if the trilateration seed fails
        """
        seed = trilaterate(ranged[:3], self.config.seed_method)
        if seed is None:
            return None

        anchors = np.array([[r.x, r.y] for r in ranged], dtype=float)
        reported = np.array([r.distance for r in ranged], dtype=float)
        estimate = np.array([seed.x, seed.y], dtype=float)

        for _ in range(self.config.max_iterations):
            computed = np.linalg.norm(anchors - estimate, axis=1)
            weights = 1.0 / (1.0 + np.abs(computed - reported))

            total_weight = weights.sum()
            if total_weight > 0:
                estimate = weights @ anchors / total_weight

        return Point2D(float(estimate[0]), float(estimate[1]))


def create_default_solver() -> PositionSolver:
    """
    Create position solver with default configuration.

    Returns:
        Configured PositionSolver instance
    """
    config = PositionSolverConfig(
        min_anchors=3,
        max_iterations=10,
        three_anchor_method=TrilaterationMethod.LINEAR,
        seed_method=TrilaterationMethod.LINEAR,
        max_accuracy_m=10.0,
    )

    return PositionSolver(config)
