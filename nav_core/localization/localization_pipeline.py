"""
Localization Pipeline.

Chains the signal model, per-anchor filters and the position solver for
one scanning session.

Usage:
    pipeline = LocalizationPipeline(anchors, config)

    # Feed each scan batch as it arrives
    estimate = pipeline.process(samples)

    if estimate is not None:
        print(f"Position: ({estimate.x:.2f}, {estimate.y:.2f})")
    else:
        print("Not enough anchors in range")

Pipeline stages:
1. Look up the anchor for each sample (unknown beacons are skipped)
2. RSSI -> distance (signal model)
3. Smooth distance per anchor (filter bank)
4. Solve position from the smoothed distances of this batch's anchors
"""

from typing import Dict, Iterable, List, Mapping, Optional, Union
from dataclasses import dataclass
import logging

from nav_core.proto.signal_sample import Anchor, Sample
from nav_core.proto.position_estimate import RangedAnchor, EstimatedPosition
from nav_core.localization.signal_model import SignalModel, SignalModelConfig
from nav_core.localization.signal_filter import SignalFilterBank, FilterConfig
from nav_core.localization.position_solver import PositionSolver, PositionSolverConfig
from nav_core.metrics import get_metrics

logger = logging.getLogger(__name__)


@dataclass
class LocalizationConfig:
    """
    Configuration for the localization pipeline.

    Attributes:
        signal_config: SignalModel configuration
        filter_config: Filter bank configuration
        solver_config: PositionSolver configuration
    """

    signal_config: Optional[SignalModelConfig] = None
    filter_config: Optional[FilterConfig] = None
    solver_config: Optional[PositionSolverConfig] = None


class LocalizationPipeline:
    """
    Per-session localization pipeline.

    Holds the session's filter state; create one pipeline per user/session.
    Anchors are read-only and may be shared between pipelines.
    """

    def __init__(
        self,
        anchors: Union[Mapping[str, Anchor], Iterable[Anchor]],
        config: Optional[LocalizationConfig] = None,
    ):
        """
        Initialize localization pipeline.

        Args:
            anchors: Configured anchors, as a mapping by id or an iterable
            config: Pipeline configuration (uses defaults if None)
        """
        if isinstance(anchors, Mapping):
            self.anchors: Dict[str, Anchor] = dict(anchors)
        else:
            self.anchors = {a.anchor_id: a for a in anchors}

        self.config = config or LocalizationConfig()
        self.metrics = get_metrics()

        self.model = SignalModel(self.config.signal_config or SignalModelConfig())
        self.filters = SignalFilterBank(self.config.filter_config or FilterConfig())
        self.solver = PositionSolver(self.config.solver_config or PositionSolverConfig())

    def ranged_anchors(self, samples: Iterable[Sample]) -> List[RangedAnchor]:
        """
        Convert a batch of samples into ranged anchors.

        Args:
            samples: Raw readings, oldest first

        Returns:
            One RangedAnchor per known anchor seen in the batch, in order of
            first appearance, carrying that anchor's latest smoothed distance
        """
        smoothed: Dict[str, float] = {}

        for sample in samples:
            self.metrics.increment('samples_in')

            anchor = self.anchors.get(sample.anchor_id)
            if anchor is None:
                self.metrics.increment_drop('unknown_anchor')
                logger.warning("Beacon %s is not configured, sample ignored", sample.anchor_id)
                continue

            distance = self.model.distance_for(sample, anchor)
            smoothed[sample.anchor_id] = self.filters.update(sample.anchor_id, distance)

        return [
            RangedAnchor(self.anchors[anchor_id].position, distance)
            for anchor_id, distance in smoothed.items()
        ]

    def process(self, samples: Iterable[Sample]) -> Optional[EstimatedPosition]:
        """
        Process a scan batch into a position estimate.

        Args:
            samples: Raw readings for this batch

        Returns:
            EstimatedPosition, or None if fewer than 3 usable anchors or
            the anchor geometry is degenerate
        """
        self.metrics.increment('localization_batches')

        ranged = self.ranged_anchors(samples)
        estimate = self.solver.solve(ranged)

        if estimate is None:
            logger.debug("No position from %d ranged anchors", len(ranged))
        return estimate

    def reset(self):
        """Reset session state (filters)."""
        self.filters.reset()
        self.metrics.increment('localization_resets')

    def get_statistics(self) -> dict:
        """Get pipeline statistics."""
        return {
            'anchors_configured': len(self.anchors),
            'anchors_tracked': len(self.filters.anchor_ids),
            'samples_in': self.metrics.get_counter('samples_in'),
            'solve_attempts': self.metrics.get_counter('position_solve_attempts'),
            'solve_successes': self.metrics.get_counter('position_solve_success'),
            'unknown_anchor_samples': self.metrics.get_drop_count('unknown_anchor'),
        }


def create_default_pipeline(anchors: Union[Mapping[str, Anchor], Iterable[Anchor]]) -> LocalizationPipeline:
    """
    Create localization pipeline with default configuration.

    Args:
        anchors: Configured anchors

    Returns:
        Configured LocalizationPipeline
    """
    config = LocalizationConfig(
        signal_config=SignalModelConfig(),
        filter_config=FilterConfig(),
        solver_config=PositionSolverConfig(),
    )

    return LocalizationPipeline(anchors, config)
