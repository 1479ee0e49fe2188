"""
RSSI to Distance Signal Model.

Implements the log-distance path-loss inversion:

    d = 10 ** ((P_ref - RSSI) / (10 * n))

where P_ref is the beacon's RSSI at 1 m and n is the path-loss exponent
(2.0 in free space, 2-4 indoors with obstruction).
"""

from typing import Optional
from dataclasses import dataclass
import logging
import math

from nav_core.proto.signal_sample import Anchor, Sample, DEFAULT_REFERENCE_POWER_DBM
from nav_core.metrics import get_metrics

logger = logging.getLogger(__name__)


# Distance reported for a zero (out-of-range) reading
FALLBACK_DISTANCE = 1.0


def estimate_distance(
    signal_strength: int,
    reference_power: int,
    path_loss_exponent: float = 2.0,
    fallback_distance: float = FALLBACK_DISTANCE,
) -> float:
    """
    Convert an RSSI reading to a distance estimate.

    Args:
        signal_strength: Measured RSSI (dBm), 0 means out of range
        reference_power: RSSI at 1 m (dBm)
        path_loss_exponent: Environment path-loss exponent n
        fallback_distance: Distance returned for a zero reading

    Returns:
        Estimated distance (same unit as the 1 m calibration)

    Raises:
        ValueError: If path_loss_exponent is not positive for a non-zero reading
    """
    if signal_strength == 0:
        return fallback_distance

    if path_loss_exponent <= 0:
        raise ValueError(f"Path-loss exponent must be positive: {path_loss_exponent}")

    return 10 ** ((reference_power - signal_strength) / (10 * path_loss_exponent))


def estimate_signal_strength(
    distance: float,
    reference_power: int,
    path_loss_exponent: float = 2.0,
) -> float:
    """
    Forward model: expected RSSI at a given distance.

    Args:
        distance: Distance to the beacon (> 0)
        reference_power: RSSI at 1 m (dBm)
        path_loss_exponent: Environment path-loss exponent n

    Returns:
        Expected RSSI (dBm), not rounded
    """
    if distance <= 0:
        raise ValueError(f"Distance must be positive: {distance}")
    if path_loss_exponent <= 0:
        raise ValueError(f"Path-loss exponent must be positive: {path_loss_exponent}")

    return reference_power - 10 * path_loss_exponent * math.log10(distance)


@dataclass
class SignalModelConfig:
    """
    Configuration for the signal model.

    Attributes:
        path_loss_exponent: Environment path-loss exponent (2-4 indoors)
        fallback_distance_m: Distance used for zero (out-of-range) readings
        default_reference_power: RSSI at 1 m when an anchor has none (dBm)
    """

    path_loss_exponent: float = 2.0
    fallback_distance_m: float = FALLBACK_DISTANCE
    default_reference_power: int = DEFAULT_REFERENCE_POWER_DBM

    def __post_init__(self):
        """Validate configuration."""
        if self.path_loss_exponent <= 0:
            raise ValueError(f"Path-loss exponent must be positive: {self.path_loss_exponent}")
        if self.fallback_distance_m <= 0:
            raise ValueError(f"Fallback distance must be positive: {self.fallback_distance_m}")


class SignalModel:
    """
    Per-deployment signal model.

    Usage:
        model = SignalModel(SignalModelConfig(path_loss_exponent=2.7))
        distance = model.distance_for(sample, anchors[sample.anchor_id])
    """

    def __init__(self, config: Optional[SignalModelConfig] = None):
        """
        Initialize signal model.

        Args:
            config: Model configuration (uses defaults if None)
        """
        self.config = config or SignalModelConfig()
        self.metrics = get_metrics()

    def distance(self, signal_strength: int, reference_power: Optional[int] = None) -> float:
        """Distance for a raw RSSI value."""
        if reference_power is None:
            reference_power = self.config.default_reference_power

        if signal_strength == 0:
            self.metrics.increment_drop('out_of_range_sample')

        return estimate_distance(
            signal_strength,
            reference_power,
            self.config.path_loss_exponent,
            self.config.fallback_distance_m,
        )

    def distance_for(self, sample: Sample, anchor: Anchor) -> float:
        """
        Distance for a sample using its anchor's calibration.

        Args:
            sample: Raw reading
            anchor: Anchor the reading came from

        Returns:
            Estimated distance
        """
        if sample.anchor_id != anchor.anchor_id:
            raise ValueError(
                f"Sample from {sample.anchor_id} paired with anchor {anchor.anchor_id}"
            )

        distance = self.distance(sample.signal_strength, anchor.reference_power)
        logger.debug(
            "Anchor %s: rssi=%d dBm -> %.3f", anchor.anchor_id, sample.signal_strength, distance
        )
        return distance


def create_default_signal_model() -> SignalModel:
    """
    Create signal model for a typical furnished indoor space.

    Returns:
        Configured SignalModel instance
    """
    config = SignalModelConfig(
        path_loss_exponent=2.0,     # Free-space default, tune per building
        fallback_distance_m=FALLBACK_DISTANCE,
        default_reference_power=DEFAULT_REFERENCE_POWER_DBM,
    )

    return SignalModel(config)
