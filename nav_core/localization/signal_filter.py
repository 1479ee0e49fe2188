"""
Per-Anchor Signal Filters.

Two interchangeable smoothing strategies for noisy RSSI or distance
sequences:

- Moving average over a bounded FIFO window
- Scalar (1D) Kalman filter with constant process/measurement noise

Filter state is an explicit immutable value. Every update is a pure
transform (state, value) -> (new_state, smoothed_value); the caller owns
one state per anchor per scanning session (see SignalFilterBank).
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from nav_core.metrics import get_metrics


class FilterType(Enum):
    """Smoothing strategy."""

    MOVING_AVERAGE = "moving_average"
    KALMAN = "kalman"


@dataclass(frozen=True)
class MovingAverageState:
    """
    Moving-average filter state.

    Attributes:
        window: Most recent raw values, oldest first
    """

    window: Tuple[float, ...] = ()

    @property
    def mean(self) -> float:
        """Arithmetic mean of the window (0 for an empty window)."""
        if not self.window:
            return 0.0
        return sum(self.window) / len(self.window)


@dataclass(frozen=True)
class KalmanState:
    """
    Scalar Kalman filter state.

    Attributes:
        estimate: Current state estimate
        error_variance: Current estimate error variance
    """

    estimate: float = 0.0
    error_variance: float = 1.0


FilterState = Union[MovingAverageState, KalmanState]


@dataclass
class FilterConfig:
    """
    Configuration for signal filters.

    Attributes:
        filter_type: Smoothing strategy
        window_size: Moving-average window length (samples)
        process_noise: Kalman process noise Q (raise for faster convergence)
        measurement_noise: Kalman measurement noise R
        initial_estimate: Kalman estimate before the first sample
        initial_error_variance: Kalman error variance before the first sample
    """

    filter_type: FilterType = FilterType.KALMAN
    window_size: int = 5
    process_noise: float = 0.1
    measurement_noise: float = 0.5
    initial_estimate: float = 0.0
    initial_error_variance: float = 1.0

    def __post_init__(self):
        """Validate configuration."""
        if self.window_size < 1:
            raise ValueError(f"Window size must be at least 1: {self.window_size}")
        if self.process_noise < 0:
            raise ValueError(f"Process noise cannot be negative: {self.process_noise}")
        if self.measurement_noise < 0:
            raise ValueError(f"Measurement noise cannot be negative: {self.measurement_noise}")
        if self.initial_error_variance < 0:
            raise ValueError(
                f"Initial error variance cannot be negative: {self.initial_error_variance}"
            )
        if self.measurement_noise == 0 and self.process_noise + self.initial_error_variance == 0:
            raise ValueError("Kalman gain undefined with zero noise and zero initial variance")

    def initial_state(self) -> FilterState:
        """Fresh state for an anchor with no prior samples."""
        if self.filter_type == FilterType.MOVING_AVERAGE:
            return MovingAverageState()
        return KalmanState(self.initial_estimate, self.initial_error_variance)


def moving_average(values: Sequence[float], window_size: int = 5) -> float:
    """
    Mean of the last window_size values.

    Args:
        values: Raw values, oldest first
        window_size: Number of trailing values to average

    Returns:
        Mean of the trailing window (0 for an empty sequence)
    """
    if window_size < 1:
        raise ValueError(f"Window size must be at least 1: {window_size}")

    recent = list(values)[-window_size:]
    if not recent:
        return 0.0
    return sum(recent) / len(recent)


def moving_average_update(
    state: Optional[MovingAverageState],
    value: float,
    window_size: int = 5,
) -> Tuple[MovingAverageState, float]:
    """
    Push a value into the window and return the new mean.

    Args:
        state: Previous state (None for the first sample)
        value: New raw value
        window_size: Maximum window length; the oldest value is evicted

    Returns:
        Tuple of (new_state, smoothed_value)
    """
    if window_size < 1:
        raise ValueError(f"Window size must be at least 1: {window_size}")

    window = state.window if state is not None else ()
    new_state = MovingAverageState((window + (float(value),))[-window_size:])
    return new_state, new_state.mean


def kalman_update(
    state: Optional[KalmanState],
    measurement: float,
    process_noise: float = 0.1,
    measurement_noise: float = 0.5,
) -> Tuple[KalmanState, float]:
    """
    One predict/update step of the scalar Kalman filter.

    Args:
        state: Previous state (None -> estimate 0, error variance 1)
        measurement: New measurement z
        process_noise: Process noise Q
        measurement_noise: Measurement noise R

    Returns:
        Tuple of (new_state, smoothed_value)
    """
    if state is None:
        state = KalmanState()

    # Predict (static model, no control input)
    predicted_error = state.error_variance + process_noise

    # Update
    gain = predicted_error / (predicted_error + measurement_noise)
    estimate = state.estimate + gain * (measurement - state.estimate)
    error_variance = (1 - gain) * predicted_error

    return KalmanState(estimate, error_variance), estimate


def filter_update(
    state: Optional[FilterState],
    value: float,
    config: Optional[FilterConfig] = None,
) -> Tuple[FilterState, float]:
    """
    Apply the configured strategy to one new value.

    Args:
        state: Previous state for this anchor (None for the first sample)
        value: New raw RSSI or distance value
        config: Filter configuration (uses defaults if None)

    Returns:
        Tuple of (new_state, smoothed_value)
    """
    config = config or FilterConfig()

    if state is None:
        state = config.initial_state()

    if config.filter_type == FilterType.MOVING_AVERAGE:
        if not isinstance(state, MovingAverageState):
            raise TypeError(f"Moving-average filter got {type(state).__name__}")
        return moving_average_update(state, value, config.window_size)

    if not isinstance(state, KalmanState):
        raise TypeError(f"Kalman filter got {type(state).__name__}")
    return kalman_update(state, value, config.process_noise, config.measurement_noise)


@dataclass
class SignalFilterBank:
    """
    Caller-owned map of anchor id -> filter state.

    One bank per scanning session. Not shared between sessions, so no
    locking is needed.

    Usage:
        bank = SignalFilterBank(FilterConfig(filter_type=FilterType.KALMAN))
        smoothed = bank.update("beacon-1", distance)
    """

    config: FilterConfig = field(default_factory=FilterConfig)
    _states: Dict[str, FilterState] = field(default_factory=dict, init=False, repr=False)

    def update(self, anchor_id: str, value: float) -> float:
        """
        Feed one value for an anchor.

        Args:
            anchor_id: Anchor the value belongs to
            value: New raw value

        Returns:
            Smoothed value for that anchor
        """
        state, smoothed = filter_update(self._states.get(anchor_id), value, self.config)
        self._states[anchor_id] = state
        get_metrics().increment('samples_filtered')
        return smoothed

    def update_many(self, anchor_id: str, values: Iterable[float]) -> Optional[float]:
        """Feed several values in order; returns the last smoothed value."""
        smoothed = None
        for value in values:
            smoothed = self.update(anchor_id, value)
        return smoothed

    def get_state(self, anchor_id: str) -> Optional[FilterState]:
        return self._states.get(anchor_id)

    def set_state(self, anchor_id: str, state: FilterState):
        """Restore state passed back in by a stateless caller."""
        self._states[anchor_id] = state

    @property
    def anchor_ids(self) -> List[str]:
        return list(self._states.keys())

    def reset(self, anchor_id: Optional[str] = None):
        """Drop state for one anchor, or for all anchors."""
        if anchor_id is None:
            self._states.clear()
        else:
            self._states.pop(anchor_id, None)


def create_default_filter_bank(filter_type: FilterType = FilterType.KALMAN) -> SignalFilterBank:
    """
    Create a filter bank with default noise/window settings.

    Args:
        filter_type: Smoothing strategy

    Returns:
        Empty SignalFilterBank
    """
    config = FilterConfig(
        filter_type=filter_type,
        window_size=5,
        process_noise=0.1,
        measurement_noise=0.5,
    )

    return SignalFilterBank(config)
