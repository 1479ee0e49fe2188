"""
Localization Module: RSSI ranging, signal filtering, position solving.

Key classes:
- SignalModel: RSSI -> distance (log-distance path loss)
- SignalFilterBank: Per-anchor moving-average / Kalman smoothing
- PositionSolver: Trilateration (3 anchors) and multilateration (4+)
- LocalizationPipeline: Samples -> position for one scanning session
"""

# Signal model
from .signal_model import (
    SignalModel,
    SignalModelConfig,
    estimate_distance,
    estimate_signal_strength,
    create_default_signal_model,
    FALLBACK_DISTANCE,
)

# Signal filters
from .signal_filter import (
    FilterType,
    FilterConfig,
    FilterState,
    KalmanState,
    MovingAverageState,
    SignalFilterBank,
    filter_update,
    kalman_update,
    moving_average,
    moving_average_update,
    create_default_filter_bank,
)

# Position solving
from .trilateration import (
    TrilaterationMethod,
    trilaterate,
    trilaterate_linear,
    trilaterate_projection,
)
from .position_solver import (
    PositionSolver,
    PositionSolverConfig,
    estimate_accuracy,
    create_default_solver,
)

# Pipeline
from .localization_pipeline import (
    LocalizationPipeline,
    LocalizationConfig,
    create_default_pipeline,
)

__all__ = [
    # Signal model
    'SignalModel',
    'SignalModelConfig',
    'estimate_distance',
    'estimate_signal_strength',
    'create_default_signal_model',
    'FALLBACK_DISTANCE',
    # Signal filters
    'FilterType',
    'FilterConfig',
    'FilterState',
    'KalmanState',
    'MovingAverageState',
    'SignalFilterBank',
    'filter_update',
    'kalman_update',
    'moving_average',
    'moving_average_update',
    'create_default_filter_bank',
    # Position solving
    'TrilaterationMethod',
    'trilaterate',
    'trilaterate_linear',
    'trilaterate_projection',
    'PositionSolver',
    'PositionSolverConfig',
    'estimate_accuracy',
    'create_default_solver',
    # Pipeline
    'LocalizationPipeline',
    'LocalizationConfig',
    'create_default_pipeline',
]
