"""
Indoor navigation deployment configuration
"""

# Signal model
SIGNAL_CONFIG = {
    "path_loss_exponent": 2.0,        # 2.0 free space, 2-4 indoors
    "fallback_distance_m": 1.0,       # Distance for zero (out-of-range) RSSI
    "default_reference_power": -59,   # RSSI at 1 m when a beacon has no calibration (dBm)
}

# Per-anchor smoothing
FILTER_CONFIG = {
    "filter_type": "kalman",          # "kalman" or "moving_average"
    "window_size": 5,                 # Moving-average window (samples)
    "process_noise": 0.1,             # Kalman Q, raise for faster convergence
    "measurement_noise": 0.5,         # Kalman R
}

# Position solver
SOLVER_CONFIG = {
    "min_anchors": 3,
    "max_iterations": 10,             # Fixed multilateration passes
    "three_anchor_method": "linear",  # "linear" or "projection"
    "seed_method": "linear",
    "max_accuracy_m": 10.0,
}

# Route planner
NAVIGATION_CONFIG = {
    "walking_speed_m_s": 1.4,
    "grid_cell_size_m": 1.0,
}

# Logging
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

# Demo beacons (floor-plan meters)
DEMO_ANCHORS = [
    {"anchor_id": "123e4567-e89b-12d3-a456-426614174000", "x": 5.0, "y": 5.0, "reference_power": -59},
    {"anchor_id": "123e4567-e89b-12d3-a456-426614174001", "x": 10.0, "y": 5.0, "reference_power": -59},
    {"anchor_id": "123e4567-e89b-12d3-a456-426614174002", "x": 5.0, "y": 10.0, "reference_power": -59},
    {"anchor_id": "123e4567-e89b-12d3-a456-426614174003", "x": 10.0, "y": 10.0, "reference_power": -59},
]

# Simulated user position for the locate demo
DEMO_USER_POSITION = {"x": 7.5, "y": 7.5}

# Demo way-point graph ({id, x, y, connectedNodes} records)
DEMO_ROOM_GRAPH = [
    {"id": "node1", "x": 0.0, "y": 0.0, "connectedNodes": ["node2", "node3"]},
    {"id": "node2", "x": 5.0, "y": 0.0, "connectedNodes": ["node1", "node4"]},
    {"id": "node3", "x": 0.0, "y": 5.0, "connectedNodes": ["node1", "node4"]},
    {"id": "node4", "x": 5.0, "y": 5.0, "connectedNodes": ["node2", "node3", "node5"]},
    {"id": "node5", "x": 10.0, "y": 5.0, "connectedNodes": ["node4"]},
]

# Demo floor grid (1 = wall, 0 = open)
DEMO_FLOOR_GRID = [
    [0, 0, 0, 0, 0],
    [1, 1, 1, 1, 0],
    [0, 0, 0, 0, 0],
    [0, 1, 1, 1, 1],
    [0, 0, 0, 0, 0],
]
