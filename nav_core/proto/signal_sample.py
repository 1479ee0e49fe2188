"""
Beacon and Signal Sample Schemas.

Defines the fixed anchor beacons and the raw RSSI readings that the
acquisition layer hands to the localization pipeline.
"""

from dataclasses import dataclass

from .geometry import Point2D


# Measured RSSI at 1 m for an uncalibrated BLE beacon (dBm)
DEFAULT_REFERENCE_POWER_DBM = -59


@dataclass(frozen=True)
class Anchor:
    """
    Fixed beacon with a known position.

    Attributes:
        anchor_id: Beacon identifier (e.g. UUID or MAC address)
        position: Beacon position in the floor-plan frame
        reference_power: Expected RSSI at 1 m (dBm), a.k.a. txPower

    Notes:
        - Created at configuration time and never mutated
        - Looked up by anchor_id
    """

    anchor_id: str
    position: Point2D
    reference_power: int = DEFAULT_REFERENCE_POWER_DBM

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'anchor_id': self.anchor_id,
            'x': self.position.x,
            'y': self.position.y,
            'reference_power': self.reference_power,
        }

    @classmethod
    def from_dict(cls, data: dict, default_reference_power: int = DEFAULT_REFERENCE_POWER_DBM) -> "Anchor":
        """Build from a record; reference_power falls back to default_reference_power."""
        return cls(
            anchor_id=str(data['anchor_id']),
            position=Point2D(float(data['x']), float(data['y'])),
            reference_power=int(data.get('reference_power', default_reference_power)),
        )


@dataclass(frozen=True)
class Sample:
    """
    One raw signal-strength reading from a beacon.

    Attributes:
        anchor_id: Beacon that produced the reading
        signal_strength: RSSI in dBm (0 means out of range)
        timestamp: Reception time (seconds)
    """

    anchor_id: str
    signal_strength: int
    timestamp: float = 0.0

    @property
    def is_out_of_range(self) -> bool:
        """Radio stack reports 0 when no usable reading is available."""
        return self.signal_strength == 0

    def to_dict(self) -> dict:
        return {
            'anchor_id': self.anchor_id,
            'signal_strength': self.signal_strength,
            'timestamp': self.timestamp,
        }
