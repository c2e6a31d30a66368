"""
Point detections ("spots") and their named features.

Spots are produced upstream by a detector and only referenced by the
collection and the tracker. Equality is identity: two spots at the same
place are still two spots.

Dependencies: none
"""

import itertools
from dataclasses import dataclass, field
from typing import Dict, Optional


# =============================================================================
# FEATURE NAMES
# =============================================================================

POSITION_X = "POSITION_X"
POSITION_Y = "POSITION_Y"
POSITION_Z = "POSITION_Z"
POSITION_T = "POSITION_T"
FRAME = "FRAME"
QUALITY = "QUALITY"
RADIUS = "RADIUS"

POSITION_FEATURES = (POSITION_X, POSITION_Y, POSITION_Z)

_spot_ids = itertools.count()


# =============================================================================
# SPOT
# =============================================================================

@dataclass(eq=False)
class Spot:
    """Single detection with coordinates and scalar features."""
    x: float
    y: float
    z: float = 0.0
    features: Dict[str, float] = field(default_factory=dict)
    name: Optional[str] = None
    spot_id: int = field(default_factory=lambda: next(_spot_ids))

    def square_distance_to(self, other: "Spot") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def get_feature(self, feature: str) -> Optional[float]:
        """Return a feature value, or None if the spot does not carry it."""
        if feature == POSITION_X:
            return self.x
        if feature == POSITION_Y:
            return self.y
        if feature == POSITION_Z:
            return self.z
        return self.features.get(feature)

    def put_feature(self, feature: str, value: float) -> None:
        if feature == POSITION_X:
            self.x = value
        elif feature == POSITION_Y:
            self.y = value
        elif feature == POSITION_Z:
            self.z = value
        else:
            self.features[feature] = value

    @property
    def position(self):
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        label = self.name if self.name is not None else f"ID{self.spot_id}"
        return f"Spot({label}, x={self.x:g}, y={self.y:g}, z={self.z:g})"
