"""
Ball Physics — Throw and Shot Profiles

Lookup tables for pass types and shot types. Profiles are data: adding a
throw type means adding a row here, not a branch in the builder or scorer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class ThrowType(Enum):
    CHEST = "chest"
    BOUNCE = "bounce"
    LOB = "lob"
    LONG = "long"
    ONE_HAND = "one_hand"


class ShotType(Enum):
    LAYUP = "layup"
    MIDRANGE = "midrange"
    THREE_POINT = "3pt"
    DUNK = "dunk"


# ---------- Throw Profiles ----------
@dataclass(frozen=True)
class ThrowProfile:
    """Physical envelope of one pass type."""
    name: str
    min_distance: float              # m (horizontal)
    max_distance: float              # m (horizontal)
    arc_height: float                # m above the start→target line
    speed_multiplier: float          # relative to the base pass speed
    requires_dominant_hand: bool = False
    bounce_ratio: Optional[float] = None   # 0-1 along the pass, bounce types only

    @property
    def is_bounce(self) -> bool:
        return self.bounce_ratio is not None

    def in_range(self, distance: float) -> bool:
        """Whether a horizontal distance is inside [min_distance, max_distance]."""
        return self.min_distance <= distance <= self.max_distance

    def nominal_speed(self, base_speed: float) -> float:
        """Release speed for pacing animations; the arc fixes flight time."""
        return base_speed * self.speed_multiplier


THROW_PROFILES: Dict[ThrowType, ThrowProfile] = {
    ThrowType.CHEST:    ThrowProfile("chest",    min_distance=2.0, max_distance=10.0, arc_height=0.3, speed_multiplier=1.0),
    ThrowType.BOUNCE:   ThrowProfile("bounce",   min_distance=2.0, max_distance=8.0,  arc_height=0.2, speed_multiplier=0.8,
                                     bounce_ratio=0.5),
    ThrowType.LOB:      ThrowProfile("lob",      min_distance=5.0, max_distance=12.0, arc_height=2.0, speed_multiplier=0.7),
    ThrowType.LONG:     ThrowProfile("long",     min_distance=8.0, max_distance=15.0, arc_height=1.5, speed_multiplier=1.3,
                                     requires_dominant_hand=True),
    ThrowType.ONE_HAND: ThrowProfile("one_hand", min_distance=2.0, max_distance=10.0, arc_height=0.5, speed_multiplier=1.2,
                                     requires_dominant_hand=True),
}

BASE_PASS_SPEED = 10.0  # m/s


def get_profile(throw_type: ThrowType) -> ThrowProfile:
    """Look up a profile by tag. Raises KeyError for unknown tags."""
    try:
        return THROW_PROFILES[ThrowType(throw_type)]
    except ValueError as exc:
        raise KeyError(f"Unknown throw type: {throw_type!r}") from exc


def feasible_throw_types(distance: float, dominant_hand_available: bool = True) -> List[ThrowType]:
    """Throw types whose distance envelope covers ``distance``, in table order."""
    return [
        throw_type for throw_type, profile in THROW_PROFILES.items()
        if profile.in_range(distance)
        and (dominant_hand_available or not profile.requires_dominant_hand)
    ]


# ---------- Shot Arcs ----------
SHOT_ARC_HEIGHTS: Dict[ShotType, float] = {
    ShotType.THREE_POINT: 2.4,   # high arc
    ShotType.MIDRANGE: 1.5,
    ShotType.LAYUP: 0.8,
    ShotType.DUNK: 0.01,         # nearly straight down into the rim
}
DEFAULT_SHOT_ARC_HEIGHT = 1.2
LAYUP_CLOSE_ARC_HEIGHT = 0.6     # smallest arc that still clears the rim
LAYUP_CLOSE_DISTANCE = 1.2

# Upper bound of each shot band (horizontal distance to the rim, m).
SHOT_RANGE = {
    "layup_max": 2.0,
    "midrange_max": 6.75,        # three-point line
    "three_point_max": 10.0,
}


def shot_arc_height(shot_type: Optional[ShotType], distance: Optional[float] = None) -> float:
    """Arc height for a shot type; close layups use a flatter arc."""
    if shot_type is ShotType.LAYUP and distance is not None and distance < LAYUP_CLOSE_DISTANCE:
        return LAYUP_CLOSE_ARC_HEIGHT
    return SHOT_ARC_HEIGHTS.get(shot_type, DEFAULT_SHOT_ARC_HEIGHT)


def classify_shot(distance: float) -> Optional[ShotType]:
    """Shot band for a distance to the rim, or None when out of range."""
    if distance <= SHOT_RANGE["layup_max"]:
        return ShotType.LAYUP
    if distance <= SHOT_RANGE["midrange_max"]:
        return ShotType.MIDRANGE
    if distance <= SHOT_RANGE["three_point_max"]:
        return ShotType.THREE_POINT
    return None
