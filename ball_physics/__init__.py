"""
Ball Physics
Closed-form ball flight, throw profiles and trajectory sampling.
"""

from ball_physics.ballistics import (
    GRAVITY,
    BALL_RADIUS,
    LINEAR_DAMPING,
    LaunchSolution,
    solve_velocity,
    position_at,
    velocity_at,
    position_on_parabola,
)
from ball_physics.profiles import (
    ThrowType,
    ShotType,
    ThrowProfile,
    THROW_PROFILES,
    get_profile,
    shot_arc_height,
)
from ball_physics.trajectory import (
    Trajectory,
    TrajectorySample,
    TrajectoryBuilder,
)

__all__ = [
    "GRAVITY",
    "BALL_RADIUS",
    "LINEAR_DAMPING",
    "LaunchSolution",
    "solve_velocity",
    "position_at",
    "velocity_at",
    "position_on_parabola",
    "ThrowType",
    "ShotType",
    "ThrowProfile",
    "THROW_PROFILES",
    "get_profile",
    "shot_arc_height",
    "Trajectory",
    "TrajectorySample",
    "TrajectoryBuilder",
]
