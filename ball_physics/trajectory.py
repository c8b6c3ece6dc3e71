"""
Ball Physics — Trajectory Builder

Discretises a pass into (position, time) samples using the analytical
solver. Bounce passes are two independent arcs joined at a ground contact.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ball_physics.ballistics import (
    BALL_RADIUS,
    GRAVITY,
    LINEAR_DAMPING,
    Vec3,
    VecLike,
    as_vec3,
    fields_equal,
    horizontal_distance,
    position_at,
    solve_velocity,
)
from ball_physics.profiles import THROW_PROFILES, ThrowProfile, ThrowType, get_profile

logger = logging.getLogger(__name__)

FLIGHT_TIME_EPSILON = 1e-9   # s
DEFAULT_SAMPLE_COUNT = 30


# ---------- Data Classes ----------
@dataclass(frozen=True, eq=False)
class TrajectorySample:
    position: Vec3
    time: float         # s from release

    __eq__ = fields_equal


@dataclass(eq=False)
class Trajectory:
    """Sampled ball path. ``samples[-1].time == flight_time`` always holds."""
    samples: List[TrajectorySample]
    flight_time: float
    initial_velocity: Vec3
    throw_type: ThrowType
    bounce_point: Optional[Vec3] = None
    bounce_index: Optional[int] = None

    __eq__ = fields_equal

    @property
    def is_bounce(self) -> bool:
        return self.bounce_index is not None

    @property
    def bounce_time(self) -> float:
        """Time of the ground contact; 0 for passes that never bounce."""
        if self.bounce_index is None:
            return 0.0
        return self.samples[self.bounce_index].time

    @property
    def times(self) -> np.ndarray:
        return np.array([s.time for s in self.samples])

    @property
    def positions(self) -> np.ndarray:
        return np.array([s.position for s in self.samples])

    @property
    def start(self) -> Vec3:
        return self.samples[0].position

    @property
    def end(self) -> Vec3:
        return self.samples[-1].position

    def position_at_time(self, time: float) -> Vec3:
        """Linear interpolation between the two samples around ``time``."""
        if time <= 0 or len(self.samples) == 1:
            return self.samples[0].position.copy()
        if time >= self.flight_time:
            return self.samples[-1].position.copy()

        for p1, p2 in zip(self.samples, self.samples[1:]):
            if p1.time <= time <= p2.time:
                span = p2.time - p1.time
                if span < FLIGHT_TIME_EPSILON:
                    return p2.position.copy()
                u = (time - p1.time) / span
                return p1.position + (p2.position - p1.position) * u

        return self.samples[-1].position.copy()


# ---------- Builder ----------
class TrajectoryBuilder:
    """Builds sampled pass trajectories from throw profiles.

    Gravity and drag are injected so scorers never hardcode physics.
    """

    def __init__(
        self,
        gravity: float = GRAVITY,
        damping: float = LINEAR_DAMPING,
        ball_radius: float = BALL_RADIUS,
        ground_y: float = 0.0,
    ):
        self.gravity = gravity
        self.damping = damping
        self.ball_radius = ball_radius
        self.ground_y = ground_y

    @property
    def min_height(self) -> float:
        """Lowest centre height the ball can reach (resting on the ground)."""
        return self.ground_y + self.ball_radius

    def build(
        self,
        start: VecLike,
        target: VecLike,
        throw_type: ThrowType,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
    ) -> Optional[Trajectory]:
        """Sampled trajectory for one throw type, or None when out of range.

        Args:
            start: Release position [x, y, z].
            target: Catch position [x, y, z].
            throw_type: Profile tag.
            sample_count: Number of intervals; the result holds
                ``sample_count + 1`` samples (bounce passes share the marker).

        Returns:
            Trajectory, or None if the horizontal distance falls outside the
            profile's [min_distance, max_distance].
        """
        if sample_count < 1:
            raise ValueError(f"sample_count must be at least 1, got {sample_count}")

        throw_type = ThrowType(throw_type)
        profile = get_profile(throw_type)
        p0 = as_vec3(start)
        p1 = as_vec3(target)

        distance = horizontal_distance(p0, p1)
        if not profile.in_range(distance):
            logger.debug(
                "%s pass infeasible: %.2fm outside [%.1f, %.1f]",
                profile.name, distance, profile.min_distance, profile.max_distance,
            )
            return None

        if profile.is_bounce:
            return self._build_bounce(p0, p1, profile, throw_type, sample_count)
        return self._build_arc(p0, p1, profile.arc_height, throw_type, sample_count)

    def build_all(
        self,
        start: VecLike,
        target: VecLike,
        dominant_hand_available: bool = True,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
    ) -> List[Tuple[ThrowType, Trajectory]]:
        """Every feasible throw type for this pass, in profile table order."""
        options = []
        for throw_type, profile in THROW_PROFILES.items():
            if profile.requires_dominant_hand and not dominant_hand_available:
                continue
            trajectory = self.build(start, target, throw_type, sample_count)
            if trajectory is not None:
                options.append((throw_type, trajectory))
        return options

    def _build_arc(
        self,
        start: Vec3,
        target: Vec3,
        arc_height: float,
        throw_type: ThrowType,
        sample_count: int,
    ) -> Trajectory:
        solution = solve_velocity(start, target, arc_height, self.gravity, self.damping)
        flight_time = solution.flight_time

        if flight_time <= FLIGHT_TIME_EPSILON:
            return Trajectory(
                samples=[TrajectorySample(start.copy(), 0.0)],
                flight_time=0.0,
                initial_velocity=np.zeros(3),
                throw_type=throw_type,
            )

        samples = []
        for i in range(sample_count + 1):
            t = (i / sample_count) * flight_time
            pos = position_at(start, solution.velocity, t, self.gravity, self.damping)
            # Keep the ball above the floor
            pos[1] = max(pos[1], self.min_height)
            samples.append(TrajectorySample(pos, t))

        return Trajectory(
            samples=samples,
            flight_time=flight_time,
            initial_velocity=solution.velocity,
            throw_type=throw_type,
        )

    def _build_bounce(
        self,
        start: Vec3,
        target: Vec3,
        profile: ThrowProfile,
        throw_type: ThrowType,
        sample_count: int,
    ) -> Trajectory:
        ratio = profile.bounce_ratio
        bounce_point = start + (target - start) * ratio
        bounce_point[1] = self.min_height

        first_count = max(1, sample_count // 2)
        second_count = max(1, math.ceil(sample_count / 2))
        first = self._build_arc(start, bounce_point, profile.arc_height, throw_type, first_count)
        second = self._build_arc(bounce_point, target, profile.arc_height, throw_type, second_count)

        samples = list(first.samples)
        bounce_index = len(samples) - 1
        samples[bounce_index] = TrajectorySample(bounce_point.copy(), first.flight_time)

        # Second arc starts at the marker; drop its duplicate first sample.
        for sample in second.samples[1:]:
            samples.append(TrajectorySample(sample.position, first.flight_time + sample.time))

        return Trajectory(
            samples=samples,
            flight_time=first.flight_time + second.flight_time,
            initial_velocity=first.initial_velocity,
            throw_type=throw_type,
            bounce_point=bounce_point,
            bounce_index=bounce_index,
        )


# ---------- Smoke Test ----------
if __name__ == "__main__":
    from rich.console import Console
    from rich.table import Table

    console = Console()
    console.print("\n[bold cyan]═══ Trajectory Builder Smoke Test ═══[/bold cyan]\n")

    builder = TrajectoryBuilder()
    start = np.array([0.0, 1.3, 0.0])
    target = np.array([6.0, 1.3, 2.0])

    table = Table(title="Feasible passes (6.3m)")
    table.add_column("Type", style="cyan")
    table.add_column("Samples")
    table.add_column("Flight (s)", style="yellow")
    table.add_column("Bounce at (s)")
    for throw_type, traj in builder.build_all(start, target):
        table.add_row(
            throw_type.value,
            str(len(traj.samples)),
            f"{traj.flight_time:.3f}",
            f"{traj.bounce_time:.3f}" if traj.is_bounce else "-",
        )
    console.print(table)

    far = builder.build(start, np.array([50.0, 1.3, 0.0]), ThrowType.CHEST)
    assert far is None, "50m chest pass should be infeasible"
    console.print("  ✅ 50m chest pass rejected")

    console.print("\n[bold green]All trajectory builder checks passed![/bold green]\n")
