"""
Ball Physics — Analytical Projectile Solver

Closed-form projectile equations for a ball under gravity with optional
linear drag. No numerical integration happens here, so results carry no
accumulated step error; use ``ball_physics.integrator`` to cross-check.

Coordinate system: x/z horizontal, y up.
All units SI: meters, seconds, kg.

Equations of motion (linear drag k, force ∝ -k·v):
    horizontal: dv/dt = -k*v
    vertical:   dv/dt = -g - k*v

Exact solutions:
    horizontal: x(t) = x0 + v0 * (1 - e^(-k*t)) / k
    vertical:   y(t) = y0 + (v0 + g/k) * (1 - e^(-k*t)) / k - g*t/k
"""

import math
from dataclasses import dataclass, fields
from typing import Sequence, Union

import numpy as np

# ---------- Constants ----------
GRAVITY = 9.81                # m/s²
BALL_RADIUS = 0.12            # m (size 7 basketball, 24cm diameter)
BALL_MASS = 0.62              # kg
LINEAR_DAMPING = 0.05         # 1/s
DAMPING_EPSILON = 1e-6        # below this the drag formulas collapse to no-drag

# Flight time under drag reuses the no-drag T = sqrt(8h/g) instead of solving
# the damped apex problem. Risk thresholds were tuned against this.
DRAG_FLIGHT_TIME_APPROXIMATION = True

Vec3 = np.ndarray
VecLike = Union[Sequence[float], np.ndarray]


def as_vec3(value: VecLike) -> Vec3:
    """Copy a 3-component sequence into a float64 vector."""
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {vec.shape}")
    return vec


def fields_equal(a, b):
    """Field-by-field equality for dataclasses holding numpy vectors.

    Generated ``__eq__`` compares field tuples, which is ambiguous for arrays.
    Classes using this are declared ``eq=False`` and are unhashable.
    """
    if a.__class__ is not b.__class__:
        return NotImplemented
    for f in fields(a):
        x = getattr(a, f.name)
        y = getattr(b, f.name)
        if isinstance(x, np.ndarray) or isinstance(y, np.ndarray):
            if x is None or y is None or not np.array_equal(x, y):
                return False
        elif x != y:
            return False
    return True


@dataclass(frozen=True, eq=False)
class LaunchSolution:
    """Initial velocity and flight time that carry the ball onto a target.

    ``approximate`` is set when drag is on and the flight time is the no-drag
    T, so the apex only approximately reaches the requested arc height.
    """
    velocity: Vec3
    flight_time: float        # s
    approximate: bool = False

    __eq__ = fields_equal


# ---------- Helpers ----------
def horizontal_distance(a: VecLike, b: VecLike) -> float:
    """Distance between two points in the ground (x/z) plane."""
    dx = b[0] - a[0]
    dz = b[2] - a[2]
    return math.sqrt(dx * dx + dz * dz)


def _damping_factor(damping: float, time: float) -> float:
    """Integrating factor (1 - e^(-k*t)) / k."""
    return -math.expm1(-damping * time) / damping


def flight_time_for_arc(arc_height: float, gravity: float = GRAVITY) -> float:
    """Flight time for an apex ``arc_height`` above the start→target chord.

    The vertical offset from the chord is y_off(t) = v*t - 0.5*g*t², which
    peaks at T/2 with h = v² / (2g). Solving both gives T = sqrt(8h/g).
    """
    if arc_height <= 0:
        raise ValueError(f"arc_height must be positive, got {arc_height}")
    if gravity <= 0:
        raise ValueError(f"gravity must be positive, got {gravity}")
    return math.sqrt(8.0 * arc_height / gravity)


# ---------- Solver ----------
def solve_velocity(
    start: VecLike,
    target: VecLike,
    arc_height: float,
    gravity: float = GRAVITY,
    damping: float = 0.0,
) -> LaunchSolution:
    """Initial velocity that lands on ``target`` with the requested arc.

    Without drag:
        v_x = Δx / T,  v_z = Δz / T,  v_y = (Δy + 4h) / T

    With drag the exact solutions above are inverted for v0 using the same
    no-drag flight time T (see DRAG_FLIGHT_TIME_APPROXIMATION).

    Args:
        start: Release position [x, y, z].
        target: Arrival position [x, y, z].
        arc_height: Apex height above the straight start→target line (m).
        gravity: Gravity magnitude (m/s²), positive.
        damping: Linear drag coefficient k (1/s).

    Returns:
        LaunchSolution with the velocity vector and flight time.

    Raises:
        ValueError: if ``arc_height`` or ``gravity`` is not positive.
    """
    p0 = as_vec3(start)
    p1 = as_vec3(target)
    flight_time = flight_time_for_arc(arc_height, gravity)
    delta = p1 - p0

    if damping < DAMPING_EPSILON:
        velocity = np.array([
            delta[0] / flight_time,
            (delta[1] + 4.0 * arc_height) / flight_time,
            delta[2] / flight_time,
        ])
        return LaunchSolution(velocity=velocity, flight_time=flight_time)

    k = damping
    g = gravity
    factor = _damping_factor(k, flight_time)

    velocity = np.array([
        delta[0] / factor,
        (delta[1] + g * flight_time / k) / factor - g / k,
        delta[2] / factor,
    ])
    return LaunchSolution(
        velocity=velocity,
        flight_time=flight_time,
        approximate=DRAG_FLIGHT_TIME_APPROXIMATION,
    )


def position_at(
    start: VecLike,
    velocity: VecLike,
    time: float,
    gravity: float = GRAVITY,
    damping: float = 0.0,
) -> Vec3:
    """Position of the ball ``time`` seconds after release."""
    p0 = as_vec3(start)
    v0 = as_vec3(velocity)
    t = time

    if damping < DAMPING_EPSILON:
        return np.array([
            p0[0] + v0[0] * t,
            p0[1] + v0[1] * t - 0.5 * gravity * t * t,
            p0[2] + v0[2] * t,
        ])

    k = damping
    g = gravity
    factor = _damping_factor(k, t)
    return np.array([
        p0[0] + v0[0] * factor,
        p0[1] + (v0[1] + g / k) * factor - g * t / k,
        p0[2] + v0[2] * factor,
    ])


def velocity_at(
    velocity: VecLike,
    time: float,
    gravity: float = GRAVITY,
    damping: float = 0.0,
) -> Vec3:
    """Velocity of the ball ``time`` seconds after release."""
    v0 = as_vec3(velocity)
    if damping < DAMPING_EPSILON:
        return np.array([v0[0], v0[1] - gravity * time, v0[2]])

    decay = math.exp(-damping * time)
    g_over_k = gravity / damping
    return np.array([
        v0[0] * decay,
        (v0[1] + g_over_k) * decay - g_over_k,
        v0[2] * decay,
    ])


def position_on_parabola(
    start: VecLike,
    target: VecLike,
    arc_height: float,
    progress: float,
) -> Vec3:
    """Point at ``progress`` (0-1) along the arc, independent of time.

    Linear interpolation along the chord plus a vertical offset 4h*u*(1-u),
    which reaches ``arc_height`` at u = 0.5.
    """
    p0 = as_vec3(start)
    p1 = as_vec3(target)
    u = float(np.clip(progress, 0.0, 1.0))
    point = p0 + u * (p1 - p0)
    point[1] += 4.0 * arc_height * u * (1.0 - u)
    return point


# ---------- Smoke Test ----------
if __name__ == "__main__":
    from rich.console import Console

    console = Console()
    console.print("\n[bold cyan]═══ Analytical Solver Smoke Test ═══[/bold cyan]\n")

    start = np.array([0.0, 2.0, 0.0])
    target = np.array([6.75, 3.05, 0.0])

    console.print("[bold]Test 1:[/bold] Three-point shot, no drag")
    solution = solve_velocity(start, target, arc_height=2.4)
    landing = position_at(start, solution.velocity, solution.flight_time)
    console.print(f"  Velocity: {solution.velocity}  T = {solution.flight_time:.4f}s")
    console.print(f"  Landing error: {np.linalg.norm(landing - target):.2e} m")
    assert np.linalg.norm(landing - target) < 1e-9

    console.print("\n[bold]Test 2:[/bold] Same shot with k = 0.05")
    damped = solve_velocity(start, target, 2.4, damping=LINEAR_DAMPING)
    landing = position_at(start, damped.velocity, damped.flight_time, damping=LINEAR_DAMPING)
    console.print(f"  Velocity: {damped.velocity}")
    console.print(f"  Landing error: {np.linalg.norm(landing - target):.2e} m")
    assert np.linalg.norm(landing - target) < 1e-9

    console.print("\n[bold green]All analytical solver checks passed![/bold green]\n")
