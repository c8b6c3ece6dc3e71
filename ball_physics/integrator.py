"""
Ball Physics — Velocity Verlet Integrator

Fixed-timestep symplectic integrator for a single point mass under gravity
and linear drag. It is not on the runtime path: it exists to cross-check the
analytical solver and to produce reproducibility and energy-conservation
diagnostics.

Velocity Verlet:
    1. a(t)      = a(v(t))
    2. x(t+dt)   = x(t) + v(t)*dt + 0.5*a(t)*dt²
    3. v*        = v(t) + a(t)*dt
    4. a(t+dt)   = a(v*)
    5. v(t+dt)   = v(t) + 0.5*(a(t) + a(t+dt))*dt

Acceleration: a = (-k*vx, -g - k*vy, -k*vz)
"""

from dataclasses import dataclass, field, fields, replace
from typing import List, Optional

import numpy as np

from ball_physics.ballistics import (
    BALL_MASS,
    GRAVITY,
    LINEAR_DAMPING,
    LaunchSolution,
    Vec3,
    VecLike,
    as_vec3,
    fields_equal,
    position_at,
    solve_velocity,
)

ENERGY_DAMPING_EPSILON = 1e-3   # energy is only tracked as conserved below this k
TIME_EPSILON = 1e-12


# ---------- Data Classes ----------
@dataclass(frozen=True)
class SimulationConfig:
    gravity: float = GRAVITY            # m/s², positive
    damping: float = LINEAR_DAMPING     # 1/s
    mass: float = BALL_MASS             # kg
    fixed_dt: float = 1.0 / 120.0       # s
    max_time: float = 10.0              # s
    ground_y: float = 0.0               # m
    record_every: int = 10              # keep every Nth state in the history


@dataclass(eq=False)
class SimulationState:
    position: Vec3
    velocity: Vec3
    time: float

    __eq__ = fields_equal


@dataclass(frozen=True)
class EnergyState:
    kinetic: float      # J
    potential: float    # J
    total: float        # J


@dataclass
class SimulationResult:
    final_state: SimulationState
    states: List[SimulationState]
    energy_history: List[EnergyState]
    initial_energy: float
    final_energy: float
    max_energy_error: float         # J, only tracked without drag
    max_energy_error_ratio: float
    max_position_error: float       # m, against the closed-form position
    total_steps: int


@dataclass
class ValidationResult:
    runs: int
    max_position_deviation: float   # m, spread of final positions across runs
    avg_max_energy_error: float
    max_max_energy_error: float
    avg_max_position_error: float
    max_max_position_error: float
    final_position_error: float     # m, against the analytical endpoint
    is_reproducible: bool
    sample_result: SimulationResult = field(repr=False)


# ---------- Simulator ----------
class TrajectorySimulator:
    """Velocity Verlet simulator with analytical error tracking."""

    def __init__(self, config: Optional[SimulationConfig] = None, **overrides):
        base = config or SimulationConfig()
        unknown = set(overrides) - {f.name for f in fields(SimulationConfig)}
        if unknown:
            raise ValueError(f"Unknown simulation settings: {sorted(unknown)}")
        self.config = replace(base, **overrides)
        if self.config.fixed_dt <= 0:
            raise ValueError("fixed_dt must be positive")

    def _acceleration(self, velocity: Vec3) -> Vec3:
        g = self.config.gravity
        k = self.config.damping
        return np.array([
            -k * velocity[0],
            -g - k * velocity[1],
            -k * velocity[2],
        ])

    def energy(self, position: Vec3, velocity: Vec3) -> EnergyState:
        m = self.config.mass
        kinetic = 0.5 * m * float(np.dot(velocity, velocity))
        potential = m * self.config.gravity * float(position[1])
        return EnergyState(kinetic=kinetic, potential=potential, total=kinetic + potential)

    def analytical_position(self, start: VecLike, velocity: VecLike, time: float) -> Vec3:
        return position_at(start, velocity, time, self.config.gravity, self.config.damping)

    def simulate(
        self,
        initial_position: VecLike,
        initial_velocity: VecLike,
        target_time: Optional[float] = None,
    ) -> SimulationResult:
        """Integrate until ``target_time`` (or max_time) or the ball drops below ground.

        The final step is shortened so a run ends exactly on ``target_time``.
        Time is rebuilt from the step count each step, never accumulated.
        """
        dt = self.config.fixed_dt
        max_time = self.config.max_time if target_time is None else target_time
        track_energy = self.config.damping < ENERGY_DAMPING_EPSILON
        start = as_vec3(initial_position)
        start_velocity = as_vec3(initial_velocity)

        pos = start.copy()
        vel = start_velocity.copy()
        time = 0.0
        steps = 0

        initial_energy = self.energy(pos, vel).total
        max_energy_error = 0.0
        max_position_error = 0.0

        states = [SimulationState(pos.copy(), vel.copy(), time)]
        energy_history = [self.energy(pos, vel)]

        while max_time - time > TIME_EPSILON and pos[1] >= self.config.ground_y:
            h = min(dt, max_time - time)

            acc = self._acceleration(vel)
            new_pos = pos + vel * h + 0.5 * acc * h * h
            provisional_vel = vel + acc * h
            new_acc = self._acceleration(provisional_vel)
            new_vel = vel + 0.5 * (acc + new_acc) * h

            pos = new_pos
            vel = new_vel
            steps += 1
            time = min(steps * dt, max_time)

            energy = self.energy(pos, vel)
            energy_history.append(energy)
            if track_energy:
                max_energy_error = max(max_energy_error, abs(energy.total - initial_energy))

            reference = self.analytical_position(start, start_velocity, time)
            max_position_error = max(max_position_error, float(np.linalg.norm(pos - reference)))

            if steps % self.config.record_every == 0:
                states.append(SimulationState(pos.copy(), vel.copy(), time))

        final_state = SimulationState(pos.copy(), vel.copy(), time)
        if states[-1].time != time:
            states.append(final_state)

        return SimulationResult(
            final_state=final_state,
            states=states,
            energy_history=energy_history,
            initial_energy=initial_energy,
            final_energy=self.energy(pos, vel).total,
            max_energy_error=max_energy_error,
            max_energy_error_ratio=max_energy_error / initial_energy if initial_energy > 0 else 0.0,
            max_position_error=max_position_error,
            total_steps=steps,
        )

    def solve_initial_velocity(
        self, start: VecLike, target: VecLike, arc_height: float,
    ) -> LaunchSolution:
        """Closed-form launch for this simulator's gravity and drag."""
        return solve_velocity(
            start, target, arc_height,
            gravity=self.config.gravity,
            damping=self.config.damping,
        )

    def run_validation(
        self,
        initial_position: VecLike,
        initial_velocity: VecLike,
        target_time: float,
        runs: int = 100,
    ) -> ValidationResult:
        """Repeat the same simulation ``runs`` times and summarise drift.

        The simulator is a pure function of its inputs, so the spread of final
        positions must be exactly zero, not merely small.
        """
        if runs < 1:
            raise ValueError("runs must be at least 1")

        results = [
            self.simulate(initial_position, initial_velocity, target_time)
            for _ in range(runs)
        ]

        reference = results[0].final_state.position
        max_position_deviation = max(
            float(np.linalg.norm(r.final_state.position - reference)) for r in results
        )

        energy_errors = np.array([r.max_energy_error for r in results])
        position_errors = np.array([r.max_position_error for r in results])

        final_time = results[0].final_state.time
        analytical_final = self.analytical_position(initial_position, initial_velocity, final_time)
        final_position_error = float(np.linalg.norm(reference - analytical_final))

        return ValidationResult(
            runs=runs,
            max_position_deviation=max_position_deviation,
            avg_max_energy_error=float(energy_errors.mean()),
            max_max_energy_error=float(energy_errors.max()),
            avg_max_position_error=float(position_errors.mean()),
            max_max_position_error=float(position_errors.max()),
            final_position_error=final_position_error,
            is_reproducible=max_position_deviation == 0.0,
            sample_result=results[0],
        )
