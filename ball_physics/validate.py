"""
Ball Physics — Integrator Validation Report

Development tool, not imported by runtime code. Runs the velocity Verlet
simulator against the analytical solver for a three-point shot and prints
reproducibility, energy and accuracy diagnostics.

Usage:
    python -m ball_physics.validate
    python -m ball_physics.validate --runs 20 --damping 0.05
    python -m ball_physics.validate --dt 0.004166667
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ball_physics.integrator import SimulationConfig, TrajectorySimulator, ValidationResult

console = Console()
logger = logging.getLogger("ball_physics.validate")

# Three-point line to rim
SHOT_START = np.array([0.0, 2.0, 0.0])
SHOT_TARGET = np.array([6.75, 3.05, 0.0])
SHOT_ARC_HEIGHT = 2.4

POSITION_TOLERANCE = 1e-2       # m at dt = 1/120
ENERGY_RATIO_TOLERANCE = 1e-6


def run_case(
    label: str, damping: float, dt: float, runs: int,
) -> Tuple[str, SimulationConfig, ValidationResult]:
    simulator = TrajectorySimulator(SimulationConfig(damping=damping, fixed_dt=dt))
    launch = simulator.solve_initial_velocity(SHOT_START, SHOT_TARGET, SHOT_ARC_HEIGHT)
    logger.info(
        "%s: v0=(%.4f, %.4f, %.4f) m/s, T=%.4f s",
        label, *launch.velocity, launch.flight_time,
    )
    result = simulator.run_validation(SHOT_START, launch.velocity, launch.flight_time, runs)
    return label, simulator.config, result


def render_case(label: str, config: SimulationConfig, result: ValidationResult) -> None:
    sample = result.sample_result
    table = Table(title=f"{label}  (dt={config.fixed_dt:.6f}s, k={config.damping})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="yellow")

    table.add_row("Runs", str(result.runs))
    table.add_row("Max position deviation", f"{result.max_position_deviation:.4e} m")
    table.add_row("Reproducible", "✅" if result.is_reproducible else "❌")
    table.add_row("Initial energy", f"{sample.initial_energy:.4f} J")
    table.add_row("Final energy", f"{sample.final_energy:.4f} J")
    if config.damping < 1e-3:
        table.add_row("Max energy error", f"{result.max_max_energy_error:.4e} J")
        table.add_row("Energy error ratio", f"{sample.max_energy_error_ratio:.4e}")
    else:
        table.add_row("Max energy error", "n/a (dissipative)")
    table.add_row("Max position error", f"{result.max_max_position_error:.4e} m")
    table.add_row("Final position error", f"{result.final_position_error:.4e} m")
    table.add_row("Steps", str(sample.total_steps))
    table.add_row("Simulated time", f"{sample.final_state.time:.4f} s")
    console.print(table)


def check_case(config: SimulationConfig, result: ValidationResult, base_dt: float) -> List[str]:
    """Failed checks for one case, empty when everything holds."""
    failures = []
    if not result.is_reproducible:
        failures.append("runs are not bit-identical")

    # Second-order scheme: halving dt quarters the tolerance
    tolerance = POSITION_TOLERANCE * (config.fixed_dt / base_dt) ** 2
    if result.final_position_error > tolerance:
        failures.append(f"final position error {result.final_position_error:.3e} > {tolerance:.3e}")

    if config.damping < 1e-3 and result.sample_result.max_energy_error_ratio > ENERGY_RATIO_TOLERANCE:
        failures.append(f"energy drift {result.sample_result.max_energy_error_ratio:.3e}")
    return failures


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate the Verlet integrator against closed-form flight")
    parser.add_argument("--runs", type=int, default=100, help="Repeated runs per case")
    parser.add_argument("--damping", type=float, default=0.05, help="Drag coefficient for the damped case")
    parser.add_argument("--dt", type=float, default=1.0 / 120.0, help="Base timestep (s)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    console.print("\n[bold cyan]═══ Trajectory Integrator Validation ═══[/bold cyan]\n")

    cases = [
        run_case("Case 1: no drag", 0.0, args.dt, args.runs),
        run_case(f"Case 2: drag k={args.damping}", args.damping, args.dt, args.runs),
        run_case("Case 3: no drag, half timestep", 0.0, args.dt / 2.0, args.runs),
    ]

    all_failures = []
    for label, config, result in cases:
        render_case(label, config, result)
        for failure in check_case(config, result, args.dt):
            all_failures.append(f"{label}: {failure}")

    summary = Table(title="Summary")
    summary.add_column("Case", style="cyan")
    summary.add_column("dt")
    summary.add_column("k")
    summary.add_column("Max position error", style="yellow")
    summary.add_column("Energy error ratio", style="yellow")
    for label, config, result in cases:
        ratio = (
            f"{result.sample_result.max_energy_error_ratio:.2e}"
            if config.damping < 1e-3 else "n/a"
        )
        summary.add_row(label, f"{config.fixed_dt:.6f}", str(config.damping),
                        f"{result.max_max_position_error:.2e} m", ratio)
    console.print(summary)

    if all_failures:
        for failure in all_failures:
            console.print(f"[bold red]❌ {failure}[/bold red]")
        return 1

    console.print("\n[bold green]All integrator checks passed![/bold green]\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
