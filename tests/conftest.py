"""
Pass Risk Test Suite — Shared Fixtures

Provides reusable pytest fixtures for all test stages.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from ball_physics.integrator import SimulationConfig, TrajectorySimulator
from ball_physics.trajectory import TrajectoryBuilder
from risk_engine.block import ShotBlockScorer
from risk_engine.config import load_risk_config
from risk_engine.defenders import DefenderSnapshot
from risk_engine.interception import RiskScorer


# ---------- Physics Fixtures ----------
@pytest.fixture
def builder():
    """Trajectory builder with packaged physics (g=9.81, k=0.05)."""
    return TrajectoryBuilder()


@pytest.fixture
def drag_free_builder():
    """Builder without drag, so sampled arcs are exact parabolas."""
    return TrajectoryBuilder(damping=0.0)


@pytest.fixture
def no_drag_simulator():
    """Verlet simulator at 120 Hz without drag."""
    return TrajectorySimulator(SimulationConfig(damping=0.0))


@pytest.fixture
def three_point_shot():
    """(start, target, arc_height) for a three-point shot at the rim."""
    return np.array([0.0, 2.0, 0.0]), np.array([6.75, 3.05, 0.0]), 2.4


@pytest.fixture
def chest_pass_endpoints():
    """Passer and receiver 6m apart at chest height."""
    return np.array([0.0, 1.3, 0.0]), np.array([6.0, 1.3, 0.0])


# ---------- Risk Fixtures ----------
@pytest.fixture
def risk_config():
    """Packaged risk configuration."""
    return load_risk_config()


@pytest.fixture
def scorer(risk_config):
    """Interception scorer on the packaged configuration."""
    return RiskScorer(risk_config)


@pytest.fixture
def block_scorer(risk_config):
    """Shot-block scorer on the packaged configuration."""
    return ShotBlockScorer(risk_config)


@pytest.fixture
def make_defender():
    """Factory for defender snapshots with sensible defaults."""
    def _make(position, side="away", id="d1", **kwargs):
        return DefenderSnapshot(id=id, side=side, position=np.asarray(position, dtype=float), **kwargs)
    return _make


@pytest.fixture
def seeded_rng():
    """Seeded numpy RNG for determinism."""
    return np.random.default_rng(seed=42)
