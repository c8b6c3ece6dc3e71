"""
Pass Risk Test Suite — Stage 1: EASY

Basic sanity checks — does everything work at the most fundamental level?
These tests should ALWAYS pass. If any fail, something is seriously broken.

Tests:
    - Analytical solver formulas (flight time, launch velocity, landing)
    - Throw and shot profile tables
    - Trajectory builder basics (sample counts, endpoints, infeasible range)
    - Timing curve values per band
    - Risk level buckets and recommendations
    - Packaged configuration loads
"""

import math

import numpy as np
import pytest

from ball_physics.ballistics import (
    DRAG_FLIGHT_TIME_APPROXIMATION,
    GRAVITY,
    as_vec3,
    flight_time_for_arc,
    horizontal_distance,
    position_at,
    position_on_parabola,
    solve_velocity,
    velocity_at,
)
from ball_physics.profiles import (
    BASE_PASS_SPEED,
    THROW_PROFILES,
    ShotType,
    ThrowType,
    classify_shot,
    feasible_throw_types,
    get_profile,
    shot_arc_height,
)
from risk_engine.curves import (
    PASS_LANE_CURVE,
    TRAJECTORY_CURVE,
    Recommendation,
    RiskLevel,
    RiskThresholds,
)
from risk_engine.config import DEFAULT_CONFIG_PATH, load_risk_config


# ============================================================
# 1. Analytical Solver
# ============================================================

class TestFlightTime:
    """Flight time from apex height."""

    def test_flight_time_formula(self):
        """T = sqrt(8h/g)."""
        assert flight_time_for_arc(2.4) == pytest.approx(math.sqrt(8 * 2.4 / GRAVITY))

    def test_higher_arc_takes_longer(self):
        """A lob should hang in the air longer than a chest pass."""
        assert flight_time_for_arc(2.0) > flight_time_for_arc(0.3)

    def test_weaker_gravity_takes_longer(self):
        """Same arc on the moon is slower."""
        assert flight_time_for_arc(1.0, gravity=1.62) > flight_time_for_arc(1.0)


class TestSolveVelocity:
    """Launch velocity without drag."""

    def test_no_drag_components(self, three_point_shot):
        """v = (Δx/T, (Δy + 4h)/T, Δz/T)."""
        start, target, arc = three_point_shot
        solution = solve_velocity(start, target, arc)
        T = solution.flight_time
        np.testing.assert_allclose(
            solution.velocity,
            [6.75 / T, (1.05 + 4 * arc) / T, 0.0],
        )

    def test_lands_on_target(self, three_point_shot):
        """position_at(T) should reproduce the target."""
        start, target, arc = three_point_shot
        solution = solve_velocity(start, target, arc)
        landing = position_at(start, solution.velocity, solution.flight_time)
        assert np.linalg.norm(landing - target) < 1e-9

    def test_lands_on_target_with_drag(self, three_point_shot):
        """Drag-aware solution should still land on the target."""
        start, target, arc = three_point_shot
        solution = solve_velocity(start, target, arc, damping=0.05)
        landing = position_at(start, solution.velocity, solution.flight_time, damping=0.05)
        assert np.linalg.norm(landing - target) < 1e-9

    def test_drag_needs_faster_launch(self, three_point_shot):
        """Drag bleeds speed, so the horizontal launch must be faster."""
        start, target, arc = three_point_shot
        plain = solve_velocity(start, target, arc)
        damped = solve_velocity(start, target, arc, damping=0.05)
        assert damped.velocity[0] > plain.velocity[0]

    def test_apex_above_chord(self):
        """Flat pass should peak arc_height above the chord at T/2."""
        start = np.array([0.0, 1.0, 0.0])
        target = np.array([5.0, 1.0, 0.0])
        solution = solve_velocity(start, target, 0.5)
        apex = position_at(start, solution.velocity, solution.flight_time / 2)
        assert apex[1] == pytest.approx(1.5)

    def test_drag_solution_flagged_approximate(self, three_point_shot):
        """Drag solutions reuse the no-drag T and say so; exact ones do not."""
        start, target, arc = three_point_shot
        assert solve_velocity(start, target, arc).approximate is False
        assert solve_velocity(start, target, arc, damping=1e-7).approximate is False
        damped = solve_velocity(start, target, arc, damping=0.05)
        assert damped.approximate is DRAG_FLIGHT_TIME_APPROXIMATION
        assert damped.flight_time == flight_time_for_arc(arc)

    def test_velocity_at_zero_is_launch(self):
        """velocity_at(t=0) returns the launch velocity."""
        v0 = np.array([3.0, 4.0, -1.0])
        np.testing.assert_allclose(velocity_at(v0, 0.0, damping=0.05), v0)

    def test_velocity_at_no_drag(self):
        """Without drag only the vertical component changes."""
        v = velocity_at([3.0, 4.0, 0.0], 1.0)
        np.testing.assert_allclose(v, [3.0, 4.0 - GRAVITY, 0.0])


class TestGeometryHelpers:
    """Small vector helpers."""

    def test_horizontal_distance_ignores_height(self):
        """Only x and z count."""
        assert horizontal_distance([0, 0, 0], [3, 10, 4]) == pytest.approx(5.0)

    def test_as_vec3_copies(self):
        """as_vec3 should return a new float array."""
        source = np.array([1, 2, 3])
        vec = as_vec3(source)
        vec[0] = 99.0
        assert source[0] == 1
        assert vec.dtype == np.float64

    def test_parabola_midpoint(self):
        """Halfway along the arc sits arc_height above the chord midpoint."""
        point = position_on_parabola([0, 1, 0], [4, 1, 0], 0.8, 0.5)
        np.testing.assert_allclose(point, [2.0, 1.8, 0.0])

    def test_parabola_endpoints(self):
        """Progress 0 and 1 hit start and target."""
        np.testing.assert_allclose(position_on_parabola([0, 1, 0], [4, 2, 0], 0.8, 0.0), [0, 1, 0])
        np.testing.assert_allclose(position_on_parabola([0, 1, 0], [4, 2, 0], 0.8, 1.0), [4, 2, 0])


# ============================================================
# 2. Profiles
# ============================================================

class TestThrowProfiles:
    """Pass type table."""

    def test_all_throw_types_have_profiles(self):
        """Every ThrowType should have a row."""
        assert set(THROW_PROFILES) == set(ThrowType)

    def test_chest_profile_values(self):
        """Chest pass envelope."""
        chest = get_profile(ThrowType.CHEST)
        assert chest.min_distance == 2.0
        assert chest.max_distance == 10.0
        assert chest.arc_height == 0.3
        assert not chest.is_bounce

    def test_bounce_profile_has_ratio(self):
        """Bounce pass hits the floor halfway."""
        bounce = get_profile(ThrowType.BOUNCE)
        assert bounce.is_bounce
        assert bounce.bounce_ratio == 0.5

    def test_lookup_by_string_tag(self):
        """String tags resolve like enum members."""
        assert get_profile("lob") is THROW_PROFILES[ThrowType.LOB]

    def test_unknown_tag_raises_keyerror(self):
        """Unknown tags are caller errors."""
        with pytest.raises(KeyError):
            get_profile("behind_the_back")

    def test_nominal_speed(self):
        """Long pass travels faster than base speed."""
        assert get_profile(ThrowType.LONG).nominal_speed(BASE_PASS_SPEED) == pytest.approx(13.0)

    def test_feasible_at_six_meters(self):
        """Everything but the long pass reaches 6m."""
        assert feasible_throw_types(6.0) == [
            ThrowType.CHEST, ThrowType.BOUNCE, ThrowType.LOB, ThrowType.ONE_HAND,
        ]

    def test_feasible_without_dominant_hand(self):
        """Dominant-hand passes drop out when that hand is busy."""
        assert feasible_throw_types(9.0, dominant_hand_available=False) == [
            ThrowType.CHEST, ThrowType.LOB,
        ]


class TestShotProfiles:
    """Shot arc table and distance bands."""

    def test_three_point_arc(self):
        """Three-pointers use the highest arc."""
        assert shot_arc_height(ShotType.THREE_POINT) == 2.4

    def test_close_layup_flatter(self):
        """Layups inside 1.2m use the minimum arc."""
        assert shot_arc_height(ShotType.LAYUP, distance=1.0) == 0.6
        assert shot_arc_height(ShotType.LAYUP, distance=1.5) == 0.8

    def test_unknown_shot_gets_default(self):
        """No shot type falls back to the default arc."""
        assert shot_arc_height(None) == 1.2

    def test_classify_shot_bands(self):
        """Distance bands: layup, midrange, three, out of range."""
        assert classify_shot(1.5) is ShotType.LAYUP
        assert classify_shot(6.75) is ShotType.MIDRANGE
        assert classify_shot(8.0) is ShotType.THREE_POINT
        assert classify_shot(12.0) is None


# ============================================================
# 3. Trajectory Builder Basics
# ============================================================

class TestTrajectoryBuilder:
    """Sample counts, endpoints, infeasible distances."""

    def test_chest_sample_count(self, builder, chest_pass_endpoints):
        """n intervals give n + 1 samples."""
        start, target = chest_pass_endpoints
        traj = builder.build(start, target, ThrowType.CHEST, sample_count=30)
        assert len(traj.samples) == 31

    def test_first_and_last_sample(self, builder, chest_pass_endpoints):
        """Samples start at release and end at flight_time on the target."""
        start, target = chest_pass_endpoints
        traj = builder.build(start, target, ThrowType.CHEST)
        assert traj.samples[0].time == 0.0
        assert traj.samples[-1].time == traj.flight_time
        np.testing.assert_allclose(traj.start, start, atol=1e-9)
        np.testing.assert_allclose(traj.end, target, atol=1e-9)

    def test_times_increase(self, builder, chest_pass_endpoints):
        """Sample times are strictly increasing for an arc."""
        start, target = chest_pass_endpoints
        traj = builder.build(start, target, ThrowType.LOB)
        assert np.all(np.diff(traj.times) > 0)

    def test_chest_pass_out_of_range(self, builder):
        """A 50m chest pass is infeasible."""
        traj = builder.build([0, 1.3, 0], [50, 1.3, 0], ThrowType.CHEST)
        assert traj is None

    def test_too_short_pass(self, builder):
        """Passes under the minimum distance are infeasible."""
        assert builder.build([0, 1.3, 0], [1, 1.3, 0], ThrowType.CHEST) is None

    def test_build_all_skips_infeasible(self, builder, chest_pass_endpoints):
        """build_all returns only reachable throw types."""
        start, target = chest_pass_endpoints
        types = [t for t, _ in builder.build_all(start, target)]
        assert ThrowType.LONG not in types
        assert ThrowType.CHEST in types

    def test_throw_type_recorded(self, builder, chest_pass_endpoints):
        """Trajectories remember their throw type."""
        start, target = chest_pass_endpoints
        traj = builder.build(start, target, "one_hand")
        assert traj.throw_type is ThrowType.ONE_HAND
        assert not traj.is_bounce
        assert traj.bounce_time == 0.0


# ============================================================
# 4. Timing Curve & Risk Levels
# ============================================================

class TestTimingCurve:
    """Probability per margin band."""

    @pytest.mark.parametrize("margin,expected", [
        (-0.5, 0.95),
        (0.0, 0.6),
        (0.1, 0.45),
        (0.2, 0.3),
        (0.5, 0.1),
        (1.0, 0.05),
    ])
    def test_trajectory_curve_values(self, margin, expected):
        """Canonical curve values at band anchors and inside bands."""
        assert TRAJECTORY_CURVE.probability(margin) == pytest.approx(expected)

    def test_pass_lane_curve_continuous_at_first_band(self):
        """pass_lane preset anchors its first band at -0.3s."""
        assert PASS_LANE_CURVE.probability(-0.3) == pytest.approx(0.9)
        assert PASS_LANE_CURVE.probability(-0.5) == pytest.approx(0.94)

    def test_curve_clamped_high(self):
        """Very early defenders never exceed 1.0."""
        assert TRAJECTORY_CURVE.probability(-5.0) == 1.0

    def test_curve_clamped_low(self):
        """Very late defenders never go below 0.0."""
        assert TRAJECTORY_CURVE.probability(2.0) == 0.0

    def test_curve_is_callable(self):
        """Curves can be called directly."""
        assert TRAJECTORY_CURVE(0.0) == TRAJECTORY_CURVE.probability(0.0)


class TestRiskLevels:
    """Level buckets and recommendations."""

    @pytest.mark.parametrize("probability,level", [
        (0.0, RiskLevel.SAFE),
        (0.29, RiskLevel.SAFE),
        (0.3, RiskLevel.CAUTION),
        (0.59, RiskLevel.CAUTION),
        (0.6, RiskLevel.DANGER),
        (0.79, RiskLevel.DANGER),
        (0.8, RiskLevel.HIGH_DANGER),
        (1.0, RiskLevel.HIGH_DANGER),
    ])
    def test_level_buckets(self, probability, level):
        """Cut points at 0.3 / 0.6 / 0.8."""
        assert RiskThresholds().level(probability) is level

    @pytest.mark.parametrize("probability,recommendation", [
        (0.1, Recommendation.EXECUTE),
        (0.3, Recommendation.WAIT),
        (0.69, Recommendation.WAIT),
        (0.7, Recommendation.ABORT),
    ])
    def test_recommendations(self, probability, recommendation):
        """EXECUTE below 0.3, WAIT below 0.7, else ABORT."""
        assert RiskThresholds().recommendation(probability) is recommendation


# ============================================================
# 5. Configuration
# ============================================================

class TestPackagedConfig:
    """The shipped risk.yaml."""

    def test_config_file_exists(self):
        """risk.yaml ships with the package."""
        assert DEFAULT_CONFIG_PATH.exists()

    def test_defaults_loaded(self, risk_config):
        """Packaged values match the documented defaults."""
        assert risk_config.physics.gravity == 9.81
        assert risk_config.physics.damping == 0.05
        assert risk_config.timing_curve.name == "trajectory"
        assert risk_config.thresholds == RiskThresholds()

    def test_both_presets_available(self, risk_config):
        """trajectory and pass_lane curves are both present."""
        assert {"trajectory", "pass_lane"} <= set(risk_config.curves)

    def test_block_distances(self, risk_config):
        """Shot-band block distances keyed by ShotType."""
        distances = risk_config.shot_block.block_distance
        assert distances[ShotType.LAYUP] == 1.5
        assert distances[ShotType.THREE_POINT] == 2.5

    def test_load_twice_is_equal(self):
        """Loading is deterministic."""
        assert load_risk_config().physics == load_risk_config().physics
