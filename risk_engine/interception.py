"""
Risk Engine — Pass Interception Scoring

Scores how likely each opposing defender is to reach a pass before the ball
does, and aggregates the roster into a single risk level.

Per defender:
    1. bounce passes: ignore samples before the ground contact
    2. effective distance = min(|now - sample|, |forecast(t) - sample|)
    3. arrival = reaction_time + max(0, effective - intercept_radius) / speed
    4. margin  = arrival - sample time   (negative → defender is early)
    5. representative sample: first improvement on |margin| or on raw distance
    6. probability = timing curve(margin), then distance/balance adjustments
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ball_physics.ballistics import Vec3, VecLike, as_vec3, fields_equal, horizontal_distance
from ball_physics.profiles import ThrowType, get_profile
from ball_physics.trajectory import Trajectory, TrajectoryBuilder
from risk_engine.config import RiskConfig, load_risk_config
from risk_engine.curves import Recommendation, RiskLevel
from risk_engine.defenders import DefenderSnapshot, capture_roster

logger = logging.getLogger(__name__)

SPEED_EPSILON = 1e-8

PASS_LANE_TYPES = (ThrowType.CHEST, ThrowType.BOUNCE)


# ---------- Data Classes ----------
@dataclass(frozen=True, eq=False)
class InterceptionRisk:
    probability: float
    defender: DefenderSnapshot
    intercept_point: Vec3
    timing_margin: float        # s, defender arrival - ball arrival
    intercept_time: float       # s, ball time at the representative sample
    distance: float             # m, raw defender→sample distance
    level: RiskLevel

    __eq__ = fields_equal


@dataclass
class AggregateRisk:
    max_risk: Optional[InterceptionRisk]
    per_defender: List[InterceptionRisk]
    level: RiskLevel
    recommendation: Recommendation
    danger_point_min: float = field(default=0.1, repr=False)

    @property
    def probability(self) -> float:
        return self.max_risk.probability if self.max_risk else 0.0

    @property
    def primary_threat(self) -> Optional[DefenderSnapshot]:
        return self.max_risk.defender if self.max_risk else None

    @property
    def danger_points(self) -> List[InterceptionRisk]:
        return [r for r in self.per_defender if r.probability > self.danger_point_min]


@dataclass(frozen=True)
class PassLaneRisk:
    receiver_id: str
    risk: float
    throw_type: Optional[ThrowType]      # None when no lane type reaches
    trajectory: Optional[Trajectory] = field(default=None, repr=False)


# ---------- Scorer ----------
class RiskScorer:
    """Interception risk for sampled trajectories."""

    def __init__(self, config: Optional[RiskConfig] = None, builder: Optional[TrajectoryBuilder] = None):
        self.config = config or load_risk_config()
        physics = self.config.physics
        self.builder = builder or TrajectoryBuilder(
            gravity=physics.gravity,
            damping=physics.damping,
            ball_radius=physics.ball_radius,
            ground_y=physics.ground_y,
        )
        self.curve = self.config.timing_curve
        self.thresholds = self.config.thresholds

    def score(
        self,
        trajectory: Trajectory,
        defenders: Sequence[DefenderSnapshot],
        throwing_side: str,
    ) -> AggregateRisk:
        """Score every opposing defender against one trajectory."""
        roster = capture_roster(defenders)
        per_defender: List[InterceptionRisk] = []
        max_risk: Optional[InterceptionRisk] = None

        for defender in roster:
            if defender.side == throwing_side:
                continue
            risk = self.score_defender(trajectory, defender)
            if risk is None:
                logger.debug("Defender %s has no reachable sample", defender.id)
                continue
            per_defender.append(risk)
            if max_risk is None or risk.probability > max_risk.probability:
                max_risk = risk

        probability = max_risk.probability if max_risk else 0.0
        return AggregateRisk(
            max_risk=max_risk,
            per_defender=per_defender,
            level=self.thresholds.level(probability),
            recommendation=self.thresholds.recommendation(probability),
            danger_point_min=self.config.interception.danger_point_min,
        )

    def score_defender(
        self, trajectory: Trajectory, defender: DefenderSnapshot,
    ) -> Optional[InterceptionRisk]:
        """Interception risk for one defender, or None with no eligible sample."""
        bounce_time = trajectory.bounce_time if trajectory.is_bounce else 0.0

        best_sample = None
        best_margin = math.inf
        best_distance = math.inf

        for sample in trajectory.samples:
            # The ball can't be picked off before it bounces
            if sample.time < bounce_time:
                continue

            distance = float(np.linalg.norm(sample.position - defender.position))
            predicted = defender.predicted_position(sample.time)
            predicted_distance = float(np.linalg.norm(sample.position - predicted))
            effective = min(distance, predicted_distance)

            margin = self.arrival_time(defender, effective) - sample.time

            if abs(margin) < abs(best_margin) or distance < best_distance:
                best_sample = sample
                best_margin = margin
                best_distance = distance

        if best_sample is None:
            return None

        probability = self.adjust_probability(
            self.curve.probability(best_margin), best_distance, defender.can_act_now,
        )
        return InterceptionRisk(
            probability=probability,
            defender=defender,
            intercept_point=best_sample.position.copy(),
            timing_margin=best_margin,
            intercept_time=best_sample.time,
            distance=best_distance,
            level=self.thresholds.level(probability),
        )

    @staticmethod
    def arrival_time(defender: DefenderSnapshot, effective_distance: float) -> float:
        """Reaction delay plus travel to the edge of the intercept radius."""
        travel = max(0.0, effective_distance - defender.intercept_radius)
        if travel == 0.0:
            return defender.reaction_time
        if defender.speed < SPEED_EPSILON:
            return math.inf
        return defender.reaction_time + travel / defender.speed

    def adjust_probability(self, probability: float, distance: float, can_act_now: bool) -> float:
        settings = self.config.interception
        if distance < settings.close_distance:
            probability = min(1.0, probability * settings.close_multiplier)
        elif distance > settings.far_distance:
            probability *= settings.far_multiplier

        if not can_act_now:
            probability *= settings.off_balance_multiplier

        return min(1.0, max(0.0, probability))

    def select_safest(
        self,
        trajectories: Sequence[Trajectory],
        defenders: Sequence[DefenderSnapshot],
        throwing_side: str,
    ) -> Optional[Tuple[Trajectory, AggregateRisk]]:
        """Lowest-risk candidate; ties keep the first one supplied."""
        roster = capture_roster(defenders)
        safest = None
        lowest = math.inf

        for trajectory in trajectories:
            analysis = self.score(trajectory, roster, throwing_side)
            if analysis.probability < lowest:
                lowest = analysis.probability
                safest = (trajectory, analysis)

        return safest

    def assess_pass_lanes(
        self,
        passer_position: VecLike,
        receivers: Sequence[Tuple[str, VecLike]],
        defenders: Sequence[DefenderSnapshot],
        throwing_side: str,
        sample_count: Optional[int] = None,
    ) -> List[PassLaneRisk]:
        """Best of chest/bounce risk for every receiver.

        Receivers are ``(id, catch_position)`` pairs. A receiver that neither
        lane type can reach scores 1.0.
        """
        if sample_count is None:
            sample_count = self.config.interception.pass_lane_sample_count
        roster = capture_roster(defenders)
        start = as_vec3(passer_position)
        results = []

        for receiver_id, receiver_position in receivers:
            target = as_vec3(receiver_position)
            distance = horizontal_distance(start, target)

            best = PassLaneRisk(receiver_id=receiver_id, risk=1.0, throw_type=None)
            for throw_type in PASS_LANE_TYPES:
                if not get_profile(throw_type).in_range(distance):
                    continue
                trajectory = self.builder.build(start, target, throw_type, sample_count)
                if trajectory is None:
                    continue
                risk = self.score(trajectory, roster, throwing_side).probability
                if best.throw_type is None or risk < best.risk:
                    best = PassLaneRisk(receiver_id, risk, throw_type, trajectory)

            results.append(best)

        return results
