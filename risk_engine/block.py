"""
Risk Engine — Shot Block Scoring

Block probability for a stationary shot:

    probability = clamp01(height_factor * distance_factor * balance_factor)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ball_physics.ballistics import Vec3, VecLike, as_vec3, fields_equal
from ball_physics.profiles import ShotType
from risk_engine.config import RiskConfig, load_risk_config
from risk_engine.curves import Recommendation, RiskLevel
from risk_engine.defenders import DefenderSnapshot, capture_roster

logger = logging.getLogger(__name__)

DEFAULT_SHOOTER_HEIGHT = 1.9   # m

# (minimum reach above release height, factor), checked top to bottom
HEIGHT_FACTORS = (
    (0.3, 1.0),     # clean block
    (0.0, 0.7),     # fingertips
    (-0.2, 0.3),    # needs a lucky deflection
)


@dataclass(frozen=True, eq=False)
class BlockRisk:
    probability: float
    block_point: Vec3
    defender: Optional[DefenderSnapshot] = None
    can_jump: bool = True

    __eq__ = fields_equal


@dataclass
class ShotRisk:
    max_risk: Optional[BlockRisk]
    blockers: List[BlockRisk]
    level: RiskLevel
    recommendation: Recommendation
    shot_type: ShotType = ShotType.MIDRANGE

    @property
    def probability(self) -> float:
        return self.max_risk.probability if self.max_risk else 0.0


class ShotBlockScorer:
    """Block probability per defender for a shot distance band."""

    def __init__(self, config: Optional[RiskConfig] = None):
        self.config = config or load_risk_config()
        self.settings = self.config.shot_block

    def release_height(self, shooter_height: float) -> float:
        """Ball height at release, roughly above the shooter's head."""
        return shooter_height * self.settings.release_height_ratio + self.settings.release_height_offset

    @staticmethod
    def height_factor(height_diff: float) -> float:
        for min_diff, factor in HEIGHT_FACTORS:
            if height_diff >= min_diff:
                return factor
        return 0.0

    @staticmethod
    def distance_factor(distance: float, threshold: float) -> float:
        if distance <= threshold:
            return 1.0
        if distance <= threshold * 1.5:
            return 0.5
        return 0.2

    def score_block(
        self,
        shooter_position: VecLike,
        defender: DefenderSnapshot,
        shot_type: ShotType,
        shooter_height: float = DEFAULT_SHOOTER_HEIGHT,
    ) -> BlockRisk:
        """Probability that ``defender`` blocks a shot from ``shooter_position``."""
        settings = self.settings
        shooter = as_vec3(shooter_position)
        threshold = settings.block_distance[ShotType(shot_type)]

        distance = float(np.linalg.norm(defender.position - shooter))
        if distance > threshold * 2.0:
            return BlockRisk(0.0, defender.position.copy(), defender, defender.can_act_now)

        reach = defender.effective_block_height(
            settings.jump_height, self.config.defenders.arm_reach_ratio,
        )
        height_factor = self.height_factor(reach - self.release_height(shooter_height))

        distance_factor = self.distance_factor(distance, threshold)

        # Defender closing in during the shot motion
        predicted = defender.predicted_position(settings.shot_motion_time)
        if float(np.linalg.norm(predicted - shooter)) < distance:
            distance_factor = min(1.0, distance_factor + settings.closing_bonus)

        balance_factor = 1.0 if defender.can_act_now else settings.off_balance_factor

        probability = min(1.0, max(0.0, height_factor * distance_factor * balance_factor))
        return BlockRisk(probability, predicted, defender, defender.can_act_now)

    def assess_shot(
        self,
        shooter_position: VecLike,
        defenders: Sequence[DefenderSnapshot],
        shot_type: ShotType,
        shooting_side: str,
        shooter_height: float = DEFAULT_SHOOTER_HEIGHT,
    ) -> ShotRisk:
        """Aggregate block risk over every opposing defender."""
        shot_type = ShotType(shot_type)
        thresholds = self.config.thresholds
        blockers: List[BlockRisk] = []
        max_risk: Optional[BlockRisk] = None

        for defender in capture_roster(defenders):
            if defender.side == shooting_side:
                continue
            risk = self.score_block(shooter_position, defender, shot_type, shooter_height)
            if risk.probability > self.settings.blocker_min:
                blockers.append(risk)
            if risk.probability > 0 and (max_risk is None or risk.probability > max_risk.probability):
                max_risk = risk

        probability = max_risk.probability if max_risk else 0.0
        logger.debug("%s shot: %d blockers, max %.2f", shot_type.value, len(blockers), probability)
        return ShotRisk(
            max_risk=max_risk,
            blockers=blockers,
            level=thresholds.level(probability),
            recommendation=thresholds.recommendation(probability),
            shot_type=shot_type,
        )
