"""
Risk Engine — Defender Snapshots

Read-only views of defending agents, captured by value at the start of a
scoring pass. The game-state owner can keep mutating its characters; the
scorers only ever see these frozen copies.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from ball_physics.ballistics import Vec3, VecLike, as_vec3
from risk_engine.config import DefenderDefaults

DEFAULT_HEIGHT = 1.9    # m
RATING_FLOOR = 1.0      # keeps rating-derived divisions finite


@dataclass(frozen=True, eq=False)
class DefenderSnapshot:
    """Position and capabilities of one agent at scoring time.

    ``predicted_position`` extrapolates the current velocity scaled by
    ``mobility`` (0 = locked in place, 1 = fully balanced). Callers with a
    better forecast can pass ``predictor`` instead.
    """
    id: str
    side: str
    position: Vec3
    velocity: Vec3 = field(default_factory=lambda: np.zeros(3))
    reaction_time: float = 0.3      # s
    speed: float = 5.0              # m/s
    intercept_radius: float = 1.0   # m
    can_act_now: bool = True        # balanced, not locked, able to jump
    mobility: float = 1.0           # 0-1
    height: float = DEFAULT_HEIGHT  # m
    predictor: Optional[Callable[[float], VecLike]] = field(default=None, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "position", as_vec3(self.position))
        object.__setattr__(self, "velocity", as_vec3(self.velocity))
        object.__setattr__(self, "mobility", float(np.clip(self.mobility, 0.0, 1.0)))

    @classmethod
    def from_stats(
        cls,
        id: str,
        side: str,
        position: VecLike,
        velocity: Optional[VecLike] = None,
        quickness: float = 50.0,
        speed_rating: float = 50.0,
        can_act_now: bool = True,
        mobility: float = 1.0,
        height: float = DEFAULT_HEIGHT,
        defaults: Optional[DefenderDefaults] = None,
    ) -> "DefenderSnapshot":
        """Snapshot from 0-100 player ratings.

        reaction_time = base_reaction_time * (100 / quickness)
        speed         = base_speed * (speed_rating / 50)
        """
        defaults = defaults or DefenderDefaults()
        return cls(
            id=id,
            side=side,
            position=position,
            velocity=np.zeros(3) if velocity is None else velocity,
            reaction_time=defaults.base_reaction_time * (100.0 / max(quickness, RATING_FLOOR)),
            speed=defaults.base_speed * (speed_rating / 50.0),
            intercept_radius=defaults.intercept_radius,
            can_act_now=can_act_now,
            mobility=mobility,
            height=height,
        )

    def predicted_position(self, elapsed: float) -> Vec3:
        """Forecast position ``elapsed`` seconds from now."""
        if self.predictor is not None:
            return as_vec3(self.predictor(elapsed))
        return self.position + self.velocity * (elapsed * self.mobility)

    def effective_block_height(self, jump_height: float, arm_reach_ratio: float = 0.4) -> float:
        """Highest point the defender can reach; no jump while off-balance."""
        reach = self.height + self.height * arm_reach_ratio
        if self.can_act_now:
            reach += jump_height
        return reach


def capture_roster(defenders: Iterable[DefenderSnapshot]) -> Tuple[DefenderSnapshot, ...]:
    """Freeze the roster for one scoring pass."""
    return tuple(defenders)


def partition_by_side(
    agents: Iterable[DefenderSnapshot], side: str,
) -> Tuple[List[DefenderSnapshot], List[DefenderSnapshot]]:
    """Split agents into (same side, opposing side)."""
    same, opposing = [], []
    for agent in agents:
        (same if agent.side == side else opposing).append(agent)
    return same, opposing
