"""
Risk Engine
Interception and shot-block probabilities for sampled ball paths.
"""

from risk_engine.curves import (
    RiskLevel,
    Recommendation,
    RiskThresholds,
    TimingCurve,
)
from risk_engine.config import RiskConfig, load_risk_config
from risk_engine.defenders import DefenderSnapshot
from risk_engine.interception import (
    InterceptionRisk,
    AggregateRisk,
    PassLaneRisk,
    RiskScorer,
)
from risk_engine.block import BlockRisk, ShotRisk, ShotBlockScorer

__all__ = [
    "RiskLevel",
    "Recommendation",
    "RiskThresholds",
    "TimingCurve",
    "RiskConfig",
    "load_risk_config",
    "DefenderSnapshot",
    "InterceptionRisk",
    "AggregateRisk",
    "PassLaneRisk",
    "RiskScorer",
    "BlockRisk",
    "ShotRisk",
    "ShotBlockScorer",
]
