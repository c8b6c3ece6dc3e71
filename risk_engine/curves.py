"""
Risk Engine — Timing Curves and Risk Levels

Converts a timing margin (defender arrival minus ball arrival, seconds) into
an interception probability. Each band is linear:

    p = base + slope * (anchor - margin)

and the result is clamped to [0, 1]. A band applies when margin <= upper.

Two presets are kept, named after the code paths they were tuned in:
  - ``trajectory``: canonical curve used by the trajectory scorer
  - ``pass_lane``:  continuous at -0.3s, exact 2/3 slope in the 0.2-0.5s band
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence, Tuple


class RiskLevel(Enum):
    SAFE = "safe"                 # 0-30%
    CAUTION = "caution"           # 30-60%
    DANGER = "danger"             # 60-80%
    HIGH_DANGER = "high_danger"   # 80%+


class Recommendation(Enum):
    EXECUTE = "execute"
    WAIT = "wait"
    ABORT = "abort"


@dataclass(frozen=True)
class CurveBand:
    upper: float        # s, inclusive upper bound of the band
    base: float
    slope: float
    anchor: float       # s

    def evaluate(self, margin: float) -> float:
        return self.base + self.slope * (self.anchor - margin)


@dataclass(frozen=True)
class TimingCurve:
    name: str
    bands: Tuple[CurveBand, ...]

    def __post_init__(self):
        if not self.bands:
            raise ValueError(f"Curve '{self.name}' has no bands")
        uppers = [band.upper for band in self.bands]
        if any(b <= a for a, b in zip(uppers, uppers[1:])):
            raise ValueError(f"Curve '{self.name}' band bounds must increase: {uppers}")
        if not math.isinf(uppers[-1]):
            raise ValueError(f"Curve '{self.name}' must end with an open band (upper: .inf)")

    @classmethod
    def from_rows(cls, name: str, rows: Sequence[dict]) -> "TimingCurve":
        """Build a curve from YAML rows ``{upper, base, slope, anchor}``."""
        return cls(name=name, bands=tuple(CurveBand(**{k: float(v) for k, v in row.items()}) for row in rows))

    def probability(self, margin: float) -> float:
        for band in self.bands:
            if margin <= band.upper:
                return min(1.0, max(0.0, band.evaluate(margin)))
        return 0.0  # unreachable with an open last band

    def __call__(self, margin: float) -> float:
        return self.probability(margin)


TRAJECTORY_CURVE = TimingCurve("trajectory", (
    CurveBand(upper=-0.3, base=0.9, slope=0.1, anchor=0.0),
    CurveBand(upper=0.0, base=0.6, slope=1.0, anchor=0.0),
    CurveBand(upper=0.2, base=0.3, slope=1.5, anchor=0.2),
    CurveBand(upper=0.5, base=0.1, slope=0.67, anchor=0.5),
    CurveBand(upper=math.inf, base=0.1, slope=0.1, anchor=0.5),
))

PASS_LANE_CURVE = TimingCurve("pass_lane", (
    CurveBand(upper=-0.3, base=0.9, slope=0.2, anchor=-0.3),
    CurveBand(upper=0.0, base=0.6, slope=1.0, anchor=0.0),
    CurveBand(upper=0.2, base=0.3, slope=1.5, anchor=0.2),
    CurveBand(upper=0.5, base=0.1, slope=2.0 / 3.0, anchor=0.5),
    CurveBand(upper=math.inf, base=0.1, slope=0.1, anchor=0.5),
))

PRESET_CURVES: Dict[str, TimingCurve] = {
    TRAJECTORY_CURVE.name: TRAJECTORY_CURVE,
    PASS_LANE_CURVE.name: PASS_LANE_CURVE,
}


# ---------- Levels ----------
@dataclass(frozen=True)
class RiskThresholds:
    """Cut points between SAFE / CAUTION / DANGER / HIGH_DANGER."""
    safe: float = 0.3
    caution: float = 0.6
    danger: float = 0.8
    abort: float = 0.7      # recommendation switches from WAIT to ABORT here

    def __post_init__(self):
        if not 0.0 < self.safe < self.caution < self.danger <= 1.0:
            raise ValueError(
                f"Risk thresholds must increase within (0, 1]: "
                f"{self.safe}, {self.caution}, {self.danger}"
            )
        if not self.safe <= self.abort <= 1.0:
            raise ValueError(f"abort threshold {self.abort} must lie in [safe, 1]")

    def level(self, probability: float) -> RiskLevel:
        if probability < self.safe:
            return RiskLevel.SAFE
        if probability < self.caution:
            return RiskLevel.CAUTION
        if probability < self.danger:
            return RiskLevel.DANGER
        return RiskLevel.HIGH_DANGER

    def recommendation(self, probability: float) -> Recommendation:
        if probability < self.safe:
            return Recommendation.EXECUTE
        if probability < self.abort:
            return Recommendation.WAIT
        return Recommendation.ABORT
