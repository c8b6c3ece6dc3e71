"""
Risk Engine — Configuration

Code defaults live on the dataclasses below; ``configs/risk.yaml`` and any
caller overrides are merged on top section by section, the same way stage
configs merge over DEFAULT values:

    section = {**defaults, **yaml_section, **override_section}
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

from ball_physics.ballistics import BALL_RADIUS, GRAVITY, LINEAR_DAMPING
from ball_physics.profiles import ShotType
from risk_engine.curves import PRESET_CURVES, RiskThresholds, TimingCurve

CONFIGS_DIR = Path(__file__).resolve().parent / "configs"
DEFAULT_CONFIG_PATH = CONFIGS_DIR / "risk.yaml"


# ---------- Sections ----------
@dataclass(frozen=True)
class PhysicsSettings:
    gravity: float = GRAVITY
    damping: float = LINEAR_DAMPING
    ball_radius: float = BALL_RADIUS
    ground_y: float = 0.0


@dataclass(frozen=True)
class InterceptionSettings:
    timing_curve: str = "trajectory"
    thresholds: RiskThresholds = field(default_factory=RiskThresholds)
    close_distance: float = 2.0
    close_multiplier: float = 1.2
    far_distance: float = 5.0
    far_multiplier: float = 0.8
    off_balance_multiplier: float = 0.7
    danger_point_min: float = 0.1
    pass_lane_sample_count: int = 20


@dataclass(frozen=True)
class ShotBlockSettings:
    block_distance: Dict[ShotType, float] = field(default_factory=lambda: {
        ShotType.LAYUP: 1.5,
        ShotType.MIDRANGE: 2.0,
        ShotType.THREE_POINT: 2.5,
        ShotType.DUNK: 1.0,
    })
    jump_height: float = 0.5
    release_height_ratio: float = 0.9
    release_height_offset: float = 0.3
    shot_motion_time: float = 0.4
    closing_bonus: float = 0.2
    off_balance_factor: float = 0.3
    blocker_min: float = 0.1


@dataclass(frozen=True)
class DefenderDefaults:
    base_reaction_time: float = 0.3
    base_speed: float = 5.0
    intercept_radius: float = 1.0
    arm_reach_ratio: float = 0.4


@dataclass(frozen=True)
class RiskConfig:
    physics: PhysicsSettings = field(default_factory=PhysicsSettings)
    interception: InterceptionSettings = field(default_factory=InterceptionSettings)
    shot_block: ShotBlockSettings = field(default_factory=ShotBlockSettings)
    defenders: DefenderDefaults = field(default_factory=DefenderDefaults)
    curves: Dict[str, TimingCurve] = field(default_factory=lambda: dict(PRESET_CURVES))

    def __post_init__(self):
        if self.interception.timing_curve not in self.curves:
            raise ValueError(
                f"Unknown timing curve '{self.interception.timing_curve}', "
                f"available: {sorted(self.curves)}"
            )

    @property
    def timing_curve(self) -> TimingCurve:
        return self.curves[self.interception.timing_curve]

    @property
    def thresholds(self) -> RiskThresholds:
        return self.interception.thresholds


# ---------- Loading ----------
def _checked_section(cls, section: Optional[dict], name: str):
    section = dict(section or {})
    allowed = {f.name for f in fields(cls)}
    unknown = set(section) - allowed
    if unknown:
        raise ValueError(f"Unknown keys in '{name}' config: {sorted(unknown)}")
    return section


def _build_interception(section: dict) -> InterceptionSettings:
    section = _checked_section(InterceptionSettings, section, "interception")
    if "thresholds" in section and not isinstance(section["thresholds"], RiskThresholds):
        defaults = asdict(RiskThresholds())
        given = _checked_section(RiskThresholds, section["thresholds"], "interception.thresholds")
        section["thresholds"] = RiskThresholds(**{**defaults, **given})
    return InterceptionSettings(**section)


def _build_shot_block(section: dict) -> ShotBlockSettings:
    section = _checked_section(ShotBlockSettings, section, "shot_block")
    if "block_distance" in section:
        distances = dict(ShotBlockSettings().block_distance)
        for key, value in section["block_distance"].items():
            try:
                distances[ShotType(key)] = float(value)
            except ValueError as exc:
                raise ValueError(f"Unknown shot type in block_distance: {key!r}") from exc
        section["block_distance"] = distances
    return ShotBlockSettings(**section)


def _build_curves(section: Optional[dict]) -> Dict[str, TimingCurve]:
    curves = dict(PRESET_CURVES)
    for name, rows in (section or {}).items():
        curves[name] = rows if isinstance(rows, TimingCurve) else TimingCurve.from_rows(name, rows)
    return curves


def _deep_merge(base: dict, overrides: dict) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def config_from_dict(data: Optional[dict]) -> RiskConfig:
    """Build a RiskConfig from a (possibly partial) nested dict."""
    data = dict(data or {})
    known = {"physics", "interception", "shot_block", "defenders", "curves"}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")

    return RiskConfig(
        physics=PhysicsSettings(**_checked_section(PhysicsSettings, data.get("physics"), "physics")),
        interception=_build_interception(data.get("interception")),
        shot_block=_build_shot_block(data.get("shot_block")),
        defenders=DefenderDefaults(**_checked_section(DefenderDefaults, data.get("defenders"), "defenders")),
        curves=_build_curves(data.get("curves")),
    )


def load_risk_config(path: Optional[Path] = None, overrides: Optional[dict] = None) -> RiskConfig:
    """Load risk settings from YAML and apply overrides on top.

    Args:
        path: YAML file; defaults to the packaged ``configs/risk.yaml``.
        overrides: Nested dict merged over the file contents.

    Raises:
        ValueError: on unknown sections/keys or invalid thresholds.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if overrides:
        data = _deep_merge(data, overrides)
    return config_from_dict(data)
