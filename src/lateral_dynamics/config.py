"""
Simulation Configuration

Dataclass parameter sets for the bicycle model, the pressure sweep and the
interactive session, loadable from and savable to YAML.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict

import yaml


@dataclass
class VehicleParams:
    """Physical parameters of the single-track model."""

    # Mass and inertia
    m: float = 1500.0  # kg
    Iz: float = 2500.0  # kg⋅m²

    # Geometry (CG to axle)
    lf: float = 1.2  # m
    lr: float = 1.6  # m

    # Initial forward speed
    u: float = 20.0  # m/s

    # Tire reference point
    P0: float = 32.0  # psi
    Calpha0: float = 80000.0  # N/rad

    @property
    def wheelbase(self) -> float:
        return self.lf + self.lr


@dataclass
class SweepConfig:
    """Pressure sweep experiment settings."""

    pressure_start: float = 20.0  # psi
    pressure_stop: float = 40.0  # psi
    pressure_step: float = 2.0  # psi

    steer_deg: float = 3.0  # excitation amplitude
    speed: float = 20.0  # m/s

    settle_time: float = 1.5  # s
    sample_time: float = 1.0  # s
    dt: float = 0.01  # s

    # Regression
    linear_slip_limit_deg: float = 3.0
    min_linear_points: int = 4
    yaw_gain_epsilon: float = 1e-6


@dataclass
class SessionConfig:
    """Host loop settings."""

    max_frame_dt: float = 0.05  # s, per-frame step clamp
    history_capacity: int = 2000


@dataclass
class SimulationConfig:
    """Top-level configuration grouping all sections."""

    vehicle: VehicleParams = field(default_factory=VehicleParams)
    sweep: SweepConfig = field(default_factory=SweepConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SimulationConfig':
        """Build a config from nested dictionaries, rejecting unknown keys."""
        sections = {
            'vehicle': VehicleParams,
            'sweep': SweepConfig,
            'session': SessionConfig,
        }
        config_dict = config_dict or {}

        unknown = set(config_dict) - set(sections)
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}. Available: {list(sections)}")

        kwargs = {}
        for name, section_cls in sections.items():
            values = config_dict.get(name) or {}
            allowed = {f.name for f in fields(section_cls)}
            bad = set(values) - allowed
            if bad:
                raise ValueError(f"Unknown keys in '{name}': {sorted(bad)}")
            kwargs[name] = section_cls(**values)

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, filepath: str) -> 'SimulationConfig':
        """Load configuration from YAML file."""
        with open(filepath, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_yaml(self, filepath: str):
        """Save configuration to YAML file."""
        with open(filepath, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)
