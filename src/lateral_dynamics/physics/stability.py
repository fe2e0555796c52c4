"""
Numerical Stability Policy

Collects every guard the explicit integrator relies on (speed floor,
pressure floor, slip and force saturation, state bounds, finite check) in
one place so it can be exercised independently of the physics.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)


def _clamp(value: float, limit: float) -> float:
    # np.clip keeps NaN as NaN so it still reaches the finite check
    return float(np.clip(value, -limit, limit))


@dataclass(frozen=True)
class StabilityPolicy:
    """Clamp bounds applied around each integration step."""

    speed_floor: float = 0.01  # m/s
    pressure_floor: float = 0.1  # psi
    max_slip_angle: float = np.radians(20.0)  # rad
    max_lateral_force: float = 1e5  # N
    max_lateral_velocity: float = 50.0  # m/s
    max_yaw_rate: float = 50.0  # rad/s

    def safe_speed(self, speed: float) -> float:
        return max(self.speed_floor, speed)

    def safe_pressure(self, pressure: float) -> float:
        return max(pressure, self.pressure_floor)

    def clamp_slip(self, alpha: float) -> float:
        return _clamp(alpha, self.max_slip_angle)

    def clamp_force(self, force: float) -> float:
        return _clamp(force, self.max_lateral_force)

    def apply(self, vy: float, r: float) -> Tuple[float, float, bool]:
        """
        Bound the integrated state.

        Args:
            vy: Lateral velocity after the Euler update [m/s]
            r: Yaw rate after the Euler update [rad/s]

        Returns:
            (vy, r, tripped) where tripped is True if a non-finite state was
            reset to rest
        """
        vy = _clamp(vy, self.max_lateral_velocity)
        r = _clamp(r, self.max_yaw_rate)

        if not (np.isfinite(vy) and np.isfinite(r)):
            logger.warning("Numerical instability detected, resetting state.")
            return 0.0, 0.0, True

        return vy, r, False
