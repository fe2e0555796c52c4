"""
Steering Profiles

Time-based steering inputs for driving the simulation from the CLI or a
script. Each profile maps elapsed time [s] to road-wheel steer [deg].
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SteerProfile(ABC):
    """Abstract base class for steering profiles."""

    @abstractmethod
    def steer_at(self, elapsed_time: float) -> float:
        """Steer angle [deg] at the given time."""

    @abstractmethod
    def get_total_duration(self) -> float:
        """Duration after which the profile is held at its final value [s]."""

    def __call__(self, elapsed_time: float) -> float:
        return self.steer_at(elapsed_time)


class ConstantSteer(SteerProfile):
    """Hold one steer angle."""

    def __init__(self, angle_deg: float = 3.0, duration: float = 5.0):
        self.angle_deg = angle_deg
        self.duration = duration

    def steer_at(self, elapsed_time: float) -> float:
        return self.angle_deg

    def get_total_duration(self) -> float:
        return self.duration


class StepSteer(SteerProfile):
    """Straight running, then a step with a short linear rise."""

    def __init__(
        self,
        angle_deg: float = 3.0,
        initial_straight_duration: float = 1.0,
        step_rise_time: float = 0.2,
        hold_duration: float = 4.0,
    ):
        self.angle_deg = angle_deg
        self.initial_straight_duration = initial_straight_duration
        self.step_rise_time = step_rise_time
        self.hold_duration = hold_duration

    def steer_at(self, elapsed_time: float) -> float:
        t = elapsed_time - self.initial_straight_duration
        if t <= 0:
            return 0.0
        if self.step_rise_time > 0 and t < self.step_rise_time:
            return self.angle_deg * t / self.step_rise_time
        return self.angle_deg

    def get_total_duration(self) -> float:
        return self.initial_straight_duration + self.step_rise_time + self.hold_duration


class TrapezoidSweep(SteerProfile):
    """
    Constant -> ramp up -> ramp down -> return.

    Sweeps the front slip angle through positive and negative values so the
    alpha-Fy plot traces the linear region and beyond.
    """

    def __init__(
        self,
        base_deg: float = 0.0,
        peak_deg: float = 8.0,
        hold_time: float = 1.0,
        ramp_time: float = 2.0,
    ):
        self.base_deg = base_deg
        self.peak_deg = peak_deg
        self.hold_time = hold_time
        self.ramp_time = ramp_time

    def steer_at(self, elapsed_time: float) -> float:
        t = elapsed_time
        base, peak, ramp = self.base_deg, self.peak_deg, self.ramp_time

        if t < self.hold_time:
            return base
        t -= self.hold_time
        # up to +peak
        if t < ramp:
            return base + (peak - base) * t / ramp
        t -= ramp
        # down to -peak
        if t < 2 * ramp:
            return peak - 2 * peak * t / (2 * ramp)
        t -= 2 * ramp
        # back to base
        if t < ramp:
            return -peak + (base + peak) * t / ramp
        return base

    def get_total_duration(self) -> float:
        return self.hold_time + 4 * self.ramp_time


PROFILES = {
    'constant': ConstantSteer,
    'step': StepSteer,
    'sweep': TrapezoidSweep,
}


def get_profile(name: str, params: Optional[Dict[str, Any]] = None) -> SteerProfile:
    """
    Get steering profile by name.

    Args:
        name: Profile name (lowercase)
        params: Keyword arguments for the profile constructor

    Returns:
        SteerProfile instance
    """
    if name.lower() not in PROFILES:
        raise ValueError(f"Unknown steering profile: {name}. Available: {list(PROFILES.keys())}")

    return PROFILES[name.lower()](**(params or {}))
