"""Characterization routines built on top of the integrator."""

from lateral_dynamics.analysis.pressure_sweep import (
    PressureSweep,
    SweepResult,
    fit_cornering_stiffness,
    estimate_yaw_gain,
    understeer_gradient,
)

__all__ = [
    "PressureSweep",
    "SweepResult",
    "fit_cornering_stiffness",
    "estimate_yaw_gain",
    "understeer_gradient",
]
