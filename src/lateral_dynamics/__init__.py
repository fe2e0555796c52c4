"""Vehicle Lateral Dynamics Lab - bicycle-model simulation and tire pressure sweeps."""

__version__ = "1.0.0"
__author__ = "Lateral Dynamics Lab Team"

from lateral_dynamics.config import SimulationConfig, VehicleParams, SweepConfig
from lateral_dynamics.physics.vehicle_sim import VehicleSim
from lateral_dynamics.analysis.pressure_sweep import PressureSweep, SweepResult
from lateral_dynamics.session import SimulationSession

__all__ = [
    "SimulationConfig",
    "VehicleParams",
    "SweepConfig",
    "VehicleSim",
    "PressureSweep",
    "SweepResult",
    "SimulationSession",
]
