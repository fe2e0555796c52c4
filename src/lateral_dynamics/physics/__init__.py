"""Physics models for the lateral dynamics simulation."""

from lateral_dynamics.physics.vehicle_sim import VehicleSim, SimSnapshot
from lateral_dynamics.physics.history import HistoryBuffer, HistoryRecord
from lateral_dynamics.physics.stability import StabilityPolicy
from lateral_dynamics.physics.tire_model import TireModel, MagicFormulaParams, magic_formula

__all__ = [
    "VehicleSim",
    "SimSnapshot",
    "HistoryBuffer",
    "HistoryRecord",
    "StabilityPolicy",
    "TireModel",
    "MagicFormulaParams",
    "magic_formula",
]
