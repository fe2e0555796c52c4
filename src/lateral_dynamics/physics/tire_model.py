"""
Tire Model

Pressure-dependent cornering stiffness used by the integrator, plus the
demonstrative Magic Formula curve drawn as an overlay on the slip plots.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


class Wheel(Enum):
    """Wheel positions, in the order used for per-wheel arrays."""
    FL = "FL"
    FR = "FR"
    RL = "RL"
    RR = "RR"


# Pressure -> stiffness power law exponent
STIFFNESS_EXPONENT = 0.8

# Visual squash factor per psi below reference
DEFORMATION_PER_PSI = 0.004


class TireModel:
    """
    Linear tire with pressure-scaled cornering stiffness.

    C(P) = Calpha0 * (P / P0) ** 0.8

    Pressures must be positive; the integrator applies its pressure floor
    (StabilityPolicy.safe_pressure) before calling in.
    """

    def __init__(
        self,
        reference_pressure: float = 32.0,
        reference_cornering_stiffness: float = 80000.0,
    ):
        if reference_pressure <= 0:
            raise ValueError(f"reference_pressure must be positive, got {reference_pressure}")
        self.reference_pressure = reference_pressure
        self.reference_cornering_stiffness = reference_cornering_stiffness

    def cornering_stiffness(self, pressure: float) -> float:
        """
        Cornering stiffness at a given inflation pressure.

        Args:
            pressure: Tire pressure [psi]

        Returns:
            Cornering stiffness [N/rad]
        """
        if pressure <= 0:
            raise ValueError(f"pressure must be positive, got {pressure}")
        return self.reference_cornering_stiffness * (pressure / self.reference_pressure) ** STIFFNESS_EXPONENT

    def wheel_deformation(self, pressure: float) -> float:
        """Uniform scale applied to a wheel mesh; softer tires squash."""
        deform = 1.0 - (self.reference_pressure - pressure) * DEFORMATION_PER_PSI
        return float(np.clip(deform, 0.8, 1.05))


@dataclass
class MagicFormulaParams:
    """Pacejka coefficients for the illustrative overlay curve."""

    B: float = 40.0  # stiffness factor
    C: float = 1.2  # shape factor
    D: float = 9000.0  # peak factor [N]
    E: float = 0.2  # curvature factor


def magic_formula(alpha: ArrayLike, B: float, C: float, D: float, E: float) -> ArrayLike:
    """
    Lateral Magic Formula.

    Fy(α) = D * sin(C * atan(Bα - E * (Bα - atan(Bα))))

    Args:
        alpha: Slip angle(s) [rad]

    Returns:
        Lateral force(s) [N], same shape as alpha
    """
    Bx = B * np.asarray(alpha, dtype=float)
    inner = Bx - E * (Bx - np.arctan(Bx))
    Fy = D * np.sin(C * np.arctan(inner))
    return float(Fy) if np.ndim(Fy) == 0 else Fy


def magic_formula_curve(
    params: MagicFormulaParams = None,
    max_slip_deg: float = 20.0,
    resolution_deg: float = 0.25,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample the overlay curve.

    Returns:
        (alpha_deg, Fy) arrays covering [-max_slip_deg, max_slip_deg]
    """
    params = params or MagicFormulaParams()
    n = int(round(2 * max_slip_deg / resolution_deg)) + 1
    alphas_deg = -max_slip_deg + np.arange(n) * resolution_deg
    Fy = magic_formula(np.radians(alphas_deg), params.B, params.C, params.D, params.E)
    return alphas_deg, Fy
