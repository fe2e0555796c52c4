"""
Pressure Sweep Characterization

Drives the integrator through steady-state constant-steer runs at a series
of uniform tire pressures and estimates, for each pressure:
- Front cornering stiffness (least-squares slope of Fy vs slip angle)
- Yaw-rate gain (mean yaw rate / mean steer)
- An illustrative understeer gradient proxy
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from lateral_dynamics.config import SweepConfig
from lateral_dynamics.exceptions import SweepCancelled
from lateral_dynamics.physics.vehicle_sim import VehicleSim

logger = logging.getLogger(__name__)

# Below this stiffness estimate Ku is reported as 0
MIN_STIFFNESS_FOR_KU = 10.0

# Assumed static axle load split for the Ku proxy
FRONT_LOAD_FRACTION = 0.55
REAR_LOAD_FRACTION = 0.45


@dataclass(frozen=True)
class SweepResult:
    """Characterization of one pressure point."""

    pressure: float  # psi
    cornering_stiffness: float  # N/rad
    yaw_gain: float  # (deg/s) / deg
    understeer_gradient: float = 0.0  # illustrative only
    stiffness_valid: bool = True


def fit_cornering_stiffness(
    slip_deg: np.ndarray,
    force: np.ndarray,
    max_slip_deg: float = 3.0,
    min_points: int = 4,
) -> Tuple[float, bool]:
    """
    Least-squares slope of lateral force against slip angle.

    Only samples inside the small-angle linear region (|slip| < max_slip_deg)
    are used. The fit includes an intercept.

    Args:
        slip_deg: Slip angle samples [deg]
        force: Lateral force samples [N]

    Returns:
        (stiffness [N/rad], valid). Stiffness is 0 and valid is False when
        fewer than min_points samples qualify or they have no spread.
    """
    slip_deg = np.asarray(slip_deg, dtype=float)
    force = np.asarray(force, dtype=float)

    mask = np.abs(slip_deg) < max_slip_deg
    if np.count_nonzero(mask) < min_points:
        return 0.0, False

    x = np.radians(slip_deg[mask])
    y = force[mask]

    dx = x - x.mean()
    sxx = np.sum(dx * dx)
    if not sxx > np.finfo(float).eps ** 2 * np.sum(x * x):
        return 0.0, False

    slope = np.sum(dx * (y - y.mean())) / sxx
    if not np.isfinite(slope):
        return 0.0, False

    return float(slope), True


def estimate_yaw_gain(yaw_rate_deg: np.ndarray, steer_deg: np.ndarray, epsilon: float = 1e-6) -> float:
    """Mean yaw rate over mean steer, (deg/s) per deg."""
    if len(yaw_rate_deg) == 0:
        return 0.0
    return float(np.mean(yaw_rate_deg) / (np.mean(steer_deg) + epsilon))


def understeer_gradient(
    cornering_stiffness: float,
    front_fraction: float = FRONT_LOAD_FRACTION,
    rear_fraction: float = REAR_LOAD_FRACTION,
) -> float:
    """
    Rough understeer gradient proxy, Wf/C - Wr/C.

    Uses a fixed assumed load split rather than the vehicle geometry. Not a
    physical derivation; meant for relative comparison between pressure
    points only.
    """
    if cornering_stiffness <= MIN_STIFFNESS_FOR_KU:
        return 0.0
    return front_fraction / cornering_stiffness - rear_fraction / cornering_stiffness


class PressureSweep:
    """
    Steady-state pressure sweep over a VehicleSim.

    The sweep owns the simulation while it runs. The simulation's inputs,
    dynamic state and history are restored afterwards, whether the sweep
    finished, was cancelled, or failed.

    Usage:
        sweep = PressureSweep(sim)
        results = sweep.run()
    """

    def __init__(self, sim: VehicleSim, config: Optional[SweepConfig] = None, show_progress: bool = False):
        self.sim = sim
        self.config = config or SweepConfig()
        self.show_progress = show_progress

    def pressures(self) -> np.ndarray:
        """Swept pressures in ascending order [psi]."""
        cfg = self.config
        if cfg.pressure_step <= 0:
            raise ValueError(f"pressure_step must be positive, got {cfg.pressure_step}")
        return np.arange(cfg.pressure_start, cfg.pressure_stop + cfg.pressure_step / 2, cfg.pressure_step)

    def run(
        self,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[SweepResult, ...]:
        """
        Run the full sweep.

        Args:
            cancel_event: Set it to abandon the sweep between steps
            timeout: Wall-clock limit [s]

        Returns:
            One SweepResult per pressure, in sweep order

        Raises:
            SweepCancelled: if cancelled or timed out (simulation restored)
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        saved = self.sim.snapshot()
        results: List[SweepResult] = []

        try:
            for P in tqdm(self.pressures(), desc="Pressure sweep", unit="pt", disable=not self.show_progress):
                results.append(self._run_point(float(P), cancel_event, deadline))
        finally:
            self.sim.restore(saved)

        logger.info(f"Sweep complete: {len(results)} pressure points")
        return tuple(results)

    def _run_point(self, P: float, cancel_event, deadline) -> SweepResult:
        cfg = self.config
        sim = self.sim

        sim.pressure = P
        sim.reset_buffers()
        sim.steer_input_deg = cfg.steer_deg
        sim.speed = cfg.speed

        settle_steps = int(round(cfg.settle_time / cfg.dt))
        sample_steps = int(round(cfg.sample_time / cfg.dt))

        # Let the response settle
        for _ in range(settle_steps):
            self._check_cancel(cancel_event, deadline)
            sim.step(cfg.dt)

        slip = np.empty(sample_steps)
        force = np.empty(sample_steps)
        steer = np.empty(sample_steps)
        yaw = np.empty(sample_steps)

        for i in range(sample_steps):
            self._check_cancel(cancel_event, deadline)
            sim.step(cfg.dt)
            rec = sim.history.latest()
            slip[i] = rec.slip_angle
            force[i] = rec.lateral_force
            steer[i] = rec.steer
            yaw[i] = rec.yaw_rate

        C_est, valid = fit_cornering_stiffness(
            slip, force,
            max_slip_deg=cfg.linear_slip_limit_deg,
            min_points=cfg.min_linear_points,
        )
        yaw_gain = estimate_yaw_gain(yaw, steer, cfg.yaw_gain_epsilon)
        Ku = understeer_gradient(C_est)

        if not valid:
            logger.debug(f"P={P:.1f} psi: too few linear-region samples, stiffness set to 0")
        logger.debug(f"P={P:.1f} psi: C={C_est:.0f} N/rad, yaw gain={yaw_gain:.3f}")

        return SweepResult(
            pressure=P,
            cornering_stiffness=C_est,
            yaw_gain=yaw_gain,
            understeer_gradient=Ku,
            stiffness_valid=valid,
        )

    @staticmethod
    def _check_cancel(cancel_event, deadline):
        if cancel_event is not None and cancel_event.is_set():
            raise SweepCancelled("Sweep cancelled")
        if deadline is not None and time.monotonic() > deadline:
            raise SweepCancelled("Sweep timed out")
