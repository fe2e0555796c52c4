"""
Simulation Session

The one owned simulation context shared by the host loop, the controls, the
plots and the pressure sweep. It enforces that a sweep has the integrator to
itself: normal frame stepping is paused while a sweep runs and a second
sweep request is rejected.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Tuple, Union

from lateral_dynamics.analysis.pressure_sweep import PressureSweep, SweepResult
from lateral_dynamics.config import SimulationConfig
from lateral_dynamics.exceptions import NoSweepResultsError, SweepCancelled, SweepInProgressError
from lateral_dynamics.physics.vehicle_sim import VehicleSim
from lateral_dynamics.utils.export import export_sweep_csv

logger = logging.getLogger(__name__)


class SimulationSession:
    """
    Owns a VehicleSim and its pressure sweep.

    Usage:
        session = SimulationSession()
        session.sim.steer_input_deg = 2.0
        for frame_dt in frame_times:
            session.advance(frame_dt)
        results = session.run_sweep()
        session.export_sweep_csv("sweep_results.csv")
    """

    def __init__(self, config: Optional[SimulationConfig] = None, show_progress: bool = False):
        self.config = config or SimulationConfig()
        self.sim = VehicleSim(
            self.config.vehicle,
            history_capacity=self.config.session.history_capacity,
        )
        self.sweep = PressureSweep(self.sim, self.config.sweep, show_progress=show_progress)

        self.last_sweep_results: Optional[Tuple[SweepResult, ...]] = None

        self._busy = threading.Lock()
        self._start_guard = threading.Lock()
        # cancel event of the most recently started sweep
        self._cancel_event = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def sweep_running(self) -> bool:
        return self._busy.locked()

    def advance(self, frame_dt: float) -> bool:
        """
        Step the simulation for one rendered frame.

        The frame time is clamped to max_frame_dt so a slow frame cannot
        destabilize the explicit integrator.

        Returns:
            False if the frame was skipped because a sweep owns the simulation
        """
        if not self._busy.acquire(blocking=False):
            return False
        try:
            self.sim.step(min(self.config.session.max_frame_dt, frame_dt))
        finally:
            self._busy.release()
        return True

    def reset(self) -> bool:
        """Clear history and zero the dynamic state (skipped during a sweep)."""
        if not self._busy.acquire(blocking=False):
            logger.warning("Reset ignored: a pressure sweep is running")
            return False
        try:
            self.sim.reset_buffers()
        finally:
            self._busy.release()
        return True

    def run_sweep(
        self,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[SweepResult, ...]:
        """
        Run a pressure sweep with exclusive ownership of the simulation.

        Raises:
            SweepInProgressError: if another sweep is running
            SweepCancelled: if cancelled or timed out; previous results kept
        """
        if not self._busy.acquire(blocking=False):
            raise SweepInProgressError("A pressure sweep is already running")

        if cancel_event is None:
            cancel_event = threading.Event()
            self._cancel_event = cancel_event
        try:
            results = self.sweep.run(cancel_event=cancel_event, timeout=timeout)
        except SweepCancelled as e:
            logger.warning(f"{e}; simulation state restored")
            raise
        finally:
            self._busy.release()

        self.last_sweep_results = results
        return results

    def start_sweep(self, timeout: Optional[float] = None) -> Future:
        """
        Run the sweep on a worker thread so the host loop keeps going.

        Returns:
            Future resolving to the sweep results
        """
        with self._start_guard:
            if self.sweep_running:
                raise SweepInProgressError("A pressure sweep is already running")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pressure-sweep")
            cancel_event = threading.Event()
            self._cancel_event = cancel_event
            return self._executor.submit(self.run_sweep, cancel_event, timeout)

    def cancel_sweep(self):
        """Ask the most recently started sweep to stop at its next step."""
        with self._start_guard:
            self._cancel_event.set()

    def export_sweep_csv(self, filepath: Union[str, Path]) -> Optional[Path]:
        """
        Export the last sweep results.

        Returns:
            Written path, or None if no sweep has been run yet
        """
        try:
            path = export_sweep_csv(self.last_sweep_results or (), filepath)
        except NoSweepResultsError as e:
            logger.warning(str(e))
            return None
        logger.info(f"Sweep results exported to {path}")
        return path

    def close(self):
        if self._executor is not None:
            self.cancel_sweep()
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
