"""
Vehicle Lateral Dynamics Integrator

Single-track ("bicycle") model of yaw rate and lateral velocity:
- Pressure-dependent axle cornering stiffness
- Linear slip-angle tire forces with saturation
- Velocity and yaw damping for explicit Euler stability
- Bounded history of per-step observables for plotting
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from lateral_dynamics.config import VehicleParams
from lateral_dynamics.physics.history import HistoryBuffer, HistoryRecord
from lateral_dynamics.physics.stability import StabilityPolicy
from lateral_dynamics.physics.tire_model import TireModel, Wheel


# Damping (fixed, not user-configurable)
LATERAL_DAMPING = 3000.0  # N⋅s/m
YAW_DAMPING = 2500.0  # N⋅m⋅s/rad

# Aligning torque proxy: Mz = trail * Fy
PNEUMATIC_TRAIL = 0.12  # m

# Presentation
WHEEL_RADIUS = 0.33  # m
STEER_SMOOTHING = 0.2


@dataclass(frozen=True)
class SimSnapshot:
    """Everything needed to put the integrator back where it was."""

    speed: float
    steer_input_deg: float
    pressures: tuple
    yaw_rate: float
    lateral_velocity: float
    elapsed_time: float
    wheel_spin_phase: float
    front_steer_visual_angle: float
    history: tuple


class VehicleSim:
    """
    Bicycle-model integrator.

    State:
        - yaw_rate: r [rad/s]
        - lateral_velocity: vy [m/s]
        - elapsed_time: [s]

    Inputs (settable at any time):
        - steer_input_deg: road-wheel steer [deg]
        - speed: forward speed [m/s]
        - pressure_fl/fr/rl/rr: per-wheel pressure [psi]
        - pressure: sets all four wheels at once
    """

    def __init__(
        self,
        params: Optional[VehicleParams] = None,
        policy: Optional[StabilityPolicy] = None,
        history_capacity: int = 2000,
    ):
        self.params = params or VehicleParams()
        self.policy = policy or StabilityPolicy()

        # Immutable configuration
        self.m = self.params.m
        self.Iz = self.params.Iz
        self.lf = self.params.lf
        self.lr = self.params.lr

        self.tire = TireModel(
            reference_pressure=self.params.P0,
            reference_cornering_stiffness=self.params.Calpha0,
        )

        # Inputs
        self.speed = self.params.u
        self.steer_input_deg = 0.0
        self.pressure_fl = self.params.P0
        self.pressure_fr = self.params.P0
        self.pressure_rl = self.params.P0
        self.pressure_rr = self.params.P0

        # Presentation-only
        self.wheel_spin_phase = 0.0
        self.front_steer_visual_angle = 0.0

        self.history = HistoryBuffer(history_capacity)
        self.reset_buffers()

    @property
    def reference_pressure(self) -> float:
        return self.tire.reference_pressure

    @property
    def reference_cornering_stiffness(self) -> float:
        return self.tire.reference_cornering_stiffness

    @property
    def pressure(self) -> float:
        """Mean of the four wheel pressures [psi]."""
        return float(np.mean(self.wheel_pressures()))

    @pressure.setter
    def pressure(self, value: float):
        self.set_uniform_pressure(value)

    def set_uniform_pressure(self, value: float):
        self.pressure_fl = value
        self.pressure_fr = value
        self.pressure_rl = value
        self.pressure_rr = value

    def wheel_pressures(self) -> np.ndarray:
        """[FL, FR, RL, RR] pressures in psi."""
        return np.array([self.pressure_fl, self.pressure_fr, self.pressure_rl, self.pressure_rr])

    def calpha_from_pressure(self, pressure: float) -> float:
        """Cornering stiffness [N/rad] at the given pressure [psi], floor applied."""
        return self.tire.cornering_stiffness(self.policy.safe_pressure(pressure))

    def reset_buffers(self):
        """Clear history and put the vehicle back at rest. Inputs are kept."""
        self.history.clear()
        self.elapsed_time = 0.0
        self.yaw_rate = 0.0
        self.lateral_velocity = 0.0

    def step(self, dt: float):
        """
        Advance the model by one explicit Euler step.

        Args:
            dt: Time step [s]; non-positive values are ignored
        """
        if not dt > 0:
            return

        policy = self.policy
        self.elapsed_time += dt

        delta = math.radians(self.steer_input_deg)
        u = policy.safe_speed(self.speed)

        # Axle-average pressures
        Pf = policy.safe_pressure(0.5 * (self.pressure_fl + self.pressure_fr))
        Pr = policy.safe_pressure(0.5 * (self.pressure_rl + self.pressure_rr))
        Caf = self.tire.cornering_stiffness(Pf)
        Car = self.tire.cornering_stiffness(Pr)

        vy = self.lateral_velocity
        r = self.yaw_rate

        # Slip angles
        alpha_f = policy.clamp_slip(delta - (vy + self.lf * r) / u)
        alpha_r = policy.clamp_slip(-(vy - self.lr * r) / u)

        # Linear axle forces, saturated
        Fy_f = policy.clamp_force(-Caf * alpha_f)
        Fy_r = policy.clamp_force(-Car * alpha_r)

        vy_dot = (Fy_f + Fy_r - LATERAL_DAMPING * vy) / self.m - u * r
        r_dot = (self.lf * Fy_f - self.lr * Fy_r - YAW_DAMPING * r) / self.Iz

        vy, r, tripped = policy.apply(vy + vy_dot * dt, r + r_dot * dt)
        self.lateral_velocity = vy
        self.yaw_rate = r

        if tripped:
            # state is back at rest, record it as such
            alpha_f = Fy_f = ay = 0.0
        else:
            ay = vy_dot + u * r

        self.history.append(HistoryRecord(
            time=self.elapsed_time,
            steer=self.steer_input_deg,
            yaw_rate=math.degrees(r),
            slip_angle=math.degrees(alpha_f),
            lateral_force=Fy_f,
            aligning_torque=PNEUMATIC_TRAIL * Fy_f,
            lateral_accel=ay,
        ))

        self._update_visual(delta, dt)

    def _update_visual(self, steer_rad: float, dt: float):
        """Advance wheel spin and smoothed steer angle."""
        self.front_steer_visual_angle += (steer_rad - self.front_steer_visual_angle) * STEER_SMOOTHING

        omega = self.speed / WHEEL_RADIUS
        phase = (self.wheel_spin_phase + omega * dt) % (2.0 * math.pi)
        self.wheel_spin_phase = phase if math.isfinite(phase) else 0.0

    def wheel_deformations(self) -> Dict[str, float]:
        """Mesh scale per wheel from its pressure."""
        return {
            wheel.value: self.tire.wheel_deformation(p)
            for wheel, p in zip(Wheel, self.wheel_pressures())
        }

    def get_state(self) -> Dict[str, float]:
        """Get current state as dictionary."""
        return {
            'time': self.elapsed_time,
            'yaw_rate': self.yaw_rate,
            'lateral_velocity': self.lateral_velocity,
            'speed': self.speed,
            'steer_input_deg': self.steer_input_deg,
            'pressures': self.wheel_pressures(),
            'wheel_spin_phase': self.wheel_spin_phase,
            'front_steer_visual_angle': self.front_steer_visual_angle,
        }

    def snapshot(self) -> SimSnapshot:
        return SimSnapshot(
            speed=self.speed,
            steer_input_deg=self.steer_input_deg,
            pressures=tuple(self.wheel_pressures()),
            yaw_rate=self.yaw_rate,
            lateral_velocity=self.lateral_velocity,
            elapsed_time=self.elapsed_time,
            wheel_spin_phase=self.wheel_spin_phase,
            front_steer_visual_angle=self.front_steer_visual_angle,
            history=self.history.snapshot(),
        )

    def restore(self, snap: SimSnapshot):
        self.speed = snap.speed
        self.steer_input_deg = snap.steer_input_deg
        (self.pressure_fl, self.pressure_fr,
         self.pressure_rl, self.pressure_rr) = snap.pressures
        self.yaw_rate = snap.yaw_rate
        self.lateral_velocity = snap.lateral_velocity
        self.elapsed_time = snap.elapsed_time
        self.wheel_spin_phase = snap.wheel_spin_phase
        self.front_steer_visual_angle = snap.front_steer_visual_angle
        self.history.restore(snap.history)
