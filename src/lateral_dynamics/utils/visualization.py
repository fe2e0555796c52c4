"""
Visualization Tools for the Lateral Dynamics Simulation

Static matplotlib renditions of the interactive chart set:
- Slip angle vs lateral force (with Magic Formula overlay)
- Steering vs yaw rate, steering vs lateral acceleration
- Slip angle vs aligning torque
- Time traces of steer, yaw rate and lateral acceleration
- Pressure sweep curves (cornering stiffness, yaw gain, Ku)
"""

import logging
from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns

from lateral_dynamics.analysis.pressure_sweep import SweepResult
from lateral_dynamics.physics.history import HistoryBuffer
from lateral_dynamics.physics.tire_model import MagicFormulaParams, magic_formula_curve

logger = logging.getLogger(__name__)


def _save(fig, output_path: str):
    fig.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    logger.info(f"Saved: {output_path}")
    plt.close(fig)


class HistoryVisualizer:
    """Plot the observables recorded in a HistoryBuffer."""

    def __init__(self, history: HistoryBuffer):
        self.history = history

    def plot_alpha_fy(
        self,
        ax,
        mf_params: Optional[MagicFormulaParams] = None,
        linear_region_deg: Optional[float] = None,
    ):
        """Measured slip angle vs lateral force with the Magic Formula overlay."""
        ax.scatter(self.history.slip_angle, self.history.lateral_force, s=4, label='Measured α vs Fy')

        alphas_deg, Fy = magic_formula_curve(mf_params)
        ax.plot(alphas_deg, Fy, 'k--', linewidth=1.5, label='Magic Formula (model)')

        if linear_region_deg is not None:
            ax.axvspan(-linear_region_deg, linear_region_deg, color='slateblue', alpha=0.12,
                       label='Linear region')

        ax.set_xlabel('Slip angle α (deg)', fontsize=11)
        ax.set_ylabel('Lateral force Fy (N)', fontsize=11)
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)

    def plot_time_traces(self, ax):
        t = self.history.time
        ax.plot(t, self.history.steer, label='Steer δ (deg)')
        ax.plot(t, self.history.yaw_rate, label='Yaw r (deg/s)')
        ax.plot(t, self.history.lateral_accel, label='ay (m/s²)')
        ax.set_xlabel('Time (s)', fontsize=11)
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)

    def plot_dashboard(
        self,
        output_path: str = "lateral_dynamics.png",
        mf_params: Optional[MagicFormulaParams] = None,
        linear_region_deg: Optional[float] = None,
    ):
        """All history-driven charts on one figure."""
        h = self.history
        fig, axes = plt.subplots(3, 2, figsize=(14, 12))
        fig.suptitle('Lateral Dynamics', fontsize=14, fontweight='bold')

        self.plot_alpha_fy(axes[0, 0], mf_params, linear_region_deg)

        axes[0, 1].scatter(h.steer, h.yaw_rate, s=4)
        axes[0, 1].set_xlabel('Steering δ (deg)', fontsize=11)
        axes[0, 1].set_ylabel('Yaw rate r (deg/s)', fontsize=11)
        axes[0, 1].set_title('δ vs r')

        self.plot_time_traces(axes[1, 0])
        axes[1, 0].set_title('Time traces')

        axes[1, 1].scatter(h.slip_angle, h.aligning_torque, s=4, color='tab:green')
        axes[1, 1].set_xlabel('Slip angle α (deg)', fontsize=11)
        axes[1, 1].set_ylabel('Aligning torque Mz (N⋅m)', fontsize=11)
        axes[1, 1].set_title('Mz vs α')

        axes[2, 0].scatter(h.steer, h.lateral_accel, s=4, color='tab:red')
        axes[2, 0].set_xlabel('Steering δ (deg)', fontsize=11)
        axes[2, 0].set_ylabel('Lateral accel ay (m/s²)', fontsize=11)
        axes[2, 0].set_title('ay vs δ')

        axes[2, 1].axis('off')

        for ax in (axes[0, 1], axes[1, 1], axes[2, 0]):
            ax.grid(True, alpha=0.3)

        _save(fig, output_path)


class SweepVisualizer:
    """Plot pressure sweep results."""

    @staticmethod
    def plot_sweep(results: Sequence[SweepResult], output_path: str = "pressure_sweep.png"):
        """Cornering stiffness, yaw gain and Ku against pressure."""
        if not results:
            raise ValueError("No sweep results to plot")

        pressures = np.array([r.pressure for r in results])
        panels = [
            ('Estimated Cα (N/rad)', [r.cornering_stiffness for r in results], 'Cornering stiffness'),
            ('Yaw gain ((deg/s)/deg)', [r.yaw_gain for r in results], 'Yaw gain'),
            ('Ku (illustrative)', [r.understeer_gradient for r in results], 'Understeer gradient proxy'),
        ]

        fig, axes = plt.subplots(1, 3, figsize=(16, 4.5))
        for ax, (ylabel, values, title) in zip(axes, panels):
            sns.lineplot(x=pressures, y=np.asarray(values, dtype=float), marker='o', ax=ax)
            ax.set_xlabel('Pressure (psi)', fontsize=11)
            ax.set_ylabel(ylabel, fontsize=11)
            ax.set_title(title, fontsize=12, fontweight='bold')
            ax.grid(True, alpha=0.3)

        invalid = [r.pressure for r in results if not r.stiffness_valid]
        if invalid:
            axes[0].scatter(invalid, np.zeros(len(invalid)), marker='x', color='r',
                            label='Outside linear region', zorder=3)
            axes[0].legend(fontsize=8)

        _save(fig, output_path)
