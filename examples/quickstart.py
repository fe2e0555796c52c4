"""
Quickstart Example - Vehicle Lateral Dynamics Lab

Demonstrates basic usage of the system.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lateral_dynamics.session import SimulationSession
from lateral_dynamics.scenarios import TrapezoidSweep
from lateral_dynamics.utils.visualization import HistoryVisualizer, SweepVisualizer


def main():
    print("="*60)
    print("Vehicle Lateral Dynamics Lab - Quickstart Example")
    print("="*60 + "\n")

    # 1. Create session
    print("Creating simulation session...")
    session = SimulationSession()
    sim = session.sim
    print(f"✓ Mass = {sim.m:.0f} kg, Iz = {sim.Iz:.0f} kg⋅m², speed = {sim.speed:.1f} m/s\n")

    # 2. Drive a steering sweep at 60 fps
    print("Driving a trapezoid steering sweep...")
    profile = TrapezoidSweep(peak_deg=6.0)
    frame_dt = 1.0 / 60.0
    while sim.elapsed_time < profile.get_total_duration():
        sim.steer_input_deg = profile(sim.elapsed_time)
        session.advance(frame_dt)

    latest = sim.history.latest()
    print(f"  Samples recorded: {len(sim.history)}")
    print(f"  Final yaw rate: {latest.yaw_rate:.2f} deg/s, slip: {latest.slip_angle:.2f} deg")
    print("✓ Manoeuvre complete\n")

    # 3. Lower rear pressures and hold a constant steer
    print("Softening rear tires to 24 psi and holding 3° steer...")
    session.reset()
    sim.pressure_rl = sim.pressure_rr = 24.0
    sim.steer_input_deg = 3.0
    for _ in range(300):
        session.advance(frame_dt)
    print(f"  Yaw rate: {sim.history.latest().yaw_rate:.2f} deg/s\n")

    # 4. Pressure sweep
    print("Running pressure sweep (20-40 psi)...")
    results = session.run_sweep()
    for r in results:
        print(f"  P = {r.pressure:4.1f} psi: Cα = {r.cornering_stiffness:8.0f} N/rad, "
              f"yaw gain = {r.yaw_gain:.3f}")
    print("✓ Sweep complete (session state restored)\n")

    # 5. Export and plot
    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)
    session.export_sweep_csv(output_dir / "sweep_results.csv")
    SweepVisualizer.plot_sweep(results, str(output_dir / "pressure_sweep.png"))
    HistoryVisualizer(sim.history).plot_dashboard(str(output_dir / "lateral_dynamics.png"))

    print("="*60)
    print("Quickstart Complete!")
    print("="*60)
    print("\nNext steps:")
    print("1. Run a sweep from the CLI: lateral-sweep --config configs/default.yaml")
    print("2. Try another manoeuvre: lateral-sim --profile step --pressure 26")


if __name__ == "__main__":
    main()
