#!/usr/bin/env python3
"""
Command-line entry points.

Usage:
    lateral-sweep --config configs/default.yaml --output-dir output
    lateral-sim --profile sweep --duration 10 --output-dir output
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lateral_dynamics.config import SimulationConfig
from lateral_dynamics.exceptions import SweepCancelled
from lateral_dynamics.scenarios import PROFILES, get_profile
from lateral_dynamics.session import SimulationSession
from lateral_dynamics.utils.export import history_to_csv
from lateral_dynamics.utils.visualization import HistoryVisualizer, SweepVisualizer

console = Console()
logger = logging.getLogger("lateral_dynamics")


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_config(path: Optional[str]) -> SimulationConfig:
    if path is None:
        return SimulationConfig()
    logger.info(f"Loading config from {path}")
    return SimulationConfig.from_yaml(path)


def parse_sweep_args(argv: Optional[Sequence[str]] = None):
    """Parse command line arguments for the pressure sweep."""
    parser = argparse.ArgumentParser(description="Run a tire pressure sweep")

    parser.add_argument("--config", type=str, default=None, help="Path to config YAML file")
    parser.add_argument("--output-dir", type=str, default="output", help="Directory for CSV and plots")
    parser.add_argument("--timeout", type=float, default=None, help="Abandon the sweep after this many seconds")
    parser.add_argument("--no-plot", action="store_true", help="Skip plot generation")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    return parser.parse_args(argv)


def parse_sim_args(argv: Optional[Sequence[str]] = None):
    """Parse command line arguments for a timed simulation."""
    parser = argparse.ArgumentParser(description="Simulate a steering manoeuvre")

    parser.add_argument("--config", type=str, default=None, help="Path to config YAML file")
    parser.add_argument("--profile", type=str, default="sweep", choices=list(PROFILES.keys()),
                        help="Steering profile")
    parser.add_argument("--duration", type=float, default=None, help="Simulated time [s]")
    parser.add_argument("--frame-dt", type=float, default=1.0 / 60.0, help="Frame time [s]")
    parser.add_argument("--speed", type=float, default=None, help="Forward speed [m/s]")
    parser.add_argument("--pressure", type=float, default=None, help="Uniform tire pressure [psi]")
    parser.add_argument("--output-dir", type=str, default="output", help="Directory for CSV and plots")
    parser.add_argument("--no-plot", action="store_true", help="Skip plot generation")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    return parser.parse_args(argv)


def print_sweep_table(results):
    table = Table(title="Pressure sweep")
    table.add_column("Pressure (psi)", justify="right")
    table.add_column("Cα (N/rad)", justify="right")
    table.add_column("Yaw gain", justify="right")
    table.add_column("Ku", justify="right")

    for r in results:
        stiffness = f"{r.cornering_stiffness:,.0f}" if r.stiffness_valid else "[dim]n/a[/dim]"
        table.add_row(f"{r.pressure:.1f}", stiffness, f"{r.yaw_gain:.3f}", f"{r.understeer_gradient:.2e}")

    console.print(table)


def sweep_main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_sweep_args(argv)
    setup_logging(args.verbose)

    session = SimulationSession(load_config(args.config), show_progress=True)
    output_dir = Path(args.output_dir)

    try:
        results = session.run_sweep(timeout=args.timeout)
    except SweepCancelled:
        return 1
    print_sweep_table(results)

    session.export_sweep_csv(output_dir / "sweep_results.csv")
    if not args.no_plot:
        output_dir.mkdir(parents=True, exist_ok=True)
        SweepVisualizer.plot_sweep(results, str(output_dir / "pressure_sweep.png"))

    return 0


def simulate_main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_sim_args(argv)
    setup_logging(args.verbose)

    config = load_config(args.config)
    session = SimulationSession(config)
    sim = session.sim

    if args.speed is not None:
        sim.speed = args.speed
    if args.pressure is not None:
        sim.pressure = args.pressure

    profile = get_profile(args.profile)
    duration = args.duration if args.duration is not None else profile.get_total_duration()
    n_frames = int(round(duration / args.frame_dt))

    logger.info(f"Simulating '{args.profile}' for {duration:.2f} s ({n_frames} frames)")
    for _ in range(n_frames):
        sim.steer_input_deg = profile(sim.elapsed_time)
        session.advance(args.frame_dt)

    output_dir = Path(args.output_dir)
    path = history_to_csv(sim.history, output_dir / "history.csv")
    logger.info(f"History ({len(sim.history)} samples) written to {path}")

    if not args.no_plot:
        HistoryVisualizer(sim.history).plot_dashboard(
            str(output_dir / "lateral_dynamics.png"),
            linear_region_deg=config.sweep.linear_slip_limit_deg,
        )

    state = sim.get_state()
    console.print(f"Final yaw rate: {state['yaw_rate']:.4f} rad/s, "
                  f"lateral velocity: {state['lateral_velocity']:.4f} m/s")
    return 0


if __name__ == "__main__":
    raise SystemExit(sweep_main())
