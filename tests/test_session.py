"""
Tests for the simulation session (host loop and sweep ownership).

Run with: pytest tests/test_session.py -v
"""

import sys
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lateral_dynamics.config import SimulationConfig, SweepConfig
from lateral_dynamics.exceptions import SweepCancelled, SweepInProgressError
from lateral_dynamics.session import SimulationSession


class CancelAfter(threading.Event):
    """Event that reports itself set after a number of checks."""

    def __init__(self, checks: int):
        super().__init__()
        self.remaining = checks

    def is_set(self) -> bool:
        self.remaining -= 1
        return self.remaining < 0


def small_session() -> SimulationSession:
    config = SimulationConfig(sweep=SweepConfig(pressure_start=30.0, pressure_stop=34.0))
    return SimulationSession(config)


def test_advance_clamps_frame_time():
    """A slow frame is integrated as at most max_frame_dt."""
    print("\n" + "="*60)
    print("TEST: Frame dt Clamp")
    print("="*60)

    session = SimulationSession()
    assert session.advance(1.0)
    assert session.sim.elapsed_time == 0.05

    session.advance(0.01)
    assert abs(session.sim.elapsed_time - 0.06) < 1e-12

    print("✓ Frame dt clamped to 50 ms")


def test_advance_paused_while_sweep_owns_sim():
    session = SimulationSession()
    session._busy.acquire()
    try:
        assert session.sweep_running
        assert not session.advance(0.01)
        assert not session.reset()
        assert session.sim.elapsed_time == 0.0
    finally:
        session._busy.release()

    assert session.advance(0.01)


def test_concurrent_sweep_rejected():
    """A second sweep request is rejected while one runs."""
    print("\n" + "="*60)
    print("TEST: Exclusive Sweep")
    print("="*60)

    session = small_session()
    session._busy.acquire()
    try:
        try:
            session.run_sweep()
        except SweepInProgressError:
            pass
        else:
            raise AssertionError("Expected SweepInProgressError")
    finally:
        session._busy.release()

    print("✓ Concurrent sweep rejected")


def test_run_sweep_replaces_results():
    session = small_session()

    first = session.run_sweep()
    assert session.last_sweep_results is first
    assert len(first) == 3

    second = session.run_sweep()
    assert session.last_sweep_results is second
    assert len(second) == 3
    assert not session.sweep_running


def test_cancelled_sweep_keeps_previous_results():
    session = small_session()
    previous = session.run_sweep()

    cancel = threading.Event()
    cancel.set()
    try:
        session.run_sweep(cancel_event=cancel)
    except SweepCancelled:
        pass
    else:
        raise AssertionError("Expected SweepCancelled")

    assert session.last_sweep_results is previous
    assert not session.sweep_running
    assert session.advance(0.01)


def test_background_sweep():
    """start_sweep runs on a worker thread and returns a future."""
    print("\n" + "="*60)
    print("TEST: Background Sweep")
    print("="*60)

    session = small_session()
    try:
        future = session.start_sweep()
        results = future.result(timeout=60)
    finally:
        session.close()

    assert len(results) == 3
    assert session.last_sweep_results == results

    print(f"✓ Background sweep produced {len(results)} results")


def test_cancel_reaches_the_sweep_it_targets():
    """A cancel issued after one start is not lost to the next start."""
    print("\n" + "="*60)
    print("TEST: Per-Run Cancel")
    print("="*60)

    session = small_session()
    gate = threading.Event()
    # hold the worker so both sweeps are queued before either runs
    session._executor = ThreadPoolExecutor(max_workers=1)
    blocker = session._executor.submit(gate.wait, 60)
    try:
        first = session.start_sweep()
        session.cancel_sweep()
        second = session.start_sweep()
        gate.set()

        try:
            first.result(timeout=60)
        except SweepCancelled:
            pass
        else:
            raise AssertionError("First sweep should have been cancelled")
        results = second.result(timeout=60)
    finally:
        gate.set()
        session.close()

    assert blocker.result() is True
    assert len(results) == 3
    assert session.last_sweep_results == results
    assert not session.sweep_running

    print("✓ Cancel stopped only the sweep it was issued for")


def test_session_sweep_cancelled_mid_run():
    session = small_session()
    session.sim.steer_input_deg = 1.0
    session.sim.pressure = 27.0
    before = session.sim.get_state()

    # 250 steps per point, so this lands inside the second point
    try:
        session.run_sweep(cancel_event=CancelAfter(300))
    except SweepCancelled:
        pass
    else:
        raise AssertionError("Expected SweepCancelled")

    assert session.last_sweep_results is None
    assert not session.sweep_running
    after = session.sim.get_state()
    assert after['steer_input_deg'] == before['steer_input_deg']
    assert list(after['pressures']) == list(before['pressures'])
    assert len(session.sim.history) == 0


def test_export_before_sweep_is_notification():
    session = SimulationSession()
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "sweep.csv"
        assert session.export_sweep_csv(path) is None
        assert not path.exists()


def test_export_after_sweep():
    session = small_session()
    session.run_sweep()
    with tempfile.TemporaryDirectory() as tmp:
        path = session.export_sweep_csv(Path(tmp) / "out" / "sweep.csv")
        lines = path.read_text().strip().splitlines()

    assert lines[0] == "Pressure,Cornering_Stiffness,Yaw_Gain"
    assert len(lines) == 4


def run_all_tests():
    """Run all session tests."""
    tests = [
        test_advance_clamps_frame_time,
        test_advance_paused_while_sweep_owns_sim,
        test_concurrent_sweep_rejected,
        test_run_sweep_replaces_results,
        test_cancelled_sweep_keeps_previous_results,
        test_background_sweep,
        test_cancel_reaches_the_sweep_it_targets,
        test_session_sweep_cancelled_mid_run,
        test_export_before_sweep_is_notification,
        test_export_after_sweep,
    ]

    passed = 0
    failed = 0

    for test_func in tests:
        try:
            test_func()
            passed += 1
        except Exception as e:
            print(f"\n✗ TEST FAILED: {test_func.__name__}")
            print(f"  Error: {e}")
            failed += 1

    print(f"\nTEST RESULTS: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
