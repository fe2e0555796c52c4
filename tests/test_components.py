"""
Tests for the supporting components: history buffer, stability policy,
tire model and steering profiles.

Run with: pytest tests/test_components.py -v
"""

import math
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
from lateral_dynamics.physics.history import SERIES, HistoryBuffer, HistoryRecord
from lateral_dynamics.physics.stability import StabilityPolicy
from lateral_dynamics.physics.tire_model import (
    MagicFormulaParams,
    TireModel,
    magic_formula,
    magic_formula_curve,
)
from lateral_dynamics.scenarios import ConstantSteer, StepSteer, TrapezoidSweep, get_profile


def make_record(t: float) -> HistoryRecord:
    return HistoryRecord(
        time=t, steer=1.0, yaw_rate=2.0, slip_angle=0.5,
        lateral_force=700.0, aligning_torque=84.0, lateral_accel=0.3,
    )


# History buffer

def test_history_fifo_eviction():
    """Oldest records are dropped first once capacity is reached."""
    print("\n" + "="*60)
    print("TEST: History FIFO")
    print("="*60)

    history = HistoryBuffer(capacity=5)
    for i in range(8):
        history.append(make_record(float(i)))

    assert len(history) == 5
    assert list(history.time) == [3.0, 4.0, 5.0, 6.0, 7.0]
    assert history.latest().time == 7.0
    for name in SERIES:
        assert len(history.series(name)) == 5

    print("✓ Oldest records evicted")


def test_history_dataframe_and_unknown_series():
    history = HistoryBuffer()
    assert history.latest() is None
    assert len(history.time) == 0

    history.append(make_record(0.01))
    df = history.to_dataframe()
    assert list(df.columns) == list(SERIES)
    assert df['lateral_force'].iloc[0] == 700.0

    try:
        history.series('sideslip')
    except ValueError:
        pass
    else:
        raise AssertionError("Expected ValueError for unknown series")


def test_history_snapshot_restore():
    history = HistoryBuffer(capacity=3)
    history.append(make_record(1.0))
    history.append(make_record(2.0))
    snap = history.snapshot()

    for i in range(5):
        history.append(make_record(10.0 + i))
    history.restore(snap)

    assert list(history.time) == [1.0, 2.0]
    # capacity survives a restore
    for i in range(3):
        history.append(make_record(20.0 + i))
    assert len(history) == 3


def test_history_invalid_capacity():
    for capacity in (0, -1):
        try:
            HistoryBuffer(capacity=capacity)
        except ValueError:
            continue
        raise AssertionError(f"capacity={capacity} should be rejected")


# Stability policy

def test_stability_clamps():
    """Slip, force and state are saturated at their bounds."""
    print("\n" + "="*60)
    print("TEST: Stability Clamps")
    print("="*60)

    policy = StabilityPolicy()

    assert math.isclose(policy.clamp_slip(1.0), math.radians(20.0))
    assert math.isclose(policy.clamp_slip(-1.0), -math.radians(20.0))
    assert policy.clamp_slip(0.01) == 0.01
    assert policy.clamp_force(3e5) == 1e5
    assert policy.clamp_force(-3e5) == -1e5
    assert math.isnan(policy.clamp_force(float('nan')))

    assert policy.safe_speed(0.0) == 0.01
    assert policy.safe_speed(-5.0) == 0.01
    assert policy.safe_speed(20.0) == 20.0
    assert policy.safe_pressure(-3.0) == 0.1
    assert policy.safe_pressure(30.0) == 30.0

    vy, r, tripped = policy.apply(80.0, -120.0)
    assert (vy, r, tripped) == (50.0, -50.0, False)

    print("✓ Clamps applied")


def test_stability_finite_guard():
    policy = StabilityPolicy()

    assert policy.apply(float('nan'), 0.3) == (0.0, 0.0, True)
    assert policy.apply(0.2, float('nan')) == (0.0, 0.0, True)
    # infinities are clamped to the bound rather than reset
    assert policy.apply(float('inf'), float('-inf')) == (50.0, -50.0, False)
    assert policy.apply(0.2, 0.1) == (0.2, 0.1, False)


# Tire model

def test_cornering_stiffness_power_law():
    tire = TireModel(reference_pressure=32.0, reference_cornering_stiffness=80000.0)

    assert tire.cornering_stiffness(32.0) == 80000.0
    assert math.isclose(tire.cornering_stiffness(64.0), 80000.0 * 2 ** 0.8)
    # flooring is the integrator's job; the tire rejects non-positive input
    for bad in (0.0, -1.0):
        try:
            tire.cornering_stiffness(bad)
        except ValueError:
            continue
        raise AssertionError(f"pressure={bad} should be rejected")

    assert tire.wheel_deformation(32.0) == 1.0
    assert math.isclose(tire.wheel_deformation(0.0), 0.872)
    assert tire.wheel_deformation(-100.0) == 0.8
    assert tire.wheel_deformation(100.0) == 1.05

    try:
        TireModel(reference_pressure=0.0)
    except ValueError:
        pass
    else:
        raise AssertionError("Expected ValueError for zero reference pressure")


def test_magic_formula_shape():
    """Odd, bounded by the peak factor, zero at zero slip."""
    print("\n" + "="*60)
    print("TEST: Magic Formula")
    print("="*60)

    p = MagicFormulaParams()
    assert magic_formula(0.0, p.B, p.C, p.D, p.E) == 0.0

    alphas = np.radians(np.linspace(-20, 20, 81))
    Fy = magic_formula(alphas, p.B, p.C, p.D, p.E)
    assert np.allclose(Fy, -Fy[::-1])
    assert np.all(np.abs(Fy) <= p.D + 1e-9)
    assert magic_formula(math.radians(2.0), p.B, p.C, p.D, p.E) > 0

    alphas_deg, curve = magic_formula_curve()
    assert len(alphas_deg) == len(curve) == 161
    assert alphas_deg[0] == -20.0 and alphas_deg[-1] == 20.0

    print(f"✓ Peak force {np.max(curve):.0f} N")


# Steering profiles

def test_profiles():
    """Profiles return the expected steer at key instants."""
    print("\n" + "="*60)
    print("TEST: Steering Profiles")
    print("="*60)

    constant = ConstantSteer(angle_deg=2.5)
    assert constant(0.0) == constant(100.0) == 2.5

    step = StepSteer(angle_deg=4.0, initial_straight_duration=1.0, step_rise_time=0.2, hold_duration=2.0)
    assert step(0.5) == 0.0
    assert math.isclose(step(1.1), 2.0)
    assert step(2.0) == 4.0
    assert math.isclose(step.get_total_duration(), 3.2)

    sweep = TrapezoidSweep(base_deg=0.0, peak_deg=8.0, hold_time=1.0, ramp_time=2.0)
    assert sweep(0.5) == 0.0
    assert math.isclose(sweep(2.0), 4.0)
    assert math.isclose(sweep(3.0), 8.0)
    assert math.isclose(sweep(5.0), 0.0, abs_tol=1e-12)
    assert math.isclose(sweep(7.0), -8.0)
    assert math.isclose(sweep(8.0), -4.0)
    assert sweep(20.0) == 0.0
    assert sweep.get_total_duration() == 9.0

    print("✓ Profiles behave as expected")


def test_get_profile():
    profile = get_profile('Step', {'angle_deg': 1.0})
    assert isinstance(profile, StepSteer)
    assert profile.angle_deg == 1.0

    try:
        get_profile('slalom')
    except ValueError:
        pass
    else:
        raise AssertionError("Expected ValueError for unknown profile")


def run_all_tests():
    """Run all component tests."""
    tests = [
        test_history_fifo_eviction,
        test_history_dataframe_and_unknown_series,
        test_history_snapshot_restore,
        test_history_invalid_capacity,
        test_stability_clamps,
        test_stability_finite_guard,
        test_cornering_stiffness_power_law,
        test_magic_formula_shape,
        test_profiles,
        test_get_profile,
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
