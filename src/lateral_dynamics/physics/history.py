"""
History Buffer

Bounded, time-ordered record of the per-step observables the plots read.
"""

from collections import deque
from dataclasses import dataclass, fields
from typing import Dict, Optional

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class HistoryRecord:
    """Observables emitted by one integration step."""

    time: float  # s
    steer: float  # deg
    yaw_rate: float  # deg/s
    slip_angle: float  # deg, front axle
    lateral_force: float  # N, front axle
    aligning_torque: float  # N⋅m, front axle
    lateral_accel: float  # m/s²


SERIES = tuple(f.name for f in fields(HistoryRecord))


class HistoryBuffer:
    """
    Parallel series with FIFO eviction past a fixed capacity.

    Records are appended whole, so every series always has the same length.
    """

    def __init__(self, capacity: int = 2000):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._records = deque(maxlen=capacity)

    def append(self, record: HistoryRecord):
        self._records.append(record)

    def clear(self):
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def latest(self) -> Optional[HistoryRecord]:
        return self._records[-1] if self._records else None

    def series(self, name: str) -> np.ndarray:
        """Get one series by name as a float array (oldest first)."""
        if name not in SERIES:
            raise ValueError(f"Unknown series: {name}. Available: {list(SERIES)}")
        return np.array([getattr(rec, name) for rec in self._records], dtype=float)

    def as_dict(self) -> Dict[str, np.ndarray]:
        return {name: self.series(name) for name in SERIES}

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.as_dict(), columns=list(SERIES))

    def snapshot(self) -> tuple:
        return tuple(self._records)

    def restore(self, snapshot: tuple):
        self._records = deque(snapshot, maxlen=self.capacity)

    # Convenience accessors used by plotting
    @property
    def time(self) -> np.ndarray:
        return self.series('time')

    @property
    def steer(self) -> np.ndarray:
        return self.series('steer')

    @property
    def yaw_rate(self) -> np.ndarray:
        return self.series('yaw_rate')

    @property
    def slip_angle(self) -> np.ndarray:
        return self.series('slip_angle')

    @property
    def lateral_force(self) -> np.ndarray:
        return self.series('lateral_force')

    @property
    def aligning_torque(self) -> np.ndarray:
        return self.series('aligning_torque')

    @property
    def lateral_accel(self) -> np.ndarray:
        return self.series('lateral_accel')
