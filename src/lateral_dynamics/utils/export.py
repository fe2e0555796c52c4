"""
Data Export

Serializes sweep results and the history buffer to CSV.
"""

from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from lateral_dynamics.analysis.pressure_sweep import SweepResult
from lateral_dynamics.exceptions import NoSweepResultsError
from lateral_dynamics.physics.history import HistoryBuffer

SWEEP_COLUMNS = ['Pressure', 'Cornering_Stiffness', 'Yaw_Gain']


def sweep_results_to_dataframe(results: Sequence[SweepResult]) -> pd.DataFrame:
    """One row per result, in sweep order."""
    rows = [(r.pressure, r.cornering_stiffness, r.yaw_gain) for r in results]
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def sweep_results_to_csv(results: Sequence[SweepResult]) -> str:
    """
    Render sweep results as CSV text.

    Header is `Pressure,Cornering_Stiffness,Yaw_Gain`.

    Raises:
        NoSweepResultsError: if there are no results to export
    """
    if not results:
        raise NoSweepResultsError("Run pressure sweep first.")
    return sweep_results_to_dataframe(results).to_csv(index=False, lineterminator='\n')


def export_sweep_csv(results: Sequence[SweepResult], filepath: Union[str, Path]) -> Path:
    """Write sweep results to a CSV file and return its path."""
    text = sweep_results_to_csv(results)
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(text)
    return filepath


def history_to_csv(history: HistoryBuffer, filepath: Union[str, Path]) -> Path:
    """Write the history buffer (one column per series) to CSV."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    history.to_dataframe().to_csv(filepath, index=False)
    return filepath
