"""Export and plotting helpers."""

from lateral_dynamics.utils.export import (
    export_sweep_csv,
    history_to_csv,
    sweep_results_to_csv,
    sweep_results_to_dataframe,
)

__all__ = [
    "export_sweep_csv",
    "history_to_csv",
    "sweep_results_to_csv",
    "sweep_results_to_dataframe",
]
