"""Exceptions raised by the host-facing parts of the package."""


class LateralDynamicsError(Exception):
    """Base class for package errors."""


class SweepInProgressError(LateralDynamicsError):
    """A sweep already owns the simulation."""


class SweepCancelled(LateralDynamicsError):
    """A running sweep was cancelled or timed out."""


class NoSweepResultsError(LateralDynamicsError):
    """Export was requested before any sweep produced results."""
