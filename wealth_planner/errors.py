"""Exceptions raised by the simulation engine.

Ruin, RMDs larger than the spending need and empty accounts are ordinary
outcomes and are reported in the outcome record.  Only the conditions below
are errors.
"""

from __future__ import annotations

from typing import Optional


class SimulationError(Exception):
    """Base class for all engine errors."""


class InvalidProfileError(SimulationError, ValueError):
    """The household profile cannot be simulated (e.g. retirement age is not
    after the younger person's current age)."""


class EmptyHistoryError(SimulationError, ValueError):
    """Sampled return mode was requested without any historical returns."""


class BatchExecutionError(SimulationError, RuntimeError):
    """A single run failed while executing a Monte Carlo batch."""

    def __init__(self, message: str, run_index: Optional[int] = None, seed: Optional[int] = None):
        super().__init__(message)
        self.run_index = run_index
        self.seed = seed


__all__ = [
    "SimulationError",
    "InvalidProfileError",
    "EmptyHistoryError",
    "BatchExecutionError",
]
