"""Household retirement wealth simulation.

``simulate_path`` runs one lifetime path and ``simulate`` aggregates many
seeded paths into percentile bands.
"""

from .errors import BatchExecutionError, EmptyHistoryError, InvalidProfileError, SimulationError
from .profile import Contributions, HouseholdProfile
from .simulator import OutcomeRecord, simulate_path
from .monte_carlo import BatchSummary, PercentileTriple, simulate

__version__ = "0.1.0"

__all__ = [
    "SimulationError",
    "InvalidProfileError",
    "EmptyHistoryError",
    "BatchExecutionError",
    "Contributions",
    "HouseholdProfile",
    "OutcomeRecord",
    "simulate_path",
    "BatchSummary",
    "PercentileTriple",
    "simulate",
]
