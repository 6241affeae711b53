"""Monte Carlo batch runner.

Runs many independent paths of :func:`~wealth_planner.simulator.simulate_path`
and reduces them to percentile bands.  Every run gets its own seed, derived up
front from the batch seed, so the summary depends only on ``(profile,
n_paths, seed)`` and not on how runs are scheduled across processes.

Example
-------

>>> from wealth_planner.profile import HouseholdProfile
>>> p = HouseholdProfile(age1=60, retirement_age=65, pretax_balance=500_000,
...                      return_mode="sampled")
>>> s = simulate(p, n_paths=50, seed=1)
>>> s.n_paths, 0.0 <= s.ruin_probability <= 1.0
(50, True)
>>> s == simulate(p, n_paths=50, seed=1)
True
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import BatchExecutionError
from .profile import HouseholdProfile
from .simulator import OutcomeRecord, simulate_path

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class PercentileTriple:
    p10: float
    p50: float
    p90: float


@dataclass(frozen=True)
class BatchSummary:
    """Percentile bands over a batch of paths.

    The ``*_real`` series are in today's dollars and the ``*_nominal`` series
    in future dollars; both have one entry per simulated year starting with
    today.
    """

    p10_real: Tuple[float, ...]
    p50_real: Tuple[float, ...]
    p90_real: Tuple[float, ...]
    p10_nominal: Tuple[float, ...]
    p50_nominal: Tuple[float, ...]
    p90_nominal: Tuple[float, ...]
    eol_real: PercentileTriple
    first_year_after_tax_real: PercentileTriple
    ruin_probability: float
    survival_years: float
    n_paths: int
    base_seed: Optional[int]

    @property
    def success_probability(self) -> float:
        return 1.0 - self.ruin_probability

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(
            {
                "p10_real": self.p10_real,
                "p50_real": self.p50_real,
                "p90_real": self.p90_real,
                "p10_nominal": self.p10_nominal,
                "p50_nominal": self.p50_nominal,
                "p90_nominal": self.p90_nominal,
            }
        )
        df.index.name = "year"
        return df


def derive_seeds(base_seed: Optional[int], n_paths: int) -> List[int]:
    """Per-run seeds, all fixed before any run starts."""
    rng = np.random.default_rng(base_seed)
    return [int(s) for s in rng.integers(0, 2**32, size=n_paths, dtype=np.uint64)]


def percentile(values, q, axis: Optional[int] = None):
    """Linear-interpolation percentile, the single rule used for every band."""
    return np.percentile(np.asarray(values, dtype=float), q, axis=axis, method="linear")


def _triple(values: Sequence[float]) -> PercentileTriple:
    p10, p50, p90 = percentile(values, [10, 50, 90])
    return PercentileTriple(float(p10), float(p50), float(p90))


def _run_one(index: int, profile: HouseholdProfile, seed: int, tax_tables: Optional[Dict]) -> Tuple[int, OutcomeRecord]:
    return index, simulate_path(profile, seed=seed, tax_tables=tax_tables)


def _report(progress: Optional[ProgressCallback], completed: int, total: int) -> None:
    if progress is not None and (completed % PROGRESS_EVERY == 0 or completed == total):
        progress(completed, total)


def _fail(exc: Exception, index: int, seed: int) -> BatchExecutionError:
    logger.warning("run %d (seed %d) failed: %s", index, seed, exc)
    return BatchExecutionError(f"run {index} failed: {exc}", run_index=index, seed=seed)


def simulate(
    profile: Union[HouseholdProfile, Dict],
    n_paths: int = 1000,
    seed: Optional[int] = 12345,
    tax_tables: Optional[Dict] = None,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchSummary:
    """Run ``n_paths`` simulations and summarise them.

    Parameters
    ----------
    profile : HouseholdProfile or dict
        Household to simulate.  Validated once before any run starts.
    n_paths : int
        Number of paths.
    seed : int, optional
        Batch seed; per-run seeds are derived from it.
    workers : int, optional
        Fan runs out over this many processes when greater than 1.
    progress : callable, optional
        Called as ``progress(completed, total)`` every 100 runs and once at
        the end.

    Raises
    ------
    InvalidProfileError
        If the profile fails validation.
    BatchExecutionError
        If any run fails.  No partial summary is produced.
    """
    if isinstance(profile, dict):
        profile = HouseholdProfile.from_plan(profile)
    profile.validate()
    if n_paths < 1:
        raise ValueError("n_paths must be at least 1")

    seeds = derive_seeds(seed, n_paths)
    logger.info("starting batch of %d paths (seed=%s, workers=%s)", n_paths, seed, workers or 1)

    results: List[Optional[OutcomeRecord]] = [None] * n_paths
    if workers is not None and workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(_run_one, i, profile, s, tax_tables): i for i, s in enumerate(seeds)
            }
            completed = 0
            for f, i in futures.items():
                try:
                    index, record = f.result()
                except Exception as exc:
                    for pending in futures:
                        pending.cancel()
                    raise _fail(exc, i, seeds[i]) from exc
                results[index] = record
                completed += 1
                _report(progress, completed, n_paths)
    else:
        for i, s in enumerate(seeds):
            try:
                _, results[i] = _run_one(i, profile, s, tax_tables)
            except Exception as exc:
                raise _fail(exc, i, s) from exc
            _report(progress, i + 1, n_paths)

    summary = summarize(results, base_seed=seed)
    logger.info(
        "batch finished: %d paths, ruin probability %.3f, median EOL real %.0f",
        n_paths,
        summary.ruin_probability,
        summary.eol_real.p50,
    )
    return summary


def summarize(results: Sequence[OutcomeRecord], base_seed: Optional[int] = None) -> BatchSummary:
    """Reduce outcome records (in run order) to a :class:`BatchSummary`."""
    real = np.vstack([r.balances_real for r in results])  # n_paths x years
    nominal = np.vstack([r.balances_nominal for r in results])
    real_bands = percentile(real, [10, 50, 90], axis=0)
    nominal_bands = percentile(nominal, [10, 50, 90], axis=0)

    return BatchSummary(
        p10_real=tuple(real_bands[0].tolist()),
        p50_real=tuple(real_bands[1].tolist()),
        p90_real=tuple(real_bands[2].tolist()),
        p10_nominal=tuple(nominal_bands[0].tolist()),
        p50_nominal=tuple(nominal_bands[1].tolist()),
        p90_nominal=tuple(nominal_bands[2].tolist()),
        eol_real=_triple([r.eol_real for r in results]),
        first_year_after_tax_real=_triple([r.first_year_after_tax_real for r in results]),
        ruin_probability=float(np.mean([r.ruined for r in results])),
        survival_years=float(np.median([r.survival_years for r in results])),
        n_paths=len(results),
        base_seed=base_seed,
    )


__all__ = [
    "PercentileTriple",
    "BatchSummary",
    "derive_seeds",
    "percentile",
    "summarize",
    "simulate",
]
