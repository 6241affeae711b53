"""Annual return generators.

A return generator is a lazy, finite iterator of gross growth factors (``1.07``
for a 7 % year), one per simulated year.  Two modes are supported:

* ``"fixed"`` – every year grows by ``1 + nominal_rate``; a glide path is
  ignored.
* ``"sampled"`` – each year draws, with replacement, one entry of the
  historical annual return series.  With ``series="real"`` each draw is
  deflated by the inflation rate first.  Passing ``start_year`` replays the
  history in calendar order from that year instead of sampling.

Randomness comes from an explicit :class:`numpy.random.Generator` so a seed
always reproduces the same sequence and the bit generator can be swapped.

Example
-------

>>> list(build_return_generator("fixed", 3, nominal_rate=0.05))
[1.05, 1.05, 1.05]
>>> a = list(build_return_generator("sampled", 5, seed=7))
>>> a == list(build_return_generator("sampled", 5, seed=7))
True
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence, Type

import numpy as np

from ..errors import EmptyHistoryError
from .bonds import GlidePath, blended_return, bond_allocation, bond_return
from .tables import historical_returns, resolve_tables

RETURN_MODES = ("fixed", "sampled")
RETURN_SERIES = ("nominal", "real")


def make_rng(seed: Optional[int] = None, bit_generator: Type[np.random.BitGenerator] = np.random.PCG64) -> np.random.Generator:
    """Seeded random stream used for sampling returns."""
    return np.random.Generator(bit_generator(seed))


def real_return(nominal: float, inflation: float) -> float:
    """Convert a nominal rate to a real one: ``(1+n)/(1+i) - 1``."""
    return (1 + nominal) / (1 + inflation) - 1


def build_return_generator(
    mode: str,
    years: int,
    nominal_rate: float = 0.098,
    inflation_rate: float = 0.026,
    series: str = "nominal",
    history: Optional[Sequence[float]] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    start_year: Optional[int] = None,
    glide_path: Optional[GlidePath] = None,
    current_age: int = 35,
    tax_tables: Optional[Dict] = None,
) -> Iterator[float]:
    """Return an iterator yielding ``years`` growth factors.

    Parameters
    ----------
    mode : str
        ``"fixed"`` or ``"sampled"``.
    years : int
        Number of factors to yield.
    nominal_rate, inflation_rate : float
        Decimal rates.  ``nominal_rate`` is only used by fixed mode and
        ``inflation_rate`` only by the real series.
    history : sequence of float, optional
        Annual returns in percent.  Defaults to the configured S&P 500 series.
    rng : numpy.random.Generator, optional
        Random stream for sampled mode.  Built from ``seed`` when omitted.
    start_year : int, optional
        Replay history sequentially from this calendar year.
    glide_path : GlidePath, optional
        Sampled mode only.  Blend each year's stock return with a bond return; the allocation is
        evaluated at ``current_age + year``.

    Raises
    ------
    EmptyHistoryError
        Sampled mode with an empty history.
    """
    if mode not in RETURN_MODES:
        raise ValueError(f"unknown return mode {mode!r}")
    if series not in RETURN_SERIES:
        raise ValueError(f"unknown return series {series!r}")
    years = max(0, int(years))

    if mode == "fixed":
        return _fixed(years, nominal_rate)

    allocations = (
        [bond_allocation(current_age + i, glide_path) for i in range(years)]
        if glide_path is not None
        else None
    )

    if history is None:
        history = historical_returns(tax_tables)
    history = list(history)
    if not history:
        raise EmptyHistoryError("sampled return mode requires a non-empty historical series")

    inflation_factor = 1 + inflation_rate if series == "real" else 1.0

    def _factor(i: int, stock_pct: float) -> float:
        pct = stock_pct
        if allocations is not None:
            pct = blended_return(stock_pct, bond_return(stock_pct, tax_tables), allocations[i])
        return (1 + pct / 100) / inflation_factor

    if start_year is not None:
        first_year = resolve_tables(tax_tables)["market"]["sp500_start_year"]
        offset = start_year - first_year
        if offset < 0:
            raise ValueError(f"history starts in {first_year}, cannot replay from {start_year}")
        return _replay(years, history, offset, _factor)

    if rng is None:
        rng = make_rng(seed)
    return _sample(years, history, rng, _factor)


def _fixed(years, nominal_rate):
    for _ in range(years):
        yield 1 + nominal_rate


def _replay(years, history, offset, factor):
    n = len(history)
    for i in range(years):
        yield factor(i, history[(offset + i) % n])


def _sample(years, history, rng, factor):
    n = len(history)
    for i in range(years):
        yield factor(i, history[int(rng.integers(n))])


__all__ = [
    "RETURN_MODES",
    "RETURN_SERIES",
    "make_rng",
    "real_return",
    "build_return_generator",
]
