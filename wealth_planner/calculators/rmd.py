"""Required Minimum Distribution (RMD) calculator.

RMDs begin at the configured start age (73 under SECURE Act 2.0) and equal the
prior pre‑tax balance divided by the IRS Uniform Lifetime Table distribution
period for the owner's age.  The table shipped in ``data/tax_tables.json`` is
the 2022 update covering ages 73–120; past the end of the table the smallest
divisor is used.

Example
-------

>>> # Nothing is required before the start age
>>> compute_rmd(100000, 72)
0.0

>>> # A 73‑year‑old with $100k in a traditional IRA
>>> round(compute_rmd(balance=100000, age=73), 2)
3773.58
"""

from __future__ import annotations

from typing import Dict, Optional

from .tables import resolve_tables


def rmd_start_age(tax_tables: Optional[Dict] = None) -> int:
    return int(resolve_tables(tax_tables)["rmd"]["start_age"])


def rmd_divisor(age: int, tax_tables: Optional[Dict] = None) -> float:
    """Distribution period for ``age``.

    Ages outside the table fall back to the minimum divisor.
    """
    divisors = resolve_tables(tax_tables)["rmd"]["divisors"]
    period = divisors.get(str(int(age)))
    if period is None:
        return float(min(divisors.values()))
    return float(period)


def compute_rmd(balance: float, age: int, tax_tables: Optional[Dict] = None) -> float:
    """Compute the Required Minimum Distribution for a given age and balance.

    Parameters
    ----------
    balance : float
        Pre‑tax balance the distribution is based on.
    age : int
        Age of the account owner in the distribution year.

    Returns
    -------
    float
        The RMD amount.  Zero below the start age or for a non‑positive
        balance.
    """
    if balance <= 0 or age < rmd_start_age(tax_tables):
        return 0.0
    return balance / rmd_divisor(age, tax_tables)


__all__ = ["rmd_start_age", "rmd_divisor", "compute_rmd"]
