"""Retirement healthcare costs: Medicare premiums with IRMAA and long-term care."""

from __future__ import annotations

import math
from typing import Dict, Optional

from .tables import bracket_limit, irmaa_tiers, resolve_tables


def irmaa_surcharge(magi: float, filing_status: str = "single", tax_tables: Optional[Dict] = None) -> float:
    """Monthly IRMAA surcharge for ``magi``.

    >>> irmaa_surcharge(100000)
    0.0
    >>> irmaa_surcharge(150000)
    202.9
    """
    magi = magi if math.isfinite(magi) else 0.0
    tiers = irmaa_tiers(filing_status, tax_tables)
    for tier in tiers:
        if magi <= bracket_limit(tier):
            return float(tier["surcharge"])
    return float(tiers[-1]["surcharge"])


def medicare_cost(
    age: int,
    magi: float,
    filing_status: str = "single",
    monthly_premium: float = 400.0,
    inflation_factor: float = 1.0,
    tax_tables: Optional[Dict] = None,
) -> float:
    """Annual Medicare premium plus IRMAA surcharge, scaled by medical inflation.

    Zero before the Medicare eligibility age.
    """
    if age < resolve_tables(tax_tables)["healthcare"]["medicare_age"]:
        return 0.0
    monthly = monthly_premium + irmaa_surcharge(magi, filing_status, tax_tables)
    return monthly * 12 * inflation_factor


def long_term_care_cost(
    age: int,
    onset_age: int = 82,
    duration: float = 2.5,
    annual_cost: float = 80000.0,
    probability: float = 0.5,
    inflation_factor: float = 1.0,
) -> float:
    """Expected long-term care cost for one year.

    Care starts at ``onset_age`` and lasts ``duration`` years; the annual cost
    is weighted by the ``probability`` of needing care.
    """
    if age < onset_age or age - onset_age >= duration:
        return 0.0
    return annual_cost * probability * inflation_factor


__all__ = ["irmaa_surcharge", "medicare_cost", "long_term_care_cost"]
