"""Tax calculation utilities.

This module implements the simplified U.S. federal tax rules the simulator
applies to retirement withdrawals: progressive ordinary income tax, long‑term
capital gains tax stacked on top of ordinary income, the 3.8 % net investment
income surcharge, a one-time estate tax and a flat state tax.  Bracket tables
are configuration (see :mod:`wealth_planner.calculators.tables`), keyed by
filing status (``"single"`` or ``"married"``).  The standard deduction is
applied before ordinary rates; AMT, credits and phase-outs are not modelled.

Example
-------

>>> # Federal tax on $60 000 of ordinary income for a single filer
>>> round(ordinary_income_tax(60000), 2)
5020.0

>>> # $100 000 of gains with no other income ...
>>> round(capital_gains_tax(100000), 2)
7582.5

>>> # ... and the same gains on top of $60 000 of ordinary income
>>> round(capital_gains_tax(100000, ordinary_income=60000), 2)
15000.0
"""

from __future__ import annotations

import math
from typing import Dict, Optional

from .tables import bracket_limit, capital_gains_brackets, ordinary_table, resolve_tables


def _safe(amount: float) -> float:
    # NaN/inf/negative amounts carry no tax
    return max(0.0, amount) if math.isfinite(amount) else 0.0


def ordinary_income_tax(
    income: float,
    filing_status: str = "single",
    tax_tables: Optional[Dict] = None,
) -> float:
    """Compute federal income tax due on ordinary income.

    Income is reduced by the standard deduction and the remainder is taxed
    progressively, each bracket taxing only the slice of income inside it.
    """
    income = _safe(income)
    if income <= 0:
        return 0.0
    table = ordinary_table(filing_status, tax_tables)
    remaining = max(0.0, income - table.get("standard_deduction", 0.0))
    tax = 0.0
    prev = 0.0
    for bracket in table["brackets"]:
        if remaining <= 0:
            break
        limit = bracket_limit(bracket)
        amount = min(remaining, limit - prev)
        tax += amount * bracket["rate"]
        remaining -= amount
        prev = limit
    return tax


def capital_gains_tax(
    gain: float,
    filing_status: str = "single",
    ordinary_income: float = 0.0,
    tax_tables: Optional[Dict] = None,
) -> float:
    """Compute long‑term capital gains tax stacked on top of ordinary income.

    Ordinary income occupies the bottom of the LTCG brackets first; the gain
    only uses the room left above it.  Gain beyond the top threshold is taxed
    at the top rate.
    """
    remaining = _safe(gain)
    if remaining <= 0:
        return 0.0
    brackets = capital_gains_brackets(filing_status, tax_tables)
    stacked = _safe(ordinary_income)
    tax = 0.0
    for bracket in brackets:
        room = max(0.0, bracket_limit(bracket) - stacked)
        taxed_here = min(remaining, room)
        if taxed_here > 0:
            tax += taxed_here * bracket["rate"]
            remaining -= taxed_here
            stacked += taxed_here
        if remaining <= 0:
            break
    if remaining > 0:
        tax += remaining * brackets[-1]["rate"]
    return tax


def net_investment_income_tax(
    investment_income: float,
    filing_status: str = "single",
    modified_agi: float = 0.0,
    tax_tables: Optional[Dict] = None,
) -> float:
    """Net Investment Income Tax on the lesser of investment income and the
    excess of modified AGI over the filing-status threshold."""
    investment_income = _safe(investment_income)
    if investment_income <= 0:
        return 0.0
    niit = resolve_tables(tax_tables)["niit"]
    threshold = niit["thresholds"].get(filing_status)
    if threshold is None:
        raise ValueError(f"unknown filing status {filing_status!r} for NIIT table")
    excess = _safe(modified_agi) - threshold
    if excess <= 0:
        return 0.0
    return min(investment_income, excess) * niit["rate"]


def estate_tax(
    total_estate: float,
    filing_status: str = "single",
    exemption: Optional[float] = None,
    rate: Optional[float] = None,
    tax_tables: Optional[Dict] = None,
) -> float:
    """Flat estate tax on the part of ``total_estate`` above the exemption.

    ``exemption`` and ``rate`` default to the configured values for the
    filing status.
    """
    if exemption is None or rate is None:
        estate = resolve_tables(tax_tables)["estate"]
        if exemption is None:
            exemption = estate["exemptions"][filing_status]
        if rate is None:
            rate = estate["rate"]
    taxable = _safe(total_estate) - exemption
    if taxable <= 0:
        return 0.0
    return taxable * rate


def state_tax(taxable_income: float, rate: float) -> float:
    """Flat state income tax."""
    return _safe(taxable_income) * max(0.0, rate)


__all__ = [
    "ordinary_income_tax",
    "capital_gains_tax",
    "net_investment_income_tax",
    "estate_tax",
    "state_tax",
]
