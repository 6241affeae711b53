"""Roth conversion helpers.

Before RMDs begin a retiree can move pre-tax money into the Roth account,
paying ordinary tax now so later withdrawals are tax free.  The conversion
fills ordinary income up to the top of a chosen bracket and the tax is paid
from the taxable account.

Example
-------

>>> # single filer, no other income, filling the 12 % bracket
>>> bracket_headroom(0.0, 0.12)
66500.0
>>> amount, tax = conversion_amount(500000, 100000, 0.0, 0.12)
>>> amount, round(tax, 2)
(66500.0, 5800.0)
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

from .tables import bracket_limit, ordinary_table
from .taxes import ordinary_income_tax


def bracket_headroom(
    base_income: float,
    target_rate: float,
    filing_status: str = "single",
    tax_tables: Optional[Dict] = None,
) -> float:
    """Gross income that still fits below the top of the ``target_rate`` bracket.

    The bracket top is expressed in gross income (limit plus standard
    deduction).  Returns 0 when no bracket carries ``target_rate``.
    """
    table = ordinary_table(filing_status, tax_tables)
    for bracket in table["brackets"]:
        if math.isclose(bracket["rate"], target_rate):
            threshold = bracket_limit(bracket) + table.get("standard_deduction", 0.0)
            return max(0.0, threshold - max(0.0, base_income))
    return 0.0


def conversion_amount(
    pre_tax_balance: float,
    taxable_balance: float,
    base_income: float,
    target_rate: float,
    filing_status: str = "single",
    tax_tables: Optional[Dict] = None,
) -> Tuple[float, float]:
    """Return ``(amount, tax)`` for this year's conversion.

    - the amount fills the bracket headroom, capped at the pre-tax balance
    - when the taxable account cannot cover the tax, the amount is scaled
      down by ``taxable_balance / tax``
    - the tax is the ordinary tax on ``base_income + amount`` less the tax
      on ``base_income``
    """
    headroom = bracket_headroom(base_income, target_rate, filing_status, tax_tables)
    amount = min(headroom, max(0.0, pre_tax_balance))
    if amount <= 0:
        return 0.0, 0.0

    def _tax(x: float) -> float:
        return ordinary_income_tax(base_income + x, filing_status, tax_tables) - ordinary_income_tax(
            base_income, filing_status, tax_tables
        )

    tax = _tax(amount)
    if tax > max(0.0, taxable_balance):
        amount *= max(0.0, taxable_balance) / tax
        tax = _tax(amount)
    return amount, tax


def apply_conversion(
    pre_tax_balance: float,
    roth_balance: float,
    taxable_balance: float,
    amount: float,
    tax_due: float,
):
    """Apply a Roth conversion to account balances.

    Parameters
    ----------
    pre_tax_balance, roth_balance, taxable_balance : float
        Current account balances.
    amount : float
        Gross amount to move from pre-tax to Roth; capped at the pre-tax
        balance.
    tax_due : float
        Tax on the conversion, paid from the taxable account.

    Returns
    -------
    tuple
        ``(balances, tax_due)`` where ``balances`` maps ``pre_tax``, ``roth``
        and ``taxable`` to their updated values.
    """
    amount = max(0.0, min(amount, pre_tax_balance))
    tax_due = max(0.0, tax_due)
    balances = {
        "pre_tax": pre_tax_balance - amount,
        "roth": roth_balance + amount,
        "taxable": taxable_balance - tax_due,
    }
    return balances, tax_due


__all__ = ["bracket_headroom", "conversion_amount", "apply_conversion"]
