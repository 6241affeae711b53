"""Withdrawal apportionment across account types.

A gross withdrawal is split across the taxable, pre‑tax and Roth accounts in
proportion to their balances.  Any share an account cannot cover rolls over
in a fixed order: taxable shortfall moves to pre‑tax, pre‑tax shortfall moves
to Roth.  Taxes are then assessed on what came out of each account:

* pre‑tax draws are ordinary income;
* the taxable draw is split into gain and returned basis using the account's
  unrealized gain ratio, and the gain pays long‑term capital gains tax
  stacked on the ordinary income;
* the gain is also subject to the net investment income tax with
  ``MAGI = ordinary + gain``;
* a flat state tax applies to ``ordinary + gain``.

Roth draws are tax free.

Example
-------

>>> r = withdrawal_taxes(40000, "single", taxable=0, pre_tax=1000000, roth=0,
...                      basis=0, state_rate=0.0)
>>> r.pre_tax_draw, round(r.total_tax, 2)
(40000.0, 2620.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

from .taxes import capital_gains_tax, net_investment_income_tax, ordinary_income_tax, state_tax


@dataclass(frozen=True)
class WithdrawalResult:
    """Taxes owed and per-account draws for one withdrawal."""

    total_tax: float = 0.0
    ordinary_tax: float = 0.0
    capital_gains_tax: float = 0.0
    niit: float = 0.0
    state_tax: float = 0.0
    taxable_draw: float = 0.0
    pre_tax_draw: float = 0.0
    roth_draw: float = 0.0
    realized_gain: float = 0.0
    new_basis: float = 0.0

    @property
    def gross(self) -> float:
        return self.taxable_draw + self.pre_tax_draw + self.roth_draw

    @property
    def after_tax(self) -> float:
        return self.gross - self.total_tax


def _clean(value: float) -> float:
    return max(0.0, value) if math.isfinite(value) else 0.0


def withdrawal_taxes(
    gross: float,
    filing_status: str,
    taxable: float,
    pre_tax: float,
    roth: float,
    basis: float,
    state_rate: float,
    tax_tables: Optional[Dict] = None,
    min_pre_tax_draw: float = 0.0,
    base_ordinary_income: float = 0.0,
) -> WithdrawalResult:
    """Apportion ``gross`` across the accounts and compute the taxes due.

    Parameters
    ----------
    gross : float
        Amount to withdraw.
    filing_status : str
        ``"single"`` or ``"married"``.
    taxable, pre_tax, roth : float
        Current account balances.
    basis : float
        Cost basis of the taxable account.
    state_rate : float
        Flat state rate as a decimal.
    min_pre_tax_draw : float, optional
        Amount that must come from the pre‑tax account before the
        proportional split (an RMD).
    base_ordinary_income : float, optional
        Other ordinary income already taxed this year.  Only the increment
        caused by the pre‑tax draw is charged, and gains stack above it.

    Returns
    -------
    WithdrawalResult
        All zeros with ``new_basis == basis`` when there is nothing to
        withdraw or nothing to withdraw from.
    """
    taxable = _clean(taxable)
    pre_tax = _clean(pre_tax)
    roth = _clean(roth)
    basis = _clean(basis)
    gross = _clean(gross)
    state_rate = min(1.0, _clean(state_rate))
    base_ordinary_income = _clean(base_ordinary_income)

    if taxable + pre_tax + roth <= 0 or gross <= 0:
        return WithdrawalResult(new_basis=basis)

    draw_p = min(_clean(min_pre_tax_draw), pre_tax)
    need = gross - draw_p
    draw_t = draw_r = 0.0
    if need > 0:
        available = taxable + (pre_tax - draw_p) + roth
        if available > 0:
            draw_t = need * taxable / available
            draw_p += need * (pre_tax - draw_p) / available
            draw_r = need * roth / available

    # shortfall cascades taxable -> pre-tax -> Roth
    used_t = min(draw_t, taxable)
    want_p = draw_p + (draw_t - used_t)
    used_p = min(want_p, pre_tax)
    used_r = min(draw_r + (want_p - used_p), roth)

    gain_ratio = max(0.0, taxable - basis) / taxable if taxable > 0 else 0.0
    gain = used_t * gain_ratio
    returned_basis = used_t - gain

    ordinary = base_ordinary_income + used_p
    fed_ordinary = ordinary_income_tax(ordinary, filing_status, tax_tables) - ordinary_income_tax(
        base_ordinary_income, filing_status, tax_tables
    )
    fed_gains = capital_gains_tax(gain, filing_status, ordinary, tax_tables)
    niit = net_investment_income_tax(gain, filing_status, ordinary + gain, tax_tables)
    state = state_tax(used_p + gain, state_rate)

    return WithdrawalResult(
        total_tax=fed_ordinary + fed_gains + niit + state,
        ordinary_tax=fed_ordinary,
        capital_gains_tax=fed_gains,
        niit=niit,
        state_tax=state,
        taxable_draw=used_t,
        pre_tax_draw=used_p,
        roth_draw=used_r,
        realized_gain=gain,
        new_basis=max(0.0, basis - returned_basis),
    )


__all__ = ["WithdrawalResult", "withdrawal_taxes"]
