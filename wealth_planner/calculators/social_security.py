"""Social Security benefit estimator.

Benefits are derived from an average annual income figure rather than a full
earnings record:

* The average monthly earnings (AIME) are ``income / 12``.
* The Primary Insurance Amount (PIA) replaces 90 % of AIME up to the first
  bend point, 32 % up to the second and 15 % above it.
* Claiming before full retirement age (FRA) reduces the benefit by 5/9 of 1 %
  per month for the first 36 months and 5/12 of 1 % for each further month.
* Claiming after FRA adds 2/3 of 1 % per month (8 % per year).
* A married person receives the larger of their own adjusted benefit and the
  spousal benefit (half of the spouse's PIA, reduced for early claiming,
  never increased for delay).

Example
-------

>>> # $60 000 average income claimed at FRA (67) – unadjusted PIA × 12
>>> round(social_security_benefit(60000, claim_age=67), 2)
28150.56

>>> # Claimed at 62 – five years early, 30 % reduction
>>> round(social_security_benefit(60000, claim_age=62), 2)
19705.39

>>> # Claimed at 70 – three years of delayed credits
>>> round(social_security_benefit(60000, claim_age=70), 2)
34906.69
"""

from __future__ import annotations

from typing import Dict, Optional

from .tables import resolve_tables


def _ss_table(tax_tables: Optional[Dict]) -> Dict:
    return resolve_tables(tax_tables)["social_security"]


def primary_insurance_amount(average_annual_income: float, tax_tables: Optional[Dict] = None) -> float:
    """Monthly PIA from average annual earnings using the bend-point formula."""
    if average_annual_income <= 0:
        return 0.0
    ss = _ss_table(tax_tables)
    first, second = ss["bend_points"]
    r1, r2, r3 = ss["replacement_rates"]

    aime = average_annual_income / 12
    if aime <= first:
        return aime * r1
    if aime <= second:
        return first * r1 + (aime - first) * r2
    return first * r1 + (second - first) * r2 + (aime - second) * r3


def adjust_for_claim_age(monthly_pia: float, claim_age: float, full_retirement_age: float = 67) -> float:
    """Apply early-claiming reductions or delayed retirement credits."""
    if monthly_pia <= 0:
        return 0.0
    months = (claim_age - full_retirement_age) * 12
    if months < 0:
        early = -months
        if early <= 36:
            factor = 1 - early * (5 / 9) / 100
        else:
            factor = 1 - 36 * (5 / 9) / 100 - (early - 36) * (5 / 12) / 100
    elif months > 0:
        factor = 1 + months * (2 / 3) / 100
    else:
        factor = 1.0
    return monthly_pia * factor


def social_security_benefit(
    average_annual_income: float,
    claim_age: float,
    full_retirement_age: Optional[float] = None,
    tax_tables: Optional[Dict] = None,
) -> float:
    """Estimate the annual Social Security benefit.

    Parameters
    ----------
    average_annual_income : float
        Average annual career earnings used as the benefit base.
    claim_age : float
        Age at which benefits begin.
    full_retirement_age : float, optional
        Defaults to the configured FRA (67).

    Returns
    -------
    float
        Annual benefit after the claiming-age adjustment.
    """
    if average_annual_income <= 0:
        return 0.0
    if full_retirement_age is None:
        full_retirement_age = _ss_table(tax_tables)["full_retirement_age"]
    pia = primary_insurance_amount(average_annual_income, tax_tables)
    return adjust_for_claim_age(pia, claim_age, full_retirement_age) * 12


def spousal_benefit(
    own_pia: float,
    spouse_pia: float,
    claim_age: float,
    full_retirement_age: float = 67,
    spousal_share: float = 0.5,
) -> float:
    """Monthly benefit for a married claimant: the larger of their own
    adjusted benefit and the spousal benefit."""
    own = adjust_for_claim_age(own_pia, claim_age, full_retirement_age)
    spousal = max(0.0, spouse_pia) * spousal_share
    if claim_age < full_retirement_age:
        early = (full_retirement_age - claim_age) * 12
        if early <= 36:
            spousal *= 1 - early * (25 / 36) / 100
        else:
            spousal *= 1 - 36 * (25 / 36) / 100 - (early - 36) * (5 / 12) / 100
    return max(own, spousal)


def household_benefit(
    income1: float,
    claim_age1: float,
    eligible1: bool,
    income2: float = 0.0,
    claim_age2: float = 67,
    eligible2: bool = False,
    tax_tables: Optional[Dict] = None,
) -> float:
    """Total annual benefit for a household in a given year.

    Each person who has reached their claim age draws their own benefit.  Once
    both spouses are claiming each receives the larger of their own or the
    spousal benefit.
    """
    ss = _ss_table(tax_tables)
    fra = ss["full_retirement_age"]
    if eligible1 and eligible2:
        pia1 = primary_insurance_amount(income1, tax_tables)
        pia2 = primary_insurance_amount(income2, tax_tables)
        share = ss.get("spousal_share", 0.5)
        return (
            spousal_benefit(pia1, pia2, claim_age1, fra, share)
            + spousal_benefit(pia2, pia1, claim_age2, fra, share)
        ) * 12
    total = 0.0
    if eligible1:
        total += social_security_benefit(income1, claim_age1, fra, tax_tables)
    if eligible2:
        total += social_security_benefit(income2, claim_age2, fra, tax_tables)
    return total


__all__ = [
    "primary_insurance_amount",
    "adjust_for_claim_age",
    "social_security_benefit",
    "spousal_benefit",
    "household_benefit",
]
