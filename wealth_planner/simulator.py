"""Single-path lifetime simulation.

One path runs in two phases, each with its own stream of growth factors:

1. **Accumulation** (years ``0..years_to_retirement``): balances grow (except
   in year 0), contributions arrive mid-year and taxable contributions add to
   basis.
2. **Drawdown** (years ``1..drawdown_years``): balances grow, RMDs and Social
   Security are applied, an optional Roth conversion fills a target bracket,
   healthcare costs join the spending need, the withdrawal is apportioned and
   taxed on top of the benefit, and the spending target grows with inflation.
   A path whose wealth reaches zero is ruined and stops early; the remaining
   years are recorded as zero.

Each phase is a pure transition over a frozen state and a frozen
:class:`YearInput`, so a single year can be exercised on its own.

Example
-------

>>> from wealth_planner.profile import HouseholdProfile
>>> p = HouseholdProfile(age1=64, retirement_age=65, pretax_balance=1_000_000,
...                      return_rate=0.05, inflation_rate=0.0)
>>> out = simulate_path(p)
>>> round(out.first_year_gross, 2)
42000.0
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .calculators.healthcare import long_term_care_cost, medicare_cost
from .calculators.returns import build_return_generator, make_rng
from .calculators.rmd import compute_rmd, rmd_start_age
from .calculators.roth import apply_conversion, conversion_amount
from .calculators.social_security import household_benefit
from .calculators.tables import resolve_tables
from .calculators.taxes import capital_gains_tax, ordinary_income_tax
from .calculators.withdrawals import WithdrawalResult, withdrawal_taxes
from .profile import Contributions, HouseholdProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearInput:
    """Everything external that drives one simulated year."""

    year: int
    growth: float
    age1: int
    age2: Optional[int] = None
    contributing1: bool = False
    contributing2: bool = False
    inflation_rate: float = 0.0


@dataclass(frozen=True)
class AccumulationState:
    taxable: float
    pre_tax: float
    roth: float
    basis: float
    contributions1: Contributions
    contributions2: Contributions
    cumulative_inflation: float = 1.0
    balances_real: Tuple[float, ...] = ()
    balances_nominal: Tuple[float, ...] = ()

    @property
    def total(self) -> float:
        return self.taxable + self.pre_tax + self.roth

    @classmethod
    def initial(cls, profile: HouseholdProfile) -> "AccumulationState":
        return cls(
            taxable=profile.taxable_balance,
            pre_tax=profile.pretax_balance,
            roth=profile.roth_balance,
            basis=profile.taxable_balance,
            contributions1=profile.contributions1,
            contributions2=profile.contributions2,
        )


@dataclass(frozen=True)
class DrawdownState:
    taxable: float
    pre_tax: float
    roth: float
    basis: float
    withdrawal: float
    cumulative_inflation: float
    first_year_withdrawal: WithdrawalResult
    first_year_after_tax_real: float
    survival_years: int = 0
    ruined: bool = False
    balances_real: Tuple[float, ...] = ()
    balances_nominal: Tuple[float, ...] = ()

    @property
    def total(self) -> float:
        return self.taxable + self.pre_tax + self.roth


@dataclass(frozen=True)
class YearLedger:
    """One drawdown year, in nominal dollars unless noted."""

    year: int
    age1: int
    growth: float
    rmd: float
    social_security: float
    roth_conversion: float
    conversion_tax: float
    healthcare: float
    need: float
    withdrawal: float
    rmd_reinvested: float
    tax: float
    taxable: float
    pre_tax: float
    roth: float
    basis: float
    total: float
    total_real: float


@dataclass(frozen=True)
class OutcomeRecord:
    balances_real: Tuple[float, ...]
    balances_nominal: Tuple[float, ...]
    eol_real: float
    first_year_after_tax_real: float
    first_year_withdrawal: WithdrawalResult
    ruined: bool
    survival_years: int
    ledger: Tuple[YearLedger, ...] = ()

    @property
    def first_year_gross(self) -> float:
        return self.first_year_withdrawal.gross

    def ledger_frame(self) -> pd.DataFrame:
        """Drawdown ledger as a DataFrame indexed by simulation year."""
        columns = list(YearLedger.__dataclass_fields__)
        df = pd.DataFrame([asdict(row) for row in self.ledger], columns=columns)
        return df.set_index("year")


def effective_inflation(
    year: int,
    years_to_retirement: int,
    base_rate: float,
    shock_rate: Optional[float] = None,
    shock_duration: int = 0,
) -> float:
    """Inflation for simulation ``year`` (counted from today).

    A shock replaces the base rate for ``shock_duration`` years starting at
    retirement.
    """
    if shock_rate is None:
        return base_rate
    if years_to_retirement <= year < years_to_retirement + shock_duration:
        return shock_rate
    return base_rate


def _dividend_drag(taxable: float, profile: HouseholdProfile, tax_tables: Optional[Dict]) -> float:
    if taxable > 0 and profile.dividend_yield > 0:
        taxable -= capital_gains_tax(taxable * profile.dividend_yield, profile.marital, 0.0, tax_tables)
    return taxable


def accumulate(
    state: AccumulationState,
    year_input: YearInput,
    profile: HouseholdProfile,
    tax_tables: Optional[Dict] = None,
) -> AccumulationState:
    """Advance one accumulation year."""
    g = year_input.growth
    taxable, pre_tax, roth = state.taxable, state.pre_tax, state.roth
    c1, c2 = state.contributions1, state.contributions2

    if year_input.year > 0:
        taxable *= g
        pre_tax *= g
        roth *= g
        taxable = _dividend_drag(taxable, profile, tax_tables)
        if profile.increase_contributions:
            factor = 1 + profile.contribution_growth_rate
            c1 = c1.scaled(factor)
            if profile.is_married:
                c2 = c2.scaled(factor)

    # contributions land mid-year and earn half the year's growth
    mid_year = 1 + (g - 1) * 0.5
    basis = state.basis
    for contributing, c in ((year_input.contributing1, c1), (year_input.contributing2, c2)):
        if not contributing:
            continue
        taxable += c.taxable * mid_year
        pre_tax += (c.pre_tax + c.match) * mid_year
        roth += c.roth * mid_year
        basis += c.taxable

    cumulative = state.cumulative_inflation * (1 + year_input.inflation_rate)
    total = taxable + pre_tax + roth
    return replace(
        state,
        taxable=taxable,
        pre_tax=pre_tax,
        roth=roth,
        basis=basis,
        contributions1=c1,
        contributions2=c2,
        cumulative_inflation=cumulative,
        balances_real=state.balances_real + (total / cumulative,),
        balances_nominal=state.balances_nominal + (total,),
    )


def begin_drawdown(
    state: AccumulationState,
    profile: HouseholdProfile,
    tax_tables: Optional[Dict] = None,
) -> DrawdownState:
    """Switch to drawdown at retirement.

    The first-year gross withdrawal is the retirement balance times the
    withdrawal rate.  Its taxes are estimated against the retirement
    balances (no RMD and no Social Security) and the after-tax amount is
    deflated to today's dollars.  Balances are not debited here; the first
    drawdown year withdraws the target.
    """
    gross = state.total * profile.withdrawal_rate
    first = withdrawal_taxes(
        gross,
        profile.marital,
        state.taxable,
        state.pre_tax,
        state.roth,
        state.basis,
        profile.state_tax_rate,
        tax_tables,
    )
    deflator = (1 + profile.inflation_rate) ** profile.years_to_retirement
    return DrawdownState(
        taxable=state.taxable,
        pre_tax=state.pre_tax,
        roth=state.roth,
        basis=state.basis,
        withdrawal=gross,
        cumulative_inflation=state.cumulative_inflation,
        first_year_withdrawal=first,
        first_year_after_tax_real=(gross - first.total_tax) / deflator,
        balances_real=state.balances_real,
        balances_nominal=state.balances_nominal,
    )


def draw_down(
    state: DrawdownState,
    year_input: YearInput,
    profile: HouseholdProfile,
    tax_tables: Optional[Dict] = None,
) -> Tuple[DrawdownState, YearLedger]:
    """Advance one drawdown year and return the new state with its ledger row."""
    g = year_input.growth
    taxable = _dividend_drag(state.taxable * g, profile, tax_tables)
    pre_tax = state.pre_tax * g
    roth = state.roth * g
    basis = state.basis

    rmd = compute_rmd(pre_tax, year_input.age1, tax_tables)

    ss = 0.0
    if profile.include_social_security:
        eligible2 = (
            profile.is_married and year_input.age2 is not None and year_input.age2 >= profile.ss_claim_age2
        )
        ss = household_benefit(
            profile.ss_income1,
            profile.ss_claim_age1,
            year_input.age1 >= profile.ss_claim_age1,
            profile.ss_income2,
            profile.ss_claim_age2,
            eligible2,
            tax_tables,
        )

    conversion = conversion_tax = 0.0
    if (
        profile.roth_conversion_target is not None
        and year_input.age1 < rmd_start_age(tax_tables)
        and pre_tax > 0
        and taxable > 0
    ):
        conversion, conversion_tax = conversion_amount(
            pre_tax, taxable, ss, profile.roth_conversion_target, profile.marital, tax_tables
        )
        if conversion > 0:
            balances, conversion_tax = apply_conversion(pre_tax, roth, taxable, conversion, conversion_tax)
            pre_tax, roth, taxable = balances["pre_tax"], balances["roth"], balances["taxable"]

    medical_factor = (1 + profile.medical_inflation) ** year_input.year
    healthcare = 0.0
    if profile.include_medicare:
        healthcare += medicare_cost(
            year_input.age1,
            state.withdrawal + ss + rmd,
            profile.marital,
            profile.medicare_premium,
            medical_factor,
            tax_tables,
        )
    if profile.include_ltc:
        healthcare += long_term_care_cost(
            year_input.age1,
            profile.ltc_onset_age,
            profile.ltc_duration,
            profile.ltc_annual_cost,
            profile.ltc_probability,
            medical_factor,
        )

    need = max(0.0, state.withdrawal + healthcare - ss)
    withdrawal = need
    rmd_excess = 0.0
    if rmd > need:
        withdrawal = rmd
        rmd_excess = rmd - need

    result = withdrawal_taxes(
        withdrawal,
        profile.marital,
        taxable,
        pre_tax,
        roth,
        basis,
        profile.state_tax_rate,
        tax_tables,
        min_pre_tax_draw=rmd,
        base_ordinary_income=ss,
    )
    taxable -= result.taxable_draw
    pre_tax -= result.pre_tax_draw
    roth -= result.roth_draw
    basis = result.new_basis

    # RMD money beyond the need is reinvested in taxable after ordinary tax
    reinvested = 0.0
    if rmd_excess > 0:
        reinvested = rmd_excess - ordinary_income_tax(rmd_excess, profile.marital, tax_tables)
        taxable += reinvested
        basis += reinvested

    taxable = max(0.0, taxable)
    pre_tax = max(0.0, pre_tax)
    roth = max(0.0, roth)
    total = taxable + pre_tax + roth

    cumulative = state.cumulative_inflation * (1 + year_input.inflation_rate)
    total_real = total / cumulative
    ruined = total <= 0
    if ruined:
        logger.debug("path ruined in drawdown year %d (age %d)", year_input.year, year_input.age1)

    next_state = replace(
        state,
        taxable=taxable,
        pre_tax=pre_tax,
        roth=roth,
        basis=basis,
        withdrawal=state.withdrawal * (1 + profile.inflation_rate),
        cumulative_inflation=cumulative,
        survival_years=year_input.year - 1 if ruined else year_input.year,
        ruined=ruined,
        balances_real=state.balances_real + (total_real,),
        balances_nominal=state.balances_nominal + (total,),
    )
    row = YearLedger(
        year=year_input.year,
        age1=year_input.age1,
        growth=g,
        rmd=rmd,
        social_security=ss,
        roth_conversion=conversion,
        conversion_tax=conversion_tax,
        healthcare=healthcare,
        need=need,
        withdrawal=withdrawal,
        rmd_reinvested=reinvested,
        tax=result.total_tax,
        taxable=taxable,
        pre_tax=pre_tax,
        roth=roth,
        basis=basis,
        total=total,
        total_real=total_real,
    )
    return next_state, row


def simulate_path(
    profile: Union[HouseholdProfile, Dict],
    seed: Optional[int] = 12345,
    tax_tables: Optional[Dict] = None,
    rng: Optional[np.random.Generator] = None,
) -> OutcomeRecord:
    """Run one lifetime path.

    Parameters
    ----------
    profile : HouseholdProfile or dict
        A profile or a plan dictionary accepted by
        :meth:`HouseholdProfile.from_plan`.
    seed : int, optional
        Seed for sampled returns; ignored when ``rng`` is given.
    tax_tables : dict, optional
        Override for the bundled tables.
    rng : numpy.random.Generator, optional
        Random stream to draw returns from.

    Returns
    -------
    OutcomeRecord
        Real and nominal wealth for every year of both phases, end-of-life
        real wealth, first-year income and ruin details.

    Raises
    ------
    InvalidProfileError
        If the profile fails validation.  No simulation work is done.
    EmptyHistoryError
        Sampled returns were requested without historical data.
    """
    if isinstance(profile, dict):
        profile = HouseholdProfile.from_plan(profile)
    profile.validate()
    tables = resolve_tables(tax_tables)

    years_to_retirement = profile.years_to_retirement
    drawdown_years = profile.drawdown_years(int(tables["life_expectancy"]))
    if rng is None:
        rng = make_rng(seed)
    glide_path = profile.glide_path if profile.return_mode == "sampled" else None
    start_year = profile.historical_start_year

    def phase_returns(years: int, age: int, first_year: Optional[int]):
        return build_return_generator(
            profile.return_mode,
            years,
            nominal_rate=profile.return_rate,
            inflation_rate=profile.inflation_rate,
            series=profile.return_series,
            rng=rng,
            start_year=first_year,
            glide_path=glide_path,
            current_age=age,
            tax_tables=tables,
        )

    # both phases share one random stream; replay resumes at retirement
    acc_growth = phase_returns(years_to_retirement + 1, profile.younger_age, start_year)
    draw_growth = phase_returns(
        drawdown_years,
        profile.older_age + years_to_retirement,
        start_year + years_to_retirement if start_year is not None else None,
    )
    logger.debug(
        "simulating path: %d accumulation years, %d drawdown years, mode=%s",
        years_to_retirement,
        drawdown_years,
        profile.return_mode,
    )

    def inflation(year: int) -> float:
        return effective_inflation(
            year,
            years_to_retirement,
            profile.inflation_rate,
            profile.inflation_shock_rate,
            profile.inflation_shock_duration,
        )

    acc = AccumulationState.initial(profile)
    for y in range(years_to_retirement + 1):
        year_input = YearInput(
            year=y,
            growth=next(acc_growth),
            age1=profile.age1 + y,
            age2=profile.age2 + y if profile.is_married else None,
            contributing1=profile.age1 + y < profile.retirement_age,
            contributing2=profile.is_married and profile.age2 + y < profile.retirement_age,
            inflation_rate=inflation(y),
        )
        acc = accumulate(acc, year_input, profile, tables)

    state = begin_drawdown(acc, profile, tables)
    ledger = []
    for y in range(1, drawdown_years + 1):
        year_input = YearInput(
            year=y,
            growth=next(draw_growth),
            age1=profile.age1 + years_to_retirement + y,
            age2=profile.age2 + years_to_retirement + y if profile.is_married else None,
            inflation_rate=inflation(years_to_retirement + y),
        )
        state, row = draw_down(state, year_input, profile, tables)
        ledger.append(row)
        if state.ruined:
            break

    balances_real = state.balances_real
    balances_nominal = state.balances_nominal
    remaining = years_to_retirement + 1 + drawdown_years - len(balances_real)
    if remaining > 0:
        balances_real += (0.0,) * remaining
        balances_nominal += (0.0,) * remaining

    logger.debug("path finished: ruined=%s survival_years=%d", state.ruined, state.survival_years)
    return OutcomeRecord(
        balances_real=balances_real,
        balances_nominal=balances_nominal,
        eol_real=max(0.0, state.total) / state.cumulative_inflation,
        first_year_after_tax_real=state.first_year_after_tax_real,
        first_year_withdrawal=state.first_year_withdrawal,
        ruined=state.ruined,
        survival_years=state.survival_years,
        ledger=tuple(ledger),
    )


__all__ = [
    "YearInput",
    "AccumulationState",
    "DrawdownState",
    "YearLedger",
    "OutcomeRecord",
    "effective_inflation",
    "accumulate",
    "begin_drawdown",
    "draw_down",
    "simulate_path",
]
