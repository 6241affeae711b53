"""Household profile: the immutable input to every simulation.

A profile can be built directly or from a nested plan dictionary::

    plan = {
        "marital": "married",
        "current_age": 40,
        "spouse_age": 38,
        "retire_age": 65,
        "accounts": {
            "taxable": {"balance": 50000},
            "pre_tax": {"balance": 200000},
            "roth": {"balance": 30000},
        },
        "contributions": {
            "primary": {"pre_tax": 20000, "match": 5000},
            "spouse": {"roth": 7000},
        },
        "assumptions": {"return_rate": 0.07, "inflation_rate": 0.025},
        "withdrawal_rate": 0.04,
        "social_security": {"include": True, "income": 90000, "claim_age": 67},
        "roth_conversion": {"target_bracket": 0.22},
        "healthcare": {"include_medicare": True, "medical_inflation": 0.05},
    }
    profile = HouseholdProfile.from_plan(plan)

All rates are decimals (``0.04`` for 4 %).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .calculators.bonds import GlidePath
from .calculators.returns import RETURN_MODES, RETURN_SERIES
from .calculators.tables import FILING_STATUSES
from .errors import InvalidProfileError

MAX_AGE = 120


@dataclass(frozen=True)
class Contributions:
    """Annual contributions for one person.  ``match`` is employer money and
    always lands in the pre-tax account."""

    taxable: float = 0.0
    pre_tax: float = 0.0
    roth: float = 0.0
    match: float = 0.0

    def scaled(self, factor: float) -> "Contributions":
        return Contributions(
            taxable=self.taxable * factor,
            pre_tax=self.pre_tax * factor,
            roth=self.roth * factor,
            match=self.match * factor,
        )

    @property
    def total(self) -> float:
        return self.taxable + self.pre_tax + self.roth + self.match

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "Contributions":
        data = data or {}
        return cls(
            taxable=float(data.get("taxable", 0.0)),
            pre_tax=float(data.get("pre_tax", 0.0)),
            roth=float(data.get("roth", 0.0)),
            match=float(data.get("match", 0.0)),
        )


@dataclass(frozen=True)
class HouseholdProfile:
    marital: str = "single"
    age1: int = 35
    age2: Optional[int] = None
    retirement_age: int = 65
    taxable_balance: float = 0.0
    pretax_balance: float = 0.0
    roth_balance: float = 0.0
    contributions1: Contributions = field(default_factory=Contributions)
    contributions2: Contributions = field(default_factory=Contributions)
    return_rate: float = 0.098
    inflation_rate: float = 0.026
    state_tax_rate: float = 0.0
    increase_contributions: bool = False
    contribution_growth_rate: float = 0.0
    withdrawal_rate: float = 0.04
    return_mode: str = "fixed"
    return_series: str = "nominal"
    include_social_security: bool = False
    ss_income1: float = 0.0
    ss_claim_age1: int = 67
    ss_income2: float = 0.0
    ss_claim_age2: int = 67
    historical_start_year: Optional[int] = None
    inflation_shock_rate: Optional[float] = None
    inflation_shock_duration: int = 5
    dividend_yield: float = 0.02
    glide_path: Optional[GlidePath] = None
    roth_conversion_target: Optional[float] = None
    include_medicare: bool = False
    medicare_premium: float = 400.0
    medical_inflation: float = 0.05
    include_ltc: bool = False
    ltc_annual_cost: float = 80000.0
    ltc_probability: float = 0.5
    ltc_duration: float = 2.5
    ltc_onset_age: int = 82

    @property
    def is_married(self) -> bool:
        return self.marital == "married"

    @property
    def younger_age(self) -> int:
        if self.is_married and self.age2 is not None:
            return min(self.age1, self.age2)
        return self.age1

    @property
    def older_age(self) -> int:
        if self.is_married and self.age2 is not None:
            return max(self.age1, self.age2)
        return self.age1

    @property
    def years_to_retirement(self) -> int:
        """Years until the younger person reaches the retirement age."""
        return self.retirement_age - self.younger_age

    def drawdown_years(self, life_expectancy: int) -> int:
        """Years of drawdown until the older person reaches ``life_expectancy``."""
        return max(0, life_expectancy - (self.older_age + self.years_to_retirement))

    def validate(self) -> "HouseholdProfile":
        """Raise :class:`InvalidProfileError` if the profile cannot be simulated."""
        if self.marital not in FILING_STATUSES:
            raise InvalidProfileError(f"marital status must be one of {FILING_STATUSES}, got {self.marital!r}")
        if not 0 <= self.age1 <= MAX_AGE:
            raise InvalidProfileError(f"age1 must be between 0 and {MAX_AGE}, got {self.age1}")
        if self.is_married and (self.age2 is None or not 0 <= self.age2 <= MAX_AGE):
            raise InvalidProfileError(f"a married profile needs a spouse age between 0 and {MAX_AGE}")
        if self.retirement_age <= self.younger_age:
            raise InvalidProfileError(
                f"retirement age {self.retirement_age} must be greater than current age {self.younger_age}"
            )
        if self.retirement_age > MAX_AGE:
            raise InvalidProfileError(f"retirement age must not exceed {MAX_AGE}")
        for name in ("taxable_balance", "pretax_balance", "roth_balance"):
            if getattr(self, name) < 0:
                raise InvalidProfileError(f"{name} must not be negative")
        if not 0 <= self.withdrawal_rate <= 1:
            raise InvalidProfileError(f"withdrawal rate must be between 0 and 1, got {self.withdrawal_rate}")
        if self.inflation_rate < 0:
            raise InvalidProfileError("inflation rate must not be negative")
        if not 0 <= self.state_tax_rate <= 1:
            raise InvalidProfileError("state tax rate must be between 0 and 1")
        if self.return_mode not in RETURN_MODES:
            raise InvalidProfileError(f"unknown return mode {self.return_mode!r}")
        if self.return_series not in RETURN_SERIES:
            raise InvalidProfileError(f"unknown return series {self.return_series!r}")
        if self.inflation_shock_duration < 0:
            raise InvalidProfileError("inflation shock duration must not be negative")
        if self.dividend_yield < 0:
            raise InvalidProfileError("dividend yield must not be negative")
        if self.roth_conversion_target is not None and not 0 < self.roth_conversion_target < 1:
            raise InvalidProfileError(
                f"Roth conversion target bracket must be a rate between 0 and 1, got {self.roth_conversion_target}"
            )
        for name in ("medicare_premium", "medical_inflation", "ltc_annual_cost", "ltc_duration"):
            if getattr(self, name) < 0:
                raise InvalidProfileError(f"{name} must not be negative")
        if not 0 <= self.ltc_probability <= 1:
            raise InvalidProfileError("long-term care probability must be between 0 and 1")
        return self

    @classmethod
    def from_plan(cls, plan: Dict) -> "HouseholdProfile":
        """Build a profile from a nested plan dictionary (see module docstring)."""
        acc = plan.get("accounts", {})
        contrib = plan.get("contributions", {})
        assume = plan.get("assumptions", {})
        ss = plan.get("social_security", {}) or {}
        gp = plan.get("glide_path")
        roth = plan.get("roth_conversion", {}) or {}
        care = plan.get("healthcare", {}) or {}
        target = roth.get("target_bracket")
        spouse_age = plan.get("spouse_age")
        start_year = assume.get("historical_start_year")
        shock = assume.get("inflation_shock_rate")

        return cls(
            marital=plan.get("marital", "single"),
            age1=int(plan["current_age"]),
            age2=int(spouse_age) if spouse_age is not None else None,
            retirement_age=int(plan["retire_age"]),
            taxable_balance=float(acc.get("taxable", {}).get("balance", 0.0)),
            pretax_balance=float(acc.get("pre_tax", {}).get("balance", 0.0)),
            roth_balance=float(acc.get("roth", {}).get("balance", 0.0)),
            contributions1=Contributions.from_dict(contrib.get("primary")),
            contributions2=Contributions.from_dict(contrib.get("spouse")),
            return_rate=float(assume.get("return_rate", 0.098)),
            inflation_rate=float(assume.get("inflation_rate", 0.026)),
            state_tax_rate=float(assume.get("state_tax_rate", 0.0)),
            increase_contributions=bool(assume.get("increase_contributions", False)),
            contribution_growth_rate=float(assume.get("contribution_growth_rate", 0.0)),
            withdrawal_rate=float(plan.get("withdrawal_rate", 0.04)),
            return_mode=assume.get("return_mode", "fixed"),
            return_series=assume.get("return_series", "nominal"),
            include_social_security=bool(ss.get("include", False)),
            ss_income1=float(ss.get("income", 0.0)),
            ss_claim_age1=int(ss.get("claim_age", 67)),
            ss_income2=float(ss.get("spouse_income", 0.0)),
            ss_claim_age2=int(ss.get("spouse_claim_age", 67)),
            historical_start_year=int(start_year) if start_year is not None else None,
            inflation_shock_rate=float(shock) if shock is not None else None,
            inflation_shock_duration=int(assume.get("inflation_shock_duration", 5)),
            dividend_yield=float(assume.get("dividend_yield", 0.02)),
            glide_path=GlidePath(**gp) if gp else None,
            roth_conversion_target=float(target) if target is not None else None,
            include_medicare=bool(care.get("include_medicare", False)),
            medicare_premium=float(care.get("medicare_premium", 400.0)),
            medical_inflation=float(care.get("medical_inflation", 0.05)),
            include_ltc=bool(care.get("include_ltc", False)),
            ltc_annual_cost=float(care.get("ltc_annual_cost", 80000.0)),
            ltc_probability=float(care.get("ltc_probability", 0.5)),
            ltc_duration=float(care.get("ltc_duration", 2.5)),
            ltc_onset_age=int(care.get("ltc_onset_age", 82)),
        )


__all__ = ["Contributions", "HouseholdProfile"]
