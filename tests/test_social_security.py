"""Tests for the Social Security benefit estimator."""

import math

import pytest

from wealth_planner.calculators import social_security as ss


def test_pia_bend_points():
    # AIME $5,000: 90 % of 1,286 plus 32 % of the rest
    assert ss.primary_insurance_amount(60000) == pytest.approx(2345.88)


def test_benefit_at_full_retirement_age():
    benefit = ss.social_security_benefit(60000, claim_age=67)
    assert math.isclose(benefit, 28150.56, rel_tol=1e-6)


def test_early_claim_reduction():
    """Claiming at 62 is 60 months early: 20 % for the first 36, 10 % after."""
    benefit = ss.social_security_benefit(60000, claim_age=62)
    assert math.isclose(benefit, 28150.56 * 0.70, rel_tol=1e-6)


def test_delayed_retirement_credits():
    benefit = ss.social_security_benefit(60000, claim_age=70)
    assert math.isclose(benefit, 28150.56 * 1.24, rel_tol=1e-6)


def test_no_income_no_benefit():
    assert ss.social_security_benefit(0, claim_age=67) == 0.0


def test_spousal_benefit_half_of_spouse_pia():
    assert ss.spousal_benefit(0.0, 2000.0, claim_age=67) == pytest.approx(1000.0)
    # 36 months early: 25 % reduction on the spousal share
    assert ss.spousal_benefit(0.0, 2000.0, claim_age=64) == pytest.approx(750.0)


def test_spousal_benefit_uses_own_when_larger():
    assert ss.spousal_benefit(1500.0, 2000.0, claim_age=67) == pytest.approx(1500.0)


def test_household_both_claiming_gets_spousal_top_up():
    total = ss.household_benefit(60000, 67, True, 0.0, 67, True)
    assert total == pytest.approx((2345.88 + 2345.88 / 2) * 12)


def test_household_only_one_eligible():
    total = ss.household_benefit(60000, 67, True, 80000, 67, False)
    assert total == pytest.approx(ss.social_security_benefit(60000, 67))


def test_household_nobody_eligible():
    assert ss.household_benefit(60000, 67, False, 80000, 67, False) == 0.0
