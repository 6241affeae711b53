"""Tests for the Roth conversion helpers."""

import math

import pytest

from wealth_planner.calculators import roth
from wealth_planner.calculators.taxes import ordinary_income_tax


def test_headroom_to_top_of_bracket():
    # 12 % bracket ends at 50 400 taxable, 66 500 gross
    assert roth.bracket_headroom(0.0, 0.12) == pytest.approx(66500)
    assert roth.bracket_headroom(30000.0, 0.12) == pytest.approx(36500)
    assert roth.bracket_headroom(80000.0, 0.12) == 0.0


def test_headroom_married_and_top_bracket():
    assert roth.bracket_headroom(0.0, 0.22, "married") == pytest.approx(211400 + 32200)
    assert math.isinf(roth.bracket_headroom(0.0, 0.37))


def test_unknown_target_rate_converts_nothing():
    assert roth.bracket_headroom(0.0, 0.25) == 0.0
    assert roth.conversion_amount(500000, 100000, 0.0, 0.25) == (0.0, 0.0)


def test_conversion_capped_by_pre_tax_balance():
    amount, tax = roth.conversion_amount(20000, 100000, 0.0, 0.22)
    assert amount == 20000
    assert tax == pytest.approx(ordinary_income_tax(20000))


def test_conversion_tax_is_the_increment_over_base_income():
    amount, tax = roth.conversion_amount(500000, 100000, 30000, 0.12)
    assert amount == pytest.approx(36500)
    assert tax == pytest.approx(ordinary_income_tax(66500) - ordinary_income_tax(30000))


def test_conversion_scaled_to_what_taxable_can_pay():
    amount, tax = roth.conversion_amount(500000, 1000, 0.0, 0.12)
    assert amount == pytest.approx(66500 * 1000 / 5800)
    assert tax <= 1000


def test_apply_conversion():
    balances, tax_due = roth.apply_conversion(100000, 5000, 20000, 30000, 3000)
    assert balances == {"pre_tax": 70000, "roth": 35000, "taxable": 17000}
    assert tax_due == 3000


def test_apply_conversion_limited_to_pre_tax():
    balances, _ = roth.apply_conversion(10000, 0, 5000, 30000, 0)
    assert balances["pre_tax"] == 0
    assert balances["roth"] == 10000
