"""Tests for Medicare, IRMAA and long-term care costs."""

import pytest

from wealth_planner.calculators import healthcare


@pytest.mark.parametrize(
    "magi, status, surcharge",
    [
        (109000, "single", 0.0),
        (109001, "single", 81.2),
        (205000, "single", 324.6),
        (600000, "single", 487.0),
        (218000, "married", 0.0),
        (300000, "married", 202.9),
        (750001, "married", 487.0),
    ],
)
def test_irmaa_tiers(magi, status, surcharge):
    assert healthcare.irmaa_surcharge(magi, status) == pytest.approx(surcharge)


def test_medicare_starts_at_65():
    assert healthcare.medicare_cost(64, 50000) == 0.0
    assert healthcare.medicare_cost(65, 50000) == pytest.approx(4800)


def test_medicare_includes_surcharge_and_inflation():
    cost = healthcare.medicare_cost(70, 150000, monthly_premium=300, inflation_factor=1.1)
    assert cost == pytest.approx((300 + 202.9) * 12 * 1.1)


def test_long_term_care_cost():
    assert healthcare.long_term_care_cost(81) == 0.0
    assert healthcare.long_term_care_cost(82) == pytest.approx(40000)
    assert healthcare.long_term_care_cost(84, inflation_factor=1.5) == pytest.approx(60000)
    assert healthcare.long_term_care_cost(85) == 0.0


def test_irmaa_override_table():
    tables = {"healthcare": {"medicare_age": 65, "irmaa": {"single": [{"limit": None, "surcharge": 10.0}]}}}
    assert healthcare.irmaa_surcharge(1e9, "single", tables) == 10.0
