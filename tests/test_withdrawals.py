"""Tests for withdrawal apportionment and taxation."""

import pytest

from wealth_planner.calculators.withdrawals import WithdrawalResult, withdrawal_taxes


def test_pre_tax_only_is_ordinary_income():
    r = withdrawal_taxes(40000, "single", taxable=0, pre_tax=1_000_000, roth=0, basis=0, state_rate=0.0)
    assert r.pre_tax_draw == pytest.approx(40000)
    assert r.taxable_draw == 0.0
    assert r.ordinary_tax == pytest.approx(2620.0)
    assert r.total_tax == pytest.approx(2620.0)
    assert r.after_tax == pytest.approx(40000 - 2620.0)


def test_zero_balances_mean_nothing_to_withdraw():
    r = withdrawal_taxes(40000, "single", taxable=0, pre_tax=0, roth=0, basis=500, state_rate=0.05)
    assert r == WithdrawalResult(new_basis=500)
    assert r.gross == 0.0


def test_zero_gross_leaves_basis():
    r = withdrawal_taxes(0, "single", taxable=1000, pre_tax=1000, roth=1000, basis=800, state_rate=0.05)
    assert r.total_tax == 0.0
    assert r.new_basis == 800


def test_proportional_split():
    r = withdrawal_taxes(40000, "single", taxable=100000, pre_tax=100000, roth=200000, basis=100000, state_rate=0.0)
    assert r.taxable_draw == pytest.approx(10000)
    assert r.pre_tax_draw == pytest.approx(10000)
    assert r.roth_draw == pytest.approx(20000)
    assert r.realized_gain == 0.0
    assert r.new_basis == pytest.approx(90000)
    # $10k of ordinary income is below the standard deduction
    assert r.total_tax == 0.0


def test_shortfall_cascades_until_accounts_are_empty():
    r = withdrawal_taxes(60000, "single", taxable=10000, pre_tax=10000, roth=10000, basis=10000, state_rate=0.0)
    assert r.taxable_draw == pytest.approx(10000)
    assert r.pre_tax_draw == pytest.approx(10000)
    assert r.roth_draw == pytest.approx(10000)


def test_minimum_pre_tax_draw_comes_first():
    r = withdrawal_taxes(
        30000, "single", taxable=50000, pre_tax=50000, roth=0, basis=50000, state_rate=0.0,
        min_pre_tax_draw=20000,
    )
    # remaining 10k split over 50k taxable and 30k pre-tax
    assert r.pre_tax_draw == pytest.approx(20000 + 3750)
    assert r.taxable_draw == pytest.approx(6250)
    assert r.roth_draw == 0.0


def test_draws_never_exceed_balances():
    r = withdrawal_taxes(
        80000, "single", taxable=10000, pre_tax=30000, roth=30000, basis=10000, state_rate=0.0,
        min_pre_tax_draw=10000,
    )
    assert (r.taxable_draw, r.pre_tax_draw, r.roth_draw) == pytest.approx((10000, 30000, 30000))


def test_gain_ratio_split_and_state_tax():
    r = withdrawal_taxes(50000, "single", taxable=100000, pre_tax=0, roth=0, basis=40000, state_rate=0.05)
    assert r.realized_gain == pytest.approx(30000)
    assert r.new_basis == pytest.approx(20000)
    # gain fits in the 0 % bracket, state tax still applies
    assert r.capital_gains_tax == 0.0
    assert r.state_tax == pytest.approx(1500)
    assert r.total_tax == pytest.approx(1500)


def test_large_gain_pays_ltcg_and_niit():
    r = withdrawal_taxes(300000, "single", taxable=1_000_000, pre_tax=0, roth=0, basis=0, state_rate=0.0)
    assert r.capital_gains_tax == pytest.approx(250550 * 0.15)
    assert r.niit == pytest.approx(100000 * 0.038)
    assert r.total_tax == pytest.approx(250550 * 0.15 + 3800)


def test_gains_stack_on_pre_tax_draw():
    r = withdrawal_taxes(200000, "single", taxable=100000, pre_tax=100000, roth=0, basis=0, state_rate=0.0)
    assert r.ordinary_tax == pytest.approx(13170.0)
    assert r.capital_gains_tax == pytest.approx(15000.0)
    assert r.niit == 0.0
    assert r.total_tax == pytest.approx(28170.0)


def test_base_income_only_charges_increment():
    alone = withdrawal_taxes(20000, "single", taxable=0, pre_tax=100000, roth=0, basis=0, state_rate=0.0)
    stacked = withdrawal_taxes(
        20000, "single", taxable=0, pre_tax=100000, roth=0, basis=0, state_rate=0.0, base_ordinary_income=30000
    )
    assert stacked.ordinary_tax > alone.ordinary_tax
