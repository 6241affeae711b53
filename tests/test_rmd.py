"""Tests for the RMD calculator."""

import math

from wealth_planner.calculators import rmd


def test_rmd_start_age():
    assert rmd.rmd_start_age() == 73


def test_rmd_not_required_before_start_age():
    assert rmd.compute_rmd(100000, 72) == 0.0


def test_rmd_example():
    """A 73-year-old with $100k uses the 26.5 divisor."""
    assert math.isclose(rmd.compute_rmd(100000, 73), 100000 / 26.5, rel_tol=1e-9)


def test_rmd_zero_balance():
    assert rmd.compute_rmd(0, 80) == 0.0


def test_rmd_past_table_uses_smallest_divisor():
    assert rmd.rmd_divisor(130) == 2.0
    assert math.isclose(rmd.compute_rmd(10000, 130), 5000.0)
