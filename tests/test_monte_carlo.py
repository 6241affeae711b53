"""Tests for the Monte Carlo batch runner."""

import pytest

from wealth_planner import monte_carlo
from wealth_planner.errors import BatchExecutionError, InvalidProfileError
from wealth_planner.profile import HouseholdProfile


def _sampled_profile() -> HouseholdProfile:
    return HouseholdProfile(
        age1=55,
        retirement_age=65,
        taxable_balance=200000,
        pretax_balance=400000,
        roth_balance=100000,
        return_mode="sampled",
        withdrawal_rate=0.05,
    )


def test_simulation_is_deterministic():
    p = _sampled_profile()
    assert monte_carlo.simulate(p, n_paths=60, seed=7) == monte_carlo.simulate(p, n_paths=60, seed=7)


def test_percentile_bands_are_ordered():
    s = monte_carlo.simulate(_sampled_profile(), n_paths=80, seed=3)
    for lo, mid, hi in zip(s.p10_real, s.p50_real, s.p90_real):
        assert lo <= mid <= hi
    assert s.eol_real.p10 <= s.eol_real.p50 <= s.eol_real.p90
    assert 0.0 <= s.ruin_probability <= 1.0
    assert s.success_probability == pytest.approx(1.0 - s.ruin_probability)
    assert len(s.p50_real) == 10 + 1 + 30


def test_fixed_returns_collapse_the_fan():
    p = HouseholdProfile(age1=60, retirement_age=65, pretax_balance=500000)
    s = monte_carlo.simulate(p, n_paths=20)
    assert s.p10_real == pytest.approx(s.p90_real)
    assert s.ruin_probability == 0.0


def test_empty_household_always_ruined():
    p = HouseholdProfile(age1=35, retirement_age=65, return_rate=0.0, inflation_rate=0.0)
    s = monte_carlo.simulate(p, n_paths=10)
    assert s.ruin_probability == 1.0
    assert s.survival_years == 0.0


def test_derive_seeds():
    a = monte_carlo.derive_seeds(12345, 5)
    assert len(a) == 5
    assert a == monte_carlo.derive_seeds(12345, 5)
    assert a != monte_carlo.derive_seeds(12346, 5)


def test_percentile_linear_interpolation():
    assert monte_carlo.percentile([1, 2, 3, 4], 50) == pytest.approx(2.5)
    assert monte_carlo.percentile([1, 2, 3, 4], 10) == pytest.approx(1.3)


def test_progress_reported_every_hundred_runs():
    calls = []
    p = HouseholdProfile(age1=60, retirement_age=65, roth_balance=100000)
    monte_carlo.simulate(p, n_paths=250, progress=lambda done, total: calls.append((done, total)))
    assert calls == [(100, 250), (200, 250), (250, 250)]


def test_run_failure_fails_whole_batch(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("bad path")

    monkeypatch.setattr(monte_carlo, "simulate_path", boom)
    with pytest.raises(BatchExecutionError) as excinfo:
        monte_carlo.simulate(_sampled_profile(), n_paths=5)
    assert excinfo.value.run_index == 0
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_invalid_profile_rejected_before_runs():
    with pytest.raises(InvalidProfileError):
        monte_carlo.simulate(HouseholdProfile(age1=70, retirement_age=65), n_paths=5)


def test_parallel_matches_sequential():
    p = _sampled_profile()
    sequential = monte_carlo.simulate(p, n_paths=16, seed=11)
    parallel = monte_carlo.simulate(p, n_paths=16, seed=11, workers=2)
    assert parallel == sequential


def test_summary_frame():
    s = monte_carlo.simulate(_sampled_profile(), n_paths=20, seed=1)
    df = s.to_frame()
    assert df.index.name == "year"
    assert list(df.columns) == ["p10_real", "p50_real", "p90_real", "p10_nominal", "p50_nominal", "p90_nominal"]
    assert len(df) == len(s.p50_real)
