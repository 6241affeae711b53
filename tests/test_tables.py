import json

import pytest

from wealth_planner.calculators import tables


def test_default_tables_load():
    t = tables.load_tables()
    assert tables.ordinary_table("married", t)["standard_deduction"] == 32200
    assert t["rmd"]["start_age"] == 73
    assert t["life_expectancy"] == 95


def test_historical_series_is_capped_and_halved():
    series = tables.historical_returns()
    assert len(series) == 194
    assert max(series) == 15.0
    assert min(series) == -15.0
    assert series[97:] == [v / 2 for v in series[:97]]


@pytest.mark.parametrize(
    "brackets",
    [
        [],
        [{"limit": 100, "rate": 0.1}, {"limit": 50, "rate": 0.2}],
        [{"limit": None, "rate": 0.1}, {"limit": 50, "rate": 0.2}],
    ],
)
def test_invalid_brackets_rejected(brackets):
    with pytest.raises(ValueError):
        tables.validate_brackets(brackets)


def test_load_tables_from_file(tmp_path):
    data = tables.load_tables()
    custom = json.loads(json.dumps(data))
    custom["ordinary"]["single"]["standard_deduction"] = 0
    path = tmp_path / "tables.json"
    path.write_text(json.dumps(custom))

    loaded = tables.load_tables(path)
    assert tables.ordinary_table("single", loaded)["standard_deduction"] == 0
    # bundled defaults are untouched
    assert tables.ordinary_table("single")["standard_deduction"] == 16100


def test_unbounded_bracket_limit():
    assert tables.bracket_limit({"limit": None, "rate": 0.37}) == float("inf")
