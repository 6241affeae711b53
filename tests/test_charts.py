import plotly.graph_objects as go

from wealth_planner.components.charts import account_area_chart, fan_chart
from wealth_planner.monte_carlo import simulate
from wealth_planner.profile import HouseholdProfile
from wealth_planner.simulator import simulate_path


def _profile():
    return HouseholdProfile(age1=60, retirement_age=65, taxable_balance=100000, pretax_balance=300000)


def test_fan_chart_by_age():
    summary = simulate(_profile(), n_paths=5)
    fig = fan_chart(summary, start_age=60)
    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 3
    assert fig.data[2].x[0] == 60
    assert fig.layout.xaxis.title.text == "Age"


def test_fan_chart_nominal_by_year():
    summary = simulate(_profile(), n_paths=5)
    fig = fan_chart(summary, real=False)
    assert list(fig.data[2].y) == list(summary.p50_nominal)
    assert fig.layout.xaxis.title.text == "Year"


def test_account_area_chart():
    fig = account_area_chart(simulate_path(_profile()), by_age=True)
    assert [t.name for t in fig.data] == ["Taxable", "Pre Tax", "Roth"]
    assert fig.data[0].x[0] == 66
