# components/charts.py
# Plotly chart helpers for batch summaries and single-path outcomes.
# Every function returns a plotly Figure; rendering is up to the caller.

from typing import Optional, Sequence

import plotly.graph_objects as go

from ..monte_carlo import BatchSummary
from ..simulator import OutcomeRecord


def _fit(series, n):
    arr = list(series)
    if len(arr) < n:
        arr += [0.0] * (n - len(arr))
    return arr[:n]


def _axis(n: int, start_age: Optional[int]) -> Sequence[int]:
    first = start_age if start_age is not None else 0
    return list(range(first, first + n))


# ---------- Wealth "fan" ----------
def fan_chart(summary: BatchSummary,
              start_age: Optional[int] = None,
              title: str = "Wealth in Today's Dollars (Percentile Fan)",
              real: bool = True) -> go.Figure:
    """Shaded 10–90 band with a median line.

    The x axis is age when ``start_age`` is given, otherwise simulation year.
    """
    if real:
        p10, p50, p90 = summary.p10_real, summary.p50_real, summary.p90_real
    else:
        p10, p50, p90 = summary.p10_nominal, summary.p50_nominal, summary.p90_nominal
    n = len(p50)
    x = _axis(n, start_age)
    x_label = "Age" if start_age is not None else "Year"

    fig = go.Figure()

    # Shaded band 10–90
    fig.add_trace(go.Scatter(
        x=x, y=_fit(p90, n), mode="lines", line=dict(width=0),
        hoverinfo="skip", showlegend=False
    ))
    fig.add_trace(go.Scatter(
        x=x, y=_fit(p10, n), mode="lines", line=dict(width=0),
        fill="tonexty", name="10–90%",
        hovertemplate=x_label + " %{x}<br>$%{y:,.0f}<extra></extra>"
    ))

    # Median
    fig.add_trace(go.Scatter(
        x=x, y=_fit(p50, n), mode="lines", name="Median",
        hovertemplate=x_label + " %{x}<br>$%{y:,.0f}<extra></extra>"
    ))

    fig.update_layout(
        title=title,
        template="plotly_white",
        height=380,
        margin=dict(l=10, r=10, t=40, b=10),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        xaxis_title=x_label,
        yaxis_title="Dollars (real)" if real else "Dollars (nominal)"
    )
    return fig


# ---------- Account balances (stacked) ----------
def account_area_chart(outcome: OutcomeRecord,
                       by_age: bool = False,
                       title: str = "Account Balances in Drawdown") -> go.Figure:
    df = outcome.ledger_frame()
    x = list(df["age1"]) if by_age else list(df.index)
    fig = go.Figure()
    for k in ("taxable", "pre_tax", "roth"):
        fig.add_trace(go.Scatter(
            x=x, y=list(df[k]), mode="lines", name=k.replace("_", " ").title(),
            stackgroup="one",
            hovertemplate="%{x}<br>$%{y:,.0f}<extra></extra>"
        ))
    fig.update_layout(
        title=title, template="plotly_white", height=380,
        margin=dict(l=10, r=10, t=40, b=10),
        xaxis_title="Age" if by_age else "Year",
        yaxis_title="Dollars (nominal)"
    )
    return fig


__all__ = ["fan_chart", "account_area_chart"]
