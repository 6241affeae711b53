"""Expose component submodules for convenience."""

from .charts import fan_chart, account_area_chart

__all__ = [
    "fan_chart",
    "account_area_chart",
]
