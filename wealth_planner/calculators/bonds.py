"""Stock/bond glide path blending.

When a glide path is configured each sampled stock return is blended with a
bond return estimate before it reaches the return generator.  The bond return
is a low‑correlation function of the stock return::

    bond = bond_avg + (stock - stock_mean) * beta

and the blended return is the allocation-weighted average of the two.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

from .tables import resolve_tables

STRATEGIES = ("aggressive", "age_based", "custom")
SHAPES = ("linear", "accelerated", "decelerated")


@dataclass(frozen=True)
class GlidePath:
    """Age-indexed bond allocation schedule.

    ``start_pct`` and ``end_pct`` are bond fractions (0–1) used by the
    ``custom`` strategy.
    """

    strategy: str = "age_based"
    start_age: int = 40
    end_age: int = 65
    start_pct: float = 0.10
    end_pct: float = 0.60
    shape: str = "linear"

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ValueError(f"unknown glide path strategy {self.strategy!r}")
        if self.shape not in SHAPES:
            raise ValueError(f"unknown glide path shape {self.shape!r}")
        if self.strategy == "custom" and self.end_age <= self.start_age:
            raise ValueError("glide path end_age must be after start_age")


def bond_allocation(age: float, glide_path: Optional[GlidePath]) -> float:
    """Bond fraction (0–1) held at ``age``."""
    if glide_path is None or glide_path.strategy == "aggressive":
        return 0.0

    if glide_path.strategy == "age_based":
        # 10% floor before 40, 60% cap after 60
        if age < 40:
            return 0.10
        if age <= 60:
            return 0.10 + 0.50 * (age - 40) / 20
        return 0.60

    if age < glide_path.start_age:
        return glide_path.start_pct
    if age >= glide_path.end_age:
        return glide_path.end_pct
    progress = (age - glide_path.start_age) / (glide_path.end_age - glide_path.start_age)
    if glide_path.shape == "accelerated":
        progress = math.sqrt(progress)
    elif glide_path.shape == "decelerated":
        progress = progress ** 2
    return glide_path.start_pct + (glide_path.end_pct - glide_path.start_pct) * progress


def bond_return(stock_pct: float, tax_tables: Optional[Dict] = None) -> float:
    """Bond return (percent) correlated with a stock return (percent)."""
    market = resolve_tables(tax_tables)["market"]
    return market["bond_nominal_avg_pct"] + (stock_pct - market["stock_mean_pct"]) * market["bond_stock_beta"]


def blended_return(stock_pct: float, bond_pct: float, allocation: float) -> float:
    """Weighted average of stock and bond returns by bond ``allocation``."""
    return (1 - allocation) * stock_pct + allocation * bond_pct


__all__ = ["GlidePath", "bond_allocation", "bond_return", "blended_return"]
