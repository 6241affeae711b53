"""Static configuration tables.

Bracket tables, the NIIT and estate parameters, the Uniform Lifetime divisors,
Medicare IRMAA tiers, Social Security bend points and the historical S&P 500
return series are plain data.  The defaults live in ``data/tax_tables.json``
and are loaded once; every calculator also accepts a ``tax_tables`` dictionary
with the same schema so a caller can supply its own figures.

Example
-------

>>> tables = load_tables()
>>> ordinary_table("single", tables)["standard_deduction"]
16100
>>> len(historical_returns(tables))
194
"""

from __future__ import annotations

import json
import math
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence

_DEFAULT_TAX_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "tax_tables.json"

FILING_STATUSES = ("single", "married")


def validate_brackets(brackets: Sequence[Dict]) -> None:
    """Check that bracket limits are strictly increasing.

    Only the last bracket may be unbounded (``limit`` of ``None``).
    """
    if not brackets:
        raise ValueError("bracket table is empty")
    prev = -math.inf
    for i, bracket in enumerate(brackets):
        limit = bracket.get("limit")
        if limit is None:
            if i != len(brackets) - 1:
                raise ValueError("only the last bracket may be unbounded")
            continue
        if limit <= prev:
            raise ValueError(f"bracket limits must be strictly increasing (got {limit} after {prev})")
        prev = limit


def _validate_tables(tables: Dict) -> Dict:
    for table in tables.get("ordinary", {}).values():
        validate_brackets(table["brackets"])
    for brackets in tables.get("capital_gains", {}).values():
        validate_brackets(brackets)
    for tiers in tables.get("healthcare", {}).get("irmaa", {}).values():
        validate_brackets(tiers)
    return tables


def load_tables(path: Optional[Path] = None) -> Dict:
    """Load and validate tables from JSON.

    Parameters
    ----------
    path : Path, optional
        Path to a JSON file matching the schema of the bundled
        ``data/tax_tables.json``.  The bundled file is used when omitted and
        is only read from disk once.
    """
    if path is None:
        return _default_tables()
    with open(path, "r", encoding="utf-8") as f:
        tables = json.load(f)
    return _validate_tables(tables)


@lru_cache(maxsize=1)
def _default_tables() -> Dict:
    with open(_DEFAULT_TAX_TABLE_PATH, "r", encoding="utf-8") as f:
        tables = json.load(f)
    return _validate_tables(tables)


def resolve_tables(tax_tables: Optional[Dict] = None) -> Dict:
    return tax_tables if tax_tables is not None else _default_tables()


def _by_status(section: Dict, filing_status: str, name: str):
    try:
        return section[filing_status]
    except KeyError:
        raise ValueError(f"unknown filing status {filing_status!r} for {name} table") from None


def ordinary_table(filing_status: str, tables: Optional[Dict] = None) -> Dict:
    """Standard deduction and ordinary-income brackets for ``filing_status``."""
    return _by_status(resolve_tables(tables)["ordinary"], filing_status, "ordinary")


def capital_gains_brackets(filing_status: str, tables: Optional[Dict] = None) -> List[Dict]:
    return _by_status(resolve_tables(tables)["capital_gains"], filing_status, "capital gains")


def irmaa_tiers(filing_status: str, tables: Optional[Dict] = None) -> List[Dict]:
    """Monthly Medicare surcharge tiers keyed by upper MAGI limit."""
    return _by_status(resolve_tables(tables)["healthcare"]["irmaa"], filing_status, "IRMAA")


def bracket_limit(bracket: Dict) -> float:
    limit = bracket.get("limit")
    return math.inf if limit is None else float(limit)


def historical_returns(tables: Optional[Dict] = None) -> List[float]:
    """Annual nominal S&P 500 returns (percent) used for sampled mode.

    Each year is clamped to +/- ``return_cap_pct`` to keep long compounding
    runs realistic.  When ``include_half_values`` is set the clamped series is
    followed by a copy with every value halved, giving a milder distribution.
    """
    market = resolve_tables(tables)["market"]
    cap = float(market.get("return_cap_pct", math.inf))
    capped = [max(-cap, min(cap, float(v))) for v in market["sp500_nominal_pct"]]
    if market.get("include_half_values", False):
        return capped + [v / 2 for v in capped]
    return capped


__all__ = [
    "FILING_STATUSES",
    "load_tables",
    "resolve_tables",
    "validate_brackets",
    "ordinary_table",
    "capital_gains_brackets",
    "irmaa_tiers",
    "bracket_limit",
    "historical_returns",
]
