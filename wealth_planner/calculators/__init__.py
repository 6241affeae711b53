"""Helper package that exposes the pure financial calculators.

The `calculators` package contains small, focused modules that each implement
one piece of the simulation's arithmetic:

* ``tables`` – bracket tables, actuarial divisors and the historical return series.
* ``taxes`` – progressive ordinary tax, stacked capital gains, NIIT, estate and state tax.
* ``rmd`` – Required Minimum Distribution rules and the Uniform Lifetime table.
* ``social_security`` – benefit estimation from PIA and claiming age, including spousal benefits.
* ``bonds`` – stock/bond glide paths and blended returns.
* ``returns`` – seeded annual return generators.
* ``withdrawals`` – apportioning a withdrawal across account types and taxing it.
* ``roth`` – bracket-filling Roth conversions before RMDs begin.
* ``healthcare`` – Medicare premiums with IRMAA surcharges and long-term care costs.

None of these modules keep state; every function takes an optional
``tax_tables`` dictionary overriding the bundled tables.
"""

from . import tables, taxes, rmd, social_security, bonds, returns, withdrawals, roth, healthcare  # noqa: F401

__all__ = [
    "tables",
    "taxes",
    "rmd",
    "social_security",
    "bonds",
    "returns",
    "withdrawals",
    "roth",
    "healthcare",
]
