"""
unitalgebra.core.utils
======================

Numeric tolerances and small formatting helpers shared by the core types.

Every comparison in the library goes through these tolerances, so all of it
agrees on what "equal" means:

- ``EPSILON`` is an absolute tolerance applied to magnitudes.
- ``REL_TOL`` is a relative tolerance so that large magnitudes are not held
  to an absolute bound finer than their floating point spacing.
"""

from __future__ import annotations

from fractions import Fraction
from math import isclose

EPSILON: float = 1e-15
REL_TOL: float = 1e-12

# Largest denominator tried when printing a fractional power as "(p/q)".
_MAX_POWER_DENOMINATOR = 12


def compare_float(a: float, b: float) -> int:
    """Three-way comparison of two floats using the library tolerances.

    Values within ``EPSILON`` of each other, or within ``REL_TOL`` of the
    larger magnitude, compare equal. The relative part dominates for large
    values: ``1e20`` and ``1e20 + 1e5`` compare equal.
    """
    if isclose(a, b, rel_tol=REL_TOL, abs_tol=EPSILON):
        return 0
    return 1 if a > b else -1


def is_zero(x: float) -> bool:
    return compare_float(x, 0.0) == 0


def format_power(power: float) -> str:
    """
    Render a power for display in a unit name.

    Integers print without decimals ("2", "-1"); simple fractions print as
    "(1/2)"; anything else falls back to the float repr.
    """
    if float(power).is_integer():
        return str(int(power))

    frac = Fraction(power).limit_denominator(_MAX_POWER_DENOMINATOR)
    if isclose(float(frac), power, rel_tol=REL_TOL, abs_tol=EPSILON):
        return f"({frac.numerator}/{frac.denominator})"
    return repr(float(power))


def with_power(name: str, power: float) -> str:
    """Attach a power to a name, leaving powers 0 and 1 implicit."""
    if power == 0 or power == 1:
        return name
    return f"{name}^{format_power(power)}"


def with_long_power(name: str, power: float) -> str:
    """Like ``with_power`` but spells out squares and cubes ("square meter")."""
    if power == 2:
        return f"square {name}"
    if power == 3:
        return f"cubic {name}"
    return with_power(name, power)


__all__ = [
    "EPSILON",
    "REL_TOL",
    "compare_float",
    "is_zero",
    "format_power",
    "with_power",
    "with_long_power",
]
