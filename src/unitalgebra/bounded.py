"""
unitalgebra.bounded
===================

`BoundedValue`, a mutable holder for a `UnitValue` kept between limits.

Two pairs of limits apply:

- soft limits (``low``, ``high``) bound the current value and can be moved;
- hard limits (``minimum``, ``maximum``) bound the soft limits and never move.

Everything is stored in the unit given at construction. Additions in other
units of the same dimension are converted first.

>>> hp = BoundedValue(80, u.kg, low=0, high=100)
>>> hp.add(UnitValue(50, u.kg))     # only 20 kg fit
UnitValue(20.0, 'kg')
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple, Union

from unitalgebra.core.quantity import UnitLike, UnitValue, _resolve_unit
from unitalgebra.core.unit import CompoundUnit

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _clamped_add(
    addition: UnitValue, current: UnitValue, lo: UnitValue, hi: UnitValue
) -> Tuple[UnitValue, UnitValue]:
    """Add ``addition`` to ``current`` without leaving ``[lo, hi]``.

    Returns the new value and the amount that was actually applied.
    """
    if math.isinf(current.magnitude):
        # an unbounded limit does not move
        return current, UnitValue(0.0, current.unit)
    candidate = current.add(addition)
    if candidate > hi:
        return hi, hi.sub(current)
    if candidate < lo:
        return lo, lo.sub(current)
    return candidate, candidate.sub(current)


class BoundedValue:
    """
    A quantity that stays within adjustable bounds.

    Parameters
    ----------
    value : float
        Initial magnitude, in ``unit``.
    unit : CompoundUnit | str
        Unit of every stored value. Only its dimension constrains what can
        be added later.
    low, high : float, optional
        Initial soft limits. Default to the hard limits.
    minimum, maximum : float, optional
        Hard limits. Default to minus and plus infinity.
    """

    __slots__ = ("_value", "_low", "_high", "_minimum", "_maximum")

    def __init__(
        self,
        value: Number,
        unit: UnitLike,
        low: Optional[Number] = None,
        high: Optional[Number] = None,
        minimum: Number = -math.inf,
        maximum: Number = math.inf,
    ) -> None:
        unit = _resolve_unit(unit)
        low = minimum if low is None else low
        high = maximum if high is None else high
        if not minimum <= low <= high <= maximum:
            raise ValueError(
                f"Limits must satisfy minimum <= low <= high <= maximum, "
                f"got {minimum} <= {low} <= {high} <= {maximum}"
            )
        if not low <= value <= high:
            raise ValueError(f"Initial value {value} is outside [{low}, {high}]")

        self._value = UnitValue(value, unit)
        self._low = UnitValue(low, unit)
        self._high = UnitValue(high, unit)
        self._minimum = UnitValue(minimum, unit)
        self._maximum = UnitValue(maximum, unit)

    # --- Read access ---
    @property
    def value(self) -> UnitValue:
        return self._value

    @property
    def unit(self) -> CompoundUnit:
        return self._value.unit

    @property
    def low(self) -> UnitValue:
        return self._low

    @property
    def high(self) -> UnitValue:
        return self._high

    @property
    def minimum(self) -> UnitValue:
        return self._minimum

    @property
    def maximum(self) -> UnitValue:
        return self._maximum

    def _own(self, other: UnitValue) -> UnitValue:
        return other.convert(self.unit)

    # --- Current value ---
    def add(self, amount: UnitValue) -> UnitValue:
        """Add ``amount``, stopping at the soft limits.

        Returns the amount actually added, in this value's unit; it differs
        from ``amount`` only when a limit was reached.
        """
        self._value, applied = _clamped_add(self._own(amount), self._value, self._low, self._high)
        return applied

    def sub(self, amount: UnitValue) -> UnitValue:
        return self.add(amount.negate())

    def set(self, target: UnitValue) -> UnitValue:
        """Move towards ``target``; the result is clamped to the soft limits."""
        return self.add(self._own(target).sub(self._value))

    # --- Soft limits ---
    def add_high(self, amount: UnitValue) -> UnitValue:
        """Raise (or lower) the upper soft limit, never past ``maximum`` or below ``low``."""
        self._high, applied = _clamped_add(self._own(amount), self._high, self._low, self._maximum)
        self._clamp_value()
        return applied

    def add_low(self, amount: UnitValue) -> UnitValue:
        """Move the lower soft limit, never below ``minimum`` or above ``high``."""
        self._low, applied = _clamped_add(self._own(amount), self._low, self._minimum, self._high)
        self._clamp_value()
        return applied

    def set_high(self, high: UnitValue) -> None:
        high = self._own(high)
        if high < self._low or high > self._maximum:
            raise ValueError(f"High limit {high} must lie within [{self._low}, {self._maximum}]")
        self._high = high
        self._clamp_value()

    def set_low(self, low: UnitValue) -> None:
        low = self._own(low)
        if low < self._minimum or low > self._high:
            raise ValueError(f"Low limit {low} must lie within [{self._minimum}, {self._high}]")
        self._low = low
        self._clamp_value()

    def _clamp_value(self) -> None:
        if self._value > self._high:
            clamped = self._high
        elif self._value < self._low:
            clamped = self._low
        else:
            return
        logger.debug("Clamped %s to %s after a limit change", self._value, clamped)
        self._value = clamped

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return (
            f"BoundedValue({self._value.magnitude!r}, {str(self.unit)!r}, "
            f"low={self._low.magnitude!r}, high={self._high.magnitude!r})"
        )


__all__ = ["BoundedValue"]
