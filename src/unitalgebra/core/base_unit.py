"""
unitalgebra.core.base_unit
==========================

A base unit measures exactly one dimension.

It is defined by its dimension and a *length*, which relates it to every
other unit of the same base dimension. With the meter defined as a distance
of length 1, the kilometer is a distance of length 1000.

To let a unit carry an inherent power without displaying it, a base unit
has a *definition power* (``def_power``). The cubic centimeter can be
defined as a distance of length 0.01 at power 3 with ``def_power`` 3: one
"cc" equals one cm^3, and it prints as "cc" rather than "cc^3".
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from math import isfinite

from unitalgebra.core.dimensions import Base, Dimension
from unitalgebra.core.errors import DimensionMismatchError
from unitalgebra.core.utils import format_power, with_long_power, with_power


@dataclass(frozen=True, slots=True)
class BaseUnit:
    """
    A single-dimension unit.

    Attributes
    ----------
    length : float
        Raw scale of the unit relative to the reference unit of its base
        dimension, at power ``def_power``.
    symbol : str
        Short display name ("m", "cc").
    name : str
        Long display name ("meter", "cubic centimeter").
    dimension : Dimension
        Base dimension and current power.
    def_power : float
        Power the unit was defined at.
    offset : float
        Absolute offset, only used by absolute conversions (temperature
        scales). Expressed in the unit itself.
    """

    length: float
    symbol: str = field(compare=False)
    name: str = field(compare=False)
    dimension: Dimension
    def_power: float = 1.0
    offset: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.dimension, Dimension):
            raise TypeError("dimension must be a Dimension")
        if not (self.length > 0 and isfinite(self.length)):
            raise ValueError("length must be a positive, finite number")
        if self.def_power == 0 or not isfinite(self.def_power):
            raise ValueError("def_power must be a non-zero, finite number")

    # --- Derived properties ---
    @property
    def power(self) -> float:
        return self.dimension.power

    @property
    def base(self) -> Base:
        return self.dimension.base

    @property
    def effective_length(self) -> float:
        """Factor converting one of this unit, at its power, to the reference scale."""
        return self.length ** (self.power / self.def_power)

    # --- Identity ---
    def same_unit(self, other: "BaseUnit") -> bool:
        """True when ``other`` is the same underlying unit, at any power."""
        return (
            self.base is other.base
            and self.length == other.length
            and self.def_power == other.def_power
            and self.offset == other.offset
        )

    # --- Algebra ---
    def at_power(self, power: float) -> "BaseUnit":
        return replace(self, dimension=self.dimension.with_power(power))

    def pow(self, p: float) -> "BaseUnit":
        new_power = self.power * p
        # A zero power would erase the unit; it is kept at power 1 instead.
        if new_power == 0:
            new_power = 1.0
        return self.at_power(new_power)

    def mul(self, other: "BaseUnit") -> "BaseUnit":
        if not self.same_unit(other):
            raise DimensionMismatchError(
                f"Base unit multiplication error: {self.long_name()} * {other.long_name()}.",
                self,
                other,
            )
        return self.at_power(self.power + other.power)

    def div(self, other: "BaseUnit") -> "BaseUnit":
        if not self.same_unit(other):
            raise DimensionMismatchError(
                f"Base unit division error: {self.long_name()} / {other.long_name()}.",
                self,
                other,
            )
        return self.at_power(self.power - other.power)

    def inverse(self) -> "BaseUnit":
        return self.at_power(-self.power)

    # --- Names ---
    def _display_power(self, inverted: bool) -> float:
        p = -self.power if inverted else self.power
        return p / self.def_power

    def short_name(self, inverted: bool = False) -> str:
        return with_power(self.symbol, self._display_power(inverted))

    def long_name(self, inverted: bool = False) -> str:
        return with_long_power(self.name, self._display_power(inverted))

    def debug_string(self) -> str:
        return (
            f"[NAME: {self.symbol}, POW: {format_power(self.power)}, "
            f"DEF: {format_power(self.def_power)}, LEN: {self.length!r}, "
            f"OFFSET: {self.offset!r}, DIM: {self.dimension!r}]"
        )

    def __str__(self) -> str:
        return self.short_name()


__all__ = ["BaseUnit"]
