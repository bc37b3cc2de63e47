"""
unitalgebra.core.unit
=====================

Compound units: products of base units with an overall scale.

A compound unit keeps its base units as separate line items. Two items are
merged only when they are the same underlying unit (``m * m -> m^2``);
items of the same dimension but a different scale (``m * cm``) stay apart
until :meth:`CompoundUnit.reduce` folds them together.

Defining units
--------------
>>> m = CompoundUnit.base(1, "m", "meter", DISTANCE)
>>> km = CompoundUnit.derive(m, 1000, "km", "kilometer")
>>> liter = CompoundUnit.derive(CompoundUnit.derive(m, 0.1, "dm", "decimeter") ** 3, 1, "L", "liter")
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from math import isclose, isfinite
from typing import TYPE_CHECKING, Iterable

from unitalgebra.core.base_unit import BaseUnit
from unitalgebra.core.dimensions import DIM_0, Base, Dimension
from unitalgebra.core.utils import EPSILON, REL_TOL, is_zero, with_long_power, with_power

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from unitalgebra.core.quantity import UnitValue
    from unitalgebra.units.registry import UnitsRegistry

logger = logging.getLogger(__name__)

Number = int | float


def _add_component(components: list[BaseUnit], bu: BaseUnit) -> None:
    """Multiply one base unit into a component list, merging same units."""
    if bu.power == 0:
        return
    for i, existing in enumerate(components):
        if existing.same_unit(bu):
            merged = existing.mul(bu)
            if is_zero(merged.power):
                del components[i]
            else:
                components[i] = merged
            return
    components.append(bu)


def _collect(*groups: Iterable[BaseUnit]) -> tuple[BaseUnit, ...]:
    components: list[BaseUnit] = []
    for group in groups:
        for bu in group:
            _add_component(components, bu)
    return tuple(components)


@dataclass(frozen=True, slots=True, eq=False)
class CompoundUnit:
    """
    A unit built from one or more base units.

    Attributes
    ----------
    components : tuple[BaseUnit, ...]
        The base units, in insertion order.
    scale : float
        Overall multiplier on top of the components' lengths. 1 except for
        named units defined from several dimensions (e.g. ``0.025 m/kg``).
    symbol : str
        Short name, "" for unnamed (computed) units.
    name : str
        Long name, "" for unnamed units.
    compound_power : float
        Power a named unit has been raised to; only affects display.
    """

    components: tuple[BaseUnit, ...] = ()
    scale: float = 1.0
    symbol: str = ""
    name: str = ""
    compound_power: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))
        if not (self.scale > 0 and isfinite(self.scale)):
            raise ValueError("scale must be a positive, finite number")

    # --- Construction ---
    @classmethod
    def base(
        cls,
        length: float,
        symbol: str,
        name: str,
        dimension: Dimension,
        def_power: float = 1.0,
        offset: float = 0.0,
    ) -> "CompoundUnit":
        """Create a named unit consisting of a single base unit."""
        bu = BaseUnit(float(length), symbol, name, dimension, float(def_power), float(offset))
        return cls(_collect([bu]), 1.0, symbol, name)

    @classmethod
    def derive(
        cls,
        unit: "CompoundUnit",
        factor: float,
        symbol: str,
        name: str,
        offset: float = 0.0,
    ) -> "CompoundUnit":
        """
        Create a named unit equal to ``factor`` times ``unit``.

        A single-dimension source becomes a new base unit whose definition
        power is the source's power, so ``derive(dm ** 3, 1, "L", "liter")``
        is displayed as "L" while still being a distance cubed.
        """
        if not (factor > 0 and isfinite(factor)):
            raise ValueError("factor must be a positive, finite number")

        reduced = unit.reduce()
        if len(reduced.components) == 1:
            bu = reduced.components[0]
            new_bu = BaseUnit(
                bu.effective_length * reduced.scale * factor,
                symbol,
                name,
                bu.dimension,
                def_power=bu.power,
                offset=float(offset),
            )
            return cls((new_bu,), 1.0, symbol, name)

        if offset:
            raise ValueError("An offset can only be given to a single-dimension unit")
        return cls(reduced.components, reduced.scale * factor, symbol, name)

    @classmethod
    def none(cls) -> "CompoundUnit":
        """The dimensionless identity unit."""
        return cls.base(1.0, "none", "none", DIM_0)

    # --- Properties ---
    @property
    def length(self) -> float:
        """Factor converting one of this unit into the reference units of its dimensions."""
        return math.prod(bu.effective_length for bu in self.components) * self.scale

    @property
    def offset(self) -> float:
        return sum(bu.offset for bu in self.components)

    @property
    def is_dimensionless(self) -> bool:
        return not self.reduce().components

    @property
    def is_identity(self) -> bool:
        """Dimensionless with length 1 (a pure number)."""
        return self.is_dimensionless and isclose(self.length, 1.0, rel_tol=REL_TOL, abs_tol=EPSILON)

    def dimensions(self) -> dict[Base, float]:
        """Net power per base dimension."""
        return {bu.base: bu.power for bu in self.reduce().components}

    # --- Algebra ---
    def multiply(self, other: "CompoundUnit") -> "CompoundUnit":
        return CompoundUnit(_collect(self.components, other.components))

    def divide(self, other: "CompoundUnit") -> "CompoundUnit":
        return CompoundUnit(_collect(self.components, other.inverse().components))

    def power(self, p: float) -> "CompoundUnit":
        p = float(p)
        return CompoundUnit(
            _collect(bu.pow(p) for bu in self.components),
            self.scale ** p,
            self.symbol,
            self.name,
            self.compound_power * p,
        )

    def inverse(self) -> "CompoundUnit":
        return self.power(-1)

    def reduce(self) -> "CompoundUnit":
        """
        Collapse the components to at most one per base dimension.

        All powers of a base are summed into the first component seen for
        that base; its length and names are kept even if other components
        of the same base had a different length.
        """
        totals: dict[Base, float] = {}
        for bu in self.components:
            totals[bu.base] = totals.get(bu.base, 0.0) + bu.power

        components: list[BaseUnit] = []
        for bu in self.components:
            total = totals.pop(bu.base, None)
            if total is None or is_zero(total):
                continue
            components.append(bu.at_power(total))
        return replace(self, components=tuple(components))

    def dimension_difference(self, other: "CompoundUnit") -> "CompoundUnit":
        """The unit this one must be multiplied by to get ``other``."""
        diff: list[BaseUnit] = []
        for bu in self.components:
            if bu not in other.components:
                _add_component(diff, bu.inverse())
        for bu in other.components:
            if bu not in self.components:
                _add_component(diff, bu)
        return CompoundUnit(tuple(diff))

    def is_same_dimension(self, other: "CompoundUnit") -> bool:
        return not self.dimension_difference(other).reduce().components

    def equals(self, other: "CompoundUnit") -> bool:
        return self.is_same_dimension(other) and isclose(
            self.length, other.length, rel_tol=REL_TOL, abs_tol=EPSILON
        )

    # --- Display unit search ---
    @staticmethod
    def best_fit_unit(value: "UnitValue", target: float, registry: "UnitsRegistry") -> "CompoundUnit":
        """
        Pick the registry display unit in which ``value`` reads closest to
        ``target``, measured as ``|log(|converted / target|)|``.

        Falls back to the value's own unit when no display unit shares its
        dimension.
        """
        if target == 0:
            raise ValueError("target must be non-zero")

        best = value.unit
        if value.magnitude == 0 or not isfinite(value.magnitude):
            return best

        reduced = value.unit.reduce()
        best_distance = math.inf
        for candidate in registry.display_units():
            if not candidate.is_same_dimension(reduced):
                continue
            distance = abs(math.log(abs(value.convert(candidate).magnitude / target)))
            if distance < best_distance:
                best, best_distance = candidate, distance

        logger.debug("Best fit for %s (target %r): %s", value, target, best)
        return best

    # --- Names ---
    def short_name(self) -> str:
        if self.symbol:
            return with_power(self.symbol, self.compound_power)
        return self.derived_name()

    def long_name(self) -> str:
        if self.name:
            return with_long_power(self.name, self.compound_power)
        return self.derived_name(long=True)

    def derived_name(self, long: bool = False) -> str:
        """Name built from the components, e.g. "(kg*m)/s^2"."""

        def label(bu: BaseUnit, inverted: bool) -> str:
            return bu.long_name(inverted) if long else bu.short_name(inverted)

        def group(parts: list[str]) -> str:
            joined = "*".join(parts)
            return f"({joined})" if len(parts) > 1 else joined

        numerator = [bu for bu in self.components if bu.power > 0]
        denominator = [bu for bu in self.components if bu.power < 0]

        if numerator:
            text = group([label(bu, False) for bu in numerator])
            if denominator:
                text += "/" + group([label(bu, True) for bu in denominator])
            return text
        return "*".join(label(bu, False) for bu in denominator)

    def debug_string(self) -> str:
        parts = " ".join(bu.debug_string() for bu in self.components)
        return f"{{{parts}}} scale={self.scale!r}"

    def __str__(self) -> str:
        return self.short_name()

    def __repr__(self) -> str:
        return f"CompoundUnit({self.short_name()!r}, length={self.length!r})"

    # --- Python protocol ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompoundUnit):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        # Rounded so that powers equal up to float noise hash alike.
        signature = sorted((base.value, round(p, 9)) for base, p in self.dimensions().items())
        return hash(tuple(signature))

    def __mul__(self, other: "CompoundUnit") -> "CompoundUnit":
        if not isinstance(other, CompoundUnit):
            return NotImplemented
        return self.multiply(other)

    def __truediv__(self, other: "CompoundUnit") -> "CompoundUnit":
        if not isinstance(other, CompoundUnit):
            return NotImplemented
        return self.divide(other)

    def __pow__(self, p: Number) -> "CompoundUnit":
        if not isinstance(p, (int, float)):
            return NotImplemented
        return self.power(p)

    def __rmul__(self, value: Number) -> "UnitValue":
        if not isinstance(value, (int, float)):
            return NotImplemented
        from unitalgebra.core.quantity import UnitValue

        return UnitValue(value, self)

    def __rtruediv__(self, n: Number) -> "CompoundUnit":
        if n != 1:
            raise TypeError(
                f"Invalid operation: cannot divide {n} by a unit ({self}). "
                "Only 1/unit (reciprocal) is supported."
            )
        return self.inverse()


Unit = CompoundUnit

__all__ = ["CompoundUnit", "Unit"]
