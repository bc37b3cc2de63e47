"""
unitalgebra.core.quantity
=========================

Defines `UnitValue`, a magnitude tagged with a compound unit.

Values in different units can be added, multiplied, divided and raised to
powers; the result carries the right unit and the right magnitude:

>>> 1 m / 2 s = 0.5 m/s = 1.8 km/h != 0.5 kg/s

Every operation that needs two values of the same dimension (conversion,
addition, comparison) checks it on each call and raises
`DimensionMismatchError` otherwise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from unitalgebra.core.errors import DimensionMismatchError
from unitalgebra.core.unit import CompoundUnit
from unitalgebra.core.utils import compare_float

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from unitalgebra.units.registry import UnitsRegistry

Number = Union[int, float]
UnitLike = Union[CompoundUnit, str]


def _resolve_unit(unit: UnitLike) -> CompoundUnit:
    if isinstance(unit, str):
        from unitalgebra.units.registry import DEFAULT_REGISTRY

        return DEFAULT_REGISTRY.get(unit)
    if not isinstance(unit, CompoundUnit):
        raise TypeError(f"Expected a CompoundUnit or unit symbol, got {type(unit).__name__}")
    return unit


class UnitValue:
    """
    A magnitude expressed in a compound unit.

    Instances are immutable; every operation returns a new value.

    Attributes
    ----------
    magnitude : float
        The numeric part, in ``unit``.
    unit : CompoundUnit
        The unit the magnitude is expressed in.
    """

    __slots__ = ("_magnitude", "_unit")

    def __init__(self, magnitude: Number, unit: UnitLike) -> None:
        self._magnitude = float(magnitude)
        self._unit = _resolve_unit(unit)

    @property
    def magnitude(self) -> float:
        return self._magnitude

    @property
    def value(self) -> float:
        return self._magnitude

    @property
    def unit(self) -> CompoundUnit:
        return self._unit

    # --- Conversion ---
    def convert(self, to: UnitLike) -> "UnitValue":
        """Express this value in another unit of the same dimension."""
        to = _resolve_unit(to)
        if not self._unit.is_same_dimension(to):
            diff = self._unit.dimension_difference(to).reduce()
            raise DimensionMismatchError(
                f"{self._unit} can not be converted to {to} because they are not the "
                f"same dimension. The difference is {diff}.",
                self._unit,
                to,
                diff,
            )
        return UnitValue(self._magnitude * self._unit.length / to.length, to)

    to = convert

    def convert_absolute(self, to: UnitLike) -> "UnitValue":
        """
        Convert between scales with different zero points, such as
        Fahrenheit to Celsius. Each unit's offset is expressed in itself.
        """
        to = _resolve_unit(to)
        result = self.convert(to)
        return result.add(UnitValue(self._unit.offset, self._unit)).sub(UnitValue(to.offset, to))

    def convert_auto(self, target: float = 1.0, registry: "UnitsRegistry | None" = None) -> "UnitValue":
        """Convert to the display unit in which the magnitude reads closest to ``target``."""
        if registry is None:
            from unitalgebra.units.registry import DEFAULT_REGISTRY

            registry = DEFAULT_REGISTRY
        return self.convert(CompoundUnit.best_fit_unit(self, target, registry))

    # --- Arithmetic ---
    def add(self, other: "UnitValue") -> "UnitValue":
        if not self._unit.is_same_dimension(other.unit):
            raise DimensionMismatchError(
                f"Tried adding {other.unit} to {self._unit}.",
                self,
                other,
                self._unit.dimension_difference(other.unit).reduce(),
            )
        return UnitValue(self._magnitude + other.convert(self._unit).magnitude, self._unit)

    def sub(self, other: "UnitValue") -> "UnitValue":
        return self.add(other.negate())

    def mul(self, other: "UnitValue") -> "UnitValue":
        """
        Multiply two values.

        Both operands are first re-expressed in units matching the reduced
        result unit, then their converted magnitudes are multiplied. This
        keeps ``3 m * 50 cm`` at ``1.5 m^2`` instead of ``150 m^2``.
        """
        if self._unit.is_identity and not other.unit.is_identity:
            return UnitValue(self._magnitude * other.magnitude, other.unit)
        if other.unit.is_identity:
            return UnitValue(self._magnitude * other.magnitude, self._unit)

        result_unit = self._unit.multiply(other.unit).reduce()
        mine = result_unit.divide(other.unit).reduce()
        theirs = result_unit.divide(self._unit).reduce()
        magnitude = self.convert(mine).magnitude * other.convert(theirs).magnitude
        # Bases that cancel out (km / m) leave mine * theirs with a
        # different length than the result unit.
        magnitude *= mine.length * theirs.length / result_unit.length
        return UnitValue(magnitude, result_unit)

    def div(self, other: "UnitValue") -> "UnitValue":
        return self.mul(other.inverse())

    def pow(self, p: Number) -> "UnitValue":
        """
        Raise to a (possibly fractional) power.

        The value is converted into the unit whose ``p``-th power is the
        result unit before the magnitude is raised.
        """
        p = float(p)
        if p == 0:
            raise DimensionMismatchError(
                f"The power of {self} could not be calculated: a zeroth power has no root unit.",
                self,
                p,
            )
        if self._magnitude < 0 and not p.is_integer():
            raise ValueError(f"Cannot raise negative value {self} to fractional power {p!r}")

        target = self._unit.power(p)
        root = target.power(1.0 / p)
        return UnitValue(self.convert(root).magnitude ** p, target)

    def inverse(self) -> "UnitValue":
        """Reciprocal value. A zero magnitude raises ``ZeroDivisionError``."""
        return UnitValue(1.0 / self._magnitude, self._unit.inverse())

    def negate(self) -> "UnitValue":
        return UnitValue(-self._magnitude, self._unit)

    def negate_as_percentage(self) -> "UnitValue":
        """``1 - magnitude``, for values holding a fraction."""
        return UnitValue(1 - self._magnitude, self._unit)

    # --- Comparison ---
    def compare_to(self, other: "UnitValue") -> int:
        """Three-way comparison, tolerant to floating point round-off."""
        converted = other.convert(self._unit)
        return compare_float(self._magnitude, converted.magnitude)

    @staticmethod
    def _check_comparable(a: "UnitValue", b: "UnitValue") -> None:
        if not a.unit.is_same_dimension(b.unit):
            raise DimensionMismatchError(
                f"{a} can not be compared to {b} because they are not the same dimension.",
                a,
                b,
                a.unit.dimension_difference(b.unit).reduce(),
            )

    @staticmethod
    def max(a: "UnitValue", b: "UnitValue") -> "UnitValue":
        UnitValue._check_comparable(a, b)
        return a if a.compare_to(b) >= 0 else b

    @staticmethod
    def min(a: "UnitValue", b: "UnitValue") -> "UnitValue":
        UnitValue._check_comparable(a, b)
        return a if a.compare_to(b) <= 0 else b

    # --- Python protocol ---
    def _coerce(self, other: object) -> "UnitValue | None":
        if isinstance(other, UnitValue):
            return other
        if isinstance(other, CompoundUnit):
            return UnitValue(1.0, other)
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.compare_to(other) == 0

    # Equality is tolerant, so there is no hash consistent with it.
    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: "UnitValue") -> bool:
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: "UnitValue") -> bool:
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: "UnitValue") -> bool:
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: "UnitValue") -> bool:
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.compare_to(other) >= 0

    def __add__(self, other: "UnitValue | Number") -> "UnitValue":
        if isinstance(other, (int, float)) and self._unit.is_dimensionless:
            return self.add(UnitValue(other, CompoundUnit.none()))
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: Number) -> "UnitValue":
        if isinstance(other, (int, float)) and self._unit.is_dimensionless:
            return UnitValue(other, CompoundUnit.none()).add(self)
        return NotImplemented

    def __sub__(self, other: "UnitValue | Number") -> "UnitValue":
        if isinstance(other, (int, float)) and self._unit.is_dimensionless:
            return self.sub(UnitValue(other, CompoundUnit.none()))
        if not isinstance(other, UnitValue):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other: Number) -> "UnitValue":
        if isinstance(other, (int, float)) and self._unit.is_dimensionless:
            return UnitValue(other, CompoundUnit.none()).sub(self)
        return NotImplemented

    def __mul__(self, other: "UnitValue | CompoundUnit | Number") -> "UnitValue":
        if isinstance(other, (int, float)):
            return UnitValue(self._magnitude * other, self._unit)
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.mul(coerced)

    def __rmul__(self, other: "CompoundUnit | Number") -> "UnitValue":
        # allows 3 * (2 m) -> 6 m
        if isinstance(other, (int, float)):
            return UnitValue(self._magnitude * other, self._unit)
        if isinstance(other, CompoundUnit):
            return UnitValue(1.0, other).mul(self)
        return NotImplemented

    def __truediv__(self, other: "UnitValue | CompoundUnit | Number") -> "UnitValue":
        if isinstance(other, (int, float)):
            return UnitValue(self._magnitude / other, self._unit)
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.div(coerced)

    def __rtruediv__(self, other: Number) -> "UnitValue":
        # number / zero magnitude raises ZeroDivisionError, like inverse()
        if isinstance(other, (int, float)):
            return UnitValue(other / self._magnitude, self._unit.inverse())
        return NotImplemented

    def __pow__(self, p: Number) -> "UnitValue":
        if not isinstance(p, (int, float)):
            return NotImplemented
        return self.pow(p)

    def __neg__(self) -> "UnitValue":
        return self.negate()

    def __pos__(self) -> "UnitValue":
        return self

    def __abs__(self) -> "UnitValue":
        return UnitValue(abs(self._magnitude), self._unit)

    # --- Display ---
    def _format_magnitude(self) -> str:
        v = self._magnitude
        a = abs(v)
        if a >= 10000:
            return f"{v:g}"
        if a >= 100:
            return f"{v:.0f}"
        if a >= 10:
            return f"{v:.1f}"
        if a >= 1:
            return f"{v:.2f}"
        return f"{v:#.2g}"

    def __str__(self) -> str:
        unit = str(self._unit)
        text = self._format_magnitude()
        return f"{text} {unit}" if unit else text

    def __repr__(self) -> str:
        return f"UnitValue({self._magnitude!r}, {str(self._unit)!r})"

    def __format__(self, spec: str) -> str:
        """
        Custom string formatting.

        Supported specifiers
        --------------------
        "" (empty)
            Same as ``str()``.
        "auto"
            Convert to the best display unit first.
        any float format spec (".3f", "e", ...)
            Applied to the magnitude, followed by the unit.
        """
        spec = (spec or "").strip()
        if spec == "":
            return str(self)
        if spec == "auto":
            return str(self.convert_auto())
        unit = str(self._unit)
        text = format(self._magnitude, spec)
        return f"{text} {unit}" if unit else text


__all__ = ["UnitValue"]
