# unitalgebra.core.dimensions

from __future__ import annotations

from enum import Enum
from typing import Any


class Base(Enum):
    """The orthogonal physical categories a unit can belong to."""

    NONE = 0
    DISTANCE = 1
    TIME = 2
    MASS = 3
    ROTATION = 4
    TEMPERATURE = 5


# --- Core object -------------------------------------------------------------

class Dimension(tuple):
    """
    Immutable ``(base, power)`` pair describing what kind of quantity a base
    unit measures.

    ``DISTANCE`` at power 2 is an area, but keeping it as a power of distance
    is what lets ``area / distance`` come out as a distance again.

    Tuple subclass => hashable, comparable and usable as a dict key. The
    constructor normalises: a zero power or the ``NONE`` base both collapse
    to ``(Base.NONE, 0.0)``.
    """

    __slots__ = ()

    def __new__(cls, base: Base = Base.NONE, power: float = 1.0) -> "Dimension":
        if not isinstance(base, Base):
            raise TypeError(f"base must be a Base, got {type(base).__name__}")
        power = float(power)
        if power == 0 or base is Base.NONE:
            return tuple.__new__(cls, (Base.NONE, 0.0))
        return tuple.__new__(cls, (base, power))

    def __getnewargs__(self) -> tuple[Base, float]:
        return (self.base, self.power)

    @property
    def base(self) -> Base:
        return self[0]

    @property
    def power(self) -> float:
        return self[1]

    @property
    def is_dimensionless(self) -> bool:
        return self.base is Base.NONE

    def with_power(self, power: float) -> "Dimension":
        return Dimension(self.base, power)

    def scaled(self, factor: float) -> "Dimension":
        """Multiply the power by ``factor``."""
        return Dimension(self.base, self.power * factor)

    # Block tuple concatenation/repetition; these are not vector operations.
    def __add__(self, other: Any) -> "Dimension":
        return NotImplemented

    def __radd__(self, other: Any) -> "Dimension":
        return NotImplemented

    def __mul__(self, other: Any) -> "Dimension":  # type: ignore[override]
        return NotImplemented

    def __rmul__(self, other: Any) -> "Dimension":  # type: ignore[override]
        return NotImplemented

    def __repr__(self) -> str:
        if self.is_dimensionless:
            return "[]"
        from unitalgebra.core.utils import format_power

        return f"[{self.base.name}^{format_power(self.power)}]"


# --- Public constants --------------------------------------------------------

DIM_0: Dimension = Dimension(Base.NONE, 0)
DISTANCE: Dimension = Dimension(Base.DISTANCE)
TIME: Dimension = Dimension(Base.TIME)
MASS: Dimension = Dimension(Base.MASS)
ROTATION: Dimension = Dimension(Base.ROTATION)
TEMPERATURE: Dimension = Dimension(Base.TEMPERATURE)


__all__ = [
    "Base",
    "Dimension",
    "DIM_0",
    "DISTANCE",
    "TIME",
    "MASS",
    "ROTATION",
    "TEMPERATURE",
]
