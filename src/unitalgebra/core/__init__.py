"""Core value types: dimensions, base units, compound units and unit values."""

from unitalgebra.core.base_unit import BaseUnit
from unitalgebra.core.dimensions import Base, Dimension
from unitalgebra.core.errors import DimensionMismatchError
from unitalgebra.core.quantity import UnitValue
from unitalgebra.core.unit import CompoundUnit, Unit

__all__ = [
    "Base",
    "Dimension",
    "BaseUnit",
    "CompoundUnit",
    "Unit",
    "UnitValue",
    "DimensionMismatchError",
]
