"""
unitalgebra: arithmetic on physical quantities whose units follow along.

Values carry a compound unit; adding, multiplying, dividing and raising them
to powers keeps magnitudes and units consistent, conversions between units
of the same dimension are exact up to floating point, and mixing dimensions
raises `DimensionMismatchError`.

The default units registry is imported lazily, on first access to ``u``.
"""

import logging
from importlib import metadata as _metadata
from pathlib import Path as _Path
from typing import TYPE_CHECKING, Any

__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("unitalgebra")
except _metadata.PackageNotFoundError:
    import tomllib
    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Library logging stays silent unless the application configures it.
logging.getLogger(__name__).addHandler(logging.NullHandler())

from unitalgebra.bounded import BoundedValue
from unitalgebra.core.base_unit import BaseUnit
from unitalgebra.core.dimensions import Base, Dimension
from unitalgebra.core.errors import DimensionMismatchError
from unitalgebra.core.quantity import UnitValue
from unitalgebra.core.unit import CompoundUnit, Unit

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from unitalgebra.units.registry import UnitsRegistry

__all__ = [
    "__version__",
    "__license__",
    "Base",
    "Dimension",
    "BaseUnit",
    "CompoundUnit",
    "Unit",
    "UnitValue",
    "DimensionMismatchError",
    "BoundedValue",
    "UnitsRegistry",
]

# Lazy access helpers -------------------------------------------------------

def _get_default_registry() -> "UnitsRegistry":
    from unitalgebra.units.registry import DEFAULT_REGISTRY
    return DEFAULT_REGISTRY

def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. ``u`` is a namespace over the default registry;
    ``UnitsRegistry`` is imported on first use.
    """
    if name == "u":
        return _get_default_registry().as_namespace()
    if name == "UnitsRegistry":
        from unitalgebra.units.registry import UnitsRegistry
        return UnitsRegistry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + ["u", "UnitsRegistry"])
