"""
unitalgebra.units.registry
==========================

A structured, extensible and testable catalog of named units.

- Encapsulates the catalog in a `UnitsRegistry` object (thread-safe) instead
  of process-wide global lists.
- Lookup by short symbol, long name or alias ("m", "meter", "metre").
- Compound expressions ("km/h", "kg*m/s**2") are parsed on lookup.
- An ordered *display catalog* feeds `CompoundUnit.best_fit_unit`.
- Multiple registries can coexist, which keeps tests isolated.

The shared `DEFAULT_REGISTRY` is built once, when this module is imported.
"""
from __future__ import annotations

import logging
import math
import threading
import unicodedata
from typing import ClassVar, Dict, Iterable, List, Mapping, Optional

from unitalgebra.core.dimensions import DISTANCE, MASS, ROTATION, TEMPERATURE, TIME
from unitalgebra.core.unit import CompoundUnit
from unitalgebra.units.parser import extract_unit_expr

logger = logging.getLogger(__name__)

_EXPRESSION_CHARS = ("*", "/", "^", "(")


def normalize_symbol(s: str) -> str:
    """Normalize user-provided unit symbols (NFC, surrounding whitespace stripped)."""
    if not s:
        return s
    return unicodedata.normalize("NFC", s.strip())


# ---------------------------------------------------------------------------
# Units registry
# ---------------------------------------------------------------------------
class UnitsRegistry:
    """Thread-safe registry of named `CompoundUnit` objects.

    Writes are serialized behind a lock; reads return snapshots, so the
    registry can be filled once at startup and shared afterwards.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._units: Dict[str, CompoundUnit] = {}
        self._aliases: Dict[str, str] = {}
        self._display: List[CompoundUnit] = []

    def __contains__(self, symbol: str) -> bool:
        return self.has(symbol)

    def __len__(self) -> int:
        with self._lock:
            return len(self._units)

    # -------------------------- public API ---------------------------------
    def register(
        self,
        unit: CompoundUnit,
        *,
        key: Optional[str] = None,
        aliases: Iterable[str] = (),
        display: bool = False,
        replace: bool = False,
    ) -> CompoundUnit:
        """Register a named unit under ``key`` (default: its symbol).

        The long name and any ``aliases`` are registered as aliases of the
        key. With ``display=True`` the unit is also appended to the display
        catalog. Returns ``unit`` so definitions can be chained.
        """
        name = normalize_symbol(key if key is not None else unit.symbol)
        if not name:
            raise ValueError("Cannot register a unit without a symbol")

        with self._lock:
            if name in getattr(UnitNamespace, "_reserved_names", ()):
                raise ValueError(
                    f"Cannot register unit '{name}': "
                    "name conflicts with UnitNamespace attribute/method."
                )
            if not replace:
                if name in self._units:
                    raise ValueError(
                        f"Cannot register unit '{name}': "
                        "a unit with this name already exists."
                    )
                if name in self._aliases:
                    raise ValueError(
                        f"Cannot register unit '{name}': "
                        "an alias with this name already exists."
                    )

            self._units[name] = unit
            logger.debug("Registered unit %r (length %r)", name, unit.length)

            long_name = normalize_symbol(unit.name)
            if long_name and long_name != name and long_name not in self._units:
                self._aliases.setdefault(long_name, name)
            for alias in aliases:
                self.register_alias(alias, name, replace=replace)
            if display:
                self._display.append(unit)
        return unit

    def register_alias(self, alias: str, canonical: str, replace: bool = False) -> None:
        key = normalize_symbol(alias)
        with self._lock:
            if key in getattr(UnitNamespace, "_reserved_names", ()):
                raise ValueError(
                    f"Cannot register alias '{alias}': "
                    "name conflicts with UnitNamespace attribute/method."
                )
            if canonical not in self._units:
                raise ValueError(f"Cannot alias '{alias}' to unknown unit '{canonical}'")
            if not replace:
                if key in self._units and key != canonical:
                    raise ValueError(
                        f"Cannot register alias '{alias}': "
                        f"a unit with the name '{key}' already exists."
                    )
                existing = self._aliases.get(key)
                if existing is not None and existing != canonical:
                    raise ValueError(
                        f"Cannot register alias '{alias}': "
                        f"it already refers to '{existing}'."
                    )
            self._aliases[key] = canonical

    def register_display(self, *units: CompoundUnit) -> None:
        """Append (possibly unnamed) units to the display catalog, in order."""
        with self._lock:
            self._display.extend(units)

    def has(self, symbol: str) -> bool:
        try:
            self.get(symbol)
            return True
        except ValueError:
            return False

    def get(self, symbol: str) -> CompoundUnit:
        """Lookup a unit by symbol, long name or alias.

        Symbols that are not registered but look like expressions
        ("km/h", "m^2") are parsed against this registry.
        Raises `ValueError` if unknown.
        """
        sym = normalize_symbol(symbol)
        with self._lock:
            target = self._aliases.get(sym, sym)
            unit = self._units.get(target)
        if unit is not None:
            return unit

        if any(op in sym for op in _EXPRESSION_CHARS):
            return extract_unit_expr(sym, self)
        raise ValueError(f"Unknown unit symbol: {symbol}")

    def all(self) -> Mapping[str, CompoundUnit]:
        with self._lock:
            return dict(self._units)

    def display_units(self) -> tuple[CompoundUnit, ...]:
        """The display catalog, in registration order."""
        with self._lock:
            return tuple(self._display)

    def recognize(self, unit: CompoundUnit) -> Optional[CompoundUnit]:
        """Return the first registered unit equal to ``unit`` (same dimension and length)."""
        for candidate in self.all().values():
            if candidate == unit:
                return candidate
        return None

    def as_namespace(self) -> UnitNamespace:
        return UnitNamespace(self)


class UnitNamespace:
    """Attribute-style access to a registry: ``u.m``, ``u("km/h")``."""

    _reserved_names: ClassVar[set[str]] = set()

    def __init__(self, reg: "UnitsRegistry") -> None:
        self._reg = reg

    def __contains__(self, spec: str) -> bool:
        return self._reg.has(spec)

    def define(
        self,
        symbol: str,
        factor: "float|int",
        reference: CompoundUnit,
        name: str = "",
        replace: bool = False,
    ) -> CompoundUnit:
        """Define and register ``symbol`` as ``factor`` times ``reference``."""
        unit = CompoundUnit.derive(reference, float(factor), symbol, name or symbol)
        return self._reg.register(unit, replace=replace)

    def __call__(self, spec: str) -> CompoundUnit:
        return self._reg.get(spec)

    def __getattr__(self, name: str) -> CompoundUnit:
        try:
            return self._reg.get(name)
        except ValueError as e:
            # Unknown symbol should look like a missing attribute
            raise AttributeError(name) from e

    def __dir__(self) -> list[str]:
        """List all available unit symbols for autocomplete."""
        base_dir = set(super().__dir__())
        units = set(self._reg.all().keys())
        with self._reg._lock:
            aliases = set(self._reg._aliases.keys())
        return sorted(base_dir | units | aliases)


UnitNamespace._reserved_names = set(dir(UnitNamespace))


# ---------------------------------------------------------------------------
# Bootstrap a default registry
# ---------------------------------------------------------------------------

def _bootstrap_default_registry() -> UnitsRegistry:
    reg = UnitsRegistry()
    derive = CompoundUnit.derive

    reg.register(CompoundUnit.none())
    reg.register(derive(CompoundUnit.none(), 0.01, "%", "percent"), aliases=("pct",))

    # Distance
    m = reg.register(CompoundUnit.base(1, "m", "meter", DISTANCE), aliases=("metre",))
    mm = reg.register(derive(m, 1.0 / 1000, "mm", "millimeter"))
    cm = reg.register(derive(m, 1.0 / 100, "cm", "centimeter"))
    dm = reg.register(derive(m, 1.0 / 10, "dm", "decimeter"))
    reg.register(derive(m, 1000, "km", "kilometer"))
    inch = reg.register(derive(m, 1 / 39.3701, "in", "inch"))
    foot = reg.register(derive(inch, 12, "ft", "foot"), aliases=("feet",))
    yard = reg.register(derive(foot, 3, "yd", "yard"))
    reg.register(derive(yard, 1760, "mi", "mile"))
    reg.register(derive(m, 9460730472580800.0, "ly", "lightyear"))

    # Area
    reg.register(derive(cm ** 2, 1, "sc", "square centimeter"), aliases=("sqcm",))

    # Volume
    liter = reg.register(derive(dm ** 3, 1, "L", "liter"), aliases=("l", "litre"))
    ml = reg.register(derive(liter, 0.001, "ml", "milliliter"), aliases=("mL",))
    tspn = reg.register(derive(ml, 4.92892159375, "tspn", "teaspoon"))
    tbsp = reg.register(derive(tspn, 3, "tbsp", "tablespoon"))
    floz = reg.register(derive(tbsp, 2, "fl oz", "fluid ounce"), aliases=("floz",))
    cup = reg.register(derive(floz, 8, "cup", "cup"))
    pint = reg.register(derive(cup, 2, "pt", "pint"))
    gallon = reg.register(derive(pint, 8, "gal", "gallon"))
    reg.register(derive(gallon, 31.5, "barrel", "barrel"))
    cc = reg.register(derive(cm ** 3, 1, "cc", "cubic centimeter"))

    # Mass
    g = reg.register(CompoundUnit.base(1, "g", "gram", MASS))
    kg = reg.register(derive(g, 1000, "kg", "kilogram"))
    tonne = reg.register(derive(kg, 1000, "tonne", "metric ton"), aliases=("t",))
    ounce = reg.register(derive(g, 28.349523125, "oz", "ounce"))
    pound = reg.register(derive(ounce, 16, "lb", "pound"))
    reg.register(derive(pound, 2240, "ton", "long ton"), key="ton_uk")
    reg.register(derive(pound, 2000, "ton", "short ton"), key="ton_us")

    # Time
    s = reg.register(CompoundUnit.base(1, "s", "second", TIME), aliases=("sec",))
    ms = reg.register(derive(s, 0.001, "ms", "millisecond"))
    minute = reg.register(derive(s, 60, "min", "minute"))
    hour = reg.register(derive(minute, 60, "h", "hour"), aliases=("hr",))
    day = reg.register(derive(hour, 24, "day", "day"), aliases=("d",))
    week = reg.register(derive(day, 7, "week", "week"), aliases=("wk",))
    year = reg.register(derive(day, 365.25, "year", "year"), aliases=("yr",))
    month = reg.register(derive(year, 1.0 / 12, "month", "month"), aliases=("mo",))

    # Rotation
    rad = reg.register(CompoundUnit.base(1, "rad", "radian", ROTATION))
    reg.register(derive(rad, math.pi / 180, "deg", "degree"), aliases=("°",))

    # Temperature; offsets are the unit's reading at absolute zero, negated.
    kelvin = reg.register(CompoundUnit.base(1, "K", "kelvin", TEMPERATURE))
    celsius = reg.register(derive(kelvin, 1, "°C", "celsius", offset=273.15), aliases=("degC",))
    reg.register(derive(celsius, 5.0 / 9.0, "°F", "fahrenheit", offset=459.67), aliases=("degF",))

    # Force
    reg.register(derive(kg * m / (s * s), 1, "N", "newton"))

    # Display catalog used when picking the nicest unit for a value.
    reg.register_display(
        mm, cm, m,
        mm ** 2, cm ** 2, dm ** 2, m ** 2,
        ml, cc, liter, m ** 3,
        ms, s, minute, hour, day, week, month, year,
        g, kg, tonne,
        liter / s, liter / hour, liter / day,
        ml / s, ml / hour, ml / day,
    )

    logger.debug(
        "Bootstrapped default registry: %d units, %d display units",
        len(reg), len(reg.display_units()),
    )
    return reg


# Public, shared default registry
DEFAULT_REGISTRY: UnitsRegistry = _bootstrap_default_registry()


__all__ = [
    "UnitsRegistry",
    "UnitNamespace",
    "DEFAULT_REGISTRY",
    "normalize_symbol",
]
