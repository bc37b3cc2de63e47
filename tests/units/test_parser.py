import pytest

from unitalgebra import CompoundUnit
from unitalgebra.core.dimensions import DISTANCE, TIME
from unitalgebra.units.parser import _compile_unit_expr, extract_unit_expr
from unitalgebra.units.registry import UnitsRegistry


@pytest.mark.parametrize("expr, expected", [
    ("m", "m"),
    ("m^2", "m^2"),
    ("m**2", "m^2"),
    ("m ^ 2", "m^2"),
    ("m^-1", "m^-1"),
    ("m^(1/2)", "m^(1/2)"),
    ("km/h", "km/h"),
    ("kg*m/s**2", "(kg*m)/s^2"),
    ("(kg*m)/s^2", "(kg*m)/s^2"),
    ("kg*(m/s^2)", "(kg*m)/s^2"),
])
def test_parse_names(reg, expr, expected):
    assert str(extract_unit_expr(expr, reg)) == expected


def test_parse_decimal_exponent(reg):
    assert extract_unit_expr("m^1.5", reg) == reg.get("m") ** 1.5
    assert extract_unit_expr("s^+2", reg) == reg.get("s") ** 2


def test_parse_matches_operators(reg):
    m, kg, s = reg.get("m"), reg.get("kg"), reg.get("s")
    assert extract_unit_expr("kg*m/s^2", reg) == kg * m / s ** 2
    assert extract_unit_expr("m/s/s", reg) == m / s / s
    assert extract_unit_expr("m/(s*s)", reg) == m / (s * s)


def test_parse_special_names(reg):
    assert extract_unit_expr("°C/s", reg).is_same_dimension(reg.get("K") / reg.get("s"))
    assert extract_unit_expr("%*kg", reg).is_same_dimension(reg.get("kg"))


@pytest.mark.parametrize("expr", [
    "",
    "m^",
    "m/",
    "(m",
    "m)",
    "m^(1/0)",
    "m^x",
    "2*m",
    "m$",
    "m,s",
    "m^1.",
])
def test_syntax_errors(reg, expr):
    with pytest.raises(ValueError):
        extract_unit_expr(expr, reg)


def test_unknown_name(reg):
    with pytest.raises(ValueError, match="Unknown unit 'furlong'"):
        extract_unit_expr("m/furlong", reg)


def test_plans_are_cached_but_bound_per_registry(reg):
    other = UnitsRegistry()
    other.register(CompoundUnit.base(1, "m", "meter", DISTANCE))
    other.register(CompoundUnit.base(60, "s", "slow second", TIME))

    _compile_unit_expr.cache_clear()
    fast = extract_unit_expr("m/s", reg)
    slow = extract_unit_expr("m/s", other)

    assert _compile_unit_expr.cache_info().hits >= 1
    assert fast.length == pytest.approx(1)
    assert slow.length == pytest.approx(1 / 60)
