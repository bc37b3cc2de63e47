import math

import pytest

from unitalgebra.core.base_unit import BaseUnit
from unitalgebra.core.dimensions import DIM_0, DISTANCE, MASS, TIME, Base
from unitalgebra.core.errors import DimensionMismatchError


@pytest.fixture()
def m():
    return BaseUnit(1.0, "m", "meter", DISTANCE)


@pytest.fixture()
def cc():
    # one cc is a distance of length 0.01 cubed, printed without the cube
    return BaseUnit(0.01 ** 3, "cc", "cubic centimeter", DISTANCE.with_power(3), def_power=3)


# -------------------------------
# Construction
# -------------------------------

@pytest.mark.parametrize("length", [0, -1.0, math.inf, math.nan])
def test_rejects_bad_length(length):
    with pytest.raises(ValueError):
        BaseUnit(length, "x", "x", DISTANCE)


@pytest.mark.parametrize("def_power", [0, math.inf])
def test_rejects_bad_def_power(def_power):
    with pytest.raises(ValueError):
        BaseUnit(1.0, "x", "x", DISTANCE, def_power=def_power)


def test_rejects_non_dimension():
    with pytest.raises(TypeError):
        BaseUnit(1.0, "x", "x", (Base.DISTANCE, 1.0))


def test_is_frozen(m):
    with pytest.raises(AttributeError):
        m.length = 2.0


# -------------------------------
# Lengths
# -------------------------------

def test_effective_length_follows_power(m):
    km = BaseUnit(1000.0, "km", "kilometer", DISTANCE)
    assert km.effective_length == 1000.0
    assert math.isclose(km.pow(2).effective_length, 1e6)
    assert math.isclose(km.inverse().effective_length, 1e-3)
    assert m.pow(3).effective_length == 1.0


def test_effective_length_with_definition_power(cc):
    assert math.isclose(cc.effective_length, 1e-6)
    assert math.isclose(cc.pow(2).effective_length, 1e-12)


def test_dimensionless_effective_length_is_one():
    bu = BaseUnit(5.0, "x", "x", DIM_0)
    assert bu.power == 0
    assert bu.effective_length == 1.0


# -------------------------------
# Algebra
# -------------------------------

@pytest.mark.regression(reason="A zeroth power keeps the unit at power 1 instead of erasing it")
def test_pow_zero_becomes_power_one(m):
    assert m.pow(0).power == 1.0
    assert m.pow(2).pow(0).power == 1.0


def test_pow_multiplies_power(m):
    assert m.pow(2).power == 2.0
    assert m.pow(2).pow(-0.5).power == -1.0


def test_at_power_replaces_power(m):
    assert m.at_power(3).power == 3.0
    assert m.at_power(3).base is Base.DISTANCE


def test_same_unit(m, cc):
    mm = BaseUnit(0.001, "mm", "millimeter", DISTANCE)
    liter = BaseUnit(0.001, "L", "liter", DISTANCE.with_power(3), def_power=3)
    assert m.same_unit(m.pow(2))
    assert not m.same_unit(mm)
    assert not m.same_unit(BaseUnit(1.0, "s", "second", TIME))
    # same raw length, different definition power
    assert not liter.same_unit(mm)
    assert cc.same_unit(cc.inverse())


def test_mul_and_div_sum_powers(m):
    assert m.mul(m).power == 2.0
    assert m.pow(3).div(m).power == 2.0
    assert m.mul(m.inverse()).power == 0.0


def test_mul_keeps_left_names(m):
    metre = BaseUnit(1.0, "metre", "metre", DISTANCE)
    product = m.mul(metre)
    assert product.symbol == "m"
    assert product.name == "meter"


def test_mul_requires_same_unit(m):
    g = BaseUnit(1.0, "g", "gram", MASS)
    with pytest.raises(DimensionMismatchError, match="multiplication error"):
        m.mul(g)
    with pytest.raises(TypeError, match="division error"):
        m.div(g)


def test_inverse(m):
    assert m.inverse().power == -1.0
    assert m.inverse().inverse() == m


# -------------------------------
# Equality
# -------------------------------

def test_equality_ignores_names(m):
    other = BaseUnit(1.0, "metre", "metre", DISTANCE)
    assert m == other
    assert hash(m) == hash(other)


def test_equality_checks_defining_fields(m):
    assert m != m.pow(2)
    assert m != BaseUnit(1.0, "m", "meter", DISTANCE, offset=1.0)
    assert m != BaseUnit(1.0, "m", "meter", DISTANCE, def_power=2)


# -------------------------------
# Names
# -------------------------------

def test_short_names(m, cc):
    assert m.short_name() == "m"
    assert m.pow(2).short_name() == "m^2"
    assert m.inverse().short_name() == "m^-1"
    assert m.inverse().short_name(inverted=True) == "m"
    assert m.at_power(0.5).short_name() == "m^(1/2)"
    assert cc.short_name() == "cc"
    assert cc.pow(2).short_name() == "cc^2"
    assert str(cc) == "cc"


def test_long_names(m, cc):
    assert m.long_name() == "meter"
    assert m.pow(2).long_name() == "square meter"
    assert m.pow(3).long_name() == "cubic meter"
    assert m.pow(-2).long_name(inverted=True) == "square meter"
    assert cc.long_name() == "cubic centimeter"


def test_debug_string(cc):
    text = cc.debug_string()
    assert "NAME: cc" in text
    assert "POW: 3" in text
    assert "DEF: 3" in text
