import math

import pytest

from unitalgebra import BoundedValue, DimensionMismatchError, UnitValue


@pytest.fixture()
def tank(ns):
    # 80 L in a tank that may hold 0-100 L, expandable to 150 L
    return BoundedValue(80, ns.L, low=0, high=100, minimum=0, maximum=150)


def test_initial_state(tank, ns):
    assert tank.value == UnitValue(80, ns.L)
    assert tank.unit is ns.L
    assert tank.low == UnitValue(0, ns.L)
    assert tank.high == UnitValue(100, ns.L)
    assert str(tank) == "80.0 L"


def test_defaults_are_unbounded(ns):
    free = BoundedValue(5, ns.kg)
    assert free.minimum.magnitude == -math.inf
    assert free.maximum.magnitude == math.inf
    assert free.low == free.minimum
    free.add(UnitValue(1e9, ns.kg))
    assert free.value.magnitude == pytest.approx(1e9 + 5)


def test_add_within_limits(tank, ns):
    applied = tank.add(UnitValue(10, ns.L))
    assert applied == UnitValue(10, ns.L)
    assert tank.value == UnitValue(90, ns.L)


def test_add_clamps_at_high(tank, ns):
    applied = tank.add(UnitValue(50, ns.L))
    assert applied == UnitValue(20, ns.L)
    assert tank.value == UnitValue(100, ns.L)


@pytest.mark.regression(reason="Clamping at the lower limit reports the distance to the lower limit")
def test_sub_clamps_at_low(tank, ns):
    applied = tank.sub(UnitValue(100, ns.L))
    assert applied == UnitValue(-80, ns.L)
    assert tank.value == UnitValue(0, ns.L)


def test_add_converts_units(tank, ns):
    applied = tank.add(UnitValue(500, ns.ml))
    assert applied.unit is ns.L
    assert applied.magnitude == pytest.approx(0.5)
    assert tank.value.magnitude == pytest.approx(80.5)


def test_add_mismatch(tank, ns):
    with pytest.raises(DimensionMismatchError):
        tank.add(UnitValue(1, ns.kg))


def test_set(tank, ns):
    applied = tank.set(UnitValue(25, ns.L))
    assert applied == UnitValue(-55, ns.L)
    assert tank.value == UnitValue(25, ns.L)
    tank.set(UnitValue(1, ns.m ** 3))
    assert tank.value == UnitValue(100, ns.L)


def test_add_high_stops_at_maximum(tank, ns):
    applied = tank.add_high(UnitValue(80, ns.L))
    assert applied == UnitValue(50, ns.L)
    assert tank.high == UnitValue(150, ns.L)
    tank.add(UnitValue(100, ns.L))
    assert tank.value == UnitValue(150, ns.L)


def test_add_high_stops_at_low(tank, ns):
    tank.set_low(UnitValue(20, ns.L))
    tank.add_high(UnitValue(-200, ns.L))
    assert tank.high == UnitValue(20, ns.L)
    # the current value follows the lowered limit
    assert tank.value == UnitValue(20, ns.L)


def test_add_low(tank, ns):
    assert tank.add_low(UnitValue(30, ns.L)) == UnitValue(30, ns.L)
    assert tank.low == UnitValue(30, ns.L)
    assert tank.add_low(UnitValue(-100, ns.L)) == UnitValue(-30, ns.L)
    assert tank.low == UnitValue(0, ns.L)
    tank.add_low(UnitValue(500, ns.L))
    assert tank.low == UnitValue(100, ns.L)
    assert tank.value == UnitValue(100, ns.L)


def test_set_limits(tank, ns):
    tank.set_high(UnitValue(0.05, ns.m ** 3))
    assert tank.high == UnitValue(50, ns.L)
    assert tank.value == UnitValue(50, ns.L)
    tank.set_low(UnitValue(10, ns.L))
    assert tank.low == UnitValue(10, ns.L)
    with pytest.raises(ValueError):
        tank.set_high(UnitValue(200, ns.L))
    with pytest.raises(ValueError):
        tank.set_low(UnitValue(60, ns.L))


def test_value_is_a_snapshot(tank, ns):
    before = tank.value
    tank.add(UnitValue(5, ns.L))
    assert before == UnitValue(80, ns.L)


@pytest.mark.parametrize("kwargs", [
    dict(value=5, low=10, high=20),
    dict(value=5, low=0, high=4),
    dict(value=5, low=8, high=2),
    dict(value=5, low=0, high=10, maximum=9),
])
def test_invalid_construction(ns, kwargs):
    with pytest.raises(ValueError):
        BoundedValue(unit=ns.L, **kwargs)


def test_repr(tank):
    assert repr(tank) == "BoundedValue(80.0, 'L', low=0.0, high=100.0)"


def test_unbounded_limits_do_not_move(ns):
    free = BoundedValue(5, ns.kg, low=0)
    applied = free.add_high(UnitValue(1, ns.kg))
    assert applied == UnitValue(0, ns.kg)
    assert free.high.magnitude == math.inf
    assert free.add_low(UnitValue(1, ns.kg)) == UnitValue(1, ns.kg)

    open_below = BoundedValue(5, ns.kg, high=10)
    applied = open_below.add_low(UnitValue(-3, ns.kg))
    assert not math.isnan(applied.magnitude)
    assert applied == UnitValue(0, ns.kg)
    assert open_below.low.magnitude == -math.inf
    assert open_below.value == UnitValue(5, ns.kg)
