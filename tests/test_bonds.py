import dataclasses

import numpy as np
import pytest

from bond_calculator.bonds import (
    BondInputs,
    bond_price,
    bond_price_derivative,
    period_count,
    is_fractional_period_count,
)


@pytest.fixture(scope="module")
def discount_bond():
    return BondInputs(
        face_value=1000.0,
        annual_coupon_rate=0.05,
        market_price=950.0,
        years_to_maturity=10,
        coupon_frequency=1,
    )


def test_par_bond_prices_at_face():
    px = bond_price(0.025, 25.0, 1000.0, 20)
    assert abs(px - 1000.0) < 1e-8, "Coupon rate == discount rate must price at par"


def test_zero_rate_is_undiscounted_sum():
    assert bond_price(0.0, 50.0, 1000.0, 10) == pytest.approx(1500.0)


def test_matches_closed_form_annuity():
    r, c, face, n = 0.06, 40.0, 1000.0, 15
    closed = c * (1 - (1 + r) ** -n) / r + face / (1 + r) ** n
    assert bond_price(r, c, face, n) == pytest.approx(closed, rel=1e-12)


def test_price_decreases_as_rate_rises():
    prices = [bond_price(r, 50.0, 1000.0, 10) for r in (-0.02, 0.0, 0.03, 0.08, 0.2)]
    assert all(a > b for a, b in zip(prices, prices[1:])), "Price must be strictly decreasing in rate"


def test_derivative_matches_finite_difference():
    r, h = 0.037, 1e-6
    fd = (bond_price(r + h, 25.0, 1000.0, 20) - bond_price(r - h, 25.0, 1000.0, 20)) / (2 * h)
    analytic = bond_price_derivative(r, 25.0, 1000.0, 20)
    assert analytic < 0.0
    assert analytic == pytest.approx(fd, rel=1e-6)


def test_rate_at_or_below_minus_one_raises():
    with pytest.raises(ValueError):
        bond_price(-1.0, 50.0, 1000.0, 10)
    with pytest.raises(ValueError):
        bond_price_derivative(-1.5, 50.0, 1000.0, 10)


def test_overflow_near_minus_one_is_infinite_not_error():
    """
    Long bonds priced at the bottom of the bisection bracket overflow float64.
    The result must be +inf (usable for bracketing), never NaN.
    """
    assert np.isposinf(bond_price(-0.9999, 25.0, 1000.0, 200))
    assert np.isposinf(bond_price(-0.9999, 0.0, 1000.0, 200)), "Zero-coupon must not produce NaN"


def test_non_positive_periods_raise():
    with pytest.raises(ValueError):
        bond_price(0.05, 50.0, 1000.0, 0)


def test_input_derived_quantities(discount_bond):
    assert discount_bond.annual_coupon == pytest.approx(50.0)
    assert discount_bond.periodic_coupon == pytest.approx(50.0)
    assert discount_bond.periods == 10
    assert discount_bond.months_per_period == 12

    semi = dataclasses.replace(discount_bond, coupon_frequency=2)
    assert semi.periodic_coupon == pytest.approx(25.0)
    assert semi.periods == 20
    assert semi.months_per_period == 6


def test_inputs_are_immutable(discount_bond):
    with pytest.raises(dataclasses.FrozenInstanceError):
        discount_bond.market_price = 1000.0


@pytest.mark.parametrize(
    "years, freq, expected",
    [
        (10, 2, 20),
        (2.3, 1, 2),
        (2.5, 1, 3),
        (0.1, 1, 1),
        (0.25, 2, 1),
        (100, 2, 200),
    ],
)
def test_period_count_rounding(years, freq, expected):
    assert period_count(years, freq) == expected


def test_fractional_period_detection():
    assert not is_fractional_period_count(10, 2)
    assert not is_fractional_period_count(1.5, 2)
    assert is_fractional_period_count(2.3, 1)


def test_from_dict_accepts_wire_names():
    inputs = BondInputs.from_dict(
        {"faceValue": 1000, "annualCouponRate": 0.05, "marketPrice": 950, "yearsToMaturity": 10, "couponFrequency": 2}
    )
    assert inputs.face_value == 1000.0
    assert isinstance(inputs.coupon_frequency, int) and inputs.coupon_frequency == 2
    assert inputs.to_dict()["marketPrice"] == 950.0
