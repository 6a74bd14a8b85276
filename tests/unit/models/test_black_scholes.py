import math

import pytest
from scipy.stats import norm

from amm_quoter.fixed_point import PRECISE_UNIT, UNIT, from_fixed, to_fixed
from amm_quoter.models import SECONDS_PER_YEAR, prices_delta_vega, std_normal_cdf


def _precise(x: float) -> int:
    return to_fixed(x, PRECISE_UNIT)


def _float(value: int, unit: int = UNIT) -> float:
    return float(from_fixed(value, unit))


def _reference(S: float, K: float, T: float, sigma: float, r: float) -> dict[str, float]:
    d1 = (math.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))
    d2 = d1 - sigma * math.sqrt(T)
    return {
        "call": S * norm.cdf(d1) - K * math.exp(-r * T) * norm.cdf(d2),
        "put": K * math.exp(-r * T) * norm.cdf(-d2) - S * norm.cdf(-d1),
        "call_delta": norm.cdf(d1),
        "vega": S * norm.pdf(d1) * math.sqrt(T),
    }


def test_cdf_at_zero_is_exactly_one_half():
    assert std_normal_cdf(0) == PRECISE_UNIT // 2


@pytest.mark.parametrize("x", [-6.5, -3.1, -1.0, -0.25, 0.4, 1.7, 2.9, 7.5, 9.0])
def test_cdf_matches_scipy(x: float):
    assert _float(std_normal_cdf(_precise(x)), PRECISE_UNIT) == pytest.approx(
        norm.cdf(x), abs=1e-13
    )


def test_cdf_is_symmetric_and_saturates():
    x = _precise(1.2345)
    assert std_normal_cdf(x) + std_normal_cdf(-x) == PRECISE_UNIT
    assert std_normal_cdf(_precise(40)) == PRECISE_UNIT
    assert std_normal_cdf(_precise(-40)) == 0


@pytest.mark.parametrize(
    ("spot", "strike", "days", "vol", "rate"),
    [
        (3000, 3000, 7, 0.9, 0.0),
        (3000, 2500, 7, 0.99, 0.05),
        (3000, 3550, 30, 1.17, -0.01),
        (101, 100, 90, 0.22, 0.03),
    ],
)
def test_prices_match_float_reference(spot, strike, days, vol, rate):
    seconds = days * 86_400
    out = prices_delta_vega(
        time_to_expiry=seconds,
        volatility=to_fixed(vol),
        spot=to_fixed(spot),
        strike=to_fixed(strike),
        rate=to_fixed(rate),
    )
    ref = _reference(spot, strike, seconds / SECONDS_PER_YEAR, vol, rate)

    assert _float(out.call_price) == pytest.approx(ref["call"], rel=1e-9)
    assert _float(out.put_price) == pytest.approx(ref["put"], rel=1e-9)
    assert _float(out.call_delta) == pytest.approx(ref["call_delta"], rel=1e-9)
    assert _float(out.vega) == pytest.approx(ref["vega"], rel=1e-9)


def test_put_call_parity_holds_to_a_few_units():
    seconds = 7 * 86_400
    out = prices_delta_vega(
        time_to_expiry=seconds,
        volatility=to_fixed("0.9"),
        spot=to_fixed(3000),
        strike=to_fixed(3200),
        rate=0,
    )
    # With a zero rate the strike's present value is the strike itself.
    assert abs((out.call_price - out.put_price) - (to_fixed(3000) - to_fixed(3200))) <= 2
    assert abs(out.put_delta - (out.call_delta - UNIT)) <= 1


def test_zero_volatility_prices_discounted_intrinsic_value():
    itm = prices_delta_vega(
        time_to_expiry=86_400, volatility=0, spot=to_fixed(3000), strike=to_fixed(2500), rate=0
    )
    assert itm.call_price == to_fixed(500)
    assert itm.put_price == 0
    assert itm.call_delta == UNIT
    assert itm.put_delta == 0
    assert itm.vega == 0

    otm = prices_delta_vega(
        time_to_expiry=86_400, volatility=0, spot=to_fixed(3000), strike=to_fixed(3500), rate=0
    )
    assert otm.call_price == 0
    assert otm.put_price == to_fixed(500)
    assert otm.call_delta == 0
    assert otm.put_delta == -UNIT


def test_zero_time_is_clamped_rather_than_failing():
    out = prices_delta_vega(
        time_to_expiry=0, volatility=to_fixed("0.8"), spot=to_fixed(3000), strike=to_fixed(2900), rate=0
    )
    assert out.call_price >= to_fixed(100) - UNIT
    assert out.put_price >= 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"spot": 0},
        {"strike": -1},
        {"volatility": -1},
        {"time_to_expiry": -5},
    ],
)
def test_invalid_inputs_raise(kwargs):
    args = {
        "time_to_expiry": 86_400,
        "volatility": to_fixed("0.5"),
        "spot": to_fixed(100),
        "strike": to_fixed(100),
        "rate": 0,
    }
    args.update(kwargs)
    with pytest.raises(ValueError):
        prices_delta_vega(**args)
