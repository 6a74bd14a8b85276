"""Fixed-point Black-Scholes pricing and Greeks for European options.

Inputs and outputs are ``UNIT``-scaled integers; everything in between runs
on ``PRECISE_UNIT`` integers. The normal CDF is West's double-precision
rational approximation (Hart 5666), which is what the exchange evaluates
on-chain.
"""

from __future__ import annotations

from dataclasses import dataclass

from amm_quoter.fixed_point import (
    PRECISE_UNIT,
    decimal_to_precise,
    divide_decimal_round_precise,
    exp_precise,
    ln_precise,
    multiply_decimal_round_precise,
    precise_to_decimal,
    sqrt_precise,
    to_fixed,
)

SECONDS_PER_YEAR = 31_536_000

# Floors keeping d1/d2 finite for tiny expiries or vols.
MIN_T_ANNUALISED = PRECISE_UNIT // SECONDS_PER_YEAR
MIN_VOLATILITY = PRECISE_UNIT // 10_000


def _p(value: str) -> int:
    return to_fixed(value, PRECISE_UNIT)


SQRT_TWOPI = _p("2.506628274631000502415765285")

_CDF_CUTOFF = 37 * PRECISE_UNIT
_CDF_SPLIT = _p("7.07106781186547")

_CDF_NUMERATOR = tuple(
    _p(v)
    for v in (
        "220.206867912376",
        "221.213596169931",
        "112.079291497871",
        "33.912866078383",
        "6.37396220353165",
        "0.700383064443688",
        "0.0352624965998911",
    )
)
_CDF_DENOMINATOR = tuple(
    _p(v)
    for v in (
        "440.413735824752",
        "793.826512519948",
        "637.333633378831",
        "296.564248779674",
        "86.7807322029461",
        "16.064177579207",
        "1.75566716318264",
        "0.0883883476483184",
    )
)
_CF_TAIL = _p("0.65")


def _horner(coefficients: tuple[int, ...], z: int) -> int:
    acc = coefficients[-1]
    for coef in reversed(coefficients[:-1]):
        acc = multiply_decimal_round_precise(acc, z) + coef
    return acc


def annualise(seconds: int) -> int:
    """Seconds to a precise year fraction."""
    return seconds * PRECISE_UNIT // SECONDS_PER_YEAR


def std_normal(x: int) -> int:
    """Standard normal density at precise ``x``."""
    half_sq = multiply_decimal_round_precise(x, x) // 2
    return divide_decimal_round_precise(exp_precise(-half_sq), SQRT_TWOPI)


def std_normal_cdf(x: int) -> int:
    """Standard normal CDF at precise ``x``."""
    z = abs(x)
    c = 0
    if z <= _CDF_CUTOFF:
        e = exp_precise(-(multiply_decimal_round_precise(z, z) // 2))
        if z < _CDF_SPLIT:
            ratio = divide_decimal_round_precise(
                _horner(_CDF_NUMERATOR, z), _horner(_CDF_DENOMINATOR, z)
            )
            c = multiply_decimal_round_precise(ratio, e)
        else:
            # Continued fraction z + 1/(z + 2/(z + 3/(z + 4/(z + 0.65))))
            f = z + _CF_TAIL
            for k in (4, 3, 2, 1):
                f = z + divide_decimal_round_precise(k * PRECISE_UNIT, f)
            c = divide_decimal_round_precise(
                e, multiply_decimal_round_precise(f, SQRT_TWOPI)
            )
    return c if x <= 0 else PRECISE_UNIT - c


def d1_d2(
    t_annualised: int,
    volatility: int,
    spot: int,
    strike: int,
    rate: int,
) -> tuple[int, int]:
    """Compute precise d1 and d2 (all arguments precise)."""
    t_annualised = max(t_annualised, MIN_T_ANNUALISED)
    volatility = max(volatility, MIN_VOLATILITY)
    vt_sqrt = multiply_decimal_round_precise(volatility, sqrt_precise(t_annualised))
    log = ln_precise(divide_decimal_round_precise(spot, strike))
    v2t = multiply_decimal_round_precise(
        multiply_decimal_round_precise(volatility, volatility) // 2 + rate,
        t_annualised,
    )
    d1 = divide_decimal_round_precise(log + v2t, vt_sqrt)
    return d1, d1 - vt_sqrt


def strike_present_value(t_annualised: int, strike: int, rate: int) -> int:
    return multiply_decimal_round_precise(
        strike, exp_precise(-multiply_decimal_round_precise(rate, t_annualised))
    )


def option_prices(
    t_annualised: int,
    spot: int,
    strike: int,
    rate: int,
    d1: int,
    d2: int,
) -> tuple[int, int]:
    """Precise (call, put) prices; the put comes from put-call parity."""
    strike_pv = strike_present_value(t_annualised, strike, rate)
    spot_nd1 = multiply_decimal_round_precise(spot, std_normal_cdf(d1))
    strike_nd2 = multiply_decimal_round_precise(strike_pv, std_normal_cdf(d2))
    call = spot_nd1 - strike_nd2 if strike_nd2 <= spot_nd1 else 0
    put = call + strike_pv
    put = put - spot if spot <= put else 0
    return call, put


def vega(t_annualised: int, spot: int, d1: int) -> int:
    """Precise vega per +1.0 volatility."""
    return multiply_decimal_round_precise(
        sqrt_precise(t_annualised),
        multiply_decimal_round_precise(std_normal(d1), spot),
    )


@dataclass(frozen=True, slots=True)
class PricesDeltaVega:
    """Both option prices plus call/put delta and vega, ``UNIT``-scaled."""

    call_price: int
    put_price: int
    call_delta: int
    put_delta: int
    vega: int


def _degenerate(t_annualised: int, spot: int, strike: int, rate: int) -> PricesDeltaVega:
    # Zero vol: the option is worth its discounted intrinsic value.
    strike_pv = strike_present_value(t_annualised, strike, rate)
    call = max(spot - strike_pv, 0)
    put = max(strike_pv - spot, 0)
    call_delta = PRECISE_UNIT if spot > strike_pv else 0
    return PricesDeltaVega(
        call_price=precise_to_decimal(call),
        put_price=precise_to_decimal(put),
        call_delta=precise_to_decimal(call_delta),
        put_delta=precise_to_decimal(call_delta - PRECISE_UNIT),
        vega=0,
    )


def prices_delta_vega(
    time_to_expiry: int,
    volatility: int,
    spot: int,
    strike: int,
    rate: int,
) -> PricesDeltaVega:
    """Price one strike.

    Args:
        time_to_expiry: Seconds until expiry.
        volatility: Annualised volatility (``UNIT``).
        spot: Underlying spot price (``UNIT``).
        strike: Strike price (``UNIT``).
        rate: Continuously compounded risk-free rate (``UNIT``, signed).
    """
    if spot <= 0 or strike <= 0:
        raise ValueError("spot and strike must be > 0")
    if volatility < 0:
        raise ValueError("volatility must be >= 0")
    if time_to_expiry < 0:
        raise ValueError("time_to_expiry must be >= 0")

    t_annualised = max(annualise(time_to_expiry), MIN_T_ANNUALISED)
    spot_p = decimal_to_precise(spot)
    strike_p = decimal_to_precise(strike)
    rate_p = decimal_to_precise(rate)

    if volatility == 0:
        return _degenerate(t_annualised, spot_p, strike_p, rate_p)

    d1, d2 = d1_d2(t_annualised, decimal_to_precise(volatility), spot_p, strike_p, rate_p)
    call, put = option_prices(t_annualised, spot_p, strike_p, rate_p, d1, d2)
    call_delta = std_normal_cdf(d1)
    return PricesDeltaVega(
        call_price=precise_to_decimal(call),
        put_price=precise_to_decimal(put),
        call_delta=precise_to_decimal(call_delta),
        put_delta=precise_to_decimal(call_delta - PRECISE_UNIT),
        vega=precise_to_decimal(vega(t_annualised, spot_p, d1)),
    )
