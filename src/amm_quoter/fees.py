"""Exchange fee schedule for one sub-trade.

Two components, both non-negative:

- spot fee: ``notional * spot_price_fee_coefficient * spot_price_impact``
- vega fee: ``vega * vega_fee_coefficient * |Δvolatility|``

``spot_price_impact`` is the time-weighting multiplier from
:func:`time_weighted_multiplier`; ``vega`` is the trade vega (per-unit vega
times amount) and ``Δvolatility`` is how far the sub-trade moved the traded
volatility.
"""

from __future__ import annotations

from amm_quoter.fixed_point import UNIT, divide_decimal, multiply_decimal
from amm_quoter.types import FeeBreakdown, FeeParams


def time_weighted_multiplier(time_to_expiry: int, point_1x: int, point_2x: int) -> int:
    """Return the fee multiplier: 1 up to ``point_1x``, 2 at ``point_2x``.

    Grows linearly past ``point_2x`` as well.
    """
    if time_to_expiry <= point_1x:
        return UNIT
    return UNIT + divide_decimal(time_to_expiry - point_1x, point_2x - point_1x)


def compute_fee(
    notional: int,
    vega: int,
    spot_price_impact: int,
    vol_change: int,
    params: FeeParams,
) -> FeeBreakdown:
    if notional < 0:
        raise ValueError("notional must be >= 0")
    if vega < 0:
        raise ValueError("vega must be >= 0")
    if spot_price_impact < 0:
        raise ValueError("spot_price_impact must be >= 0")

    spot_fee = multiply_decimal(
        multiply_decimal(notional, params.spot_price_fee_coefficient),
        spot_price_impact,
    )
    vega_fee = multiply_decimal(
        multiply_decimal(vega, params.vega_fee_coefficient),
        abs(vol_change),
    )
    return FeeBreakdown(spot_fee=spot_fee, vega_fee=vega_fee)


def fee_for_trade(
    *,
    amount: int,
    spot: int,
    unit_vega: int,
    vol_before: int,
    vol_after: int,
    time_to_expiry: int,
    params: FeeParams,
) -> FeeBreakdown:
    """Fee for a sub-trade of ``amount`` units, built from per-unit inputs."""
    impact = time_weighted_multiplier(
        time_to_expiry,
        params.spot_price_fee_1x_point,
        params.spot_price_fee_2x_point,
    )
    return compute_fee(
        notional=multiply_decimal(amount, spot),
        vega=multiply_decimal(unit_vega, amount),
        spot_price_impact=impact,
        vol_change=vol_after - vol_before,
        params=params,
    )
