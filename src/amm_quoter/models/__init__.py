"""Analytical option-pricing models."""

from .black_scholes import (
    SECONDS_PER_YEAR,
    PricesDeltaVega,
    annualise,
    d1_d2,
    option_prices,
    prices_delta_vega,
    std_normal,
    std_normal_cdf,
    vega,
)

__all__ = [
    "SECONDS_PER_YEAR",
    "PricesDeltaVega",
    "annualise",
    "d1_d2",
    "option_prices",
    "prices_delta_vega",
    "std_normal",
    "std_normal_cdf",
    "vega",
]
