"""Black-Scholes pricing engine."""

from __future__ import annotations

from amm_quoter.models.black_scholes import prices_delta_vega
from amm_quoter.types import MarketState, OptionSpec, PricingResult


class BlackScholesPricer:
    """Exact fixed-point Black-Scholes pricer backed by analytical formulas."""

    def price_and_greeks(self, spec: OptionSpec, state: MarketState) -> PricingResult:
        out = prices_delta_vega(
            time_to_expiry=spec.time_to_expiry,
            volatility=state.volatility,
            spot=state.spot,
            strike=spec.strike,
            rate=state.rate,
        )
        if spec.is_call:
            return PricingResult(
                premium=out.call_price,
                delta=out.call_delta,
                call_delta=out.call_delta,
                vega=out.vega,
            )
        return PricingResult(
            premium=out.put_price,
            delta=out.put_delta,
            call_delta=out.call_delta,
            vega=out.vega,
        )
