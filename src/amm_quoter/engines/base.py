"""Interface for option-pricing engines."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from amm_quoter.types import MarketState, OptionSpec, PricingResult


@runtime_checkable
class PriceModel(Protocol):
    """Pricing capability required by the quoter."""

    def price_and_greeks(self, spec: OptionSpec, state: MarketState) -> PricingResult:
        """Return per-unit premium, delta and vega for one contract."""
