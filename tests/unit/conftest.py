from __future__ import annotations

import copy
from typing import Any

import pytest

from amm_quoter import (
    OptionType,
    Quoter,
    TradeDirection,
    TradeRequest,
    registry_from_config,
    to_fixed,
)

NOW = 1_700_000_000
WEEK = 7 * 86_400

BASE_MARKETS: dict[str, Any] = {
    "eth": {
        "spot": "3000",
        "timestamp": NOW,
        "rate": "0",
        "pricing": {"standard_size": "50", "skew_adjustment_factor": "0.75"},
        "fees": {"spot_price_fee_coefficient": "0.001", "vega_fee_coefficient": "60"},
        "trade_limits": {
            "min_delta": "0.15",
            "min_force_close_delta": "0.25",
            "trading_cutoff": 43_200,
            "min_base_iv": "0.35",
            "max_base_iv": "5",
            "min_skew": "0.5",
            "max_skew": "2.5",
            "abs_min_skew": "0.1",
            "abs_max_skew": "10",
        },
        "boards": [
            {
                "id": 1,
                "expiry": NOW + WEEK,
                "base_iv": "0.9",
                "strikes": [
                    {"id": 1, "strike_price": "2500", "skew": "1.1"},
                    {"id": 2, "strike_price": "3000", "skew": "1"},
                    {"id": 3, "strike_price": "3200", "skew": "1.1"},
                ],
            },
            {
                "id": 2,
                "expiry": NOW + 6 * 3600,
                "base_iv": "0.8",
                "strikes": [{"id": 6, "strike_price": "3000", "skew": "1"}],
            },
            {
                "id": 3,
                "expiry": NOW + WEEK,
                "base_iv": "0.9",
                "frozen": True,
                "strikes": [{"id": 7, "strike_price": "3000", "skew": "1"}],
            },
        ],
    }
}


@pytest.fixture
def markets_config():
    """Fresh, mutable copy of the base market fixture."""
    return copy.deepcopy(BASE_MARKETS)


@pytest.fixture
def make_quoter(markets_config):
    def _make(
        *,
        trade_limits: dict[str, Any] | None = None,
        fees: dict[str, Any] | None = None,
        **market_overrides: Any,
    ) -> Quoter:
        cfg = markets_config["eth"]
        cfg["trade_limits"].update(trade_limits or {})
        cfg["fees"].update(fees or {})
        cfg.update(market_overrides)
        return Quoter(registry=registry_from_config(markets_config))

    return _make


@pytest.fixture
def quoter(make_quoter) -> Quoter:
    return make_quoter()


@pytest.fixture
def make_request():
    def _make(
        *,
        strike_id: int = 2,
        option_type: OptionType | int = OptionType.LONG_CALL,
        direction: TradeDirection | int = TradeDirection.OPEN,
        amount: str = "1",
        iterations: int = 1,
        force_close: bool = False,
        market_id: str = "eth",
    ) -> TradeRequest:
        return TradeRequest(
            market_id=market_id,
            strike_id=strike_id,
            option_type=option_type,
            direction=direction,
            amount=to_fixed(amount),
            iterations=iterations,
            is_force_close=force_close,
        )

    return _make
