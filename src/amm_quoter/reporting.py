"""Tabular views of quote results for display and analysis."""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np
import pandas as pd

from amm_quoter.fixed_point import from_fixed
from amm_quoter.types import FullQuoteResult, IterationResult, OptionType, QuoteResult

ITERATION_COLUMNS: tuple[str, ...] = (
    "amount",
    "side",
    "option_price",
    "premium",
    "spot_fee",
    "vega_fee",
    "total_fee",
    "total_cost",
    "cost_per_unit",
    "call_delta",
    "vol_traded",
    "base_iv_after",
    "skew_after",
)


def _as_float(value: int) -> float:
    return float(from_fixed(value))


def _iteration_row(result: IterationResult) -> dict[str, object]:
    amount = _as_float(result.amount)
    total_cost = _as_float(result.total_cost)
    # Sells receive the cost, so their per-unit cost is the negated proceeds.
    signed_cost = total_cost if result.is_buy else -total_cost
    return {
        "amount": amount,
        "side": "buy" if result.is_buy else "sell",
        "option_price": _as_float(result.option_price),
        "premium": _as_float(result.premium),
        "spot_fee": _as_float(result.fee.spot_fee),
        "vega_fee": _as_float(result.fee.vega_fee),
        "total_fee": _as_float(result.total_fee),
        "total_cost": total_cost,
        "cost_per_unit": signed_cost / amount if amount else np.nan,
        "call_delta": _as_float(result.call_delta),
        "vol_traded": _as_float(result.vol_traded),
        "base_iv_after": _as_float(result.post_state.base_iv),
        "skew_after": _as_float(result.post_state.skew),
    }


def iterations_frame(result: QuoteResult) -> pd.DataFrame:
    """One row per executed sub-trade of a quote, indexed from 1."""
    df = pd.DataFrame(
        [_iteration_row(r) for r in result.iterations],
        columns=list(ITERATION_COLUMNS),
    )
    df.index = pd.RangeIndex(1, len(df) + 1, name="iteration")
    return df


def full_quote_frame(result: FullQuoteResult) -> pd.DataFrame:
    """Cost curve: one row per iteration count, indexed from 1."""
    df = pd.DataFrame(
        [_iteration_row(r) for r in result.entries],
        columns=list(ITERATION_COLUMNS),
    )
    df.index = pd.RangeIndex(1, len(df) + 1, name="iteration_count")
    return df


def option_types_frame(results: Mapping[OptionType, QuoteResult]) -> pd.DataFrame:
    rows = [
        {
            "option_type": option_type.name,
            "total_premium": _as_float(quote.total_premium),
            "total_fee": _as_float(quote.total_fee),
        }
        for option_type, quote in results.items()
    ]
    return pd.DataFrame(rows, columns=["option_type", "total_premium", "total_fee"])


def is_cost_curve_non_decreasing(frame: pd.DataFrame, *, atol: float = 1e-9) -> bool:
    """True when per-unit cost never falls as trade size grows."""
    costs = frame["cost_per_unit"].to_numpy(dtype=float)
    if costs.size < 2:
        return True
    return bool(np.all(np.diff(costs) >= -atol))
