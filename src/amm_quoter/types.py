"""Shared quoting dataclasses and enums.

All monetary and volatility fields are fixed-point integers scaled by
``amm_quoter.fixed_point.UNIT``. Times are unix seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from amm_quoter.fixed_point import UNIT, multiply_decimal


class OptionType(IntEnum):
    """Exchange option-type codes."""

    LONG_CALL = 0
    LONG_PUT = 1
    SHORT_CALL_BASE = 2
    SHORT_CALL_QUOTE = 3
    SHORT_PUT_QUOTE = 4

    @property
    def is_call(self) -> bool:
        return self in (
            OptionType.LONG_CALL,
            OptionType.SHORT_CALL_BASE,
            OptionType.SHORT_CALL_QUOTE,
        )

    @property
    def is_long(self) -> bool:
        return self in (OptionType.LONG_CALL, OptionType.LONG_PUT)


class TradeDirection(IntEnum):
    OPEN = 0
    CLOSE = 1


@dataclass(frozen=True)
class TradeRequest:
    """One quote request as a client submits it.

    ``option_type`` and ``direction`` are kept as raw codes so an unsupported
    value can be rejected with the exchange's own reason instead of failing
    while the request is built.
    """

    market_id: str
    strike_id: int
    option_type: OptionType | int
    direction: TradeDirection | int
    amount: int
    iterations: int = 1
    is_force_close: bool = False


@dataclass(frozen=True)
class PricingParams:
    """Volatility-impact parameters of the market's pricer.

    ``standard_size`` is the trade size that moves base IV by one vol point;
    ``skew_adjustment_factor`` scales that move onto the strike skew.
    """

    standard_size: int
    skew_adjustment_factor: int

    def __post_init__(self) -> None:
        if self.standard_size <= 0:
            raise ValueError("standard_size must be > 0")
        if self.skew_adjustment_factor < 0:
            raise ValueError("skew_adjustment_factor must be >= 0")


@dataclass(frozen=True)
class FeeParams:
    """Protocol fee parameters.

    The spot fee coefficient is time weighted: flat up to
    ``spot_price_fee_1x_point`` seconds to expiry, doubling at
    ``spot_price_fee_2x_point``.
    """

    spot_price_fee_coefficient: int
    vega_fee_coefficient: int
    spot_price_fee_1x_point: int = 6 * 7 * 86_400
    spot_price_fee_2x_point: int = 12 * 7 * 86_400

    def __post_init__(self) -> None:
        if self.spot_price_fee_coefficient < 0:
            raise ValueError("spot_price_fee_coefficient must be >= 0")
        if self.vega_fee_coefficient < 0:
            raise ValueError("vega_fee_coefficient must be >= 0")
        if self.spot_price_fee_2x_point <= self.spot_price_fee_1x_point:
            raise ValueError("spot_price_fee_2x_point must be > spot_price_fee_1x_point")


@dataclass(frozen=True)
class TradeLimitParams:
    """Bound sets for the normal and forced-close validation paths."""

    min_delta: int
    min_force_close_delta: int
    trading_cutoff: int
    min_base_iv: int
    max_base_iv: int
    min_skew: int
    max_skew: int
    abs_min_skew: int
    abs_max_skew: int
    max_delta: int | None = None

    def __post_init__(self) -> None:
        if self.trading_cutoff < 0:
            raise ValueError("trading_cutoff must be >= 0")
        if min(self.min_base_iv, self.min_skew, self.abs_min_skew) < 0:
            raise ValueError("min_base_iv, min_skew and abs_min_skew must be >= 0")
        if self.min_base_iv > self.max_base_iv:
            raise ValueError("min_base_iv must be <= max_base_iv")

    @property
    def effective_max_delta(self) -> int:
        """Upper call-delta bound; mirrors ``min_delta`` when not configured."""
        if self.max_delta is None:
            return UNIT - self.min_delta
        return self.max_delta


@dataclass(frozen=True)
class Board:
    """Strikes sharing one expiry and one base IV."""

    board_id: int
    expiry: int
    base_iv: int
    strike_ids: tuple[int, ...]
    is_frozen: bool = False


@dataclass(frozen=True)
class Strike:
    strike_id: int
    strike_price: int
    skew: int
    board_id: int

    def __post_init__(self) -> None:
        if self.strike_price <= 0:
            raise ValueError("strike_price must be > 0")


@dataclass(frozen=True)
class StrikeSnapshot:
    """Everything one quote call reads from the live market, taken once."""

    market_id: str
    strike_id: int
    board_id: int
    spot: int
    strike_price: int
    expiry: int
    time_to_expiry: int
    base_iv: int
    skew: int
    rate: int
    pricing_params: PricingParams
    fee_params: FeeParams
    limit_params: TradeLimitParams
    is_frozen: bool = False


@dataclass(frozen=True, slots=True)
class VolState:
    """Market state carried from one iteration to the next."""

    spot: int
    base_iv: int
    skew: int

    @property
    def volatility(self) -> int:
        return multiply_decimal(self.base_iv, self.skew)


@dataclass(frozen=True, slots=True)
class FeeBreakdown:
    spot_fee: int
    vega_fee: int

    def __post_init__(self) -> None:
        if self.spot_fee < 0 or self.vega_fee < 0:
            raise ValueError("fee components must be non-negative")

    @property
    def total_fee(self) -> int:
        return self.spot_fee + self.vega_fee

    def capped(self, limit: int) -> FeeBreakdown:
        """Shrink the fee to at most ``limit``, taking from the vega part first."""
        excess = self.total_fee - max(limit, 0)
        if excess <= 0:
            return self
        vega_cut = min(excess, self.vega_fee)
        spot_cut = excess - vega_cut
        return FeeBreakdown(
            spot_fee=self.spot_fee - spot_cut,
            vega_fee=self.vega_fee - vega_cut,
        )


@dataclass(frozen=True, slots=True)
class IterationResult:
    """Isolated figures for one priced sub-trade."""

    amount: int
    is_buy: bool
    option_price: int
    premium: int
    fee: FeeBreakdown
    total_cost: int
    call_delta: int
    vega: int
    vol_traded: int
    pre_state: VolState
    post_state: VolState

    @property
    def total_fee(self) -> int:
        return self.fee.total_fee


@dataclass(frozen=True)
class QuoteResult:
    """Aggregate over all iterations of one quote.

    ``total_premium`` is the fee-inclusive cost for buys and the fee-net
    proceeds for sells, matching the exchange's reported total cost.
    """

    total_premium: int
    total_fee: int
    iterations: tuple[IterationResult, ...] = ()


@dataclass(frozen=True)
class FullQuoteResult:
    """One independently priced entry per iteration count ``1..N``."""

    entries: tuple[IterationResult, ...]

    @property
    def premiums(self) -> list[int]:
        return [entry.total_cost for entry in self.entries]

    @property
    def fees(self) -> list[int]:
        return [entry.total_fee for entry in self.entries]


@dataclass(frozen=True)
class OptionSpec:
    """Contract terms required for pricing one vanilla option."""

    strike: int
    time_to_expiry: int
    is_call: bool


@dataclass(frozen=True)
class MarketState:
    """Market inputs used by pricing engines."""

    spot: int
    volatility: int
    rate: int = 0


@dataclass(frozen=True, slots=True)
class PricingResult:
    """Premium per unit and the sensitivities the validator and fees need.

    ``delta`` follows the priced side; ``call_delta`` is what trade limits
    are checked against regardless of side.
    """

    premium: int
    delta: int
    call_delta: int
    vega: int
