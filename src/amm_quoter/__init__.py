"""Read-only premium and fee quoting for an options AMM."""

from .engines import BlackScholesPricer, PriceModel
from .errors import (
    BoardExpired,
    BoardFrozen,
    ForceCloseDeltaOutOfRange,
    ForceCloseSkewOutOfRange,
    InvalidTradeDirection,
    NonDivisibleAmount,
    QuoteRejection,
    TradeDeltaOutOfRange,
    TradingCutoffReached,
    UnknownMarket,
    UnknownStrike,
    VolSkewOrBaseIvOutsideOfTradingBounds,
)
from .fees import compute_fee, fee_for_trade, time_weighted_multiplier
from .fixed_point import UNIT, FixedPointOverflowError, from_fixed, to_fixed
from .limits import TradeLimitValidator, TradeSide, resolve_trade_side
from .quoter import Quoter, iv_impact_for_trade, split_amount
from .registry import (
    GreekCache,
    InMemoryGreekCache,
    InMemoryRegistry,
    InMemoryStateHolder,
    MarketHandles,
    MarketRegistry,
    MarketStateHolder,
    PricerConfig,
    StaticPricerConfig,
    registry_from_config,
)
from .snapshot import MarketSnapshotReader
from .types import (
    Board,
    FeeBreakdown,
    FeeParams,
    FullQuoteResult,
    IterationResult,
    MarketState,
    OptionSpec,
    OptionType,
    PricingParams,
    PricingResult,
    QuoteResult,
    Strike,
    StrikeSnapshot,
    TradeDirection,
    TradeLimitParams,
    TradeRequest,
    VolState,
)

__all__ = [
    "UNIT",
    "to_fixed",
    "from_fixed",
    "FixedPointOverflowError",
    "OptionType",
    "TradeDirection",
    "TradeRequest",
    "Board",
    "Strike",
    "StrikeSnapshot",
    "PricingParams",
    "FeeParams",
    "TradeLimitParams",
    "OptionSpec",
    "MarketState",
    "PricingResult",
    "VolState",
    "FeeBreakdown",
    "IterationResult",
    "QuoteResult",
    "FullQuoteResult",
    "PriceModel",
    "BlackScholesPricer",
    "compute_fee",
    "fee_for_trade",
    "time_weighted_multiplier",
    "TradeSide",
    "TradeLimitValidator",
    "resolve_trade_side",
    "MarketStateHolder",
    "GreekCache",
    "PricerConfig",
    "MarketHandles",
    "MarketRegistry",
    "InMemoryStateHolder",
    "InMemoryGreekCache",
    "StaticPricerConfig",
    "InMemoryRegistry",
    "registry_from_config",
    "MarketSnapshotReader",
    "Quoter",
    "split_amount",
    "iv_impact_for_trade",
    "QuoteRejection",
    "UnknownMarket",
    "UnknownStrike",
    "BoardFrozen",
    "BoardExpired",
    "TradingCutoffReached",
    "VolSkewOrBaseIvOutsideOfTradingBounds",
    "TradeDeltaOutOfRange",
    "ForceCloseDeltaOutOfRange",
    "ForceCloseSkewOutOfRange",
    "InvalidTradeDirection",
    "NonDivisibleAmount",
]
