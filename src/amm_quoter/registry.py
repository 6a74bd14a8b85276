"""Market registry and the live-state collaborators it resolves to.

The quoter never reaches for a global directory: a :class:`MarketRegistry` is
injected and asked on every call which state holder, greeks cache and pricer
configuration currently back a market. The in-memory implementations below
are the deterministic doubles used by tests and by the CLI.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from amm_quoter.errors import UnknownMarket
from amm_quoter.fixed_point import to_fixed
from amm_quoter.types import (
    Board,
    FeeParams,
    PricingParams,
    Strike,
    TradeLimitParams,
)


@runtime_checkable
class MarketStateHolder(Protocol):
    """Read access to a market's boards, strikes, spot and clock."""

    def spot_price(self) -> int:
        """Current underlying spot price."""

    def current_time(self) -> int:
        """Timestamp the state is consistent with (unix seconds)."""

    def live_board_ids(self) -> Sequence[int]:
        """Boards that have not been settled."""

    def get_board(self, board_id: int) -> Board | None:
        """Board by id, or ``None`` when unknown."""

    def get_strike(self, strike_id: int) -> Strike | None:
        """Strike by id, or ``None`` when unknown."""


@runtime_checkable
class GreekCache(Protocol):
    """Cache-level pricing inputs shared by every board of a market."""

    def rate_and_carry(self) -> int:
        """Annualised risk-free rate used for pricing."""


@runtime_checkable
class PricerConfig(Protocol):
    """Parameters of the market's pricer and fee model."""

    def pricing_params(self) -> PricingParams:
        """Volatility-impact parameters."""

    def fee_params(self) -> FeeParams:
        """Protocol fee parameters."""

    def trade_limit_params(self) -> TradeLimitParams:
        """Trade-limit bound sets."""


@dataclass(frozen=True)
class MarketHandles:
    """What one market identifier resolves to."""

    market_id: str
    state_holder: MarketStateHolder
    greek_cache: GreekCache
    pricer_config: PricerConfig


@runtime_checkable
class MarketRegistry(Protocol):
    def resolve(self, market_id: str) -> MarketHandles:
        """Return the market's collaborators or raise ``UnknownMarket``."""


@dataclass
class InMemoryStateHolder:
    spot: int
    timestamp: int
    boards: dict[int, Board] = field(default_factory=dict)
    strikes: dict[int, Strike] = field(default_factory=dict)

    def spot_price(self) -> int:
        return self.spot

    def current_time(self) -> int:
        return self.timestamp

    def live_board_ids(self) -> Sequence[int]:
        return tuple(self.boards)

    def get_board(self, board_id: int) -> Board | None:
        return self.boards.get(board_id)

    def get_strike(self, strike_id: int) -> Strike | None:
        return self.strikes.get(strike_id)


@dataclass
class InMemoryGreekCache:
    rate: int = 0

    def rate_and_carry(self) -> int:
        return self.rate


@dataclass
class StaticPricerConfig:
    pricing: PricingParams
    fees: FeeParams
    limits: TradeLimitParams

    def pricing_params(self) -> PricingParams:
        return self.pricing

    def fee_params(self) -> FeeParams:
        return self.fees

    def trade_limit_params(self) -> TradeLimitParams:
        return self.limits


@dataclass
class InMemoryRegistry:
    markets: dict[str, MarketHandles] = field(default_factory=dict)

    def register(self, handles: MarketHandles) -> None:
        self.markets[handles.market_id] = handles

    def resolve(self, market_id: str) -> MarketHandles:
        try:
            return self.markets[market_id]
        except KeyError as exc:
            raise UnknownMarket(market_id=market_id) from exc


# Defaults applied when a market config omits a parameter block entry.
DEFAULT_PRICING_PARAMS: dict[str, Any] = {
    "standard_size": "5",
    "skew_adjustment_factor": "0.75",
}

DEFAULT_FEE_PARAMS: dict[str, Any] = {
    "spot_price_fee_coefficient": "0.001",
    "vega_fee_coefficient": "60",
    "spot_price_fee_1x_point": 6 * 7 * 86_400,
    "spot_price_fee_2x_point": 12 * 7 * 86_400,
}

DEFAULT_TRADE_LIMIT_PARAMS: dict[str, Any] = {
    "min_delta": "0.15",
    "min_force_close_delta": "0.25",
    "trading_cutoff": 43_200,
    "min_base_iv": "0.35",
    "max_base_iv": "5",
    "min_skew": "0.5",
    "max_skew": "2.5",
    "abs_min_skew": "0.1",
    "abs_max_skew": "10",
    "max_delta": None,
}

_SECONDS_FIELDS = frozenset(
    {"spot_price_fee_1x_point", "spot_price_fee_2x_point", "trading_cutoff"}
)


def _params(defaults: Mapping[str, Any], raw: Mapping[str, Any] | None) -> dict[str, Any]:
    merged = dict(defaults)
    merged.update(raw or {})
    unknown = set(merged) - set(defaults)
    if unknown:
        raise ValueError(f"Unknown parameter(s): {sorted(unknown)}")
    out: dict[str, Any] = {}
    for key, value in merged.items():
        if value is None:
            out[key] = None
        elif key in _SECONDS_FIELDS:
            out[key] = int(value)
        else:
            out[key] = to_fixed(value)
    return out


def _build_market(market_id: str, cfg: Mapping[str, Any]) -> MarketHandles:
    for key in ("spot", "timestamp", "boards"):
        if key not in cfg:
            raise ValueError(f"market {market_id!r} is missing {key!r}")

    boards: dict[int, Board] = {}
    strikes: dict[int, Strike] = {}
    for board_cfg in cfg["boards"]:
        board_id = int(board_cfg["id"])
        strike_ids: list[int] = []
        for strike_cfg in board_cfg.get("strikes", []):
            strike = Strike(
                strike_id=int(strike_cfg["id"]),
                strike_price=to_fixed(strike_cfg["strike_price"]),
                skew=to_fixed(strike_cfg.get("skew", 1)),
                board_id=board_id,
            )
            if strike.strike_id in strikes:
                raise ValueError(f"duplicate strike id {strike.strike_id}")
            strikes[strike.strike_id] = strike
            strike_ids.append(strike.strike_id)
        boards[board_id] = Board(
            board_id=board_id,
            expiry=int(board_cfg["expiry"]),
            base_iv=to_fixed(board_cfg["base_iv"]),
            strike_ids=tuple(strike_ids),
            is_frozen=bool(board_cfg.get("frozen", False)),
        )

    return MarketHandles(
        market_id=market_id,
        state_holder=InMemoryStateHolder(
            spot=to_fixed(cfg["spot"]),
            timestamp=int(cfg["timestamp"]),
            boards=boards,
            strikes=strikes,
        ),
        greek_cache=InMemoryGreekCache(rate=to_fixed(cfg.get("rate", 0))),
        pricer_config=StaticPricerConfig(
            pricing=PricingParams(**_params(DEFAULT_PRICING_PARAMS, cfg.get("pricing"))),
            fees=FeeParams(**_params(DEFAULT_FEE_PARAMS, cfg.get("fees"))),
            limits=TradeLimitParams(
                **_params(DEFAULT_TRADE_LIMIT_PARAMS, cfg.get("trade_limits"))
            ),
        ),
    )


def registry_from_config(markets: Mapping[str, Mapping[str, Any]]) -> InMemoryRegistry:
    """Build an in-memory registry from a mapping of human-readable decimals.

    Expected shape (YAML)::

        eth:
          spot: "3000"
          timestamp: 1700000000
          rate: "0.05"
          pricing: {standard_size: "50"}
          boards:
            - id: 1
              expiry: 1700604800
              base_iv: "0.9"
              strikes:
                - {id: 10, strike_price: "3000", skew: "1.0"}
    """
    if not isinstance(markets, Mapping) or not markets:
        raise ValueError("markets config must be a non-empty mapping")
    registry = InMemoryRegistry()
    for market_id, cfg in markets.items():
        registry.register(_build_market(str(market_id), cfg))
    return registry
