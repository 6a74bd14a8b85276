"""Read-only trade quoting against a live options AMM.

A quote replays the exchange's execution path without touching its state:

1. validate the option type / direction / force-close combination
2. split the amount into equal sub-trades
3. resolve the market and snapshot the strike once
4. fold over the sub-trades, each one moving base IV and skew for the next

Any rejection aborts the whole call; no partial result is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from amm_quoter.engines import BlackScholesPricer, PriceModel
from amm_quoter.errors import NonDivisibleAmount, QuoteRejection
from amm_quoter.fees import fee_for_trade
from amm_quoter.fixed_point import divide_decimal, multiply_decimal
from amm_quoter.limits import TradeLimitValidator, TradeSide, resolve_trade_side
from amm_quoter.registry import MarketRegistry
from amm_quoter.snapshot import MarketSnapshotReader
from amm_quoter.types import (
    FullQuoteResult,
    IterationResult,
    MarketState,
    OptionSpec,
    OptionType,
    PricingParams,
    QuoteResult,
    StrikeSnapshot,
    TradeRequest,
    VolState,
)

logger = logging.getLogger(__name__)


def split_amount(amount: int, iterations: int) -> tuple[int, ...]:
    """Split ``amount`` into ``iterations`` equal, positive sub-trade amounts."""
    if iterations < 1:
        raise NonDivisibleAmount(
            "iterations must be >= 1", amount=amount, iterations=iterations
        )
    if amount <= 0:
        raise NonDivisibleAmount(
            "amount must be > 0", amount=amount, iterations=iterations
        )
    per_iteration, remainder = divmod(amount, iterations)
    if remainder:
        raise NonDivisibleAmount(amount=amount, iterations=iterations)
    return (per_iteration,) * iterations


def iv_impact_for_trade(
    amount: int,
    base_iv: int,
    skew: int,
    params: PricingParams,
    *,
    is_buy: bool,
) -> tuple[int, int]:
    """Return ``(new_base_iv, new_skew)`` after trading ``amount``.

    One ``standard_size`` moves base IV by 0.01; the skew moves by that much
    times ``skew_adjustment_factor``. Buys push both up, sells down.
    """
    order_size = divide_decimal(amount, params.standard_size)
    base_iv_move = order_size // 100
    skew_move = multiply_decimal(base_iv_move, params.skew_adjustment_factor)
    if is_buy:
        return base_iv + base_iv_move, skew + skew_move
    return base_iv - base_iv_move, skew - skew_move


@dataclass(frozen=True)
class _QuoteContext:
    snapshot: StrikeSnapshot
    side: TradeSide
    validator: TradeLimitValidator
    post_cutoff: bool

    @property
    def initial_state(self) -> VolState:
        return VolState(
            spot=self.snapshot.spot,
            base_iv=self.snapshot.base_iv,
            skew=self.snapshot.skew,
        )


@dataclass
class Quoter:
    """Quote engine wired to an injected market registry."""

    registry: MarketRegistry
    pricer: PriceModel = field(default_factory=BlackScholesPricer)
    reader: MarketSnapshotReader = field(default_factory=MarketSnapshotReader)

    def quote(self, request: TradeRequest) -> QuoteResult:
        """Price the whole request and return the aggregate cost and fee."""
        try:
            side = resolve_trade_side(
                request.option_type, request.direction, request.is_force_close
            )
            amounts = split_amount(request.amount, request.iterations)
            ctx = self._context(request, side)
            return self._run(ctx, amounts)
        except QuoteRejection as exc:
            self._log_rejection(request, exc)
            raise

    def full_quotes(self, request: TradeRequest) -> FullQuoteResult:
        """Price sizes ``k * amount / iterations`` for ``k = 1..iterations``.

        Each entry is one sub-trade of that size priced from the untouched
        snapshot, so entries show the marginal cost curve rather than a
        running total.
        """
        try:
            side = resolve_trade_side(
                request.option_type, request.direction, request.is_force_close
            )
            amounts = split_amount(request.amount, request.iterations)
            ctx = self._context(request, side)
            initial = ctx.initial_state
            entries = tuple(
                self._price_iteration(ctx, initial, amounts[0] * k)
                for k in range(1, len(amounts) + 1)
            )
        except QuoteRejection as exc:
            self._log_rejection(request, exc)
            raise
        return FullQuoteResult(entries=entries)

    def quote_option_types(self, request: TradeRequest) -> dict[OptionType, QuoteResult]:
        """Quote every option type for the request's strike, size and direction.

        ``request.option_type`` is ignored. One rejection rejects the lot.
        """
        results: dict[OptionType, QuoteResult] = {}
        snapshot: StrikeSnapshot | None = None
        try:
            amounts = split_amount(request.amount, request.iterations)
            for option_type in OptionType:
                side = resolve_trade_side(
                    option_type, request.direction, request.is_force_close
                )
                if snapshot is None:
                    ctx = self._context(request, side)
                    snapshot = ctx.snapshot
                else:
                    ctx = self._context_from_snapshot(snapshot, side)
                results[option_type] = self._run(ctx, amounts)
        except QuoteRejection as exc:
            self._log_rejection(request, exc)
            raise
        return results

    def _context(self, request: TradeRequest, side: TradeSide) -> _QuoteContext:
        market = self.registry.resolve(request.market_id)
        logger.debug("Resolved market %s", market.market_id)
        snapshot = self.reader.load_strike(market, request.strike_id)
        return self._context_from_snapshot(snapshot, side)

    def _context_from_snapshot(
        self, snapshot: StrikeSnapshot, side: TradeSide
    ) -> _QuoteContext:
        validator = TradeLimitValidator(snapshot.limit_params)
        post_cutoff = validator.check_cutoff(
            snapshot.time_to_expiry, is_force_close=side.is_force_close
        )
        return _QuoteContext(
            snapshot=snapshot,
            side=side,
            validator=validator,
            post_cutoff=post_cutoff,
        )

    def _run(self, ctx: _QuoteContext, amounts: tuple[int, ...]) -> QuoteResult:
        state = ctx.initial_state
        results: list[IterationResult] = []
        for amount in amounts:
            result = self._price_iteration(ctx, state, amount)
            results.append(result)
            state = result.post_state

        quote = QuoteResult(
            total_premium=sum(r.total_cost for r in results),
            total_fee=sum(r.total_fee for r in results),
            iterations=tuple(results),
        )
        logger.debug(
            "Quoted strike=%s type=%s iterations=%d premium=%d fee=%d",
            ctx.snapshot.strike_id,
            ctx.side.option_type.name,
            len(results),
            quote.total_premium,
            quote.total_fee,
        )
        return quote

    def _price_iteration(
        self, ctx: _QuoteContext, state: VolState, amount: int
    ) -> IterationResult:
        snap = ctx.snapshot
        side = ctx.side

        new_base_iv, new_skew = iv_impact_for_trade(
            amount, state.base_iv, state.skew, snap.pricing_params, is_buy=side.is_buy
        )
        if side.is_force_close:
            new_base_iv = state.base_iv
        ctx.validator.check_vol_bounds(
            new_base_iv=new_base_iv,
            new_skew=new_skew,
            is_force_close=side.is_force_close,
        )

        post_state = VolState(spot=state.spot, base_iv=new_base_iv, skew=new_skew)
        vol_traded = post_state.volatility
        pricing = self.pricer.price_and_greeks(
            OptionSpec(
                strike=snap.strike_price,
                time_to_expiry=snap.time_to_expiry,
                is_call=side.option_type.is_call,
            ),
            MarketState(spot=state.spot, volatility=vol_traded, rate=snap.rate),
        )
        ctx.validator.check_delta(
            pricing.call_delta,
            is_force_close=side.is_force_close,
            post_cutoff=ctx.post_cutoff,
        )

        premium = multiply_decimal(pricing.premium, amount)
        fee = fee_for_trade(
            amount=amount,
            spot=state.spot,
            unit_vega=pricing.vega,
            vol_before=state.volatility,
            vol_after=vol_traded,
            time_to_expiry=snap.time_to_expiry,
            params=snap.fee_params,
        )
        if side.is_buy:
            total_cost = premium + fee.total_fee
        else:
            fee = fee.capped(premium)
            total_cost = premium - fee.total_fee

        return IterationResult(
            amount=amount,
            is_buy=side.is_buy,
            option_price=pricing.premium,
            premium=premium,
            fee=fee,
            total_cost=total_cost,
            call_delta=pricing.call_delta,
            vega=pricing.vega,
            vol_traded=vol_traded,
            pre_state=state,
            post_state=post_state,
        )

    @staticmethod
    def _log_rejection(request: TradeRequest, exc: QuoteRejection) -> None:
        logger.info(
            "Quote rejected market=%s strike=%s reason=%s: %s",
            request.market_id,
            request.strike_id,
            exc.reason,
            exc,
        )
