"""Trade-limit validation.

Two bound sets apply. Normal trades must stay inside ``[min_skew, max_skew]``,
``[min_base_iv, max_base_iv]`` and ``[min_delta, max_delta]``. Force closes
only need the skew strictly inside ``(abs_min_skew, abs_max_skew)`` and a call
delta at or beyond ``min_force_close_delta`` from either end. Once the trading
cutoff has passed a force close skips the delta check; the skew bound
still applies.

Check order inside one sub-trade:

1. trading cutoff (before any pricing, once per quote)
2. skew / base IV bounds on the post-impact state
3. delta bounds on the priced option
"""

from __future__ import annotations

from dataclasses import dataclass

from amm_quoter.errors import (
    ForceCloseDeltaOutOfRange,
    ForceCloseSkewOutOfRange,
    InvalidTradeDirection,
    TradeDeltaOutOfRange,
    TradingCutoffReached,
    VolSkewOrBaseIvOutsideOfTradingBounds,
)
from amm_quoter.fixed_point import UNIT
from amm_quoter.types import OptionType, TradeDirection, TradeLimitParams


@dataclass(frozen=True, slots=True)
class TradeSide:
    option_type: OptionType
    direction: TradeDirection
    is_force_close: bool

    @property
    def is_buy(self) -> bool:
        if self.direction == TradeDirection.OPEN:
            return self.option_type.is_long
        return not self.option_type.is_long


def resolve_trade_side(
    option_type: OptionType | int,
    direction: TradeDirection | int,
    is_force_close: bool,
) -> TradeSide:
    """Validate raw type/direction codes and the force-close flag."""
    try:
        opt = OptionType(option_type)
        dirn = TradeDirection(direction)
    except ValueError as exc:
        raise InvalidTradeDirection(
            option_type=option_type, direction=direction
        ) from exc
    if is_force_close and dirn != TradeDirection.CLOSE:
        raise InvalidTradeDirection(
            "force close requires a close direction",
            option_type=int(opt),
            direction=int(dirn),
        )
    return TradeSide(option_type=opt, direction=dirn, is_force_close=bool(is_force_close))


@dataclass(frozen=True)
class TradeLimitValidator:
    """Checks one quote's sub-trades against a market's trade limits."""

    params: TradeLimitParams

    def is_post_cutoff(self, time_to_expiry: int) -> bool:
        return time_to_expiry < self.params.trading_cutoff

    def check_cutoff(self, time_to_expiry: int, *, is_force_close: bool) -> bool:
        """Raise for a normal trade inside the cutoff window.

        Returns whether the cutoff has passed; a force close past it skips
        the delta bound.
        """
        post_cutoff = self.is_post_cutoff(time_to_expiry)
        if post_cutoff and not is_force_close:
            raise TradingCutoffReached(
                time_to_expiry=time_to_expiry,
                trading_cutoff=self.params.trading_cutoff,
            )
        return post_cutoff

    def check_vol_bounds(
        self,
        *,
        new_base_iv: int,
        new_skew: int,
        is_force_close: bool,
    ) -> None:
        p = self.params
        if is_force_close:
            if new_skew <= p.abs_min_skew or new_skew >= p.abs_max_skew:
                raise ForceCloseSkewOutOfRange(
                    new_skew=new_skew,
                    abs_min_skew=p.abs_min_skew,
                    abs_max_skew=p.abs_max_skew,
                )
            return
        if (
            new_skew < p.min_skew
            or new_skew > p.max_skew
            or new_base_iv < p.min_base_iv
            or new_base_iv > p.max_base_iv
        ):
            raise VolSkewOrBaseIvOutsideOfTradingBounds(
                new_base_iv=new_base_iv,
                new_skew=new_skew,
            )

    def check_delta(
        self,
        call_delta: int,
        *,
        is_force_close: bool,
        post_cutoff: bool,
    ) -> None:
        p = self.params
        if is_force_close:
            if post_cutoff:
                return
            # Force closes are only for options already far in or out of the money.
            lower = p.min_force_close_delta
            upper = UNIT - p.min_force_close_delta
            if lower < call_delta < upper:
                raise ForceCloseDeltaOutOfRange(
                    call_delta=call_delta,
                    min_force_close_delta=lower,
                )
            return
        if call_delta < p.min_delta or call_delta > p.effective_max_delta:
            raise TradeDeltaOutOfRange(
                call_delta=call_delta,
                min_delta=p.min_delta,
                max_delta=p.effective_max_delta,
            )
