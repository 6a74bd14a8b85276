"""Typed rejections raised by the quoting pipeline.

Every rejection aborts the whole quote. ``reason`` carries the exchange's own
rejection name so off-chain tooling can show the message a user would get
from a real transaction.
"""

from __future__ import annotations

from typing import Any


class QuoteRejection(ValueError):
    """Base class for a quote the exchange would refuse to execute."""

    reason: str = "QuoteRejection"

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.context = context
        detail = message or self.reason
        if context:
            formatted = ", ".join(f"{k}={v!r}" for k, v in sorted(context.items()))
            detail = f"{detail} ({formatted})"
        super().__init__(detail)


class UnknownMarket(QuoteRejection):
    reason = "UnknownMarket"


class UnknownStrike(QuoteRejection):
    reason = "UnknownStrike"


class BoardFrozen(QuoteRejection):
    reason = "BoardFrozen"


class BoardExpired(QuoteRejection):
    reason = "BoardExpired"


class TradingCutoffReached(QuoteRejection):
    reason = "TradingCutoffReached"


class VolSkewOrBaseIvOutsideOfTradingBounds(QuoteRejection):
    reason = "VolSkewOrBaseIvOutsideOfTradingBounds"


class TradeDeltaOutOfRange(QuoteRejection):
    reason = "TradeDeltaOutOfRange"


class ForceCloseDeltaOutOfRange(QuoteRejection):
    reason = "ForceCloseDeltaOutOfRange"


class ForceCloseSkewOutOfRange(QuoteRejection):
    reason = "ForceCloseSkewOutOfRange"


class InvalidTradeDirection(QuoteRejection):
    reason = "InvalidTradeDirection"


class NonDivisibleAmount(QuoteRejection):
    reason = "NonDivisibleAmount"


__all__ = [
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
