"""Read one strike's live pricing inputs into an immutable snapshot."""

from __future__ import annotations

import logging

from amm_quoter.errors import BoardExpired, BoardFrozen, UnknownStrike
from amm_quoter.registry import MarketHandles
from amm_quoter.types import StrikeSnapshot

logger = logging.getLogger(__name__)


class MarketSnapshotReader:
    """Loads spot, strike, board and parameter state for a quote call.

    Nothing is cached: each call reads the collaborators again.
    """

    def load_strike(self, market: MarketHandles, strike_id: int) -> StrikeSnapshot:
        state = market.state_holder
        strike = state.get_strike(strike_id)
        if strike is None:
            raise UnknownStrike(market_id=market.market_id, strike_id=strike_id)

        board = state.get_board(strike.board_id)
        if board is None or strike.board_id not in state.live_board_ids():
            raise UnknownStrike(
                "strike does not belong to a live board",
                market_id=market.market_id,
                strike_id=strike_id,
            )
        if board.is_frozen:
            raise BoardFrozen(market_id=market.market_id, board_id=board.board_id)

        now = state.current_time()
        time_to_expiry = board.expiry - now
        if time_to_expiry <= 0:
            raise BoardExpired(
                market_id=market.market_id,
                board_id=board.board_id,
                expiry=board.expiry,
            )

        config = market.pricer_config
        snapshot = StrikeSnapshot(
            market_id=market.market_id,
            strike_id=strike.strike_id,
            board_id=board.board_id,
            spot=state.spot_price(),
            strike_price=strike.strike_price,
            expiry=board.expiry,
            time_to_expiry=time_to_expiry,
            base_iv=board.base_iv,
            skew=strike.skew,
            rate=market.greek_cache.rate_and_carry(),
            pricing_params=config.pricing_params(),
            fee_params=config.fee_params(),
            limit_params=config.trade_limit_params(),
            is_frozen=board.is_frozen,
        )
        logger.debug(
            "Snapshot market=%s strike=%s board=%s tte=%ss",
            snapshot.market_id,
            snapshot.strike_id,
            snapshot.board_id,
            snapshot.time_to_expiry,
        )
        return snapshot
