import pytest

from amm_quoter import (
    InvalidTradeDirection,
    NonDivisibleAmount,
    OptionType,
    TradeDeltaOutOfRange,
    TradeDirection,
)
from amm_quoter.fixed_point import UNIT
from amm_quoter.reporting import full_quote_frame, is_cost_curve_non_decreasing


def test_full_quote_entries_price_each_size_from_the_snapshot(quoter, make_request):
    request = make_request(amount="10", iterations=5)
    full = quoter.full_quotes(request)

    assert [e.amount for e in full.entries] == [k * 2 * UNIT for k in range(1, 6)]
    initial = full.entries[0].pre_state
    assert all(e.pre_state == initial for e in full.entries)
    assert full.premiums == [e.total_cost for e in full.entries]
    assert full.fees == [e.total_fee for e in full.entries]

    block = quoter.quote(make_request(amount="10", iterations=1))
    assert full.entries[-1] == block.iterations[0]


@pytest.mark.parametrize("direction", [TradeDirection.OPEN, TradeDirection.CLOSE])
def test_per_unit_cost_never_falls_with_size(quoter, make_request, direction):
    full = quoter.full_quotes(make_request(amount="100", iterations=10, direction=direction))
    assert is_cost_curve_non_decreasing(full_quote_frame(full))


def test_full_quotes_share_quote_rejections(quoter, make_request):
    with pytest.raises(NonDivisibleAmount):
        quoter.full_quotes(make_request(amount="7", iterations=3))
    with pytest.raises(TradeDeltaOutOfRange):
        quoter.full_quotes(make_request(strike_id=1, amount="4", iterations=2))


def test_quote_option_types_covers_every_type(quoter, make_request):
    results = quoter.quote_option_types(make_request())

    assert set(results) == set(OptionType)
    # Base- and quote-collateralised short calls price identically.
    assert results[OptionType.SHORT_CALL_BASE] == results[OptionType.SHORT_CALL_QUOTE]
    assert (
        results[OptionType.LONG_CALL].total_premium
        > results[OptionType.SHORT_CALL_BASE].total_premium
    )
    assert (
        results[OptionType.LONG_PUT].total_premium
        > results[OptionType.SHORT_PUT_QUOTE].total_premium
    )
    assert results[OptionType.LONG_CALL] == quoter.quote(make_request())


def test_quote_option_types_rejects_as_a_whole(quoter, make_request):
    with pytest.raises(InvalidTradeDirection):
        quoter.quote_option_types(make_request(force_close=True))
